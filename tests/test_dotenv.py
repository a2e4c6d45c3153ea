from __future__ import annotations

import os
from pathlib import Path

from logmerge.util import load_dotenv
from logmerge.util.dotenv import parse_dotenv_line


def test_parse_dotenv_line_forms():
    assert parse_dotenv_line("KEY=value") == ("KEY", "value")
    assert parse_dotenv_line("  KEY = value  ") == ("KEY", "value")
    assert parse_dotenv_line("export KEY=value") == ("KEY", "value")
    assert parse_dotenv_line('KEY="a # b"') == ("KEY", "a # b")
    assert parse_dotenv_line("KEY='x'") == ("KEY", "x")
    assert parse_dotenv_line("KEY=value # trailing") == ("KEY", "value")
    assert parse_dotenv_line("# comment") is None
    assert parse_dotenv_line("") is None
    assert parse_dotenv_line("no_equals") is None
    assert parse_dotenv_line("=value") is None


def test_load_dotenv_missing_file(tmp_path: Path):
    res = load_dotenv(tmp_path / "missing.env")
    assert res.values == {}
    assert res.applied == ()


def test_load_dotenv_respects_existing_env(tmp_path: Path, monkeypatch):
    p = tmp_path / ".env"
    p.write_text("LOGMERGE_A=1\nLOGMERGE_B=2\n", encoding="utf-8")
    monkeypatch.setenv("LOGMERGE_A", "keep")
    # Registered so the value written by load_dotenv is removed on teardown.
    monkeypatch.setenv("LOGMERGE_B", "")
    monkeypatch.delenv("LOGMERGE_B")

    res = load_dotenv(p)

    assert res.values == {"LOGMERGE_A": "1", "LOGMERGE_B": "2"}
    assert res.applied == ("LOGMERGE_B",)
    assert os.environ["LOGMERGE_A"] == "keep"
    assert os.environ["LOGMERGE_B"] == "2"


def test_load_dotenv_override(tmp_path: Path, monkeypatch):
    p = tmp_path / ".env"
    p.write_text("LOGMERGE_C=new\n", encoding="utf-8")
    monkeypatch.setenv("LOGMERGE_C", "old")

    res = load_dotenv(p, override=True)

    assert os.environ["LOGMERGE_C"] == "new"
    assert res.applied == ("LOGMERGE_C",)
