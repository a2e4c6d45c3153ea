from __future__ import annotations

import runpy
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

ROOT = Path(__file__).resolve().parents[1]


def _main():
    return runpy.run_path(str(ROOT / "scripts" / "merge_logs.py"), run_name="merge_logs")["main"]


def _run(monkeypatch, capsys, *argv: str) -> list[str]:
    monkeypatch.setattr(sys, "argv", ["merge_logs.py", "--dotenv", str(ROOT / "tests" / "no-such.env"), *argv])
    assert _main()() == 0
    out = capsys.readouterr().out.splitlines()
    return [line.rsplit(" ", 1)[-1] for line in out if line and not line.startswith(("*", "Records", "Time"))]


@pytest.fixture
def naive_logs(tmp_path: Path) -> list[Path]:
    base = datetime(2025, 7, 1, 12, 0)
    paths = []
    for name, minutes in [("a", [0, 40, 70]), ("b", [20, 35, 50])]:
        p = tmp_path / f"{name}.parquet"
        table = pa.table(
            {
                "date": pa.array([base + timedelta(minutes=m) for m in minutes], type=pa.timestamp("ms")),
                "msg": pa.array([f"{name}{m}" for m in minutes], type=pa.string()),
            }
        )
        pq.write_table(table, p)
        paths.append(p)
    return paths


def test_window_on_naive_timestamp_column(monkeypatch, capsys, naive_logs):
    msgs = _run(monkeypatch, capsys, *map(str, naive_logs), "--start-utc", "2025-07-01T12:30:00", "--end-utc", "2025-07-01T13:00:00Z")
    assert msgs == ["b35", "a40", "b50"]


def test_window_on_naive_timestamp_column_async(monkeypatch, capsys, naive_logs):
    msgs = _run(monkeypatch, capsys, *map(str, naive_logs), "--async", "--start-utc", "2025-07-01T12:30:00")
    assert msgs == ["b35", "a40", "b50", "a70"]


def test_window_on_epoch_ms_column(monkeypatch, capsys, tmp_path: Path):
    t0 = int(datetime(2025, 7, 1, 12, 0, tzinfo=timezone.utc).timestamp() * 1000)
    p = tmp_path / "ms.parquet"
    pq.write_table(
        pa.table(
            {
                "ts": pa.array([t0, t0 + 1_800_000, t0 + 3_600_000], type=pa.int64()),
                "msg": pa.array(["x0", "x30", "x60"], type=pa.string()),
            }
        ),
        p,
    )

    msgs = _run(monkeypatch, capsys, str(p), "--date-column", "ts", "--start-utc", "2025-07-01T12:15:00Z", "--end-utc", "2025-07-01T13:00:00Z")
    assert msgs == ["x30"]
