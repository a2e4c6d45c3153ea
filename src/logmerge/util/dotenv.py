from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class DotenvResult:
    values: dict[str, str]
    path: Path
    applied: tuple[str, ...] = ()


def parse_dotenv_line(raw: str) -> tuple[str, str] | None:
    """Parse one `.env` line into `(key, value)`, or None for blanks/comments.

    Accepted forms: `KEY=VALUE`, `export KEY=VALUE`, single- or double-quoted
    values. Unquoted values may carry a trailing ` # comment`.
    """

    line = raw.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None

    if line.startswith("export "):
        line = line[len("export ") :].lstrip()

    k, v = line.split("=", 1)
    key = k.strip()
    val = v.strip()
    if not key:
        return None

    if len(val) >= 2 and val[0] == val[-1] and val[0] in ("'", '"'):
        return key, val[1:-1]

    if " #" in val:
        val = val.split(" #", 1)[0].rstrip()
    return key, val


def load_dotenv(path: str | Path, *, override: bool = False) -> DotenvResult:
    """Load a `.env` file into `os.environ`.

    A missing file is not an error. Existing environment variables win unless
    `override` is set; `applied` lists the keys actually written.
    """

    p = Path(path)
    values: dict[str, str] = {}
    applied: list[str] = []

    if not p.exists():
        return DotenvResult(values=values, path=p)

    for raw in p.read_text(encoding="utf-8").splitlines():
        kv = parse_dotenv_line(raw)
        if kv is None:
            continue
        key, val = kv
        values[key] = val
        if override or key not in os.environ:
            os.environ[key] = val
            applied.append(key)

    return DotenvResult(values=values, path=p, applied=tuple(applied))
