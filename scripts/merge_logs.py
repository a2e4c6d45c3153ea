from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from logmerge import MergeConfig, PrintSink, ThreadedSource, merge, merge_async, slice_records
from logmerge.data import iter_log_entries
from logmerge.util import load_dotenv


def _parse_utc_ts(s: str) -> datetime:
    """Parse an ISO timestamp as UTC.

    Accepts:
    - 2025-07-01T12:00:00Z
    - 2025-07-01T12:00:00+00:00
    - 2025-07-01T12:00:00  (treated as UTC)
    """

    t = s.strip()
    if t.endswith("Z"):
        t = t[:-1] + "+00:00"
    dt = datetime.fromisoformat(t)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def main() -> int:
    ap = argparse.ArgumentParser(description="Merge time-sorted parquet log files into one ordered stream on stdout.")
    ap.add_argument("paths", nargs="+", help="Parquet files (local paths or s3:// URIs), each sorted by date")
    ap.add_argument("--dotenv", default=str(ROOT / ".env"), help="Optional .env with AWS_* credentials for s3:// inputs")
    ap.add_argument("--date-column", default="date")
    ap.add_argument("--msg-column", default="msg", help="Message column ('' for none)")
    ap.add_argument("--sort-mode", choices=["auto", "always", "never"], default="auto")
    ap.add_argument("--async", dest="use_async", action="store_true", help="Drain sources with the async engine (threaded reads).")
    ap.add_argument("--start-utc", default=None, help="Skip records before this ISO timestamp (UTC when no offset; converted to the date column type)")
    ap.add_argument("--end-utc", default=None, help="Drop records at/after this ISO timestamp (exclusive end)")
    ap.add_argument("--check-order", action="store_true", help="Fail if an input file is not sorted by date.")
    ap.add_argument("--progress-every", type=int, default=0, help="Log progress every N records (0 = off)")
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    load_dotenv(args.dotenv, override=False)

    if args.progress_every < 0:
        print("ERROR: --progress-every must be >= 0", file=sys.stderr)
        return 2

    start = _parse_utc_ts(args.start_utc) if args.start_utc else None
    end = _parse_utc_ts(args.end_utc) if args.end_utc else None

    streams = [
        slice_records(
            iter_log_entries(
                p,
                date_column=args.date_column,
                msg_column=args.msg_column or None,
                sort_mode=args.sort_mode,
            ),
            start=start,
            end=end,
        )
        for p in args.paths
    ]

    cfg = MergeConfig(check_order=args.check_order, progress_every=args.progress_every)
    sink = PrintSink()

    if args.use_async:
        asyncio.run(merge_async([ThreadedSource(s) for s in streams], sink, config=cfg))
    else:
        merge(streams, sink, config=cfg)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
