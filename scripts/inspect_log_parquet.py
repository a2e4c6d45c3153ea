from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np
import pandas as pd
import pyarrow.parquet as pq


def main() -> int:
    ap = argparse.ArgumentParser(description="Inspect a parquet log file before merging it.")
    ap.add_argument("path", type=Path, help="Path to a .parquet log file")
    ap.add_argument("--date-column", default="date")
    args = ap.parse_args()

    pf = pq.ParquetFile(args.path)
    print(f"path: {args.path}")
    print(f"row_groups: {pf.metadata.num_row_groups}")
    print(f"rows: {pf.metadata.num_rows}")
    print(f"created_by: {pf.metadata.created_by}")
    print("\nschema:")
    print(pf.schema_arrow)

    df = pq.read_table(args.path, columns=[args.date_column]).to_pandas()
    dates = df[args.date_column]

    print(f"\n{args.date_column} range:")
    print(f"  min: {dates.min()}")
    print(f"  max: {dates.max()}")
    print(f"  nulls: {int(dates.isna().sum())}")

    arr = dates.dropna().to_numpy()
    print("\nmonotonicity:")
    print(f"  non-decreasing: {bool(np.all(arr[1:] >= arr[:-1]))}")
    print(f"  regressions: {int(np.sum(arr[1:] < arr[:-1]))}")
    print(f"  equal neighbours: {int(np.sum(arr[1:] == arr[:-1]))}")

    # Row groups that would need sorting on their own.
    print("\nper row group:")
    for rg in range(pf.num_row_groups):
        part = pf.read_row_group(rg, columns=[args.date_column]).to_pandas()[args.date_column].dropna()
        print(f"  {rg}: rows={len(part)} monotonic={bool(part.is_monotonic_increasing)}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
