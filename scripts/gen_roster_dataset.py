#!/usr/bin/env python3
"""Synthetic driver roster generator for performance testing.

Writes a comma-delimited roster with operator-style headers ("First Name",
"Phone Number", "DL Number", ...) so the auto-mapper has real work to do.
A configurable share of rows carries fixable or blocking problems:
unformatted phones, MM/DD/YYYY dates, missing emails.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

HEADERS = [
    "First Name",
    "Last Name",
    "Email Address",
    "Phone Number",
    "DL Number",
    "DL State",
    "DL Expiration",
    "License Class",
    "Hire Date",
    "Employment Status",
    "Employment Type",
    "City",
    "State",
    "Zip",
]

FIRST_NAMES = ["Carlos", "Maria", "James", "Aisha", "Wei", "Olga", "Tom", "Priya", "Luis", "Hana"]
LAST_NAMES = ["Gonzalez", "Smith", "Nguyen", "Okafor", "Chen", "Ivanova", "Brown", "Patel", "Silva", "Sato"]
STATES = ["CA", "TX", "AZ", "NV", "OR", "WA"]
CITIES = ["Ontario", "Fresno", "Phoenix", "Reno", "Portland", "Tacoma"]


def generate_roster(rows: int, seed: int = 42, messy_ratio: float = 0.2) -> pd.DataFrame:
    """Build a roster DataFrame.

    Args:
        rows: Number of data rows
        seed: Random seed for reproducible data
        messy_ratio: Share of rows given a phone/date/email problem (0..1)
    """
    rng = np.random.default_rng(seed)
    idx = np.arange(rows)

    first = rng.choice(FIRST_NAMES, rows)
    last = rng.choice(LAST_NAMES, rows)
    area = rng.integers(200, 999, rows)
    mid = rng.integers(200, 999, rows)
    tail = rng.integers(0, 9999, rows)
    phones = [f"{a}-{m}-{t:04d}" for a, m, t in zip(area, mid, tail)]

    base = pd.Timestamp("2020-01-01")
    hire = base + pd.to_timedelta(rng.integers(0, 1500, rows), unit="D")
    expiry = pd.Timestamp("2025-01-01") + pd.to_timedelta(rng.integers(0, 1500, rows), unit="D")

    df = pd.DataFrame(
        {
            "First Name": first,
            "Last Name": last,
            "Email Address": [f"{f.lower()}.{l.lower()}{i}@example.com" for f, l, i in zip(first, last, idx)],
            "Phone Number": phones,
            "DL Number": [f"D{n:07d}" for n in rng.integers(0, 9_999_999, rows)],
            "DL State": rng.choice(STATES, rows),
            "DL Expiration": expiry.strftime("%Y-%m-%d"),
            "License Class": rng.choice(["Class A", "Class B", "Class C"], rows),
            "Hire Date": hire.strftime("%Y-%m-%d"),
            "Employment Status": rng.choice(["Active", "On Leave"], rows, p=[0.9, 0.1]),
            "Employment Type": rng.choice(["Full-time", "Part-time"], rows),
            "City": rng.choice(CITIES, rows),
            "State": rng.choice(STATES, rows),
            "Zip": [f"{z:05d}" for z in rng.integers(10000, 99999, rows)],
        },
        columns=HEADERS,
    )

    messy = rng.random(rows) < messy_ratio
    kind = rng.integers(0, 3, rows)
    for i in np.flatnonzero(messy):
        if kind[i] == 0:
            df.at[i, "Phone Number"] = df.at[i, "Phone Number"].replace("-", "")
        elif kind[i] == 1:
            df.at[i, "Hire Date"] = pd.Timestamp(df.at[i, "Hire Date"]).strftime("%m/%d/%Y")
        else:
            df.at[i, "Email Address"] = ""
    return df


def write_roster_csv(output_path: Path, rows: int, seed: int = 42, messy_ratio: float = 0.2) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    generate_roster(rows, seed, messy_ratio).to_csv(output_path, index=False)
    return output_path


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic driver roster CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 10k rows, 20% messy
  %(prog)s roster.csv

  # 50k clean rows
  %(prog)s big.csv --rows 50000 --messy 0
        """,
    )
    parser.add_argument("output", type=Path, help="Output .csv path")
    parser.add_argument("--rows", type=int, default=10_000, help="Number of data rows (default: 10,000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--messy", type=float, default=0.2, help="Share of rows with problems (default: 0.2)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.messy <= 1:
        print("Error: --messy must be between 0 and 1", file=sys.stderr)
        return 1

    path = write_roster_csv(args.output, args.rows, args.seed, args.messy)
    print(f"Created roster: {path} rows={args.rows:,} messy_ratio={args.messy}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
