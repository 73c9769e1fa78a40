"""
Sample data generator for the users API.

Writes a deterministic pseudo-random users flat file with the dotted-path
header the importer expects. A small share of rows get an empty first name
so the importer's discard rule is exercised.
"""

from __future__ import annotations

import csv
import random
import sys
import time
from pathlib import Path

import typer

app = typer.Typer(help="Generate a synthetic users flat file (dotted-path CSV).")

HEADER = [
    "name.firstName",
    "name.lastName",
    "age",
    "address.line1",
    "address.line2",
    "address.city",
    "address.state",
    "gender",
    "employment.status",
    "employment.company",
    "preferences.food.type",
    "preferences.color.favorite",
]

FIRST_NAMES = ["Rohit", "Anita", "Maria", "John", "Aiko", "Omar", "Lena", "Kwame", "Priya", "Tom"]
LAST_NAMES = ["Prasad", "Sharma", "Garcia", "Smith", "Tanaka", "Haddad", "Novak", "Mensah", ""]
CITIES = [("Pune", "Maharashtra"), ("Austin", "Texas"), ("Lyon", "Auvergne"), ("Osaka", "Kansai")]
COMPANIES = ["Acme", "Globex", "Initech", "Umbrella", ""]
FOODS = ["veg", "non-veg", "vegan", ""]
COLORS = ["red", "blue", "green", "black", ""]


def _generate_rows_csv(csv_path: Path, rows: int, seed: int, blank_ratio: float = 0.05) -> int:
    """
    Write `rows` data lines to `csv_path` and return how many have a first name.
    """
    rng = random.Random(seed)
    named = 0

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(HEADER)
        for i in range(rows):
            first = "" if rng.random() < blank_ratio else rng.choice(FIRST_NAMES)
            named += bool(first)
            city, state = rng.choice(CITIES)
            employed = rng.random() < 0.7
            writer.writerow(
                [
                    first,
                    rng.choice(LAST_NAMES),
                    str(rng.randint(1, 90)),
                    f"{rng.randint(1, 999)} Main Street",
                    rng.choice(["", f"Apt {rng.randint(1, 40)}"]),
                    city,
                    state,
                    rng.choice(["male", "female", ""]),
                    "employed" if employed else "unemployed",
                    rng.choice(COMPANIES) if employed else "",
                    rng.choice(FOODS),
                    rng.choice(COLORS),
                ]
            )
    return named


@app.command()
def main(
    rows: int = typer.Option(
        1_000,
        "--rows",
        "-r",
        help="Number of data rows to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path = typer.Option(
        Path("env/users_sample.csv"),
        "--output",
        "-o",
        help="CSV output path.",
    ),
) -> None:
    """
    Generate a users flat file for local development.
    """
    start = time.perf_counter()
    output.parent.mkdir(parents=True, exist_ok=True)
    typer.echo(f"Generating {rows:,} rows -> {output} (seed={seed})")
    named = _generate_rows_csv(output, rows=rows, seed=seed)
    duration = time.perf_counter() - start
    typer.echo(
        f"CSV generation completed in {duration:.2f}s "
        f"({named:,} importable, {rows - named:,} without first name)."
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
