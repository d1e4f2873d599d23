"""Export elimination results to JSON or CSV."""

import json
import csv
from pathlib import Path
from .elimination import EliminationResult


def export_json(result: EliminationResult, path: str):
    """Export every elimination round and both history tables to a JSON file."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w") as f:
        json.dump(result.to_dict(), f, indent=2)
    print(f"  ✓ Results exported to {out}")


def export_csv(history: dict[str, list[float]], path: str):
    """Export one history table (rank or average score) to a CSV file."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    rounds = max((len(v) for v in history.values()), default=2)
    fieldnames = ["name", "start"] + [f"round{i}" for i in range(1, rounds)]

    with open(out, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(fieldnames)
        for name, values in history.items():
            writer.writerow([name, *values])
    print(f"  ✓ History exported to {out}")
