"""Reporting functionality for accelerator sessions.

Formats session results as CLI tables and exports them to JSON.
"""

from __future__ import annotations

import json
from pathlib import Path

from tabulate import tabulate

from .results import SessionResult


def format_results_table(
    rows: list[tuple[str, SessionResult]],
    compact: bool = False,
) -> str:
    """Format named session results as a table string for CLI output.

    Args:
        rows: (name, result) pairs
        compact: Omit the hex columns

    Returns:
        Formatted table string
    """
    if not rows:
        return "No results."

    if compact:
        headers = ["Name", "Dir", "Blocks", "OK", "Steps", "Rounds"]
        table = [
            [
                name,
                "dec" if r.decrypt else "enc",
                r.blocks,
                "Y" if r.correct else "N",
                r.steps_total,
                r.rounds_total,
            ]
            for name, r in rows
        ]
    else:
        headers = ["Name", "Direction", "Blocks", "Correct", "Steps", "Rounds", "Output", "Tag"]
        table = [
            [
                name,
                "decrypt" if r.decrypt else "encrypt",
                r.blocks,
                "Yes" if r.correct else "No",
                r.steps_total,
                r.rounds_total,
                r.output.hex(),
                r.tag.hex(),
            ]
            for name, r in rows
        ]

    return tabulate(table, headers=headers, tablefmt="simple")


def export_to_json(
    rows: list[tuple[str, SessionResult]],
    output_path: str | Path,
    indent: int = 2,
) -> Path:
    """Export named session results to a JSON file.

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "version": "1.0",
        "count": len(rows),
        "results": [dict(name=name, **r.to_dict()) for name, r in rows],
    }

    with open(output_path, "w") as f:
        json.dump(data, f, indent=indent, default=str)

    return output_path
