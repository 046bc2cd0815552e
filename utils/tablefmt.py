"""Plain text rendering of rate tables."""

from __future__ import annotations

from typing import Iterable, List, Sequence

import pandas as pd

from models import FileRates, RateEntry

COLUMNS = ["Weight", "Rate", "Loot"]


def _weight(w: float) -> str:
    return f"{w:g}"


def rates_frame(rows: Sequence[RateEntry]) -> pd.DataFrame:
    """One row per rate entry with display formatted columns."""
    return pd.DataFrame(
        [[_weight(r.weight), f"{r.percentage:.2f}%", r.display_name] for r in rows],
        columns=COLUMNS,
    )


def render_file(filename: str, rows: Sequence[RateEntry]) -> str:
    lines: List[str] = [filename, ""]
    if not rows:
        lines.append("  ".join(COLUMNS))
        lines.append("(no entries)")
        return "\n".join(lines)
    df = rates_frame(rows)
    lines.append(df.to_string(index=False, justify="left"))
    return "\n".join(lines)


def render_tier(rates: Iterable[FileRates]) -> str:
    return "\n\n".join(render_file(name, rows) for name, rows in rates)


def format_elapsed(seconds: float) -> str:
    return f"time: {seconds:.2f}s"


__all__ = ["rates_frame", "render_file", "render_tier", "format_elapsed", "COLUMNS"]
