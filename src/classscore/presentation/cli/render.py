"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Iterable, Mapping, Sequence

from classscore.domain.effect_values import format_effect_value
from classscore.services.summary_service import ClassEffectSummary, ScoreSummary
from classscore.services.table_service import COLUMNS, TableRow

# Short labels for the summary line, in display order.
EFFECT_LABELS: tuple[tuple[str, str], ...] = (
    ("Command Spell", "Attack Up (1T)\nDefense Up (1T)"),
    ("NP", "NP Damage Up"),
    ("EX", "Extra Attack Up"),
    ("Q", "Quick Card Up"),
    ("A", "Arts Card Up"),
    ("B", "Buster Card Up"),
    ("Crit", "Critical Damage Up"),
    ("Q Crit", "Quick Card Critical Damage Up"),
    ("A Crit", "Arts Card Critical Damage Up"),
    ("B Crit", "Buster Card Critical Damage Up"),
    ("Stars", "Star Drop Rate Up"),
    ("No effect", ""),
)


def debug_enabled() -> bool:
    """Return True only when CLASSSCORE_DEBUG is explicitly set to '1'."""
    return os.getenv("CLASSSCORE_DEBUG") == "1"


def format_summary_line(summary: ScoreSummary, shown: int) -> str:
    return (
        f"Nodes: {summary.total}  Planned: {summary.reserved}  Unlocked: {summary.acquired}  "
        f"Shown: {shown}  Sands: all {summary.sands.all} planned {summary.sands.reserved} "
        f"done {summary.sands.acquired}"
    )


def format_class_effects(class_summary: ClassEffectSummary) -> str:
    """Render merged effects with short labels; unknown effect texts follow by name."""
    parts: list[str] = []
    known = {key for _, key in EFFECT_LABELS}
    labelled = list(EFFECT_LABELS)
    labelled.extend(
        (key.replace("\n", " / "), key) for key in sorted(class_summary.values) if key not in known
    )
    for label, key in labelled:
        if key not in class_summary.values:
            continue
        text = format_effect_value(class_summary.values[key]).replace("\n", "/")
        if text:
            parts.append(f"{label} {text}")
    return " ".join(parts)


def _class_order(class_id: str) -> tuple[int, int, str]:
    if class_id.isdigit():
        return (0, int(class_id), class_id)
    return (1, 0, class_id)


def format_effect_lines(summary: ScoreSummary, class_names: Mapping[str, str]) -> list[str]:
    lines = []
    for class_id in sorted(summary.effects, key=_class_order):
        class_summary = summary.effects[class_id]
        name = class_names.get(class_id, class_id)
        lines.append(f"  {name}: +{class_summary.point} {format_class_effects(class_summary)}".rstrip())
    return lines


def _cell_text(value: object) -> str:
    if isinstance(value, bool):
        return "x" if value else "."
    return str(value).replace("\n", "/")


def format_table(rows: Sequence[TableRow], sort_key: str | None = None, sort_direction: int = 1) -> list[str]:
    """Return the table as aligned text lines, header first."""
    headers = []
    for column in COLUMNS:
        marker = ""
        if column.key == sort_key:
            marker = "^" if sort_direction == 1 else "v"
        headers.append(column.label + marker)
    cells = [[_cell_text(column.display(row)) for column in COLUMNS] for row in rows]
    widths = [
        max([len(header)] + [len(line[index]) for line in cells]) for index, header in enumerate(headers)
    ]

    def _align(text: str, index: int) -> str:
        align = COLUMNS[index].align
        if align == "right":
            return text.rjust(widths[index])
        if align == "center":
            return text.center(widths[index])
        return text.ljust(widths[index])

    lines = [" | ".join(_align(header, index) for index, header in enumerate(headers))]
    lines.append("-+-".join("-" * width for width in widths))
    for line in cells:
        lines.append(" | ".join(_align(text, index) for index, text in enumerate(line)))
    return lines


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")
