"""Row projection, filtering, sorting and export for the class score table."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Sequence, Union

from classscore.core.types import SortDirection
from classscore.domain.defs import ClassDef, ResourceKeys
from classscore.domain.score_state import ScoreEntry
from classscore.services.path_aggregator import PathAggregate, compute_path_aggregates

FilterValues = Dict[str, Dict[str, bool]]

TORCH_MARKS: tuple[str, ...] = ("D", "N", "Z")
NO_EFFECT_LABEL = "No effect"
_CONDITION_DASH = re.compile(r"-\s*")


@dataclass(slots=True)
class TableRow:
    """One score entry enriched with catalog data and its path aggregate."""

    id: int
    class_id: str
    class_name: str
    node_name: str
    prev_node_name: str
    effect_text: str
    effect_value: str
    reserved: bool
    acquired: bool
    material_ids: List[str] = field(default_factory=list)
    material_names: List[str] = field(default_factory=list)
    material_amounts: List[int] = field(default_factory=list)
    sands: int = 0
    qp: int = 0
    torches: tuple[int, ...] = ()
    path: PathAggregate = field(default_factory=PathAggregate)


@dataclass(frozen=True, slots=True)
class Column:
    key: str
    label: str
    align: str
    display: Callable[[TableRow], object]
    sort_value: Callable[[TableRow], object]
    editable: bool = False


@dataclass(slots=True)
class FilterOption:
    label: str
    key: str


@dataclass(slots=True)
class FilterGroup:
    name: str
    key: str
    options: List[FilterOption]


def torch_marks(counts: Sequence[int]) -> str:
    """Render a torch vector as marks for each non-zero torch tier."""
    marks = []
    for index, count in enumerate(counts):
        if count:
            marks.append(TORCH_MARKS[index] if index < len(TORCH_MARKS) else str(index + 1))
    return "".join(marks)


def format_effect_text(condition: str, text: str) -> str:
    """Join condition and effect text, dropping ``-`` placeholders."""
    return _CONDITION_DASH.sub("", f"{condition} {text}")


def _class_sort_key(class_id: str) -> tuple[int, str]:
    return (int(class_id), class_id) if class_id.isdigit() else (1 << 30, class_id)


COLUMNS: tuple[Column, ...] = (
    Column("id", "ID", "left", lambda row: row.id, lambda row: row.id),
    Column("class", "Class", "left", lambda row: row.class_name, lambda row: _class_sort_key(row.class_id)),
    Column("node_name", "Node", "left", lambda row: row.node_name, lambda row: row.node_name),
    Column("effect_text", "Effect", "left", lambda row: row.effect_text, lambda row: row.effect_text),
    Column("effect_value", "Value", "left", lambda row: row.effect_value, lambda row: row.effect_value),
    Column(
        "materials",
        "Materials",
        "left",
        lambda row: " / ".join(row.material_names),
        lambda row: " / ".join(row.material_names),
    ),
    Column(
        "material_amounts",
        "Amounts",
        "right",
        lambda row: " / ".join(str(amount) for amount in row.material_amounts),
        lambda row: tuple(row.material_amounts),
    ),
    Column("sands", "Sands", "right", lambda row: row.sands, lambda row: row.sands),
    Column(
        "path_sands_left", "Path sands left", "right",
        lambda row: row.path.sands_left, lambda row: row.path.sands_left,
    ),
    Column(
        "path_torches_left", "Torches left", "center",
        lambda row: torch_marks(row.path.torches_left), lambda row: row.path.torches_left,
    ),
    Column("path_sands", "Path sands", "right", lambda row: row.path.sands, lambda row: row.path.sands),
    Column(
        "path_torches", "Path torches", "center",
        lambda row: torch_marks(row.path.torches), lambda row: row.path.torches,
    ),
    Column("qp", "QP", "right", lambda row: row.qp, lambda row: row.qp),
    Column("reserved", "Planned", "center", lambda row: row.reserved, lambda row: row.reserved, editable=True),
    Column("acquired", "Unlocked", "center", lambda row: row.acquired, lambda row: row.acquired, editable=True),
)

_COLUMN_INDEX = {column.key: index for index, column in enumerate(COLUMNS)}


def resolve_column(column: Union[int, str]) -> Column:
    """Return a column by position or key."""
    if isinstance(column, int):
        if not 0 <= column < len(COLUMNS):
            raise ValueError(f"Sort column index {column} is out of range.")
        return COLUMNS[column]
    try:
        return COLUMNS[_COLUMN_INDEX[column]]
    except KeyError as exc:
        raise ValueError(f"Unknown column '{column}'.") from exc


def build_rows(
    entries: Sequence[ScoreEntry],
    resource_keys: ResourceKeys,
    *,
    class_names: Mapping[str, str] | None = None,
    item_names: Mapping[str, str] | None = None,
) -> List[TableRow]:
    """Project entries into table rows ordered by node id."""
    class_names = class_names or {}
    item_names = item_names or {}
    aggregates = compute_path_aggregates(entries, resource_keys)
    hidden = {resource_keys.sands_id, resource_keys.qp_id}
    rows: List[TableRow] = []
    for entry in entries:
        spec = entry.spec
        materials = [(item_id, amount) for item_id, amount in spec.items.items() if item_id not in hidden]
        rows.append(
            TableRow(
                id=spec.id,
                class_id=spec.class_id,
                class_name=class_names.get(spec.class_id, spec.class_id),
                node_name=spec.node_name,
                prev_node_name=spec.prev_node_name,
                effect_text=format_effect_text(spec.effect.condition, spec.effect.text),
                effect_value=spec.effect.value,
                reserved=entry.reserved,
                acquired=entry.acquired,
                material_ids=[item_id for item_id, _ in materials],
                material_names=[item_names.get(item_id, item_id) for item_id, _ in materials],
                material_amounts=[amount for _, amount in materials],
                sands=spec.amount_of(resource_keys.sands_id),
                qp=spec.amount_of(resource_keys.qp_id),
                torches=tuple(spec.amount_of(torch_id) for torch_id in resource_keys.torch_ids),
                path=aggregates[spec.id],
            )
        )
    rows.sort(key=lambda row: row.id)
    return rows


def build_filter_definitions(classes: Sequence[ClassDef], rows: Sequence[TableRow]) -> List[FilterGroup]:
    """Class options come from the class catalog, effect options from the rows."""
    effect_texts: List[str] = []
    for row in rows:
        if row.effect_text not in effect_texts:
            effect_texts.append(row.effect_text)
    return [
        FilterGroup(
            name="Class",
            key="class",
            options=[FilterOption(label=class_def.name, key=class_def.name) for class_def in classes],
        ),
        FilterGroup(
            name="Effect",
            key="effect",
            options=[
                FilterOption(label=text.replace("\n", " / ") if text else NO_EFFECT_LABEL, key=text)
                for text in effect_texts
            ],
        ),
        FilterGroup(
            name="Unlocked",
            key="acquired",
            options=[
                FilterOption(label="Locked", key="notacquired"),
                FilterOption(label="Unlocked", key="acquired"),
            ],
        ),
        FilterGroup(
            name="Planned",
            key="reserved",
            options=[
                FilterOption(label="Not planned", key="notreserved"),
                FilterOption(label="Planned", key="reserved"),
            ],
        ),
    ]


def default_filter_values(definitions: Sequence[FilterGroup]) -> FilterValues:
    return {group.key: {option.key: True for option in group.options} for group in definitions}


def validate_filter_values(values: object, definitions: Sequence[FilterGroup]) -> FilterValues:
    """Keep known options from ``values`` and default everything else to enabled."""
    validated = default_filter_values(definitions)
    if not isinstance(values, Mapping):
        return validated
    for group_key, options in validated.items():
        stored = values.get(group_key)
        if not isinstance(stored, Mapping):
            continue
        for option_key in options:
            if isinstance(stored.get(option_key), bool):
                options[option_key] = stored[option_key]
    return validated


def filters_active(values: FilterValues) -> bool:
    """Return True when any option in any group is switched off."""
    return any(not enabled for group in values.values() for enabled in group.values())


def _option_matches(group_key: str, option_key: str, row: TableRow) -> bool:
    if group_key == "class":
        return row.class_name == option_key
    if group_key == "effect":
        return row.effect_text == option_key
    if group_key in ("acquired", "reserved"):
        flag = row.acquired if group_key == "acquired" else row.reserved
        if option_key == group_key:
            return flag
        if option_key == f"not{group_key}":
            return not flag
        return False
    raise ValueError(f"Unknown filter group '{group_key}'.")


def row_passes(row: TableRow, filters: FilterValues) -> bool:
    """Every group must have at least one enabled option matching the row."""
    return all(
        any(enabled and _option_matches(group_key, option_key, row) for option_key, enabled in options.items())
        for group_key, options in filters.items()
    )


def filter_and_sort(
    rows: Sequence[TableRow],
    filters: FilterValues,
    sort_column: Union[int, str] = 0,
    sort_direction: SortDirection = 1,
) -> List[TableRow]:
    """Return matching rows sorted on the column's raw value, keeping ties in order."""
    if sort_direction not in (1, -1):
        raise ValueError("Sort direction must be 1 or -1.")
    for group_key in filters:
        if group_key not in {"class", "effect", "acquired", "reserved"}:
            raise ValueError(f"Unknown filter group '{group_key}'.")
    column = resolve_column(sort_column)
    matching = [row for row in rows if row_passes(row, filters)]
    return sorted(matching, key=column.sort_value, reverse=sort_direction == -1)


def _export_cell(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def export_rows_tsv(rows: Sequence[TableRow]) -> str:
    """Return a header line and one tab-separated, quoted line per row."""
    lines = ["\t".join(column.label for column in COLUMNS)]
    for row in rows:
        lines.append("\t".join(f'"{_export_cell(column.display(row))}"' for column in COLUMNS))
    return "".join(f"{line}\n" for line in lines)
