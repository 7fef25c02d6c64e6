"""Console-driven UI loop for the class score tracker."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal

from classscore.core.types import ScoreField
from classscore.data.errors import DataError
from classscore.data.repositories import ClassesRepository, ClassScoreNodesRepository, ItemsRepository
from classscore.domain.effect_values import EffectValueMismatchError
from classscore.domain.inventory import InventoryStatus
from classscore.domain.score_state import ScoreSet
from classscore.presentation.cli import config, render
from classscore.presentation.cli.score_store import ScoreFileStore
from classscore.services import (
    ClassScoreService,
    InventoryAdjustedEvent,
    NodeStateChangedEvent,
    SaveLoadError,
    ScoreEvent,
    ScoreGraphError,
    ScoreSaveService,
    summarize,
)
from classscore.services.table_service import (
    COLUMNS,
    FilterGroup,
    FilterValues,
    TableRow,
    build_filter_definitions,
    build_rows,
    export_rows_tsv,
    filter_and_sort,
    validate_filter_values,
)

logger = logging.getLogger(__name__)

MenuAction = Literal["table", "reserved", "acquired", "sort", "filters", "options", "export", "save", "quit"]

_MAIN_MENU: tuple[tuple[str, MenuAction], ...] = (
    ("Show table", "table"),
    ("Toggle planned", "reserved"),
    ("Toggle unlocked", "acquired"),
    ("Sort", "sort"),
    ("Filters", "filters"),
    ("Options", "options"),
    ("Export TSV", "export"),
    ("Save", "save"),
    ("Quit", "quit"),
)

InputFn = Callable[[str], str]


@dataclass(slots=True)
class Session:
    """Everything the menu loop reads and mutates."""

    classes_repo: ClassesRepository
    items_repo: ItemsRepository
    score_service: ClassScoreService
    save_service: ScoreSaveService
    store: ScoreFileStore
    config_path: Path
    entries: ScoreSet
    inventory: InventoryStatus
    preferences: Dict[str, Any]
    sort_column: int = 0
    sort_direction: int = 1
    dirty: bool = False
    filter_definitions: List[FilterGroup] = field(default_factory=list)

    @property
    def filters(self) -> FilterValues:
        return validate_filter_values(self.preferences.get("filters"), self.filter_definitions)

    def class_names(self) -> Dict[str, str]:
        return {class_def.id: class_def.name for class_def in self.classes_repo.all()}

    def rows(self) -> List[TableRow]:
        item_names = {item.id: item.name for item in self.items_repo.all()}
        return build_rows(
            self.entries,
            self.items_repo.resource_keys(),
            class_names=self.class_names(),
            item_names=item_names,
        )

    def visible_rows(self) -> List[TableRow]:
        return filter_and_sort(self.rows(), self.filters, self.sort_column, self.sort_direction)


def configure_logging() -> None:
    level = logging.DEBUG if render.debug_enabled() else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_session(
    definitions_path: Path | str | None = None,
    data_dir: Path | str | None = None,
) -> Session:
    """Load the catalog, preferences and any saved progress."""
    base_dir = Path(data_dir) if data_dir is not None else config.get_user_data_dir()
    classes_repo = ClassesRepository(base_path=definitions_path)
    items_repo = ItemsRepository(base_path=definitions_path)
    nodes_repo = ClassScoreNodesRepository(
        classes_repo=classes_repo, items_repo=items_repo, base_path=definitions_path
    )
    score_service = ClassScoreService(nodes_repo)
    save_service = ScoreSaveService(nodes_repo)
    store = ScoreFileStore(base_dir / "scores.json")
    config_path = base_dir / "config.json"
    preferences = config.load_config(config_path)

    entries = score_service.new_score_set()
    inventory = InventoryStatus()
    if store.exists():
        try:
            loaded = save_service.deserialize(store.read())
        except SaveLoadError as exc:
            logger.warning("ignoring unreadable score save %s: %s", store.path, exc)
            print(f"Saved progress could not be loaded ({exc}); starting fresh.")
        else:
            entries, inventory = loaded.entries, loaded.inventory

    session = Session(
        classes_repo=classes_repo,
        items_repo=items_repo,
        score_service=score_service,
        save_service=save_service,
        store=store,
        config_path=config_path,
        entries=entries,
        inventory=inventory,
        preferences=preferences,
    )
    session.filter_definitions = build_filter_definitions(classes_repo.all(), session.rows())
    return session


def main() -> None:
    """Start the interactive CLI session."""
    configure_logging()
    try:
        session = build_session()
    except DataError as exc:
        print(f"Unable to load the class score catalog: {exc}")
        raise SystemExit(1) from exc
    print("=== Class Score Tracker ===")
    run_session(session)
    print("Goodbye!")


def run_session(session: Session, input_fn: InputFn = input) -> None:
    """Run the main menu until the user quits."""
    while True:
        _render_summary(session)
        action = _prompt_menu("Main Menu", [label for label, _ in _MAIN_MENU], input_fn)
        if action is None:
            continue
        key = _MAIN_MENU[action][1]
        if key == "quit":
            if session.dirty and _confirm("Save changes before quitting?", input_fn):
                _save(session)
            return
        if key == "table":
            _show_table(session)
        elif key in ("reserved", "acquired"):
            _toggle_flag(session, key, input_fn)
        elif key == "sort":
            _choose_sort(session, input_fn)
        elif key == "filters":
            _edit_filters(session, input_fn)
        elif key == "options":
            _edit_options(session, input_fn)
        elif key == "export":
            _export(session, input_fn)
        elif key == "save":
            _save(session)


def _prompt_menu(title: str, options: List[str], input_fn: InputFn) -> int | None:
    render.render_menu(title, options)
    choice = input_fn("Select an option: ").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(options):
        return int(choice) - 1
    print(f"Invalid selection. Please enter 1-{len(options)}.")
    return None


def _confirm(question: str, input_fn: InputFn) -> bool:
    return input_fn(f"{question} [y/N]: ").strip().lower() in ("y", "yes")


def _render_summary(session: Session) -> None:
    try:
        summary = summarize(session.entries, session.items_repo.resource_keys())
    except EffectValueMismatchError as exc:
        print(f"Summary unavailable: {exc}")
        return
    print()
    print(render.format_summary_line(summary, len(session.visible_rows())))
    for line in render.format_effect_lines(summary, session.class_names()):
        print(line)


def _show_table(session: Session) -> None:
    render.render_heading("Class Scores")
    sort_key = COLUMNS[session.sort_column].key
    for line in render.format_table(session.visible_rows(), sort_key, session.sort_direction):
        print(line)


def _toggle_flag(session: Session, field_name: ScoreField, input_fn: InputFn) -> None:
    raw = input_fn("Node id: ").strip()
    if not raw.isdigit():
        print("Please enter a numeric node id.")
        return
    node_id = int(raw)
    entry = next((candidate for candidate in session.entries if candidate.id == node_id), None)
    if entry is None:
        print(f"No node with id {node_id}.")
        return
    try:
        result = session.score_service.apply_toggle(
            session.entries,
            node_id,
            field_name,
            not entry.get_flag(field_name),
            cascade=bool(session.preferences["update_path"]),
            reconcile_inventory=bool(session.preferences["modify_inventory"]),
            inventory=session.inventory,
        )
    except ScoreGraphError as exc:
        print(f"Unable to update node {node_id}: {exc}")
        return
    session.dirty = session.dirty or bool(result.changed_ids)
    render.render_bullet_lines(_describe_event(session, event) for event in result.events)


def _describe_event(session: Session, event: ScoreEvent) -> str:
    if isinstance(event, NodeStateChangedEvent):
        label = "Planned" if event.score_field == "reserved" else "Unlocked"
        state = "on" if event.new_value else "off"
        suffix = " (path)" if event.cascaded else ""
        return f"{event.node_name}: {label} {state}{suffix}"
    if isinstance(event, InventoryAdjustedEvent):
        name = session.items_repo.name_of(event.item_id)
        return f"{name} {event.delta:+d} (stock {event.stock})"
    return repr(event)


def _choose_sort(session: Session, input_fn: InputFn) -> None:
    choice = _prompt_menu("Sort by", [column.label for column in COLUMNS], input_fn)
    if choice is None:
        return
    if choice == session.sort_column:
        session.sort_direction = -session.sort_direction
    else:
        session.sort_column = choice
        session.sort_direction = -1


def _edit_filters(session: Session, input_fn: InputFn) -> None:
    groups = session.filter_definitions
    group_index = _prompt_menu("Filter group", [group.name for group in groups], input_fn)
    if group_index is None:
        return
    group = groups[group_index]
    values = session.filters
    labels = [
        f"[{'x' if values[group.key][option.key] else ' '}] {option.label}" for option in group.options
    ]
    option_index = _prompt_menu(group.name, labels, input_fn)
    if option_index is None:
        return
    option_key = group.options[option_index].key
    values[group.key][option_key] = not values[group.key][option_key]
    session.preferences["filters"] = values
    config.save_config(session.preferences, session.config_path)


def _edit_options(session: Session, input_fn: InputFn) -> None:
    labels = [
        f"[{'x' if session.preferences['update_path'] else ' '}] Update prerequisite path",
        f"[{'x' if session.preferences['modify_inventory'] else ' '}] Apply unlocks to inventory",
    ]
    choice = _prompt_menu("Options", labels, input_fn)
    if choice is None:
        return
    key = "update_path" if choice == 0 else "modify_inventory"
    session.preferences[key] = not session.preferences[key]
    config.save_config(session.preferences, session.config_path)


def _export(session: Session, input_fn: InputFn) -> None:
    default_path = session.store.path.with_name("class_scores.tsv")
    raw = input_fn(f"Export path [{default_path}]: ").strip()
    path = Path(raw) if raw else default_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_rows_tsv(session.visible_rows()), encoding="utf-8")
    print(f"Exported table to {path}.")


def _save(session: Session) -> None:
    payload = session.save_service.serialize(session.entries, session.inventory)
    session.store.write(payload)
    session.dirty = False
    print(f"Saved progress to {session.store.path}.")
