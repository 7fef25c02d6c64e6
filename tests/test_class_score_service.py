import pytest

from classscore.domain.inventory import InventoryStatus
from classscore.services.class_score_service import (
    ClassScoreService,
    InventoryAdjustedEvent,
    NodeStateChangedEvent,
)
from classscore.services.errors import UnknownNodeError
from tests.helpers.catalog import by_name, make_entries, make_spec

_COST = {"700": 1, "6001": 2}


def _tree():
    # A -> B -> C, with D also hanging off B.
    return make_entries(
        make_spec(1, "A", items=_COST),
        make_spec(2, "B", "A", items=_COST),
        make_spec(3, "C", "B", items=_COST),
        make_spec(4, "D", "B", items=_COST),
    )


def _acquired_names(entries) -> set[str]:
    return {entry.node_name for entry in entries if entry.acquired}


def test_acquire_cascades_up_the_path_and_consumes_items() -> None:
    entries = _tree()
    inventory = InventoryStatus.from_counts({"700": 10, "6001": 10})

    result = ClassScoreService().apply_toggle(
        entries, 3, "acquired", True, cascade=True, reconcile_inventory=True, inventory=inventory
    )

    assert _acquired_names(entries) == {"A", "B", "C"}
    assert result.affected_ids == [3, 1, 2]
    assert result.inventory_delta == {"700": -3, "6001": -6}
    assert inventory.snapshot() == {"700": 7, "6001": 4}
    assert result.inventory_updated


def test_acquire_with_acquired_ancestors_only_touches_target() -> None:
    entries = _tree()
    by_name(entries, "A").acquired = True
    by_name(entries, "B").acquired = True
    inventory = InventoryStatus()

    result = ClassScoreService().apply_toggle(
        entries, 3, "acquired", True, cascade=True, reconcile_inventory=True, inventory=inventory
    )

    assert result.changed_ids == [3]
    assert result.inventory_delta == {"700": -1, "6001": -2}


def test_reacquiring_an_acquired_node_is_a_no_op() -> None:
    entries = _tree()
    for entry in entries[:3]:
        entry.acquired = True
    inventory = InventoryStatus.from_counts({"700": 5})

    result = ClassScoreService().apply_toggle(
        entries, 3, "acquired", True, cascade=True, reconcile_inventory=True, inventory=inventory
    )

    assert result.changed_ids == []
    assert result.inventory_delta == {}
    assert not result.inventory_updated
    assert inventory.snapshot() == {"700": 5}


def test_unacquire_cascades_down_to_every_descendant() -> None:
    entries = _tree()
    for entry in entries:
        entry.acquired = True
    inventory = InventoryStatus()

    result = ClassScoreService().apply_toggle(
        entries, 2, "acquired", False, cascade=True, reconcile_inventory=True, inventory=inventory
    )

    assert _acquired_names(entries) == {"A"}
    assert result.affected_ids == [2, 3, 4]
    assert inventory.snapshot() == {"700": 3, "6001": 6}


def test_cascade_disabled_only_changes_target() -> None:
    entries = _tree()

    result = ClassScoreService().apply_toggle(entries, 3, "acquired", True, cascade=False)

    assert _acquired_names(entries) == {"C"}
    assert result.affected_ids == [3]


def test_acquire_then_release_restores_inventory() -> None:
    entries = _tree()
    inventory = InventoryStatus.from_counts({"700": 4, "6001": 9})
    service = ClassScoreService()

    service.apply_toggle(entries, 3, "acquired", True, cascade=True, reconcile_inventory=True, inventory=inventory)
    service.apply_toggle(entries, 1, "acquired", False, cascade=True, reconcile_inventory=True, inventory=inventory)

    assert _acquired_names(entries) == set()
    assert inventory.snapshot() == {"700": 4, "6001": 9}


def test_inventory_untouched_without_reconciliation() -> None:
    entries = _tree()
    inventory = InventoryStatus.from_counts({"700": 4})

    result = ClassScoreService().apply_toggle(
        entries, 3, "acquired", True, cascade=True, reconcile_inventory=False, inventory=inventory
    )

    assert result.inventory_delta == {}
    assert inventory.snapshot() == {"700": 4}


def test_reserved_toggle_never_cascades_or_touches_inventory() -> None:
    entries = _tree()
    inventory = InventoryStatus()

    result = ClassScoreService().apply_toggle(
        entries, 3, "reserved", True, cascade=True, reconcile_inventory=True, inventory=inventory
    )

    assert [entry.node_name for entry in entries if entry.reserved] == ["C"]
    assert result.affected_ids == [3]
    assert inventory.snapshot() == {}


def test_events_mark_cascaded_changes() -> None:
    entries = _tree()
    inventory = InventoryStatus()

    result = ClassScoreService().apply_toggle(
        entries, 2, "acquired", True, cascade=True, reconcile_inventory=True, inventory=inventory
    )

    state_events = [event for event in result.events if isinstance(event, NodeStateChangedEvent)]
    assert [(event.node_name, event.cascaded) for event in state_events] == [("B", False), ("A", True)]
    item_events = [event for event in result.events if isinstance(event, InventoryAdjustedEvent)]
    assert {(event.node_id, event.item_id, event.delta) for event in item_events} == {
        (2, "700", -1),
        (2, "6001", -2),
        (1, "700", -1),
        (1, "6001", -2),
    }


def test_unknown_node_raises() -> None:
    with pytest.raises(UnknownNodeError):
        ClassScoreService().apply_toggle(_tree(), 42, "acquired", True)


def test_unknown_field_raises() -> None:
    with pytest.raises(ValueError):
        ClassScoreService().apply_toggle(_tree(), 1, "owned", True)


def test_reconcile_requires_inventory() -> None:
    with pytest.raises(ValueError):
        ClassScoreService().apply_toggle(_tree(), 1, "acquired", True, reconcile_inventory=True)


def test_new_score_set_requires_catalog() -> None:
    with pytest.raises(RuntimeError):
        ClassScoreService().new_score_set()
