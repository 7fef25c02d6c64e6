import pytest

from classscore.domain.effect_values import UNMERGEABLE, EffectValueMismatchError, format_effect_value
from classscore.services.class_score_service import ClassScoreService
from classscore.services.path_aggregator import compute_path_aggregates
from classscore.services.summary_service import summarize
from tests.helpers.catalog import RESOURCE_KEYS, make_entries, make_spec


def test_counts_and_sands_by_status() -> None:
    entries = make_entries(
        make_spec(1, "A", items={"700": 1}),
        make_spec(2, "B", "A", items={"700": 2}),
        make_spec(3, "C", "B", items={"700": 4}),
        make_spec(4, "D", "C", items={"6001": 3}),
    )
    entries[0].reserved = True
    entries[1].reserved = True
    entries[1].acquired = True
    entries[2].acquired = True

    summary = summarize(entries, RESOURCE_KEYS)

    assert (summary.total, summary.reserved, summary.acquired) == (4, 1, 2)
    assert (summary.sands.all, summary.sands.reserved, summary.sands.acquired) == (7, 1, 6)


def test_point_counts_acquired_nodes_with_several_items() -> None:
    entries = make_entries(
        make_spec(1, "A", items={"700": 1}),
        make_spec(2, "B", "A", items={"700": 1, "6001": 2}),
        make_spec(3, "C", "B", items={"700": 1, "900": 100}),
        make_spec(4, "D", "C", items={"700": 1, "6001": 1}),
    )
    for entry in entries[:3]:
        entry.acquired = True

    summary = summarize(entries, RESOURCE_KEYS)

    assert summary.effects["1"].point == 2


def test_effects_merge_per_class_and_text() -> None:
    entries = make_entries(
        make_spec(1, "A", value="10%"),
        make_spec(2, "B", "A", value="20%"),
        make_spec(3, "C", "B", text="NP Damage Up", value="2%"),
        make_spec(4, "X", class_id="2", value="5%"),
    )
    for entry in entries:
        entry.acquired = True

    summary = summarize(entries, RESOURCE_KEYS)

    saber = summary.effects["1"].values
    assert format_effect_value(saber["Buster Card Up"]) == "30%"
    assert format_effect_value(saber["NP Damage Up"]) == "2%"
    assert format_effect_value(summary.effects["2"].values["Buster Card Up"]) == "5%"


def test_merge_result_does_not_depend_on_order() -> None:
    specs = [make_spec(1, "A", value="10%"), make_spec(2, "B", value="20%")]
    forward = make_entries(*specs)
    backward = make_entries(*reversed(specs))
    for entry in forward + backward:
        entry.acquired = True

    assert summarize(forward, RESOURCE_KEYS).effects == summarize(backward, RESOURCE_KEYS).effects


def test_placeholder_value_poisons_the_merge() -> None:
    entries = make_entries(make_spec(1, "A", value="-"), make_spec(2, "B", value="10%"))
    for entry in entries:
        entry.acquired = True

    summary = summarize(entries, RESOURCE_KEYS)

    assert summary.effects["1"].values["Buster Card Up"] is UNMERGEABLE


def test_multi_level_merge_and_mismatch() -> None:
    entries = make_entries(
        make_spec(1, "A", value="5%\n5%"),
        make_spec(2, "B", value="1%\n2%"),
    )
    for entry in entries:
        entry.acquired = True
    assert format_effect_value(summarize(entries, RESOURCE_KEYS).effects["1"].values["Buster Card Up"]) == "6%\n7%"

    entries.append(make_entries(make_spec(3, "C", value="1%"))[0])
    entries[-1].acquired = True
    with pytest.raises(EffectValueMismatchError):
        summarize(entries, RESOURCE_KEYS)


def test_unacquired_nodes_contribute_no_effects() -> None:
    entries = make_entries(make_spec(1, "A"))
    entries[0].reserved = True

    assert summarize(entries, RESOURCE_KEYS).effects == {}


def test_end_to_end_acquire_first_node() -> None:
    entries = make_entries(
        make_spec(1, "n1", items={"700": 1}),
        make_spec(2, "n2", "n1", items={"700": 1}),
    )

    ClassScoreService().apply_toggle(entries, 1, "acquired", True, cascade=True)
    aggregates = compute_path_aggregates(entries, RESOURCE_KEYS)
    summary = summarize(entries, RESOURCE_KEYS)

    assert aggregates[2].acquired_sands == 1
    assert aggregates[2].sands == 1
    assert summary.acquired == 1
    assert summary.sands.acquired == 1
