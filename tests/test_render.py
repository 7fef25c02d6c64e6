from classscore.domain.effect_values import UNMERGEABLE, parse_effect_value
from classscore.presentation.cli import render
from classscore.services.summary_service import ClassEffectSummary, SandsTotals, ScoreSummary
from classscore.services.table_service import build_rows
from tests.helpers.catalog import RESOURCE_KEYS, make_entries, make_spec


def test_summary_line_lists_counts_and_sands() -> None:
    summary = ScoreSummary(total=12, reserved=2, acquired=3, sands=SandsTotals(all=40, reserved=5, acquired=6))

    assert render.format_summary_line(summary, 7) == (
        "Nodes: 12  Planned: 2  Unlocked: 3  Shown: 7  Sands: all 40 planned 5 done 6"
    )


def test_class_effects_follow_label_order_and_append_unknown_texts() -> None:
    class_summary = ClassEffectSummary(
        point=2,
        values={
            "Buster Card Up": parse_effect_value("3%"),
            "Attack Up (1T)\nDefense Up (1T)": parse_effect_value("5%\n5%"),
            "Mystery Up": parse_effect_value("1%"),
            "": UNMERGEABLE,
        },
    )

    assert render.format_class_effects(class_summary) == (
        "Command Spell 5%/5% B 3% No effect - Mystery Up 1%"
    )


def test_effect_lines_use_class_names() -> None:
    summary = ScoreSummary(effects={"2": ClassEffectSummary(point=1), "10": ClassEffectSummary()})

    assert render.format_effect_lines(summary, {"2": "Archer"}) == ["  Archer: +1", "  10: +0"]


def test_format_table_marks_sort_column() -> None:
    rows = build_rows(make_entries(make_spec(1, "A")), RESOURCE_KEYS)

    lines = render.format_table(rows, "sands", -1)

    assert "Sandsv" in lines[0]
    assert len(lines) == 3
    assert lines[2].startswith("1 ")


def test_debug_enabled_only_for_one(monkeypatch) -> None:
    monkeypatch.setenv("CLASSSCORE_DEBUG", "true")
    assert not render.debug_enabled()
    monkeypatch.setenv("CLASSSCORE_DEBUG", "1")
    assert render.debug_enabled()
