import json
from pathlib import Path

from classscore.presentation.cli import app


def _scripted(answers):
    remaining = list(answers)

    def _input(prompt: str) -> str:
        return remaining.pop(0)

    return _input


def _session(tmp_path: Path) -> app.Session:
    return app.build_session(data_dir=tmp_path)


def test_unlock_cascades_and_saves(tmp_path: Path, capsys) -> None:
    session = _session(tmp_path)

    app.run_session(session, _scripted(["3", "2", "8", "9"]))

    acquired = {entry.node_name for entry in session.entries if entry.acquired}
    assert acquired == {"Saber 1", "Saber 2"}
    assert session.inventory.stock_of("700") == -3
    assert session.inventory.stock_of("6001") == -10
    saved = json.loads((tmp_path / "scores.json").read_text(encoding="utf-8"))
    assert saved["scores"]["2"] == {"reserved": False, "acquired": True}
    assert "Saber 1: Unlocked on (path)" in capsys.readouterr().out


def test_saved_progress_is_reloaded(tmp_path: Path) -> None:
    app.run_session(_session(tmp_path), _scripted(["2", "5", "8", "9"]))

    reloaded = _session(tmp_path)

    assert [entry.id for entry in reloaded.entries if entry.reserved] == [5]


def test_quit_with_unsaved_changes_can_save(tmp_path: Path) -> None:
    app.run_session(_session(tmp_path), _scripted(["2", "1", "9", "y"]))

    assert (tmp_path / "scores.json").exists()


def test_invalid_selection_reprompts(tmp_path: Path, capsys) -> None:
    app.run_session(_session(tmp_path), _scripted(["42", "9"]))

    assert "Invalid selection" in capsys.readouterr().out


def test_unknown_node_id_is_reported(tmp_path: Path, capsys) -> None:
    app.run_session(_session(tmp_path), _scripted(["3", "999", "9"]))

    assert "No node with id 999." in capsys.readouterr().out


def test_options_toggle_persists_preferences(tmp_path: Path) -> None:
    app.run_session(_session(tmp_path), _scripted(["6", "2", "9"]))

    saved = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))
    assert saved["modify_inventory"] is False
    assert _session(tmp_path).preferences["modify_inventory"] is False


def test_filter_toggle_hides_rows(tmp_path: Path) -> None:
    session = _session(tmp_path)
    total = len(session.visible_rows())

    # Filters -> "Class" group -> first option (Saber).
    app.run_session(session, _scripted(["5", "1", "1", "9"]))

    assert session.filters["class"]["Saber"] is False
    assert 0 < len(session.visible_rows()) < total


def test_new_sort_column_starts_descending(tmp_path: Path) -> None:
    session = _session(tmp_path)

    app.run_session(session, _scripted(["4", "8", "9"]))

    assert session.sort_column == 7
    assert session.sort_direction == -1


def test_sort_twice_flips_direction(tmp_path: Path) -> None:
    session = _session(tmp_path)

    app.run_session(session, _scripted(["4", "8", "4", "8", "9"]))

    assert session.sort_column == 7
    assert session.sort_direction == 1


def test_export_writes_tsv(tmp_path: Path) -> None:
    target = tmp_path / "out" / "scores.tsv"

    app.run_session(_session(tmp_path), _scripted(["7", str(target), "9"]))

    lines = target.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("ID\tClass\tNode")


def test_corrupt_save_starts_fresh(tmp_path: Path, capsys) -> None:
    (tmp_path / "scores.json").write_text("{oops", encoding="utf-8")

    session = _session(tmp_path)

    assert not any(entry.acquired for entry in session.entries)
    assert "starting fresh" in capsys.readouterr().out


def test_unreadable_save_starts_fresh(tmp_path: Path, capsys) -> None:
    (tmp_path / "scores.json").mkdir()

    session = _session(tmp_path)

    assert not any(entry.acquired for entry in session.entries)
    assert "starting fresh" in capsys.readouterr().out
