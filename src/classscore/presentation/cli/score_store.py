"""File-system storage for saved score progress."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from classscore.presentation.cli import config
from classscore.services.errors import SaveLoadError


class ScoreFileStore:
    """Reads and writes the score progress payload as JSON."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else config.get_scores_path()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def read(self) -> Dict[str, Any]:
        """Load and parse the stored payload, raising SaveLoadError on any failure."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SaveLoadError(f"Unable to read {self._path}: {exc}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise SaveLoadError(f"Invalid JSON in {self._path} (line {exc.lineno}): {exc.msg}") from exc

    def write(self, payload: Dict[str, Any]) -> None:
        """Persist the payload, creating the directory if needed."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False), encoding="utf-8"
        )
