"""Service-layer exceptions."""


class ScoreGraphError(Exception):
    """Raised when the score set cannot be walked as a prerequisite forest."""


class DuplicateNodeError(ScoreGraphError):
    """Raised when two entries in a score set share a node name."""


class NodeCycleError(ScoreGraphError):
    """Raised when following predecessor links revisits a node."""


class UnknownNodeError(ScoreGraphError):
    """Raised when a node id is not part of the score set."""


class SaveLoadError(Exception):
    """Raised when saved score state cannot be read back."""
