"""Exceptions raised while loading the class score catalog."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a definition file is missing, unreadable or not valid JSON."""


class DataValidationError(DataError):
    """Raised when definition content fails structural validation."""


class DataReferenceError(DataError):
    """Raised when definitions reference unknown classes, items or nodes."""
