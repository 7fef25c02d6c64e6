"""Class score unlock tracker."""

__version__ = "0.3.0"
