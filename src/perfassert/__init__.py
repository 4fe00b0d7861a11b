"""perfassert -- performance-regression gate for Go benchmark reports."""

__version__ = "0.1.0"
