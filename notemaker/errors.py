"""Exception types raised by notemaker.

Every error derives from ``ValueError`` so callers that already guard against
bad arguments with ``except ValueError`` keep working.

- ``InvalidScaleError`` - an empty or malformed interval list.
- ``InvalidParameterError`` - a generation parameter outside its legal range
  (non-positive bar count, all-zero weight vector, inverted pitch range).
- ``RangeExhaustionError`` - a bounded search found no legal candidate. The
  generators recover from this locally and never let it escape.
"""


class NotemakerError (ValueError):

	"""Base class for all notemaker errors."""


class InvalidScaleError (NotemakerError):

	"""Raised when a scale definition cannot be used."""


class InvalidParameterError (NotemakerError):

	"""Raised when a generation parameter is out of range."""


class RangeExhaustionError (NotemakerError):

	"""Raised when a bounded candidate search runs out of options."""
