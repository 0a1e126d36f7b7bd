"""
Exception types raised by the statistics core.

Both are precondition failures detected before any computation starts:
- InvalidInput for empty or malformed samples and impossible parameters
  (non-positive bandwidth, k larger than the number of points, ...).
- InvalidDomain for a degenerate numeric range handed to the histogram binner.

Both subclass ValueError so callers that already guard numeric parsing with
``except ValueError`` keep working.
"""

from __future__ import annotations

__all__ = [
    "InvalidDomain",
    "InvalidInput",
]


class InvalidInput(ValueError):
    """Sample or parameter that the requested computation cannot accept."""


class InvalidDomain(ValueError):
    """Histogram domain whose lower bound is not strictly below its upper bound."""
