"""Exception hierarchy.

Expected degradations (a card without breakout columns, constituents missing
on one side of a comparison) are not errors and never raise.
"""

from __future__ import annotations

from typing import Any


class FeatureXRayError(Exception):
    """Base class for feature x-ray errors."""


class ColumnAlignmentError(FeatureXRayError, LookupError):
    """An expected column role is absent from a query result."""

    def __init__(self, role: Any):
        self.role = role
        super().__init__(f"No column matches expected role {role!r}")


class UnknownModelError(FeatureXRayError, LookupError):
    """A table, column or database could not be resolved by a data source."""

    def __init__(self, kind: str, identifier: Any):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"Unknown {kind}: {identifier!r}")
