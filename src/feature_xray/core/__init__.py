"""Core module - configuration, logging, errors and shared models."""

from feature_xray.core.config import Settings, get_settings
from feature_xray.core.exceptions import (
    ColumnAlignmentError,
    FeatureXRayError,
    UnknownModelError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "ColumnAlignmentError",
    "FeatureXRayError",
    "UnknownModelError",
]
