"""Logging helpers."""

from flipkit.core.logging.structured import (
    StructuredFormatter,
    clear_feature_context,
    configure_from_settings,
    set_feature_context,
    setup_structured_logging,
)

__all__ = [
    "StructuredFormatter",
    "clear_feature_context",
    "configure_from_settings",
    "set_feature_context",
    "setup_structured_logging",
]
