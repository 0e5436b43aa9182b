from __future__ import annotations

from .connection_validator import (
    CONNECTION_HINT_BY_REASON,
    ConnectionCandidate,
    ConnectionValidationResult,
    is_valid_connection,
    validate_connection,
)
from .node_validation import refresh_validation_messages, resolve_node_validation_message

__all__ = [
    "CONNECTION_HINT_BY_REASON",
    "ConnectionCandidate",
    "ConnectionValidationResult",
    "is_valid_connection",
    "validate_connection",
    "refresh_validation_messages",
    "resolve_node_validation_message",
]
