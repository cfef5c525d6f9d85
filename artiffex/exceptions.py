"""Custom exceptions for Artiffex."""

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Coarse classification of why a node failed to produce output."""
    EMPTY_PROMPT = "empty_prompt"
    QUOTA_EXCEEDED = "quota_exceeded"
    SERVICE_ERROR = "service_error"
    UNKNOWN = "unknown"


class ArtiffexError(Exception):
    """Base exception for all Artiffex errors."""
    pass


class NodeNotFoundError(ArtiffexError, KeyError):
    """A node id does not reference a live node."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' not found")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class NodeBusyError(ArtiffexError):
    """A generation is already in flight for this node."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' already has a generation in flight")


class InvalidStatusTransition(ArtiffexError, ValueError):
    """Illegal move in the node execution state machine."""

    def __init__(self, node_id: str, current: str, requested: str, allowed: Optional[list] = None):
        self.node_id = node_id
        self.current = current
        self.requested = requested
        self.allowed = allowed or []
        super().__init__(
            f"Node '{node_id}': cannot transition from '{current}' to '{requested}'. "
            f"Allowed: {self.allowed}"
        )


class GenerationError(ArtiffexError):
    """The external generation service failed, or the request was never sent."""

    def __init__(self, kind: FailureKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)
