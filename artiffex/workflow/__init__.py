"""Workflow graph - pipeline nodes, edges and the cascading Graph Store."""
from .models import WorkflowNode, Edge, NodeKind, NodeStatus, NodeError, VALID_TRANSITIONS
from .graph_store import GraphStore

__all__ = [
    "WorkflowNode",
    "Edge",
    "NodeKind",
    "NodeStatus",
    "NodeError",
    "VALID_TRANSITIONS",
    "GraphStore",
]
