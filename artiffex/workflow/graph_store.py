"""
Graph Store - owns every node and edge of the current pipeline.
In-memory and ephemeral: pipelines are not persisted.

Each node carries a single optional parent reference and the store keeps the
matching parent edge keyed by its target, so a node can never acquire a
second parent. Cascading operations (delete, invalidate) are built on one
breadth-first descendant query.
"""

import uuid
import logging
from collections import deque
from typing import Optional, Dict, List, Set, Any, Union
from datetime import datetime

from artiffex.config.settings import settings
from artiffex.exceptions import NodeNotFoundError, InvalidStatusTransition
from artiffex.workflow.models import (
    WorkflowNode, Edge, NodeKind, NodeStatus, NodeError, VALID_TRANSITIONS,
)

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = frozenset({"id", "kind", "parent_id", "created_at"})
# owned by the execution state machine; only set_status / begin_generation write them
EXECUTION_FIELDS = frozenset({"status", "error", "generation_id"})


class GraphStore:
    """
    Forest of out-trees of WorkflowNodes.
    Mutations are expected from a single actor (the UI event stream), so no
    locking is done here.
    """

    def __init__(self, strict_parents: Optional[bool] = None):
        self._nodes: Dict[str, WorkflowNode] = {}
        self._parent_edges: Dict[str, Edge] = {}  # target_id -> edge
        self._children: Dict[str, List[str]] = {}  # source_id -> [target_id]
        self._retired_ids: Set[str] = set()  # ids of deleted nodes, never handed out again
        self._strict_parents = settings.strict_parents if strict_parents is None else strict_parents

    # ── Reads ─────────────────────────────────────────────────────────

    def get(self, node_id: str) -> Optional[WorkflowNode]:
        return self._nodes.get(node_id)

    def require(self, node_id: str) -> WorkflowNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def list_nodes(self, kind: Optional[NodeKind] = None) -> List[WorkflowNode]:
        nodes = list(self._nodes.values())
        if kind:
            nodes = [n for n in nodes if n.kind == kind]
        return nodes

    def edges(self) -> List[Edge]:
        return list(self._parent_edges.values())

    def parent(self, node_id: str) -> Optional[WorkflowNode]:
        edge = self._parent_edges.get(node_id)
        return self._nodes.get(edge.source_id) if edge else None

    def children(self, node_id: str) -> List[WorkflowNode]:
        return [self._nodes[cid] for cid in self._children.get(node_id, []) if cid in self._nodes]

    def roots(self) -> List[WorkflowNode]:
        return [n for n in self._nodes.values() if n.id not in self._parent_edges]

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    # ── Creation ──────────────────────────────────────────────────────

    def _new_id(self) -> str:
        while True:
            node_id = f"node-{uuid.uuid4().hex[:12]}"
            if node_id not in self._nodes and node_id not in self._retired_ids:
                return node_id

    def add_node(
        self,
        kind: Union[NodeKind, str],
        parent_id: Optional[str] = None,
        **fields: Any,
    ) -> WorkflowNode:
        """
        Create a node, optionally attached as the single child of `parent_id`.

        The child's base prompt and input artifact are carried over from the
        parent only when the parent currently holds a ready output. An unknown
        parent degrades to a root node unless strict parent checking is on.
        """
        bad = (IMMUTABLE_FIELDS | EXECUTION_FIELDS).intersection(fields)
        if bad:
            raise ValueError(f"Fields {sorted(bad)} cannot be set when adding a node")

        node_kind = NodeKind(kind)
        parent = self._nodes.get(parent_id) if parent_id else None
        if parent_id and parent is None:
            if self._strict_parents:
                raise NodeNotFoundError(parent_id)
            logger.warning(f"[GRAPH] Parent '{parent_id}' not found, adding {node_kind.value} as a root node")

        seeded: Dict[str, Any] = {}
        if parent is not None and parent.has_ready_output:
            seeded = {"base_prompt": parent.base_prompt, "input_ref": parent.output_ref}
        if "aspect_ratio" not in fields:
            seeded["aspect_ratio"] = settings.default_aspect_ratio

        node = WorkflowNode(
            id=self._new_id(),
            kind=node_kind,
            parent_id=parent.id if parent is not None else None,
            **{**seeded, **fields},
        )
        self._nodes[node.id] = node
        if parent is not None:
            self._parent_edges[node.id] = Edge.between(parent.id, node.id)
            self._children.setdefault(parent.id, []).append(node.id)

        logger.debug(f"[GRAPH] Added {node.kind.value} node {node.id} (parent={node.parent_id})")
        return node

    # ── Mutation ──────────────────────────────────────────────────────

    def _check_transition(self, node: WorkflowNode, status: NodeStatus) -> None:
        allowed = VALID_TRANSITIONS.get(node.status, ())
        if status not in allowed:
            raise InvalidStatusTransition(
                node.id, node.status.value, status.value, [s.value for s in allowed]
            )

    def update_node(self, node_id: str, updates: Dict[str, Any]) -> WorkflowNode:
        """Merge `updates` into a node's mutable fields. All-or-nothing."""
        node = self.require(node_id)

        bad = IMMUTABLE_FIELDS.intersection(updates)
        if bad:
            raise ValueError(f"Fields {sorted(bad)} are immutable")
        managed = EXECUTION_FIELDS.intersection(updates)
        if managed:
            raise ValueError(f"Fields {sorted(managed)} are set by node execution only")
        unknown = set(updates) - set(WorkflowNode.model_fields)
        if unknown:
            raise ValueError(f"Unknown node fields: {sorted(unknown)}")

        # validate every assignment on a copy before touching the live node
        candidate = node.model_copy()
        for key, value in updates.items():
            setattr(candidate, key, value)

        for key in updates:
            setattr(node, key, getattr(candidate, key))
        node.updated_at = datetime.utcnow()
        return node

    def begin_generation(self, node_id: str) -> WorkflowNode:
        """Stamp a fresh generation id and move the node to `running`."""
        node = self.require(node_id)
        self._check_transition(node, NodeStatus.RUNNING)
        node.generation_id = uuid.uuid4().hex
        node.status = NodeStatus.RUNNING
        node.error = None
        node.updated_at = datetime.utcnow()
        return node

    def set_status(
        self,
        node_id: str,
        status: NodeStatus,
        error: Optional[NodeError] = None,
    ) -> WorkflowNode:
        """Move a node through the execution state machine."""
        node = self.require(node_id)
        status = NodeStatus(status)
        self._check_transition(node, status)
        node.status = status
        node.error = error if status == NodeStatus.FAILED else None
        node.updated_at = datetime.utcnow()
        return node

    # ── Traversal & Cascades ──────────────────────────────────────────

    def descendants(self, start_id: str) -> Set[str]:
        """
        Every node reachable from `start_id` along child edges.
        `start_id` itself is never included; the visited guard keeps this
        finite even if the forest invariant were ever broken.
        """
        found: Set[str] = set()
        visited: Set[str] = {start_id}
        queue = deque([start_id])
        while queue:
            current = queue.popleft()
            for child_id in self._children.get(current, []):
                if child_id not in visited:
                    visited.add(child_id)
                    found.add(child_id)
                    queue.append(child_id)
        return found

    def ancestors(self, node_id: str) -> List[str]:
        """Parent chain from the immediate parent up to the root."""
        chain: List[str] = []
        seen: Set[str] = {node_id}
        edge = self._parent_edges.get(node_id)
        while edge is not None and edge.source_id not in seen:
            chain.append(edge.source_id)
            seen.add(edge.source_id)
            edge = self._parent_edges.get(edge.source_id)
        return chain

    def _remove(self, doomed: Set[str]) -> None:
        for node_id in doomed:
            self._nodes.pop(node_id, None)
            self._retired_ids.add(node_id)
            self._children.pop(node_id, None)
            edge = self._parent_edges.pop(node_id, None)
            if edge is not None and edge.source_id not in doomed:
                siblings = self._children.get(edge.source_id, [])
                if node_id in siblings:
                    siblings.remove(node_id)
        # drop any edge still pointing out of the removed set
        for target_id, edge in list(self._parent_edges.items()):
            if edge.source_id in doomed:
                del self._parent_edges[target_id]
                node = self._nodes.get(target_id)
                if node is not None:
                    node.parent_id = None

    def delete_subtree(self, start_id: str) -> Set[str]:
        """Remove a node and everything below it. Returns the removed ids."""
        if start_id not in self._nodes:
            return set()
        doomed = self.descendants(start_id) | {start_id}
        self._remove(doomed)
        logger.info(f"[GRAPH] Deleted subtree {start_id} ({len(doomed)} nodes)")
        return doomed

    def invalidate_descendants(self, node_id: str) -> Set[str]:
        """Remove everything below a node, keeping the node and its incoming edge."""
        doomed = self.descendants(node_id)
        if doomed:
            self._remove(doomed)
            logger.info(f"[GRAPH] Invalidated {len(doomed)} descendants of {node_id}")
        return doomed

    # ── Integrity / Export / Stats ────────────────────────────────────

    def check_integrity(self) -> List[str]:
        """Verify the forest invariant. Returns a list of problems (empty when sound)."""
        errors = []
        for target_id, edge in self._parent_edges.items():
            if edge.target_id != target_id:
                errors.append(f"Edge {edge.edge_id}: keyed under '{target_id}'")
            if edge.source_id not in self._nodes:
                errors.append(f"Edge {edge.edge_id}: source '{edge.source_id}' not found")
            if edge.target_id not in self._nodes:
                errors.append(f"Edge {edge.edge_id}: target '{edge.target_id}' not found")
        for node in self._nodes.values():
            edge = self._parent_edges.get(node.id)
            if (edge.source_id if edge else None) != node.parent_id:
                errors.append(f"Node {node.id}: parent reference does not match its edge")
            if node.id in self.ancestors(node.id) or (
                node.parent_id and node.parent_id in self.descendants(node.id)
            ):
                errors.append(f"Node {node.id}: part of a cycle")
        return errors

    def export_graph(self) -> Dict[str, Any]:
        return {
            "nodes": [n.model_dump(mode="json") for n in self._nodes.values()],
            "edges": [e.model_dump(mode="json") for e in self._parent_edges.values()],
        }

    def get_stats(self) -> Dict[str, Any]:
        by_status: Dict[str, int] = {}
        by_kind: Dict[str, int] = {}
        for n in self._nodes.values():
            by_status[n.status.value] = by_status.get(n.status.value, 0) + 1
            by_kind[n.kind.value] = by_kind.get(n.kind.value, 0) + 1
        return {
            "total_nodes": len(self._nodes),
            "total_edges": len(self._parent_edges),
            "roots": len(self.roots()),
            "by_status": by_status,
            "by_kind": by_kind,
        }
