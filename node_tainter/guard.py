"""Cluster-wide cap on how many nodes may carry a policy's markers."""

from collections.abc import Iterable, Mapping

from node_tainter.logging_config import get_logger
from node_tainter.markers import label_exists, taint_exists
from node_tainter.models.node import NodeState
from node_tainter.models.policy import Policy
from node_tainter.models.taint import Taint

logger = get_logger(__name__)


def is_affected(node: NodeState, taints: Iterable[Taint], labels: Mapping[str, str]) -> bool:
    """Whether a node carries any of the taints (by key) or labels (by value)."""
    if any(taint_exists(node.taints, t) for t in taints):
        return True
    return any(label_exists(node.labels, k, v) for k, v in labels.items())


def affected_node_count(
    nodes: Iterable[NodeState], taints: Iterable[Taint], labels: Mapping[str, str]
) -> int:
    """Count nodes already carrying any of the given markers."""
    taints = list(taints)
    return sum(1 for node in nodes if is_affected(node, taints, labels))


def exceeds_ceiling(count: int, threshold: int) -> bool:
    """Whether an affected node count is over the ceiling; equal is still allowed."""
    return count > threshold


def affected_node_count_exceeded(
    nodes: Iterable[NodeState],
    threshold: int,
    taints: Iterable[Taint],
    labels: Mapping[str, str],
) -> bool:
    """Whether strictly more than ``threshold`` nodes carry the markers."""
    return exceeds_ceiling(affected_node_count(nodes, taints, labels), threshold)


class PolicyGuard:
    """Checks a policy's ceiling against fresh cluster state."""

    def __init__(self, cluster):
        self.cluster = cluster

    def exceeded(self, policy: Policy) -> bool:
        """
        Whether the policy's affected node count is over its ceiling.

        Nodes are listed on every call.

        Raises:
            UnknownClusterStateError: If the node list cannot be read.
        """
        nodes = self.cluster.list_nodes()
        count = affected_node_count(nodes, policy.taints, policy.labels)
        logger.debug(
            f"Policy {policy.name}: {count} affected node(s), "
            f"max {policy.max_affected_node_count}"
        )
        return exceeds_ceiling(count, policy.max_affected_node_count)
