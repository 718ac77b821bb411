"""Data models for policies, node state and reconciliation results."""

from node_tainter.models.node import NodeState
from node_tainter.models.outcome import PolicyResult, ReconciliationOutcome
from node_tainter.models.policy import Policy
from node_tainter.models.taint import Taint, TaintEffect

__all__ = [
    "NodeState",
    "Policy",
    "PolicyResult",
    "ReconciliationOutcome",
    "Taint",
    "TaintEffect",
]
