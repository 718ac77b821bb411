"""Data models for the result of a reconciliation cycle."""

from enum import Enum

from pydantic import BaseModel, Field

from node_tainter.models.taint import Taint


class PolicyResult(str, Enum):
    """Terminal state of one policy within a cycle."""

    PENDING = "Pending"
    SKIPPED = "Skipped"  # affected node count exceeded
    PASSED = "Passed"
    FAILED = "Failed"
    NOT_TARGETED = "NotTargeted"


class ReconciliationOutcome(BaseModel):
    """What one cycle decided for one node."""

    node: str
    dry_run: bool = False
    results: dict[str, PolicyResult] = Field(default_factory=dict)
    taints: list[Taint] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)
    changed: bool = False
    written: bool = False
    newly_added_taints: list[Taint] = Field(default_factory=list)
    newly_added_labels: dict[str, str] = Field(default_factory=dict)

    @property
    def skipped(self) -> bool:
        """Whether any policy was skipped by the saturation guard."""
        return PolicyResult.SKIPPED in self.results.values()

    @property
    def newly_marked(self) -> bool:
        """Whether any marker went from absent to present this cycle."""
        return bool(self.newly_added_taints or self.newly_added_labels)
