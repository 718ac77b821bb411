"""Data model for the state of a single cluster node."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from node_tainter.models.taint import Taint


class NodeState(BaseModel):
    """Taints and labels of one node as read from the cluster."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    taints: list[Taint] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)
    # The V1Node this state was read from; replaced wholesale on update
    raw: Any = Field(default=None, exclude=True, repr=False)

    @classmethod
    def from_kubernetes(cls, node) -> "NodeState":
        """Parse from a Kubernetes V1Node."""
        spec_taints = (node.spec.taints if node.spec else None) or []
        return cls(
            name=node.metadata.name,
            taints=[Taint.from_kubernetes(t) for t in spec_taints],
            labels=dict(node.metadata.labels or {}),
            raw=node,
        )

    @property
    def resource_version(self) -> str | None:
        """Resource version of the underlying API object, if known."""
        if self.raw is None or self.raw.metadata is None:
            return None
        return self.raw.metadata.resource_version
