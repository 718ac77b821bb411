"""Data model for health-check policies."""

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from node_tainter.exceptions import ConfigurationError
from node_tainter.models.taint import Taint


class Policy(BaseModel):
    """A health check plus the markers applied to a node when it fails.

    Field aliases follow the camelCase keys of the policy YAML files.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = "policy"
    script_paths: list[str] = Field(alias="scriptPath")
    max_affected_node_count: int = Field(default=1, ge=0, alias="maxAffectedNodeCount")
    taints: list[Taint] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)
    target_node_labels: dict[str, str] = Field(default_factory=dict, alias="targetNodeLabels")

    @field_validator("script_paths", mode="before")
    @classmethod
    def validate_script_paths(cls, v):
        """Accept a single path and reject an empty list."""
        if isinstance(v, str):
            v = [v]
        if not v:
            raise ValueError("scriptPath must list at least one script")
        return v

    @field_validator("taints", mode="before")
    @classmethod
    def validate_taints(cls, v):
        """Accept taints in key=value:Effect string form as well as mappings."""
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        taints = []
        for t in v:
            if isinstance(t, str):
                try:
                    t = Taint.parse(t)
                except ConfigurationError as e:
                    raise ValueError(e.format_message()) from e
            taints.append(t)
        return taints

    @field_validator("labels", "target_node_labels", mode="before")
    @classmethod
    def validate_labels(cls, v):
        """Treat a null mapping as empty and coerce values to strings."""
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            # Left for pydantic's dict validation to reject
            return v
        return {str(k): "" if val is None else str(val) for k, val in v.items()}

    @model_validator(mode="after")
    def validate_markers(self) -> "Policy":
        """A policy must have something to apply."""
        if not self.taints and not self.labels:
            raise ValueError("policy must define at least one taint or label")
        return self

    def targets(self, node_labels: dict[str, str]) -> bool:
        """Whether this policy applies to a node with the given labels."""
        return all(node_labels.get(k) == v for k, v in self.target_node_labels.items())
