"""Data model for Kubernetes node taints."""

import re
from enum import Enum

from kubernetes.client import V1Taint
from pydantic import BaseModel, ConfigDict, field_validator

from node_tainter.exceptions import ConfigurationError

# key=value:Effect or key:Effect
TAINT_PATTERN = re.compile(r"^(?P<key>[^=:]+)(=(?P<value>[^:]*))?:(?P<effect>[^:=]+)$")


class TaintEffect(str, Enum):
    """Effects a taint may have on workload placement."""

    NO_SCHEDULE = "NoSchedule"
    PREFER_NO_SCHEDULE = "PreferNoSchedule"
    NO_EXECUTE = "NoExecute"


class Taint(BaseModel):
    """Kubernetes node taint.

    Two taints are the same entry only when key, value and effect all match.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    value: str = ""
    effect: TaintEffect = TaintEffect.NO_SCHEDULE

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Validate the taint key is not empty."""
        if not v or not v.strip():
            raise ValueError("taint key cannot be empty")
        return v

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: str | None) -> str:
        """Treat a missing value as the empty string."""
        return "" if v is None else v

    @property
    def identity(self) -> tuple[str, str, str]:
        """Key used for set membership in add/remove operations."""
        return (self.key, self.value, self.effect.value)

    def __str__(self) -> str:
        if self.value:
            return f"{self.key}={self.value}:{self.effect.value}"
        return f"{self.key}:{self.effect.value}"

    @classmethod
    def parse(cls, text: str) -> "Taint":
        """Parse a taint from its ``key=value:Effect`` string form.

        Raises:
            ConfigurationError: If the string is malformed or the effect is unknown
        """
        match = TAINT_PATTERN.match(text.strip())
        if not match:
            raise ConfigurationError(
                f"Invalid taint format: '{text}'",
                "Expected key=value:Effect, e.g. node.example.com/unhealthy=true:NoSchedule",
            )
        effect = match.group("effect")
        allowed = [e.value for e in TaintEffect]
        if effect not in allowed:
            raise ConfigurationError(
                f"Invalid taint effect: '{effect}'", f"effect must be one of {allowed}"
            )
        return cls(key=match.group("key"), value=match.group("value") or "", effect=effect)

    @classmethod
    def from_kubernetes(cls, taint: V1Taint) -> "Taint":
        """Build from a Kubernetes API taint object."""
        return cls(key=taint.key, value=taint.value or "", effect=taint.effect)

    def to_kubernetes(self) -> V1Taint:
        """Convert to a Kubernetes API taint object."""
        return V1Taint(key=self.key, value=self.value or None, effect=self.effect.value)
