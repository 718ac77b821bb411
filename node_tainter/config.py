"""Loading of policy definitions from YAML files.

A policy file looks like::

    scriptPath:
      - /opt/health/check-disk.sh
    maxAffectedNodeCount: 2
    taints:
      - key: node.example.com/unhealthy
        value: "true"
        effect: NoSchedule
    labels:
      node.example.com/health: failed
    targetNodeLabels:
      node-role.kubernetes.io/worker: ""
"""

from collections.abc import Iterable
from pathlib import Path

import yaml
from pydantic import ValidationError

from node_tainter.exceptions import ConfigurationError
from node_tainter.logging_config import get_logger
from node_tainter.models.policy import Policy

logger = get_logger(__name__)


def load_policy(path: str | Path) -> Policy:
    """Load and validate one policy file.

    The policy is named after the file unless the file sets ``name``.

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated
    """
    path = Path(path)
    logger.debug(f"Loading policy file: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Policy file not found: {path}", f"Expected location: {path.absolute()}"
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read policy file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in policy file {path}", str(e)) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid policy file: {path}", "The file must contain a YAML mapping"
        )

    data.setdefault("name", path.stem)
    try:
        policy = Policy.model_validate(data)
    except ValidationError as e:
        errors = "\n".join(
            f"  - {'.'.join(str(p) for p in err['loc']) or 'policy'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid policy file: {path}", errors) from e

    logger.info(
        f"Loaded policy {policy.name}: {len(policy.script_paths)} script(s), "
        f"max affected nodes {policy.max_affected_node_count}"
    )
    return policy


def load_policies(paths: Iterable[str | Path]) -> list[Policy]:
    """Load policy files in order.

    Raises:
        ConfigurationError: If any file is invalid or two policies share a name
    """
    policies = [load_policy(p) for p in paths]
    names = [p.name for p in policies]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigurationError(
            f"Duplicate policy names: {', '.join(duplicates)}",
            "Set a distinct 'name' in each policy file",
        )
    return policies
