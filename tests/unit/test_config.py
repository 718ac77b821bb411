"""Unit tests for policy file loading."""

import pytest

from node_tainter.config import load_policies, load_policy
from node_tainter.exceptions import ConfigurationError
from node_tainter.models import Taint

VALID_POLICY = """
scriptPath:
  - /path/to/script1
  - /path/to/script2
maxAffectedNodeCount: 100
targetNodeLabels:
  app: web
taints:
  - key: node.example.com/unhealthy
    value: "true"
    effect: NoExecute
labels:
  node.example.com/health: failed
"""


def write_policy(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content)
    return path


def test_load_valid_policy(tmp_path):
    policy = load_policy(write_policy(tmp_path, "disk.yaml", VALID_POLICY))

    assert policy.name == "disk"
    assert policy.script_paths == ["/path/to/script1", "/path/to/script2"]
    assert policy.max_affected_node_count == 100
    assert policy.target_node_labels == {"app": "web"}
    assert policy.taints == [
        Taint(key="node.example.com/unhealthy", value="true", effect="NoExecute")
    ]
    assert policy.labels == {"node.example.com/health": "failed"}


def test_max_affected_node_count_defaults_to_one(tmp_path):
    path = write_policy(
        tmp_path,
        "gpu.yaml",
        "scriptPath: [/opt/gpu.sh]\ntaints: ['gpu=broken:NoSchedule']\n",
    )

    policy = load_policy(path)

    assert policy.max_affected_node_count == 1
    assert policy.taints == [Taint(key="gpu", value="broken", effect="NoSchedule")]


def test_explicit_name_wins(tmp_path):
    path = write_policy(tmp_path, "a.yaml", "name: custom\nscriptPath: [/x]\nlabels: {a: b}\n")

    assert load_policy(path).name == "custom"


def test_invalid_yaml_content(tmp_path):
    path = write_policy(tmp_path, "bad.yaml", "\ninvalidYAMLContent\n")

    with pytest.raises(ConfigurationError) as exc_info:
        load_policy(path)

    assert "bad.yaml" in exc_info.value.message


def test_yaml_syntax_error(tmp_path):
    path = write_policy(tmp_path, "broken.yaml", "scriptPath: [unclosed\n")

    with pytest.raises(ConfigurationError) as exc_info:
        load_policy(path)

    assert "Invalid YAML" in exc_info.value.message


def test_validation_error_lists_fields(tmp_path):
    path = write_policy(
        tmp_path,
        "invalid.yaml",
        "scriptPath: [/x]\nmaxAffectedNodeCount: -2\nlabels: {a: b}\n",
    )

    with pytest.raises(ConfigurationError) as exc_info:
        load_policy(path)

    assert "maxAffectedNodeCount" in exc_info.value.details


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError) as exc_info:
        load_policy(tmp_path / "nonexistent.yaml")

    assert "not found" in exc_info.value.message.lower()


def test_load_policies_keeps_order(tmp_path):
    first = write_policy(tmp_path, "first.yaml", "scriptPath: [/a]\nlabels: {a: b}\n")
    second = write_policy(tmp_path, "second.yaml", "scriptPath: [/b]\nlabels: {c: d}\n")

    policies = load_policies([second, first])

    assert [p.name for p in policies] == ["second", "first"]


def test_load_policies_rejects_duplicate_names(tmp_path):
    first = write_policy(tmp_path, "first.yaml", "name: dup\nscriptPath: [/a]\nlabels: {a: b}\n")
    second = write_policy(tmp_path, "second.yaml", "name: dup\nscriptPath: [/b]\nlabels: {c: d}\n")

    with pytest.raises(ConfigurationError) as exc_info:
        load_policies([first, second])

    assert "dup" in exc_info.value.message


@pytest.mark.parametrize(
    "content, field",
    [
        pytest.param("scriptPath: [/a]\nlabels: [a, b]\n", "labels", id="labels list"),
        pytest.param(
            "scriptPath: [/a]\nlabels: {a: b}\ntargetNodeLabels: [x]\n",
            "targetNodeLabels",
            id="target labels list",
        ),
        pytest.param("scriptPath: [/a]\nlabels: {a: b}\ntaints: 5\n", "taints", id="taints scalar"),
    ],
)
def test_wrongly_shaped_marker_fields_are_configuration_errors(tmp_path, content, field):
    path = write_policy(tmp_path, "shape.yaml", content)

    with pytest.raises(ConfigurationError) as exc_info:
        load_policy(path)

    assert field in exc_info.value.details
