"""Pytest configuration and shared fixtures."""

import os

import pytest
from hypothesis import Verbosity, settings

from node_tainter.exceptions import NodeNotFoundError, UnknownClusterStateError
from node_tainter.models import NodeState

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

# Load the default profile
settings.load_profile("default")


class FakeClusterClient:
    """In-memory stand-in for ClusterClient that records every call."""

    def __init__(self, nodes):
        self.nodes = {n.name: n for n in nodes}
        self.get_calls = []
        self.list_calls = 0
        self.updates = []
        self.fail_list = False
        self.fail_update = None

    def get_node(self, name):
        self.get_calls.append(name)
        if name not in self.nodes:
            raise NodeNotFoundError(f"Node not found: {name}")
        return self.nodes[name].model_copy(deep=True)

    def list_nodes(self):
        self.list_calls += 1
        if self.fail_list:
            raise UnknownClusterStateError("Failed to list nodes: connection refused")
        return [n.model_copy(deep=True) for n in self.nodes.values()]

    def update_node(self, state):
        if self.fail_update is not None:
            raise self.fail_update
        self.updates.append(state)
        self.nodes[state.name] = state.model_copy(deep=True)


@pytest.fixture
def make_node():
    """Factory for NodeState objects."""

    def _make_node(name, labels=None, taints=None):
        return NodeState(name=name, labels=labels or {}, taints=taints or [])

    return _make_node


@pytest.fixture
def make_cluster():
    """Factory for fake cluster clients."""
    return FakeClusterClient


@pytest.fixture
def write_script(tmp_path):
    """Factory writing an executable shell script and returning its path."""

    def _write_script(name, body):
        path = tmp_path / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        os.chmod(path, 0o755)
        return str(path)

    return _write_script


@pytest.fixture
def ok_script(write_script):
    return write_script("ok.sh", "echo ok\nexit 0")


@pytest.fixture
def fail_script(write_script):
    return write_script("fail.sh", "echo disk full >&2\nexit 1")
