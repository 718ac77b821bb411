"""Access to node state through the Kubernetes API."""

import copy

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

from node_tainter.exceptions import (
    KubernetesError,
    NodeNotFoundError,
    NodeWriteConflictError,
    UnknownClusterStateError,
)
from node_tainter.logging_config import get_logger
from node_tainter.models.node import NodeState

logger = get_logger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30


class ClusterClient:
    """Reads and writes node taints and labels.

    The cluster is the only source of truth: nothing is cached between calls.
    """

    def __init__(self, api: client.CoreV1Api, request_timeout: float = DEFAULT_REQUEST_TIMEOUT):
        """Initialize the client.

        Args:
            api: Configured CoreV1Api instance
            request_timeout: Client-side timeout in seconds for every API call
        """
        self.api = api
        self.request_timeout = request_timeout

    @classmethod
    def from_environment(
        cls, kubeconfig: str | None = None, request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    ) -> "ClusterClient":
        """
        Build a client from in-cluster config, falling back to kubeconfig.

        Args:
            kubeconfig: Explicit kubeconfig path; skips in-cluster detection
            request_timeout: Client-side timeout in seconds for every API call

        Raises:
            KubernetesError: If no usable configuration can be loaded.
        """
        try:
            if kubeconfig:
                config.load_kube_config(config_file=kubeconfig)
                logger.debug(f"Loaded kubeconfig from {kubeconfig}")
            else:
                try:
                    config.load_incluster_config()
                    logger.debug("Loaded in-cluster configuration")
                except ConfigException:
                    config.load_kube_config()
                    logger.debug("Loaded default kubeconfig")
        except (ConfigException, OSError) as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise KubernetesError(
                f"Failed to load Kubernetes configuration: {e}",
                "Run inside a pod with a service account, or make sure a kubeconfig "
                "is available at ~/.kube/config or passed with --kubeconfig",
            ) from e

        return cls(client.CoreV1Api(), request_timeout=request_timeout)

    def get_node(self, name: str) -> NodeState:
        """
        Read the current state of one node.

        Raises:
            NodeNotFoundError: If the node does not exist.
            UnknownClusterStateError: If the API cannot be reached.
        """
        logger.debug(f"Reading node {name}")
        try:
            node = self.api.read_node(name, _request_timeout=self.request_timeout)
        except ApiException as e:
            if e.status == 404:
                raise NodeNotFoundError(
                    f"Node not found: {name}",
                    "Check the --node-name option or the NODE_NAME environment variable",
                ) from e
            raise UnknownClusterStateError(f"Failed to read node {name}: {e.reason}") from e
        except HTTPError as e:
            raise UnknownClusterStateError(f"Failed to read node {name}: {e}") from e
        return NodeState.from_kubernetes(node)

    def list_nodes(self) -> list[NodeState]:
        """
        Read the current state of every node in the cluster.

        Raises:
            UnknownClusterStateError: If the API cannot be reached.
        """
        try:
            nodes = self.api.list_node(_request_timeout=self.request_timeout)
        except ApiException as e:
            raise UnknownClusterStateError(f"Failed to list nodes: {e.reason}") from e
        except HTTPError as e:
            raise UnknownClusterStateError(f"Failed to list nodes: {e}") from e
        logger.debug(f"Listed {len(nodes.items)} nodes")
        return [NodeState.from_kubernetes(n) for n in nodes.items]

    def update_node(self, state: NodeState) -> None:
        """
        Replace the node's taints and labels with those of ``state``.

        Issues a single replace call against the object ``state`` was read
        from, so a concurrent modification is rejected by resource version.

        Raises:
            NodeWriteConflictError: If the API rejects the update.
        """
        if state.raw is None:
            raise KubernetesError(
                f"Cannot update node {state.name}",
                "The node state was not read from the cluster",
            )

        body = copy.deepcopy(state.raw)
        # Keep existing taint objects so fields like timeAdded survive
        existing = {}
        for t in (body.spec.taints if body.spec else None) or []:
            existing[(t.key, t.value or "", t.effect)] = t
        if body.spec is None:
            body.spec = client.V1NodeSpec()
        body.spec.taints = [existing.get(t.identity) or t.to_kubernetes() for t in state.taints]
        body.metadata.labels = dict(state.labels)

        logger.debug(f"Updating node {state.name} (resourceVersion={state.resource_version})")
        try:
            self.api.replace_node(state.name, body, _request_timeout=self.request_timeout)
        except ApiException as e:
            if e.status == 409:
                raise NodeWriteConflictError(
                    f"Conflict updating node {state.name}",
                    "The node was modified since it was read; it will be retried next cycle",
                ) from e
            raise NodeWriteConflictError(f"Failed to update node {state.name}: {e.reason}") from e
        except HTTPError as e:
            raise NodeWriteConflictError(f"Failed to update node {state.name}: {e}") from e
        logger.info(f"Updated node {state.name}")
