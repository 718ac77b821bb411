"""Reconciliation of one node's taints and labels against its health checks."""

from collections.abc import Sequence

from node_tainter.exceptions import NotificationError, ScriptError
from node_tainter.guard import PolicyGuard
from node_tainter.logging_config import get_logger
from node_tainter.markers import add_labels, add_taints, remove_labels, remove_taints
from node_tainter.models.node import NodeState
from node_tainter.models.outcome import PolicyResult, ReconciliationOutcome
from node_tainter.models.policy import Policy
from node_tainter.models.taint import Taint
from node_tainter.scripts import ScriptRunner

logger = get_logger(__name__)


class Reconciler:
    """Runs one reconciliation cycle for a node.

    A cycle reads the node, evaluates every policy in order, folds their
    results into one target state and commits it with a single update.
    Script failures only fail their own policy; failures to read or write
    the cluster abort the cycle.
    """

    def __init__(
        self,
        cluster,
        policies: Sequence[Policy],
        dry_run: bool = False,
        runner: ScriptRunner | None = None,
        notifier=None,
    ):
        """Initialize the reconciler.

        Args:
            cluster: Client providing get_node, list_nodes and update_node
            policies: Policies to evaluate, in order
            dry_run: If True, compute and log the target state but never write it
            runner: Script runner, a default ScriptRunner if omitted
            notifier: Optional object with a notify(message) method
        """
        self.cluster = cluster
        self.policies = list(policies)
        self.dry_run = dry_run
        self.runner = runner or ScriptRunner()
        self.notifier = notifier
        self.guard = PolicyGuard(cluster)

    def reconcile_once(self, node_name: str) -> ReconciliationOutcome:
        """
        Run one full cycle for ``node_name``.

        Returns:
            The outcome of the cycle.

        Raises:
            UnknownClusterStateError: If the node or node list cannot be read.
            NodeWriteConflictError: If the final update is rejected.
        """
        node = self.cluster.get_node(node_name)
        taints = list(node.taints)
        labels = dict(node.labels)
        results: dict[str, PolicyResult] = {}

        for policy in self.policies:
            results[policy.name] = PolicyResult.PENDING

            if not policy.targets(node.labels):
                logger.debug(f"Policy {policy.name} does not target node {node_name}")
                results[policy.name] = PolicyResult.NOT_TARGETED
                continue

            if self.guard.exceeded(policy):
                logger.info(
                    f"Policy {policy.name}: affected node count exceeded "
                    f"(max {policy.max_affected_node_count}), skipping"
                )
                results[policy.name] = PolicyResult.SKIPPED
                continue

            try:
                self.runner.execute_scripts(policy.script_paths)
            except ScriptError as e:
                logger.info(f"Policy {policy.name} failed: {e.message}")
                taints = add_taints(taints, policy.taints)
                labels = add_labels(labels, policy.labels)
                results[policy.name] = PolicyResult.FAILED
            else:
                logger.debug(f"Policy {policy.name} passed")
                taints = remove_taints(taints, policy.taints)
                labels = remove_labels(labels, policy.labels)
                results[policy.name] = PolicyResult.PASSED

        outcome = self._build_outcome(node, taints, labels, results)

        if self.dry_run:
            logger.info(f"dryrun: node {node_name} taints: {format_taints(taints)}")
            logger.info(f"dryrun: node {node_name} labels: {format_labels(labels)}")
        elif outcome.changed:
            target = node.model_copy(update={"taints": taints, "labels": labels})
            self.cluster.update_node(target)
            outcome.written = True
        else:
            logger.info(f"Node {node_name} is already up to date")

        if outcome.newly_marked:
            self._notify(outcome)

        return outcome

    def _build_outcome(
        self,
        node: NodeState,
        taints: list[Taint],
        labels: dict[str, str],
        results: dict[str, PolicyResult],
    ) -> ReconciliationOutcome:
        before = {t.identity for t in node.taints}
        new_taints = [t for t in taints if t.identity not in before]
        new_labels = {k: v for k, v in labels.items() if node.labels.get(k) != v}
        changed = [t.identity for t in taints] != [t.identity for t in node.taints] or (
            labels != node.labels
        )
        return ReconciliationOutcome(
            node=node.name,
            dry_run=self.dry_run,
            results=results,
            taints=taints,
            labels=labels,
            changed=changed,
            newly_added_taints=new_taints,
            newly_added_labels=new_labels,
        )

    def _notify(self, outcome: ReconciliationOutcome) -> None:
        if self.notifier is None:
            return
        message = f"Node *{outcome.node}* has been tainted"
        if outcome.newly_added_taints:
            message += f"\nTaints: {format_taints(outcome.newly_added_taints)}"
        if outcome.newly_added_labels:
            message += f"\nLabels: {format_labels(outcome.newly_added_labels)}"
        try:
            self.notifier.notify(message)
        except NotificationError as e:
            logger.error(f"Notification failed: {e}")
        except Exception as e:
            logger.error(f"Unexpected error sending notification: {e}", exc_info=True)


def format_taints(taints: Sequence[Taint]) -> str:
    return ", ".join(str(t) for t in taints) or "<none>"


def format_labels(labels: dict[str, str]) -> str:
    return ", ".join(f"{k}={v}" for k, v in sorted(labels.items())) or "<none>"
