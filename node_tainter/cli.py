"""Main CLI entry point for node-tainter."""

import signal
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from node_tainter.exceptions import ConfigurationError, KubernetesError, NodeTainterError
from node_tainter.logging_config import get_logger, setup_logging

app = typer.Typer(
    name="node-tainter",
    help="Taint or label a Kubernetes node based on health-check scripts",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

RESULT_STYLES = {
    "Passed": "[green]✓ Passed[/green]",
    "Failed": "[red]✗ Failed[/red]",
    "Skipped": "[yellow]Skipped[/yellow]",
    "NotTargeted": "[dim]Not targeted[/dim]",
    "Pending": "Pending",
}


# Global callback to set up logging
@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: str | None = typer.Option(None, "--log-file", help="Path to log file"),
    log_level: str = typer.Option(
        "INFO", "--log-level", envvar="LOG_LEVEL", help="Console log level, e.g. DEBUG or WARNING"
    ),
):
    """Global options for all commands."""
    log_path = Path(log_file) if log_file else None
    try:
        setup_logging(level=log_level, verbose=verbose, log_file=log_path)
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error:[/red] {e.message}")
        if e.details:
            console.print(f"\n{e.details}")
        raise typer.Exit(code=1)
    logger.debug("Logging initialized")


@app.command()
def version() -> None:
    """Show version information."""
    from node_tainter import __version__

    typer.echo(f"node-tainter version {__version__}")


@app.command()
def validate(
    config_paths: list[str] = typer.Argument(..., help="Policy files to validate"),
) -> None:
    """
    Validate policy files and show what they configure.
    """
    from node_tainter.config import load_policies

    try:
        policies = load_policies(config_paths)
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error:[/red] {e.message}")
        if e.details:
            console.print(f"\n{e.details}")
        raise typer.Exit(code=1)

    table = Table(title="Policies")
    table.add_column("Name", style="cyan")
    table.add_column("Scripts", style="magenta")
    table.add_column("Max Affected", justify="right")
    table.add_column("Taints", style="yellow")
    table.add_column("Labels", style="green")
    table.add_column("Target Nodes")

    for policy in policies:
        table.add_row(
            policy.name,
            "\n".join(policy.script_paths),
            str(policy.max_affected_node_count),
            "\n".join(str(t) for t in policy.taints) or "-",
            "\n".join(f"{k}={v}" for k, v in policy.labels.items()) or "-",
            "\n".join(f"{k}={v}" for k, v in policy.target_node_labels.items()) or "all",
        )

    console.print(table)
    console.print(f"\n[green]✓[/green] {len(policies)} valid policy file(s)")


@app.command()
def start(
    node_name: str = typer.Option(
        ..., "--node-name", "-n", envvar="NODE_NAME", help="Node to check and taint"
    ),
    config_paths: list[str] = typer.Option(
        ..., "--config", "-c", help="Policy file; repeat for multiple policies"
    ),
    once: bool = typer.Option(False, "--once", help="Run a single cycle and exit"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Log the target taints and labels without updating the node"
    ),
    interval: float = typer.Option(
        300.0, "--interval", min=1.0, help="Seconds between cycles in daemon mode"
    ),
    script_timeout: float = typer.Option(
        10.0, "--script-timeout", min=0.1, help="Seconds each health-check script may run"
    ),
    exec_log: bool = typer.Option(
        False, "--exec-log", envvar="ENABLE_EXEC_LOG", help="Log health-check script output"
    ),
    kubeconfig: str | None = typer.Option(
        None, "--kubeconfig", help="Kubeconfig path; in-cluster config is tried first otherwise"
    ),
    slack_webhook: str | None = typer.Option(
        None, "--slack-webhook", envvar="SLACK_WEBHOOK", help="Slack incoming webhook URL"
    ),
    slack_channel: str | None = typer.Option(
        None, "--slack-channel", envvar="SLACK_CHANNEL", help="Slack channel for notifications"
    ),
) -> None:
    """
    Run health checks against a node and taint or label it.

    Each --config file is a policy: scripts to run, the taints and labels to
    apply when any of them fails, and how many nodes may carry those markers
    at once. Without --once the checks repeat every --interval seconds.

    Examples:
        # Check once without touching the node
        node-tainter start -n worker-1 -c disk.yaml --once --dry-run

        # Run as a daemon with two policies
        node-tainter start -n worker-1 -c disk.yaml -c gpu.yaml
    """
    from node_tainter.cluster import ClusterClient
    from node_tainter.config import load_policies
    from node_tainter.daemon import DaemonLoop
    from node_tainter.notify import build_notifier
    from node_tainter.reconciler import Reconciler
    from node_tainter.scripts import ScriptRunner

    try:
        policies = load_policies(config_paths)
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error:[/red] {e.message}")
        if e.details:
            console.print(f"\n{e.details}")
        raise typer.Exit(code=1)

    try:
        cluster = ClusterClient.from_environment(kubeconfig=kubeconfig)
    except KubernetesError as e:
        console.print(f"[red]Kubernetes Error:[/red] {e.message}")
        if e.details:
            console.print(f"\n{e.details}")
        raise typer.Exit(code=1)

    reconciler = Reconciler(
        cluster,
        policies,
        dry_run=dry_run,
        runner=ScriptRunner(timeout=script_timeout, log_output=exec_log),
        notifier=build_notifier(slack_webhook, slack_channel, dry_run=dry_run),
    )
    loop = DaemonLoop(reconciler, node_name, daemon=not once, interval=interval)

    if once:
        try:
            outcome = loop.run()
        except NodeTainterError as e:
            console.print(f"[red]Error:[/red] {e.message}")
            if e.details:
                console.print(f"\n{e.details}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted by user[/yellow]")
            raise typer.Exit(code=130)
        print_outcome(outcome)
        return

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, stopping after the current cycle")
        loop.stop()

    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)
    loop.run()


def print_outcome(outcome) -> None:
    """Print the result of a single cycle."""
    title = f"Node {outcome.node}"
    if outcome.dry_run:
        title += " (dry run)"
    table = Table(title=title)
    table.add_column("Policy", style="cyan")
    table.add_column("Result")
    for name, result in outcome.results.items():
        table.add_row(name, RESULT_STYLES.get(result.value, result.value))
    console.print(table)

    console.print(f"[bold]Taints:[/bold] {', '.join(str(t) for t in outcome.taints) or '-'}")
    labels = ", ".join(f"{k}={v}" for k, v in sorted(outcome.labels.items()))
    console.print(f"[bold]Labels:[/bold] {labels or '-'}")

    if outcome.written:
        console.print("\n[green]✓[/green] Node updated")
    elif outcome.dry_run and outcome.changed:
        console.print("\n[yellow]Dry run:[/yellow] node would be updated")
    else:
        console.print("\n[green]✓[/green] Node already up to date")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
