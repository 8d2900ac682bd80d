"""Configuration summary command."""

import click
from rich.console import Console
from rich.table import Table

from ..client import CallwireConfig

console = Console()


def _target(config: CallwireConfig) -> str:
    transport = config.resolved_transport
    if transport == "lambda":
        return config.lambda_function_name or "(unset)"
    if transport == "firestore":
        root = f"/{config.firestore_root_path}" if config.firestore_root_path else ""
        return f"{config.firestore_project or '(default project)'}{root}"
    return config.api_url


@click.command()
def info():
    """Show the resolved transport configuration."""
    config = CallwireConfig()
    policy = config.retry_policy

    table = Table(show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("Transport", config.resolved_transport)
    table.add_row("Target", _target(config))
    if config.resolved_transport == "http":
        table.add_row("OAuth", "enabled" if config.oauth_enabled else "disabled")
    if config.storage == "s3":
        table.add_row("Storage", f"s3://{config.s3_bucket or '(unset)'}/{config.s3_prefix}")
    else:
        table.add_row("Storage", "none")
    cap = f", max {policy.max_delay}s" if policy.max_delay is not None else ""
    table.add_row("Retry", f"{policy.max_attempts} attempts, base {policy.base_delay}s{cap}")

    console.print(table)

    try:
        config.validate_config()
    except ValueError as e:
        console.print(f"[yellow]Warning:[/yellow] {e}")
