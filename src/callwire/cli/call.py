"""Request command."""

import asyncio
import json
from typing import Any

import click
from rich.console import Console

from ..client import (
    CallwireConfig,
    ExecutionError,
    HTTPMethod,
    RawJSON,
    Request,
    RequestExecutor,
    RetryPolicy,
    TransportRegistry,
    configure_from_config,
)

console = Console()


def parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    """Parse NAME:VALUE header options."""
    headers = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME:VALUE, got '{value}'", param_hint="--header")
        headers[name.strip()] = content.strip()
    return headers


async def _run(registry: TransportRegistry, request: Request, retry: RetryPolicy) -> Any:
    try:
        return await RequestExecutor(registry).execute(request, retry)
    finally:
        close = getattr(registry.get_active_network(), "close", None)
        if close is not None:
            await close()


@click.command()
@click.argument("method", type=click.Choice([m.value for m in HTTPMethod], case_sensitive=False))
@click.argument("path")
@click.option("--data", "-d", help="JSON request body")
@click.option("--header", "-H", "headers", multiple=True, help="Header as NAME:VALUE (repeatable)")
@click.option("--retries", type=click.IntRange(min=1), help="Max attempts (default from config)")
@click.option("--json", "as_json", is_flag=True, help="Output raw JSON")
def call(method: str, path: str, data: str | None, headers: tuple[str, ...],
         retries: int | None, as_json: bool):
    """Send METHOD PATH through the configured transport."""
    body = None
    if data is not None:
        try:
            json.loads(data)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--data")
        body = RawJSON(data.encode("utf-8"))

    config = CallwireConfig()
    retry = config.retry_policy
    if retries is not None:
        retry = RetryPolicy(
            max_attempts=retries,
            base_delay=retry.base_delay,
            max_delay=retry.max_delay,
        )

    request: Request[Any, Any] = Request(
        path=path,
        method=HTTPMethod(method.upper()),
        body=body,
        headers=parse_headers(headers) or None,
        success_type=Any,
        error_type=dict[str, Any],
    )

    try:
        registry = configure_from_config(config, registry=TransportRegistry())
        result = asyncio.run(_run(registry, request, retry))
    except ExecutionError as e:
        if as_json:
            console.print_json(json.dumps(_error_json(e)))
        else:
            console.print(f"[red]{e.kind}:[/red] {e}")
            if getattr(e, "error", None) is not None:
                console.print_json(json.dumps(e.error))
        raise click.Abort()
    except (ValueError, ImportError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise click.Abort()

    if result is None:
        if not as_json:
            console.print("[green]OK[/green] (no content)")
        else:
            console.print("null")
        return

    console.print_json(json.dumps(result))


def _error_json(error: ExecutionError) -> dict[str, Any]:
    output: dict[str, Any] = {"kind": error.kind, "message": str(error)}
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        output["status_code"] = status_code
    if getattr(error, "error", None) is not None:
        output["error"] = error.error
    return output
