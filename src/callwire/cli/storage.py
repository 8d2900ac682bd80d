"""Storage commands."""

import asyncio
from pathlib import Path

import click
from rich.console import Console

from ..client import CallwireConfig, StorageTransport, TransportError, create_storage_transport

console = Console()


def _storage() -> StorageTransport:
    try:
        transport = create_storage_transport(CallwireConfig())
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise click.Abort()
    if transport is None:
        console.print("[red]Storage is not configured.[/red] Set CALLWIRE_STORAGE=s3")
        raise click.Abort()
    return transport


@click.group()
def storage():
    """Upload, download and delete stored objects."""
    pass


@storage.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("path")
def upload(file: Path, path: str):
    """Upload FILE to PATH."""
    transport = _storage()
    try:
        url = asyncio.run(transport.upload(file.read_bytes(), path))
    except TransportError as e:
        console.print(f"[red]Upload failed:[/red] {e}")
        raise click.Abort()
    console.print(f"[green]Uploaded[/green] {file} -> {path}")
    console.print(url)


@storage.command()
@click.argument("path")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="Write to file instead of stdout")
def download(path: str, output: Path | None):
    """Download the object at PATH."""
    transport = _storage()
    try:
        data = asyncio.run(transport.download(path))
    except TransportError as e:
        console.print(f"[red]Download failed:[/red] {e}")
        raise click.Abort()

    if output:
        output.write_bytes(data)
        console.print(f"[green]Saved[/green] {len(data)} bytes to {output}")
    else:
        click.echo(data, nl=False)


@storage.command()
@click.argument("path")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete(path: str, yes: bool):
    """Delete the object at PATH."""
    if not yes:
        click.confirm(f"Delete {path}?", abort=True)

    transport = _storage()
    try:
        asyncio.run(transport.delete(path))
    except TransportError as e:
        console.print(f"[red]Delete failed:[/red] {e}")
        raise click.Abort()
    console.print(f"[green]Deleted[/green] {path}")
