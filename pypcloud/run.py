import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer

from pypcloud.native import ConfigError, Metadata, PCloudClient, PCloudError

app = typer.Typer()


def _run(ctx: typer.Context, operation):
    """Open a client, run an async operation with it and close it again."""

    async def main():
        client = await PCloudClient.from_config(ctx.obj["config"])
        async with client:
            return await operation(client)

    try:
        return asyncio.run(main())
    except (ConfigError, PCloudError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


def _print_tree(item: Metadata, indent: int = 0):
    suffix = "/" if item.isfolder else ""
    size = "" if item.isfolder else f"  {item.size}"
    typer.echo(f"{'  ' * indent}{item.name}{suffix}{size}")
    for child in item.contents:
        _print_tree(child, indent + 1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="Path to the config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests"),
):
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
    else:
        logging.basicConfig(level=logging.WARNING)


@app.command()
def ls(
    ctx: typer.Context,
    path: str = typer.Argument("/"),
    recursive: bool = typer.Option(False, "--recursive", "-r"),
):
    """List the contents of a folder."""
    folder = _run(
        ctx, lambda client: client.list_folder(path).recursive(recursive).get()
    )
    if folder.metadata is not None:
        for item in folder.metadata.contents:
            _print_tree(item)


@app.command()
def stat(ctx: typer.Context, path: str):
    """Show the metadata of a file."""
    metadata = _run(ctx, lambda client: client.get_file_metadata(path))
    typer.echo(metadata.model_dump_json(indent=2, exclude_none=True))


@app.command()
def link(ctx: typer.Context, path: str):
    """Print a download link for a file."""
    download = _run(ctx, lambda client: client.get_download_link_for_file(path).get())
    typer.echo(download.url)


@app.command()
def checksum(ctx: typer.Context, path: str):
    """Print the checksums of a file."""
    checksums = _run(ctx, lambda client: client.checksum_file(path).get())
    for name in ("sha1", "md5", "sha256"):
        value = getattr(checksums, name)
        if value:
            typer.echo(f"{name}  {value}")


if __name__ == "__main__":
    app()
