"""Command line entry point for the guest directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import httpx
import typer
import uvicorn

from app.core.config import settings
from app.core.errors import NetworkError
from app.services.media_cache import MediaCache

logger = logging.getLogger(__name__)

cli = typer.Typer(help="Wedding guest directory tools.")


def fetch_manifest(client: httpx.Client, server: str) -> list[str]:
    try:
        response = client.get(f"{server.rstrip('/')}/manifest/all")
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise NetworkError(f"Could not load media manifest: {e}") from e
    return list(response.json().get("urls", []))


@cli.command()
def prefetch(
    server: str = typer.Option(settings.BASE_URL, help="Base URL of the running directory."),
    cache_dir: Path = typer.Option(Path(".media-cache"), help="Where cached media is kept."),
    storage_base: Optional[str] = typer.Option(None, help="Public object storage base URL."),
) -> None:
    """Download every photo and audio clip into the offline media cache."""
    logging.basicConfig(level=logging.INFO)
    cache = MediaCache(cache_dir, settings.MEDIA_CACHE_NAME, storage_base or settings.storage_public_base)
    cache.activate()

    with httpx.Client(timeout=30.0, follow_redirects=True) as client:
        try:
            urls = fetch_manifest(client, server)
        except NetworkError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(code=1)

        failed = 0
        for url in urls:
            try:
                cache.fetch(url, client)
            except NetworkError as e:
                failed += 1
                logger.warning(str(e))

    typer.echo(f"Cached {len(urls) - failed} of {len(urls)} media files in {cache.directory}")
    if failed:
        raise typer.Exit(code=1)


@cli.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the web application."""
    uvicorn.run("main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
