
"""CLI implementation for fetcheither."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import typer

from . import fetch_either, fetch_either_sync, close_global_client
from .config import get_settings
from .core.logging import configure_logging
from .core.model import Result
from .core.util import result_asdict

app = typer.Typer(add_completion=False, help="Fetch URLs and report (error, value) results as JSON.")


def iter_sources(urls: list[str]) -> list[str]:
    """Get list of URLs from the arguments or stdin."""
    if "-" in urls:
        # stdin mode
        return [ln.strip() for ln in sys.stdin if ln.strip()]
    elif urls:
        return list(urls)
    return []


def parse_headers(raw: list[str]) -> dict[str, str]:
    """Turn ``Name: value`` strings into a header dict."""
    headers = {}
    for item in raw:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected 'Name: value', got {item!r}", param_hint="--header")
        headers[name.strip()] = value.strip()
    return headers


async def _batch_fetch(urls: list[str], options: dict) -> list[Result]:
    """Fetch all URLs concurrently."""
    try:
        return list(await asyncio.gather(*(fetch_either(url, options) for url in urls)))
    finally:
        await close_global_client()


@app.command()
def main(
    urls: list[str] = typer.Argument(None, help="URLs to fetch, or '-' for stdin"),
    method: str = typer.Option("GET", "-X", "--method", help="HTTP method"),
    header: Optional[list[str]] = typer.Option(None, "-H", "--header", help="Request header 'Name: value' (repeatable)"),
    data: Optional[str] = typer.Option(None, "-d", "--data", help="Request body"),
    jsonl: bool = typer.Option(False, "--jsonl", help="Force JSON-lines output"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    sync: bool = typer.Option(False, "--sync", help="Force synchronous I/O"),
    stack: bool = typer.Option(False, "--stack", help="Include tracebacks in error output"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level for diagnostics on stderr"),
):
    """Fetch one or many URLs and print each result."""
    try:
        configure_logging(log_level or get_settings().log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")
    sources = iter_sources(urls or [])

    if not sources:
        typer.echo("No URLs given.", err=True)
        raise typer.Exit(code=1)

    options: dict = {"method": method.upper()}
    if header:
        options["headers"] = parse_headers(header)
    if data is not None:
        # httpx takes raw bodies as content=, requests as data=
        options["data" if sync else "content"] = data.encode("utf-8")

    if sync:
        results = [fetch_either_sync(url, options) for url in sources]
    else:
        results = asyncio.run(_batch_fetch(sources, options))

    # open output sink
    sink = open(output, "w", encoding="utf-8") if output else sys.stdout
    try:
        if len(sources) == 1 and not jsonl:
            json.dump(result_asdict(results[0], include_stack=stack), sink, indent=2)
            sink.write("\n")
        else:
            for res in results:
                sink.write(json.dumps(result_asdict(res, include_stack=stack)))
                sink.write("\n")
    finally:
        if output:
            sink.close()

    # exit code
    if any(not r.success for r in results):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
