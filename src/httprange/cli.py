"""CLI implementation for httprange."""

import asyncio
import base64
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from . import open_reader, open_reader_async, DEFAULT_MIN_FETCH_SIZE
from .core.util import stats_asdict
from .io import close_global_client, open_fetcher, open_fetcher_async

app = typer.Typer(add_completion=False, help="Fetch byte ranges from URLs and files through a buffered range reader.")


def iter_sources(files: list[str]) -> list[str]:
    """Get list of sources from files argument or stdin."""
    if "-" in files:
        # stdin mode
        return [ln.strip() for ln in sys.stdin if ln.strip()]
    elif files:
        return list(files)
    return []


def _payload(source: str, offset: int, data: bytes, reader) -> Dict[str, Any]:
    payload = {
        "success": True,
        "source": source,
        "offset": offset,
        "length": len(data),
        "data_b64": base64.b64encode(data).decode(),
    }
    payload.update(stats_asdict(reader.stats))
    return payload


def _failure(source: str, error: Exception) -> Dict[str, Any]:
    return {"success": False, "source": source, "error": str(error)}


def _fetch_sync(source: str, offset: int, length: int, min_fetch_size: int) -> Dict[str, Any]:
    with open_fetcher(source) as fetcher, open_reader(source, min_fetch_size=min_fetch_size, fetcher=fetcher) as reader:
        reader.seek(offset)
        data = reader.read(length)
        return _payload(source, offset, data, reader)


async def _fetch_async(source: str, offset: int, length: int, min_fetch_size: int) -> Dict[str, Any]:
    async with open_fetcher_async(source) as fetcher:
        async with await open_reader_async(source, min_fetch_size=min_fetch_size, fetcher=fetcher) as reader:
            await reader.seek(offset)
            data = await reader.read(length)
            return _payload(source, offset, data, reader)


async def _batch_fetch(sources: list[str], offset: int, length: int, min_fetch_size: int) -> list[Dict[str, Any]]:
    """Asynchronously fetch the same range from a list of sources."""
    tasks = [_fetch_async(src, offset, length, min_fetch_size) for src in sources]
    try:
        results = await asyncio.gather(*tasks, return_exceptions=True)
    finally:
        await close_global_client()
    return [
        _failure(src, res) if isinstance(res, Exception) else res
        for src, res in zip(sources, results)
    ]


@app.command()
def main(
    files: list[str] = typer.Argument(None, help="Files or URLs to read, or '-' for stdin"),
    offset: int = typer.Option(0, "--offset", min=0, help="Absolute start offset"),
    length: int = typer.Option(16, "--length", min=0, help="Number of bytes to read"),
    min_fetch_size: int = typer.Option(DEFAULT_MIN_FETCH_SIZE, "--min-fetch-size", min=0, help="Minimal size of each range request"),
    jsonl: bool = typer.Option(False, "--jsonl", help="Force JSON-lines output"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    sync: bool = typer.Option(False, "--sync", help="Force synchronous I/O"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log every range request to stderr"),
):
    """Read LENGTH bytes at OFFSET from one or many local paths or URLs."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="[%(asctime)s] [%(levelname)s] - %(message)s")

    sources = iter_sources(files or [])
    if not sources:
        typer.echo("No input files given.", err=True)
        raise typer.Exit(code=1)

    results: list[Dict[str, Any]] = []
    if sync:
        for src in sources:
            try:
                results.append(_fetch_sync(src, offset, length, min_fetch_size))
            except Exception as e:
                results.append(_failure(src, e))
    else:
        results = asyncio.run(_batch_fetch(sources, offset, length, min_fetch_size))

    # open output sink
    sink = open(output, "w", encoding="utf-8") if output else sys.stdout
    try:
        if len(sources) == 1 and not jsonl:
            json.dump(results[0], sink, indent=2)
            sink.write("\n")
        else:
            for res in results:
                sink.write(json.dumps(res))
                sink.write("\n")
    finally:
        if output:
            sink.close()

    if any(not r["success"] for r in results):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
