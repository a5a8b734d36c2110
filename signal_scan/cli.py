"""Command-line entry point.

``signal-scan watch IDENTIFIER`` polls the public results API for one
report and prints the results-page copy each time it changes.  The exit
code is 0 when the report is ready, 1 for every other final state, and
2 for invalid configuration or a blank identifier.

All business logic lives in the ``signal_scan`` package.  This module is
purely the wiring layer between the terminal and the watcher.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging

import typer

from signal_scan.clients.http import HttpStatusClient
from signal_scan.core.config import ConfigValidationError, PollerConfig
from signal_scan.models.session import ModelValidationError, SessionSnapshot, SessionState
from signal_scan.poller.lifecycle import ReportWatcher
from signal_scan.views import StatusView, describe

app = typer.Typer(add_completion=False, help="Signal scan report tools.")

logger = logging.getLogger("signal_scan.cli")


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level."),
) -> None:
    """Signal scan report tools."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command()
def watch(
    identifier: str = typer.Argument(..., help="Public report identifier."),
    api_base_url: str = typer.Option(
        "",
        "--api-base-url",
        envvar="SIGNAL_SCAN_API_BASE_URL",
        help="Base URL of the results API.",
    ),
    show_progress: bool = typer.Option(
        False, "--progress/--no-progress", help="Print progress estimate updates."
    ),
) -> None:
    """Poll a report until it is ready, failed, or missing."""
    try:
        config = PollerConfig.from_env()
    except ConfigValidationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    if api_base_url:
        config = dataclasses.replace(config, api_base_url=api_base_url)
    if not config.api_base_url:
        typer.echo("An API base URL is required (--api-base-url or SIGNAL_SCAN_API_BASE_URL).", err=True)
        raise typer.Exit(code=2)

    try:
        final = asyncio.run(_watch(identifier, config, show_progress=show_progress))
    except ModelValidationError as exc:
        typer.echo(f"Invalid report identifier: {identifier!r}", err=True)
        raise typer.Exit(code=2) from exc
    raise typer.Exit(code=0 if final is not None and final.state is SessionState.READY else 1)


async def _watch(
    identifier: str,
    config: PollerConfig,
    *,
    show_progress: bool,
) -> SessionSnapshot | None:
    last: list[StatusView] = []

    def _render(snapshot: SessionSnapshot) -> None:
        view = describe(snapshot)
        if last and last[-1] == view:
            if show_progress and snapshot.state.is_in_flight:
                typer.echo(f"  {snapshot.progress}%")
            return
        last.append(view)
        typer.echo(view.title)
        if view.body:
            typer.echo(view.body)

    async with HttpStatusClient(config) as client:
        with ReportWatcher(client.fetch_status, config=config) as watcher:
            watcher.subscribe(_render)
            watcher.start(identifier)
            final = await watcher.wait_settled()
            await watcher.wait_idle()

    logger.info(
        "watch finished | identifier=%s | state=%s",
        identifier,
        final.state.value if final is not None else "none",
    )
    return final
