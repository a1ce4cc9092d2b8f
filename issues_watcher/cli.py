"""
issues-watcher CLI - Snapshot open issues and project boards, relay a summary.

Usage:
    issues-watcher -c config.toml              Build a snapshot and report it
    issues-watcher -c config.toml --ping TEXT  Send TEXT to the Slack channel
"""

import asyncio
import logging
import sys

import click

from issues_watcher import __version__
from issues_watcher.async_client import AsyncWatcherClient
from issues_watcher.client import WatcherClient
from issues_watcher.config import Config
from issues_watcher.exceptions import WatcherError
from issues_watcher.logging import configure_logging
from issues_watcher.relay import SlackRelay
from issues_watcher.report import render_report
from issues_watcher.types.snapshot import Snapshot


def _snapshot_sync(config: Config) -> tuple[str, Snapshot]:
    with WatcherClient.from_config(config) as client:
        client.resolve_project_ids()
        user = client.get_current_user()
        return user, client.build_snapshot()


async def _snapshot_async(
    config: Config, concurrency: int, timeout: float | None
) -> tuple[str, Snapshot]:
    async with AsyncWatcherClient.from_config(config, max_concurrency=concurrency) as client:
        user = await client.get_current_user()
        return user, await client.build_snapshot(deadline=timeout)


def _relay(config: Config, text: str) -> None:
    with SlackRelay(config.slack_token) as relay:
        relay.send_message(config.slack_channel, text)


@click.command()
@click.version_option(version=__version__)
@click.option(
    "-c", "--config", "config_path",
    default="config.toml", show_default=True,
    type=click.Path(dir_okay=False),
    help="TOML configuration file",
)
@click.option("-p", "--ping", default=None, help="Send this text to the Slack channel and exit")
@click.option(
    "--concurrency", default=1, show_default=True, type=click.IntRange(min=1),
    help="Requests in flight; above 1 repositories and boards are fetched concurrently",
)
@click.option(
    "--timeout", default=None, type=float,
    help="Deadline in seconds for a concurrent snapshot",
)
@click.option("-v", "--verbose", is_flag=True, help="Log API requests")
def main(
    config_path: str,
    ping: str | None,
    concurrency: int,
    timeout: float | None,
    verbose: bool,
) -> None:
    """Report open issues and project boards of the configured repositories."""
    if verbose:
        configure_logging(level=logging.DEBUG, http_level=logging.DEBUG)

    try:
        config = Config.from_file(config_path)

        if ping is not None:
            if not config.slack_enabled:
                click.echo("Slack is not configured (slack-token, slack-channel)", err=True)
                sys.exit(1)
            _relay(config, ping)
            return

        if concurrency > 1 or timeout is not None:
            user, snapshot = asyncio.run(_snapshot_async(config, concurrency, timeout))
        else:
            user, snapshot = _snapshot_sync(config)

        click.echo(f"Current user: {user}")
        report = render_report(snapshot, config.issue_filter)

        if config.slack_enabled and snapshot.issue_count:
            _relay(config, report)
            click.echo(f"Sent report to {config.slack_channel}")
        elif report:
            click.echo(report)
        else:
            click.echo("Nothing to report.")
    except WatcherError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
