"""Command line entry point for flume-handler.

Operator helpers for checking a collector before wiring the handler into
an application.

Commands:
    check - Connect to a collector and report whether it accepts events
    send  - Send one log record through a FlumeHandler
"""

from __future__ import annotations

__all__ = ["cli"]

import logging
import sys

import click

from flume_handler import __version__
from flume_handler.config import AppenderConfig
from flume_handler.constants import APP_NAME, DEFAULT_PORT
from flume_handler.exceptions import ConnectError, DeliveryError
from flume_handler.handler import FlumeHandler
from flume_handler.transport import ClientFactory, connect

LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _style_success(message: str) -> str:
    return click.style(f"✓ {message}", fg="green")


def _style_error(message: str) -> str:
    return click.style(f"✗ {message}", fg="red")


def _client_factory(ctx: click.Context) -> ClientFactory:
    """Client factory from the context object, defaulting to the HTTP client."""
    return ctx.obj.get("client_factory", connect)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-v", prog_name=APP_NAME)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """flume-handler: forward Python log records to a Flume agent."""
    ctx.ensure_object(dict)


@cli.command()
@click.option("--host", required=True, help="Collector host")
@click.option("--port", type=click.IntRange(1, 65535), default=DEFAULT_PORT, show_default=True)
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=5.0, show_default=True)
@click.pass_context
def check(ctx: click.Context, host: str, port: int, timeout: float) -> None:
    """Connect to a collector and perform the handshake.

    Examples:
        flume-handler check --host collector.local
    """
    try:
        config = AppenderConfig.from_options(
            {"host": host, "port": port, "connect_timeout": timeout, "request_timeout": timeout}
        )
        client = _client_factory(ctx)(config)
    except ConnectError as e:
        click.echo(_style_error(str(e)), err=True)
        sys.exit(1)
    client.close()
    click.echo(_style_success(f"Collector at {config.address} accepts events"))


@cli.command()
@click.argument("message")
@click.option("--host", required=True, help="Collector host")
@click.option("--port", type=click.IntRange(1, 65535), default=DEFAULT_PORT, show_default=True)
@click.option("--level", type=click.Choice(LEVEL_CHOICES, case_sensitive=False), default="INFO", show_default=True)
@click.option("--logger", "logger_name", default=APP_NAME, show_default=True, help="Logger name header")
@click.option("--type", "event_type", default="", help="Event type tag")
@click.option("--format", "event_format", default="", help="Event format tag")
@click.option("--event-version", "event_version", default="", help="Event version tag")
@click.pass_context
def send(
    ctx: click.Context,
    message: str,
    host: str,
    port: int,
    level: str,
    logger_name: str,
    event_type: str,
    event_format: str,
    event_version: str,
) -> None:
    """Send MESSAGE to a collector as one log event.

    Examples:
        flume-handler send "deploy finished" --host collector.local --type audit
    """
    handler = FlumeHandler(
        host,
        port,
        type=event_type,
        format=event_format,
        version=event_version,
        client_factory=_client_factory(ctx),
    )
    try:
        if not handler.channel.configured:
            click.echo(_style_error(f"Could not connect to {host}:{port}"), err=True)
            sys.exit(1)

        record = logging.LogRecord(
            name=logger_name,
            level=logging.getLevelName(level.upper()),
            pathname=__file__,
            lineno=0,
            msg=message,
            args=None,
            exc_info=None,
        )
        try:
            handler.channel.append(record)
        except DeliveryError as e:
            click.echo(_style_error(str(e)), err=True)
            sys.exit(1)
    finally:
        handler.close()

    click.echo(_style_success(f"Sent event to {host}:{port}"))


def main() -> None:
    """Console script entry point."""
    cli()
