"""Command line interface for loomgate."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from loomgate.config import Settings, load_settings
from loomgate.errors import ConfigurationError, GatewayLockError
from loomgate.gateway import SocketListener, listen_gateway_server
from loomgate.logging_utils import configure_logging
from loomgate.replay import sanitize_replay

app = typer.Typer(
    name="loomgate",
    help="Gateway bind retry and provider replay sanitation.",
    add_completion=False,
)


def _load_settings_or_exit(workspace: Path) -> Settings:
    try:
        return load_settings(workspace)
    except ConfigurationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc


async def _serve(settings: Settings) -> None:
    listener = SocketListener()
    await listen_gateway_server(
        listener,
        host=settings.host,
        port=settings.port,
        max_retries=settings.bind_max_retries,
        base_delay=settings.bind_base_delay,
    )
    logger.info("gateway.serve listening on ws://{}:{}", settings.host, listener.bound_port)
    try:
        await listener.serve_forever()
    finally:
        await listener.close()


@app.command()
def serve(
    host: Annotated[str | None, typer.Option(help="Interface to bind")] = None,
    port: Annotated[int | None, typer.Option(help="Port to bind", min=1, max=65535)] = None,
    max_retries: Annotated[int | None, typer.Option(help="Retries while the port is in use", min=0)] = None,
    base_delay_ms: Annotated[int | None, typer.Option(help="First retry delay in milliseconds", min=0)] = None,
    workspace: Annotated[Path, typer.Option("--workspace", "-w", help="Directory holding .env")] = Path("."),
    rich_logs: Annotated[bool, typer.Option("--rich-logs", help="Render logs through rich")] = False,
) -> None:
    """Bind the gateway socket and serve until interrupted."""

    settings = _load_settings_or_exit(workspace.resolve())
    updates: dict[str, object] = {}
    if host is not None:
        updates["host"] = host
    if port is not None:
        updates["port"] = port
    if max_retries is not None:
        updates["bind_max_retries"] = max_retries
    if base_delay_ms is not None:
        updates["bind_base_delay_ms"] = base_delay_ms
    if updates:
        settings = settings.model_copy(update=updates)

    configure_logging(style="rich" if rich_logs else "plain", level=settings.log_level)
    try:
        asyncio.run(_serve(settings))
    except GatewayLockError as exc:
        logger.error("gateway.serve.failed {}", exc)
        raise typer.Exit(1) from exc
    except KeyboardInterrupt:
        logger.info("gateway.serve stopped")


def read_messages(path: Path) -> list[Any]:
    """Read a conversation as a JSON array, or as JSONL with one message per line.

    A file holding a single JSON object on one line is read as one JSONL message.
    """

    text = path.read_text(encoding="utf-8")
    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        messages = json.loads(stripped)
        if not isinstance(messages, list):
            raise ValueError("expected a JSON array of messages")
        return messages
    return [json.loads(line) for line in stripped.splitlines() if line.strip()]


@app.command()
def sanitize(
    path: Annotated[Path, typer.Argument(help="Conversation file (JSON array or JSONL)")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write result here instead of stdout")] = None,
) -> None:
    """Drop orphaned signed reasoning blocks from a stored conversation."""

    try:
        messages = read_messages(path)
    except (OSError, ValueError, RecursionError) as exc:
        typer.echo(f"cannot read conversation {path}: {exc}", err=True)
        raise typer.Exit(2) from exc

    rendered = json.dumps(sanitize_replay(messages), ensure_ascii=False, indent=2)
    if output is None:
        typer.echo(rendered)
        return
    output.write_text(rendered + "\n", encoding="utf-8")


if __name__ == "__main__":
    app()
