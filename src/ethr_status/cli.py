"""
Command-line interface for ethr-status.

Usage:
    ethr-status credential.json
    ethr-status --config chains.toml https://example.com/credentials/123
    echo "$JWT" | ethr-status -
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
import httpx
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ethr_status.config import ConfigFileNotFoundError, StatusSettings
from ethr_status.extractor import MalformedStatusEntryError, extract_status_entry
from ethr_status.resolver import (
    ConfigurationError,
    RegistryAddressError,
    StatusResult,
)


console = Console()


def format_result(result: StatusResult, credential: Any) -> None:
    """Format and print a status check result."""
    if result.revoked:
        status_icon = "[bold red]REVOKED[/]"
        panel_style = "red"
    elif result.message:
        status_icon = "[bold yellow]NO STATUS[/]"
        panel_style = "yellow"
    else:
        status_icon = "[bold green]NOT REVOKED[/]"
        panel_style = "green"

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Status", status_icon)

    entry = extract_status_entry(credential)
    if entry is not None:
        if entry.id:
            table.add_row("Status ID", str(entry.id))
        table.add_row("Chain", str(entry.chain_id) if entry.chain_id is not None else "default")
        table.add_row("Registry", entry.registry or "default")
        table.add_row("Namespace", str(entry.namespace))
        table.add_row("Revocation List", str(entry.revocation_list))
        table.add_row("Revocation Key", str(entry.revocation_key))

    if result.message:
        table.add_row("Message", result.message)

    console.print(Panel(table, title="Revocation Status", border_style=panel_style))


def load_credential(source: str, timeout: float = 30.0) -> Any:
    """Load credential from file, URL, or stdin.

    JSON content is parsed; anything else (a JWT) is returned as a string.

    Args:
        source: File path, URL, or "-" for stdin.
        timeout: HTTP request timeout in seconds.

    Returns:
        The parsed credential or the raw token.
    """
    if source == "-":
        content = sys.stdin.read()
    elif source.startswith("http://") or source.startswith("https://"):
        with httpx.Client(timeout=timeout) as client:
            response = client.get(
                source,
                headers={"Accept": "application/vc+ld+json, application/json, application/jwt"},
            )
            response.raise_for_status()
            content = response.text
    else:
        path = Path(source)
        if not path.exists():
            raise click.ClickException(f"File not found: {source}")
        content = path.read_text()

    content = content.strip()
    try:
        return json.loads(content)
    except ValueError:
        return content


@click.command()
@click.argument("source", required=True)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Resolver configuration file (TOML)",
)
@click.option(
    "--json-output",
    is_flag=True,
    help="Output result as JSON",
)
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    help="HTTP request timeout in seconds",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="ethr-status")
def main(
    source: str,
    config_path: str | None,
    json_output: bool,
    timeout: float,
    verbose: bool,
) -> None:
    """Check the revocation status of a credential.

    SOURCE can be:
    - A file path (e.g., credential.json or credential.jwt)
    - A URL (e.g., https://example.com/credentials/123)
    - "-" to read from stdin

    Examples:

        ethr-status credential.json

        ethr-status --config chains.toml https://example.com/credentials/123

        echo "$JWT" | ethr-status -
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        credential = load_credential(source, timeout=timeout)
        settings = StatusSettings.from_config_file(config_path)
        registry = settings.build_registry()

        result = asyncio.run(registry.check_status(credential))

        if json_output:
            console.print_json(data=result.to_dict())
        else:
            format_result(result, credential)

        sys.exit(1 if result.revoked else 0)

    except MalformedStatusEntryError as e:
        _fail(f"Malformed credentialStatus: {e}", json_output)

    except (ConfigurationError, ConfigFileNotFoundError, ValidationError) as e:
        _fail(f"Configuration error: {e}", json_output)

    except RegistryAddressError as e:
        _fail(f"{e}: {e.__cause__}", json_output)

    except httpx.HTTPError as e:
        _fail(f"HTTP error: {e}", json_output)

    except click.ClickException as e:
        _fail(e.format_message(), json_output)

    except Exception as e:
        _fail(str(e), json_output)


def _fail(message: str, json_output: bool) -> None:
    if json_output:
        console.print_json(data={"error": message})
    else:
        console.print(f"[red]Error:[/] {message}")
    sys.exit(2)


if __name__ == "__main__":
    main()
