"""CLI orchestration: wires config, file resolution and the Crowdin client together."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

import httpx
from rich.console import Console
from rich.logging import RichHandler

from crowdin_client.api import CrowdinClient
from crowdin_client.config import Configuration, ProjectCredentials, load_configuration
from crowdin_client.files import build_file_set, split_file_list

console = Console()

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """Outcome of a single remote call."""

    success: bool
    message: str

    @property
    def exit_code(self) -> int:
        """Process exit code for this result."""
        return 0 if self.success else 1


def setup_logging() -> None:
    """Configure logging with rich handler for colored, readable output."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    # Request lines carry the project key in the query string.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _print_body(text: str) -> None:
    """Print a response body verbatim, without rich markup."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _result_from(response: httpx.Response) -> OperationResult:
    """Build an OperationResult from an HTTP response."""
    return OperationResult(success=response.is_success, message=response.text)


async def update_files(
    config: Configuration,
    paths: Sequence[str],
    client: CrowdinClient,
    update_option: str | None = None,
) -> int:
    """Update existing project files in Crowdin.

    Uses ``paths`` when given, otherwise the ``files`` list from configuration.

    Args:
        config: Merged configuration.
        paths: Explicit file paths from the command line.
        client: Crowdin API client.
        update_option: Optional Crowdin ``update_option`` value.

    Returns:
        0 if Crowdin accepted the update, 1 otherwise.
    """
    if not paths:
        paths = split_file_list(config.get_string("files"))
    file_set = build_file_set(paths)

    credentials = config.bind("project", ProjectCredentials)
    console.print("Updating files...")
    response = await client.update_file(
        credentials.project_id, credentials, file_set, update_option
    )
    result = _result_from(response)

    if result.success:
        console.print("[green]Finished Updating files.[/green]")
    else:
        console.print("[red]Failure updating files.[/red]")
        _print_body(result.message)
    return result.exit_code


async def add_files(
    config: Configuration,
    paths: Sequence[str],
    client: CrowdinClient,
) -> int:
    """Add new files to the Crowdin project.

    Only explicit ``paths`` are uploaded; the configured file list is not used.

    Returns:
        0 if Crowdin accepted the files, 1 otherwise.
    """
    file_set = build_file_set(paths)

    credentials = config.bind("project", ProjectCredentials)
    console.print("Adding files")
    response = await client.add_file(credentials.project_id, credentials, file_set)
    result = _result_from(response)

    console.print("Done adding files")
    _print_body(result.message)
    return result.exit_code


async def _run_async(
    command: str,
    config: Configuration,
    paths: Sequence[str],
    update_option: str | None,
    transport: httpx.AsyncBaseTransport | None,
) -> int:
    """Open the client and dispatch to the selected operation."""
    async with CrowdinClient(config.get_string("api"), transport=transport) as client:
        if command == "updatefiles":
            return await update_files(config, paths, client, update_option)
        if command == "addfiles":
            return await add_files(config, paths, client)
    raise ValueError(f"Unknown command: {command}")


def run(
    command: str,
    paths: Sequence[str] = (),
    settings_path: str = "appsettings.json",
    overrides: Mapping[str, str] | None = None,
    update_option: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Main synchronous entry point for the CLI.

    Loads configuration and runs the selected operation to completion
    before returning.

    Args:
        command: ``updatefiles`` or ``addfiles``.
        paths: File paths passed with ``--file``.
        settings_path: Path to the optional JSON settings file.
        overrides: Configuration values given on the command line.
        update_option: Optional Crowdin ``update_option`` for updatefiles.
        transport: Optional httpx transport, used to stub the API.

    Returns:
        Process exit code.
    """
    setup_logging()

    try:
        config = load_configuration(settings_path, overrides=overrides)
        logger.info("Configuration loaded from %s", settings_path)
        logger.info("Using Crowdin API at %s", config.get_string("api"))

        return asyncio.run(
            _run_async(command, config, list(paths), update_option, transport)
        )

    except FileNotFoundError as e:
        console.print(f"[red bold]Error:[/red bold] {e}")
        raise SystemExit(1)
    except ValueError as e:
        console.print(f"[red bold]Configuration error:[/red bold] {e}")
        raise SystemExit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user.[/yellow]")
        raise SystemExit(130)
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        raise SystemExit(1)
