# sfdc_tool/cli/main.py
"""Main CLI entry point for sfdc-tool"""

import sys
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ..constants import APP_NAME, LOG_FORMAT
from ..api.client import SFDCClient
from ..models.config import ClientConfig
from ..services.config_service import ConfigService

# Import all commands
from .commands import (
    manifest,
    retrieve,
    deploy,
    listing,
    query,
    execute,
)

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy configuration and client

    Commands that only work on local files never load the configuration
    file or log in; the client is created on first access.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize CLI context"""
        self.config_path = config_path
        self.verbose: bool = False
        self.debug: bool = False
        self._config: Optional[ClientConfig] = None
        self._client: Optional[SFDCClient] = None

    @property
    def config(self) -> ClientConfig:
        """Get client configuration (lazy loading)"""
        if self._config is None:
            self._config = ConfigService(self.config_path).load_config()
            if self.debug:
                console.print(f"[dim]Configuration: {self.config_path or 'default'}[/dim]")
        return self._config

    @property
    def client(self) -> SFDCClient:
        """Get the org client (lazy loading)"""
        if self._client is None:
            self._client = SFDCClient(self.config)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file (default: .sfdc-tool.yaml)')
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_path):
    """sfdc-tool - Retrieve, deploy and query Salesforce orgs

    Credentials are read from .sfdc-tool.yaml in the current directory,
    and can be overridden with SFDC_USERNAME, SFDC_PASSWORD, SFDC_URL
    and SFDC_API_VERSION.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    # Create context with lazy initialization
    ctx.obj = Context(config_path)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    ctx.call_on_close(ctx.obj.close)


# Register commands
cli.add_command(manifest.manifest)
cli.add_command(retrieve.retrieve)
cli.add_command(deploy.deploy)
cli.add_command(listing.list_metadata)
cli.add_command(query.query)
cli.add_command(execute.execute)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Auto-help for incomplete commands
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        # Handle help for incomplete commands
        if len(sys.argv) == 2 and sys.argv[1] in ['manifest']:
            sys.argv.append('--help')

        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
