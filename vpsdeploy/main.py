#!/usr/bin/env python3
"""vpsdeploy CLI - Main entry point"""

import functools
import os
import sys
from pathlib import Path

import rich_click as click
from rich.console import Console

from vpsdeploy import __version__
from vpsdeploy.commands import CleanupCommand, CleanupOptions, DeployCommand, DeployOptions
from vpsdeploy.constants import ENV_LOG_DIR, ExitCode

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = False
click.rich_click.MAX_WIDTH = 100

# OPTIONS: Bold magenta
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"

# HEADERS: Bold cyan
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_USAGE = "bold yellow"
click.rich_click.STYLE_USAGE_COMMAND = "bold cyan"
click.rich_click.STYLE_HELPTEXT_FIRST_LINE = "bold white"

# METAVARS / DEFAULTS
click.rich_click.STYLE_METAVAR = "bold yellow"
click.rich_click.STYLE_OPTION_DEFAULT = "dim cyan"
click.rich_click.STYLE_OPTIONS_PANEL_BORDER = "cyan"
click.rich_click.ALIGN_OPTIONS_PANEL = "left"
click.rich_click.ERRORS_EPILOGUE = ""

console = Console()


def handle_cli_errors(func):
    """Decorator to handle CLI errors gracefully."""
    from click.exceptions import ClickException

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClickException as e:
            e.show()
            sys.exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            sys.exit(ExitCode.INTERRUPTED)
        except SystemExit:
            raise
        except Exception as e:
            console.print(f"\n[bold red]✗ Unexpected error:[/bold red] {e}\n")
            if os.environ.get("DEBUG"):
                import traceback

                console.print("[dim]Traceback:[/dim]")
                traceback.print_exc()
            sys.exit(ExitCode.UNEXPECTED)

    return wrapper


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--cleanup", is_flag=True, help="Remove a previous deployment instead of deploying")
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Dotenv file with VPSDEPLOY_* parameter overrides",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=ENV_LOG_DIR,
    default=".",
    show_default=True,
    help="Directory for the deploy_<timestamp>.log file",
)
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
@click.version_option(version=__version__, prog_name="vpsdeploy")
@handle_cli_errors
def cli(cleanup: bool, env_file, log_dir, verbose: bool) -> None:
    """
    Deploy a Dockerized git repository to a remote Linux host.

    \b
    Parameters are read from VPSDEPLOY_* environment variables, the
    optional --env-file, or interactive prompts. The access token is
    always prompted for.

    \b
    Examples:
      vpsdeploy                 # Deploy
      vpsdeploy --cleanup       # Remove the deployment
    """
    if cleanup:
        command = CleanupCommand(CleanupOptions(log_dir=log_dir, env_file=env_file, verbose=verbose))
    else:
        command = DeployCommand(DeployOptions(log_dir=log_dir, env_file=env_file, verbose=verbose))
    command.run()


def main():
    """Main entry point with error handling."""
    cli()


if __name__ == "__main__":
    main()
