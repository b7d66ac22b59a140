"""
Base Command Class

Abstract base for all vpsdeploy commands.
Provides common functionality and structure.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from rich.console import Console

from vpsdeploy.constants import ExitCode
from vpsdeploy.exceptions import VPSDeployError
from vpsdeploy.logger import DeployLogger
from vpsdeploy.models.config import DeploymentConfig
from vpsdeploy.models.ssh import SSHConfig, SSHConnection
from vpsdeploy.services.ssh_service import SSHService
from vpsdeploy.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Logger initialization
    - Header display
    - Translation of errors into exit codes
    """

    def __init__(self, log_dir: Path, verbose: bool = False, console: Optional[Console] = None):
        self.log_dir = Path(log_dir)
        self.verbose = verbose
        self.console = console or Console()
        self.logger: Optional[DeployLogger] = None

    def init_logger(self, operation: str) -> DeployLogger:
        """
        Initialize command logger.

        Args:
            operation: Operation name written to the log header

        Returns:
            DeployLogger instance
        """
        self.logger = DeployLogger(self.log_dir, operation, verbose=self.verbose, output=self.console)
        return self.logger

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        project: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skipped in verbose mode)."""
        if not self.verbose:
            show_header(
                title=title,
                subtitle=subtitle,
                project=project,
                details=details,
                console=self.console,
            )

    def ssh_service(self, config: DeploymentConfig) -> SSHService:
        """Build the SSH transport for the configured target."""
        connection = SSHConnection(
            host=config.server_ip,
            config=SSHConfig(key_path=str(config.ssh_key_path), user=config.ssh_user),
        )
        return SSHService(connection, self.logger)

    def _print_log_location(self) -> None:
        if self.logger:
            self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    @abstractmethod
    def execute(self) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self) -> None:
        """Run command with error handling."""
        try:
            self.execute()
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            if self.logger:
                self.logger.log_error("Interrupted by user", context=self.logger.current_step or None)
            self._print_log_location()
            raise SystemExit(ExitCode.INTERRUPTED)
        except SystemExit:
            raise
        except VPSDeployError as e:
            if self.logger:
                step = self.logger.current_step or "startup"
                self.logger.log_error(e.message, context=e.context)
                self.logger.log(f"Failed during: {step} (exit code {e.exit_code})", "ERROR")
            else:
                self.console.print(f"\n[bold red]✗ {e.message}[/bold red]")
                if e.context:
                    self.console.print(f"[dim]Context: {e.context}[/dim]")
            self._print_log_location()
            raise SystemExit(e.exit_code)
        except Exception as e:
            error_type = type(e).__name__
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {e}\n")
            if self.logger:
                self.logger.log_error(f"{error_type}: {e}")
            self._print_log_location()
            raise SystemExit(ExitCode.UNEXPECTED)
        finally:
            if self.logger:
                self.logger.close()
