"""
Logging system for vpsdeploy
Provides real-time logging to a timestamped file with clean console output
"""

import re
import shlex
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO, Sequence

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.padding import Padding
from rich.spinner import Spinner
from rich.text import Text

from vpsdeploy.constants import LOG_DATETIME_FORMAT, LOG_FILENAME_FORMAT
from vpsdeploy.models.results import ExecutionResult

console = Console()

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
MASK = "****"


class DeployLogger:
    """
    Manages logging for one deployment invocation
    - Appends every entry to deploy_<timestamp>.log in real-time
    - Mirrors INFO/SUCCESS/WARNING/ERROR entries to the console
    - Masks registered secrets in both streams
    """

    def __init__(
        self,
        log_dir: Path,
        operation: str = "deploy",
        verbose: bool = False,
        output: Optional[Console] = None,
    ):
        """
        Initialize logger

        Args:
            log_dir: Directory the log file is created in
            operation: Operation name (deploy or cleanup)
            verbose: If True, show command output in console
            output: Console to print to (defaults to the module console)
        """
        self.operation = operation
        self.verbose = verbose
        self.console = output or console
        self.current_step = ""
        self.has_errors = False
        self._secrets: list[str] = []

        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        self.log_path: Path = log_dir / datetime.now().strftime(LOG_FILENAME_FORMAT)

        # Append-only, line buffered for real-time tailing
        self.log_file: Optional[TextIO] = open(self.log_path, "a", buffering=1, encoding="utf-8")

        self._write_log_header()

    def _write_log_header(self):
        """Write log file header"""
        header = f"""
{"=" * 80}
vpsdeploy Deployment Log
{"=" * 80}
Operation: {self.operation}
Started: {datetime.now().isoformat()}
{"=" * 80}

"""
        self._write(header)

    def _write(self, text: str) -> None:
        if self.log_file:
            self.log_file.write(text)
            self.log_file.flush()

    def add_secret(self, secret: str) -> None:
        """Register a value that must never appear in logs."""
        if secret and secret not in self._secrets:
            self._secrets.append(secret)

    def mask(self, text: str) -> str:
        """Replace registered secrets with a placeholder."""
        for secret in self._secrets:
            text = text.replace(secret, MASK)
        return text

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message to file

        Args:
            message: Message to log
            level: Log level (INFO, SUCCESS, WARNING, ERROR, DEBUG)
        """
        timestamp = datetime.now().strftime(LOG_DATETIME_FORMAT)
        self._write(f"{timestamp} [{level}] {self.mask(message)}\n")

    def info(self, message: str):
        """Log an informational message"""
        self.log(message, "INFO")
        self.console.print(f"[blue][INFO][/blue] {escape(self.mask(message))}")

    def success(self, message: str):
        """Log a success message"""
        self.log(message, "SUCCESS")
        self.console.print(f"[green][SUCCESS][/green] {escape(self.mask(message))}")

    def warning(self, message: str):
        """Log a warning message"""
        self.log(message, "WARNING")
        self.console.print(f"[yellow][WARNING][/yellow] {escape(self.mask(message))}")

    def log_command(self, command: str):
        """Log a command being executed"""
        self.log(f"Executing: {command}", "DEBUG")
        if self.verbose:
            self.console.print(f"[dim]$ {escape(self.mask(command))}[/dim]")

    def log_output(self, output: str, stream: str = "stdout"):
        """
        Log command output

        Always written to the log file; shown in console only if verbose.

        Args:
            output: Command output (single line or multiline)
            stream: Stream name (stdout, stderr)
        """
        if not output:
            return

        clean_output = self.mask(ANSI_ESCAPE.sub("", output))
        for line in clean_output.splitlines():
            self._write(f"  [{stream}] {line}\n")

        if self.verbose:
            self.console.print(escape(clean_output), highlight=False)

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error with context

        Args:
            error: Error message
            context: Additional context (e.g., command that failed)
        """
        self.has_errors = True
        self.log(error, "ERROR")
        if context:
            self.log(f"Context: {context}", "ERROR")

        self.console.print(f"[bold red][ERROR][/bold red] {escape(self.mask(error))}")
        if context:
            self.console.print(f"  [color(208)]{escape(self.mask(context))}[/color(208)]")

    def step(self, step_name: str):
        """
        Start a new step

        Args:
            step_name: Name of the step
        """
        if self.current_step:
            self.console.print()

        self.current_step = step_name
        self.info(f"=== {step_name} ===")

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = f"""
{"=" * 80}
Completed: {datetime.now().isoformat()}
Status: {"FAILED" if self.has_errors else "SUCCESS"}
{"=" * 80}
"""
            self._write(footer)
            self.log_file.close()
            self.log_file = None

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        """Context manager exit"""
        if exc_type is not None and exc_type not in (SystemExit, KeyboardInterrupt):
            self.log_error(
                str(exc_val) if exc_val else "Operation failed",
                context=f"{exc_type.__name__}",
            )
        self.close()
        return False  # Don't suppress exceptions


def run_with_progress(
    logger: DeployLogger,
    command: Sequence[str],
    description: str,
    cwd: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> ExecutionResult:
    """
    Run a local command with progress indicator

    Args:
        logger: DeployLogger instance
        command: Command arguments
        description: Description for progress indicator
        cwd: Working directory
        timeout: Optional timeout in seconds

    Returns:
        ExecutionResult with captured output
    """
    rendered = shlex.join(command)
    logger.log_command(rendered)

    spinner = Spinner("dots", text=f"[cyan]{escape(description)}...[/cyan]")
    padded_spinner = Padding(spinner, (0, 0, 0, 2))

    with Live(padded_spinner, console=logger.console, refresh_per_second=10, transient=logger.verbose) as live:
        try:
            completed = subprocess.run(
                list(command),
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
            result = ExecutionResult(
                returncode=completed.returncode,
                stdout=completed.stdout or "",
                stderr=completed.stderr or "",
                command=rendered,
            )
        except subprocess.TimeoutExpired:
            result = ExecutionResult(
                returncode=124,
                stderr=f"Timed out after {timeout}s",
                command=rendered,
            )
        except FileNotFoundError:
            result = ExecutionResult(
                returncode=127,
                stderr=f"{command[0]}: command not found",
                command=rendered,
            )

        logger.log_output(result.stdout, "stdout")
        logger.log_output(result.stderr, "stderr")

        if result.is_success:
            checkmark = Text("  ✓ ", style="dim")
            checkmark.append(description, style="dim")
            live.update(checkmark)
        else:
            x_mark = Text("  ✗ ", style="red")
            x_mark.append(description, style="dim")
            live.update(x_mark)

    return result
