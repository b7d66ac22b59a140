"""
SSH Configuration Models

Dataclass models for SSH operations.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class SSHConfig:
    """SSH identity used for every remote session."""

    key_path: str
    user: str

    @property
    def key_path_expanded(self) -> Path:
        """Get expanded key path (resolves ~)."""
        return Path(self.key_path).expanduser()

    def __repr__(self) -> str:
        return f"SSHConfig(user={self.user}, key={self.key_path})"


@dataclass(frozen=True)
class SSHConnection:
    """SSH connection details for a specific host."""

    host: str
    config: SSHConfig
    port: int = 22

    @property
    def connection_string(self) -> str:
        """Get SSH connection string (user@host)."""
        return f"{self.config.user}@{self.host}"

    def ssh_options(self, connect_timeout: Optional[int] = None) -> list[str]:
        """Options shared by ssh and rsync's remote shell."""
        options = [
            "-i",
            str(self.config.key_path_expanded),
            "-p",
            str(self.port),
            "-o",
            "BatchMode=yes",
            "-o",
            "StrictHostKeyChecking=accept-new",
            "-o",
            "LogLevel=ERROR",
        ]
        if connect_timeout is not None:
            options.extend(["-o", f"ConnectTimeout={connect_timeout}"])
        return options

    def build_command(self, remote_command: str, connect_timeout: Optional[int] = None) -> list[str]:
        """Build full SSH command with remote command."""
        return ["ssh", *self.ssh_options(connect_timeout), self.connection_string, remote_command]

    def __repr__(self) -> str:
        return f"SSHConnection(host={self.host}, user={self.config.user})"
