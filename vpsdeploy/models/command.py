"""
Remote Command Model

Structured remote commands. Arguments are quoted when rendered, so project
names and paths are never interpolated into a shell string unescaped.
"""

import shlex
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RemoteCommand:
    """A single remote program invocation."""

    argv: tuple[str, ...]
    sudo: bool = False
    cwd: Optional[str] = None

    @classmethod
    def of(cls, *argv: str, sudo: bool = False, cwd: Optional[str] = None) -> "RemoteCommand":
        """Build a command from positional arguments."""
        return cls(argv=tuple(str(arg) for arg in argv), sudo=sudo, cwd=cwd)

    @property
    def program(self) -> str:
        return self.argv[0] if self.argv else ""

    def render(self) -> str:
        """Render the command as a remote shell string."""
        parts = list(self.argv)
        if self.sudo:
            parts.insert(0, "sudo")
        rendered = " ".join(shlex.quote(part) for part in parts)
        if self.cwd:
            rendered = f"cd {shlex.quote(self.cwd)} && {rendered}"
        return rendered

    def __str__(self) -> str:
        return self.render()
