"""vpsdeploy commands."""

from .cleanup import CleanupCommand, CleanupOptions
from .deploy import DeployCommand, DeployOptions

__all__ = [
    "CleanupCommand",
    "CleanupOptions",
    "DeployCommand",
    "DeployOptions",
]
