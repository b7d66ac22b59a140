"""
vpsdeploy Domain Models

Dataclass-based models for configuration, remote commands and results.
"""

from .command import RemoteCommand
from .config import (
    BuildDescriptor,
    BuildMode,
    DeploymentConfig,
    derive_project_name,
    inject_credential,
)
from .environment import (
    COMPOSE_PLUGIN,
    COMPOSE_STANDALONE,
    ComposeTool,
    RemoteEnvironment,
)
from .results import (
    CleanupReport,
    ExecutionResult,
    ResultStatus,
    SSHResult,
    StepOutcome,
    ValidationResult,
)
from .ssh import (
    SSHConfig,
    SSHConnection,
)

__all__ = [
    # Command
    "RemoteCommand",
    # Config
    "BuildDescriptor",
    "BuildMode",
    "DeploymentConfig",
    "derive_project_name",
    "inject_credential",
    # Environment
    "COMPOSE_PLUGIN",
    "COMPOSE_STANDALONE",
    "ComposeTool",
    "RemoteEnvironment",
    # Results
    "CleanupReport",
    "ExecutionResult",
    "ResultStatus",
    "SSHResult",
    "StepOutcome",
    "ValidationResult",
    # SSH
    "SSHConfig",
    "SSHConnection",
]
