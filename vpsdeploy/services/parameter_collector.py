"""Parameter collection and validation."""

import os
import re
from pathlib import Path
from typing import Callable, Mapping, Optional

from dotenv import dotenv_values
from rich.prompt import Prompt

from vpsdeploy.constants import (
    DEFAULT_BRANCH,
    DEFAULT_SSH_KEY_PATH,
    ENV_APP_PORT,
    ENV_BRANCH,
    ENV_REPO_URL,
    ENV_SERVER_IP,
    ENV_SSH_KEY,
    ENV_SSH_USER,
    ENV_WORKSPACE,
    ExitCode,
)
from vpsdeploy.exceptions import ParameterError
from vpsdeploy.logger import DeployLogger
from vpsdeploy.models.config import DeploymentConfig, derive_project_name

IPV4_PATTERN = re.compile(r"^([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})$")
PORT_PATTERN = re.compile(r"[0-9]+")
PROJECT_NAME_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")

PromptFn = Callable[..., str]


def require(value: str, message: str, exit_code: ExitCode) -> str:
    """Reject empty or whitespace-only values."""
    value = (value or "").strip()
    if not value:
        raise ParameterError(message, exit_code=exit_code)
    return value


def validate_ipv4(value: str) -> str:
    """
    Validate a dotted-quad IPv4 address.

    Raises:
        ParameterError: Empty (13) or malformed (14) address
    """
    value = require(value, "Server IP cannot be empty", ExitCode.EMPTY_SERVER_IP)
    match = IPV4_PATTERN.match(value)
    if not match or any(int(octet) > 255 for octet in match.groups()):
        raise ParameterError(
            "Invalid IP address format",
            context=f"Got '{value}', expected a dotted quad such as 203.0.113.10",
            exit_code=ExitCode.INVALID_SERVER_IP,
        )
    return value


def validate_port(value: str) -> int:
    """
    Validate an application port.

    Raises:
        ParameterError: Empty (16) or out-of-range/non-numeric (17) port
    """
    value = require(value, "Application port cannot be empty", ExitCode.EMPTY_APP_PORT)
    if not PORT_PATTERN.fullmatch(value) or not 1 <= int(value) <= 65535:
        raise ParameterError(
            "Invalid port number. Must be between 1 and 65535",
            context=f"Got '{value}'",
            exit_code=ExitCode.INVALID_APP_PORT,
        )
    return int(value)


def validate_repo_url(value: str) -> str:
    """
    Validate the repository URL and the project name derived from it.

    Raises:
        ParameterError: Empty URL or unusable project name (10)
    """
    value = require(value, "Git repository URL cannot be empty", ExitCode.EMPTY_REPO_URL)
    project_name = derive_project_name(value)
    if not PROJECT_NAME_PATTERN.fullmatch(project_name):
        raise ParameterError(
            "Invalid Git repository URL",
            context=f"Cannot derive project name from '{value}'",
            exit_code=ExitCode.EMPTY_REPO_URL,
        )
    return value


def validate_key_path(value: str) -> Path:
    """Expand and check the SSH private key path."""
    path = Path(value).expanduser()
    if not path.is_file() or not os.access(path, os.R_OK):
        raise ParameterError(
            f"SSH key not found at {path}",
            context="Provide a readable private key path",
            exit_code=ExitCode.SSH_KEY_NOT_FOUND,
        )
    return path


class ParameterCollector:
    """Gathers deployment inputs from the environment, a dotenv file or prompts."""

    def __init__(
        self,
        logger: DeployLogger,
        environ: Optional[Mapping[str, str]] = None,
        env_file: Optional[Path] = None,
        prompt: PromptFn = Prompt.ask,
    ):
        self.logger = logger
        self.environ = os.environ if environ is None else environ
        self.file_values: dict[str, str] = {}
        if env_file is not None:
            self.file_values = {k: v for k, v in dotenv_values(env_file).items() if v is not None}
        self.prompt = prompt

    def _override(self, key: str) -> str:
        value = str(self.environ.get(key) or "").strip()
        if not value:
            value = str(self.file_values.get(key) or "").strip()
        return value

    def _ask(self, key: Optional[str], question: str, default: Optional[str] = None, password: bool = False) -> str:
        if key:
            override = self._override(key)
            if override:
                return override
        if default is None:
            answer = self.prompt(question, password=password)
        else:
            answer = self.prompt(question, default=default, password=password)
        return str(answer or "").strip()

    def collect(self, cleanup: bool = False) -> DeploymentConfig:
        """
        Collect and validate every deployment parameter.

        Args:
            cleanup: Whether the cleanup switch was given

        Returns:
            Immutable DeploymentConfig

        Raises:
            ParameterError: First violated constraint, with its exit code
        """
        self.logger.step("Step 1: Collecting Deployment Parameters")

        repo_url = validate_repo_url(self._ask(ENV_REPO_URL, "Enter Git Repository URL"))

        # The credential has no environment override
        access_token = require(
            self._ask(None, "Enter Personal Access Token (PAT)", password=True),
            "Personal Access Token cannot be empty",
            ExitCode.EMPTY_ACCESS_TOKEN,
        )
        self.logger.add_secret(access_token)

        branch = self._ask(ENV_BRANCH, "Enter branch name", default=DEFAULT_BRANCH) or DEFAULT_BRANCH

        ssh_user = require(
            self._ask(ENV_SSH_USER, "Enter SSH username"),
            "SSH username cannot be empty",
            ExitCode.EMPTY_SSH_USER,
        )

        server_ip = validate_ipv4(self._ask(ENV_SERVER_IP, "Enter server IP address"))

        key_input = self._ask(ENV_SSH_KEY, "Enter SSH key path", default=DEFAULT_SSH_KEY_PATH)
        ssh_key_path = validate_key_path(key_input or DEFAULT_SSH_KEY_PATH)

        app_port = validate_port(self._ask(ENV_APP_PORT, "Enter application port (e.g., 3000)"))

        workspace = Path(self._override(ENV_WORKSPACE) or ".").expanduser().resolve()

        config = DeploymentConfig(
            repo_url=repo_url,
            access_token=access_token,
            branch=branch,
            ssh_user=ssh_user,
            server_ip=server_ip,
            ssh_key_path=ssh_key_path,
            app_port=app_port,
            workspace=workspace,
            cleanup=cleanup,
        )

        self.logger.success("All parameters collected successfully")
        self.logger.info(f"Repository: {config.repo_url}")
        self.logger.info(f"Branch: {config.branch}")
        self.logger.info(f"Server: {config.ssh_target}")
        self.logger.info(f"Application Port: {config.app_port}")
        self.logger.info(f"Project: {config.project_name}")
        return config
