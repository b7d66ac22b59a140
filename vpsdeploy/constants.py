"""
vpsdeploy Constants

Centralized constants for magic values, defaults, and exit codes.
"""

from enum import IntEnum

# Default Parameter Values
DEFAULT_BRANCH = "main"
DEFAULT_SSH_KEY_PATH = "~/.ssh/id_rsa"

# Environment Variable Overrides
ENV_REPO_URL = "VPSDEPLOY_REPO_URL"
ENV_BRANCH = "VPSDEPLOY_BRANCH"
ENV_SSH_USER = "VPSDEPLOY_SSH_USER"
ENV_SERVER_IP = "VPSDEPLOY_SERVER_IP"
ENV_SSH_KEY = "VPSDEPLOY_SSH_KEY"
ENV_APP_PORT = "VPSDEPLOY_APP_PORT"
ENV_WORKSPACE = "VPSDEPLOY_WORKSPACE"
ENV_LOG_DIR = "VPSDEPLOY_LOG_DIR"

# Build Descriptors (checked in this order)
DOCKERFILE_NAME = "Dockerfile"
COMPOSE_MANIFEST_NAMES = ("docker-compose.yml", "docker-compose.yaml")

# SSH Configuration
SSH_CONNECT_TIMEOUT = 10
SSH_PROBE_MARKER = "VPSDEPLOY_SSH_OK"
PING_COUNT = 2
PING_WAIT_SECONDS = 5

# File Transfer
RSYNC_EXCLUDES = (".git", "node_modules", "__pycache__", ".venv", ".env")

# Remote Provisioning
DOCKER_INSTALL_SCRIPT_URL = "https://get.docker.com"
DOCKER_INSTALL_SCRIPT_PATH = "/tmp/get-docker.sh"
COMPOSE_RELEASE_URL = (
    "https://github.com/docker/compose/releases/latest/download/docker-compose-{system}-{machine}"
)
COMPOSE_BINARY_PATH = "/usr/local/bin/docker-compose"

# Deployment
CONTAINER_SETTLE_SECONDS = 5
LOG_TAIL_LINES = 20

# Nginx Configuration
NGINX_SITES_AVAILABLE = "/etc/nginx/sites-available"
NGINX_SITES_ENABLED = "/etc/nginx/sites-enabled"
NGINX_TEMPLATE_NAME = "nginx_site.conf.j2"
PROXY_PORT = 80

# Validation
HTTP_PROBE_TIMEOUT = 10

# Log Configuration
LOG_FILENAME_FORMAT = "deploy_%Y%m%d_%H%M%S.log"
LOG_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class ExitCode(IntEnum):
    """Process exit codes. Each code maps to exactly one failure point."""

    SUCCESS = 0
    UNEXPECTED = 1

    # Parameter collection
    EMPTY_REPO_URL = 10
    EMPTY_ACCESS_TOKEN = 11
    EMPTY_SSH_USER = 12
    EMPTY_SERVER_IP = 13
    INVALID_SERVER_IP = 14
    SSH_KEY_NOT_FOUND = 15
    EMPTY_APP_PORT = 16
    INVALID_APP_PORT = 17

    # Repository synchronisation
    REPO_NOT_A_WORKING_COPY = 20
    REPO_FETCH_FAILED = 21
    REPO_CHECKOUT_FAILED = 22
    REPO_PULL_FAILED = 23
    REPO_CLONE_FAILED = 24
    REPO_MISSING_AFTER_CLONE = 25

    # Build descriptor detection
    NO_BUILD_DESCRIPTOR = 30

    # Connectivity
    SSH_CONNECTION_FAILED = 40

    # Environment provisioning
    PACKAGE_UPDATE_FAILED = 50
    DOCKER_INSTALL_FAILED = 51
    COMPOSE_INSTALL_FAILED = 52
    NGINX_INSTALL_FAILED = 53
    SERVICE_START_FAILED = 54
    INSTALL_VERIFICATION_FAILED = 55

    # Deployment
    REMOTE_DIR_FAILED = 60
    FILE_TRANSFER_FAILED = 61
    COMPOSE_DEPLOY_FAILED = 62
    IMAGE_BUILD_FAILED = 63
    CONTAINER_RUN_FAILED = 64

    # Reverse proxy
    PROXY_CONFIG_FAILED = 70

    # Validation
    DOCKER_NOT_ACTIVE = 80
    CONTAINER_NOT_RUNNING = 81
    NGINX_NOT_ACTIVE = 82

    INTERRUPTED = 130
