"""Local working copy synchronisation."""

from pathlib import Path
from typing import Optional

from vpsdeploy.constants import ExitCode
from vpsdeploy.exceptions import RepositoryError
from vpsdeploy.logger import DeployLogger, run_with_progress
from vpsdeploy.models.config import DeploymentConfig


class RepositorySynchronizer:
    """Clones or updates the project's working copy at the requested branch."""

    def __init__(self, config: DeploymentConfig, logger: DeployLogger):
        self.config = config
        self.logger = logger

    def _git(self, *args: str, description: str, cwd: Optional[Path] = None):
        return run_with_progress(self.logger, ["git", *args], description, cwd=cwd)

    def ensure_present(self) -> Path:
        """
        Make the working copy present and current.

        Returns:
            Path to the working copy

        Raises:
            RepositoryError: With the exit code of the failing sub-step
        """
        self.logger.step("Step 2: Synchronizing Repository")
        work_dir = self.config.work_dir

        if work_dir.exists():
            self.logger.warning("Repository directory already exists. Pulling latest changes...")
            self._update(work_dir)
            self.logger.success("Repository updated successfully")
        else:
            self.logger.info("Cloning repository...")
            self._clone(work_dir)
            self.logger.success("Repository cloned successfully")

        self.logger.info(f"Project directory: {work_dir}")
        return work_dir

    def _clone(self, work_dir: Path) -> None:
        branch = self.config.branch
        result = self._git(
            "clone",
            "--branch",
            branch,
            "--single-branch",
            self.config.authenticated_url,
            str(work_dir),
            description=f"Cloning {self.config.project_name} ({branch})",
        )
        if result.is_failure:
            raise RepositoryError(
                "Failed to clone repository",
                context=self.logger.mask(result.stderr.strip()),
                exit_code=ExitCode.REPO_CLONE_FAILED,
            )
        if not work_dir.is_dir():
            raise RepositoryError(
                "Failed to navigate to repository directory",
                context=str(work_dir),
                exit_code=ExitCode.REPO_MISSING_AFTER_CLONE,
            )

        # Keep the credential out of .git/config
        reset = self._git(
            "remote",
            "set-url",
            "origin",
            self.config.repo_url,
            description="Removing credential from remote URL",
            cwd=work_dir,
        )
        if reset.is_failure:
            self.logger.warning("Could not reset the origin URL; the access token may remain in .git/config")

    def _update(self, work_dir: Path) -> None:
        branch = self.config.branch
        if not work_dir.is_dir() or not (work_dir / ".git").exists():
            raise RepositoryError(
                "Failed to navigate to repository directory",
                context=f"{work_dir} exists but is not a git working copy",
                exit_code=ExitCode.REPO_NOT_A_WORKING_COPY,
            )

        fetch = self._git(
            "fetch",
            self.config.authenticated_url,
            f"+refs/heads/{branch}:refs/remotes/origin/{branch}",
            description="Fetching from remote",
            cwd=work_dir,
        )
        if fetch.is_failure:
            raise RepositoryError(
                "Failed to fetch from remote",
                context=self.logger.mask(fetch.stderr.strip()),
                exit_code=ExitCode.REPO_FETCH_FAILED,
            )

        checkout = self._git("checkout", branch, description=f"Checking out {branch}", cwd=work_dir)
        if checkout.is_failure:
            raise RepositoryError(
                f"Failed to checkout branch {branch}",
                context=checkout.stderr.strip(),
                exit_code=ExitCode.REPO_CHECKOUT_FAILED,
            )

        pull = self._git(
            "pull",
            "--ff-only",
            self.config.authenticated_url,
            branch,
            description="Pulling latest changes",
            cwd=work_dir,
        )
        if pull.is_failure:
            raise RepositoryError(
                "Failed to pull latest changes",
                context=self.logger.mask(pull.stderr.strip()),
                exit_code=ExitCode.REPO_PULL_FAILED,
            )
