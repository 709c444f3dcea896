"""
Shallow repository cloning through the external git command.
"""

import logging
import pathlib
import subprocess
from typing import List, Optional, Protocol

from hub_provisioner.provisioner_exceptions import CloneError
from hub_provisioner.provisioner_logger import ProvisionerLogger


class RepositoryCloner(Protocol):
    """
    Anything that can place a copy of a remote repository at a local path.

    Implementations raise CloneError when the copy could not be made.
    """

    def clone(self, source_url: str, destination: pathlib.Path) -> None:
        ...


class GitCloner:
    """
    Clones repositories with ``git clone --depth 1``.

    Each call blocks until the child process exits.
    """

    def __init__(
        self,
        logger: ProvisionerLogger,
        git_executable: str = "git",
        timeout: Optional[float] = None,
    ):
        """
        Args:
            logger: Receives the child process output
            git_executable: Name or path of the git binary
            timeout: Seconds to wait for a clone before giving up, None waits forever
        """
        self.logger = logger
        self.git_executable = git_executable
        self.timeout = timeout

    def build_command(self, source_url: str, destination: pathlib.Path) -> List[str]:
        return [self.git_executable, "clone", "--depth", "1", source_url, str(destination)]

    def clone(self, source_url: str, destination: pathlib.Path) -> None:
        cmd = self.build_command(source_url, destination)
        self.logger.log(f"Running: {' '.join(cmd)}", logging.DEBUG)

        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise CloneError(
                f"git clone of {source_url} timed out after {self.timeout} seconds"
            ) from e
        except OSError as e:
            raise CloneError(f"Failed to launch {self.git_executable}: {e}") from e

        # git reports progress on stderr even when it succeeds
        if result.stdout and result.stdout.strip():
            self.logger.log(result.stdout.rstrip(), logging.INFO)
        if result.stderr and result.stderr.strip():
            self.logger.log(result.stderr.rstrip(), logging.WARNING)

        if result.returncode != 0:
            detail = result.stderr.strip().splitlines()[-1] if result.stderr.strip() else ""
            raise CloneError(
                f"git clone exited with status {result.returncode}"
                + (f": {detail}" if detail else ""),
                returncode=result.returncode,
            )
