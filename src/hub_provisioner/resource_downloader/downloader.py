"""
Resource downloader implementation.

Runs fetch plans one at a time and updates resource states.
"""

import logging
from typing import Dict, Optional

import requests

from hub_provisioner.provisioner_exceptions import CloneError, DownloadError
from hub_provisioner.provisioner_logger import ProvisionerLogger
from hub_provisioner.resource_downloader.byte_downloader import ByteStreamDownloader
from hub_provisioner.resource_downloader.repository_fetcher import GitCloner, RepositoryCloner
from hub_provisioner.resource_plan import (
    FetchKind,
    FetchPlan,
    FetchStatus,
    PlanManager,
    ResourceState,
)


class ResourceDownloader:
    """
    Executes fetch plans sequentially.

    A failing plan is logged and recorded, and the remaining plans still run.
    """

    def __init__(
        self,
        plan_manager: PlanManager,
        logger: ProvisionerLogger,
        cloner: Optional[RepositoryCloner] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the resource downloader.

        Args:
            plan_manager: The PlanManager holding the fetch plans
            logger: Logger for progress and error messages
            cloner: Repository cloner, defaults to a GitCloner built from the config
            session: HTTP session for the auxiliary download. When omitted a
                session is created here and released by close()
        """
        config = plan_manager.config
        self.plan_manager = plan_manager
        self.logger = logger
        self.cloner = cloner or GitCloner(
            logger, git_executable=config.git_executable, timeout=config.clone_timeout
        )
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.byte_downloader = ByteStreamDownloader(
            logger,
            self.session,
            max_redirects=config.max_redirects,
            timeout=config.http_timeout,
        )

    def close(self) -> None:
        """Close the HTTP session if this downloader created it."""
        if self._owns_session:
            self.session.close()

    def download_all_pending(self) -> bool:
        """
        Run all pending plans in order.

        Returns:
            True if every plan succeeded, False if any failed
        """
        pending = self.plan_manager.get_pending_fetches()

        if not pending:
            self.logger.log("No pending fetches", logging.INFO)
            return True

        all_succeeded = True
        for plan in pending:
            if not self.fetch(plan):
                all_succeeded = False

        return all_succeeded

    def fetch(self, plan: FetchPlan) -> bool:
        if plan.kind == FetchKind.CLONE:
            return self.fetch_repository(plan)
        return self.fetch_auxiliary_asset(plan)

    def fetch_repository(self, plan: FetchPlan) -> bool:
        """
        Shallow-clone one repository into its target directory.

        Returns:
            True if the clone succeeded, False otherwise
        """
        self.logger.log(f"Cloning {plan.name} from {plan.url}...", logging.INFO)
        plan.status = FetchStatus.IN_PROGRESS

        try:
            self.cloner.clone(plan.url, plan.destination_path)
        except (CloneError, OSError) as e:
            self.logger.log(f"Failed to clone {plan.name}: {e}", logging.ERROR)
            self.plan_manager.mark_fetch_completed(plan, success=False, error_message=str(e))
            return False

        self.plan_manager.mark_fetch_completed(plan, success=True)
        self.logger.log(f"Successfully cloned {plan.name}", logging.INFO)
        return True

    def fetch_auxiliary_asset(self, plan: FetchPlan) -> bool:
        """
        Download the auxiliary file, creating its directory first.

        Returns:
            True if the download succeeded, False otherwise
        """
        filename = self.plan_manager.config.auxiliary_asset.filename
        self.logger.log(f"Downloading {filename} from {plan.url}...", logging.INFO)
        plan.status = FetchStatus.IN_PROGRESS

        def on_redirect(from_url: str, to_url: str) -> None:
            plan.status = FetchStatus.REDIRECTED
            plan.redirects.append(to_url)
            self.logger.log(f"Following redirect for {filename} to {to_url}", logging.INFO)

        try:
            plan.destination_path.parent.mkdir(parents=True, exist_ok=True)
            written = self.byte_downloader.download(
                plan.url, plan.destination_path, on_redirect=on_redirect
            )
        except (DownloadError, OSError) as e:
            self.logger.log(f"Failed to download {filename}: {e}", logging.ERROR)
            self.plan_manager.mark_fetch_completed(plan, success=False, error_message=str(e))
            return False

        self.plan_manager.mark_fetch_completed(plan, success=True)
        self.logger.log(
            f"Successfully downloaded {filename} "
            f"({written} bytes, {len(plan.redirects)} redirects)",
            logging.INFO,
        )
        return True

    def get_fetched_resources(self) -> Dict[str, ResourceState]:
        states = self.plan_manager.get_resource_states()
        return {name: state for name, state in states.items() if state.is_fetched()}

    def get_failed_resources(self) -> Dict[str, ResourceState]:
        states = self.plan_manager.get_resource_states()
        return {
            name: state
            for name, state in states.items()
            if state.status == FetchStatus.FAILED
        }

    def get_download_summary(self) -> dict:
        """
        Get a summary of fetch results.

        Returns:
            Dictionary with counts of completed, failed, and pending fetches
        """
        states = self.plan_manager.get_resource_states()
        pending = self.plan_manager.get_pending_fetches()

        completed = sum(1 for state in states.values() if state.is_fetched())
        failed = sum(1 for state in states.values() if state.status == FetchStatus.FAILED)

        return {
            "completed": completed,
            "failed": failed,
            "pending": len(pending),
            "total": completed + failed + len(pending),
        }
