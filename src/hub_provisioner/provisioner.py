"""
Top-level driver: clones every configured model repository, then downloads
the auxiliary file.
"""

import logging
import sys
from typing import Optional

import requests

from hub_provisioner.provisioner_config import ProvisionConfig
from hub_provisioner.provisioner_exceptions import ProvisionerException
from hub_provisioner.provisioner_logger import ProvisionerLogger, setup_logging
from hub_provisioner.resource_downloader import RepositoryCloner, ResourceDownloader
from hub_provisioner.resource_plan import PlanManager


def provision(
    config: ProvisionConfig,
    logger: Optional[ProvisionerLogger] = None,
    cloner: Optional[RepositoryCloner] = None,
    session: Optional[requests.Session] = None,
) -> dict:
    """
    Fetch every resource described by ``config``.

    Individual failures are logged and do not stop the run.

    Args:
        config: What to fetch and where to put it
        logger: Defaults to a ProvisionerLogger
        cloner: Defaults to a GitCloner
        session: Defaults to a fresh requests.Session, closed when the run ends.
            A session passed in is left open

    Returns:
        The download summary, see ResourceDownloader.get_download_summary

    Raises:
        ConfigError: If the target root cannot be created
    """
    logger = logger or ProvisionerLogger()
    logger.log("Starting model download process using git clone...", logging.INFO)

    plan_manager = PlanManager(config)
    plan_manager.ensure_target_root()
    plan_manager.create_fetch_plans()

    downloader = ResourceDownloader(plan_manager, logger, cloner=cloner, session=session)
    try:
        success = downloader.download_all_pending()
        summary = downloader.get_download_summary()
    finally:
        downloader.close()

    for name, state in downloader.get_fetched_resources().items():
        logger.log(f"Fetched {name} into {state.path}", logging.INFO)
    if not success:
        failed = ", ".join(sorted(downloader.get_failed_resources()))
        logger.log(f"Some resources failed to download: {failed}", logging.ERROR)

    logger.log(
        f"Download summary: {summary['completed']} completed, "
        f"{summary['failed']} failed, {summary['pending']} pending",
        logging.INFO,
    )
    logger.log("Model download process finished.", logging.INFO)
    return summary


def main() -> int:
    """
    Console entry point. Takes no arguments.

    Returns 0 whenever the fetch sequence reaches its end, even if some
    resources failed.
    """
    setup_logging()
    logger = ProvisionerLogger()
    try:
        provision(ProvisionConfig.default(), logger)
    except ProvisionerException as e:
        logger.log(f"Provisioning aborted: {e}", logging.CRITICAL)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
