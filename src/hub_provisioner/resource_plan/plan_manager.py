"""
Fetch plan manager.

Builds the ordered fetch plans for a run and records the outcome of each one.
"""

import pathlib
from typing import Dict, List, Optional

from hub_provisioner.provisioner_config import ProvisionConfig
from hub_provisioner.provisioner_exceptions import ConfigError


class FetchStatus:
    """Enumeration of fetch statuses."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    # Intermediate, set while a download follows a redirect hop
    REDIRECTED = "redirected"
    COMPLETED = "completed"
    FAILED = "failed"


class FetchKind:
    """How a resource is fetched."""

    CLONE = "clone"
    DOWNLOAD = "download"


class FetchPlan:
    """
    A plan to fetch a single resource.

    Captures everything needed to clone a repository or download a file.
    """

    def __init__(
            self,
            name: str,
            kind: str,
            url: str,
            destination_path: pathlib.Path,
            status: str = FetchStatus.PENDING,
    ):
        """
        Initialize a fetch plan.

        Args:
            name: Logical name of the resource, used in logs and states
            kind: FetchKind.CLONE or FetchKind.DOWNLOAD
            url: Source location
            destination_path: Directory to clone into, or file to write
            status: Current fetch status
        """
        self.name = name
        self.kind = kind
        self.url = url
        self.destination_path = destination_path
        self.status = status
        self.redirects: List[str] = []
        self.error_message: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"FetchPlan(name={self.name}, kind={self.kind}, "
            f"status={self.status}, url={self.url})"
        )


class ResourceState:
    """
    Outcome of a fetch plan after it has run.
    """

    def __init__(
            self,
            name: str,
            status: str,
            path: Optional[pathlib.Path] = None,
            error_message: Optional[str] = None,
    ):
        self.name = name
        self.status = status
        self.path = path
        self.error_message = error_message

    def is_fetched(self) -> bool:
        """Check if the resource was fetched successfully."""
        return self.status == FetchStatus.COMPLETED

    def __repr__(self) -> str:
        return (
            f"ResourceState(name={self.name}, "
            f"status={self.status}, path={self.path})"
        )


class PlanManager:
    """
    Creates fetch plans from a ProvisionConfig and tracks their outcomes.

    Plans are ordered: one clone per resource, in mapping order, followed by
    the auxiliary download.
    """

    def __init__(self, config: ProvisionConfig):
        """
        Initialize the plan manager.

        Args:
            config: The immutable configuration of this run
        """
        self.config = config
        self.fetch_plans: List[FetchPlan] = []
        self.resource_states: Dict[str, ResourceState] = {}

    def ensure_target_root(self) -> pathlib.Path:
        """
        Create the target root, including missing parents.

        Calling this more than once is harmless.

        Raises:
            ConfigError: If the directory cannot be created
        """
        root = self.config.target_root
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Cannot create target root {root}: {e}") from e
        return root

    def create_fetch_plans(self) -> List[FetchPlan]:
        """
        Create fetch plans for every configured resource.

        Returns:
            The plans in the order they must run
        """
        self.fetch_plans = [
            FetchPlan(
                name=resource.name,
                kind=FetchKind.CLONE,
                url=resource.url,
                destination_path=self.config.resource_path(resource),
            )
            for resource in self.config.resources
        ]

        asset = self.config.auxiliary_asset
        if asset is not None:
            self.fetch_plans.append(
                FetchPlan(
                    name=asset.target,
                    kind=FetchKind.DOWNLOAD,
                    url=asset.url,
                    destination_path=self.config.auxiliary_path(),
                )
            )
        self.resource_states = {}
        return self.fetch_plans

    def get_pending_fetches(self) -> List[FetchPlan]:
        """
        Get all plans that have not run yet, in order.
        """
        return [p for p in self.fetch_plans if p.status == FetchStatus.PENDING]

    def mark_fetch_completed(
        self, plan: FetchPlan, success: bool = True, error_message: Optional[str] = None
    ) -> None:
        """
        Mark a fetch plan as completed or failed.

        Args:
            plan: The plan to mark
            success: Whether the fetch succeeded
            error_message: Cause of the failure, if any
        """
        plan.status = FetchStatus.COMPLETED if success else FetchStatus.FAILED
        if not success:
            plan.error_message = error_message or "Fetch failed"

        self.resource_states[plan.name] = ResourceState(
            name=plan.name,
            status=plan.status,
            path=plan.destination_path if success else None,
            error_message=None if success else plan.error_message,
        )

    def get_resource_states(self) -> Dict[str, ResourceState]:
        return self.resource_states

    def get_resource_state(self, name: str) -> Optional[ResourceState]:
        return self.resource_states.get(name)
