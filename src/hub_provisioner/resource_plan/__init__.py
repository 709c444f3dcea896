"""
Resource plan management.

This package handles:
1. Turning a ProvisionConfig into an ordered list of fetch plans
2. Creating the target root
3. Tracking the state of every resource during a run
"""

from .plan_manager import FetchKind, FetchPlan, FetchStatus, PlanManager, ResourceState

__all__ = ["FetchKind", "FetchPlan", "FetchStatus", "PlanManager", "ResourceState"]
