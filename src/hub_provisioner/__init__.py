"""
hub_provisioner fetches model repositories and auxiliary files from a model-hub mirror
into a local directory tree.
"""

from hub_provisioner.provisioner import main, provision
from hub_provisioner.provisioner_config import ProvisionConfig
from hub_provisioner.resource_models import AuxiliaryAsset, Resource

__all__ = ["AuxiliaryAsset", "ProvisionConfig", "Resource", "main", "provision"]
