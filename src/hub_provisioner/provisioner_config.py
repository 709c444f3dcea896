"""
Configuration parameters for hub_provisioner.
"""

import pathlib
from typing import Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from hub_provisioner.resource_models import AuxiliaryAsset, Resource

MIRROR_HOST = "https://hf-mirror.com"

DEFAULT_RESOURCES = (
    ("Xenova/whisper-tiny", f"{MIRROR_HOST}/Xenova/whisper-tiny"),
    ("Xenova/LaMini-Flan-T5-77M", f"{MIRROR_HOST}/Xenova/LaMini-Flan-T5-77M"),
    ("Xenova/speecht5_tts", f"{MIRROR_HOST}/Xenova/speecht5_tts"),
)

DEFAULT_AUXILIARY_URL = (
    f"{MIRROR_HOST}/datasets/Xenova/transformers.js-docs/resolve/main/speaker_embeddings.bin"
)
DEFAULT_AUXILIARY_TARGET = "Xenova/speecht5_tts/speaker_embeddings.bin"

DEFAULT_MAX_REDIRECTS = 5
DEFAULT_HTTP_TIMEOUT = 60.0


def default_target_root() -> pathlib.Path:
    """
    The ``models`` directory next to the installed hub_provisioner package.
    """
    return pathlib.Path(__file__).resolve().parent / "models"


class ProvisionConfig(BaseModel):
    """
    Immutable description of everything a provisioning run fetches.
    """

    target_root: pathlib.Path
    resources: Tuple[Resource, ...] = ()
    auxiliary_asset: Optional[AuxiliaryAsset] = None
    max_redirects: int = Field(DEFAULT_MAX_REDIRECTS, ge=0)
    http_timeout: Optional[float] = Field(DEFAULT_HTTP_TIMEOUT, gt=0)
    clone_timeout: Optional[float] = Field(None, gt=0)
    git_executable: str = "git"

    class Config:
        frozen = True
        extra = "forbid"

    @model_validator(mode="after")
    def _check_resources(self) -> "ProvisionConfig":
        if not self.target_root.is_absolute():
            raise ValueError(f"target_root must be absolute: {self.target_root}")

        seen = set()
        for resource in self.resources:
            if resource.name in seen:
                raise ValueError(f"duplicate resource name: {resource.name}")
            seen.add(resource.name)

        # A repository cloned inside another one would collide with it on disk
        for resource in self.resources:
            for other in self.resources:
                if other is not resource and resource.parts[: len(other.parts)] == other.parts:
                    raise ValueError(
                        f"resource {resource.name} is nested inside {other.name}"
                    )
        return self

    @classmethod
    def default(cls, target_root: Optional[pathlib.Path] = None) -> "ProvisionConfig":
        """
        The fixed resource list fetched from the model-hub mirror.

        Args:
            target_root: Override for the target root, mainly for tests
        """
        return cls(
            target_root=target_root or default_target_root(),
            resources=tuple(Resource(name=name, url=url) for name, url in DEFAULT_RESOURCES),
            auxiliary_asset=AuxiliaryAsset(
                url=DEFAULT_AUXILIARY_URL, target=DEFAULT_AUXILIARY_TARGET
            ),
        )

    def resource_path(self, resource: Resource) -> pathlib.Path:
        return self.target_root.joinpath(*resource.parts)

    def auxiliary_path(self) -> Optional[pathlib.Path]:
        if self.auxiliary_asset is None:
            return None
        return self.target_root.joinpath(*self.auxiliary_asset.target.split("/"))
