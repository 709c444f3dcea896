"""
Pydantic data models for the resources fetched by hub_provisioner.

A resource is a model repository that is shallow-cloned into
``<target root>/<name>``. The auxiliary asset is a single file fetched over
HTTP(S) into a path below the target root.
"""

from pathlib import PurePosixPath

from pydantic import BaseModel, Field, field_validator


def validate_relative_name(name: str) -> str:
    """
    Check that ``name`` can be used as a relative path below the target root.

    Names may contain ``/`` to produce nested directories, but must not be
    empty, absolute, contain ``\\``, or step outside the root with ``..``.

    Returns:
        The name with surrounding whitespace removed

    Raises:
        ValueError: If the name is not a safe relative path
    """
    name = name.strip()
    if not name:
        raise ValueError("name must not be empty")
    if "\\" in name:
        raise ValueError(f"name must use / as separator: {name!r}")
    if PurePosixPath(name).is_absolute() or ":" in name:
        raise ValueError(f"name must be a relative path: {name!r}")
    parts = name.split("/")
    if any(part in ("", ".", "..") for part in parts):
        raise ValueError(f"name contains an invalid path segment: {name!r}")
    return name


class Resource(BaseModel):
    """
    A model repository to shallow-clone.

    The logical name doubles as the relative target directory, e.g.
    ``Xenova/whisper-tiny`` is cloned into ``<root>/Xenova/whisper-tiny``.
    """

    name: str = Field(..., description="Logical name and relative target path")
    url: str = Field(..., description="Clone source URL")

    class Config:
        frozen = True
        extra = "forbid"

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return validate_relative_name(value)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("url must not be empty")
        return value.strip()

    @property
    def parts(self) -> tuple:
        """Path segments of the logical name."""
        return tuple(self.name.split("/"))


class AuxiliaryAsset(BaseModel):
    """
    A single file fetched by direct HTTP(S) transfer.
    """

    url: str = Field(..., description="Download URL")
    target: str = Field(..., description="Destination file path relative to the target root")

    class Config:
        frozen = True
        extra = "forbid"

    @field_validator("target")
    @classmethod
    def _check_target(cls, value: str) -> str:
        return validate_relative_name(value)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"url must be http(s): {value!r}")
        return value

    @property
    def filename(self) -> str:
        return self.target.split("/")[-1]
