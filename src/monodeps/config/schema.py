"""Schema for monodeps.yaml."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ClientType(str, Enum):
    """Package manager used to install dependencies before publishing."""

    AUTO = "auto"
    NPM = "npm"
    YARN = "yarn"


class PublishConfig(BaseModel):
    """Publish settings.

    Attributes:
        command: Command run in the package directory to publish it.
        install: Install dependencies before publishing.
        client: Package manager for the install step, ``auto`` to detect.
    """

    model_config = ConfigDict(extra="forbid")

    command: str = "npm publish"
    install: bool = True
    client: ClientType = ClientType.AUTO


class MonodepsConfig(BaseModel):
    """Root workspace configuration."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    ignore: list[str] = Field(default_factory=lambda: ["node_modules", ".*"])
    publish: PublishConfig = Field(default_factory=PublishConfig)
