"""Pydantic response models for the GhibliX host API.

Models
------
SizeOption
    One entry of the text-to-image resolution selector.
ConfigResponse
    Payload of ``GET /api/config``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SizeOption(BaseModel):
    """A selectable text-to-image resolution.

    Attributes:
        label: Human-readable name shown in the selector.
        value: Resolution string sent to the image service.
    """

    label: str = Field(..., description="Display label, e.g. 'Square (1:1)'.")
    value: str = Field(..., description="Resolution string, e.g. '1024x1024'.")


class ConfigResponse(BaseModel):
    """Response body for ``GET /api/config``.

    Attributes:
        version: Package version string.
        modes: Mode identifiers in selector order.
        sizes: Supported text-to-image resolutions.
        default_size: Resolution preselected in text mode.
        asset_host: Prefix showcase references are resolved against.
    """

    version: str
    modes: list[str]
    sizes: list[SizeOption]
    default_size: str
    asset_host: str
