"""Reconciler settings, loaded from an HCL settings file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from . import hcl

logger = logging.getLogger(__name__)

# how long IAM grants on the bucket or topic may take to become effective
PROPAGATION_TIMEOUT = 120.0

DELETE_TIMEOUT = 30.0
READBACK_TIMEOUT = 20.0


class Settings(BaseModel):
    """Tuning for the reconciler and the AWS client."""

    propagation_timeout: float = Field(default=PROPAGATION_TIMEOUT, ge=0)
    delete_timeout: float = Field(default=DELETE_TIMEOUT, ge=0)
    readback_timeout: float = Field(default=READBACK_TIMEOUT, ge=0)

    backoff_base_delay: float = Field(default=0.5, gt=0)
    backoff_max_delay: float = Field(default=10.0, gt=0)
    backoff_jitter: float = Field(default=0.1, ge=0, le=1)

    region: str | None = None
    profile: str | None = None


def load_settings(
    path: str | Path,
    *,
    context: dict[str, Any] | None = None,
) -> Settings:
    """Read the `reconciler { ... }` block of an HCL file into Settings.

    Attributes not given in the file keep their defaults.
    """
    file = Path(path)
    logger.debug("Loading settings from %s", file)
    attrs = hcl.block(hcl.load(file, context=context), "reconciler")
    try:
        return Settings(**attrs)
    except ValidationError as exc:
        raise ValueError(f"{file}: {exc}") from exc
