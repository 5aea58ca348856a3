"""SpecOp strategies: decide whether a specification is applied or removed."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .context import Context
from .spec import Specification

logger = logging.getLogger(__name__)


class SpecOp(ABC):
    """Wraps a Specification with conditional execution logic."""

    def __init__(self, spec: Specification) -> None:
        self.spec = spec

    @abstractmethod
    def __call__(self, ctx: Context) -> bool:
        """Run the strategy; return True if the remote object was changed."""


class Present(SpecOp):
    """Apply only if the object doesn't exist."""

    def __call__(self, ctx: Context) -> bool:
        if self.spec.exists(ctx):
            logger.debug("Skipping %s; already exists", self.spec)
            return False
        if ctx.dry_run:
            logger.info("[DRY RUN] Would create %s", self.spec)
            return False
        logger.info("Creating %s", self.spec)
        self.spec.apply(ctx)
        return True


class Ensure(SpecOp):
    """Apply if current state doesn't match."""

    def __call__(self, ctx: Context) -> bool:
        if self.spec.equals(ctx):
            logger.debug("Skipping %s; up to date", self.spec)
            return False
        if ctx.dry_run:
            logger.info("[DRY RUN] Would apply %s", self.spec)
            return False
        logger.info("Applying %s", self.spec)
        self.spec.apply(ctx)
        return True


class Absent(SpecOp):
    """Remove if the object exists."""

    def __call__(self, ctx: Context) -> bool:
        if not self.spec.exists(ctx):
            logger.debug("Skipping removal of %s; not present", self.spec)
            return False
        if ctx.dry_run:
            logger.info("[DRY RUN] Would remove %s", self.spec)
            return False
        logger.info("Removing %s", self.spec)
        self.spec.remove(ctx)
        return True
