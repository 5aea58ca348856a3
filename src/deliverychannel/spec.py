"""Specification ABC and the delivery channel specification."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .context import Context
from .models import ChannelSpec, ChannelState
from .reconciler import Reconciler

logger = logging.getLogger(__name__)


class Specification(ABC):
    """Base class for declared remote objects."""

    @abstractmethod
    def equals(self, ctx: Context) -> bool:
        """Current state matches desired state."""

    def exists(self, ctx: Context) -> bool:
        """Resource exists (defaults to equals)."""
        return self.equals(ctx)

    @abstractmethod
    def apply(self, ctx: Context) -> None:
        """Create or update resource."""

    @abstractmethod
    def remove(self, ctx: Context) -> None:
        """Delete resource."""

    def __str__(self) -> str:
        return type(self).__name__


class DeliveryChannel(Specification):
    """A declared delivery channel, reconciled through a Reconciler."""

    def __init__(self, desired: ChannelSpec, reconciler: Reconciler) -> None:
        self.desired = desired
        self.reconciler = reconciler

    def observe(self, ctx: Context) -> ChannelState | None:
        """Read the tracked channel, or look for one under the desired name."""
        if not ctx.identity:
            return self.reconciler.import_channel(ctx, self.desired.name)
        return self.reconciler.read(ctx)

    def exists(self, ctx: Context) -> bool:
        return self.observe(ctx) is not None

    def equals(self, ctx: Context) -> bool:
        state = self.observe(ctx)
        if state is None or state.name != self.desired.name:
            return False
        return self.desired.matches(state)

    def apply(self, ctx: Context) -> None:
        # the name is the channel's identity, so a rename is a replacement
        if ctx.identity and ctx.identity != self.desired.name:
            logger.info(
                "Replacing delivery channel '%s' with '%s'", ctx.identity, self.desired.name
            )
            self.reconciler.delete(ctx)
        self.reconciler.upsert(ctx, self.desired)

    def remove(self, ctx: Context) -> None:
        self.reconciler.delete(ctx)

    def __str__(self) -> str:
        return f"delivery channel '{self.desired.name}'"
