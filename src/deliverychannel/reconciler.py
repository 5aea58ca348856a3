"""Reconcile a delivery channel: put-then-verify, read-and-normalize, delete-with-retry."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .client import DeliveryChannelClient
from .config import DELETE_TIMEOUT, PROPAGATION_TIMEOUT, READBACK_TIMEOUT, Settings
from .context import Context
from .errors import (
    ChannelNotVisibleError,
    ConsistencyError,
    RemoteError,
    RemoteRejectedError,
    is_insufficient_delivery_policy,
    is_no_such_channel,
    is_not_visible,
    is_recorder_still_running,
)
from .models import ChannelSpec, ChannelState
from .retry import RetryPolicy, retry_then_once

logger = logging.getLogger(__name__)


class Reconciler:
    """Drive a single delivery channel toward its desired state.

    The reconciler keeps no state of its own; the channel's identity lives in
    the Context passed to each call and everything else lives remotely.
    """

    def __init__(
        self,
        client: DeliveryChannelClient,
        *,
        propagation_timeout: float = PROPAGATION_TIMEOUT,
        delete_timeout: float = DELETE_TIMEOUT,
        readback_timeout: float = READBACK_TIMEOUT,
        base_delay: float = 0.5,
        max_delay: float = 10.0,
        jitter: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.propagation_timeout = propagation_timeout
        self.delete_timeout = delete_timeout
        self.readback_timeout = readback_timeout
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_settings(
        cls, client: DeliveryChannelClient, settings: Settings, **kwargs
    ) -> Reconciler:
        return cls(
            client,
            propagation_timeout=settings.propagation_timeout,
            delete_timeout=settings.delete_timeout,
            readback_timeout=settings.readback_timeout,
            base_delay=settings.backoff_base_delay,
            max_delay=settings.backoff_max_delay,
            jitter=settings.backoff_jitter,
            **kwargs,
        )

    def policy(self, timeout: float, retryable: Callable[[BaseException], bool]) -> RetryPolicy:
        return RetryPolicy(
            timeout,
            retryable,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            jitter=self.jitter,
            sleep=self._sleep,
            clock=self._clock,
        )

    def upsert(self, ctx: Context, spec: ChannelSpec) -> ChannelState:
        """Create or update the channel, then confirm it by reading it back."""
        channel = spec.to_wire()
        policy = self.policy(self.propagation_timeout, is_insufficient_delivery_policy)

        logger.info("Putting delivery channel '%s'", spec.name)
        try:
            retry_then_once(policy, lambda: self.client.upsert(channel))
        except RemoteError as exc:
            raise RemoteRejectedError("put", spec.name, exc) from exc

        ctx.identity = spec.name
        return self.read_back(ctx)

    def read_back(self, ctx: Context) -> ChannelState:
        """Read a just-written channel, waiting out read-after-write lag.

        Raises ChannelNotVisibleError (leaving the identity cleared) if the
        channel never shows up.
        """
        identity = ctx.identity

        def _read() -> ChannelState:
            ctx.identity = identity
            state = self.read(ctx)
            if state is None:
                raise ChannelNotVisibleError(identity)
            return state

        return retry_then_once(self.policy(self.readback_timeout, is_not_visible), _read)

    def read(self, ctx: Context) -> ChannelState | None:
        """Describe the channel named by ctx.identity.

        Returns None, and clears the identity, when the channel no longer exists.
        """
        identity = ctx.identity
        try:
            channels = self.client.describe_by_names([identity])
        except RemoteError as exc:
            if is_no_such_channel(exc):
                logger.warning("Delivery channel '%s' is gone (%s)", identity, exc.code)
                ctx.identity = ""
                return None
            raise RemoteRejectedError("describe", identity, exc) from exc

        if not channels:
            logger.warning("Delivery channel '%s' is gone (no channels found)", identity)
            ctx.identity = ""
            return None

        if len(channels) > 1:
            raise ConsistencyError(identity, channels)

        return ChannelState.from_wire(channels[0])

    def delete(self, ctx: Context) -> None:
        """Delete the channel, waiting for a running configuration recorder to stop."""
        identity = ctx.identity
        policy = self.policy(self.delete_timeout, is_recorder_still_running)

        logger.info("Deleting delivery channel '%s'", identity)
        try:
            retry_then_once(policy, lambda: self.client.delete_by_name(identity))
        except RemoteError as exc:
            raise RemoteRejectedError("delete", identity, exc) from exc

        ctx.identity = ""

    def import_channel(self, ctx: Context, name: str) -> ChannelState | None:
        """Adopt an existing channel by name."""
        logger.debug("Importing delivery channel '%s'", name)
        ctx.identity = name
        return self.read(ctx)
