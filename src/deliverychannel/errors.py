"""Error types and remote error classification."""

from __future__ import annotations

from typing import Any

INSUFFICIENT_DELIVERY_POLICY = "InsufficientDeliveryPolicyException"
NO_SUCH_DELIVERY_CHANNEL = "NoSuchDeliveryChannelException"
LAST_DELIVERY_CHANNEL_DELETE_FAILED = "LastDeliveryChannelDeleteFailedException"

RUNNING_RECORDER_MESSAGE = "there is a running configuration recorder"


class DeliveryChannelError(Exception):
    """Base class for all delivery channel errors."""


class RemoteError(DeliveryChannelError):
    """An error reported by the remote configuration service."""

    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code
        self.message = message


class RemoteRejectedError(DeliveryChannelError):
    """A remote call failed with an error that will not be retried."""

    def __init__(self, operation: str, identity: str, cause: BaseException) -> None:
        super().__init__(f"{operation} delivery channel '{identity}' failed: {cause}")
        self.operation = operation
        self.identity = identity
        self.cause = cause


class ConsistencyError(DeliveryChannelError):
    """The service returned more than one channel for a single name."""

    def __init__(self, identity: str, channels: list[dict[str, Any]]) -> None:
        super().__init__(
            f"Received {len(channels)} delivery channels under '{identity}' "
            f"(expected exactly 1): {channels}"
        )
        self.identity = identity
        self.channels = channels

    @property
    def count(self) -> int:
        return len(self.channels)


class RetryTimeoutError(DeliveryChannelError):
    """The retry window elapsed while the operation was still failing."""

    def __init__(self, timeout: float, attempts: int, last_error: BaseException) -> None:
        super().__init__(f"timed out after {timeout}s ({attempts} attempts): {last_error}")
        self.timeout = timeout
        self.attempts = attempts
        self.last_error = last_error


class ChannelNotVisibleError(DeliveryChannelError):
    """A written channel could not be observed by a subsequent read."""

    def __init__(self, identity: str) -> None:
        super().__init__(f"delivery channel '{identity}' not found after write")
        self.identity = identity


# -- Classification --


def is_remote_error(exc: BaseException, code: str, message: str = "") -> bool:
    """Error is a RemoteError with the given code and (optionally) message fragment."""
    if not isinstance(exc, RemoteError):
        return False
    return exc.code == code and message in exc.message


def is_insufficient_delivery_policy(exc: BaseException) -> bool:
    """Bucket or topic access policy has not propagated yet."""
    return is_remote_error(exc, INSUFFICIENT_DELIVERY_POLICY)


def is_recorder_still_running(exc: BaseException) -> bool:
    """Channel deletion is blocked by a configuration recorder that is still running."""
    return is_remote_error(exc, LAST_DELIVERY_CHANNEL_DELETE_FAILED, RUNNING_RECORDER_MESSAGE)


def is_no_such_channel(exc: BaseException) -> bool:
    return is_remote_error(exc, NO_SUCH_DELIVERY_CHANNEL)


def is_not_visible(exc: BaseException) -> bool:
    return isinstance(exc, ChannelNotVisibleError)
