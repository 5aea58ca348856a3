"""Remote configuration service client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import RemoteError

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)


class DeliveryChannelClient(Protocol):
    """Remote operations on delivery channels; failures raise RemoteError."""

    def upsert(self, channel: dict[str, Any]) -> None: ...

    def describe_by_names(self, names: list[str]) -> list[dict[str, Any]]: ...

    def delete_by_name(self, name: str) -> None: ...


def _remote_error(exc: ClientError | BotoCoreError) -> RemoteError:
    if isinstance(exc, BotoCoreError):
        return RemoteError(type(exc).__name__, str(exc))
    error = exc.response.get("Error", {})
    return RemoteError(error.get("Code", ""), error.get("Message", ""))


class Boto3DeliveryChannelClient:
    """DeliveryChannelClient backed by the boto3 AWS Config client."""

    def __init__(self, conn: Any) -> None:
        self.conn = conn

    @classmethod
    def from_settings(cls, settings: Settings) -> Boto3DeliveryChannelClient:
        session = boto3.Session(profile_name=settings.profile, region_name=settings.region)
        return cls(session.client("config"))

    def upsert(self, channel: dict[str, Any]) -> None:
        logger.debug("PutDeliveryChannel %s", channel)
        try:
            self.conn.put_delivery_channel(DeliveryChannel=channel)
        except (ClientError, BotoCoreError) as exc:
            raise _remote_error(exc) from exc

    def describe_by_names(self, names: list[str]) -> list[dict[str, Any]]:
        try:
            out = self.conn.describe_delivery_channels(DeliveryChannelNames=names)
        except (ClientError, BotoCoreError) as exc:
            raise _remote_error(exc) from exc
        return out.get("DeliveryChannels", [])

    def delete_by_name(self, name: str) -> None:
        logger.debug("DeleteDeliveryChannel %s", name)
        try:
            self.conn.delete_delivery_channel(DeliveryChannelName=name)
        except (ClientError, BotoCoreError) as exc:
            raise _remote_error(exc) from exc
