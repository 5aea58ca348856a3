"""Delivery channel models and their wire representation."""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CHANNEL_NAME = "default"

DeliveryFrequency = Literal[
    "One_Hour",
    "Three_Hours",
    "Six_Hours",
    "Twelve_Hours",
    "TwentyFour_Hours",
]

_ARN_PATTERN = re.compile(
    r"^arn:[\w-]+:([a-zA-Z0-9\-])+:([a-z]{2}-(gov-)?[a-z]+-\d{1})?:(\d{12})?:(.*)$"
)


class SnapshotDeliveryProperties(BaseModel):
    """Cadence of configuration snapshot delivery."""

    model_config = ConfigDict(frozen=True)

    delivery_frequency: DeliveryFrequency | None = None

    def to_wire(self) -> dict[str, Any]:
        if self.delivery_frequency is None:
            return {}
        return {"deliveryFrequency": self.delivery_frequency}

    @classmethod
    def from_wire(cls, block: dict[str, Any]) -> SnapshotDeliveryProperties:
        return cls.model_construct(delivery_frequency=block.get("deliveryFrequency"))


class ChannelSpec(BaseModel):
    """Desired state of a delivery channel.

    The name doubles as the channel's unique identifier; changing it
    replaces the remote channel rather than updating it.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default=DEFAULT_CHANNEL_NAME, max_length=256)
    s3_bucket_name: str
    s3_key_prefix: str | None = None
    s3_kms_key_arn: str | None = None
    sns_topic_arn: str | None = None
    snapshot_delivery_properties: SnapshotDeliveryProperties | None = None

    @field_validator("s3_kms_key_arn", "sns_topic_arn")
    @classmethod
    def _validate_arn(cls, value: str | None) -> str | None:
        if value and not _ARN_PATTERN.match(value):
            raise ValueError(f"'{value}' is not a valid ARN")
        return value

    def to_wire(self) -> dict[str, Any]:
        """Build the service's channel object, carrying only the fields that are set."""
        channel: dict[str, Any] = {
            "name": self.name,
            "s3BucketName": self.s3_bucket_name,
        }
        if self.s3_key_prefix:
            channel["s3KeyPrefix"] = self.s3_key_prefix
        if self.s3_kms_key_arn:
            channel["s3KmsKeyArn"] = self.s3_kms_key_arn
        if self.sns_topic_arn:
            channel["snsTopicARN"] = self.sns_topic_arn
        if self.snapshot_delivery_properties is not None:
            channel["configSnapshotDeliveryProperties"] = (
                self.snapshot_delivery_properties.to_wire()
            )
        return channel

    def matches(self, state: ChannelState) -> bool:
        """Observed state is exactly what this spec would put."""
        return _comparable(self.to_wire()) == _comparable(state.to_wire())


def _comparable(channel: dict[str, Any]) -> dict[str, Any]:
    # an empty snapshot block and no block put the same channel
    if channel.get("configSnapshotDeliveryProperties") == {}:
        channel = {k: v for k, v in channel.items() if k != "configSnapshotDeliveryProperties"}
    return channel


class ChannelState(ChannelSpec):
    """A delivery channel as reported by the service.

    Built with model_construct: values the service returns are taken as-is,
    without the checks applied to desired input.
    """

    @classmethod
    def from_wire(cls, channel: dict[str, Any]) -> ChannelState:
        block = channel.get("configSnapshotDeliveryProperties")
        return cls.model_construct(
            name=channel.get("name", DEFAULT_CHANNEL_NAME),
            s3_bucket_name=channel.get("s3BucketName", ""),
            s3_key_prefix=channel.get("s3KeyPrefix"),
            s3_kms_key_arn=channel.get("s3KmsKeyArn"),
            sns_topic_arn=channel.get("snsTopicARN"),
            snapshot_delivery_properties=(
                SnapshotDeliveryProperties.from_wire(block) if block is not None else None
            ),
        )
