"""deliverychannel - reconcile an AWS Config delivery channel against its declared configuration."""

from .client import Boto3DeliveryChannelClient as Boto3DeliveryChannelClient
from .client import DeliveryChannelClient as DeliveryChannelClient
from .config import Settings as Settings
from .config import load_settings as load_settings
from .context import Context as Context
from .errors import ChannelNotVisibleError as ChannelNotVisibleError
from .errors import ConsistencyError as ConsistencyError
from .errors import DeliveryChannelError as DeliveryChannelError
from .errors import RemoteError as RemoteError
from .errors import RemoteRejectedError as RemoteRejectedError
from .errors import RetryTimeoutError as RetryTimeoutError
from .models import ChannelSpec as ChannelSpec
from .models import ChannelState as ChannelState
from .models import SnapshotDeliveryProperties as SnapshotDeliveryProperties
from .reconciler import Reconciler as Reconciler
from .retry import RetryPolicy as RetryPolicy
from .retry import retry_then_once as retry_then_once
from .spec import DeliveryChannel as DeliveryChannel
from .spec import Specification as Specification
from .specop import Absent as Absent
from .specop import Ensure as Ensure
from .specop import Present as Present
from .specop import SpecOp as SpecOp
