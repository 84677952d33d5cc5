"""Communication sub-core — WhatsApp-side message handling.

- Inbound: webhook payload classification and sender normalization
- Outbound: reply splitting into short message chunks
- Delivery: paced in-order sending
- WaSender: the WaSenderAPI HTTP client
"""

from .inbound import (
    InboundEvent,
    IgnoredEvent,
    SelfMessage,
    MissingSender,
    StubMessage,
    TextMessage,
    UnsupportedMessage,
    classify_event,
    to_send_target,
    to_storage_key,
)
from .outbound import split_message, wrap_lines
from .delivery import DeliveryScheduler
from .wasender import WaSenderClient

__all__ = [
    # Inbound
    "InboundEvent",
    "IgnoredEvent",
    "SelfMessage",
    "MissingSender",
    "StubMessage",
    "TextMessage",
    "UnsupportedMessage",
    "classify_event",
    "to_send_target",
    "to_storage_key",
    # Outbound
    "split_message",
    "wrap_lines",
    # Delivery
    "DeliveryScheduler",
    "WaSenderClient",
]
