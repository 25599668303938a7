"""
sbmanagement: Service Bus management subscription codec

Translates subscription descriptions to and from the Atom XML used by the
Service Bus management API and normalizes forwarding addresses.
"""

__version__ = "0.1.0"
__author__ = "Ayodele Oladeji"

from .addressing import normalize_forward_to_address
from .durations import MAX_DURATION
from .exceptions import (
    EntityNotFoundError,
    FieldDecodeError,
    GenericEntityError,
    InvalidAddressError,
    ServiceBusError,
    SubscriptionNotFoundError,
    UnknownEnumValueError,
)
from .models import EntityStatus, RuleDescription, SubscriptionDescription
from .rule_codec import RuleDescriptionCodec, RuleSerializer
from .subscription_codec import (
    SubscriptionDescriptionCodec,
    decode_entry,
    decode_feed,
    encode_entry,
    normalize_description,
    parse_collection_from_content,
    parse_from_content,
    serialize_to_string,
)

__all__ = [
    "__version__",
    "MAX_DURATION",
    "EntityStatus",
    "RuleDescription",
    "SubscriptionDescription",
    "RuleDescriptionCodec",
    "RuleSerializer",
    "SubscriptionDescriptionCodec",
    "decode_entry",
    "decode_feed",
    "encode_entry",
    "normalize_description",
    "normalize_forward_to_address",
    "parse_collection_from_content",
    "parse_from_content",
    "serialize_to_string",
    "ServiceBusError",
    "EntityNotFoundError",
    "SubscriptionNotFoundError",
    "GenericEntityError",
    "FieldDecodeError",
    "UnknownEnumValueError",
    "InvalidAddressError",
]
