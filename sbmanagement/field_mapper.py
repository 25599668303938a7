"""
SubscriptionDescription field mapping.

Ordered table pairing each wire element of a SubscriptionDescription with
the model attribute it fills, how its text decodes and how it encodes.
The table order is the element order the service expects on writes.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from .constants import DEFAULT_RULE_DESCRIPTION
from .durations import MAX_DURATION, format_duration, parse_duration
from .exceptions import FieldDecodeError, UnknownEnumValueError
from .models import EntityStatus, SubscriptionDescription

_INTEGER_PATTERN = re.compile(r'[+-]?[0-9]+')
_INT32_MIN = -2 ** 31
_INT32_MAX = 2 ** 31 - 1

Decoder = Callable[[str, str], Any]
Encoder = Callable[[Any], Optional[str]]


# ========== Primitive decoders ==========

def parse_bool(element_name: str, text: str) -> bool:
    """Parse the case-sensitive literals 'true' and 'false'."""
    if text == "true":
        return True
    if text == "false":
        return False
    raise FieldDecodeError(element_name, text, "expected 'true' or 'false'")


def parse_int(element_name: str, text: str) -> int:
    """Parse a base-10 signed 32-bit integer."""
    if not _INTEGER_PATTERN.fullmatch(text):
        raise FieldDecodeError(element_name, text, "expected a base-10 integer")
    value = int(text)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise FieldDecodeError(element_name, text, "integer out of range")
    return value


def parse_duration_field(element_name: str, text: str) -> timedelta:
    """Parse an xsd:duration element."""
    try:
        return parse_duration(text)
    except ValueError as e:
        raise FieldDecodeError(element_name, text, str(e)) from e


def parse_status(element_name: str, text: str) -> EntityStatus:
    """Parse an entity status by exact member literal."""
    try:
        return EntityStatus(text)
    except ValueError as e:
        raise UnknownEnumValueError(element_name, text, EntityStatus.__name__) from e


def parse_text(element_name: str, text: str) -> str:
    return text


def parse_non_blank_text(element_name: str, text: str) -> Optional[str]:
    """Keep text only if it has non-whitespace content; None leaves the default."""
    return text if text.strip() else None


# ========== Primitive encoders ==========

def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_optional_duration(value: timedelta) -> Optional[str]:
    """Omit the unbounded sentinel, format anything else."""
    if value == MAX_DURATION:
        return None
    return format_duration(value)


def format_optional_text(value: Optional[str]) -> Optional[str]:
    return value


# ========== Mapping table ==========

@dataclass(frozen=True)
class FieldMapping:
    """
    One SubscriptionDescription element.
    
    Attributes:
        element_name: Local name of the wire element
        attribute: SubscriptionDescription attribute it maps to
        decoder: (element_name, text) -> value; None when the element is
            not read back from the wire. A decoded None keeps the default.
        encoder: value -> text, or None to omit the element; None for
            elements with structured content (the nested rule)
    """
    element_name: str
    attribute: str
    decoder: Optional[Decoder]
    encoder: Optional[Encoder]
    
    @property
    def is_nested(self) -> bool:
        return self.encoder is None
    
    def decode(self, text: str) -> Any:
        return self.decoder(self.element_name, text)
    
    def encode(self, description: SubscriptionDescription) -> Optional[Tuple[str, str]]:
        """Return (element_name, text), or None when the element is omitted."""
        text = self.encoder(getattr(description, self.attribute))
        if text is None:
            return None
        return self.element_name, text


SUBSCRIPTION_FIELDS: Tuple[FieldMapping, ...] = (
    FieldMapping("LockDuration", "lock_duration", parse_duration_field, format_duration),
    FieldMapping("RequiresSession", "requires_session", parse_bool, format_bool),
    FieldMapping("DefaultMessageTimeToLive", "default_message_time_to_live",
                 parse_duration_field, format_optional_duration),
    FieldMapping("DeadLetteringOnMessageExpiration", "enable_dead_lettering_on_message_expiration",
                 parse_bool, format_bool),
    FieldMapping("DeadLetteringOnFilterEvaluationExceptions",
                 "enable_dead_lettering_on_filter_evaluation_exceptions", parse_bool, format_bool),
    FieldMapping(DEFAULT_RULE_DESCRIPTION, "default_rule_description", None, None),
    FieldMapping("MaxDeliveryCount", "max_delivery_count", parse_int, str),
    FieldMapping("EnableBatchedOperations", "enable_batched_operations", parse_bool, format_bool),
    FieldMapping("Status", "status", parse_status, lambda status: status.value),
    FieldMapping("ForwardTo", "forward_to", parse_non_blank_text, format_optional_text),
    FieldMapping("UserMetadata", "user_metadata", parse_text, format_optional_text),
    FieldMapping("ForwardDeadLetteredMessagesTo", "forward_dead_lettered_messages_to",
                 parse_non_blank_text, format_optional_text),
    FieldMapping("AutoDeleteOnIdle", "auto_delete_on_idle", parse_duration_field, format_optional_duration),
)

DECODABLE_FIELDS: Dict[str, FieldMapping] = {
    mapping.element_name: mapping
    for mapping in SUBSCRIPTION_FIELDS
    if mapping.decoder is not None
}


def decode_field(element_name: str, text: str) -> Optional[Tuple[str, Any]]:
    """
    Decode one SubscriptionDescription child element.
    
    Args:
        element_name: Local name of the element
        text: Element text
        
    Returns:
        (attribute, value) to assign, or None when the element is not
        recognized or carries nothing to assign
        
    Raises:
        FieldDecodeError: If the text does not parse as the element's type
    """
    mapping = DECODABLE_FIELDS.get(element_name)
    if mapping is None:
        return None
    value = mapping.decode(text)
    if value is None:
        return None
    return mapping.attribute, value
