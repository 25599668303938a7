"""
Service Bus Management Models

Pydantic models for Azure Service Bus subscription descriptions and the
rules nested inside them.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import re
from datetime import timedelta
from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_RULE_NAME, SQL_COMPATIBILITY_LEVEL
from .durations import MAX_DURATION

# Characters outside the XML 1.0 Char production
_XML_ILLEGAL_CHARACTERS = re.compile(
    r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


class EntityStatus(str, Enum):
    """Lifecycle states of a messaging entity, valued by their wire literal."""
    ACTIVE = "Active"
    DISABLED = "Disabled"
    RESTORING = "Restoring"
    SEND_DISABLED = "SendDisabled"
    RECEIVE_DISABLED = "ReceiveDisabled"
    CREATING = "Creating"
    DELETING = "Deleting"
    RENAMING = "Renaming"
    UNKNOWN = "Unknown"


# Rule Models

class SqlFilter(BaseModel):
    """Filter matching messages against a SQL-92 style expression."""
    model_config = ConfigDict(extra='forbid')
    
    filter_type: Literal["SqlFilter"] = "SqlFilter"
    sql_expression: str
    compatibility_level: int = SQL_COMPATIBILITY_LEVEL


class TrueFilter(BaseModel):
    """Filter that accepts every message."""
    model_config = ConfigDict(extra='forbid')
    
    filter_type: Literal["TrueFilter"] = "TrueFilter"
    sql_expression: Literal["1=1"] = "1=1"
    compatibility_level: int = SQL_COMPATIBILITY_LEVEL


class FalseFilter(BaseModel):
    """Filter that rejects every message."""
    model_config = ConfigDict(extra='forbid')
    
    filter_type: Literal["FalseFilter"] = "FalseFilter"
    sql_expression: Literal["1=0"] = "1=0"
    compatibility_level: int = SQL_COMPATIBILITY_LEVEL


class CorrelationFilter(BaseModel):
    """Filter matching system and user properties by equality."""
    model_config = ConfigDict(extra='forbid')
    
    filter_type: Literal["CorrelationFilter"] = "CorrelationFilter"
    correlation_id: Optional[str] = None
    message_id: Optional[str] = None
    to: Optional[str] = None
    reply_to: Optional[str] = None
    label: Optional[str] = None
    session_id: Optional[str] = None
    reply_to_session_id: Optional[str] = None
    content_type: Optional[str] = None
    properties: Dict[str, str] = Field(default_factory=dict)


RuleFilter = Annotated[
    Union[SqlFilter, TrueFilter, FalseFilter, CorrelationFilter],
    Field(discriminator='filter_type'),
]


class SqlRuleAction(BaseModel):
    """Action rewriting message properties when its rule matches."""
    model_config = ConfigDict(extra='forbid')
    
    sql_expression: str
    compatibility_level: int = SQL_COMPATIBILITY_LEVEL


class RuleDescription(BaseModel):
    """Rule containing a filter and an optional action."""
    model_config = ConfigDict(extra='forbid')
    
    name: str = Field(default=DEFAULT_RULE_NAME, min_length=1)
    filter: RuleFilter = Field(default_factory=TrueFilter)
    action: Optional[SqlRuleAction] = None


# Subscription Model

class SubscriptionDescription(BaseModel):
    """
    Description of a Service Bus subscription as carried by the management API.
    
    Defaults are the service defaults, so an element missing from a response
    leaves its field untouched. ``MAX_DURATION`` means unbounded and is never
    written for ``default_message_time_to_live`` or ``auto_delete_on_idle``.
    """
    model_config = ConfigDict(extra='forbid', validate_assignment=True)
    
    topic_name: str = Field(min_length=1)
    subscription_name: str = Field(min_length=1)
    lock_duration: timedelta = Field(default=timedelta(seconds=60))
    requires_session: bool = False
    default_message_time_to_live: timedelta = MAX_DURATION
    enable_dead_lettering_on_message_expiration: bool = False
    enable_dead_lettering_on_filter_evaluation_exceptions: bool = True
    default_rule_description: Optional[RuleDescription] = None
    max_delivery_count: int = 10
    enable_batched_operations: bool = True
    status: EntityStatus = EntityStatus.ACTIVE
    forward_to: Optional[str] = None
    user_metadata: Optional[str] = None
    forward_dead_lettered_messages_to: Optional[str] = None
    auto_delete_on_idle: timedelta = MAX_DURATION
    
    @field_validator('forward_to', 'user_metadata', 'forward_dead_lettered_messages_to')
    @classmethod
    def validate_xml_text(cls, v: Optional[str]) -> Optional[str]:
        """Reject text that cannot be written into an XML 1.0 document."""
        if v is not None:
            match = _XML_ILLEGAL_CHARACTERS.search(v)
            if match:
                raise ValueError(
                    f"character U+{ord(match.group()):04X} is not allowed in XML"
                )
        return v
