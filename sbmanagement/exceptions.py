"""
Service Bus Management Exception Hierarchy

Exception types raised while decoding, encoding and normalizing
subscription descriptions, with error codes and context.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

from typing import Any, Dict, Optional

from .constants import (
    ERROR_FIELD_DECODE,
    ERROR_INVALID_ADDRESS,
    ERROR_SUBSCRIPTION_NOT_FOUND,
    ERROR_UNKNOWN_ENUM_VALUE,
)


class ServiceBusError(Exception):
    """
    Base exception for all Service Bus management errors.
    
    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., 'EntityNotFound')
        details: Additional context (entity_type, entity_name, etc.)
    """
    
    error_code: str = "ServiceBusError"
    
    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.error_code
        self.details = details or {}

# ========== Entity Errors ==========

class EntityError(ServiceBusError):
    """Base class for entity-related errors."""
    error_code = "EntityError"


class EntityNotFoundError(EntityError):
    """Raised when a response does not describe the expected entity."""
    error_code = "EntityNotFound"
    
    def __init__(
        self,
        entity_type: str,
        entity_name: Optional[str] = None,
        message: Optional[str] = None
    ):
        if message is None:
            if entity_name:
                message = f"{entity_type.capitalize()} '{entity_name}' not found"
            else:
                message = f"{entity_type.capitalize()} was not found"
        details = {"entity_type": entity_type, "entity_name": entity_name}
        super().__init__(message, details=details)


class SubscriptionNotFoundError(EntityNotFoundError):
    """Raised when a subscription entry or feed is missing or empty."""
    def __init__(
        self,
        topic_name: str,
        subscription_name: Optional[str] = None,
        message: Optional[str] = None
    ):
        super().__init__(
            "subscription",
            subscription_name,
            message or ERROR_SUBSCRIPTION_NOT_FOUND
        )
        self.details["topic_name"] = topic_name


class GenericEntityError(EntityError):
    """
    Non-retryable error for any unexpected failure while decoding an entity.
    
    The original exception is kept on ``cause`` and chained as ``__cause__``.
    """
    error_code = "GenericEntityError"
    
    def __init__(
        self,
        cause: BaseException,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        message = message or f"Failed to decode entity: {cause}"
        details = dict(details or {})
        details["cause_type"] = type(cause).__name__
        super().__init__(message, details=details)
        self.cause = cause


# ========== Field Errors ==========

class FieldDecodeError(ServiceBusError):
    """Raised when a recognized element's text does not parse as its type."""
    error_code = "FieldDecodeError"
    
    def __init__(
        self,
        element_name: str,
        value: str,
        reason: str,
        message: Optional[str] = None
    ):
        message = message or ERROR_FIELD_DECODE.format(
            value=value, element=element_name, reason=reason
        )
        details = {
            "element_name": element_name,
            "value": value,
            "reason": reason
        }
        super().__init__(message, details=details)


class UnknownEnumValueError(FieldDecodeError):
    """Raised when an enumeration literal has no matching member."""
    error_code = "UnknownEnumValue"
    
    def __init__(self, element_name: str, value: str, enum_name: str):
        reason = ERROR_UNKNOWN_ENUM_VALUE.format(value=value, enum_name=enum_name)
        super().__init__(element_name, value, reason)
        self.details["enum_name"] = enum_name


# ========== Addressing Errors ==========

class InvalidAddressError(ServiceBusError):
    """Raised when a forwarding address cannot be resolved to an absolute URI."""
    error_code = "InvalidAddress"
    
    def __init__(
        self,
        address: str,
        base_address: Optional[str],
        reason: str,
        message: Optional[str] = None
    ):
        message = message or ERROR_INVALID_ADDRESS.format(
            address=address, base_address=base_address, reason=reason
        )
        details = {
            "address": address,
            "base_address": base_address,
            "reason": reason
        }
        super().__init__(message, details=details)

