"""
Unit Tests for Service Bus Management Exceptions

Tests for the exception hierarchy and error details.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

from sbmanagement.exceptions import (
    EntityError,
    EntityNotFoundError,
    FieldDecodeError,
    GenericEntityError,
    InvalidAddressError,
    ServiceBusError,
    SubscriptionNotFoundError,
    UnknownEnumValueError,
)


class TestServiceBusError:
    """Tests for base ServiceBusError class."""
    
    def test_basic_error(self):
        """Test basic error creation."""
        error = ServiceBusError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.error_code == "ServiceBusError"
        assert error.details == {}
    
    def test_explicit_code_and_details(self):
        """Test the error code and details can be given per instance."""
        error = ServiceBusError("Test error", error_code="TestCode", details={"foo": "bar"})
        assert error.error_code == "TestCode"
        assert error.details == {"foo": "bar"}
        assert ServiceBusError.error_code == "ServiceBusError"
    
    def test_only_codec_surface(self):
        """Test the hierarchy carries no serialization or retry helpers."""
        error = GenericEntityError(ValueError("bad"))
        assert not hasattr(error, "to_dict")
        assert not hasattr(error, "is_transient")


class TestEntityErrors:
    """Tests for entity-related errors."""
    
    def test_entity_not_found(self):
        """Test EntityNotFoundError with a name."""
        error = EntityNotFoundError("subscription", "audit")
        assert error.error_code == "EntityNotFound"
        assert "Subscription 'audit' not found" == error.message
        assert error.details == {"entity_type": "subscription", "entity_name": "audit"}
    
    def test_subscription_not_found(self):
        """Test SubscriptionNotFoundError."""
        error = SubscriptionNotFoundError("orders")
        assert isinstance(error, EntityNotFoundError)
        assert isinstance(error, EntityError)
        assert error.error_code == "EntityNotFound"
        assert error.message == "Subscription was not found"
        assert error.details["topic_name"] == "orders"
        assert error.details["entity_name"] is None
    
    def test_generic_entity_error(self):
        """Test GenericEntityError keeps its cause."""
        cause = FieldDecodeError("Status", "Paused", "unknown")
        error = GenericEntityError(cause, details={"topic_name": "orders"})
        assert error.cause is cause
        assert error.error_code == "GenericEntityError"
        assert error.details == {"topic_name": "orders", "cause_type": "FieldDecodeError"}
        assert "Paused" in error.message


class TestFieldErrors:
    """Tests for field decode errors."""
    
    def test_field_decode_error(self):
        """Test FieldDecodeError details."""
        error = FieldDecodeError("MaxDeliveryCount", "ten", "expected a base-10 integer")
        assert error.error_code == "FieldDecodeError"
        assert error.message == "Invalid value 'ten' for element 'MaxDeliveryCount': expected a base-10 integer"
        assert error.details["element_name"] == "MaxDeliveryCount"
    
    def test_unknown_enum_value(self):
        """Test UnknownEnumValueError is a FieldDecodeError."""
        error = UnknownEnumValueError("Status", "Paused", "EntityStatus")
        assert isinstance(error, FieldDecodeError)
        assert error.error_code == "UnknownEnumValue"
        assert error.details["enum_name"] == "EntityStatus"
        assert "'Paused' is not a known EntityStatus value" in error.message


class TestInvalidAddressError:
    """Tests for InvalidAddressError."""
    
    def test_details(self):
        """Test address details."""
        error = InvalidAddressError("q", "relative", "base address is not an absolute URI")
        assert error.error_code == "InvalidAddress"
        assert error.details == {
            "address": "q",
            "base_address": "relative",
            "reason": "base address is not an absolute URI",
        }

