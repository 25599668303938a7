"""
Unit Tests for the SubscriptionDescription Field Mapping

Author: Ayodele Oladeji
Date: 2025-12-05
"""

from datetime import timedelta

import pytest

from sbmanagement.durations import MAX_DURATION
from sbmanagement.exceptions import FieldDecodeError, UnknownEnumValueError
from sbmanagement.field_mapper import (
    DECODABLE_FIELDS,
    SUBSCRIPTION_FIELDS,
    decode_field,
    format_bool,
    parse_bool,
    parse_int,
    parse_status,
)
from sbmanagement.models import EntityStatus, SubscriptionDescription


def make_description(**kwargs) -> SubscriptionDescription:
    return SubscriptionDescription(topic_name="orders", subscription_name="audit", **kwargs)


class TestPrimitiveDecoders:
    """Tests for the primitive text decoders."""
    
    def test_bool_literals(self):
        """Test the exact boolean literals."""
        assert parse_bool("RequiresSession", "true") is True
        assert parse_bool("RequiresSession", "false") is False
    
    @pytest.mark.parametrize("text", ["True", "FALSE", "1", "", " true"])
    def test_bool_is_case_sensitive(self, text):
        """Test other spellings are rejected."""
        with pytest.raises(FieldDecodeError) as exc_info:
            parse_bool("RequiresSession", text)
        assert exc_info.value.details["element_name"] == "RequiresSession"
    
    @pytest.mark.parametrize("text,expected", [("10", 10), ("-3", -3), ("+7", 7), ("2147483647", 2147483647)])
    def test_int(self, text, expected):
        """Test base-10 integers."""
        assert parse_int("MaxDeliveryCount", text) == expected
    
    @pytest.mark.parametrize("text", ["", "1_000", "0x10", "1.0", "ten", "2147483648", "7\n"])
    def test_int_rejects(self, text):
        """Test malformed or out-of-range integers."""
        with pytest.raises(FieldDecodeError):
            parse_int("MaxDeliveryCount", text)
    
    def test_status(self):
        """Test status literals map to members."""
        assert parse_status("Status", "SendDisabled") is EntityStatus.SEND_DISABLED
    
    @pytest.mark.parametrize("text", ["active", "Paused", ""])
    def test_status_unknown(self, text):
        """Test unmapped literals raise UnknownEnumValueError."""
        with pytest.raises(UnknownEnumValueError) as exc_info:
            parse_status("Status", text)
        assert exc_info.value.error_code == "UnknownEnumValue"
    
    def test_format_bool(self):
        """Test boolean text."""
        assert format_bool(True) == "true"
        assert format_bool(False) == "false"


class TestDecodeField:
    """Tests for decode_field."""
    
    def test_recognized_element(self):
        """Test a recognized element returns its attribute and value."""
        assert decode_field("LockDuration", "PT30S") == ("lock_duration", timedelta(seconds=30))
        assert decode_field("DeadLetteringOnFilterEvaluationExceptions", "false") == (
            "enable_dead_lettering_on_filter_evaluation_exceptions", False
        )
    
    def test_unknown_element(self):
        """Test unrecognized elements are ignored."""
        assert decode_field("MessageCount", "5") is None
        assert decode_field("CountDetails", "") is None
    
    def test_default_rule_is_not_decoded(self):
        """Test the nested rule element is not read back."""
        assert "DefaultRuleDescription" not in DECODABLE_FIELDS
        assert decode_field("DefaultRuleDescription", "anything") is None
    
    @pytest.mark.parametrize("element", ["ForwardTo", "ForwardDeadLetteredMessagesTo"])
    def test_blank_forwarding_ignored(self, element):
        """Test blank forwarding values leave the default."""
        assert decode_field(element, "") is None
        assert decode_field(element, "   ") is None
        assert decode_field(element, "q1") == (DECODABLE_FIELDS[element].attribute, "q1")
    
    def test_user_metadata_verbatim(self):
        """Test user metadata is kept as-is, including blank text."""
        assert decode_field("UserMetadata", "") == ("user_metadata", "")
        assert decode_field("UserMetadata", " note ") == ("user_metadata", " note ")
    
    def test_malformed_value(self):
        """Test malformed text raises FieldDecodeError."""
        with pytest.raises(FieldDecodeError):
            decode_field("DefaultMessageTimeToLive", "forever")


class TestEncodeTable:
    """Tests for the encode side of the table."""
    
    def test_element_order(self):
        """Test the table order matches the service's element order."""
        assert [m.element_name for m in SUBSCRIPTION_FIELDS] == [
            "LockDuration",
            "RequiresSession",
            "DefaultMessageTimeToLive",
            "DeadLetteringOnMessageExpiration",
            "DeadLetteringOnFilterEvaluationExceptions",
            "DefaultRuleDescription",
            "MaxDeliveryCount",
            "EnableBatchedOperations",
            "Status",
            "ForwardTo",
            "UserMetadata",
            "ForwardDeadLetteredMessagesTo",
            "AutoDeleteOnIdle",
        ]
    
    def test_defaults_encode(self):
        """Test the elements emitted for a default description."""
        description = make_description()
        encoded = [
            mapping.encode(description)
            for mapping in SUBSCRIPTION_FIELDS
            if not mapping.is_nested
        ]
        assert [pair for pair in encoded if pair is not None] == [
            ("LockDuration", "PT1M"),
            ("RequiresSession", "false"),
            ("DeadLetteringOnMessageExpiration", "false"),
            ("DeadLetteringOnFilterEvaluationExceptions", "true"),
            ("MaxDeliveryCount", "10"),
            ("EnableBatchedOperations", "true"),
            ("Status", "Active"),
        ]
    
    def test_sentinel_durations_omitted(self):
        """Test unbounded durations are omitted and bounded ones emitted."""
        mapping = {m.element_name: m for m in SUBSCRIPTION_FIELDS}
        description = make_description(
            default_message_time_to_live=MAX_DURATION,
            auto_delete_on_idle=timedelta(hours=1),
        )
        assert mapping["DefaultMessageTimeToLive"].encode(description) is None
        assert mapping["AutoDeleteOnIdle"].encode(description) == ("AutoDeleteOnIdle", "PT1H")
    
    def test_optional_strings(self):
        """Test absent strings are omitted and present ones emitted verbatim."""
        mapping = {m.element_name: m for m in SUBSCRIPTION_FIELDS}
        description = make_description(user_metadata="", forward_to="q1")
        assert mapping["UserMetadata"].encode(description) == ("UserMetadata", "")
        assert mapping["ForwardTo"].encode(description) == ("ForwardTo", "q1")
        assert mapping["ForwardDeadLetteredMessagesTo"].encode(description) is None
