"""
Subscription Atom codec.

Decodes Atom entries and feeds returned by the Service Bus management API
into SubscriptionDescription models, encodes models back into entries,
and normalizes forwarding addresses before they are sent.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import xml.etree.ElementTree as ET
from typing import List, Optional

from defusedxml.common import DefusedXmlException
from defusedxml.ElementTree import ParseError
from defusedxml.ElementTree import fromstring as safe_fromstring
from pydantic import ValidationError

from .addressing import normalize_forward_to_address
from .config import CodecConfig
from .constants import (
    ATOM_CONTENT,
    ATOM_ENTRY,
    ATOM_FEED,
    ATOM_NAMESPACE,
    ATOM_TITLE,
    SERVICEBUS_NAMESPACE,
    SUBSCRIPTION_DESCRIPTION,
    XML_DECLARATION,
    XML_MEDIA_TYPE,
)
from .exceptions import (
    FieldDecodeError,
    GenericEntityError,
    SubscriptionNotFoundError,
)
from .field_mapper import DECODABLE_FIELDS, SUBSCRIPTION_FIELDS, decode_field
from .logging_utils import StructuredLogger
from .models import SubscriptionDescription
from .rule_codec import RuleDescriptionCodec, RuleSerializer

logger = StructuredLogger(__name__)

FORWARDING_FIELDS = ("forward_to", "forward_dead_lettered_messages_to")


def _local_name(tag) -> Optional[str]:
    if not isinstance(tag, str):
        return None
    return tag.rsplit("}", 1)[-1]


def _text(element: ET.Element) -> str:
    """Concatenated text of an element and its descendants."""
    return "".join(element.itertext())


def _is_empty(element: ET.Element) -> bool:
    return len(element) == 0 and not (element.text or "").strip()


def _to_wire(element: ET.Element, parent_namespace: str = "") -> ET.Element:
    """
    Copy a namespace-qualified tree into the service's wire form.
    
    Tags become unqualified and each element whose namespace differs from
    its parent's declares it as the default namespace, so unprefixed
    xsi:type values resolve against the Service Bus namespace.
    """
    tag = element.tag
    namespace = ""
    if tag.startswith("{"):
        namespace, _, tag = tag[1:].partition("}")
    
    attrib = dict(element.attrib)
    if namespace != parent_namespace:
        attrib["xmlns"] = namespace
    
    copy = ET.Element(tag, attrib)
    copy.text = element.text
    copy.tail = element.tail
    for child in element:
        copy.append(_to_wire(child, namespace))
    return copy


class SubscriptionDescriptionCodec:
    """
    Converts between SubscriptionDescription models and Atom XML.
    
    Instances hold only immutable configuration and may be shared across
    threads.
    """
    
    def __init__(
        self,
        atom_namespace: str = ATOM_NAMESPACE,
        servicebus_namespace: str = SERVICEBUS_NAMESPACE,
        rule_serializer: Optional[RuleSerializer] = None,
    ):
        self.atom_namespace = atom_namespace
        self.servicebus_namespace = servicebus_namespace
        self.rule_serializer = rule_serializer or RuleDescriptionCodec(servicebus_namespace)
    
    @classmethod
    def from_config(
        cls,
        config: CodecConfig,
        rule_serializer: Optional[RuleSerializer] = None,
    ) -> "SubscriptionDescriptionCodec":
        """Create a codec using the namespaces from a CodecConfig."""
        return cls(
            atom_namespace=config.atom_namespace,
            servicebus_namespace=config.servicebus_namespace,
            rule_serializer=rule_serializer,
        )
    
    def _atom(self, name: str) -> str:
        return f"{{{self.atom_namespace}}}{name}"
    
    def _sb(self, name: str) -> str:
        return f"{{{self.servicebus_namespace}}}{name}"
    
    # ========== Decoding ==========
    
    def parse_from_content(self, topic_name: str, xml_content: str) -> SubscriptionDescription:
        """
        Decode a single-entry response body.
        
        Raises:
            SubscriptionNotFoundError: Body is blank or not a subscription entry
            GenericEntityError: Body is malformed or a field does not decode
        """
        root = self._parse_document(topic_name, xml_content)
        return self.decode_entry(topic_name, root)
    
    def parse_collection_from_content(self, topic_name: str, xml_content: str) -> List[SubscriptionDescription]:
        """
        Decode a feed response body.
        
        Raises:
            SubscriptionNotFoundError: Body is blank, empty, or not a feed
            GenericEntityError: Body is malformed or a field does not decode
        """
        root = self._parse_document(topic_name, xml_content)
        return self.decode_feed(topic_name, root)
    
    def _parse_document(self, topic_name: str, xml_content: str) -> ET.Element:
        if not xml_content or not xml_content.strip():
            raise SubscriptionNotFoundError(topic_name)
        
        try:
            return safe_fromstring(xml_content)
        except (ParseError, DefusedXmlException) as e:
            logger.log_error("parse_document", type(e).__name__, str(e), topic_name=topic_name)
            raise GenericEntityError(e, f"Invalid subscription XML: {e}") from e
    
    def decode_feed(self, topic_name: str, feed: ET.Element) -> List[SubscriptionDescription]:
        """
        Decode every Atom entry of a feed, in document order.
        
        An empty feed is reported as not found, the way the service signals
        an empty result set.
        
        Args:
            topic_name: Topic owning the subscriptions
            feed: Parsed feed element
            
        Returns:
            Decoded subscriptions
            
        Raises:
            SubscriptionNotFoundError: Root is not a feed or has no content
            GenericEntityError: Any entry fails to decode
        """
        if _local_name(feed.tag) != ATOM_FEED or _is_empty(feed):
            raise SubscriptionNotFoundError(topic_name)
        
        subscriptions = [
            self.decode_entry(topic_name, entry)
            for entry in feed.findall(self._atom(ATOM_ENTRY))
        ]
        logger.log_operation("decode_feed", "topic", topic_name, entry_count=len(subscriptions))
        return subscriptions
    
    def decode_entry(self, topic_name: str, entry: ET.Element) -> SubscriptionDescription:
        """
        Decode one Atom entry into a SubscriptionDescription.
        
        The subscription name comes from the entry title; the topic name is
        supplied by the caller. Unrecognized elements are skipped and
        missing ones keep their defaults.
        
        Args:
            topic_name: Topic owning the subscription
            entry: Parsed entry element
            
        Returns:
            Decoded subscription
            
        Raises:
            SubscriptionNotFoundError: Root is not an entry, is empty, or lacks
                a title or SubscriptionDescription body
            GenericEntityError: A recognized element does not decode
        """
        if _local_name(entry.tag) != ATOM_ENTRY or _is_empty(entry):
            raise SubscriptionNotFoundError(topic_name)
        
        title = entry.find(self._atom(ATOM_TITLE))
        name = _text(title) if title is not None else ""
        if not name.strip():
            raise SubscriptionNotFoundError(topic_name)
        
        content = entry.find(self._atom(ATOM_CONTENT))
        body = content.find(self._sb(SUBSCRIPTION_DESCRIPTION)) if content is not None else None
        if body is None:
            raise SubscriptionNotFoundError(topic_name, name)
        
        fields = {}
        try:
            for element in body:
                element_name = _local_name(element.tag)
                if element_name not in DECODABLE_FIELDS:
                    logger.debug(
                        f"Skipping element {element_name}",
                        operation="decode_entry",
                        element_name=element_name,
                    )
                    continue
                decoded = decode_field(element_name, _text(element))
                if decoded is not None:
                    attribute, value = decoded
                    fields[attribute] = value
            
            description = SubscriptionDescription(
                topic_name=topic_name,
                subscription_name=name,
                **fields
            )
        except (FieldDecodeError, ValidationError) as e:
            logger.log_error(
                "decode_entry", type(e).__name__, str(e),
                topic_name=topic_name, subscription_name=name,
            )
            raise GenericEntityError(
                e,
                f"Failed to decode subscription '{name}': {e}",
                details={"topic_name": topic_name, "subscription_name": name},
            ) from e
        
        logger.log_operation("decode_entry", "subscription", f"{topic_name}/{name}")
        return description
    
    # ========== Encoding ==========
    
    def encode_entry(self, description: SubscriptionDescription) -> ET.ElementTree:
        """
        Encode a SubscriptionDescription as an Atom entry.
        
        Elements are written in the order the service expects; unbounded
        durations and absent optional strings are omitted. Tags are
        namespace-qualified; serialize_to_string renders the wire form.
        """
        entry = ET.Element(self._atom(ATOM_ENTRY))
        content = ET.SubElement(entry, self._atom(ATOM_CONTENT), {"type": XML_MEDIA_TYPE})
        body = ET.SubElement(content, self._sb(SUBSCRIPTION_DESCRIPTION))
        
        for mapping in SUBSCRIPTION_FIELDS:
            if mapping.is_nested:
                rule = getattr(description, mapping.attribute)
                if rule is not None:
                    body.append(self.rule_serializer.serialize_rule(rule, mapping.element_name))
                continue
            
            encoded = mapping.encode(description)
            if encoded is None:
                continue
            element_name, text = encoded
            ET.SubElement(body, self._sb(element_name)).text = text
        
        logger.log_operation(
            "encode_entry", "subscription",
            f"{description.topic_name}/{description.subscription_name}",
        )
        return ET.ElementTree(entry)
    
    def serialize_to_string(self, description: SubscriptionDescription) -> str:
        """Encode a SubscriptionDescription as an XML request body."""
        tree = self.encode_entry(description)
        return XML_DECLARATION + ET.tostring(_to_wire(tree.getroot()), encoding="unicode")


def normalize_description(description: SubscriptionDescription, base_address: str) -> None:
    """
    Rewrite the forwarding fields of a description as absolute URIs, in place.
    
    Blank or absent fields are left untouched.
    
    Raises:
        InvalidAddressError: If a field cannot be resolved against base_address
    """
    for attribute in FORWARDING_FIELDS:
        value = getattr(description, attribute)
        if value is None or not value.strip():
            continue
        
        normalized = normalize_forward_to_address(value, base_address)
        if normalized != value:
            logger.debug(
                f"Normalized {attribute}: {value} -> {normalized}",
                operation="normalize_description",
                attribute=attribute,
            )
        setattr(description, attribute, normalized)


_default_codec = SubscriptionDescriptionCodec()


def decode_entry(topic_name: str, entry: ET.Element) -> SubscriptionDescription:
    return _default_codec.decode_entry(topic_name, entry)


def decode_feed(topic_name: str, feed: ET.Element) -> List[SubscriptionDescription]:
    return _default_codec.decode_feed(topic_name, feed)


def encode_entry(description: SubscriptionDescription) -> ET.ElementTree:
    return _default_codec.encode_entry(description)


def parse_from_content(topic_name: str, xml_content: str) -> SubscriptionDescription:
    return _default_codec.parse_from_content(topic_name, xml_content)


def parse_collection_from_content(topic_name: str, xml_content: str) -> List[SubscriptionDescription]:
    return _default_codec.parse_collection_from_content(topic_name, xml_content)


def serialize_to_string(description: SubscriptionDescription) -> str:
    return _default_codec.serialize_to_string(description)
