"""
Rule description codec.

Serializes RuleDescription models to the service's XML rule body, used for
the DefaultRuleDescription nested in a subscription, and parses rule
bodies back.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import xml.etree.ElementTree as ET
from typing import Dict, Optional, Protocol

from .constants import SERVICEBUS_NAMESPACE, XML_SCHEMA_INSTANCE_NAMESPACE, XML_SCHEMA_NAMESPACE
from .exceptions import UnknownEnumValueError
from .field_mapper import parse_int
from .models import (
    CorrelationFilter,
    FalseFilter,
    RuleDescription,
    SqlFilter,
    SqlRuleAction,
    TrueFilter,
)

XSI_TYPE = f"{{{XML_SCHEMA_INSTANCE_NAMESPACE}}}type"

# Wire order of CorrelationFilter system properties
_CORRELATION_FIELDS = (
    ("CorrelationId", "correlation_id"),
    ("MessageId", "message_id"),
    ("To", "to"),
    ("ReplyTo", "reply_to"),
    ("Label", "label"),
    ("SessionId", "session_id"),
    ("ReplyToSessionId", "reply_to_session_id"),
    ("ContentType", "content_type"),
)


class RuleSerializer(Protocol):
    """
    Capability the subscription codec needs to embed a rule.
    
    Returned elements carry namespace-qualified tags.
    """
    
    def serialize_rule(self, rule: RuleDescription, element_name: str) -> ET.Element:
        ...


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    child = _child(element, name)
    if child is None:
        return None
    return "".join(child.itertext())


def _type_name(element: ET.Element) -> Optional[str]:
    """Return the xsi:type local name of an element, dropping any prefix."""
    value = element.get(XSI_TYPE)
    if value is None:
        return None
    return value.rsplit(":", 1)[-1]


class RuleDescriptionCodec:
    """Converts RuleDescription models to and from XML rule bodies."""
    
    def __init__(self, servicebus_namespace: str = SERVICEBUS_NAMESPACE):
        self.servicebus_namespace = servicebus_namespace
    
    def _sb(self, name: str) -> str:
        return f"{{{self.servicebus_namespace}}}{name}"
    
    def serialize_rule(self, rule: RuleDescription, element_name: str = "RuleDescription") -> ET.Element:
        """
        Build the XML body of a rule.
        
        Tags are qualified with the Service Bus namespace and type
        attributes with the XML Schema instance namespace.
        
        Args:
            rule: Rule to serialize
            element_name: Tag of the rule element (e.g. DefaultRuleDescription)
            
        Returns:
            Rule element
        """
        rule_elem = ET.Element(self._sb(element_name))
        rule_elem.append(self._serialize_filter(rule.filter))
        rule_elem.append(self._serialize_action(rule.action))
        ET.SubElement(rule_elem, self._sb("Name")).text = rule.name
        return rule_elem
    
    def _serialize_filter(self, rule_filter) -> ET.Element:
        filter_elem = ET.Element(self._sb("Filter"), {XSI_TYPE: rule_filter.filter_type})
        
        if isinstance(rule_filter, CorrelationFilter):
            for element_name, attribute in _CORRELATION_FIELDS:
                value = getattr(rule_filter, attribute)
                if value is not None:
                    ET.SubElement(filter_elem, self._sb(element_name)).text = value
            if rule_filter.properties:
                filter_elem.append(self._serialize_properties(rule_filter.properties))
            return filter_elem
        
        ET.SubElement(filter_elem, self._sb("SqlExpression")).text = rule_filter.sql_expression
        ET.SubElement(filter_elem, self._sb("CompatibilityLevel")).text = str(rule_filter.compatibility_level)
        return filter_elem
    
    def _serialize_properties(self, properties: Dict[str, str]) -> ET.Element:
        properties_elem = ET.Element(self._sb("Properties"))
        for key, value in properties.items():
            pair = ET.SubElement(properties_elem, self._sb("KeyValueOfstringanyType"))
            ET.SubElement(pair, self._sb("Key")).text = key
            ET.SubElement(pair, self._sb("Value"), {
                XSI_TYPE: "d6p1:string",
                "xmlns:d6p1": XML_SCHEMA_NAMESPACE,
            }).text = value
        return properties_elem
    
    def _serialize_action(self, action: Optional[SqlRuleAction]) -> ET.Element:
        if action is None:
            return ET.Element(self._sb("Action"), {XSI_TYPE: "EmptyRuleAction"})
        
        action_elem = ET.Element(self._sb("Action"), {XSI_TYPE: "SqlRuleAction"})
        ET.SubElement(action_elem, self._sb("SqlExpression")).text = action.sql_expression
        ET.SubElement(action_elem, self._sb("CompatibilityLevel")).text = str(action.compatibility_level)
        return action_elem
    
    def parse_rule_element(self, element: ET.Element) -> RuleDescription:
        """
        Parse a parsed rule element (RuleDescription or DefaultRuleDescription).
        
        Missing parts fall back to the model defaults.
        
        Raises:
            FieldDecodeError: On an unknown filter/action type or bad number
        """
        fields = {}
        
        name = _child_text(element, "Name")
        if name:
            fields["name"] = name
        
        filter_elem = _child(element, "Filter")
        if filter_elem is not None:
            fields["filter"] = self._parse_filter(filter_elem)
        
        action_elem = _child(element, "Action")
        if action_elem is not None:
            fields["action"] = self._parse_action(action_elem)
        
        return RuleDescription(**fields)
    
    def _parse_filter(self, filter_elem: ET.Element):
        filter_type = _type_name(filter_elem)
        
        if filter_type == "CorrelationFilter":
            values = {}
            for element_name, attribute in _CORRELATION_FIELDS:
                text = _child_text(filter_elem, element_name)
                if text is not None:
                    values[attribute] = text
            properties_elem = _child(filter_elem, "Properties")
            if properties_elem is not None:
                values["properties"] = {
                    _child_text(pair, "Key") or "": _child_text(pair, "Value") or ""
                    for pair in properties_elem
                }
            return CorrelationFilter(**values)
        
        if filter_type == "TrueFilter":
            return TrueFilter(**self._compatibility(filter_elem))
        if filter_type == "FalseFilter":
            return FalseFilter(**self._compatibility(filter_elem))
        if filter_type == "SqlFilter":
            return SqlFilter(
                sql_expression=_child_text(filter_elem, "SqlExpression") or "",
                **self._compatibility(filter_elem)
            )
        
        raise UnknownEnumValueError("Filter", str(filter_type), "RuleFilter")
    
    def _parse_action(self, action_elem: ET.Element) -> Optional[SqlRuleAction]:
        action_type = _type_name(action_elem)
        
        if action_type in (None, "EmptyRuleAction"):
            return None
        if action_type == "SqlRuleAction":
            return SqlRuleAction(
                sql_expression=_child_text(action_elem, "SqlExpression") or "",
                **self._compatibility(action_elem)
            )
        
        raise UnknownEnumValueError("Action", action_type, "RuleAction")
    
    def _compatibility(self, element: ET.Element) -> dict:
        text = _child_text(element, "CompatibilityLevel")
        if text is None:
            return {}
        return {"compatibility_level": parse_int("CompatibilityLevel", text)}
