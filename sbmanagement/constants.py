"""
Service Bus Management Constants

Centralized XML namespaces, element names and error messages for the
subscription Atom codec.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

# XML namespaces
ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"
SERVICEBUS_NAMESPACE = "http://schemas.microsoft.com/netservices/2010/10/servicebus/connect"
XML_SCHEMA_INSTANCE_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
XML_SCHEMA_NAMESPACE = "http://www.w3.org/2001/XMLSchema"

# XML constants
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'
XML_MEDIA_TYPE = "application/xml"

# Atom element names
ATOM_ENTRY = "entry"
ATOM_FEED = "feed"
ATOM_TITLE = "title"
ATOM_CONTENT = "content"

# Entity element names
SUBSCRIPTION_DESCRIPTION = "SubscriptionDescription"
DEFAULT_RULE_DESCRIPTION = "DefaultRuleDescription"
DEFAULT_RULE_NAME = "$Default"

# SQL filter/action compatibility level the service expects
SQL_COMPATIBILITY_LEVEL = 20

# Error message templates
ERROR_SUBSCRIPTION_NOT_FOUND = "Subscription was not found"
ERROR_INVALID_ADDRESS = "Cannot resolve '{address}' against '{base_address}': {reason}"
ERROR_FIELD_DECODE = "Invalid value '{value}' for element '{element}': {reason}"
ERROR_UNKNOWN_ENUM_VALUE = "'{value}' is not a known {enum_name} value"
