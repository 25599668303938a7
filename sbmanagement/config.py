"""
Service Bus Management Configuration

Loads codec configuration from environment variables and YAML files.

Author: Ayodele Oladeji
Date: December 11, 2025
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .constants import ATOM_NAMESPACE, SERVICEBUS_NAMESPACE


@dataclass(frozen=True)
class CodecConfig:
    """
    Configuration for the subscription codec.
    
    Attributes:
        atom_namespace: Namespace of the Atom entry/feed wrapper
        servicebus_namespace: Namespace of the SubscriptionDescription body
        base_address: Namespace endpoint used to normalize forwarding addresses
        log_level: Log level for command-line use
        log_format: "text" or "json"
    """
    
    atom_namespace: str = ATOM_NAMESPACE
    servicebus_namespace: str = SERVICEBUS_NAMESPACE
    base_address: Optional[str] = None
    log_level: str = "INFO"
    log_format: str = "text"


def load_codec_config(config_file: Optional[str] = None) -> CodecConfig:
    """
    Load codec configuration from file or environment variables.
    
    Priority order:
    1. Environment variables (highest priority)
    2. Config file (if specified)
    3. Default values
    
    Environment Variables:
    - SBMANAGEMENT_ATOM_NAMESPACE: Atom wrapper namespace
    - SBMANAGEMENT_SERVICEBUS_NAMESPACE: Entity body namespace
    - SBMANAGEMENT_BASE_ADDRESS: e.g. "https://myns.servicebus.windows.net"
    - SBMANAGEMENT_LOG_LEVEL: "DEBUG", "INFO", ...
    - SBMANAGEMENT_LOG_FORMAT: "text" or "json"
    
    Args:
        config_file: Path to YAML configuration file
    
    Returns:
        CodecConfig object
    
    Example YAML:
        ```yaml
        servicebus_management:
          base_address: https://myns.servicebus.windows.net
          logging:
            level: DEBUG
            format: json
        ```
    """
    config_data = {}
    
    # Load from file if specified
    if config_file and Path(config_file).exists():
        with open(config_file, 'r') as f:
            file_config = yaml.safe_load(f)
            if file_config and "servicebus_management" in file_config:
                config_data = file_config["servicebus_management"] or {}
    
    logging_data = config_data.get("logging", {}) or {}
    
    return CodecConfig(
        atom_namespace=os.getenv(
            "SBMANAGEMENT_ATOM_NAMESPACE",
            config_data.get("atom_namespace", ATOM_NAMESPACE)
        ),
        servicebus_namespace=os.getenv(
            "SBMANAGEMENT_SERVICEBUS_NAMESPACE",
            config_data.get("servicebus_namespace", SERVICEBUS_NAMESPACE)
        ),
        base_address=os.getenv(
            "SBMANAGEMENT_BASE_ADDRESS",
            config_data.get("base_address")
        ),
        log_level=os.getenv(
            "SBMANAGEMENT_LOG_LEVEL",
            logging_data.get("level", "INFO")
        ).upper(),
        log_format=os.getenv(
            "SBMANAGEMENT_LOG_FORMAT",
            logging_data.get("format", "text")
        ).lower(),
    )
