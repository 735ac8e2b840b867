"""Converter configuration."""

import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field

from .constants import MCP_BRIDGE_API_GROUP, MCP_BRIDGE_DEFAULT_NAME, MCP_BRIDGE_KIND
from .logging_config import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "KUBEGATE_CONFIG"


class ConverterConfig(BaseModel):
    """Identity of this gateway inside the cluster."""

    bridge_api_group: str = Field(MCP_BRIDGE_API_GROUP, description="API group of the gateway's McpBridge")
    bridge_kind: str = Field(MCP_BRIDGE_KIND, description="Kind of the gateway's McpBridge")
    bridge_name: str = Field(MCP_BRIDGE_DEFAULT_NAME, description="Name of the gateway's McpBridge")
    ingress_class: Optional[str] = Field(None, description="ingressClassName set on generated ingresses")
    auth_secret_suffix_length: int = Field(5, ge=1, description="Random suffix length of auth secret names")


def load_config(path: Optional[Union[str, Path]] = None) -> ConverterConfig:
    """Load converter configuration from a YAML file.

    Args:
        path: File to read. Falls back to $KUBEGATE_CONFIG when omitted.

    Returns:
        Parsed configuration, or the defaults when no file is available.

    Raises:
        pydantic.ValidationError: If the file content does not describe a valid configuration.
    """
    if path is None:
        path = os.getenv(CONFIG_ENV_VAR)
    if not path:
        logger.debug("No configuration file given, using defaults")
        return ConverterConfig()

    config_path = Path(path)
    if not config_path.exists():
        logger.warning("Configuration file not found, using defaults", config_path=str(config_path))
        return ConverterConfig()

    with open(config_path) as f:
        config_data = yaml.safe_load(f) or {}
    config = ConverterConfig(**config_data)
    logger.info("Configuration loaded", config_path=str(config_path), bridge_name=config.bridge_name)
    return config
