"""McpBridge registry entries <-> ServiceSource."""

import secrets
import string
from typing import Any, Dict, List, Optional

from kubernetes import client
from pydantic import ValidationError

from .constants import (
    AUTH_SECRET_INFIX,
    CONSUL_DATA_CENTER,
    CONSUL_NAMESPACE,
    CONSUL_REFRESH_INTERVAL,
    CONSUL_SERVICE_TAG,
    MCP_BRIDGE_DEFAULT_NAME,
    NACOS_GROUPS,
    NACOS_NAMESPACE,
    NACOS_NAMESPACE_ID,
    NACOS_REFRESH_INTERVAL,
    REGISTRY_TYPE_CONSUL,
    REGISTRY_TYPE_NACOS,
    REGISTRY_TYPE_NACOS2,
    REGISTRY_TYPE_ZK,
    ZK_SERVICES_PATH,
)
from .crds import McpBridge, McpBridgeSpec, RegistryConfig
from .errors import InvalidArgumentError
from .kube import object_version
from .logging_config import get_logger, log_conversion, log_rejection
from .models import ServiceSource, ServiceSourceAuthN

logger = get_logger(__name__)

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits

# ServiceSource property name -> RegistryConfig attribute, per registry type.
_PROPERTY_FIELDS: Dict[str, Dict[str, str]] = {
    REGISTRY_TYPE_NACOS: {
        NACOS_NAMESPACE_ID: "nacos_namespace_id",
        NACOS_NAMESPACE: "nacos_namespace",
        NACOS_GROUPS: "nacos_groups",
        NACOS_REFRESH_INTERVAL: "nacos_refresh_interval",
    },
    REGISTRY_TYPE_ZK: {
        ZK_SERVICES_PATH: "zk_services_path",
    },
    REGISTRY_TYPE_CONSUL: {
        CONSUL_DATA_CENTER: "consul_datacenter",
        CONSUL_SERVICE_TAG: "consul_service_tag",
        CONSUL_REFRESH_INTERVAL: "consul_refresh_interval",
        CONSUL_NAMESPACE: "consul_namespace",
    },
}
_PROPERTY_FIELDS[REGISTRY_TYPE_NACOS2] = _PROPERTY_FIELDS[REGISTRY_TYPE_NACOS]


def generate_auth_secret_name(service_source_name: Optional[str], suffix_length: int = 5) -> str:
    """Name for the secret holding a registry's credentials: ``<name>-auth-<suffix>``."""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(suffix_length))
    return f"{service_source_name or ''}{AUTH_SECRET_INFIX}{suffix}"


def registry_to_service_source(registry: Optional[RegistryConfig], version: Optional[str] = None) -> ServiceSource:
    """Convert a bridge registry entry. A missing entry yields an empty ServiceSource."""
    if registry is None:
        return ServiceSource()

    properties: Dict[str, Any] = {}
    for key, attr in _PROPERTY_FIELDS.get(registry.type, {}).items():
        value = getattr(registry, attr)
        if value is not None:
            properties[key] = list(value) if isinstance(value, list) else value

    source = ServiceSource(
        name=registry.name,
        version=version,
        type=registry.type,
        domain=registry.domain,
        port=registry.port,
        protocol=registry.protocol,
        sni=registry.sni,
        properties=properties,
        auth_n=ServiceSourceAuthN(enabled=bool(registry.auth_secret_name)),
    )
    log_conversion(logger, "RegistryConfig", "ServiceSource", name=source.name, type=source.type)
    return source


def service_source_to_registry(source: ServiceSource, existing: Optional[RegistryConfig] = None,
                               suffix_length: int = 5) -> RegistryConfig:
    """Convert a ServiceSource into a bridge registry entry.

    When authentication is enabled the secret name of ``existing`` is kept,
    otherwise a new one is generated.

    Raises:
        InvalidArgumentError: If a property value has the wrong type for its registry field.
    """
    fields: Dict[str, Any] = dict(
        name=source.name,
        type=source.type,
        domain=source.domain,
        port=source.port,
        protocol=source.protocol,
        sni=source.sni,
    )
    properties = source.properties or {}
    for key, attr in _PROPERTY_FIELDS.get(source.type, {}).items():
        if properties.get(key) is not None:
            fields[attr] = properties[key]

    if source.auth_n is not None and source.auth_n.enabled:
        if existing is not None and existing.auth_secret_name:
            fields["auth_secret_name"] = existing.auth_secret_name
        else:
            fields["auth_secret_name"] = generate_auth_secret_name(source.name, suffix_length)

    try:
        registry = RegistryConfig(**fields)
    except ValidationError as e:
        log_rejection(logger, "service_source_to_registry", "invalid property", name=source.name, error=str(e))
        raise InvalidArgumentError(f"Invalid settings for service source {source.name!r}: {e}") from e
    log_conversion(logger, "ServiceSource", "RegistryConfig", name=registry.name, type=registry.type)
    return registry


def bridge_to_service_sources(bridge: McpBridge) -> List[ServiceSource]:
    """Every registry of ``bridge`` as a ServiceSource carrying the bridge version."""
    if bridge.spec is None or not bridge.spec.registries:
        return []
    version = object_version(bridge)
    return [registry_to_service_source(registry, version) for registry in bridge.spec.registries]


def init_bridge(bridge: McpBridge, name: str = MCP_BRIDGE_DEFAULT_NAME) -> McpBridge:
    """Make sure ``bridge`` has a name and an (initially empty) registry list."""
    if bridge.metadata is None:
        bridge.metadata = client.V1ObjectMeta()
    if not bridge.metadata.name:
        bridge.metadata.name = name
    if bridge.spec is None:
        bridge.spec = McpBridgeSpec()
    if bridge.spec.registries is None:
        bridge.spec.registries = []
    return bridge


def _find_registry_index(registries: List[RegistryConfig], name: Optional[str]) -> Optional[int]:
    for index, registry in enumerate(registries):
        if registry.name == name:
            return index
    return None


def add_registry(bridge: McpBridge, source: Optional[ServiceSource],
                 suffix_length: int = 5) -> Optional[RegistryConfig]:
    """Insert or replace the registry named after ``source``.

    An existing entry keeps its position in the list.

    Returns:
        The stored entry, or None when ``source`` is None.
    """
    if source is None:
        return None
    if bridge.spec is None:
        bridge.spec = McpBridgeSpec()
    if bridge.spec.registries is None:
        bridge.spec.registries = []

    registries = bridge.spec.registries
    index = _find_registry_index(registries, source.name)
    existing = registries[index] if index is not None else None
    registry = service_source_to_registry(source, existing, suffix_length)

    if index is None:
        registries.append(registry)
        logger.debug("Registry added", name=registry.name, type=registry.type)
    else:
        registries[index] = registry
        logger.debug("Registry replaced", name=registry.name, type=registry.type, position=index)
    return registry


def remove_registry(bridge: McpBridge, name: str) -> Optional[RegistryConfig]:
    """Remove the registry called ``name``.

    Returns:
        The removed entry, or None when there was nothing to remove.
    """
    if bridge.spec is None or not bridge.spec.registries:
        return None
    index = _find_registry_index(bridge.spec.registries, name)
    if index is None:
        return None
    removed = bridge.spec.registries.pop(index)
    logger.debug("Registry removed", name=name)
    return removed
