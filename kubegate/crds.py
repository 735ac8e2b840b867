"""Custom resources owned by the gateway: WasmPlugin and McpBridge."""

from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from kubernetes.client import V1ObjectMeta
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .constants import (
    MCP_BRIDGE_API_GROUP,
    MCP_BRIDGE_KIND,
    MCP_BRIDGE_VERSION,
    WASM_PLUGIN_API_GROUP,
    WASM_PLUGIN_KIND,
    WASM_PLUGIN_VERSION,
)
from .kube import meta_from_dict, meta_to_dict


class CrdModel(BaseModel):
    """Base for custom resource payloads, serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomResource(CrdModel):
    """A namespaced custom resource with kubernetes object metadata."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    api_version: str = ""
    kind: str = ""
    metadata: Optional[V1ObjectMeta] = None
    status: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Render the resource as a CustomObjectsApi request body."""
        body = self.model_dump(by_alias=True, exclude_none=True, exclude={"metadata"})
        if self.metadata is not None:
            body["metadata"] = meta_to_dict(self.metadata)
        return body

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Build the resource from a CustomObjectsApi response."""
        data = dict(data)
        metadata = data.pop("metadata", None)
        resource = cls.model_validate(data)
        if metadata is not None:
            resource.metadata = meta_from_dict(metadata)
        return resource


class MatchRule(CrdModel):
    """Binds a plugin configuration to a set of domains or ingresses."""

    config_disable: Optional[bool] = None
    config: Optional[Dict[str, Any]] = None
    domain: Optional[List[str]] = None
    ingress: Optional[List[str]] = None
    service: Optional[List[str]] = None

    @classmethod
    def for_domain(cls, domain: str, config: Optional[Dict[str, Any]] = None,
                   disabled: bool = False) -> "MatchRule":
        return cls(config_disable=disabled, config=config, domain=[domain])

    @classmethod
    def for_ingress(cls, ingress: str, config: Optional[Dict[str, Any]] = None,
                    disabled: bool = False) -> "MatchRule":
        return cls(config_disable=disabled, config=config, ingress=[ingress])

    def identity(self) -> Optional[Tuple[str, FrozenSet[str]]]:
        """Key of the rule: its domain list, or its ingress list when no domain is set."""
        if self.domain:
            return "domain", frozenset(self.domain)
        if self.ingress:
            return "ingress", frozenset(self.ingress)
        return None


class WasmPluginSpec(CrdModel):
    default_config: Optional[Dict[str, Any]] = None
    default_config_disable: Optional[bool] = None
    fail_strategy: Optional[str] = None
    image_pull_policy: Optional[str] = None
    image_pull_secret: Optional[str] = None
    match_rules: Optional[List[MatchRule]] = None
    phase: Optional[str] = None
    plugin_config: Optional[Dict[str, Any]] = None
    plugin_name: Optional[str] = None
    priority: Optional[int] = None
    sha256: Optional[str] = None
    url: Optional[str] = None
    verification_key: Optional[str] = None
    vm_config: Optional[Dict[str, Any]] = None


# Spec fields copied verbatim when a plugin definition is merged into an existing resource.
# Everything but match_rules, which are unioned instead.
WASM_PLUGIN_SPEC_SCALAR_FIELDS = (
    "default_config",
    "default_config_disable",
    "fail_strategy",
    "image_pull_policy",
    "image_pull_secret",
    "phase",
    "plugin_config",
    "plugin_name",
    "priority",
    "sha256",
    "url",
    "verification_key",
    "vm_config",
)


class WasmPluginResource(CustomResource):
    """extensions.higress.io/v1alpha1 WasmPlugin."""

    api_version: str = f"{WASM_PLUGIN_API_GROUP}/{WASM_PLUGIN_VERSION}"
    kind: str = WASM_PLUGIN_KIND
    spec: Optional[WasmPluginSpec] = None


class RegistryConfig(CrdModel):
    """One service registry entry of a McpBridge."""

    name: Optional[str] = None
    type: Optional[str] = None
    domain: Optional[str] = None
    port: Optional[int] = None
    protocol: Optional[str] = None
    sni: Optional[str] = None
    auth_secret_name: Optional[str] = None
    nacos_namespace_id: Optional[str] = None
    nacos_namespace: Optional[str] = None
    nacos_groups: Optional[List[str]] = None
    nacos_refresh_interval: Optional[int] = None
    nacos_address_server: Optional[str] = None
    nacos_access_key: Optional[str] = None
    nacos_secret_key: Optional[str] = None
    zk_services_path: Optional[List[str]] = None
    consul_datacenter: Optional[str] = None
    consul_service_tag: Optional[str] = None
    consul_refresh_interval: Optional[int] = None
    consul_namespace: Optional[str] = None


class McpBridgeSpec(CrdModel):
    registries: Optional[List[RegistryConfig]] = None
    proxies: Optional[List[Dict[str, Any]]] = None


class McpBridge(CustomResource):
    """networking.higress.io/v1 McpBridge."""

    api_version: str = f"{MCP_BRIDGE_API_GROUP}/{MCP_BRIDGE_VERSION}"
    kind: str = MCP_BRIDGE_KIND
    spec: Optional[McpBridgeSpec] = Field(None, description="Registries bridged into the gateway")
