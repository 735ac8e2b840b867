"""Single entry point bundling every converter with one configuration."""

from typing import List, Optional

from kubernetes import client

from . import certificates, domains, ingress, registry, wasm
from .config import ConverterConfig
from .crds import McpBridge, RegistryConfig, WasmPluginResource
from .logging_config import get_logger
from .models import (
    Domain,
    Route,
    ServiceSource,
    TlsCertificate,
    WasmPlugin,
    WasmPluginInstance,
    WasmPluginInstanceScope,
)

logger = get_logger(__name__)


class KubernetesModelConverter:
    """Converts between cluster objects and gateway domain objects.

    Holds no state besides its configuration; every method is a pure
    function of its arguments, except the ``*_cr``/registry operations that
    mutate the custom resource they are given.
    """

    def __init__(self, config: Optional[ConverterConfig] = None):
        self.config = config or ConverterConfig()
        logger.debug("KubernetesModelConverter initialized",
                     bridge_name=self.config.bridge_name,
                     ingress_class=self.config.ingress_class)

    # Ingress

    def is_ingress_supported(self, obj: client.V1Ingress) -> bool:
        return ingress.is_ingress_supported(obj, self.config)

    def ingress_to_route(self, obj: client.V1Ingress) -> Route:
        return ingress.ingress_to_route(obj)

    def route_to_ingress(self, route: Route) -> client.V1Ingress:
        return ingress.route_to_ingress(route, self.config)

    # Domains and certificates

    def domain_name_to_config_map_name(self, domain_name: str) -> str:
        return domains.domain_name_to_config_map_name(domain_name)

    def config_map_to_domain(self, config_map: client.V1ConfigMap) -> Domain:
        return domains.config_map_to_domain(config_map)

    def domain_to_config_map(self, domain: Domain) -> client.V1ConfigMap:
        return domains.domain_to_config_map(domain)

    def secret_to_tls_certificate(self, secret: client.V1Secret) -> TlsCertificate:
        return certificates.secret_to_tls_certificate(secret)

    def tls_certificate_to_secret(self, certificate: TlsCertificate) -> client.V1Secret:
        return certificates.tls_certificate_to_secret(certificate)

    # WasmPlugin

    def wasm_plugin_from_cr(self, cr: WasmPluginResource) -> WasmPlugin:
        return wasm.wasm_plugin_from_cr(cr)

    def wasm_plugin_to_cr(self, plugin: WasmPlugin) -> WasmPluginResource:
        return wasm.wasm_plugin_to_cr(plugin)

    def merge_wasm_plugin_spec(self, src: WasmPluginResource, dst: WasmPluginResource) -> None:
        wasm.merge_wasm_plugin_spec(src, dst)

    def get_wasm_plugin_instance_from_cr(self, cr: WasmPluginResource, scope: WasmPluginInstanceScope,
                                         target: Optional[str]) -> Optional[WasmPluginInstance]:
        return wasm.get_instance_from_cr(cr, scope, target)

    def set_wasm_plugin_instance_to_cr(self, cr: WasmPluginResource, instance: WasmPluginInstance) -> None:
        wasm.set_instance_to_cr(cr, instance)

    def remove_wasm_plugin_instance_from_cr(self, cr: WasmPluginResource, scope: WasmPluginInstanceScope,
                                            target: Optional[str]) -> bool:
        return wasm.remove_instance_from_cr(cr, scope, target)

    # McpBridge

    def init_mcp_bridge(self, bridge: McpBridge) -> McpBridge:
        return registry.init_bridge(bridge, self.config.bridge_name)

    def registry_to_service_source(self, entry: Optional[RegistryConfig],
                                   version: Optional[str] = None) -> ServiceSource:
        return registry.registry_to_service_source(entry, version)

    def bridge_to_service_sources(self, bridge: McpBridge) -> List[ServiceSource]:
        return registry.bridge_to_service_sources(bridge)

    def add_mcp_bridge_registry(self, bridge: McpBridge, source: Optional[ServiceSource]) -> Optional[RegistryConfig]:
        return registry.add_registry(bridge, source, self.config.auth_secret_suffix_length)

    def remove_mcp_bridge_registry(self, bridge: McpBridge, name: str) -> Optional[RegistryConfig]:
        return registry.remove_registry(bridge, name)

    def generate_auth_secret_name(self, service_source_name: Optional[str]) -> str:
        return registry.generate_auth_secret_name(service_source_name, self.config.auth_secret_suffix_length)
