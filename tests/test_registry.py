"""Tests for McpBridge registries and service sources."""

import re

import pytest
from kubernetes import client

from kubegate.crds import McpBridge, McpBridgeSpec, RegistryConfig
from kubegate.errors import InvalidArgumentError
from kubegate.models import ServiceSource, ServiceSourceAuthN
from kubegate.registry import (
    add_registry,
    bridge_to_service_sources,
    generate_auth_secret_name,
    init_bridge,
    registry_to_service_source,
    remove_registry,
    service_source_to_registry,
)


def _bridge(*registries):
    return McpBridge(
        metadata=client.V1ObjectMeta(name="default", resource_version="8"),
        spec=McpBridgeSpec(registries=list(registries)),
    )


class TestGenerateAuthSecretName:
    """Tests for generate_auth_secret_name."""

    def test_format(self):
        """Test the name is the source name, -auth- and a random suffix."""
        assert re.fullmatch(r"nacos-1-auth-[a-z0-9]{5}", generate_auth_secret_name("nacos-1"))

    def test_suffix_length(self):
        """Test the suffix length is configurable."""
        assert re.fullmatch(r"x-auth-[a-z0-9]{8}", generate_auth_secret_name("x", 8))

    def test_missing_name(self):
        """Test a missing source name leaves only infix and suffix."""
        assert re.fullmatch(r"-auth-[a-z0-9]{5}", generate_auth_secret_name(None))


class TestRegistryToServiceSource:
    """Tests for registry_to_service_source."""

    def test_none(self):
        """Test a missing entry yields an empty source."""
        assert registry_to_service_source(None) == ServiceSource()

    def test_nacos(self):
        """Test nacos settings become properties."""
        registry = RegistryConfig(name="nacos-1", type="nacos2", domain="127.0.0.1", port=8848,
                                  nacos_namespace_id="public", nacos_groups=["DEFAULT_GROUP"],
                                  auth_secret_name="nacos-1-auth-abcde")

        source = registry_to_service_source(registry, "8")

        assert source == ServiceSource(
            name="nacos-1", version="8", type="nacos2", domain="127.0.0.1", port=8848,
            properties={"nacosNamespaceId": "public", "nacosGroups": ["DEFAULT_GROUP"]},
            auth_n=ServiceSourceAuthN(enabled=True),
        )

    def test_zookeeper(self):
        """Test zookeeper service paths become properties."""
        registry = RegistryConfig(name="zk", type="zookeeper", domain="zk.local", port=2181,
                                  zk_services_path=["/dubbo"])

        source = registry_to_service_source(registry)

        assert source.properties == {"zkServicesPath": ["/dubbo"]}
        assert source.auth_n.enabled is False

    def test_consul(self):
        """Test consul settings become properties."""
        registry = RegistryConfig(name="consul", type="consul", consul_datacenter="dc1",
                                  consul_service_tag="web", consul_refresh_interval=30000)

        source = registry_to_service_source(registry)

        assert source.properties == {
            "consulDataCenter": "dc1",
            "consulServiceTag": "web",
            "consulRefreshInterval": 30000,
        }

    def test_other_types_have_no_properties(self):
        """Test static and dns registries carry no properties."""
        registry = RegistryConfig(name="s", type="static", domain="1.1.1.1:80", protocol="https", sni="a.com")

        source = registry_to_service_source(registry)

        assert source.properties == {}
        assert source.protocol == "https"
        assert source.sni == "a.com"

    def test_property_lists_are_copied(self):
        """Test list properties do not alias the registry entry."""
        registry = RegistryConfig(name="n", type="nacos", nacos_groups=["A"])

        registry_to_service_source(registry).properties["nacosGroups"].append("B")

        assert registry.nacos_groups == ["A"]


class TestServiceSourceToRegistry:
    """Tests for service_source_to_registry."""

    def test_properties(self):
        """Test type specific properties are written and others ignored."""
        source = ServiceSource(name="n", type="nacos", domain="127.0.0.1", port=8848,
                               properties={"nacosNamespace": "dev", "nacosRefreshInterval": 1000,
                                           "zkServicesPath": ["/x"]})

        registry = service_source_to_registry(source)

        assert registry.nacos_namespace == "dev"
        assert registry.nacos_refresh_interval == 1000
        assert registry.zk_services_path is None
        assert registry.auth_secret_name is None

    def test_auth_generates_secret_name(self):
        """Test enabling auth without an existing entry generates a secret name."""
        source = ServiceSource(name="n", type="nacos2", auth_n=ServiceSourceAuthN(enabled=True))

        registry = service_source_to_registry(source)

        assert re.fullmatch(r"n-auth-[a-z0-9]{5}", registry.auth_secret_name)

    def test_auth_keeps_existing_secret_name(self):
        """Test the secret name of the existing entry is reused."""
        source = ServiceSource(name="n", type="nacos2", auth_n=ServiceSourceAuthN(enabled=True))
        existing = RegistryConfig(name="n", auth_secret_name="n-auth-keep1")

        assert service_source_to_registry(source, existing).auth_secret_name == "n-auth-keep1"

    def test_auth_disabled(self):
        """Test disabling auth drops the secret name."""
        source = ServiceSource(name="n", type="nacos2", auth_n=ServiceSourceAuthN(enabled=False))
        existing = RegistryConfig(name="n", auth_secret_name="n-auth-keep1")

        assert service_source_to_registry(source, existing).auth_secret_name is None

    def test_wrongly_typed_property(self):
        """Test a property of the wrong type is rejected as an invalid argument."""
        source = ServiceSource(name="n", type="nacos", properties={"nacosGroups": "g1"})

        with pytest.raises(InvalidArgumentError, match="'n'"):
            service_source_to_registry(source)

    def test_wrongly_typed_property_not_added(self):
        """Test a rejected source leaves the bridge untouched."""
        bridge = _bridge(RegistryConfig(name="a"))

        with pytest.raises(InvalidArgumentError):
            add_registry(bridge, ServiceSource(name="b", type="consul",
                                               properties={"consulRefreshInterval": "often"}))

        assert [r.name for r in bridge.spec.registries] == ["a"]


class TestBridge:
    """Tests for McpBridge registry management."""

    def test_init_bridge(self):
        """Test an empty bridge gets a name and registry list."""
        bridge = init_bridge(McpBridge())

        assert bridge.metadata.name == "default"
        assert bridge.spec.registries == []

    def test_init_bridge_keeps_name(self):
        """Test an existing name is preserved."""
        bridge = init_bridge(McpBridge(metadata=client.V1ObjectMeta(name="custom")), "default")

        assert bridge.metadata.name == "custom"

    def test_bridge_to_service_sources(self):
        """Test every registry is converted with the bridge version."""
        bridge = _bridge(RegistryConfig(name="a", type="dns"), RegistryConfig(name="b", type="static"))

        sources = bridge_to_service_sources(bridge)

        assert [s.name for s in sources] == ["a", "b"]
        assert {s.version for s in sources} == {"8"}
        assert bridge_to_service_sources(McpBridge()) == []

    def test_add_registry(self):
        """Test a new source is appended."""
        bridge = McpBridge()

        registry = add_registry(bridge, ServiceSource(name="a", type="dns", domain="a.local", port=53))

        assert bridge.spec.registries == [registry]
        assert registry.domain == "a.local"

    def test_add_registry_replaces_in_place(self):
        """Test a source with an existing name replaces the entry at its position."""
        bridge = _bridge(
            RegistryConfig(name="a", type="dns"),
            RegistryConfig(name="b", type="nacos", auth_secret_name="b-auth-old00"),
            RegistryConfig(name="c", type="dns"),
        )

        add_registry(bridge, ServiceSource(name="b", type="nacos", port=8849,
                                           auth_n=ServiceSourceAuthN(enabled=True)))

        assert [r.name for r in bridge.spec.registries] == ["a", "b", "c"]
        assert bridge.spec.registries[1].port == 8849
        assert bridge.spec.registries[1].auth_secret_name == "b-auth-old00"

    def test_add_none(self):
        """Test adding nothing leaves the bridge untouched."""
        bridge = _bridge()

        assert add_registry(bridge, None) is None
        assert bridge.spec.registries == []

    def test_remove_registry(self):
        """Test the named registry is removed and returned."""
        bridge = _bridge(RegistryConfig(name="a"), RegistryConfig(name="b"))

        removed = remove_registry(bridge, "a")

        assert removed.name == "a"
        assert [r.name for r in bridge.spec.registries] == ["b"]

    def test_remove_missing_registry(self):
        """Test removing an unknown name returns None."""
        assert remove_registry(_bridge(RegistryConfig(name="a")), "z") is None
        assert remove_registry(McpBridge(), "a") is None
