"""Tests for custom resource payloads."""

from kubernetes import client

from kubegate.crds import McpBridge, McpBridgeSpec, MatchRule, RegistryConfig, WasmPluginResource, WasmPluginSpec


class TestMatchRule:
    """Tests for MatchRule helpers."""

    def test_factories(self):
        """Test domain and ingress rules bind a single target."""
        assert MatchRule.for_domain("a.com", {"k": "v"}).domain == ["a.com"]
        assert MatchRule.for_ingress("route-1", disabled=True).config_disable is True

    def test_identity(self):
        """Test the domain list wins over the ingress list."""
        assert MatchRule(domain=["b", "a"]).identity() == ("domain", frozenset({"a", "b"}))
        assert MatchRule(domain=["a"], ingress=["r"]).identity() == ("domain", frozenset({"a"}))
        assert MatchRule(ingress=["r"]).identity() == ("ingress", frozenset({"r"}))
        assert MatchRule(service=["s"]).identity() is None


class TestWasmPluginResource:
    """Tests for WasmPluginResource serialization."""

    def test_to_dict(self):
        """Test the body uses API field names and drops unset values."""
        cr = WasmPluginResource(
            metadata=client.V1ObjectMeta(name="key-auth-1.0.0", labels={"higress.io/wasm-plugin-name": "key-auth"}),
            spec=WasmPluginSpec(
                default_config_disable=True,
                match_rules=[MatchRule.for_ingress("route-1", {"allow": ["c1"]})],
                url="oci://docker.io/key-auth:1.0.0",
            ),
        )

        assert cr.to_dict() == {
            "apiVersion": "extensions.higress.io/v1alpha1",
            "kind": "WasmPlugin",
            "metadata": {"name": "key-auth-1.0.0", "labels": {"higress.io/wasm-plugin-name": "key-auth"}},
            "spec": {
                "defaultConfigDisable": True,
                "matchRules": [{"configDisable": False, "config": {"allow": ["c1"]}, "ingress": ["route-1"]}],
                "url": "oci://docker.io/key-auth:1.0.0",
            },
        }

    def test_from_dict(self):
        """Test an API response is parsed into typed fields."""
        cr = WasmPluginResource.from_dict({
            "apiVersion": "extensions.higress.io/v1alpha1",
            "kind": "WasmPlugin",
            "metadata": {"name": "basic-auth-1.0.0", "resourceVersion": "42", "namespace": "higress-system"},
            "spec": {
                "defaultConfig": {"consumers": []},
                "matchRules": [{"domain": ["a.com"], "config": {"allow": ["c1"]}}],
                "imagePullPolicy": "Always",
                "priority": 320,
            },
            "status": {"observed": True},
        })

        assert cr.metadata.name == "basic-auth-1.0.0"
        assert cr.metadata.resource_version == "42"
        assert cr.metadata.namespace == "higress-system"
        assert cr.spec.default_config == {"consumers": []}
        assert cr.spec.match_rules[0].domain == ["a.com"]
        assert cr.spec.image_pull_policy == "Always"
        assert cr.spec.priority == 320
        assert cr.status == {"observed": True}

    def test_round_trip(self):
        """Test to_dict output parses back to the same body."""
        body = {
            "apiVersion": "extensions.higress.io/v1alpha1",
            "kind": "WasmPlugin",
            "metadata": {"name": "p-1.0.0", "resourceVersion": "1"},
            "spec": {"phase": "AUTHN", "matchRules": [{"ingress": ["r1"], "configDisable": True}]},
        }

        assert WasmPluginResource.from_dict(body).to_dict() == body


class TestMcpBridge:
    """Tests for McpBridge serialization."""

    def test_to_dict(self):
        """Test registry fields use their API names."""
        bridge = McpBridge(
            metadata=client.V1ObjectMeta(name="default"),
            spec=McpBridgeSpec(registries=[
                RegistryConfig(name="nacos-1", type="nacos2", domain="127.0.0.1", port=8848,
                               nacos_namespace_id="public", nacos_groups=["DEFAULT_GROUP"],
                               auth_secret_name="nacos-1-auth-abcde"),
            ]),
        )

        assert bridge.to_dict()["spec"] == {"registries": [{
            "name": "nacos-1",
            "type": "nacos2",
            "domain": "127.0.0.1",
            "port": 8848,
            "authSecretName": "nacos-1-auth-abcde",
            "nacosNamespaceId": "public",
            "nacosGroups": ["DEFAULT_GROUP"],
        }]}
        assert bridge.to_dict()["apiVersion"] == "networking.higress.io/v1"

    def test_from_dict(self):
        """Test a bridge without spec parses."""
        bridge = McpBridge.from_dict({"apiVersion": "networking.higress.io/v1", "kind": "McpBridge",
                                      "metadata": {"name": "default"}})

        assert bridge.metadata.name == "default"
        assert bridge.spec is None
