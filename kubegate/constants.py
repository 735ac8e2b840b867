"""Well-known keys and values shared by the kubegate converters."""

HIGRESS_PREFIX = "higress.io/"

TRUE_VALUE = "true"
FALSE_VALUE = "false"


class IngressPathType:
    PREFIX = "Prefix"
    EXACT = "Exact"
    IMPLEMENTATION_SPECIFIC = "ImplementationSpecific"


class Annotation:
    """Ingress annotation keys understood by the gateway."""

    DESTINATION_KEY = HIGRESS_PREFIX + "destination"
    USE_REGEX_KEY = HIGRESS_PREFIX + "use-regex"
    IGNORE_PATH_CASE_KEY = HIGRESS_PREFIX + "ignore-path-case"
    METHOD_KEY = HIGRESS_PREFIX + "match-method"

    CORS_ENABLED_KEY = HIGRESS_PREFIX + "enable-cors"
    CORS_MAX_AGE_KEY = HIGRESS_PREFIX + "cors-max-age"
    CORS_ALLOW_CREDENTIALS_KEY = HIGRESS_PREFIX + "cors-allow-credentials"
    CORS_ALLOW_ORIGIN_KEY = HIGRESS_PREFIX + "cors-allow-origin"
    CORS_ALLOW_HEADERS_KEY = HIGRESS_PREFIX + "cors-allow-headers"
    CORS_ALLOW_METHODS_KEY = HIGRESS_PREFIX + "cors-allow-methods"
    CORS_EXPOSE_HEADERS_KEY = HIGRESS_PREFIX + "cors-expose-headers"

    REWRITE_ENABLED_KEY = HIGRESS_PREFIX + "enable-rewrite"
    REWRITE_PATH_KEY = HIGRESS_PREFIX + "rewrite-path"
    UPSTREAM_VHOST_KEY = HIGRESS_PREFIX + "upstream-vhost"

    PROXY_NEXT_UPSTREAM_ENABLED_KEY = HIGRESS_PREFIX + "enable-proxy-next-upstream"
    PROXY_NEXT_UPSTREAM_TRIES_KEY = HIGRESS_PREFIX + "proxy-next-upstream-tries"
    PROXY_NEXT_UPSTREAM_TIMEOUT_KEY = HIGRESS_PREFIX + "proxy-next-upstream-timeout"
    PROXY_NEXT_UPSTREAM_KEY = HIGRESS_PREFIX + "proxy-next-upstream"

    WASM_PLUGIN_TITLE_KEY = HIGRESS_PREFIX + "wasm-plugin-title"
    WASM_PLUGIN_DESCRIPTION_KEY = HIGRESS_PREFIX + "wasm-plugin-description"
    WASM_PLUGIN_ICON_KEY = HIGRESS_PREFIX + "wasm-plugin-icon"

    # Format: higress.io/<match>-match-header-<header name>
    HEADER_MATCH_KEY_FORMAT = HIGRESS_PREFIX + "{}-match-header-{}"
    # Format: higress.io/<match>-match-query-<parameter name>
    QUERY_MATCH_KEY_FORMAT = HIGRESS_PREFIX + "{}-match-query-{}"


class Label:
    """Labels placed on plugin resources and certificate secrets."""

    WASM_PLUGIN_NAME_KEY = HIGRESS_PREFIX + "wasm-plugin-name"
    WASM_PLUGIN_VERSION_KEY = HIGRESS_PREFIX + "wasm-plugin-version"
    WASM_PLUGIN_CATEGORY_KEY = HIGRESS_PREFIX + "wasm-plugin-category"
    WASM_PLUGIN_BUILT_IN_KEY = HIGRESS_PREFIX + "wasm-plugin-built-in"

    DOMAIN_KEY_PREFIX = HIGRESS_PREFIX + "domain_"


# Keyed predicate match kinds as they appear inside annotation keys.
MATCH_KIND_EXACT = "exact"
MATCH_KIND_PREFIX = "prefix"
MATCH_KIND_REGEX = "regex"
MATCH_KINDS = (MATCH_KIND_EXACT, MATCH_KIND_PREFIX, MATCH_KIND_REGEX)

RESERVED_ANNOTATION_KEYS = frozenset({
    Annotation.DESTINATION_KEY,
    Annotation.USE_REGEX_KEY,
    Annotation.IGNORE_PATH_CASE_KEY,
    Annotation.METHOD_KEY,
    Annotation.CORS_ENABLED_KEY,
    Annotation.CORS_MAX_AGE_KEY,
    Annotation.CORS_ALLOW_CREDENTIALS_KEY,
    Annotation.CORS_ALLOW_ORIGIN_KEY,
    Annotation.CORS_ALLOW_HEADERS_KEY,
    Annotation.CORS_ALLOW_METHODS_KEY,
    Annotation.CORS_EXPOSE_HEADERS_KEY,
    Annotation.REWRITE_ENABLED_KEY,
    Annotation.REWRITE_PATH_KEY,
    Annotation.UPSTREAM_VHOST_KEY,
    Annotation.PROXY_NEXT_UPSTREAM_ENABLED_KEY,
    Annotation.PROXY_NEXT_UPSTREAM_TRIES_KEY,
    Annotation.PROXY_NEXT_UPSTREAM_TIMEOUT_KEY,
    Annotation.PROXY_NEXT_UPSTREAM_KEY,
    Annotation.WASM_PLUGIN_TITLE_KEY,
    Annotation.WASM_PLUGIN_DESCRIPTION_KEY,
    Annotation.WASM_PLUGIN_ICON_KEY,
})

RESERVED_ANNOTATION_PREFIXES = tuple(
    fmt.format(kind, "")
    for fmt in (Annotation.HEADER_MATCH_KEY_FORMAT, Annotation.QUERY_MATCH_KEY_FORMAT)
    for kind in MATCH_KINDS
)


def is_reserved_annotation(key: str) -> bool:
    """Return True if ``key`` belongs to the gateway's own annotation namespace."""
    return key in RESERVED_ANNOTATION_KEYS or key.startswith(RESERVED_ANNOTATION_PREFIXES)


# ConfigMap based domain records
DOMAIN_CONFIG_MAP_PREFIX = "domain-"
WILDCARD_PREFIX = "*."
WILDCARD_REPLACEMENT = "wildcard."
DOMAIN_DATA_KEY = "domain"
CERT_DATA_KEY = "cert"
ENABLE_HTTPS_DATA_KEY = "enableHttps"

# TLS secrets
SECRET_TYPE_TLS = "kubernetes.io/tls"
SECRET_TLS_CRT_FIELD = "tls.crt"
SECRET_TLS_KEY_FIELD = "tls.key"

# Custom resources
WASM_PLUGIN_API_GROUP = "extensions.higress.io"
WASM_PLUGIN_VERSION = "v1alpha1"
WASM_PLUGIN_KIND = "WasmPlugin"
WASM_PLUGIN_PLURAL = "wasmplugins"
OCI_SCHEME = "oci://"

MCP_BRIDGE_API_GROUP = "networking.higress.io"
MCP_BRIDGE_VERSION = "v1"
MCP_BRIDGE_KIND = "McpBridge"
MCP_BRIDGE_PLURAL = "mcpbridges"
MCP_BRIDGE_DEFAULT_NAME = "default"

REGISTRY_TYPE_NACOS = "nacos"
REGISTRY_TYPE_NACOS2 = "nacos2"
REGISTRY_TYPE_ZK = "zookeeper"
REGISTRY_TYPE_CONSUL = "consul"
REGISTRY_TYPE_EUREKA = "eureka"
REGISTRY_TYPE_STATIC = "static"
REGISTRY_TYPE_DNS = "dns"
REGISTRY_TYPES = (
    REGISTRY_TYPE_NACOS,
    REGISTRY_TYPE_NACOS2,
    REGISTRY_TYPE_ZK,
    REGISTRY_TYPE_CONSUL,
    REGISTRY_TYPE_EUREKA,
    REGISTRY_TYPE_STATIC,
    REGISTRY_TYPE_DNS,
)

# ServiceSource property names
NACOS_NAMESPACE_ID = "nacosNamespaceId"
NACOS_NAMESPACE = "nacosNamespace"
NACOS_GROUPS = "nacosGroups"
NACOS_REFRESH_INTERVAL = "nacosRefreshInterval"
ZK_SERVICES_PATH = "zkServicesPath"
CONSUL_DATA_CENTER = "consulDataCenter"
CONSUL_SERVICE_TAG = "consulServiceTag"
CONSUL_REFRESH_INTERVAL = "consulRefreshInterval"
CONSUL_NAMESPACE = "consulNamespace"

AUTH_SECRET_INFIX = "-auth-"
