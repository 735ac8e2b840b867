"""Gateway domain models produced and consumed by the converters."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class RoutePredicateType(str, Enum):
    """How a predicate value is matched."""

    EQUAL = "EQUAL"
    PRE = "PRE"
    REGULAR = "REGULAR"


class RoutePredicate(BaseModel):
    """Path match of a route."""

    match_type: Optional[str] = Field(None, description="One of RoutePredicateType")
    match_value: Optional[str] = Field(None, description="Path, path prefix or regular expression")
    case_sensitive: Optional[bool] = Field(None, description="False when the path ignores case, None when unspecified")


class KeyedRoutePredicate(RoutePredicate):
    """Header or query parameter match of a route."""

    key: str = Field(..., description="Header or query parameter name")


class UpstreamService(BaseModel):
    """One destination of a route."""

    name: Optional[str] = Field(None, description="Service host name")
    port: Optional[int] = Field(None, description="Service port")
    version: Optional[str] = Field(None, description="Service version tag")
    weight: Optional[int] = Field(None, description="Traffic percentage, 1-100, None for a single destination")


class CorsConfig(BaseModel):
    enabled: bool = False
    allow_origins: Optional[List[str]] = None
    allow_methods: Optional[List[str]] = None
    allow_headers: Optional[List[str]] = None
    expose_headers: Optional[List[str]] = None
    max_age: Optional[int] = None
    allow_credentials: Optional[bool] = None


class RewriteConfig(BaseModel):
    enabled: bool = False
    path: Optional[str] = None
    host: Optional[str] = None


class ProxyNextUpstreamConfig(BaseModel):
    """Retry policy of a route."""

    enabled: bool = False
    attempts: Optional[int] = None
    timeout: Optional[int] = None
    conditions: Optional[List[str]] = None


class Route(BaseModel):
    """A gateway route."""

    name: Optional[str] = Field(None, description="Route name")
    version: Optional[str] = Field(None, description="Resource version of the backing ingress")
    domains: Optional[List[str]] = Field(default_factory=list, description="Host restriction, at most one entry")
    path: Optional[RoutePredicate] = Field(None, description="Path predicate")
    methods: Optional[List[str]] = Field(None, description="Allowed HTTP methods")
    headers: Optional[List[KeyedRoutePredicate]] = Field(None, description="Header predicates")
    url_params: Optional[List[KeyedRoutePredicate]] = Field(None, description="Query parameter predicates")
    services: Optional[List[UpstreamService]] = Field(None, description="Upstream services")
    cors: Optional[CorsConfig] = Field(None, description="CORS configuration")
    rewrite: Optional[RewriteConfig] = Field(None, description="Rewrite configuration")
    proxy_next_upstream: Optional[ProxyNextUpstreamConfig] = Field(None, description="Retry configuration")
    custom_configs: Dict[str, str] = Field(default_factory=dict, description="Passthrough annotations")


class Domain(BaseModel):
    """A domain served by the gateway."""

    name: Optional[str] = Field(None, description="Domain name, possibly a wildcard")
    version: Optional[str] = Field(None, description="Resource version of the backing config map")
    cert_identifier: Optional[str] = Field(None, description="Name of the TLS certificate to use")
    enable_https: Optional[str] = Field(None, description="HTTPS marker, kept verbatim")


class TlsCertificate(BaseModel):
    """A TLS certificate stored in a secret."""

    name: Optional[str] = Field(None, description="Certificate name")
    version: Optional[str] = Field(None, description="Resource version of the backing secret")
    cert: Optional[str] = Field(None, description="PEM encoded certificate chain")
    key: Optional[str] = Field(None, description="PEM encoded private key")
    validity_start: Optional[datetime] = Field(None, description="Not valid before")
    validity_end: Optional[datetime] = Field(None, description="Not valid after")
    domains: Optional[List[str]] = Field(None, description="Domains covered by the certificate")


class WasmPlugin(BaseModel):
    """A WASM plugin definition."""

    name: Optional[str] = Field(None, description="Plugin name")
    plugin_version: Optional[str] = Field(None, description="Plugin version")
    version: Optional[str] = Field(None, description="Resource version of the backing resource")
    category: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    built_in: Optional[bool] = None
    image_repository: Optional[str] = Field(None, description="OCI repository without scheme")
    image_version: Optional[str] = Field(None, description="OCI image tag")
    phase: Optional[str] = Field(None, description="Execution phase: UNSPECIFIED_PHASE, AUTHN, AUTHZ or STATS")
    priority: Optional[int] = Field(None, description="Execution priority within the phase")


class WasmPluginInstanceScope(str, Enum):
    GLOBAL = "global"
    DOMAIN = "domain"
    ROUTE = "route"


class WasmPluginInstance(BaseModel):
    """A plugin configuration applied at a given scope."""

    plugin_name: Optional[str] = Field(None, description="Plugin name")
    plugin_version: Optional[str] = Field(None, description="Plugin version")
    version: Optional[str] = Field(None, description="Resource version of the backing resource")
    scope: Optional[WasmPluginInstanceScope] = Field(None, description="Breadth of the configuration")
    target: Optional[str] = Field(None, description="Domain or route name, None for global scope")
    enabled: Optional[bool] = Field(None, description="Whether the configuration is active")
    configurations: Optional[Dict[str, Any]] = Field(None, description="Plugin configuration")


class ServiceSourceAuthN(BaseModel):
    enabled: Optional[bool] = None
    properties: Optional[Dict[str, Any]] = None


class ServiceSource(BaseModel):
    """An external service registry."""

    name: Optional[str] = Field(None, description="Registry name, unique within the bridge")
    version: Optional[str] = Field(None, description="Resource version of the backing bridge")
    type: Optional[str] = Field(None, description="Registry type, see REGISTRY_TYPES")
    domain: Optional[str] = Field(None, description="Registry address")
    port: Optional[int] = Field(None, description="Registry port")
    protocol: Optional[str] = Field(None, description="Protocol of the registered services")
    sni: Optional[str] = Field(None, description="SNI used towards the registered services")
    properties: Optional[Dict[str, Any]] = Field(None, description="Registry type specific settings")
    auth_n: Optional[ServiceSourceAuthN] = Field(None, description="Registry authentication")
