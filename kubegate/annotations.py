"""Route attributes <-> ingress annotations.

Decoding never fails on a single malformed value: unknown booleans read as
False and unparsable integers as None. Encoding rejects custom annotations
that would shadow one of the gateway's own keys.
"""

import re
from typing import Any, Dict, List, Optional

from .constants import (
    FALSE_VALUE,
    MATCH_KIND_EXACT,
    MATCH_KIND_PREFIX,
    MATCH_KIND_REGEX,
    MATCH_KINDS,
    TRUE_VALUE,
    Annotation,
    is_reserved_annotation,
)
from .destinations import parse_destinations, serialize_destinations
from .errors import InvalidArgumentError, ReservedKeyError
from .logging_config import get_logger, log_rejection
from .models import (
    CorsConfig,
    KeyedRoutePredicate,
    ProxyNextUpstreamConfig,
    RewriteConfig,
    Route,
    RoutePredicateType,
)

logger = get_logger(__name__)

_MATCH_KIND_TO_TYPE = {
    MATCH_KIND_EXACT: RoutePredicateType.EQUAL,
    MATCH_KIND_PREFIX: RoutePredicateType.PRE,
    MATCH_KIND_REGEX: RoutePredicateType.REGULAR,
}
_TYPE_TO_MATCH_KIND = {match_type.value: kind for kind, match_type in _MATCH_KIND_TO_TYPE.items()}

_CORS_KEYS = (
    Annotation.CORS_ENABLED_KEY,
    Annotation.CORS_MAX_AGE_KEY,
    Annotation.CORS_ALLOW_CREDENTIALS_KEY,
    Annotation.CORS_ALLOW_ORIGIN_KEY,
    Annotation.CORS_ALLOW_HEADERS_KEY,
    Annotation.CORS_ALLOW_METHODS_KEY,
    Annotation.CORS_EXPOSE_HEADERS_KEY,
)
_REWRITE_KEYS = (
    Annotation.REWRITE_ENABLED_KEY,
    Annotation.REWRITE_PATH_KEY,
    Annotation.UPSTREAM_VHOST_KEY,
)
_PROXY_NEXT_UPSTREAM_KEYS = (
    Annotation.PROXY_NEXT_UPSTREAM_ENABLED_KEY,
    Annotation.PROXY_NEXT_UPSTREAM_TRIES_KEY,
    Annotation.PROXY_NEXT_UPSTREAM_TIMEOUT_KEY,
    Annotation.PROXY_NEXT_UPSTREAM_KEY,
)


def encode_bool(value: bool) -> str:
    return TRUE_VALUE if value else FALSE_VALUE


def decode_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return value.strip().lower() == TRUE_VALUE


def decode_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _split_list(value: Optional[str], pattern: str = r"\s*,\s*") -> Optional[List[str]]:
    if value is None:
        return None
    return [item for item in re.split(pattern, value.strip()) if item]


def check_custom_annotations(custom_configs: Optional[Dict[str, str]]) -> None:
    """Raise ReservedKeyError if a custom config key belongs to the gateway namespace."""
    for key in custom_configs or {}:
        if is_reserved_annotation(key):
            log_rejection(logger, "check_custom_annotations", "reserved key", key=key)
            raise ReservedKeyError(key)


def use_regex(annotations: Optional[Dict[str, str]]) -> bool:
    return bool(decode_bool((annotations or {}).get(Annotation.USE_REGEX_KEY)))


def path_case_sensitive(annotations: Optional[Dict[str, str]]) -> Optional[bool]:
    """None when the ignore-path-case annotation is absent."""
    ignore = decode_bool((annotations or {}).get(Annotation.IGNORE_PATH_CASE_KEY))
    return None if ignore is None else not ignore


def encode_route_annotations(route: Route) -> Dict[str, str]:
    """Build the annotation mapping describing ``route``.

    Raises:
        ReservedKeyError: If a custom config key is reserved.
        InvalidArgumentError: If a header or query predicate has an unknown match type.
    """
    check_custom_annotations(route.custom_configs)

    annotations: Dict[str, str] = dict(route.custom_configs or {})

    destination = serialize_destinations(route.services)
    if destination is not None:
        annotations[Annotation.DESTINATION_KEY] = destination

    if route.path is not None:
        if route.path.match_type == RoutePredicateType.REGULAR.value:
            annotations[Annotation.USE_REGEX_KEY] = TRUE_VALUE
        if route.path.case_sensitive is not None:
            annotations[Annotation.IGNORE_PATH_CASE_KEY] = encode_bool(not route.path.case_sensitive)

    if route.methods is not None:
        annotations[Annotation.METHOD_KEY] = " ".join(route.methods)

    _encode_keyed_predicates(annotations, Annotation.HEADER_MATCH_KEY_FORMAT, route.headers)
    _encode_keyed_predicates(annotations, Annotation.QUERY_MATCH_KEY_FORMAT, route.url_params)

    if route.cors is not None:
        _encode_cors(annotations, route.cors)
    if route.rewrite is not None:
        _encode_rewrite(annotations, route.rewrite)
    if route.proxy_next_upstream is not None:
        _encode_proxy_next_upstream(annotations, route.proxy_next_upstream)

    return annotations


def decode_route_annotations(annotations: Optional[Dict[str, str]]) -> Dict[str, Any]:
    """Extract route attributes from an annotation mapping.

    Returns:
        Keyword arguments for Route: services, methods, headers, url_params,
        cors, rewrite, proxy_next_upstream and custom_configs.
    """
    annotations = annotations or {}

    custom_configs = {key: value for key, value in annotations.items() if not is_reserved_annotation(key)}

    return {
        "services": parse_destinations(annotations.get(Annotation.DESTINATION_KEY)),
        "methods": _split_list(annotations.get(Annotation.METHOD_KEY), r"[\s,]+"),
        "headers": _decode_keyed_predicates(annotations, Annotation.HEADER_MATCH_KEY_FORMAT),
        "url_params": _decode_keyed_predicates(annotations, Annotation.QUERY_MATCH_KEY_FORMAT),
        "cors": _decode_cors(annotations),
        "rewrite": _decode_rewrite(annotations),
        "proxy_next_upstream": _decode_proxy_next_upstream(annotations),
        "custom_configs": custom_configs,
    }


def _encode_keyed_predicates(annotations: Dict[str, str], key_format: str,
                             predicates: Optional[List[KeyedRoutePredicate]]) -> None:
    for predicate in predicates or []:
        kind = _TYPE_TO_MATCH_KIND.get(predicate.match_type)
        if kind is None:
            log_rejection(logger, "encode_route_annotations", "unsupported match type",
                          key=predicate.key, match_type=predicate.match_type)
            raise InvalidArgumentError(f"Unsupported match type {predicate.match_type!r} for {predicate.key!r}")
        annotations[key_format.format(kind, predicate.key)] = predicate.match_value or ""


def _decode_keyed_predicates(annotations: Dict[str, str], key_format: str) -> Optional[List[KeyedRoutePredicate]]:
    predicates = []
    for key, value in annotations.items():
        for kind in MATCH_KINDS:
            prefix = key_format.format(kind, "")
            if key.startswith(prefix) and len(key) > len(prefix):
                predicates.append(KeyedRoutePredicate(
                    key=key[len(prefix):],
                    match_type=_MATCH_KIND_TO_TYPE[kind].value,
                    match_value=value,
                ))
                break
    return predicates or None


def _encode_cors(annotations: Dict[str, str], cors: CorsConfig) -> None:
    annotations[Annotation.CORS_ENABLED_KEY] = encode_bool(cors.enabled)
    if cors.max_age is not None:
        annotations[Annotation.CORS_MAX_AGE_KEY] = str(cors.max_age)
    if cors.allow_credentials is not None:
        annotations[Annotation.CORS_ALLOW_CREDENTIALS_KEY] = encode_bool(cors.allow_credentials)
    if cors.allow_origins is not None:
        annotations[Annotation.CORS_ALLOW_ORIGIN_KEY] = ",".join(cors.allow_origins)
    if cors.allow_headers is not None:
        annotations[Annotation.CORS_ALLOW_HEADERS_KEY] = ",".join(cors.allow_headers)
    if cors.allow_methods is not None:
        annotations[Annotation.CORS_ALLOW_METHODS_KEY] = ",".join(cors.allow_methods)
    if cors.expose_headers is not None:
        annotations[Annotation.CORS_EXPOSE_HEADERS_KEY] = ",".join(cors.expose_headers)


def _decode_cors(annotations: Dict[str, str]) -> Optional[CorsConfig]:
    if not any(key in annotations for key in _CORS_KEYS):
        return None
    return CorsConfig(
        enabled=bool(decode_bool(annotations.get(Annotation.CORS_ENABLED_KEY))),
        max_age=decode_int(annotations.get(Annotation.CORS_MAX_AGE_KEY)),
        allow_credentials=decode_bool(annotations.get(Annotation.CORS_ALLOW_CREDENTIALS_KEY)),
        allow_origins=_split_list(annotations.get(Annotation.CORS_ALLOW_ORIGIN_KEY)),
        allow_headers=_split_list(annotations.get(Annotation.CORS_ALLOW_HEADERS_KEY)),
        allow_methods=_split_list(annotations.get(Annotation.CORS_ALLOW_METHODS_KEY)),
        expose_headers=_split_list(annotations.get(Annotation.CORS_EXPOSE_HEADERS_KEY)),
    )


def _encode_rewrite(annotations: Dict[str, str], rewrite: RewriteConfig) -> None:
    annotations[Annotation.REWRITE_ENABLED_KEY] = encode_bool(rewrite.enabled)
    if rewrite.path is not None:
        annotations[Annotation.REWRITE_PATH_KEY] = rewrite.path
    if rewrite.host is not None:
        annotations[Annotation.UPSTREAM_VHOST_KEY] = rewrite.host


def _decode_rewrite(annotations: Dict[str, str]) -> Optional[RewriteConfig]:
    if not any(key in annotations for key in _REWRITE_KEYS):
        return None
    return RewriteConfig(
        enabled=bool(decode_bool(annotations.get(Annotation.REWRITE_ENABLED_KEY))),
        path=annotations.get(Annotation.REWRITE_PATH_KEY),
        host=annotations.get(Annotation.UPSTREAM_VHOST_KEY),
    )


def _encode_proxy_next_upstream(annotations: Dict[str, str], config: ProxyNextUpstreamConfig) -> None:
    annotations[Annotation.PROXY_NEXT_UPSTREAM_ENABLED_KEY] = encode_bool(config.enabled)
    if config.attempts is not None:
        annotations[Annotation.PROXY_NEXT_UPSTREAM_TRIES_KEY] = str(config.attempts)
    if config.timeout is not None:
        annotations[Annotation.PROXY_NEXT_UPSTREAM_TIMEOUT_KEY] = str(config.timeout)
    if config.conditions is not None:
        annotations[Annotation.PROXY_NEXT_UPSTREAM_KEY] = ",".join(config.conditions)


def _decode_proxy_next_upstream(annotations: Dict[str, str]) -> Optional[ProxyNextUpstreamConfig]:
    if not any(key in annotations for key in _PROXY_NEXT_UPSTREAM_KEYS):
        return None
    return ProxyNextUpstreamConfig(
        enabled=bool(decode_bool(annotations.get(Annotation.PROXY_NEXT_UPSTREAM_ENABLED_KEY))),
        attempts=decode_int(annotations.get(Annotation.PROXY_NEXT_UPSTREAM_TRIES_KEY)),
        timeout=decode_int(annotations.get(Annotation.PROXY_NEXT_UPSTREAM_TIMEOUT_KEY)),
        conditions=_split_list(annotations.get(Annotation.PROXY_NEXT_UPSTREAM_KEY)),
    )
