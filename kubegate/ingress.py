"""Ingress <-> Route conversion."""

from typing import List, Optional

from kubernetes import client

from .annotations import decode_route_annotations, encode_route_annotations, path_case_sensitive, use_regex
from .config import ConverterConfig
from .constants import IngressPathType
from .errors import InvalidArgumentError
from .kube import object_name, object_version
from .logging_config import get_logger, log_conversion, log_rejection
from .models import Route, RoutePredicate, RoutePredicateType

logger = get_logger(__name__)

_SUPPORTED_PATH_TYPES = (IngressPathType.PREFIX, IngressPathType.EXACT)

_MATCH_TYPE_TO_PATH_TYPE = {
    RoutePredicateType.EQUAL.value: IngressPathType.EXACT,
    RoutePredicateType.PRE.value: IngressPathType.PREFIX,
    # Regular expressions travel as prefix paths plus the use-regex annotation.
    RoutePredicateType.REGULAR.value: IngressPathType.PREFIX,
}

DEFAULT_PATH = "/"


def is_ingress_supported(ingress: client.V1Ingress, config: Optional[ConverterConfig] = None) -> bool:
    """Check whether an ingress can be represented as a single Route.

    The ingress needs exactly one rule with exactly one Prefix or Exact
    path. A path backend, when present, must point at this gateway's own
    McpBridge rather than at a plain service.
    """
    config = config or ConverterConfig()

    if ingress.metadata is None or ingress.spec is None:
        return False

    rules = ingress.spec.rules
    if not rules or len(rules) != 1:
        return False

    http = rules[0].http
    if http is None or not http.paths or len(http.paths) != 1:
        return False

    path = http.paths[0]
    if path.path_type not in _SUPPORTED_PATH_TYPES:
        return False

    backend = path.backend
    if backend is None:
        return True
    if backend.service is not None:
        return False
    resource = backend.resource
    if resource is None:
        return True
    return (resource.api_group == config.bridge_api_group
            and resource.kind == config.bridge_kind
            and resource.name == config.bridge_name)


def ingress_to_route(ingress: client.V1Ingress) -> Route:
    """Convert an ingress into a Route.

    Missing pieces decode to None instead of failing; callers that need a
    faithful conversion check is_ingress_supported first.
    """
    metadata = ingress.metadata
    annotations = metadata.annotations if metadata is not None else None

    route = Route(
        name=object_name(ingress),
        version=object_version(ingress),
        domains=_decode_domains(ingress.spec),
        path=_decode_path(ingress.spec, annotations),
        **decode_route_annotations(annotations),
    )
    log_conversion(logger, "Ingress", "Route", name=route.name, version=route.version)
    return route


def _decode_domains(spec: Optional[client.V1IngressSpec]) -> Optional[List[str]]:
    # Zero or several rules cannot be mapped to one host restriction.
    if spec is None or not spec.rules or len(spec.rules) != 1:
        return None
    host = spec.rules[0].host
    return [host] if host else []


def _decode_path(spec: Optional[client.V1IngressSpec], annotations) -> Optional[RoutePredicate]:
    if spec is None or not spec.rules or len(spec.rules) != 1:
        return None
    http = spec.rules[0].http
    if http is None or not http.paths or len(http.paths) != 1:
        return None

    path = http.paths[0]
    if path.path_type == IngressPathType.EXACT:
        match_type = RoutePredicateType.EQUAL
    elif path.path_type == IngressPathType.PREFIX:
        match_type = RoutePredicateType.REGULAR if use_regex(annotations) else RoutePredicateType.PRE
    else:
        logger.debug("Unsupported ingress path type", path_type=path.path_type)
        return None

    return RoutePredicate(
        match_type=match_type.value,
        match_value=path.path,
        case_sensitive=path_case_sensitive(annotations),
    )


def route_to_ingress(route: Route, config: Optional[ConverterConfig] = None) -> client.V1Ingress:
    """Convert a Route into an ingress targeting this gateway's McpBridge.

    Raises:
        InvalidArgumentError: If the route has more than one domain or an
            unsupported path match type.
        ReservedKeyError: If a custom config key is reserved.
    """
    config = config or ConverterConfig()

    if route.domains and len(route.domains) > 1:
        log_rejection(logger, "route_to_ingress", "multiple domains", name=route.name, domains=route.domains)
        raise InvalidArgumentError("Only one domain is allowed in a route")

    path_type, path_value = _encode_path(route)
    annotations = encode_route_annotations(route)

    metadata = client.V1ObjectMeta(
        name=route.name,
        resource_version=route.version,
        annotations=annotations or None,
    )

    backend = client.V1IngressBackend(
        resource=client.V1TypedLocalObjectReference(
            api_group=config.bridge_api_group,
            kind=config.bridge_kind,
            name=config.bridge_name,
        )
    )
    rule = client.V1IngressRule(
        host=route.domains[0] if route.domains else None,
        http=client.V1HTTPIngressRuleValue(
            paths=[client.V1HTTPIngressPath(path=path_value, path_type=path_type, backend=backend)]
        ),
    )
    spec = client.V1IngressSpec(ingress_class_name=config.ingress_class, rules=[rule])

    log_conversion(logger, "Route", "Ingress", name=route.name, version=route.version)
    return client.V1Ingress(metadata=metadata, spec=spec)


def _encode_path(route: Route):
    predicate = route.path
    if predicate is None:
        return IngressPathType.PREFIX, DEFAULT_PATH

    path_type = _MATCH_TYPE_TO_PATH_TYPE.get(predicate.match_type)
    if path_type is None:
        log_rejection(logger, "route_to_ingress", "unsupported path match type",
                      name=route.name, match_type=predicate.match_type)
        raise InvalidArgumentError(f"Unsupported path match type: {predicate.match_type}")
    return path_type, predicate.match_value or DEFAULT_PATH
