"""ConfigMap <-> Domain conversion."""

from kubernetes import client

from .constants import (
    CERT_DATA_KEY,
    DOMAIN_CONFIG_MAP_PREFIX,
    DOMAIN_DATA_KEY,
    ENABLE_HTTPS_DATA_KEY,
    WILDCARD_PREFIX,
    WILDCARD_REPLACEMENT,
)
from .errors import InvalidArgumentError
from .kube import object_version
from .logging_config import get_logger, log_conversion, log_rejection
from .models import Domain

logger = get_logger(__name__)


def normalize_domain_name(name: str) -> str:
    """Replace a leading ``*.`` label so the name is valid in object names and labels."""
    if name.startswith(WILDCARD_PREFIX):
        return WILDCARD_REPLACEMENT + name[len(WILDCARD_PREFIX):]
    return name


def domain_name_to_config_map_name(domain_name: str) -> str:
    """``*.example.com`` -> ``domain-wildcard.example.com``, ``a.com`` -> ``domain-a.com``."""
    return DOMAIN_CONFIG_MAP_PREFIX + normalize_domain_name(domain_name)


def config_map_to_domain(config_map: client.V1ConfigMap) -> Domain:
    """Read a Domain from its config map.

    Raises:
        InvalidArgumentError: If the config map carries no data.
    """
    data = config_map.data
    if data is None:
        log_rejection(logger, "config_map_to_domain", "missing data",
                      name=config_map.metadata.name if config_map.metadata else None)
        raise InvalidArgumentError("The ConfigMap data is illegal")

    domain = Domain(
        name=data.get(DOMAIN_DATA_KEY),
        version=object_version(config_map),
        cert_identifier=data.get(CERT_DATA_KEY),
        enable_https=data.get(ENABLE_HTTPS_DATA_KEY),
    )
    log_conversion(logger, "ConfigMap", "Domain", name=domain.name, version=domain.version)
    return domain


def domain_to_config_map(domain: Domain) -> client.V1ConfigMap:
    data = {
        DOMAIN_DATA_KEY: domain.name,
        CERT_DATA_KEY: domain.cert_identifier,
        ENABLE_HTTPS_DATA_KEY: domain.enable_https,
    }
    metadata = client.V1ObjectMeta(
        name=domain_name_to_config_map_name(domain.name or ""),
        resource_version=domain.version,
    )
    log_conversion(logger, "Domain", "ConfigMap", name=domain.name, version=domain.version)
    return client.V1ConfigMap(
        metadata=metadata,
        data={key: value for key, value in data.items() if value is not None},
    )
