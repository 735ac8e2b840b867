"""Secret <-> TlsCertificate conversion."""

from typing import List, Optional

from cryptography import x509
from cryptography.x509.oid import NameOID
from kubernetes import client

from .constants import (
    SECRET_TLS_CRT_FIELD,
    SECRET_TLS_KEY_FIELD,
    SECRET_TYPE_TLS,
    TRUE_VALUE,
    Label,
)
from .domains import normalize_domain_name
from .kube import decode_secret_value, encode_secret_value, object_name, object_version
from .logging_config import get_logger, log_conversion
from .models import TlsCertificate

logger = get_logger(__name__)


def secret_to_tls_certificate(secret: client.V1Secret) -> TlsCertificate:
    """Read a TlsCertificate from a TLS secret.

    Validity and domains are only filled when the secret holds a parseable
    PEM certificate.
    """
    data = secret.data or {}
    certificate = TlsCertificate(
        name=object_name(secret),
        version=object_version(secret),
        cert=decode_secret_value(data.get(SECRET_TLS_CRT_FIELD)),
        key=decode_secret_value(data.get(SECRET_TLS_KEY_FIELD)),
    )
    if certificate.cert:
        _fill_certificate_details(certificate)
    log_conversion(logger, "Secret", "TlsCertificate", name=certificate.name, version=certificate.version)
    return certificate


def _fill_certificate_details(certificate: TlsCertificate) -> None:
    try:
        parsed = x509.load_pem_x509_certificate(certificate.cert.encode("utf-8"))
    except ValueError as e:
        logger.debug("Certificate payload is not parseable", name=certificate.name, error=str(e))
        return

    certificate.validity_start = parsed.not_valid_before_utc
    certificate.validity_end = parsed.not_valid_after_utc
    certificate.domains = _certificate_domains(parsed)


def _certificate_domains(parsed: x509.Certificate) -> Optional[List[str]]:
    try:
        san = parsed.extensions.get_extension_for_class(x509.SubjectAlternativeName)
        names = san.value.get_values_for_type(x509.DNSName)
        if names:
            return list(names)
    except x509.ExtensionNotFound:
        pass
    common_names = parsed.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    return [str(attribute.value) for attribute in common_names] or None


def tls_certificate_to_secret(certificate: TlsCertificate) -> client.V1Secret:
    """Build a TLS secret.

    Labels are only set when the certificate declares at least one domain.
    """
    metadata = client.V1ObjectMeta(name=certificate.name, resource_version=certificate.version)
    if certificate.domains:
        metadata.labels = {
            Label.DOMAIN_KEY_PREFIX + normalize_domain_name(domain): TRUE_VALUE
            for domain in certificate.domains
        }

    data = {}
    if certificate.cert is not None:
        data[SECRET_TLS_CRT_FIELD] = encode_secret_value(certificate.cert)
    if certificate.key is not None:
        data[SECRET_TLS_KEY_FIELD] = encode_secret_value(certificate.key)

    log_conversion(logger, "TlsCertificate", "Secret", name=certificate.name, version=certificate.version)
    return client.V1Secret(type=SECRET_TYPE_TLS, metadata=metadata, data=data)
