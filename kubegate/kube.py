"""Helpers around kubernetes client objects."""

import base64
import binascii
from typing import Any, Dict, Optional

from kubernetes import client

from .logging_config import get_logger

logger = get_logger(__name__)

_api_client: Optional[client.ApiClient] = None


def _serializer() -> client.ApiClient:
    global _api_client
    if _api_client is None:
        _api_client = client.ApiClient()
    return _api_client


def get_annotation(metadata: Optional[client.V1ObjectMeta], key: str) -> Optional[str]:
    if metadata is None or not metadata.annotations:
        return None
    return metadata.annotations.get(key)


def set_annotation(metadata: client.V1ObjectMeta, key: str, value: str) -> None:
    if metadata.annotations is None:
        metadata.annotations = {}
    metadata.annotations[key] = value


def get_label(metadata: Optional[client.V1ObjectMeta], key: str) -> Optional[str]:
    if metadata is None or not metadata.labels:
        return None
    return metadata.labels.get(key)


def set_label(metadata: client.V1ObjectMeta, key: str, value: str) -> None:
    if metadata.labels is None:
        metadata.labels = {}
    metadata.labels[key] = value


def object_name(obj: Any) -> Optional[str]:
    metadata = getattr(obj, "metadata", None)
    return metadata.name if metadata is not None else None


def object_version(obj: Any) -> Optional[str]:
    metadata = getattr(obj, "metadata", None)
    return metadata.resource_version if metadata is not None else None


def meta_to_dict(metadata: client.V1ObjectMeta) -> Dict[str, Any]:
    """Render object metadata in its API (camelCase) form."""
    return _serializer().sanitize_for_serialization(metadata)


def meta_from_dict(data: Dict[str, Any]) -> client.V1ObjectMeta:
    """Build object metadata from its API (camelCase) form.

    Nested structures such as owner references are kept as plain dicts.
    """
    reverse = {json_key: attr for attr, json_key in client.V1ObjectMeta.attribute_map.items()}
    kwargs = {reverse[key]: value for key, value in data.items() if key in reverse}
    return client.V1ObjectMeta(**kwargs)


def encode_secret_value(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_secret_value(value: Optional[str]) -> Optional[str]:
    """Decode a secret data entry to text, None when it is absent or not UTF-8 text."""
    if value is None:
        return None
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        logger.debug("Secret value is not base64 encoded text", error=str(e))
        return None
