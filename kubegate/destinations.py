"""Text form of weighted upstream destinations.

One destination per line::

    [<weight>% ]<host>[:<port>][ <version>]

e.g. ``20% hello.default.svc.cluster.local:8080 v1``.
"""

import re
from typing import List, Optional

from .models import UpstreamService

_WEIGHT_RE = re.compile(r"^(\d+)%\s+(.*)$")


def parse_destinations(text: Optional[str]) -> Optional[List[UpstreamService]]:
    """Parse a destination annotation value.

    Blank lines are skipped; a missing or blank value yields None.
    """
    if text is None or not text.strip():
        return None
    services = [_parse_line(line.strip()) for line in text.split("\n") if line.strip()]
    return services or None


def _parse_line(line: str) -> UpstreamService:
    weight = None
    match = _WEIGHT_RE.match(line)
    if match:
        weight = int(match.group(1))
        line = match.group(2).strip()

    parts = line.split(None, 1)
    address = parts[0]
    version = parts[1].strip() if len(parts) > 1 else None

    host, port = address, None
    head, sep, tail = address.rpartition(":")
    if sep and head and tail.isdigit():
        host, port = head, int(tail)

    return UpstreamService(name=host, port=port, version=version or None, weight=weight)


def serialize_destinations(services: Optional[List[UpstreamService]]) -> Optional[str]:
    """Render services in destination annotation form, None when there are none."""
    if not services:
        return None
    return "\n".join(_format_service(service) for service in services)


def _format_service(service: UpstreamService) -> str:
    text = service.name or ""
    if service.weight is not None:
        text = f"{service.weight}% {text}"
    if service.port is not None:
        text = f"{text}:{service.port}"
    if service.version:
        text = f"{text} {service.version}"
    return text
