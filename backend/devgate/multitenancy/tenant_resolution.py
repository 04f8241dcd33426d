from __future__ import annotations

import ipaddress
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class HostResolution:
    kind: str  # device | apex | rejected
    device_id: str | None = None
    base_domain: str | None = None
    reason: str | None = None


def _normalize(host: str | None) -> str:
    value = (host or '').strip()
    if value.endswith('.'):
        value = value[:-1]
    return value.lower()


def is_ip_host(host: str) -> bool:
    value = host.strip()
    if value.startswith('[') and value.endswith(']'):
        value = value[1:-1]
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def _valid_label(label: str) -> bool:
    if not label or len(label) > 63:
        return False
    for ch in label:
        if not (ch.isascii() and (ch.isalnum() or ch == '-')):
            return False
    return True


def is_valid_host(host: str | None) -> bool:
    """True for an IP literal or a hostname made only of 1-63 char alnum/hyphen labels."""
    normalized = _normalize(host)
    if not normalized:
        return False
    if is_ip_host(normalized):
        return True
    return all(_valid_label(label) for label in normalized.split('.'))


def is_under(host: str | None, base_domain: str | None) -> bool:
    """True when ``host`` is ``base_domain`` itself or one of its subdomains."""
    host = _normalize(host)
    base_domain = _normalize(base_domain)
    if not host or not base_domain:
        return False
    if host == base_domain:
        return True
    return host.endswith(f'.{base_domain}')


def match_base_domain(host: str | None, base_domains: Iterable[str]) -> str | None:
    for base in base_domains:
        if is_under(host, base):
            return _normalize(base)
    return None


def is_allowed(host: str | None, base_domains: Iterable[str]) -> bool:
    return match_base_domain(host, base_domains) is not None


def extract_device_id(host: str | None) -> str | None:
    """
    Return the leftmost non-empty label of ``host``.

    IP literals and empty hosts yield ``None``. A single-label host such as
    ``localhost`` is its own device ID.
    """
    value = (host or '').strip()
    if not value:
        return None
    if value.endswith('.'):
        value = value[:-1]

    if is_ip_host(value):
        return None

    for label in value.split('.'):
        if label:
            return label
    return None


def resolve_device_host(host: str | None, *, base_domains: Iterable[str]) -> HostResolution:
    if not is_valid_host(host):
        return HostResolution(kind='rejected', reason='invalid_host')

    normalized = _normalize(host)
    base_domain = match_base_domain(normalized, base_domains)
    if not base_domain:
        return HostResolution(kind='rejected', reason='base_domain_not_allowed')

    if normalized == base_domain:
        return HostResolution(kind='apex', base_domain=base_domain)

    device_id = extract_device_id(normalized)
    if not device_id:
        return HostResolution(kind='rejected', base_domain=base_domain, reason='no_device_label')

    return HostResolution(kind='device', device_id=device_id, base_domain=base_domain)
