from __future__ import annotations

from dataclasses import dataclass

from starlette.requests import Request


SCHEMES = ('http', 'https')


class HostPortError(ValueError):
    pass


@dataclass(frozen=True)
class ResolvedHostInfo:
    host: str  # bare host, no port, no trailing dot
    port: str  # '' means the scheme default
    scheme: str  # http | https
    raw_host: str = ''
    forwarded_host: str = ''
    forwarded_proto: str = ''
    forwarded_port: str = ''


def first_header_value(value: str | None) -> str:
    """Return the first entry of a comma-separated header, trimmed."""
    if not value or not value.strip():
        return ''
    return value.split(',', 1)[0].strip()


def split_host_port(hostport: str) -> tuple[str, str]:
    """
    Split ``host:port`` or ``[host]:port`` into its parts.

    The port may be empty (``example.com:``) but the colon is mandatory. An
    unbracketed host containing a colon (a bare IPv6 literal) is ambiguous and
    rejected, as are stray brackets.
    """
    index = hostport.rfind(':')
    if index < 0:
        raise HostPortError(f'missing port in address: {hostport!r}')

    if hostport.startswith('['):
        end = hostport.find(']')
        if end < 0:
            raise HostPortError(f"missing ']' in address: {hostport!r}")
        if end + 1 == len(hostport):
            raise HostPortError(f'missing port in address: {hostport!r}')
        if end + 1 != index:
            if hostport[end + 1] == ':':
                raise HostPortError(f'too many colons in address: {hostport!r}')
            raise HostPortError(f'missing port in address: {hostport!r}')
        host = hostport[1:end]
        host_start, port_start = 1, end + 1
    else:
        host = hostport[:index]
        if ':' in host:
            raise HostPortError(f'too many colons in address: {hostport!r}')
        host_start, port_start = 0, 0

    if '[' in hostport[host_start:]:
        raise HostPortError(f"unexpected '[' in address: {hostport!r}")
    if ']' in hostport[port_start:]:
        raise HostPortError(f"unexpected ']' in address: {hostport!r}")

    return host, hostport[index + 1 :]


def _strip_trailing_dot(host: str) -> str:
    return host[:-1] if host.endswith('.') else host


def _unbracket(host: str) -> str:
    if len(host) > 1 and host.startswith('[') and host.endswith(']'):
        return host[1:-1]
    return host


def resolve_host_info(
    host: str | None,
    *,
    tls: bool = False,
    forwarded_host: str | None = None,
    forwarded_proto: str | None = None,
    forwarded_port: str | None = None,
) -> ResolvedHostInfo:
    """
    Combine the request authority, TLS state and ``X-Forwarded-*`` headers into
    the host, port and scheme the client actually asked for.

    Precedence: the first ``X-Forwarded-Host`` entry beats the request host, the
    first ``X-Forwarded-Proto`` entry beats the TLS state and the first
    ``X-Forwarded-Port`` entry beats any port found in the host. Malformed input
    degrades to a literal host, an empty port and the TLS-derived scheme.
    """
    raw_host = host or ''
    candidate = first_header_value(forwarded_host) or raw_host.strip()

    try:
        bare_host, port = split_host_port(candidate)
    except HostPortError:
        bare_host, port = _unbracket(candidate), ''
    bare_host = _strip_trailing_dot(bare_host)

    proto = first_header_value(forwarded_proto).lower()
    if proto in SCHEMES:
        scheme = proto
    else:
        scheme = 'https' if tls else 'http'

    override_port = first_header_value(forwarded_port)
    if override_port:
        port = override_port

    return ResolvedHostInfo(
        host=bare_host,
        port=port,
        scheme=scheme,
        raw_host=raw_host,
        forwarded_host=forwarded_host or '',
        forwarded_proto=forwarded_proto or '',
        forwarded_port=forwarded_port or '',
    )


def resolve_request_host_info(request: Request, *, trust_proxy_headers: bool = True) -> ResolvedHostInfo:
    headers = request.headers
    host = headers.get('host') or request.url.netloc
    tls = request.url.scheme in ('https', 'wss')
    if not trust_proxy_headers:
        return resolve_host_info(host, tls=tls)
    return resolve_host_info(
        host,
        tls=tls,
        forwarded_host=headers.get('x-forwarded-host'),
        forwarded_proto=headers.get('x-forwarded-proto'),
        forwarded_port=headers.get('x-forwarded-port'),
    )
