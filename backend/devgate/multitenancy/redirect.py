from __future__ import annotations

from urllib.parse import parse_qsl, quote, urlencode, urlunsplit


DEFAULT_PORTS = {'http': '80', 'https': '443'}

_PATH_SAFE = "/:@!$&'()*+,;=~"


def build_redirect_host(hostname: str, device_id: str) -> str:
    """
    Swap the leftmost label of ``hostname`` for ``device_id``.

    - ``www.example.com``       -> ``devid.example.com``
    - ``www.l1.l2.example.com`` -> ``devid.l1.l2.example.com``
    - ``example.com``           -> ``devid.com``
    - ``localhost``             -> ``devid.localhost`` (single label is kept as suffix)
    - ``''``                    -> ``devid``

    ``hostname`` must not carry a port.
    """
    if hostname.endswith('.'):
        hostname = hostname[:-1]

    labels = [label for label in hostname.split('.') if label]

    if not labels:
        return device_id
    if len(labels) == 1:
        return f'{device_id}.{labels[0]}'
    return '.'.join([device_id, *labels[1:]])


def join_host_port(host: str, port: str) -> str:
    if ':' in host:
        return f'[{host}]:{port}'
    return f'{host}:{port}'


def join_host_port_if_needed(host: str, scheme: str, port: str | None) -> str:
    """Return ``host:port``, or just ``host`` when the port is empty or the scheme default."""
    if not port:
        return host
    if DEFAULT_PORTS.get(scheme.lower()) == port:
        return host
    return join_host_port(host, port)


def build_redirect_location(scheme: str, host_port: str, path: str | None, sid: str, *, param: str = 'sid') -> str:
    """
    Build an absolute redirect URL carrying the session ID.

    A query string already present on ``path`` survives except for earlier
    values of ``param``, which are replaced. Keys are emitted sorted.
    """
    path = path or '/'
    path, _, raw_query = path.partition('?')
    if not path.startswith('/'):
        path = f'/{path}'

    pairs = [(key, value) for key, value in parse_qsl(raw_query, keep_blank_values=True) if key != param]
    pairs.append((param, sid))
    pairs.sort(key=lambda pair: pair[0])

    return urlunsplit((scheme, host_port, quote(path, safe=_PATH_SAFE), urlencode(pairs), ''))
