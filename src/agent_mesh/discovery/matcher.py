"""Resource grant matching.

Decides whether a resource an agent advertises covers a resource a caller
requires. URIs with a scheme and host only ever match within the same
scheme and host; paths support "/*" globs and parent-covers-child.

Examples:
    file://vm1/projects/*   covers  file://vm1/projects/agentlens
    file://vm1/projects/*   does not cover  file://vm2/projects/agentlens
    git://github.com/org/*  covers  git://github.com/org/repo
    https://api.github.com  covers  https://api.github.com/repos
    /home/amit/projects     covers  /home/amit/projects/app/src
"""

from typing import NamedTuple
from urllib.parse import urlsplit


class _ParsedURI(NamedTuple):
    scheme: str
    host: str
    path: str


def _parse(uri: str) -> _ParsedURI | None:
    """Split a URI into scheme, host[:port] and path.

    Returns None unless the string has both a scheme and a host.
    """
    try:
        parts = urlsplit(uri)
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return None

    if not parts.scheme or not hostname:
        return None

    host = f"{hostname}:{port}" if port is not None else hostname
    return _ParsedURI(parts.scheme, host, parts.path or "/")


def _path_matches(granted: str, required: str) -> bool:
    if granted == required:
        return True

    # Glob: /foo/* covers /foo/bar and /foo/bar/baz
    if granted.endswith("/*") and required.startswith(granted[:-1]):
        return True

    # Root covers every absolute path
    if granted == "/":
        return required.startswith("/")

    # Parent covers child: /foo covers /foo/bar but not /foobar
    return required.startswith(granted.rstrip("/") + "/")


def matches(granted: str, required: str) -> bool:
    """Check whether a granted resource covers a required one.

    The check is one-directional: a narrower grant never covers a broader
    requirement.

    Args:
        granted: Resource URI, slug, path or name advertised by an agent
        required: Resource URI, slug, path or name the caller needs

    Returns:
        bool: True if the grant covers the requirement
    """
    if granted == required:
        return True

    granted_uri = _parse(granted)
    required_uri = _parse(required)

    if granted_uri is None or required_uri is None:
        # Slugs, plain paths and service names compare as raw strings
        return _path_matches(granted, required)

    if granted_uri.scheme != required_uri.scheme:
        return False
    if granted_uri.host != required_uri.host:
        return False

    return _path_matches(granted_uri.path, required_uri.path)
