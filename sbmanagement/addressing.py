"""
Forwarding address normalization.

Resolves ForwardTo / ForwardDeadLetteredMessagesTo targets, which the
service accepts as entity paths relative to the namespace, into absolute
endpoint URIs.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import re
from urllib.parse import SplitResult, quote, urlsplit, urlunsplit

from .exceptions import InvalidAddressError

_CONTROL_CHARACTERS = re.compile(r'[\x00-\x1f\x7f]')

# RFC 3986 reserved and unreserved characters, plus '%' so existing escapes survive
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?"

# Ports dropped from the canonical form
_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


def normalize_forward_to_address(forward_to: str, base_address: str) -> str:
    """
    Resolve a forwarding target into an absolute URI.
    
    Surrounding whitespace is trimmed. Absolute targets are returned in
    canonical form. Relative targets are resolved against ``base_address``,
    which is treated as a directory.
    
    Args:
        forward_to: Entity path or absolute URI
        base_address: Namespace endpoint, e.g. https://ns.servicebus.windows.net
        
    Returns:
        Absolute URI string
        
    Raises:
        InvalidAddressError: If the pair cannot form a valid absolute URI
    """
    forward_to = forward_to.strip()
    if _CONTROL_CHARACTERS.search(forward_to):
        raise InvalidAddressError(forward_to, base_address, "address contains control characters")
    
    target = _split(forward_to, forward_to, base_address)
    if target.scheme:
        return _canonicalize(target)
    
    if not base_address.endswith("/"):
        base_address += "/"
    if _CONTROL_CHARACTERS.search(base_address):
        raise InvalidAddressError(forward_to, base_address, "base address contains control characters")
    
    base = _split(base_address, forward_to, base_address)
    if not base.scheme or not base.netloc:
        raise InvalidAddressError(forward_to, base_address, "base address is not an absolute URI")
    
    return _canonicalize(_resolve(base, target))


def _split(address: str, forward_to: str, base_address: str) -> SplitResult:
    """Split an address, surfacing urllib rejections as InvalidAddressError."""
    try:
        parts = urlsplit(address)
        # Accessing port validates it
        parts.port
    except ValueError as e:
        raise InvalidAddressError(forward_to, base_address, str(e)) from e
    return parts


def _resolve(base: SplitResult, reference: SplitResult) -> SplitResult:
    """Resolve a relative reference against an absolute base (RFC 3986 5.2.2)."""
    if reference.netloc:
        return SplitResult(
            base.scheme,
            reference.netloc,
            _remove_dot_segments(reference.path),
            reference.query,
            reference.fragment,
        )
    
    if not reference.path:
        path = base.path
        query = reference.query or base.query
    else:
        if reference.path.startswith("/"):
            path = reference.path
        else:
            path = base.path[:base.path.rfind("/") + 1] + reference.path
        path = _remove_dot_segments(path)
        query = reference.query
    
    return SplitResult(base.scheme, base.netloc, path, query, reference.fragment)


def _remove_dot_segments(path: str) -> str:
    """Remove '.' and '..' segments from an absolute path."""
    if not path:
        return path
    
    segments = path.split("/")
    resolved = []
    for segment in segments:
        if segment == "..":
            # Never pop the leading empty segment of an absolute path
            if len(resolved) > 1:
                resolved.pop()
        elif segment != ".":
            resolved.append(segment)
    
    if segments[-1] in (".", ".."):
        resolved.append("")
    return "/".join(resolved)


def _canonicalize(parts: SplitResult) -> str:
    """Render the canonical absolute form of a split URI."""
    netloc = parts.netloc
    if parts.hostname:
        # Lowercase the host only; userinfo keeps its case
        userinfo, at, hostport = netloc.rpartition("@")
        hostport = hostport.lower()
        if parts.port is not None and parts.port == _DEFAULT_PORTS.get(parts.scheme.lower()):
            hostport = hostport.rsplit(":", 1)[0]
        netloc = userinfo + at + hostport
    
    path = _remove_dot_segments(parts.path)
    if netloc and not path:
        path = "/"
    
    return urlunsplit((
        parts.scheme.lower(),
        netloc,
        quote(path, safe=_PATH_SAFE),
        quote(parts.query, safe=_QUERY_SAFE),
        quote(parts.fragment, safe=_QUERY_SAFE),
    ))
