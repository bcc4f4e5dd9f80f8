"""Encode diff-buffer descriptors as ``scheme://root?params#fragment`` names.

Editors persist buffer names (sessions, jump lists), so the grammar is stable:
the repository root is percent-encoded with ``/`` and ``:`` kept verbatim,
presence-only parameters appear as a bare key, and the fragment is encoded as
a path. ``parse_bufname(format_bufname(d)) == d`` for every descriptor.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable
from urllib.parse import quote, unquote

from .errors import MalformedBufname, MissingFragment, UnrecognizedScheme

DIFF_SCHEME = "lazydiff"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
_ROOT_SAFE = "/:"
_VALUE_SAFE = "/:"
_FRAGMENT_SAFE = "/"

Param = tuple[str, "str | None"]


@dataclass(frozen=True)
class BufferDescriptor:
    """Decoded buffer name.

    ``params`` keeps insertion order. A ``None`` value marks a presence-only
    flag such as ``cached`` or ``R``; a string value (possibly empty) is a
    key/value parameter such as ``commitish``.
    """

    root: str
    fragment: str
    params: tuple[Param, ...] = ()
    scheme: str = field(default=DIFF_SCHEME)

    def __post_init__(self) -> None:
        if not _SCHEME_RE.match(self.scheme):
            raise MalformedBufname(f"Invalid scheme {self.scheme!r}")
        if not self.root:
            raise MalformedBufname("Buffer name requires a root path")
        if not self.fragment:
            raise MissingFragment(f"{self.scheme}://{self.root}")
        seen: set[str] = set()
        for key, _value in self.params:
            if not key:
                raise MalformedBufname("Parameter keys must be non-empty")
            if key in seen:
                raise MalformedBufname(f"Duplicate parameter {key!r}")
            seen.add(key)

    def has(self, key: str) -> bool:
        return any(name == key for name, _value in self.params)

    def get(self, key: str, default: str | None = None) -> str | None:
        for name, value in self.params:
            if name == key:
                return value
        return default

    def flags(self, exclude: Iterable[str] = ()) -> tuple[Param, ...]:
        """Return params without the keys in ``exclude``, order preserved."""
        excluded = set(exclude)
        return tuple(param for param in self.params if param[0] not in excluded)


def _format_param(key: str, value: str | None) -> str:
    encoded_key = quote(key, safe="")
    if value is None:
        return encoded_key
    return f"{encoded_key}={quote(value, safe=_VALUE_SAFE)}"


def format_bufname(descriptor: BufferDescriptor) -> str:
    """Serialize ``descriptor`` into a buffer name."""
    out = [descriptor.scheme, "://", quote(descriptor.root, safe=_ROOT_SAFE)]
    if descriptor.params:
        out.append("?")
        out.append("&".join(_format_param(key, value) for key, value in descriptor.params))
    out.append("#")
    out.append(quote(descriptor.fragment, safe=_FRAGMENT_SAFE))
    return "".join(out)


def _parse_params(bufname: str, query: str) -> tuple[Param, ...]:
    if not query:
        raise MalformedBufname(f"Buffer {bufname!r} has an empty parameter list")
    params: list[Param] = []
    for token in query.split("&"):
        raw_key, eq, raw_value = token.partition("=")
        if not raw_key:
            raise MalformedBufname(f"Buffer {bufname!r} has an empty parameter key")
        params.append((unquote(raw_key), unquote(raw_value) if eq else None))
    return tuple(params)


def parse_bufname(bufname: str, scheme: str = DIFF_SCHEME) -> BufferDescriptor:
    """Decode a buffer name, requiring ``scheme`` and a fragment.

    Raises ``UnrecognizedScheme``, ``MissingFragment`` or ``MalformedBufname``;
    never returns a partial descriptor.
    """
    found_scheme, sep, rest = bufname.partition("://")
    if not sep or found_scheme != scheme:
        raise UnrecognizedScheme(bufname, scheme)

    body, hash_sep, raw_fragment = rest.partition("#")
    if not hash_sep or not raw_fragment:
        raise MissingFragment(bufname)

    raw_root, query_sep, query = body.partition("?")
    if not raw_root:
        raise MalformedBufname(f"Buffer {bufname!r} requires a root path")

    params = _parse_params(bufname, query) if query_sep else ()
    return BufferDescriptor(
        root=unquote(raw_root),
        fragment=unquote(raw_fragment),
        params=params,
        scheme=found_scheme,
    )
