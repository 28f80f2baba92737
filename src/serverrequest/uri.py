"""Handling of request URIs."""

from __future__ import annotations

import copy
import urllib.parse
from typing import Self

_DEFAULT_PORTS = {"http": 80, "https": 443}
"""The default port of each scheme, which is omitted from the authority."""


class URI:
    """An immutable, parsed URI."""

    __slots__ = {
        "_fragment": "The fragment, without the leading hash.",
        "_host": "The lowercase host, or an empty string.",
        "_path": "The path.",
        "_port": "The port, or None if absent or the default for the scheme.",
        "_query": "The query string, without the leading question mark.",
        "_scheme": "The lowercase scheme, or an empty string.",
        "_user_info": "The user information part, or an empty string.",
    }

    _fragment: str
    _host: str
    _path: str
    _port: int | None
    _query: str
    _scheme: str
    _user_info: str

    def __init__(self: Self, value: str = "") -> None:
        """
        Parse a URI.

        :param value: The URI string.
        """
        try:
            parts = urllib.parse.urlsplit(value)
            port = parts.port
        except ValueError as exc:
            msg = f"Unable to parse URI {value!r}"
            raise ValueError(msg) from exc
        self._scheme = parts.scheme.lower()
        self._user_info = parts.netloc.rpartition("@")[0]
        self._host = (parts.hostname or "").lower()
        self._port = None if port == _DEFAULT_PORTS.get(self._scheme) else port
        self._path = parts.path
        self._query = parts.query
        self._fragment = parts.fragment

    @classmethod
    def coerce(cls: type[URI], value: URI | str) -> URI:
        """
        Return value as a URI.

        :param value: A URI, which is returned unchanged, or a string to parse.
        :returns: The URI.
        """
        if isinstance(value, URI):
            return value
        return cls(value)

    @property
    def scheme(self: Self) -> str:
        """Return the lowercase scheme, or an empty string."""
        return self._scheme

    @property
    def user_info(self: Self) -> str:
        """Return the user information part, or an empty string."""
        return self._user_info

    @property
    def host(self: Self) -> str:
        """Return the lowercase host, or an empty string."""
        return self._host

    @property
    def port(self: Self) -> int | None:
        """Return the port, or None if absent or the default for the scheme."""
        return self._port

    @property
    def path(self: Self) -> str:
        """Return the path."""
        return self._path

    @property
    def query(self: Self) -> str:
        """Return the query string, without the leading question mark."""
        return self._query

    @property
    def fragment(self: Self) -> str:
        """Return the fragment, without the leading hash."""
        return self._fragment

    @property
    def authority(self: Self) -> str:
        """Return the authority part: [user-info@]host[:port]."""
        if not self.host:
            return ""
        host = f"[{self.host}]" if ":" in self.host else self.host
        authority = f"{self.user_info}@{host}" if self.user_info else host
        if self.port is not None:
            authority = f"{authority}:{self.port}"
        return authority

    def with_host(self: Self, host: str) -> URI:
        """Return a copy with a different host."""
        new = copy.copy(self)
        new._host = host.lower()
        return new

    def with_port(self: Self, port: int | None) -> URI:
        """Return a copy with a different port."""
        if port is not None and not 0 < port < 65536:
            msg = f"Port {port} is out of range"
            raise ValueError(msg)
        new = copy.copy(self)
        default = _DEFAULT_PORTS.get(self.scheme)
        new._port = None if port == default else port
        return new

    def with_path(self: Self, path: str) -> URI:
        """Return a copy with a different path."""
        new = copy.copy(self)
        new._path = path
        return new

    def with_query(self: Self, query: str) -> URI:
        """Return a copy with a different query string."""
        new = copy.copy(self)
        new._query = query.removeprefix("?")
        return new

    def __str__(self: Self) -> str:
        """Return the recomposed URI."""
        return urllib.parse.urlunsplit(
            (self.scheme, self.authority, self.path, self.query, self.fragment)
        )

    def __repr__(self: Self) -> str:
        """Return a representation of the URI."""
        return f"URI({str(self)!r})"

    def __eq__(self: Self, other: object) -> bool:
        """Compare two URIs by their string forms."""
        if not isinstance(other, URI):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self: Self) -> int:
        """Hash the string form."""
        return hash(str(self))
