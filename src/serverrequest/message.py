"""
Generic HTTP message and request state.

Every class in this module is immutable: methods named with_* or without_* return a
modified copy and leave the original untouched.
"""

from __future__ import annotations

import http
import re
from collections.abc import Iterator, Sequence
from typing import Self

from .errors import (
    InvalidHeader,
    InvalidMethod,
    InvalidProtocolVersion,
    InvalidRequestTarget,
)
from .stream import Stream
from .types import BodyInput, HeaderInput, HeaderValue
from .uri import URI

DEFAULT_PROTOCOL_VERSION = "1.1"
"""The protocol version used when none is given."""

SUPPORTED_PROTOCOL_VERSIONS = frozenset({"1.0", "1.1", "2", "2.0", "3", "3.0"})
"""The protocol versions a message may carry."""

_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
"""An RFC 7230 token, used for header names and methods."""

_BAD_VALUE_CHARACTERS = re.compile(r"[\r\n\0]")
"""Characters that must never appear in a header value."""


def _slot_names(cls: type) -> Iterator[str]:
    """
    Yield the names of all slots declared by a class and its ancestors.

    :param cls: The class.
    """
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        yield from slots


def _normalize_header_values(
    name: str, value: HeaderValue | Sequence[HeaderValue]
) -> tuple[str, ...]:
    """
    Validate a header and convert its value(s) to a tuple of strings.

    :param name: The header name.
    :param value: A single value or a sequence of values.
    :returns: The values as strings.
    :raises InvalidHeader: If the name or any value is malformed.
    """
    if not isinstance(name, str) or not _TOKEN.fullmatch(name):
        msg = f"Header name {name!r} is not a valid token"
        raise InvalidHeader(msg)
    values = (value,) if isinstance(value, str | int | float) else tuple(value)
    if not values:
        msg = f"Header {name} must have at least one value"
        raise InvalidHeader(msg)
    result = []
    for item in values:
        # bool is an int, but "True" is not a meaningful header value.
        if isinstance(item, bool) or not isinstance(item, str | int | float):
            msg = f"Header {name} has a value of invalid type {type(item).__qualname__}"
            raise InvalidHeader(msg)
        text = str(item)
        if _BAD_VALUE_CHARACTERS.search(text):
            msg = f"Header {name} has a value containing CR, LF, or NUL"
            raise InvalidHeader(msg)
        result.append(text.strip(" \t"))
    return tuple(result)


def _validate_protocol_version(version: str) -> str:
    """
    Check that a protocol version is supported.

    :param version: The version, such as "1.1".
    :returns: The version.
    :raises InvalidProtocolVersion: If the version is not supported.
    """
    if version not in SUPPORTED_PROTOCOL_VERSIONS:
        msg = (
            f"Unsupported HTTP protocol version {version!r}, must be one of "
            f"{', '.join(sorted(SUPPORTED_PROTOCOL_VERSIONS))}"
        )
        raise InvalidProtocolVersion(msg)
    return version


class Message:
    """An HTTP message: protocol version, headers, and body."""

    __slots__ = {
        "_body": """The body stream.""",
        "_headers": """Map from lowercase header name to (name, values).""",
        "_protocol_version": """The HTTP protocol version, such as “1.1”.""",
    }

    _body: Stream
    _headers: dict[str, tuple[str, tuple[str, ...]]]
    _protocol_version: str

    def __init__(
        self: Self,
        body: Stream | BodyInput = b"",
        headers: HeaderInput | None = None,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
    ) -> None:
        """
        Construct a new Message.

        :param body: The body, as a Stream or anything Stream accepts.
        :param headers: The headers, mapping each name to a value or list of values.
        :param protocol_version: The HTTP protocol version.
        """
        self._protocol_version = _validate_protocol_version(protocol_version)
        self._headers = {}
        for name, value in (headers or {}).items():
            self._set_header(name, _normalize_header_values(name, value))
        self._body = Stream.coerce(body)

    def __copy__(self: Self) -> Self:
        """
        Return a shallow copy for use by a with_* method.

        Slots holding dicts or lists get their own shallow copies, so that changing one
        such container in the copy does not affect the original; all other slot values
        are shared.
        """
        cls = type(self)
        new = cls.__new__(cls)
        for name in _slot_names(cls):
            if not hasattr(self, name):
                continue
            value = getattr(self, name)
            if isinstance(value, dict | list):
                value = value.copy()
            setattr(new, name, value)
        return new

    def _set_header(self: Self, name: str, values: tuple[str, ...]) -> None:
        """Replace a header, called only on a fresh copy or during construction."""
        self._headers[name.lower()] = (name, values)

    @property
    def protocol_version(self: Self) -> str:
        """Return the HTTP protocol version."""
        return self._protocol_version

    def with_protocol_version(self: Self, version: str) -> Self:
        """
        Return a copy with a different protocol version.

        :param version: The new version.
        :raises InvalidProtocolVersion: If the version is not supported.
        """
        _validate_protocol_version(version)
        if version == self._protocol_version:
            return self
        new = self.__copy__()
        new._protocol_version = version
        return new

    @property
    def headers(self: Self) -> dict[str, list[str]]:
        """Return the headers, mapping each name as last set to a list of values."""
        return {name: list(values) for name, values in self._headers.values()}

    def has_header(self: Self, name: str) -> bool:
        """Return whether a header is present, compared case-insensitively."""
        return name.lower() in self._headers

    def get_header(self: Self, name: str) -> list[str]:
        """Return the values of a header, or an empty list if it is absent."""
        entry = self._headers.get(name.lower())
        return [] if entry is None else list(entry[1])

    def get_header_line(self: Self, name: str) -> str:
        """Return the values of a header joined by commas."""
        return ",".join(self.get_header(name))

    def with_header(
        self: Self, name: str, value: HeaderValue | Sequence[HeaderValue]
    ) -> Self:
        """
        Return a copy with a header replaced.

        :param name: The header name, case-insensitive.
        :param value: The new value or values.
        :raises InvalidHeader: If the name or a value is malformed.
        """
        values = _normalize_header_values(name, value)
        new = self.__copy__()
        new._set_header(name, values)
        return new

    def with_added_header(
        self: Self, name: str, value: HeaderValue | Sequence[HeaderValue]
    ) -> Self:
        """
        Return a copy with values appended to a header.

        :param name: The header name, case-insensitive.
        :param value: The value or values to append.
        :raises InvalidHeader: If the name or a value is malformed.
        """
        values = _normalize_header_values(name, value)
        existing = self._headers.get(name.lower())
        if existing is not None:
            name, values = existing[0], existing[1] + values
        new = self.__copy__()
        new._set_header(name, values)
        return new

    def without_header(self: Self, name: str) -> Self:
        """Return a copy without a header, or self if the header is absent."""
        key = name.lower()
        if key not in self._headers:
            return self
        new = self.__copy__()
        del new._headers[key]
        return new

    @property
    def body(self: Self) -> Stream:
        """Return the body stream."""
        return self._body

    def with_body(self: Self, body: Stream | BodyInput) -> Self:
        """Return a copy with a different body."""
        stream = Stream.coerce(body)
        if stream is self._body:
            return self
        new = self.__copy__()
        new._body = stream
        return new


class Request(Message):
    """An HTTP request: a Message plus method, URI, and request target."""

    __slots__ = {
        "_method": """The request method.""",
        "_request_target": """The explicitly set request target, or None.""",
        "_uri": """The request URI.""",
    }

    _method: str
    _request_target: str | None
    _uri: URI

    def __init__(
        self: Self,
        method: str = http.HTTPMethod.GET,
        uri: URI | str = "",
        body: Stream | BodyInput = b"",
        headers: HeaderInput | None = None,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
    ) -> None:
        """
        Construct a new Request.

        :param method: The request method.
        :param uri: The request URI, as a URI or a string to parse.
        :param body: The body, as a Stream or anything Stream accepts.
        :param headers: The headers, mapping each name to a value or list of values.
        :param protocol_version: The HTTP protocol version.
        """
        super().__init__(body, headers, protocol_version)
        self._method = self._validate_method(method)
        self._request_target = None
        self._uri = URI.coerce(uri)
        if not self.has_header("Host"):
            self._update_host_from_uri()

    @staticmethod
    def _validate_method(method: str) -> str:
        """
        Check that a request method is a valid token.

        :param method: The method.
        :returns: The method as a plain str.
        :raises InvalidMethod: If the method is not a valid token.
        """
        if not isinstance(method, str) or not _TOKEN.fullmatch(method):
            msg = f"Request method {method!r} is not a valid token"
            raise InvalidMethod(msg)
        return str(method)

    def _update_host_from_uri(self: Self) -> None:
        """Set the Host header from the URI, called only on a fresh instance."""
        host = self._uri.host
        if not host:
            return
        if ":" in host:
            host = f"[{host}]"
        if self._uri.port is not None:
            host = f"{host}:{self._uri.port}"
        # Host goes first, as in an HTTP/1.1 request head.
        self._headers = {"host": ("Host", (host,))} | {
            k: v for k, v in self._headers.items() if k != "host"
        }

    @property
    def method(self: Self) -> str:
        """Return the request method."""
        return self._method

    def with_method(self: Self, method: str) -> Self:
        """
        Return a copy with a different method.

        :raises InvalidMethod: If the method is not a valid token.
        """
        method = self._validate_method(method)
        new = self.__copy__()
        new._method = method
        return new

    @property
    def uri(self: Self) -> URI:
        """Return the request URI."""
        return self._uri

    def with_uri(self: Self, uri: URI | str, preserve_host: bool = False) -> Self:
        """
        Return a copy with a different URI.

        :param uri: The new URI.
        :param preserve_host: True to keep an existing non-empty Host header rather
            than replacing it from the new URI.
        """
        new = self.__copy__()
        new._uri = URI.coerce(uri)
        if not preserve_host or not self.get_header_line("Host"):
            new._update_host_from_uri()
        return new

    @property
    def request_target(self: Self) -> str:
        """Return the request target, derived from the URI if not set explicitly."""
        if self._request_target is not None:
            return self._request_target
        target = self._uri.path or "/"
        if self._uri.query:
            target = f"{target}?{self._uri.query}"
        return target

    def with_request_target(self: Self, request_target: str) -> Self:
        """
        Return a copy with an explicit request target.

        :raises InvalidRequestTarget: If the target contains whitespace.
        """
        if re.search(r"\s", request_target):
            msg = "Request target must not contain whitespace"
            raise InvalidRequestTarget(msg)
        new = self.__copy__()
        new._request_target = request_target
        return new
