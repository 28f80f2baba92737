"""The server-side request."""

from __future__ import annotations

import http
import logging
import numbers
from collections.abc import Hashable, Mapping, Sequence, Set
from typing import Any, Self

from .errors import InvalidParsedBody, type_name
from .message import DEFAULT_PROTOCOL_VERSION, Request
from .stream import Stream
from .types import BodyInput, HeaderInput, ParsedBody, UploadedFilesTree
from .uploads import copy_uploaded_files, validate_uploaded_files
from .uri import URI

_SCALAR_TYPES = (str, bytes, bytearray, memoryview, numbers.Number)
"""Types that are never acceptable as a parsed body, bool included."""

_VALUE_COMPARED_TYPES = (type(None), bool, int, float, str, bytes)
"""Attribute value types that with_attribute compares by value rather than identity."""


def _is_valid_parsed_body(data: object) -> bool:
    """
    Check whether a value may be used as a parsed body.

    :param data: The value.
    :returns: True if data is None, a mapping, or an object that is neither a scalar
        nor a non-mapping collection.
    """
    if data is None or isinstance(data, Mapping):
        return True
    return not isinstance(data, _SCALAR_TYPES + (Sequence, Set))


def _same_attribute_value(old: object, new: object) -> bool:
    """
    Check whether storing new in place of old would change nothing.

    Primitive values are compared by type and value, so that 1 and True (or 1 and 1.0)
    are different; every other value is compared by identity.

    :param old: The stored value.
    :param new: The candidate value.
    """
    if old is new:
        return True
    if type(old) is not type(new) or not isinstance(old, _VALUE_COMPARED_TYPES):
        return False
    return bool(old == new)


class ServerRequest(Request):
    """
    An incoming HTTP request as seen by a server.

    In addition to the generic request state, a ServerRequest carries server
    parameters, cookies, query parameters, a parsed body, uploaded files, and
    application-defined attributes. It is immutable: the with_* and without_* methods
    return a new ServerRequest and never modify the one they are called on. Mappings
    are copied on the way in and on the way out, so a caller changing a mapping it
    passed in or got back cannot affect any ServerRequest.
    """

    __slots__ = {
        "_attributes": """The attributes added by server-side processing.""",
        "_cookie_params": """The cookies sent by the client.""",
        "_parsed_body": """The parsed body, a mapping, an object, or None.""",
        "_query_params": """The query string parameters.""",
        "_server_params": """The server environment parameters.""",
        "_uploaded_files": """The uploaded-files structure.""",
    }

    _attributes: dict[Hashable, Any]
    _cookie_params: dict[str, str]
    _parsed_body: ParsedBody
    _query_params: dict[str, Any]
    _server_params: dict[str, Any]
    _uploaded_files: UploadedFilesTree

    def __init__(
        self: Self,
        server_params: Mapping[str, Any] | None = None,
        uploaded_files: UploadedFilesTree | None = None,
        cookie_params: Mapping[str, str] | None = None,
        query_params: Mapping[str, Any] | None = None,
        parsed_body: ParsedBody = None,
        method: str = http.HTTPMethod.GET,
        uri: URI | str = "",
        body: Stream | BodyInput = b"",
        headers: HeaderInput | None = None,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
    ) -> None:
        """
        Construct a new ServerRequest.

        :param server_params: The server environment parameters.
        :param uploaded_files: The uploaded-files structure, a mapping or list whose
            leaves, at any depth, are UploadedFile instances.
        :param cookie_params: The cookies.
        :param query_params: The query string parameters.
        :param parsed_body: The parsed body. This is not checked, as the constructor’s
            caller is the body parser.
        :param method: The request method.
        :param uri: The request URI, as a URI or a string to parse.
        :param body: The raw body, as a Stream, a str, bytes, or a binary file object.
        :param headers: The headers, mapping each name to a value or list of values.
        :param protocol_version: The HTTP protocol version.
        :raises InvalidUploadedFilesStructure: If a leaf of uploaded_files is not an
            UploadedFile.
        """
        uploaded_files = {} if uploaded_files is None else uploaded_files
        validate_uploaded_files(uploaded_files)
        self._uploaded_files = copy_uploaded_files(uploaded_files)
        self._server_params = dict(server_params or {})
        self._cookie_params = dict(cookie_params or {})
        self._query_params = dict(query_params or {})
        self._parsed_body = parsed_body
        self._attributes = {}
        super().__init__(method, uri, body, headers, protocol_version)
        logging.getLogger(__name__).debug(
            "Built server request %s %s", self.method, self.request_target
        )

    @property
    def server_params(self: Self) -> dict[str, Any]:
        """Return the server environment parameters."""
        return dict(self._server_params)

    @property
    def cookie_params(self: Self) -> dict[str, str]:
        """Return the cookies."""
        return dict(self._cookie_params)

    def with_cookie_params(self: Self, cookies: Mapping[str, str]) -> Self:
        """
        Return a copy with the cookies replaced.

        :param cookies: The new cookies, which replace all existing ones.
        """
        new = self.__copy__()
        new._cookie_params = dict(cookies)
        return new

    @property
    def query_params(self: Self) -> dict[str, Any]:
        """Return the query string parameters."""
        return dict(self._query_params)

    def with_query_params(self: Self, query: Mapping[str, Any]) -> Self:
        """
        Return a copy with the query string parameters replaced.

        The URI is not changed.

        :param query: The new parameters, which replace all existing ones.
        """
        new = self.__copy__()
        new._query_params = dict(query)
        return new

    @property
    def uploaded_files(self: Self) -> UploadedFilesTree:
        """Return the uploaded-files structure."""
        return copy_uploaded_files(self._uploaded_files)

    def with_uploaded_files(self: Self, uploaded_files: UploadedFilesTree) -> Self:
        """
        Return a copy with the uploaded files replaced.

        :param uploaded_files: The new uploaded-files structure.
        :raises InvalidUploadedFilesStructure: If a leaf of uploaded_files is not an
            UploadedFile, in which case nothing is changed.
        """
        validate_uploaded_files(uploaded_files)
        new = self.__copy__()
        new._uploaded_files = copy_uploaded_files(uploaded_files)
        return new

    @property
    def parsed_body(self: Self) -> ParsedBody:
        """Return the parsed body."""
        return self._parsed_body

    def with_parsed_body(self: Self, data: ParsedBody) -> Self:
        """
        Return a copy with the parsed body replaced.

        :param data: None, a mapping, or a structured object such as a dataclass
            instance. Strings, numbers, booleans, and non-mapping collections are
            rejected.
        :raises InvalidParsedBody: If data is of an unacceptable type.
        """
        if not _is_valid_parsed_body(data):
            name = type_name(data)
            logging.getLogger(__name__).debug("Rejected parsed body of type %s", name)
            msg = (
                f"{name} is not a valid parsed body, "
                "must be None, a mapping, or an object"
            )
            raise InvalidParsedBody(msg, name)
        new = self.__copy__()
        new._parsed_body = data
        return new

    @property
    def attributes(self: Self) -> dict[Hashable, Any]:
        """Return all attributes."""
        return dict(self._attributes)

    def get_attribute(self: Self, name: Hashable, default: Any = None) -> Any:
        """
        Return one attribute.

        :param name: The attribute name.
        :param default: The value to return if the attribute is absent.
        :returns: The attribute value, which may be None if None was stored.
        """
        try:
            return self._attributes[name]
        except KeyError:
            return default

    def with_attribute(self: Self, name: Hashable, value: Any) -> Self:
        """
        Return a copy with one attribute set.

        If the attribute already holds the same value, self is returned.

        :param name: The attribute name.
        :param value: The value.
        """
        if name in self._attributes and _same_attribute_value(
            self._attributes[name], value
        ):
            logging.getLogger(__name__).debug("Attribute %r unchanged", name)
            return self
        new = self.__copy__()
        new._attributes[name] = value
        return new

    def without_attribute(self: Self, name: Hashable) -> Self:
        """
        Return a copy with one attribute removed.

        If the attribute is absent, self is returned.

        :param name: The attribute name.
        """
        if name not in self._attributes:
            return self
        new = self.__copy__()
        del new._attributes[name]
        return new
