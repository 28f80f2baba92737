"""Exceptions raised when a caller passes invalid input."""

from typing import Self


class ValidationError(ValueError):
    """The base class of all errors raised by this package for invalid input."""

    __slots__ = ()


class _TypedValidationError(ValidationError):
    """A validation error that records the type of the offending value."""

    __slots__ = {
        "type_name": """The runtime type name of the offending value.""",
    }

    type_name: str

    def __init__(self: Self, msg: str, type_name: str) -> None:
        """
        Construct a new error.

        :param msg: The human-readable message.
        :param type_name: The runtime type name of the offending value.
        """
        super().__init__(msg)
        self.type_name = type_name


class InvalidUploadedFilesStructure(_TypedValidationError):
    """Raised when a leaf of an uploaded-files structure is not an UploadedFile."""

    __slots__ = ()


class InvalidParsedBody(_TypedValidationError):
    """Raised when a parsed body is not None, a mapping, or a structured object."""

    __slots__ = ()


class InvalidHeader(ValidationError):
    """Raised when a header name or value is malformed."""

    __slots__ = ()


class InvalidProtocolVersion(ValidationError):
    """Raised when an HTTP protocol version is not supported."""

    __slots__ = ()


class InvalidMethod(ValidationError):
    """Raised when a request method is not a valid token."""

    __slots__ = ()


class InvalidRequestTarget(ValidationError):
    """Raised when a request target contains whitespace."""

    __slots__ = ()


def type_name(value: object) -> str:
    """
    Return a diagnostic name for the type of a value.

    Builtin types are given by bare name, others are qualified by their module.

    :param value: The value.
    :returns: The type name.
    """
    value_type = type(value)
    if value_type.__module__ == "builtins":
        return value_type.__qualname__
    return f"{value_type.__module__}.{value_type.__qualname__}"
