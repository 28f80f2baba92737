"""
Immutable HTTP server request objects.

A ServerRequest holds everything a server knows about one incoming request: the
method, URI, headers, body and protocol version of the HTTP message, plus server
parameters, cookies, query parameters, a parsed body, uploaded files, and attributes
attached by server-side processing. No ServerRequest is ever modified after it is
built; every with_* method returns a new one.

Populating a ServerRequest from a server environment and parsing bodies by content
type are left to the caller.

Please see the individual modules for more details.
"""

from .errors import (
    InvalidHeader,
    InvalidMethod,
    InvalidParsedBody,
    InvalidProtocolVersion,
    InvalidRequestTarget,
    InvalidUploadedFilesStructure,
    ValidationError,
)
from .message import Message, Request
from .request import ServerRequest
from .stream import Stream
from .uploads import UploadedFile, copy_uploaded_files, validate_uploaded_files
from .uri import URI

__all__ = [
    "URI",
    "InvalidHeader",
    "InvalidMethod",
    "InvalidParsedBody",
    "InvalidProtocolVersion",
    "InvalidRequestTarget",
    "InvalidUploadedFilesStructure",
    "Message",
    "Request",
    "ServerRequest",
    "Stream",
    "UploadedFile",
    "ValidationError",
    "copy_uploaded_files",
    "validate_uploaded_files",
]
