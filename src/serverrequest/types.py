"""Data types used by multiple modules."""

from collections.abc import Mapping, Sequence
from typing import Any, BinaryIO

HeaderValue = str | int | float
"""The legal types of a single header value passed in by a caller."""

HeaderInput = Mapping[str, HeaderValue | Sequence[HeaderValue]]
"""The type of a header mapping passed to a constructor."""

UploadedFilesTree = Mapping[Any, Any] | Sequence[Any]
"""
The type of an uploaded-files structure.

Interior nodes are mappings or sequences, nested to any depth; leaves are
UploadedFile instances.
"""

ParsedBody = Mapping[Any, Any] | object | None
"""The type of a parsed request body: None, a mapping, or a structured object."""

BodyInput = str | bytes | BinaryIO
"""The raw forms a message body may be given in, other than a Stream."""
