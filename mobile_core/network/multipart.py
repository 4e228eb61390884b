# =============================================================================
# mobile_core/network/multipart.py
# Multipart Form Bodies
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from urllib3 import encode_multipart_formdata

from mobile_core.utils.file_utils import convert_file_to_multipart_file

FILE_PART_PREFIX = "file"


@dataclass(frozen=True)
class MultipartForm:
    """An encoded multipart/form-data body and its content type (with boundary)."""
    payload: bytes
    content_type: str


def file_part_name(index: int) -> str:
    return f"{FILE_PART_PREFIX}{index}"


def build_multipart_form(
    fields: Optional[Mapping[str, Any]],
    files: Optional[Sequence[Union[str, Path]]] = None,
    boundary: Optional[str] = None,
) -> MultipartForm:
    """
    Encode scalar fields followed by file parts.

    Files become parts named ``file0``, ``file1``, ... in input order. Fields
    whose value is None are left out.

    Args:
        fields: Scalar form fields
        files: Local files to attach
        boundary: Fixed boundary (random when None)

    Raises:
        OSError: If a file cannot be read
    """
    parts: List[Tuple[str, Any]] = [
        (name, value if isinstance(value, (str, bytes)) else str(value))
        for name, value in (fields or {}).items()
        if value is not None
    ]
    for index, file in enumerate(files or []):
        parts.append((file_part_name(index), convert_file_to_multipart_file(file)))

    payload, content_type = encode_multipart_formdata(parts, boundary=boundary)
    return MultipartForm(payload=payload, content_type=content_type)
