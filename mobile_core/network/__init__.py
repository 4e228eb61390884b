"""Remote HTTP access: JSON requests, multipart uploads and file downloads."""

from mobile_core.network.http_service import (
    HttpService,
    ProgressCallback,
    check_for_network_exceptions,
    show_loading_progress,
)
from mobile_core.network.multipart import (
    MultipartForm,
    build_multipart_form,
    file_part_name,
)

__all__ = [
    "HttpService",
    "ProgressCallback",
    "check_for_network_exceptions",
    "show_loading_progress",
    "MultipartForm",
    "build_multipart_form",
    "file_part_name",
]
