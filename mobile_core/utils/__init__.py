# Utils package
from .file_utils import (
    get_application_documents_directory,
    get_file_from_url,
    convert_file_to_multipart_file,
)

__all__ = [
    "get_application_documents_directory",
    "get_file_from_url",
    "convert_file_to_multipart_file",
]
