# =============================================================================
# tests/unit/test_utils.py
# Unit Tests for File Helpers, Multipart Bodies and Error Handling
# =============================================================================

import logging

import pytest

from mobile_core.errors import (
    ClientDisposedError,
    NetworkException,
    StorageOpenError,
    error_boundary,
    handle_error,
)
from mobile_core.logging import LogContext
from mobile_core.network.multipart import build_multipart_form, file_part_name
from mobile_core.utils.file_utils import (
    convert_file_to_multipart_file,
    get_application_documents_directory,
    get_file_from_url,
)


class TestFileUtils:

    def test_documents_directory_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MOBILE_CORE_HOME", str(tmp_path))

        assert get_application_documents_directory() == tmp_path

    def test_download_target(self, tmp_path):
        target = get_file_from_url("https://cdn.example.test/img/My%20Photo.jpg?size=2", tmp_path)

        assert target.parent == tmp_path / "downloads"
        assert target.parent.is_dir()
        assert target.name.endswith("_My Photo.jpg")

    def test_download_target_without_name(self, tmp_path):
        assert get_file_from_url("https://cdn.example.test/", tmp_path).name.endswith("_download")

    def test_multipart_file(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_bytes(b"hello")

        assert convert_file_to_multipart_file(path) == ("notes.txt", b"hello", "text/plain")

    def test_missing_multipart_file(self, tmp_path):
        with pytest.raises(OSError):
            convert_file_to_multipart_file(tmp_path / "missing.bin")


class TestMultipart:

    def test_part_names(self):
        assert [file_part_name(i) for i in range(3)] == ["file0", "file1", "file2"]

    def test_fixed_boundary(self):
        form = build_multipart_form({"n": 3}, boundary="xyz")

        assert form.content_type == "multipart/form-data; boundary=xyz"
        assert form.payload.startswith(b"--xyz\r\n")
        assert b"\r\n\r\n3\r\n" in form.payload


class TestErrors:

    def test_network_exception_defaults(self):
        error = NetworkException(cause=TimeoutError("slow"))

        assert error.code == "NET_001"
        assert "slow" not in str(error)
        assert isinstance(error.cause, TimeoutError)

    def test_disposed_is_network_exception(self):
        error = ClientDisposedError()

        assert isinstance(error, NetworkException)
        assert error.code == "NET_002"

    def test_to_dict(self):
        error = StorageOpenError("cannot open", box="posts", path="/x/posts.box")

        assert error.to_dict() == {
            "error_type": "StorageOpenError",
            "code": "STORE_001",
            "message": "cannot open",
            "details": {"box": "posts", "path": "/x/posts.box"},
            "recoverable": True,
        }

    def test_handle_error_returns_message(self, caplog):
        with caplog.at_level(logging.WARNING):
            message = handle_error(StorageOpenError("cannot open", box="posts"))

        assert message == "cannot open"
        assert "STORE_001" in caplog.text

    def test_handle_error_user_message(self):
        assert handle_error(ValueError("x"), log_error=False, user_message="Try again") == "Try again"

    def test_error_boundary(self):
        @error_boundary(default_return=[])
        def broken():
            raise RuntimeError("boom")

        assert broken() == []

    def test_log_context_does_not_swallow(self, caplog):
        logger = logging.getLogger("mobile_core.tests")

        with caplog.at_level(logging.INFO):
            with pytest.raises(RuntimeError):
                with LogContext(logger, "Opening boxes"):
                    raise RuntimeError("disk gone")

        assert "Opening boxes: failed after" in caplog.text
