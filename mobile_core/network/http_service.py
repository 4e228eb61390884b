# =============================================================================
# mobile_core/network/http_service.py
# HTTP Client with a Single Failure Kind
# =============================================================================
"""
HttpService - the only place the app talks to the network.

Every transport failure (connection refused, timeout, DNS, non-2xx status,
undecodable body) surfaces as NetworkException carrying the same general
message, so callers handle one branch. The original error stays on
``NetworkException.cause`` and in the logs.
"""

from __future__ import annotations
import io
import json
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Set, Union

import requests

from mobile_core.config import CoreConfig
from mobile_core.errors import ClientDisposedError, NetworkException
from mobile_core.logging import get_logger
from mobile_core.network.multipart import MultipartForm, build_multipart_form
from mobile_core.utils.file_utils import get_file_from_url

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"
CHUNK_SIZE = 16 * 1024

ProgressCallback = Callable[[int, int], None]

# Failures that mean "the transfer did not work" rather than a bug in the caller
_TRANSPORT_ERRORS = (requests.RequestException, OSError, ValueError)


def show_loading_progress(transferred: int, total: int) -> None:
    """Default progress callback: log the percentage when the total is known."""
    if total > 0:
        logger.debug(f"Progress: {transferred / total * 100:.0f}%")
    else:
        logger.debug(f"Progress: {transferred} bytes")


def _report(callback: Optional[ProgressCallback], transferred: int, total: int) -> None:
    if callback is None:
        return
    try:
        callback(transferred, total)
    except Exception as e:
        logger.warning(f"Progress callback failed: {e}")


def check_for_network_exceptions(response: requests.Response) -> None:
    """Raise NetworkException unless the response has a 2xx status."""
    status = response.status_code
    if status is None or not 200 <= status < 300:
        logger.error(f"Request to {response.url} failed with status {status}")
        raise NetworkException()


def _content_length(response: requests.Response) -> int:
    try:
        return int(response.headers.get("Content-Length", -1))
    except (TypeError, ValueError):
        return -1


class _ProgressReader:
    """Sized, file-like request body that reports how much has been sent."""

    def __init__(
        self,
        payload: bytes,
        on_progress: Optional[ProgressCallback],
        is_cancelled: Callable[[], bool],
    ):
        self._buffer = io.BytesIO(payload)
        self._total = len(payload)
        self._sent = 0
        self._on_progress = on_progress
        self._is_cancelled = is_cancelled

    def __len__(self) -> int:
        return self._total

    def read(self, size: int = -1) -> bytes:
        if self._is_cancelled():
            raise ClientDisposedError()
        chunk = self._buffer.read(size)
        if chunk:
            self._sent += len(chunk)
            _report(self._on_progress, self._sent, self._total)
        return chunk


class HttpService:
    """
    Helper service that abstracts away common HTTP requests.

    Owns one requests.Session for its lifetime. After dispose() every call
    fails immediately with ClientDisposedError.

    Usage:
        http = HttpService.from_config(config)
        post = http.get_http("posts/1")
        http.dispose()
    """

    def __init__(
        self,
        base_url: str,
        download_dir: Path,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: Endpoint every route is appended to
            download_dir: Storage root for downloaded files
            timeout: Seconds before a connect or read gives up
            session: Transport session (a new one when None)
        """
        self.base_url = base_url.rstrip("/")
        self.download_dir = Path(download_dir)
        self.timeout = timeout
        self._session = session or requests.Session()
        self._lock = threading.Lock()
        self._inflight: Set[requests.Response] = set()
        self._disposed = False

    @classmethod
    def from_config(cls, config: CoreConfig, session: Optional[requests.Session] = None) -> HttpService:
        return cls(
            base_url=config.base_url,
            download_dir=config.storage_dir,
            timeout=config.request_timeout,
            session=session,
        )

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def _url(self, route: str) -> str:
        return f"{self.base_url}/{route.lstrip('/')}"

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_http(self, route: str) -> Any:
        """
        Send GET request to endpoint/``route`` and return the decoded JSON.

        Raises:
            NetworkException: If the GET fails for any reason
        """
        url = self._url(route)
        logger.debug(f"Sending GET to {url}")

        payload = self._fetch("GET", url)
        return self._decode(payload)

    def post_http(
        self,
        route: str,
        body: Any,
        on_progress: Optional[ProgressCallback] = show_loading_progress,
    ) -> Any:
        """
        Send POST request with ``body`` to endpoint/``route``.

        ``body`` is sent as JSON unless it is a MultipartForm. ``on_progress``
        is called with (bytes transferred, total bytes or -1) while sending
        and again while receiving.

        Raises:
            NetworkException: If the POST fails for any reason
        """
        url = self._url(route)
        if isinstance(body, MultipartForm):
            payload, content_type = body.payload, body.content_type
            logger.debug(f"Sending multipart form ({len(payload)} bytes) to {url}")
        else:
            payload, content_type = json.dumps(body).encode("utf-8"), JSON_CONTENT_TYPE
            logger.debug(f"Sending {body} to {url}")

        response_body = self._fetch(
            "POST",
            url,
            body=payload,
            content_type=content_type,
            on_progress=on_progress,
        )
        return self._decode(response_body)

    def post_http_form(
        self,
        route: str,
        fields: Optional[Mapping[str, Any]],
        files: Optional[Sequence[Union[str, Path]]] = None,
        on_progress: Optional[ProgressCallback] = show_loading_progress,
    ) -> Any:
        """
        Send a multipart POST of ``fields`` plus ``files`` (as ``file0``,
        ``file1``, ...) to endpoint/``route``.

        Raises:
            NetworkException: If the POST fails for any reason
            OSError: If a local file cannot be read
        """
        self._ensure_open()
        form = build_multipart_form(fields, files)
        return self.post_http(route, form, on_progress=on_progress)

    def download_file(
        self,
        file_url: str,
        on_progress: Optional[ProgressCallback] = show_loading_progress,
    ) -> Path:
        """
        Download ``file_url`` and return the local file.

        The same URL always lands on the same path. Content is streamed into a
        ``.part`` file that is moved into place once complete and deleted on
        failure.

        Raises:
            NetworkException: If the download fails for any reason
        """
        self._ensure_open()
        try:
            destination = get_file_from_url(file_url, self.download_dir)
        except OSError as e:
            raise self._network_exception(e) from e
        partial = destination.with_name(destination.name + ".part")
        logger.debug(f"Downloading {file_url} to {destination}")

        try:
            with open(partial, "wb") as fh:
                self._send(
                    "GET",
                    file_url,
                    write=fh.write,
                    on_progress=on_progress,
                    headers={},
                )
            os.replace(partial, destination)
        except OSError as e:
            self._discard(partial)
            raise self._network_exception(e) from e
        except BaseException:
            self._discard(partial)
            raise

        return destination

    def dispose(self) -> None:
        """Close in-flight responses and the connection pool. Idempotent."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            inflight = list(self._inflight)

        for response in inflight:
            response.close()
        self._session.close()
        logger.info(f"HttpService disposed ({len(inflight)} request(s) cancelled)")

    def __enter__(self) -> HttpService:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.dispose()
        return False

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _ensure_open(self) -> None:
        if self._disposed:
            raise ClientDisposedError()

    def _fetch(
        self,
        method: str,
        url: str,
        body: Optional[bytes] = None,
        content_type: str = JSON_CONTENT_TYPE,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """Send a request and return the whole response body."""
        chunks = []
        self._send(
            method,
            url,
            write=chunks.append,
            body=body,
            on_progress=on_progress,
            headers={"Content-Type": content_type, "Accept": JSON_CONTENT_TYPE},
        )
        return b"".join(chunks)

    def _send(
        self,
        method: str,
        url: str,
        write: Callable[[bytes], Any],
        headers: Dict[str, str],
        body: Optional[bytes] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        """
        Issue one request and stream its body into ``write``.

        Raises:
            NetworkException: For every transport failure
        """
        self._ensure_open()
        data = None
        if body is not None:
            data = _ProgressReader(body, on_progress, lambda: self._disposed)

        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                data=data,
                timeout=self.timeout,
                stream=True,
            )
            with self._track(response):
                if self._disposed:
                    raise ClientDisposedError()
                check_for_network_exceptions(response)
                total = _content_length(response)
                received = 0
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if self._disposed:
                        raise ClientDisposedError()
                    if not chunk:
                        continue
                    write(chunk)
                    received += len(chunk)
                    _report(on_progress, received, total)
                # A body closed by dispose() can end without an error
                if self._disposed:
                    raise ClientDisposedError()
        except NetworkException:
            raise
        except Exception as e:
            if not self._disposed and not isinstance(e, _TRANSPORT_ERRORS):
                raise
            raise self._network_exception(e) from e

    @contextmanager
    def _track(self, response: requests.Response):
        with self._lock:
            self._inflight.add(response)
        try:
            yield response
        finally:
            with self._lock:
                self._inflight.discard(response)
            response.close()

    def _decode(self, payload: bytes) -> Any:
        if not payload.strip():
            return None
        try:
            return json.loads(payload)
        except ValueError as e:
            raise self._network_exception(e) from e

    def _network_exception(self, error: BaseException) -> NetworkException:
        logger.error(f"{type(error).__name__}: {error}", exc_info=error)
        if self._disposed:
            return ClientDisposedError(cause=error)
        return NetworkException(cause=error)

    @staticmethod
    def _discard(path: Path) -> None:
        path.unlink(missing_ok=True)
