from typing import ClassVar
from urllib.parse import unquote, urlparse

import httpx

from trustgate.intake.exceptions import UnsupportedMediaTypeError, UrlFetchError
from trustgate.logging.logger import Log
from trustgate.signature.exceptions import SizeExceededError
from trustgate.signature.models import Artifact

_BYTES_PER_MB = 1024 * 1024


def name_from_url(url: str) -> str:
    """Last path segment of *url*, or ``url_file`` when there is none."""
    segment = urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]
    return unquote(segment) or "url_file"


class UrlFetcher:
    """Downloads a remote artifact and checks its declared content type."""

    ALLOWED_MIME_TYPES: ClassVar[frozenset[str]] = frozenset(
        {"application/pdf", "image/jpeg", "image/png", "image/webp"}
    )

    def __init__(
        self,
        timeout_seconds: int = 15,
        max_size_bytes: int = 15 * _BYTES_PER_MB,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._max_size_bytes = max_size_bytes
        self._client = httpx.Client(
            timeout=timeout_seconds,
            follow_redirects=True,
            transport=transport,
        )

    def fetch(self, url: str) -> Artifact:
        """Download *url* into an Artifact.

        The body is streamed and the download stops as soon as it passes the
        size limit.

        Raises:
            UrlFetchError: on transport failures, bad URLs or non-2xx responses.
            UnsupportedMediaTypeError: if the content type is not allowed.
            SizeExceededError: if the body is larger than the size limit.
        """
        try:
            with self._client.stream("GET", url) as response:
                if not response.is_success:
                    raise UrlFetchError(f"Failed to fetch URL: HTTP {response.status_code}")

                mime_type = self._mime_type(response)
                if mime_type not in self.ALLOWED_MIME_TYPES:
                    raise UnsupportedMediaTypeError(
                        f"URL must point to a PDF or image (got '{mime_type or 'unknown'}')."
                    )
                content = self._read_limited(response)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise UrlFetchError(
                f"Could not fetch URL ({exc}). Ensure the server is reachable "
                "and allows the request."
            ) from exc

        Log.info(f"Fetched {len(content)} bytes of {mime_type} from {url}")
        return Artifact(name=name_from_url(url), content=content, declared_mime=mime_type)

    def close(self) -> None:
        self._client.close()

    def _read_limited(self, response: httpx.Response) -> bytes:
        declared = response.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self._max_size_bytes:
            raise self._size_error()

        chunks: list[bytes] = []
        received = 0
        for chunk in response.iter_bytes():
            received += len(chunk)
            if received > self._max_size_bytes:
                raise self._size_error()
            chunks.append(chunk)
        return b"".join(chunks)

    def _size_error(self) -> SizeExceededError:
        Log.warning(f"Remote file exceeds {self._max_size_bytes} bytes; download aborted")
        return SizeExceededError(
            f"File size exceeds {self._max_size_bytes / _BYTES_PER_MB:g}MB limit."
        )

    @staticmethod
    def _mime_type(response: httpx.Response) -> str:
        header = response.headers.get("content-type", "")
        return header.split(";", 1)[0].strip().lower()
