"""HTTP access to the remote release index."""

import logging
from typing import BinaryIO, Optional

import httpx

from javalsp import __version__
from javalsp.errors import NetworkError

logger = logging.getLogger("javalsp.http")

CHUNK_SIZE = 64 * 1024


class IndexClient:
    """Thin blocking wrapper around ``httpx.Client``.

    Every request follows redirects. Failures of any kind are reported as
    :class:`NetworkError`; nothing is retried.
    """

    def __init__(
        self,
        *,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize the client.

        Args:
            timeout: Transport timeout in seconds.
            transport: Optional transport, e.g. ``httpx.MockTransport`` in tests.
            client: Pre-built client to use instead of creating one.
        """
        self._client = client or httpx.Client(
            transport=transport,
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": f"javalsp/{__version__}"},
        )

    def __enter__(self) -> "IndexClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_text(self, url: str) -> str:
        """GET ``url`` and return its body decoded as UTF-8.

        Raises:
            NetworkError: On transport failure or a non-2xx status.
        """
        logger.debug(f"GET {url}")
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            raise NetworkError(url, f"Request failed: {e}") from e

        self._raise_for_status(url, response)
        return response.content.decode("utf-8", errors="replace")

    def download(self, url: str, fileobj: BinaryIO) -> int:
        """Stream the body of ``url`` into ``fileobj``.

        Returns:
            The number of bytes written.

        Raises:
            NetworkError: On transport failure or a non-2xx status.
        """
        logger.info(f"Downloading {url}")
        written = 0
        try:
            with self._client.stream("GET", url) as response:
                self._raise_for_status(url, response)
                for chunk in response.iter_bytes(CHUNK_SIZE):
                    fileobj.write(chunk)
                    written += len(chunk)
        except httpx.HTTPError as e:
            raise NetworkError(url, f"Download failed: {e}") from e

        logger.debug(f"Downloaded {written} bytes from {url}")
        return written

    @staticmethod
    def _raise_for_status(url: str, response: httpx.Response) -> None:
        if response.is_success:
            return
        raise NetworkError(
            url,
            f"HTTP {response.status_code}",
            status_code=response.status_code,
        )
