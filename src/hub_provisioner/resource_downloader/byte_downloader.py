"""
Single-file HTTP(S) downloader with redirect following.
"""

import logging
import pathlib
from typing import Callable, Optional
from urllib.parse import urljoin

import requests

from hub_provisioner.provisioner_exceptions import (
    HttpStatusError,
    TooManyRedirectsError,
    TransportError,
    WriteError,
)
from hub_provisioner.provisioner_logger import ProvisionerLogger

REDIRECT_STATUS_CODES = (301, 302)
CHUNK_SIZE = 64 * 1024

RedirectCallback = Callable[[str, str], None]


class ByteStreamDownloader:
    """
    Streams the body of a URL into a local file.

    Redirects (301/302) are followed one hop at a time up to ``max_redirects``.
    The destination is opened before the first request, so a failed download
    leaves an empty or partially written file behind.
    """

    def __init__(
        self,
        logger: ProvisionerLogger,
        session: requests.Session,
        max_redirects: int = 5,
        timeout: Optional[float] = 60.0,
    ):
        """
        Args:
            logger: Logger for redirect and completion messages
            session: HTTP session used for every request
            max_redirects: Number of redirect hops allowed before failing
            timeout: Connect/read timeout in seconds, None waits forever
        """
        self.logger = logger
        self.session = session
        self.max_redirects = max_redirects
        self.timeout = timeout

    def download(
        self,
        url: str,
        destination: pathlib.Path,
        on_redirect: Optional[RedirectCallback] = None,
    ) -> int:
        """
        Download ``url`` into ``destination``.

        Args:
            url: Source URL
            destination: File to write; its directory must already exist
            on_redirect: Called with (from_url, to_url) for every hop followed

        Returns:
            Number of bytes written

        Raises:
            TransportError: If the connection fails
            HttpStatusError: If the final response is not 200 OK
            TooManyRedirectsError: If more than max_redirects hops are needed
            WriteError: If the destination cannot be opened or written
        """
        try:
            stream = open(destination, "wb")
        except OSError as e:
            raise WriteError(f"Cannot open {destination} for writing: {e}") from e

        with stream:
            response = self._get_following_redirects(url, on_redirect)
            with response:
                return self._write_body(response, stream, destination)

    def _get_following_redirects(
        self, url: str, on_redirect: Optional[RedirectCallback]
    ) -> requests.Response:
        current = url
        redirects = 0
        while True:
            try:
                response = self.session.get(
                    current, stream=True, allow_redirects=False, timeout=self.timeout
                )
            except requests.RequestException as e:
                raise TransportError(f"Request to {current} failed: {e}") from e

            if response.status_code in REDIRECT_STATUS_CODES:
                location = response.headers.get("Location")
                response.close()
                if not location:
                    raise HttpStatusError(response.status_code, current)
                if redirects >= self.max_redirects:
                    raise TooManyRedirectsError(self.max_redirects, url)
                redirects += 1

                try:
                    target = urljoin(current, location)
                except ValueError as e:
                    raise TransportError(
                        f"Invalid redirect location {location!r} from {current}: {e}"
                    ) from e
                self.logger.log(
                    f"Redirect {redirects}: {current} -> {target}", logging.DEBUG
                )
                if on_redirect is not None:
                    on_redirect(current, target)
                current = target
                continue

            if response.status_code != 200:
                response.close()
                raise HttpStatusError(response.status_code, current)

            return response

    @staticmethod
    def _write_body(response: requests.Response, stream, destination: pathlib.Path) -> int:
        written = 0
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    stream.write(chunk)
                    written += len(chunk)
        # RequestException subclasses OSError, so it has to be caught first
        except requests.RequestException as e:
            raise TransportError(f"Connection lost while reading {response.url}: {e}") from e
        except OSError as e:
            raise WriteError(f"Failed writing {destination}: {e}") from e
        return written
