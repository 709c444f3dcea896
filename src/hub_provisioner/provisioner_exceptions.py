"""
This module contains the exceptions raised by hub_provisioner.
"""

from typing import Optional


class ProvisionerException(Exception):
    """
    Base class for all exceptions raised by hub_provisioner.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(ProvisionerException):
    """
    Raised when the provisioning configuration is invalid.
    """


class CloneError(ProvisionerException):
    """
    Raised when the external clone command fails to launch or exits non-zero.
    """

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class DownloadError(ProvisionerException):
    """
    Base class for failures of a direct byte-stream download.
    """


class TransportError(DownloadError):
    """
    Raised when the connection fails at any stage of a download.
    """


class HttpStatusError(DownloadError):
    """
    Raised when the final response of a download is not 200 OK.
    """

    def __init__(self, status_code: int, url: str):
        super().__init__(f"HTTP error! status: {status_code} ({url})")
        self.status_code = status_code
        self.url = url


class TooManyRedirectsError(DownloadError):
    """
    Raised when a download exceeds the configured number of redirect hops.
    """

    def __init__(self, max_redirects: int, url: str):
        super().__init__(f"Exceeded {max_redirects} redirects while fetching {url}")
        self.max_redirects = max_redirects
        self.url = url


class WriteError(DownloadError):
    """
    Raised when the destination file cannot be opened or written.
    """
