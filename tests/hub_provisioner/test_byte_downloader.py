"""
Tests for the redirect-following byte-stream downloader.
"""

import pytest
import requests

from hub_provisioner.provisioner_exceptions import (
    HttpStatusError,
    TooManyRedirectsError,
    TransportError,
    WriteError,
)
from hub_provisioner.provisioner_logger import ProvisionerLogger
from hub_provisioner.resource_downloader import ByteStreamDownloader


class TestByteStreamDownloader:
    """Tests for ByteStreamDownloader against a local HTTP server."""

    @pytest.fixture
    def session(self):
        with requests.Session() as s:
            yield s

    @pytest.fixture
    def downloader(self, session):
        return ByteStreamDownloader(ProvisionerLogger(), session, max_redirects=5, timeout=10)

    def test_plain_download(self, downloader, payload, http_server, tmp_path):
        dest = tmp_path / "speaker_embeddings.bin"

        written = downloader.download(f"{http_server}/payload.bin", dest)

        assert written == len(payload)
        assert dest.read_bytes() == payload

    def test_follows_302_to_body(self, downloader, payload, http_server, tmp_path):
        dest = tmp_path / "speaker_embeddings.bin"
        hops = []

        downloader.download(
            f"{http_server}/redirect", dest, on_redirect=lambda src, dst: hops.append(dst)
        )

        assert dest.read_bytes() == payload
        assert hops == [f"{http_server}/payload.bin"]

    def test_follows_redirect_chain(self, downloader, payload, http_server, tmp_path):
        dest = tmp_path / "out.bin"
        hops = []

        downloader.download(f"{http_server}/moved", dest, on_redirect=lambda s, d: hops.append(d))

        assert dest.read_bytes() == payload
        assert hops == [f"{http_server}/redirect", f"{http_server}/payload.bin"]

    def test_final_404_raises_and_leaves_empty_file(self, downloader, http_server, tmp_path):
        dest = tmp_path / "out.bin"

        with pytest.raises(HttpStatusError) as exc_info:
            downloader.download(f"{http_server}/to-missing", dest)

        assert exc_info.value.status_code == 404
        assert dest.exists()
        assert dest.read_bytes() == b""

    def test_server_error_status(self, downloader, http_server, tmp_path):
        with pytest.raises(HttpStatusError) as exc_info:
            downloader.download(f"{http_server}/server-error", tmp_path / "out.bin")
        assert exc_info.value.status_code == 500

    def test_redirect_cycle_is_capped(self, session, http_server, tmp_path):
        downloader = ByteStreamDownloader(ProvisionerLogger(), session, max_redirects=3, timeout=10)
        hops = []

        with pytest.raises(TooManyRedirectsError) as exc_info:
            downloader.download(f"{http_server}/loop", tmp_path / "out.bin", on_redirect=lambda s, d: hops.append(d))

        assert exc_info.value.max_redirects == 3
        assert len(hops) == 3

    def test_zero_redirects_allowed(self, session, http_server, tmp_path):
        downloader = ByteStreamDownloader(ProvisionerLogger(), session, max_redirects=0, timeout=10)

        with pytest.raises(TooManyRedirectsError):
            downloader.download(f"{http_server}/redirect", tmp_path / "out.bin")

    def test_redirect_without_location(self, downloader, http_server, tmp_path):
        with pytest.raises(HttpStatusError) as exc_info:
            downloader.download(f"{http_server}/no-location", tmp_path / "out.bin")
        assert exc_info.value.status_code == 302

    def test_connection_refused_is_transport_error(self, downloader, http_server, tmp_path):
        # Nothing listens on port 9 of the loopback interface
        with pytest.raises(TransportError):
            downloader.download("http://127.0.0.1:9/payload.bin", tmp_path / "out.bin")

    def test_unwritable_destination_is_write_error(self, downloader, http_server, tmp_path):
        with pytest.raises(WriteError):
            downloader.download(f"{http_server}/payload.bin", tmp_path / "missing-dir" / "out.bin")

    def test_malformed_redirect_location_is_transport_error(self, downloader, http_server, tmp_path):
        dest = tmp_path / "out.bin"

        with pytest.raises(TransportError) as exc_info:
            downloader.download(f"{http_server}/bad-location", dest)

        assert "bad-host" in str(exc_info.value)
        assert dest.read_bytes() == b""
