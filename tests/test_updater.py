"""
Tests for release manifest handling and the self-update flow.
"""

import sys

import pytest
import requests

from mcmod.exceptions import McmodError, NetworkError, UnsupportedPlatformError
from mcmod.schemas import ReleaseAsset, ReleaseManifest
from mcmod.update import manifest as manifest_module
from mcmod.update.manifest import (
    USER_AGENT,
    asset_url,
    fetch_release_manifest,
    latest_version,
    parse_release_manifest,
)
from mcmod.update.replacer import RenameReplacer
from mcmod.update.updater import current_executable, run_update

LINUX_URL = "https://example.invalid/mcmod-linux-x86_64"


def make_manifest(tag="v1.2.0"):
    return ReleaseManifest(
        tag_name=tag,
        assets=[
            ReleaseAsset(name="mcmod-linux-x86_64", browser_download_url=LINUX_URL),
            ReleaseAsset(name="mcmod-linux-x86_64.sha256", browser_download_url=LINUX_URL + ".sha256"),
        ],
    )


def no_download(url):
    raise AssertionError(f"unexpected download of {url}")


class FakeResponse:
    def __init__(self, payload=None, content=b""):
        self._payload = payload
        self.content = content

    def raise_for_status(self):
        pass

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload


class TestManifest:

    @pytest.mark.parametrize("tag,version", [("v1.2.0", "1.2.0"), ("1.2.0", "1.2.0"), ("vv1", "v1")])
    def test_latest_version(self, tag, version):
        assert latest_version(make_manifest(tag)) == version

    def test_asset_url_exact_match(self):
        assert asset_url(make_manifest(), "mcmod-linux-x86_64") == LINUX_URL

    def test_asset_missing(self):
        with pytest.raises(McmodError, match="mcmod-macos-aarch64") as exc:
            asset_url(make_manifest(), "mcmod-macos-aarch64")
        assert not isinstance(exc.value, NetworkError)

    def test_asset_without_url(self):
        manifest = ReleaseManifest(tag_name="v1", assets=[ReleaseAsset(name="mcmod-linux-x86_64")])
        with pytest.raises(NetworkError):
            asset_url(manifest, "mcmod-linux-x86_64")

    def test_parse_requires_tag_name(self):
        with pytest.raises(NetworkError, match="tag_name"):
            parse_release_manifest({"assets": []})

    def test_parse_malformed_assets(self):
        with pytest.raises(NetworkError):
            parse_release_manifest({"tag_name": "v1", "assets": "nope"})

    def test_fetch_sends_user_agent(self, monkeypatch):
        seen = {}

        def fake_get(url, headers=None, timeout=None):
            seen.update(url=url, headers=headers, timeout=timeout)
            return FakeResponse({"tag_name": "v2.0.0", "assets": []})

        monkeypatch.setattr(manifest_module.requests, "get", fake_get)

        manifest = fetch_release_manifest("https://example.invalid/latest")

        assert manifest.tag_name == "v2.0.0"
        assert seen["headers"] == {"User-Agent": USER_AGENT}
        assert seen["timeout"] is not None

    def test_fetch_transport_error(self, monkeypatch):
        def fake_get(url, headers=None, timeout=None):
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(manifest_module.requests, "get", fake_get)

        with pytest.raises(NetworkError, match="offline"):
            fetch_release_manifest()

    def test_fetch_bad_json(self, monkeypatch):
        monkeypatch.setattr(manifest_module.requests, "get", lambda url, headers=None, timeout=None: FakeResponse())
        with pytest.raises(NetworkError, match="JSON"):
            fetch_release_manifest()


class TestRunUpdate:

    def test_up_to_date(self, temp_dir):
        result = run_update(
            "1.2.0",
            fetch_manifest=make_manifest,
            download=no_download,
            executable=lambda: temp_dir / "mcmod",
        )

        assert result.up_to_date is True
        assert result.latest == "1.2.0"
        assert result.asset is None

    def test_full_update(self, temp_dir):
        exe = temp_dir / "mcmod"
        exe.write_bytes(b"old binary")
        downloaded = []
        progress = []

        def download(url):
            downloaded.append(url)
            return b"new binary"

        result = run_update(
            "1.0.0",
            fetch_manifest=make_manifest,
            download=download,
            executable=lambda: exe,
            replacer=RenameReplacer(),
            system="Linux",
            machine="x86_64",
            on_progress=progress.append,
        )

        assert result.up_to_date is False
        assert result.current == "1.0.0"
        assert result.latest == "1.2.0"
        assert result.asset == "mcmod-linux-x86_64"
        assert result.executable == exe
        assert downloaded == [LINUX_URL]
        assert exe.read_bytes() == b"new binary"
        assert progress[0] == "New version available: v1.2.0"

    def test_missing_asset_downloads_nothing(self, temp_dir):
        exe = temp_dir / "mcmod"
        exe.write_bytes(b"old binary")

        with pytest.raises(McmodError, match="No release asset"):
            run_update(
                "1.0.0",
                fetch_manifest=make_manifest,
                download=no_download,
                executable=lambda: exe,
                system="Darwin",
                machine="arm64",
            )

        assert exe.read_bytes() == b"old binary"

    def test_unsupported_platform(self, temp_dir):
        with pytest.raises(UnsupportedPlatformError):
            run_update(
                "1.0.0",
                fetch_manifest=make_manifest,
                download=no_download,
                executable=lambda: temp_dir / "mcmod",
                system="Linux",
                machine="riscv64",
            )

    def test_failed_download_leaves_executable(self, temp_dir):
        exe = temp_dir / "mcmod"
        exe.write_bytes(b"old binary")

        def download(url):
            raise NetworkError("HTTP error: 502")

        with pytest.raises(NetworkError):
            run_update(
                "1.0.0",
                fetch_manifest=make_manifest,
                download=download,
                executable=lambda: exe,
                system="Linux",
                machine="x86_64",
            )

        assert exe.read_bytes() == b"old binary"


def test_current_executable_requires_frozen_build(monkeypatch):
    monkeypatch.delattr(sys, "frozen", raising=False)
    with pytest.raises(McmodError, match="pip install -U mcmod"):
        current_executable()


def test_current_executable_frozen(monkeypatch, temp_dir):
    exe = temp_dir / "mcmod"
    exe.write_bytes(b"binary")
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "executable", str(exe))

    assert current_executable() == exe.resolve()
