"""
LÖVE 运行时管理单元测试

测试目录表、缓存和下载器（网络请求使用 mock）。
"""

import io
import os
import stat
import sys
import zipfile
from unittest.mock import MagicMock

import pytest
import requests

from boon.build.build_context import UnsupportedTargetError
from boon.build.models import Bitness, LoveVersion, Platform
from boon.runtime import (
    RUNTIME_RELEASES,
    DownloadError,
    RuntimeCache,
    RuntimeDownloader,
    extract_archive,
    get_release,
    releases_for_version,
)


def zip_bytes(entries):
    """构造 Zip 数据: {名称: (内容, 权限)}"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, (data, mode) in entries.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = mode << 16
            zf.writestr(info, data)
    return buffer.getvalue()


def mock_session(payload=b"", error=None):
    response = MagicMock()
    response.__enter__.return_value = response
    response.headers = {"content-length": str(len(payload))}
    response.iter_content.return_value = [payload[i:i + 1024] for i in range(0, len(payload), 1024)]
    if error is not None:
        response.raise_for_status.side_effect = error

    session = MagicMock()
    session.get.return_value = response
    return session


class TestCatalog:
    """目录表测试"""

    def test_every_version_has_three_runtimes(self):
        for version in LoveVersion:
            combos = {(r.platform, r.bitness) for r in releases_for_version(version)}
            assert combos == {
                (Platform.WINDOWS, Bitness.X86),
                (Platform.WINDOWS, Bitness.X64),
                (Platform.MACOS, Bitness.X64),
            }

    def test_release_url(self):
        release = get_release(LoveVersion.V11_3, Platform.WINDOWS, Bitness.X64)
        assert release.url == "https://github.com/love2d/love/releases/download/11.3/love-11.3-win64.zip"
        assert release.directory_name == "love-11.3-win64"

    def test_directory_names_differ_from_archive_names(self):
        release = get_release(LoveVersion.V11_2, Platform.WINDOWS, Bitness.X86)
        assert release.archive_name == "love-11.2-win32.zip"
        assert release.directory_name == "love-11.2.0-win32"

    def test_unsupported_combination(self):
        with pytest.raises(UnsupportedTargetError) as exc_info:
            get_release(LoveVersion.V0_10_2, Platform.MACOS, Bitness.X86)
        message = str(exc_info.value)
        assert "0.10.2" in message and "macOS" in message and "x86" in message

    def test_table_keys_match_values(self):
        for (version, platform, bitness), release in RUNTIME_RELEASES.items():
            assert (release.version, release.platform, release.bitness) == (version, platform, bitness)


class TestRuntimeCache:
    """RuntimeCache 测试"""

    def test_locate(self, tmp_path):
        cache = RuntimeCache(tmp_path)
        location = cache.locate(LoveVersion.V11_1, Platform.MACOS, Bitness.X64)

        assert location.path == tmp_path / "11.1" / "love.app"
        assert location.version is LoveVersion.V11_1
        assert not location.exists()

    def test_locate_unsupported_touches_nothing(self, tmp_path):
        cache = RuntimeCache(tmp_path / "cache")
        with pytest.raises(UnsupportedTargetError):
            cache.locate(LoveVersion.V11_3, Platform.MACOS, Bitness.X86)
        assert not (tmp_path / "cache").exists()

    def test_installed_versions(self, tmp_path):
        (tmp_path / "11.3").mkdir()
        (tmp_path / "0.10.2").mkdir()
        (tmp_path / "nightly").mkdir()
        (tmp_path / "11.2").write_text("not a directory")

        cache = RuntimeCache(tmp_path)

        assert sorted(v.value for v in cache.installed_versions()) == ["0.10.2", "11.3"]
        assert cache.is_installed(LoveVersion.V11_3)
        assert not cache.is_installed(LoveVersion.V11_2)

    def test_missing_root(self, tmp_path):
        assert RuntimeCache(tmp_path / "missing").installed_versions() == []

    def test_remove(self, tmp_path):
        (tmp_path / "11.3" / "love.app").mkdir(parents=True)
        cache = RuntimeCache(tmp_path)

        assert cache.remove(LoveVersion.V11_3) is True
        assert not (tmp_path / "11.3").exists()
        assert cache.remove(LoveVersion.V11_3) is False

    def test_root_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BOON_DATA_DIR", str(tmp_path))
        assert RuntimeCache().root == tmp_path.resolve()


class TestExtractArchive:
    """extract_archive 测试"""

    def test_extracts_files_and_modes(self, tmp_path):
        archive = tmp_path / "runtime.zip"
        archive.write_bytes(zip_bytes({
            "love-11.3-win64/love.exe": (b"exe", 0o100755),
            "love-11.3-win64/SDL2.dll": (b"dll", 0o100644),
        }))

        count = extract_archive(archive, tmp_path / "out")

        assert count == 2
        exe = tmp_path / "out" / "love-11.3-win64" / "love.exe"
        assert exe.read_bytes() == b"exe"
        if sys.platform != "win32":
            assert stat.S_IMODE(os.stat(exe).st_mode) == 0o755

    @pytest.mark.skipif(sys.platform == "win32", reason="需要符号链接支持")
    def test_restores_symlinks(self, tmp_path):
        archive = tmp_path / "runtime.zip"
        archive.write_bytes(zip_bytes({
            "love.app/Contents/Frameworks/SDL2.framework/Versions/A/SDL2": (b"lib", 0o100755),
            "love.app/Contents/Frameworks/SDL2.framework/Versions/Current": (b"A", 0o120755),
        }))

        extract_archive(archive, tmp_path)

        link = tmp_path / "love.app/Contents/Frameworks/SDL2.framework/Versions/Current"
        assert link.is_symlink()
        assert os.readlink(link) == "A"

    def test_skips_path_traversal(self, tmp_path):
        archive = tmp_path / "evil.zip"
        archive.write_bytes(zip_bytes({
            "../escape.txt": (b"x", 0o100644),
            "ok.txt": (b"y", 0o100644),
        }))

        count = extract_archive(archive, tmp_path / "out")

        assert count == 1
        assert not (tmp_path / "escape.txt").exists()

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "broken.zip"
        archive.write_bytes(b"not a zip")
        with pytest.raises(DownloadError):
            extract_archive(archive, tmp_path / "out")


class TestRuntimeDownloader:
    """RuntimeDownloader 测试"""

    def test_install_downloads_and_extracts(self, tmp_path):
        release = get_release(LoveVersion.V11_3, Platform.WINDOWS, Bitness.X64)
        payload = zip_bytes({"love-11.3-win64/love.exe": (b"exe", 0o100755)})
        session = mock_session(payload)
        downloader = RuntimeDownloader(RuntimeCache(tmp_path), session=session)
        progress = MagicMock()

        runtime_dir = downloader.install(release, progress)

        assert runtime_dir == tmp_path / "11.3" / "love-11.3-win64"
        assert (runtime_dir / "love.exe").read_bytes() == b"exe"
        assert (tmp_path / "11.3" / "love-11.3-win64.zip").read_bytes() == payload
        assert not (tmp_path / "11.3" / "love-11.3-win64.zip.part").exists()
        session.get.assert_called_once_with(release.url, stream=True, timeout=downloader.timeout)
        progress.assert_called_with(len(payload), len(payload))

    def test_existing_archive_not_downloaded(self, tmp_path):
        release = get_release(LoveVersion.V11_3, Platform.MACOS, Bitness.X64)
        version_dir = tmp_path / "11.3"
        version_dir.mkdir()
        (version_dir / release.archive_name).write_bytes(
            zip_bytes({"love.app/Contents/Info.plist": (b"<plist/>", 0o100644)})
        )
        session = mock_session()

        runtime_dir = RuntimeDownloader(RuntimeCache(tmp_path), session=session).install(release)

        session.get.assert_not_called()
        assert (runtime_dir / "Contents" / "Info.plist").exists()

    def test_http_error(self, tmp_path):
        release = get_release(LoveVersion.V11_3, Platform.WINDOWS, Bitness.X86)
        session = mock_session(error=requests.HTTPError("404 Not Found"))

        with pytest.raises(DownloadError, match="404"):
            RuntimeDownloader(RuntimeCache(tmp_path), session=session).install(release)

        version_dir = tmp_path / "11.3"
        assert not (version_dir / release.archive_name).exists()
        assert not (version_dir / (release.archive_name + ".part")).exists()

    def test_unexpected_archive_layout(self, tmp_path):
        release = get_release(LoveVersion.V11_2, Platform.WINDOWS, Bitness.X64)
        session = mock_session(zip_bytes({"love-11.2-win64/love.exe": (b"exe", 0o100755)}))

        with pytest.raises(DownloadError, match="love-11.2.0-win64"):
            RuntimeDownloader(RuntimeCache(tmp_path), session=session).install(release)

    def test_download_version_installs_all_platforms(self, tmp_path):
        downloader = RuntimeDownloader(RuntimeCache(tmp_path), session=MagicMock())
        downloader.install = MagicMock(side_effect=lambda release, progress=None: tmp_path / release.directory_name)

        paths = downloader.download_version(LoveVersion.V11_0)

        assert [p.name for p in paths] == ["love-11.0.0-win64", "love-11.0.0-win32", "love.app"]
