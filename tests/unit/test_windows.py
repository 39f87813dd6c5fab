"""
Windows 构建单元测试
"""

import zipfile
from unittest.mock import patch

import pytest

from boon.build.build_context import FileSystemError, RuntimeNotFound
from boon.build.models import Bitness, LoveVersion
from boon.build.windows import (
    fuse_executable,
    get_output_filename,
    get_zip_output_name,
    create_windows_artifact,
)


def test_output_names(project):
    assert get_output_filename(project) == "my_game.exe"
    assert get_zip_output_name(project, Bitness.X64) == "My Game-win64"
    assert get_zip_output_name(project, Bitness.X86) == "My Game-win32"


def test_fuse_executable_is_plain_concatenation(tmp_path):
    runtime = tmp_path / "love.exe"
    archive = tmp_path / "game.love"
    output = tmp_path / "game.exe"
    runtime.write_bytes(bytes(range(256)) * 300)
    archive.write_bytes(b"PK\x03\x04" + b"\xff" * 70000)

    written = fuse_executable(runtime, archive, output)

    assert output.read_bytes() == runtime.read_bytes() + archive.read_bytes()
    assert written == output.stat().st_size


class TestCreateWindowsArtifact:
    """create_windows_artifact 测试"""

    def test_builds_zip(self, project, build_settings, love_file, runtime_cache, love_exe_bytes):
        stats = create_windows_artifact(
            project, build_settings, LoveVersion.V11_3, Bitness.X64, love_file, runtime_cache,
        )

        release_path = project.get_release_path(build_settings)
        zip_path = release_path / "My Game-win64.zip"
        assert stats.name == "Windows x64"
        assert stats.file_name == "My Game-win64.zip"
        assert stats.size == zip_path.stat().st_size
        # 临时目录已删除
        assert not (release_path / "My Game-win64").exists()

        with zipfile.ZipFile(zip_path) as zf:
            names = sorted(zf.namelist())
            assert names == sorted([
                "my_game.exe",
                "SDL2.dll",
                "love.dll",
                "license.txt",
                "game.ico",
            ])
            exe_bytes = zf.read("my_game.exe")

        assert exe_bytes == love_exe_bytes + love_file.read_bytes()

    def test_x86_uses_win32_runtime(self, project, build_settings, love_file, runtime_cache):
        stats = create_windows_artifact(
            project, build_settings, LoveVersion.V11_3, Bitness.X86, love_file, runtime_cache,
        )
        assert stats.name == "Windows x86"
        assert stats.file_name == "My Game-win32.zip"

    def test_stale_staging_directory_replaced(self, project, build_settings, love_file, runtime_cache):
        staging = project.get_release_path(build_settings) / "My Game-win64"
        staging.mkdir()
        (staging / "stale.dll").write_bytes(b"old")

        create_windows_artifact(project, build_settings, LoveVersion.V11_3, Bitness.X64, love_file, runtime_cache)

        zip_path = project.get_release_path(build_settings) / "My Game-win64.zip"
        with zipfile.ZipFile(zip_path) as zf:
            assert "stale.dll" not in zf.namelist()
            assert "my_game.exe" in zf.namelist()

    def test_missing_runtime_leaves_nothing(self, project, build_settings, love_file, empty_runtime_cache):
        release_path = project.get_release_path(build_settings)
        before = sorted(p.name for p in release_path.iterdir())

        with pytest.raises(RuntimeNotFound) as exc_info:
            create_windows_artifact(
                project, build_settings, LoveVersion.V11_3, Bitness.X64, love_file, empty_runtime_cache,
            )

        assert "boon love download 11.3" in str(exc_info.value)
        assert sorted(p.name for p in release_path.iterdir()) == before

    def test_failure_removes_staging(self, project, build_settings, love_file, runtime_cache):
        with patch("boon.build.windows.shutil.copyfile", side_effect=PermissionError(13, "denied")):
            with pytest.raises(FileSystemError):
                create_windows_artifact(
                    project, build_settings, LoveVersion.V11_3, Bitness.X64, love_file, runtime_cache,
                )

        release_path = project.get_release_path(build_settings)
        assert not (release_path / "My Game-win64").exists()
        assert not (release_path / "My Game-win64.zip").exists()
