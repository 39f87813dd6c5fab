"""
macOS 构建单元测试
"""

import plistlib

import pytest

from boon.build.build_context import MetadataRewriteError, RuntimeNotFound, UnsupportedTargetError
from boon.build.macos import create_macos_artifact, get_output_filename
from boon.build.models import Bitness, LoveVersion, Platform


def release_entries(project, build_settings):
    return sorted(p.name for p in project.get_release_path(build_settings).iterdir())


def test_output_filename(project):
    assert get_output_filename(project) == "My Game.app"


class TestCreateMacosArtifact:
    """create_macos_artifact 测试"""

    def test_builds_bundle(self, project, build_settings, love_file, runtime_cache):
        stats = create_macos_artifact(
            project, build_settings, LoveVersion.V11_3, Bitness.X64, love_file, runtime_cache,
        )

        bundle = project.get_release_path(build_settings) / "My Game.app"
        assert stats.name == "macOS x64"
        assert stats.file_name == "My Game.app"
        assert stats.size == sum(p.stat().st_size for p in bundle.rglob("*") if p.is_file())

        injected = bundle / "Contents" / "Resources" / "My Game.love"
        assert injected.read_bytes() == love_file.read_bytes()
        assert (bundle / "Contents" / "MacOS" / "love").exists()
        assert (bundle / "Contents" / "Resources" / "GameIcon.icns").exists()

        with open(bundle / "Contents" / "Info.plist", "rb") as f:
            parsed = plistlib.load(f)
        assert parsed["CFBundleIdentifier"] == "com.example.mygame"
        assert parsed["CFBundleName"] == "My Game"
        assert "UTExportedTypeDeclarations" not in parsed

        # 没有遗留临时副本
        assert release_entries(project, build_settings) == ["My Game.app", "My Game.love"]

    def test_runtime_bundle_untouched(self, project, build_settings, love_file, runtime_cache, info_plist_text):
        create_macos_artifact(project, build_settings, LoveVersion.V11_3, Bitness.X64, love_file, runtime_cache)

        source = runtime_cache.locate(LoveVersion.V11_3, Platform.MACOS, Bitness.X64).path
        assert (source / "Contents" / "Info.plist").read_text(encoding="utf-8") == info_plist_text
        assert not (source / "Contents" / "Resources" / "My Game.love").exists()

    def test_existing_bundle_replaced(self, project, build_settings, love_file, runtime_cache):
        bundle = project.get_release_path(build_settings) / "My Game.app"
        (bundle / "Contents").mkdir(parents=True)
        (bundle / "Contents" / "stale").write_text("old")

        create_macos_artifact(project, build_settings, LoveVersion.V11_3, Bitness.X64, love_file, runtime_cache)

        assert not (bundle / "Contents" / "stale").exists()
        assert (bundle / "Contents" / "Info.plist").exists()

    def test_missing_runtime(self, project, build_settings, love_file, empty_runtime_cache):
        before = release_entries(project, build_settings)

        with pytest.raises(RuntimeNotFound) as exc_info:
            create_macos_artifact(
                project, build_settings, LoveVersion.V11_3, Bitness.X64, love_file, empty_runtime_cache,
            )

        assert "boon love download 11.3" in str(exc_info.value)
        assert release_entries(project, build_settings) == before

    def test_x86_unsupported(self, project, build_settings, love_file, runtime_cache):
        with pytest.raises(UnsupportedTargetError) as exc_info:
            create_macos_artifact(
                project, build_settings, LoveVersion.V11_3, Bitness.X86, love_file, runtime_cache,
            )
        assert "macOS" in str(exc_info.value)
        assert "x86" in str(exc_info.value)

    def test_bad_plist_keeps_previous_bundle(self, project, build_settings, love_file, runtime_cache):
        """改写失败时不出现未改写的 <标题>.app，旧产物保持原样"""
        source = runtime_cache.locate(LoveVersion.V11_3, Platform.MACOS, Bitness.X64).path
        (source / "Contents" / "Info.plist").write_text("<plist><dict></dict></plist>", encoding="utf-8")

        bundle = project.get_release_path(build_settings) / "My Game.app"
        bundle.mkdir()
        (bundle / "previous").write_text("complete build")

        with pytest.raises(MetadataRewriteError):
            create_macos_artifact(project, build_settings, LoveVersion.V11_3, Bitness.X64, love_file, runtime_cache)

        assert (bundle / "previous").read_text() == "complete build"
        assert release_entries(project, build_settings) == ["My Game.app", "My Game.love"]