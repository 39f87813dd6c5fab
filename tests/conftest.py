"""
测试公共夹具

提供示例游戏项目和伪造的 LÖVE 运行时缓存。
"""

from pathlib import Path

import pytest

from boon.build.models import BuildSettings, LoveVersion, Project
from boon.runtime.cache import RuntimeCache


INFO_PLIST = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
	<key>BuildMachineOSBuild</key>
	<string>19A583</string>
	<key>CFBundleDevelopmentRegion</key>
	<string>English</string>
	<key>CFBundleExecutable</key>
	<string>love</string>
	<key>CFBundleIdentifier</key>
	<string>org.love2d.love</string>
	<key>CFBundleName</key>
	<string>LÖVE</string>
	<key>CFBundleShortVersionString</key>
	<string>11.3</string>
	<key>UTExportedTypeDeclarations</key>
	<array>
		<dict>
			<key>UTTypeConformsTo</key>
			<array>
				<string>com.pkware.zip-archive</string>
			</array>
			<key>UTTypeDescription</key>
			<string>LÖVE Project</string>
			<key>UTTypeIdentifier</key>
			<string>org.love2d.love-game</string>
			<key>UTTypeTagSpecification</key>
			<dict>
				<key>public.filename-extension</key>
				<array>
					<string>love</string>
				</array>
			</dict>
		</dict>
	</array>
	<key>NSPrincipalClass</key>
	<string>NSApplication</string>
</dict>
</plist>
"""

LOVE_EXE_BYTES = b"MZ\x90\x00fake love runtime\x00" * 64


def make_windows_runtime(runtime_dir: Path) -> Path:
    """伪造 Windows 运行时目录"""
    runtime_dir.mkdir(parents=True)
    (runtime_dir / "love.exe").write_bytes(LOVE_EXE_BYTES)
    (runtime_dir / "lovec.exe").write_bytes(b"console runtime")
    (runtime_dir / "SDL2.dll").write_bytes(b"sdl2")
    (runtime_dir / "love.dll").write_bytes(b"love")
    (runtime_dir / "license.txt").write_text("zlib license")
    (runtime_dir / "game.ico").write_bytes(b"\x00\x00\x01\x00")
    (runtime_dir / "changes.md").write_text("not shipped")
    return runtime_dir


def make_macos_runtime(bundle: Path, plist_text: str = INFO_PLIST) -> Path:
    """伪造 love.app 应用包"""
    (bundle / "Contents" / "MacOS").mkdir(parents=True)
    (bundle / "Contents" / "Resources").mkdir()
    (bundle / "Contents" / "MacOS" / "love").write_bytes(b"\xcf\xfa\xed\xfe mach-o")
    (bundle / "Contents" / "Resources" / "GameIcon.icns").write_bytes(b"icns")
    with open(bundle / "Contents" / "Info.plist", "w", encoding="utf-8", newline="") as f:
        f.write(plist_text)
    return bundle


@pytest.fixture
def info_plist_text():
    return INFO_PLIST


@pytest.fixture
def love_exe_bytes():
    return LOVE_EXE_BYTES


@pytest.fixture
def project_dir(tmp_path):
    """带 main.lua 的示例项目"""
    directory = tmp_path / "game"
    (directory / "assets").mkdir(parents=True)
    (directory / ".git").mkdir()
    (directory / "main.lua").write_text("function love.draw() end\n")
    (directory / "conf.lua").write_text("function love.conf(t) end\n")
    (directory / "assets" / "sprite.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 256)
    (directory / ".git" / "config").write_text("[core]\n")
    return directory


@pytest.fixture
def project(project_dir):
    return Project(
        title="My Game",
        package_name="my_game",
        directory=project_dir,
        uti="com.example.mygame",
    )


@pytest.fixture
def build_settings():
    return BuildSettings(ignore_list=frozenset({r"^\.git/"}))


@pytest.fixture
def runtime_root(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def empty_runtime_cache(runtime_root):
    """没有任何运行时的缓存"""
    return RuntimeCache(runtime_root)


@pytest.fixture
def runtime_cache(runtime_root):
    """已安装 LÖVE 11.3 全部平台运行时的缓存"""
    version_dir = runtime_root / LoveVersion.V11_3.value
    make_windows_runtime(version_dir / "love-11.3-win64")
    make_windows_runtime(version_dir / "love-11.3-win32")
    make_macos_runtime(version_dir / "love.app")
    return RuntimeCache(runtime_root)


@pytest.fixture
def love_file(project, build_settings):
    """已构建好的 .love 文件"""
    from boon.build.archiver import create_love_archive

    release_path = project.get_release_path(build_settings)
    release_path.mkdir(parents=True, exist_ok=True)
    love_path, _stats = create_love_archive(project, build_settings)
    return love_path
