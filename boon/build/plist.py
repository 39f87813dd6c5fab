"""
Info.plist 改写

对 LÖVE 应用包的 Info.plist 做定点文本替换：
  - CFBundleIdentifier 改为项目 UTI
  - CFBundleName 改为项目标题
  - 删除 UTExportedTypeDeclarations 整个块（文件类型关联属于 LÖVE，不属于游戏）

只改动目标值，其余字节保持不变；改写结果会用 plistlib 解析校验。
"""

import plistlib
import re
from pathlib import Path
from typing import Union
from xml.sax.saxutils import escape

from ..utils.logging import info, debug, LogStage
from .build_context import FileSystemError, MetadataRewriteError
from .models import Project

BUNDLE_IDENTIFIER_KEY = "CFBundleIdentifier"
BUNDLE_NAME_KEY = "CFBundleName"
EXPORTED_TYPES_KEY = "UTExportedTypeDeclarations"

_ARRAY_TAG = re.compile(r"<(/?)array\s*(/?)>")


def _string_value_pattern(key: str) -> "re.Pattern[str]":
    # <key>KEY</key> 后紧跟的 <string> 值，允许任意缩进和换行风格
    return re.compile(
        r"(<key>" + re.escape(key) + r"</key>\s*<string>)([^<]*)(</string>)"
    )


def replace_string_value(text: str, key: str, value: str) -> str:
    """替换某个键对应的 <string> 值

    Raises:
        MetadataRewriteError: 键不存在或值不是 <string>
    """
    pattern = _string_value_pattern(key)
    escaped = escape(value)
    result, count = pattern.subn(lambda m: m.group(1) + escaped + m.group(3), text, count=1)
    if count == 0:
        raise MetadataRewriteError(f"Info.plist 中没有找到 {key} 的字符串值")
    return result


def remove_key_block(text: str, key: str) -> str:
    """删除 <key>KEY</key> 及其后面的 <array> 块（含嵌套数组）

    连同键所在行的缩进和块结尾的换行一起删除。键不存在时原样返回。

    Raises:
        MetadataRewriteError: 键后面不是一个闭合的 <array>
    """
    key_match = re.search(r"^[ \t]*<key>" + re.escape(key) + r"</key>", text, re.MULTILINE)
    if key_match is None:
        return text

    array_start = re.compile(r"\s*<array\s*/?>").match(text, key_match.end())
    if array_start is None:
        raise MetadataRewriteError(f"Info.plist 中 {key} 后面不是 <array>")

    depth = 0
    end = None
    for tag in _ARRAY_TAG.finditer(text, array_start.start()):
        closing, self_closing = tag.group(1), tag.group(2)
        if self_closing:
            if depth == 0:
                end = tag.end()
                break
            continue
        depth += -1 if closing else 1
        if depth == 0:
            end = tag.end()
            break

    if end is None:
        raise MetadataRewriteError(f"Info.plist 中 {key} 的 <array> 没有闭合")

    # 吞掉块后面同一行的空白和换行
    trailing = re.compile(r"[ \t]*(\r\n|\n)?").match(text, end)
    if trailing:
        end = trailing.end()

    return text[:key_match.start()] + text[end:]


def rewrite_info_plist_text(text: str, project: Project) -> str:
    """改写 Info.plist 文本并校验结果

    Args:
        text: 原始 Info.plist 内容
        project: 项目信息

    Returns:
        str: 改写后的内容

    Raises:
        MetadataRewriteError: 结构不符合预期或改写后无法解析
    """
    text = replace_string_value(text, BUNDLE_IDENTIFIER_KEY, project.uti)
    text = replace_string_value(text, BUNDLE_NAME_KEY, project.title)
    text = remove_key_block(text, EXPORTED_TYPES_KEY)

    try:
        parsed = plistlib.loads(text.encode('utf-8'))
    except Exception as e:
        raise MetadataRewriteError(f"改写后的 Info.plist 无法解析: {e}") from e

    if not isinstance(parsed, dict):
        raise MetadataRewriteError("Info.plist 根节点不是字典")
    if parsed.get(BUNDLE_IDENTIFIER_KEY) != project.uti:
        raise MetadataRewriteError(f"{BUNDLE_IDENTIFIER_KEY} 改写后不一致")
    if parsed.get(BUNDLE_NAME_KEY) != project.title:
        raise MetadataRewriteError(f"{BUNDLE_NAME_KEY} 改写后不一致")
    if EXPORTED_TYPES_KEY in parsed:
        raise MetadataRewriteError(f"{EXPORTED_TYPES_KEY} 未能完全删除")

    return text


def rewrite_info_plist(plist_path: Union[str, Path], project: Project) -> None:
    """就地改写 Info.plist 文件

    Raises:
        MetadataRewriteError: 内容不符合预期
        FileSystemError: 读写失败
    """
    plist_path = Path(plist_path)
    info(f"改写 {plist_path}", stage=LogStage.PLIST)

    try:
        # newline='' 保持原有换行风格
        with open(plist_path, 'r', encoding='utf-8', newline='') as f:
            original = f.read()
    except OSError as e:
        raise FileSystemError(f"无法读取 {plist_path}: {e}") from e

    rewritten = rewrite_info_plist_text(original, project)

    try:
        with open(plist_path, 'w', encoding='utf-8', newline='') as f:
            f.write(rewritten)
    except OSError as e:
        raise FileSystemError(f"无法写入 {plist_path}: {e}") from e

    debug(f"Info.plist: {BUNDLE_IDENTIFIER_KEY}={project.uti} {BUNDLE_NAME_KEY}={project.title}", stage=LogStage.PLIST)
