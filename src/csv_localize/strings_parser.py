from __future__ import annotations

import os
import re
from pathlib import Path
from typing import List, Optional, Tuple

from .extract import unescape_literal
from .models import DEFAULT_LANGUAGE, LANGUAGE_KEY
from .table import TranslationTable

LPROJ_SUFFIX = ".lproj"
STRINGS_SUFFIX = ".strings"
_LANG_SEPARATORS = ("-", "_", ".")

# "KEY" = "VALUE";  允许跨行空白、\" 转义；注释需先用 strip_comments 去掉
_STRINGS_ENTRY_RE = re.compile(
    r'"((?:\\.|[^"\\])*)"\s*=\s*"((?:\\.|[^"\\])*)"\s*;',
    re.DOTALL,
)


def parse_strings_text(text: str) -> List[Tuple[str, str]]:
    """解析（已去注释的）.strings 内容，返回反转义后的 (key, value)，按出现顺序。"""
    out: List[Tuple[str, str]] = []
    for m in _STRINGS_ENTRY_RE.finditer(text or ""):
        out.append((unescape_literal(m.group(1)), unescape_literal(m.group(2))))
    return out


def merge_strings_text(text: str, table: TranslationTable, language_index: int) -> int:
    """
    把一份 .strings 写进 table 的 language_index 列。
    key 或 value 反转义后为空、或 key 是保留的 language：静默跳过。返回写入条数。
    """
    count = 0
    for key, value in parse_strings_text(text):
        if not key or not value or key == LANGUAGE_KEY:
            continue
        table.set_value(key, language_index, value)
        count += 1
    return count


# ----------------------------
# *.lproj 目录 <-> 语言
# ----------------------------
def lproj_language(dir_name: str) -> Optional[str]:
    if not dir_name.endswith(LPROJ_SUFFIX):
        return None
    stem = dir_name[: -len(LPROJ_SUFFIX)]
    return stem or None


def discover_languages(root: Path) -> List[str]:
    """
    遍历 root 下的 *.lproj 目录，按遍历顺序收集语言（去重）；
    默认语言 en 永远放第一位。
    """
    languages: List[str] = []
    for dirpath, dirnames, _filenames in os.walk(root):
        dirnames.sort()
        for d in dirnames:
            lang = lproj_language(d)
            if not lang or lang in languages:
                continue
            if lang == DEFAULT_LANGUAGE:
                languages.insert(0, lang)
            else:
                languages.append(lang)
    return languages


def language_index_for_dir(dir_name: str, languages: List[str]) -> Optional[int]:
    """
    目录名 -> 语言下标：
    1) 去掉 .lproj 后与语言完全相同
    2) 否则取目录名以之开头、且紧跟 - _ . 的最长语言（zh-Hant.lproj -> zh，english.lproj 不算 en）
    匹配不到返回 None（整个目录跳过）。
    """
    stem = lproj_language(dir_name)
    if stem is None:
        return None
    if stem in languages:
        return languages.index(stem)

    best: Optional[int] = None
    for i, code in enumerate(languages):
        if code and stem.startswith(code) and stem[len(code):len(code) + 1] in _LANG_SEPARATORS:
            if best is None or len(code) > len(languages[best]):
                best = i
    return best


def iter_strings_files(root: Path, languages: List[str]) -> List[Tuple[Path, int]]:
    """root 下所有“父目录是已知语言 *.lproj”的 .strings 文件，按路径排序。"""
    out: List[Tuple[Path, int]] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        d = Path(dirpath)
        index = language_index_for_dir(d.name, languages)
        if index is None:
            continue
        for fn in sorted(filenames):
            if fn.endswith(STRINGS_SUFFIX):
                out.append((d / fn, index))
    return out
