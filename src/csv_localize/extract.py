from __future__ import annotations

import re
from typing import List

from .table import TranslationTable

# ObjC 字符串字面量：@"..."，支持 \" 转义
_OBJC_LITERAL = r'@"((?:\\.|[^"\\])*)"'
_OBJC_LITERAL_NOGROUP = r'@"(?:\\.|[^"\\])*"'


def unescape_literal(s: str) -> str:
    """只处理 \\" 与 \\'，其余转义序列（\\n 等）原样保留。"""
    return s.replace('\\"', '"').replace("\\'", "'")


def compile_localize_pattern(function_name: str) -> "re.Pattern[str]":
    """
    匹配 <name>( @"key" [, ident | , @"literal"]* )：
    - token 之间允许任意空白（含换行）
    - 后续参数只认非空的标识符（%d 之类的变量）或其它字面量，内容忽略
    - 函数名必须从单词边界开始（ZZLocalize 不会被当成 Localize）
    """
    name = re.escape(function_name)
    trailing = rf"(?:\s*,\s*(?:{_OBJC_LITERAL_NOGROUP}|[\w.]+))*"
    return re.compile(rf"\b{name}\s*\(\s*{_OBJC_LITERAL}{trailing}\s*\)")


class KeyExtractor:
    def __init__(self, function_name: str) -> None:
        self.function_name = function_name
        self.pattern = compile_localize_pattern(function_name)

    def find_keys(self, text: str) -> List[str]:
        """按出现顺序返回每次调用的第一个字面量（已反转义，允许重复）。"""
        return [unescape_literal(m.group(1)) for m in self.pattern.finditer(text or "")]

    def extract_into(self, text: str, table: TranslationTable) -> List[str]:
        keys = self.find_keys(text)
        for key in keys:
            table.add_key(key)
        return keys
