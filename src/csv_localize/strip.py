from __future__ import annotations

import re

# 一次交替匹配：
# - literal：双引号 / 单引号字面量（只用来“吃掉”这段文本，避免 "http://x" 里的 // 被当成注释）
# - comment：/* ... */（. 可跨行）或 // 到行尾（不吃换行符，CRLF 文件同样适用）
# 双引号字面量可以跨行（.strings 的值允许换行）；单引号字面量不跨行
_STRIP_RE = re.compile(
    r"""(?P<literal>"(?:\\.|[^"\\])*"|'(?:\\.|[^'\\\r\n])*')"""
    r"""|(?P<comment>/\*.*?\*/|//[^\r\n]*)""",
    re.DOTALL | re.MULTILINE,
)


def strip_comments(text: str, *, strip_literals: bool = False) -> str:
    """
    去掉 // 与 /* */ 注释，字面量原样保留。
    strip_literals=True 时连字面量一起删掉（旧版的窄模式，提取 key 时不要用）。
    """
    if not text:
        return ""

    def _repl(m: "re.Match[str]") -> str:
        if m.group("comment") is not None:
            return ""
        if strip_literals:
            return ""
        return m.group(0)

    return _STRIP_RE.sub(_repl, text)
