from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .models import Issue, IssueCode, IssueLevel
from .table import TranslationTable


def missing_languages(row: List[str], languages: List[str]) -> List[str]:
    """只看行与语言列表都覆盖到的位置；行太短的部分交给 less-translations 报告。"""
    out: List[str] = []
    for index, code in enumerate(languages):
        if index < len(row) and row[index] == "":
            out.append(code)
    return out


def format_missing(key: str, langs: List[str]) -> str:
    if len(langs) > 1:
        return f"Missing translations for key '{key}' for languages: {', '.join(langs)}"
    return f"Missing translation for key '{key}' for language {langs[0]}"


def check_table(table: TranslationTable, path: Optional[Path] = None) -> List[Issue]:
    """
    一致性检查（只读，纯提示）：
    - 译文数多于/少于语言数
    - 每个 key 缺哪些语言（合并成一条）
    行号与保存后的 CSV 对齐：第 1 行是 language 行，之后按 key 升序。
    """
    issues: List[Issue] = []
    n = table.language_count

    for i, key in enumerate(table.sorted_keys()):
        row = table.rows[key]
        line = i + 2

        if len(row) > n:
            issues.append(Issue(
                IssueLevel.WARN,
                IssueCode.MORE_TRANSLATIONS,
                f"Key '{key}' has more translations ({len(row)}) than languages specified ({n})",
                path=path, line=line, key=key,
            ))
        elif len(row) < n:
            issues.append(Issue(
                IssueLevel.WARN,
                IssueCode.LESS_TRANSLATIONS,
                f"Key '{key}' has less translations ({len(row)}) than languages specified ({n})",
                path=path, line=line, key=key,
            ))

        missing = missing_languages(row, table.languages)
        if missing:
            issues.append(Issue(
                IssueLevel.WARN,
                IssueCode.MISSING_TRANSLATIONS,
                format_missing(key, missing),
                path=path, line=line, key=key,
                details={"languages": missing},
            ))

    return issues
