from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


# =========================
# Constants / Conventions
# =========================

# 保留 key：它的“值”就是语言列表，不参与翻译、不参与排序、永远写在第一行
LANGUAGE_KEY = "language"

# 从 *.lproj 目录发现语言时，默认语言永远排第一列
DEFAULT_LANGUAGE = "en"


# =========================
# Reporting Models
# =========================

class IssueLevel(str, Enum):
    WARN = "warning"
    ERROR = "error"


class IssueCode(str, Enum):
    # 表文件
    LANGUAGE_ROW_MISSING = "language_row_missing"
    CSV_INVALID = "csv_invalid"
    WRITE_FAILED = "write_failed"

    # 源文件 / .strings
    READ_FAILED = "read_failed"

    # clean 被跳过（有源文件没读成功）
    CLEAN_SKIPPED = "clean_skipped"

    # 一致性检查
    MORE_TRANSLATIONS = "more_translations"
    LESS_TRANSLATIONS = "less_translations"
    MISSING_TRANSLATIONS = "missing_translations"


@dataclass(frozen=True)
class Issue:
    level: IssueLevel
    code: IssueCode
    message: str

    # Optional context
    path: Optional[Path] = None
    line: Optional[int] = None
    key: Optional[str] = None

    details: Dict[str, object] = field(default_factory=dict)

    def format(self) -> str:
        """
        编译器风格输出：path:line: warning: message
        Xcode 的 Run Script 阶段会把这种行识别成警告/错误。
        """
        if self.path is None:
            return f"{self.level.value}: {self.message}"
        if self.line is None:
            return f"{self.path}: {self.level.value}: {self.message}"
        return f"{self.path}:{self.line}: {self.level.value}: {self.message}"


@dataclass
class Report:
    """
    一次运行的结果汇总（打印 / 测试用）。
    """
    action: str
    issues: List[Issue] = field(default_factory=list)

    files_scanned: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    keys_added: int = 0
    keys_removed: int = 0
    translations_parsed: int = 0
    rows_saved: int = 0
    saved: bool = False

    def extend(self, issues: List[Issue]) -> None:
        self.issues.extend(issues)

    def counts_by_level(self) -> Dict[str, int]:
        d: Dict[str, int] = {lv.value: 0 for lv in IssueLevel}
        for i in self.issues:
            d[i.level.value] = d.get(i.level.value, 0) + 1
        return d
