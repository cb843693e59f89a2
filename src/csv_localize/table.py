from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .models import LANGUAGE_KEY, Issue, IssueCode, IssueLevel


# ----------------------------
# 内存中的翻译表
# ----------------------------
@dataclass
class TranslationTable:
    """
    key -> 按 languages 顺序排列的译文列表（"" 表示未翻译）。
    保留 key（language）不进 rows，单独存在 languages 里，落盘时写成第一行。
    """
    languages: List[str] = field(default_factory=list)
    rows: Dict[str, List[str]] = field(default_factory=dict)

    def __contains__(self, key: object) -> bool:
        return key in self.rows

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def language_count(self) -> int:
        return len(self.languages)

    def add_key(self, key: str) -> bool:
        """不存在才插入（全部语言留空）；已有译文永远不动。返回是否新增。"""
        if key == LANGUAGE_KEY or key in self.rows:
            return False
        self.rows[key] = [""] * self.language_count
        return True

    def set_value(self, key: str, index: int, value: str) -> None:
        """按语言下标覆盖一格；key 不存在时先建空行。"""
        if key == LANGUAGE_KEY:
            return
        if index < 0:
            raise IndexError(f"language index must be >= 0, got {index}")
        row = self.rows.get(key)
        if row is None:
            row = [""] * self.language_count
            self.rows[key] = row
        if index >= len(row):
            row.extend([""] * (index + 1 - len(row)))
        row[index] = value

    def remove_unused(self, used: Iterable[str]) -> List[str]:
        """删除 used 之外的 key，返回被删的 key（已排序）。"""
        keep: Set[str] = set(used)
        removed = sorted(k for k in self.rows if k not in keep)
        for k in removed:
            del self.rows[k]
        return removed

    def sorted_keys(self) -> List[str]:
        """普通 key 的升序（按码点，等价于 UTF-8 字节序）。"""
        return sorted(self.rows.keys())

    def set_languages(self, languages: List[str]) -> None:
        """
        显式替换语言列表：按语言名重排每一行。
        - 保留下来的语言：原值跟着走
        - 新语言：空
        - 去掉的语言：整列丢弃
        """
        new_langs = list(languages)
        if new_langs == self.languages:
            return
        old_pos = {code: i for i, code in enumerate(self.languages)}
        for key, row in self.rows.items():
            out: List[str] = []
            for code in new_langs:
                i = old_pos.get(code)
                out.append(row[i] if i is not None and i < len(row) else "")
            self.rows[key] = out
        self.languages = new_langs


# ----------------------------
# 读：CSV -> TranslationTable
# ----------------------------
def load_table(path: Path) -> Tuple[TranslationTable, List[Issue]]:
    """
    读取已保存的 CSV 表。
    - 文件不存在：空表（首次运行），不算问题
    - 没有 language 行：报 error，语言列表为空，继续
    - CSV 记录损坏：报 error，之后的行丢弃，已读的保留
    - 文件存在但读不出来（不是 UTF-8、权限等）：报 READ_FAILED，调用方不应再保存
    """
    table = TranslationTable()
    issues: List[Issue] = []

    if not path.exists():
        return table, issues

    has_language_row = False
    try:
        # utf-8-sig：容忍表格软件另存时加的 BOM
        with path.open("r", encoding="utf-8-sig", newline="") as f:
            reader = csv.reader(f)
            try:
                for values in reader:
                    if not values:
                        continue
                    key, cells = values[0], values[1:]
                    if key == LANGUAGE_KEY:
                        table.languages = list(cells)
                        has_language_row = True
                        continue
                    table.rows[key] = list(cells)
            except csv.Error as e:
                issues.append(Issue(
                    IssueLevel.ERROR,
                    IssueCode.CSV_INVALID,
                    f"Malformed CSV record: {e}",
                    path=path,
                    line=reader.line_num,
                ))
    except (OSError, UnicodeError) as e:
        issues.append(Issue(IssueLevel.ERROR, IssueCode.READ_FAILED, f"Cannot read file: {e}", path=path))
        return table, issues

    if not has_language_row:
        issues.append(Issue(
            IssueLevel.ERROR,
            IssueCode.LANGUAGE_ROW_MISSING,
            f"Missing line with '{LANGUAGE_KEY}' key.",
            path=path,
            line=1,
        ))

    return table, issues


# ----------------------------
# 写：TranslationTable -> CSV
# ----------------------------
def table_to_csv_text(table: TranslationTable, keys: Optional[List[str]] = None) -> str:
    """
    第一行固定 language,<langs...>，其余按 key 升序。
    短行补空到语言数；多出来的列原样保留（由 check 报告）。
    """
    keys = table.sorted_keys() if keys is None else keys
    n = table.language_count

    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow([LANGUAGE_KEY, *table.languages])
    for key in keys:
        if key == LANGUAGE_KEY:
            continue
        row = list(table.rows.get(key, []))
        if len(row) < n:
            row.extend([""] * (n - len(row)))
        w.writerow([key, *row])
    return buf.getvalue()


def write_text_atomic(path: Path, content: str) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(content, encoding="utf-8", newline="")
        tmp.replace(path)
    finally:
        try:
            if tmp.exists():
                tmp.unlink()
        except OSError:
            pass


def save_table(table: TranslationTable, path: Path) -> int:
    """整体覆盖写入（临时文件 + rename），返回写入行数（含 language 行）。失败时抛 OSError。"""
    keys = table.sorted_keys()
    path.parent.mkdir(parents=True, exist_ok=True)
    write_text_atomic(path, table_to_csv_text(table, keys))
    return len(keys) + 1
