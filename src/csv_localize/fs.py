from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, Tuple


def normalize_extensions(items: Iterable[str]) -> Tuple[str, ...]:
    """'m, .mm,,h' -> ('m', 'mm', 'h')：去点、去空、去重保序。"""
    seen = set()
    out: List[str] = []
    for x in items:
        e = str(x).strip().lstrip(".")
        if not e or e in seen:
            continue
        seen.add(e)
        out.append(e)
    return tuple(out)


def iter_source_files(root: Path, extensions: Iterable[str]) -> List[Path]:
    """
    递归收集扩展名（不含点）在白名单里的文件；目录与文件名排序，保证多次运行顺序一致。
    root 本身是文件时只判断它自己。
    """
    exts = set(normalize_extensions(extensions))
    if root.is_file():
        return [root] if root.suffix[1:] in exts else []

    out: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for fn in sorted(filenames):
            p = Path(dirpath) / fn
            if p.suffix and p.suffix[1:] in exts:
                out.append(p)
    return out


def file_mtime(path: Path) -> Optional[float]:
    try:
        return path.stat().st_mtime
    except OSError:
        return None


def is_modified_since(path: Path, since: Optional[float]) -> bool:
    """since 为空（表文件还不存在）时一律视为已修改。"""
    if since is None:
        return True
    mtime = file_mtime(path)
    return mtime is None or mtime > since


def detect_encoding(raw: bytes) -> str:
    """只认 BOM：FF FE / FE FF -> utf-16，EF BB BF -> utf-8-sig，其余一律按 utf-8 严格解码。"""
    if raw[:2] in (b"\xff\xfe", b"\xfe\xff"):
        return "utf-16"
    if raw[:3] == b"\xef\xbb\xbf":
        return "utf-8-sig"
    return "utf-8"


def read_text_any(path: Path) -> str:
    """
    读取源文件 / .strings：UTF-8 或带 BOM 的 UTF-16（老 Xcode 工程常见）。
    不是合法 UTF-8 又没有 BOM 的文件不猜编码，直接抛 UnicodeDecodeError，由调用方报告并跳过。
    """
    raw = path.read_bytes()
    return raw.decode(detect_encoding(raw))
