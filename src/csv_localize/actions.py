from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Set

from .check import check_table
from .config import MODE_CONVERT, LocalizeConfig
from .extract import KeyExtractor
from .fs import file_mtime, is_modified_since, iter_source_files, read_text_any
from .models import DEFAULT_LANGUAGE, Issue, IssueCode, IssueLevel, Report
from .strings_parser import discover_languages, iter_strings_files, merge_strings_text
from .strip import strip_comments
from .table import TranslationTable, load_table, save_table


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def _read_failed(path: Path, e: Exception) -> Issue:
    return Issue(IssueLevel.ERROR, IssueCode.READ_FAILED, f"Cannot read file: {e}", path=path)


# ----------------------------
# scan：源码 -> 表
# ----------------------------
def scan_sources(cfg: LocalizeConfig, table: TranslationTable, report: Report, *, since: Optional[float]) -> Set[str]:
    """
    扫描源码把新 key 插进 table，返回本次看到的全部 key。
    since：表文件的修改时间；全量扫描时忽略。
    """
    extractor = KeyExtractor(cfg.localize_function)
    seen: Set[str] = set()

    for path in iter_source_files(cfg.source_path, cfg.extensions):
        if not cfg.full_rescan and not is_modified_since(path, since):
            report.files_skipped += 1
            if cfg.verbose:
                print(f"File {path} was not modified.")
            continue

        if cfg.verbose:
            print(f"Processing {path}")
        try:
            text = read_text_any(path)
        except (OSError, UnicodeError) as e:
            report.issues.append(_read_failed(path, e))
            report.files_failed += 1
            continue

        before = len(table)
        keys = extractor.extract_into(strip_comments(text), table)
        report.files_scanned += 1
        report.keys_added += len(table) - before
        seen.update(keys)

        if cfg.verbose and keys:
            print(f"Parsed {_plural(len(keys), 'key')}.")

    return seen


def run_scan(cfg: LocalizeConfig) -> Report:
    report = Report(action="scan")

    table, issues = load_table(cfg.output_path)
    report.extend(issues)
    if any(i.code == IssueCode.READ_FAILED for i in issues):
        # 表文件存在但读不出来：不能拿空表覆盖已有译文
        return report
    since = file_mtime(cfg.output_path)
    if cfg.verbose and since is not None:
        print(f"Loaded {_plural(len(table), 'key')} from {cfg.output_path}")

    if cfg.languages:
        table.set_languages(list(cfg.languages))
    elif since is None and not table.languages:
        # 首次运行且没指定语言：只建默认语言列
        table.set_languages([DEFAULT_LANGUAGE])

    seen = scan_sources(cfg, table, report, since=since)

    if cfg.clean and report.files_failed:
        report.issues.append(Issue(
            IssueLevel.ERROR,
            IssueCode.CLEAN_SKIPPED,
            f"Unused keys were not removed: {_plural(report.files_failed, 'source file')} could not be read.",
        ))
    elif cfg.clean:
        # cfg.full_rescan 恒为 True（clean 隐含 -r），seen 覆盖了全部源文件
        removed = table.remove_unused(seen)
        report.keys_removed = len(removed)
        if cfg.verbose:
            for k in removed:
                print(f"Removed unused key '{k}'")

    _check_and_save(cfg, table, report)
    return report


# ----------------------------
# convert：*.lproj/*.strings -> 表
# ----------------------------
def run_convert(cfg: LocalizeConfig) -> Report:
    report = Report(action="convert")

    languages: List[str] = list(cfg.languages) or discover_languages(cfg.source_path)
    table = TranslationTable(languages=languages)
    if cfg.verbose:
        print(f"Languages: {', '.join(languages) if languages else '(none)'}")

    for path, index in iter_strings_files(cfg.source_path, languages):
        if cfg.verbose:
            print(f"Processing {path}")
        try:
            text = read_text_any(path)
        except (OSError, UnicodeError) as e:
            report.issues.append(_read_failed(path, e))
            report.files_failed += 1
            continue

        before = len(table)
        count = merge_strings_text(strip_comments(text), table, index)
        report.files_scanned += 1
        report.translations_parsed += count
        report.keys_added += len(table) - before

        if cfg.verbose:
            print(f"Parsed {_plural(count, 'translation')} from {path}")

    _check_and_save(cfg, table, report)
    return report


# ----------------------------
# check + save
# ----------------------------
def _check_and_save(cfg: LocalizeConfig, table: TranslationTable, report: Report) -> None:
    report.extend(check_table(table, cfg.output_path))

    if cfg.verbose:
        print(f"Saving {cfg.output_path}")
    try:
        report.rows_saved = save_table(table, cfg.output_path)
        report.saved = True
    except OSError as e:
        report.issues.append(Issue(
            IssueLevel.ERROR,
            IssueCode.WRITE_FAILED,
            f"Cannot write localization file: {e}",
            path=cfg.output_path,
        ))
        return

    if cfg.verbose:
        print(f"Saved file with {_plural(report.rows_saved, 'key')}.")


def run(cfg: LocalizeConfig) -> Report:
    if cfg.mode == MODE_CONVERT:
        return run_convert(cfg)
    return run_scan(cfg)
