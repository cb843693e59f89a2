#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
csv_localize tool.py
CLI 入口：参数解析 + 配置合并 + 运行 + exit code
- scan（默认）：扫描源码中的 Localize(@"key")，合并进 CSV
- convert（-k）：把 *.lproj/*.strings 转成一份 CSV
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .actions import run
from .config import (
    CONFIG_FILE,
    DEFAULT_EXTENSIONS,
    DEFAULT_FILE_NAME,
    DEFAULT_FUNCTION,
    DEFAULT_OUTPUT_DIR,
    MODE_CONVERT,
    ConfigError,
    build_config,
    init_config,
    load_config_yaml,
    parse_config_dict,
)
from .models import IssueLevel, Report
from .tool_spec import ex, opt, render_usage, tool

BOX_TOOL = tool(
    id="iOS.csv_localize",
    name="csv-localize",
    category="iOS",
    summary="csv-localize is a tool to generate/merge CSV-based localization file for Objective-C source code.",
    usage=[
        "csv-localize [options] <sourcePath>",
        "csv-localize -k [options] <sourcePath>",
        "csv-localize --init-config",
    ],
    options=[
        opt("-s, --function", "Name of localization routine", DEFAULT_FUNCTION),
        opt("-o, --output-dir", "Output directory for localization file", DEFAULT_OUTPUT_DIR),
        opt("-n, --name", "Name of localization file", DEFAULT_FILE_NAME),
        opt("-e, --extensions", "Comma-separated list of extensions of files which should be scanned", ",".join(DEFAULT_EXTENSIONS)),
        opt("-l, --languages", "Comma-separated list of languages (overrides the 'language' row)"),
        opt("-r, --force-rescan", "Force rescan of all files (modification time will be ignored)"),
        opt("-k, --convert", "Enables 'conversion' mode. Recursively converts .strings files found in <sourcePath> to single .csv file"),
        opt("-c, --clean", "Clean unused localization strings. Implies -r (full rescan)"),
        opt("-v, --verbose", "Use verbose output"),
        opt("--config", "YAML config file", CONFIG_FILE),
        opt("--init-config", "Write a commented config template and exit"),
    ],
    examples=[
        ex("csv-localize ./Classes", "扫描 .m/.mm，新增 key 合并进 ./Localization.csv"),
        ex("csv-localize -c ./Classes", "全量扫描并删除源码中不再使用的 key"),
        ex("csv-localize -k -o Resources ./Resources", "把 *.lproj/*.strings 转成 Resources/Localization.csv"),
        ex("csv-localize -l en,ru,de ./Classes", "调整语言列（按语言名重排已有译文）"),
    ],
    dependencies=[
        "PyYAML>=6.0",
    ],
    docs="README.md",
)


EXIT_OK = 0
EXIT_FAIL = 1
EXIT_BAD = 2


def build_parser() -> argparse.ArgumentParser:
    # 布尔开关默认 None：区分“没传”和“传了”，没传时才看配置文件
    p = argparse.ArgumentParser(
        prog="csv-localize",
        description=BOX_TOOL["summary"],
    )
    p.add_argument("source", nargs="?", default=None, help="源码（或 *.lproj 所在）根目录")
    p.add_argument("-s", "--function", dest="localize_function", default=None, help="本地化函数名（默认 Localize）")
    p.add_argument("-o", "--output-dir", dest="output_dir", default=None, help="CSV 输出目录（默认当前目录）")
    p.add_argument("-n", "--name", dest="file_name", default=None, help="CSV 文件名（默认 Localization.csv）")
    p.add_argument("-e", "--extensions", default=None, help="需要扫描的扩展名，逗号分隔（默认 m,mm）")
    p.add_argument("-l", "--languages", default=None, help="语言列表，逗号分隔（覆盖 CSV 的 language 行）")
    p.add_argument("-r", "--force-rescan", dest="force_rescan", action="store_true", default=None, help="忽略修改时间，全部重新扫描")
    p.add_argument("-k", "--convert", action="store_true", default=None, help="转换模式：*.lproj/*.strings -> CSV")
    p.add_argument("-c", "--clean", action="store_true", default=None, help="删除不再使用的 key（隐含 -r）")
    p.add_argument("-v", "--verbose", action="store_true", default=None, help="输出处理过程")
    p.add_argument("--config", default=CONFIG_FILE, help="配置文件路径（默认 localize.yaml，不存在则忽略）")
    p.add_argument("--init-config", action="store_true", help="生成带注释的配置模板后退出")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def _cli_values(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "localize_function": args.localize_function,
        "output_dir": args.output_dir,
        "file_name": args.file_name,
        "extensions": args.extensions,
        "languages": args.languages,
        "force_rescan": args.force_rescan,
        "clean": args.clean,
        "verbose": args.verbose,
        "mode": MODE_CONVERT if args.convert else None,
    }


def print_report(report: Report) -> None:
    """诊断走 stderr（Xcode 可识别），汇总走 stdout。"""
    for issue in report.issues:
        print(issue.format(), file=sys.stderr)

    counts = report.counts_by_level()
    mark = "✅" if report.saved else "❌"
    parts = [
        f"scanned={report.files_scanned}",
        f"added={report.keys_added}",
    ]
    if report.action == "scan":
        parts.append(f"skipped={report.files_skipped}")
        parts.append(f"removed={report.keys_removed}")
    else:
        parts.append(f"translations={report.translations_parsed}")
    parts.append(f"warnings={counts[IssueLevel.WARN.value]}")
    parts.append(f"errors={counts[IssueLevel.ERROR.value]}")
    print(f"{mark} {report.action}：{'  '.join(parts)}")


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    args = build_parser().parse_args(argv)

    cwd = Path.cwd()
    cfg_path = Path(args.config).expanduser()
    if not cfg_path.is_absolute():
        cfg_path = (cwd / cfg_path).resolve()

    if args.init_config:
        try:
            init_config(cfg_path)
            return EXIT_OK
        except ConfigError as e:
            print(f"❌ {e}")
            return EXIT_BAD

    if not args.source:
        sys.stderr.write(render_usage(BOX_TOOL))
        return EXIT_BAD

    try:
        file_values = parse_config_dict(load_config_yaml(cfg_path))
        cfg = build_config(source_path=args.source, cwd=cwd, cli=_cli_values(args), file_values=file_values)
    except ConfigError as e:
        print(f"❌ {e}")
        return EXIT_BAD

    if not cfg.source_path.exists():
        print(f"❌ 源路径不存在：{cfg.source_path}")
        return EXIT_BAD

    report = run(cfg)
    print_report(report)
    return EXIT_OK if report.saved else EXIT_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
