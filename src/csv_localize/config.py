from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .fs import normalize_extensions


CONFIG_FILE = "localize.yaml"

DEFAULT_FUNCTION = "Localize"
DEFAULT_OUTPUT_DIR = "."
DEFAULT_FILE_NAME = "Localization.csv"
DEFAULT_EXTENSIONS: Tuple[str, ...] = ("m", "mm")

MODE_SCAN = "scan"
MODE_CONVERT = "convert"
MODES = (MODE_SCAN, MODE_CONVERT)


# =========================
# Errors
# =========================

class ConfigError(RuntimeError):
    pass


# =========================
# Models
# =========================

@dataclass(frozen=True)
class LocalizeConfig:
    """一次运行的完整配置（命令行 > 配置文件 > 默认值 合并后的结果）。"""
    source_path: Path
    output_path: Path                  # 绝对路径：<outputDir>/<fileName>
    mode: str = MODE_SCAN
    localize_function: str = DEFAULT_FUNCTION
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    languages: Tuple[str, ...] = ()    # 显式语言列表；空 = 不覆盖
    force_rescan: bool = False
    clean: bool = False
    verbose: bool = False

    @property
    def full_rescan(self) -> bool:
        # clean 依赖完整扫描，否则没扫到的文件里的 key 会被误删
        return self.force_rescan or self.clean


# =========================
# Helpers
# =========================

def _as_str(x: object, default: str = "") -> str:
    if x is None:
        return default
    s = str(x).strip()
    return s if s else default


def split_csv_list(value: object, *, field_name: str) -> List[str]:
    """'en, ru' 或 ['en', 'ru'] -> ['en', 'ru']"""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(x) for x in value]
    else:
        raise ConfigError(f"{field_name} 必须是逗号分隔字符串或数组 list")
    return [x.strip() for x in items if x.strip()]


def _as_bool(value: object, *, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{field_name} 必须是 true/false")


# =========================
# YAML load / validate
# =========================

def load_config_yaml(path: Path) -> Dict[str, object]:
    """配置文件是可选的：不存在返回空 dict。"""
    if not path.exists():
        return {}
    try:
        obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML 解析失败：{path} ({e})") from None
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ConfigError(f"配置文件格式错误：顶层必须是 mapping/object（{path}）")
    return obj


def parse_config_dict(raw: Mapping[str, object]) -> Dict[str, Any]:
    """
    YAML 键名（camelCase） -> 内部字段名，并做类型校验。
    只返回文件里出现过的字段，方便和命令行合并。
    """
    out: Dict[str, Any] = {}

    if "localizeFunction" in raw:
        name = _as_str(raw.get("localizeFunction"))
        if not name:
            raise ConfigError("localizeFunction 不能为空")
        out["localize_function"] = name
    if "outputDir" in raw:
        out["output_dir"] = _as_str(raw.get("outputDir"), DEFAULT_OUTPUT_DIR)
    if "fileName" in raw:
        name = _as_str(raw.get("fileName"))
        if not name:
            raise ConfigError("fileName 不能为空")
        out["file_name"] = name
    if "extensions" in raw:
        out["extensions"] = split_csv_list(raw.get("extensions"), field_name="extensions")
    if "languages" in raw:
        out["languages"] = split_csv_list(raw.get("languages"), field_name="languages")
    if "mode" in raw:
        mode = _as_str(raw.get("mode"), MODE_SCAN)
        if mode not in MODES:
            raise ConfigError(f"mode 不合法：{mode!r}，可选：{', '.join(MODES)}")
        out["mode"] = mode

    for yaml_key, field_name in (
            ("forceRescan", "force_rescan"),
            ("clean", "clean"),
            ("verbose", "verbose"),
    ):
        if yaml_key in raw:
            out[field_name] = _as_bool(raw.get(yaml_key), field_name=yaml_key)

    return out


def build_config(
        *,
        source_path: str | Path,
        cwd: Path,
        cli: Mapping[str, Any],
        file_values: Optional[Mapping[str, Any]] = None,
) -> LocalizeConfig:
    """
    合并优先级：命令行（非 None）> 配置文件 > 默认值。
    outputDir 为相对路径时基于 cwd。
    """
    file_values = file_values or {}

    def pick(name: str, default: Any) -> Any:
        v = cli.get(name)
        if v is not None:
            return v
        if name in file_values:
            return file_values[name]
        return default

    output_dir = Path(_as_str(pick("output_dir", DEFAULT_OUTPUT_DIR), DEFAULT_OUTPUT_DIR)).expanduser()
    if not output_dir.is_absolute():
        output_dir = cwd / output_dir
    file_name = _as_str(pick("file_name", DEFAULT_FILE_NAME), DEFAULT_FILE_NAME)

    extensions = pick("extensions", list(DEFAULT_EXTENSIONS))
    if isinstance(extensions, str):
        extensions = split_csv_list(extensions, field_name="extensions")
    extensions = normalize_extensions(extensions)
    if not extensions:
        raise ConfigError("extensions 不能为空")

    languages = pick("languages", [])
    if isinstance(languages, str):
        languages = split_csv_list(languages, field_name="languages")

    mode = pick("mode", MODE_SCAN)
    if mode not in MODES:
        raise ConfigError(f"mode 不合法：{mode!r}，可选：{', '.join(MODES)}")

    src = Path(source_path).expanduser()
    if not src.is_absolute():
        src = cwd / src

    return LocalizeConfig(
        source_path=src,
        output_path=(output_dir / file_name).resolve(),
        mode=mode,
        localize_function=_as_str(pick("localize_function", DEFAULT_FUNCTION), DEFAULT_FUNCTION),
        extensions=extensions,
        languages=tuple(languages),
        force_rescan=bool(pick("force_rescan", False)),
        clean=bool(pick("clean", False)),
        verbose=bool(pick("verbose", False)),
    )


# =========================
# init: commented YAML template
# =========================

def generate_commented_yaml_template() -> str:
    """
    生成带注释的 localize.yaml。
    手写文本而不是 yaml.dump，保证注释可控、可读。
    """
    exts = ", ".join(DEFAULT_EXTENSIONS)
    return (
        "# localize.yaml\n"
        "# ---------------------------------------------\n"
        "# csv_localize 配置（可选）\n"
        "# 优先级：命令行参数 > 本文件 > 内置默认值\n"
        "# ---------------------------------------------\n\n"
        "# 本地化函数名：匹配 Localize(@\"key\", ...) 这样的调用\n"
        f"localizeFunction: {DEFAULT_FUNCTION}\n\n"
        "# CSV 输出目录（相对当前目录）与文件名\n"
        f"outputDir: \"{DEFAULT_OUTPUT_DIR}\"\n"
        f"fileName: {DEFAULT_FILE_NAME}\n\n"
        "# 需要扫描的源文件扩展名（不含点）\n"
        f"extensions: [{exts}]\n\n"
        "# 语言列表（可选）：不填则沿用 CSV 里的 language 行；\n"
        "# 填写后会按语言名重排已有列（新增语言留空，去掉的语言整列删除）\n"
        "# languages: [en, ru]\n\n"
        "# 运行模式：scan（扫描源码）/ convert（把 *.lproj/*.strings 转成 CSV）\n"
        f"mode: {MODE_SCAN}\n\n"
        "# 忽略修改时间，全部重新扫描\n"
        "forceRescan: false\n"
        "# 删除源码中已不再使用的 key（会自动开启全量扫描）\n"
        "clean: false\n"
        "# 输出处理过程\n"
        "verbose: false\n"
    )


def init_config(cfg_path: Path) -> Path:
    """不存在则创建；已存在只校验，不覆盖。"""
    if cfg_path.exists():
        parse_config_dict(load_config_yaml(cfg_path))
        print(f"✅ 配置已存在且合法：{cfg_path}")
        return cfg_path
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(generate_commented_yaml_template(), encoding="utf-8")
    print(f"✅ 已生成配置：{cfg_path}")
    return cfg_path
