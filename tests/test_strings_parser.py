from pathlib import Path

from conftest import write_text

from csv_localize.strings_parser import (
    discover_languages,
    iter_strings_files,
    language_index_for_dir,
    merge_strings_text,
    parse_strings_text,
)
from csv_localize.strip import strip_comments
from csv_localize.table import TranslationTable


def test_scenario_escaped_value_in_en_lproj(tmp_path: Path):
    write_text(tmp_path / "en.lproj" / "Localizable.strings", '"title" = "Hi \\"there\\"";\n')
    languages = discover_languages(tmp_path)
    assert languages == ["en"]

    table = TranslationTable(languages=languages)
    files = iter_strings_files(tmp_path, languages)
    assert [(p.name, i) for p, i in files] == [("Localizable.strings", 0)]

    n = merge_strings_text(files[0][0].read_text(encoding="utf-8"), table, files[0][1])
    assert n == 1
    assert table.rows["title"] == ['Hi "there"']


def test_parse_handles_comments_spacing_and_single_quotes():
    text = strip_comments(
        '/* header */\n'
        '"a" = "A";  // trailing\n'
        '"b"\n   =\n   "it\\\'s";\n'
        '// "c" = "commented";\n'
        '"url" = "http://x.y/*z*/";\n'
    )
    assert parse_strings_text(text) == [("a", "A"), ("b", "it's"), ("url", "http://x.y/*z*/")]


def test_empty_key_or_value_is_skipped():
    table = TranslationTable(languages=["en", "ru"])
    n = merge_strings_text('"" = "x"; "k" = ""; "ok" = "v";', table, 1)
    assert n == 1
    assert table.rows == {"ok": ["", "v"]}


def test_merge_overwrites_only_its_column():
    table = TranslationTable(languages=["en", "ru"], rows={"k": ["Hello", ""]})
    merge_strings_text('"k" = "Привет";', table, 1)
    assert table.rows["k"] == ["Hello", "Привет"]


def test_discover_languages_puts_en_first_and_dedupes(tmp_path: Path):
    for d in ("de.lproj", "en.lproj", "ru.lproj", "sub/en.lproj", "notalang"):
        (tmp_path / d).mkdir(parents=True)
    assert discover_languages(tmp_path) == ["en", "de", "ru"]


def test_language_index_for_dir():
    langs = ["en", "zh", "zh-Hans"]
    assert language_index_for_dir("en.lproj", langs) == 0
    assert language_index_for_dir("zh-Hans.lproj", langs) == 2
    assert language_index_for_dir("zh-Hant.lproj", langs) == 1
    assert language_index_for_dir("fr.lproj", langs) is None
    assert language_index_for_dir("en", langs) is None


def test_unknown_language_dir_is_skipped(tmp_path: Path):
    write_text(tmp_path / "en.lproj" / "A.strings", '"k" = "v";')
    write_text(tmp_path / "fr.lproj" / "A.strings", '"k" = "v";')
    write_text(tmp_path / "loose" / "B.strings", '"k" = "v";')
    files = iter_strings_files(tmp_path, ["en"])
    assert [p.parent.name for p, _ in files] == ["en.lproj"]


def test_multiline_value_with_comment_markers_survives():
    text = strip_comments('"a" = "line one\nsee http://x.y /* not a comment */";\n"b" = "B";\n')
    assert parse_strings_text(text) == [
        ("a", "line one\nsee http://x.y /* not a comment */"),
        ("b", "B"),
    ]


def test_language_prefix_needs_separator():
    langs = ["en", "pt"]
    assert language_index_for_dir("english.lproj", langs) is None
    assert language_index_for_dir("en-GB.lproj", langs) == 0
    assert language_index_for_dir("en_US.lproj", langs) == 0
    assert language_index_for_dir("pt-BR.lproj", langs) == 1
    assert language_index_for_dir("ptx.lproj", langs) is None
