import time

from csv_localize.extract import KeyExtractor, compile_localize_pattern, unescape_literal
from csv_localize.strip import strip_comments
from csv_localize.table import TranslationTable


def test_scenario_first_literal_is_the_key():
    src = 'Localize(@"greeting");\nlabel.text = Localize(@"farewell", @"ignored-arg");\n'
    assert KeyExtractor("Localize").find_keys(src) == ["greeting", "farewell"]


def test_whitespace_newlines_and_identifier_args():
    src = 'Localize (\n   @"count"  ,\n  n, @"x" , value.count )'
    assert KeyExtractor("Localize").find_keys(src) == ["count"]


def test_malformed_calls_do_not_match():
    src = 'Localize(); Localize(name); Localize(@"a" + b); Localize("plain")'
    assert KeyExtractor("Localize").find_keys(src) == []


def test_function_name_needs_word_boundary():
    src = 'ZZLocalize(@"prefixed"); MyLocalize(@"custom");'
    assert KeyExtractor("Localize").find_keys(src) == []
    assert KeyExtractor("ZZLocalize").find_keys(src) == ["prefixed"]


def test_function_name_is_escaped():
    p = compile_localize_pattern("L.t")
    assert p.search('L.t(@"a")')
    assert not p.search('Lxt(@"a")')


def test_escaped_quotes_in_key():
    src = 'Localize(@"Say \\"hi\\"")'
    assert KeyExtractor("Localize").find_keys(src) == ['Say "hi"']
    assert unescape_literal("it\\'s \\n") == "it's \\n"


def test_comment_blindness():
    src = strip_comments('// Localize(@"line")\n/* Localize(@"block") */\nLocalize(@"real");\n')
    assert KeyExtractor("Localize").find_keys(src) == ["real"]


def test_extract_into_inserts_empty_rows_and_keeps_existing():
    table = TranslationTable(languages=["en", "ru"], rows={"greeting": ["Hello", "Привет"]})
    keys = KeyExtractor("Localize").extract_into('Localize(@"greeting") Localize(@"goodbye") Localize(@"")', table)

    assert keys == ["greeting", "goodbye", ""]
    assert table.rows["greeting"] == ["Hello", "Привет"]
    assert table.rows["goodbye"] == ["", ""]
    # 空 key 不做特殊处理
    assert table.rows[""] == ["", ""]


def test_reserved_key_never_becomes_a_row():
    table = TranslationTable(languages=["en"])
    KeyExtractor("Localize").extract_into('Localize(@"language")', table)
    assert "language" not in table
    assert table.languages == ["en"]


def test_unclosed_call_with_empty_args_finishes_quickly():
    src = 'Localize(@"a"' + " ,  " * 40 + ";\nLocalize(@\"b\");\n"
    start = time.monotonic()
    keys = KeyExtractor("Localize").find_keys(src)
    assert time.monotonic() - start < 2.0
    assert keys == ["b"]


def test_empty_argument_is_not_an_identifier():
    assert KeyExtractor("Localize").find_keys('Localize(@"a", , n)') == []
