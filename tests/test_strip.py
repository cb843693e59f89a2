from csv_localize.strip import strip_comments


def test_line_and_block_comments_removed():
    src = 'a = 1; // Localize(@"hidden")\n/* Localize(@"block")\n still */ b = 2;\n'
    out = strip_comments(src)
    assert "hidden" not in out
    assert "block" not in out
    assert "a = 1; " in out
    assert " b = 2;" in out


def test_comment_markers_inside_literals_are_kept():
    src = 'NSString *u = @"http://example.com/*path*/";  // trailing\n'
    out = strip_comments(src)
    assert '@"http://example.com/*path*/";' in out
    assert "trailing" not in out


def test_escaped_quote_does_not_end_literal():
    src = 'x = "say \\"//not a comment\\"";\n'
    assert strip_comments(src) == src


def test_char_literal_with_slash():
    src = "c = '/'; // gone\n"
    assert strip_comments(src) == "c = '/'; \n"


def test_crlf_line_comment():
    src = "a; // one\r\nb; // two\r\n"
    assert strip_comments(src) == "a; \r\nb; \r\n"


def test_unterminated_block_comment_is_tolerated():
    src = "a; /* never closed\nLocalize(@\"k\")"
    # 不抛异常；未闭合的块注释匹配不到，原样保留
    assert strip_comments(src) == src


def test_strip_literals_mode():
    src = 'f(@"x", \'y\'); // c\n'
    assert strip_comments(src, strip_literals=True) == "f(@, ); \n"


def test_empty_text():
    assert strip_comments("") == ""


def test_double_quoted_literal_may_span_lines():
    src = '"a" = "line one\nsee http://x.y";\n"b" = "B"; // gone\n'
    assert strip_comments(src) == '"a" = "line one\nsee http://x.y";\n"b" = "B"; \n'
