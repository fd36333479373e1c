"""
Тесты движка разбора: последовательность строк → ConfigStore + ошибки.
"""

import pytest

from inireader import ErrorKind, IniParseError, ReaderOptions, parse_lines, parse_text
from inireader.engine import ParseState, finish, step
from inireader.model import Field

from tests.infrastructure import ini, parse


def test_minimal_document():
    r = parse("""
        [S]
        k=v
    """)
    assert r.success()
    assert r.get_error() == "No error has occurred."
    assert r.get_string("S", "k", "x") == "v"
    assert r.get_section_names() == {"S"}


def test_empty_input_is_success():
    r = parse("")
    assert r.success()
    assert r.get_section_names() == frozenset()


def test_blank_lines_and_comments_are_ignored():
    r = parse("""
        ; leading comment
        # another one

        [S]
        ; inside
        k = v ; trailing

    """)
    assert r.success()
    assert r.get_section_fields("S") == {Field("k", "v")}


def test_section_followed_by_section_is_empty_section():
    r = parse("""
        [A]
        [B]
        k=v
    """)
    assert not r.success()
    assert r.error_kind is ErrorKind.EMPTY_SECTION
    assert r.get_error() == "Section has no key-value pairs."
    assert r.errors[0].line == 2
    # разбор остановился на строке 2: секция B не зарегистрирована
    assert r.get_section_names() == {"A"}
    assert r.lines_read == 2


def test_key_before_any_section():
    r = parse("""
        k=v
        [S]
        x=1
    """)
    assert r.error_kind is ErrorKind.KEY_OUTSIDE_SECTION
    assert r.errors[0].line == 1
    assert r.get_section_names() == frozenset()


def test_line_without_equals_sign():
    r = parse("""
        [S]
        justakey
    """)
    assert r.error_kind is ErrorKind.NO_VALUE_FOR_KEY
    assert r.errors[0].line == 2
    assert r.errors[0].text == "justakey"


def test_quoted_and_unquoted_comment_characters():
    r = parse("""
        [S]
        q="a;b"
        p=a;b
    """)
    assert r.success()
    assert r.get_string("S", "q", "") == "a;b"
    assert r.get_string("S", "p", "") == "a"


def test_unterminated_quote():
    r = parse("""
        [S]
        k="abc
    """)
    assert r.error_kind is ErrorKind.NO_CLOSING_QUOTATION_FOR_VALUE


def test_missing_bracket():
    r = parse("""
        [Sec
        k=v
    """)
    assert r.error_kind is ErrorKind.NO_CLOSING_BRACKET_FOR_SECTION
    assert r.errors[0].line == 1


def test_store_keeps_everything_before_failing_line():
    r = parse("""
        [A]
        k=v
        [B]
        broken line
        m=1
    """)
    assert not r.success()
    assert r.errors[0].line == 4
    assert r.get_string("A", "k", "") == "v"
    assert r.get_section_names() == {"A", "B"}
    assert r.get_string("B", "m", "absent") == "absent"


def test_indented_comment_is_not_a_comment():
    r = parse("[S]\nk=v\n  ; note\n")
    assert r.error_kind is ErrorKind.NO_VALUE_FOR_KEY
    assert r.errors[0].line == 3


def test_indented_pair_is_accepted():
    r = parse("[S]\n   k = v\n")
    assert r.get_string("S", "k", "") == "v"


def test_value_may_contain_equals_sign():
    r = parse("[S]\nurl=http://h/?a=1&b=2\n")
    assert r.get_string("S", "url", "") == "http://h/?a=1&b=2"


def test_tabs_are_not_whitespace_for_trimming():
    r = parse("[S]\nk=v\t\n")
    assert r.success()
    assert r.get("S", "k", "") == "v\t"


def test_crlf_line_endings():
    r = parse_text("[S]\r\nk=v\r\n")
    assert r.ok
    assert r.store.get("S", "k", "") == "v"


def test_section_can_be_reopened():
    r = parse("""
        [A]
        k=1
        [B]
        m=2
        [A]
        k2=3
    """)
    assert r.success()
    assert r.get_section_fields("A") == {Field("k", "1"), Field("k2", "3")}


def test_blank_names_are_errors():
    assert parse("[   ]\nk=v\n").error_kind is ErrorKind.NO_NAME_FOR_SECTION
    assert parse("[S]\n = v\n").error_kind is ErrorKind.NO_NAME_FOR_KEY
    assert parse("[S]\nk =\n").error_kind is ErrorKind.NO_VALUE_FOR_KEY


# --------------------------------------------------------------------------
# Пустая последняя секция
# --------------------------------------------------------------------------

def test_trailing_empty_section_is_flagged_by_default():
    r = parse("""
        [A]
        k=v
        [B]
    """)
    assert r.error_kind is ErrorKind.EMPTY_SECTION
    # указывается строка заголовка пустой секции
    assert r.errors[0].line == 3
    assert r.errors[0].text == "[B]"
    assert r.get_section_names() == {"A", "B"}


def test_trailing_empty_section_can_be_allowed():
    r = parse("""
        [A]
        k=v
        [B]
    """, check_trailing_empty=False)
    assert r.success()
    assert r.get_section_names() == {"A", "B"}
    assert r.get_section_fields("B") == frozenset()


def test_single_empty_section():
    r = parse("[Only]\n")
    assert r.error_kind is ErrorKind.EMPTY_SECTION
    assert r.errors[0].line == 1


# --------------------------------------------------------------------------
# Повторяющиеся ключи
# --------------------------------------------------------------------------

DUP = """
    [S]
    k=1
    k=2
"""


def test_duplicate_key_first_write_wins_by_default():
    r = parse(DUP)
    assert r.success()
    assert r.get_int("S", "k", 0) == 1
    assert r.get_section_fields("S") == {Field("k", "1")}


def test_duplicate_key_last_write_wins_when_configured():
    r = parse(DUP, duplicate_keys="last")
    assert r.get_int("S", "k", 0) == 2
    assert r.get_section_fields("S") == {Field("k", "2")}


# --------------------------------------------------------------------------
# Настройки комментариев
# --------------------------------------------------------------------------

def test_comments_disabled_turn_prefix_into_key():
    r = parse("[S]\n;k=v\n", allow_comments=False)
    assert r.success()
    assert r.get_string("S", ";k", "") == "v"


def test_inline_comments_disabled():
    r = parse("[S]\nk=a ; b\n", allow_inline_comments=False)
    assert r.get_string("S", "k", "") == "a ; b"


def test_custom_inline_prefixes():
    r = parse("[S]\nk=a#b\nm=c;d\n", inline_comment_prefixes="#")
    assert r.get_string("S", "k", "") == "a"
    assert r.get_string("S", "m", "") == "c;d"


# --------------------------------------------------------------------------
# Режим сбора всех ошибок
# --------------------------------------------------------------------------

MESSY = """
    k=0
    [A]
    [B]
    x=1
    novalue
    [C
    y=2
    [D]
    z=3
"""


def test_collect_all_errors():
    r = parse(MESSY, stop_on_first_error=False)
    assert not r.success()
    assert [(i.line, i.kind) for i in r.errors] == [
        (1, ErrorKind.KEY_OUTSIDE_SECTION),
        (3, ErrorKind.EMPTY_SECTION),
        (5, ErrorKind.NO_VALUE_FOR_KEY),
        (6, ErrorKind.NO_CLOSING_BRACKET_FOR_SECTION),
    ]
    # первая ошибка определяет get_error()
    assert r.get_error() == "Key-value pair was found outside a section."
    assert r.get_section_names() == {"A", "B", "D"}
    assert r.get_string("B", "x", "") == "1"
    assert r.get_string("D", "z", "") == "3"
    # поля после битого заголовка пропускаются
    assert r.get_string("D", "y", "none") == "none"
    assert r.lines_read == 9


def test_stop_on_first_error_reports_single_issue():
    r = parse(MESSY)
    assert len(r.errors) == 1
    assert r.lines_read == 1


def test_collect_all_flags_trailing_empty_after_other_errors():
    r = parse("[A]\nbad\n[B]\n", stop_on_first_error=False)
    assert [i.kind for i in r.errors] == [ErrorKind.NO_VALUE_FOR_KEY, ErrorKind.EMPTY_SECTION, ErrorKind.EMPTY_SECTION]


# --------------------------------------------------------------------------
# Низкоуровневый API
# --------------------------------------------------------------------------

def test_state_machine_steps():
    state = ParseState()
    step(state, "[S]\n")
    assert state.in_section and state.current == "S"
    assert state.current_is_empty()

    step(state, "k = v\n")
    assert not state.current_is_empty()
    assert state.line_num == 2

    result = finish(state)
    assert result.ok
    assert result.store.get("S", "k", "") == "v"


def test_parse_lines_accepts_any_iterable():
    res = parse_lines(iter(["[S]", "k=v"]))
    assert res.ok
    assert res.lines_read == 2


def test_strict_parse_raises():
    with pytest.raises(IniParseError) as exc:
        parse_text(ini("""
            [S]
            oops
        """), strict=True)
    assert exc.value.kind is ErrorKind.NO_VALUE_FOR_KEY
    assert "line 2" in str(exc.value)


def test_options_are_honored_by_parse_text():
    res = parse_text("[A]\n", ReaderOptions(check_trailing_empty=False))
    assert res.ok
