"""Нормализация строк и снятие комментариев."""

from __future__ import annotations

# Только ASCII-пробел: табуляции и прочие пробельные символы значимы.
_SPACE = " "


def lstrip(s: str) -> str:
    return s.lstrip(_SPACE)


def rstrip(s: str) -> str:
    return s.rstrip(_SPACE)


def trim(s: str) -> str:
    """Снимает ведущие и хвостовые пробелы. Идемпотентна: trim(trim(s)) == trim(s)."""
    return s.strip(_SPACE)


# ---------------------------------------------------------------------------
# Комментарии
# ---------------------------------------------------------------------------

def is_comment_line(line: str, prefixes: str) -> bool:
    """Строка целиком комментарий, если её первый символ — один из prefixes."""
    return bool(line) and bool(prefixes) and line[0] in prefixes


def strip_inline_comment(value: str, prefixes: str) -> str:
    """
    Обрезает значение по первому встретившемуся символу инлайн-комментария
    и снимает хвостовые пробелы у остатка. Применяется только к значениям
    без кавычек.
    """
    if not prefixes:
        return value
    for i, ch in enumerate(value):
        if ch in prefixes:
            return rstrip(value[:i])
    return value


__all__ = ["lstrip", "rstrip", "trim", "is_comment_line", "strip_inline_comment"]
