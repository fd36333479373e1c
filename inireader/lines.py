from __future__ import annotations

import enum
from typing import Tuple

from .text import is_comment_line


class LineKind(enum.Enum):
    BLANK = "blank"
    COMMENT = "comment"
    SECTION = "section"
    PAIR = "pair"
    INVALID = "invalid"   # не пустая, не комментарий, не секция и без '='


def classify_line(line: str, start_prefixes: str) -> LineKind:
    """
    Классифицирует физическую строку (хвостовые пробелы уже сняты).

    Ведущие пробелы не снимаются: классификация идёт по первому символу строки.
    Порядок проверок важен: комментарий проверяется раньше секции, поэтому
    префикс '[' в списке комментариев запрещён настройками.
    """
    if not line:
        return LineKind.BLANK
    if is_comment_line(line, start_prefixes):
        return LineKind.COMMENT
    if line[0] == "[":
        return LineKind.SECTION
    if "=" in line:
        return LineKind.PAIR
    return LineKind.INVALID


def split_pair(line: str) -> Tuple[str, str]:
    """Делит строку по ПЕРВОМУ '=': всё до — сырой ключ, всё после — сырое значение."""
    key, _, value = line.partition("=")
    return key, value


__all__ = ["LineKind", "classify_line", "split_pair"]
