from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import ErrorKind
from .text import rstrip, trim


@dataclass(frozen=True)
class HeaderResult:
    name: Optional[str] = None
    error: ErrorKind = ErrorKind.NONE

    @property
    def ok(self) -> bool:
        return self.error is ErrorKind.NONE


def parse_section_header(line: str) -> HeaderResult:
    """
    Разбирает строку вида ``[name]``.

    Имя — всё между '[' и первым ']', с обрезанными хвостовыми пробелами
    (ведущие сохраняются). Текст после ']' игнорируется.
    Проверка «предыдущая секция не пуста» выполняется движком до вызова.
    """
    closing = line.find("]")
    if closing == -1:
        return HeaderResult(error=ErrorKind.NO_CLOSING_BRACKET_FOR_SECTION)
    name = rstrip(line[1:closing])
    if not trim(name):
        return HeaderResult(error=ErrorKind.NO_NAME_FOR_SECTION)
    return HeaderResult(name=name)


__all__ = ["HeaderResult", "parse_section_header"]
