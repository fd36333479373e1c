"""
Виды ошибок разбора и исключения пакета.

Ошибки разбора не бросаются, а копятся в ParseIssue: вызывающий смотрит
IniReader.success() и get_error(). Исключения возникают только по явному
запросу (strict-разбор, raise_for_error), при неудачном приведении типа
в аксессорах и при некорректных настройках.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Tuple


class ErrorKind(enum.Enum):
    NONE = "None"
    NO_SUCH_FILE = "NoSuchFile"
    NO_CLOSING_BRACKET_FOR_SECTION = "NoClosingBracketForSection"
    EMPTY_SECTION = "EmptySection"
    KEY_OUTSIDE_SECTION = "KeyOutsideSection"
    NO_VALUE_FOR_KEY = "NoValueForKey"
    NO_CLOSING_QUOTATION_FOR_VALUE = "NoClosingQuotationForValue"
    NO_NAME_FOR_SECTION = "NoNameForSection"
    NO_NAME_FOR_KEY = "NoNameForKey"
    INVALID_VALUE_FORMAT = "InvalidValueFormat"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    ErrorKind.NONE: "No error has occurred.",
    ErrorKind.NO_SUCH_FILE: "File does not exist.",
    ErrorKind.NO_CLOSING_BRACKET_FOR_SECTION: "No closing bracket found for section.",
    ErrorKind.EMPTY_SECTION: "Section has no key-value pairs.",
    ErrorKind.KEY_OUTSIDE_SECTION: "Key-value pair was found outside a section.",
    ErrorKind.NO_VALUE_FOR_KEY: "No value found for key.",
    ErrorKind.NO_CLOSING_QUOTATION_FOR_VALUE: "No closing double quotes for value.",
    ErrorKind.NO_NAME_FOR_SECTION: "Section has no name.",
    ErrorKind.NO_NAME_FOR_KEY: "Key-value pair has no key.",
    ErrorKind.INVALID_VALUE_FORMAT: "Value cannot be converted to the requested type.",
}


@dataclass(frozen=True)
class ParseIssue:
    """Зафиксированная ошибка: номер строки с единицы (0 — до чтения первой строки) и её вид."""
    line: int
    kind: ErrorKind
    text: str = ""  # сама строка, уже без хвостовых пробелов

    @property
    def message(self) -> str:
        return self.kind.message

    def __str__(self) -> str:
        return f"line {self.line}: {self.kind.message}"


class IniUserError(Exception):
    """Общий предок исключений, текст которых CLI печатает без трейсбека."""
    pass


class IniParseError(IniUserError):
    """Разбор завершился с ошибками; все они лежат в issues."""
    def __init__(self, issues: Iterable[ParseIssue], source: str | None = None):
        self.issues: Tuple[ParseIssue, ...] = tuple(issues)
        self.source = source
        head = f"{source}: " if source else ""
        details = "; ".join(str(i) for i in self.issues) or ErrorKind.NONE.message
        super().__init__(head + details)

    @property
    def kind(self) -> ErrorKind:
        return self.issues[0].kind if self.issues else ErrorKind.NONE


class ValueFormatError(IniUserError, ValueError):
    """Значение найдено, но не приводится к запрошенному типу."""
    kind = ErrorKind.INVALID_VALUE_FORMAT

    def __init__(self, section: str, key: str, value: str, target: str):
        self.section = section
        self.key = key
        self.value = value
        self.target = target
        super().__init__(
            f"[{section}] {key}: cannot convert {value!r} to {target}"
        )


class OptionsError(IniUserError, ValueError):
    """Некорректные настройки: плохие префиксы, лишние ключи, нечитаемый YAML."""
    pass


__all__ = [
    "ErrorKind", "ParseIssue",
    "IniUserError", "IniParseError", "ValueFormatError", "OptionsError",
]
