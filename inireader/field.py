from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import ErrorKind
from .model import Field
from .text import rstrip, strip_inline_comment, trim

_QUOTE = '"'


@dataclass(frozen=True)
class ValueResult:
    value: Optional[str] = None
    error: ErrorKind = ErrorKind.NONE


@dataclass(frozen=True)
class FieldResult:
    field: Optional[Field] = None
    error: ErrorKind = ErrorKind.NONE

    @property
    def ok(self) -> bool:
        return self.error is ErrorKind.NONE


def parse_value(raw: str, inline_prefixes: str) -> ValueResult:
    """
    Значение из правой части ``key = value``.

    • пустое после trim → NoValueForKey;
    • в кавычках: берётся всё между первой и ПОСЛЕДНЕЙ кавычкой, хвостовые
      пробелы внутри снимаются, ведущие сохраняются; инлайн-комментарии
      внутри кавычек не распознаются;
    • без кавычек: срезается инлайн-комментарий.
    """
    val = trim(raw)
    if not val:
        return ValueResult(error=ErrorKind.NO_VALUE_FOR_KEY)

    if val[0] == _QUOTE:
        end = val.rfind(_QUOTE)
        if end <= 0:
            return ValueResult(error=ErrorKind.NO_CLOSING_QUOTATION_FOR_VALUE)
        return ValueResult(value=rstrip(val[1:end]))

    return ValueResult(value=strip_inline_comment(val, inline_prefixes))


def parse_field(raw_key: str, raw_value: str, *, in_section: bool, inline_prefixes: str) -> FieldResult:
    if not in_section:
        return FieldResult(error=ErrorKind.KEY_OUTSIDE_SECTION)

    key = trim(raw_key)
    # значение проверяем раньше ключа: "=" без обеих частей — это NoValueForKey
    parsed = parse_value(raw_value, inline_prefixes)
    if parsed.error is not ErrorKind.NONE:
        return FieldResult(error=parsed.error)
    if not key:
        return FieldResult(error=ErrorKind.NO_NAME_FOR_KEY)

    return FieldResult(field=Field(key=key, value=parsed.value or ""))


__all__ = ["ValueResult", "FieldResult", "parse_value", "parse_field"]
