from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple, TypeVar

from .errors import ValueFormatError

_T = TypeVar("_T")

INT_MIN, INT_MAX = -(2 ** 31), 2 ** 31 - 1
LONG_MIN, LONG_MAX = -(2 ** 63), 2 ** 63 - 1

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}

# только ASCII-литералы в десятичной записи, без "_" и пробелов
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


@dataclass(frozen=True, order=True)
class Field:
    """Пара ключ-значение внутри секции. Ключ регистрозависимый."""
    key: str
    value: str

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


@dataclass(frozen=True)
class Section:
    name: str
    fields: Tuple[Field, ...] = ()
    _index: Mapping[str, Field] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: Dict[str, Field] = {}
        for f in self.fields:
            index.setdefault(f.key, f)
        object.__setattr__(self, "_index", MappingProxyType(index))

    def lookup(self, key: str) -> Optional[Field]:
        return self._index.get(key)

    def keys(self) -> List[str]:
        return [f.key for f in self.fields]

    def __len__(self) -> int:
        return len(self.fields)


class ConfigStore:
    """
    Результат разбора: секции и их поля плюс отдельное множество всех имён секций
    (туда попадают и секции, так и не получившие ни одного поля).

    Неизменяем после построения; все методы только читают состояние,
    поэтому экземпляр можно разделять между потоками.
    """

    def __init__(self, sections: Mapping[str, Section] | None = None, names: FrozenSet[str] | None = None):
        self._sections: Mapping[str, Section] = MappingProxyType(dict(sections or {}))
        self._names: FrozenSet[str] = frozenset(names if names is not None else self._sections.keys())

    # ------------------------------------------------------------------ raw

    def get(self, section: str, key: str, default: str) -> str:
        sec = self._sections.get(section)
        if sec is None:
            return default
        found = sec.lookup(key)
        return default if found is None else found.value

    def has_section(self, section: str) -> bool:
        return section in self._names

    def get_section_names(self) -> FrozenSet[str]:
        return self._names

    def get_section_fields(self, section: str) -> Optional[FrozenSet[Field]]:
        """
        Поля секции или None, если такой секции в файле нет.
        Для известной, но пустой секции возвращается пустое множество.
        """
        sec = self._sections.get(section)
        if sec is not None:
            return frozenset(sec.fields)
        if section in self._names:
            return frozenset()
        return None

    def section(self, name: str) -> Optional[Section]:
        return self._sections.get(name)

    def __iter__(self) -> Iterator[Section]:
        return iter(self._sections.values())

    def __len__(self) -> int:
        return len(self._sections)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        out: Dict[str, Dict[str, str]] = {name: {} for name in sorted(self._names)}
        for sec in self._sections.values():
            out[sec.name] = {f.key: f.value for f in sec.fields}
        return out

    # ---------------------------------------------------------------- typed

    def _convert(self, section: str, key: str, default: _T, conv: Callable[[str], _T], target: str) -> _T:
        raw = self.get(section, key, "")
        # пустая строка означает «не найдено» — отдаём дефолт
        if not raw:
            return default
        try:
            return conv(raw)
        except (ValueError, OverflowError) as e:
            raise ValueFormatError(section, key, raw, target) from e

    def get_string(self, section: str, key: str, default: str) -> str:
        return self._convert(section, key, default, str, "str")

    def get_int(self, section: str, key: str, default: int) -> int:
        """Знаковое 32-битное целое; выход за диапазон — ошибка формата."""
        return self._convert(section, key, default, _ranged_int(INT_MIN, INT_MAX), "int")

    def get_long(self, section: str, key: str, default: int) -> int:
        """Знаковое 64-битное целое."""
        return self._convert(section, key, default, _ranged_int(LONG_MIN, LONG_MAX), "long")

    def get_float(self, section: str, key: str, default: float) -> float:
        return self._convert(section, key, default, _strict_float, "float")

    def get_bool(self, section: str, key: str, default: bool) -> bool:
        """
        true/yes/on/1 → True, false/no/off/0 → False (без учёта регистра);
        всё остальное, включая отсутствие значения, → default.
        """
        parsed = parse_bool(self.get(section, key, ""))
        return default if parsed is None else parsed


def parse_bool(raw: str) -> Optional[bool]:
    """Слово из наборов true/false без учёта регистра; None, если не распознано."""
    low = raw.lower()
    if low in _TRUE:
        return True
    if low in _FALSE:
        return False
    return None


def _ranged_int(lo: int, hi: int) -> Callable[[str], int]:
    def conv(raw: str) -> int:
        if not _INT_RE.fullmatch(raw):
            raise ValueError(f"not a decimal integer: {raw!r}")
        n = int(raw)
        if n < lo or n > hi:
            raise OverflowError(f"{n} is out of range [{lo}, {hi}]")
        return n
    return conv


def _strict_float(raw: str) -> float:
    if not _FLOAT_RE.fullmatch(raw):
        raise ValueError(f"not a decimal number: {raw!r}")
    return float(raw)


__all__ = ["Field", "Section", "ConfigStore", "parse_bool", "INT_MIN", "INT_MAX", "LONG_MIN", "LONG_MAX"]
