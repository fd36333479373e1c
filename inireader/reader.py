from __future__ import annotations

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Tuple

from .engine import ParseResult, parse_lines, parse_text
from .errors import ErrorKind, IniParseError, ParseIssue
from .model import ConfigStore, Field
from .options import DEFAULT_OPTIONS, ReaderOptions

logger = logging.getLogger(__name__)


class IniReader:
    """
    Результат чтения INI-документа с типизированными аксессорами.

    Ошибки разбора не бросаются: перед доверием к значениям проверьте
    success() или errors. Неуспешный reader всё равно отвечает на запросы
    данными, разобранными до первой ошибки.
    """

    def __init__(self, result: ParseResult, *, source: Optional[str] = None):
        self._result = result
        self.source = source

    # -------------------------------------------------------- constructors

    @classmethod
    def from_lines(cls, lines: Iterable[str], options: ReaderOptions = DEFAULT_OPTIONS) -> IniReader:
        return cls(parse_lines(lines, options))

    @classmethod
    def from_string(cls, text: str, options: ReaderOptions = DEFAULT_OPTIONS) -> IniReader:
        return cls(parse_text(text, options))

    @classmethod
    def from_path(cls, path: Path | str, options: ReaderOptions = DEFAULT_OPTIONS) -> IniReader:
        path = Path(path)
        try:
            f = path.open(encoding="utf-8", errors="ignore")
        except OSError as e:
            logger.debug("cannot open %s: %s", path, e)
            issue = ParseIssue(line=0, kind=ErrorKind.NO_SUCH_FILE, text=str(path))
            return cls(ParseResult(store=ConfigStore(), issues=(issue,)), source=str(path))
        with f:
            return cls(parse_lines(f, options), source=str(path))

    # ------------------------------------------------------------- status

    def success(self) -> bool:
        return self._result.ok

    @property
    def error_kind(self) -> ErrorKind:
        return self._result.error

    @property
    def errors(self) -> Tuple[ParseIssue, ...]:
        return self._result.issues

    @property
    def lines_read(self) -> int:
        return self._result.lines_read

    def get_error(self) -> str:
        """Текст первой ошибки; при успехе — "No error has occurred."."""
        return self._result.error.message

    def raise_for_error(self) -> None:
        if not self._result.ok:
            raise IniParseError(self._result.issues, source=self.source)

    # ---------------------------------------------------------- accessors

    @property
    def store(self) -> ConfigStore:
        return self._result.store

    def get(self, section: str, key: str, default: str) -> str:
        return self.store.get(section, key, default)

    def get_string(self, section: str, key: str, default: str) -> str:
        return self.store.get_string(section, key, default)

    def get_int(self, section: str, key: str, default: int) -> int:
        return self.store.get_int(section, key, default)

    def get_long(self, section: str, key: str, default: int) -> int:
        return self.store.get_long(section, key, default)

    def get_float(self, section: str, key: str, default: float) -> float:
        return self.store.get_float(section, key, default)

    def get_bool(self, section: str, key: str, default: bool) -> bool:
        return self.store.get_bool(section, key, default)

    def get_section_names(self) -> FrozenSet[str]:
        return self.store.get_section_names()

    def get_section_fields(self, section: str) -> Optional[FrozenSet[Field]]:
        return self.store.get_section_fields(section)

    def __repr__(self) -> str:
        return f"IniReader(source={self.source!r}, ok={self.success()}, sections={len(self.get_section_names())})"


def read_file(path: Path | str, options: ReaderOptions = DEFAULT_OPTIONS) -> IniReader:
    return IniReader.from_path(path, options)


def read_string(text: str, options: ReaderOptions = DEFAULT_OPTIONS) -> IniReader:
    return IniReader.from_string(text, options)


__all__ = ["IniReader", "read_file", "read_string"]
