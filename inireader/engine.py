"""
Однопроходный построчный движок разбора INI.

Состояние разбора (номер строки, текущая секция, флаг «внутри секции»,
накопленные ошибки) вынесено в явный ParseState и передаётся через цикл;
наружу отдаётся только финальный неизменяемый ConfigStore.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import ErrorKind, IniParseError, ParseIssue
from .field import parse_field
from .lines import LineKind, classify_line, split_pair
from .model import ConfigStore, Field, Section
from .options import DEFAULT_OPTIONS, ReaderOptions
from .section import parse_section_header
from .text import rstrip

logger = logging.getLogger(__name__)


@dataclass
class ParseState:
    line_num: int = 0
    current: Optional[str] = None
    in_section: bool = False
    # после битого заголовка поля игнорируются до следующего заголовка
    skipping: bool = False
    section_line: int = 0
    section_text: str = ""
    issues: List[ParseIssue] = field(default_factory=list)
    # имя секции → {ключ → поле}; порядок вставки сохраняется
    fields: Dict[str, Dict[str, Field]] = field(default_factory=dict)
    names: Dict[str, None] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return bool(self.issues)

    def current_is_empty(self) -> bool:
        return self.current is not None and not self.fields.get(self.current)

    def record(self, kind: ErrorKind, text: str = "", line: Optional[int] = None) -> None:
        issue = ParseIssue(line=self.line_num if line is None else line, kind=kind, text=text)
        logger.debug("issue %s", issue)
        self.issues.append(issue)

    def open_section(self, name: str, text: str = "") -> None:
        logger.debug("line %d: section [%s]", self.line_num, name)
        self.current = name
        self.in_section = True
        self.skipping = False
        self.section_line = self.line_num
        self.section_text = text
        # имя фиксируется сразу, даже если полей у секции так и не будет
        self.names.setdefault(name, None)

    def drop_section(self) -> None:
        self.current = None
        self.in_section = False
        self.skipping = True

    def add_field(self, f: Field, policy: str) -> None:
        assert self.current is not None
        bucket = self.fields.setdefault(self.current, {})
        if f.key in bucket and policy == "first":
            logger.debug("line %d: duplicate key %r ignored", self.line_num, f.key)
            return
        bucket[f.key] = f

    def build_store(self) -> ConfigStore:
        sections = {
            name: Section(name=name, fields=tuple(bucket.values()))
            for name, bucket in self.fields.items()
        }
        return ConfigStore(sections, frozenset(self.names))


@dataclass(frozen=True)
class ParseResult:
    store: ConfigStore
    issues: Tuple[ParseIssue, ...] = ()
    lines_read: int = 0

    @property
    def ok(self) -> bool:
        return not self.issues

    @property
    def error(self) -> ErrorKind:
        return self.issues[0].kind if self.issues else ErrorKind.NONE


def _strip_eol(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def _handle_section(state: ParseState, line: str, options: ReaderOptions) -> None:
    # перед новым заголовком предыдущая секция обязана иметь хотя бы одно поле
    if state.current_is_empty():
        state.record(ErrorKind.EMPTY_SECTION, line)
        if options.stop_on_first_error:
            return

    header = parse_section_header(line)
    if not header.ok:
        state.record(header.error, line)
        state.drop_section()
        return
    assert header.name is not None
    state.open_section(header.name, line)


def _handle_pair(state: ParseState, line: str, options: ReaderOptions) -> None:
    if state.skipping:
        return
    raw_key, raw_value = split_pair(line)
    res = parse_field(
        raw_key,
        raw_value,
        in_section=state.in_section,
        inline_prefixes=options.inline_prefixes,
    )
    if not res.ok:
        state.record(res.error, line)
        return
    assert res.field is not None
    state.add_field(res.field, options.duplicate_keys)


def step(state: ParseState, raw_line: str, options: ReaderOptions = DEFAULT_OPTIONS) -> None:
    """Один шаг автомата: нормализация → классификация → диспетчеризация."""
    state.line_num += 1
    line = rstrip(_strip_eol(raw_line))
    kind = classify_line(line, options.start_prefixes)

    if kind in (LineKind.BLANK, LineKind.COMMENT):
        return
    if kind is LineKind.SECTION:
        _handle_section(state, line, options)
    elif kind is LineKind.PAIR:
        _handle_pair(state, line, options)
    elif not state.skipping:
        state.record(ErrorKind.NO_VALUE_FOR_KEY, line)


def finish(state: ParseState, options: ReaderOptions = DEFAULT_OPTIONS) -> ParseResult:
    if options.check_trailing_empty and not (options.stop_on_first_error and state.failed):
        if state.current_is_empty():
            state.record(ErrorKind.EMPTY_SECTION, state.section_text, line=state.section_line)
    result = ParseResult(
        store=state.build_store(),
        issues=tuple(state.issues),
        lines_read=state.line_num,
    )
    logger.debug(
        "parsed %d line(s): %d section(s), %d issue(s)",
        result.lines_read, len(state.names), len(result.issues),
    )
    return result


def parse_lines(lines: Iterable[str], options: ReaderOptions = DEFAULT_OPTIONS) -> ParseResult:
    """
    Разбирает уже открытый поток строк.

    В режиме stop_on_first_error чтение прекращается на первой ошибочной
    строке; хранилище содержит всё, что было разобрано до неё.
    """
    state = ParseState()
    for raw in lines:
        step(state, raw, options)
        if state.failed and options.stop_on_first_error:
            break
    return finish(state, options)


def parse_text(text: str, options: ReaderOptions = DEFAULT_OPTIONS, *, strict: bool = False) -> ParseResult:
    result = parse_lines(io.StringIO(text), options)
    if strict and not result.ok:
        raise IniParseError(result.issues)
    return result


__all__ = ["ParseState", "ParseResult", "step", "finish", "parse_lines", "parse_text"]
