from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import OptionsError

_yaml = YAML(typ="safe")

DuplicatePolicy = Literal["first", "last"]

# Символы, которые не могут быть префиксами комментариев: они значимы для грамматики.
_RESERVED = {"[", "=", '"', " "}


def _assert_only_keys(d: Dict[str, Any], allowed: Iterable[str], *, ctx: str) -> None:
    extra = set(d.keys()) - set(allowed)
    if extra:
        raise OptionsError(f"{ctx}: unknown key(s): {', '.join(sorted(extra))}")


def _check_prefixes(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise OptionsError(f"{name} must be a string of prefix characters, got {type(value).__name__}")
    bad = sorted(set(value) & _RESERVED)
    if bad:
        raise OptionsError(f"{name}: reserved character(s) cannot start a comment: {''.join(bad)!r}")
    return value


@dataclass(frozen=True)
class ReaderOptions:
    """
    Настройки диалекта INI.

    Все флаги реально учитываются движком разбора (в отличие от «мёртвых»
    compile-time переключателей): stop_on_first_error=False включает режим
    сбора всех ошибок.
    """
    start_comment_prefixes: str = ";#"
    inline_comment_prefixes: str = ";"
    allow_comments: bool = True
    allow_inline_comments: bool = True
    stop_on_first_error: bool = True
    # пустая последняя секция в конце файла тоже считается ошибкой EmptySection
    check_trailing_empty: bool = True
    duplicate_keys: DuplicatePolicy = "first"

    def __post_init__(self) -> None:
        _check_prefixes(self.start_comment_prefixes, name="start_comment_prefixes")
        _check_prefixes(self.inline_comment_prefixes, name="inline_comment_prefixes")
        if self.duplicate_keys not in ("first", "last"):
            raise OptionsError(f"duplicate_keys must be 'first' or 'last', got: {self.duplicate_keys!r}")

    @property
    def start_prefixes(self) -> str:
        """Действующие префиксы комментариев-строк ('' при выключенных комментариях)."""
        return self.start_comment_prefixes if self.allow_comments else ""

    @property
    def inline_prefixes(self) -> str:
        return self.inline_comment_prefixes if self.allow_inline_comments else ""

    def with_overrides(self, **changes: Any) -> ReaderOptions:
        return replace(self, **changes)

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> ReaderOptions:
        if not d:
            return ReaderOptions()
        if not isinstance(d, dict):
            raise OptionsError(f"reader options must be a mapping, got {type(d).__name__}")
        names = [f.name for f in fields(ReaderOptions)]
        _assert_only_keys(d, names, ctx="ReaderOptions")
        kwargs: Dict[str, Any] = {}
        for name in names:
            if name not in d:
                continue
            val = d[name]
            if name in ("start_comment_prefixes", "inline_comment_prefixes"):
                # допускаем список символов: [";", "#"]
                if isinstance(val, (list, tuple)) and all(isinstance(x, str) and len(x) == 1 for x in val):
                    val = "".join(val)
            elif name != "duplicate_keys" and not isinstance(val, bool):
                raise OptionsError(f"ReaderOptions.{name} must be a boolean, got {val!r}")
            kwargs[name] = val
        return ReaderOptions(**kwargs)


def load_options(path: Path) -> ReaderOptions:
    """
    Читает настройки из YAML-словаря, например::

        start_comment_prefixes: ";#"
        stop_on_first_error: false
    """
    if not path.is_file():
        raise OptionsError(f"Options file not found: {path}")
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise OptionsError(f"Cannot parse options file {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise OptionsError(f"Options file {path} must contain a mapping")
    return ReaderOptions.from_dict(raw)


DEFAULT_OPTIONS = ReaderOptions()

__all__ = ["ReaderOptions", "DuplicatePolicy", "DEFAULT_OPTIONS", "load_options"]
