"""
INI reader: однопроходный разбор INI-текста в неизменяемое хранилище
секций и полей с типизированными аксессорами.
"""

from .engine import ParseResult, ParseState, parse_lines, parse_text
from .errors import ErrorKind, IniParseError, IniUserError, OptionsError, ParseIssue, ValueFormatError
from .model import ConfigStore, Field, Section
from .options import DEFAULT_OPTIONS, ReaderOptions, load_options
from .reader import IniReader, read_file, read_string

__all__ = [
    "IniReader", "read_file", "read_string",
    "ParseResult", "ParseState", "parse_lines", "parse_text",
    "ConfigStore", "Field", "Section",
    "ReaderOptions", "DEFAULT_OPTIONS", "load_options",
    "ErrorKind", "ParseIssue", "IniUserError", "IniParseError", "ValueFormatError", "OptionsError",
]
