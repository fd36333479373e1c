from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Callable, Dict

from ruamel.yaml import YAML

from .errors import IniUserError
from .model import parse_bool
from .options import DEFAULT_OPTIONS, ReaderOptions, load_options
from .reader import IniReader, read_file
from .report import DumpM, build_check_report, build_section_fields

_MISSING = "\x00"


def _tool_version() -> str:
    try:
        return metadata.version("ini-reader")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _emit_json(obj: Any) -> None:
    sys.stdout.write(json.dumps(obj, ensure_ascii=False) + "\n")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ini-reader",
        description="INI reader: проверка и чтение INI-файлов",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {_tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для всех подкоманд
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("file", type=Path, help="путь к INI-файлу")
        sp.add_argument(
            "--options",
            type=Path,
            metavar="YAML",
            help="файл с настройками диалекта (префиксы комментариев, политика ошибок и т. п.)",
        )
        sp.add_argument(
            "--collect-all",
            action="store_true",
            help="не останавливаться на первой ошибке, собрать все",
        )
        sp.add_argument("--verbose", action="store_true", help="отладочный лог в stderr")

    sp_check = sub.add_parser("check", help="JSON-отчёт о разборе файла")
    add_common(sp_check)

    sp_get = sub.add_parser("get", help="Значение одного ключа")
    add_common(sp_get)
    sp_get.add_argument("section", help="имя секции")
    sp_get.add_argument("key", help="ключ")
    sp_get.add_argument(
        "--type",
        choices=["str", "int", "long", "float", "bool"],
        default="str",
        help="тип значения",
    )
    sp_get.add_argument("--default", default=_MISSING, help="значение по умолчанию")

    sp_list = sub.add_parser("list", help="Списки сущностей (JSON)")
    sp_list.add_argument("what", choices=["sections", "fields"], help="что вывести")
    add_common(sp_list)
    sp_list.add_argument("section", nargs="?", help="секция (для 'fields')")

    sp_dump = sub.add_parser("dump", help="Всё содержимое файла в YAML")
    add_common(sp_dump)

    return p


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if (verbose or os.environ.get("INIREADER_DEBUG")) else logging.WARNING
    log = logging.getLogger("inireader")
    log.setLevel(level)
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)


def _reader_options(ns: argparse.Namespace) -> ReaderOptions:
    opts = load_options(ns.options) if ns.options else DEFAULT_OPTIONS
    if ns.collect_all:
        opts = opts.with_overrides(stop_on_first_error=False)
    return opts


def _read(ns: argparse.Namespace) -> IniReader:
    return read_file(ns.file, _reader_options(ns))


def _fail(reader: IniReader) -> int:
    prefix = f"{reader.source}: " if reader.source else ""
    for issue in reader.errors:
        sys.stderr.write(f"{prefix}{issue}\n")
    return 1


def _bool_default(raw: str) -> bool:
    parsed = parse_bool(raw)
    if parsed is None:
        raise ValueError(f"Invalid boolean default: {raw!r}")
    return parsed


_GETTERS: Dict[str, tuple[str, Callable[[str], Any]]] = {
    "str": ("get_string", str),
    "int": ("get_int", int),
    "long": ("get_long", int),
    "float": ("get_float", float),
    "bool": ("get_bool", _bool_default),
}


def _cmd_get(ns: argparse.Namespace) -> int:
    reader = _read(ns)
    if not reader.success():
        return _fail(reader)

    method, conv_default = _GETTERS[ns.type]
    if ns.default != _MISSING:
        value = getattr(reader, method)(ns.section, ns.key, conv_default(ns.default))
    else:
        # без дефолта пустое значение равносильно отсутствию ключа
        raw = reader.get(ns.section, ns.key, "")
        if not raw:
            sys.stderr.write(f"Key '{ns.key}' not found in section '{ns.section}'\n")
            return 1
        if ns.type == "bool":
            value = parse_bool(raw)
            if value is None:
                sys.stderr.write(f"[{ns.section}] {ns.key}: cannot convert {raw!r} to bool\n")
                return 1
        else:
            # raw непустой, поэтому дефолт геттером не используется
            value = getattr(reader, method)(ns.section, ns.key, None)
    if isinstance(value, bool):
        value = "true" if value else "false"
    sys.stdout.write(f"{value}\n")
    return 0


def _cmd_list(ns: argparse.Namespace) -> int:
    reader = _read(ns)
    if not reader.success():
        return _fail(reader)

    if ns.what == "sections":
        _emit_json({"sections": sorted(reader.get_section_names())})
        return 0

    if not ns.section:
        raise ValueError("'list fields' requires a section name")
    fields = build_section_fields(reader, ns.section)
    if fields is None:
        sys.stderr.write(f"Section '{ns.section}' not found\n")
        return 1
    _emit_json(fields.model_dump(mode="json"))
    return 0


def _cmd_dump(ns: argparse.Namespace) -> int:
    reader = _read(ns)
    if not reader.success():
        return _fail(reader)
    doc = DumpM(sections=reader.store.to_dict())
    yaml = YAML(typ="safe")
    yaml.default_flow_style = False
    yaml.dump(doc.model_dump(mode="json")["sections"], sys.stdout)
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(getattr(ns, "verbose", False)))

    try:
        if ns.cmd == "check":
            reader = _read(ns)
            report = build_check_report(reader)
            _emit_json(report.model_dump(mode="json"))
            return 0 if reader.success() else 1

        if ns.cmd == "get":
            return _cmd_get(ns)

        if ns.cmd == "list":
            return _cmd_list(ns)

        if ns.cmd == "dump":
            return _cmd_dump(ns)

    except IniUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 1
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
