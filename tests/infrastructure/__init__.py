"""
Общая тестовая инфраструктура: разбор INI-литералов и запуск CLI.
"""

from .ini_utils import ini, parse
from .cli_utils import run_cli, jload, REPO_ROOT

__all__ = ["ini", "parse", "run_cli", "jload", "REPO_ROOT"]
