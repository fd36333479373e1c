from pathlib import Path

import pytest

from tests.infrastructure import ini


@pytest.fixture
def write_ini(tmp_path: Path):
    """Фабрика: пишет INI-файл во временный каталог и возвращает путь."""
    def _write(text: str, name: str = "config.ini") -> Path:
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(ini(text), encoding="utf-8")
        return p
    return _write
