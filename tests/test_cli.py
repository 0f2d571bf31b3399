"""
Тесты командной строки
"""
from pathlib import Path

import pytest

from marketplace import cli


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"


@pytest.fixture(autouse=True)
def no_file_logs(monkeypatch):
    """Без файла логов в рабочей директории"""
    monkeypatch.setattr(cli, "setup_logging", lambda: None)


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_parser_rejects_unknown_kind():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["score", "comment", "x"])


def test_init_db_and_queries(database_url, capsys):
    assert cli.main(["-d", database_url, "init-db"]) == 0
    assert "Таблицы созданы" in capsys.readouterr().out

    assert cli.main(["-d", database_url, "orders", "user-1"]) == 0
    assert "нет заказов" in capsys.readouterr().out

    assert cli.main(["-d", database_url, "score", "blog_post", "post-1"]) == 0
    assert "blog_post #post-1: 0" in capsys.readouterr().out
