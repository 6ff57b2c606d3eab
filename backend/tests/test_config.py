import logging

import pytest

from ledger.config import InvalidEnvironmentError, Settings, load_settings, resolve_env_file


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no ledger variables set and no dotenv files on disk."""
    for name in ("NODE_ENV", "DATABASE_CLIENT", "DATABASE_URL", "PORT", "API_HOST",
                 "CORS_ORIGINS", "LOG_LEVEL", "METRICS_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_defaults(clean_env):
    clean_env.setenv("DATABASE_CLIENT", "sqlite")
    clean_env.setenv("DATABASE_URL", "./db/app.db")

    settings = load_settings()

    assert settings.NODE_ENV == "production"
    assert settings.PORT == 3333
    assert settings.LOG_LEVEL == "INFO"
    assert settings.METRICS_ENABLED is True


def test_port_is_coerced_from_text(clean_env):
    clean_env.setenv("DATABASE_CLIENT", "pg")
    clean_env.setenv("DATABASE_URL", "postgresql://ledger@localhost/ledger")
    clean_env.setenv("PORT", "8080")

    assert load_settings().PORT == 8080


def test_missing_database_url_is_reported(clean_env, caplog):
    clean_env.setenv("DATABASE_CLIENT", "sqlite")

    with caplog.at_level(logging.ERROR, logger="ledger.config"):
        with pytest.raises(InvalidEnvironmentError) as excinfo:
            load_settings()

    assert [path for path, _ in excinfo.value.issues] == ["DATABASE_URL"]
    assert "Invalid environment variables:" in caplog.text
    assert "• DATABASE_URL:" in caplog.text


def test_every_issue_is_reported(clean_env):
    clean_env.setenv("NODE_ENV", "staging")
    clean_env.setenv("DATABASE_CLIENT", "mysql")
    clean_env.setenv("PORT", "not-a-port")

    with pytest.raises(InvalidEnvironmentError) as excinfo:
        load_settings()

    paths = {path for path, _ in excinfo.value.issues}
    assert paths == {"NODE_ENV", "DATABASE_CLIENT", "DATABASE_URL", "PORT"}


def test_env_file_is_read(clean_env, tmp_path):
    (tmp_path / ".env").write_text("DATABASE_CLIENT=sqlite\nDATABASE_URL=ledger.db\n")

    settings = load_settings()

    assert settings.DATABASE_URL == "ledger.db"


def test_test_environment_reads_env_test(clean_env, tmp_path):
    (tmp_path / ".env").write_text("DATABASE_CLIENT=pg\nDATABASE_URL=postgresql://prod/ledger\n")
    (tmp_path / ".env.test").write_text("DATABASE_CLIENT=sqlite\nDATABASE_URL=:memory:\n")
    clean_env.setenv("NODE_ENV", "test")

    assert resolve_env_file() == ".env.test"
    settings = load_settings()

    assert settings.DATABASE_CLIENT == "sqlite"
    assert settings.database_url == "sqlite://"


@pytest.mark.parametrize(
    "client, url, expected",
    [
        ("sqlite", "./db/app.db", "sqlite:///./db/app.db"),
        ("sqlite", ":memory:", "sqlite://"),
        ("sqlite", "sqlite:////var/lib/ledger.db", "sqlite:////var/lib/ledger.db"),
        ("pg", "postgres://u:p@db:5432/ledger", "postgresql+psycopg2://u:p@db:5432/ledger"),
        ("pg", "postgresql://u:p@db/ledger", "postgresql+psycopg2://u:p@db/ledger"),
        ("pg", "postgresql+psycopg2://u@db/ledger", "postgresql+psycopg2://u@db/ledger"),
    ],
)
def test_database_url(client, url, expected):
    settings = Settings(_env_file=None, DATABASE_CLIENT=client, DATABASE_URL=url)
    assert settings.database_url == expected


def test_cors_origins_list():
    settings = Settings(
        _env_file=None,
        DATABASE_CLIENT="sqlite",
        DATABASE_URL=":memory:",
        CORS_ORIGINS="http://localhost:3000, https://ledger.example ,",
    )
    assert settings.cors_origins_list == ["http://localhost:3000", "https://ledger.example"]


def test_log_level_is_case_insensitive():
    settings = Settings(_env_file=None, DATABASE_CLIENT="sqlite", DATABASE_URL=":memory:", LOG_LEVEL="debug")
    assert settings.LOG_LEVEL == "DEBUG"
