"""Settings normalization."""

from class_election.config import Settings


def test_defaults():
    cfg = Settings(DATABASE_URL="", DB_PATH="./data/election.sqlite")
    assert cfg.resolved_database_url == "sqlite:///./data/election.sqlite"
    assert cfg.admin_name_match == "johnny"


def test_database_url_wins():
    cfg = Settings(DATABASE_URL="postgresql://u:p@db/election")
    assert cfg.resolved_database_url == "postgresql://u:p@db/election"


def test_absolute_db_path():
    cfg = Settings(DATABASE_URL="", DB_PATH="/var/lib/election/db.sqlite")
    assert cfg.resolved_database_url == "sqlite:////var/lib/election/db.sqlite"


def test_csv_lists_and_case():
    cfg = Settings(
        CORS_ALLOW_ORIGINS="https://a.test, https://b.test",
        ADMIN_USER_IDS="u-1,,u-2 ",
        ADMIN_NAME_MATCH="  Johnny ",
        LOG_LEVEL="debug",
    )
    assert cfg.cors_allow_origins == ["https://a.test", "https://b.test"]
    assert cfg.admin_user_ids == ["u-1", "u-2"]
    assert cfg.admin_name_match == "johnny"
    assert cfg.log_level == "DEBUG"


def test_dev_login_forced_off_in_production():
    assert Settings(APP_ENV="production", DEV_LOGIN=True).dev_login_enabled is False
    assert Settings(APP_ENV="local", DEV_LOGIN=True).dev_login_enabled is True


def test_dev_login_is_opt_in(monkeypatch):
    monkeypatch.delenv("DEV_LOGIN", raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    cfg = Settings(_env_file=None)
    assert cfg.dev_login is False
    assert cfg.dev_login_enabled is False
