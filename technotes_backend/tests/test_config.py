import pytest

from technotes_backend.src.api.config import load_config_from_env

ENV_VARS = ("DATABASE_URL", "HOST", "PORT", "ALLOWED_ORIGINS", "LOG_LEVEL", "LOG_DIR", "BCRYPT_ROUNDS")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # every variable is undone on teardown, including ones loaded from .env
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults():
    config = load_config_from_env(None)
    assert config.port == 3500
    assert config.bcrypt_rounds == 10
    assert config.allowed_origins == ["http://localhost:3000"]
    assert config.database_url.startswith("sqlite")
    assert config.log_dir is None


def test_reads_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "DATABASE_URL=sqlite://\n"
        "PORT=8080\n"
        "ALLOWED_ORIGINS=http://a.example, http://b.example\n"
    )

    config = load_config_from_env(str(env_file))

    assert config.database_url == "sqlite://"
    assert config.port == 8080
    assert config.allowed_origins == ["http://a.example", "http://b.example"]


@pytest.mark.parametrize("name, value", [("PORT", "abc"), ("PORT", "70000"), ("BCRYPT_ROUNDS", "2")])
def test_invalid_integers(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_config_from_env(None)
