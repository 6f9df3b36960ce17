from importlib import reload
from pathlib import Path


def test_defaults(monkeypatch):
    for key in ("PORT", "OLLAMA_URL", "MODEL_NAME", "OLLAMA_TIMEOUT", "OLLAMA_CONNECT_TIMEOUT", "CORS_ORIGINS"):
        monkeypatch.delenv(key, raising=False)

    from voicedoc.config import Settings

    settings = Settings()
    assert settings.PORT == 3001
    assert settings.OLLAMA_URL == "http://localhost:11434"
    assert settings.MODEL_NAME == "mistral"
    assert settings.OLLAMA_TIMEOUT == 300.0
    assert settings.OLLAMA_CONNECT_TIMEOUT == 10.0
    assert settings.CORS_ORIGINS == ["*"]


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("OLLAMA_URL", "http://gpu-box:11434/")
    monkeypatch.setenv("MODEL_NAME", "llama3")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, http://127.0.0.1:5173")

    from voicedoc import config as config_module

    reload(config_module)

    assert config_module.settings.PORT == 8080
    # Trailing slash is stripped so URLs can be joined with "/api/...".
    assert config_module.settings.OLLAMA_URL == "http://gpu-box:11434"
    assert config_module.settings.MODEL_NAME == "llama3"
    assert config_module.settings.CORS_ORIGINS == ["http://localhost:5173", "http://127.0.0.1:5173"]


def test_empty_env_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("OLLAMA_URL", "")
    monkeypatch.setenv("MODEL_NAME", "")
    monkeypatch.setenv("PORT", "")

    from voicedoc.config import Settings

    settings = Settings()
    assert settings.OLLAMA_URL == "http://localhost:11434"
    assert settings.MODEL_NAME == "mistral"
    assert settings.PORT == 3001


def test_zero_timeout_disables_it(monkeypatch):
    monkeypatch.setenv("OLLAMA_TIMEOUT", "0")

    from voicedoc.config import Settings

    assert Settings().OLLAMA_TIMEOUT is None
    assert Settings(ollama_timeout=12.5).OLLAMA_TIMEOUT == 12.5


def test_explicit_arguments_win_over_env(monkeypatch):
    monkeypatch.setenv("MODEL_NAME", "llama3")

    from voicedoc.config import Settings

    settings = Settings(model_name="phi3", ollama_url="http://other:1", frontend_dir="/nowhere")
    assert settings.MODEL_NAME == "phi3"
    assert settings.OLLAMA_URL == "http://other:1"
    assert settings.FRONTEND_DIR == Path("/nowhere")
