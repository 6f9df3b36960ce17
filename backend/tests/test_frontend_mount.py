from fastapi.testclient import TestClient

from voicedoc.config import Settings
from voicedoc.main import create_app


def _client(stub, frontend_dir):
    settings = Settings(ollama_url="http://ollama.test:11434", frontend_dir=str(frontend_dir))
    return TestClient(create_app(settings, transport=stub.transport))


def test_static_client_is_served_at_root(stub, tmp_path):
    (tmp_path / "index.html").write_text("<html>voicedoc</html>", encoding="utf-8")
    client = _client(stub, tmp_path)

    response = client.get("/")

    assert response.status_code == 200
    assert "voicedoc" in response.text


def test_api_routes_take_precedence_over_static_mount(stub, tmp_path):
    (tmp_path / "index.html").write_text("<html></html>", encoding="utf-8")
    client = _client(stub, tmp_path)

    assert client.get("/health").json()["status"] == "OK"
    assert client.get("/api/ollama-status").json()["connected"] is True


def test_missing_frontend_dir_serves_api_only(stub, tmp_path):
    client = _client(stub, tmp_path / "missing")

    assert client.get("/").status_code == 404
    assert client.get("/health").status_code == 200
