import json
from unittest.mock import patch

import pytest

from CWLV.main import build_parser, main


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("CWLV_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("CWLV_CATALOG", raising=False)


def test_parser_defaults():
    args = build_parser().parse_args(["serve", "--port", "9000"])
    assert args.command == "serve"
    assert args.port == 9000
    assert args.host == "127.0.0.1"


def test_serve_requires_catalog(capsys):
    assert main(["serve"]) == 2
    assert "CWLV_CATALOG" in capsys.readouterr().err


def test_serve_runs_uvicorn(tmp_path):
    catalog = tmp_path / "catalog.json"
    catalog.write_text(json.dumps({"logGroups": [{"logGroupName": "/svc/a"}]}))

    with patch("uvicorn.run") as run:
        assert main(["serve", "--catalog", str(catalog), "--port", "8123"]) == 0

    app = run.call_args.args[0]
    assert run.call_args.kwargs == {"host": "127.0.0.1", "port": 8123}
    assert app.title == "CWLV Log Viewer API"


def test_tui_uses_api_url_override():
    with patch("CWLV.UI.run_app") as run_app:
        assert main(["tui", "--api-url", "http://logs:9000"]) == 0
    settings = run_app.call_args.args[0]
    assert settings.api_url == "http://logs:9000"
