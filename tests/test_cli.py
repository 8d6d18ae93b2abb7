import json

from duckweb import cli


def test_cli_overrides_server_settings(monkeypatch, tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"server": {"port": 7000}}), encoding="utf-8")
    captured: dict = {}

    async def fake_run_server(config):
        captured["config"] = config

    monkeypatch.setattr(cli, "run_server", fake_run_server)

    cli.main(["--config", str(path), "--transport", "sse", "--host", "0.0.0.0"])

    config = captured["config"]
    assert config.server.transport == "sse"
    assert config.server.host == "0.0.0.0"
    assert config.server.port == 7000


def test_cli_defaults_to_config_values(monkeypatch, tmp_path) -> None:
    captured: dict = {}

    async def fake_run_server(config):
        captured["config"] = config

    monkeypatch.setattr(cli, "run_server", fake_run_server)

    cli.main(["--config", str(tmp_path / "missing.json"), "--port", "9100"])

    assert captured["config"].server.transport == "stdio"
    assert captured["config"].server.port == 9100
