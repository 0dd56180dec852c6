from __future__ import annotations

from typer.testing import CliRunner

from zello_cli import config
from zello_cli.commands import settings_cmd


def test_init_then_show(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    runner = CliRunner()

    result = runner.invoke(settings_cmd.app, ["init", "--host", "zello.example.test/", "--api-key", "key"])
    assert result.exit_code == 0

    cfg = config.load_config()
    assert cfg.host == "zello.example.test"
    assert cfg.api_key == "key"

    shown = runner.invoke(settings_cmd.app, ["show"])
    assert "api_key=(set)" in shown.output
    assert "key" not in shown.output.replace("api_key", "")


def test_changing_host_forgets_session(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    config.save_config(
        config.AppConfig(
            host="old.test",
            api_key="key",
            session=config.SessionConfig(sid="S1", username="admin"),
        )
    )

    result = CliRunner().invoke(settings_cmd.app, ["set", "--host", "new.test", "--connect-timeout-ms", "1500"])

    assert result.exit_code == 0
    cfg = config.load_config()
    assert cfg.host == "new.test"
    assert cfg.session.sid == ""
    assert cfg.connect_timeout_ms == 1500
