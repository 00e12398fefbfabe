from unittest.mock import MagicMock, patch

import pytest

from pastebox.app_factory import SWEEPER_EXTENSION
from pastebox.main import main, parse_args


class TestParseArgs:
    def test_config_flag(self):
        assert parse_args(["--config", "/tmp/p.toml"]).config == "/tmp/p.toml"

    def test_no_flag(self):
        assert parse_args([]).config is None


class TestMain:
    def test_exits_on_config_error(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "missing.toml")])

        assert exc_info.value.code == 1
        assert "Config file not found" in capsys.readouterr().out

    def test_starts_server(self, tmp_path, capsys):
        config_path = tmp_path / "pastebox.toml"
        config_path.write_text(
            'tokens = ["abc"]\n'
            f'upload_path = "{tmp_path / "upload"}"\n'
            'domain = "http://localhost:8123"\n'
            'lifetime = "1h"\n'
            "port = 8123\n"
        )
        app = MagicMock()
        app.extensions = {SWEEPER_EXTENSION: MagicMock()}

        with patch("pastebox.main.create_app", return_value=app) as create_app, \
                patch("pastebox.main.atexit") as atexit_mock:
            main(["--config", str(config_path)])

        assert create_app.call_args.kwargs["start_sweeper"] is True
        atexit_mock.register.assert_called_once()
        app.run.assert_called_once_with(host="0.0.0.0", port=8123)
        assert "Running on port 8123" in capsys.readouterr().out
