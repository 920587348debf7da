"""Tests for the report printer and the CLI entry point."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from decoder import decode
from main import main
from report import print_report

CONTENT = {
    "users": {"@alice:x": 100, "@bob:x": 50},
    "ban": 50,
    "events": {"m.room.name": 50},
    "state_default": 50,
}


class TestReport:
    def test_lists_members_by_level(self, capsys) -> None:
        print_report(decode(CONTENT), "!room:x")
        out = capsys.readouterr().out
        assert "!room:x" in out
        assert out.index("@alice:x") < out.index("@bob:x")
        assert "Admin" in out
        assert "m.room.name" in out

    def test_empty_policy(self, capsys) -> None:
        print_report(decode({}))
        out = capsys.readouterr().out
        assert "No members with an explicit level" in out
        assert "No event types with an explicit level" in out


class TestMain:
    def test_file_mode(self, tmp_path, capsys) -> None:
        path = tmp_path / "pl.json"
        path.write_text(json.dumps(CONTENT))
        main(["--file", str(path), "--user", "@alice:x", "--user", "@carol:x", "--event", "m.room.topic", "--state"])
        out = capsys.readouterr().out
        assert "@alice:x\033[0m has power level \033[1m100" in out
        assert "@carol:x\033[0m has power level \033[1m0" in out
        assert "(state event) requires power level \033[1m50" in out

    def test_network_mode_without_event(self, capsys) -> None:
        with patch("main.load_config", return_value={"matrix": {"homeserver": "https://hs", "token": "t"}}), patch(
            "main.MatrixClient.prompt_credentials"
        ), patch("main.MatrixClient.fetch_power_levels", return_value=None):
            main(["!room:hs", "--event", "m.room.message"])
        out = capsys.readouterr().out
        assert "uses the defaults" in out
        assert "(event) requires power level \033[1m0" in out

    def test_network_mode_uses_client_loader(self, capsys) -> None:
        with patch("main.load_config", return_value={}), patch("main.MatrixClient.prompt_credentials"), patch(
            "main.MatrixClient.load_power_levels", return_value=decode(CONTENT)
        ) as load:
            main(["!room:hs", "--user", "@alice:x"])
        load.assert_called_once_with("!room:hs")
        assert "has power level \033[1m100" in capsys.readouterr().out

    def test_ctrl_c_at_prompt_exits_cleanly(self, capsys) -> None:
        with patch("main.load_config", return_value={}), patch("builtins.input", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc:
                main(["!room:hs"])
        assert exc.value.code == 0
        assert "Cancelled" in capsys.readouterr().out

    @pytest.mark.parametrize("flags, level", [(["--verbose"], logging.DEBUG), ([], logging.WARNING)])
    def test_verbose_sets_log_level(self, tmp_path, flags, level) -> None:
        path = tmp_path / "pl.json"
        path.write_text("{}")
        with patch("main.logging.basicConfig") as basic_config:
            main(["--file", str(path), *flags])
        assert basic_config.call_args.kwargs["level"] == level

    def test_invalid_json_file(self, tmp_path, capsys) -> None:
        path = tmp_path / "pl.json"
        path.write_text("{not json")
        with pytest.raises(SystemExit) as exc:
            main(["--file", str(path)])
        assert exc.value.code == 1
        assert "Could not read" in capsys.readouterr().out

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--file", str(tmp_path / "absent.json")])
        assert exc.value.code == 1
