"""Tests for the serverpin command line."""

from unittest.mock import patch

import pytest
import yaml

import serverpin
from args import parse_args
from common.errors import JavaNotFoundError, NetworkError
from constants import Constants, ExitCodes
from versioning.parser import parse_server_version


@pytest.fixture(autouse=True)
def restore_constants():
    saved = (Constants.SNAPSHOT_INDEX_URL, Constants.REQUEST_TIMEOUT)
    yield
    Constants.SNAPSHOT_INDEX_URL, Constants.REQUEST_TIMEOUT = saved


def cli(tmp_path):
    return ["--workspace", str(tmp_path), "--config", str(tmp_path / "global.yml")]


class TestArgParsing:
    """Subcommands and shared options."""

    def test_check_options(self):
        ns = parse_args(["check", "--apply", "--index-url", "https://example.test/", "--timeout", "5"])
        assert ns.action == "check"
        assert ns.APPLY is True
        assert ns.INDEX_URL == "https://example.test/"
        assert ns.TIMEOUT == 5.0

    def test_loglevel_is_case_insensitive(self):
        assert parse_args(["compare", "1.0.0", "2.0.0", "--loglevel", "debug"]).LOG_LEVEL == "DEBUG"

    def test_action_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestCommands:
    """Commands print results and map failures to exit codes."""

    def test_compare(self, capsys):
        assert serverpin.main(["compare", "0.11.1", "0.11.1+1-abcdef12-SNAPSHOT"]) == 0
        assert capsys.readouterr().out.strip() == "-1"

    def test_compare_invalid(self):
        assert serverpin.main(["compare", "latest", "0.11.1"]) == ExitCodes.INVALID_VERSION.value

    @patch("serverpin.get_java_home")
    def test_java_home_uses_flag(self, mock_get, tmp_path, capsys):
        mock_get.return_value = "/opt/jdk"
        code = serverpin.main(["java-home", "--java-home", "/opt/jdk", *cli(tmp_path)])
        assert code == 0
        mock_get.assert_called_once_with("/opt/jdk")
        assert capsys.readouterr().out.strip() == "/opt/jdk"

    @patch("serverpin.get_java_home")
    def test_java_home_reads_setting(self, mock_get, tmp_path):
        (tmp_path / ".serverpin.yml").write_text("javaHome: /from/settings\n")
        mock_get.return_value = "/from/settings"
        serverpin.main(["java-home", *cli(tmp_path)])
        mock_get.assert_called_once_with("/from/settings")

    @patch("serverpin.get_java_home")
    def test_java_home_not_found(self, mock_get, tmp_path):
        mock_get.side_effect = JavaNotFoundError()
        assert serverpin.main(["java-home", *cli(tmp_path)]) == ExitCodes.JAVA_NOT_FOUND.value

    @patch("serverpin.fetch_snapshot_versions")
    def test_snapshots_newest_first(self, mock_fetch, capsys):
        mock_fetch.return_value = [
            parse_server_version(v)
            for v in ["0.11.1+2-abcdef12-SNAPSHOT", "0.11.2+1-abcdef12-SNAPSHOT", "0.11.1+9-abcdef12-SNAPSHOT"]
        ]
        assert serverpin.main(["snapshots", "--limit", "2"]) == 0
        assert capsys.readouterr().out.split() == [
            "0.11.2+1-abcdef12-SNAPSHOT",
            "0.11.1+9-abcdef12-SNAPSHOT",
        ]

    @patch("serverpin.fetch_snapshot_versions")
    def test_snapshots_network_failure(self, mock_fetch):
        mock_fetch.side_effect = NetworkError("offline")
        assert serverpin.main(["snapshots"]) == ExitCodes.CONNECTION_ERROR.value

    def test_snapshots_index_url_override(self):
        with patch("serverpin.fetch_snapshot_versions", return_value=[]):
            serverpin.main(["snapshots", "--index-url", "https://mirror.test/snapshots/"])
        assert Constants.SNAPSHOT_INDEX_URL == "https://mirror.test/snapshots/"

    def test_check_up_to_date(self, tmp_path, capsys):
        assert serverpin.main(["check", *cli(tmp_path)]) == 0
        assert "No server upgrade available." in capsys.readouterr().out

    def test_check_apply_writes_workspace_setting(self, tmp_path, capsys):
        (tmp_path / ".serverpin.yml").write_text(yaml.safe_dump({"serverVersion": "0.1.0"}))
        assert serverpin.main(["check", "--apply", *cli(tmp_path)]) == 0
        out = capsys.readouterr().out
        assert "out-of-date" in out
        data = yaml.safe_load((tmp_path / ".serverpin.yml").read_text())
        assert data["serverVersion"] == Constants.DEFAULT_SERVER_VERSION

    def test_check_apply_write_failure_is_file_error(self, tmp_path, capsys):
        (tmp_path / ".serverpin.yml").write_text(yaml.safe_dump({"serverVersion": "0.1.0"}))
        with patch("serverpin.YamlSettings.set", side_effect=PermissionError("read-only")):
            assert serverpin.main(["check", "--apply", *cli(tmp_path)]) == ExitCodes.FILE_ERROR.value
        assert "Server version set to" not in capsys.readouterr().out

    def test_check_offer_printed_once(self, tmp_path, capsys):
        (tmp_path / ".serverpin.yml").write_text(yaml.safe_dump({"serverVersion": "0.1.0"}))
        assert serverpin.main(["check", *cli(tmp_path)]) == 0
        captured = capsys.readouterr()
        assert captured.out.count("out-of-date") == 1
        assert "out-of-date" not in captured.err
