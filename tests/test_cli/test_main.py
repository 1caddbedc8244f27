"""Tests for the CLI entry point."""

import textwrap
from unittest.mock import patch

import pytest

from nbstat.cli.main import main
from nbstat.errors import ProtocolError, QueryTimeoutError, TransportError
from nbstat.types import NameEntry, NodeStatus

STATUS = NodeStatus(
    address=("192.168.1.200", 137),
    hwaddr=bytes.fromhex("aabbccddeeff"),
    entries=(
        NameEntry(name=b"WORKSTATION    ", suffix=0x00, flags=0x0400),
        NameEntry(name=b"FILESERVER     ", suffix=0x20, flags=0x0400),
    ),
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run every test in an empty directory with no config override."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NBSTAT_CONFIG", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    return tmp_path


class TestArgParsing:
    def test_no_arguments(self):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code != 0

    def test_two_targets(self):
        with pytest.raises(SystemExit):
            main(["10.0.0.1", "10.0.0.2"])

    def test_repeated_option(self, capsys):
        with pytest.raises(SystemExit):
            main(["-p", "137", "-p", "138", "10.0.0.1"])
        assert "incorrect number of arguments for option -p" in capsys.readouterr().err

    def test_option_missing_value(self):
        with pytest.raises(SystemExit):
            main(["10.0.0.1", "-t"])

    def test_unknown_option(self):
        with pytest.raises(SystemExit):
            main(["-x", "1", "10.0.0.1"])


class TestQuery:
    @patch("nbstat.client.query_node_status", return_value=STATUS)
    def test_success_prints_table(self, mock_query, capsys):
        assert main(["192.168.1.200"]) == 0
        out = capsys.readouterr().out
        assert "WORKSTATION    <00> UNIQUE Registered Workstation Service" in out
        assert "FILESERVER     <20> UNIQUE Registered Default Name" in out
        assert "MAC Address = AA-BB-CC-DD-EE-FF" in out

    @patch("nbstat.client.query_node_status", return_value=STATUS)
    def test_defaults(self, mock_query):
        main(["192.168.1.200"])
        mock_query.assert_called_once_with(
            "192.168.1.200", port=137, timeout=3000, verbose=False,
        )

    @patch("nbstat.client.query_node_status", return_value=STATUS)
    def test_port_and_timeout(self, mock_query):
        main(["-p", "1137", "-t", "2000", "host"])
        mock_query.assert_called_once_with("host", port=1137, timeout=2000, verbose=False)

    @patch("nbstat.client.query_node_status", return_value=STATUS)
    def test_options_after_target(self, mock_query):
        main(["host", "-t", "2000"])
        assert mock_query.call_args.kwargs["timeout"] == 2000

    @patch("nbstat.client.query_node_status", return_value=STATUS)
    @pytest.mark.parametrize("timeout", ["0", "-1", "50000"])
    def test_out_of_range_timeout_normalised(self, mock_query, timeout):
        main(["-t", timeout, "host"])
        assert mock_query.call_args.kwargs["timeout"] == 3000

    @patch("nbstat.client.query_node_status", return_value=STATUS)
    def test_zero_port_normalised(self, mock_query):
        main(["-p", "0", "host"])
        assert mock_query.call_args.kwargs["port"] == 137


class TestErrors:
    @patch("nbstat.client.query_node_status", side_effect=QueryTimeoutError("no response"))
    def test_timeout(self, mock_query, capsys):
        assert main(["host"]) == 1
        err = capsys.readouterr().err
        assert err.strip() == "-nbstat: error! request expired (0x0107)"

    @patch("nbstat.client.query_node_status", side_effect=ProtocolError("bad type"))
    def test_protocol_error(self, mock_query, capsys):
        assert main(["host"]) == 1
        assert "(0x0105)" in capsys.readouterr().err

    @patch("nbstat.client.query_node_status", side_effect=TransportError("x"))
    def test_transport_error(self, mock_query, capsys):
        assert main(["host"]) == 1
        assert "(0x0104)" in capsys.readouterr().err

    @patch("nbstat.client.query_node_status", side_effect=MemoryError)
    def test_out_of_memory(self, mock_query, capsys):
        assert main(["host"]) == 1
        assert "memory allocation failure (0x0101)" in capsys.readouterr().err

    @patch("nbstat.client.query_node_status", return_value=STATUS)
    def test_bad_config(self, mock_query, isolated_config, capsys):
        (isolated_config / "nbstat.toml").write_text("[display]\nformat = 'xml'\n")
        assert main(["host"]) == 1
        assert "cannot load configuration" in capsys.readouterr().err
        mock_query.assert_not_called()


class TestConfigFile:
    @patch("nbstat.client.query_node_status", return_value=STATUS)
    def test_config_supplies_defaults(self, mock_query, isolated_config):
        (isolated_config / "nbstat.toml").write_text(textwrap.dedent("""\
            [query]
            port = 1137
            timeout = 1500
        """))
        main(["host"])
        mock_query.assert_called_once_with("host", port=1137, timeout=1500, verbose=False)

    @patch("nbstat.client.query_node_status", return_value=STATUS)
    def test_command_line_overrides_config(self, mock_query, isolated_config):
        (isolated_config / "nbstat.toml").write_text("[query]\ntimeout = 1500\n")
        main(["-t", "2500", "host"])
        assert mock_query.call_args.kwargs["timeout"] == 2500

    @patch("nbstat.client.query_node_status", return_value=STATUS)
    def test_nmblookup_format(self, mock_query, isolated_config, capsys):
        (isolated_config / "nbstat.toml").write_text("[display]\nformat = 'nmblookup'\n")
        main(["host"])
        out = capsys.readouterr().out
        assert out.startswith("Looking up status of 192.168.1.200")

    @patch("nbstat.client.query_node_status", side_effect=ProtocolError("bad type 0x0020"))
    def test_verbose_shows_detail(self, mock_query, isolated_config, capsys):
        (isolated_config / "nbstat.toml").write_text("[display]\nverbose = true\n")
        main(["host"])
        assert "bad type 0x0020" in capsys.readouterr().err
