from __future__ import annotations

import io
import json
import logging

import pytest

import blockstack_cli.cli.main as cli_main
from blockstack_cli.cli.main import main
from blockstack_cli.cli.usage import all_commands_list, command_usage
from blockstack_cli.collaborators import Backends
from blockstack_cli.errors import NetworkRequestError, NetworkUnavailableError

ADDRESS = "1FhZqKjxyr5vr5CrGJiTJQdtFvP3sfKMLd"
KEY = "0123456789abcdef" * 4


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("BLOCKSTACK_API_URL", raising=False)
    monkeypatch.delenv("BLOCKSTACK_TEST", raising=False)


class StubClient:
    instances: list["StubClient"] = []
    name_info: object = {"address": ADDRESS, "zonefile_hash": "a" * 40}

    def __init__(self, *, api_url: str, utxo_service_url: str) -> None:
        self.api_url = api_url
        self.utxo_service_url = utxo_service_url
        StubClient.instances.append(self)

    def get_name_info(self, name: str) -> dict:
        if isinstance(self.name_info, Exception):
            raise self.name_info
        return self.name_info


@pytest.fixture
def stub_client(monkeypatch):
    StubClient.instances = []
    StubClient.name_info = {"address": ADDRESS, "zonefile_hash": "a" * 40}
    monkeypatch.setattr(cli_main, "NetworkClient", StubClient)
    return StubClient


def _run(argv, **kwargs) -> tuple[int, str, str]:
    out = io.StringIO()
    err = io.StringIO()
    rc = main(argv, stdout=out, stderr=err, **kwargs)
    return rc, out.getvalue(), err.getvalue()


def test_no_command_prints_banner_and_command_list() -> None:
    rc, out, err = _run([])
    assert rc == 1
    assert err == "No command given\n"
    assert out.startswith("Usage: blockstack-cli [options] command [command arguments]\n")
    assert all_commands_list() in out


def test_unrecognized_command_prints_full_list() -> None:
    rc, out, err = _run(["frobnicate"])
    assert rc == 1
    assert err == "Unrecognized command 'frobnicate'\n"
    assert all_commands_list() in out


def test_invalid_arguments_prints_command_usage() -> None:
    rc, out, err = _run(["balance", "bad addr"])
    assert rc == 1
    assert err == "Invalid command arguments\n"
    assert out == command_usage("balance") + "\n" + 'Use "help" to list all commands.\n'


def test_duplicate_argument_reported() -> None:
    rc, _, err = _run(["balance", "--address", ADDRESS, "--address", ADDRESS])
    assert rc == 1
    assert err == "duplicate argument --address\n"


def test_help_without_topic_lists_commands() -> None:
    rc, out, err = _run(["help"])
    assert rc == 0
    assert err == ""
    assert out == all_commands_list() + "\n"


def test_help_for_command() -> None:
    rc, out, _ = _run(["help", "whois"])
    assert rc == 0
    assert out.startswith("Command: whois\n")


def test_whois_prints_json(stub_client) -> None:
    rc, out, err = _run(["whois", "foo.id"])
    assert rc == 0
    assert err == ""
    assert json.loads(out) == {"address": ADDRESS, "zonefile_hash": "a" * 40}
    assert stub_client.instances[0].api_url == "https://core.blockstack.org"


def test_keyword_invocation_reaches_handler(stub_client) -> None:
    rc, out, _ = _run(["whois", "--blockstack_id", "foo.id"])
    assert rc == 0
    assert json.loads(out)["address"] == ADDRESS


def test_not_found_result_is_printed_with_success_exit(stub_client) -> None:
    stub_client.name_info = NetworkRequestError("Bad response status: 404", status_code=404)
    rc, out, _ = _run(["whois", "nope.id"])
    assert rc == 0
    assert json.loads(out) == {"error": "Name not found"}


def test_network_failure_exit_code(stub_client) -> None:
    stub_client.name_info = NetworkUnavailableError("connection refused")
    rc, out, err = _run(["whois", "foo.id"])
    assert rc == 2
    assert out == ""
    assert err == "network unavailable: connection refused\n"


def test_api_url_option_and_env_override(stub_client, monkeypatch) -> None:
    _run(["-H", "http://localhost:6270", "whois", "foo.id"])
    assert stub_client.instances[-1].api_url == "http://localhost:6270"

    monkeypatch.setenv("BLOCKSTACK_API_URL", "http://env.local:6270")
    _run(["whois", "foo.id"])
    assert stub_client.instances[-1].api_url == "http://env.local:6270"


def test_testnet_uses_testnet_defaults(stub_client) -> None:
    _run(["-t", "whois", "foo.id"])
    assert stub_client.instances[-1].api_url == "http://testnet.blockstack.org:16268"


def test_config_file_is_honoured(stub_client, tmp_path) -> None:
    config_path = tmp_path / "custom.conf"
    config_path.write_text('{"blockstackAPIUrl": "http://cfg.local:6270"}', encoding="utf-8")
    _run(["-c", str(config_path), "whois", "foo.id"])
    assert stub_client.instances[-1].api_url == "http://cfg.local:6270"


def test_bad_config_exit_code(tmp_path) -> None:
    config_path = tmp_path / "custom.conf"
    config_path.write_text("{oops", encoding="utf-8")
    rc, _, err = _run(["-c", str(config_path), "help"])
    assert rc == 1
    assert err.startswith("config error: ")


def test_bad_option_value_exit_code() -> None:
    rc, _, err = _run(["-G", "soon", "help"])
    assert rc == 1
    assert err.startswith("option error: ")


def test_missing_backend_exit_code(stub_client) -> None:
    rc, _, err = _run(["get_address", KEY])
    assert rc == 5
    assert err == "backend error: get_address requires a key derivation backend\n"


def test_send_btc_dust_rejected_before_backend(stub_client) -> None:
    class Transactions:
        def execute(self, command, args, options, *, broadcaster_url):
            raise AssertionError("should not be reached")

    rc, _, err = _run(
        ["send_btc", ADDRESS, "100", KEY],
        backends=Backends(transactions=Transactions()),
    )
    assert rc == 1
    assert err == "safety check failed: Invalid amount (must be greater than 5500)\n"


def test_backend_errors_redact_private_keys(stub_client) -> None:
    class KeyDeriver:
        def get_address(self, private_key: str) -> dict:
            raise ValueError(f"cannot decode key {private_key}")

    rc, _, err = _run(["get_address", KEY], backends=Backends(key_deriver=KeyDeriver()))
    assert rc == 1
    assert KEY not in err
    assert err == "command error: cannot decode key [REDACTED]\n"


def test_backend_string_result_printed_verbatim(stub_client) -> None:
    class Transactions:
        def execute(self, command, args, options, *, broadcaster_url):
            return "f" * 64

    rc, out, _ = _run(
        ["-x", "revoke", "foo.id", KEY, KEY],
        backends=Backends(transactions=Transactions()),
    )
    assert rc == 0
    assert out == "f" * 64 + "\n"


def test_status_false_result_exits_nonzero(stub_client) -> None:
    class Transactions:
        def execute(self, command, args, options, *, broadcaster_url):
            return {"status": False, "error": "Not enough UTXOs"}

    rc, out, _ = _run(
        ["revoke", "foo.id", KEY, KEY],
        backends=Backends(transactions=Transactions()),
    )
    assert rc == 1
    assert json.loads(out)["status"] is False


def test_unreadable_config_directory_exit_code(tmp_path) -> None:
    config_dir = tmp_path / "conf.d"
    config_dir.mkdir()
    rc, out, err = _run(["-c", str(config_dir), "help"])
    assert rc == 1
    assert out == ""
    assert err.startswith("config error: cannot read ")


def test_non_utf8_config_exit_code(tmp_path) -> None:
    config_path = tmp_path / "custom.conf"
    config_path.write_bytes(b"\xff\xfe{}")
    rc, _, err = _run(["-c", str(config_path), "help"])
    assert rc == 1
    assert err.startswith("config error: cannot read ")


def test_winston_log_level_in_config_is_accepted(tmp_path) -> None:
    config_path = tmp_path / "custom.conf"
    config_path.write_text('{"logConfig": {"level": "warn"}}', encoding="utf-8")
    rc, _, err = _run(["-c", str(config_path), "help"])
    assert rc == 0
    assert err == ""


def test_log_handler_is_removed_after_each_call() -> None:
    package_logger = logging.getLogger("blockstack_cli")
    before = (list(package_logger.handlers), package_logger.level)
    _run(["help"])
    _run(["frobnicate"])
    assert (package_logger.handlers, package_logger.level) == before


def test_debug_logging_goes_to_the_call_stderr(tmp_path) -> None:
    config_path = tmp_path / "custom.conf"
    config_path.write_text('{"logConfig": {"level": "debug"}}', encoding="utf-8")
    rc, _, err = _run(["-c", str(config_path), "balance", "bad addr"])
    assert rc == 1
    assert "DEBUG blockstack_cli.cli.validate: rejected balance arguments" in err
    assert "bad addr" not in err
