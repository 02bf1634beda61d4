import json
import runpy
from pathlib import Path

import pytest
from eth_abi import encode

from pulse_verify.cli import main

from conftest import OWNER_ADDRESS, TOKEN_ADDRESS


def test_profiles_command_prints_all(capsys):
    assert main(["profiles"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [p["name"] for p in data] == ["9mm", "mainnet", "testnet"]


def test_profiles_command_solc_settings(capsys):
    assert main(["profiles", "9mm", "--solc-settings"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["compilers"][0]["settings"]["evmVersion"] == "shanghai"
    assert data["explorers"]["pulse"]["api_url"] == "https://v2-api.9mm.pro/api"


def test_verify_command(fake_network, build_info_dir, no_sleep):
    code = main(
        [
            "verify",
            TOKEN_ADDRESS,
            "--contract",
            "contracts/Token.sol:Token",
            "--args",
            json.dumps(["Pulse", "1000", OWNER_ADDRESS]),
            "--artifacts-dir",
            str(build_info_dir),
        ]
    )
    assert code == 0
    assert len([c for c in fake_network["calls"] if c[0] == "submit"]) == 1


def test_verify_command_args_file(fake_network, build_info_dir, tmp_path):
    args_file = tmp_path / "args.json"
    args_file.write_text(json.dumps(["Pulse", 1000, OWNER_ADDRESS]), encoding="utf-8")
    code = main(
        [
            "verify",
            TOKEN_ADDRESS,
            "--contract",
            "contracts/Token.sol:Token",
            "--args-file",
            str(args_file),
            "--artifacts-dir",
            str(build_info_dir),
            "--no-wait",
        ]
    )
    assert code == 0


def test_verify_command_without_address(fake_network, build_info_dir):
    assert main(["verify", "--artifacts-dir", str(build_info_dir)]) == 1
    assert fake_network["calls"] == []


def test_verify_command_bad_args_json():
    with pytest.raises(SystemExit):
        main(["verify", TOKEN_ADDRESS, "--args", "{not json"])


def test_verify_command_args_must_be_list():
    with pytest.raises(SystemExit):
        main(["verify", TOKEN_ADDRESS, "--args", '{"a": 1}'])


def test_status_command(fake_network, capsys):
    assert main(["status", "guid-123", "--profile", "mainnet"]) == 0
    assert "[ok] Pass - Verified" in capsys.readouterr().out
    url = fake_network["calls"][0][1]
    assert url.startswith("https://scan.pulsechain.com/api?")


def test_status_command_failed(fake_network):
    fake_network["status"] = [{"status": "0", "message": "NOTOK", "result": "Fail - Unable to verify"}]
    assert main(["status", "guid-123"]) == 1


def test_verify_script_with_blank_literals_exits_1(fake_network, capsys):

    script = Path(__file__).resolve().parent.parent / "scripts" / "verify.py"
    with pytest.raises(SystemExit) as exc:
        runpy.run_path(str(script), run_name="__main__")
    assert exc.value.code == 1
    assert fake_network["calls"] == []
    out = capsys.readouterr()
    assert "Running verify script" in out.out
    assert "without a contract address" in out.err


def test_verify_command_large_json_number_is_exact(fake_network, build_info_dir, no_sleep):
    code = main(
        [
            "verify",
            TOKEN_ADDRESS,
            "--contract",
            "contracts/Token.sol:Token",
            "--args",
            f'["Pulse", 1e30, "{OWNER_ADDRESS}"]',
            "--artifacts-dir",
            str(build_info_dir),
        ]
    )
    assert code == 0
    fields = [c for c in fake_network["calls"] if c[0] == "submit"][0][2]
    assert fields["constructorArguements"] == encode(["string", "uint256", "address"], ["Pulse", 10**30, OWNER_ADDRESS]).hex()


def test_verify_command_fractional_number_fails(fake_network, build_info_dir, capsys):
    code = main(
        [
            "verify",
            TOKEN_ADDRESS,
            "--contract",
            "contracts/Token.sol:Token",
            "--args",
            f'["Pulse", 1.5, "{OWNER_ADDRESS}"]',
            "--artifacts-dir",
            str(build_info_dir),
        ]
    )
    assert code == 1
    assert [c for c in fake_network["calls"] if c[0] == "submit"] == []
    assert "Non-integral" in capsys.readouterr().err
