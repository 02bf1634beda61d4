from __future__ import annotations

import json
from pathlib import Path

import pytest

from pulse_verify.types import CompilerProfile

TOKEN_ADDRESS = "0x" + "ab" * 20
CHECKSUM_ADDRESS = "0x" + "AbaB" * 10
OWNER_ADDRESS = "0x" + "12" * 20

# Runtime code: body, CBOR metadata stand-in, metadata length.
TOKEN_BODY = "6080604052348015600f57600080fd5b50"
TOKEN_RUNTIME = TOKEN_BODY + "aabbcc" + "0003"
TOKEN_ONCHAIN = "0x" + TOKEN_BODY + "ddeeff" + "0003"

OTHER_RUNTIME = "60806040526004361060" + "a1b2" + "0002"

TOKEN_ABI = [
    {
        "type": "constructor",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "name_", "type": "string", "internalType": "string"},
            {"name": "supply", "type": "uint256", "internalType": "uint256"},
            {"name": "owner", "type": "address", "internalType": "address"},
        ],
    },
    {"type": "function", "name": "totalSupply", "inputs": [], "outputs": [{"name": "", "type": "uint256"}]},
]


def _contract(abi: list, runtime: str, immutables: dict | None = None) -> dict:
    return {
        "abi": abi,
        "evm": {
            "bytecode": {"object": "60806040"},
            "deployedBytecode": {"object": runtime, "immutableReferences": immutables or {}},
        },
    }


def write_build_info(
    directory: Path,
    *,
    name: str = "a1b2c3.json",
    solc_version: str = "0.8.20",
    contracts: dict | None = None,
) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    if contracts is None:
        contracts = {
            "contracts/Token.sol": {"Token": _contract(TOKEN_ABI, TOKEN_RUNTIME)},
            "contracts/Other.sol": {"Other": _contract([], OTHER_RUNTIME)},
        }
    data = {
        "id": name.split(".", 1)[0],
        "_format": "hh-sol-build-info-1",
        "solcVersion": solc_version,
        "solcLongVersion": f"{solc_version}+commit.a1b79de6",
        "input": {
            "language": "Solidity",
            "sources": {src: {"content": f"// {src}\n"} for src in contracts},
            "settings": CompilerProfile(version=solc_version, evm_version="shanghai").solc_settings(),
        },
        "output": {"contracts": contracts},
    }
    path = directory / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("PULSESCAN_API_KEY", "ETHERSCAN_API_KEY", "PULSE_VERIFY_PROFILE", "PULSE_VERIFY_RPC_URL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def build_info_dir(tmp_path):
    d = tmp_path / "artifacts" / "build-info"
    write_build_info(d)
    return d


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr("pulse_verify.verify.time.sleep", lambda s: None)


@pytest.fixture
def fake_network(monkeypatch):
    """
    Replace the HTTP layer with canned RPC and explorer answers.

    Every outbound call is recorded in ``state["calls"]`` as (kind, url, payload).
    """
    state = {
        "calls": [],
        "chain_id": "0x3af",
        "code": TOKEN_ONCHAIN,
        "sourcecode": {"status": "1", "message": "OK", "result": [{"SourceCode": "", "ABI": "Contract source code not verified"}]},
        "submit": {"status": "1", "message": "OK", "result": "guid-123"},
        "status": [{"status": "1", "message": "OK", "result": "Pass - Verified"}],
    }

    def post_json(url, payload, timeout_s=30):
        state["calls"].append(("rpc", url, payload))
        method = payload["method"]
        if method == "eth_chainId":
            return {"jsonrpc": "2.0", "id": 1, "result": state["chain_id"]}
        if method == "eth_getCode":
            return {"jsonrpc": "2.0", "id": 1, "result": state["code"]}
        return {"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "method not found"}}

    def get_json(url, timeout_s=30):
        state["calls"].append(("get", url, None))
        if "action=getsourcecode" in url:
            if isinstance(state["sourcecode"], Exception):
                raise state["sourcecode"]
            return state["sourcecode"]
        if "action=checkverifystatus" in url:
            answers = state["status"]
            return answers.pop(0) if len(answers) > 1 else answers[0]
        raise AssertionError(f"unexpected GET {url}")

    def post_form(url, fields, timeout_s=60):
        state["calls"].append(("submit", url, fields))
        return state["submit"]

    monkeypatch.setattr("pulse_verify.rpc.http_post_json", post_json)
    monkeypatch.setattr("pulse_verify.explorer.http_get_json", get_json)
    monkeypatch.setattr("pulse_verify.explorer.http_post_form", post_form)
    return state
