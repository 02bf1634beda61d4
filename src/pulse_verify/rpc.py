from __future__ import annotations

from typing import Any

from .http import http_post_json
from .util import normalize_address


def rpc_call(rpc_url: str, method: str, params: list[Any]) -> Any:
    payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
    resp = http_post_json(rpc_url, payload)
    if not isinstance(resp, dict):
        raise RuntimeError(f"Unexpected RPC response: {resp!r}")
    if "error" in resp and resp["error"]:
        raise RuntimeError(f"RPC error for {method}: {resp['error']!r}")
    return resp.get("result")


def rpc_chain_id(rpc_url: str) -> int:
    res = rpc_call(rpc_url, "eth_chainId", [])
    if not isinstance(res, str) or not res.startswith("0x"):
        raise RuntimeError(f"Unexpected eth_chainId result: {res!r}")
    return int(res, 16)


def rpc_get_code(rpc_url: str, address: str, tag: str = "latest") -> str:
    res = rpc_call(rpc_url, "eth_getCode", [normalize_address(address), tag])
    if not isinstance(res, str) or not res.startswith("0x"):
        raise RuntimeError(f"Unexpected eth_getCode result: {res!r}")
    return res.lower()
