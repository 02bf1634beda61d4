from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any


def read_json(path: Path, **kwargs: Any) -> Any:
    return json.loads(path.read_text(encoding="utf-8"), **kwargs)


def load_api_key(default: str) -> str:
    env_key = os.environ.get("PULSESCAN_API_KEY") or os.environ.get("ETHERSCAN_API_KEY")
    if env_key and env_key.strip():
        return env_key.strip()
    return default


def is_hex_address(value: str) -> bool:
    v = value.strip()
    return len(v) == 42 and v.startswith("0x") and all(c in "0123456789abcdefABCDEF" for c in v[2:])


def normalize_address(addr: str) -> str:
    a = addr.strip()
    if not is_hex_address(a):
        raise ValueError(f"Invalid address: {addr}")
    return a.lower()


def strip_0x(value: str) -> str:
    v = (value or "").strip()
    return v[2:] if v[:2].lower() == "0x" else v


def parse_contract_identifier(identifier: str) -> tuple[str, str]:
    """
    Split "contracts/Token.sol:Token" into ("contracts/Token.sol", "Token").
    """
    ident = (identifier or "").strip()
    source, sep, name = ident.rpartition(":")
    if not sep or not source or not name:
        raise ValueError(f"Bad contract identifier {identifier!r}; expected \"path/File.sol:ContractName\"")
    return source, name


def warn(msg: str) -> None:
    print(f"[!] {msg}", file=sys.stderr, flush=True)


def fail(msg: str) -> None:
    print(f"[x] {msg}", file=sys.stderr, flush=True)
