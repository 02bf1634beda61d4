from __future__ import annotations

from decimal import Decimal
from typing import Any, Sequence

from eth_abi import encode

from .util import strip_0x

_MAX_EXACT_FLOAT = 2**53


def constructor_inputs(abi: list[dict[str, Any]]) -> list[dict[str, Any]]:
    for entry in abi:
        if entry.get("type") == "constructor":
            return list(entry.get("inputs") or [])
    return []


def abi_type(param: dict[str, Any]) -> str:
    t = str(param.get("type") or "")
    if t.startswith("tuple"):
        inner = ",".join(abi_type(c) for c in param.get("components") or [])
        return f"({inner}){t[len('tuple'):]}"
    return t


def _split_array(t: str) -> tuple[str, str] | None:
    if not t.endswith("]"):
        return None
    i = t.rindex("[")
    return t[:i], t[i + 1 : -1]


def _coerce(param: dict[str, Any], t: str, value: Any) -> Any:
    arr = _split_array(t)
    if arr is not None:
        base, size = arr
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"Expected a list for {t}, got {value!r}")
        if size and len(value) != int(size):
            raise ValueError(f"Expected {size} items for {t}, got {len(value)}")
        return [_coerce(param, base, v) for v in value]

    if t == "tuple":
        components = param.get("components") or []
        if isinstance(value, dict):
            value = [value[c.get("name")] for c in components]
        if not isinstance(value, (list, tuple)) or len(value) != len(components):
            raise ValueError(f"Expected {len(components)} tuple fields, got {value!r}")
        return tuple(_coerce(c, str(c.get("type") or ""), v) for c, v in zip(components, value))

    if t.startswith(("uint", "int")):
        if isinstance(value, bool):
            raise ValueError(f"Expected an integer for {t}, got {value!r}")
        if isinstance(value, str):
            s = value.strip()
            return int(s, 16) if s[:2].lower() == "0x" else int(s)
        if isinstance(value, float):
            # Floats above 2**53 are already rounded.
            if not value.is_integer() or abs(value) > _MAX_EXACT_FLOAT:
                raise ValueError(f"Inexact number {value!r} for {t}; pass it as a decimal string")
            return int(value)
        if isinstance(value, Decimal):
            if not value.is_finite() or value != value.to_integral_value():
                raise ValueError(f"Non-integral number {value} for {t}")
            return int(value)
        if isinstance(value, int):
            return value
        raise ValueError(f"Expected an integer for {t}, got {value!r}")
    if t == "bool":
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise ValueError(f"Expected a boolean, got {value!r}")
    if t == "address":
        return str(value).strip().lower()
    if t.startswith("bytes"):
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        return bytes.fromhex(strip_0x(str(value)))
    return value


def encode_constructor_arguments(abi: list[dict[str, Any]], args: Sequence[Any]) -> str:
    """
    ABI-encode constructor arguments as a hex string without ``0x``.

    Values may be given in their JSON-friendly form: integers as ints or
    decimal/hex strings, bytes as hex strings, tuples as lists or dicts.
    """
    inputs = constructor_inputs(abi)
    if len(args) != len(inputs):
        raise ValueError(f"Constructor takes {len(inputs)} argument(s), {len(args)} given")
    if not inputs:
        return ""
    types = [abi_type(p) for p in inputs]
    values = [_coerce(p, str(p.get("type") or ""), v) for p, v in zip(inputs, args)]
    return encode(types, values).hex()
