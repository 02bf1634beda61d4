from __future__ import annotations

import os
from dataclasses import asdict
from typing import Any

from .constants import (
    DEFAULT_EXPLORER_API_KEY,
    DEFAULT_GAS_PRICE,
    DEFAULT_NETWORK,
    DEFAULT_PROFILE,
    NINE_MM_API_URL,
    NINE_MM_BROWSER_URL,
    PULSE_MAINNET_CHAIN_ID,
    PULSE_MAINNET_RPC_URL,
    PULSE_TESTNET_V4_CHAIN_ID,
    PULSE_TESTNET_V4_RPC_URL,
    PULSESCAN_API_URL,
    PULSESCAN_BROWSER_URL,
    PULSESCAN_TESTNET_V4_API_URL,
    PULSESCAN_TESTNET_V4_BROWSER_URL,
)
from .types import CompilerProfile, ExplorerProfile, NetworkProfile, ToolchainProfile


def _pulse(chain_id: int, rpc_url: str, api_url: str, browser_url: str) -> tuple[dict[str, NetworkProfile], dict[str, ExplorerProfile]]:
    network = NetworkProfile(name=DEFAULT_NETWORK, chain_id=chain_id, url=rpc_url, gas_price=DEFAULT_GAS_PRICE)
    explorer = ExplorerProfile(
        name=DEFAULT_NETWORK,
        chain_id=chain_id,
        api_url=api_url,
        browser_url=browser_url,
        api_key=DEFAULT_EXPLORER_API_KEY,
    )
    return {network.name: network}, {explorer.name: explorer}


def _testnet() -> ToolchainProfile:
    networks, explorers = _pulse(
        PULSE_TESTNET_V4_CHAIN_ID,
        PULSE_TESTNET_V4_RPC_URL,
        PULSESCAN_TESTNET_V4_API_URL,
        PULSESCAN_TESTNET_V4_BROWSER_URL,
    )
    return ToolchainProfile(
        name="testnet",
        compilers=(
            CompilerProfile(version="0.8.17", evm_version="london"),
            CompilerProfile(version="0.8.20", evm_version="shanghai"),
        ),
        networks=networks,
        explorers=explorers,
        default_network=DEFAULT_NETWORK,
    )


def _mainnet() -> ToolchainProfile:
    networks, explorers = _pulse(
        PULSE_MAINNET_CHAIN_ID,
        PULSE_MAINNET_RPC_URL,
        PULSESCAN_API_URL,
        PULSESCAN_BROWSER_URL,
    )
    return ToolchainProfile(
        name="mainnet",
        compilers=(
            CompilerProfile(version="0.8.17", evm_version="london"),
            CompilerProfile(version="0.8.20", evm_version="london"),
        ),
        networks=networks,
        explorers=explorers,
        default_network=DEFAULT_NETWORK,
    )


def _nine_mm() -> ToolchainProfile:
    networks, explorers = _pulse(
        PULSE_MAINNET_CHAIN_ID,
        PULSE_MAINNET_RPC_URL,
        NINE_MM_API_URL,
        NINE_MM_BROWSER_URL,
    )
    return ToolchainProfile(
        name="9mm",
        compilers=(CompilerProfile(version="0.8.21", evm_version="shanghai"),),
        networks=networks,
        explorers=explorers,
        default_network=DEFAULT_NETWORK,
    )


PROFILES: dict[str, ToolchainProfile] = {p.name: p for p in (_testnet(), _mainnet(), _nine_mm())}


def profile_names() -> list[str]:
    return sorted(PROFILES)


def default_profile_name() -> str:
    return (os.environ.get("PULSE_VERIFY_PROFILE") or "").strip() or DEFAULT_PROFILE


def get_profile(name: str | None = None) -> ToolchainProfile:
    key = name or default_profile_name()
    try:
        return PROFILES[key]
    except KeyError:
        raise SystemExit(f"Unknown profile {key!r} (known: {', '.join(profile_names())})") from None


def profile_to_dict(profile: ToolchainProfile, *, solc_settings: bool = False) -> dict[str, Any]:
    compilers: list[dict[str, Any]] = []
    for c in profile.compilers:
        if solc_settings:
            compilers.append({"version": c.version, "settings": c.solc_settings()})
        else:
            entry = asdict(c)
            entry["output_selection"] = list(c.output_selection)
            compilers.append(entry)
    return {
        "name": profile.name,
        "compilers": compilers,
        "networks": {k: asdict(v) for k, v in profile.networks.items()},
        "explorers": {k: asdict(v) for k, v in profile.explorers.items()},
        "defaultNetwork": profile.default_network,
    }
