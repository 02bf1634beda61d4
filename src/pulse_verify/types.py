from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .constants import DEFAULT_OPTIMIZER_RUNS, FILE_OUTPUT_SELECTION, OUTPUT_SELECTION


class VerificationError(RuntimeError):
    pass


class ExplorerError(RuntimeError):
    pass


@dataclass(frozen=True)
class CompilerProfile:
    version: str
    evm_version: str
    optimizer_enabled: bool = False
    optimizer_runs: int = DEFAULT_OPTIMIZER_RUNS
    output_selection: tuple[str, ...] = OUTPUT_SELECTION

    def solc_settings(self) -> dict[str, Any]:
        """Standard-JSON ``settings`` object handed to solc."""
        return {
            "evmVersion": self.evm_version,
            "optimizer": {
                "enabled": self.optimizer_enabled,
                "runs": self.optimizer_runs,
            },
            "outputSelection": {
                "*": {
                    "": list(FILE_OUTPUT_SELECTION),
                    "*": list(self.output_selection),
                }
            },
        }


@dataclass(frozen=True)
class NetworkProfile:
    name: str
    chain_id: int
    url: str
    gas_price: int


@dataclass(frozen=True)
class ExplorerProfile:
    name: str
    chain_id: int
    api_url: str
    browser_url: str
    api_key: str

    def address_url(self, address: str) -> str:
        return f"{self.browser_url.rstrip('/')}/address/{address}#code"


@dataclass(frozen=True)
class ToolchainProfile:
    name: str
    compilers: tuple[CompilerProfile, ...]
    networks: dict[str, NetworkProfile]
    explorers: dict[str, ExplorerProfile]
    default_network: str

    def network(self, name: str | None = None) -> NetworkProfile:
        key = name or self.default_network
        try:
            return self.networks[key]
        except KeyError:
            known = ", ".join(sorted(self.networks)) or "none"
            raise VerificationError(f"Unknown network {key!r} in profile {self.name!r} (known: {known})") from None

    def explorer_for(self, network: NetworkProfile) -> ExplorerProfile:
        explorer = self.explorers.get(network.name)
        if explorer is None:
            raise VerificationError(f"No explorer registered for network {network.name!r}")
        if explorer.chain_id != network.chain_id:
            raise VerificationError(
                f"Explorer {explorer.name!r} is registered for chain {explorer.chain_id}, "
                f"network {network.name!r} is chain {network.chain_id}"
            )
        return explorer

    def compiler(self, version: str) -> CompilerProfile | None:
        for c in self.compilers:
            if c.version == version:
                return c
        return None


@dataclass(frozen=True)
class VerificationRequest:
    address: str
    contract: str
    constructor_arguments: tuple[Any, ...] = ()


@dataclass(frozen=True)
class BuildInfo:
    path: Path
    solc_version: str
    solc_long_version: str
    input: dict[str, Any]
    output: dict[str, Any]


@dataclass(frozen=True)
class ContractArtifact:
    source_name: str
    contract_name: str
    abi: list[dict[str, Any]]
    deployed_bytecode: str
    immutable_references: dict[str, Any]
    build_info: BuildInfo

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"


@dataclass(frozen=True)
class VerificationResult:
    address: str
    contract: str
    guid: str = ""
    message: str = ""
    already_verified: bool = False
    url: str = ""
