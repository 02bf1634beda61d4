from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Iterator

from .types import BuildInfo, ContractArtifact, VerificationError
from .util import parse_contract_identifier, read_json, strip_0x


def load_build_info(path: Path) -> BuildInfo:
    data = read_json(path)
    if not isinstance(data, dict) or not isinstance(data.get("input"), dict):
        raise VerificationError(f"Not a compiler build-info file: {path}")
    long_version = str(data.get("solcLongVersion") or data.get("solcVersion") or "")
    short_version = str(data.get("solcVersion") or long_version.split("+", 1)[0])
    return BuildInfo(
        path=path,
        solc_version=short_version,
        solc_long_version=long_version,
        input=data["input"],
        output=data.get("output") or {},
    )


def iter_build_infos(build_info_dir: Path) -> Iterator[BuildInfo]:
    if not build_info_dir.is_dir():
        raise VerificationError(f"Build-info directory not found: {build_info_dir} (compile the contracts first)")
    for path in sorted(build_info_dir.glob("*.json")):
        yield load_build_info(path)


def _iter_contracts(build_info: BuildInfo) -> Iterator[ContractArtifact]:
    contracts = build_info.output.get("contracts") or {}
    for source_name, names in contracts.items():
        if not isinstance(names, dict):
            continue
        for contract_name, meta in names.items():
            evm = meta.get("evm") or {}
            deployed = evm.get("deployedBytecode") or {}
            yield ContractArtifact(
                source_name=source_name,
                contract_name=contract_name,
                abi=meta.get("abi") or [],
                deployed_bytecode=str(deployed.get("object") or ""),
                immutable_references=deployed.get("immutableReferences") or {},
                build_info=build_info,
            )


def _source_matches(source_name: str, wanted: str) -> bool:
    s = source_name.replace("\\", "/")
    w = wanted.replace("\\", "/")
    while w.startswith("./"):
        w = w.removeprefix("./")
    return s == w or s.endswith("/" + w)


def find_contract(build_infos: Iterable[BuildInfo], identifier: str) -> ContractArtifact:
    wanted_source, wanted_name = parse_contract_identifier(identifier)
    hits: dict[str, ContractArtifact] = {}
    for bi in build_infos:
        for art in _iter_contracts(bi):
            if art.contract_name == wanted_name and _source_matches(art.source_name, wanted_source):
                # The same contract may appear in several compiler runs; the last file read wins.
                hits[art.fully_qualified_name] = art
    if not hits:
        raise VerificationError(f"Contract {identifier!r} not found in build artifacts")
    if len(hits) > 1:
        names = ", ".join(sorted(hits))
        raise VerificationError(f"Contract identifier {identifier!r} is ambiguous: {names}")
    return next(iter(hits.values()))


def strip_metadata(code_hex: str) -> str:
    """
    Drop the CBOR metadata section solc appends to runtime bytecode.

    The last two bytes hold the metadata length.
    """
    body = strip_0x(code_hex).lower()
    if len(body) < 4:
        return body
    try:
        meta_len = int(body[-4:], 16)
    except ValueError:
        return body
    cut = (meta_len + 2) * 2
    if cut >= len(body):
        return body
    return body[:-cut]


def mask_immutables(code_hex: str, immutable_references: dict[str, Any]) -> str:
    body = bytearray.fromhex(strip_0x(code_hex))
    for refs in immutable_references.values():
        for ref in refs:
            start = int(ref.get("start", 0))
            length = int(ref.get("length", 0))
            body[start : start + length] = bytes(len(body[start : start + length]))
    return body.hex()


def bytecode_matches(artifact: ContractArtifact, deployed_code: str) -> bool:
    compiled = strip_0x(artifact.deployed_bytecode)
    if not compiled or "__$" in compiled:
        return False
    try:
        onchain = mask_immutables(deployed_code, artifact.immutable_references)
    except ValueError:
        return False
    return strip_metadata(compiled) == strip_metadata(onchain)


def infer_contract(build_infos: Iterable[BuildInfo], deployed_code: str) -> ContractArtifact:
    hits: dict[str, ContractArtifact] = {}
    for bi in build_infos:
        for art in _iter_contracts(bi):
            if bytecode_matches(art, deployed_code):
                hits[art.fully_qualified_name] = art
    if not hits:
        raise VerificationError("Deployed bytecode does not match any compiled contract; pass the contract identifier")
    if len(hits) > 1:
        names = ", ".join(sorted(hits))
        raise VerificationError(f"Deployed bytecode matches more than one contract ({names}); pass the contract identifier")
    return next(iter(hits.values()))


def standard_json_input(build_info: BuildInfo) -> dict[str, Any]:
    return build_info.input


def explorer_compiler_version(build_info: BuildInfo) -> str:
    version = build_info.solc_long_version
    if not version:
        raise VerificationError(f"Build-info {build_info.path} has no compiler version")
    return version if version.startswith("v") else f"v{version}"
