from __future__ import annotations

import os
import time
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from .abi import encode_constructor_arguments
from .artifacts import (
    bytecode_matches,
    explorer_compiler_version,
    find_contract,
    infer_contract,
    iter_build_infos,
    standard_json_input,
)
from .constants import DEFAULT_ARTIFACTS_DIR, DEFAULT_MAX_POLLS, DEFAULT_POLL_INTERVAL_S
from .explorer import AlreadyVerifiedError, check_verification_status, is_verified, submit_verification
from .profiles import get_profile
from .rpc import rpc_chain_id, rpc_get_code
from .types import (
    ExplorerError,
    ExplorerProfile,
    ToolchainProfile,
    VerificationError,
    VerificationRequest,
    VerificationResult,
)
from .util import fail, is_hex_address, load_api_key, normalize_address, strip_0x, warn


def build_request(address: str, contract: str, constructor_arguments: Sequence[Any] | Mapping[str, Any] = ()) -> VerificationRequest:
    if isinstance(constructor_arguments, Mapping):
        if constructor_arguments:
            raise ValueError("Constructor arguments must be a list in declaration order")
        constructor_arguments = ()
    return VerificationRequest(
        address=address or "",
        contract=contract or "",
        constructor_arguments=tuple(constructor_arguments or ()),
    )


def check_request(request: VerificationRequest) -> None:
    if not request.address.strip():
        raise VerificationError("Cannot verify without a contract address")
    if not request.contract.strip():
        warn("No contract identifier given; the contract will be inferred from its deployed bytecode, which is error prone")


def _resolve_rpc_url(default: str, override: str | None) -> str:
    return (override or os.environ.get("PULSE_VERIFY_RPC_URL") or "").strip() or default


def explorer_with_key(explorer: ExplorerProfile) -> ExplorerProfile:
    return replace(explorer, api_key=load_api_key(explorer.api_key))


def wait_for_verification(
    explorer: ExplorerProfile,
    guid: str,
    *,
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    max_polls: int = DEFAULT_MAX_POLLS,
) -> tuple[str, str]:
    state, message = "pending", ""
    for _ in range(max(1, max_polls)):
        time.sleep(poll_interval_s)
        state, message = check_verification_status(explorer, guid)
        if state == "fail":
            raise ExplorerError(f"Verification failed: {message}")
        if state == "pass":
            break
    return state, message


def verify(
    request: VerificationRequest,
    profile: ToolchainProfile,
    *,
    network_name: str | None = None,
    rpc_url: str | None = None,
    artifacts_dir: Path = Path(DEFAULT_ARTIFACTS_DIR),
    wait: bool = True,
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    max_polls: int = DEFAULT_MAX_POLLS,
) -> VerificationResult:
    check_request(request)

    # The explorer gets the address as written; RPC and comparisons use the lower-cased form.
    address = request.address.strip()
    if not is_hex_address(address):
        raise ValueError(f"Invalid address: {request.address}")
    rpc_address = normalize_address(address)
    network = profile.network(network_name)
    explorer = explorer_with_key(profile.explorer_for(network))
    url = _resolve_rpc_url(network.url, rpc_url)
    print(f"[+] verifying {address} on {network.name} (chain {network.chain_id}) via {explorer.api_url}", flush=True)

    chain_id = rpc_chain_id(url)
    if chain_id != network.chain_id:
        raise VerificationError(f"RPC {url} is chain {chain_id}, profile {profile.name!r} expects {network.chain_id}")

    deployed_code = rpc_get_code(url, rpc_address)
    if not strip_0x(deployed_code):
        raise VerificationError(f"Address {address} has no deployed bytecode on chain {chain_id}")

    try:
        verified = is_verified(explorer, address)
    except Exception as exc:
        warn(f"Could not check whether {address} is already verified ({type(exc).__name__}: {exc}); submitting anyway")
        verified = None
    if verified is True:
        return VerificationResult(
            address=address,
            contract=request.contract,
            message="Already Verified",
            already_verified=True,
            url=explorer.address_url(address),
        )

    build_infos = list(iter_build_infos(artifacts_dir))
    if request.contract.strip():
        artifact = find_contract(build_infos, request.contract)
        if not bytecode_matches(artifact, deployed_code):
            warn(f"Compiled bytecode of {artifact.fully_qualified_name} differs from the code at {address}")
    else:
        artifact = infer_contract(build_infos, deployed_code)
        print(f"[+] inferred contract {artifact.fully_qualified_name}", flush=True)

    build_info = artifact.build_info
    if profile.compiler(build_info.solc_version) is None:
        configured = ", ".join(c.version for c in profile.compilers)
        raise VerificationError(
            f"{artifact.fully_qualified_name} was compiled with solc {build_info.solc_version}, "
            f"profile {profile.name!r} configures {configured}"
        )

    encoded_args = encode_constructor_arguments(artifact.abi, request.constructor_arguments)

    try:
        guid = submit_verification(
            explorer,
            address=address,
            contract=artifact.fully_qualified_name,
            standard_json_input=standard_json_input(build_info),
            compiler_version=explorer_compiler_version(build_info),
            constructor_arguments=encoded_args,
        )
    except AlreadyVerifiedError as exc:
        return VerificationResult(
            address=address,
            contract=artifact.fully_qualified_name,
            message=str(exc),
            already_verified=True,
            url=explorer.address_url(address),
        )
    print(f"[+] submitted {artifact.fully_qualified_name} for verification (guid={guid})", flush=True)

    message = "Pending in queue"
    if wait:
        state, message = wait_for_verification(explorer, guid, poll_interval_s=poll_interval_s, max_polls=max_polls)
        if state == "pending":
            warn(f"Verification still pending; check later with: pulse-verify status {guid}")

    return VerificationResult(
        address=address,
        contract=artifact.fully_qualified_name,
        guid=guid,
        message=message,
        url=explorer.address_url(address),
    )


def print_result(result: VerificationResult) -> None:
    if result.already_verified:
        print(f"[ok] {result.address} is already verified: {result.url}")
    else:
        print(f"[ok] {result.contract} at {result.address}: {result.message} ({result.url})")


def run_verify(
    address: str,
    contract: str,
    constructor_arguments: Sequence[Any] | Mapping[str, Any] = (),
    *,
    profile_name: str | None = None,
    network_name: str | None = None,
    rpc_url: str | None = None,
    artifacts_dir: Path | None = None,
    wait: bool = True,
) -> int:
    """Run one verification and map the outcome to a process exit code."""
    try:
        request = build_request(address, contract, constructor_arguments)
        profile = get_profile(profile_name)
        result = verify(
            request,
            profile,
            network_name=network_name,
            rpc_url=rpc_url,
            artifacts_dir=artifacts_dir or Path(DEFAULT_ARTIFACTS_DIR),
            wait=wait,
        )
    except Exception as exc:
        fail(f"{type(exc).__name__}: {exc}")
        return 1
    print_result(result)
    return 0
