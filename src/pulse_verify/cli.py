from __future__ import annotations

import argparse
import json
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any

from .constants import DEFAULT_ARTIFACTS_DIR
from .explorer import check_verification_status
from .profiles import PROFILES, get_profile, profile_names, profile_to_dict
from .util import fail, read_json
from .verify import explorer_with_key, run_verify


def _load_constructor_args(args: argparse.Namespace) -> list[Any]:
    if args.args and args.args_file:
        raise SystemExit("Pass either --args or --args-file, not both")
    if args.args_file:
        p = Path(args.args_file)
        if not p.exists():
            raise SystemExit(f"constructor args file not found: {p}")
        data = read_json(p, parse_float=Decimal)
    elif args.args:
        try:
            data = json.loads(args.args, parse_float=Decimal)
        except ValueError as exc:
            raise SystemExit(f"--args is not valid JSON: {exc}") from None
    else:
        return []
    if not isinstance(data, list):
        raise SystemExit("Constructor arguments must be a JSON list in declaration order")
    return data


def _cmd_verify(args: argparse.Namespace) -> int:
    return run_verify(
        args.address,
        args.contract,
        _load_constructor_args(args),
        profile_name=args.profile or None,
        network_name=args.network or None,
        rpc_url=args.rpc_url or None,
        artifacts_dir=Path(args.artifacts_dir),
        wait=not args.no_wait,
    )


def _cmd_status(args: argparse.Namespace) -> int:
    profile = get_profile(args.profile or None)
    try:
        explorer = explorer_with_key(profile.explorer_for(profile.network(args.network or None)))
        state, message = check_verification_status(explorer, args.guid)
    except Exception as exc:
        fail(f"{type(exc).__name__}: {exc}")
        return 1
    print(f"[{'ok' if state == 'pass' else state}] {message}")
    return 1 if state == "fail" else 0


def _cmd_profiles(args: argparse.Namespace) -> int:
    names = [args.name] if args.name else profile_names()
    payload = [profile_to_dict(get_profile(n), solc_settings=args.solc_settings) for n in names]
    print(json.dumps(payload[0] if args.name else payload, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pulse-verify",
        description="Verify deployed contracts on PulseChain block explorers (Etherscan-compatible API).",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(subp: argparse.ArgumentParser) -> None:
        subp.add_argument(
            "--profile",
            default="",
            help=f"Toolchain profile ({', '.join(sorted(PROFILES))}; env PULSE_VERIFY_PROFILE).",
        )
        subp.add_argument("--network", default="", help="Network name inside the profile (default: the profile's default).")

    p_verify = sub.add_parser("verify", help="Submit a deployed contract for source verification.")
    add_common(p_verify)
    p_verify.add_argument("address", nargs="?", default="", help="Deployed contract address.")
    p_verify.add_argument(
        "--contract",
        default="",
        help='Fully qualified contract, e.g. "contracts/Token.sol:Token" (inferred from bytecode if omitted).',
    )
    p_verify.add_argument("--args", default="", help="Constructor arguments as a JSON list.")
    p_verify.add_argument("--args-file", default="", help="JSON file holding the constructor argument list.")
    p_verify.add_argument("--rpc-url", default="", help="JSON-RPC URL override (env PULSE_VERIFY_RPC_URL).")
    p_verify.add_argument(
        "--artifacts-dir",
        default=DEFAULT_ARTIFACTS_DIR,
        help=f"Compiler build-info directory (default: {DEFAULT_ARTIFACTS_DIR}).",
    )
    p_verify.add_argument("--no-wait", action="store_true", help="Return after submitting; do not poll the explorer.")
    p_verify.set_defaults(func=_cmd_verify)

    p_status = sub.add_parser("status", help="Check a submitted verification by GUID.")
    add_common(p_status)
    p_status.add_argument("guid", help="GUID returned on submission.")
    p_status.set_defaults(func=_cmd_status)

    p_profiles = sub.add_parser("profiles", help="Print the configured toolchain profiles as JSON.")
    p_profiles.add_argument("name", nargs="?", default="", help="Only print this profile.")
    p_profiles.add_argument("--solc-settings", action="store_true", help="Print compilers as solc standard-JSON settings.")
    p_profiles.set_defaults(func=_cmd_profiles)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
