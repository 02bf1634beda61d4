#!/usr/bin/env python3
from __future__ import annotations

import sys
from pathlib import Path


def _bootstrap_src() -> None:
    src_dir = Path(__file__).resolve().parent.parent / "src"
    sys.path.insert(0, str(src_dir))


_bootstrap_src()

from pulse_verify.verify import run_verify  # noqa: E402

# Live address of the contract.
ADDRESS = ""

# Contract inside contracts/, written as "contracts/Filename.sol:ContractName".
CONTRACT = ""

# Constructor arguments (if any), in declaration order.
CONSTRUCTOR_ARGUMENTS: list = []


if __name__ == "__main__":
    print("[+] Running verify script...", flush=True)
    raise SystemExit(run_verify(ADDRESS, CONTRACT, CONSTRUCTOR_ARGUMENTS))
