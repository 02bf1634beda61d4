from __future__ import annotations

import json
import urllib.parse
from typing import Any

from .constants import CODE_FORMAT_STANDARD_JSON
from .http import http_get_json, http_post_form
from .types import ExplorerError, ExplorerProfile


class AlreadyVerifiedError(ExplorerError):
    pass


def _is_already_verified_message(text: str) -> bool:
    return "already verified" in (text or "").lower()


def scan_url(api_base: str, api_key: str, **params: str) -> str:
    qp = dict(params)
    qp["apikey"] = api_key
    return f"{api_base}?{urllib.parse.urlencode(qp)}"


def get_sourcecode(explorer: ExplorerProfile, address: str) -> dict[str, Any]:
    url = scan_url(
        explorer.api_url,
        explorer.api_key,
        module="contract",
        action="getsourcecode",
        address=address,
    )
    data = http_get_json(url)
    if not isinstance(data, dict):
        raise ExplorerError(f"Unexpected getsourcecode response: {data!r}")
    return data


def classify_verified_from_getsourcecode_response(data: Any) -> bool | None:
    """
    Returns:
      - True: definitely verified (source + ABI present)
      - False: definitely not verified ("not verified" response)
      - None: unknown (API error, rate limit, unexpected shape)
    """
    if not isinstance(data, dict):
        return None

    status = str(data.get("status") or "").strip()
    message = str(data.get("message") or "").strip().lower()
    result = data.get("result")

    if status == "0" or message == "notok":
        return None

    if not isinstance(result, list) or not result:
        return None

    record = result[0]
    if not isinstance(record, dict):
        return None

    source_code = str(record.get("SourceCode") or "").strip()
    abi_str = str(record.get("ABI") or "").strip()

    if "not verified" in abi_str.lower():
        return False
    # Blockscout reports unverified contracts with an empty SourceCode field.
    if not source_code:
        return False
    if not abi_str:
        return None

    return True


def is_verified(explorer: ExplorerProfile, address: str) -> bool | None:
    return classify_verified_from_getsourcecode_response(get_sourcecode(explorer, address))


def submit_verification(
    explorer: ExplorerProfile,
    *,
    address: str,
    contract: str,
    standard_json_input: dict[str, Any],
    compiler_version: str,
    constructor_arguments: str,
) -> str:
    """
    Submit one ``verifysourcecode`` request and return the explorer's GUID.

    ``contract`` is the fully qualified "source:Name" identifier and
    ``constructor_arguments`` the ABI-encoded hex string without ``0x``.
    """
    fields = {
        "apikey": explorer.api_key,
        "module": "contract",
        "action": "verifysourcecode",
        "contractaddress": address,
        "sourceCode": json.dumps(standard_json_input, separators=(",", ":")),
        "codeformat": CODE_FORMAT_STANDARD_JSON,
        "contractname": contract,
        "compilerversion": compiler_version,
        # Etherscan's spelling.
        "constructorArguements": constructor_arguments,
    }
    data = http_post_form(explorer.api_url, fields)
    if not isinstance(data, dict):
        raise ExplorerError(f"Unexpected verifysourcecode response: {data!r}")

    status = str(data.get("status") or "").strip()
    result = str(data.get("result") or "").strip()
    message = str(data.get("message") or "").strip()
    if status != "1":
        if _is_already_verified_message(result) or _is_already_verified_message(message):
            raise AlreadyVerifiedError(result or message)
        raise ExplorerError(f"Verification request rejected by {explorer.name}: {result or message or data!r}")
    if not result:
        raise ExplorerError(f"Explorer {explorer.name} returned no verification GUID: {data!r}")
    return result


def check_verification_status(explorer: ExplorerProfile, guid: str) -> tuple[str, str]:
    """
    Returns ``(state, message)`` where state is "pending", "pass" or "fail".
    """
    url = scan_url(
        explorer.api_url,
        explorer.api_key,
        module="contract",
        action="checkverifystatus",
        guid=guid,
    )
    data = http_get_json(url)
    if not isinstance(data, dict):
        raise ExplorerError(f"Unexpected checkverifystatus response: {data!r}")

    result = str(data.get("result") or "").strip()
    lowered = result.lower()
    if "pending" in lowered:
        return ("pending", result)
    if str(data.get("status") or "").strip() == "1" or lowered.startswith("pass") or _is_already_verified_message(lowered):
        return ("pass", result)
    return ("fail", result or str(data.get("message") or ""))
