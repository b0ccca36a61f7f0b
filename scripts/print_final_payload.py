"""
Print the last complete=true intake-form-update payload from a traffic capture,
to check the lender field names the payload builder emits.
Run: python -m scripts.print_final_payload ./captures/capture.json
"""
from __future__ import annotations

import argparse
import base64
import json
import sys
from pathlib import Path
from typing import Any, Optional

CAPTURE_URL_MARKER = "intake-form-update.php"

SAMPLE_KEYS = [
    "email",
    "firstName",
    "lastName",
    "phoneNum",
    "selectionTagsBorrowerBroker",
    "selectionTagsFICO",
    "addressInput",
    "selectionTagsPropertyType",
    "loanPurpose",
    "selectionTagsPurchaseRefinance",
    "selectionTagsRefi6Months",
    "selectionTagsLoanType",
    "inputLandCost",
    "inputGUCPurchaseConstructionCost",
    "inputGUCARV",
    "selectionTagsBorrowerExperience",
    "selectionTagsPreferredClosing",
    "selectionTagsBrokerFee",
    "radioGroupLeadSource",
]


def decode_body(request: dict[str, Any]) -> str:
    if request.get("postDataBase64"):
        return base64.b64decode(request["postDataBase64"]).decode("utf-8")
    return str(request.get("postData") or "")


def final_payloads(capture: dict[str, Any]) -> list[dict[str, Any]]:
    """complete=true bodies posted to the intake endpoint, oldest first."""
    requests = capture.get("requests") if isinstance(capture.get("requests"), list) else []
    found: list[tuple[float, dict[str, Any]]] = []
    for r in requests:
        if not isinstance(r, dict) or r.get("method") != "POST" or CAPTURE_URL_MARKER not in str(r.get("url") or ""):
            continue
        try:
            obj = json.loads(decode_body(r))
        except ValueError:
            continue
        if isinstance(obj, dict) and obj.get("complete") is True:
            found.append((r.get("ts") or r.get("timestamp") or 0, obj))
    found.sort(key=lambda item: item[0])
    return [obj for _, obj in found]


def summarize(payload: dict[str, Any]) -> list[str]:
    form_data = payload.get("form_data") or {}
    lines = [
        "Found complete=true payload",
        f"session_id: {payload.get('session_id')}",
        f"Top-level keys: {', '.join(payload.keys())}",
        f"form_data key count: {len(form_data)}",
        f"form_data keys: {', '.join(sorted(form_data))}",
        "---",
    ]
    for key in SAMPLE_KEYS:
        if key in form_data:
            lines.append(f"{key}: {json.dumps(form_data[key])}")
    return lines


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("capture", type=Path, help="Capture JSON with a top-level 'requests' list")
    args = parser.parse_args(argv)

    capture = json.loads(args.capture.read_text(encoding="utf-8"))
    finals = final_payloads(capture)
    if not finals:
        print(f"No complete=true payload found in capture: {args.capture}")
        return 0
    print("\n".join(summarize(finals[-1])))
    return 0


if __name__ == "__main__":
    sys.exit(main())
