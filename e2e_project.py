"""
Manual smoke script against a running travelflow server:
- Health
- Itinerary generation (Coze workflow, or mock fallback)
- Request validation

Requires:
  pip install requests

Default base_url: http://127.0.0.1:8076
"""
import argparse
import json
from typing import Any, Dict

import requests


def _pp(title: str, obj: Any):
    print(f"\n===== {title} =====")
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def _post(base_url: str, path: str, payload: Dict[str, Any], timeout: int = 30) -> requests.Response:
    url = f"{base_url.rstrip('/')}{path}"
    return requests.post(url, json=payload, timeout=timeout)


def _get(base_url: str, path: str, timeout: int = 30) -> requests.Response:
    url = f"{base_url.rstrip('/')}{path}"
    return requests.get(url, timeout=timeout)


def check_health(base_url: str):
    r = _get(base_url, "/health")
    _pp("Health", {"status_code": r.status_code, "response": r.json()})


def check_itinerary(base_url: str, payload: Dict[str, Any], timeout: int):
    print("\n############################")
    print("# ITINERARY")
    print("############################")
    r = _post(base_url, "/v1/itinerary", payload, timeout=timeout)
    body = r.json()
    data = body.get("data") or {}
    _pp("Itinerary", {
        "status_code": r.status_code,
        "fallback": body.get("fallback", False),
        "destination": data.get("destination"),
        "startDate": data.get("startDate"),
        "endDate": data.get("endDate"),
        "title": data.get("title"),
        "plan": (data.get("plan") or "")[:300],
        "highlights": (data.get("highlights") or "")[:300],
    })


def check_validation(base_url: str):
    r = _post(base_url, "/v1/itinerary", {"location": " ", "days": "3"})
    _pp("Validation (blank location)", {"status_code": r.status_code, "response": r.json()})


def main():
    parser = argparse.ArgumentParser(description="travelflow smoke test")
    parser.add_argument("--base-url", default="http://127.0.0.1:8076", help="API base URL")
    parser.add_argument("--location", default="北京")
    parser.add_argument("--destination", default=None)
    parser.add_argument("--days", default="5-7")
    parser.add_argument("--budget", default=None)
    parser.add_argument("--timeout", type=int, default=300)
    args = parser.parse_args()

    check_health(args.base_url)
    check_validation(args.base_url)

    payload = {"location": args.location, "days": args.days}
    if args.destination:
        payload["destination"] = args.destination
    if args.budget:
        payload["budget"] = args.budget
    check_itinerary(args.base_url, payload, args.timeout)


if __name__ == "__main__":
    main()
