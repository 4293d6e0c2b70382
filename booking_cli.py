#!/usr/bin/env python3
# booking_cli.py - small console client for the booking intake API
# Usage:
#   python booking_cli.py [--url http://127.0.0.1:3000] book --name "A. Sharma" --phone +911234567890 \
#       --check-in 2025-05-01 --check-out 2025-05-03 --room Deluxe
#   python booking_cli.py list
#   python booking_cli.py visit --sid abc123 --page /rooms [--exit]
#
# Notes:
# - Network errors are printed as "[error] ...", never raised.
# - The visit command sends the current time as the client timestamp.

import argparse
import os
import uuid
from datetime import datetime, timezone

import requests

DEFAULT_URL = os.environ.get("BOOKING_API_URL", "http://127.0.0.1:3000")
BOOK_EP = "/api/book"
SESSION_EP = "/api/log-session"


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Hotel booking API CLI")
    ap.add_argument("--url", default=DEFAULT_URL, help="Base URL, default %(default)s")
    sub = ap.add_subparsers(dest="cmd", required=True)

    b = sub.add_parser("book", help="Submit a booking")
    b.add_argument("--name", required=True, dest="guest_name")
    contact = b.add_mutually_exclusive_group(required=True)
    contact.add_argument("--phone")
    contact.add_argument("--email")
    b.add_argument("--check-in", required=True)
    b.add_argument("--check-out", required=True)
    b.add_argument("--room", required=True, dest="room_type")
    b.add_argument("--message")
    b.add_argument("--token", help="bot-verification token")

    sub.add_parser("list", help="List all bookings")

    v = sub.add_parser("visit", help="Log a page visit / exit")
    v.add_argument("--sid", help="Session id (default random UUID)")
    v.add_argument("--page", required=True)
    v.add_argument("--exit", action="store_true", help="send page_exit instead of page_visit")
    return ap.parse_args(argv)


def _request(method: str, url: str, payload: dict | None = None) -> dict:
    try:
        r = requests.request(method, url, json=payload, timeout=30)
        try:
            return r.json()
        except ValueError:
            r.raise_for_status()
            return {"error": f"unexpected response ({r.status_code})"}
    except requests.exceptions.RequestException as e:
        return {"error": str(e)}


def booking_payload(args) -> dict:
    payload = {
        "guest_name": args.guest_name,
        "check_in": args.check_in,
        "check_out": args.check_out,
        "room_type": args.room_type,
        "device": "cli",
    }
    if args.phone:
        payload["phone"] = args.phone
    if args.email:
        payload["email"] = args.email
    if args.message:
        payload["message"] = args.message
    if args.token:
        payload["recaptcha_token"] = args.token
    return payload


def format_result(obj: dict) -> str:
    if not isinstance(obj, dict):
        return str(obj)
    if obj.get("error"):
        return f"[error] {obj['error']}"
    if "data" in obj:
        rows = obj.get("data") or []
        lines = [f"{len(rows)} booking(s)"]
        for b in rows:
            lines.append(
                f"  {b.get('guest_name')} | {b.get('room_type')} | "
                f"{b.get('check_in')} -> {b.get('check_out')}"
            )
        return "\n".join(lines)
    if obj.get("success") and obj.get("id"):
        return f"booked: {obj['id']}"
    if obj.get("message"):
        return f"[skipped] {obj['message']}"
    return "ok" if obj.get("success") else str(obj)


def main(argv=None):
    args = parse_args(argv)
    base_url = args.url.rstrip("/")

    if args.cmd == "book":
        resp = _request("POST", base_url + BOOK_EP, booking_payload(args))
    elif args.cmd == "list":
        resp = _request("GET", base_url + BOOK_EP)
    else:
        resp = _request(
            "POST",
            base_url + SESSION_EP,
            {
                "sessionId": args.sid or str(uuid.uuid4()),
                "page": args.page,
                "eventType": "page_exit" if args.exit else "page_visit",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
    print(format_result(resp))
    return resp


if __name__ == "__main__":
    main()
