#!/usr/bin/env python3
"""
Generate Auto Clips
===================

Calls the admin auto-clip endpoint for each source asset and prints how many
of the three highlight clips were created.

Usage
-----
    python scripts/generate_clips.py \
      --api http://localhost:8000/api/v1 \
      --principal ops@example.com \
      --ids film-1,film-2
"""

import argparse
import sys

import requests


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--api", required=True, help="API base, e.g., http://localhost:8000/api/v1")
    ap.add_argument("--principal", required=True, help="Admin principal sent in the identity header")
    ap.add_argument("--principal-header", default="X-Principal", help="Identity header name")
    ap.add_argument("--ids", required=True, help="Comma-separated source asset IDs")
    args = ap.parse_args()

    headers = {args.principal_header: args.principal}
    target_ids = [s.strip() for s in args.ids.split(",") if s.strip()]

    failed = 0
    for aid in target_ids:
        r = requests.post(f"{args.api}/admin/assets/{aid}/auto-clips", headers=headers, timeout=60)
        if r.status_code // 100 != 2:
            print(f"Clip generation failed for {aid}: {r.status_code} {r.text}")
            failed += 1
            continue
        body = r.json()
        print(f"{aid}: created {body.get('created')}/{body.get('requested')} clips")
        if body.get("created") != body.get("requested"):
            failed += 1

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
