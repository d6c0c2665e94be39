#!/usr/bin/env python3
"""
Demo seed script — populates the database with sample cards and links.

!! NOT FOR PRODUCTION !!
This script creates test users with known passwords. It is intended ONLY
for local demos and frontend development.

Usage:
    # With the API server running on localhost:8000:
    python demo/seed.py

    # Reset the database and re-seed:
    python demo/seed.py --reset

    # Custom server URL:
    python demo/seed.py --base-url http://localhost:9000

Login credentials after seeding:
    ┌──────────────┬───────────────────┬───────┐
    │ Username     │ Password          │ Role  │
    ├──────────────┼───────────────────┼───────┤
    │ admin        │ AdminDemo123!     │ ADMIN │
    │ alice        │ AliceDemo123!     │ USER  │
    │ bob          │ BobDemo123!       │ USER  │
    │ carol        │ CarolDemo123!     │ USER  │
    └──────────────┴───────────────────┴───────┘
"""

import argparse
import asyncio
import os
import sys

import httpx

from promote_admin import promote

# ---------------------------------------------------------------------------
# Demo data
# ---------------------------------------------------------------------------

ADMIN = {
    "username": "admin",
    "email": "admin@cardfolio.example.com",
    "password": "AdminDemo123!",
}

MEMBERS = [
    {
        "username": "alice",
        "email": "alice@example.com",
        "password": "AliceDemo123!",
        "card": {
            "first_name": "Alice",
            "last_name": "Chen",
            "job_title": "Staff Engineer",
            "company": "Northwind",
            "email": "alice@northwind.example.com",
            "template": "Modern",
            "social_media": [
                {"platform": "GitHub", "url": "https://github.com/alice-chen"},
                {"platform": "LinkedIn", "url": "https://linkedin.com/in/alice-chen"},
            ],
        },
        "slug": "alice-chen",
    },
    {
        "username": "bob",
        "email": "bob@example.com",
        "password": "BobDemo123!",
        "card": {
            "first_name": "Bob",
            "last_name": "Martinez",
            "job_title": "Photographer",
            "website": "https://bobshoots.example.com",
            "bio": "Weddings, portraits and the occasional cat.",
            "template": "Vibrant",
        },
        "slug": None,
    },
    {
        "username": "carol",
        "email": "carol@example.com",
        "password": "CarolDemo123!",
        "card": None,
        "slug": None,
    },
]

EVENT_TEMPLATE = {
    "company": "DevConf 2026",
    "job_title": "Attendee",
    "website": "https://devconf.example.com",
    "template": "Fresh",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def log(msg: str) -> None:
    print(f"  {msg}")


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register(client: httpx.AsyncClient, base_url: str, user: dict) -> str:
    """Register a user (or log in if they exist), return JWT token."""
    resp = await client.post(f"{base_url}/auth/register", json={
        "username": user["username"],
        "email": user["email"],
        "password": user["password"],
    })
    if resp.status_code == 409:
        resp = await client.post(f"{base_url}/auth/login", json={
            "username": user["username"],
            "password": user["password"],
        })
    resp.raise_for_status()
    return resp.json()["token"]


async def seed(base_url: str) -> None:
    print("\n========================================")
    print("  DEMO SEED — NOT FOR PRODUCTION")
    print("========================================\n")

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            (await client.get(f"{base_url}/health")).raise_for_status()
        except (httpx.ConnectError, httpx.HTTPStatusError):
            print(f"  ERROR: Cannot connect to {base_url}")
            print("  Start the server first: uvicorn cardfolio.main:app --reload\n")
            sys.exit(1)

        print("Creating admin user...")
        admin_token = await register(client, base_url, ADMIN)
        await promote(ADMIN["username"])
        log(f"{ADMIN['username']} promoted to ADMIN")

        member_tokens = {}
        for member in MEMBERS:
            print(f"\nCreating {member['username']}...")
            token = await register(client, base_url, member)
            member_tokens[member["username"]] = token
            if member["card"] is None:
                log("No card yet (claims an NFC tag below)")
                continue

            resp = await client.post(
                f"{base_url}/business-cards",
                json=member["card"],
                headers=auth_header(token),
            )
            resp.raise_for_status()
            card = resp.json()
            log(f"Card {card['id']}")

            link_body = {"business_card_id": card["id"]}
            if member["slug"]:
                link_body["unique_slug"] = member["slug"]
            resp = await client.post(
                f"{base_url}/public-links", json=link_body, headers=auth_header(token)
            )
            if "error_type" not in resp.json():
                log(f"Share link: {base_url}/public-links/{resp.json()['unique_slug']}")

        # --- Event NFC tags ---
        print("\nProvisioning event NFC tags...")
        resp = await client.post(
            f"{base_url}/admin/template-cards",
            json=EVENT_TEMPLATE,
            headers=auth_header(admin_token),
        )
        resp.raise_for_status()
        template_id = resp.json()["id"]

        resp = await client.post(
            f"{base_url}/admin/generate-links",
            json={"count": 5, "prefix": "devconf", "template_id": template_id},
            headers=auth_header(admin_token),
        )
        resp.raise_for_status()
        batch = resp.json()
        for url in batch["claim_urls"]:
            log(url)

        # Carol taps the first tag
        slug = batch["slugs"][0]
        resp = await client.post(
            f"{base_url}/nfc-links/{slug}/claim",
            headers=auth_header(member_tokens["carol"]),
        )
        if "error_type" not in resp.json():
            log(f"carol claimed {slug}")

    # --- Summary ---
    print("\n========================================")
    print("  SEED COMPLETE — Login Credentials")
    print("========================================")
    print(f"\n  {'Username':<14s} {'Password':<20s} {'Role'}")
    print(f"  {'─' * 14} {'─' * 20} {'─' * 5}")
    print(f"  {ADMIN['username']:<14s} {ADMIN['password']:<20s} ADMIN")
    for m in MEMBERS:
        print(f"  {m['username']:<14s} {m['password']:<20s} USER")
    print()


def reset_database() -> None:
    """Delete the SQLite database file so the server recreates it on restart."""
    db_path = os.path.join(os.path.dirname(__file__), "..", "cardfolio.db")
    db_path = os.path.normpath(db_path)

    if os.path.exists(db_path):
        os.remove(db_path)
        print(f"\n  Deleted {db_path}")
        print("  Restart the server to recreate empty tables.\n")
    else:
        print(f"\n  No database found at {db_path}\n")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Demo seed script — NOT FOR PRODUCTION",
        epilog="Creates sample users, cards, share links and NFC tags for demos.",
    )
    parser.add_argument(
        "--base-url", default="http://localhost:8000",
        help="Base URL of the running API (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--reset", action="store_true",
        help="Delete the database file and exit (restart server to recreate)",
    )
    args = parser.parse_args()

    if args.reset:
        reset_database()
        return

    await seed(args.base_url)


if __name__ == "__main__":
    asyncio.run(main())
