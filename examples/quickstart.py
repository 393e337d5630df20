#!/usr/bin/env python3
"""
Sealnote Quickstart — one sealed message end to end.

Creates a project → a password-protected message → reads it as a
recipient → rotates the password → attaches an image → cleans up.
Run with: python examples/quickstart.py

Requires: pip install -e ".[test]"  (for httpx)
Server must be running in development mode: sealnote serve
"""

import sys
import uuid

import httpx

from sealnote.auth.jwt import create_token
from sealnote.config import settings

BASE = "http://localhost:3000/api/v1"

# Smallest valid PNG header; the server only checks the declared type.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def main():
    run_id = uuid.uuid4().hex[:6]
    owner = uuid.uuid4()
    # The gateway normally injects this header; we sign it ourselves.
    auth = {settings.auth_header_name: create_token(str(owner))}
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking server health...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"Server not reachable at {BASE}")
        print("Start it with:  sealnote serve")
        sys.exit(1)
    health = resp.json()
    print(f"  Status:   {health['status']}")
    print(f"  Database: {health['database']}")

    # ── Create project ────────────────────────────────────────────
    print("\n1. Creating project...")
    resp = client.post("/project", json={"name": f"letters-{run_id}"}, headers=auth)
    assert resp.status_code == 201, f"Failed: {resp.text}"
    project = resp.json()
    print(f"   Project: {project['name']} ({project['id'][:8]}...)")

    # ── Seal a message ────────────────────────────────────────────
    print("\n2. Sealing a message...")
    resp = client.post(f"/admin/message/{project['id']}", json={
        "message_id": f"birthday-{run_id}",
        "content": {"body": "Happy birthday!"},
        "initial_password": "cake",
        "hint": "what we ate",
        "from": "Ana",
        "to": "Ben",
    }, headers=auth)
    assert resp.status_code == 201, f"Failed: {resp.text}"
    message = resp.json()
    message_id = message["id"]
    print(f"   Message: {message_id} (hint: {message['hint']})")

    # ── Recipient side: no token needed ───────────────────────────
    print("\n3. Reading as the recipient...")
    resp = client.post(f"/message/{message_id}", json={})
    print(f"   Without password: {resp.status_code} {resp.json()['detail']}")
    resp = client.post(f"/message/{message_id}", json={"password": "cake"})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   With password:    {resp.json()['content']}")

    # ── Rotate the password ───────────────────────────────────────
    print("\n4. Rotating the password...")
    resp = client.patch(f"/message/{message_id}/password", json={
        "current_password": "cake",
        "new_password": "pie",
        "new_hint": "dessert, round",
    })
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   {resp.json()['message']}")

    # ── Attach an image ───────────────────────────────────────────
    print("\n5. Attaching an image...")
    resp = client.post(
        f"/message/{message_id}/image",
        files={"file": ("card.png", PNG_BYTES, "image/png")},
        data={"password": "pie"},
    )
    assert resp.status_code == 200, f"Failed: {resp.text}"
    resp = client.get(f"/message/{message_id}/image", headers={"x-message-password": "pie"})
    print(f"   Downloaded {len(resp.content)} bytes")

    # ── Clean up ──────────────────────────────────────────────────
    print("\n6. Deleting the project (messages and images go with it)...")
    resp = client.delete(f"/project/{project['id']}", headers=auth)
    print(f"   {resp.json()['message']}")


if __name__ == "__main__":
    main()
