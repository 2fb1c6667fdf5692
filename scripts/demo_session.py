"""Walk through a full store session against an in-memory substrate.

Logs in, lists the seeded agents, creates/updates/deletes an agent, runs a
query-builder read, then logs out and back in to show the tenant reset.

Usage:
    python -m scripts.demo_session [email] [password]

Defaults: demo@x.com / Password123. Settings come from the environment / .env
(STORAGE_BACKEND=redis runs the same flow against Redis).
"""

from __future__ import annotations

import asyncio
import sys

from sessionstore import create_data_store, get_settings
from sessionstore.shared.telemetry import setup_logging


def _fail(step: str, message: str | None) -> None:
    print(f"{step} failed: {message}", file=sys.stderr)
    sys.exit(1)


async def run(email: str, password: str) -> None:
    settings = get_settings()
    setup_logging(settings)
    store = create_data_store(settings)
    try:
        login = await store.login(email, password)
        if not login.success:
            _fail("Login", login.error)
        print(f"Signed in as {login.user.display_name} (tenant {login.user.id})")

        agents = store.list_items("agents").data
        print(f"Seeded agents: {', '.join(a['name'] for a in agents)}")

        created = await store.add_item("agents", {"name": "Bot"})
        if not created.ok:
            _fail("Create", created.error.message)
        agent = created.data
        print(f"Created {agent['id']} (version {agent['version']})")

        updated = await store.update_item("agents", agent["id"], {"name": "Bot2"})
        print(f"Updated {agent['id']} -> name={updated.data['name']} version={updated.data['version']}")

        await store.delete_item("agents", agent["id"])
        print(f"Deleted {agent['id']}; read back: {store.get_item('agents', agent['id']).data}")

        inbound = (
            store.from_("calls")
            .select("id, started_at, agent:agents(name)")
            .eq("direction", "inbound")
            .order("started_at", desc=True)
            .execute()
        )
        print(f"Inbound calls: {inbound.data}")

        await store.logout()
        await store.login(email, password)
        names = [a["name"] for a in store.list_items("agents").data]
        print(f"After logout/login: {len(names)} agents ({', '.join(names)})")
    finally:
        await store.aclose()


def main() -> None:
    email = sys.argv[1] if len(sys.argv) > 1 else "demo@x.com"
    password = sys.argv[2] if len(sys.argv) > 2 else "Password123"
    asyncio.run(run(email, password))


if __name__ == "__main__":
    main()
