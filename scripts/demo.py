#!/usr/bin/env python3
"""
Demo script for the Tandem offline cache worker.

This script walks through install, caching strategies, going offline and a
version update against a fake app origin (httpx.MockTransport), so it needs
neither the real app nor Redis.
"""

import asyncio
import json

import httpx

from tandem_offline import (
    CacheConfig,
    InMemoryClientHost,
    InMemoryPartitionStore,
    PushEvent,
    ServiceWorker,
    ServiceWorkerRegistration,
    SyncEvent,
)
from tandem_offline.log_config import configure_logging
from tandem_offline.repositories import HttpxNetwork

ORIGIN = "http://localhost:5000"


class FakeOrigin:
    """Tiny stand-in for the Tandem server."""

    def __init__(self) -> None:
        self.online = True
        self.expenses = [{"id": 1, "description": "Mercado", "amount": 182.4}]

    def handle(self, request: httpx.Request) -> httpx.Response:
        if not self.online:
            raise httpx.ConnectError("network unreachable", request=request)

        path = request.url.path
        if path == "/api/expenses":
            return httpx.Response(200, json=self.expenses)
        if path == "/api/auth/session":
            return httpx.Response(200, json={"user": "ana"})
        if path == "/manifest.json":
            return httpx.Response(200, json={"name": "Tandem", "start_url": "/"})
        if path.endswith(".png"):
            return httpx.Response(200, content=b"\x89PNG", headers={"content-type": "image/png"})
        if path == "/":
            return httpx.Response(200, text="<html><body>Tandem</body></html>")
        return httpx.Response(404, text="not found")


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def print_partitions(worker: ServiceWorker) -> None:
    stats = await worker.get_stats()
    for item in stats["partitions"]:
        marker = "✓" if item["current"] else "✗"
        print(f"  {marker} {item['name']}: {item['entries']} entries")


async def demo_install(registration: ServiceWorkerRegistration) -> ServiceWorker:
    """Demonstrate install and activation."""
    print_section("Install & Activate")

    worker = await registration.register()
    print(f"\n📦 Worker {worker.version} is {worker.state.value}")
    await print_partitions(worker)
    return worker


async def demo_strategies(worker: ServiceWorker, origin: FakeOrigin) -> None:
    """Demonstrate the strategy each request gets."""
    print_section("Caching Strategies")

    urls = [
        f"{ORIGIN}/icon-192.png",
        f"{ORIGIN}/api/expenses",
        f"{ORIGIN}/api/auth/session",
        f"{ORIGIN}/reports",
        "https://fonts.gstatic.com/s/inter.woff2",
    ]
    print(f"\n{'URL':<45} {'Route':<18} {'Strategy':<14}")
    print("-" * 70)
    for url in urls:
        route = worker.selector.classify("GET", url)
        print(f"{url:<45} {route.kind.value:<18} {route.strategy.value:<14}")

    print("\n🔍 Fetching while online:")
    for url in urls[:3]:
        response = await worker.fetch(httpx.Request("GET", url))
        print(f"  {response.status_code} {url}")
    await print_partitions(worker)


async def demo_offline(worker: ServiceWorker, origin: FakeOrigin) -> None:
    """Demonstrate what the page sees without a network."""
    print_section("Offline")

    origin.online = False
    print("\n📴 Network is down")

    response = await worker.fetch(httpx.Request("GET", f"{ORIGIN}/api/expenses"))
    print(f"  ✓ /api/expenses served from cache: {response.json()}")

    try:
        await worker.fetch(httpx.Request("GET", f"{ORIGIN}/api/auth/session"))
    except httpx.TransportError as e:
        print(f"  ✓ /api/auth/session is never cached: {type(e).__name__}")

    response = await worker.fetch(httpx.Request("GET", f"{ORIGIN}/reports"), mode="navigate")
    print(f"  ✓ Navigation to /reports answered with the shell: {response.text}")

    await worker.dispatch(SyncEvent("expense-sync"))
    print("  ✓ expense-sync fired")

    origin.online = True


async def demo_push(worker: ServiceWorker, clients: InMemoryClientHost) -> None:
    """Demonstrate push notifications."""
    print_section("Push Notifications")

    await worker.dispatch(
        PushEvent(json.dumps({"title": "Nova despesa", "body": "Ana gastou R$ 42,00"}))
    )
    await worker.dispatch(PushEvent("{}"))
    for notification in clients.notifications.values():
        print(f"\n  🔔 [{notification.tag}] {notification.title}: {notification.body}")


async def demo_update(registration: ServiceWorkerRegistration, versions: dict) -> None:
    """Demonstrate a version update."""
    print_section("Version Update")

    versions["current"] = "v4"
    updated = await registration.update()
    print(f"\n🔄 Update found: {updated}")
    await print_partitions(registration.active)


async def run() -> None:
    origin = FakeOrigin()
    store = InMemoryPartitionStore()
    network = HttpxNetwork(client=httpx.AsyncClient(transport=httpx.MockTransport(origin.handle)))
    clients = InMemoryClientHost()
    versions = {"current": "v3"}

    def build() -> ServiceWorker:
        return ServiceWorker.create(
            config=CacheConfig(origin=ORIGIN, version=versions["current"]),
            store=store,
            network=network,
            clients=clients,
        )

    registration = ServiceWorkerRegistration(
        build,
        on_update_found=lambda worker: print(f"  ✨ New version {worker.version} installed"),
        on_offline_ready=lambda worker: print("  ✨ Ready to work offline"),
    )

    try:
        worker = await demo_install(registration)
        await demo_strategies(worker, origin)
        await demo_offline(worker, origin)
        await demo_push(worker, clients)
        await demo_update(registration, versions)
    finally:
        await network.close()


def main() -> None:
    """Run all demos."""
    configure_logging("WARNING")

    print("\n🚀 Tandem Offline Demo")
    print("=" * 70)
    print("This demo showcases the offline cache worker against a fake origin")

    try:
        asyncio.run(run())

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except Exception as e:
        print(f"\n❌ Error: {e}")


if __name__ == "__main__":
    main()
