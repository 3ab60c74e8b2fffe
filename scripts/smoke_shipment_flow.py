#!/usr/bin/env python3
"""
Smoke test against a running server using the demo accounts

Start the API and seed users first:
    python scripts/create_demo_users.py
    python -m freightlink.main
Then: python scripts/smoke_shipment_flow.py [base_url]
"""
import asyncio
import sys

import httpx

BASE_URL = "http://localhost:5000/api/v1"
USERS = {
    "business": {"username": "acme_steel", "password": "business123"},
    "ravi": {"username": "driver_ravi", "password": "driver123"},
    "meena": {"username": "driver_meena", "password": "driver123"}
}


class ShipmentFlowTester:
    def __init__(self, base_url: str):
        self.client = httpx.AsyncClient(base_url=base_url)
        self.tokens = {}
        self.shipment_id = None

    async def login_all_users(self) -> bool:
        print("🔐 Logging in demo users...")
        for name, credentials in USERS.items():
            response = await self.client.post("/auth/login-json", json=credentials)
            if response.status_code != 200:
                print(f"❌ Login failed for {name}: {response.status_code}")
                return False
            self.tokens[name] = response.json()["access_token"]
            print(f"✅ Logged in: {name}")
        return True

    def headers(self, name: str) -> dict:
        return {"Authorization": f"Bearer {self.tokens[name]}"}

    def check(self, response: httpx.Response, label: str, expected: int = 200) -> dict:
        if response.status_code != expected:
            raise RuntimeError(f"{label}: expected {expected}, got {response.status_code} {response.text}")
        print(f"✅ {label}")
        return response.json()

    async def post_shipment(self):
        print("\n📦 Posting shipment")
        data = self.check(await self.client.post("/shipments", json={
            "title": "Steel Coils",
            "from_city": "Pune",
            "to_city": "Mumbai",
            "weight": 500,
            "volume": "2x2x2",
            "deadline": "2025-06-01"
        }, headers=self.headers("business")), "create shipment", 201)
        self.shipment_id = data["id"]
        print(f"   id={self.shipment_id} status={data['status']}")

    async def drivers_request(self):
        print("\n🚚 Drivers browsing Pune and requesting")
        board = self.check(await self.client.get("/shipments/city/Pune", headers=self.headers("ravi")), "city board")
        print(f"   {len(board)} pending shipments from Pune")

        for name in ("ravi", "meena"):
            self.check(
                await self.client.post(f"/shipments/{self.shipment_id}/request", headers=self.headers(name)),
                f"request by {name}", 201
            )

    async def accept_first_request(self):
        print("\n🤝 Business accepting the first request")
        shipments = self.check(await self.client.get("/shipments/business", headers=self.headers("business")), "business list")
        shipment = next(s for s in shipments if s["id"] == self.shipment_id)
        first = shipment["requests"][0]

        data = self.check(await self.client.patch(
            f"/shipments/{self.shipment_id}/request/{first['id']}",
            json={"status": "accepted"},
            headers=self.headers("business")
        ), "accept request")
        print(f"   status={data['status']} driver={data['driver']['username']}")
        print(f"   requests={[(r['driver_id'], r['status']) for r in data['requests']]}")

    async def track_and_deliver(self):
        print("\n📍 Tracking and delivery")
        self.check(await self.client.patch(
            f"/shipments/{self.shipment_id}/current-location",
            json={"location": {"lat": 18.5, "lng": 73.8}},
            headers=self.headers("ravi")
        ), "report location")

        for status in ("picked_up", "in_transit", "delivered"):
            data = self.check(await self.client.patch(
                f"/shipments/{self.shipment_id}/status",
                json={"status": status},
                headers=self.headers("ravi")
            ), f"status -> {status}")

        print(f"   final status={data['status']}")

    async def run(self) -> bool:
        try:
            if not await self.login_all_users():
                return False
            await self.post_shipment()
            await self.drivers_request()
            await self.accept_first_request()
            await self.track_and_deliver()
            print("\n🎉 Shipment flow completed")
            return True
        except (RuntimeError, httpx.HTTPError) as e:
            print(f"❌ {e}")
            return False
        finally:
            await self.client.aclose()


if __name__ == "__main__":
    base_url = sys.argv[1] if len(sys.argv) > 1 else BASE_URL
    ok = asyncio.run(ShipmentFlowTester(base_url).run())
    sys.exit(0 if ok else 1)
