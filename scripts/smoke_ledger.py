"""
Post-Deploy Smoke Test Script.

Runs against a live server and exercises one flow per business event:
1. Health Check
2. Party + Vehicle creation
3. Expense -> Sale -> Payment request approval
4. Ledger verification for every touched party
"""

import sys
import uuid
import httpx

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"


def print_step(step, msg):
    print(f"[{step}] {msg}")


def fail(msg):
    print(f"❌ FAILURE: {msg}")
    sys.exit(1)


def success(msg):
    print(f"✅ {msg}")


def expect(response: httpx.Response, status_code: int, label: str) -> dict:
    if response.status_code != status_code:
        fail(f"{label}: {response.status_code} {response.text}")
    return response.json()["data"]


def main():
    print("🚀 Starting Ledger Smoke Test...")
    run_id = uuid.uuid4().hex[:8]

    with httpx.Client(base_url=BASE_URL, timeout=10) as client:
        # 1. Health Check
        print_step("PRE", "Checking /health...")
        try:
            expect_health = client.get("/health")
        except httpx.ConnectError as e:
            fail(f"Server unreachable: {e}")
        if expect_health.status_code != 200:
            fail(f"Health check failed: {expect_health.status_code}")
        success("Server is healthy")

        # 2. Setup
        print_step("SETUP", "Creating distributor and vehicle...")
        distributor = expect(client.post(f"{API_PREFIX}/parties", json={
            "party_type": "DISTRIBUTOR",
            "name": f"Smoke Distributor {run_id}",
            "initial_balance": "1000",
        }), 201, "Create distributor")
        vehicle = expect(client.post(f"{API_PREFIX}/vehicles", json={
            "chassis_no": f"SMOKE-{run_id}",
        }), 201, "Create vehicle")
        success(f"Distributor {distributor['id']}, vehicle {vehicle['id']}")

        # 3. Events
        print_step("SMOKE", "Expense -> Sale -> Payment request...")
        expense = expect(client.post(f"{API_PREFIX}/transactions/expense", json={
            "party_id": distributor["id"], "title": "Smoke expense", "amount": "10", "added_by": 1,
        }), 201, "Expense")
        success(f"Expense posted, balance {expense['transaction']['new_balance']}")

        sale = expect(client.post(f"{API_PREFIX}/transactions/sale", json={
            "party_id": distributor["id"],
            "vehicle_id": vehicle["id"],
            "date": "2026-01-01T00:00:00Z",
            "sale_price": "500",
            "commission_amount": "25",
        }), 201, "Sale")
        success(f"Sale posted, balance {sale['new_balance']}")

        request = expect(client.post(f"{API_PREFIX}/payment-requests", json={
            "party_id": distributor["id"], "transaction_no": f"SMOKE-{run_id}", "amount": "100",
        }), 201, "Payment request")
        approval = expect(client.put(f"{API_PREFIX}/payment-requests/{request['id']}", json={
            "status": "APPROVED", "verified_by": 1,
        }), 200, "Approval")
        success(f"Payment approved, balance {approval['transaction']['new_balance']}")

        again = client.put(f"{API_PREFIX}/payment-requests/{request['id']}", json={"status": "APPROVED"})
        if again.status_code != 400:
            fail(f"Second approval was not rejected: {again.status_code}")
        success("Second approval rejected")

        # 4. Verification
        print_step("VERIFY", "Replaying ledger...")
        replay = expect(client.get(f"{API_PREFIX}/parties/{distributor['id']}/ledger/verify"), 200, "Verify")
        if not replay["is_consistent"]:
            fail(f"Ledger drift: {replay}")
        success(f"Ledger consistent over {replay['entry_count']} entries")

    success("Smoke Test Passed!")


if __name__ == "__main__":
    main()
