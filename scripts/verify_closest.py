"""
Smoke check against a running NeoWatch server.

Needs the `scripts` extra (httpx) and a server started with:
    cd backend && uvicorn neowatch.main:app --port 8000
"""
import httpx
import sys
import time

BASE_URL = "http://127.0.0.1:8000"

def verify_closest(limit=10):
    print(f"Requesting today's closest approaches (limit={limit})...")

    start_time = time.time()
    r = httpx.get(f"{BASE_URL}/api/v1/approaches/today", params={"limit": limit}, timeout=120)
    duration = time.time() - start_time

    if r.status_code != 200:
        print(f"Failed: Status {r.status_code}")
        print(r.text)
        return False

    data = r.json()
    closest = data["closest"]
    print(f"{data['succeeded']}/{data['attempted']} fetched, {len(closest)} ranked in {duration:.2f}s")
    print(f"Window: {data['window']['start']} .. {data['window']['end']}")

    if not closest:
        print("No approaches inside this week's window.")
        return True

    neo = closest[0]
    print(f"Closest: {neo['name']} ({neo['neo_id']}), hazardous={neo['is_potentially_hazardous']}")

    distances = [min(e['miss_distance_km'] for e in n['close_approach_data']) for n in closest]
    if distances != sorted(distances):
        print("[FAIL] Output is NOT sorted by closest passing.")
        return False
    print("[PASS] Output is sorted by closest passing.")
    return True

if __name__ == "__main__":
    try:
        httpx.get(f"{BASE_URL}/health", timeout=2).raise_for_status()
    except httpx.HTTPError as e:
        print(f"Could not connect to backend at {BASE_URL}: {e}")
        sys.exit(1)
    sys.exit(0 if verify_closest() else 1)
