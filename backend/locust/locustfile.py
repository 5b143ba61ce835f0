"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags promo        # Race for a capped promo code
  locust -f locustfile.py --tags throughput   # Test court catalogue cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests

The promo scenario expects a code created beforehand, e.g.
  INSERT INTO promo_codes (code, type, value, max_redemptions, redeemed_count, is_active)
  VALUES ('LOADTEST', 'percent', 10, 10, 0, true);
"""

import os
import random
from datetime import date, timedelta
from locust import HttpUser, task, between, tag, events

PROMO_CODE = os.environ.get("LOAD_PROMO_CODE", "LOADTEST")
PLANS = ["Hourly", "Daily", "Weekly"]

# Shared state
COURT_IDS = []


def future_date(max_days: int = 60) -> str:
    return (date.today() + timedelta(days=random.randint(1, max_days))).isoformat()


def booking_body(court_id: str, promo_code: str = "") -> dict:
    n = random.randint(10000, 99999)
    start = future_date()
    return {
        "court_id": court_id,
        "plan": "Hourly",
        "start_date": start,
        "start_time": f"{random.randint(8, 20):02d}:00",
        "hours": random.randint(1, 4),
        "promo_code": promo_code,
        "customer_name": f"Load User {n}",
        "customer_phone": f"+234801{n}",
        "customer_email": f"load_{n}@test.com",
        "event_type": "Tournament",
    }


def schedule_body(court_id: str) -> dict:
    plan = random.choice(PLANS)
    start = date.today() + timedelta(days=random.randint(1, 30))
    end = start + timedelta(days=random.randint(0, 14))
    return {
        "court_id": court_id,
        "plan": plan,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "start_time": "10:00",
        "hours": random.randint(1, 12),
    }


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "="*60)
    print(f"SETUP: promo scenario uses code {PROMO_CODE}")
    print("="*60)


class CatalogueMixin:
    def load_courts(self):
        resp = self.client.get("/api/v1/courts")
        if resp.status_code == 200:
            for court in resp.json():
                if court["id"] not in COURT_IDS:
                    COURT_IDS.append(court["id"])


class PromoRaceUser(CatalogueMixin, HttpUser):
    """
    TEST 1: Promo cap - many customers -> one code with 10 redemptions

    Run: locust -f locustfile.py --tags promo -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT redeemed_count, max_redemptions FROM promo_codes WHERE code = 'LOADTEST';
      SELECT COUNT(*) FROM bookings WHERE promo_code_id = X;
    Both counts should be equal and <= 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.load_courts()

    @tag("promo")
    @task
    def book_with_capped_promo(self):
        """All users fight for the same capped promo."""
        if not COURT_IDS:
            return

        with self.client.post("/api/v1/bookings",
            json=booking_body(random.choice(COURT_IDS), PROMO_CODE),
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code in (400, 409):
                resp.success()  # Expected: limit reached
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(CatalogueMixin, HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_courts_cached(self):
        """Hammer the cached endpoint."""
        self.client.get("/api/v1/courts", name="/api/v1/courts [cached]")

    @tag("throughput", "read")
    @task(3)
    def booking_form(self):
        """QR link landing: form defaults."""
        self.client.get("/api/v1/booking-form?reserve=1", name="/api/v1/booking-form")

    @tag("throughput")
    @task(3)
    def quote(self):
        if not COURT_IDS:
            self.load_courts()
            return
        self.client.post("/api/v1/bookings/quote", json=schedule_body(random.choice(COURT_IDS)))

    @tag("throughput")
    @task(1)
    def health_check(self):
        """Monitor system health."""
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_court(self):
        """Book a court that does not exist."""
        with self.client.post("/api/v1/bookings",
            json=booking_body("no-such-court"),
            catch_response=True
        ) as resp:
            self.expect(resp, [400])

    @tag("edge")
    @task
    def past_date(self):
        body = booking_body("indoor-arena")
        body["start_date"] = (date.today() - timedelta(days=3)).isoformat()
        with self.client.post("/api/v1/bookings", json=body, catch_response=True) as resp:
            self.expect(resp, [400])

    @tag("edge")
    @task
    def missing_contact(self):
        body = booking_body("indoor-arena")
        body["customer_phone"] = ""
        with self.client.post("/api/v1/bookings", json=body, catch_response=True) as resp:
            self.expect(resp, [400])

    @tag("edge")
    @task
    def bogus_promo(self):
        with self.client.post("/api/v1/promos/apply",
            json={**schedule_body("indoor-arena"), "code": "NOT-A-CODE"},
            catch_response=True
        ) as resp:
            if resp.status_code == 200 and resp.json()["status"] == "invalid":
                resp.success()
            else:
                resp.failure(f"Expected invalid promo, got {resp.status_code}")

    @tag("edge")
    @task
    def malformed_json(self):
        """Send garbage data."""
        with self.client.post("/api/v1/bookings",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            catch_response=True
        ) as resp:
            self.expect(resp, [400, 422])

    @tag("edge")
    @task
    def admin_without_auth(self):
        """Admin list without a token."""
        with self.client.get("/api/v1/admin/bookings", catch_response=True) as resp:
            self.expect(resp, [401])


class RealisticUser(CatalogueMixin, HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing and quoting
      - Some promo checks
      - Occasional bookings
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.load_courts()

    @task(40)
    def browse_courts(self):
        """Most common: browsing."""
        self.load_courts()

    @task(20)
    def view_court(self):
        if COURT_IDS:
            self.client.get(f"/api/v1/courts/{random.choice(COURT_IDS)}", name="/api/v1/courts/{ref}")

    @task(20)
    def quote(self):
        if COURT_IDS:
            self.client.post("/api/v1/bookings/quote", json=schedule_body(random.choice(COURT_IDS)))

    @task(5)
    def apply_promo(self):
        if COURT_IDS:
            self.client.post("/api/v1/promos/apply",
                json={**schedule_body(random.choice(COURT_IDS)), "code": PROMO_CODE})

    @task(3)
    def book(self):
        """Occasional booking."""
        if COURT_IDS:
            self.client.post("/api/v1/bookings", json=booking_body(random.choice(COURT_IDS)))
