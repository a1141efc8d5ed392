"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags oversell    # 100 buyers, 10 tickets
  locust -f locustfile.py --tags duplicate   # one user hammering "buy"
  locust -f locustfile.py --tags throughput  # cached listings
  locust -f locustfile.py --tags edge        # bad input
  locust -f locustfile.py                    # everything

After an oversell run, verify:
  SELECT sold_tickets, total_tickets FROM events WHERE id = '<id>';
  SELECT COUNT(*) FROM tickets WHERE event_id = '<id>' AND status = 'active';
Both counts must match and never exceed total_tickets.
"""

import random
import uuid

from locust import HttpUser, between, tag, task

EVENT_IDS = []
OVERSELL_EVENT = {}
DUPLICATE_EVENT = {}


def random_user_id():
    return f"load-{uuid.uuid4().hex[:12]}"


def create_event(client, title, total_tickets, price=10.0):
    resp = client.post(
        "/api/v1/events",
        json={
            "title": title,
            "description": "Load test event",
            "date": "2026-12-31",
            "time": "20:00",
            "price": price,
            "totalTickets": total_tickets,
            "streamUrl": "https://stream.example.com/load-test",
        },
        name="/api/v1/events [create]",
    )
    if resp.status_code == 201:
        return resp.json()
    return None


def purchase(client, event, user_id, name):
    return client.post(
        f"/api/v1/events/{event['id']}/tickets",
        json={"userId": user_id, "price": event["price"], "eventTitle": event["title"]},
        name=name,
        catch_response=True,
    )


class OversellUser(HttpUser):
    """
    100 users, 10 tickets. Exactly 10 purchases may succeed.

    Run: locust -f locustfile.py --tags oversell -u 100 -r 50 --run-time 30s
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.user_id = random_user_id()
        if not OVERSELL_EVENT:
            event = create_event(self.client, "Oversell Test", total_tickets=10)
            if event:
                OVERSELL_EVENT.update(event)
                print(f"\nCreated event {event['id']} with 10 tickets\n")

    @tag("oversell")
    @task
    def buy_limited_tickets(self):
        if not OVERSELL_EVENT:
            return
        with purchase(self.client, OVERSELL_EVENT, self.user_id, "/tickets [oversell]") as resp:
            code = resp.json().get("code") if resp.status_code == 400 else None
            if resp.status_code == 201 or code in ("SOLD_OUT", "DUPLICATE_PURCHASE"):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class DuplicateUser(HttpUser):
    """
    Every simulated user shares one identity and buys the same event.
    At most one active ticket may exist afterwards.

    Run: locust -f locustfile.py --tags duplicate -u 50 -r 50 --run-time 15s
    """
    wait_time = between(0, 0.05)
    shared_user_id = random_user_id()

    def on_start(self):
        if not DUPLICATE_EVENT:
            event = create_event(self.client, "Duplicate Test", total_tickets=1000)
            if event:
                DUPLICATE_EVENT.update(event)

    @tag("duplicate")
    @task
    def buy_same_ticket(self):
        if not DUPLICATE_EVENT:
            return
        with purchase(self.client, DUPLICATE_EVENT, self.shared_user_id, "/tickets [duplicate]") as resp:
            code = resp.json().get("code") if resp.status_code == 400 else None
            if resp.status_code == 201 or code == "DUPLICATE_PURCHASE":
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    Cache effectiveness. Run once with Redis, once without, and compare
    p95 latency and requests/sec.

    Run: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_events_cached(self):
        page = random.randint(1, 5)
        self.client.get(f"/api/v1/events?page={page}&pageSize=20", name="/api/v1/events [cached]")

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    Bad input must come back as 400/404, never 500.

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, allowed):
        if resp.status_code in allowed:
            resp.success()
        else:
            resp.failure(f"Expected {allowed}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.post(
            f"/api/v1/events/{uuid.uuid4()}/tickets",
            json={"userId": random_user_id(), "price": 10},
            name="/tickets [unknown event]",
            catch_response=True,
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def negative_price(self):
        if not EVENT_IDS:
            return
        with self.client.post(
            f"/api/v1/events/{random.choice(EVENT_IDS)}/tickets",
            json={"userId": random_user_id(), "price": -5},
            name="/tickets [negative price]",
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def missing_user(self):
        if not EVENT_IDS:
            return
        with self.client.post(
            f"/api/v1/events/{random.choice(EVENT_IDS)}/tickets",
            json={"price": 10},
            name="/tickets [missing user]",
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            f"/api/v1/events/{uuid.uuid4()}/tickets",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            name="/tickets [malformed]",
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])


class RealisticUser(HttpUser):
    """
    Mixed workload: mostly browsing, some purchases and access checks,
    rare event creation.

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.user_id = random_user_id()
        self.owned = []

    @task(50)
    def browse_events(self):
        resp = self.client.get("/api/v1/events?page=1&pageSize=20")
        if resp.status_code == 200:
            for event in resp.json().get("events", []):
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @task(20)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @task(10)
    def buy_ticket(self):
        if not EVENT_IDS:
            return
        event_id = random.choice(EVENT_IDS)
        resp = self.client.get(f"/api/v1/events/{event_id}", name="/api/v1/events/{id}")
        if resp.status_code != 200:
            return
        with purchase(self.client, resp.json(), self.user_id, "/tickets [realistic]") as buy:
            if buy.status_code == 201:
                self.owned.append(event_id)
                buy.success()
            elif buy.status_code == 400:
                buy.success()

    @task(10)
    def watch_stream(self):
        if self.owned:
            self.client.get(
                f"/api/v1/events/{random.choice(self.owned)}/access/{self.user_id}",
                name="/api/v1/events/{id}/access/{user}",
            )

    @task(3)
    def create_event(self):
        event = create_event(self.client, f"Event {random.randint(1, 10000)}", random.randint(10, 500))
        if event:
            EVENT_IDS.append(event["id"])
