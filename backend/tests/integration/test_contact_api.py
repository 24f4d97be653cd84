"""Integration tests for the contact form API and its email rate limiting"""

from uuid import UUID

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from trustportal.models import Ticket
from trustportal.ratelimit.limiter import EMAIL_LIMIT_MESSAGE, IP_LIMIT_MESSAGE

CONTACT_URL = "/api/contact"


def _submission(email: str = "jane@x.com") -> dict:
    return {
        "name": "Jane Doe",
        "email": email,
        "organization": "Acme",
        "subject": "SOC 2 report",
        "message": "Could you share the latest SOC 2 Type II report?",
    }


class TestContactSubmission:
    """Tests for POST /api/contact"""

    def test_submit_creates_new_ticket(self, client: TestClient, db_session: Session):
        response = client.post(CONTACT_URL, json=_submission())

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Contact form submitted successfully"

        ticket = db_session.get(Ticket, UUID(data["ticketId"]))
        assert ticket is not None
        assert ticket.status == "new"
        assert ticket.requester_name == "Jane Doe"
        assert ticket.requester_email == "jane@x.com"
        assert ticket.organization == "Acme"

    def test_missing_fields(self, client: TestClient, db_session: Session):
        payload = _submission()
        del payload["subject"]

        response = client.post(CONTACT_URL, json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Name, email, subject, and message are required"}
        assert db_session.query(Ticket).count() == 0


class TestContactRateLimit:
    """The contact form is limited per client IP and per email address"""

    def test_ip_limit(self, client: TestClient):
        for i in range(10):
            response = client.post(CONTACT_URL, json=_submission(f"user{i}@x.com"))
            assert response.status_code == 201

        response = client.post(CONTACT_URL, json=_submission("another@x.com"))

        assert response.status_code == 429
        assert response.json() == {"error": IP_LIMIT_MESSAGE}
        assert response.headers["Retry-After"] == "900"

    def test_email_limit(self, client: TestClient):
        for i in range(5):
            response = client.post(
                CONTACT_URL,
                json=_submission("Jane@X.com"),
                headers={"X-Forwarded-For": f"203.0.113.{i}"},
            )
            assert response.status_code == 201

        response = client.post(
            CONTACT_URL,
            json=_submission("jane@x.com"),
            headers={"X-Forwarded-For": "198.51.100.1"},
        )

        assert response.status_code == 429
        assert response.json() == {"error": EMAIL_LIMIT_MESSAGE}
        assert response.headers["Retry-After"] == "3600"

    def test_forwarded_for_identifies_client(self, client: TestClient):
        for i in range(10):
            client.post(
                CONTACT_URL,
                json=_submission(f"user{i}@x.com"),
                headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
            )

        blocked = client.post(
            CONTACT_URL,
            json=_submission("late@x.com"),
            headers={"X-Forwarded-For": "203.0.113.7"},
        )
        other_client = client.post(
            CONTACT_URL,
            json=_submission("other@x.com"),
            headers={"X-Forwarded-For": "203.0.113.8"},
        )

        assert blocked.status_code == 429
        assert other_client.status_code == 201

    def test_rejected_requests_create_nothing(self, client: TestClient, db_session: Session):
        for i in range(11):
            client.post(CONTACT_URL, json=_submission(f"user{i}@x.com"))

        assert db_session.query(Ticket).count() == 10
