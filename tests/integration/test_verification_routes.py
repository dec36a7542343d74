"""HTTP tests for auth and company verification routes."""

import threading
import time
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.verification_service import VerificationService, get_verification_service

from tests.conftest import TEST_BLOCKLIST, InMemoryDispatcher


class SlowDispatcher(InMemoryDispatcher):
    """Holds the sending thread the way a slow SMTP server would."""

    def __init__(self, delay: float):
        super().__init__()
        self.delay = delay
        self.sending = threading.Event()

    def send(self, destination, template_id, payload):
        self.sending.set()
        time.sleep(self.delay)
        return super().send(destination, template_id, payload)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_verification_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    client.post("/api/auth/register", json={"email": "john@jobseekers.io", "password": "supersecret"})
    response = client.post("/api/auth/login", json={"email": "john@jobseekers.io", "password": "supersecret"})
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.integration
def test_register_login_me(client, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "john@jobseekers.io"
    assert body["account_type"] == "job_seeker"
    assert body["company_email_verified"] is False


@pytest.mark.integration
def test_duplicate_registration(client, auth_headers):
    response = client.post("/api/auth/register", json={"email": "john@jobseekers.io", "password": "supersecret"})
    assert response.status_code == 400


@pytest.mark.integration
def test_wrong_password(client, auth_headers):
    response = client.post("/api/auth/login", json={"email": "john@jobseekers.io", "password": "wrongpassword"})
    assert response.status_code == 401


@pytest.mark.integration
def test_submit_requires_auth(client):
    response = client.post(
        "/api/auth/verify-company-email",
        json={"companyEmail": "john@acme.com", "companyName": "Acme"},
    )
    assert response.status_code in (401, 403)


@pytest.mark.integration
def test_full_verification_flow(client, auth_headers, dispatcher):
    response = client.post(
        "/api/auth/verify-company-email",
        json={"companyEmail": "john@acme.com", "companyName": "Acme Inc", "companyWebsite": "https://acme.com"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["requestId"]
    assert body["derivedCompanyName"] == "Acme"
    assert body["deliveryWarning"] is None

    status = client.get("/api/user/company-verification-status", headers=auth_headers).json()
    assert status["userType"] == "job_seeker"
    assert status["pendingRequest"]["requestId"] == body["requestId"]

    response = client.post(
        "/api/auth/verify-company-email/confirm",
        json={"requestId": body["requestId"], "token": dispatcher.last_token},
    )
    assert response.status_code == 200
    assert response.json()["companyName"] == "Acme Inc"

    status = client.get("/api/user/company-verification-status", headers=auth_headers).json()
    assert status["userType"] == "recruiter"
    assert status["companyName"] == "Acme Inc"
    assert status["companyEmailVerified"] is True
    assert status["pendingRequest"] is None


@pytest.mark.integration
def test_confirm_via_email_link(client, auth_headers, dispatcher):
    client.post(
        "/api/auth/verify-company-email",
        json={"companyEmail": "john@acme.com", "companyName": "Acme"},
        headers=auth_headers,
    )
    payload = dispatcher.sent[-1]["payload"]

    response = client.get(
        "/api/auth/verify-company-email/confirm",
        params={"request_id": payload["request_id"], "token": payload["token"]},
    )

    assert response.status_code == 200
    assert response.json()["accountId"] > 0


@pytest.mark.integration
def test_consumer_email_rejected(client, auth_headers):
    response = client.post(
        "/api/auth/verify-company-email",
        json={"companyEmail": "john@gmail.com", "companyName": "Acme"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["kind"] == "RejectedConsumerDomain"
    assert body["message"]


@pytest.mark.integration
def test_malformed_email_is_422(client, auth_headers):
    response = client.post(
        "/api/auth/verify-company-email",
        json={"companyEmail": "john", "companyName": "Acme"},
        headers=auth_headers,
    )

    assert response.status_code == 422
    body = response.json()
    assert body["kind"] == "InvalidFormat"
    assert body["message"]


@pytest.mark.integration
def test_unknown_and_expired_requests_look_the_same(client):
    response = client.post(
        "/api/auth/verify-company-email/confirm",
        json={"requestId": "nope", "token": "nope"},
    )

    assert response.status_code == 410
    body = response.json()
    assert body["kind"] == "ExpiredRequest"
    assert body["message"]


@pytest.mark.integration
def test_wrong_token_is_400(client, auth_headers):
    body = client.post(
        "/api/auth/verify-company-email",
        json={"companyEmail": "john@acme.com", "companyName": "Acme"},
        headers=auth_headers,
    ).json()

    response = client.post(
        "/api/auth/verify-company-email/confirm",
        json={"requestId": body["requestId"], "token": "wrong"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["kind"] == "TokenMismatch"
    assert body["message"]


@pytest.mark.integration
def test_error_body_is_documented(client):
    spec = client.get("/openapi.json").json()
    responses = spec["paths"]["/api/auth/verify-company-email"]["post"]["responses"]

    for code in ("400", "410", "422"):
        schema = responses[code]["content"]["application/json"]["schema"]
        assert schema["$ref"].endswith("/ErrorResponse")
    assert set(spec["components"]["schemas"]["ErrorResponse"]["properties"]) == {"message", "kind"}


@pytest.mark.integration
def test_slow_mail_server_does_not_stall_other_requests(repository, clock):
    dispatcher = SlowDispatcher(delay=2.0)
    slow_service = VerificationService(
        repository=repository,
        dispatcher=dispatcher,
        blocked_domains=TEST_BLOCKLIST,
        clock=clock,
        ttl=timedelta(hours=24),
    )
    app.dependency_overrides[get_verification_service] = lambda: slow_service
    try:
        # one event loop shared by every request, as under uvicorn
        with TestClient(app) as client:
            client.post("/api/auth/register", json={"email": "john@jobseekers.io", "password": "supersecret"})
            token = client.post(
                "/api/auth/login", json={"email": "john@jobseekers.io", "password": "supersecret"}
            ).json()["access_token"]
            submitted = {}

            def submit():
                submitted["response"] = client.post(
                    "/api/auth/verify-company-email",
                    json={"companyEmail": "john@acme.com", "companyName": "Acme"},
                    headers={"Authorization": f"Bearer {token}"},
                )

            worker = threading.Thread(target=submit)
            worker.start()
            assert dispatcher.sending.wait(timeout=5)

            started = time.monotonic()
            response = client.get(
                "/api/auth/verify-company-email/confirm",
                params={"request_id": "unknown", "token": "unknown"},
            )
            elapsed = time.monotonic() - started
            worker.join()
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 410
    assert elapsed < 1.0
    assert submitted["response"].status_code == 200
    assert len(dispatcher.sent) == 1
