"""HTTP surface: form page, health, catalog, snapshot scoring and submission."""
import pytest
from fastapi.testclient import TestClient

from leadership_index.config import Settings
from leadership_index.delivery import DeliveryGateway
from leadership_index.dimensions import CATALOG_VERSION, DIMENSIONS
from leadership_index.email import MailConfigurationError
from leadership_index.main import DELIVERY_FAILED_MESSAGE, INVALID_PAYLOAD_MESSAGE, app, build_gateway, get_gateway


# ===================================================================
# PAGES & PROBES
# ===================================================================

class TestSurveyPage:
    def test_renders_every_dimension_item_and_prompt(self, client):
        res = client.get("/")
        assert res.status_code == 200
        assert "text/html" in res.headers["content-type"]
        for dimension in DIMENSIONS:
            assert dimension.title.replace("&", "&amp;") in res.text
            for key in dimension.rating_keys():
                assert f'name="{key}"' in res.text
            for key in dimension.prompt_keys():
                assert f'data-prompt="{key}"' in res.text
        assert 'data-prompt="protect"' in res.text
        assert 'data-prompt="accelerate"' in res.text

    def test_static_script_is_served(self, client):
        res = client.get("/static/js/survey.js")
        assert res.status_code == 200
        assert "/send-email" in res.text


class TestHealth:
    def test_reports_status_and_environment(self, client):
        res = client.get("/health")
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "ok"
        assert data["environment"] == "test"
        assert "timestamp" in data


class TestCatalogEndpoint:
    def test_returns_versioned_catalog(self, client):
        data = client.get("/api/dimensions").json()
        assert data["version"] == CATALOG_VERSION
        assert [d["key"] for d in data["dimensions"]] == [d.key for d in DIMENSIONS]
        assert data["scale"] == [1, 2, 3, 4, 5]


# ===================================================================
# SNAPSHOT SCORING
# ===================================================================

class TestScoreEndpoint:
    def test_scores_ratings(self, client):
        res = client.post("/api/score", json={"ratings": {"strategy-0": 5, "strategy-1": "4", "strategy-2": None}})
        assert res.status_code == 200
        data = res.json()
        assert data["dim_scores"]["strategy"] == 4.5
        assert data["dim_scores"]["decision"] == 0
        assert data["overall"] == 0.45
        assert data["band"] == "Risk"

    @pytest.mark.parametrize("body", [{}, {"ratings": None}, {"ratings": "oops"}, {"ratings": [1, 2]}])
    def test_malformed_ratings_degrade_to_zero(self, client, body):
        res = client.post("/api/score", json=body)
        assert res.status_code == 200
        assert res.json()["overall"] == 0


# ===================================================================
# SUBMISSION
# ===================================================================

class TestSubmit:
    def test_success_sends_both_emails(self, client, transport, valid_payload):
        res = client.post("/send-email", json=valid_payload)
        assert res.status_code == 200
        assert res.json() == {"success": True}

        recipients = sorted(message.to for message in transport.sent)
        assert recipients == ["admin@example.com", "leader@acme.example"]
        admin = next(m for m in transport.sent if m.to == "admin@example.com")
        assert admin.attachments and admin.attachments[0].content.startswith(b"%PDF")
        assert "Our candour in leadership meetings." in admin.text

    def test_api_submit_alias(self, client, transport, valid_payload):
        res = client.post("/api/submit", json=valid_payload)
        assert res.status_code == 200
        assert res.json() == {"success": True}
        assert len(transport.sent) == 2

    def test_respondent_summary_contains_scores(self, client, transport, valid_payload):
        client.post("/send-email", json=valid_payload)
        summary = next(m for m in transport.sent if m.to == "leader@acme.example")
        assert "OVERALL SCORE: 4.00 / 5.00 (Stable)" in summary.text
        assert "Acme Corp" in summary.html

    def test_org_and_email_are_trimmed(self, client, transport, valid_payload):
        valid_payload.update(org="  Ab  ", email=" a@b.co ")
        res = client.post("/send-email", json=valid_payload)
        assert res.status_code == 200
        assert "a@b.co" in {message.to for message in transport.sent}

    @pytest.mark.parametrize("org", ["Ab", "Acme"])
    def test_accepts_org_of_two_or_more_characters(self, client, valid_payload, org):
        valid_payload["org"] = org
        assert client.post("/send-email", json=valid_payload).status_code == 200

    @pytest.mark.parametrize("org", [None, "", "A", "  A  "])
    def test_rejects_short_org(self, client, transport, valid_payload, org):
        valid_payload["org"] = org
        res = client.post("/send-email", json=valid_payload)
        assert res.status_code == 400
        assert res.json() == {"success": False, "error": "Organization required"}
        assert transport.attempted == []

    @pytest.mark.parametrize("email", [None, "", "not-an-email"])
    def test_rejects_invalid_email(self, client, transport, valid_payload, email):
        valid_payload["email"] = email
        res = client.post("/send-email", json=valid_payload)
        assert res.status_code == 400
        assert res.json() == {"success": False, "error": "Valid email required"}
        assert transport.attempted == []

    def test_accepts_minimal_email(self, client, valid_payload):
        valid_payload["email"] = "a@b.co"
        assert client.post("/send-email", json=valid_payload).status_code == 200

    def test_missing_ratings_still_delivers_zero_scores(self, client, transport):
        res = client.post("/send-email", json={"org": "Acme", "email": "a@b.co"})
        assert res.status_code == 200
        summary = next(m for m in transport.sent if m.to == "a@b.co")
        assert "OVERALL SCORE: 0.00 / 5.00 (Risk)" in summary.text

    @pytest.mark.parametrize(
        "body",
        [
            {"org": "Acme", "email": "a@b.co", "ratings": "nope"},
            {"org": "Acme", "email": "a@b.co", "qualitative": ["x"]},
        ],
    )
    def test_malformed_payload_is_a_client_error(self, client, body):
        res = client.post("/send-email", json=body)
        assert res.status_code == 400
        assert res.json() == {"success": False, "error": INVALID_PAYLOAD_MESSAGE}

    def test_non_json_body_is_a_client_error(self, client):
        res = client.post("/send-email", content=b"org=Acme", headers={"content-type": "text/plain"})
        assert res.status_code == 400
        assert res.json()["success"] is False


# ===================================================================
# DELIVERY FAILURES
# ===================================================================

class TestDeliveryFailure:
    def test_respondent_failure_after_admin_success(self, client, transport, valid_payload):
        transport.fail_for.add("leader@acme.example")

        res = client.post("/send-email", json=valid_payload)

        assert res.status_code == 500
        assert res.json() == {"success": False, "error": DELIVERY_FAILED_MESSAGE}
        assert [message.to for message in transport.sent] == ["admin@example.com"]

    def test_provider_details_are_not_leaked(self, client, transport, valid_payload):
        transport.fail_for.add("admin@example.com")
        res = client.post("/send-email", json=valid_payload)
        assert res.status_code == 500
        assert "internal-host-7" not in res.text
        assert "550" not in res.text

    def test_unconfigured_gateway_fails_fast(self, transport, valid_payload):
        app.dependency_overrides[get_gateway] = lambda: DeliveryGateway(transport, from_email=None, admin_email=None)
        try:
            with TestClient(app) as c:
                res = c.post("/send-email", json=valid_payload)
        finally:
            app.dependency_overrides.clear()

        assert res.status_code == 500
        assert res.json() == {"success": False, "error": DELIVERY_FAILED_MESSAGE}
        assert transport.attempted == []


# ===================================================================
# BROKEN MAIL CONFIGURATION
# ===================================================================

def resend_without_key(environment="development"):
    return Settings(
        _env_file=None,
        ENVIRONMENT=environment,
        MAIL_PROVIDER="resend",
        RESEND_API_KEY=None,
        SMTP_FROM_EMAIL="survey@example.com",
        ADMIN_EMAIL="admin@example.com",
    )


class TestBrokenMailConfiguration:
    @pytest.fixture
    def broken_client(self):
        app.dependency_overrides[get_gateway] = lambda: build_gateway(resend_without_key())
        try:
            with TestClient(app) as c:
                yield c
        finally:
            app.dependency_overrides.clear()

    def test_invalid_submission_is_still_a_client_error(self, broken_client):
        res = broken_client.post("/send-email", json={"org": "A", "email": "not-an-email"})
        assert res.status_code == 400
        assert res.json() == {"success": False, "error": "Valid email required"}

    def test_short_org_is_still_a_client_error(self, broken_client, valid_payload):
        valid_payload["org"] = "A"
        res = broken_client.post("/send-email", json=valid_payload)
        assert res.status_code == 400
        assert res.json() == {"success": False, "error": "Organization required"}

    def test_valid_submission_fails_with_generic_message(self, broken_client, valid_payload):
        res = broken_client.post("/send-email", json=valid_payload)
        assert res.status_code == 500
        assert res.json() == {"success": False, "error": DELIVERY_FAILED_MESSAGE}

    def test_gateway_without_transport_outside_production(self):
        gateway = build_gateway(resend_without_key())
        assert gateway.transport is None
        assert gateway.admin_email == "admin@example.com"

    def test_production_refuses_to_build_gateway(self):
        with pytest.raises(MailConfigurationError, match="RESEND_API_KEY"):
            build_gateway(resend_without_key(environment="production"))
