import pytest
from fastapi.testclient import TestClient

from tests.fakes import RecordingJudge

SPEC = {"name": "chicken breast", "form": "raw", "quantity": {"amount": 500, "unit": "g"}}
CANDIDATES = [
    {"productId": "1", "title": "Organic Chicken Breast Fillets 500g", "categoryPath": ["Meat", "Poultry"], "price": 11.0},
    {"productId": "2", "title": "Free Range Chicken Breast", "categoryPath": ["Meat", "Poultry"], "price": 9.0},
    {"productId": "3", "title": "Chicken Flavoured Stock Powder", "categoryPath": ["Pantry", "Seasoning"], "price": 3.0},
]


def _install_validator(monkeypatch: pytest.MonkeyPatch, judge: RecordingJudge) -> None:
    import product_validator.api.routes.validation as validation_route
    from product_validator.services.product_validator import ProductValidator
    from product_validator.services.validation_cache import InMemoryValidationCache

    validator = ProductValidator(cache=InMemoryValidationCache(), judge=judge)
    monkeypatch.setattr(validation_route, "get_product_validator", lambda: validator)


def test_validate_products_happy_path(monkeypatch: pytest.MonkeyPatch) -> None:
    from product_validator.api.main import app

    judge = RecordingJudge()
    _install_validator(monkeypatch, judge)

    client = TestClient(app)
    resp = client.post("/api/v1/validate-products", json={"spec": SPEC, "candidates": CANDIDATES, "model": "judge-x"})

    assert resp.status_code == 200
    results = resp.json()["results"]
    assert [r["verdict"] for r in results] == ["pass", "pass", "fail"]
    assert results[0]["signals"] == {"rule_conf": 0.9}
    assert results[1]["signals"] == {"rule_conf": 0.7, "ai_conf": 0.9}
    assert results[2]["confidence"] == 0.2
    assert len(judge.calls) == 1


@pytest.mark.parametrize(
    "body",
    [
        {"candidates": CANDIDATES},
        {"spec": SPEC},
        {"spec": {"name": "chicken breast", "form": "marinated"}, "candidates": CANDIDATES},
        {"spec": SPEC, "candidates": [{"productId": "9"}]},
        [1, 2, 3],
    ],
)
def test_validate_products_rejects_invalid_payload(monkeypatch: pytest.MonkeyPatch, body) -> None:  # noqa: ANN001
    from product_validator.api.main import app

    judge = RecordingJudge()
    _install_validator(monkeypatch, judge)

    client = TestClient(app)
    resp = client.post("/api/v1/validate-products", json=body)

    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid payload")
    assert judge.calls == []


def test_validate_products_rejects_non_json_body() -> None:
    from product_validator.api.main import app

    client = TestClient(app)
    resp = client.post(
        "/api/v1/validate-products",
        content=b"spec=chicken",
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert "error" in resp.json()


def test_validate_products_reports_judge_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    from product_validator.api.main import app
    from product_validator.errors import UpstreamJudgeError

    _install_validator(monkeypatch, RecordingJudge(error=UpstreamJudgeError("Judge service returned status 429", status=429, body="slow down")))

    client = TestClient(app)
    resp = client.post("/api/v1/validate-products", json={"spec": SPEC, "candidates": CANDIDATES})

    assert resp.status_code == 502
    data = resp.json()
    assert data == {"error": "Judge service returned status 429", "upstream_status": 429}
    assert "results" not in data


def test_health_reports_degraded_without_judge_endpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    import product_validator.api.routes.health as health_route
    from product_validator.api.main import app
    from product_validator.azure.openai_client import OpenAIClient
    from product_validator.config import settings

    monkeypatch.setattr(settings, "azure_openai_endpoint", None)
    monkeypatch.setattr(health_route, "get_openai_client", lambda: OpenAIClient())

    client = TestClient(app)
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "degraded"
    assert resp.json()["services"] == {"openai": False}


def test_root_banner() -> None:
    from product_validator.api.main import app

    resp = TestClient(app).get("/")

    assert resp.status_code == 200
    assert resp.json()["service"] == "Product Validator API"


def test_validate_products_reports_credential_failure_as_upstream(monkeypatch: pytest.MonkeyPatch) -> None:
    from azure.core.exceptions import ClientAuthenticationError
    from product_validator.api.main import app
    from product_validator.services.judge_client import JudgeClient
    from tests.fakes import FakeTransport

    transport = FakeTransport(error=ClientAuthenticationError("DefaultAzureCredential failed to retrieve a token"))
    _install_validator(monkeypatch, JudgeClient(transport=transport))

    resp = TestClient(app).post("/api/v1/validate-products", json={"spec": SPEC, "candidates": CANDIDATES})

    assert resp.status_code == 502
    assert resp.json()["error"].startswith("Judge call failed")
    assert "upstream_status" not in resp.json()


def test_validate_products_binds_request_logging_context(monkeypatch: pytest.MonkeyPatch) -> None:
    import structlog
    from product_validator.api.main import app

    seen = {}

    class ContextJudge(RecordingJudge):
        async def judge_batch(self, items, model=None):  # noqa: ANN001
            seen.update(structlog.contextvars.get_contextvars())
            return await super().judge_batch(items, model=model)

    _install_validator(monkeypatch, ContextJudge())

    resp = TestClient(app).post(
        "/api/v1/validate-products",
        json={"spec": SPEC, "candidates": CANDIDATES, "model": "judge-x"},
        headers={"X-Request-ID": "req-42"},
    )

    assert resp.status_code == 200
    assert seen == {"request_id": "req-42", "ingredient": "chicken breast", "model": "judge-x"}
    assert structlog.contextvars.get_contextvars() == {}
