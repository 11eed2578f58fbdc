import base64

import pytest
from fastapi.testclient import TestClient

from carousel.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    body = client.get("/api/health").json()
    assert body["status"] == "healthy"
    assert body["version"]


def test_final_slide_templates(client: TestClient) -> None:
    response = client.get("/api/final-slide-templates")
    assert response.status_code == 200
    assert {t["id"] for t in response.json()} == {"cta", "contact", "brand"}


def test_generate_carousel(client: TestClient) -> None:
    response = client.post(
        "/api/generate-carousel",
        json={
            "text": "# Hello\n\nA **short** intro\n\n## Details\n\n- one\n- __two__",
            "settings": {
                "brand_color": "#224466",
                "author_username": "@tester",
                "final_slide": {"enabled": True, "type": "cta"},
            },
        },
    )
    assert response.status_code == 200
    body = response.json()

    assert body["metadata"]["total_slides"] == 3
    assert body["metadata"]["failed_slides"] == []
    assert [s["type"] for s in body["slides"]] == ["intro", "text", "text"]
    assert len(body["images"]) == 3
    assert base64.b64decode(body["images"][0]).startswith(b"\x89PNG")


def test_blank_text_is_rejected(client: TestClient) -> None:
    response = client.post("/api/generate-carousel", json={"text": "   "})
    assert response.status_code == 400


def test_invalid_brand_color_fails_validation(client: TestClient) -> None:
    response = client.post("/api/generate-carousel", json={"text": "Hi", "settings": {"brand_color": "red"}})
    assert response.status_code == 422


def test_missing_text_fails_validation(client: TestClient) -> None:
    response = client.post("/api/generate-carousel", json={})
    assert response.status_code == 422


def test_styles_endpoint(client: TestClient) -> None:
    response = client.get("/api/styles")
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == ["default", "bright", "elegant"]


def test_unknown_style_fails_validation(client: TestClient) -> None:
    response = client.post("/api/generate-carousel", json={"text": "Hi", "settings": {"style": "neon"}})
    assert response.status_code == 422


@pytest.mark.parametrize("max_slides", [2, 21, "many"])
def test_bad_slide_limit_fails_validation(client: TestClient, max_slides) -> None:
    response = client.post("/api/generate-carousel", json={"text": "Hi", "settings": {"max_slides": max_slides}})
    assert response.status_code == 422


def test_slide_limit_is_applied(client: TestClient) -> None:
    text = "# Title\n\n" + "\n\n".join(f"## Part {i}\n\nBody {i}" for i in range(5))
    response = client.post(
        "/api/generate-carousel",
        json={"text": text, "settings": {"style": "bright", "max_slides": 3}},
    )
    assert response.status_code == 200
    metadata = response.json()["metadata"]

    assert metadata["total_slides"] == 3
    assert metadata["slide_kinds"] == {"intro": 1, "text": 2, "quote": 0}
    assert metadata["settings"]["style"] == "bright"
    assert metadata["settings"]["max_slides"] == 3
