from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.slotbook.auth.auth_dependencies import require_admin_user, require_user
from src.slotbook.auth.auth_service import InsufficientRoleError
from src.slotbook.email_templates.memory_repository import InMemoryTemplateRepository
from src.slotbook.email_templates.templates_api import router
from src.slotbook.email_templates.templates_service import EmailTemplateService


class DummyAuthService:
    """Treat the bearer value as the caller's role."""

    def validate_token(self, token: str, required_role: str | None = None) -> dict[str, str]:
        if required_role == "admin" and token != "admin":
            raise InsufficientRoleError("Insufficient role")
        return {"sub": token, "role": token}


def build_client(*, as_admin: bool = True) -> tuple[TestClient, EmailTemplateService]:
    service = EmailTemplateService(repo=InMemoryTemplateRepository())
    service.ensure_defaults()
    app = FastAPI()
    app.include_router(router)
    app.state.template_service = service
    app.state.auth_service = DummyAuthService()
    app.dependency_overrides[require_user] = lambda: {"sub": "alice", "role": "team"}
    if as_admin:
        app.dependency_overrides[require_admin_user] = lambda: {"sub": "root", "role": "admin"}
    return TestClient(app), service


def _create_payload(**overrides):
    payload = {
        "name": "Freeze notice",
        "subject": "Freeze for {{team}}",
        "body": "No deploys for {{team}} on {{slotDate}}",
        "category": "reminder",
        "variables": {"team": "Team", "slotDate": "Date"},
    }
    payload.update(overrides)
    return payload


def test_list_templates_and_filter_by_category() -> None:
    client, _ = build_client()

    everything = client.get("/api/email-templates/")
    bookings = client.get("/api/email-templates/", params={"category": "booking"})

    assert everything.status_code == 200
    assert len(everything.json()) == 3
    assert [item["name"] for item in bookings.json()] == ["Booking Confirmation"]


def test_list_templates_unknown_category_returns_400() -> None:
    client, _ = build_client()

    response = client.get("/api/email-templates/", params={"category": "digest"})

    assert response.status_code == 400


def test_create_update_and_delete_template() -> None:
    client, service = build_client()

    created = client.post("/api/email-templates/", json=_create_payload())
    assert created.status_code == 201
    template_id = created.json()["id"]
    assert created.json()["is_default"] is False

    patched = client.patch(
        f"/api/email-templates/{template_id}", json={"subject": "Code freeze for {{team}}"}
    )
    assert patched.status_code == 200
    assert patched.json()["subject"] == "Code freeze for {{team}}"
    assert patched.json()["body"] == _create_payload()["body"]

    deleted = client.delete(f"/api/email-templates/{template_id}")
    assert deleted.status_code == 200
    assert client.get(f"/api/email-templates/{template_id}").status_code == 404
    assert len(service.list()) == 3


def test_update_with_null_field_returns_400_and_keeps_template() -> None:
    client, service = build_client()
    template_id = service.list("booking")[0].id

    response = client.patch(f"/api/email-templates/{template_id}", json={"subject": None})

    assert response.status_code == 400
    assert response.json()["detail"]["failure_reason"] == "invalid_argument"
    listing = client.get("/api/email-templates/")
    assert listing.status_code == 200
    assert all(item["subject"] for item in listing.json())


def test_create_rejects_unknown_category() -> None:
    client, _ = build_client()

    response = client.post("/api/email-templates/", json=_create_payload(category="digest"))

    assert response.status_code == 422


def test_delete_default_template_is_forbidden() -> None:
    client, service = build_client()
    default_id = service.list("booking")[0].id

    response = client.delete(f"/api/email-templates/{default_id}")

    assert response.status_code == 403
    assert response.json()["detail"]["failure_reason"] == "forbidden"


def test_preview_renders_sample_values() -> None:
    client, service = build_client()
    template_id = service.list("status-update")[0].id

    response = client.post(
        f"/api/email-templates/{template_id}/preview",
        json={"values": {"releaseName": "Search v2", "status": "released"}},
    )

    assert response.status_code == 200
    assert response.json()["subject"] == "Release Search v2 is now released"
    assert "{{team}}" in response.json()["body"]


def test_team_member_cannot_mutate_templates() -> None:
    client, _ = build_client(as_admin=False)

    response = client.post(
        "/api/email-templates/",
        json=_create_payload(),
        headers={"Authorization": "Bearer team"},
    )

    assert response.status_code == 403
    assert response.json()["detail"]["failure_reason"] == "insufficient_role"


def test_missing_template_returns_404() -> None:
    client, _ = build_client()

    assert client.get("/api/email-templates/999").status_code == 404
    assert client.post("/api/email-templates/999/preview", json={}).status_code == 404
