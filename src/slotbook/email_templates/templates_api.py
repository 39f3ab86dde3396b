"""E-mail template management routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from ..api_errors import http_error
from ..auth.auth_dependencies import require_admin_user, require_user
from ..exceptions import AppError
from .templates_schemas import (
    EmailTemplateCreateRequest,
    EmailTemplatePayload,
    EmailTemplateUpdateRequest,
    TemplatePreviewRequest,
    TemplatePreviewResponse,
)
from .templates_service import EmailTemplateService

router = APIRouter(
    prefix="/api/email-templates",
    tags=["email-templates"],
    dependencies=[Depends(require_user)],
)


def get_template_service(request: Request) -> EmailTemplateService:
    try:
        return request.app.state.template_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("EmailTemplateService is not configured") from exc


@router.get("/")
def list_templates(
    category: str | None = None,
    service: EmailTemplateService = Depends(get_template_service),
) -> list[EmailTemplatePayload]:
    try:
        templates = service.list(category)
    except AppError as exc:
        raise http_error(exc) from None
    return [EmailTemplatePayload.from_domain(item) for item in templates]


@router.get("/{template_id}")
def fetch_template(
    template_id: int,
    service: EmailTemplateService = Depends(get_template_service),
) -> EmailTemplatePayload:
    try:
        return EmailTemplatePayload.from_domain(service.get(template_id))
    except AppError as exc:
        raise http_error(exc) from None


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_user)],
)
def create_template(
    payload: EmailTemplateCreateRequest,
    service: EmailTemplateService = Depends(get_template_service),
) -> EmailTemplatePayload:
    try:
        template = service.create(payload.model_dump(mode="json"))
    except AppError as exc:
        raise http_error(exc) from None
    return EmailTemplatePayload.from_domain(template)


@router.patch("/{template_id}", dependencies=[Depends(require_admin_user)])
def update_template(
    template_id: int,
    payload: EmailTemplateUpdateRequest,
    service: EmailTemplateService = Depends(get_template_service),
) -> EmailTemplatePayload:
    changes = payload.model_dump(mode="json", exclude_unset=True)
    try:
        template = service.update(template_id, changes)
    except AppError as exc:
        raise http_error(exc) from None
    return EmailTemplatePayload.from_domain(template)


@router.delete("/{template_id}", dependencies=[Depends(require_admin_user)])
def delete_template(
    template_id: int,
    service: EmailTemplateService = Depends(get_template_service),
) -> dict[str, str]:
    try:
        service.delete(template_id)
    except AppError as exc:
        raise http_error(exc) from None
    return {"message": "Template deleted successfully"}


@router.post("/{template_id}/preview")
def preview_template(
    template_id: int,
    payload: TemplatePreviewRequest,
    service: EmailTemplateService = Depends(get_template_service),
) -> TemplatePreviewResponse:
    """Render subject and body with sample values; nothing is sent."""
    try:
        rendered = service.render(template_id, payload.values)
    except AppError as exc:
        raise http_error(exc) from None
    return TemplatePreviewResponse(subject=rendered.subject, body=rendered.body)
