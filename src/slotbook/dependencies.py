"""Dependency wiring helpers."""

from fastapi import FastAPI

from .auth.auth_api import router as auth_router
from .auth.auth_service import AuthService
from .config import AppConfig
from .email_templates.templates_api import router as templates_router
from .email_templates.templates_service import EmailTemplateService
from .repositories.factory import build_ledger, build_template_repository
from .slots.slot_generator import seed_slots
from .slots.slots_api import releases_router
from .slots.slots_api import router as slots_router
from .stats.stats_api import router as stats_router
from .stats.stats_service import StatsService


def include_routers(app: FastAPI, config: AppConfig) -> None:
    """Mount module routers and attach services."""
    ledger = build_ledger(config)
    if config.slot_horizon_weeks:
        seed_slots(ledger, weeks=config.slot_horizon_weeks)

    template_service = EmailTemplateService(repo=build_template_repository(config))
    template_service.ensure_defaults()

    stats_service = StatsService(ledger=ledger)
    auth_service = AuthService.from_file(
        path=config.admin_credentials_path,
        signing_key=config.jwt_signing_key,
        token_ttl_hours=config.admin_jwt_ttl_hours,
    )

    app.state.config = config
    app.state.ledger = ledger
    app.state.template_service = template_service
    app.state.stats_service = stats_service
    app.state.auth_service = auth_service

    app.include_router(auth_router)
    app.include_router(slots_router)
    app.include_router(releases_router)
    app.include_router(stats_router)
    app.include_router(templates_router)
