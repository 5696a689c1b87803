"""Application wiring for claimflow.

Front ends (dashboards, scripts) obtain a workflow service here instead of
assembling the engine, repository and logging themselves.
"""

from typing import Optional

from sqlalchemy.orm import Session

from claimflow.common.logger import configure_logging
from claimflow.core.approval.machine import Clock
from claimflow.core.approval.service import ClaimWorkflowService
from claimflow.core.config import Settings, get_settings
from claimflow.core.validation.engine import ValidationEngine
from claimflow.repos.sql import SqlAlchemyClaimRepository


def create_workflow_service(
    db: Session,
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> ClaimWorkflowService:
    """
    Build a workflow service over a database session.

    Configures package logging and applies the presentation settings to
    the validation engine. Committing the session is left to the caller.

    Args:
        db: Database session
        settings: Settings to apply; the cached application settings if omitted
        clock: Returns "now" for timestamps

    Returns:
        ClaimWorkflowService backed by ``SqlAlchemyClaimRepository``
    """
    settings = settings or get_settings()
    configure_logging(settings)

    engine = ValidationEngine(currency_symbol=settings.currency_symbol)
    return ClaimWorkflowService(
        SqlAlchemyClaimRepository(db),
        validation_engine=engine,
        clock=clock,
    )
