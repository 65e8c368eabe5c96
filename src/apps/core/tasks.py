"""Celery tasks for the core app."""

import logging
from typing import Any, Optional

from celery import shared_task
from django.contrib.auth import get_user_model

from .models import Visit
from .user_agent import parse_user_agent

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def record_visit(
    *,
    ip_address: Optional[str],
    url: str,
    method: str,
    user_agent: str = "",
    user_id: Optional[Any] = None,
    response_code: Optional[int] = None,
    response_time_ms: Optional[int] = None,
) -> int:
    """Persist one visit. Returns the new row id."""
    user = None
    if user_id is not None:
        user = get_user_model().objects.filter(pk=user_id).first()

    visit = Visit.objects.create(
        ip_address=ip_address or None,
        url=url,
        method=method,
        user_agent=user_agent,
        user=user,
        response_code=response_code,
        response_time_ms=response_time_ms,
        **parse_user_agent(user_agent),
    )
    logger.debug("Visit recorded.", extra={"visit_id": visit.pk})
    return visit.pk
