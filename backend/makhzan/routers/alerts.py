"""
Alerts router for stock and expiry checks.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from makhzan.dependencies import get_alert_evaluator
from makhzan.schemas.alert import AlertCheckResponse, AlertSummary
from makhzan.services import messages
from makhzan.services.alerts import AlertEvaluator

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.post("/check", response_model=AlertCheckResponse)
async def run_alert_check(evaluator: AlertEvaluator = Depends(get_alert_evaluator)):
    """
    Check all products now. Each alert is also added to the notification log;
    running the check again adds the same alerts again.
    """
    checked_at = datetime.now(timezone.utc)
    alerts = evaluator.run_alert_check(checked_at)
    return AlertCheckResponse(
        checked_at=checked_at,
        count=len(alerts),
        message=messages.alert_check_summary(len(alerts)),
        alerts=alerts,
    )


@router.get("/summary", response_model=AlertSummary)
async def get_alert_summary(evaluator: AlertEvaluator = Depends(get_alert_evaluator)):
    """Counts of out-of-stock, low-stock and soon-expiring products."""
    return evaluator.alert_summary()
