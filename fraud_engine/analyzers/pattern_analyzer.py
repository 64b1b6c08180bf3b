"""Heuristic risk factors derived from claim attributes and claimant history."""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from ..models.claim import ClaimContext, DateLike
from ..models.judgment import PatternFindings

logger = logging.getLogger(__name__)

HIGH_AMOUNT_THRESHOLD = 100_000
RECENT_CLAIMS_THRESHOLD = 3
LATE_REPORTING_DAYS = 30

HIGH_AMOUNT_FACTOR = "High claim amount (>100,000)"
RECENT_CLAIMS_FACTOR = "Multiple recent claims"
REJECTED_CLAIMS_FACTOR = "Previous rejected claims"
LATE_REPORTING_FACTOR = "Late claim reporting (>30 days)"


def analyze_patterns(ctx: ClaimContext, now: Optional[datetime] = None) -> PatternFindings:
    """
    Derive heuristic risk factors from a claim.

    Every rule is evaluated; the returned factors keep detection order.
    An unparseable date of loss counts as unknown age and the late
    reporting rule does not fire.

    Args:
        ctx: Claim to inspect
        now: Reference time for the reporting delay (defaults to current UTC time)

    Returns:
        PatternFindings with the fired factors
    """
    factors: List[str] = []

    if ctx.amount > HIGH_AMOUNT_THRESHOLD:
        factors.append(HIGH_AMOUNT_FACTOR)

    if ctx.history.recent_claims > RECENT_CLAIMS_THRESHOLD:
        factors.append(RECENT_CLAIMS_FACTOR)

    if ctx.history.rejected_claims > 0:
        factors.append(REJECTED_CLAIMS_FACTOR)

    age = days_since_loss(ctx.date_of_loss, now)
    if age is not None and age > LATE_REPORTING_DAYS:
        factors.append(LATE_REPORTING_FACTOR)

    logger.debug(f"Pattern analysis fired {len(factors)} factors: {factors}")
    return PatternFindings(risk_factors=tuple(factors))


def days_since_loss(value: DateLike, now: Optional[datetime] = None) -> Optional[int]:
    """
    Whole days between the date of loss and ``now``.

    Returns:
        Number of days, or None if the date is missing or malformed
    """
    loss = _parse_date(value)
    if loss is None:
        return None

    now = _as_utc(now or datetime.now(timezone.utc))
    return (now - loss).days


def _parse_date(value: DateLike) -> Optional[datetime]:
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        logger.debug(f"Unparseable date of loss: {value!r}")
        return None


def _as_utc(moment: datetime) -> datetime:
    # Naive datetimes are taken to be UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
