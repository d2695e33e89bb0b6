"""Trend series for the project health charts."""

from __future__ import annotations
import logging
from typing import Optional, Dict, Any, List, Iterable

import pandas as pd

from config.constants import TREND_WEEKS
from core.rag_status import normalize_rag_status
from models.assessment import Assessment, TrendPoint
from utils.date_utils import to_iso_date


logger = logging.getLogger(__name__)

TREND_COLUMNS = ['date', 'green', 'amber', 'red', 'total']


def select_assessment(assessments: List[Assessment], person_name: Optional[str]) -> Optional[Assessment]:
    """Assessment of the selected person, falling back to the first one."""
    if not assessments:
        return None
    for assessment in assessments:
        if assessment.assessed_person_name == person_name:
            return assessment
    return assessments[0]


def _dedupe_and_sort(points: Iterable[TrendPoint], keep_undated: bool = False) -> List[TrendPoint]:
    """Keep the first point per calendar date, then order ascending.

    Points without a parseable date are dropped unless keep_undated is set,
    in which case they follow the dated points in input order.
    """
    seen: Dict[str, TrendPoint] = {}
    undated: List[TrendPoint] = []
    for point in points:
        iso_date = to_iso_date(point.date)
        if iso_date is None:
            if keep_undated:
                undated.append(point)
            else:
                logger.debug(f"Dropping trend point with unparseable date {point.date!r}")
            continue
        if iso_date in seen:
            continue
        seen[iso_date] = TrendPoint(
            date=iso_date,
            green=point.green,
            amber=point.amber,
            red=point.red,
            total=point.total,
        )
    return [seen[key] for key in sorted(seen)] + undated


def _fallback_point(assessment: Assessment) -> TrendPoint:
    # Top-level totalProjects still includes projects the pipeline failed to assess
    return TrendPoint(
        date=assessment.assessment_date or '',
        green=assessment.green_projects,
        amber=assessment.amber_projects,
        red=assessment.red_projects,
        total=max(assessment.total_projects - assessment.error_projects, 0),
    )


def build_trend_series(assessments: Iterable[Assessment]) -> List[TrendPoint]:
    """Chronological, de-duplicated trend points across assessments.

    Trend points of every assessment are flattened in input order; for a
    date supplied more than once the first point wins. Upstream totals are
    kept as given. When no assessment carries a usable trend point, one
    point per assessment is synthesized from its top-level counts,
    excluding error projects from the total; those points are kept even
    when the assessment has no parseable date.

    Args:
        assessments: Assessments in the order they were received

    Returns:
        List of TrendPoint sorted by date (may be empty)
    """
    assessments = list(assessments or [])
    flattened = [point for assessment in assessments for point in assessment.trends]

    series = _dedupe_and_sort(flattened)
    if series:
        return series

    return _dedupe_and_sort((_fallback_point(a) for a in assessments), keep_undated=True)


def has_trend_data(points: List[TrendPoint]) -> bool:
    """A series is chartable when at least one point has projects."""
    return any(point.total > 0 for point in points)


def build_weekly_trends(reports: Iterable[Dict[str, Any]], weeks: int = TREND_WEEKS) -> List[Dict[str, Any]]:
    """Group weekly status reports by reporting date and count RAG statuses.

    Args:
        reports: Weekly status report rows (reportingDate, ragStatus)
        weeks: Number of most recent reporting dates to keep

    Returns:
        List of {date, green, amber, red} dicts in ascending date order
    """
    grouped: Dict[str, Dict[str, int]] = {}
    for report in reports or []:
        week = to_iso_date(report.get('reportingDate'))
        if week is None:
            continue
        counts = grouped.setdefault(week, {'green': 0, 'amber': 0, 'red': 0})
        bucket = normalize_rag_status(report.get('ragStatus'))
        if bucket in counts:
            counts[bucket] += 1

    recent = sorted(grouped)[-weeks:] if weeks > 0 else []
    return [{'date': week, **grouped[week]} for week in recent]


def trends_to_frame(points: List[TrendPoint]) -> pd.DataFrame:
    """DataFrame of a trend series for plotting."""
    if not points:
        return pd.DataFrame(columns=TREND_COLUMNS)
    df = pd.DataFrame([point.to_dict() for point in points], columns=TREND_COLUMNS)
    df['date'] = pd.to_datetime(df['date'], errors='coerce')
    return df
