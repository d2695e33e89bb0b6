"""Portfolio aggregation: current status, RAG metrics and strategic group.

All functions here are pure and never raise on empty or partial input; they
degrade to zeroed results so the pages can render an explicit "no data"
state instead of failing.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any, List, Iterable, Union

from config.constants import RAG_BUCKETS, RAG_UNKNOWN
from core.rag_status import normalize_rag_status, importance_rank
from models.assessment import Assessment
from models.project import Project, ProjectStatus
from utils.date_utils import parse_date_any


logger = logging.getLogger(__name__)

STRATEGIC_KEYS = ('strategic', 'strategic ')


@dataclass
class PortfolioMetrics:
    """Project counts per RAG bucket."""
    green: int = 0
    amber: int = 0
    red: int = 0
    error: int = 0

    @property
    def total(self) -> int:
        return self.green + self.amber + self.red + self.error

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def as_dict(self) -> Dict[str, int]:
        return {bucket: getattr(self, bucket) for bucket in RAG_BUCKETS}

    def percentages(self) -> Dict[str, float]:
        """Share of each bucket in percent; all zeros when there is no data."""
        total = self.total
        if total == 0:
            return {bucket: 0.0 for bucket in RAG_BUCKETS}
        return {bucket: round(count * 100.0 / total, 1) for bucket, count in self.as_dict().items()}


@dataclass
class StrategicGroup:
    """Status breakdown of the strategic importance bucket."""
    total: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def display_text(self) -> str:
        text = f"{self.total} Strategic Projects"
        if self.total > 0:
            parts = ", ".join(f"{status}: {count}" for status, count in self.status_counts.items())
            text += f" ({parts})"
        return text


def _reporting_key(status: ProjectStatus) -> Optional[datetime]:
    return parse_date_any(status.reporting_date)


def _is_later_or_same(candidate: Optional[datetime], current: Optional[datetime]) -> bool:
    # Unparseable dates rank below every parseable one
    if candidate is None:
        return current is None
    if current is None:
        return True
    return candidate >= current


def select_current_status(statuses: Iterable[ProjectStatus]) -> Optional[ProjectStatus]:
    """Return the status with the latest reporting date.

    When several records share the latest date the last one in input order
    wins. Returns None for an empty sequence.
    """
    current = None
    current_key = None
    for status in statuses or []:
        key = _reporting_key(status)
        if current is None or _is_later_or_same(key, current_key):
            current, current_key = status, key
    return current


def current_status(project: Project) -> Optional[ProjectStatus]:
    """Current status of a project (None when it has no status records)."""
    return select_current_status(project.project_statuses)


def status_history(project: Project) -> List[ProjectStatus]:
    """Statuses newest first; undated records go last.

    Records sharing a date are listed latest-in-input first, so the head of
    the list is always the current status.
    """
    dated = []
    undated = []
    for index, status in enumerate(project.project_statuses):
        key = _reporting_key(status)
        if key is None:
            undated.append(status)
        else:
            dated.append((key, index, status))
    dated.sort(key=lambda item: (item[0], item[1]), reverse=True)
    return [status for _, _, status in dated] + list(reversed(undated))


def aggregate_project_metrics(projects: Iterable[Project]) -> PortfolioMetrics:
    """Count projects per RAG bucket using each project's current status.

    Projects without any status, or whose status does not normalize to a
    known bucket, are not counted.
    """
    metrics = PortfolioMetrics()
    for project in projects or []:
        latest = current_status(project)
        if latest is None:
            continue
        bucket = normalize_rag_status(latest.rag_status)
        if bucket == RAG_UNKNOWN:
            logger.debug(f"Project {project.project_id} has unrecognised status {latest.rag_status!r}")
            continue
        setattr(metrics, bucket, getattr(metrics, bucket) + 1)
    return metrics


def aggregate_status_counts(status_counts: Optional[Dict[str, Any]]) -> PortfolioMetrics:
    """Fold a precomputed {status: count} map into normalized buckets."""
    metrics = PortfolioMetrics()
    for key, count in (status_counts or {}).items():
        bucket = normalize_rag_status(key)
        if bucket == RAG_UNKNOWN:
            continue
        try:
            value = max(int(count), 0)
        except (TypeError, ValueError):
            value = 0
        setattr(metrics, bucket, getattr(metrics, bucket) + value)
    return metrics


def aggregate_assessment_metrics(assessment: Optional[Assessment]) -> PortfolioMetrics:
    """RAG metrics of an assessment, taken from its projectsSummary status counts."""
    if assessment is None:
        return PortfolioMetrics()
    return aggregate_status_counts(assessment.status_counts)


def extract_strategic_group(
    importance_groups: Optional[Dict[str, Dict[str, Any]]],
    exclude_error: bool = True
) -> StrategicGroup:
    """Isolate the strategic bucket of an assessment's importance groups.

    The upstream producer sometimes keys the bucket as 'strategic ' (with a
    trailing space); that key is used only when 'strategic' is absent, so
    a project is never counted twice.

    Args:
        importance_groups: Mapping of importance label to {status: count}
        exclude_error: Drop the 'error' status before totalling

    Returns:
        StrategicGroup with total, per-status counts and display text
    """
    if not importance_groups:
        return StrategicGroup()

    group = None
    for key in STRATEGIC_KEYS:
        if importance_groups.get(key):
            group = importance_groups[key]
            break

    if not group:
        return StrategicGroup()

    status_counts = {}
    for status, count in group.items():
        if exclude_error and str(status).strip().lower() == 'error':
            continue
        try:
            status_counts[status] = max(int(count), 0)
        except (TypeError, ValueError):
            status_counts[status] = 0

    return StrategicGroup(total=sum(status_counts.values()), status_counts=status_counts)


def priority_projects(projects: Iterable[Project]) -> List[Project]:
    """Projects needing attention: Red first, then escalated, then High importance."""

    def priority(project: Project) -> int:
        latest = current_status(project)
        if latest is None:
            return 0
        if normalize_rag_status(latest.rag_status) == 'red':
            return 3
        if latest.client_escalation:
            return 2
        if importance_rank(project.importance) == 0:
            return 1
        return 0

    flagged = [(priority(p), p) for p in projects or []]
    flagged = [item for item in flagged if item[0] > 0]
    flagged.sort(key=lambda item: -item[0])
    return [project for _, project in flagged]


def build_dashboard_stats(reports: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Headline counts over the latest locally stored report of each project.

    Args:
        reports: Weekly status report rows (projectId, ragStatus,
                 clientEscalation, createdAt)

    Returns:
        Dict with greenProjects, amberProjects, redProjects, escalations
        and totalProjects
    """
    latest_reports: Dict[Any, Dict[str, Any]] = {}
    for report in reports or []:
        project_id = report.get('projectId')
        previous = latest_reports.get(project_id)
        if previous is None:
            latest_reports[project_id] = report
            continue
        created = parse_date_any(report.get('createdAt'))
        previous_created = parse_date_any(previous.get('createdAt'))
        if created is not None and (previous_created is None or created > previous_created):
            latest_reports[project_id] = report

    buckets = [normalize_rag_status(r.get('ragStatus')) for r in latest_reports.values()]
    return {
        'greenProjects': buckets.count('green'),
        'amberProjects': buckets.count('amber'),
        'redProjects': buckets.count('red'),
        'escalations': sum(1 for r in latest_reports.values() if r.get('clientEscalation')),
        'totalProjects': len(latest_reports),
    }


def metrics_from(source: Union[Assessment, Iterable[Project], None]) -> PortfolioMetrics:
    """Dispatch to the assessment or project-list aggregator."""
    if isinstance(source, Assessment):
        return aggregate_assessment_metrics(source)
    return aggregate_project_metrics(source or [])
