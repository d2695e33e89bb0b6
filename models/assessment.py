"""Organizational assessment models (produced externally by the LLM pipeline)."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List


def _as_int(value: Any) -> int:
    """Counts arrive as ints, numeric strings ("2", "2.0") or null."""
    try:
        return max(int(float(value)), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass
class TrendPoint:
    """One dated snapshot of RAG counts."""
    date: str
    green: int = 0
    amber: int = 0
    red: int = 0
    total: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrendPoint":
        return cls(
            date=str(data.get('assessmentDate') or data.get('date') or ''),
            green=_as_int(data.get('green')),
            amber=_as_int(data.get('amber')),
            red=_as_int(data.get('red')),
            total=_as_int(data.get('total')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'green': self.green,
            'amber': self.amber,
            'red': self.red,
            'total': self.total,
        }


@dataclass
class ProjectDetail:
    """Per-project summary embedded in an assessment."""
    project_id: Any
    project_name: str = ''
    account: Optional[str] = None
    billing_model: Optional[str] = None
    tower: Optional[str] = None
    current_status: Optional[str] = None
    ai_assessment: Optional[str] = None
    key_issues: Optional[str] = None
    plan_for_green: Optional[str] = None
    current_sdlc_phase: Optional[str] = None
    escalation_needed: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectDetail":
        return cls(
            project_id=data.get('projectId'),
            project_name=data.get('projectName') or '',
            account=data.get('account'),
            billing_model=data.get('billingModel'),
            tower=data.get('tower'),
            current_status=data.get('currentStatus'),
            ai_assessment=data.get('aiAssessment'),
            key_issues=data.get('keyIssues'),
            plan_for_green=data.get('planForGreen'),
            current_sdlc_phase=data.get('currentSdlcPhase'),
            escalation_needed=bool(data.get('escalationNeeded')),
        )


@dataclass
class Assessment:
    """Organization-level portfolio assessment."""
    assessment_id: Any = None
    assessed_person_name: Optional[str] = None
    organization_unit: Optional[str] = None
    assessment_date: Optional[str] = None
    assessment_level: Optional[str] = None
    total_projects: int = 0
    green_projects: int = 0
    amber_projects: int = 0
    red_projects: int = 0
    error_projects: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)
    importance_groups: Dict[str, Dict[str, int]] = field(default_factory=dict)
    llm_org_rag_status: Optional[str] = None
    llm_org_assessment_description: Optional[str] = None
    key_risks: Optional[str] = None
    recommended_actions: Optional[str] = None
    escalation_needed: bool = False
    escalations_count: int = 0
    overall_health_score: Optional[float] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    trends: List[TrendPoint] = field(default_factory=list)
    project_details: List[ProjectDetail] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Assessment":
        """Build from the assessment dashboard payload (camelCase keys)."""
        summary = data.get('projectsSummary') or {}
        status_counts = summary.get('statusCounts') or {}
        importance_groups = summary.get('importanceGroups') or {}
        score = data.get('overallHealthScore')

        return cls(
            assessment_id=data.get('assessmentId'),
            assessed_person_name=data.get('assessedPersonName'),
            organization_unit=data.get('organizationUnit'),
            assessment_date=data.get('assessmentDate'),
            assessment_level=data.get('assessmentLevel'),
            total_projects=_as_int(data.get('totalProjects')),
            green_projects=_as_int(data.get('greenProjects')),
            amber_projects=_as_int(data.get('amberProjects')),
            red_projects=_as_int(data.get('redProjects')),
            error_projects=_as_int(data.get('errorProjects')),
            status_counts={str(k): _as_int(v) for k, v in status_counts.items()},
            importance_groups={
                str(label): {str(k): _as_int(v) for k, v in group.items()}
                for label, group in importance_groups.items()
                if isinstance(group, dict)
            },
            llm_org_rag_status=data.get('llmOrgRagStatus'),
            llm_org_assessment_description=data.get('llmOrgAssessmentDescription'),
            key_risks=data.get('keyRisks'),
            recommended_actions=data.get('recommendedActions'),
            escalation_needed=bool(data.get('escalationNeeded')),
            escalations_count=_as_int(data.get('escalationsCount')),
            overall_health_score=_as_float(score),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
            trends=[TrendPoint.from_dict(t) for t in (data.get('trends') or []) if isinstance(t, dict)],
            project_details=[
                ProjectDetail.from_dict(p) for p in (data.get('projectDetails') or []) if isinstance(p, dict)
            ],
        )


def parse_assessments(payload: Any) -> List[Assessment]:
    """Parse the dashboard endpoint; a single object is treated as a one-item list."""
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        return []
    return [Assessment.from_dict(item) for item in payload if isinstance(item, dict)]
