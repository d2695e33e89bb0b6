"""Project data models as returned by the external projects API."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List


def _as_bool(value: Any) -> bool:
    """The external API sends flags as booleans, 0/1 or 'Yes'/'No'."""
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'y')
    return bool(value)


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class ProjectStatus:
    """One weekly status record of a project."""
    reporting_date: Optional[str] = None
    rag_status: Optional[str] = None
    status_id: Optional[str] = None
    project_importance: Optional[str] = None
    delivery_model: Optional[str] = None
    client_escalation: bool = False
    client_escalation_details: Optional[str] = None
    key_weekly_updates: Optional[str] = None
    weekly_update_column: Optional[str] = None
    issues_challenges: Optional[str] = None
    plan_for_green: Optional[str] = None
    plan_for_next_week: Optional[str] = None
    current_sdlc_phase: Optional[str] = None
    sqa_remarks: Optional[str] = None
    llm_ai_status: Optional[str] = None
    llm_ai_assessment_description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectStatus":
        """Build from an external API payload (camelCase keys)."""
        return cls(
            reporting_date=_as_str(data.get('reportingDate')),
            rag_status=data.get('ragStatus'),
            status_id=_as_str(data.get('statusId')),
            project_importance=data.get('projectImportance'),
            delivery_model=data.get('deliveryModel'),
            client_escalation=_as_bool(data.get('clientEscalation')),
            client_escalation_details=data.get('clientEscalationDetails'),
            key_weekly_updates=data.get('keyWeeklyUpdates'),
            weekly_update_column=data.get('weeklyUpdateColumn'),
            issues_challenges=data.get('issuesChallenges'),
            plan_for_green=data.get('planForGreen'),
            plan_for_next_week=data.get('planForNextWeek'),
            current_sdlc_phase=data.get('currentSdlcPhase'),
            sqa_remarks=data.get('sqaRemarks'),
            llm_ai_status=data.get('llmAiStatus'),
            llm_ai_assessment_description=data.get('llmAiAssessmentDescription'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the external API shape."""
        return {
            'statusId': self.status_id,
            'reportingDate': self.reporting_date,
            'ragStatus': self.rag_status,
            'projectImportance': self.project_importance,
            'deliveryModel': self.delivery_model,
            'clientEscalation': self.client_escalation,
            'clientEscalationDetails': self.client_escalation_details,
            'keyWeeklyUpdates': self.key_weekly_updates,
            'weeklyUpdateColumn': self.weekly_update_column,
            'issuesChallenges': self.issues_challenges,
            'planForGreen': self.plan_for_green,
            'planForNextWeek': self.plan_for_next_week,
            'currentSdlcPhase': self.current_sdlc_phase,
            'sqaRemarks': self.sqa_remarks,
            'llmAiStatus': self.llm_ai_status,
            'llmAiAssessmentDescription': self.llm_ai_assessment_description,
        }


@dataclass
class ProjectReview:
    """Technical review attached to a project by the external API."""
    review_id: Optional[str] = None
    review_date: Optional[str] = None
    review_type: Optional[str] = None
    review_cycle_number: Optional[int] = None
    executive_summary: Optional[str] = None
    architecture_design_review: Optional[str] = None
    code_quality_standards: Optional[str] = None
    devops_deployment_readiness: Optional[str] = None
    testing_qa: Optional[str] = None
    risk_identification: Optional[str] = None
    compliance_standards: Optional[str] = None
    action_items_recommendations: Optional[str] = None
    reviewer_sign_off: Optional[str] = None
    sqa_validation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectReview":
        return cls(
            review_id=_as_str(data.get('reviewId')),
            review_date=_as_str(data.get('reviewDate')),
            review_type=data.get('reviewType'),
            review_cycle_number=data.get('reviewCycleNumber'),
            executive_summary=data.get('executiveSummary'),
            architecture_design_review=data.get('architectureDesignReview'),
            code_quality_standards=data.get('codeQualityStandards'),
            devops_deployment_readiness=data.get('devOpsDeploymentReadiness'),
            testing_qa=data.get('testingQA'),
            risk_identification=data.get('riskIdentification'),
            compliance_standards=data.get('complianceStandards'),
            action_items_recommendations=data.get('actionItemsRecommendations'),
            reviewer_sign_off=data.get('reviewerSignOff'),
            sqa_validation=data.get('sqaValidation'),
        )

    def review_sections(self) -> Dict[str, Optional[str]]:
        """Review areas in display order."""
        return {
            'Architecture & Design': self.architecture_design_review,
            'Code Quality & Standards': self.code_quality_standards,
            'DevOps & Deployment Readiness': self.devops_deployment_readiness,
            'Testing & QA': self.testing_qa,
            'Risk Identification': self.risk_identification,
            'Compliance & Standards': self.compliance_standards,
            'Action Items & Recommendations': self.action_items_recommendations,
        }


@dataclass
class Project:
    """Project record owned by the external API."""
    project_id: Any
    project_name: str = ''
    project_code_id: Optional[str] = None
    project_manager_name: Optional[str] = None
    account: Optional[str] = None
    billing_model: Optional[str] = None
    tower: Optional[str] = None
    fte: Optional[str] = None
    wsr_publish: Optional[str] = None
    importance: Optional[str] = None
    is_active: bool = True
    project_statuses: List[ProjectStatus] = field(default_factory=list)
    project_reviews: List[ProjectReview] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        """Build from an external API payload (camelCase keys)."""
        statuses = data.get('projectStatuses') or []
        reviews = data.get('projectReviews') or []
        return cls(
            project_id=data.get('projectId'),
            project_name=data.get('projectName') or '',
            project_code_id=_as_str(data.get('projectCodeId')),
            project_manager_name=data.get('projectManagerName'),
            account=data.get('account'),
            billing_model=data.get('billingModel'),
            tower=data.get('tower'),
            fte=_as_str(data.get('fte')),
            wsr_publish=data.get('wsrPublisYesNo'),
            importance=data.get('importance'),
            is_active=_as_bool(data.get('isActive', True)),
            project_statuses=[ProjectStatus.from_dict(s) for s in statuses if isinstance(s, dict)],
            project_reviews=[ProjectReview.from_dict(r) for r in reviews if isinstance(r, dict)],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'projectId': self.project_id,
            'projectName': self.project_name,
            'projectCodeId': self.project_code_id,
            'projectManagerName': self.project_manager_name,
            'account': self.account,
            'billingModel': self.billing_model,
            'tower': self.tower,
            'fte': self.fte,
            'wsrPublisYesNo': self.wsr_publish,
            'importance': self.importance,
            'isActive': self.is_active,
            'projectStatuses': [s.to_dict() for s in self.project_statuses],
        }


def parse_projects(payload: Any) -> List[Project]:
    """Parse the projects list endpoint; non-list payloads yield no projects."""
    if not isinstance(payload, list):
        return []
    return [Project.from_dict(item) for item in payload if isinstance(item, dict)]
