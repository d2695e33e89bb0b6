"""
Request schemas shared by the dashboard server and the Streamlit forms.

Field names are snake_case in Python and camelCase on the wire, matching
the external projects API.
"""

from __future__ import annotations
from typing import Optional, List, Dict, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from config.constants import ASSESSMENT_LEVELS, LLM_PROVIDERS
from core.rag_status import display_rag_status
from utils.date_utils import to_iso_date, is_monday, week_key


class CamelModel(BaseModel):
    """Base model accepting camelCase or snake_case input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_api(self) -> Dict[str, Any]:
        """Serialize with camelCase keys."""
        return self.model_dump(by_alias=True, mode='json')


def _require_date(value: Any) -> str:
    iso = to_iso_date(value)
    if iso is None:
        raise ValueError("Invalid date")
    return iso


class WeeklyReportCreate(CamelModel):
    """Weekly status report submitted for a project."""
    project_id: int = Field(ge=1)
    reporting_date: str
    project_importance: Literal['High', 'Medium', 'Low', 'Critical'] = 'Medium'
    delivery_model: Literal['Agile', 'Scrum', 'Kanban', 'Waterfall', 'Hybrid'] = 'Agile'
    rag_status: Literal['Green', 'Amber', 'Red'] = Field(
        validation_alias=AliasChoices('ragStatus', 'rag_status', 'healthCurrentWeek'),
    )
    client_escalation: bool = False
    client_escalation_details: Optional[str] = None
    key_weekly_updates: str = Field(min_length=1)
    weekly_update_column: Optional[str] = None
    plan_for_next_week: Optional[str] = None
    issues_challenges: Optional[str] = None
    plan_for_green: Optional[str] = None
    current_sdlc_phase: Optional[str] = None
    sqa_remarks: Optional[str] = None

    @field_validator('reporting_date', mode='before')
    @classmethod
    def _check_reporting_date(cls, value):
        return _require_date(value)

    @field_validator('rag_status', mode='before')
    @classmethod
    def _normalize_rag(cls, value):
        # Accept any case and the legacy 'Yellow'
        return display_rag_status(value) or value


class TechnicalReviewCreate(CamelModel):
    """Technical review conducted on a project."""
    project_id: int = Field(ge=1)
    review_date: str
    review_type: str = Field(min_length=1)
    review_cycle_number: int = Field(default=1, ge=1)
    executive_summary: str = Field(min_length=1)
    architecture_design_review: Optional[str] = None
    code_quality_standards: Optional[str] = None
    dev_ops_deployment_readiness: Optional[str] = None
    testing_qa: Optional[str] = Field(default=None, alias='testingQA')
    risk_identification: Optional[str] = None
    compliance_standards: Optional[str] = None
    action_items_recommendations: Optional[str] = None
    reviewer_sign_off: Optional[str] = None
    sqa_validation: Optional[str] = None

    @field_validator('review_date', mode='before')
    @classmethod
    def _check_review_date(cls, value):
        return _require_date(value)


class LlmConfigurationCreate(CamelModel):
    """LLM provider settings used by the assessment pipeline."""
    model_config = ConfigDict(protected_namespaces=())

    provider: str
    model_name: str = Field(min_length=1)
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, ge=1)
    prompt_template: Optional[str] = None
    is_active: bool = True

    @field_validator('provider')
    @classmethod
    def _check_provider(cls, value: str) -> str:
        provider = value.strip().lower()
        if provider not in LLM_PROVIDERS:
            raise ValueError(f"Unsupported LLM provider: {value}")
        return provider


class ProjectStatusCreate(CamelModel):
    """Weekly status entered with a new project."""
    reporting_date: str
    project_importance: str = ''
    delivery_model: str = ''
    client_escalation: bool = False
    client_escalation_details: Optional[str] = None
    rag_status: str = 'Green'
    key_weekly_updates: str = ''
    weekly_update_column: str = ''
    plan_for_next_week: str = ''
    issues_challenges: str = ''
    plan_for_green: str = ''
    current_sdlc_phase: str = ''
    sqa_remarks: str = ''

    @field_validator('reporting_date', mode='before')
    @classmethod
    def _check_monday(cls, value):
        iso = _require_date(value)
        if not is_monday(iso):
            raise ValueError("Reporting date must be a Monday")
        return iso


class ProjectCreate(CamelModel):
    """New project forwarded to the external projects API."""
    project_name: str = Field(min_length=1)
    project_code_id: Optional[str] = None
    project_manager_name: str = Field(min_length=1)
    account: str = Field(min_length=1)
    billing_model: str = Field(min_length=1)
    tower: str = Field(min_length=1)
    fte: str = Field(min_length=1)
    wsr_publish: str = Field(default='No', alias='wsrPublisYesNo')
    importance: str = Field(min_length=1)
    is_active: bool = True
    project_statuses: List[ProjectStatusCreate] = Field(min_length=1)

    @model_validator(mode='after')
    def _one_status_per_week(self) -> "ProjectCreate":
        weeks = [week_key(status.reporting_date) for status in self.project_statuses]
        if len(set(weeks)) != len(weeks):
            raise ValueError("Only one status update allowed per week")
        return self

    def to_api(self) -> Dict[str, Any]:
        """External API expects escalation flags as 0/1."""
        data = super().to_api()
        for status in data['projectStatuses']:
            status['clientEscalation'] = 1 if status['clientEscalation'] else 0
        return data


class AssessmentGenerateRequest(CamelModel):
    """Trigger for the external assessment pipeline."""
    assessment_level: str
    assessed_person_name: str = Field(min_length=1)
    llm_provider: str = 'gemini'
    re_assess: bool = True

    @field_validator('assessment_level')
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ASSESSMENT_LEVELS:
            raise ValueError(f"Unknown assessment level: {value}")
        return level


def validation_errors(exc: ValidationError) -> List[Dict[str, Any]]:
    """Flatten a pydantic ValidationError into JSON-safe field errors."""
    return [
        {
            'path': [str(part) for part in error.get('loc', ())],
            'message': error.get('msg', ''),
            'type': error.get('type', ''),
        }
        for error in exc.errors()
    ]
