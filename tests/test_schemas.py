"""
Tests for request validation models.
"""

import pytest
from pydantic import ValidationError

from conftest import valid_report_payload

from shared.schemas import (
    AssessmentGenerateRequest,
    LlmConfigurationCreate,
    ProjectCreate,
    TechnicalReviewCreate,
    WeeklyReportCreate,
    validation_errors,
)


def _project_payload(**overrides):
    payload = {
        "projectName": "Apollo",
        "projectManagerName": "Vijo Jacob",
        "account": "Acme",
        "billingModel": "Fixed Price",
        "tower": "Digital",
        "fte": "3",
        "importance": "High",
        "projectStatuses": [
            {"reportingDate": "2024-01-08", "ragStatus": "Green", "clientEscalation": True},
        ],
    }
    payload.update(overrides)
    return payload


class TestWeeklyReportCreate:
    def test_camel_case_input(self):
        report = WeeklyReportCreate.model_validate(valid_report_payload())
        assert report.project_id == 7
        assert report.rag_status == "Amber"
        assert report.reporting_date == "2024-01-08"

    def test_rag_status_normalized(self):
        assert WeeklyReportCreate.model_validate(valid_report_payload(ragStatus="yellow")).rag_status == "Amber"
        assert WeeklyReportCreate.model_validate(valid_report_payload(ragStatus="RED")).rag_status == "Red"

    def test_health_current_week_alias(self):
        payload = valid_report_payload()
        payload.pop("ragStatus")
        payload["healthCurrentWeek"] = "Green"
        assert WeeklyReportCreate.model_validate(payload).rag_status == "Green"

    def test_unknown_rag_status_rejected(self):
        with pytest.raises(ValidationError):
            WeeklyReportCreate.model_validate(valid_report_payload(ragStatus="Purple"))

    def test_missing_required_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            WeeklyReportCreate.model_validate({"projectId": 7})
        paths = {tuple(error["path"]) for error in validation_errors(exc_info.value)}
        assert ("reportingDate",) in paths or ("reporting_date",) in paths

    def test_invalid_date_rejected(self):
        with pytest.raises(ValidationError):
            WeeklyReportCreate.model_validate(valid_report_payload(reportingDate="someday"))

    def test_to_api_uses_camel_case(self):
        data = WeeklyReportCreate.model_validate(valid_report_payload()).to_api()
        assert data["projectId"] == 7
        assert data["keyWeeklyUpdates"] == "Sprint 4 closed"
        assert "project_id" not in data


class TestTechnicalReviewCreate:
    def test_testing_qa_alias(self):
        review = TechnicalReviewCreate.model_validate({
            "projectId": 3,
            "reviewDate": "2024-02-01",
            "reviewType": "Architecture",
            "executiveSummary": "Sound design",
            "testingQA": "Coverage at 80%",
        })
        assert review.testing_qa == "Coverage at 80%"
        assert review.review_cycle_number == 1
        assert review.to_api()["testingQA"] == "Coverage at 80%"

    def test_empty_summary_rejected(self):
        with pytest.raises(ValidationError):
            TechnicalReviewCreate.model_validate({
                "projectId": 3,
                "reviewDate": "2024-02-01",
                "reviewType": "Architecture",
                "executiveSummary": "   ",
            })


class TestProjectCreate:
    def test_escalation_sent_as_int(self):
        data = ProjectCreate.model_validate(_project_payload()).to_api()
        assert data["projectStatuses"][0]["clientEscalation"] == 1
        assert data["wsrPublisYesNo"] == "No"

    def test_reporting_date_must_be_monday(self):
        payload = _project_payload(projectStatuses=[{"reportingDate": "2024-01-09"}])
        with pytest.raises(ValidationError, match="Monday"):
            ProjectCreate.model_validate(payload)

    def test_one_status_per_week(self):
        payload = _project_payload(projectStatuses=[
            {"reportingDate": "2024-01-08"},
            {"reportingDate": "2024-01-08"},
        ])
        with pytest.raises(ValidationError, match="one status update"):
            ProjectCreate.model_validate(payload)

    def test_at_least_one_status(self):
        with pytest.raises(ValidationError):
            ProjectCreate.model_validate(_project_payload(projectStatuses=[]))


class TestLlmConfigurationCreate:
    def test_provider_lowercased(self):
        config = LlmConfigurationCreate.model_validate({"provider": "Gemini", "modelName": "gemini-1.5-pro"})
        assert config.provider == "gemini"
        assert config.is_active is True

    def test_unknown_provider(self):
        with pytest.raises(ValidationError, match="Unsupported LLM provider"):
            LlmConfigurationCreate.model_validate({"provider": "acme", "modelName": "x"})

    def test_temperature_bounds(self):
        with pytest.raises(ValidationError):
            LlmConfigurationCreate.model_validate({"provider": "openai", "modelName": "gpt-4o", "temperature": 3})


class TestAssessmentGenerateRequest:
    def test_level_upper_cased(self):
        request = AssessmentGenerateRequest.model_validate({
            "assessmentLevel": "delivery_manager",
            "assessedPersonName": "Ani",
        })
        assert request.to_api() == {
            "assessmentLevel": "DELIVERY_MANAGER",
            "assessedPersonName": "Ani",
            "llmProvider": "gemini",
            "reAssess": True,
        }

    def test_unknown_level(self):
        with pytest.raises(ValidationError):
            AssessmentGenerateRequest.model_validate({"assessmentLevel": "CEO", "assessedPersonName": "Ani"})
