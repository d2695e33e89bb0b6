"""
Tests for the dashboard server routes.

The external API client and the identity provider are replaced through
dependency overrides; storage is an in-memory DuckDB.
"""

from conftest import FakeExternalClient, valid_report_payload

from utils.auth import StaticIdentityProvider


# =============================================================================
# HEALTH AND USERS
# =============================================================================


class TestHealth:
    def test_health(self, api):
        response = api.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "portfolio-status-dashboard"


class TestUsers:
    def test_me_returns_seeded_user(self, api):
        response = api.get("/api/users/me")
        assert response.status_code == 200
        assert response.json()["name"] == "Ani"

    def test_me_unknown_user(self, make_client):
        api = make_client(identity=StaticIdentityProvider(user_id=999))
        response = api.get("/api/users/me")
        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}

    def test_users_proxied(self, api):
        response = api.get("/api/users")
        assert response.status_code == 200
        assert response.json()[0]["preferredName"] == "Ani"

    def test_users_proxy_failure(self, make_client):
        api = make_client(client=FakeExternalClient(fail=True))
        response = api.get("/api/users")
        assert response.status_code == 500
        assert response.json()["message"] == "Failed to fetch users"


# =============================================================================
# PROJECTS AND ASSESSMENTS PROXY
# =============================================================================


class TestProjectsProxy:
    def test_list_projects(self, api):
        response = api.get("/api/projects")
        assert response.status_code == 200
        assert [p["projectId"] for p in response.json()] == [7]

    def test_proxy_failure_reports_cause(self, make_client):
        api = make_client(client=FakeExternalClient(fail=True))
        response = api.get("/api/projects")
        assert response.status_code == 500
        assert response.json() == {
            "message": "Failed to fetch projects from external API",
            "error": "Server returned HTML error page",
        }

    def test_get_single_project(self, api):
        assert api.get("/api/projects/7").json()["projectName"] == "Apollo"

    def test_missing_project(self, api):
        response = api.get("/api/projects/404")
        assert response.status_code == 404
        assert response.json()["message"] == "Project not found"

    def test_create_project_validates(self, api):
        response = api.post("/api/projects", json={"projectName": "Half a project"})
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid project data"
        assert body["errors"]

    def test_create_project_forwards_camel_case(self, api, external_client):
        payload = {
            "projectName": "Apollo II",
            "projectManagerName": "Vijo Jacob",
            "account": "Acme",
            "billingModel": "Fixed Price",
            "tower": "Digital",
            "fte": "2",
            "importance": "High",
            "projectStatuses": [{"reportingDate": "2024-01-08", "clientEscalation": False}],
        }
        response = api.post("/api/projects", json=payload)
        assert response.status_code == 201
        forwarded = external_client.created_projects[0]
        assert forwarded["projectName"] == "Apollo II"
        assert forwarded["projectStatuses"][0]["clientEscalation"] == 0


class TestAssessmentsProxy:
    def test_dashboard_requires_query(self, api):
        response = api.get("/api/organizational-assessments/dashboard")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request"

    def test_dashboard(self, make_client):
        api = make_client(client=FakeExternalClient(assessments=[{"assessmentId": 3}]))
        response = api.get("/api/organizational-assessments/dashboard",
                           params={"assessedPersonName": "Ani", "assessmentLevel": "DELIVERY_MANAGER"})
        assert response.status_code == 200
        assert response.json() == [{"assessmentId": 3}]

    def test_generate_normalizes_level(self, api, external_client):
        response = api.post("/api/organizational-assessments/generate",
                            json={"assessmentLevel": "org_head", "assessedPersonName": "Deepa"})
        assert response.status_code == 200
        assert external_client.generate_requests[0]["assessmentLevel"] == "ORG_HEAD"


# =============================================================================
# WEEKLY REPORTS AND REVIEWS
# =============================================================================


class TestWeeklyReports:
    def test_invalid_report(self, api):
        response = api.post("/api/weekly-reports", json=valid_report_payload(ragStatus="Purple", projectId=0))
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid report data"
        assert len(body["errors"]) >= 2

    def test_create_and_list_enriched(self, api):
        created = api.post("/api/weekly-reports", json=valid_report_payload())
        assert created.status_code == 201
        assert created.json()["submittedBy"] == 1

        response = api.get("/api/weekly-reports", params={"projectId": 7})
        assert response.status_code == 200
        reports = response.json()
        assert len(reports) == 1
        assert reports[0]["project"]["projectName"] == "Apollo"
        assert reports[0]["submittedBy"]["name"] == "Ani"

    def test_list_degrades_when_projects_unavailable(self, make_client):
        api = make_client()
        api.post("/api/weekly-reports", json=valid_report_payload())

        api = make_client(client=FakeExternalClient(fail=True))
        response = api.get("/api/weekly-reports")
        assert response.status_code == 200
        assert response.json()[0]["project"] is None

    def test_invalid_project_id_query(self, api):
        response = api.get("/api/weekly-reports", params={"projectId": "abc"})
        assert response.status_code == 400


class TestTechnicalReviews:
    def test_create_and_list(self, api):
        payload = {
            "projectId": 7,
            "reviewDate": "2024-02-01",
            "reviewType": "Security",
            "executiveSummary": "No critical findings",
        }
        created = api.post("/api/technical-reviews", json=payload)
        assert created.status_code == 201

        reviews = api.get("/api/technical-reviews").json()
        assert reviews[0]["conductor"]["name"] == "Ani"
        assert reviews[0]["project"]["projectId"] == 7

    def test_invalid_review(self, api):
        response = api.post("/api/technical-reviews", json={"projectId": 7})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid review data"


# =============================================================================
# LLM CONFIGURATION
# =============================================================================


class TestLlmConfig:
    def test_forbidden_for_project_manager(self, make_client):
        api = make_client(identity=StaticIdentityProvider(user_id=4, role="project_manager"))
        assert api.get("/api/llm-config").status_code == 403
        response = api.post("/api/llm-config", json={"provider": "gemini", "modelName": "gemini-1.5-pro"})
        assert response.status_code == 403
        assert response.json() == {"message": "Insufficient permissions"}

    def test_delivery_manager_allowed(self, make_client):
        api = make_client(identity=StaticIdentityProvider(user_id=1, role="delivery_manager"))
        response = api.get("/api/llm-config")
        assert response.status_code == 200
        assert response.json() is None

    def test_post_replaces_active(self, api, storage):
        api.post("/api/llm-config", json={"provider": "gemini", "modelName": "gemini-1.5-pro"})
        response = api.post("/api/llm-config", json={"provider": "openai", "modelName": "gpt-4o"})
        assert response.status_code == 201

        active = [c for c in storage.get_llm_configurations() if c["isActive"]]
        assert len(active) == 1
        assert api.get("/api/llm-config").json()["modelName"] == "gpt-4o"

    def test_post_with_is_active_false_keeps_one_active(self, api, storage):
        api.post("/api/llm-config", json={"provider": "gemini", "modelName": "gemini-1.5-pro"})
        response = api.post("/api/llm-config", json={"provider": "openai", "modelName": "gpt-4o", "isActive": False})
        assert response.status_code == 201
        assert response.json()["isActive"] is True

        active = [c for c in storage.get_llm_configurations() if c["isActive"]]
        assert [c["modelName"] for c in active] == ["gpt-4o"]
        assert api.get("/api/llm-config").json()["modelName"] == "gpt-4o"

    def test_invalid_config(self, api):
        response = api.post("/api/llm-config", json={"provider": "acme", "modelName": "x"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid configuration data"


# =============================================================================
# DASHBOARD
# =============================================================================


class TestDashboard:
    def test_stats_and_trends(self, api):
        api.post("/api/weekly-reports", json=valid_report_payload(ragStatus="Green"))
        api.post("/api/weekly-reports", json=valid_report_payload(projectId=8, ragStatus="Red",
                                                                  clientEscalation=True))

        stats = api.get("/api/dashboard/stats").json()
        assert stats == {
            "greenProjects": 1,
            "amberProjects": 0,
            "redProjects": 1,
            "escalations": 1,
            "totalProjects": 2,
        }

        trends = api.get("/api/dashboard/trends").json()
        assert trends == [{"date": "2024-01-08", "green": 1, "amber": 0, "red": 1}]

    def test_empty_dashboard(self, api):
        assert api.get("/api/dashboard/stats").json()["totalProjects"] == 0
        assert api.get("/api/dashboard/trends").json() == []
