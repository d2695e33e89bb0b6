"""
Test configuration: puts the repo root on sys.path and provides shared fixtures.

Storage tests run against an in-memory DuckDB; server tests replace the
external API client and the identity provider through FastAPI dependency
overrides, so no test touches the network or the on-disk database.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from database.db_connection import DatabaseConnection  # noqa: E402
from database.db_schema import initialize_schema  # noqa: E402
from models.assessment import Assessment  # noqa: E402
from models.project import Project, parse_projects  # noqa: E402
from services.external_api import ExternalApiError  # noqa: E402
from services.storage import DashboardStorage  # noqa: E402


# =============================================================================
# BUILDERS
# =============================================================================


def make_status(reporting_date: Optional[str], rag_status: Optional[str] = "Green",
                escalation: Any = 0, **extra) -> Dict[str, Any]:
    status = {
        "reportingDate": reporting_date,
        "ragStatus": rag_status,
        "clientEscalation": escalation,
        "keyWeeklyUpdates": f"Update for {reporting_date}",
    }
    status.update(extra)
    return status


def make_project(project_id: int, name: str, statuses: Optional[List[Dict[str, Any]]] = None,
                 importance: Optional[str] = "Medium", manager: Optional[str] = "Vijo Jacob",
                 account: str = "Acme", code: Optional[str] = None) -> Dict[str, Any]:
    return {
        "projectId": project_id,
        "projectName": name,
        "projectCodeId": code,
        "projectManagerName": manager,
        "account": account,
        "billingModel": "Fixed Price",
        "tower": "Digital",
        "fte": "4",
        "wsrPublisYesNo": "Yes",
        "importance": importance,
        "isActive": True,
        "projectStatuses": statuses or [],
    }


def valid_report_payload(**overrides) -> Dict[str, Any]:
    payload = {
        "projectId": 7,
        "reportingDate": "2024-01-08",
        "projectImportance": "High",
        "deliveryModel": "Agile",
        "ragStatus": "Amber",
        "clientEscalation": False,
        "keyWeeklyUpdates": "Sprint 4 closed",
    }
    payload.update(overrides)
    return payload


class FakeExternalClient:
    """Stands in for ExternalApiClient; fails every call when fail is set."""

    def __init__(self, projects=None, users=None, assessments=None, fail: bool = False):
        self.projects = projects or []
        self.users = users or []
        self.assessments = assessments or []
        self.fail = fail
        self.created_projects: List[Dict[str, Any]] = []
        self.generate_requests: List[Dict[str, Any]] = []

    def _check(self):
        if self.fail:
            raise ExternalApiError("Server returned HTML error page", status_code=502)

    def get_projects(self):
        self._check()
        return self.projects

    def get_project(self, project_id):
        self._check()
        for project in self.projects:
            if str(project.get("projectId")) == str(project_id):
                return project
        return None

    def create_project(self, payload):
        self._check()
        self.created_projects.append(payload)
        return {"projectId": 99, **payload}

    def get_users(self):
        self._check()
        return self.users

    def get_assessment_dashboard(self, assessed_person_name, assessment_level):
        self._check()
        return self.assessments

    def generate_assessment(self, payload):
        self._check()
        self.generate_requests.append(payload)
        return {"status": "ok"}


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def memory_db():
    db = DatabaseConnection(":memory:")
    initialize_schema(db)
    yield db
    db.close()


@pytest.fixture
def storage(memory_db):
    return DashboardStorage(memory_db)


@pytest.fixture
def sample_projects() -> List[Project]:
    return parse_projects([
        make_project(1, "Apollo", [make_status("2024-01-01", "Green"), make_status("2024-01-08", "Red")],
                     importance="High", manager="Vijo Jacob"),
        make_project(2, "Borealis", [make_status("2024-01-08", "Amber", escalation=1)],
                     importance="Low", manager="Ashwathy Nair"),
        make_project(3, "Cygnus", [make_status("2024-01-08", "Green")],
                     importance="Medium", manager="Vijo Jacob", account="Globex", code="CYG-01"),
        make_project(4, "Draco", [], importance=None, manager="Srinivasan K R"),
    ])


@pytest.fixture
def sample_assessment_payload() -> Dict[str, Any]:
    return {
        "assessmentId": 11,
        "assessedPersonName": "Ani",
        "assessmentLevel": "DELIVERY_MANAGER",
        "assessmentDate": "2024-01-15",
        "totalProjects": 7,
        "greenProjects": 3,
        "amberProjects": 2,
        "redProjects": 1,
        "errorProjects": 1,
        "projectsSummary": {
            "statusCounts": {"green": 3, "amber": 2, "red": 1, "error": 1},
            "importanceGroups": {"strategic ": {"green": 2, "red": 1, "error": 1}},
        },
        "llmOrgRagStatus": "Amber",
        "overallHealthScore": 6.5,
        "trends": [],
    }


@pytest.fixture
def sample_assessment(sample_assessment_payload) -> Assessment:
    return Assessment.from_dict(sample_assessment_payload)


@pytest.fixture
def external_client():
    return FakeExternalClient(
        projects=[make_project(7, "Apollo", [make_status("2024-01-08", "Green")])],
        users=[{"userId": "u1", "preferredName": "Ani", "role": "DELIVERY_MANAGER"}],
    )


@pytest.fixture
def make_client(storage, external_client):
    """Build a TestClient with overridden dependencies."""
    from fastapi.testclient import TestClient
    from server import main as server_main
    from utils.auth import StaticIdentityProvider

    def _make(client=None, identity=None):
        app = server_main.app
        app.dependency_overrides[server_main.get_storage] = lambda: storage
        app.dependency_overrides[server_main.get_external_client] = lambda: client or external_client
        app.dependency_overrides[server_main.get_identity_provider] = (
            lambda: identity or StaticIdentityProvider()
        )
        return TestClient(app)

    yield _make
    server_main.app.dependency_overrides.clear()


@pytest.fixture
def api(make_client):
    return make_client()
