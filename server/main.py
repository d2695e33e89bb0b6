"""
FastAPI service backing the Portfolio Status Dashboard.

Proxies the external projects, users and assessments API and serves the
local store of weekly status reports, technical reviews and LLM
configuration.

Usage:
    uvicorn server.main:app --reload --host 0.0.0.0 --port 8000
"""

import os
import sys
import logging
from typing import Optional, Dict, Any

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

# Add parent directory for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.constants import LLM_CONFIG_ROLES
from core.aggregation import build_dashboard_stats
from core.trends import build_weekly_trends
from database.db_connection import get_db
from database.db_schema import initialize_schema
from server.config import ServerConfig
from services.external_api import ExternalApiClient, ExternalApiError
from services.storage import DashboardStorage
from shared.schemas import (
    AssessmentGenerateRequest,
    LlmConfigurationCreate,
    ProjectCreate,
    TechnicalReviewCreate,
    WeeklyReportCreate,
    validation_errors,
)
from utils.auth import IdentityProvider, StaticIdentityProvider, has_role

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Portfolio Status Dashboard API",
    description="Project status, assessments and weekly reporting for the dashboard",
    version="1.0.0"
)

# Global instances (initialized on startup)
config: Optional[ServerConfig] = ServerConfig.from_env()
storage: Optional[DashboardStorage] = None
external_client: Optional[ExternalApiClient] = None
identity_provider: IdentityProvider = StaticIdentityProvider()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global storage, external_client

    logger.info("Starting Portfolio Status Dashboard API...")

    errors = config.validate()
    if errors:
        logger.error(f"Configuration errors: {errors}")
        raise RuntimeError(f"Configuration errors: {errors}")

    logger.info(f"External API: {config.external_api_base_url}")
    logger.info(f"Assessment API: {config.assessment_api_base_url}")
    logger.info(f"Database: {config.database_path}")

    db = get_db(config.database_path)
    initialize_schema(db)
    storage = DashboardStorage(db)
    external_client = ExternalApiClient(
        base_url=config.external_api_base_url,
        assessment_base_url=config.assessment_api_base_url,
        timeout=config.external_api_timeout,
    )

    logger.info("Portfolio Status Dashboard API started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    get_db().close()
    logger.info("Portfolio Status Dashboard API shut down")


# ----------------------------------------------------------------------
# Error responses
# ----------------------------------------------------------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc: RequestValidationError):
    errors = [
        {"path": [str(part) for part in error.get("loc", ())], "message": error.get("msg", ""),
         "type": error.get("type", "")}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Invalid request", "errors": errors})


def bad_request(message: str, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": message, "errors": validation_errors(exc)})


def server_error(message: str, exc: Optional[Exception] = None) -> JSONResponse:
    content = {"message": message}
    if isinstance(exc, ExternalApiError):
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# ----------------------------------------------------------------------
# Dependencies
# ----------------------------------------------------------------------
def get_storage() -> DashboardStorage:
    if storage is None:
        raise HTTPException(status_code=503, detail="Storage not initialized")
    return storage


def get_external_client() -> ExternalApiClient:
    if external_client is None:
        raise HTTPException(status_code=503, detail="External API client not initialized")
    return external_client


def get_identity_provider() -> IdentityProvider:
    return identity_provider


def get_current_user(identity: IdentityProvider = Depends(get_identity_provider)) -> Dict[str, Any]:
    return identity.current_user()


def require_role(*roles: str):
    """Dependency rejecting users whose role is not in roles with 403."""
    def checker(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if not has_role(user, roles):
            logger.warning(f"User {user.get('id')} with role '{user.get('role')}' denied; requires {roles}")
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user
    return checker


def parse_body(model: type, payload: Any) -> BaseModel:
    return model.model_validate(payload)


# ----------------------------------------------------------------------
# Routes
# ----------------------------------------------------------------------
@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "portfolio-status-dashboard",
        "externalApi": config.external_api_base_url if config else None,
    }


@app.get("/api/users/me")
def get_me(user: Dict[str, Any] = Depends(get_current_user),
           store: DashboardStorage = Depends(get_storage)):
    record = store.get_user(user["id"])
    if not record:
        raise HTTPException(status_code=404, detail="User not found")
    return record


@app.get("/api/users")
def list_users(client: ExternalApiClient = Depends(get_external_client),
               user: Dict[str, Any] = Depends(get_current_user)):
    try:
        return client.get_users()
    except ExternalApiError as e:
        logger.error(f"Error fetching users: {e}")
        return server_error("Failed to fetch users", e)


@app.get("/api/projects")
def list_projects(client: ExternalApiClient = Depends(get_external_client),
                  user: Dict[str, Any] = Depends(get_current_user)):
    try:
        return client.get_projects()
    except ExternalApiError as e:
        logger.error(f"Proxy error: {e}")
        return server_error("Failed to fetch projects from external API", e)


@app.get("/api/projects/{project_id}")
def get_project(project_id: int,
                client: ExternalApiClient = Depends(get_external_client),
                user: Dict[str, Any] = Depends(get_current_user)):
    try:
        project = client.get_project(project_id)
    except ExternalApiError as e:
        logger.error(f"Proxy error: {e}")
        return server_error("Failed to fetch project from external API", e)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@app.post("/api/projects", status_code=201)
def create_project(payload: Any = Body(...),
                   client: ExternalApiClient = Depends(get_external_client),
                   user: Dict[str, Any] = Depends(get_current_user)):
    try:
        project = parse_body(ProjectCreate, payload)
    except ValidationError as e:
        return bad_request("Invalid project data", e)
    try:
        return client.create_project(project.to_api())
    except ExternalApiError as e:
        logger.error(f"Project creation failed: {e}")
        return server_error("Failed to create project", e)


@app.get("/api/organizational-assessments/dashboard")
def assessment_dashboard(assessed_person_name: str = Query(..., alias="assessedPersonName"),
                         assessment_level: str = Query(..., alias="assessmentLevel"),
                         client: ExternalApiClient = Depends(get_external_client),
                         user: Dict[str, Any] = Depends(get_current_user)):
    try:
        return client.get_assessment_dashboard(assessed_person_name, assessment_level)
    except ExternalApiError as e:
        logger.error(f"Assessment proxy error: {e}")
        return server_error("Failed to fetch assessments", e)


@app.post("/api/organizational-assessments/generate")
def generate_assessment(payload: Any = Body(...),
                        client: ExternalApiClient = Depends(get_external_client),
                        user: Dict[str, Any] = Depends(get_current_user)):
    try:
        request = parse_body(AssessmentGenerateRequest, payload)
    except ValidationError as e:
        return bad_request("Invalid assessment request", e)
    try:
        logger.info(f"Generating {request.assessment_level} assessment for {request.assessed_person_name}")
        return client.generate_assessment(request.to_api())
    except ExternalApiError as e:
        logger.error(f"Assessment generation failed: {e}")
        return server_error("Failed to generate assessment", e)


def _projects_by_id(client: ExternalApiClient) -> Dict[str, Dict[str, Any]]:
    try:
        return {str(p.get("projectId")): p for p in client.get_projects()}
    except ExternalApiError as e:
        logger.warning(f"Could not load projects for enrichment: {e}")
        return {}


@app.get("/api/weekly-reports")
def list_weekly_reports(project_id: Optional[int] = Query(None, alias="projectId"),
                        store: DashboardStorage = Depends(get_storage),
                        client: ExternalApiClient = Depends(get_external_client),
                        user: Dict[str, Any] = Depends(get_current_user)):
    try:
        reports = store.get_weekly_status_reports(project_id)
        projects = _projects_by_id(client) if reports else {}
        return [
            {**report,
             "project": projects.get(str(report["projectId"])),
             "submittedBy": store.get_user(report.get("submittedBy"))}
            for report in reports
        ]
    except Exception as e:
        logger.error(f"Error fetching weekly reports: {e}")
        return server_error("Failed to fetch weekly reports")


@app.post("/api/weekly-reports", status_code=201)
def create_weekly_report(payload: Any = Body(...),
                         store: DashboardStorage = Depends(get_storage),
                         user: Dict[str, Any] = Depends(get_current_user)):
    try:
        report = parse_body(WeeklyReportCreate, payload)
    except ValidationError as e:
        return bad_request("Invalid report data", e)
    try:
        return store.create_weekly_status_report(report, submitted_by=user["id"])
    except Exception as e:
        logger.error(f"Error creating weekly report: {e}")
        return server_error("Failed to create weekly report")


@app.get("/api/technical-reviews")
def list_technical_reviews(project_id: Optional[int] = Query(None, alias="projectId"),
                           store: DashboardStorage = Depends(get_storage),
                           client: ExternalApiClient = Depends(get_external_client),
                           user: Dict[str, Any] = Depends(get_current_user)):
    try:
        reviews = store.get_technical_reviews(project_id)
        projects = _projects_by_id(client) if reviews else {}
        return [
            {**review,
             "project": projects.get(str(review["projectId"])),
             "conductor": store.get_user(review.get("conductedBy"))}
            for review in reviews
        ]
    except Exception as e:
        logger.error(f"Error fetching technical reviews: {e}")
        return server_error("Failed to fetch technical reviews")


@app.post("/api/technical-reviews", status_code=201)
def create_technical_review(payload: Any = Body(...),
                            store: DashboardStorage = Depends(get_storage),
                            user: Dict[str, Any] = Depends(get_current_user)):
    try:
        review = parse_body(TechnicalReviewCreate, payload)
    except ValidationError as e:
        return bad_request("Invalid review data", e)
    try:
        return store.create_technical_review(review, conducted_by=user["id"])
    except Exception as e:
        logger.error(f"Error creating technical review: {e}")
        return server_error("Failed to create technical review")


@app.get("/api/llm-config")
def get_llm_config(store: DashboardStorage = Depends(get_storage),
                   user: Dict[str, Any] = Depends(require_role(*LLM_CONFIG_ROLES))):
    try:
        return store.get_active_llm_configuration()
    except Exception as e:
        logger.error(f"Error fetching LLM configuration: {e}")
        return server_error("Failed to fetch LLM configuration")


@app.post("/api/llm-config", status_code=201)
def create_llm_config(payload: Any = Body(...),
                      store: DashboardStorage = Depends(get_storage),
                      user: Dict[str, Any] = Depends(require_role(*LLM_CONFIG_ROLES))):
    try:
        llm_config = parse_body(LlmConfigurationCreate, payload)
    except ValidationError as e:
        return bad_request("Invalid configuration data", e)
    try:
        return store.replace_active_llm_configuration(llm_config, last_updated_by=user["id"])
    except Exception as e:
        logger.error(f"Error creating LLM configuration: {e}")
        return server_error("Failed to create LLM configuration")


@app.get("/api/dashboard/stats")
def dashboard_stats(store: DashboardStorage = Depends(get_storage),
                    user: Dict[str, Any] = Depends(get_current_user)):
    try:
        return build_dashboard_stats(store.get_weekly_status_reports())
    except Exception as e:
        logger.error(f"Error computing dashboard stats: {e}")
        return server_error("Failed to fetch dashboard stats")


@app.get("/api/dashboard/trends")
def dashboard_trends(store: DashboardStorage = Depends(get_storage),
                     user: Dict[str, Any] = Depends(get_current_user)):
    try:
        return build_weekly_trends(store.get_weekly_status_reports())
    except Exception as e:
        logger.error(f"Error computing trend data: {e}")
        return server_error("Failed to fetch trend data")


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server.main:app",
        host=config.host,
        port=config.port,
        reload=False,
    )
