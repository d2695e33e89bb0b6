"""
Tests for portfolio aggregation: current status, metrics, strategic group.
"""

from conftest import make_project, make_status

from core.aggregation import (
    PortfolioMetrics,
    aggregate_assessment_metrics,
    aggregate_project_metrics,
    aggregate_status_counts,
    build_dashboard_stats,
    current_status,
    extract_strategic_group,
    metrics_from,
    priority_projects,
    select_current_status,
    status_history,
)
from models.project import Project, ProjectStatus, parse_projects


# =============================================================================
# CURRENT STATUS
# =============================================================================


class TestSelectCurrentStatus:
    """The current status is the one with the latest reporting date."""

    def test_empty_returns_none(self):
        assert select_current_status([]) is None
        assert current_status(Project(project_id=1)) is None

    def test_latest_date_wins_regardless_of_order(self):
        statuses = [
            ProjectStatus(reporting_date="2024-02-05", rag_status="Red"),
            ProjectStatus(reporting_date="2024-01-01", rag_status="Green"),
        ]
        assert select_current_status(statuses).rag_status == "Red"

    def test_same_date_last_record_wins(self):
        statuses = [
            ProjectStatus(reporting_date="2024-01-08", rag_status="Green", status_id="a"),
            ProjectStatus(reporting_date="2024-01-08", rag_status="Red", status_id="b"),
        ]
        assert select_current_status(statuses).status_id == "b"

    def test_unparseable_date_ranks_lowest(self):
        statuses = [
            ProjectStatus(reporting_date="2024-01-08", rag_status="Amber"),
            ProjectStatus(reporting_date="not a date", rag_status="Red"),
        ]
        assert select_current_status(statuses).rag_status == "Amber"

    def test_timestamp_dates_compare_with_plain_dates(self):
        statuses = [
            ProjectStatus(reporting_date="2024-01-15T00:00:00.000Z", rag_status="Green"),
            ProjectStatus(reporting_date="2024-01-08", rag_status="Red"),
        ]
        assert select_current_status(statuses).rag_status == "Green"


class TestStatusHistory:
    def test_newest_first_with_undated_last(self):
        project = Project.from_dict(make_project(1, "Apollo", [
            make_status("2024-01-01", "Green"),
            make_status(None, "Red"),
            make_status("2024-01-15", "Amber"),
            make_status("2024-01-08", "Green"),
        ]))
        dates = [s.reporting_date for s in status_history(project)]
        assert dates == ["2024-01-15", "2024-01-08", "2024-01-01", None]

    def test_head_matches_current_status(self):
        project = Project.from_dict(make_project(1, "Apollo", [
            make_status("2024-01-08", "Green", statusId="first"),
            make_status("2024-01-08", "Red", statusId="second"),
        ]))
        assert status_history(project)[0] is current_status(project)


# =============================================================================
# METRICS
# =============================================================================


class TestPortfolioMetrics:
    def test_empty_metrics(self):
        """No data gives zero total and zero percentages, never an error."""
        metrics = PortfolioMetrics()
        assert metrics.total == 0
        assert metrics.is_empty
        assert metrics.percentages() == {"green": 0.0, "amber": 0.0, "red": 0.0, "error": 0.0}

    def test_percentages_rounded(self):
        metrics = PortfolioMetrics(green=1, amber=1, red=1)
        assert metrics.percentages()["green"] == 33.3

    def test_total_is_sum_of_buckets(self):
        metrics = PortfolioMetrics(green=3, amber=2, red=1, error=1)
        assert metrics.total == 7
        assert sum(metrics.as_dict().values()) == metrics.total


class TestAggregateProjectMetrics:
    def test_counts_current_status_only(self, sample_projects):
        metrics = aggregate_project_metrics(sample_projects)
        # Apollo moved Green -> Red; Draco has no status
        assert metrics.as_dict() == {"green": 1, "amber": 1, "red": 1, "error": 0}
        assert metrics.total == 3

    def test_unknown_status_not_counted(self):
        projects = parse_projects([make_project(1, "X", [make_status("2024-01-08", "Purple")])])
        assert aggregate_project_metrics(projects).total == 0

    def test_yellow_counts_as_amber(self):
        projects = parse_projects([make_project(1, "X", [make_status("2024-01-08", "Yellow")])])
        assert aggregate_project_metrics(projects).amber == 1

    def test_empty_input(self):
        assert aggregate_project_metrics([]).total == 0
        assert aggregate_project_metrics(None).total == 0


class TestAggregateStatusCounts:
    def test_folds_case_and_aliases(self):
        metrics = aggregate_status_counts({"Green": 2, "yellow": 1, "AMBER": 1, "Red": "3", "other": 5})
        assert metrics.as_dict() == {"green": 2, "amber": 2, "red": 3, "error": 0}

    def test_bad_counts_become_zero(self):
        metrics = aggregate_status_counts({"green": None, "red": -4, "amber": "x"})
        assert metrics.total == 0

    def test_assessment_metrics(self, sample_assessment):
        metrics = aggregate_assessment_metrics(sample_assessment)
        assert metrics.as_dict() == {"green": 3, "amber": 2, "red": 1, "error": 1}
        assert aggregate_assessment_metrics(None).total == 0

    def test_metrics_from_dispatches(self, sample_assessment, sample_projects):
        assert metrics_from(sample_assessment).total == 7
        assert metrics_from(sample_projects).total == 3
        assert metrics_from(None).total == 0


# =============================================================================
# STRATEGIC GROUP
# =============================================================================


class TestExtractStrategicGroup:
    def test_trailing_space_key_and_error_excluded(self):
        group = extract_strategic_group({"strategic ": {"green": 1, "red": 1, "error": 1}})
        assert group.total == 2
        assert group.status_counts == {"green": 1, "red": 1}
        assert group.display_text == "2 Strategic Projects (green: 1, red: 1)"

    def test_plain_key_preferred_over_trailing_space(self):
        group = extract_strategic_group({
            "strategic": {"green": 4},
            "strategic ": {"green": 1},
        })
        assert group.total == 4

    def test_error_kept_when_not_excluded(self):
        group = extract_strategic_group({"strategic": {"green": 1, "error": 2}}, exclude_error=False)
        assert group.total == 3

    def test_missing_group(self):
        for groups in (None, {}, {"high": {"green": 3}}):
            group = extract_strategic_group(groups)
            assert group.total == 0
            assert group.display_text == "0 Strategic Projects"


# =============================================================================
# PRIORITY AND LOCAL STATS
# =============================================================================


class TestPriorityProjects:
    def test_red_then_escalated_then_high(self, sample_projects):
        extra = Project.from_dict(make_project(5, "Eridanus", [make_status("2024-01-08", "Green")],
                                               importance="High"))
        names = [p.project_name for p in priority_projects([extra] + sample_projects)]
        assert names == ["Apollo", "Borealis", "Eridanus"]

    def test_projects_without_status_skipped(self):
        projects = parse_projects([make_project(1, "Empty", [], importance="High")])
        assert priority_projects(projects) == []


class TestBuildDashboardStats:
    def test_latest_report_per_project(self):
        reports = [
            {"projectId": 1, "ragStatus": "Green", "clientEscalation": False,
             "createdAt": "2024-01-01T10:00:00"},
            {"projectId": 1, "ragStatus": "Red", "clientEscalation": True,
             "createdAt": "2024-01-08T10:00:00"},
            {"projectId": 2, "ragStatus": "Amber", "clientEscalation": False,
             "createdAt": "2024-01-08T09:00:00"},
        ]
        assert build_dashboard_stats(reports) == {
            "greenProjects": 0,
            "amberProjects": 1,
            "redProjects": 1,
            "escalations": 1,
            "totalProjects": 2,
        }

    def test_empty(self):
        stats = build_dashboard_stats([])
        assert stats["totalProjects"] == 0
        assert stats["escalations"] == 0
