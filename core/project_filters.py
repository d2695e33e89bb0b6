"""Client-side filter, sort and pagination of the projects list."""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Optional, Any, List, Callable, Iterable

from config.constants import PROJECTS_PAGE_SIZE, SORT_FIELDS, ESCALATION_FILTERS
from core.aggregation import current_status
from core.rag_status import normalize_rag_status, status_rank, importance_rank
from models.project import Project


@dataclass
class ProjectFilters:
    """Filter selections; None or 'all' disables a filter."""
    search: Optional[str] = None
    status: Optional[str] = None
    importance: Optional[str] = None
    manager: Optional[str] = None
    escalation: str = 'all'

    def __post_init__(self):
        if self.escalation not in ESCALATION_FILTERS:
            raise ValueError(f"Invalid escalation filter: {self.escalation}")


@dataclass
class Page:
    """One page of a paginated list."""
    items: List[Any] = field(default_factory=list)
    page: int = 1
    page_size: int = PROJECTS_PAGE_SIZE
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size) if self.page_size > 0 else 0

    @property
    def start_index(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def _is_active(value: Optional[str]) -> bool:
    return bool(value) and value != 'all'


def _matches_search(project: Project, term: str) -> bool:
    term = term.lower()
    for value in (project.project_name, project.account, project.project_code_id):
        if value and term in value.lower():
            return True
    return False


def _predicates(filters: ProjectFilters) -> List[Callable[[Project], bool]]:
    predicates = []

    if filters.search and filters.search.strip():
        term = filters.search.strip()
        predicates.append(lambda p: _matches_search(p, term))

    if _is_active(filters.status):
        wanted_status = normalize_rag_status(filters.status)

        def status_matches(p: Project) -> bool:
            latest = current_status(p)
            return latest is not None and normalize_rag_status(latest.rag_status) == wanted_status

        predicates.append(status_matches)

    if _is_active(filters.importance):
        wanted_importance = filters.importance.strip().lower()
        predicates.append(lambda p: (p.importance or '').strip().lower() == wanted_importance)

    if _is_active(filters.manager):
        predicates.append(lambda p: p.project_manager_name == filters.manager)

    if filters.escalation != 'all':
        want_escalated = filters.escalation == 'escalated'

        def escalation_matches(p: Project) -> bool:
            latest = current_status(p)
            escalated = bool(latest and latest.client_escalation)
            return escalated == want_escalated

        predicates.append(escalation_matches)

    return predicates


def filter_projects(projects: Iterable[Project], filters: Optional[ProjectFilters] = None) -> List[Project]:
    """Apply all active filters (AND-combined), preserving input order."""
    projects = list(projects or [])
    if filters is None:
        return projects
    predicates = _predicates(filters)
    return [p for p in projects if all(predicate(p) for predicate in predicates)]


def _sort_key(field_name: str) -> Callable[[Project], Any]:
    if field_name == 'name':
        return lambda p: (p.project_name or '').lower()
    if field_name == 'manager':
        return lambda p: (p.project_manager_name or '').lower()
    if field_name == 'status':
        def status_key(p: Project) -> int:
            latest = current_status(p)
            return status_rank(latest.rag_status if latest else None)
        return status_key
    if field_name == 'importance':
        return lambda p: importance_rank(p.importance)
    raise ValueError(f"Invalid sort field: {field_name}")


def sort_projects(projects: Iterable[Project], field_name: str = 'name', descending: bool = False) -> List[Project]:
    """Stable single-key sort.

    Status sorts Red, Amber, Green, then unset; importance sorts High,
    Medium, Low, then unset. Descending reverses the key order while ties
    keep their input order.
    """
    if field_name not in SORT_FIELDS:
        raise ValueError(f"Invalid sort field: {field_name}")
    # sorted(reverse=True) keeps equal elements in their original order
    return sorted(projects or [], key=_sort_key(field_name), reverse=descending)


def paginate(items: Iterable[Any], page: int = 1, page_size: int = PROJECTS_PAGE_SIZE) -> Page:
    """Slice [(page-1)*size, page*size) of the list; pages are 1-indexed."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    items = list(items or [])
    page = max(int(page), 1)
    start = (page - 1) * page_size
    return Page(
        items=items[start:start + page_size],
        page=page,
        page_size=page_size,
        total_items=len(items),
    )


def clamp_page(page: int, total_items: int, page_size: int = PROJECTS_PAGE_SIZE) -> int:
    """Keep a 1-indexed page number within [1, max(1, total_pages)]."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    last_page = max(math.ceil(max(total_items, 0) / page_size), 1)
    return min(max(int(page), 1), last_page)


def manager_names(projects: Iterable[Project]) -> List[str]:
    """Unique project manager names for the manager dropdown, sorted."""
    return sorted({p.project_manager_name for p in projects or [] if p.project_manager_name})


def find_project(projects: Iterable[Project], project_id: Any) -> Optional[Project]:
    """Exact project id lookup (ids compared as strings)."""
    wanted = str(project_id).strip()
    if not wanted:
        return None
    for project in projects or []:
        if str(project.project_id) == wanted:
            return project
    return None
