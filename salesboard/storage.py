"""
Storage collaborators

InMemoryStorage is the record store for projects and sale records;
ReportStore is the opaque blob store for saved report snapshots. Both
hand out copies so callers never mutate stored state in place.
"""

import copy
import logging
from dataclasses import replace
from datetime import datetime, timezone

from .errors import PersistenceError
from .models import CommissionTier, Project, SaleRecord

logger = logging.getLogger(__name__)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryStorage:
    """Single-user record store keyed by auto-incrementing ids."""

    def __init__(self):
        self._projects: dict[int, Project] = {}
        self._sales: dict[int, SaleRecord] = {}
        self._next_project_id = 1
        self._next_sale_id = 1

    # -- projects -------------------------------------------------------------

    def add_project(self, project: Project) -> int:
        project = copy.deepcopy(project)
        project.id = self._next_project_id
        self._next_project_id += 1
        self._projects[project.id] = project
        return project.id

    def get_project(self, project_id: int) -> Project | None:
        project = self._projects.get(project_id)
        return copy.deepcopy(project) if project else None

    def list_projects(self) -> list[Project]:
        return [copy.deepcopy(p) for _, p in sorted(self._projects.items())]

    def update_tiers(self, project_id: int, tiers: list[CommissionTier]) -> bool:
        """Replace a project's whole tier list. False if the project is unknown."""
        project = self._projects.get(project_id)
        if project is None:
            return False
        if not isinstance(project.commission_tiers, list):
            raise PersistenceError(f"Project {project_id} has no commission tier list")

        project.commission_tiers = copy.deepcopy(list(tiers))
        project.updated_at = utc_now()
        return True

    # -- sales ----------------------------------------------------------------

    def save_sale(self, record: SaleRecord) -> int:
        """Insert (id is None) or overwrite a sale record; returns its id."""
        if record.project_id not in self._projects:
            raise PersistenceError(f"Sale references unknown project {record.project_id}")

        if record.id is None:
            record = replace(record, id=self._next_sale_id)
            self._next_sale_id += 1
        self._sales[record.id] = replace(record)
        return record.id

    def get_sale(self, sale_id: int) -> SaleRecord | None:
        sale = self._sales.get(sale_id)
        return replace(sale) if sale else None

    def list_sales(self, project_id: int) -> list[SaleRecord]:
        """Sales of a project in insertion order."""
        return [replace(s) for _, s in sorted(self._sales.items()) if s.project_id == project_id]

    def clear(self) -> None:
        self._projects.clear()
        self._sales.clear()
        logger.info("Cleared all projects and sales")


class ReportStore:
    """Path-keyed blob store for saved report snapshots."""

    def __init__(self):
        self._files: dict[str, dict] = {}
        self._sequence = 0

    def put(self, path: str, content: dict) -> dict:
        self._sequence += 1
        stored = {
            "path": path,
            "type": "file",
            "created_at": utc_now(),
            "sequence": self._sequence,
            "content": copy.deepcopy(content),
        }
        self._files[path] = stored
        return copy.deepcopy(stored)

    def get(self, path: str) -> dict | None:
        stored = self._files.get(path)
        return copy.deepcopy(stored) if stored else None

    def list_files(self, prefix: str) -> list[dict]:
        return [
            copy.deepcopy(stored)
            for path, stored in self._files.items()
            if path.startswith(prefix)
        ]
