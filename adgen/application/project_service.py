"""Service for project reads and owner-scoped deletes."""
from __future__ import annotations

from typing import List

from adgen.db.models import Project
from adgen.db.repositories.projects import ProjectRepository
from adgen.domain.errors import NotFoundError, ValidationError
from adgen.domain.events import event_publisher, ProjectDeleted


class ProjectService:
    """Plain lookups and deletes over the project repository."""

    def __init__(self, projects: ProjectRepository) -> None:
        self._projects = projects

    def list_published(self) -> List[Project]:
        return self._projects.get_published_projects()

    def delete_project(self, project_id: str, user_id: str) -> None:
        """Delete a project owned by user_id; anything else is NotFoundError."""
        if not project_id:
            raise ValidationError("Project ID is required")
        if not self._projects.delete_user_project(project_id, user_id):
            raise NotFoundError("Project not found")

        event_publisher.publish(ProjectDeleted(
            event_id="",
            timestamp=None,
            aggregate_id=project_id,
            user_id=user_id,
        ))
