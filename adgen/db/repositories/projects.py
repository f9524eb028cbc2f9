from sqlalchemy import update
from sqlalchemy.orm import Session
from adgen.db.models import Project
from typing import List, Optional

class ProjectRepository:
    """Repository for project operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_project(
        self,
        user_id: str,
        product_name: str,
        uploaded_images: List[str],
        name: str = "New Project",
        product_description: str = None,
        user_prompt: str = None,
        aspect_ratio: str = None,
        target_length: int = 5,
        is_generating: bool = True,
    ) -> Project:
        """
        Create a new project for a generation request.

        Args:
            user_id: Owning user ID
            product_name: Name of the advertised product
            uploaded_images: Ordered URLs of the input photos
            name: Display name
            product_description: Product description (optional)
            user_prompt: Free-form prompt appended to the generation prompt (optional)
            aspect_ratio: Target aspect ratio (optional)
            target_length: Target video duration in seconds
            is_generating: Whether a generation is in flight for this project

        Returns:
            Created project
        """
        project = Project(
            user_id=user_id,
            name=name,
            product_name=product_name,
            product_description=product_description,
            user_prompt=user_prompt,
            aspect_ratio=aspect_ratio,
            target_length=target_length,
            uploaded_images=list(uploaded_images),
            is_generating=is_generating,
        )
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        return project

    def get_project(self, project_id: str) -> Optional[Project]:
        """
        Get a project by ID.

        Args:
            project_id: Project ID

        Returns:
            Project if found, None otherwise
        """
        return self.db.query(Project).filter(Project.id == project_id).first()

    def get_user_project(self, project_id: str, user_id: str) -> Optional[Project]:
        """
        Get a project by ID, only if it belongs to the given user.

        Returns:
            Project if found and owned by user_id, None otherwise
        """
        return (
            self.db.query(Project)
            .filter(Project.id == project_id, Project.user_id == user_id)
            .first()
        )

    def get_published_projects(self) -> List[Project]:
        """
        Get all published projects in insertion order.

        Returns:
            List of projects with is_published set
        """
        return (
            self.db.query(Project)
            .filter(Project.is_published.is_(True))
            .order_by(Project.created_at, Project.id)
            .all()
        )

    def claim_for_generation(self, project_id: str, user_id: str) -> bool:
        """
        Set is_generating on an owned project that is idle and has no video yet.

        Returns:
            True if this call claimed the project, False if another request got there first
        """
        result = self.db.execute(
            update(Project)
            .where(
                Project.id == project_id,
                Project.user_id == user_id,
                Project.is_generating.is_(False),
                Project.generated_video.is_(None),
            )
            .values(is_generating=True, error=None)
        )
        self.db.commit()
        return result.rowcount == 1

    def complete_image(self, project_id: str, image_url: str) -> Optional[Project]:
        """Store the generated image URL and clear the generating flag."""
        return self._update(project_id, generated_image=image_url, is_generating=False, error=None)

    def complete_video(self, project_id: str, video_url: str) -> Optional[Project]:
        """Store the generated video URL and clear the generating flag."""
        return self._update(project_id, generated_video=video_url, is_generating=False, error=None)

    def mark_failed(self, project_id: str, error: str) -> Optional[Project]:
        """Clear the generating flag and record why generation failed."""
        return self._update(project_id, is_generating=False, error=error)

    def rollback(self) -> None:
        """Discard the session's failed or pending transaction."""
        self.db.rollback()

    def delete_user_project(self, project_id: str, user_id: str) -> bool:
        """
        Delete a project by ID if it belongs to the given user.

        Args:
            project_id: Project ID
            user_id: Requesting user ID

        Returns:
            True if project was deleted, False if missing or owned by someone else
        """
        project = self.get_user_project(project_id, user_id)
        if not project:
            return False

        self.db.delete(project)
        self.db.commit()
        return True

    def _update(self, project_id: str, **values) -> Optional[Project]:
        project = self.get_project(project_id)
        if not project:
            return None

        for key, value in values.items():
            setattr(project, key, value)
        self.db.commit()
        self.db.refresh(project)
        return project
