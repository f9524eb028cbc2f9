"""Tests for project and user repositories."""
from __future__ import annotations

from adgen.db.models import Project
from adgen.db.repositories import ProjectRepository, UserRepository


def _create(repo, user_id="user-1", **kwargs):
    values = {
        "user_id": user_id,
        "product_name": "Ceramic Mug",
        "uploaded_images": ["https://assets.test/a.jpg", "https://assets.test/b.jpg"],
    }
    values.update(kwargs)
    return repo.create_project(**values)


def _publish(db, project_id):
    db.query(Project).filter(Project.id == project_id).update({"is_published": True})
    db.commit()


class TestUserRepository:

    def test_create_and_get_user(self, db):
        repo = UserRepository(db)

        user = repo.create_user(user_id="user-1", email="a@example.com", credits=20)

        fetched = repo.get_user("user-1")
        assert fetched.id == user.id
        assert fetched.credits == 20
        assert repo.get_user("missing") is None

    def test_create_user_generates_id(self, db):
        user = UserRepository(db).create_user()
        assert user.id
        assert user.credits == 0


class TestProjectRepository:
    """Test project repository operations."""

    def test_create_project_defaults(self, db, make_user):
        """Test a new project starts generating with the given inputs."""
        make_user("user-1")
        repo = ProjectRepository(db)

        project = _create(repo)

        assert project.id is not None
        assert project.name == "New Project"
        assert project.target_length == 5
        assert project.is_generating is True
        assert project.is_published is False
        assert project.uploaded_images == ["https://assets.test/a.jpg", "https://assets.test/b.jpg"]
        assert project.generated_image is None
        assert project.generated_video is None
        assert project.error is None

    def test_get_user_project_is_owner_scoped(self, db, make_user):
        """Test a project is only visible to its owner."""
        make_user("user-1")
        make_user("user-2")
        repo = ProjectRepository(db)
        project = _create(repo)

        assert repo.get_user_project(project.id, "user-1").id == project.id
        assert repo.get_user_project(project.id, "user-2") is None
        assert repo.get_user_project("missing", "user-1") is None

    def test_get_published_projects_filters(self, db, make_user):
        """Test only published projects are listed, oldest first."""
        make_user("user-1")
        repo = ProjectRepository(db)
        first = _create(repo, name="First")
        _create(repo, name="Hidden")
        third = _create(repo, name="Third")
        _publish(db, first.id)
        _publish(db, third.id)

        published = repo.get_published_projects()

        assert [p.name for p in published] == ["First", "Third"]
        assert all(p.is_published for p in published)

    def test_complete_image(self, db, make_user):
        make_user("user-1")
        repo = ProjectRepository(db)
        project = _create(repo)

        updated = repo.complete_image(project.id, "https://assets.test/out.png")

        assert updated.generated_image == "https://assets.test/out.png"
        assert updated.is_generating is False
        assert updated.error is None

    def test_mark_failed(self, db, make_user):
        make_user("user-1")
        repo = ProjectRepository(db)
        project = _create(repo)

        updated = repo.mark_failed(project.id, "Failed to generate image")

        assert updated.is_generating is False
        assert updated.error == "Failed to generate image"

    def test_update_missing_project(self, db):
        assert ProjectRepository(db).mark_failed("missing", "boom") is None

    def test_claim_for_generation(self, db, make_user):
        """Test an idle project can be claimed once."""
        make_user("user-1")
        repo = ProjectRepository(db)
        project = _create(repo, is_generating=False)

        assert repo.claim_for_generation(project.id, "user-1") is True
        assert repo.claim_for_generation(project.id, "user-1") is False
        assert repo.get_project(project.id).is_generating is True

    def test_claim_rejects_foreign_and_finished(self, db, make_user):
        """Test claims fail for other users and for projects with a video."""
        make_user("user-1")
        repo = ProjectRepository(db)
        project = _create(repo, is_generating=False)
        repo.complete_video(project.id, "https://assets.test/out.mp4")

        assert repo.claim_for_generation(project.id, "user-2") is False
        assert repo.claim_for_generation(project.id, "user-1") is False

    def test_delete_user_project(self, db, make_user):
        """Test owners can delete their project."""
        make_user("user-1")
        repo = ProjectRepository(db)
        project = _create(repo)

        assert repo.delete_user_project(project.id, "user-1") is True
        assert repo.get_project(project.id) is None

    def test_delete_foreign_project_keeps_row(self, db, make_user):
        """Test deleting someone else's project deletes nothing."""
        make_user("user-1")
        make_user("user-2")
        repo = ProjectRepository(db)
        project = _create(repo)

        assert repo.delete_user_project(project.id, "user-2") is False
        assert repo.delete_user_project("missing", "user-1") is False
        assert db.query(Project).count() == 1
