"""Credit-metered generation actions: composite product image and product video."""
from __future__ import annotations

import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from adgen.db.models import Project
from adgen.db.repositories.ledger import CreditLedger
from adgen.db.repositories.projects import ProjectRepository
from adgen.domain.entities import ImageInput, ImageProjectRequest, VideoResult
from adgen.domain.errors import (
    CapabilityUnavailableError,
    ConflictError,
    DomainError,
    GenerationError,
    NotFoundError,
    UpstreamFailureError,
    ValidationError,
)
from adgen.domain.events import (
    CreditsRefunded,
    CreditsReserved,
    GenerationFailed,
    ImageGenerated,
    ProjectCreated,
    VideoGenerated,
    event_publisher,
)
from adgen.domain.prompts import build_image_prompt, build_video_prompt
from adgen.domain.workflow import WorkflowRun, WorkflowState
from adgen.infrastructure.image_generator import ImageGenerator
from adgen.infrastructure.video_generator import VideoGenerator
from adgen.storage.interface import AssetStore

logger = logging.getLogger(__name__)

IMAGE_ACTION = "image"
VIDEO_ACTION = "video"


class GenerationService:
    """Application service running the paid generation actions.

    Each action reserves credits first, then walks a ``WorkflowRun`` through
    its states. When a step fails the run moves to FAILED and the
    compensation it reports (mark the project failed, refund the
    reservation) is applied before the error is re-raised.
    """

    def __init__(
        self,
        projects: ProjectRepository,
        ledger: CreditLedger,
        assets: AssetStore,
        image_generator: ImageGenerator,
        video_generator: VideoGenerator,
        image_cost: int = 5,
        video_cost: int = 10,
        min_input_images: int = 2,
        upload_timeout: float = 30.0,
        image_size: str = "1024x1024",
        image_quality: str = "hd",
    ) -> None:
        self._projects = projects
        self._ledger = ledger
        self._assets = assets
        self._image_generator = image_generator
        self._video_generator = video_generator
        self.image_cost = image_cost
        self.video_cost = video_cost
        self.min_input_images = min_input_images
        self.upload_timeout = upload_timeout
        self.image_size = image_size
        self.image_quality = image_quality

    # ------------------------------------------------------------------
    # Image action
    # ------------------------------------------------------------------

    def create_image_project(self, user_id: str, request: ImageProjectRequest) -> str:
        """Generate a composite product image and return the new project's id."""
        self._validate_image_request(request)

        run = self._start_run(IMAGE_ACTION, user_id, self.image_cost)
        try:
            uploaded = self._upload_inputs(user_id, request.images)
            run.advance(WorkflowState.ASSETS_UPLOADED)

            project = self._projects.create_project(
                user_id=user_id,
                product_name=request.product_name.strip(),
                uploaded_images=uploaded,
                name=request.name or "New Project",
                product_description=request.product_description,
                user_prompt=request.user_prompt,
                aspect_ratio=request.aspect_ratio,
                target_length=request.target_length,
                is_generating=True,
            )
            run.project_id = project.id
            run.advance(WorkflowState.RECORD_CREATED)
            event_publisher.publish(ProjectCreated(
                event_id="",
                timestamp=None,
                aggregate_id=project.id,
                user_id=user_id,
                name=project.name,
                product_name=project.product_name,
            ))

            prompt = build_image_prompt(request.product_name, request.user_prompt)
            image = self._image_generator.generate(prompt, size=self.image_size, quality=self.image_quality)
            run.advance(WorkflowState.GENERATED)

            image_url = self._assets.upload(image, self._asset_key(user_id, "png"), "image/png")
            self._projects.complete_image(project.id, image_url)
            self._ledger.capture(run.reservation_id)
            run.advance(WorkflowState.FINALIZED)
        except Exception as exc:
            raise self._compensate(run, exc)

        event_publisher.publish(ImageGenerated(
            event_id="",
            timestamp=None,
            aggregate_id=run.project_id,
            user_id=user_id,
            image_url=image_url,
        ))
        return run.project_id

    def _validate_image_request(self, request: ImageProjectRequest) -> None:
        if len(request.images) < self.min_input_images:
            raise ValidationError(f"Please upload at least {self.min_input_images} images")
        if not request.product_name or not request.product_name.strip():
            raise ValidationError("Product name is required")
        if request.target_length is not None and request.target_length <= 0:
            raise ValidationError("Target length must be a positive number of seconds")

    def _upload_inputs(self, user_id: str, images: List[ImageInput]) -> List[str]:
        """Upload all input photos concurrently; the URLs keep the input order."""
        deadline = time.monotonic() + self.upload_timeout
        keys = [self._asset_key(user_id, _extension(image)) for image in images]
        executor = ThreadPoolExecutor(max_workers=len(images), thread_name_prefix="asset-upload")
        futures = []
        try:
            for image, key in zip(images, keys):
                futures.append(executor.submit(
                    self._assets.upload,
                    image.data,
                    key,
                    image.content_type or "image/png",
                ))
            return [future.result(timeout=max(0.0, deadline - time.monotonic())) for future in futures]
        except FutureTimeoutError as e:
            # Running uploads cannot be interrupted and may still land after the refund
            abandoned = [key for key, future in zip(keys, futures) if not future.done()]
            logger.warning(f"Input upload timed out for user {user_id}; abandoned asset keys: {', '.join(abandoned)}")
            raise UpstreamFailureError(
                f"Uploading input images timed out after {self.upload_timeout:g}s"
            ) from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------
    # Video action
    # ------------------------------------------------------------------

    def create_video(self, user_id: str, project_id: str) -> VideoResult:
        """Animate a project's generated image into a video."""
        if not project_id:
            raise ValidationError("Project ID is required")

        run = self._start_run(VIDEO_ACTION, user_id, self.video_cost)
        try:
            project = self._claim_project(project_id, user_id)
        except (NotFoundError, ConflictError) as exc:
            self._release(run, exc)
            raise
        except Exception as exc:
            raise self._compensate(run, exc)

        run.project_id = project_id
        try:
            run.advance(WorkflowState.RECORD_CREATED)

            if not project.generated_image:
                raise CapabilityUnavailableError("Generated image not found; generate the product image first")

            prompt = build_video_prompt(project.product_name, project.product_description)
            video = self._video_generator.generate(
                project.generated_image,
                prompt,
                project.aspect_ratio,
                project.target_length,
            )
            run.advance(WorkflowState.GENERATED)

            video_url = self._assets.upload(video, self._asset_key(user_id, "mp4"), "video/mp4")
            self._projects.complete_video(project_id, video_url)
            self._ledger.capture(run.reservation_id)
            run.advance(WorkflowState.FINALIZED)
        except Exception as exc:
            raise self._compensate(run, exc)

        event_publisher.publish(VideoGenerated(
            event_id="",
            timestamp=None,
            aggregate_id=project_id,
            user_id=user_id,
            video_url=video_url,
        ))
        return VideoResult(project_id=project_id, video_url=video_url)

    def _claim_project(self, project_id: str, user_id: str) -> Project:
        project = self._projects.get_user_project(project_id, user_id)
        if not project:
            raise NotFoundError("Project not found")
        if project.is_generating:
            raise ConflictError("Generation in progress")
        if project.generated_video:
            raise ConflictError("Video already generated")
        if not self._projects.claim_for_generation(project_id, user_id):
            raise ConflictError("Generation in progress")
        return project

    # ------------------------------------------------------------------
    # Reservation and compensation
    # ------------------------------------------------------------------

    def _start_run(self, action: str, user_id: str, cost: int) -> WorkflowRun:
        # InsufficientCreditsError propagates: nothing to undo yet
        reservation = self._ledger.reserve(user_id, cost, action)
        event_publisher.publish(CreditsReserved(
            event_id="",
            timestamp=None,
            aggregate_id=reservation.id,
            user_id=user_id,
            amount=cost,
            action=action,
        ))
        return WorkflowRun(action=action, user_id=user_id, cost=cost, reservation_id=reservation.id)

    def _release(self, run: WorkflowRun, error: DomainError) -> None:
        """Return the credits of a request rejected before any project state changed."""
        run.fail(str(error))
        self._refund(run)

    def _rollback(self) -> None:
        # A failed flush leaves the shared session unusable until rolled back
        self._projects.rollback()
        self._ledger.rollback()

    def _compensate(self, run: WorkflowRun, exc: Exception) -> GenerationError:
        """Undo what the failed run had done and return the error to raise."""
        self._rollback()
        if isinstance(exc, GenerationError):
            error = exc
        else:
            error = UpstreamFailureError(str(exc) or exc.__class__.__name__)
            error.__cause__ = exc

        compensation = run.fail(str(error))
        logger.error(
            f"{run.action} generation failed for user {run.user_id} "
            f"(project {run.project_id}, from {run.failed_from.value}): {error}",
            exc_info=exc,
        )

        if compensation.mark_project_failed:
            try:
                self._projects.mark_failed(run.project_id, str(error))
            except SQLAlchemyError:
                # The refund below must still run
                logger.exception(f"Could not mark project {run.project_id} as failed")
                self._rollback()
        refunded = self._refund(run) if compensation.refund_reservation else False

        event_publisher.publish(GenerationFailed(
            event_id="",
            timestamp=None,
            aggregate_id=run.project_id or run.reservation_id,
            user_id=run.user_id,
            action=run.action,
            error_type=type(error).__name__,
            message=str(error),
            refunded=refunded,
        ))
        return error

    def _refund(self, run: WorkflowRun) -> bool:
        refunded = self._ledger.refund(run.reservation_id)
        if refunded:
            event_publisher.publish(CreditsRefunded(
                event_id="",
                timestamp=None,
                aggregate_id=run.reservation_id,
                user_id=run.user_id,
                amount=run.cost,
            ))
        return refunded

    @staticmethod
    def _asset_key(user_id: str, extension: str) -> str:
        return f"projects/{user_id}/{uuid.uuid4().hex}.{extension}"


def _extension(image: ImageInput) -> str:
    if image.filename and "." in image.filename:
        ext = image.filename.rsplit(".", 1)[1].lower()
        if ext.isalnum():
            return ext
    if image.content_type and image.content_type.startswith("image/"):
        return image.content_type.split("/", 1)[1]
    return "png"
