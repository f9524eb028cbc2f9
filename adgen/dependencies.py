from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from adgen.config import settings
from adgen.db.database import get_db
from adgen.db.repositories import CreditLedger, ProjectRepository
from adgen.storage.factory import get_asset_store
from adgen.storage.interface import AssetStore
from adgen.infrastructure.image_generator import ImageGenerator, OpenAIImageGenerator
from adgen.infrastructure.video_generator import VIDEO_GENERATORS, VideoGenerator
from adgen.application.generation_service import GenerationService
from adgen.application.project_service import ProjectService


def get_project_repository(db: Session = Depends(get_db)) -> ProjectRepository:
    return ProjectRepository(db)


def get_credit_ledger(db: Session = Depends(get_db)) -> CreditLedger:
    return CreditLedger(db)


def get_image_generator() -> ImageGenerator:
    return OpenAIImageGenerator(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_IMAGE_MODEL,
        timeout=settings.GENERATION_TIMEOUT,
    )


def get_video_generator() -> VideoGenerator:
    provider = (settings.VIDEO_PROVIDER or "none").lower()
    if provider not in VIDEO_GENERATORS:
        raise ValueError(
            f"Unsupported VIDEO_PROVIDER '{settings.VIDEO_PROVIDER}'; "
            f"expected one of: {', '.join(sorted(VIDEO_GENERATORS))}"
        )
    return VIDEO_GENERATORS[provider]()


def get_generation_service(
    projects: ProjectRepository = Depends(get_project_repository),
    ledger: CreditLedger = Depends(get_credit_ledger),
    assets: AssetStore = Depends(get_asset_store),
    image_generator: ImageGenerator = Depends(get_image_generator),
    video_generator: VideoGenerator = Depends(get_video_generator),
) -> GenerationService:
    return GenerationService(
        projects=projects,
        ledger=ledger,
        assets=assets,
        image_generator=image_generator,
        video_generator=video_generator,
        image_cost=settings.IMAGE_GENERATION_COST,
        video_cost=settings.VIDEO_GENERATION_COST,
        min_input_images=settings.MIN_INPUT_IMAGES,
        upload_timeout=settings.ASSET_UPLOAD_TIMEOUT,
        image_size=settings.IMAGE_SIZE,
        image_quality=settings.IMAGE_QUALITY,
    )


def get_project_service(
    projects: ProjectRepository = Depends(get_project_repository),
) -> ProjectService:
    return ProjectService(projects)
