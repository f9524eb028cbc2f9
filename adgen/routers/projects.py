from fastapi import APIRouter, Body, Depends, File, Form, Path, UploadFile
from adgen.schemas.api_schemas import (
    MessageResponse,
    ProjectCreateResponse,
    ProjectDetail,
    PublishedProjectsResponse,
    VideoCreate,
    VideoResponse,
)
from adgen.auth import get_current_user_id
from adgen.dependencies import get_generation_service, get_project_service
from adgen.application.generation_service import GenerationService
from adgen.application.project_service import ProjectService
from adgen.domain.entities import ImageInput, ImageProjectRequest
from adgen.domain.errors import ValidationError
from typing import List, Optional

router = APIRouter(prefix="/api/project")

@router.post("/create", response_model=ProjectCreateResponse)
def create_project(
    images: Optional[List[UploadFile]] = File(None),
    productName: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    aspectRatio: Optional[str] = Form(None),
    userPrompt: Optional[str] = Form(None),
    productDescription: Optional[str] = Form(None),
    targetLength: Optional[str] = Form(None),
    user_id: str = Depends(get_current_user_id),
    service: GenerationService = Depends(get_generation_service),
):
    """
    Upload product photos and generate a composite marketing image. Costs image credits.
    """
    request = ImageProjectRequest(
        product_name=productName or "",
        images=[
            ImageInput(
                filename=upload.filename or "",
                content_type=upload.content_type or "image/png",
                data=upload.file.read(),
            )
            for upload in images or []
        ],
        name=name or "New Project",
        product_description=productDescription,
        user_prompt=userPrompt,
        aspect_ratio=aspectRatio,
        target_length=_parse_target_length(targetLength),
    )

    project_id = service.create_image_project(user_id, request)
    return ProjectCreateResponse(project_id=project_id)

@router.post("/video", response_model=VideoResponse)
def create_video(
    video_data: VideoCreate = Body(...),
    user_id: str = Depends(get_current_user_id),
    service: GenerationService = Depends(get_generation_service),
):
    """
    Animate a project's generated image into a video. Costs video credits.
    """
    result = service.create_video(user_id, video_data.project_id)
    return VideoResponse(project_id=result["project_id"], video_url=result["video_url"])

@router.get("/published", response_model=PublishedProjectsResponse)
def get_all_published_projects(service: ProjectService = Depends(get_project_service)):
    """
    Retrieve all published projects.
    """
    projects = service.list_published()
    return PublishedProjectsResponse(
        projects=[ProjectDetail.model_validate(project) for project in projects]
    )

@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: str = Path(..., title="The ID of the project to delete"),
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
):
    """
    Delete a project owned by the caller.
    """
    service.delete_project(project_id, user_id)
    return MessageResponse(message="Project deleted")


def _parse_target_length(value: Optional[str]) -> int:
    if value is None or value.strip() == "":
        return 5
    try:
        return int(value)
    except ValueError:
        raise ValidationError("Target length must be an integer")
