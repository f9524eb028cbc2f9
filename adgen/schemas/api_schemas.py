"""
API Request/Response Schemas using Pydantic.

Structure of HTTP requests and responses for the adgen API. Field names are
snake_case in Python and camelCase on the wire.
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Project schemas
class ProjectCreateResponse(CamelModel):
    project_id: str = Field(..., description="Unique identifier for the created project")

class VideoCreate(CamelModel):
    project_id: Optional[str] = Field(None, description="ID of the project to animate")

class VideoResponse(CamelModel):
    project_id: str = Field(..., description="ID of the animated project")
    video_url: str = Field(..., description="Public URL of the generated video")

class ProjectDetail(CamelModel):
    id: str = Field(..., description="Unique identifier for the project")
    user_id: str = Field(..., description="ID of the owning user")
    name: str = Field(..., description="Display name of the project")
    product_name: str = Field(..., description="Name of the advertised product")
    product_description: Optional[str] = Field(None, description="Product description")
    user_prompt: Optional[str] = Field(None, description="Free-form prompt supplied by the user")
    aspect_ratio: Optional[str] = Field(None, description="Target aspect ratio")
    target_length: int = Field(5, description="Target video duration in seconds")
    uploaded_images: List[str] = Field(default_factory=list, description="URLs of the input photos, in upload order")
    generated_image: Optional[str] = Field(None, description="URL of the generated composite image")
    generated_video: Optional[str] = Field(None, description="URL of the generated video")
    is_generating: bool = Field(False, description="Whether a generation is in flight")
    is_published: bool = Field(False, description="Whether the project is publicly listed")
    error: Optional[str] = Field(None, description="Last generation error")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

class PublishedProjectsResponse(CamelModel):
    projects: List[ProjectDetail] = Field(default_factory=list, description="Published projects")

class MessageResponse(CamelModel):
    message: str = Field(..., description="Human readable outcome")
