"""Internal domain entities passed between routers and application services."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, TypedDict


@dataclass(frozen=True)
class ImageInput:
    """One uploaded input photo, already read into memory."""
    filename: str
    content_type: str
    data: bytes


@dataclass
class ImageProjectRequest:
    product_name: str
    images: List[ImageInput] = field(default_factory=list)
    name: str = "New Project"
    product_description: Optional[str] = None
    user_prompt: Optional[str] = None
    aspect_ratio: Optional[str] = None
    target_length: int = 5


class VideoResult(TypedDict):
    project_id: str
    video_url: str
