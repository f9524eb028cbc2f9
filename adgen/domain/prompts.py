"""Prompt templates sent to the generation providers."""
from __future__ import annotations

from typing import Optional

COMPOSITE_IMAGE_TEMPLATE = (
    "Combine the person and product into a realistic photo.\n"
    "Make the person naturally hold or use the product.\n"
    "Match lighting, shadows, scale and perspective.\n"
    "Make the person stand in professional studio lighting.\n"
    "Output ecommerce-quality photo realistic imagery."
)


def build_image_prompt(product_name: str, user_prompt: Optional[str] = None) -> str:
    prompt = f"{COMPOSITE_IMAGE_TEMPLATE}\nThe product is {product_name.strip()}."
    if user_prompt and user_prompt.strip():
        prompt = f"{prompt}\n{user_prompt.strip()}"
    return prompt


def build_video_prompt(product_name: str, product_description: Optional[str] = None) -> str:
    prompt = f"make the person showcase the product which is {product_name.strip()}"
    if product_description and product_description.strip():
        prompt = f"{prompt} and Product Description: {product_description.strip()}"
    return prompt
