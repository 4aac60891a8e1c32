"""Prompt text sent to the image model."""

import re


GARMENT_PROMPT_TEMPLATE = (
    "Generate a high-quality image of clothing: {description}. "
    "Flat lay or on a mannequin, white background, clean lighting."
)

TRY_ON_INSTRUCTION = (
    "Use the first image as the person and the second image as the clothing. "
    "Generate a high-quality, photorealistic full-body photo of the person wearing this clothing. "
    "Maintain the person's facial features and body shape accurately. "
    "Ensure the clothing fits naturally."
)

_WHITESPACE = re.compile(r"\s+")


def clean_description(raw_description: str) -> str:
    """Collapse whitespace and drop trailing sentence punctuation.

    The template adds its own period, so "red gown." must not become
    "red gown..".
    """
    text = _WHITESPACE.sub(" ", raw_description).strip()
    return text.rstrip(".。 ")


def is_blank(prompt_text: str | None) -> bool:
    return not prompt_text or not prompt_text.strip()


def build_garment_prompt(description: str) -> str:
    """Wrap a free-text garment description with the product-shot framing."""
    return GARMENT_PROMPT_TEMPLATE.format(description=clean_description(description))
