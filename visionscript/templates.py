"""Extraction template catalog.

Each template is bound to a fixed natural-language instruction sent to the
inference service alongside the image. The custom template takes its
instruction from the caller.
"""

from enum import Enum

from visionscript.exceptions import UnknownTemplateError


class ExtractionTemplate(str, Enum):
    GENERAL = "General Description"
    INVOICE = "Invoice/Receipt"
    RECIPE = "Cooking Recipe"
    BUSINESS_CARD = "Business Card"
    PRODUCT = "E-commerce Product"
    OCR = "Full OCR Text"
    CUSTOM = "Custom Script"


SYSTEM_INSTRUCTION = (
    "You are a specialized data extraction AI. Your goal is to analyze an image "
    "and return strictly valid JSON. Do not include markdown formatting like "
    "```json ... ```, just the raw JSON string."
)

FALLBACK_INSTRUCTION = "Analyze this image and return the requested data in JSON format."

# Prompt templates per extraction mode
PROMPTS: dict[ExtractionTemplate, str] = {
    ExtractionTemplate.GENERAL: (
        "Generate a comprehensive JSON object describing everything in this image, "
        "including objects, colors, lighting, and mood."
    ),
    ExtractionTemplate.INVOICE: (
        "Extract all data from this invoice/receipt into JSON. Include vendor, date, "
        "total, tax, and an array of line items with description and price."
    ),
    ExtractionTemplate.RECIPE: (
        "Extract the recipe from this image into JSON. Include title, prepTime, "
        "cookTime, ingredients (with amounts), and step-by-step instructions."
    ),
    ExtractionTemplate.BUSINESS_CARD: (
        "Extract contact information from this business card into JSON. Include "
        "name, jobTitle, company, email, phone, website, and address."
    ),
    ExtractionTemplate.PRODUCT: (
        "Analyze this product image and generate e-commerce metadata in JSON. Include "
        "name, category, detected_features, dominant_colors, and potential_tags."
    ),
    ExtractionTemplate.OCR: (
        "Perform OCR on this image and return the text structured in JSON by layout "
        "blocks, lines, and raw_text."
    ),
}


def resolve_instruction(
    template: ExtractionTemplate, custom_prompt: str | None = None
) -> str:
    """Get the instruction string for an extraction template.

    Args:
        template: Selected extraction template
        custom_prompt: Caller-supplied instruction, only used for CUSTOM

    Returns:
        The fixed instruction for preset templates; for CUSTOM the override,
        or the generic fallback when the override is missing or empty
    """
    if template == ExtractionTemplate.CUSTOM:
        return custom_prompt or FALLBACK_INSTRUCTION
    return PROMPTS[template]


def get_template(value: str | ExtractionTemplate) -> ExtractionTemplate:
    """Look up a template by member name ("INVOICE") or display value ("Invoice/Receipt")."""
    if isinstance(value, ExtractionTemplate):
        return value
    try:
        return ExtractionTemplate(value)
    except ValueError:
        pass
    try:
        return ExtractionTemplate[str(value).strip().upper()]
    except KeyError:
        raise UnknownTemplateError(f"Unknown extraction template: {value!r}") from None


def list_templates() -> list[tuple[ExtractionTemplate, str]]:
    """Catalog entries in display order, with the fallback shown for CUSTOM."""
    return [(template, resolve_instruction(template)) for template in ExtractionTemplate]


__all__ = [
    "ExtractionTemplate",
    "FALLBACK_INSTRUCTION",
    "PROMPTS",
    "SYSTEM_INSTRUCTION",
    "get_template",
    "list_templates",
    "resolve_instruction",
]
