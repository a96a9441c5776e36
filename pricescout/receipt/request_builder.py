"""Turns one unit of input into a Gemini ``generateContent`` request."""

import base64
import json

from pricescout.receipt.base import (
    Attachment,
    GenerationConfig,
    ImageInput,
    ModelRequest,
    RawInput,
    TextInput,
)
from pricescout.receipt.prompts import IMAGE_INSTRUCTIONS, OCR_TEXT_HEADING, TEXT_INSTRUCTIONS

TEXT_GENERATION_CONFIG = GenerationConfig(
    temperature=0.15,
    top_p=0.8,
    top_k=32,
    max_output_tokens=512,
    response_format="json",
)

IMAGE_GENERATION_CONFIG = GenerationConfig(
    temperature=0.1,
    top_p=0.8,
    top_k=40,
    max_output_tokens=512,
    response_format="json",
)

RESPONSE_MIME_TYPES = {"json": "application/json", "text": "text/plain"}


def build_text_request(raw_input: TextInput) -> ModelRequest:
    instruction = f"{TEXT_INSTRUCTIONS}\n{OCR_TEXT_HEADING}\n{raw_input.content}"
    return ModelRequest(instruction_text=instruction, generation_config=TEXT_GENERATION_CONFIG)


def build_image_request(raw_input: ImageInput) -> ModelRequest:
    attachment = Attachment(
        mime_type=raw_input.mime_type,
        data_base64=base64.b64encode(raw_input.data).decode("ascii"),
    )
    return ModelRequest(
        instruction_text=IMAGE_INSTRUCTIONS,
        attachment=attachment,
        generation_config=IMAGE_GENERATION_CONFIG,
    )


def build(raw_input: RawInput) -> ModelRequest:
    if isinstance(raw_input, ImageInput):
        return build_image_request(raw_input)
    return build_text_request(raw_input)


def to_payload(request: ModelRequest) -> dict:
    """Render a request in the Gemini REST wire shape (one user turn)."""
    parts: list[dict] = [{"text": request.instruction_text}]
    if request.attachment is not None:
        parts.append({
            "inlineData": {
                "mimeType": request.attachment.mime_type,
                "data": request.attachment.data_base64,
            }
        })

    config = request.generation_config
    return {
        "contents": [{"role": "user", "parts": parts}],
        "generationConfig": {
            "temperature": config.temperature,
            "topP": config.top_p,
            "topK": config.top_k,
            "maxOutputTokens": config.max_output_tokens,
            "responseMimeType": RESPONSE_MIME_TYPES[config.response_format],
        },
    }


def encode(request: ModelRequest) -> bytes:
    return json.dumps(to_payload(request), ensure_ascii=False).encode("utf-8")
