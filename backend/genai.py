# backend/genai.py
import base64
import json
import logging
import re
from typing import Optional, Tuple, Type, TypeVar

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

from . import config

log = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_client = None


class GenAIUnavailable(Exception):
    pass


class GenAIResponseError(Exception):
    pass


def get_client():
    """Return the shared Gemini client, or None when no API key is configured."""
    global _client
    if _client is None and config.GEMINI_API_KEY:
        try:
            _client = genai.Client(api_key=config.GEMINI_API_KEY)
        except Exception as e:
            log.error("genai client init failed: %s", e)
            _client = None
    return _client


def is_available() -> bool:
    return get_client() is not None


def check_client() -> dict:
    key_present = bool(config.GEMINI_API_KEY)
    client_ok = False
    client_error = None
    if key_present:
        try:
            genai.Client(api_key=config.GEMINI_API_KEY)
            client_ok = True
        except Exception as e:
            client_error = str(e)
    return {"key_present": key_present, "client_init_ok": client_ok, "client_error": client_error}


def extract_json(text: str) -> Optional[str]:
    """Pull the JSON object out of a model reply that may carry fences or prose."""
    txt = (text or "").strip()
    if not txt:
        return None
    fenced = re.search(r"```(?:json)?\s*(.*?)\s*```", txt, flags=re.DOTALL | re.IGNORECASE)
    if fenced:
        txt = fenced.group(1).strip()
    try:
        json.loads(txt)
        return txt
    except ValueError:
        pass
    m = re.search(r"\{.*\}", txt, flags=re.DOTALL)
    return m.group(0) if m else None


def generate_structured(prompt: str, schema: Type[T], model: Optional[str] = None) -> T:
    """Single request returning JSON validated against `schema`."""
    client = get_client()
    if client is None:
        raise GenAIUnavailable("GenAI client not configured")

    resp = client.models.generate_content(
        model=model or config.GEMINI_MODEL,
        contents=prompt,
        config=types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
        ),
    )
    raw = extract_json(getattr(resp, "text", "") or "")
    if raw is None:
        raise GenAIResponseError("Model returned no JSON output")
    try:
        return schema.model_validate_json(raw)
    except ValidationError as e:
        raise GenAIResponseError(f"Model output did not match {schema.__name__}: {e.error_count()} errors")


def parse_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """'data:image/png;base64,....' -> ('image/png', b'...')"""
    m = re.match(r"^data:([\w.+-]+/[\w.+-]+);base64,(.+)$", (data_uri or "").strip(), flags=re.DOTALL)
    if not m:
        raise ValueError("Expected a base64 data URI ('data:<mimetype>;base64,<encoded_data>')")
    return m.group(1), base64.b64decode(m.group(2))


def to_data_uri(mime_type: str, data: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode()}"


def generate_image(prompt: str, image_data_uri: str, model: Optional[str] = None) -> Optional[str]:
    """Send a product photo plus instructions; return the first image part as a data URI."""
    client = get_client()
    if client is None:
        raise GenAIUnavailable("GenAI client not configured")

    mime_type, data = parse_data_uri(image_data_uri)
    resp = client.models.generate_content(
        model=model or config.GEMINI_IMAGE_MODEL,
        contents=[types.Part.from_bytes(data=data, mime_type=mime_type), prompt],
        config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
    )
    for candidate in getattr(resp, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is not None and getattr(inline, "data", None):
                return to_data_uri(inline.mime_type or "image/png", inline.data)
    return None
