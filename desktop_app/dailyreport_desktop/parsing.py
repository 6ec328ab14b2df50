"""Free-text task parsing with a deterministic fallback."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

import requests

logger = logging.getLogger(__name__)

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_MODEL = "gemini-2.0-flash"

SYSTEM_INSTRUCTION = (
    "You are a task parser. Extract project details from user input. Return a JSON object with keys: "
    "projectName, projectType, assignedBy, remarks. If a value is missing, infer a professional one or "
    'use "General" for type and "Self" for assignedBy.'
)

RESPONSE_FIELDS = ("projectName", "projectType", "assignedBy", "remarks")

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "projectName": {"type": "STRING", "description": "The name of the project."},
        "projectType": {"type": "STRING", "description": "The type or category of the task."},
        "assignedBy": {"type": "STRING", "description": "The person who assigned the task."},
        "remarks": {"type": "STRING", "description": "Additional notes or specific achievements."},
    },
    "required": list(RESPONSE_FIELDS),
    "propertyOrdering": list(RESPONSE_FIELDS),
}


class ParseError(RuntimeError):
    """The parser could not produce structured task fields."""


class TaskParser(Protocol):
    def parse(self, text: str) -> Dict[str, str]: ...


@dataclass(slots=True)
class ParseOutcome:
    fields: Dict[str, str]
    used_fallback: bool
    notice: str


class GeminiTaskParser:
    """Calls the Gemini ``generateContent`` REST endpoint."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout: Optional[int] = None) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    def _payload(self, text: str) -> dict:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "contents": [{"role": "user", "parts": [{"text": text}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    def parse(self, text: str) -> Dict[str, str]:
        url = GEMINI_ENDPOINT.format(model=self.model)
        try:
            response = requests.post(
                url,
                params={"key": self.api_key},
                json=self._payload(text),
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise ParseError(f"Parser request failed: {exc}") from exc

        try:
            raw = body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ParseError("Parser returned no content") from exc
        if not raw or not raw.strip():
            raise ParseError("Parser returned an empty response")
        try:
            data = json.loads(raw.strip())
        except ValueError as exc:
            raise ParseError("Parser returned malformed JSON") from exc
        if not isinstance(data, dict):
            raise ParseError("Parser returned a non-object")
        return {name: str(data.get(name) or "") for name in RESPONSE_FIELDS}


def fallback_fields(text: str) -> Dict[str, str]:
    return {
        "project_name": text,
        "project_type": "General",
        "assigned_by": "Self",
        "remarks": "",
    }


def parse_task(parser: Optional[TaskParser], text: str) -> ParseOutcome:
    """Parse ``text`` into task seed fields, never failing.

    Any parser failure, including a missing parser, degrades to the fallback
    record and a soft notice.
    """
    if parser is None:
        return ParseOutcome(fallback_fields(text), True, "Parser not configured. Adding generic task.")
    try:
        data = parser.parse(text)
        fields = {
            "project_name": data.get("projectName") or "",
            "project_type": data.get("projectType") or "",
            "assigned_by": data.get("assignedBy") or "",
            "remarks": data.get("remarks") or "",
        }
        if not fields["project_name"]:
            raise ParseError("Parser returned no project name")
    except Exception as exc:
        logger.warning("Task parsing failed, using fallback: %s", exc)
        return ParseOutcome(fallback_fields(text), True, "AI failed. Adding generic task.")
    return ParseOutcome(fields, False, "Task added via AI")


__all__ = [
    "GeminiTaskParser",
    "ParseError",
    "ParseOutcome",
    "TaskParser",
    "fallback_fields",
    "parse_task",
]
