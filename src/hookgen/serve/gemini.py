"""Gemini generateContent client.

One POST per call, no retries. Every failure surfaces as UpstreamError with a
cause tag so logs can tell the cases apart while callers see a single error.
"""
from __future__ import annotations
import enum
import json
import logging
from typing import Any

import httpx

from hookgen.common.settings import Settings

LOGGER = logging.getLogger("hookgen.serve.gemini")

_MAX_LOGGED_BODY = 500


class FailureCause(str, enum.Enum):
    TRANSPORT = "transport"
    UPSTREAM_STATUS = "upstream_status"
    NO_CANDIDATES = "no_candidates"
    MALFORMED_RESPONSE = "malformed_response"


class MissingCredentialError(RuntimeError):
    """Raised when no Gemini API key is configured."""


class UpstreamError(Exception):
    def __init__(self, cause: FailureCause, detail: str = "", status_code: int | None = None) -> None:
        super().__init__(f"{cause.value}: {detail}" if detail else cause.value)
        self.cause = cause
        self.detail = detail
        self.status_code = status_code


def build_payload(prompt: str) -> dict[str, Any]:
    """Wrap the prompt as a single user message and ask for a JSON body."""
    return {
        "contents": [
            {"role": "user", "parts": [{"text": prompt}]},
        ],
        "generationConfig": {"responseMimeType": "application/json"},
    }


def extract_text(data: Any) -> str:
    """
    Pull the text of the first candidate out of a generateContent response.

    Args:
        data: Decoded upstream JSON.

    Raises:
        UpstreamError: NO_CANDIDATES if the list is missing or empty,
            MALFORMED_RESPONSE if the first candidate has no text part.
    """
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not candidates:
        raise UpstreamError(FailureCause.NO_CANDIDATES, "response contained no candidates")
    try:
        text = candidates[0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise UpstreamError(FailureCause.MALFORMED_RESPONSE, f"candidate missing text ({type(e).__name__})") from e
    if not isinstance(text, str):
        raise UpstreamError(FailureCause.MALFORMED_RESPONSE, "candidate text is not a string")
    return text


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_result(text: str) -> Any:
    """Decode the candidate text, which the model was told to emit as JSON.

    NaN and Infinity are rejected: they are not JSON and cannot be rendered
    back to the page.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise UpstreamError(FailureCause.MALFORMED_RESPONSE, f"candidate text is not JSON: {e.msg}") from e
    except ValueError as e:
        raise UpstreamError(FailureCause.MALFORMED_RESPONSE, f"candidate text is not JSON: {e}") from e


class GeminiClient:
    """Client for the Gemini generateContent endpoint."""

    def __init__(self, settings: Settings) -> None:
        if not settings.api_key:
            raise MissingCredentialError("GEMINI_API_KEY is not set")
        self._settings = settings

    def generate(self, prompt: str) -> Any:
        """
        Send the prompt upstream and return the parsed inner JSON.

        Args:
            prompt: Opaque prompt text built by the page.
        """
        url = self._settings.upstream_url()
        headers = {"Content-Type": "application/json"}
        params = {"key": self._settings.api_key}
        payload = build_payload(prompt)

        # httpx error strings embed the request URL, which carries the key.
        try:
            with httpx.Client(timeout=self._settings.timeout) as client:
                r = client.post(url, params=params, headers=headers, json=payload)
        except httpx.HTTPError as e:
            LOGGER.error("Gemini request failed: %s", type(e).__name__)
            raise UpstreamError(FailureCause.TRANSPORT, type(e).__name__) from None

        if not r.is_success:
            LOGGER.error(
                "Gemini API error: status=%s body=%s",
                r.status_code,
                r.text[:_MAX_LOGGED_BODY],
            )
            raise UpstreamError(FailureCause.UPSTREAM_STATUS, status_code=r.status_code)

        try:
            data = r.json()
        except ValueError:
            LOGGER.error("Gemini response is not JSON: %s", r.text[:_MAX_LOGGED_BODY])
            raise UpstreamError(FailureCause.MALFORMED_RESPONSE, "response body is not JSON") from None

        try:
            return parse_result(extract_text(data))
        except UpstreamError as e:
            LOGGER.error("Unusable Gemini response (%s): %s", e.cause.value, e.detail)
            raise
