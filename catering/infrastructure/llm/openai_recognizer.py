from __future__ import annotations

import json
import logging
from typing import Any

from openai import OpenAI

from catering.application.exceptions import RecognizerContractError, RecognizerUpstreamError
from catering.application.ports.recognizer import RecognizerPort
from catering.infrastructure.llm.prompts import build_validate_prompt


class OpenAIRecognizer(RecognizerPort):
    """
    OpenAI-backed adapter implementing RecognizerPort.

    Raises:
        RecognizerUpstreamError: networking/provider failures
        RecognizerContractError: invalid JSON or wrong shape
    """

    def __init__(self, api_key: str, model: str, temperature: float = 0.0) -> None:
        self.client = OpenAI(api_key=api_key)
        self._model = model
        self._temperature = temperature
        self._logger = logging.getLogger(__name__)

    def validate_entree(self, text: str) -> bool:
        return self._validate("entree", text)

    def validate_drink(self, text: str) -> bool:
        return self._validate("drink", text)

    def _validate(self, category: str, text: str) -> bool:
        if not text or not text.strip():
            return False

        content = self._call_text(build_validate_prompt(category, text))
        data = _parse_json(content, what=category)

        if not isinstance(data, dict) or not isinstance(data.get("valid"), bool):
            raise RecognizerContractError(f"{category.capitalize()}: expected a JSON object with a boolean 'valid'.")

        self._logger.info("Recognizer answered", extra={"card": category, "reason": data["valid"]})
        return data["valid"]

    def _call_text(self, prompt: str) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": "Return only valid JSON. Do not include markdown or extra text."},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._temperature,
                max_tokens=20,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise RecognizerUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise RecognizerContractError("Recognizer returned empty response text.")

        return content


def _parse_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except Exception:
        snippet = text[:200].replace("\n", " ")
        raise RecognizerContractError(f"{what.capitalize()}: invalid JSON. Snippet: {snippet!r}")
