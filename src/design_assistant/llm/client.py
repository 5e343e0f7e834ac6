"""
Reasoning Service Client

Thin async client for an OpenAI-compatible chat completions endpoint. The
search pipeline treats it as a black box: a system prompt and a user payload
go in, raw assistant text comes out.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..core.errors import RerankServiceError

logger = logging.getLogger("design_assistant.llm")


class LLMClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if api_key is None and settings.openai_api_key is not None:
            api_key = settings.openai_api_key.get_secret_value()
        self.api_key = api_key
        self.model = model or settings.rerank_model
        self.base_url = base_url or settings.openai_base_url
        self.timeout = timeout if timeout is not None else settings.llm_timeout
        self._transport = transport

    async def complete(
        self,
        system_prompt: str,
        user_payload: str,
        temperature: float = 0.0,
        json_mode: bool = True,
    ) -> str:
        """
        Run a single-turn completion and return the assistant text.

        Returns an empty string when the response carries no text content;
        callers decide what that means.

        Raises
        ------
        RerankServiceError
            On transport failures or non-2xx responses.
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_payload},
            ],
            "temperature": temperature,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.post(
                    self.base_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "Completion request failed (%s): model=%s error=%s",
                type(exc).__name__,
                self.model,
                str(exc),
            )
            raise RerankServiceError(
                f"Reasoning service call failed: {type(exc).__name__}"
            ) from exc

        try:
            data = resp.json()
            content = data["choices"][0]["message"].get("content")
        except (ValueError, KeyError, IndexError, TypeError, AttributeError):
            logger.warning("Completion response had no usable message content")
            return ""

        if content is None:
            return ""
        if not isinstance(content, str):
            logger.warning(
                "Completion content was %s, expected text", type(content).__name__
            )
            return ""

        return content.strip()
