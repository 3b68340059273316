from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Protocol

from .factory import ProviderConfig

log = logging.getLogger(__name__)

DEFAULT_SYSTEM_MESSAGE = "You are a helpful AI assistant."

PLACEHOLDER_API_KEY = "your-api-key-here"
PLACEHOLDER_ENDPOINT = "https://your-resource-name.openai.azure.com"


@dataclass
class GenerationResult:
    success: bool
    content: str = ""
    error: str | None = None
    usage: dict[str, Any] | None = None
    finish_reason: str = ""
    data: dict[str, Any] | None = None

    @staticmethod
    def failure(error: str) -> "GenerationResult":
        return GenerationResult(success=False, error=error)


class GenerationClient(Protocol):
    def chat(
        self,
        user_message: str,
        system_message: str = DEFAULT_SYSTEM_MESSAGE,
        **options: Any,
    ) -> GenerationResult: ...


@dataclass
class AzureOpenAIClient:
    """
    Azure OpenAI chat completions client.

    Never raises for configuration, validation, HTTP or network problems;
    every failure comes back as GenerationResult(success=False, error=...).
    """
    config: ProviderConfig
    timeout: float = 120.0
    max_tokens: int = 10000
    temperature: float = 0.2
    headers: dict[str, str] = field(default_factory=dict)

    def _config_error(self) -> str | None:
        if not self.config.api_key or self.config.api_key == PLACEHOLDER_API_KEY:
            return "Azure OpenAI API key is not configured. Please set AZURE_OPENAI_API_KEY environment variable."
        if not self.config.endpoint or self.config.endpoint.rstrip("/") == PLACEHOLDER_ENDPOINT:
            return "Azure OpenAI endpoint is not configured. Please set AZURE_OPENAI_ENDPOINT environment variable."
        if not self.config.deployment:
            return "Azure OpenAI deployment is not configured. Please set AZURE_COMPLETION_DEPLOYMENT environment variable."
        return None

    def completions_url(self) -> str:
        deployment = urllib.parse.quote(self.config.deployment, safe="")
        version = urllib.parse.quote(self.config.api_version, safe="")
        return (
            f"{self.config.endpoint.rstrip('/')}/openai/deployments/{deployment}"
            f"/chat/completions?api-version={version}"
        )

    def generate(
        self,
        messages: list[dict[str, Any]],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
        frequency_penalty: float = 0,
        presence_penalty: float = 0,
        stop: list[str] | str | None = None,
    ) -> GenerationResult:
        problem = self._config_error()
        if problem:
            return GenerationResult.failure(problem)
        if not isinstance(messages, list) or not messages:
            return GenerationResult.failure("Messages array is required and must not be empty.")

        payload: dict[str, Any] = {
            "messages": messages,
            "max_tokens": self.max_tokens if max_tokens is None else max_tokens,
            "temperature": self.temperature if temperature is None else temperature,
            "frequency_penalty": frequency_penalty,
            "presence_penalty": presence_penalty,
        }
        if stop:
            payload["stop"] = stop

        data = json.dumps(payload).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "api-key": self.config.api_key,
            **self.headers,
        }
        req = urllib.request.Request(self.completions_url(), data=data, headers=headers, method="POST")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace") if hasattr(e, "read") else ""
            log.error("Azure OpenAI API error: status=%s reason=%s body=%s", e.code, e.reason, body)
            return GenerationResult.failure(f"Azure OpenAI API request failed: {e.code} {e.reason} - {body}")
        except urllib.error.URLError as e:
            log.error("Azure OpenAI request failed: %s", e.reason)
            return GenerationResult.failure(f"Azure OpenAI request failed: {e.reason}")
        except (OSError, http.client.HTTPException) as e:
            log.error("Azure OpenAI request failed: %s", e)
            return GenerationResult.failure(f"Azure OpenAI request failed: {e}")

        try:
            obj = json.loads(raw)
        except json.JSONDecodeError as e:
            return GenerationResult.failure(f"Azure OpenAI returned invalid JSON: {e}")
        if not isinstance(obj, dict):
            return GenerationResult.failure("Azure OpenAI returned an unexpected response body.")

        choices = obj.get("choices")
        if not isinstance(choices, list):
            choices = []
        first = choices[0] if choices and isinstance(choices[0], dict) else {}
        msg = first.get("message")
        if not isinstance(msg, dict):
            msg = {}
        return GenerationResult(
            success=True,
            content=str(msg.get("content") or ""),
            usage=obj.get("usage"),
            finish_reason=str(first.get("finish_reason") or ""),
            data=obj,
        )

    def chat(
        self,
        user_message: str,
        system_message: str = DEFAULT_SYSTEM_MESSAGE,
        **options: Any,
    ) -> GenerationResult:
        messages = [
            {"role": "system", "content": system_message},
            {"role": "user", "content": user_message},
        ]
        return self.generate(messages, **options)
