from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

import httpx

from ..config import Settings
from ..models import ConversationContext, ProviderConfig
from ..utils.logging import get_request_logger
from .providers import get_adapter, supported_providers

logger = logging.getLogger(__name__)


class LLMStatus(StrEnum):
    ANSWERED = "answered"
    NOT_CONFIGURED = "not_configured"
    UNSUPPORTED_PROVIDER = "unsupported_provider"
    FAILED = "failed"
    EMPTY_REPLY = "empty_reply"


@dataclass(frozen=True)
class LLMResult:
    """Outcome of one LLM attempt. Only ANSWERED carries text."""

    status: LLMStatus
    text: Optional[str] = None
    provider: Optional[str] = None
    error: Optional[str] = None

    @property
    def answered(self) -> bool:
        return self.status is LLMStatus.ANSWERED and bool(self.text)

    @property
    def attempted(self) -> bool:
        """True when a network call was made."""
        return self.status in {LLMStatus.ANSWERED, LLMStatus.FAILED, LLMStatus.EMPTY_REPLY}


def build_system_message(context: ConversationContext) -> str:
    serialized = json.dumps(context.to_prompt_payload(), ensure_ascii=False)
    return (
        f"You are a helpful shopping assistant for {context.shop_name}. "
        f"Use the following context to answer the customer's question: {serialized}"
    )


class LLMInvoker:
    """Single-attempt LLM call behind a uniform contract.

    Provider errors never escape: every failure is logged and reported as an
    LLMResult so the caller can fall back to rule-based replies.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    async def invoke(
        self,
        message: str,
        context: ConversationContext,
        config: ProviderConfig,
        *,
        trace_id: Optional[str] = None,
    ) -> LLMResult:
        req_logger = get_request_logger(logger, trace_id=trace_id, provider=config.provider)

        if not config.is_configured:
            req_logger.info("LLM not configured, skipping call")
            return LLMResult(status=LLMStatus.NOT_CONFIGURED, provider=config.provider or None)

        adapter = get_adapter(config.provider)
        if adapter is None:
            req_logger.warning(
                "Unsupported LLM provider: %s (supported: %s)",
                config.provider,
                ", ".join(supported_providers()),
            )
            return LLMResult(
                status=LLMStatus.UNSUPPORTED_PROVIDER,
                provider=config.provider,
                error=f"unsupported provider '{config.provider}'",
            )

        provider_request = adapter.build_request(build_system_message(context), message, config)
        model = adapter.resolve_model(config)
        req_logger.info("Calling LLM model=%s", model)

        timeout = httpx.Timeout(self._settings.llm_timeout_seconds)
        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.request(
                    provider_request.method,
                    provider_request.full_url,
                    headers=provider_request.headers,
                    json=provider_request.json,
                )
                elapsed_ms = (time.perf_counter() - start) * 1000
                req_logger.info(
                    "LLM response status=%s latency_ms=%.1f", response.status_code, elapsed_ms
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            req_logger.error(
                "LLM HTTP error status=%s body=%s",
                exc.response.status_code,
                exc.response.text,
            )
            return LLMResult(
                status=LLMStatus.FAILED,
                provider=adapter.name,
                error=f"http {exc.response.status_code}",
            )
        except httpx.TimeoutException as exc:
            req_logger.error("LLM timeout after %.1fs: %s", self._settings.llm_timeout_seconds, exc)
            return LLMResult(status=LLMStatus.FAILED, provider=adapter.name, error="timeout")
        except httpx.InvalidURL as exc:
            req_logger.error("LLM request URL rejected model=%s: %s", model, exc)
            return LLMResult(status=LLMStatus.FAILED, provider=adapter.name, error="invalid_url")
        except httpx.HTTPError as exc:
            req_logger.error("LLM request error: %s", exc)
            return LLMResult(
                status=LLMStatus.FAILED,
                provider=adapter.name,
                error=str(exc) or exc.__class__.__name__,
            )
        except ValueError as exc:
            req_logger.error("LLM returned invalid JSON: %s", exc)
            return LLMResult(status=LLMStatus.FAILED, provider=adapter.name, error="invalid_json")

        text = adapter.extract_reply(data)
        if text is None:
            req_logger.warning("LLM response had no reply text, body=%s", data)
            return LLMResult(status=LLMStatus.EMPTY_REPLY, provider=adapter.name)

        return LLMResult(status=LLMStatus.ANSWERED, text=text, provider=adapter.name)
