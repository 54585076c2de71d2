from __future__ import annotations

import logging
from typing import Optional

from fastapi import status
from langsmith import traceable

from ..config import Settings
from ..intents import ReplySource
from ..models import ChatReply, ProviderConfig, SettingsView
from ..utils.logging import get_request_logger
from .catalog_gateway import CatalogGateway
from .content import StorefrontContent, get_storefront_content
from .context_builder import ContextBuilder
from .error_handling import ValidationError
from .intent_classifier import IntentClassifier
from .llm_invoker import LLMInvoker
from .metrics import get_metrics_service
from .response_composer import ResponseComposer

logger = logging.getLogger(__name__)


def _redact_trace_inputs(inputs: dict) -> dict:
    config = inputs.get("config")
    if isinstance(config, ProviderConfig):
        return {**inputs, "config": SettingsView.from_config(config).model_dump(by_alias=True)}
    return inputs


class Orchestrator:
    """Two-tier reply pipeline: LLM first when configured, rule-based otherwise.

    Start -> LLMAttempted -> (Answered | FallbackNeeded) -> Done. A reply comes
    entirely from one tier; there are no retries across tiers.
    """

    def __init__(
        self,
        *,
        classifier: IntentClassifier,
        context_builder: ContextBuilder,
        llm_invoker: LLMInvoker,
        composer: ResponseComposer,
    ) -> None:
        self._classifier = classifier
        self._context_builder = context_builder
        self._llm_invoker = llm_invoker
        self._composer = composer

    @traceable(run_type="chain", name="orchestrator_handle", process_inputs=_redact_trace_inputs)
    async def handle(
        self,
        message: str,
        config: ProviderConfig,
        *,
        trace_id: Optional[str] = None,
    ) -> ChatReply:
        text = (message or "").strip()
        if not text:
            raise ValidationError(
                "Message is required",
                reason="empty_message",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        req_logger = get_request_logger(logger, trace_id=trace_id, provider=config.provider)
        metrics = get_metrics_service()

        if config.is_configured:
            context = await self._context_builder.build(text, trace_id=trace_id)
            result = await self._llm_invoker.invoke(text, context, config, trace_id=trace_id)
            metrics.record_llm_result(result.status, attempted=result.attempted)
            if result.answered:
                req_logger.info("Answered by LLM")
                return ChatReply(text=result.text, source=ReplySource.LLM)
            req_logger.info("LLM gave no answer status=%s, falling back to rules", result.status)
        else:
            req_logger.debug("No LLM provider configured, using rules")

        intent = self._classifier.classify(text)
        reply = await self._composer.compose(intent, text, trace_id=trace_id)
        metrics.record_fallback(intent.value)
        req_logger.info("Answered by rules intent=%s", intent)
        return ChatReply(text=reply, source=ReplySource.RULE_BASED, intent=intent)


def build_orchestrator(
    settings: Settings,
    *,
    gateway: CatalogGateway | None = None,
    llm_invoker: LLMInvoker | None = None,
    content: StorefrontContent | None = None,
) -> Orchestrator:
    """Wire the pipeline from settings; collaborators can be swapped for tests."""
    content = content or get_storefront_content(settings)
    gateway = gateway or CatalogGateway(settings)
    classifier = IntentClassifier(content)
    return Orchestrator(
        classifier=classifier,
        context_builder=ContextBuilder(content=content, gateway=gateway, classifier=classifier),
        llm_invoker=llm_invoker or LLMInvoker(settings),
        composer=ResponseComposer(content=content, gateway=gateway, classifier=classifier),
    )
