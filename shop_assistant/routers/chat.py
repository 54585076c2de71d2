from __future__ import annotations

import logging
import time
from uuid import uuid4

from fastapi import APIRouter, Depends, Request

from ..config import Settings, get_settings
from ..models import ChatRequest, ChatResponse
from ..services.metrics import get_metrics_service
from ..services.orchestrator import Orchestrator
from ..services.provider_config_store import ProviderConfigStore
from ..utils.logging import get_request_logger
from .deps import get_orchestrator, get_provider_config_store_dependency

router = APIRouter(prefix="/api", tags=["chat"])
logger = logging.getLogger(__name__)


@router.post("/chat", response_model=ChatResponse)
async def post_chat(
    request: ChatRequest,
    http_request: Request,
    settings: Settings = Depends(get_settings),
    orchestrator: Orchestrator = Depends(get_orchestrator),
    config_store: ProviderConfigStore = Depends(get_provider_config_store_dependency),
) -> ChatResponse:
    start_time = time.perf_counter()
    trace_id = uuid4().hex if settings.enable_request_tracing else None
    # Error responses carry the same id in X-Trace-Id.
    http_request.state.trace_id = trace_id
    # Settings may change between requests; each request works from its own snapshot.
    config = config_store.snapshot()
    request_logger = get_request_logger(logger, trace_id=trace_id, provider=config.provider)
    request_logger.info("Incoming chat message length=%d", len(request.message))

    reply = await orchestrator.handle(request.message, config, trace_id=trace_id)

    latency_ms = (time.perf_counter() - start_time) * 1000
    get_metrics_service().record_response_latency(latency_ms)
    request_logger.info("Chat reply source=%s latency_ms=%.1f", reply.source, latency_ms)
    return ChatResponse(reply=reply.text, source=reply.source)
