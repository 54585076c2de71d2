from __future__ import annotations

import pytest

from shop_assistant.intents import IntentType, ReplySource
from shop_assistant.models import CatalogProduct
from shop_assistant.services.catalog_gateway import CatalogGatewayError
from shop_assistant.services.error_handling import ValidationError
from shop_assistant.services.llm_invoker import LLMResult, LLMStatus
from shop_assistant.services.orchestrator import build_orchestrator


@pytest.mark.asyncio
@pytest.mark.parametrize("message", ["", "   ", "\n\t"])
async def test_empty_message_is_rejected_before_any_work(
    settings, content, stub_gateway_factory, stub_invoker_factory, openai_config, message
) -> None:
    gateway = stub_gateway_factory()
    invoker = stub_invoker_factory()
    orchestrator = build_orchestrator(settings, gateway=gateway, llm_invoker=invoker, content=content)

    with pytest.raises(ValidationError) as exc_info:
        await orchestrator.handle(message, openai_config)

    assert exc_info.value.message == "Message is required"
    assert exc_info.value.http_status == 400
    assert gateway.calls == []
    assert invoker.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("message", ["What are your shipping rates?", "What are your shipping options?"])
async def test_no_provider_uses_rules_without_llm(
    settings, content, stub_gateway_factory, stub_invoker_factory, no_provider_config, message
) -> None:
    invoker = stub_invoker_factory()
    orchestrator = build_orchestrator(
        settings, gateway=stub_gateway_factory(), llm_invoker=invoker, content=content
    )

    reply = await orchestrator.handle(message, no_provider_config)

    assert reply.source is ReplySource.RULE_BASED
    assert reply.intent is IntentType.SHIPPING
    assert "FREE on orders over £50" in reply.text
    assert "£6.99" in reply.text
    assert invoker.calls == []


@pytest.mark.asyncio
async def test_llm_answer_is_returned(
    settings, content, stub_gateway_factory, stub_invoker_factory, openai_config
) -> None:
    invoker = stub_invoker_factory(LLMResult(status=LLMStatus.ANSWERED, text="Yes, we ship to the EU.", provider="openai"))
    orchestrator = build_orchestrator(
        settings, gateway=stub_gateway_factory(), llm_invoker=invoker, content=content
    )

    reply = await orchestrator.handle("  Do you ship to France?  ", openai_config)

    assert reply.source is ReplySource.LLM
    assert reply.text == "Yes, we ship to the EU."
    (call,) = invoker.calls
    assert call["message"] == "Do you ship to France?"
    assert call["config"] == openai_config
    assert call["context"].products is None


@pytest.mark.asyncio
async def test_product_question_sends_catalog_to_llm(
    settings, content, stub_gateway_factory, stub_invoker_factory, openai_config
) -> None:
    gateway = stub_gateway_factory(
        products=[CatalogProduct(id=1, title="Rose Face Serum", variants=[{"price": "24.00"}])]
    )
    invoker = stub_invoker_factory()
    orchestrator = build_orchestrator(settings, gateway=gateway, llm_invoker=invoker, content=content)

    await orchestrator.handle("What products do you have?", openai_config)

    context = invoker.calls[0]["context"]
    assert [p.title for p in context.products] == ["Rose Face Serum"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "result",
    [
        LLMResult(status=LLMStatus.EMPTY_REPLY, provider="openai"),
        LLMResult(status=LLMStatus.FAILED, provider="openai", error="http 500"),
        LLMResult(status=LLMStatus.UNSUPPORTED_PROVIDER, provider="cohere"),
    ],
)
async def test_llm_without_answer_falls_back_to_rules(
    settings, content, stub_gateway_factory, stub_invoker_factory, openai_config, result
) -> None:
    invoker = stub_invoker_factory(result)
    orchestrator = build_orchestrator(
        settings, gateway=stub_gateway_factory(), llm_invoker=invoker, content=content
    )

    reply = await orchestrator.handle("How do I get a refund?", openai_config)

    assert len(invoker.calls) == 1
    assert reply.source is ReplySource.RULE_BASED
    assert reply.intent is IntentType.REFUND
    assert reply.text == content.reply_for(IntentType.REFUND)


@pytest.mark.asyncio
async def test_catalog_outage_still_reaches_llm(
    settings, content, stub_gateway_factory, stub_invoker_factory, openai_config
) -> None:
    gateway = stub_gateway_factory(error=CatalogGatewayError("down", reason="catalog_transport_error", http_status=502))
    invoker = stub_invoker_factory()
    orchestrator = build_orchestrator(settings, gateway=gateway, llm_invoker=invoker, content=content)

    reply = await orchestrator.handle("Can I buy a gift card?", openai_config)

    assert reply.source is ReplySource.LLM
    assert invoker.calls[0]["context"].products is None


@pytest.mark.asyncio
@pytest.mark.parametrize("message", ["show me your kitchen products", "Do you sell kitchen products?"])
async def test_rule_based_product_listing(
    settings, content, kitchen_catalog, stub_invoker_factory, no_provider_config, message
) -> None:
    orchestrator = build_orchestrator(
        settings, gateway=kitchen_catalog, llm_invoker=stub_invoker_factory(), content=content
    )

    reply = await orchestrator.handle(message, no_provider_config)

    assert reply.intent is IntentType.GENERIC_PRODUCT
    assert "• Bamboo Chopping Board: £18.50" in reply.text
    assert "• Ceramic Mixing Bowl: £12.00" in reply.text
    assert ("list_products", 5, None) not in kitchen_catalog.calls
