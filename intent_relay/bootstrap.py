"""Application bootstrap helpers for assembling the service container."""

from __future__ import annotations

from typing import Optional

from openai import OpenAI

from intent_relay.adapters.studio_console import StudioConsole
from intent_relay.core.config import Settings, settings
from intent_relay.core.intents import HandlerKind
from intent_relay.core.logging import get_logger
from intent_relay.services import ServiceContainer
from intent_relay.services.classifier import OpenAIIntentClassifier
from intent_relay.services.fan_out import FanOutExecutor
from intent_relay.services.handlers import (
    BananaArtHandler,
    ChannelEditHandler,
    FortuneHandler,
    JokeHandler,
    NoveltyCommandHandler,
    QueryHandler,
)
from intent_relay.services.openai_utils import build_openai_client
from intent_relay.services.pipeline import IntentPipeline
from intent_relay.services.post_processing import build_post_processor
from intent_relay.services.task_registry import TaskRegistry

logger = get_logger(__name__)


def _novelty_registry(client: OpenAI, app_settings: Settings) -> TaskRegistry:
    model = app_settings.RELAY_HANDLER_MODEL
    workers = app_settings.RELAY_FAN_OUT_MAX_WORKERS
    parts = TaskRegistry(
        {
            HandlerKind.ART: BananaArtHandler(client, model=model),
            HandlerKind.FORTUNE: FortuneHandler(client, model=model),
            HandlerKind.JOKE: JokeHandler(client, model=model),
        }
    )
    parts_executor = FanOutExecutor(
        parts, max_workers=workers, thread_name_prefix="command-parts"
    )
    return TaskRegistry(
        {
            HandlerKind.COMMAND: NoveltyCommandHandler(client, parts_executor, model=model),
            HandlerKind.QUERY: QueryHandler(client, model=model),
        }
    )


def _console_registry(
    client: OpenAI, app_settings: Settings, console: StudioConsole
) -> TaskRegistry:
    model = app_settings.RELAY_HANDLER_MODEL
    # Channel edits run as plain tasks, so their executor needs no handlers.
    edit_executor = FanOutExecutor(
        TaskRegistry(),
        max_workers=app_settings.RELAY_FAN_OUT_MAX_WORKERS,
        thread_name_prefix="channel-edits",
    )
    return TaskRegistry(
        {
            HandlerKind.COMMAND: ChannelEditHandler(client, console, edit_executor, model=model),
            HandlerKind.QUERY: QueryHandler(
                client, model=model, context_provider=console.describe_channels
            ),
        }
    )


def build_default_service_container(
    *,
    app_settings: Optional[Settings] = None,
    client: Optional[OpenAI] = None,
    console: Optional[StudioConsole] = None,
) -> ServiceContainer:
    """Return the service container for the configured command domain."""

    app_settings = app_settings or settings
    client = client or build_openai_client(app_settings)
    domain = app_settings.RELAY_COMMAND_DOMAIN
    if domain == "console":
        console = console or StudioConsole()
        registry = _console_registry(client, app_settings, console)
    else:
        registry = _novelty_registry(client, app_settings)

    executor = FanOutExecutor(registry, max_workers=app_settings.RELAY_FAN_OUT_MAX_WORKERS)
    classifier = OpenAIIntentClassifier(
        client, model=app_settings.RELAY_CLASSIFIER_MODEL, command_domain=domain
    )
    post_processor = build_post_processor(client, app_settings.RELAY_RESPONSE_LANGUAGE)
    logger.info(
        "[bootstrap] Wired %s domain with handlers %s",
        domain,
        sorted(kind.value for kind in registry.kinds()),
    )
    return ServiceContainer(
        classifier=classifier,
        registry=registry,
        executor=executor,
        post_processor=post_processor,
        console=console,
    )


def build_pipeline(
    container: ServiceContainer, app_settings: Optional[Settings] = None
) -> IntentPipeline:
    """Assemble an :class:`IntentPipeline` from a populated container."""

    app_settings = app_settings or settings
    if container.classifier is None or container.executor is None:
        raise ValueError("service container is missing a classifier or executor")
    return IntentPipeline(
        container.classifier,
        container.executor,
        container.post_processor,
        composite_order=app_settings.RELAY_COMPOSITE_ORDER,
    )


__all__ = ["build_default_service_container", "build_pipeline"]
