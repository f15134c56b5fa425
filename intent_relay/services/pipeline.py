"""LangGraph state machine for the intent relay pipeline.

Classifying → SingleDispatch | FanOut | ShortCircuit → Consolidating →
PostProcessing → Done. Each call to :meth:`IntentPipeline.handle` invokes the
compiled graph with fresh state; nothing is shared between requests.
"""

from __future__ import annotations

import operator
import threading
import time
import uuid
from collections.abc import Hashable
from enum import Enum
from typing import Annotated, Any, Callable, List, Literal, Optional, cast

from langgraph.graph import StateGraph
from typing_extensions import TypedDict

from intent_relay.core.config import config
from intent_relay.core.exceptions import EmptyCompositeError
from intent_relay.core.intents import (
    CommandIntent,
    CompositeIntent,
    HandlerKind,
    Intent,
    IntentKind,
    QueryIntent,
    SubRequest,
    SubResult,
    UnknownIntent,
    intent_kind,
)
from intent_relay.core.logging import correlation_id_context, get_correlation_id, get_logger
from intent_relay.core.ports import Classifier, PostProcessor
from intent_relay.services.consolidation import consolidate
from intent_relay.services.fan_out import FanOutExecutor
from intent_relay.services.post_processing import apply_post_processing

logger = get_logger(__name__)

CompositeOrder = Literal["commands-first", "queries-first"]

UNKNOWN_MESSAGE_PREFIX = "I'm not sure what you're asking for: "
EMPTY_COMPOSITE_REASON = "no actionable request found"


class PipelineStage(str, Enum):
    """States of the per-request pipeline state machine."""

    CLASSIFYING = "classifying"
    SINGLE_DISPATCH = "single-dispatch"
    FAN_OUT = "fan-out"
    SHORT_CIRCUIT = "short-circuit"
    CONSOLIDATING = "consolidating"
    POST_PROCESSING = "post-processing"
    DONE = "done"


class PipelineState(TypedDict, total=False):
    """State carried through the LangGraph execution."""

    raw_text: str
    # Preserve the correlation id so node wrappers can rebind it on any thread.
    correlation_id: str
    cancel_event: Optional[threading.Event]
    intent: Intent
    stage: PipelineStage
    transitions: Annotated[List[PipelineStage], operator.add]
    sub_requests: List[SubRequest]
    sub_results: List[SubResult]
    message: str
    final_message: str


def decompose_intent(
    intent: Intent, order: CompositeOrder = "commands-first"
) -> list[SubRequest]:
    """Turn an intent into its ordered sub-requests.

    Composite intents yield commands then queries (or the reverse under
    ``queries-first``), each group in its given order. A composite with no
    actionable entry raises :class:`EmptyCompositeError`.
    """
    if isinstance(intent, CommandIntent):
        return [SubRequest(kind=HandlerKind.COMMAND, description=intent.description)]
    if isinstance(intent, QueryIntent):
        return [SubRequest(kind=HandlerKind.QUERY, description=intent.question)]
    if isinstance(intent, CompositeIntent):
        commands = [
            SubRequest(kind=HandlerKind.COMMAND, description=text)
            for text in intent.actionable_commands()
        ]
        queries = [
            SubRequest(kind=HandlerKind.QUERY, description=text)
            for text in intent.actionable_queries()
        ]
        requests = queries + commands if order == "queries-first" else commands + queries
        if not requests:
            raise EmptyCompositeError("composite intent produced no sub-requests")
        return requests
    return []


def unknown_message(reason: str) -> str:
    """Return the fixed apology carrying ``reason``."""
    return f"{UNKNOWN_MESSAGE_PREFIX}{reason}"


def wrap_node_with_timing(node_fn: Callable[[Any], dict], node_name: str):
    """Wrap a node so it runs under the request's correlation id and logs its duration."""

    def wrapped(state: Any) -> dict:
        cid = cast(dict, state).get("correlation_id")
        with correlation_id_context(cid or get_correlation_id()):
            started = time.perf_counter()
            try:
                return node_fn(state)
            finally:
                logger.info(
                    "[pipeline] %s finished in %.1f ms",
                    node_name,
                    (time.perf_counter() - started) * 1000.0,
                )

    return wrapped


class IntentPipeline:
    """Classify → dispatch → consolidate → post-process, one request at a time."""

    def __init__(
        self,
        classifier: Classifier,
        executor: FanOutExecutor,
        post_processor: Optional[PostProcessor] = None,
        *,
        composite_order: Optional[CompositeOrder] = None,
    ) -> None:
        self._classifier = classifier
        self._executor = executor
        self._post_processor = post_processor
        self._composite_order: CompositeOrder = composite_order or cast(
            CompositeOrder, config.RELAY_COMPOSITE_ORDER
        )
        self._graph = self._build_graph()

    def handle(self, raw_text: str, cancel_event: Optional[threading.Event] = None) -> str:
        """Process one user request and return the final message."""
        return self.run(raw_text, cancel_event=cancel_event)["final_message"]

    def run(
        self, raw_text: str, cancel_event: Optional[threading.Event] = None
    ) -> PipelineState:
        """Process one user request and return the terminal pipeline state."""
        correlation_id = get_correlation_id() or uuid.uuid4().hex
        initial: PipelineState = {
            "raw_text": raw_text,
            "correlation_id": correlation_id,
            "cancel_event": cancel_event,
            "stage": PipelineStage.CLASSIFYING,
            "transitions": [],
            "sub_requests": [],
            "sub_results": [],
        }
        with correlation_id_context(correlation_id):
            logger.info("[pipeline] Handling request (%d chars)", len(raw_text))
            final_state = cast(PipelineState, self._graph.invoke(initial))
            logger.info(
                "[pipeline] Completed via %s",
                " -> ".join(stage.value for stage in final_state.get("transitions", [])),
            )
        return final_state

    # Nodes -----------------------------------------------------------------

    def _classify(self, state: PipelineState) -> dict:
        intent = self._classifier.classify(state["raw_text"])
        try:
            sub_requests = decompose_intent(intent, self._composite_order)
        except EmptyCompositeError:
            logger.warning("[pipeline] Composite intent was empty; treating as unknown")
            intent = UnknownIntent(reason=EMPTY_COMPOSITE_REASON)
            sub_requests = []
        logger.info(
            "[pipeline] Intent %s decomposed into %d sub-requests",
            intent_kind(intent).value,
            len(sub_requests),
        )
        return {
            "intent": intent,
            "sub_requests": sub_requests,
            "stage": PipelineStage.CLASSIFYING,
            "transitions": [PipelineStage.CLASSIFYING],
        }

    def _dispatch(self, state: PipelineState, stage: PipelineStage) -> dict:
        results = self._executor.dispatch(state["sub_requests"], state.get("cancel_event"))
        return {"sub_results": results, "stage": stage, "transitions": [stage]}

    def _single_dispatch(self, state: PipelineState) -> dict:
        return self._dispatch(state, PipelineStage.SINGLE_DISPATCH)

    def _fan_out(self, state: PipelineState) -> dict:
        return self._dispatch(state, PipelineStage.FAN_OUT)

    def _short_circuit(self, state: PipelineState) -> dict:
        intent = state["intent"]
        reason = intent.reason if isinstance(intent, UnknownIntent) else EMPTY_COMPOSITE_REASON
        return {
            "message": unknown_message(reason),
            "stage": PipelineStage.SHORT_CIRCUIT,
            "transitions": [PipelineStage.SHORT_CIRCUIT],
        }

    def _consolidate(self, state: PipelineState) -> dict:
        return {
            "message": consolidate(state["sub_results"]),
            "stage": PipelineStage.CONSOLIDATING,
            "transitions": [PipelineStage.CONSOLIDATING],
        }

    def _post_process(self, state: PipelineState) -> dict:
        return {
            "final_message": apply_post_processing(self._post_processor, state["message"]),
            "stage": PipelineStage.POST_PROCESSING,
            "transitions": [PipelineStage.POST_PROCESSING],
        }

    @staticmethod
    def _done(state: PipelineState) -> dict:
        del state
        return {"stage": PipelineStage.DONE, "transitions": [PipelineStage.DONE]}

    @staticmethod
    def _route_intent(state: Any) -> Hashable:
        s = cast(PipelineState, state)
        kind = intent_kind(s["intent"])
        if kind is IntentKind.UNKNOWN or not s.get("sub_requests"):
            return "short_circuit_node"
        if kind is IntentKind.COMPOSITE:
            return "fan_out_node"
        return "single_dispatch_node"

    def _build_graph(self):
        builder: StateGraph = StateGraph(PipelineState)
        nodes: dict[str, Callable[[Any], dict]] = {
            "classify_node": self._classify,
            "single_dispatch_node": self._single_dispatch,
            "fan_out_node": self._fan_out,
            "short_circuit_node": self._short_circuit,
            "consolidate_node": self._consolidate,
            "post_process_node": self._post_process,
            "done_node": self._done,
        }
        for name, fn in nodes.items():
            builder.add_node(name, wrap_node_with_timing(fn, name))

        builder.set_entry_point("classify_node")
        builder.add_conditional_edges(
            "classify_node",
            self._route_intent,
            ["single_dispatch_node", "fan_out_node", "short_circuit_node"],
        )
        builder.add_edge("single_dispatch_node", "consolidate_node")
        builder.add_edge("fan_out_node", "consolidate_node")
        builder.add_edge("consolidate_node", "post_process_node")
        builder.add_edge("short_circuit_node", "post_process_node")
        builder.add_edge("post_process_node", "done_node")
        builder.set_finish_point("done_node")
        return builder.compile()


__all__ = [
    "EMPTY_COMPOSITE_REASON",
    "IntentPipeline",
    "PipelineStage",
    "PipelineState",
    "decompose_intent",
    "unknown_message",
    "wrap_node_with_timing",
]
