"""Shared boundary for leaf handlers: every failure becomes an error sub-result."""

from __future__ import annotations

from typing import Any, Callable, Optional, Type, TypeVar, cast

from openai import APITimeoutError, OpenAI, OpenAIError
from openai.types.chat.chat_completion_message_param import ChatCompletionMessageParam
from pydantic import BaseModel, ValidationError

from intent_relay.core.config import config
from intent_relay.core.exceptions import HandlerError, RequestCancelledError
from intent_relay.core.intents import ErrorKind, SubResult
from intent_relay.core.logging import get_logger
from intent_relay.services.fan_out import is_cancelled
from intent_relay.services.openai_utils import completion_text, log_openai_usage

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class LeafHandler:
    """Template for handlers: subclasses implement :meth:`generate`.

    :meth:`execute` is the boundary the executor calls. It never raises; the
    failure category is inferred from the exception type and the detail is
    prefixed with :attr:`failure_label`.
    """

    failure_label = "Request failed"

    def __init__(self, client: OpenAI, *, model: Optional[str] = None) -> None:
        self._client = client
        self._model = model or config.RELAY_HANDLER_MODEL

    def generate(self, description: str) -> str:
        """Produce the handler's message for ``description``."""
        raise NotImplementedError

    def execute(self, description: str) -> SubResult:
        """Run :meth:`generate` and convert its outcome into a :class:`SubResult`."""
        return self.run_guarded(lambda: SubResult.ok(self.generate(description)))

    def run_guarded(self, produce: Callable[[], SubResult]) -> SubResult:
        """Call ``produce`` and convert any exception into an error sub-result."""
        try:
            return produce()
        except RequestCancelledError as exc:
            logger.info("[handler] %s stopped: %s", type(self).__name__, exc)
            return SubResult.err(ErrorKind.CANCELLED, f"{self.failure_label}: {exc}")
        except APITimeoutError as exc:
            return self._failure(ErrorKind.TIMEOUT, exc)
        except OpenAIError as exc:
            return self._failure(ErrorKind.BACKEND_ERROR, exc)
        except (ValidationError, HandlerError) as exc:
            return self._failure(ErrorKind.MALFORMED_OUTPUT, exc)
        except Exception as exc:  # pylint: disable=broad-except
            return self._failure(ErrorKind.HANDLER_FAILURE, exc)

    def _failure(self, kind: ErrorKind, exc: Exception) -> SubResult:
        logger.warning(
            "[handler] %s failed (%s): %s", type(self).__name__, kind.value, exc, exc_info=True
        )
        return SubResult.err(kind, f"{self.failure_label}: {exc}")

    # Backend helpers -------------------------------------------------------

    @staticmethod
    def ensure_not_cancelled(call_site: str) -> None:
        """Raise :class:`RequestCancelledError` if the running request was cancelled."""
        if is_cancelled():
            raise RequestCancelledError(f"request was cancelled before {call_site}")

    def parse_structured(self, prompt: str, schema: Type[ModelT], call_site: str) -> ModelT:
        """Ask the model for ``schema`` and return the parsed instance."""
        self.ensure_not_cancelled(call_site)
        response = self._client.responses.parse(
            model=self._model,
            input=cast(Any, [{"role": "user", "content": prompt}]),
            text_format=schema,
            store=False,
        )
        log_openai_usage(getattr(response, "usage", None), self._model, call_site)
        parsed = getattr(response, "output_parsed", None)
        if not isinstance(parsed, schema):
            raise HandlerError(f"{call_site} returned no parsable output")
        return parsed

    def generate_text(self, prompt: str, call_site: str) -> str:
        """Return the model's free-text answer to ``prompt``."""
        self.ensure_not_cancelled(call_site)
        messages = cast(list[ChatCompletionMessageParam], [{"role": "user", "content": prompt}])
        completion = self._client.chat.completions.create(model=self._model, messages=messages)
        log_openai_usage(getattr(completion, "usage", None), self._model, call_site)
        text = completion_text(completion).strip()
        if not text:
            raise HandlerError(f"{call_site} returned empty text")
        return text


__all__ = ["LeafHandler"]
