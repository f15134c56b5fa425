"""Deterministic consolidation of sub-results into one user-facing message."""

from typing import Iterable, Sequence, cast

from intent_relay.core.intents import ErrorKind, SubResult

SECTION_SEPARATOR = "\n\n"
ERROR_SEPARATOR = "; "
ERRORS_HEADER = "Errors: "
CLARIFY_FALLBACK_MESSAGE = (
    "I couldn't work out what you'd like me to do. Could you clarify your request?"
)


def partition_results(results: Iterable[SubResult]) -> tuple[list[str], list[str]]:
    """Split results into success messages and error details, preserving order."""
    messages: list[str] = []
    errors: list[str] = []
    for result in results:
        if result.is_success:
            messages.append(result.message or "")
        else:
            errors.append(result.error_detail or "")
    return messages, errors


def consolidate(results: Sequence[SubResult]) -> str:
    """Join successes with blank lines and append an ``Errors:`` section if needed.

    Preformatted blocks such as ASCII art pass through untouched; only the
    separators between results are added here.
    """
    messages, errors = partition_results(results)
    sections: list[str] = []
    if messages:
        sections.append(SECTION_SEPARATOR.join(messages))
    if errors:
        sections.append(ERRORS_HEADER + ERROR_SEPARATOR.join(errors))
    if not sections:
        return CLARIFY_FALLBACK_MESSAGE
    return SECTION_SEPARATOR.join(sections)


def collapse_results(results: Sequence[SubResult]) -> SubResult:
    """Fold nested results into one sub-result for the parent request.

    Any success makes the parent a success carrying the consolidated text.
    When every part failed, the parent fails with the joined details and the
    shared error kind, or ``handler-failure`` when the kinds differ.
    """
    if not results or any(result.is_success for result in results):
        return SubResult.ok(consolidate(results))
    kinds = {result.error_kind for result in results}
    kind = kinds.pop() if len(kinds) == 1 else ErrorKind.HANDLER_FAILURE
    _, errors = partition_results(results)
    return SubResult.err(cast(ErrorKind, kind), ERROR_SEPARATOR.join(errors))


__all__ = [
    "CLARIFY_FALLBACK_MESSAGE",
    "ERRORS_HEADER",
    "collapse_results",
    "consolidate",
    "partition_results",
]
