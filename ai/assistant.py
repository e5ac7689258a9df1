"""
Manara AI - Assistant Gateway
===============================
Bridge to the external chat assistant. The assistant is advisory
and read-only: it receives a serialized snapshot of the log plus
the user's question, and answers with free text and optional
source citations.

Rules:
- The gateway never mutates the ledger
- Every call runs in a worker thread with an explicit timeout
- A timeout or backend failure is logged and answered with a
  fallback message; it never propagates into ledger code
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Protocol, Tuple

from core.config import get_ledger_settings
from core.primitives.ledger import Transaction

logger = logging.getLogger("manara.ai")

FALLBACK_TEXT = (
    "Sorry, an error occurred while contacting the assistant. "
    "Please try again later."
)
EMPTY_THINK_TEXT = "Sorry, the request could not be processed."
EMPTY_SEARCH_TEXT = "Results retrieved."


class AssistantMode(Enum):
    BASIC = "basic"
    THINK = "think"
    SEARCH = "search"


@dataclass(frozen=True)
class GroundingUrl:
    title: str
    uri: str


@dataclass(frozen=True)
class ChatMessage:
    role: str
    text: str
    grounding_urls: Tuple[GroundingUrl, ...] = ()

    def __post_init__(self):
        if self.role not in ("user", "model"):
            raise ValueError(f"role '{self.role}' not valid.")
        object.__setattr__(
            self,
            "grounding_urls",
            tuple(url for url in self.grounding_urls if url.uri),
        )

    def to_dict(self) -> dict:
        return {
            "role": self.role,
            "text": self.text,
            "groundingUrls": [
                {"title": url.title, "uri": url.uri} for url in self.grounding_urls
            ],
        }


class AssistantBackend(Protocol):
    """Vendor adapter. Implementations may block and may raise."""

    def generate(self, prompt: str, mode: AssistantMode) -> ChatMessage:
        ...


# ══════════════════════════════════════════════════════════════
# CONTEXT
# ══════════════════════════════════════════════════════════════

def build_ledger_context(transactions: Iterable[Transaction]) -> str:
    """Free-text (JSON) rendering of the log for the assistant."""
    return json.dumps(
        [t.to_record() for t in transactions],
        ensure_ascii=False,
        sort_keys=True,
    )


def build_prompt(transactions: Iterable[Transaction], question: str) -> str:
    return (
        f"Current sales and purchases log: {build_ledger_context(transactions)}. "
        f"The user asks: {question}"
    )


# ══════════════════════════════════════════════════════════════
# GATEWAY
# ══════════════════════════════════════════════════════════════

class AssistantGateway:

    def __init__(
        self,
        backend: AssistantBackend,
        timeout_seconds: Optional[float] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        if timeout_seconds is None:
            timeout_seconds = get_ledger_settings().assistant_timeout_seconds
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive.")
        self._backend = backend
        self._timeout = timeout_seconds
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="manara-assistant"
        )

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def ask(
        self,
        question: str,
        transactions: Iterable[Transaction] = (),
        mode: AssistantMode = AssistantMode.BASIC,
    ) -> ChatMessage:
        mode = AssistantMode(mode)
        prompt = build_prompt(tuple(transactions), question)
        future = self._executor.submit(self._backend.generate, prompt, mode)

        try:
            reply = future.result(timeout=self._timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.error(
                f"Assistant call timed out after {self._timeout}s (mode={mode.value})"
            )
            return ChatMessage(role="model", text=FALLBACK_TEXT)
        except Exception:
            logger.exception(f"Assistant backend failed (mode={mode.value})")
            return ChatMessage(role="model", text=FALLBACK_TEXT)

        if reply.text:
            return reply
        if mode == AssistantMode.THINK:
            return ChatMessage(role="model", text=EMPTY_THINK_TEXT)
        if mode == AssistantMode.SEARCH:
            return ChatMessage(
                role="model",
                text=EMPTY_SEARCH_TEXT,
                grounding_urls=reply.grounding_urls,
            )
        return reply

    def ask_about(self, store, question: str, mode: AssistantMode = AssistantMode.BASIC) -> ChatMessage:
        """Ask with the current log of a LedgerStore as context."""
        return self.ask(question, store.transactions(), mode)

    def close(self) -> None:
        self._executor.shutdown(wait=False)
