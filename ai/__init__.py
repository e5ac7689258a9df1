"""
Manara AI Module - Advisory Only
==================================
The assistant reads a snapshot of the ledger and answers in free
text. It CANNOT commit state.
"""

from ai.assistant import (
    AssistantBackend,
    AssistantGateway,
    AssistantMode,
    ChatMessage,
    GroundingUrl,
    build_ledger_context,
)

__all__ = [
    "AssistantBackend",
    "AssistantGateway",
    "AssistantMode",
    "ChatMessage",
    "GroundingUrl",
    "build_ledger_context",
]
