"""
SDK for ReFAQ.

Provides the remote chat-completion adapter.
"""

from .completion_client import CompletionResult, FailureReason, RemoteCompletionClient

__all__ = ["CompletionResult", "FailureReason", "RemoteCompletionClient"]
