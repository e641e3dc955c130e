"""
Response resolution pipeline.

Turns a user question into a displayable answer.

Resolution Order:
1. Rate limit gate - A denied turn gets a quota message and no remote call
2. Remote completion - One attempt, no retries
3. Local fallback - Intent classification, then calculator or canned answer
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .calculator import YieldCalculator
from .content import canned_response
from .errors import RateLimitError
from .intents import Intent, IntentClassifier
from .rate_limiter import RateDecision, RateLimiter
from refaq.config.loader import AppConfig
from refaq.sdk.completion_client import CompletionResult, FailureReason, RemoteCompletionClient
from refaq.storage.repository import UsageStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatMessage:
    """One rendered turn of the conversation."""
    text: str
    is_user: bool
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)


def format_rate_denial(decision: RateDecision) -> str:
    """User-facing text for a denied question, with remaining quota."""
    return (
        "**Rate Limit Reached**\n\n"
        f"{decision.message}\n\n"
        "**Your Usage:**\n"
        f"• Daily: {decision.remaining_daily} questions remaining\n"
        f"• Hourly: {decision.remaining_hourly} questions remaining\n\n"
        "Please try again later!"
    )


class ResponseResolver:
    """Remote-first question answering with a deterministic local fallback."""

    def __init__(
        self,
        client: Optional[RemoteCompletionClient] = None,
        limiter: Optional[RateLimiter] = None,
        classifier: Optional[IntentClassifier] = None,
        calculator: Optional[YieldCalculator] = None
    ):
        """Initialize the resolver.

        Args:
            client: Remote completion client; without one every answer is local
            limiter: Question quota gate used by handle_turn; None disables gating
            classifier: Intent classifier for the local fallback
            calculator: Yield calculator for calculation intents
        """
        self.client = client
        self.limiter = limiter
        self.classifier = classifier or IntentClassifier()
        self.calculator = calculator or YieldCalculator()

    @classmethod
    def from_config(cls, config: AppConfig, store: UsageStore) -> "ResponseResolver":
        """Wire a resolver from application configuration."""
        return cls(
            client=RemoteCompletionClient(config.remote),
            limiter=RateLimiter(store, config.rate_limit)
        )

    def handle_turn(self, user_text: str) -> ChatMessage:
        """Gate, resolve and wrap one user question as a bot message."""
        if self.limiter is not None:
            try:
                self.limiter.acquire()
            except RateLimitError as e:
                return ChatMessage(text=format_rate_denial(e.decision), is_user=False)

        return ChatMessage(text=self.resolve(user_text), is_user=False)

    def resolve(self, user_text: str) -> str:
        """Answer a question, falling back to local rules on any remote failure."""
        result = self._attempt_remote(user_text)

        if result.failure is None:
            if result.text.strip():
                logger.info("Answered remotely")
                return result.text
            logger.info("Remote returned blank text - using local responses")
        elif result.failure is FailureReason.NOT_CONFIGURED:
            logger.debug("Remote not configured - using local responses")
        elif result.failure is FailureReason.TIMEOUT:
            logger.info("Remote timed out (%s) - using local responses", result.detail)
        else:
            logger.info("Remote failed [%s]: %s - using local responses",
                        result.failure.value, result.detail)

        return self.resolve_locally(user_text)

    def resolve_locally(self, user_text: str) -> str:
        """Answer a question from the keyword tables and calculator only."""
        intent = self.classifier.classify(user_text)
        logger.debug("Classified %r as %s", user_text, intent.name)

        if intent is Intent.YIELD_CALCULATION:
            return self.calculator.calculate(user_text)
        return canned_response(intent)

    def _attempt_remote(self, user_text: str) -> CompletionResult:
        if self.client is None:
            return CompletionResult.failed(FailureReason.NOT_CONFIGURED, "no client")
        try:
            return self.client.complete(user_text)
        except Exception as e:
            # the client reports failures as results; anything raised is a bug there
            logger.exception("Remote client raised unexpectedly")
            return CompletionResult.failed(FailureReason.NETWORK, str(e))
