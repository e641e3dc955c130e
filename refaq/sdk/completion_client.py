"""
Remote chat-completion client.

Wraps an OpenAI-compatible endpoint and reports the outcome as a
CompletionResult instead of raising, so callers can branch on the failure tag.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    OpenAI,
)

from ..config.loader import RemoteConfig
from ..core.errors import ConfigurationError, NetworkError, ProtocolError

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are a Re Protocol expert and calculator. Keep responses SHORT and focused.

RULES:
- ONLY English responses
- ONLY Re Protocol topics (reUSD, reUSDe, yields, security, getting started)
- MAX 2-3 sentences per response
- If off-topic: "I only help with Re Protocol questions."
- ONLY add links when user asks for "more details", "documentation", "how to", or "getting started"
- Links to add when appropriate:
  * For general info: "For more details, visit https://re.xyz/"
  * For technical docs: "For detailed information, check https://docs.re.xyz/"

CALCULATOR FEATURES:
- I can calculate yields, returns, and projections for reUSD and reUSDe
- reUSD (Basis-Plus): 6%-9%+ APY (Delta-neutral ETH basis + T-bills + 250bps spread)
- reUSDe (Insurance Alpha): 16%-25% APY (Insurance underwriting yields)
- I can help with deposit calculations, APY estimates, and risk assessments
- I can compare different strategies and show potential earnings
- Ask me: "Calculate my yield for $1000 in reUSDe" or "What's the difference between reUSD and reUSDe returns?"

Be concise and helpful."""


class FailureReason(Enum):
    """Why a remote completion produced no usable text."""
    NOT_CONFIGURED = "not_configured"
    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class CompletionResult:
    """Either completion text or a tagged failure, never both."""
    text: Optional[str] = None
    failure: Optional[FailureReason] = None
    detail: str = ""

    def __post_init__(self):
        if (self.text is None) == (self.failure is None):
            raise ValueError("exactly one of text or failure must be set")

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, text: str) -> "CompletionResult":
        return cls(text=text)

    @classmethod
    def failed(cls, reason: FailureReason, detail: str = "") -> "CompletionResult":
        return cls(failure=reason, detail=detail)


class RemoteCompletionClient:
    """Single-shot chat-completion adapter.

    One request per call, no retries, bounded by the configured timeout.
    """

    def __init__(self, config: Optional[RemoteConfig] = None, api_key: Optional[str] = None):
        """Initialize the client.

        Args:
            config: Endpoint settings (defaults to RemoteConfig())
            api_key: Credential; read from the environment variable named in
                the config when omitted
        """
        self.config = config or RemoteConfig()
        self.api_key = api_key if api_key is not None else self.config.api_key
        self._client: Optional[OpenAI] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                max_retries=0
            )
        return self._client

    def complete(self, user_text: str) -> CompletionResult:
        """Ask the remote model to answer ``user_text``.

        Returns:
            CompletionResult with the answer, or the failure tag and detail
        """
        try:
            text = self._request(user_text)
        except ConfigurationError as e:
            return CompletionResult.failed(FailureReason.NOT_CONFIGURED, str(e))
        except NetworkError as e:
            reason = FailureReason.TIMEOUT if e.timed_out else FailureReason.NETWORK
            return CompletionResult.failed(reason, str(e))
        except ProtocolError as e:
            reason = FailureReason.HTTP_STATUS if e.status_code is not None else FailureReason.MALFORMED
            return CompletionResult.failed(reason, str(e))
        return CompletionResult.success(text)

    def _request(self, user_text: str) -> str:
        """Perform the completion call.

        Raises:
            ConfigurationError: If no API key is configured
            NetworkError: If the endpoint can't be reached or times out
            ProtocolError: On a non-success status or an unusable payload
        """
        if not self.configured:
            raise ConfigurationError("Remote API key not configured")

        logger.debug("Calling %s with model %s", self.config.base_url, self.config.model)
        try:
            response = self._get_client().chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_text},
                ],
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                stream=False
            )
        except APITimeoutError as e:
            raise NetworkError(f"Request timed out after {self.config.timeout}s", timed_out=True) from e
        except APIConnectionError as e:
            raise NetworkError(f"Connection failed: {e}") from e
        except APIStatusError as e:
            raise ProtocolError(f"Remote API error: {e.status_code}", status_code=e.status_code) from e
        except APIError as e:
            raise ProtocolError(f"Invalid response: {e}") from e

        choices = getattr(response, "choices", None)
        if not choices:
            raise ProtocolError("No choices in response")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise ProtocolError("Empty completion content")

        return content.strip()

    def probe(self) -> bool:
        """Check connectivity by listing models.

        Diagnostic only; never raises.
        """
        if not self.configured:
            logger.info("Connectivity probe skipped - no API key configured")
            return False

        try:
            self._get_client().models.list()
        except APIError as e:
            logger.warning("Connectivity probe failed: %s", e)
            return False
        except Exception as e:
            logger.warning("Connectivity probe error: %s", e)
            return False

        logger.info("Connectivity probe succeeded for %s", self.config.base_url)
        return True
