"""
Rule-based intent classification.

Maps a free-form question to a topic using ordered keyword tables.

Evaluation Order:
1. Language gate - Non-English text longer than 3 characters is rejected
2. Business intents - First entry of INTENT_TRIGGERS with a matching trigger wins
3. Off-topic keywords - Generic crypto/finance/chit-chat terms
4. Unrecognized - Falls through to the help menu
"""

import re
from enum import Enum
from typing import FrozenSet, Tuple


class Intent(Enum):
    """Topic categories, declared in match priority order."""
    PROTOCOL_OVERVIEW = "protocol_overview"
    TOKEN_COMPARISON = "token_comparison"
    YIELD_CALCULATION = "yield_calculation"
    RISK_SECURITY = "risk_security"
    ELIGIBILITY = "eligibility"
    REDEMPTION = "redemption"
    ADDRESSES = "addresses"
    GETTING_STARTED = "getting_started"
    PRICE_NAV = "price_nav"
    POINTS = "points"
    ACCEPTED_TOKENS = "accepted_tokens"
    HOW_IT_WORKS = "how_it_works"
    REINSURANCE_BASICS = "reinsurance_basics"
    SUPPORT = "support"
    OFF_TOPIC = "off_topic"
    UNRECOGNIZED = "unrecognized"
    ENGLISH_ONLY = "english_only"


# Order matters: several intents share trigger words, and the earlier entry wins.
INTENT_TRIGGERS: Tuple[Tuple[Intent, Tuple[str, ...]], ...] = (
    (Intent.PROTOCOL_OVERVIEW, (
        "what is re protocol", "protocol overview", "about re protocol",
    )),
    (Intent.TOKEN_COMPARISON, (
        "reusde vs reusd", "reusd vs reusde", "difference between reusde and reusd",
        "difference between reusd and reusde", "token comparison",
    )),
    (Intent.YIELD_CALCULATION, (
        "calculate", "how much", "earn", "yield", "return", "apy", "calculator",
        "projection", "estimate",
    )),
    (Intent.RISK_SECURITY, (
        "risk management", "safe", "security", "audit",
    )),
    (Intent.ELIGIBILITY, (
        "eligible", "eligibility", "who can participate", "kyc", "restricted",
    )),
    (Intent.REDEMPTION, (
        "redemption", "redeem", "withdraw", "liquidity", "exit",
    )),
    (Intent.ADDRESSES, (
        "token address", "contract", "address",
    )),
    (Intent.GETTING_STARTED, (
        "deposit", "how to start", "getting started", "begin",
    )),
    (Intent.PRICE_NAV, (
        "nav", "valuation", "token price", "reusd price", "reusde price",
        "price update", "price feed",
    )),
    (Intent.POINTS, (
        "points", "rewards",
    )),
    (Intent.ACCEPTED_TOKENS, (
        "accepted tokens", "what tokens", "which tokens", "deposit tokens",
    )),
    (Intent.HOW_IT_WORKS, (
        "how it works", "how does it work", "mechanism", "process",
    )),
    (Intent.REINSURANCE_BASICS, (
        "reinsurance", "insurance",
    )),
    (Intent.SUPPORT, (
        "support", "contact", "help", "kyc fail",
    )),
)

# A bare "price" counts as PRICE_NAV only next to one of these; "reusd" also covers "reusde".
PRICE_SUBJECTS: Tuple[str, ...] = ("reusd", "re protocol")

OFF_TOPIC_KEYWORDS: Tuple[str, ...] = (
    "bitcoin", "ethereum", "crypto", "defi", "nft", "trading", "price", "market",
    "coin", "altcoin", "binance", "coinbase", "metamask", "wallet", "personal",
    "life", "weather", "news", "sports", "music", "movie", "game",
)

# Substrings that mark a question as being about the protocol, in any word form.
ENGLISH_DOMAIN_TERMS: Tuple[str, ...] = (
    "protocol", "yield", "apy", "token", "usd", "deposit", "withdraw",
    "security", "risk", "kyc", "eligib", "points", "address", "contract",
    "reinsurance", "insurance", "redemption", "calculat",
)

# Whole words only; short function words would otherwise match inside gibberish.
ENGLISH_WORDS: FrozenSet[str] = frozenset((
    "what", "how", "when", "where", "why", "which", "who", "re", "is", "are",
    "the", "a", "an", "can", "do", "does", "i", "my", "me", "you", "your", "it",
    "for", "to", "of", "in", "on", "and", "or", "with", "about", "tell", "show",
    "give", "much", "many", "get", "today", "price", "help", "hello", "hi",
    "thanks", "please", "there", "this", "that", "should", "will", "would",
    "vs", "compare", "difference", "earn", "return", "returns", "safe", "start",
))

_WORD_RE = re.compile(r"[a-z]+")


def is_english(text: str) -> bool:
    """Whether the text contains any recognised English vocabulary.

    Texts of 3 characters or fewer always pass.
    """
    lowered = text.lower()
    if len(lowered.strip()) <= 3:
        return True
    if any(term in lowered for term in ENGLISH_DOMAIN_TERMS):
        return True
    return any(word in ENGLISH_WORDS for word in _WORD_RE.findall(lowered))


def _asks_token_price(lowered: str) -> bool:
    return "price" in lowered and any(subject in lowered for subject in PRICE_SUBJECTS)


def classify_intent(text: str) -> Intent:
    """Classify a question into an Intent.

    Args:
        text: Raw user question

    Returns:
        The first matching Intent in priority order, ENGLISH_ONLY when the
        language gate rejects the text, OFF_TOPIC for unrelated subjects,
        or UNRECOGNIZED when nothing matches
    """
    if not is_english(text):
        return Intent.ENGLISH_ONLY

    lowered = text.lower()
    for intent, triggers in INTENT_TRIGGERS:
        if any(trigger in lowered for trigger in triggers):
            return intent
        if intent is Intent.PRICE_NAV and _asks_token_price(lowered):
            return intent

    if any(keyword in lowered for keyword in OFF_TOPIC_KEYWORDS):
        return Intent.OFF_TOPIC

    return Intent.UNRECOGNIZED


class IntentClassifier:
    """Callable wrapper over classify_intent, injectable into the resolver."""

    def classify(self, text: str) -> Intent:
        return classify_intent(text)
