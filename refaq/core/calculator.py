"""
Yield projections for the two protocol strategies.

Handles amount extraction from free text and deterministic return estimates.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, getcontext, localcontext
from typing import Dict, List, Optional

from .errors import InputError


@dataclass(frozen=True)
class Strategy:
    """A yield product with fixed APY bounds."""
    key: str
    name: str
    apy_low: Decimal   # Lower APY bound as a fraction
    apy_high: Decimal  # Upper APY bound as a fraction
    apy_label: str
    risk_label: str
    blurb: str


@dataclass(frozen=True)
class YieldQuery:
    """A parsed calculation request."""
    amount: Decimal
    strategy_filter: Optional[Strategy] = None
    wants_comparison: bool = False


@dataclass(frozen=True)
class YieldProjection:
    """Projected returns of one strategy for one amount."""
    strategy: Strategy
    annual_low: Decimal
    annual_high: Decimal
    monthly: Decimal
    daily: Decimal

    @property
    def annual_mean(self) -> Decimal:
        with _precise(self.annual_high):
            return (self.annual_low + self.annual_high) / 2

    @property
    def annual_range(self) -> Decimal:
        with _precise(self.annual_high):
            return self.annual_high - self.annual_low


BASIS_PLUS = Strategy(
    key="reusd",
    name="reUSD (Basis-Plus)",
    apy_low=Decimal("0.06"),
    apy_high=Decimal("0.09"),
    apy_label="6% - 9%+",
    risk_label="Low (Principal Protected)",
    blurb="Delta-neutral ETH basis + T-bills + 250bps spread."
)

INSURANCE_ALPHA = Strategy(
    key="reusde",
    name="reUSDe (Insurance Alpha)",
    apy_low=Decimal("0.16"),
    apy_high=Decimal("0.25"),
    apy_label="16% - 25%",
    risk_label="Higher (First Loss Position)",
    blurb="Insurance underwriting yields with higher risk."
)

STRATEGIES: Dict[str, Strategy] = {
    BASIS_PLUS.key: BASIS_PLUS,
    INSURANCE_ALPHA.key: INSURANCE_ALPHA,
}

COMPARISON_MARKERS = ("compare", "difference", "vs")

AMOUNT_PROMPT = (
    "Please specify an amount! For example: 'Calculate my yield for $1000' "
    "or 'What's the return for $5000 in reUSDe?'"
)
INVALID_AMOUNT_PROMPT = "Please provide a valid amount greater than 0."

_AMOUNT_RE = re.compile(r"\d+")
_CENT = Decimal("0.01")

# Digits kept beyond the integer part so cents stay exact for any amount.
_EXTRA_DIGITS = 20


def _precise(value: Decimal):
    """Decimal context with enough precision for value down to the cent."""
    context = getcontext().copy()
    context.prec = max(context.prec, value.adjusted() + _EXTRA_DIGITS)
    return localcontext(context)


def money(value: Decimal) -> str:
    """Format a value as dollars with 2 decimals."""
    with _precise(value):
        return f"${value.quantize(_CENT, rounding=ROUND_HALF_UP):,.2f}"


def parse_query(text: str) -> YieldQuery:
    """Parse a calculation request from free text.

    The first integer literal is the amount. Mentioning reUSDe selects
    Insurance Alpha, mentioning only reUSD selects Basis-Plus.

    Args:
        text: Raw user question

    Returns:
        Parsed YieldQuery

    Raises:
        InputError: If the text has no digits or the amount is not positive
    """
    match = _AMOUNT_RE.search(text)
    if match is None:
        raise InputError(AMOUNT_PROMPT)

    amount = Decimal(match.group())
    if amount <= 0:
        raise InputError(INVALID_AMOUNT_PROMPT)

    lowered = text.lower()
    strategy_filter = None
    if "reusd" in lowered and "reusde" not in lowered:
        strategy_filter = BASIS_PLUS
    if "reusde" in lowered:
        strategy_filter = INSURANCE_ALPHA

    return YieldQuery(
        amount=amount,
        strategy_filter=strategy_filter,
        wants_comparison=any(marker in lowered for marker in COMPARISON_MARKERS)
    )


def project(strategy: Strategy, amount: Decimal) -> YieldProjection:
    """Project annual, monthly and daily returns for an amount.

    Monthly and daily figures are derived from the mean of the annual bounds.
    """
    with _precise(amount):
        annual_low = amount * strategy.apy_low
        annual_high = amount * strategy.apy_high
        mean = (annual_low + annual_high) / 2
        return YieldProjection(
            strategy=strategy,
            annual_low=annual_low,
            annual_high=annual_high,
            monthly=mean / 12,
            daily=mean / 365
        )


class YieldCalculator:
    """Turns calculation questions into formatted projections."""

    def calculate(self, text: str) -> str:
        """Answer a calculation question.

        Never raises for bad input; a missing or invalid amount yields a
        prompt asking for one.
        """
        try:
            query = parse_query(text)
        except InputError as e:
            return str(e)
        return self.render(query)

    def render(self, query: YieldQuery) -> str:
        """Format projections for a parsed query."""
        with _precise(query.amount):
            if query.wants_comparison:
                return _format_comparison(query.amount)
            if query.strategy_filter is not None:
                return _format_single(project(query.strategy_filter, query.amount), query.amount)
            return _format_overview(query.amount)

    def projections(self, amount: Decimal) -> List[YieldProjection]:
        """Projections for every strategy, lower APY first."""
        return [project(strategy, amount) for strategy in STRATEGIES.values()]


def _format_amount(amount: Decimal) -> str:
    return f"${amount:,.0f}"


def _format_single(projection: YieldProjection, amount: Decimal) -> str:
    strategy = projection.strategy
    return (
        f"**{strategy.name} Calculator - {_format_amount(amount)}:**\n\n"
        f"**Annual Returns:** {money(projection.annual_low)} - {money(projection.annual_high)}\n"
        f"**Monthly:** {money(projection.monthly)}\n"
        f"**Daily:** {money(projection.daily)}\n"
        f"**APY Range:** {strategy.apy_label}\n"
        f"**Risk Level:** {strategy.risk_label}\n\n"
        f"*{strategy.blurb}*"
    )


def _format_comparison(amount: Decimal) -> str:
    basis = project(BASIS_PLUS, amount)
    alpha = project(INSURANCE_ALPHA, amount)
    advantage = alpha.annual_mean - basis.annual_mean

    sections = [f"**Strategy Comparison Calculator - {_format_amount(amount)}:**"]
    for projection in (basis, alpha):
        strategy = projection.strategy
        sections.append(
            f"**{strategy.name}:**\n"
            f"• Annual: {money(projection.annual_low)} - {money(projection.annual_high)} "
            f"(Range: {money(projection.annual_range)})\n"
            f"• APY: {strategy.apy_label}\n"
            f"• Risk: {strategy.risk_label}"
        )
    sections.append(f"**Difference:** reUSDe averages {money(advantage)} more annually")
    sections.append("*Choose reUSD for stability, reUSDe for higher returns.*")
    return "\n\n".join(sections)


def _format_overview(amount: Decimal) -> str:
    sections = [f"**Re Protocol Calculator - {_format_amount(amount)}:**"]
    for projection in (project(BASIS_PLUS, amount), project(INSURANCE_ALPHA, amount)):
        strategy = projection.strategy
        sections.append(
            f"**{strategy.name}:**\n"
            f"Annual: {money(projection.annual_low)} - {money(projection.annual_high)}\n"
            f"Monthly: {money(projection.monthly)}\n"
            f"Daily: {money(projection.daily)}\n"
            f"APY: {strategy.apy_label}\n"
            f"Risk: {strategy.risk_label}"
        )
    sections.append("*Yields based on official Re Protocol documentation.*")
    return "\n\n".join(sections)
