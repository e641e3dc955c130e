"""
Canned answers for the local fallback.

One fixed template per Intent. YIELD_CALCULATION has no template because
its answer is computed by the calculator.
"""

from typing import Dict

from .intents import Intent


DOCS_URL = "https://docs.re.xyz/"

RESPONSES: Dict[Intent, str] = {
    Intent.PROTOCOL_OVERVIEW: (
        "The Re Protocol is a decentralized platform that bridges traditional insurance "
        "markets and DeFi. It allows users to deposit stablecoins (USDC, DAI, USDe, sUSDe) "
        "into Insurance Capital Layers (ICL) which allocate capital to fully-collateralized "
        "quota-share reinsurance contracts through licensed insurers. The protocol offers two "
        "main strategies: reUSD (Basis-Plus) for low-volatility yields and reUSDe (Insurance "
        "Alpha) for high underwriting yields. All operations are transparent with on-chain "
        "reporting and daily NAV updates."
    ),
    Intent.TOKEN_COMPARISON: (
        "**reUSDe (Insurance Alpha):**\n"
        "• Accepted Collateral: USDe, sUSDe\n"
        "• Strategy: Insurance underwriting yields (16%-25% APY)\n"
        "• Risk: First loss position, absorbs portfolio deficits\n"
        "• Ideal for: Ethena community wanting high yield via reinsurance\n\n"
        "**reUSD (Basis-Plus):**\n"
        "• Accepted Collateral: USDC, DAI, USDe/sUSDe\n"
        "• Strategy: Delta-neutral ETH basis + T-bills + 250bps spread (6%-9%+ APY)\n"
        "• Risk: Principal protected, senior position\n"
        "• Ideal for: Stablecoin holders seeking steady income without underwriting exposure"
    ),
    Intent.RISK_SECURITY: (
        "**Security & Risk Management:**\n"
        "• All ICLs participate in fully collateralized quota-share reinsurance notes backed "
        "by licensed insurance companies\n"
        "• All collateral is on-chain and held in trust accounts with daily Fireblocks sweeps\n"
        "• Multi-signature wallets for critical operations\n"
        "• Regular third-party audits (Hacken, Certora)\n"
        "• Emergency pause mechanisms and recovery wallets\n"
        "• KYC/AML verification mandatory for all participants\n"
        "• Real-time on-chain reporting via Chainlink oracles"
    ),
    Intent.ELIGIBILITY: (
        "**Eligibility Requirements:**\n"
        "• Global access excluding U.S. and restricted jurisdictions\n"
        "• Restricted countries: U.S., Iran, North Korea, Syria, Russia, Belarus, Cuba\n"
        "• KYC/AML verification is mandatory for all participants\n"
        "• If KYC fails: funds remain in escrow, contact support@re.xyz\n"
        "• Support typically responds within 2-3 business days"
    ),
    Intent.REDEMPTION: (
        "**Redemption Process:**\n\n"
        "**reUSD:**\n"
        "• Instant redemptions from protocol buffer until exhausted\n"
        "• Falls back to quarterly windows when buffer depleted\n"
        "• Curve Finance liquidity pools available\n\n"
        "**reUSDe:**\n"
        "• Quarterly redemption windows only\n"
        "• Pro-rata fulfillment based on available surplus\n"
        "• No instant redemption buffer\n\n"
        "**Liquidity Sources:**\n"
        "• On-chain idle balances\n"
        "• Actuarially released surplus from maturing treaties\n"
        "• Curve Finance pools (reUSD/USDC, reUSDe/sUSDe)"
    ),
    Intent.ADDRESSES: (
        "**Smart Contract Addresses:**\n\n"
        "**reUSD:**\n"
        "• Ethereum: 0x5086bf358635B81D8C47C66d1C8b9E567Db70c72\n"
        "• Avalanche: 0x180aF87b47Bf272B2df59dccf2D76a6eaFa625Bf\n"
        "• Arbitrum: 0x76cE01F0Ef25AA66cC5F1E546a005e4A63B25609\n"
        "• Base: 0x7D214438D0F27AfCcC23B3d1e1a53906aCE5CFEa\n\n"
        "**reUSDe:**\n"
        "• Ethereum: 0xdDC0f880ff6e4e22E4B74632fBb43Ce4DF6cCC5a\n\n"
        "**ICL Addresses:**\n"
        "• Ethereum ICL: 0x4691C475bE804Fa85f91c2D6D0aDf03114de3093\n"
        "• Avalanche ICL: 0xb22a8533e6cd81598f82514a42F0B3161745fbe1\n"
        "• Arbitrum ICL: 0x802eDbB1Ec20548A4388ABC337E4011718eb0291"
    ),
    Intent.GETTING_STARTED: (
        "**Getting Started with Re Protocol:**\n\n"
        "1. **Visit Platform:** Go to app.re.xyz\n"
        "2. **Connect Wallet:** Use MetaMask or compatible wallet\n"
        "3. **Complete KYC:** Submit required documentation\n"
        "4. **Choose Strategy:** Select reUSDe (Insurance Alpha) or reUSD (Basis-Plus)\n"
        "5. **Deposit Assets:** Stake approved tokens (USDC, DAI, USDe, sUSDe)\n"
        "6. **Receive Tokens:** Get corresponding reUSD or reUSDe tokens\n"
        "7. **Monitor Performance:** Track yields and portfolio via dashboard\n\n"
        "**Accepted Tokens:**\n"
        "• Traditional stablecoins: USDC, DAI, AUSD\n"
        "• Ethena tokens: USDe, sUSDe\n\n"
        f"For detailed information, check {DOCS_URL}"
    ),
    Intent.PRICE_NAV: (
        "**Token Price & NAV Updates:**\n\n"
        "• **Update Frequency:** Daily at UTC 00:00\n"
        "• **reUSD Pricing:** Tracks higher of (7-day avg SOFR + 250bps) or "
        "(Ethena basis yield + 250bps)\n"
        "• **reUSDe Pricing:** Compounds daily toward quarterly Target NAV (tNAV)\n"
        "• **Price Feed:** JSON feed pushed on-chain via Chainlink\n"
        "• **Current Prices:** Check api.re.xyz/apy/get-apy\n"
        "• **Transparency:** All calculations and updates are publicly verifiable on-chain"
    ),
    Intent.POINTS: (
        "**Re Points System:**\n\n"
        "**Daily Point Accrual:**\n"
        "• reUSD: 5x multiplier\n"
        "• reUSDe: 5x multiplier\n"
        "• Pendle LP (reUSD|reUSDe): 12x multiplier\n"
        "• Pendle YT (reUSD|reUSDe): 6.5x multiplier\n"
        "• Curve LP pools: 20x multiplier\n"
        "• Morpho borrowing: Continue earning 5x on collateral\n\n"
        "**Example:** 10,000 reUSD tokens = 50,000 points per day\n\n"
        "**Requirements:**\n"
        "• Must hold Re assets to accrue points\n"
        "• Accrual stops when assets leave wallet\n"
        "• KYC compliance required\n"
        "• Points are retained even if you exit and return later"
    ),
    Intent.ACCEPTED_TOKENS: (
        "**Accepted Tokens for Deposit:**\n\n"
        "**Traditional Stablecoins:**\n"
        "• USDC\n"
        "• DAI\n"
        "• AUSD\n"
        "• Others (check app for latest list)\n\n"
        "**Ethena Tokens:**\n"
        "• USDe\n"
        "• sUSDe\n\n"
        "**Token Selection:**\n"
        "• reUSDe (Insurance Alpha): Accepts USDe, sUSDe\n"
        "• reUSD (Basis-Plus): Accepts USDC, DAI, USDe/sUSDe\n\n"
        "**Check Latest:** Visit app.re.xyz/reusd or app.re.xyz/reusde for most "
        "up-to-date accepted assets"
    ),
    Intent.HOW_IT_WORKS: (
        "**How Re Protocol Works:**\n\n"
        "1. **Capital Staking:** Users deposit stablecoins into ICL smart contracts\n"
        "2. **Token Minting:** Receive reUSD (principal protected) or reUSDe (profit sharing)\n"
        "3. **Daily Sweeps:** Idle funds move to Fireblocks vaults for secure custody\n"
        "4. **Surplus Notes:** Capital deployed to licensed reinsurers via legally binding "
        "agreements\n"
        "5. **Trust Accounts:** Funds held in §114 Trust accounts providing regulatory collateral\n"
        "6. **Yield Generation:** Earn from reinsurance premiums or delta-neutral strategies\n"
        "7. **Transparency:** All operations recorded on-chain with real-time reporting\n"
        "8. **Redemptions:** Instant (reUSD) or quarterly (reUSDe) based on available liquidity"
    ),
    Intent.REINSURANCE_BASICS: (
        "**What is Reinsurance?**\n\n"
        "Reinsurance is 'insurance for insurance companies' - a mechanism where insurance "
        "companies transfer part of their risk portfolio to reinsurers. This allows insurers to:\n\n"
        "• **Diversify Risk:** Reduce exposure to concentrated risks like natural disasters\n"
        "• **Enhance Capital Efficiency:** Free up capital to underwrite more policies\n"
        "• **Stabilize Loss Ratios:** Reinsurers absorb extraordinary losses\n\n"
        "**Re Protocol Focus:**\n"
        "• Non-catastrophic, low-volatility, short-duration programs\n"
        "• Auto insurance, commercial liability, property insurance\n"
        "• Collateral typically released after 18 months\n"
        "• Steady, predictable returns from insurance premiums"
    ),
    Intent.SUPPORT: (
        "**Support & Contact Information:**\n\n"
        "**General Support:**\n"
        "• Email: support@re.xyz\n"
        "• Website: re.xyz\n"
        "• Telegram: t.me/re_protocol\n"
        "• Discord: discord.gg/tP2qDjzE\n"
        "• Twitter: @re\n"
        "• LinkedIn: linkedin.com/company/re-protocol\n\n"
        "**KYC Issues:**\n"
        "• If KYC fails: funds remain in escrow\n"
        "• Contact: staking@re.xyz\n"
        "• Response time: 2-3 business days\n"
        "• Can request refund if KYC cannot be completed\n\n"
        "**Emergency:**\n"
        "• Recovery wallet: 0xDf6bF2713b5c7CA724E684657280bC407938F447"
    ),
    Intent.OFF_TOPIC: (
        "I can only help with Re Protocol questions. Please ask about reUSD, reUSDe, "
        "yields, security, or getting started with Re Protocol."
    ),
    Intent.ENGLISH_ONLY: (
        "Please ask your question in English only. I can only respond in English."
    ),
    Intent.UNRECOGNIZED: (
        "I'm here to help with Re Protocol questions and calculations! Ask me about:\n\n"
        "• Token strategies (reUSD vs reUSDe)\n"
        "• Yield calculations and APY\n"
        "• Risk management and security\n"
        "• Getting started and deposits\n"
        "• Redemption processes\n"
        "• Token addresses and contracts\n"
        "• Points system and rewards\n"
        "• Eligibility and KYC requirements\n\n"
        "**Calculator Features:**\n"
        "• Calculate yields for any amount\n"
        "• Compare reUSD vs reUSDe returns\n"
        "• Project earnings over time\n\n"
        "Try: \"Calculate my yield for $1000 in reUSDe\" or "
        "\"What's the difference between reUSD and reUSDe returns?\""
    ),
}


def canned_response(intent: Intent) -> str:
    """Fixed answer for an intent.

    Raises:
        KeyError: For YIELD_CALCULATION, which has no fixed answer
    """
    return RESPONSES[intent]
