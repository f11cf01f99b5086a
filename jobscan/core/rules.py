# file: jobscan/core/rules.py
"""
The canonical job-scam rule table.

Weights follow a fixed severity ordering:

    payment (30-35) > contact (20-25) >= platform (20) > workload (15) > format (8-10)

Domain signals (TLD denylist, registration age) live in `jobscan.core.domain`.

Patterns run against text produced by `jobscan.core.normalize.normalize_text`,
so they are written lower-case and assume single spaces.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Protocol

from phonenumbers import Leniency, PhoneNumberMatcher

Category = Literal["contact", "payment", "platform", "format", "workload", "domain"]

RULESET_VERSION = "2026.1"


class Matcher(Protocol):
    def search(self, text: str) -> object | None: ...


class PhoneNumberPattern:
    """
    `Matcher` that finds dialable phone numbers using libphonenumber.

    Numbers without a leading `+` are interpreted in `region`.
    """

    def __init__(self, *, region: str = "US", leniency: int = Leniency.VALID) -> None:
        self.region = region
        self.leniency = leniency

    def search(self, text: str) -> object | None:
        if not any(ch.isdigit() for ch in text):
            return None
        for match in PhoneNumberMatcher(text, self.region, leniency=self.leniency):
            return match
        return None

    def __repr__(self) -> str:
        return f"PhoneNumberPattern(region={self.region!r})"


@dataclass(frozen=True, slots=True)
class SignalRule:
    id: str
    pattern: Matcher
    weight: int
    label: str
    category: Category

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _re(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.DOTALL)


class AllOf:
    """`Matcher` that hits only when every pattern occurs somewhere in the text."""

    def __init__(self, *patterns: str) -> None:
        self.patterns = tuple(_re(p) for p in patterns)

    def search(self, text: str) -> object | None:
        match = None
        for pattern in self.patterns:
            match = pattern.search(text)
            if match is None:
                return None
        return match

    def __repr__(self) -> str:
        return f"AllOf({', '.join(p.pattern for p in self.patterns)})"


_FREEMAIL = r"@(?:gmail|yahoo|outlook|hotmail|aol|icloud|proton(?:mail)?)\.(?:com|me)\b"
_COMPANY_SUFFIX = r"\b(?:inc|llc|ltd|corp|corporation|incorporated)\b"
_CHAT_APP = r"(?:whats ?app|telegram|signal(?! processing)|google chat|messenger)"
# The applicant is the one paying; "we pay ... by direct deposit" is payroll.
_APPLICANT_PAYS = (
    r"\byou(?:'ll| will| must| need to| have to| are required to)? (?:pay|send|transfer)\b"
)

RULES: tuple[SignalRule, ...] = (
    # payment / extraction
    SignalRule(
        id="gift_card",
        pattern=_re(r"\bgift ?cards?\b|\b(?:steam|itunes|apple|google play|amazon) (?:gift )?cards?\b"),
        weight=35,
        label="gift card payment",
        category="payment",
    ),
    SignalRule(
        id="crypto",
        pattern=_re(
            r"\b(?:crypto(?:currency)?|bitcoin|btc|usdt|tether|ethereum|binance)\b|\bwallet address\b"
        ),
        weight=30,
        label="cryptocurrency payment",
        category="payment",
    ),
    SignalRule(
        id="wire_transfer",
        pattern=_re(r"\bwire transfer\b|\bwestern union\b|\bmoneygram\b"),
        weight=30,
        label="wire transfer payment",
        category="payment",
    ),
    SignalRule(
        id="p2p_payment",
        pattern=_re(r"\b(?:zelle|venmo|cash ?app|paypal)\b"),
        weight=30,
        label="peer-to-peer payment app",
        category="payment",
    ),
    SignalRule(
        id="training_fee",
        pattern=_re(r"\b(?:training|onboarding|starter kit) (?:fees?|costs?|deposit)\b"),
        weight=30,
        label="training fee",
        category="payment",
    ),
    SignalRule(
        id="upfront_fee",
        pattern=_re(
            r"\b(?:application|registration|processing|background check|background|activation) fees?\b"
            r"|\bupfront (?:fee|payment|deposit)\b"
            r"|" + _APPLICANT_PAYS + r".{0,20}\b(?:fee|(?<!direct )deposit)\b"
            r"|\$\d+ (?:to|for) (?:apply|application|register)\b"
        ),
        weight=30,
        label="upfront fee",
        category="payment",
    ),
    SignalRule(
        id="equipment_check",
        pattern=_re(
            r"\bcashier'?s? che(?:ck|que)\b|\b(?:send|mail) you a che(?:ck|que)\b"
            r"|\b(?<!direct )deposit (?:the |this |our |a |your )?che(?:ck|que)\b"
            r"|\b(?:purchase|buy|order)\b.{0,30}"
            r"\b(?:laptop|home office|equipment|software|workstation|supplies)\b"
        ),
        weight=30,
        label="equipment purchase or check deposit",
        category="payment",
    ),
    SignalRule(
        id="sensitive_data",
        pattern=_re(
            r"\b(?:ssn|social security (?:number|card))\b|\b(?:routing|bank account) number\b"
            r"|\b(?:front|back) of (?:your )?(?:id|driver'?s? license|passport)\b"
        ),
        weight=30,
        label="bank or identity details request",
        category="payment",
    ),
    # off-platform contact
    SignalRule(
        id="whatsapp",
        pattern=_re(r"\bwhats ?app\b"),
        weight=25,
        label="whatsapp contact",
        category="contact",
    ),
    SignalRule(
        id="telegram",
        pattern=_re(r"\btelegram\b"),
        weight=25,
        label="telegram contact",
        category="contact",
    ),
    SignalRule(
        id="signal_app",
        pattern=_re(r"\bsignal (?:app|messenger)\b|\b(?:on|via|through) signal\b(?! processing)"),
        weight=25,
        label="signal contact",
        category="contact",
    ),
    SignalRule(
        id="text_me",
        pattern=_re(r"\b(?:text|message|sms|dm) (?:me|us)\b"),
        weight=20,
        label="text me contact",
        category="contact",
    ),
    SignalRule(
        id="phone_number",
        pattern=PhoneNumberPattern(),
        weight=20,
        label="phone number in post",
        category="contact",
    ),
    # hiring process moved off-platform
    SignalRule(
        id="chat_interview",
        pattern=_re(r"\binterview\b.{0,40}\b" + _CHAT_APP + r"\b|\b" + _CHAT_APP + r" interview\b"),
        weight=20,
        label="chat-app interview",
        category="platform",
    ),
    SignalRule(
        id="verification_code",
        pattern=_re(r"\b(?:verification|verify|security) (?:code|otp)\b|\botp\b"),
        weight=20,
        label="verification code request",
        category="platform",
    ),
    # workload / pressure
    SignalRule(
        id="no_interview",
        pattern=_re(r"\bno interviews?\b|\binstant hire\b|\bhired on the spot\b"),
        weight=15,
        label="no-interview hiring",
        category="workload",
    ),
    SignalRule(
        id="immediate_start",
        pattern=_re(r"\bstart (?:immediately|today|right away|asap)\b|\burgent(?:ly)? hir(?:e|ing)\b"),
        weight=15,
        label="immediate start pressure",
        category="workload",
    ),
    SignalRule(
        id="daily_pay",
        pattern=_re(
            r"\$ ?\d{3,4}(?:\.\d{2})? ?(?:/|per|a|each)? ?(?:day|daily)\b"
            r"|\b(?:paid|pay|payout) daily\b|\bdaily (?:pay|payout)\b"
        ),
        weight=15,
        label="unrealistic daily pay",
        category="workload",
    ),
    SignalRule(
        id="too_easy",
        pattern=_re(
            r"\bno (?:prior )?experience (?:needed|required|necessary)\b"
            r"|\b(?:work from home|remote)\b.{0,40}\b(?:simple|easy)\b"
            r"|\bguaranteed (?:income|earnings|pay|salary)\b"
        ),
        weight=15,
        label="too-easy remote work",
        category="workload",
    ),
    # format / identity
    SignalRule(
        id="freemail_company",
        pattern=AllOf(_FREEMAIL, _COMPANY_SUFFIX),
        weight=10,
        label="free email for a named company",
        category="format",
    ),
    SignalRule(
        id="link_shortener",
        pattern=_re(r"\b(?:bit\.ly|tinyurl\.com|t\.co|goo\.gl|ow\.ly|is\.gd|cutt\.ly|rebrand\.ly|shorturl\.at)/"),
        weight=10,
        label="link shortener",
        category="format",
    ),
    SignalRule(
        id="excessive_punctuation",
        pattern=_re(r"[!?]{3,}|\${3,}"),
        weight=8,
        label="excessive punctuation",
        category="format",
    ),
    SignalRule(
        id="short_big_promise",
        pattern=_re(
            r"\A(?=.{1,160}\Z)"
            r"(?=.*(?:\bearn\b|\$ ?\d|\bguaranteed\b|\bincome\b|\beasy money\b|\bget rich\b))"
        ),
        weight=8,
        label="short post with big promises",
        category="format",
    ),
)

RULE_LABELS: frozenset[str] = frozenset(r.label for r in RULES)
