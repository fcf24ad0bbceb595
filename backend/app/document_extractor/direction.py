"""Payer vs payee direction from textual cues. Pure functions, no state."""

import logging
import re
from dataclasses import dataclass, field

from app.document_extractor.classifier import SignalRule, keyword_rule
from app.schemas.extraction import Direction

logger = logging.getLogger("ledgerscope.direction")

UNKNOWN_CONFIDENCE = 0.4
BASE_CONFIDENCE = 0.6
PER_SIGNAL_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.9

# Cues that the document is addressed to us (we pay it)
INCOMING_RULES: tuple[SignalRule, ...] = (
    keyword_rule(r"\bbill(?:ed)?\s+to\b", "bill_to"),
    keyword_rule(r"\bship\s+to\b", "ship_to"),
    keyword_rule(r"\b(?:amount\s+due|payable)\b", "amount_due"),
)

# Cues that we issued the document (we get paid)
OUTGOING_RULES: tuple[SignalRule, ...] = (
    keyword_rule(r"\bfrom\s*:|\bseller\b|\bsupplier\b", "seller_block"),
    keyword_rule(r"\byour\s+invoice\b", "your_invoice"),
    keyword_rule(r"\bservices\s+rendered\b", "services_rendered"),
)

# Lines following a "bill to" label that still belong to the addressee block
ADDRESSEE_BLOCK_LINES = 3
ADDRESSEE_LABEL = re.compile(r"\b(?:bill(?:ed)?|ship)\s+to\b", re.IGNORECASE)
SENDER_LABEL = re.compile(r"\b(?:from|vendor|seller)\s*[:\-]", re.IGNORECASE)


@dataclass(frozen=True)
class DirectionResult:
    direction: Direction
    confidence: float
    signals: list[str] = field(default_factory=list)


def _matching_labels(text: str, rules: tuple[SignalRule, ...]) -> list[str]:
    return [rule.label for rule in rules if rule.pattern.search(text)]


def _company_in_addressee_block(text: str, company: str) -> bool:
    lines = text.splitlines()
    for i, line in enumerate(lines):
        if ADDRESSEE_LABEL.search(line):
            block = lines[i : i + 1 + ADDRESSEE_BLOCK_LINES]
            if any(company in candidate.lower() for candidate in block):
                return True
    return False


def _company_on_sender_line(text: str, company: str) -> bool:
    return any(
        SENDER_LABEL.search(line) and company in line.lower() for line in text.splitlines()
    )


def classify_direction(text: str, company_name: str | None = None) -> DirectionResult:
    """Decide whether the document is incoming or outgoing.

    Both cue groups are counted independently. When company_name is given, its
    position in the text (addressee block vs sender line) adds one extra cue.
    """
    text = text or ""
    incoming = _matching_labels(text, INCOMING_RULES)
    outgoing = _matching_labels(text, OUTGOING_RULES)

    company = (company_name or "").strip().lower()
    if company:
        if _company_in_addressee_block(text, company):
            incoming.append("company_billed")
        if _company_on_sender_line(text, company):
            outgoing.append("company_is_sender")

    if not incoming and not outgoing:
        return DirectionResult(direction=Direction.UNKNOWN, confidence=UNKNOWN_CONFIDENCE)

    # Ties favor incoming
    if len(incoming) >= len(outgoing):
        direction, winning = Direction.INCOMING, incoming
    else:
        direction, winning = Direction.OUTGOING, outgoing

    confidence = round(min(MAX_CONFIDENCE, BASE_CONFIDENCE + PER_SIGNAL_CONFIDENCE * len(winning)), 4)
    logger.debug(
        "Direction %s (incoming=%d, outgoing=%d)", direction.value, len(incoming), len(outgoing)
    )
    return DirectionResult(direction=direction, confidence=confidence, signals=list(winning))
