"""
Keyword document classifier.

Scores raw document text against one keyword profile per document class
(invoice, receipt, offer, prescription, sick note). Each profile is a short
list of regex rules; every rule that hits contributes a named signal. The
profile with the highest score wins, with ties broken by PROFILE_PRIORITY.
"""

import logging
import re
from dataclasses import dataclass, field

from app.schemas.extraction import DocClass

logger = logging.getLogger("ledgerscope.classifier")

OTHER_CONFIDENCE = 0.3
BASE_CONFIDENCE = 0.55
PER_SIGNAL_CONFIDENCE = 0.15
MAX_CONFIDENCE = 0.95


@dataclass(frozen=True)
class SignalRule:
    """One weighted keyword check: a hit adds `label` to the signals and `weight` to the score."""

    pattern: re.Pattern
    label: str
    weight: float = 1.0


def keyword_rule(pattern: str, label: str, weight: float = 1.0) -> SignalRule:
    return SignalRule(re.compile(pattern, re.IGNORECASE), label, weight)


PROFILES: dict[DocClass, tuple[SignalRule, ...]] = {
    DocClass.INVOICE: (
        keyword_rule(r"\binvoice\b", "invoice_keyword"),
        keyword_rule(r"\binvoice\s*(?:number|no\b\.?|#)|\bINV[-\s]?\d{2,}", "invoice_number"),
        keyword_rule(r"\b(?:amount\s+due|balance\s+due|due\s+date|payment\s+terms)\b", "payment_terms"),
    ),
    DocClass.RECEIPT: (
        keyword_rule(r"\breceipt\b", "receipt_keyword"),
        keyword_rule(r"\b(?:paid|payment\s+received|thank\s+you\s+for\s+your\s+(?:purchase|payment))\b", "payment_confirmation"),
        keyword_rule(r"\b(?:cash|change\s+due|card\s+(?:ending|no\b)|visa|mastercard)\b", "tender_type"),
    ),
    DocClass.OFFER: (
        keyword_rule(r"\b(?:quotation|quote|offer|proposal|estimate)\b", "offer_keyword"),
        keyword_rule(r"\b(?:valid\s+(?:until|for)|validity|expires?)\b", "validity_period"),
    ),
    DocClass.PRESCRIPTION: (
        keyword_rule(r"\b(?:prescription|rx)\b", "prescription_keyword"),
        keyword_rule(r"\b(?:\d+\s*mg|dosage|tablets?|capsules?)\b", "dosage"),
        keyword_rule(r"\b(?:pharmacy|pharmacist|physician|dr\.)", "prescriber"),
    ),
    DocClass.SICK_NOTE: (
        keyword_rule(r"\b(?:sick\s+note|sick\s+leave|medical\s+certificate|fit\s+note)\b", "sick_note_keyword"),
        keyword_rule(r"\b(?:unfit\s+for\s+work|incapacit\w*|unable\s+to\s+work)\b", "work_incapacity"),
        keyword_rule(r"\bdiagnos(?:is|ed)\b", "diagnosis"),
    ),
}

# Tie-break order when two profiles score the same
PROFILE_PRIORITY: tuple[DocClass, ...] = (
    DocClass.INVOICE,
    DocClass.RECEIPT,
    DocClass.OFFER,
    DocClass.PRESCRIPTION,
    DocClass.SICK_NOTE,
)


@dataclass(frozen=True)
class ProfileScore:
    doc_class: DocClass
    score: float = 0.0
    signals: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClassificationResult:
    doc_class: DocClass
    confidence: float
    signals: list[str] = field(default_factory=list)


def score_profile(text: str, doc_class: DocClass) -> ProfileScore:
    """Evaluate every rule of one profile against the text."""
    signals: list[str] = []
    score = 0.0
    for rule in PROFILES[doc_class]:
        if rule.pattern.search(text):
            signals.append(rule.label)
            score += rule.weight
    return ProfileScore(doc_class=doc_class, score=score, signals=tuple(signals))


def rank_profiles(text: str) -> list[ProfileScore]:
    """Score all profiles, best first. Equal scores keep PROFILE_PRIORITY order."""
    scores = [score_profile(text, doc_class) for doc_class in PROFILE_PRIORITY]
    return sorted(scores, key=lambda s: (-s.score, PROFILE_PRIORITY.index(s.doc_class)))


def signal_confidence(signal_count: int) -> float:
    return min(MAX_CONFIDENCE, BASE_CONFIDENCE + PER_SIGNAL_CONFIDENCE * signal_count)


def classify_document(text: str) -> ClassificationResult:
    """Classify a document from its raw text."""
    best = rank_profiles(text or "")[0]

    if not best.signals:
        logger.debug("No classification signals, falling back to 'other'")
        return ClassificationResult(doc_class=DocClass.OTHER, confidence=OTHER_CONFIDENCE)

    confidence = round(signal_confidence(len(best.signals)), 4)
    logger.debug(
        "Classified as %s (confidence=%.2f, signals=%s)",
        best.doc_class.value,
        confidence,
        ",".join(best.signals),
    )
    return ClassificationResult(
        doc_class=best.doc_class,
        confidence=confidence,
        signals=list(best.signals),
    )
