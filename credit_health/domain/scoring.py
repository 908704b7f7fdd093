"""Credit factor scoring model - deterministic weighted score estimate"""

import math
from typing import Dict
from credit_health.domain.models import (
    CreditAssessment,
    CreditMixRating,
    DerogatorySummary,
    PaymentHistoryRating,
    ScoreFactor,
    ScoreFactorBreakdown,
)

MIN_SCORE = 300
MAX_SCORE = 850
BASELINE_SCORE = 500

PAYMENT_HISTORY_POINTS: Dict[PaymentHistoryRating, int] = {
    PaymentHistoryRating.EXCELLENT: 35,
    PaymentHistoryRating.GOOD: 30,
    PaymentHistoryRating.FAIR: 20,
    PaymentHistoryRating.POOR: 10,
    PaymentHistoryRating.UNKNOWN: 0,
}

CREDIT_MIX_POINTS: Dict[CreditMixRating, int] = {
    CreditMixRating.EXCELLENT: 10,
    CreditMixRating.GOOD: 8,
    CreditMixRating.LIMITED: 5,
    CreditMixRating.POOR: 2,
    CreditMixRating.UNKNOWN: 0,
}

COLLECTIONS_PENALTY = -50
BANKRUPTCY_PENALTY = -100
FORECLOSURE_PENALTY = -80

HISTORY_CAP_MONTHS = 120


def credit_utilization(balance: float, limit: float) -> float:
    """
    Revolving utilization as a percentage.

    A non-positive limit yields 0 rather than a division error, and a
    negative balance is floored at 0.
    """
    if limit <= 0:
        return 0.0
    # balance * 100 first: the 10% and 30% bucket edges stay exact
    try:
        return max(0.0, balance * 100 / limit)
    except OverflowError:
        return math.inf if balance > 0 else 0.0


def payment_history_score(rating: PaymentHistoryRating) -> int:
    return PAYMENT_HISTORY_POINTS.get(PaymentHistoryRating.parse(rating), 0)


def utilization_score(utilization: float) -> int:
    """30 points at or below 10%, 25 up to 30%, 15 above"""
    if utilization > 30:
        return 15
    elif utilization > 10:
        return 25
    return 30


def history_length_score(months: int) -> float:
    """Linear ramp reaching the 15 point cap at 10 years"""
    # Cap months before dividing; huge integers cannot be converted to float
    return min(max(0, months), HISTORY_CAP_MONTHS) / HISTORY_CAP_MONTHS * 15


def credit_mix_score(rating: CreditMixRating) -> int:
    return CREDIT_MIX_POINTS.get(CreditMixRating.parse(rating), 0)


def inquiry_score(inquiries: int) -> int:
    """Each hard inquiry costs 2 points, floored at 0"""
    return max(0, 10 - max(0, inquiries) * 2)


def derogatory_impact(assessment: CreditAssessment) -> int:
    """Combined penalty; flags are independent and additive"""
    impact = 0
    if assessment.has_collections:
        impact += COLLECTIONS_PENALTY
    if assessment.has_bankruptcy:
        impact += BANKRUPTCY_PENALTY
    if assessment.has_foreclosure:
        impact += FORECLOSURE_PENALTY
    return impact


def clamp_score(raw: float) -> int:
    """Round half-up and clamp into the [300, 850] score range"""
    return max(MIN_SCORE, min(MAX_SCORE, math.floor(raw + 0.5)))


def compute_factors(assessment: CreditAssessment) -> ScoreFactorBreakdown:
    """
    Map a credit assessment to an estimated score and factor breakdown.

    Scoring weights (points added to a 500 baseline):
    - 35: Payment history
    - 30: Credit utilization
    - 15: Credit history length
    - 10: Credit mix
    - 10: New credit inquiries

    Derogatory marks are subtracted on top and reported separately.
    Never raises: malformed values contribute zero points.
    """
    payment = payment_history_score(assessment.payment_history)
    utilization = utilization_score(
        credit_utilization(assessment.total_credit_balance, assessment.total_credit_limit)
    )
    history = history_length_score(assessment.credit_history_length)
    mix = credit_mix_score(assessment.credit_mix)
    inquiries = inquiry_score(assessment.new_credit_inquiries)
    derogatory = derogatory_impact(assessment)

    estimated = clamp_score(
        payment + utilization + history + mix + inquiries + derogatory + BASELINE_SCORE
    )

    return ScoreFactorBreakdown(
        estimated_score=estimated,
        factors=[
            ScoreFactor(name="Payment History", impact=payment, max_impact=35, percentage=35),
            ScoreFactor(name="Credit Utilization", impact=utilization, max_impact=30, percentage=30),
            ScoreFactor(name="Credit History Length", impact=history, max_impact=15, percentage=15),
            ScoreFactor(name="Credit Mix", impact=mix, max_impact=10, percentage=10),
            ScoreFactor(name="New Credit Inquiries", impact=inquiries, max_impact=10, percentage=10),
        ],
        derogatory=DerogatorySummary(
            collections=assessment.has_collections,
            bankruptcy=assessment.has_bankruptcy,
            foreclosure=assessment.has_foreclosure,
            total_impact=derogatory,
        ),
    )
