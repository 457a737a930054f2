"""
Batch risk scorer - turns one ingested batch into a 0..100 safety score and a tier
"""
from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from logshield.models.analysis_result import AnalysisResult, AnalysisStats, RiskTier
from logshield.models.record import AttackType, ImpactLevel, Record

BREACH_PENALTY = 25
ATTEMPT_PENALTY = 2
HIGH_RISK_PENALTY = 5
MAX_SCORE = 100

RECOMMENDATIONS = {
    RiskTier.CRITICAL: "DANGER: Critical breaches detected. Do not share or use this file without redaction. Immediate forensic analysis required.",
    RiskTier.CAUTION: "WARNING: Suspicious activity found. Review logs carefully before sharing. Potential targeted attacks identified.",
    RiskTier.SAFE: "SAFE: No significant threats detected. File appears clean and safe to share.",
}


@dataclass
class _Tally:
    score: int = MAX_SCORE
    breaches: int = 0
    attempts: int = 0
    high_risk: int = 0


# (predicate, tier), first match wins; the last entry always matches
TIER_RULES: List[Tuple[Callable[[_Tally], bool], RiskTier]] = [
    (lambda t: t.breaches > 0 or t.score < 50, RiskTier.CRITICAL),
    (lambda t: t.attempts > 5 or t.high_risk > 0 or t.score < 85, RiskTier.CAUTION),
    (lambda t: True, RiskTier.SAFE),
]


class RiskScorer:
    """Per-batch scorer; never accumulates across batches."""

    def __init__(self, tier_rules=None):
        self.tier_rules = tier_rules or TIER_RULES

    def _tally(self, records: Iterable[Record]) -> _Tally:
        t = _Tally()
        for rec in records:
            if rec.impact == ImpactLevel.BREACH:
                t.score -= BREACH_PENALTY
                t.breaches += 1
            elif rec.impact == ImpactLevel.ATTEMPT:
                t.score -= ATTEMPT_PENALTY
                t.attempts += 1
            elif rec.attack_type in (AttackType.RCE, AttackType.SQLI):
                # Unreachable while impact comes from classify_impact (Safe implies
                # attack type None). Kept for records supplied pre-classified.
                t.score -= HIGH_RISK_PENALTY
                t.high_risk += 1
        t.score = max(0, min(MAX_SCORE, round(t.score)))
        return t

    def tier_for(self, tally: _Tally) -> RiskTier:
        for predicate, tier in self.tier_rules:
            if predicate(tally):
                return tier
        return RiskTier.SAFE

    def score(self, records: Iterable[Record]) -> AnalysisResult:
        tally = self._tally(records)
        tier = self.tier_for(tally)
        return AnalysisResult(
            score=tally.score,
            risk=tier,
            recommendation=RECOMMENDATIONS[tier],
            stats=AnalysisStats(breaches=tally.breaches, attempts=tally.attempts),
        )
