"""
Risk scorer tests
"""
from logshield.detection.risk_scorer import RECOMMENDATIONS, RiskScorer
from logshield.models.analysis_result import RiskTier
from logshield.models.record import AttackType, ImpactLevel, Record


def _rec(attack=AttackType.NONE, impact=ImpactLevel.SAFE, status=200):
    return Record(attack_type=attack, impact=impact, status_code=status)


def test_single_breach_is_critical():
    result = RiskScorer().score([_rec(AttackType.SQLI, ImpactLevel.BREACH)])
    assert result.score == 75
    assert result.risk == RiskTier.CRITICAL
    assert result.stats.breaches == 1 and result.stats.attempts == 0
    assert result.recommendation == RECOMMENDATIONS[RiskTier.CRITICAL]


def test_six_attempts_is_caution():
    result = RiskScorer().score([_rec(AttackType.XSS, ImpactLevel.ATTEMPT, 403)] * 6)
    assert result.score == 88
    assert result.risk == RiskTier.CAUTION
    assert result.stats.attempts == 6


def test_five_attempts_is_safe():
    result = RiskScorer().score([_rec(AttackType.XSS, ImpactLevel.ATTEMPT, 403)] * 5)
    assert result.score == 90
    assert result.risk == RiskTier.SAFE


def test_clean_batch_is_safe():
    result = RiskScorer().score([_rec() for _ in range(50)])
    assert result.score == 100
    assert result.risk == RiskTier.SAFE
    assert result.recommendation.startswith("SAFE")


def test_score_clamped_at_zero():
    result = RiskScorer().score([_rec(AttackType.RCE, ImpactLevel.BREACH)] * 10)
    assert result.score == 0
    assert result.risk == RiskTier.CRITICAL


def test_low_score_without_breach_is_critical():
    """26 attempts -> 48 < 50"""
    result = RiskScorer().score([_rec(AttackType.DDOS, ImpactLevel.ATTEMPT, 503)] * 26)
    assert result.score == 48
    assert result.risk == RiskTier.CRITICAL


def test_high_risk_branch_for_inconsistent_input():
    """Only reachable with pre-classified input whose impact disagrees with its attack type"""
    result = RiskScorer().score([_rec(AttackType.RCE, ImpactLevel.SAFE)])
    assert result.score == 95
    assert result.risk == RiskTier.CAUTION
    assert result.stats.breaches == 0 and result.stats.attempts == 0


def test_per_batch_not_cumulative():
    scorer = RiskScorer()
    scorer.score([_rec(AttackType.SQLI, ImpactLevel.BREACH)] * 3)
    assert scorer.score([_rec()]).score == 100
