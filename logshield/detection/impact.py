from logshield.models.record import AttackType, ImpactLevel


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def classify_impact(attack_type: AttackType, status_code: int) -> ImpactLevel:
    """
    Outcome of a record:
    no signature -> Safe, signature + 2xx -> Breach, signature + anything else -> Attempt.
    """
    if attack_type == AttackType.NONE:
        return ImpactLevel.SAFE
    if is_success(status_code):
        return ImpactLevel.BREACH
    return ImpactLevel.ATTEMPT
