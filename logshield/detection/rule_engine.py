from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from logshield.models.record import AttackType


@dataclass(frozen=True)
class ThreatRule:
    name: str
    attack_type: AttackType
    any_of: Tuple[str, ...]
    none_of: Tuple[str, ...] = ()

    def matches(self, lowered: str) -> bool:
        if not any(s in lowered for s in self.any_of):
            return False
        return not any(s in lowered for s in self.none_of)


class ThreatClassifier:
    """
    Signature matcher for raw request text.

    Rules are evaluated in table order and the first hit decides the attack
    type; there is no scoring or combination of rules. Matching is a plain
    case-insensitive substring test:
    - SQLi:  union select / ' or '1'='1 / information_schema / drop table
    - XSS:   <script> / javascript: / onerror= / onload=
    - RCE:   /etc/passwd / cmd.exe / whoami / .. / exec(
    - DDoS:  dos / flood / ping, unless the text mentions "windows"
    """

    def __init__(self, rules: Optional[Sequence[Dict[str, object]]] = None):
        if rules is None:
            rules = self._load_default_rules()
        self.rules: List[ThreatRule] = [
            ThreatRule(
                name=str(r["name"]),
                attack_type=AttackType(r["attack_type"]),
                any_of=tuple(s.lower() for s in r["any_of"]),
                none_of=tuple(s.lower() for s in r.get("none_of", ())),
            )
            for r in rules
        ]

    def _load_default_rules(self) -> List[Dict[str, object]]:
        return [
            {
                "name": "sql_injection",
                "attack_type": AttackType.SQLI,
                "any_of": ("union select", "' or '1'='1", "information_schema", "drop table"),
            },
            {
                "name": "cross_site_scripting",
                "attack_type": AttackType.XSS,
                "any_of": ("<script>", "javascript:", "onerror=", "onload="),
            },
            {
                "name": "remote_code_execution",
                "attack_type": AttackType.RCE,
                "any_of": ("/etc/passwd", "cmd.exe", "whoami", "..", "exec("),
            },
            {
                # the "windows" exclusion is a literal heuristic carried as-is
                "name": "denial_of_service",
                "attack_type": AttackType.DDOS,
                "any_of": ("dos", "flood", "ping"),
                "none_of": ("windows",),
            },
        ]

    def match(self, text: str) -> Optional[ThreatRule]:
        """Return the first rule that fires on `text`, or None."""
        if not text:
            return None
        lowered = text.lower()
        for rule in self.rules:
            if rule.matches(lowered):
                return rule
        return None

    def classify(self, text: str) -> AttackType:
        rule = self.match(text)
        return rule.attack_type if rule else AttackType.NONE


_default_classifier = ThreatClassifier()


def classify_threat(text: str) -> AttackType:
    return _default_classifier.classify(text)
