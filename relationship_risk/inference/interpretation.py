"""
Human-readable interpretation of a risk percentage.

Buckets (percentage = round(probability * 100)):
    >= 80  HIGH
    >= 60  MODERATE
    >= 40  ELEVATED
    else   HEALTHY
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any

from ..questionnaire.schema import RESPONSE_LABELS


class RiskLevel(Enum):
    HIGH = "high"
    MODERATE = "moderate"
    ELEVATED = "elevated"
    HEALTHY = "healthy"


@dataclass(frozen=True)
class RiskInterpretation:
    """Display text and color for one risk bucket."""
    level: RiskLevel
    label: str
    headline: str
    advice: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["level"] = self.level.value
        return result


INTERPRETATIONS = {
    RiskLevel.HIGH: RiskInterpretation(
        level=RiskLevel.HIGH,
        label="HIGH RELATIONSHIP RISK",
        headline="Significant Relationship Challenges Detected",
        advice=(
            "Your responses indicate patterns strongly associated with relationship distress. "
            "Key areas of concern include communication breakdown, frequent conflicts, and "
            "emotional distance. These patterns often benefit from professional support to "
            "develop healthier communication and conflict resolution strategies."
        ),
        color="#FF6B6B",
    ),
    RiskLevel.MODERATE: RiskInterpretation(
        level=RiskLevel.MODERATE,
        label="MODERATE RELATIONSHIP CONCERNS",
        headline="Notable Relationship Patterns Need Attention",
        advice=(
            "Several areas in your relationship show patterns that could benefit from focused "
            "attention. Consider working on communication skills, conflict resolution approaches, "
            "and emotional connection. Relationship education resources or couples counseling "
            "could provide valuable tools for improvement."
        ),
        color="#FF9E64",
    ),
    RiskLevel.ELEVATED: RiskInterpretation(
        level=RiskLevel.ELEVATED,
        label="ELEVATED AWARENESS NEEDED",
        headline="Some Relationship Patterns Require Attention",
        advice=(
            "Your relationship shows a mix of healthy and challenging patterns. While many areas "
            "are positive, some communication and conflict resolution approaches could be "
            "strengthened. Regular check-ins and conscious effort in these areas could "
            "significantly improve your relationship satisfaction."
        ),
        color="#FFD166",
    ),
    RiskLevel.HEALTHY: RiskInterpretation(
        level=RiskLevel.HEALTHY,
        label="HEALTHY RELATIONSHIP PATTERNS",
        headline="Generally Positive Relationship Dynamics",
        advice=(
            "Your responses indicate healthy communication patterns, effective conflict "
            "resolution skills, and strong emotional connection. Continue nurturing these "
            "positive aspects through regular quality time, open communication, and mutual "
            "appreciation. These patterns are associated with long-term relationship satisfaction."
        ),
        color="#4ECDC4",
    ),
}


def risk_level_for(percentage: float) -> RiskLevel:
    if percentage >= 80:
        return RiskLevel.HIGH
    if percentage >= 60:
        return RiskLevel.MODERATE
    if percentage >= 40:
        return RiskLevel.ELEVATED
    return RiskLevel.HEALTHY


def interpret_risk(percentage: float) -> RiskInterpretation:
    """
    Map a risk percentage (0-100) to its interpretation.

    Args:
        percentage: Divorce probability times 100

    Returns:
        RiskInterpretation for the matching bucket
    """
    return INTERPRETATIONS[risk_level_for(percentage)]


def response_label(value: int) -> str:
    """Never/Rarely/Sometimes/Often/Always for 0..4."""
    if value not in RESPONSE_LABELS:
        raise ValueError(f"Response must be between 0 and 4, got {value}")
    return RESPONSE_LABELS[value]
