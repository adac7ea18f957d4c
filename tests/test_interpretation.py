"""Tests for risk interpretation and result types."""

import pytest

from relationship_risk.inference import AssessmentResult, RiskLevel, interpret_risk, response_label


class TestInterpretRisk:
    @pytest.mark.parametrize("percentage,level", [
        (100, RiskLevel.HIGH),
        (80, RiskLevel.HIGH),
        (79, RiskLevel.MODERATE),
        (60, RiskLevel.MODERATE),
        (59, RiskLevel.ELEVATED),
        (40, RiskLevel.ELEVATED),
        (39, RiskLevel.HEALTHY),
        (0, RiskLevel.HEALTHY),
    ])
    def test_buckets(self, percentage, level) -> None:
        assert interpret_risk(percentage).level is level

    def test_text(self) -> None:
        interpretation = interpret_risk(85)
        assert interpretation.headline == "Significant Relationship Challenges Detected"
        assert interpretation.to_dict()["level"] == "high"


class TestResponseLabel:
    def test_labels(self) -> None:
        assert [response_label(v) for v in range(5)] == ["Never", "Rarely", "Sometimes", "Often", "Always"]

    def test_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            response_label(5)


class TestAssessmentResult:
    def test_percentage_rounded(self) -> None:
        result = AssessmentResult(probability=0.6449, average_response=2.0, mode="fallback", risk_level="moderate")
        assert result.percentage == 64
        d = result.to_dict()
        assert d["percentage"] == 64
        assert d["feature_importance"] == []
