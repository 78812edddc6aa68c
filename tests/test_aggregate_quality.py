"""
Tests for aggregate durability and shape indices.
"""

import pytest
from soillab.core.aggregate_quality import AggregateQualityEngine
from soillab.core.models import FlakinessData, LAAbrasionData


class TestLAAbrasion:
    """Test Los Angeles abrasion loss."""

    @pytest.fixture
    def engine(self):
        return AggregateQualityEngine()

    def test_percent_loss(self, engine):
        result = engine.calculate_la_abrasion(LAAbrasionData(initial_weight="5000", final_weight="3800"))

        assert result.loss_weight == pytest.approx(1200.0)
        assert result.percent_loss == pytest.approx(24.0)
        assert result.spec_limit == 40.0
        assert result.passes

    def test_exceeds_limit(self, engine):
        data = LAAbrasionData(initial_weight="5000", final_weight="2500", spec_limit="30")

        assert not engine.calculate_la_abrasion(data).passes

    def test_no_limit(self, engine):
        data = LAAbrasionData(initial_weight="5000", final_weight="3800", spec_limit="")

        assert engine.calculate_la_abrasion(data).passes is None

    def test_invalid_weights(self, engine):
        assert engine.calculate_la_abrasion(LAAbrasionData(initial_weight="5000", final_weight="5100")) is None
        assert engine.calculate_la_abrasion(LAAbrasionData(initial_weight="0", final_weight="0")) is None
        assert engine.calculate_la_abrasion(LAAbrasionData(initial_weight="5000")) is None


class TestFlakiness:
    """Test flakiness and elongation indices."""

    @pytest.fixture
    def engine(self):
        return AggregateQualityEngine()

    def test_indices(self, engine):
        data = FlakinessData(initial_weight="2000", flaky_weight="300", elongated_weight="800")

        result = engine.calculate_flakiness(data)

        assert result.flakiness_index == pytest.approx(15.0)
        assert result.elongation_index == pytest.approx(40.0)
        assert result.flakiness_passes
        assert not result.elongation_passes

    def test_zero_initial_weight(self, engine):
        data = FlakinessData(initial_weight="0", flaky_weight="300", elongated_weight="800")

        assert engine.calculate_flakiness(data) is None


if __name__ == "__main__":
    pytest.main([__file__])
