"""
Tests for the example data generators.
"""

import random

import pytest
from soillab.core.aggregate_quality import AggregateQualityEngine
from soillab.core.atterberg import AtterbergEngine
from soillab.core.cbr import CBREngine
from soillab.core.example_data import (
    generate_atterberg_example, generate_cbr_example, generate_flakiness_example,
    generate_gs_coarse_example, generate_gs_fine_example, generate_la_abrasion_example,
    generate_proctor_example, generate_relative_density_example, generate_sand_cone_example,
    generate_sieve_example
)
from soillab.core.field_density import RelativeDensityEngine, SandConeEngine
from soillab.core.proctor import ProctorEngine
from soillab.core.sieve import SieveAnalysisEngine
from soillab.core.specific_gravity import SpecificGravityEngine

SEEDS = range(25)


class TestExampleGenerators:
    """Generated examples must be reproducible and calculable."""

    def test_same_seed_same_example(self):
        assert generate_cbr_example(random.Random(7)) == generate_cbr_example(random.Random(7))
        assert generate_sieve_example(random.Random(7)) == generate_sieve_example(random.Random(7))

    @pytest.mark.parametrize("seed", SEEDS)
    def test_atterberg(self, seed):
        example = generate_atterberg_example(random.Random(seed))

        result, validation = AtterbergEngine().compute_limits(example.ll_samples, example.pl_samples)

        assert validation.is_valid
        assert result is not None
        assert len(example.ll_samples) == 3

    @pytest.mark.parametrize("seed", SEEDS)
    def test_cbr(self, seed):
        example = generate_cbr_example(random.Random(seed))

        result, _ = CBREngine().calculate(example.points)

        assert result is not None
        assert result.final_cbr > 0

    @pytest.mark.parametrize("seed", SEEDS)
    def test_sieve(self, seed):
        example = generate_sieve_example(random.Random(seed))

        result = SieveAnalysisEngine().calculate(example.sieves, example.params)

        assert result is not None
        assert result.classification is not None
        assert abs(result.material_loss_percentage) < 1.0

    @pytest.mark.parametrize("seed", SEEDS)
    def test_proctor(self, seed):
        example = generate_proctor_example(random.Random(seed))

        result = ProctorEngine().calculate(example.points, example.parameters)

        assert result is not None
        assert 5.0 < result.optimum_moisture_content < 20.0
        assert 1.7 < result.max_dry_density < 2.4

    @pytest.mark.parametrize("seed", SEEDS)
    def test_specific_gravity(self, seed):
        rng = random.Random(seed)
        engine = SpecificGravityEngine()

        fine = engine.calculate_fine_soil(generate_gs_fine_example(rng).data)
        coarse = engine.calculate_coarse_soil(generate_gs_coarse_example(rng).data)

        assert 2.5 < fine.specific_gravity < 2.9
        assert 2.5 < coarse.specific_gravity < 2.8
        assert 0.3 < coarse.absorption < 2.2

    @pytest.mark.parametrize("seed", SEEDS)
    def test_sand_cone(self, seed):
        example = generate_sand_cone_example(random.Random(seed))

        result = SandConeEngine().calculate(example.calibration, example.field_data, example.proctor_mdd)

        assert 95.0 < result.compaction_percentage < 99.0
        assert result.passes

    @pytest.mark.parametrize("seed", SEEDS)
    def test_relative_density(self, seed):
        example = generate_relative_density_example(random.Random(seed))

        result = RelativeDensityEngine().calculate(example.data)

        assert 50.0 < result.relative_density < 90.0

    @pytest.mark.parametrize("seed", SEEDS)
    def test_aggregate_quality(self, seed):
        rng = random.Random(seed)
        engine = AggregateQualityEngine()

        la = engine.calculate_la_abrasion(generate_la_abrasion_example(rng))
        flakiness = engine.calculate_flakiness(generate_flakiness_example(rng))

        assert 19.0 < la.percent_loss < 31.0
        assert 9.0 < flakiness.flakiness_index < 21.0
        assert 14.0 < flakiness.elongation_index < 26.0


if __name__ == "__main__":
    pytest.main([__file__])
