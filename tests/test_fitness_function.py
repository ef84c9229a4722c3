import pytest

from fitness_function import AllocationFitnessFunction


class TestAllocationFitnessFunction:
    def test_even_spread_value(
        self, fitness_function, make_chromosome, even_spread_fitness
    ):
        chromosome = make_chromosome([0, 0, 1, 1, 2, 2, 3, 3, 4, 4])
        assert fitness_function(chromosome) == pytest.approx(even_spread_fitness)

    def test_single_csp_value(self, fitness_function, make_chromosome):
        chromosome = make_chromosome([0] * 10)
        expected = 0.3 * 1000 + 0.2 * (1 - 0.9**10) + 0.5 * 100
        assert fitness_function(chromosome) == pytest.approx(expected)

    def test_is_deterministic(self, fitness_function, make_chromosome):
        chromosome = make_chromosome([4, 3, 2, 1, 0, 0, 1, 2, 3, 4])
        first_value = fitness_function(chromosome)
        second_value = fitness_function(chromosome)
        recreated_value = fitness_function(
            make_chromosome([4, 3, 2, 1, 0, 0, 1, 2, 3, 4])
        )
        assert first_value == second_value == recreated_value

    def test_does_not_store_the_value(self, fitness_function, make_chromosome):
        chromosome = make_chromosome([0] * 10)
        fitness_function(chromosome)
        assert chromosome.fitness_value is None

    def test_cheaper_allocation_scores_lower(self, fitness_function, make_chromosome):
        cheap = make_chromosome([0] * 10)
        expensive = make_chromosome([2] * 10)
        assert fitness_function(cheap) < fitness_function(expensive)

    def test_custom_weights(self, make_chromosome):
        fitness_function = AllocationFitnessFunction(
            cost_weight=1, unreliability_weight=0, latency_weight=0
        )
        chromosome = make_chromosome([1] * 10)
        assert fitness_function(chromosome) == pytest.approx(1200)

    def test_reliability_only_weights(self, make_chromosome):
        fitness_function = AllocationFitnessFunction(
            cost_weight=0, unreliability_weight=1, latency_weight=0
        )
        chromosome = make_chromosome([1] * 10)
        assert fitness_function(chromosome) == pytest.approx(1 - 0.95**10)
