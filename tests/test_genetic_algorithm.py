import logging
import random
from copy import deepcopy
from functools import partial

import pytest

import genetic_operators
from fitness_function import AllocationFitnessFunction
from genetic_algorithm import (
    Chromosome,
    GeneticAlgorithm,
    GenerationLimitTerminationCondition,
    OperatorSuite,
    Settings,
    fitness_key,
)
from genetic_operators import (
    EvenSpreadInitializationOperator,
    RandomInitializationOperator,
    RandomReassignmentMutationOperator,
    SinglePointCrossoverOperator,
    TournamentSelection,
)


def _build_genetic_algorithm(
    input_,
    seed=0,
    population_size=30,
    mutation_rate=0.1,
    num_elite=0,
    initialization_operator_type=EvenSpreadInitializationOperator,
):
    operator_suite = OperatorSuite(
        initialization_operator=initialization_operator_type(
            input_.num_vms, input_.num_csps
        ),
        selection_operator=TournamentSelection(5),
        crossover_operator=SinglePointCrossoverOperator(),
        mutation_operators=[
            RandomReassignmentMutationOperator(input_.num_csps, mutation_rate)
        ],
        decoding_function=partial(
            genetic_operators.decoding_function, vms=input_.vms, csps=input_.csps
        ),
    )
    settings = Settings(population_size, num_elite=num_elite)
    return GeneticAlgorithm(
        AllocationFitnessFunction(), operator_suite, settings, random.Random(seed)
    )


def _best_fitness_per_generation(caplog):
    return [
        float(record.getMessage().split(",")[1])
        for record in caplog.records
        if record.name == "fitness_logger"
    ]


class TestChromosome:
    def test_fitness_is_pending_until_evaluated(self):
        chromosome = Chromosome([0, 1])
        assert chromosome.fitness_value is None
        assert not chromosome.is_evaluated

    def test_encoded_data_requires_decoding_function(self):
        with pytest.raises(NotImplementedError):
            Chromosome([0, 1]).encoded_data

    def test_invalidate_drops_cached_data(self, make_chromosome):
        chromosome = make_chromosome([0] * 10, 12.0)
        first_allocation = chromosome.encoded_data
        chromosome.genes[0] = 4
        chromosome.invalidate()
        assert chromosome.fitness_value is None
        assert chromosome.encoded_data is not first_allocation
        assert chromosome.encoded_data.assignment_vector[0] == 4

    def test_deepcopy_is_independent(self, make_chromosome):
        chromosome = make_chromosome([0] * 10, 12.0)
        copy = deepcopy(chromosome)
        copy.genes[0] = 3
        assert chromosome.genes[0] == 0
        assert copy.fitness_value == 12.0
        assert copy.decoding_function is chromosome.decoding_function

    def test_equality_uses_genes(self):
        assert Chromosome([0, 1], 1.0) == Chromosome([0, 1], 2.0)
        assert Chromosome([0, 1]) != Chromosome([1, 0])


class TestFitnessKey:
    def test_orders_by_ascending_fitness(self):
        population = [Chromosome([0], 3.0), Chromosome([1], 1.0), Chromosome([2], 2.0)]
        ranked = sorted(population, key=fitness_key)
        assert [chromosome.fitness_value for chromosome in ranked] == [1.0, 2.0, 3.0]

    def test_unevaluated_chromosomes_rank_last(self):
        population = [Chromosome([0]), Chromosome([1], 100.0)]
        assert min(population, key=fitness_key).genes == [1]


class TestGenerationLimitTerminationCondition:
    def test_allows_the_given_number_of_generations(self):
        termination_condition = GenerationLimitTerminationCondition(3)
        checks = [bool(termination_condition) for _ in range(5)]
        assert checks == [False, False, False, True, True]

    def test_zero_generations(self):
        assert bool(GenerationLimitTerminationCondition(0))


class TestGeneticAlgorithm:
    def test_initial_population_is_made_of_clones(self, sample_input):
        genetic_algorithm = _build_genetic_algorithm(sample_input)
        population = genetic_algorithm._initialize_population()
        assert len(population) == 30
        assert all(
            chromosome.genes == [0, 0, 1, 1, 2, 2, 3, 3, 4, 4]
            for chromosome in population
        )
        assert len({id(chromosome.genes) for chromosome in population}) == 30

    def test_supplied_initial_population_is_topped_up(self, sample_input):
        genetic_algorithm = _build_genetic_algorithm(sample_input)
        supplied = [Chromosome([0] * 10), Chromosome([1] * 10)]
        population = genetic_algorithm._initialize_population(supplied)
        assert len(population) == 30
        assert population[0].genes == [0] * 10
        assert population[1].genes == [1] * 10
        assert population[2].genes == [0, 0, 1, 1, 2, 2, 3, 3, 4, 4]
        assert population[0].decoding_function is not None

    def test_supplied_initial_population_is_truncated(self, sample_input):
        genetic_algorithm = _build_genetic_algorithm(sample_input, population_size=3)
        supplied = [Chromosome([index % 5] * 10) for index in range(5)]
        population = genetic_algorithm._initialize_population(supplied)
        assert [chromosome.genes[0] for chromosome in population] == [0, 1, 2]

    def test_zero_generations_returns_the_seed(
        self, sample_input, even_spread_fitness
    ):
        genetic_algorithm = _build_genetic_algorithm(sample_input)
        best = genetic_algorithm.run(GenerationLimitTerminationCondition(0))
        assert best.genes == [0, 0, 1, 1, 2, 2, 3, 3, 4, 4]
        assert best.fitness_value == pytest.approx(even_spread_fitness)

    def test_result_is_evaluated_and_valid(self, sample_input):
        genetic_algorithm = _build_genetic_algorithm(sample_input)
        best = genetic_algorithm.run(GenerationLimitTerminationCondition(20))
        assert best.is_evaluated
        assert len(best.genes) == 10
        assert all(0 <= gene < 5 for gene in best.genes)
        assert best.fitness_value == pytest.approx(
            AllocationFitnessFunction()(best)
        )

    def test_result_is_not_worse_than_generation_zero(
        self, sample_input, even_spread_fitness
    ):
        genetic_algorithm = _build_genetic_algorithm(sample_input, seed=11)
        best = genetic_algorithm.run(GenerationLimitTerminationCondition(100))
        assert best.fitness_value <= even_spread_fitness

    def test_returned_chromosome_is_best_of_final_population(self, sample_input):
        genetic_algorithm = _build_genetic_algorithm(sample_input, seed=5)
        final_populations = []
        original_rank = genetic_algorithm._rank_population

        def recording_rank(population):
            final_populations.append(list(population))
            return original_rank(population)

        genetic_algorithm._rank_population = recording_rank
        best = genetic_algorithm.run(GenerationLimitTerminationCondition(10))
        final_population = final_populations[-1]
        assert len(final_population) == 30
        assert best.fitness_value == min(
            chromosome.fitness_value for chromosome in final_population
        )

    def test_same_seed_reproduces_the_run(self, sample_input):
        best_a = _build_genetic_algorithm(sample_input, seed=42).run(
            GenerationLimitTerminationCondition(30)
        )
        best_b = _build_genetic_algorithm(sample_input, seed=42).run(
            GenerationLimitTerminationCondition(30)
        )
        assert best_a.genes == best_b.genes
        assert best_a.fitness_value == best_b.fitness_value

    def test_without_mutation_clones_never_change(
        self, sample_input, even_spread_fitness
    ):
        genetic_algorithm = _build_genetic_algorithm(sample_input, mutation_rate=0)
        best = genetic_algorithm.run(GenerationLimitTerminationCondition(10))
        assert best.genes == [0, 0, 1, 1, 2, 2, 3, 3, 4, 4]
        assert best.fitness_value == pytest.approx(even_spread_fitness)

    def test_elitism_never_loses_the_best(self, small_input, caplog):
        caplog.set_level(logging.INFO, logger="fitness_logger")
        genetic_algorithm = _build_genetic_algorithm(
            small_input,
            seed=3,
            mutation_rate=0.5,
            num_elite=1,
            initialization_operator_type=RandomInitializationOperator,
        )
        best = genetic_algorithm.run(GenerationLimitTerminationCondition(40))
        best_per_generation = _best_fitness_per_generation(caplog)
        assert len(best_per_generation) == 41
        assert all(
            later <= earlier
            for earlier, later in zip(best_per_generation, best_per_generation[1:])
        )
        assert best.fitness_value == best_per_generation[-1]

    def test_logs_progress(self, sample_input, caplog):
        caplog.set_level(logging.INFO, logger="main_logger")
        _build_genetic_algorithm(sample_input).run(
            GenerationLimitTerminationCondition(2)
        )
        messages = [
            record.getMessage()
            for record in caplog.records
            if record.name == "main_logger"
        ]
        assert messages[0] == "Genetic Algorithm execution has begun."
        assert "Now processing generation No. 1." in messages
        assert "A total of 2 generations were processed." in messages
