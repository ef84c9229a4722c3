import json
import random
from os import path
from functools import partial
from typing import Any

import genetic_operators
from allocation import Allocation
from config import Config
from genetic_algorithm import (
    Chromosome,
    GeneticAlgorithm,
    GenerationLimitTerminationCondition,
    OperatorSuite,
    Settings,
)
from input import Input
from fitness_function import AllocationFitnessFunction


def search_optimal_allocation(input_: Input, config: Config) -> Allocation:
    fittest_chromosome = search_fittest_chromosome(input_, config)
    allocation: Allocation = fittest_chromosome.encoded_data
    return allocation


def search_fittest_chromosome(
    input_: Input, config: Config
) -> Chromosome[list[int]]:
    genetic_algorithm = _setup_genetic_algorithm(input_, config)
    termination_condition = GenerationLimitTerminationCondition(config.max_generations)
    initial_population = (
        _parse_initial_population_file(config.initial_population_file_path, input_)
        if config.initial_population_file_path is not None
        else None
    )
    fittest_chromosome = genetic_algorithm.run(
        termination_condition, initial_population
    )
    return fittest_chromosome


def _setup_genetic_algorithm(
    input_: Input, config: Config
) -> GeneticAlgorithm[list[int]]:
    fitness_function = setup_fitness_function(config)
    operator_suite = _setup_operator_suite(input_, config)
    genetic_algorithm_settings = _setup_genetic_algorithm_settings(config)
    genetic_algorithm = GeneticAlgorithm(
        fitness_function,
        operator_suite,
        genetic_algorithm_settings,
        random.Random(config.seed),
    )
    return genetic_algorithm


def setup_fitness_function(config: Config) -> AllocationFitnessFunction:
    fitness_function = AllocationFitnessFunction(
        config.cost_weight,
        config.unreliability_weight,
        config.latency_weight,
    )
    return fitness_function


def _setup_operator_suite(input_: Input, config: Config) -> OperatorSuite[list[int]]:
    operator_suite = OperatorSuite(
        initialization_operator=config.initialization_operator.genetic_operator_type(
            input_.num_vms,
            input_.num_csps,
        ),
        selection_operator=config.selection_operator.genetic_operator_type(
            *config.selection_operator.arguments
        ),
        crossover_operator=config.crossover_operator.genetic_operator_type(),
        mutation_operators=[
            mutation_operator.genetic_operator_type(
                input_.num_csps, *mutation_operator.arguments
            )
            for mutation_operator in config.mutation_operators
        ],
        decoding_function=partial(
            genetic_operators.decoding_function,
            vms=input_.vms,
            csps=input_.csps,
        ),
    )
    return operator_suite


def _setup_genetic_algorithm_settings(config: Config) -> Settings:
    settings = Settings(
        config.population_size,
        config.crossover_probability,
        config.chromosome_mutation_probability,
        config.num_elite,
    )
    return settings


def _parse_initial_population_file(
    initial_population_file_path: str, input_: Input
) -> list[Chromosome[list[int]]]:
    with open(
        path.normpath(initial_population_file_path), mode="r", encoding="utf-8"
    ) as initial_population_file:
        initial_population = list[Chromosome[list[int]]]()
        for row in initial_population_file:
            if not row.strip():
                continue
            genes = json.loads(row)
            if not _is_assignment_vector(genes, input_):
                raise ValueError(
                    f"Invalid assignment vector in initial population: {row}"
                )
            chromosome = Chromosome(genes)
            initial_population.append(chromosome)
        return initial_population


def _is_assignment_vector(genes: Any, input_: Input) -> bool:
    # JSON booleans decode to bool, a subclass of int
    return (
        isinstance(genes, list)
        and len(genes) == input_.num_vms
        and all(
            isinstance(gene, int)
            and not isinstance(gene, bool)
            and 0 <= gene < input_.num_csps
            for gene in genes
        )
    )
