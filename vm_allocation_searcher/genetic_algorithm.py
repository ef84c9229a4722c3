import logging
import random
from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import dataclass
from functools import cached_property
from typing import (
    Any,
    Callable,
    Generic,
    Mapping,
    Optional,
    ParamSpec,
    Sequence,
    TypeVar,
)

from collection_utils import select_best

main_logger = logging.getLogger("main_logger")
fitness_logger = logging.getLogger("fitness_logger")

InitP = ParamSpec("InitP")
# Type variable that represents the type of chromosome representation used by the
# genetic algorithm
RepT = TypeVar("RepT")


class Chromosome(Generic[RepT]):
    def __init__(
        self,
        genes: RepT,
        fitness_value: Optional[float] = None,
        decoding_function: Optional[Callable[[RepT], Any]] = None,
    ):
        self.genes = genes
        self.fitness_value = fitness_value
        self.decoding_function = decoding_function

    @cached_property
    def encoded_data(self) -> Any:
        if self.decoding_function is None:
            raise NotImplementedError()
        return self.decoding_function(self.genes)

    @property
    def is_evaluated(self) -> bool:
        return self.fitness_value is not None

    def invalidate(self) -> None:
        """
        Discards the fitness value and the decoded data. Must be called after the
        genes have been modified in place.
        """
        self.fitness_value = None
        self.__dict__.pop("encoded_data", None)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chromosome):
            return False
        return bool(self.genes == other.genes)

    def __hash__(self) -> int:
        return hash(str(self.genes))

    def __repr__(self) -> str:
        return "(" + str(self.fitness_value) + ")" + str(self.genes)

    def __deepcopy__(self, memo: Mapping[str, Any]) -> "Chromosome[RepT]":
        copy = Chromosome(
            deepcopy(self.genes), self.fitness_value, self.decoding_function
        )
        if "encoded_data" in self.__dict__:
            copy.__dict__["encoded_data"] = self.encoded_data
        return copy


def fitness_key(chromosome: Chromosome[Any]) -> float:
    """
    Ordering used to rank chromosomes. Lower fitness values are better, and
    chromosomes that have not been evaluated yet rank last.
    """
    if chromosome.fitness_value is None:
        return float("inf")
    return chromosome.fitness_value


@dataclass
class Settings:
    def __init__(
        self,
        population_size: int,
        crossover_probability: float = 1.0,
        chromosome_mutation_probability: float = 1.0,
        num_elite: int = 0,
    ):
        self.population_size = population_size
        self.num_elites = num_elite
        self.crossover_probability = crossover_probability
        self.chromosome_mutation_probability = chromosome_mutation_probability


class TerminationCondition(ABC):
    @abstractmethod
    def __init__(self) -> None:
        pass

    @abstractmethod
    def __bool__(self) -> bool:
        pass


class GenerationLimitTerminationCondition(TerminationCondition):
    def __init__(self, total_generations: int) -> None:
        self.current_generation = 0
        self.total_generations = total_generations

    def __bool__(self) -> bool:
        result = self.current_generation >= self.total_generations
        self.current_generation += 1
        return result


class FitnessFunction(ABC, Generic[RepT]):
    @abstractmethod
    def __init__(self) -> None:
        pass

    @abstractmethod
    def __call__(self, chromosome: Chromosome[RepT]) -> float:
        pass


class GeneticOperator(ABC, Generic[RepT]):
    @abstractmethod
    def __init__(self) -> None:
        pass


class InitializationOperator(GeneticOperator[RepT], Generic[InitP, RepT]):
    @abstractmethod
    def __init__(self, *init_args: InitP.args, **init_kw_args: InitP.kwargs) -> None:
        pass

    @abstractmethod
    def __call__(self, rng: random.Random) -> Chromosome[RepT]:
        pass


class SelectionOperator(GeneticOperator[RepT]):
    @abstractmethod
    def __init__(self, parameter: float = 0) -> None:
        pass

    @abstractmethod
    def __call__(
        self,
        population: Sequence[Chromosome[RepT]],
        rng: random.Random,
        selection_size: Optional[int] = None,
    ) -> list[Chromosome[RepT]]:
        pass


class CrossoverOperator(GeneticOperator[RepT]):
    @abstractmethod
    def __init__(self) -> None:
        pass

    @abstractmethod
    def __call__(
        self,
        parent_a: Chromosome[RepT],
        parent_b: Chromosome[RepT],
        rng: random.Random,
    ) -> Chromosome[RepT]:
        pass


class MutationOperator(GeneticOperator[RepT]):
    @abstractmethod
    def __init__(self, probability: float) -> None:
        pass

    @abstractmethod
    def __call__(
        self, chromosome: Chromosome[RepT], rng: random.Random
    ) -> Chromosome[RepT]:
        pass


class OperatorSuite(Generic[RepT]):
    def __init__(
        self,
        initialization_operator: InitializationOperator[Any, RepT],
        selection_operator: SelectionOperator[RepT],
        crossover_operator: CrossoverOperator[RepT],
        mutation_operators: list[MutationOperator[RepT]],
        decoding_function: Optional[Callable[[RepT], Any]] = None,
    ):
        self.initialization_operator = initialization_operator
        self.selection_operator = selection_operator
        self.crossover_operator = crossover_operator
        self.mutation_operators = mutation_operators
        self.decoding_function = decoding_function


class GeneticAlgorithm(Generic[RepT]):
    """
    A single-population, generational genetic algorithm that minimizes the given
    fitness function.

    Every generation is evaluated as a whole. The next generation is then bred one
    child at a time: two parents are selected, recombined into a single child and
    the child is mutated. Unless elites are requested, the next generation replaces
    the current one entirely.

    All randomness is drawn from ``rng``. Passing a seeded generator makes a run
    reproducible.
    """

    def __init__(
        self,
        fitness_function: FitnessFunction[RepT],
        operator_suite: OperatorSuite[RepT],
        settings: Settings,
        rng: Optional[random.Random] = None,
    ):
        self.fitness_function = fitness_function
        self.operator_suite = operator_suite
        self.settings = settings
        self.rng = rng if rng is not None else random.Random()

    def run(
        self,
        termination_condition: TerminationCondition,
        initial_population: Optional[list[Chromosome[RepT]]] = None,
    ) -> Chromosome[RepT]:
        main_logger.info('Genetic Algorithm execution has begun.')
        current_generation = 0
        population = self._initialize_population(initial_population)
        while not termination_condition:
            main_logger.info(f'Now processing generation No. {current_generation}.')
            self._evaluate_population(population)
            if (
                main_logger.isEnabledFor(logging.INFO)
                or fitness_logger.isEnabledFor(logging.INFO)
            ):
                fittest_chromosome = min(population, key=fitness_key)
                main_logger.info(
                    'The fittest chromosome in the current population '
                    f'has a value of {fittest_chromosome.fitness_value}.'
                )
                fitness_logger.info(
                    f"{current_generation},{fittest_chromosome.fitness_value}"
                )
            elite = self._select_elite(population)
            children = self._breed_children(
                population, self.settings.population_size - len(elite)
            )
            population = elite + children
            current_generation += 1
        main_logger.info('Genetic Algorithm execution has ended.')
        main_logger.info(f'A total of {current_generation} generations were processed.')
        self._evaluate_population(population)
        fittest_chromosome = self._rank_population(population)[0]
        main_logger.info(
            'The fittest chromosome of this run has a value of '
            f'{fittest_chromosome.fitness_value}.'
        )
        fitness_logger.info(
            f"{current_generation},{fittest_chromosome.fitness_value}"
        )
        return fittest_chromosome

    def _initialize_population(
        self, initial_population: Optional[list[Chromosome[RepT]]] = None
    ) -> list[Chromosome[RepT]]:
        main_logger.info('Generating the initial population.')
        if initial_population is not None and len(initial_population) != 0:
            main_logger.info(
                'The initial population will contain '
                f'{min(self.settings.population_size, len(initial_population))} '
                'individuals given as input.'
            )
        initial_population = (initial_population or list[Chromosome[RepT]]())[
            : self.settings.population_size
        ]
        while len(initial_population) < self.settings.population_size:
            chromosome = self.operator_suite.initialization_operator(self.rng)
            initial_population.append(chromosome)
        for chromosome in initial_population:
            chromosome.decoding_function = self.operator_suite.decoding_function
        return initial_population

    def _evaluate_population(self, population: Sequence[Chromosome[RepT]]) -> None:
        main_logger.info('Evaluating the fitness of each individual in the population.')
        for chromosome in population:
            if not chromosome.is_evaluated:
                chromosome.fitness_value = self.fitness_function(chromosome)

    def _rank_population(
        self, population: Sequence[Chromosome[RepT]]
    ) -> list[Chromosome[RepT]]:
        return sorted(population, key=fitness_key)

    def _select_elite(
        self, population: Sequence[Chromosome[RepT]]
    ) -> list[Chromosome[RepT]]:
        if self.settings.num_elites == 0:
            return []
        main_logger.info('Selecting the best individuals as elites.')
        elite = select_best(population, self.settings.num_elites, key=fitness_key)
        return [deepcopy(chromosome) for chromosome in elite]

    def _breed_children(
        self, population: Sequence[Chromosome[RepT]], num_children: int
    ) -> list[Chromosome[RepT]]:
        main_logger.info('Breeding the offspring of the current generation.')
        children = list[Chromosome[RepT]]()
        while len(children) < num_children:
            parent1, parent2 = self._select_parents(population)
            child = self._perform_crossover(parent1, parent2)
            child = self._produce_mutations(child)
            children.append(child)
        return children

    def _select_parents(
        self, population: Sequence[Chromosome[RepT]]
    ) -> tuple[Chromosome[RepT], Chromosome[RepT]]:
        selection_operator = self.operator_suite.selection_operator
        parent1 = selection_operator(population, self.rng, 1)[0]
        parent2 = selection_operator(population, self.rng, 1)[0]
        return parent1, parent2

    def _perform_crossover(
        self, parent1: Chromosome[RepT], parent2: Chromosome[RepT]
    ) -> Chromosome[RepT]:
        if self.rng.random() < self.settings.crossover_probability:
            child = self.operator_suite.crossover_operator(parent1, parent2, self.rng)
        else:
            child = Chromosome(deepcopy(parent1.genes))
        child.decoding_function = self.operator_suite.decoding_function
        return child

    def _produce_mutations(self, chromosome: Chromosome[RepT]) -> Chromosome[RepT]:
        for mutation_operator in self.operator_suite.mutation_operators:
            if self.rng.random() < self.settings.chromosome_mutation_probability:
                chromosome = mutation_operator(chromosome, self.rng)
                chromosome.decoding_function = self.operator_suite.decoding_function
        return chromosome
