import os
import re
from configparser import ConfigParser, ParsingError
from typing import (
    Generic,
    Mapping,
    Optional,
    Type,
    TypeVar,
)


from genetic_algorithm import (
    CrossoverOperator,
    MutationOperator,
    SelectionOperator,
)
from genetic_operators import (
    AssignmentInitializationOperator,
    EvenSpreadInitializationOperator,
    LinearRankSelectionOperator,
    RandomInitializationOperator,
    RandomReassignmentMutationOperator,
    ShuffledEvenSpreadInitializationOperator,
    SinglePointCrossoverOperator,
    TournamentSelection,
    UniformCrossoverOperator,
)


GeneticOperatorT = TypeVar("GeneticOperatorT")


class GeneticOperatorConfiguration(Generic[GeneticOperatorT]):
    def __init__(
        self,
        genetic_operator_type: Type[GeneticOperatorT],
        argument: Optional[float] = None,
    ):
        self.genetic_operator_type = genetic_operator_type
        self.argument = argument

    @property
    def arguments(self) -> tuple[float, ...]:
        return (self.argument,) if self.argument is not None else ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeneticOperatorConfiguration):
            return False
        return (self.genetic_operator_type, self.argument) == (
            other.genetic_operator_type,
            other.argument,
        )

    def __repr__(self) -> str:
        return (
            f"{self.genetic_operator_type.__name__}"
            + (f"({self.argument})" if self.argument is not None else "")
        )


class CustomConfigParser(ConfigParser):
    SUPPORTED_INITIALIZATION_OPERATORS: dict[
        str, Type[AssignmentInitializationOperator]
    ] = {
        "EvenSpreadInitialization": EvenSpreadInitializationOperator,
        "ShuffledEvenSpreadInitialization": ShuffledEvenSpreadInitializationOperator,
        "RandomInitialization": RandomInitializationOperator,
    }
    SUPPORTED_SELECTION_OPERATORS: dict[str, Type[SelectionOperator[list[int]]]] = {
        "LinearRankSelection": LinearRankSelectionOperator,
        "TournamentSelection": TournamentSelection,
    }
    SUPPORTED_CROSSOVER_OPERATORS: dict[str, Type[CrossoverOperator[list[int]]]] = {
        "SinglePointCrossover": SinglePointCrossoverOperator,
        "UniformCrossover": UniformCrossoverOperator,
    }
    SUPPORTED_MUTATION_OPERATORS: dict[str, Type[MutationOperator[list[int]]]] = {
        "RandomReassignmentMutation": RandomReassignmentMutationOperator,
    }

    def __init__(self, config_file_path: str, encoding: Optional[str] = None):
        if not os.path.isfile(config_file_path):
            raise FileNotFoundError("Configuration file not found")
        converters = {
            "initializationoperator": lambda string: self.parse_string_as_operator(
                string,
                operator_namespace=self.SUPPORTED_INITIALIZATION_OPERATORS,
            ),
            "selectionoperator": lambda string: self.parse_string_as_operator(
                string,
                operator_namespace=self.SUPPORTED_SELECTION_OPERATORS,
            ),
            "crossoveroperator": lambda string: self.parse_string_as_operator(
                string,
                operator_namespace=self.SUPPORTED_CROSSOVER_OPERATORS,
            ),
            "mutationoperators": lambda string: self.parse_string_as_list_of_operators(
                string,
                operator_namespace=self.SUPPORTED_MUTATION_OPERATORS,
            ),
        }
        super().__init__(converters=converters)
        super().read(config_file_path, encoding)

    @classmethod
    def parse_string_as_list_of_operators(
        cls,
        string: str,
        operator_namespace: Mapping[str, Type[GeneticOperatorT]],
    ) -> list[GeneticOperatorConfiguration[GeneticOperatorT]]:
        operator_strings = [elem.strip() for elem in string.split(",")]
        operators = [
            operator_type
            for elem in operator_strings
            if (operator_type := cls.parse_string_as_operator(elem, operator_namespace))
            is not None
        ]
        return operators

    @classmethod
    def parse_string_as_operator(
        cls,
        string: str,
        operator_namespace: Mapping[str, Type[GeneticOperatorT]],
    ) -> Optional[GeneticOperatorConfiguration[GeneticOperatorT]]:
        operator_name_pattern = "[_a-zA-Z][_\\w]*"
        operator_argument_pattern = "\\d+(\\.\\d+)?"
        complete_operator_pattern = (
            f"(?:({operator_name_pattern})(?:\\(({operator_argument_pattern})\\))?)?"
        )
        match = re.fullmatch(complete_operator_pattern, string)
        if match is None:
            raise ParsingError("Operator is invalid")
        if match.string == "":
            return None
        operator_name = match.groups()[0]
        operator_argument = (
            float(match.groups()[1]) if match.groups()[1] is not None else None
        )
        if operator_name not in operator_namespace:
            raise ParsingError(f"Unsupported operator {operator_name}")
        operator_type = operator_namespace[operator_name]
        return GeneticOperatorConfiguration(operator_type, operator_argument)


class Config:
    """
    Settings of a VM allocation search. The defaults reproduce the reference
    configuration: a population of 100 clones of the evenly spread assignment,
    1000 generations, tournaments of 5 individuals, single point crossover, a
    per-gene mutation rate of 0.1 and no elitism.
    """

    def __init__(
        self,
        cost_weight: float = 0.3,
        unreliability_weight: float = 0.2,
        latency_weight: float = 0.5,
        initialization_operator: Optional[
            GeneticOperatorConfiguration[AssignmentInitializationOperator]
        ] = None,
        selection_operator: Optional[
            GeneticOperatorConfiguration[SelectionOperator[list[int]]]
        ] = None,
        crossover_operator: Optional[
            GeneticOperatorConfiguration[CrossoverOperator[list[int]]]
        ] = None,
        mutation_operators: Optional[
            list[GeneticOperatorConfiguration[MutationOperator[list[int]]]]
        ] = None,
        population_size: int = 100,
        max_generations: int = 1000,
        crossover_probability: float = 1.0,
        chromosome_mutation_probability: float = 1.0,
        num_elite: int = 0,
        seed: Optional[int] = None,
        initial_population_file_path: Optional[str] = None,
    ):
        self.cost_weight = cost_weight
        self.unreliability_weight = unreliability_weight
        self.latency_weight = latency_weight
        self.initialization_operator = (
            initialization_operator
            or GeneticOperatorConfiguration(EvenSpreadInitializationOperator)
        )
        self.selection_operator = selection_operator or GeneticOperatorConfiguration(
            TournamentSelection, 5
        )
        self.crossover_operator = crossover_operator or GeneticOperatorConfiguration(
            SinglePointCrossoverOperator
        )
        self.mutation_operators = (
            mutation_operators
            if mutation_operators is not None
            else [GeneticOperatorConfiguration(RandomReassignmentMutationOperator, 0.1)]
        )
        self.population_size = population_size
        self.max_generations = max_generations
        self.crossover_probability = crossover_probability
        self.chromosome_mutation_probability = chromosome_mutation_probability
        self.num_elite = num_elite
        self.seed = seed
        self.initial_population_file_path = initial_population_file_path
        self._validate()

    @classmethod
    def from_file(cls, config_file_path: str) -> "Config":
        config_parser = CustomConfigParser(config_file_path, encoding="ascii")
        fitness_function_section = "Fitness_Function_Settings"
        operators_section = "Operator_Settings"
        general_section = "General_Settings"
        seed = config_parser.getint(general_section, "seed", fallback=None)
        return Config(
            config_parser.getfloat(
                fitness_function_section, "cost_weight", fallback=0.3
            ),
            config_parser.getfloat(
                fitness_function_section, "unreliability_weight", fallback=0.2
            ),
            config_parser.getfloat(
                fitness_function_section, "latency_weight", fallback=0.5
            ),
            config_parser.getinitializationoperator(
                operators_section, "initialization_operator", fallback=None
            ),
            config_parser.getselectionoperator(
                operators_section, "selection_operator", fallback=None
            ),
            config_parser.getcrossoveroperator(
                operators_section, "crossover_operator", fallback=None
            ),
            config_parser.getmutationoperators(
                operators_section, "mutation_operators", fallback=None
            ),
            config_parser.getint(general_section, "population_size", fallback=100),
            config_parser.getint(general_section, "max_generations", fallback=1000),
            config_parser.getfloat(
                general_section, "crossover_probability", fallback=1.0
            ),
            config_parser.getfloat(
                general_section, "chromosome_mutation_probability", fallback=1.0
            ),
            config_parser.getint(general_section, "num_elite", fallback=0),
            seed,
            config_parser.get(
                general_section, "initial_population_file_path", fallback=None
            ),
        )

    @property
    def tournament_size(self) -> Optional[int]:
        if self.selection_operator.genetic_operator_type is not TournamentSelection:
            return None
        argument = self.selection_operator.argument
        return int(argument) if argument is not None else 5

    @property
    def mutation_rate(self) -> Optional[float]:
        for mutation_operator in self.mutation_operators:
            if (
                mutation_operator.genetic_operator_type
                is RandomReassignmentMutationOperator
            ):
                argument = mutation_operator.argument
                return argument if argument is not None else 0.1
        return None

    def _validate(self) -> None:
        if self.population_size < 1:
            raise ValueError("The population size must be at least 1")
        if self.max_generations < 0:
            raise ValueError("The number of generations must not be negative")
        if not 0 <= self.num_elite < self.population_size:
            raise ValueError(
                "The number of elites must be non-negative and smaller than the "
                "population size"
            )
        for name in ["crossover_probability", "chromosome_mutation_probability"]:
            if not 0 <= getattr(self, name) <= 1:
                raise ValueError(f"The {name.replace('_', ' ')} must lie in [0, 1]")
        if self.tournament_size is not None and self.tournament_size < 1:
            raise ValueError("The tournament size must be at least 1")
        if self.tournament_size is None and self.selection_operator.arguments:
            raise ValueError(
                f"{self.selection_operator.genetic_operator_type.__name__} "
                "takes no argument"
            )
        for operator in [self.initialization_operator, self.crossover_operator]:
            if operator.arguments:
                raise ValueError(
                    f"{operator.genetic_operator_type.__name__} takes no argument"
                )
        for mutation_operator in self.mutation_operators:
            if any(not 0 <= rate <= 1 for rate in mutation_operator.arguments):
                raise ValueError("The mutation rate must lie in [0, 1]")
