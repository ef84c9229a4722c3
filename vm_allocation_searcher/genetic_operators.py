import random
from abc import abstractmethod
from typing import Optional, Sequence

import collection_utils
from allocation import Allocation
from cloud import CSP, VM
from genetic_algorithm import (
    Chromosome,
    CrossoverOperator,
    InitializationOperator,
    MutationOperator,
    SelectionOperator,
    fitness_key,
)


class AssignmentInitializationOperator(
    InitializationOperator[[int, int], list[int]]
):
    """
    An abstract base class for initialization operators that generate initial
    assignment vectors for genetic algorithms that solve the VM allocation problem.
    """

    @abstractmethod
    def __init__(self, num_vms: int, num_csps: int):
        self.num_vms = num_vms
        self.num_csps = num_csps


class EvenSpreadInitializationOperator(AssignmentInitializationOperator):
    """
    An initialization operator for the VM allocation problem that spreads the VMs as
    evenly as possible over the CSPs. The first (num_vms % num_csps) CSPs receive
    one VM more than the others, and VMs are assigned in order, so the leading
    positions of the vector go to the leading CSPs.
    Every call returns the same assignment vector, hence a population built with
    this operator is made of identical clones and diversity only appears through
    crossover and mutation. When there are fewer VMs than CSPs, only the first
    num_vms CSPs receive a VM.
    """

    def __init__(self, num_vms: int, num_csps: int):
        super().__init__(num_vms, num_csps)

    def __call__(self, rng: random.Random) -> Chromosome[list[int]]:
        genes = self._even_spread_assignment(rng)
        return Chromosome(genes)

    def _even_spread_assignment(self, rng: random.Random) -> list[int]:
        vms_per_csp, remainder = divmod(self.num_vms, self.num_csps)
        genes = list[int]()
        for csp_index in range(self.num_csps):
            vms_to_allocate = vms_per_csp + 1 if csp_index < remainder else vms_per_csp
            genes += [csp_index] * vms_to_allocate
        genes = genes[: self.num_vms]
        unassigned_vm_indexes = collection_utils.shuffle(
            range(len(genes), self.num_vms), rng
        )
        genes += [vm_index % self.num_csps for vm_index in unassigned_vm_indexes]
        return genes


class ShuffledEvenSpreadInitializationOperator(EvenSpreadInitializationOperator):
    """
    Like EvenSpreadInitializationOperator, but every call returns a random
    permutation of the evenly spread assignment vector. Each CSP keeps the same
    number of VMs while the population starts out diverse.
    """

    def __init__(self, num_vms: int, num_csps: int):
        super().__init__(num_vms, num_csps)

    def __call__(self, rng: random.Random) -> Chromosome[list[int]]:
        genes = collection_utils.shuffle(self._even_spread_assignment(rng), rng)
        return Chromosome(genes)


class RandomInitializationOperator(AssignmentInitializationOperator):
    """
    An initialization operator that assigns each VM to a CSP drawn uniformly at
    random.
    """

    def __init__(self, num_vms: int, num_csps: int):
        super().__init__(num_vms, num_csps)

    def __call__(self, rng: random.Random) -> Chromosome[list[int]]:
        genes = [rng.randrange(self.num_csps) for _ in range(self.num_vms)]
        return Chromosome(genes)


class TournamentSelection(SelectionOperator[list[int]]):
    """
    A selection operator for genetic algorithms that draws a fixed number of
    distinct individuals from the population and selects the one with the lowest
    fitness value among them. This process is repeated until the desired number of
    individuals have been selected. The population itself is left untouched.
    If the population is smaller than the tournament, the whole population takes
    part in it.
    """

    def __init__(self, tournament_size: int = 5) -> None:
        self.tournament_size = int(tournament_size)

    def __call__(
        self,
        population: Sequence[Chromosome[list[int]]],
        rng: random.Random,
        selection_size: Optional[int] = None,
    ) -> list[Chromosome[list[int]]]:
        if selection_size is None:
            selection_size = len(population)
        tournament_size = min(self.tournament_size, len(population))
        selection = list[Chromosome[list[int]]]()
        while len(selection) < selection_size:
            candidates = rng.sample(population, k=tournament_size)
            winner = min(candidates, key=fitness_key)
            selection.append(winner)
        return selection


class LinearRankSelectionOperator(SelectionOperator[list[int]]):
    """
    A selection operator for genetic algorithms that sorts all individuals in the
    population from the worst to the best fitness value and assigns them a rank.
    The selection probability for each individual is proportional to its rank, so
    the best individual is the most likely to be selected while even the worst one
    keeps a chance to contribute to the next generation.
    """

    def __init__(self) -> None:
        pass

    def __call__(
        self,
        population: Sequence[Chromosome[list[int]]],
        rng: random.Random,
        selection_size: Optional[int] = None,
    ) -> list[Chromosome[list[int]]]:
        if selection_size is None:
            selection_size = len(population)
        if selection_size == 0:
            return []
        sorted_population = sorted(population, key=fitness_key, reverse=True)
        ranks = [index + 1 for index, _ in enumerate(sorted_population)]
        rank_sum = len(ranks) * (len(ranks) + 1) / 2
        selection_probabilities = [rank / rank_sum for rank in ranks]
        return _stochastic_universal_sampling(
            sorted_population, selection_probabilities, selection_size, rng
        )


def _stochastic_universal_sampling(
    population: Sequence[Chromosome[list[int]]],
    selection_probabilities: Sequence[float],
    selection_size: int,
    rng: random.Random,
) -> list[Chromosome[list[int]]]:
    """
    A sampling technique used in the context of genetic algorithms.
    Stochastic Universal Sampling (SUS) views the cumulative sum of the selection
    probabilities for each individual in the population as a line. The line is split
    into multiple intervals corresponding to the selection probabilities of each
    individual.
    SUS generates a single random value, and places equally spaced pointers on the line
    starting from that value. The number of times an individual appears in the
    resulting list is determined by the number of pointers that land on the interval
    associated with that individual.
    """
    if round(sum(selection_probabilities)) != 1:
        raise ValueError("The sum of the elements in probabilities must equal 1")
    probability_sum = 0.0
    pointer = rng.uniform(0, 1 / selection_size)
    selected = list[Chromosome[list[int]]]()
    for chromosome, selection_probability in zip(population, selection_probabilities):
        probability_sum += selection_probability
        while pointer < probability_sum and len(selected) < selection_size:
            selected.append(chromosome)
            pointer += 1 / selection_size
    # rounding can leave the last pointer just past the end of the line
    while len(selected) < selection_size:
        selected.append(population[-1])
    return selected


class SinglePointCrossoverOperator(CrossoverOperator[list[int]]):
    """
    A crossover operator that draws a crossover point p uniformly in [0, N) and
    builds a single child that takes the genes before p from the first parent and
    the remaining genes from the second parent.
    """

    def __init__(self) -> None:
        pass

    def __call__(
        self,
        parent1: Chromosome[list[int]],
        parent2: Chromosome[list[int]],
        rng: random.Random,
    ) -> Chromosome[list[int]]:
        crossover_point = rng.randrange(len(parent1.genes))
        child_genes = single_point_recombination(
            parent1.genes, parent2.genes, crossover_point
        )
        return Chromosome(child_genes, decoding_function=parent1.decoding_function)


def single_point_recombination(
    genes1: list[int], genes2: list[int], crossover_point: int
) -> list[int]:
    """
    Returns genes1[:crossover_point] followed by genes2[crossover_point:]. A
    crossover point of 0 copies genes2 and a crossover point equal to the length of
    the vectors copies genes1.
    """
    child_genes, _ = collection_utils.swap_elements_inside_interval(
        genes1, genes2, crossover_point
    )
    return child_genes


class UniformCrossoverOperator(CrossoverOperator[list[int]]):
    """
    A crossover operator that builds a single child by taking every gene from
    either parent with equal probability.
    """

    def __init__(self) -> None:
        pass

    def __call__(
        self,
        parent1: Chromosome[list[int]],
        parent2: Chromosome[list[int]],
        rng: random.Random,
    ) -> Chromosome[list[int]]:
        mask = [rng.randrange(2) for _ in parent1.genes]
        child_genes, _ = collection_utils.swap_elements_based_on_mask(
            parent1.genes, parent2.genes, mask
        )
        return Chromosome(child_genes, decoding_function=parent1.decoding_function)


class RandomReassignmentMutationOperator(MutationOperator[list[int]]):
    """
    A mutation operator for genetic algorithms that solve the VM allocation problem
    that independently reassigns each VM, with the given probability, to a CSP drawn
    uniformly at random. The chromosome is modified in place.
    """

    def __init__(self, num_csps: int, probability: float = 0.1):
        self.num_csps = num_csps
        self.probability = probability

    def __call__(
        self, chromosome: Chromosome[list[int]], rng: random.Random
    ) -> Chromosome[list[int]]:
        genes = chromosome.genes
        for index in range(len(genes)):
            if rng.random() < self.probability:
                genes[index] = rng.randrange(self.num_csps)
        chromosome.invalidate()
        return chromosome


def decoding_function(
    genes: list[int],
    vms: Sequence[VM],
    csps: Sequence[CSP],
) -> Allocation:
    """
    Takes as input an assignment vector and uses this information to create an
    instance of the Allocation class that represents the corresponding allocation.
    """
    allocation = Allocation.from_assignment_vector(vms, csps, genes)
    return allocation
