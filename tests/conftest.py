import math
import random
from functools import partial

import pytest

import genetic_operators
from cloud import CSP, VM
from fitness_function import AllocationFitnessFunction
from genetic_algorithm import Chromosome
from input import Input


@pytest.fixture
def sample_input():
    return Input.sample()


@pytest.fixture
def csps(sample_input):
    return sample_input.csps


@pytest.fixture
def vms(sample_input):
    return sample_input.vms


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def decode(sample_input):
    return partial(
        genetic_operators.decoding_function,
        vms=sample_input.vms,
        csps=sample_input.csps,
    )


@pytest.fixture
def make_chromosome(decode):
    def _make_chromosome(genes, fitness_value=None):
        return Chromosome(list(genes), fitness_value, decode)

    return _make_chromosome


@pytest.fixture
def fitness_function():
    return AllocationFitnessFunction()


@pytest.fixture
def even_spread_fitness(csps):
    """Objective value of the evenly spread assignment of the sample input."""
    total_cost = 2 * sum(csp.cost for csp in csps)
    total_latency = 2 * sum(csp.latency for csp in csps)
    total_reliability = math.prod(csp.reliability for csp in csps) ** 2
    return 0.3 * total_cost + 0.2 * (1 - total_reliability) + 0.5 * total_latency


@pytest.fixture
def small_input():
    csps = [
        CSP("cheap", 10, 0.9, 5),
        CSP("reliable", 20, 0.99, 5),
        CSP("slow", 10, 0.9, 50),
    ]
    vms = [VM(f"vm-{index}") for index in range(6)]
    return Input(csps, vms)
