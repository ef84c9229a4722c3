from allocation import Allocation
from genetic_algorithm import Chromosome, FitnessFunction


class AllocationFitnessFunction(FitnessFunction[list[int]]):
    def __init__(
        self,
        cost_weight: float = 0.3,
        unreliability_weight: float = 0.2,
        latency_weight: float = 0.5,
    ):
        self.cost_weight = cost_weight
        self.unreliability_weight = unreliability_weight
        self.latency_weight = latency_weight

    def __call__(self, chromosome: Chromosome[list[int]]) -> float:
        allocation = chromosome.encoded_data
        fitness_value = self.objective_function(allocation)
        return fitness_value

    def objective_function(self, allocation: Allocation) -> float:
        return (
            self.cost_weight * allocation.total_cost
            + self.unreliability_weight * allocation.total_unreliability
            + self.latency_weight * allocation.total_latency
        )
