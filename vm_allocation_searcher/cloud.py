import math
from functools import total_ordering


@total_ordering
class CSP:
    """
    A cloud service provider that can host virtual machines. Every VM allocated to
    a CSP adds its cost and latency to the totals of an allocation and multiplies
    its reliability into the overall reliability of the allocation.

    :param cost: Monetary cost charged for each VM allocated to the provider.
    :param reliability: Probability that an allocation on the provider does not
        fail. Must lie in the half-open interval (0, 1].
    :param latency: Latency experienced by each VM allocated to the provider.
    """

    def __init__(self, name: str, cost: float, reliability: float, latency: float):
        if not (math.isfinite(cost) and cost > 0):
            raise ValueError(f"The cost of {name} must be a positive finite number")
        if not 0 < reliability <= 1:
            raise ValueError(f"The reliability of {name} must lie in (0, 1]")
        if not (math.isfinite(latency) and latency > 0):
            raise ValueError(f"The latency of {name} must be a positive finite number")
        self._name = name
        self._cost = float(cost)
        self._reliability = float(reliability)
        self._latency = float(latency)

    @property
    def name(self) -> str:
        return self._name

    @property
    def cost(self) -> float:
        return self._cost

    @property
    def reliability(self) -> float:
        return self._reliability

    @property
    def latency(self) -> float:
        return self._latency

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CSP):
            return False
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CSP):
            return False
        return (len(self.name), self.name) < (len(other.name), other.name)

    def __repr__(self) -> str:
        return (
            f"CSP({self.name!r}, cost={self.cost}, "
            f"reliability={self.reliability}, latency={self.latency})"
        )


@total_ordering
class VM:
    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VM):
            return False
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VM):
            return False
        return (len(self.name), self.name) < (len(other.name), other.name)

    def __repr__(self) -> str:
        return f"VM({self.name!r})"
