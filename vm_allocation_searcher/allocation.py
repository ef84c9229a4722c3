import math
from functools import cached_property
from typing import Sequence

from cloud import CSP, VM


class Allocation:
    def __init__(
        self,
        designated_csp_per_vm: dict[VM, CSP],
        csps: Sequence[CSP],
    ):
        self.designated_csp_per_vm = designated_csp_per_vm
        self.csps = list(csps)

    @classmethod
    def from_assignment_vector(
        cls,
        vms: Sequence[VM],
        csps: Sequence[CSP],
        assignment_vector: Sequence[int],
    ) -> "Allocation":
        """
        Creates an allocation from an assignment vector. See the property
        assignment_vector of this class for more information on its structure.
        """
        if len(assignment_vector) != len(vms):
            raise ValueError(
                f"Expected an assignment vector of length {len(vms)}, "
                f"got {len(assignment_vector)}"
            )
        if any(not 0 <= csp_index < len(csps) for csp_index in assignment_vector):
            raise ValueError("Assignment vector contains an unknown CSP index")
        designated_csp_per_vm = {
            vm: csps[csp_index] for vm, csp_index in zip(vms, assignment_vector)
        }
        return Allocation(designated_csp_per_vm, csps)

    @cached_property
    def vms(self) -> list[VM]:
        return list(self.designated_csp_per_vm.keys())

    @cached_property
    def assignment_vector(self) -> list[int]:
        """
        Returns the assignment vector corresponding to this allocation.
        An assignment vector is a list of integers with one entry per VM. The value
        at position i is the index, in the list of CSPs, of the provider that hosts
        the i-th VM.
        """
        csp_indexes = {csp: index for index, csp in enumerate(self.csps)}
        return [csp_indexes[csp] for csp in self.designated_csp_per_vm.values()]

    @cached_property
    def vms_by_designated_csp(self) -> dict[CSP, list[VM]]:
        vms_by_designated_csp: dict[CSP, list[VM]] = {csp: [] for csp in self.csps}
        for vm, designated_csp in self.designated_csp_per_vm.items():
            vms_by_designated_csp[designated_csp].append(vm)
        return vms_by_designated_csp

    @cached_property
    def employed_csps(self) -> set[CSP]:
        return set(self.designated_csp_per_vm.values())

    @cached_property
    def total_cost(self) -> float:
        return sum(csp.cost for csp in self.designated_csp_per_vm.values())

    @cached_property
    def total_reliability(self) -> float:
        return math.prod(
            csp.reliability for csp in self.designated_csp_per_vm.values()
        )

    @cached_property
    def total_unreliability(self) -> float:
        return 1 - self.total_reliability

    @cached_property
    def total_latency(self) -> float:
        return sum(csp.latency for csp in self.designated_csp_per_vm.values())

    def is_valid(self, vms: Sequence[VM]) -> bool:
        """
        Checks that every VM of the given list, and no other VM, is allocated to one
        of the CSPs of this allocation, in the order of the list.
        """
        return (
            len(vms) > 0
            and self.vms == list(vms)
            and all(csp in self.csps for csp in self.designated_csp_per_vm.values())
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Allocation):
            return False
        return (
            self.designated_csp_per_vm == other.designated_csp_per_vm
            and self.csps == other.csps
        )

    def __hash__(self) -> int:
        return hash(tuple(self.designated_csp_per_vm.items()))
