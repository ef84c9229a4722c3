import json
from json import JSONEncoder
from typing import Any, Optional

from allocation import Allocation
from cloud import CSP, VM
from fitness_function import AllocationFitnessFunction


class CustomJSONEncoder(JSONEncoder):
    def __init__(
        self,
        *args: Any,
        fitness_function: Optional[AllocationFitnessFunction] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.fitness_function = fitness_function or AllocationFitnessFunction()

    def default(self, o: Any) -> Any:
        if isinstance(o, Allocation):
            return self._serialize_allocation(o)
        return super().default(o)

    def _serialize_allocation(self, allocation: Allocation) -> dict[str, Any]:
        serialization = dict[str, Any]()
        serialization["objective_value"] = self.fitness_function.objective_function(
            allocation
        )
        serialization["total_cost"] = allocation.total_cost
        serialization["total_reliability"] = allocation.total_reliability
        serialization["total_latency"] = allocation.total_latency
        serialization["assignment"] = [
            self._serialize_assignment(vm, csp)
            for vm, csp in allocation.designated_csp_per_vm.items()
        ]
        serialization["allocated_vms_per_csp"] = {
            csp.name: [vm.name for vm in vms]
            for csp, vms in allocation.vms_by_designated_csp.items()
        }
        return serialization

    def _serialize_assignment(self, vm: VM, csp: CSP) -> dict[str, Any]:
        serialization = dict[str, Any]()
        serialization["vm"] = vm.name
        serialization["csp"] = csp.name
        serialization["cost"] = csp.cost
        serialization["reliability"] = csp.reliability
        serialization["latency"] = csp.latency
        return serialization


class Output:
    def __init__(
        self,
        allocation: Allocation,
        fitness_function: Optional[AllocationFitnessFunction] = None,
    ):
        self.allocation = allocation
        self.fitness_function = fitness_function

    def to_json(self) -> str:
        return json.dumps(
            self.allocation,
            cls=CustomJSONEncoder,
            fitness_function=self.fitness_function,
            indent=4,
        )

    def to_file(self, output_file_path: str) -> None:
        with open(output_file_path, mode="w", encoding="utf8") as output_file:
            json.dump(
                self.allocation,
                output_file,
                cls=CustomJSONEncoder,
                fitness_function=self.fitness_function,
                indent=4,
            )
