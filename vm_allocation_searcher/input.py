from typing import Optional, Sequence

import string_utils
from cloud import CSP, VM


class InputParser:
    """
    Parses a text file that describes the CSPs and the VMs of an allocation
    problem. The expected layout, after comments and blank lines are removed, is:

        <num_csps> <num_vms>
        <name> <cost> <reliability> <latency>    (one row per CSP)
        <vm_name> ...                            (optional)

    When the row of VM names is missing, the VMs are named VM1, VM2, ...
    """

    def __init__(self, input_file_path: str, encoding: Optional[str] = None) -> None:
        with open(input_file_path, encoding=encoding) as input_file:
            file_content = input_file.read()
        self.num_csps: int = 0
        self.num_vms: int = 0
        self.csp_names = list[str]()
        self.cost_per_csp = list[float]()
        self.reliability_per_csp = list[float]()
        self.latency_per_csp = list[float]()
        self.vm_names = list[str]()
        self._parse_file_content(file_content)

    def _parse_file_content(self, file_content: str) -> None:
        try:
            formatted_file_content = self._format_file_content_for_parsing(file_content)
            rows_to_parse = string_utils.split_string_into_matrix(
                formatted_file_content
            )
            self._parse_general_information_header(rows_to_parse.pop(0))
            self._parse_csp_matrix([rows_to_parse.pop(0) for _ in range(self.num_csps)])
            self._parse_vm_names(rows_to_parse.pop(0) if rows_to_parse else None)
        except IndexError as exc:
            raise ValueError("Unexpected EOF. File may be too short.") from exc
        if rows_to_parse:
            raise ValueError("Unexpected content after the list of VM names")

    def _format_file_content_for_parsing(self, file_content: str) -> str:
        formatting_functions = [
            string_utils.remove_comments,
            string_utils.remove_duplicate_whitespace_characters,
            string_utils.strip_lines,
        ]
        formatted_file_content = string_utils.format_string(
            file_content, formatting_functions
        )
        return formatted_file_content

    def _parse_general_information_header(self, row_to_parse: list[str]) -> None:
        if len(row_to_parse) != 2:
            raise ValueError("The header must contain the number of CSPs and VMs")
        self.num_csps, self.num_vms = [int(elem) for elem in row_to_parse]
        if self.num_csps < 1:
            raise ValueError("At least one CSP is required")
        if self.num_vms < 1:
            raise ValueError("At least one VM is required")

    def _parse_csp_matrix(self, rows_to_parse: list[list[str]]) -> None:
        for row in rows_to_parse:
            if len(row) != 4:
                raise ValueError(
                    f"Expected name, cost, reliability and latency, got {row}"
                )
            name, cost, reliability, latency = row
            self.csp_names.append(name)
            self.cost_per_csp.append(float(cost))
            self.reliability_per_csp.append(float(reliability))
            self.latency_per_csp.append(float(latency))

    def _parse_vm_names(self, row_to_parse: Optional[list[str]]) -> None:
        if row_to_parse is None:
            self.vm_names = [f"VM{index}" for index in range(1, self.num_vms + 1)]
            return
        if len(row_to_parse) != self.num_vms:
            raise ValueError(
                f"Expected {self.num_vms} VM names, got {len(row_to_parse)}"
            )
        self.vm_names = row_to_parse


class Input:
    def __init__(self, csps: Sequence[CSP], vms: Sequence[VM]):
        if len(csps) < 1:
            raise ValueError("At least one CSP is required")
        if len(vms) < 1:
            raise ValueError("At least one VM is required")
        if len(set(csps)) != len(csps):
            raise ValueError("CSP names must be unique")
        if len(set(vms)) != len(vms):
            raise ValueError("VM names must be unique")
        self.csps = list(csps)
        self.vms = list(vms)

    @property
    def num_csps(self) -> int:
        return len(self.csps)

    @property
    def num_vms(self) -> int:
        return len(self.vms)

    @classmethod
    def from_file(cls, input_file_path: str) -> "Input":
        input_parser = InputParser(input_file_path, encoding="utf-8")
        csps = cls._create_csps(
            input_parser.csp_names,
            input_parser.cost_per_csp,
            input_parser.reliability_per_csp,
            input_parser.latency_per_csp,
        )
        vms = cls._create_vms(input_parser.vm_names)
        return Input(csps, vms)

    @classmethod
    def sample(cls) -> "Input":
        """
        The reference scenario: five CSPs and ten VMs named VM1 to VM10.
        """
        csps = cls._create_csps(
            ["CSP1", "CSP2", "CSP3", "CSP4", "CSP5"],
            [100, 120, 150, 110, 130],
            [0.9, 0.95, 0.85, 0.92, 0.88],
            [10, 8, 12, 9, 11],
        )
        vms = cls._create_vms([f"VM{index}" for index in range(1, 11)])
        return Input(csps, vms)

    @classmethod
    def _create_csps(
        cls,
        names: list[str],
        cost_per_csp: list[float],
        reliability_per_csp: list[float],
        latency_per_csp: list[float],
    ) -> list[CSP]:
        csps = [
            CSP(name, cost, reliability, latency)
            for name, cost, reliability, latency in zip(
                names, cost_per_csp, reliability_per_csp, latency_per_csp
            )
        ]
        return csps

    @classmethod
    def _create_vms(cls, names: list[str]) -> list[VM]:
        vms = [VM(name) for name in names]
        return vms
