import logging
import signal
import sys
from argparse import ArgumentParser, Namespace
from types import FrameType
from typing import Optional


from allocation import Allocation
from config import Config
from input import Input
from output import Output
from vm_allocation_searcher import (
    search_optimal_allocation,
    setup_fitness_function,
)


def main() -> None:
    _register_signal_handlers()
    args = _parse_command_line_arguments()
    _setup_loggers(args.log_file_path, args.csv_file_path)
    config = _load_config(args.config_file_path, args.seed)
    input_ = _read_input(args.input_file_path)
    allocation = search_optimal_allocation(input_, config)
    _write_output(args.output_file_path, allocation, config)


def _register_signal_handlers() -> None:
    signalnums = [signal.SIGINT, signal.SIGTERM]

    def signal_handler(_signalnum: int, _frame: Optional[FrameType]) -> None:
        sys.exit()

    for signalnum in signalnums:
        signal.signal(signalnum, signal_handler)


def _parse_command_line_arguments() -> Namespace:
    description = (
        "search for a cheap, reliable and fast allocation of Virtual Machines to "
        + "Cloud Service Providers using a Genetic Algorithm"
    )
    arg_parser = ArgumentParser(description=description, add_help=False)
    arg_parser.add_argument(
        "input_file_path",
        metavar="INPUT_FILE",
        type=str,
        help="specify the path to the input file describing the CSPs and the VMs",
    )
    optional_arguments = arg_parser.add_argument_group("optional arguments")
    optional_arguments.add_argument(
        "-h", "--help", action="help", help="show this help message and exit"
    )
    optional_arguments.add_argument(
        "-c",
        "--config",
        dest="config_file_path",
        type=str,
        help=(
            "specify the path to the configuration file. The reference settings "
            "are used when omitted."
        ),
    )
    optional_arguments.add_argument(
        "-o",
        "--output",
        dest="output_file_path",
        type=str,
        help=(
            "specify the path to the output file where results will be saved. "
            "Results are printed to the standard output when omitted."
        ),
    )
    optional_arguments.add_argument(
        "-s",
        "--seed",
        dest="seed",
        type=int,
        help="seed the random number generator to make the search reproducible",
    )
    optional_arguments.add_argument(
        "-l",
        "--log",
        dest="log_file_path",
        type=str,
        help="enable logging. A log file will be created in the specified path.",
    )
    optional_arguments.add_argument(
        "-t",
        "--track-fitness",
        dest="csv_file_path",
        type=str,
        help=(
            "enable tracking of the best fitness value per generation. A CSV file "
            "will be created in the specified path. This file will contain pairs "
            "of data, each representing a generation number and its corresponding "
            "minimum fitness value."
        )
    )
    args = arg_parser.parse_args()
    return args

def _setup_loggers(log_file_path: Optional[str], csv_file_path: Optional[str]) -> None:
    if log_file_path is not None:
        _setup_main_logger(log_file_path)
    if csv_file_path is not None:
        _setup_fitness_logger(csv_file_path)

def _setup_main_logger(log_file_path: str) -> None:
    main_logger = logging.getLogger('main_logger')
    main_logger.setLevel(logging.DEBUG)
    main_logger_handler = logging.FileHandler(log_file_path, mode='w')
    main_logger.addHandler(main_logger_handler)

def _setup_fitness_logger(csv_file_path: str) -> None:
    fitness_logger = logging.getLogger('fitness_logger')
    fitness_logger.setLevel(logging.INFO)
    fitness_logger_handler = logging.FileHandler(csv_file_path, mode='w')
    fitness_logger.addHandler(fitness_logger_handler)

def _load_config(config_file_path: Optional[str], seed: Optional[int]) -> Config:
    config = Config.from_file(config_file_path) if config_file_path else Config()
    if seed is not None:
        config.seed = seed
    return config


def _read_input(input_file_path: str) -> Input:
    return Input.from_file(input_file_path)


def _write_output(
    output_file_path: Optional[str], allocation: Allocation, config: Config
) -> None:
    output = Output(allocation, setup_fitness_function(config))
    if output_file_path is None:
        print(output.to_json())
    else:
        output.to_file(output_file_path)


if __name__ == "__main__":
    main()
