import re
from functools import reduce
from typing import Callable, Sequence


def format_string(
    string: str, formatting_functions: Sequence[Callable[[str], str]]
) -> str:
    formatted_string = reduce(
        lambda partial_string, function: function(partial_string),
        formatting_functions,
        string,
    )
    return formatted_string


def split_string_into_matrix(
    input_string: str, row_delimiter: str = "\n", column_delimiter: str = " "
) -> list[list[str]]:
    matrix = [
        row.split(column_delimiter)
        for row in input_string.split(row_delimiter)
        if row
    ]
    return matrix


def remove_duplicate_whitespace_characters(string: str) -> str:
    new_string = re.sub("[^\\S\\r\\n]+", " ", string)
    return new_string


def remove_comments(string: str) -> str:
    new_string = re.sub("[#;].*", "", string)
    return new_string


def strip_lines(string: str) -> str:
    new_string = "\n".join(line.strip() for line in string.splitlines())
    return new_string
