import random
from heapq import nsmallest
from typing import (
    Callable,
    Iterable,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

T = TypeVar("T")


def swap_elements_inside_interval(
    input_list_a: list[T],
    input_list_b: list[T],
    start: int,
    end: Optional[int] = None,
) -> Tuple[list[T], list[T]]:
    if end is None:
        end = min(len(input_list_a), len(input_list_b))
    output_list_a = input_list_a[:start] + input_list_b[start:end] + input_list_a[end:]
    output_list_b = input_list_b[:start] + input_list_a[start:end] + input_list_b[end:]
    return output_list_a, output_list_b


def swap_elements_based_on_mask(
    input_list_a: list[T], input_list_b: list[T], mask: list[int]
) -> Tuple[list[T], list[T]]:
    output_list_a = input_list_a.copy()
    output_list_b = input_list_b.copy()
    for index, mask_value in enumerate(mask):
        if mask_value:
            output_list_a[index], output_list_b[index] = (
                input_list_b[index],
                input_list_a[index],
            )
    return output_list_a, output_list_b


def select_best(
    iterable: Iterable[T], num_best: int, key: Optional[Callable[[T], float]] = None
) -> list[T]:
    """
    Returns the num_best elements with the lowest key, in ascending order.
    """
    return nsmallest(num_best, iterable, key=key)


def shuffle(sequence: Sequence[T], rng: random.Random) -> list[T]:
    shuffled_sequence = list(sequence)
    rng.shuffle(shuffled_sequence)
    return shuffled_sequence
