# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Integer helpers for dyadic signal lengths.
"""

import numbers

from .exceptions import DomainError


def is_binary(number):
    """
    Check whether a number is an exact power of two (1, 2, 4, 8, ...).

    Args:
        number (int): Value to check

    Returns:
        bool: True if ``number == 2**p`` for some integer ``p >= 0``
    """
    if not isinstance(number, numbers.Integral) or isinstance(number, bool):
        return False
    number = int(number)
    return number > 0 and (number & (number - 1)) == 0


def get_exponent(number):
    """
    Integer base-2 logarithm, rounded down.

    ``get_exponent(1) == 0``, ``get_exponent(8) == 3``, ``get_exponent(9) == 3``.

    Args:
        number (int): Positive integer

    Returns:
        int: Largest ``p`` with ``2**p <= number``

    Raises:
        DomainError: If ``number`` is not a positive integer
    """
    if not isinstance(number, numbers.Integral) or isinstance(number, bool) or number < 1:
        raise DomainError(f"Exponent is only defined for positive integers, got {number!r}")
    return int(number).bit_length() - 1
