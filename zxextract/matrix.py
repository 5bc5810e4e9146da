"""Matrix utilities.

This module provides:

- `is_unitary`: check if a matrix is unitary.
- `is_equal_up_to_global_phase`: check if two matrices differ only by a global phase.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

T = TypeVar("T", bound=np.number[Any])


def is_unitary(mat: NDArray[T]) -> bool:
    r"""Check if a matrix is unitary.

    Parameters
    ----------
    mat : `numpy.typing.NDArray`\[T\]
        matrix to check

    Returns
    -------
    `bool`
        `True` if unitary, `False` otherwise
    """
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:  # noqa: PLR2004
        return False
    return np.allclose(np.eye(mat.shape[0]), mat @ mat.T.conj())


def is_equal_up_to_global_phase(mat1: NDArray[T], mat2: NDArray[T], atol: float = 1e-8) -> bool:
    r"""Check if two matrices are equal up to a global phase.

    The phase is read off the entry of ``mat2`` with the largest magnitude.

    Parameters
    ----------
    mat1 : `numpy.typing.NDArray`\[T\]
        first matrix
    mat2 : `numpy.typing.NDArray`\[T\]
        second matrix
    atol : `float`, optional
        absolute tolerance, by default 1e-8

    Returns
    -------
    `bool`
        `True` if ``mat1`` equals ``exp(i theta) * mat2`` for some theta
    """
    if mat1.shape != mat2.shape:
        return False
    index = np.unravel_index(np.argmax(np.abs(mat2)), mat2.shape)
    if np.isclose(mat2[index], 0, atol=atol):
        return bool(np.allclose(mat1, 0, atol=atol))
    ratio = mat1[index] / mat2[index]
    if not np.isclose(abs(ratio), 1, atol=atol):
        return False
    return bool(np.allclose(mat1, ratio * mat2, atol=atol))
