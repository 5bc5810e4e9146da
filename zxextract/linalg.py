"""Linear algebra over GF(2).

This module provides:

- `Swap`: Row swap step of a Gaussian elimination.
- `AddTo`: Row addition step of a Gaussian elimination.
- `GEStep`: Type alias for elimination steps.
- `gaussian_elimination`: Row reduce a 0/1 matrix and log every step.
- `apply_steps`: Replay a step log on a matrix.
- `reverse_gaussian_elimination`: Replay a step log backwards to undo it.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

import numpy as np
import typing_extensions

if sys.version_info >= (3, 10):
    from typing import TypeAlias
else:
    from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from collections.abc import Iterable

    from numpy.typing import ArrayLike, NDArray


@dataclass(frozen=True)
class Swap:
    """Swap of two rows.

    Attributes
    ----------
    row1 : int
        pivot row
    row2 : int
        row found below the pivot row
    """

    row1: int
    row2: int


@dataclass(frozen=True)
class AddTo:
    """Addition of the source row into the target row.

    Attributes
    ----------
    source : int
        row that is added
    target : int
        row that is overwritten by the sum
    """

    source: int
    target: int


GEStep: TypeAlias = Union[Swap, AddTo]


def _as_binary_matrix(matrix: ArrayLike) -> NDArray[np.uint8]:
    """Copy the matrix into a fresh uint8 array.

    Raises
    ------
    ValueError
        If the matrix is not two dimensional or has entries other than 0 and 1.
    """
    array = np.asarray(matrix)
    if array.ndim != 2:  # noqa: PLR2004
        msg = f"Matrix must be two dimensional, got shape {array.shape}"
        raise ValueError(msg)
    if not np.isin(array, (0, 1)).all():
        msg = "Matrix entries must be 0 or 1"
        raise ValueError(msg)
    return array.astype(np.uint8)


def _apply_step(mat: NDArray[np.uint8], step: GEStep) -> None:
    if isinstance(step, Swap):
        mat[[step.row1, step.row2]] = mat[[step.row2, step.row1]]
    elif isinstance(step, AddTo):
        mat[step.target] ^= mat[step.source]
    else:
        typing_extensions.assert_never(step)


def gaussian_elimination(matrix: ArrayLike) -> tuple[NDArray[np.uint8], list[GEStep]]:
    r"""Row reduce a matrix over GF(2).

    Rows are visited in order and share a single column cursor. All-zero rows
    are skipped. For every other row the cursor advances to the first column
    with a 1 at or below the row; the first such row becomes the pivot and is
    swapped up. The pivot is then cleared from every other row, above and
    below. The choice of the first row is part of the contract: the swaps are
    turned into gates by the caller.

    Parameters
    ----------
    matrix : `numpy.typing.ArrayLike`
        0/1 matrix; it is not modified.

    Returns
    -------
    `tuple`\[`numpy.typing.NDArray`\[`numpy.uint8`\], `list`\[`GEStep`\]\]
        reduced matrix and the steps in the order they were performed
    """
    mat = _as_binary_matrix(matrix)
    n_rows, n_cols = mat.shape
    steps: list[GEStep] = []
    current_col = 0
    for i in range(n_rows):
        if not mat[i].any():
            continue
        while current_col < n_cols:
            candidates = np.flatnonzero(mat[i:, current_col])
            if candidates.size > 0:
                pivot_row = i + int(candidates[0])
                if pivot_row != i:
                    step = Swap(i, pivot_row)
                    _apply_step(mat, step)
                    steps.append(step)
                break
            current_col += 1
        if current_col >= n_cols:
            break
        for j in range(n_rows):
            if j != i and mat[j, current_col]:
                step = AddTo(i, j)
                _apply_step(mat, step)
                steps.append(step)
        current_col += 1
    return mat, steps


def apply_steps(matrix: ArrayLike, steps: Iterable[GEStep]) -> NDArray[np.uint8]:
    r"""Replay elimination steps in order.

    Parameters
    ----------
    matrix : `numpy.typing.ArrayLike`
        0/1 matrix; it is not modified.
    steps : `collections.abc.Iterable`\[`GEStep`\]
        steps to replay

    Returns
    -------
    `numpy.typing.NDArray`\[`numpy.uint8`\]
        transformed matrix
    """
    mat = _as_binary_matrix(matrix)
    for step in steps:
        _apply_step(mat, step)
    return mat


def reverse_gaussian_elimination(matrix: ArrayLike, steps: Iterable[GEStep]) -> NDArray[np.uint8]:
    r"""Undo elimination steps by replaying them last to first.

    Every step is its own inverse over GF(2), so ``reverse_gaussian_elimination(reduced, steps)``
    recovers the matrix passed to `gaussian_elimination`.

    Parameters
    ----------
    matrix : `numpy.typing.ArrayLike`
        0/1 matrix; it is not modified.
    steps : `collections.abc.Iterable`\[`GEStep`\]
        steps in the order they were performed

    Returns
    -------
    `numpy.typing.NDArray`\[`numpy.uint8`\]
        matrix before the steps
    """
    mat = _as_binary_matrix(matrix)
    for step in reversed(list(steps)):
        _apply_step(mat, step)
    return mat
