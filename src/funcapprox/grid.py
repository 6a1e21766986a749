from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

GRID_FILES = [
    "n_samples_per_dim",
    "inputs_grid",
    "activations",
    "activations_unnormalized",
    "lines",
]


def check_grid_arguments(
    min_values: Sequence[float],
    max_values: Sequence[float],
    n_samples_per_dim: Sequence[int],
    expected_input_dim: int,
) -> bool:
    """Check that there are bounds and a sample count for every input dimension."""
    lengths = [len(min_values), len(max_values), len(n_samples_per_dim)]
    if any(length != expected_input_dim for length in lengths):
        logger.error(
            "Grid bounds and sample counts must have one entry per input dimension "
            f"({expected_input_dim}), but have lengths {lengths}"
        )
        return False

    if any(int(n) < 1 for n in n_samples_per_dim):
        logger.error(f"Need at least one sample per dimension, got {list(n_samples_per_dim)}")
        return False

    return True


def generate_input_grid(
    min_values: Sequence[float],
    max_values: Sequence[float],
    n_samples_per_dim: Sequence[int],
) -> np.ndarray:
    """
    Generate a regular grid of inputs.

    Args:
        min_values: Minimum value along each dimension.
        max_values: Maximum value along each dimension.
        n_samples_per_dim: Number of samples along each dimension.

    Returns:
        np.ndarray: Array of shape (prod(n_samples_per_dim), n_dims). The first dimension
        varies slowest.

    Example:
        >>> generate_input_grid([0, 0], [1, 2], [2, 3])
        array([[0., 0.],
               [0., 1.],
               [0., 2.],
               [1., 0.],
               [1., 1.],
               [1., 2.]])
    """
    axes = [
        np.linspace(lower, upper, int(n))
        for lower, upper, n in zip(min_values, max_values, n_samples_per_dim)
    ]
    mesh = np.meshgrid(*axes, indexing="ij")
    return np.column_stack([m.ravel() for m in mesh])


def grid_file(directory: Path, name: str) -> Path:
    return Path(directory) / f"{name}.txt"


def save_grid_matrices(
    directory: Path, matrices: dict[str, np.ndarray], overwrite: bool = False
) -> bool:
    """
    Save each matrix as a text file `<name>.txt` in `directory`.

    If any of the files exists already and `overwrite` is False, nothing is written.

    Returns:
        bool: True if all files were written. False if files existed and `overwrite` was
        False, or if writing failed.

    """
    directory = Path(directory)

    existing = [grid_file(directory, name) for name in matrices]
    existing = [f for f in existing if f.exists()]
    if len(existing) > 0 and not overwrite:
        logger.warning(
            f"Not saving grid data to {directory}, because these files exist already: "
            f"{[f.name for f in existing]}. Use overwrite=True to replace them."
        )
        return False

    try:
        directory.mkdir(exist_ok=True, parents=True)

        # Leftovers from an earlier save with different content would be inconsistent
        for name in GRID_FILES:
            f = grid_file(directory, name)
            if name not in matrices and f.exists():
                f.unlink()

        for name, matrix in matrices.items():
            np.savetxt(grid_file(directory, name), np.asarray(matrix))
    except OSError as e:
        logger.error(f"Could not save grid data to {directory}: {e}")
        return False

    logger.info(f"Saved grid data ({', '.join(matrices)}) to {directory}")
    return True


def load_grid_data(directory: Path) -> pd.DataFrame:
    """
    Load the grid data saved by `save_grid_data` into a data frame.

    The data frame has one row per grid sample and the columns
      - `input_<i>` for every input dimension
      - `activation_<j>` for every basis function
      - `line_<j>` for every basis function (if the lines were saved)

    Raises:
        FileNotFoundError: If `directory` holds no grid inputs or activations.
    """
    inputs = np.loadtxt(grid_file(directory, "inputs_grid"), ndmin=2)
    activations = np.loadtxt(grid_file(directory, "activations"), ndmin=2)

    columns = {}
    for i in range(inputs.shape[1]):
        columns[f"input_{i}"] = inputs[:, i]
    for j in range(activations.shape[1]):
        columns[f"activation_{j}"] = activations[:, j]

    lines_file = grid_file(directory, "lines")
    if lines_file.exists():
        lines = np.loadtxt(lines_file, ndmin=2)
        for j in range(lines.shape[1]):
            columns[f"line_{j}"] = lines[:, j]

    return pd.DataFrame(columns)


def load_n_samples_per_dim(directory: Path) -> np.ndarray:
    return np.loadtxt(grid_file(directory, "n_samples_per_dim"), ndmin=1).astype(int)
