from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import numpy as np

from funcapprox.grid import check_grid_arguments, generate_input_grid, save_grid_matrices
from funcapprox.model_parameters import ModelParameters
from funcapprox.parameterizable import ParameterizableArchive
from funcapprox.utils import as_float_array, parameters_to_string


class ModelParametersUnified(ModelParameters):
    """
    Approximator-agnostic representation of model parameters.

    The parameters describe a set of Gaussian kernels, each with a line segment attached to it.
    Many function approximators (RBFN, LWR, GPR, ...) can be expressed in this form, which allows
    generic tools to visualize and compare them without knowing where they came from.
    """

    archive_version = 1

    def __init__(
        self,
        centers: Any,
        widths: Any,
        slopes: Any,
        offsets: Any,
        normalized_basis_functions: bool = False,
        lines_pivot_at_max_activation: bool = False,
    ) -> None:
        """
        Initialize unified model parameters.

        Args:
            centers: Kernel centers, shape (n_basis_functions, n_dims).
            widths: Kernel widths, shape (n_basis_functions, n_dims).
            slopes: Slopes of the line segments, shape (n_basis_functions, n_dims).
            offsets: Offsets of the line segments, shape (n_basis_functions,).
            normalized_basis_functions: Whether the kernel activations are normalized so that
                they sum to one for every input.
            lines_pivot_at_max_activation: Whether the lines pivot around the kernel centers,
                i.e. `offsets` is the value of a line at its kernel center.

        Raises:
            ValueError: If the shapes of the arrays are inconsistent.

        """
        super().__init__()
        self.centers = as_float_array(centers, 2, "centers")
        self.widths = as_float_array(widths, 2, "widths")
        self.slopes = as_float_array(slopes, 2, "slopes")
        self.offsets = as_float_array(offsets, 1, "offsets")
        self.normalized_basis_functions = bool(normalized_basis_functions)
        self.lines_pivot_at_max_activation = bool(lines_pivot_at_max_activation)

        if self.centers.shape[1] < 1:
            raise ValueError("The input dimensionality must be at least 1")

        for name in ["widths", "slopes"]:
            if getattr(self, name).shape != self.centers.shape:
                raise ValueError(
                    f"`{name}` must have the same shape as `centers` {self.centers.shape}"
                )

        if self.offsets.shape != (self.n_basis_functions,):
            raise ValueError(
                f"`offsets` must have shape ({self.n_basis_functions},), got {self.offsets.shape}"
            )

    @property
    def n_basis_functions(self) -> int:
        return self.centers.shape[0]

    def get_expected_input_dim(self) -> int:
        return self.centers.shape[1]

    def get_selectable_parameters(self) -> set[str]:
        return {"centers", "widths", "slopes", "offsets"}

    def get_parameter_values(self) -> dict[str, np.ndarray]:
        return {
            "centers": self.centers.copy(),
            "widths": self.widths.copy(),
            "slopes": self.slopes.copy(),
            "offsets": self.offsets.copy(),
        }

    def set_parameter_values(self, values: dict[str, np.ndarray]) -> None:
        for label, value in self._check_parameter_values(values).items():
            setattr(self, label, value)

    def clone(self) -> ModelParametersUnified:
        cloned = type(self)(
            self.centers,
            self.widths,
            self.slopes,
            self.offsets,
            normalized_basis_functions=self.normalized_basis_functions,
            lines_pivot_at_max_activation=self.lines_pivot_at_max_activation,
        )
        cloned._copy_selection(self)
        return cloned

    def to_unified(self) -> ModelParametersUnified:
        return self.clone()

    def to_string(self) -> str:
        return parameters_to_string(
            type(self).__name__,
            {
                "kernels": {
                    "centers": self.centers,
                    "widths": self.widths,
                    "normalized": self.normalized_basis_functions,
                },
                "lines": {
                    "slopes": self.slopes,
                    "offsets": self.offsets,
                    "pivot_at_max_activation": self.lines_pivot_at_max_activation,
                },
            },
        )

    def _check_inputs(self, inputs: Any) -> np.ndarray:
        inputs = np.atleast_2d(np.asarray(inputs, dtype=float))
        if inputs.shape[1] != self.get_expected_input_dim():
            raise ValueError(
                f"Expected inputs with {self.get_expected_input_dim()} dimension(s), got shape {inputs.shape}"
            )
        return inputs

    def kernel_activations(self, inputs: Any, normalized: bool | None = None) -> np.ndarray:
        """
        Compute the activations of the Gaussian kernels.

        Args:
            inputs: Inputs of shape (n_samples, n_dims).
            normalized: Whether to normalize the activations. Defaults to
                `normalized_basis_functions`.

        Returns:
            np.ndarray: Activations of shape (n_samples, n_basis_functions). Normalized
            activations sum to one for each sample, unless all activations are zero.

        """
        inputs = self._check_inputs(inputs)
        if normalized is None:
            normalized = self.normalized_basis_functions

        diff = (inputs[:, np.newaxis, :] - self.centers[np.newaxis, :, :]) / self.widths
        activations = np.exp(-0.5 * np.sum(diff**2, axis=2))

        if normalized:
            sums = np.sum(activations, axis=1, keepdims=True)
            activations = np.divide(
                activations, sums, out=np.zeros_like(activations), where=sums > 0
            )

        return activations

    def lines(self, inputs: Any) -> np.ndarray:
        """Values of the line segments of all basis functions, shape (n_samples, n_basis_functions)."""
        inputs = self._check_inputs(inputs)

        if self.lines_pivot_at_max_activation:
            diff = inputs[:, np.newaxis, :] - self.centers[np.newaxis, :, :]
            return np.einsum("nbd,bd->nb", diff, self.slopes) + self.offsets

        return inputs @ self.slopes.T + self.offsets

    def save_grid_data(
        self,
        min_values: Sequence[float],
        max_values: Sequence[float],
        n_samples_per_dim: Sequence[int],
        directory: Path,
        overwrite: bool = False,
    ) -> bool:
        if not check_grid_arguments(
            min_values, max_values, n_samples_per_dim, self.get_expected_input_dim()
        ):
            return False

        inputs = generate_input_grid(min_values, max_values, n_samples_per_dim)

        matrices = {
            "n_samples_per_dim": np.asarray(n_samples_per_dim, dtype=int),
            "inputs_grid": inputs,
            "activations": self.kernel_activations(inputs),
            "lines": self.lines(inputs),
        }
        if self.normalized_basis_functions:
            matrices["activations_unnormalized"] = self.kernel_activations(
                inputs, normalized=False
            )

        return save_grid_matrices(Path(directory), matrices, overwrite=overwrite)

    def to_archive_dict(self) -> dict[str, Any]:
        return UnifiedArchive(
            **super().to_archive_dict(),
            centers=self.centers.tolist(),
            widths=self.widths.tolist(),
            slopes=self.slopes.tolist(),
            offsets=self.offsets.tolist(),
            normalized_basis_functions=self.normalized_basis_functions,
            lines_pivot_at_max_activation=self.lines_pivot_at_max_activation,
        ).model_dump()

    @classmethod
    def from_archive_dict(cls, archive: dict[str, Any]) -> ModelParametersUnified:
        state = UnifiedArchive.model_validate(archive)
        params = cls(
            state.centers,
            state.widths,
            state.slopes,
            state.offsets,
            normalized_basis_functions=state.normalized_basis_functions,
            lines_pivot_at_max_activation=state.lines_pivot_at_max_activation,
        )
        params.update_from_archive_dict(state.model_dump())
        return params


class UnifiedArchive(ParameterizableArchive):
    """Archived state of ModelParametersUnified. The arrays are stored as nested lists."""

    centers: list[list[float]]
    widths: list[list[float]]
    slopes: list[list[float]]
    offsets: list[float]
    normalized_basis_functions: bool = False
    lines_pivot_at_max_activation: bool = False
