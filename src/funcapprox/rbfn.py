from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import numpy as np

from funcapprox.model_parameters import ModelParameters
from funcapprox.parameterizable import ParameterizableArchive
from funcapprox.unified import ModelParametersUnified
from funcapprox.utils import as_float_array, parameters_to_string


class ModelParametersRBFN(ModelParameters):
    """Model parameters of a radial basis function network: Gaussian kernels and one weight per kernel."""

    archive_version = 1

    def __init__(self, centers: Any, widths: Any, weights: Any) -> None:
        """
        Initialize the parameters of a radial basis function network.

        Args:
            centers: Kernel centers, shape (n_basis_functions, n_dims).
            widths: Kernel widths, shape (n_basis_functions, n_dims).
            weights: Weight of each kernel, shape (n_basis_functions,).

        """
        super().__init__()
        self.centers = as_float_array(centers, 2, "centers")
        self.widths = as_float_array(widths, 2, "widths")
        self.weights = as_float_array(weights, 1, "weights")

        if self.centers.shape[1] < 1:
            raise ValueError("The input dimensionality must be at least 1")
        if self.widths.shape != self.centers.shape:
            raise ValueError(
                f"`widths` must have the same shape as `centers` {self.centers.shape}"
            )
        if self.weights.shape != (self.centers.shape[0],):
            raise ValueError(
                f"`weights` must have shape ({self.centers.shape[0]},), got {self.weights.shape}"
            )

    def get_expected_input_dim(self) -> int:
        return self.centers.shape[1]

    def get_selectable_parameters(self) -> set[str]:
        return {"centers", "widths", "weights"}

    def get_parameter_values(self) -> dict[str, np.ndarray]:
        return {
            "centers": self.centers.copy(),
            "widths": self.widths.copy(),
            "weights": self.weights.copy(),
        }

    def set_parameter_values(self, values: dict[str, np.ndarray]) -> None:
        for label, value in self._check_parameter_values(values).items():
            setattr(self, label, value)

    def clone(self) -> ModelParametersRBFN:
        cloned = type(self)(self.centers, self.widths, self.weights)
        cloned._copy_selection(self)
        return cloned

    def to_string(self) -> str:
        return parameters_to_string(
            type(self).__name__,
            {"centers": self.centers, "widths": self.widths, "weights": self.weights},
        )

    def to_unified(self) -> ModelParametersUnified:
        # A weighted kernel is a kernel with a horizontal line at the height of the weight
        return ModelParametersUnified(
            self.centers,
            self.widths,
            np.zeros_like(self.centers),
            self.weights,
            normalized_basis_functions=False,
        )

    def save_grid_data(
        self,
        min_values: Sequence[float],
        max_values: Sequence[float],
        n_samples_per_dim: Sequence[int],
        directory: Path,
        overwrite: bool = False,
    ) -> bool:
        return self.to_unified().save_grid_data(
            min_values, max_values, n_samples_per_dim, directory, overwrite
        )

    def to_archive_dict(self) -> dict[str, Any]:
        return RBFNArchive(
            **super().to_archive_dict(),
            centers=self.centers.tolist(),
            widths=self.widths.tolist(),
            weights=self.weights.tolist(),
        ).model_dump()

    @classmethod
    def from_archive_dict(cls, archive: dict[str, Any]) -> ModelParametersRBFN:
        state = RBFNArchive.model_validate(archive)
        params = cls(state.centers, state.widths, state.weights)
        params.update_from_archive_dict(state.model_dump())
        return params


class RBFNArchive(ParameterizableArchive):
    centers: list[list[float]]
    widths: list[list[float]]
    weights: list[float]
