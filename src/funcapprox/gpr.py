from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import numpy as np

from funcapprox.model_parameters import ModelParameters
from funcapprox.parameterizable import ParameterizableArchive
from funcapprox.unified import ModelParametersUnified
from funcapprox.utils import as_float_array, parameters_to_string


class ModelParametersGPR(ModelParameters):
    """
    Model parameters of Gaussian process regression with a squared exponential covariance.

    The mean prediction is a sum of Gaussian kernels centered on the training inputs, which is
    why these parameters can be converted to unified model parameters.
    """

    archive_version = 1

    def __init__(
        self,
        train_inputs: Any,
        weights: Any,
        maximum_covariance: float,
        length_scales: Any,
    ) -> None:
        """
        Initialize the parameters of Gaussian process regression.

        Args:
            train_inputs: Inputs of the training data, shape (n_samples, n_dims).
            weights: Weight of each training sample, i.e. K^-1 y, shape (n_samples,).
            maximum_covariance: Scale of the covariance function.
            length_scales: Length scale of the covariance function along each dimension,
                shape (n_dims,).

        """
        super().__init__()
        self.train_inputs = as_float_array(train_inputs, 2, "train_inputs")
        self.weights = as_float_array(weights, 1, "weights")
        self.maximum_covariance = as_float_array(maximum_covariance, 0, "maximum_covariance")
        self.length_scales = as_float_array(length_scales, 1, "length_scales")

        n_samples, n_dims = self.train_inputs.shape
        if n_dims < 1:
            raise ValueError("The input dimensionality must be at least 1")
        if self.weights.shape != (n_samples,):
            raise ValueError(f"`weights` must have shape ({n_samples},), got {self.weights.shape}")
        if self.length_scales.shape != (n_dims,):
            raise ValueError(
                f"`length_scales` must have shape ({n_dims},), got {self.length_scales.shape}"
            )

    def get_expected_input_dim(self) -> int:
        return self.train_inputs.shape[1]

    def get_selectable_parameters(self) -> set[str]:
        return {"weights", "maximum_covariance", "length_scales"}

    def get_parameter_values(self) -> dict[str, np.ndarray]:
        return {
            "weights": self.weights.copy(),
            "maximum_covariance": self.maximum_covariance.copy(),
            "length_scales": self.length_scales.copy(),
        }

    def set_parameter_values(self, values: dict[str, np.ndarray]) -> None:
        for label, value in self._check_parameter_values(values).items():
            setattr(self, label, value)

    def clone(self) -> ModelParametersGPR:
        cloned = type(self)(
            self.train_inputs, self.weights, self.maximum_covariance, self.length_scales
        )
        cloned._copy_selection(self)
        return cloned

    def to_string(self) -> str:
        return parameters_to_string(
            type(self).__name__,
            {
                "train_inputs": self.train_inputs,
                "weights": self.weights,
                "covariance": {
                    "maximum": self.maximum_covariance,
                    "length_scales": self.length_scales,
                },
            },
        )

    def to_unified(self) -> ModelParametersUnified:
        n_samples = self.train_inputs.shape[0]
        return ModelParametersUnified(
            self.train_inputs,
            np.tile(self.length_scales, (n_samples, 1)),
            np.zeros_like(self.train_inputs),
            self.maximum_covariance * self.weights,
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
        return GPRArchive(
            **super().to_archive_dict(),
            train_inputs=self.train_inputs.tolist(),
            weights=self.weights.tolist(),
            maximum_covariance=float(self.maximum_covariance),
            length_scales=self.length_scales.tolist(),
        ).model_dump()

    @classmethod
    def from_archive_dict(cls, archive: dict[str, Any]) -> ModelParametersGPR:
        state = GPRArchive.model_validate(archive)
        params = cls(
            state.train_inputs,
            state.weights,
            state.maximum_covariance,
            state.length_scales,
        )
        params.update_from_archive_dict(state.model_dump())
        return params


class GPRArchive(ParameterizableArchive):
    train_inputs: list[list[float]]
    weights: list[float]
    maximum_covariance: float
    length_scales: list[float]
