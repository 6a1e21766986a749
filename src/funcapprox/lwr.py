from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import numpy as np

from funcapprox.model_parameters import ModelParameters
from funcapprox.parameterizable import ParameterizableArchive
from funcapprox.unified import ModelParametersUnified
from funcapprox.utils import as_float_array, parameters_to_string


class ModelParametersLWR(ModelParameters):
    """
    Model parameters of locally weighted regression.

    Every basis function is a Gaussian kernel with a line segment. The kernel activations are
    normalized, and the output is the activation-weighted sum of the lines.
    """

    archive_version = 1

    def __init__(
        self,
        centers: Any,
        widths: Any,
        slopes: Any,
        offsets: Any,
        lines_pivot_at_max_activation: bool = False,
    ) -> None:
        """
        Initialize the parameters of locally weighted regression.

        Args:
            centers: Kernel centers, shape (n_basis_functions, n_dims).
            widths: Kernel widths, shape (n_basis_functions, n_dims).
            slopes: Line slopes, shape (n_basis_functions, n_dims).
            offsets: Line offsets, shape (n_basis_functions,).
            lines_pivot_at_max_activation: Whether the offsets are relative to the kernel centers
                rather than to the origin.

        """
        super().__init__()
        self.centers = as_float_array(centers, 2, "centers")
        self.widths = as_float_array(widths, 2, "widths")
        self.slopes = as_float_array(slopes, 2, "slopes")
        self.offsets = as_float_array(offsets, 1, "offsets")
        self.lines_pivot_at_max_activation = bool(lines_pivot_at_max_activation)

        if self.centers.shape[1] < 1:
            raise ValueError("The input dimensionality must be at least 1")
        for name in ["widths", "slopes"]:
            if getattr(self, name).shape != self.centers.shape:
                raise ValueError(
                    f"`{name}` must have the same shape as `centers` {self.centers.shape}"
                )
        if self.offsets.shape != (self.centers.shape[0],):
            raise ValueError(
                f"`offsets` must have shape ({self.centers.shape[0]},), got {self.offsets.shape}"
            )

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

    def clone(self) -> ModelParametersLWR:
        cloned = type(self)(
            self.centers,
            self.widths,
            self.slopes,
            self.offsets,
            lines_pivot_at_max_activation=self.lines_pivot_at_max_activation,
        )
        cloned._copy_selection(self)
        return cloned

    def to_string(self) -> str:
        return parameters_to_string(
            type(self).__name__,
            {
                "kernels": {"centers": self.centers, "widths": self.widths},
                "lines": {
                    "slopes": self.slopes,
                    "offsets": self.offsets,
                    "pivot_at_max_activation": self.lines_pivot_at_max_activation,
                },
            },
        )

    def to_unified(self) -> ModelParametersUnified:
        return ModelParametersUnified(
            self.centers,
            self.widths,
            self.slopes,
            self.offsets,
            normalized_basis_functions=True,
            lines_pivot_at_max_activation=self.lines_pivot_at_max_activation,
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
        return LWRArchive(
            **super().to_archive_dict(),
            centers=self.centers.tolist(),
            widths=self.widths.tolist(),
            slopes=self.slopes.tolist(),
            offsets=self.offsets.tolist(),
            lines_pivot_at_max_activation=self.lines_pivot_at_max_activation,
        ).model_dump()

    @classmethod
    def from_archive_dict(cls, archive: dict[str, Any]) -> ModelParametersLWR:
        state = LWRArchive.model_validate(archive)
        params = cls(
            state.centers,
            state.widths,
            state.slopes,
            state.offsets,
            lines_pivot_at_max_activation=state.lines_pivot_at_max_activation,
        )
        params.update_from_archive_dict(state.model_dump())
        return params


class LWRArchive(ParameterizableArchive):
    centers: list[list[float]]
    widths: list[list[float]]
    slopes: list[list[float]]
    offsets: list[float]
    lines_pivot_at_max_activation: bool = False
