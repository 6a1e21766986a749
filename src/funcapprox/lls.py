from __future__ import annotations

from typing import Any

import numpy as np

from funcapprox.model_parameters import ModelParameters
from funcapprox.parameterizable import ParameterizableArchive
from funcapprox.unified import ModelParametersUnified
from funcapprox.utils import as_float_array, parameters_to_string


class ModelParametersLLS(ModelParameters):
    """Model parameters of linear least squares: one global line `slopes . x + offset`."""

    archive_version = 1

    def __init__(self, slopes: Any, offset: float) -> None:
        super().__init__()
        self.slopes = as_float_array(slopes, 1, "slopes")
        self.offset = as_float_array(offset, 0, "offset")

        if self.slopes.size < 1:
            raise ValueError("The input dimensionality must be at least 1")

    def get_expected_input_dim(self) -> int:
        return self.slopes.size

    def get_selectable_parameters(self) -> set[str]:
        return {"slopes", "offset"}

    def get_parameter_values(self) -> dict[str, np.ndarray]:
        return {"slopes": self.slopes.copy(), "offset": self.offset.copy()}

    def set_parameter_values(self, values: dict[str, np.ndarray]) -> None:
        for label, value in self._check_parameter_values(values).items():
            setattr(self, label, value)

    def clone(self) -> ModelParametersLLS:
        cloned = type(self)(self.slopes, self.offset)
        cloned._copy_selection(self)
        return cloned

    def to_string(self) -> str:
        return parameters_to_string(
            type(self).__name__, {"slopes": self.slopes, "offset": self.offset}
        )

    def to_unified(self) -> ModelParametersUnified | None:
        # A single global line has no kernels
        return None

    def to_archive_dict(self) -> dict[str, Any]:
        return LLSArchive(
            **super().to_archive_dict(),
            slopes=self.slopes.tolist(),
            offset=float(self.offset),
        ).model_dump()

    @classmethod
    def from_archive_dict(cls, archive: dict[str, Any]) -> ModelParametersLLS:
        state = LLSArchive.model_validate(archive)
        params = cls(state.slopes, state.offset)
        params.update_from_archive_dict(state.model_dump())
        return params


class LLSArchive(ParameterizableArchive):
    slopes: list[float]
    offset: float
