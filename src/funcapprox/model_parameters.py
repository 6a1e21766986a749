from __future__ import annotations

import abc
import inspect
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Sequence, cast

import numpy as np

from funcapprox.parameterizable import Parameterizable

if TYPE_CHECKING:
    from funcapprox.unified import ModelParametersUnified

_MODEL_PARAMETERS_CLASSES: dict[str, type[ModelParameters]] = {}


class ModelParameters(Parameterizable):
    """
    Base class for the model parameters of all function approximators.

    Generic code (optimizers, persistence, plotting) only relies on this interface and never
    needs to know which function approximator the parameters belong to.
    """

    # The base class has no state of its own to archive, so it is not versioned.
    # Concrete subclasses set their own version.
    archive_version: ClassVar[int | None] = None

    @abc.abstractmethod
    def clone(self) -> ModelParameters:
        """Return a deep copy which shares no mutable state with this object."""
        ...

    @abc.abstractmethod
    def to_string(self) -> str:
        """Return a human readable representation of the parameters."""
        ...

    @abc.abstractmethod
    def get_expected_input_dim(self) -> int:
        """The dimensionality of the inputs the function approximator expects."""
        ...

    @abc.abstractmethod
    def to_unified(self) -> ModelParametersUnified | None:
        """
        Convert these model parameters to unified model parameters.

        Returns:
            ModelParametersUnified | None: A new unified representation, or None if these
            parameters have no unified representation.

        """
        ...

    @classmethod
    @abc.abstractmethod
    def from_archive_dict(cls, archive: dict[str, Any]) -> ModelParameters:
        """Construct an instance from the output of `to_archive_dict`."""
        ...

    @property
    def expected_input_dim(self) -> int:
        return self.get_expected_input_dim()

    def save_grid_data(
        self,
        min_values: Sequence[float],
        max_values: Sequence[float],
        n_samples_per_dim: Sequence[int],
        directory: Path,
        overwrite: bool = False,
    ) -> bool:
        """
        Save the response of the basis functions and line segments on a grid of inputs.

        This default implementation does nothing, because grid data do not make sense for
        every kind of model parameters.

        Args:
            min_values: Minimum values for the grid (one for each dimension)
            max_values: Maximum values for the grid (one for each dimension)
            n_samples_per_dim: Number of samples in the grid along each dimension
            directory: Directory to which to save the results to.
            overwrite: Whether to overwrite existing files. If False, existing files are
                left untouched and a warning is logged.

        Returns:
            bool: Whether saving the data was successful.

        """
        return True

    def to_archive_dict(self) -> dict[str, Any]:
        # Only the state of the parameterizable base; subclasses add their own
        return super().to_archive_dict()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Abstract classes are registered too, but never returned by get_model_parameters_class
        _MODEL_PARAMETERS_CLASSES[model_parameters_class_name(cls)] = cls

    def __str__(self) -> str:
        return self.to_string()

    def __deepcopy__(self, memo: dict) -> ModelParameters:
        return self.clone()

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        other = cast(ModelParameters, other)

        if self.get_expected_input_dim() != other.get_expected_input_dim():
            return False
        if self.get_selected_parameters() != other.get_selected_parameters():
            return False

        # The normalization range is a cache, not part of the value
        ignored = {"selected_parameters", "selected_min", "selected_max"}
        mine = {k: v for k, v in self.to_archive_dict().items() if k not in ignored}
        theirs = {k: v for k, v in other.to_archive_dict().items() if k not in ignored}
        if mine.keys() != theirs.keys():
            return False
        return all(
            np.array_equal(np.asarray(mine[k]), np.asarray(theirs[k]), equal_nan=True)
            for k in mine
        )

    __hash__ = None  # type: ignore[assignment]


def model_parameters_class_name(cls: type) -> str:
    """The name under which a model parameters class is archived, e.g. `funcapprox.rbfn.ModelParametersRBFN`."""
    return f"{cls.__module__}.{cls.__qualname__}"


def get_model_parameters_class(name: str) -> type[ModelParameters] | None:
    """Look up a concrete ModelParameters subclass by its archive name. Abstract classes are never returned."""
    cls = _MODEL_PARAMETERS_CLASSES.get(name)
    if cls is None or inspect.isabstract(cls):
        return None
    return cls
