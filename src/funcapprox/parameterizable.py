from __future__ import annotations

import abc
import logging
from collections.abc import Iterable
from typing import Any

import numpy as np
from pydantic import BaseModel, model_validator

logger = logging.getLogger(__name__)


class Parameterizable(abc.ABC):
    """
    Exposes named parameter arrays as one flat vector.

    Subclasses own a set of named parameter arrays ("labels"). The full parameter vector is
    the concatenation of all arrays, in sorted label order, each flattened in row-major order.
    A subset of the labels can be selected; the selected vector only contains the entries
    belonging to the selected labels. This is what a black-box optimizer works on.
    """

    def __init__(self) -> None:
        self._selected_parameters: set[str] = set()
        # Range of the selected values at the time of selection, one entry per selected element
        self._selected_min = np.zeros(0)
        self._selected_max = np.zeros(0)

    @abc.abstractmethod
    def get_selectable_parameters(self) -> set[str]:
        """Labels of all parameter arrays that may be selected."""
        ...

    @abc.abstractmethod
    def get_parameter_values(self) -> dict[str, np.ndarray]:
        """
        Get a copy of every selectable parameter array.

        Returns:
            dict[str, np.ndarray]: Mapping of label to parameter values. Modifying the returned
            arrays does not modify the object.

        """
        ...

    @abc.abstractmethod
    def set_parameter_values(self, values: dict[str, np.ndarray]) -> None:
        """
        Overwrite some or all of the parameter arrays.

        Args:
            values: Mapping of label to new values. The shapes must match the current ones.

        Raises:
            ValueError: If a label is unknown or a shape does not match.

        """
        ...

    def _check_parameter_values(self, values: dict[str, Any]) -> dict[str, np.ndarray]:
        current = self.get_parameter_values()
        checked = {}
        for label, value in values.items():
            if label not in current:
                raise ValueError(f"Unknown parameter `{label}`")
            array = np.array(value, dtype=float, copy=True)
            if array.shape != current[label].shape:
                raise ValueError(
                    f"Parameter `{label}` has shape {current[label].shape}, got {array.shape}"
                )
            checked[label] = array
        return checked

    def _sorted_labels(self) -> list[str]:
        return sorted(self.get_selectable_parameters())

    def set_selected_parameters(self, labels: Iterable[str]) -> None:
        """
        Select the parameter arrays exposed through the selected parameter vector.

        Labels which are not selectable are ignored (with a warning). The current range of
        every selected array is remembered and used to normalize the selected vector.
        """
        selectable = self.get_selectable_parameters()
        selected = set()
        for label in labels:
            if label in selectable:
                selected.add(label)
            else:
                logger.warning(
                    f"Parameter `{label}` is not selectable for {type(self).__name__}, "
                    f"ignoring it. Selectable are: {sorted(selectable)}"
                )
        self._selected_parameters = selected

        values = self.get_parameter_values()
        mins, maxs = [], []
        for label in self._sorted_labels():
            if label in selected:
                size = values[label].size
                mins.append(np.full(size, np.min(values[label])))
                maxs.append(np.full(size, np.max(values[label])))
        self._selected_min = np.concatenate(mins) if mins else np.zeros(0)
        self._selected_max = np.concatenate(maxs) if maxs else np.zeros(0)

    def get_selected_parameters(self) -> set[str]:
        return set(self._selected_parameters)

    def get_parameter_vector_all_size(self) -> int:
        return sum(value.size for value in self.get_parameter_values().values())

    def get_parameter_vector_all(self) -> np.ndarray:
        values = self.get_parameter_values()
        labels = self._sorted_labels()
        if len(labels) == 0:
            return np.zeros(0)
        return np.concatenate([np.ravel(values[label]) for label in labels])

    def set_parameter_vector_all(self, vector: Any) -> None:
        vector = np.asarray(vector, dtype=float)
        values = self.get_parameter_values()

        if vector.ndim != 1 or vector.size != self.get_parameter_vector_all_size():
            raise ValueError(
                f"Expected a vector of size {self.get_parameter_vector_all_size()}, got shape {vector.shape}"
            )

        new_values = {}
        offset = 0
        for label in self._sorted_labels():
            shape = values[label].shape
            size = values[label].size
            new_values[label] = vector[offset : offset + size].reshape(shape)
            offset += size

        self.set_parameter_values(new_values)

    def get_parameter_vector_mask(self, labels: Iterable[str] | None = None) -> np.ndarray:
        """
        Compute which entries of the full parameter vector belong to which selected label.

        Args:
            labels: The labels to mark. Defaults to the currently selected labels.

        Returns:
            np.ndarray: Integer array with the size of the full parameter vector. An entry is the
            1-based index of its label in the sorted selectable labels if the label is in
            `labels`, and 0 otherwise.

        Example:
            >>> # labels "offsets" (2 values) and "slopes" (3 values), only "slopes" selected
            >>> params.get_parameter_vector_mask()
            array([0, 0, 2, 2, 2])

        """
        if labels is None:
            labels = self._selected_parameters
        labels = set(labels)

        values = self.get_parameter_values()
        parts = []
        for index, label in enumerate(self._sorted_labels(), start=1):
            marker = index if label in labels else 0
            parts.append(np.full(values[label].size, marker, dtype=int))

        if len(parts) == 0:
            return np.zeros(0, dtype=int)
        return np.concatenate(parts)

    def get_parameter_vector_selected_size(self) -> int:
        return int(np.count_nonzero(self.get_parameter_vector_mask()))

    def get_parameter_vector_selected_min_max(self) -> tuple[np.ndarray, np.ndarray]:
        return self._selected_min.copy(), self._selected_max.copy()

    def get_parameter_vector_selected(self, normalized: bool = False) -> np.ndarray:
        mask = self.get_parameter_vector_mask()
        selected = self.get_parameter_vector_all()[mask > 0]

        if normalized:
            span = self._selected_max - self._selected_min
            selected = np.divide(
                selected - self._selected_min,
                span,
                out=np.zeros_like(selected),
                where=span != 0,
            )
        return selected

    def set_parameter_vector_selected(self, vector: Any, normalized: bool = False) -> None:
        vector = np.array(vector, dtype=float, copy=True)
        mask = self.get_parameter_vector_mask()
        n_selected = int(np.count_nonzero(mask))

        if vector.ndim != 1 or vector.size != n_selected:
            raise ValueError(
                f"Expected a vector of size {n_selected}, got shape {vector.shape}"
            )

        if normalized:
            vector = self._selected_min + vector * (self._selected_max - self._selected_min)

        values_all = self.get_parameter_vector_all()
        values_all[mask > 0] = vector
        self.set_parameter_vector_all(values_all)

    def _copy_selection(self, other: Parameterizable) -> None:
        self._selected_parameters = set(other._selected_parameters)
        self._selected_min = other._selected_min.copy()
        self._selected_max = other._selected_max.copy()

    def to_archive_dict(self) -> dict[str, Any]:
        return ParameterizableArchive(
            selected_parameters=sorted(self._selected_parameters),
            selected_min=self._selected_min.tolist(),
            selected_max=self._selected_max.tolist(),
        ).model_dump()

    def update_from_archive_dict(self, archive: dict[str, Any]) -> None:
        """
        Restore the selection written by `to_archive_dict`.

        Raises:
            ValueError: If the selection does not fit the parameters of this object.

        """
        state = ParameterizableArchive.model_validate(archive)

        unknown = set(state.selected_parameters) - self.get_selectable_parameters()
        if len(unknown) > 0:
            raise ValueError(
                f"Archived selection contains parameters {sorted(unknown)} which are not selectable for {type(self).__name__}"
            )

        mask = self.get_parameter_vector_mask(state.selected_parameters)
        n_selected = int(np.count_nonzero(mask))
        if len(state.selected_min) != n_selected:
            raise ValueError(
                f"Archived selection has {len(state.selected_min)} min/max values, but {n_selected} values are selected"
            )

        self._selected_parameters = set(state.selected_parameters)
        self._selected_min = np.array(state.selected_min, dtype=float)
        self._selected_max = np.array(state.selected_max, dtype=float)


class ParameterizableArchive(BaseModel):
    """Archived selection state of a Parameterizable."""

    selected_parameters: list[str] = []
    selected_min: list[float] = []
    selected_max: list[float] = []

    @model_validator(mode="after")
    def check_min_max(self) -> ParameterizableArchive:
        if len(self.selected_min) != len(self.selected_max):
            raise ValueError("`selected_min` and `selected_max` must have the same length")
        return self
