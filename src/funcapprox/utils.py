from pathlib import Path
import json
from typing import Any

import numpy as np
from pydictnest import flatten_dict


class ExtendedJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, Path):
            return str(o)
        elif isinstance(o, np.ndarray):
            return o.tolist()
        elif isinstance(o, np.generic):
            return o.item()
        else:
            return super().default(o)


def dump_dict_to_file(file: Path, dictionary: dict) -> None:
    """
    Write `dictionary` as JSON to `file` (with indent=4).
    """
    file = Path(file)
    file.parent.mkdir(exist_ok=True, parents=True)
    with open(file, "w") as f:
        json.dump(dictionary, f, indent=4, cls=ExtendedJSONEncoder)


def load_dict_from_file(file: Path) -> dict:
    with open(file, "r") as f:
        return json.load(f)


def as_float_array(values: Any, ndim: int, name: str) -> np.ndarray:
    """Copy `values` into a new float array and check its number of dimensions.

    Args:
        values: Anything numpy can convert to an array.
        ndim: The required number of dimensions.
        name: Name of the parameter, used in the error message.

    Returns:
        np.ndarray: A float array which does not share memory with `values`.

    Raises:
        ValueError: If the array does not have `ndim` dimensions.
    """
    array = np.array(values, dtype=float, copy=True)
    if array.ndim != ndim:
        raise ValueError(
            f"`{name}` must have {ndim} dimension(s), but has shape {array.shape}"
        )
    return array


def parameters_to_string(name: str, parameters: dict) -> str:
    """Render a (possibly nested) dictionary of parameter arrays as readable text.

    Example:
        >>> print(parameters_to_string("Foo", {"kernels": {"centers": [[0.0]]}, "offset": 1.0}))
        Foo(
            kernels.centers=[[0.]]
            offset=1.
        )
    """
    lines = [f"{name}("]
    for key, value in flatten_dict(parameters).items():
        text = np.array2string(np.asarray(value), precision=4, separator=", ")
        # Multi-line arrays are indented below their key
        text = text.replace("\n", "\n" + " " * (len(key) + 5))
        lines.append(f"    {key}={text}")
    lines.append(")")
    return "\n".join(lines)
