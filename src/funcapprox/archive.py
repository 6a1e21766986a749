from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

# Defining a ModelParameters subclass registers it, so import the ones shipped here
import funcapprox.gpr  # noqa: F401
import funcapprox.lls  # noqa: F401
import funcapprox.lwr  # noqa: F401
import funcapprox.rbfn  # noqa: F401
import funcapprox.unified  # noqa: F401
from funcapprox.exceptions import (
    ArchiveException,
    ArchiveVersionException,
    UnknownModelParametersException,
)
from funcapprox.model_parameters import (
    ModelParameters,
    get_model_parameters_class,
    model_parameters_class_name,
)
from funcapprox.utils import dump_dict_to_file, load_dict_from_file

logger = logging.getLogger(__name__)


def model_parameters_to_archive(params: ModelParameters) -> dict[str, Any]:
    """
    Write model parameters to a (JSON compatible) archive dictionary.

    The archive records the concrete class, so that `model_parameters_from_archive` can restore
    the right kind of model parameters. A version is only recorded for classes which define one.
    """
    archive: dict[str, Any] = {"class": model_parameters_class_name(type(params))}
    if params.archive_version is not None:
        archive["version"] = params.archive_version
    archive["parameters"] = params.to_archive_dict()
    return archive


def model_parameters_from_archive(archive: dict[str, Any]) -> ModelParameters:
    """
    Restore model parameters from an archive dictionary.

    Raises:
        UnknownModelParametersException: If the archived class is not known.
        ArchiveVersionException: If the archive was written with a different version of the class.
        ArchiveException: If the archive is malformed.

    """
    try:
        class_name = archive["class"]
        parameters = archive["parameters"]
    except (KeyError, TypeError) as e:
        raise ArchiveException("Archive has no `class` or `parameters` entry") from e

    cls = get_model_parameters_class(class_name)
    if cls is None:
        raise UnknownModelParametersException(
            f"Unknown model parameters class `{class_name}`"
        )

    version = archive.get("version")
    if version != cls.archive_version:
        raise ArchiveVersionException(
            f"Archive of {class_name} has version {version}, but version {cls.archive_version} is expected"
        )

    try:
        return cls.from_archive_dict(parameters)
    except (KeyError, ValueError, TypeError) as e:
        raise ArchiveException(f"Could not restore {class_name} from archive") from e


def save_model_parameters(file: Path, params: ModelParameters) -> None:
    file = Path(file)
    dump_dict_to_file(file, model_parameters_to_archive(params))
    logger.debug(f"Saved {type(params).__name__} to {file}")


def load_model_parameters(file: Path) -> ModelParameters:
    params = model_parameters_from_archive(load_dict_from_file(Path(file)))
    logger.debug(f"Loaded {type(params).__name__} from {file}")
    return params
