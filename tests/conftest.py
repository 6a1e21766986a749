import matplotlib
import numpy as np
import pytest

from funcapprox.gpr import ModelParametersGPR
from funcapprox.lls import ModelParametersLLS
from funcapprox.lwr import ModelParametersLWR
from funcapprox.rbfn import ModelParametersRBFN
from funcapprox.unified import ModelParametersUnified

matplotlib.use("Agg")


def make_rbfn(n_basis: int = 3, n_dims: int = 1) -> ModelParametersRBFN:
    rng = np.random.default_rng(1)
    centers = np.linspace(0.0, 1.0, n_basis)[:, np.newaxis] * np.ones((1, n_dims))
    widths = np.full((n_basis, n_dims), 0.2)
    return ModelParametersRBFN(centers, widths, rng.normal(size=n_basis))


def make_lwr(n_basis: int = 3, n_dims: int = 1) -> ModelParametersLWR:
    rng = np.random.default_rng(2)
    centers = np.linspace(0.0, 1.0, n_basis)[:, np.newaxis] * np.ones((1, n_dims))
    widths = np.full((n_basis, n_dims), 0.3)
    slopes = rng.normal(size=(n_basis, n_dims))
    offsets = rng.normal(size=n_basis)
    return ModelParametersLWR(
        centers, widths, slopes, offsets, lines_pivot_at_max_activation=True
    )


def make_gpr(n_train: int = 4, n_dims: int = 1) -> ModelParametersGPR:
    rng = np.random.default_rng(3)
    train_inputs = rng.uniform(size=(n_train, n_dims))
    return ModelParametersGPR(
        train_inputs, rng.normal(size=n_train), 2.0, np.full(n_dims, 0.1)
    )


def make_lls(n_dims: int = 1) -> ModelParametersLLS:
    return ModelParametersLLS(np.arange(1.0, n_dims + 1.0), 0.5)


def make_unified(n_basis: int = 3, n_dims: int = 1) -> ModelParametersUnified:
    return make_lwr(n_basis, n_dims).to_unified()


FACTORIES = {
    "rbfn": make_rbfn,
    "lwr": make_lwr,
    "gpr": make_gpr,
    "lls": make_lls,
    "unified": make_unified,
}


@pytest.fixture(params=list(FACTORIES))
def model_parameters(request):
    return FACTORIES[request.param]()


@pytest.fixture(params=["rbfn", "lwr", "gpr", "unified"])
def unifiable_model_parameters(request):
    return FACTORIES[request.param]()
