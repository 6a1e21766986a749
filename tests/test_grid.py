import logging

import numpy as np
import pytest

from funcapprox.grid import generate_input_grid, load_grid_data, load_n_samples_per_dim
from funcapprox.plot_utils import plot_grid_data
from conftest import make_lls, make_lwr, make_rbfn


def test_generate_input_grid():
    grid = generate_input_grid([0.0, 0.0], [1.0, 2.0], [2, 3])
    expected = [
        [0.0, 0.0],
        [0.0, 1.0],
        [0.0, 2.0],
        [1.0, 0.0],
        [1.0, 1.0],
        [1.0, 2.0],
    ]
    assert np.allclose(grid, expected)

    grid = generate_input_grid([0.0], [1.0], [5])
    assert grid.shape == (5, 1)
    assert np.allclose(grid[:, 0], [0.0, 0.25, 0.5, 0.75, 1.0])


def test_save_grid_data_overwrite(unifiable_model_parameters, tmp_path, caplog):
    directory = tmp_path / "grid"

    assert unifiable_model_parameters.save_grid_data([0.0], [1.0], [5], directory)
    assert (directory / "inputs_grid.txt").exists()
    assert (directory / "activations.txt").exists()
    assert (directory / "lines.txt").exists()
    assert np.array_equal(load_n_samples_per_dim(directory), [5])

    df = load_grid_data(directory)
    assert len(df) == 5
    assert np.allclose(df["input_0"], [0.0, 0.25, 0.5, 0.75, 1.0])

    # Existing files and no overwrite: warning, and nothing is written
    inputs_before = (directory / "inputs_grid.txt").read_text()
    with caplog.at_level(logging.WARNING):
        assert not unifiable_model_parameters.save_grid_data(
            [0.0], [2.0], [3], directory, overwrite=False
        )
    assert "overwrite" in caplog.text
    assert (directory / "inputs_grid.txt").read_text() == inputs_before

    # Overwrite replaces the data
    assert unifiable_model_parameters.save_grid_data(
        [0.0], [2.0], [3], directory, overwrite=True
    )
    df = load_grid_data(directory)
    assert len(df) == 3
    assert np.allclose(df["input_0"], [0.0, 1.0, 2.0])


def test_save_grid_data_dimension_mismatch(tmp_path, caplog):
    rbfn = make_rbfn(n_dims=2)

    with caplog.at_level(logging.ERROR):
        assert not rbfn.save_grid_data([0.0], [1.0], [5], tmp_path / "grid")
        assert not rbfn.save_grid_data([0.0, 0.0], [1.0, 1.0], [5], tmp_path / "grid")
        assert not rbfn.save_grid_data([0.0, 0.0], [1.0, 1.0], [5, 0], tmp_path / "grid")

    assert not (tmp_path / "grid").exists()
    assert len(caplog.records) == 3


def test_default_save_grid_data_does_nothing(tmp_path):
    lls = make_lls()
    directory = tmp_path / "grid"

    assert lls.save_grid_data([0.0], [1.0], [5], directory)
    assert lls.save_grid_data([0.0, 1.0], [1.0], [5], directory, overwrite=True)
    assert not directory.exists()


def test_save_grid_data_normalized(tmp_path):
    lwr = make_lwr(n_basis=4)
    directory = tmp_path / "grid"
    assert lwr.save_grid_data([-0.5], [1.5], [21], directory)

    assert (directory / "activations_unnormalized.txt").exists()
    df = load_grid_data(directory)
    activations = df[[f"activation_{j}" for j in range(4)]].to_numpy()
    assert np.allclose(np.sum(activations, axis=1), 1.0)

    # Unnormalized kernels do not leave stale normalized data behind
    assert make_rbfn(n_basis=4).save_grid_data([-0.5], [1.5], [21], directory, overwrite=True)
    assert not (directory / "activations_unnormalized.txt").exists()


def test_save_grid_data_2d(tmp_path):
    rbfn = make_rbfn(n_basis=3, n_dims=2)
    directory = tmp_path / "grid"
    assert rbfn.save_grid_data([0.0, 0.0], [1.0, 1.0], [4, 6], directory)

    df = load_grid_data(directory)
    assert len(df) == 24
    assert list(df.columns[:2]) == ["input_0", "input_1"]
    assert np.array_equal(load_n_samples_per_dim(directory), [4, 6])


@pytest.mark.parametrize("n_dims", [1, 2])
def test_plot_grid_data(tmp_path, n_dims):
    rbfn = make_rbfn(n_basis=3, n_dims=n_dims)
    directory = tmp_path / "grid"
    assert rbfn.save_grid_data([0.0] * n_dims, [1.0] * n_dims, [10] * n_dims, directory)

    outpath = tmp_path / "plot_grid.png"
    plot_grid_data(directory, outpath)
    assert outpath.exists()


def test_plot_grid_data_3d(tmp_path):
    rbfn = make_rbfn(n_basis=2, n_dims=3)
    directory = tmp_path / "grid"
    assert rbfn.save_grid_data([0.0] * 3, [1.0] * 3, [3] * 3, directory)

    with pytest.raises(ValueError):
        plot_grid_data(directory, tmp_path / "plot_grid.png")


def test_save_grid_data_into_regular_file(tmp_path, caplog):
    not_a_directory = tmp_path / "grid"
    not_a_directory.write_text("")

    with caplog.at_level(logging.ERROR):
        assert not make_rbfn().save_grid_data([0.0], [1.0], [5], not_a_directory)

    assert any(record.levelno == logging.ERROR for record in caplog.records)
    assert not_a_directory.read_text() == ""
