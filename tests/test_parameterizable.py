import logging

import numpy as np
import pytest

from funcapprox.lls import ModelParametersLLS
from funcapprox.rbfn import ModelParametersRBFN


def get_rbfn() -> ModelParametersRBFN:
    centers = [[0.0], [0.5], [1.0]]
    widths = [[0.1], [0.2], [0.3]]
    weights = [1.0, 2.0, 3.0]
    return ModelParametersRBFN(centers, widths, weights)


def test_vector_all_sorted_by_label():
    rbfn = get_rbfn()
    # centers, weights, widths
    expected = [0.0, 0.5, 1.0, 1.0, 2.0, 3.0, 0.1, 0.2, 0.3]
    assert np.allclose(rbfn.get_parameter_vector_all(), expected)
    assert rbfn.get_parameter_vector_all_size() == 9


def test_set_vector_all():
    rbfn = get_rbfn()
    rbfn.set_parameter_vector_all(np.arange(9.0))

    assert np.allclose(rbfn.centers, [[0.0], [1.0], [2.0]])
    assert np.allclose(rbfn.weights, [3.0, 4.0, 5.0])
    assert np.allclose(rbfn.widths, [[6.0], [7.0], [8.0]])

    with pytest.raises(ValueError):
        rbfn.set_parameter_vector_all(np.arange(8.0))


def test_mask():
    rbfn = get_rbfn()
    assert np.array_equal(rbfn.get_parameter_vector_mask(), np.zeros(9, dtype=int))

    rbfn.set_selected_parameters(["weights"])
    assert np.array_equal(
        rbfn.get_parameter_vector_mask(), [0, 0, 0, 2, 2, 2, 0, 0, 0]
    )

    assert np.array_equal(
        rbfn.get_parameter_vector_mask(["centers", "widths"]),
        [1, 1, 1, 0, 0, 0, 3, 3, 3],
    )


def test_selected_vector():
    rbfn = get_rbfn()
    rbfn.set_selected_parameters(["weights", "widths"])

    assert rbfn.get_selected_parameters() == {"weights", "widths"}
    assert rbfn.get_parameter_vector_selected_size() == 6
    assert np.allclose(
        rbfn.get_parameter_vector_selected(), [1.0, 2.0, 3.0, 0.1, 0.2, 0.3]
    )

    rbfn.set_parameter_vector_selected([4.0, 5.0, 6.0, 0.4, 0.5, 0.6])
    assert np.allclose(rbfn.weights, [4.0, 5.0, 6.0])
    assert np.allclose(rbfn.widths, [[0.4], [0.5], [0.6]])
    # Not selected, so not changed
    assert np.allclose(rbfn.centers, [[0.0], [0.5], [1.0]])

    with pytest.raises(ValueError):
        rbfn.set_parameter_vector_selected([1.0, 2.0])


def test_normalized_selected_vector():
    rbfn = get_rbfn()
    rbfn.set_selected_parameters(["weights"])

    lower, upper = rbfn.get_parameter_vector_selected_min_max()
    assert np.allclose(lower, [1.0, 1.0, 1.0])
    assert np.allclose(upper, [3.0, 3.0, 3.0])

    assert np.allclose(rbfn.get_parameter_vector_selected(normalized=True), [0.0, 0.5, 1.0])

    rbfn.set_parameter_vector_selected([1.0, 0.25, 0.0], normalized=True)
    assert np.allclose(rbfn.weights, [3.0, 1.5, 1.0])


def test_normalized_with_constant_values():
    lls = ModelParametersLLS([2.0, 2.0], 1.0)
    lls.set_selected_parameters(["slopes"])

    assert np.allclose(lls.get_parameter_vector_selected(normalized=True), [0.0, 0.0])

    lls.set_parameter_vector_selected([0.7, 0.3], normalized=True)
    assert np.allclose(lls.slopes, [2.0, 2.0])


def test_unknown_labels_are_ignored(caplog):
    rbfn = get_rbfn()

    with caplog.at_level(logging.WARNING):
        rbfn.set_selected_parameters(["weights", "slopes"])

    assert rbfn.get_selected_parameters() == {"weights"}
    assert "slopes" in caplog.text


def test_parameter_values_are_copies():
    rbfn = get_rbfn()
    values = rbfn.get_parameter_values()
    values["weights"][0] = 100.0
    assert rbfn.weights[0] == 1.0


def test_set_parameter_values_checks_shapes():
    rbfn = get_rbfn()

    with pytest.raises(ValueError):
        rbfn.set_parameter_values({"weights": np.zeros(4)})

    with pytest.raises(ValueError):
        rbfn.set_parameter_values({"slopes": np.zeros(3)})

    rbfn.set_parameter_values({"weights": np.zeros(3)})
    assert np.allclose(rbfn.weights, 0.0)


def test_scalar_parameters():
    lls = ModelParametersLLS([1.0, 2.0], 3.0)
    # offset, slopes
    assert np.allclose(lls.get_parameter_vector_all(), [3.0, 1.0, 2.0])

    lls.set_parameter_vector_all([-1.0, 0.0, 0.0])
    assert float(lls.offset) == -1.0
    assert lls.offset.shape == ()
