import numpy as np
import pytest

from bayesfilters.linear_measurement import (
    LinearMeasurementModel,
    LinearModel,
    LTIMeasurementModel,
)
from bayesfilters.measurement_model import AdditiveMeasurementModel


class _Sensor(LTIMeasurementModel):
    measured = np.zeros((2, 1))

    def freeze(self, data=None):
        return True

    def measure(self, data=None):
        return self.measured


class _NoisySensor(LinearModel):
    def freeze(self, data=None):
        return True

    def measure(self, data=None):
        return np.zeros((self.measurement_matrix().shape[0], 1))


R2 = np.diag([100.0, 100.0])


def _sensor(H, R, measurement):
    sensor = _Sensor(H, R)
    sensor.measured = np.asarray(measurement, dtype=float).reshape(-1, 1)
    return sensor


@pytest.mark.parametrize(
    "H, R, message",
    [
        (np.zeros((0, 4)), np.eye(2), "Measurement matrix"),
        (np.zeros((2, 4)), np.zeros((0, 0)), "cannot be 0"),
        (np.zeros((2, 4)), np.zeros((2, 3)), "square"),
        (np.zeros((2, 4)), np.eye(3), "Number of rows"),
    ],
)
def test_lti_validation(H, R, message):
    with pytest.raises(ValueError, match=message):
        LTIMeasurementModel.__init__(object.__new__(_Sensor), H, R)


def test_lti_requires_matrices():
    with pytest.raises(ValueError):
        LTIMeasurementModel.__init__(object.__new__(_Sensor), np.zeros(4), np.eye(2))


def test_lti_getters_return_copies():
    H = np.array([[1.0, 0.0], [0.0, 1.0]])
    sensor = _sensor(H, R2, [0.0, 0.0])
    LTIMeasurementModel.measurement_matrix(sensor)[0, 0] = 5.0
    LTIMeasurementModel.noise_covariance_matrix(sensor)[0, 0] = 5.0
    np.testing.assert_array_equal(LTIMeasurementModel.measurement_matrix(sensor), H)
    np.testing.assert_array_equal(LTIMeasurementModel.noise_covariance_matrix(sensor), R2)


def test_predicted_measure_selects_rows():
    H = np.array([[1.0, 0.0, 0.0, 0.0], [0.0, 0.0, 1.0, 0.0]])
    sensor = _sensor(H, R2, [0.0, 0.0])
    states = np.arange(12.0).reshape(4, 3)
    np.testing.assert_array_equal(
        LinearMeasurementModel.predicted_measure(sensor, states), states[[0, 2]]
    )


def test_predicted_measure_accepts_vector():
    H = np.array([[1.0, 0.0, 0.0, 0.0], [0.0, 0.0, 1.0, 0.0]])
    sensor = _sensor(H, R2, [0.0, 0.0])
    state = np.array([10.0, 0.0, 20.0, 0.0])
    np.testing.assert_array_equal(
        LinearMeasurementModel.predicted_measure(sensor, state),
        state[[0, 2]].reshape(2, 1),
    )


def test_innovation_against_zero_prediction_is_measurement():
    sensor = _sensor(np.eye(2), R2, [5.0, 7.0])
    measured = sensor.measure()
    innovation = LinearMeasurementModel.innovation(sensor, np.zeros((2, 3)), measured)
    assert innovation.shape == (2, 3)
    for column in innovation.T:
        np.testing.assert_array_equal(column, measured[:, 0])


def test_innovation_plus_prediction_gives_measurement():
    sensor = _sensor(np.eye(2), R2, [1.5, -2.5])
    predicted = np.array([[0.5, 3.0], [1.0, -4.0]])
    innovation = LinearMeasurementModel.innovation(sensor, predicted, sensor.measure())
    np.testing.assert_allclose(innovation + predicted, np.repeat(sensor.measure(), 2, axis=1))


def test_linear_model_matrix_from_components():
    model = _NoisySensor((4, [0, 2]), R2)
    expected = np.array([[1.0, 0.0, 0.0, 0.0], [0.0, 0.0, 1.0, 0.0]])
    np.testing.assert_array_equal(LTIMeasurementModel.measurement_matrix(model), expected)
    assert isinstance(model, AdditiveMeasurementModel)
    assert isinstance(model, LinearMeasurementModel)


def test_linear_model_index_out_of_bound():
    with pytest.raises(ValueError, match="out of bound"):
        LinearModel.__init__(object.__new__(_NoisySensor), (4, [0, 4]), R2)


def test_linear_model_requires_rows_matching_noise():
    with pytest.raises(ValueError, match="Number of rows"):
        LinearModel.__init__(object.__new__(_NoisySensor), (4, [0]), R2)


def test_noise_sqrt_reconstructs_covariance():
    R = np.array([[4.0, 1.0], [1.0, 3.0]])
    model = _NoisySensor((4, [0, 2]), R)
    S = model.noise_covariance_sqrt
    np.testing.assert_allclose(S @ S.T, LTIMeasurementModel.noise_covariance_matrix(model))
    np.testing.assert_allclose(S @ S.T, R)


def test_noise_sqrt_of_semidefinite_covariance():
    R = np.array([[1.0, 1.0], [1.0, 1.0]])
    model = _NoisySensor((2, [0, 1]), R)
    S = model.noise_covariance_sqrt
    np.testing.assert_allclose(
        S @ S.T, LTIMeasurementModel.noise_covariance_matrix(model), atol=1e-12
    )


def test_noise_sample_shape_and_reproducibility():
    first = LinearModel.noise_sample(_NoisySensor((4, [0, 2]), R2, seed=7), 5)
    second = LinearModel.noise_sample(_NoisySensor((4, [0, 2]), R2, seed=7), 5)
    other = LinearModel.noise_sample(_NoisySensor((4, [0, 2]), R2, seed=8), 5)
    assert first.shape == (2, 5)
    np.testing.assert_array_equal(first, second)
    assert not np.array_equal(first, other)


def test_noise_sample_statistics_match_covariance():
    R = np.array([[4.0, 1.0], [1.0, 3.0]])
    samples = LinearModel.noise_sample(_NoisySensor((4, [0, 2]), R), 40000)
    np.testing.assert_allclose(samples.mean(axis=1), np.zeros(2), atol=0.05)
    np.testing.assert_allclose(np.cov(samples), R, rtol=0.05, atol=0.05)


def test_noise_sample_follows_noise_size():
    R = np.eye(3)
    samples = LinearModel.noise_sample(_NoisySensor((5, [0, 1, 4]), R), 4)
    assert samples.shape == (3, 4)


def test_linear_model_log_files(tmp_path):
    model = _NoisySensor((4, [0, 2]), R2)
    folder = str(tmp_path)
    assert LinearModel.log_file_names(model, folder, "run") == [folder + "/run_measurements"]
    assert LinearModel.enable_log(model, folder, "run") is True
    assert (tmp_path / "run_measurements.txt").exists()
    assert LinearModel.disable_log(model) is True
    assert LinearModel.disable_log(model) is False