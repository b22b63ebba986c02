import numpy as np
import pytest

from bayesfilters.measurement_model import (
    AdditiveMeasurementModel,
    LikelihoodModel,
    MeasurementModel,
    MeasurementModelDecorator,
)


class _RecordingModel(AdditiveMeasurementModel):
    def __init__(self, measurement):
        self.measurement = np.asarray(measurement, dtype=float)
        self.calls = []

    def freeze(self, data=None):
        self.calls.append(("freeze", data))
        return True

    def measure(self, data=None):
        self.calls.append(("measure", data))
        return self.measurement

    def predicted_measure(self, cur_states):
        self.calls.append(("predicted_measure",))
        return np.asarray(cur_states, dtype=float)

    def innovation(self, predicted_measurements, measurements):
        self.calls.append(("innovation",))
        return measurements - predicted_measurements

    def noise_covariance_matrix(self):
        return np.eye(len(self.measurement))

    def set_property(self, prop):
        return prop == "known"


class _BareModel(MeasurementModel):
    def freeze(self, data=None):
        return False

    def measure(self, data=None):
        return None

    def predicted_measure(self, cur_states):
        return None

    def innovation(self, predicted_measurements, measurements):
        return None


class _Shifted(MeasurementModelDecorator):
    def predicted_measure(self, cur_states):
        return super().predicted_measure(cur_states) + 1.0


class _NormLikelihood(LikelihoodModel):
    def likelihood(self, measurement_model, pred_states):
        predicted = measurement_model.predicted_measure(pred_states)
        return np.linalg.norm(predicted, axis=0)


def test_base_noise_covariance_raises():
    with pytest.raises(NotImplementedError):
        MeasurementModel.noise_covariance_matrix(_BareModel())


def test_base_descriptions_raise():
    model = _BareModel()
    with pytest.raises(NotImplementedError):
        MeasurementModel.input_description(model)
    with pytest.raises(NotImplementedError):
        MeasurementModel.measurement_description(model)


def test_base_set_property_is_false():
    assert MeasurementModel.set_property(_BareModel(), "anything") is False


def test_abstract_classes_cannot_be_instantiated():
    with pytest.raises(TypeError):
        MeasurementModel()
    with pytest.raises(TypeError):
        LikelihoodModel()


def test_decorator_forwards_measure_and_freeze():
    inner = _RecordingModel([1.0, 2.0])
    decorator = MeasurementModelDecorator(inner)
    assert decorator.freeze() is True
    np.testing.assert_array_equal(decorator.measure(), [1.0, 2.0])
    assert [call[0] for call in inner.calls] == ["freeze", "measure"]


def test_decorator_forwards_prediction_and_innovation():
    inner = _RecordingModel([1.0, 2.0])
    decorator = MeasurementModelDecorator(inner)
    states = np.array([[3.0], [4.0]])
    np.testing.assert_array_equal(decorator.predicted_measure(states), states)
    innovation = decorator.innovation(states, inner.measurement.reshape(2, 1))
    np.testing.assert_array_equal(innovation, inner.measurement.reshape(2, 1) - states)


def test_decorator_forwards_noise_and_properties():
    inner = _RecordingModel([1.0, 2.0, 3.0])
    decorator = MeasurementModelDecorator(inner)
    np.testing.assert_array_equal(decorator.noise_covariance_matrix(), np.eye(3))
    assert decorator.set_property("known") is True
    assert decorator.set_property("unknown") is False


def test_decorator_propagates_missing_noise_covariance():
    decorator = MeasurementModelDecorator(_BareModel())
    with pytest.raises(NotImplementedError):
        decorator.noise_covariance_matrix()


def test_decorator_subclass_changes_one_call():
    inner = _RecordingModel([0.0])
    plain = MeasurementModelDecorator(inner)
    shifted = _Shifted(inner)
    states = np.zeros((1, 3))
    np.testing.assert_array_equal(
        shifted.predicted_measure(states), plain.predicted_measure(states) + 1.0
    )
    np.testing.assert_array_equal(
        MeasurementModelDecorator.measure(shifted), inner.measurement
    )


def test_likelihood_model_uses_measurement_model():
    inner = _RecordingModel([0.0, 0.0])
    wrapped = MeasurementModelDecorator(inner)
    states = np.array([[3.0, 0.0], [4.0, 1.0]])
    result = _NormLikelihood().likelihood(wrapped, states)
    np.testing.assert_allclose(result, [5.0, 1.0])
    assert ("predicted_measure",) in inner.calls