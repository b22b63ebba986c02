"""Measurement models, the measurement model decorator and likelihood models."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from .logger import Logger


class MethodNotAvailableError(NotImplementedError):
    """Raised when a model does not provide the requested quantity."""

    def __init__(self, method: str, reason: str) -> None:
        super().__init__(f"{method}: {reason}")
        self.method = method
        self.reason = reason


class MeasurementModel(Logger, ABC):
    """A generic measurement model ``y = h(x, w)``.

    Methods that can fail to produce a result return ``None`` in that case.
    """

    @abstractmethod
    def freeze(self, data: Any = None) -> bool:
        """Take and hold the current measurement; return whether one was taken."""

    @abstractmethod
    def measure(self, data: Any = None) -> Any | None:
        """Return the frozen measurement, or ``None`` if there is none."""

    @abstractmethod
    def predicted_measure(self, cur_states) -> Any | None:
        """Return the measurements predicted for ``cur_states``, or ``None``."""

    @abstractmethod
    def innovation(self, predicted_measurements, measurements) -> Any | None:
        """Return the innovation of ``measurements`` against a prediction, or ``None``."""

    def noise_covariance_matrix(self) -> np.ndarray | None:
        """Covariance of the measurement noise."""
        raise MethodNotAvailableError(
            "noise_covariance_matrix",
            f"{type(self).__name__} has no noise covariance matrix",
        )

    def set_property(self, prop: str) -> bool:
        """Set a named property; no properties are known by default."""
        return False

    def input_description(self):
        """Description of the input vector of the measurement equation."""
        raise MethodNotAvailableError(
            "input_description",
            f"{type(self).__name__} has no vector-valued input",
        )

    def measurement_description(self):
        """Description of the output vector of the measurement equation."""
        raise MethodNotAvailableError(
            "measurement_description",
            f"{type(self).__name__} has no vector-valued output",
        )


class AdditiveMeasurementModel(MeasurementModel):
    """A measurement model of the form ``h(x) + w`` with additive noise ``w``."""


class MeasurementModelDecorator(MeasurementModel):
    """Forward every call to a wrapped measurement model.

    Subclasses override the calls whose behaviour they change.
    """

    def __init__(self, measurement_model: MeasurementModel) -> None:
        self.measurement_model = measurement_model

    def freeze(self, data: Any = None) -> bool:
        return self.measurement_model.freeze()

    def measure(self, data: Any = None) -> Any | None:
        return self.measurement_model.measure()

    def predicted_measure(self, cur_states) -> Any | None:
        return self.measurement_model.predicted_measure(cur_states)

    def innovation(self, predicted_measurements, measurements) -> Any | None:
        return self.measurement_model.innovation(predicted_measurements, measurements)

    def noise_covariance_matrix(self) -> np.ndarray | None:
        return self.measurement_model.noise_covariance_matrix()

    def set_property(self, prop: str) -> bool:
        return self.measurement_model.set_property(prop)


class LikelihoodModel(ABC):
    """Evaluates the likelihood of predicted states given a measurement model."""

    @abstractmethod
    def likelihood(self, measurement_model: MeasurementModel, pred_states) -> np.ndarray | None:
        """Return one likelihood per column of ``pred_states``, or ``None``."""