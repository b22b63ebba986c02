"""Gaussian prediction and correction steps, and the linear Kalman filter."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from .gaussian_mixture import GaussianMixture
from .linear_measurement import LinearMeasurementModel
from .measurement_model import MeasurementModel
from .state_model import LinearStateModel, Skipper, StateModel


def _match_shape(target: GaussianMixture, source: GaussianMixture) -> None:
    """Resize ``target`` to the components and dimensions of ``source``."""
    target.resize(source.components, source.dim_linear, source.dim_circular)


def _gaussian_density(x: np.ndarray, covariance: np.ndarray) -> float:
    """Density at ``x`` of a zero-mean Gaussian with the given covariance."""
    size = x.shape[0]
    exponent = -0.5 * float(x @ np.linalg.solve(covariance, x))
    norm = math.sqrt((2.0 * math.pi) ** size * float(np.linalg.det(covariance)))
    return math.exp(exponent) / norm


class GaussianPrediction(Skipper):
    """Prediction step of a Gaussian filter, which can be skipped."""

    def __init__(self) -> None:
        self._skip = False

    @property
    @abstractmethod
    def state_model(self) -> StateModel:
        """The state model used to predict."""

    @abstractmethod
    def predict_step(self, prev_state: GaussianMixture, pred_state: GaussianMixture) -> None:
        """Write the prediction of ``prev_state`` into ``pred_state``."""

    def predict(self, prev_state: GaussianMixture, pred_state: GaussianMixture) -> None:
        """Predict ``pred_state`` from ``prev_state``, or copy it when skipping."""
        if self.is_skipping():
            pred_state.assign(prev_state)
        else:
            self.predict_step(prev_state, pred_state)

    def _exogenous_skipping(self) -> bool:
        model = self.state_model
        return not model.have_exogenous_model() or model.exogenous_model.is_skipping()

    def skip(self, what_step: str, status: bool) -> bool:
        """Skip ``"prediction"``, ``"state"`` or ``"exogenous"``; False for other names."""
        model = self.state_model
        if what_step == "prediction":
            self._skip = status
            model.skip("state", status)
            model.skip("exogenous", status)
        elif what_step in ("state", "exogenous"):
            model.skip(what_step, status)
            self._skip = model.is_skipping() and self._exogenous_skipping()
        else:
            return False
        return True

    def is_skipping(self) -> bool:
        return getattr(self, "_skip", False)


class GaussianCorrection(ABC):
    """Correction step of a Gaussian filter, which can be skipped."""

    def __init__(self) -> None:
        self._skip = False

    @property
    @abstractmethod
    def measurement_model(self) -> MeasurementModel:
        """The measurement model used to correct."""

    @abstractmethod
    def correct_step(self, pred_state: GaussianMixture, corr_state: GaussianMixture) -> None:
        """Write the correction of ``pred_state`` into ``corr_state``."""

    def correct(self, pred_state: GaussianMixture, corr_state: GaussianMixture) -> None:
        """Correct ``pred_state`` into ``corr_state``, or copy it when skipping."""
        if getattr(self, "_skip", False):
            corr_state.assign(pred_state)
        else:
            self.correct_step(pred_state, corr_state)

    def skip(self, status: bool) -> bool:
        self._skip = status
        return True

    def freeze_measurements(self, data: Any = None) -> bool:
        """Ask the measurement model to take the current measurement."""
        return self.measurement_model.freeze(data)

    def likelihood(self) -> np.ndarray | None:
        """Likelihood of the last measurement for each component."""
        raise NotImplementedError("this correction does not provide a likelihood")


class KFPrediction(GaussianPrediction):
    """Kalman filter prediction with a linear state model."""

    def __init__(self, state_model: LinearStateModel) -> None:
        super().__init__()
        self._state_model = state_model

    @property
    def state_model(self) -> LinearStateModel:
        return self._state_model

    def predict_step(self, prev_state: GaussianMixture, pred_state: GaussianMixture) -> None:
        """``x = F x`` and ``P = F P F' + Q`` for every component."""
        if self._state_model.is_skipping():
            pred_state.assign(prev_state)
            return

        _match_shape(pred_state, prev_state)
        pred_state.mean = self._state_model.propagate(prev_state.mean)

        F = self._state_model.state_transition_matrix()
        Q = self._state_model.noise_covariance_matrix()
        for i in range(prev_state.components):
            pred_state.component_covariance(i)[...] = F @ prev_state.component_covariance(i) @ F.T + Q


class KFCorrection(GaussianCorrection):
    """Kalman filter correction with a linear measurement model."""

    def __init__(self, measurement_model: LinearMeasurementModel) -> None:
        super().__init__()
        self._measurement_model = measurement_model
        self._innovations: np.ndarray | None = None
        self._meas_covariances: list[np.ndarray] = []

    @property
    def measurement_model(self) -> LinearMeasurementModel:
        return self._measurement_model

    def likelihood(self) -> np.ndarray | None:
        """Gaussian likelihood of the last innovation of each component, or ``None``."""
        innovations = self._innovations
        if innovations is None or 0 in innovations.shape:
            return None
        return np.array(
            [
                _gaussian_density(column, covariance)
                for column, covariance in zip(innovations.T, self._meas_covariances)
            ]
        )

    def correct_step(self, pred_state: GaussianMixture, corr_state: GaussianMixture) -> None:
        model = self._measurement_model

        measurement = model.measure()
        if measurement is None:
            corr_state.assign(pred_state)
            return

        predicted = model.predicted_measure(pred_state.mean)
        if predicted is None:
            corr_state.assign(pred_state)
            return

        innovation = model.innovation(predicted, measurement)
        if innovation is None:
            corr_state.assign(pred_state)
            return

        R = model.noise_covariance_matrix()
        if R is None:
            corr_state.assign(pred_state)
            return

        H = model.measurement_matrix()
        innovations = np.asarray(innovation, dtype=float)
        if innovations.ndim == 1:
            innovations = innovations.reshape(-1, 1)
        self._innovations = innovations

        if corr_state is not pred_state:
            _match_shape(corr_state, pred_state)

        covariances = []
        for i in range(pred_state.components):
            P = pred_state.component_covariance(i).copy()
            Py = H @ P @ H.T + R
            K = P @ H.T @ np.linalg.inv(Py)
            covariances.append(Py)
            corr_state.component_mean(i)[...] = pred_state.component_mean(i) + K @ innovations[:, i]
            corr_state.component_covariance(i)[...] = P - K @ Py @ K.T
        self._meas_covariances = covariances