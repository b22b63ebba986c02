"""Linear measurement models ``y = H x + w``."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Sequence

import numpy as np

from .measurement_model import AdditiveMeasurementModel


def _as_columns(value) -> np.ndarray:
    """Return ``value`` as a 2-D float array, a 1-D input becoming one column."""
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 1:
        return arr.reshape(-1, 1)
    return arr


def _as_matrix(value, name: str) -> np.ndarray:
    arr = np.array(value, dtype=float)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be a 2-D matrix")
    return arr


def _matrix_sqrt(matrix: np.ndarray) -> np.ndarray:
    """Return ``S`` such that ``S @ S.T`` equals the positive semidefinite ``matrix``."""
    try:
        return np.linalg.cholesky(matrix)
    except np.linalg.LinAlgError:
        eigenvalues, eigenvectors = np.linalg.eigh(matrix)
        return eigenvectors * np.sqrt(np.clip(eigenvalues, 0.0, None))


class LinearMeasurementModel(AdditiveMeasurementModel):
    """A measurement model ``H x + w`` with a linear measurement matrix ``H``."""

    @abstractmethod
    def measurement_matrix(self) -> np.ndarray:
        """The measurement matrix ``H``."""

    def predicted_measure(self, cur_states) -> np.ndarray:
        """Return ``H @ cur_states``, one predicted measurement per column."""
        return self.measurement_matrix() @ _as_columns(cur_states)

    def innovation(self, predicted_measurements, measurements) -> np.ndarray:
        """Subtract each predicted column from the first measurement column."""
        predicted = _as_columns(predicted_measurements)
        measured = _as_columns(measurements)
        return measured[:, [0]] - predicted


class LTIMeasurementModel(LinearMeasurementModel):
    """A linear measurement model with time-invariant ``H`` and noise covariance ``R``."""

    def __init__(self, measurement_matrix, noise_covariance_matrix) -> None:
        H = _as_matrix(measurement_matrix, "measurement matrix")
        R = _as_matrix(noise_covariance_matrix, "noise covariance matrix")

        if 0 in H.shape:
            raise ValueError("Measurement matrix dimensions cannot be 0.")
        if 0 in R.shape:
            raise ValueError("Noise covariance matrix dimensions cannot be 0.")
        if R.shape[0] != R.shape[1]:
            raise ValueError("Noise covariance matrix must be a square matrix.")
        if H.shape[0] != R.shape[0]:
            raise ValueError(
                "Number of rows of the measurement matrix must be the same as "
                "the size of the noise covariance matrix."
            )

        self._H = H
        self._R = R

    def measurement_matrix(self) -> np.ndarray:
        return self._H.copy()

    def noise_covariance_matrix(self) -> np.ndarray:
        return self._R.copy()


class LinearModel(LTIMeasurementModel):
    """A sensor measuring chosen components of the state, with Gaussian noise.

    ``linear_matrix_component`` is ``(state_size, indices)``: the state has
    ``state_size`` entries and row ``i`` of ``H`` picks entry ``indices[i]``.
    For example ``(4, [0, 2])`` gives ``H = [[1, 0, 0, 0], [0, 0, 1, 0]]``.
    """

    def __init__(
        self,
        linear_matrix_component: tuple[int, Sequence[int]],
        noise_covariance_matrix,
        seed: int = 1,
    ) -> None:
        state_size, indices = linear_matrix_component
        indices = list(indices)
        super().__init__(np.zeros((len(indices), state_size)), noise_covariance_matrix)

        for row, component in enumerate(indices):
            if not 0 <= component < state_size:
                raise ValueError(
                    f"Index component out of bound. Provided: {component}. "
                    f"Index bound: {state_size}."
                )
            self._H[row, component] = 1.0

        self._sqrt_R = _matrix_sqrt(self._R)
        self._rng = np.random.default_rng(seed)

    @property
    def noise_covariance_sqrt(self) -> np.ndarray:
        """A square root ``S`` of the noise covariance, with ``S @ S.T == R``."""
        return self._sqrt_R.copy()

    def noise_sample(self, num: int) -> np.ndarray:
        """Draw ``num`` noise vectors, one per column."""
        draws = self._rng.standard_normal((self._R.shape[0], num))
        return self._sqrt_R @ draws

    def log_file_names(self, folder_path: str, file_name_prefix: str) -> list[str]:
        return [f"{folder_path}/{file_name_prefix}_measurements"]