"""State models, exogenous inputs and linear time-invariant dynamics."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


def _as_columns(value) -> np.ndarray:
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 1:
        return arr.reshape(-1, 1)
    return arr


def _as_matrix(value, name: str) -> np.ndarray:
    arr = np.array(value, dtype=float)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be a 2-D matrix")
    return arr


class Skipper(ABC):
    """Something whose steps can be switched off by name."""

    @abstractmethod
    def skip(self, what_step: str, status: bool) -> bool:
        """Set the skip status of ``what_step``; return whether the step is known."""


class ExogenousModel(Skipper):
    """An exogenous input added to the propagation of a state model."""

    def __init__(self) -> None:
        self._skip = False

    def skip(self, what_step: str, status: bool) -> bool:
        if what_step != "exogenous":
            return False
        self._skip = status
        return True

    def is_skipping(self) -> bool:
        return getattr(self, "_skip", False)

    @abstractmethod
    def propagate(self, cur_states) -> np.ndarray:
        """Return the exogenous contribution for each column of ``cur_states``."""

    @abstractmethod
    def set_property(self, prop: str) -> bool:
        """Set a named property; return whether it was accepted."""

    @abstractmethod
    def state_description(self):
        """Description of the vector produced by :meth:`propagate`."""


class StateModel(Skipper):
    """A model of how the state evolves, optionally with an exogenous input."""

    def __init__(self) -> None:
        self._skip = False
        self._exogenous_model: ExogenousModel | None = None

    def skip(self, what_step: str, status: bool) -> bool:
        """Skip ``"state"``, ``"exogenous"`` or ``"all"`` of the propagation."""
        if what_step == "state":
            self._skip = status
            return True
        if what_step == "exogenous":
            if not self.have_exogenous_model():
                return False
            return self.exogenous_model.skip("exogenous", status)
        if what_step == "all":
            self._skip = status
            if self.have_exogenous_model():
                self.exogenous_model.skip("exogenous", status)
            return True
        return False

    def is_skipping(self) -> bool:
        return getattr(self, "_skip", False)

    def add_exogenous_model(self, exogenous_model: ExogenousModel) -> bool:
        """Attach an exogenous model, replacing any previous one."""
        self._exogenous_model = exogenous_model
        return True

    def have_exogenous_model(self) -> bool:
        return getattr(self, "_exogenous_model", None) is not None

    @property
    def exogenous_model(self) -> ExogenousModel:
        """The attached exogenous model."""
        model = getattr(self, "_exogenous_model", None)
        if model is None:
            raise LookupError("no exogenous model has been added")
        return model

    @abstractmethod
    def propagate(self, cur_states) -> np.ndarray:
        """Return the propagated states, one per column."""

    @abstractmethod
    def set_property(self, prop: str) -> bool:
        """Set a named property; return whether it was accepted."""


class AdditiveStateModel(StateModel):
    """A state model of the form ``f(x) + w`` with additive noise ``w``."""


class LinearStateModel(AdditiveStateModel):
    """A state model ``F x + w``, optionally plus an exogenous input."""

    @abstractmethod
    def state_transition_matrix(self) -> np.ndarray:
        """The state transition matrix ``F``."""

    @abstractmethod
    def noise_covariance_matrix(self) -> np.ndarray:
        """Covariance ``Q`` of the process noise."""

    def propagate(self, cur_states) -> np.ndarray:
        """Apply ``F`` and the exogenous input, each unless it is skipped."""
        states = _as_columns(cur_states)
        exogenous_active = self.have_exogenous_model() and not self.exogenous_model.is_skipping()

        if not self.is_skipping() and exogenous_active:
            return self.state_transition_matrix() @ states + self.exogenous_model.propagate(states)
        if not self.is_skipping():
            return self.state_transition_matrix() @ states
        if exogenous_active:
            return np.asarray(self.exogenous_model.propagate(states), dtype=float)
        return states.copy()


class LTIStateModel(LinearStateModel):
    """A linear state model with time-invariant ``F`` and noise covariance ``Q``."""

    # Time-invariant dynamics expose no tunable properties.
    _PROPERTIES: frozenset[str] = frozenset()

    def __init__(self, transition_matrix, noise_covariance_matrix) -> None:
        super().__init__()
        F = _as_matrix(transition_matrix, "state transition matrix")
        Q = _as_matrix(noise_covariance_matrix, "noise covariance matrix")

        if 0 in F.shape:
            raise ValueError("State transition matrix dimensions cannot be 0.")
        if 0 in Q.shape:
            raise ValueError("Noise covariance matrix dimensions cannot be 0.")
        if F.shape[0] != F.shape[1]:
            raise ValueError("State transition matrix must be a square matrix.")
        if Q.shape[0] != Q.shape[1]:
            raise ValueError("Noise covariance matrix must be a square matrix.")
        if F.shape[0] != Q.shape[0]:
            raise ValueError(
                "Number of rows of the state transition matrix must be the same as "
                "the size of the noise covariance matrix."
            )

        self._F = F
        self._Q = Q

    def state_transition_matrix(self) -> np.ndarray:
        return self._F.copy()

    def noise_covariance_matrix(self) -> np.ndarray:
        return self._Q.copy()

    def jacobian(self) -> np.ndarray:
        """Jacobian of the dynamics, which is ``F`` itself."""
        return self._F.copy()

    def set_property(self, prop: str) -> bool:
        """Accept only known properties; an LTI model has none."""
        return prop in self._PROPERTIES