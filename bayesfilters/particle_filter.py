"""Particle filter prediction and correction steps and the SIS particle filter."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from .filtering import FilteringAlgorithm
from .initialization import ParticleSetInitialization
from .measurement_model import MeasurementModel
from .particle_set import ParticleSet
from .resampling import Resampling
from .state_model import StateModel


def _log_sum_exp(values: np.ndarray) -> float:
    peak = float(np.max(values))
    return peak + math.log(float(np.sum(np.exp(values - peak))))


class PFPrediction(ABC):
    """Prediction step of a particle filter, which can be skipped."""

    def __init__(self) -> None:
        self._skip = False

    @property
    @abstractmethod
    def state_model(self) -> StateModel:
        """The state model used to predict."""

    @abstractmethod
    def predict_step(self, prev_particles: ParticleSet, pred_particles: ParticleSet) -> None:
        """Write the prediction of ``prev_particles`` into ``pred_particles``."""

    def predict(self, prev_particles: ParticleSet, pred_particles: ParticleSet) -> None:
        """Predict ``pred_particles`` from ``prev_particles``, or copy them when skipping."""
        if self.is_skipping():
            pred_particles.assign(prev_particles)
        else:
            self.predict_step(prev_particles, pred_particles)

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


class PFCorrection(ABC):
    """Correction step of a particle filter, which can be skipped."""

    def __init__(self) -> None:
        self._skip = False

    @property
    @abstractmethod
    def measurement_model(self) -> MeasurementModel:
        """The measurement model used to correct."""

    @abstractmethod
    def correct_step(self, pred_particles: ParticleSet, cor_particles: ParticleSet) -> None:
        """Write the correction of ``pred_particles`` into ``cor_particles``."""

    def correct(self, pred_particles: ParticleSet, cor_particles: ParticleSet) -> None:
        """Correct ``pred_particles`` into ``cor_particles``, or copy them when skipping."""
        if getattr(self, "_skip", False):
            cor_particles.assign(pred_particles)
        else:
            self.correct_step(pred_particles, cor_particles)

    def skip(self, status: bool) -> bool:
        self._skip = status
        return True

    def is_skipping(self) -> bool:
        return getattr(self, "_skip", False)

    def freeze_measurements(self, data: Any = None) -> bool:
        """Ask the measurement model to take the current measurement."""
        return self.measurement_model.freeze(data)


class ParticleFilter(FilteringAlgorithm):
    """A filtering algorithm built from the four steps of a particle filter."""

    def __init__(
        self,
        initialization: ParticleSetInitialization,
        prediction: PFPrediction,
        correction: PFCorrection,
        resampling: Resampling,
    ) -> None:
        super().__init__()
        self._initialization = initialization
        self._prediction = prediction
        self._correction = correction
        self._resampling = resampling

    @property
    def initialization(self) -> ParticleSetInitialization:
        return self._initialization

    @property
    def prediction(self) -> PFPrediction:
        return self._prediction

    @property
    def correction(self) -> PFCorrection:
        return self._correction

    @property
    def resampling(self) -> Resampling:
        return self._resampling

    def skip(self, what_step: str, status: bool) -> bool:
        """Skip a prediction sub-step, the correction, or ``"all"`` of them."""
        if what_step in ("prediction", "state", "exogenous"):
            return self._prediction.skip(what_step, status)
        if what_step == "correction":
            return self._correction.skip(status)
        if what_step == "all":
            done = self._prediction.skip("prediction", status)
            done = self._correction.skip(status) and done
            return done
        return False


class SIS(ParticleFilter):
    """Sequential importance sampling particle filter with adaptive resampling.

    Particles are resampled whenever the effective sample size drops below a
    third of the number of particles.
    """

    def __init__(
        self,
        num_particle: int,
        state_size_linear: int,
        initialization: ParticleSetInitialization,
        prediction: PFPrediction,
        correction: PFCorrection,
        resampling: Resampling,
        state_size_circular: int = 0,
    ) -> None:
        super().__init__(initialization, prediction, correction, resampling)
        self.num_particle = num_particle
        self.state_size_linear = state_size_linear
        self.state_size_circular = state_size_circular
        self.state_size = state_size_linear + state_size_circular
        self.pred_particle = ParticleSet(num_particle, state_size_linear, state_size_circular)
        self.cor_particle = ParticleSet(num_particle, state_size_linear, state_size_circular)

    def initialization_step(self) -> bool:
        return self.initialization.initialize(self.pred_particle)

    def filtering_step(self) -> None:
        if self.step_number() != 0:
            self.prediction.predict(self.cor_particle, self.pred_particle)

        if self.correction.freeze_measurements():
            self.correction.correct(self.pred_particle, self.cor_particle)
            weight = self.cor_particle.weight
            weight[...] = weight - _log_sum_exp(weight)
        else:
            self.cor_particle.assign(self.pred_particle)

        self.log()

        if self.resampling.neff(self.cor_particle.weight) < self.num_particle / 3.0:
            res_particle = ParticleSet(
                self.num_particle, self.state_size_linear, self.state_size_circular
            )
            self.resampling.resample(self.cor_particle, res_particle)
            self.cor_particle.assign(res_particle)

    def run_condition(self) -> bool:
        return True

    def log_file_names(self, folder_path: str, file_name_prefix: str) -> list[str]:
        base = f"{folder_path}/{file_name_prefix}"
        return [
            base + "_pred_particles",
            base + "_pred_weights",
            base + "_cor_particles",
            base + "_cor_weights",
        ]

    def log(self) -> None:
        self.logger(
            self.pred_particle.state.T,
            self.pred_particle.weight,
            self.cor_particle.state.T,
            self.cor_particle.weight,
        )