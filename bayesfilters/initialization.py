"""Initialization strategies for particle sets and Gaussian beliefs."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from .gaussian_mixture import GaussianMixture
from .particle_set import ParticleSet


class ParticleSetInitialization(ABC):
    """Sets the initial states and weights of a particle set."""

    @abstractmethod
    def initialize(self, particles: ParticleSet) -> bool:
        """Initialize ``particles`` in place; return whether it succeeded."""


class GaussianInitialization(ABC):
    """Sets the initial mean and covariance of a Gaussian belief."""

    @abstractmethod
    def initialize(self, state: GaussianMixture) -> None:
        """Initialize ``state`` in place."""


@dataclass
class InitSurveillanceAreaGrid(ParticleSetInitialization):
    """Place particles on a regular grid over a rectangular area.

    The state is ``(x, x_dot, y, y_dot)``; velocities start at zero and the
    log-weights are uniform.
    """

    surv_x_inf: float
    surv_x_sup: float
    surv_y_inf: float
    surv_y_sup: float
    num_particle_x: int
    num_particle_y: int

    @classmethod
    def from_area(
        cls, surv_x: float, surv_y: float, num_particle_x: int, num_particle_y: int
    ) -> "InitSurveillanceAreaGrid":
        """Grid over ``[0, surv_x] x [0, surv_y]``."""
        return cls(0.0, surv_x, 0.0, surv_y, num_particle_x, num_particle_y)

    def initialize(self, particles: ParticleSet) -> bool:
        """Fill ``particles`` with the grid; False if the particle count differs."""
        num_particle = particles.state.shape[1]
        if num_particle != self.num_particle_x * self.num_particle_y:
            return False
        if particles.state.shape[0] != 4:
            raise ValueError("surveillance grid requires a 4-dimensional state")

        xs = np.linspace(self.surv_x_inf, self.surv_x_sup, self.num_particle_x)
        ys = np.linspace(self.surv_y_inf, self.surv_y_sup, self.num_particle_y)
        grid_x, grid_y = np.meshgrid(xs, ys, indexing="ij")

        state = particles.state
        state[...] = 0.0
        state[0] = grid_x.ravel()
        state[2] = grid_y.ravel()

        particles.weight[...] = -math.log(num_particle)
        return True