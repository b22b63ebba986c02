"""Particle sets: Gaussian mixtures that also carry a state per particle."""

from __future__ import annotations

import numpy as np

from .gaussian_mixture import GaussianMixture, _fill


class ParticleSet(GaussianMixture):
    """A Gaussian mixture whose components also hold a particle state.

    ``state`` is ``dim`` x ``components``; column ``i`` is particle ``i``.
    """

    def __init__(
        self,
        components: int = 1,
        dim_linear: int = 1,
        dim_circular: int = 0,
        use_quaternion: bool = False,
    ) -> None:
        super().__init__(components, dim_linear, dim_circular, use_quaternion)
        self._state = np.zeros((self.dim, components))

    @property
    def state(self) -> np.ndarray:
        """Particle states, one per column."""
        return self._state

    @state.setter
    def state(self, value) -> None:
        _fill(self._state, value, "state")

    def particle(self, i: int) -> np.ndarray:
        """Writable view of the state of particle ``i``."""
        return self._state[:, i]

    def resize(self, components: int, dim_linear: int, dim_circular: int = 0) -> None:
        """Resize the set, keeping states when only the particle count changes."""
        new_dim = dim_linear + dim_circular * self.dim_circular_component

        if (
            self.dim_linear == dim_linear
            and self.dim_circular == dim_circular
            and self.components == components
        ):
            return

        state = np.zeros((new_dim, components))
        if self.dim == new_dim:
            keep = min(self.components, components)
            state[:, :keep] = self._state[:, :keep]
        self._state = state

        super().resize(components, dim_linear, dim_circular)

    def copy(self) -> "ParticleSet":
        """Return an independent copy of this set."""
        result = ParticleSet(
            self.components, self.dim_linear, self.dim_circular, self.use_quaternion
        )
        result.assign(self)
        return result

    def assign(self, other: "ParticleSet") -> None:
        """Make this set an independent copy of ``other``."""
        super().assign(other)
        self._state = other._state.copy()

    def __iadd__(self, other: "ParticleSet") -> "ParticleSet":
        if self.dim != other.dim or self.dim_covariance != other.dim_covariance:
            raise ValueError("particle sets must have the same dimensions to be joined")
        self._state = np.hstack((self._state, other._state))
        self._mean = np.hstack((self._mean, other._mean))
        self._covariance = np.hstack((self._covariance, other._covariance))
        self._weight = np.concatenate((self._weight, other._weight))
        self.components += other.components
        return self

    def __add__(self, other: "ParticleSet") -> "ParticleSet":
        result = self.copy()
        result += other
        return result