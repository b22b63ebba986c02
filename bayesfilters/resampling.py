"""Systematic resampling of particle sets, optionally mixing in fresh particles."""

from __future__ import annotations

import math

import numpy as np

from .initialization import ParticleSetInitialization
from .particle_set import ParticleSet


def _log_sum_exp(values: np.ndarray) -> float:
    peak = float(np.max(values))
    return peak + math.log(float(np.sum(np.exp(values - peak))))


class Resampling:
    """Systematic resampling driven by a seeded random generator."""

    def __init__(self, seed: int = 1) -> None:
        self._rng = np.random.default_rng(seed)

    def resample(self, cor_particles: ParticleSet, res_particles: ParticleSet) -> np.ndarray:
        """Resample ``cor_particles`` (log-weights) into ``res_particles``.

        Returns the index of the parent of each resampled particle. The new
        log-weights are uniform.
        """
        num = cor_particles.weight.shape[0]
        res_particles.resize(num, cor_particles.dim_linear, cor_particles.dim_circular)
        if num == 0:
            return np.zeros(0, dtype=int)

        csw = np.cumsum(np.exp(cor_particles.weight))
        u_1 = self._rng.uniform(0.0, 1.0 / num)
        points = u_1 + np.arange(num) / num
        parents = np.minimum(np.searchsorted(csw, points, side="left"), num - 1)

        size = cor_particles.dim_covariance
        blocks = cor_particles.covariance.reshape(size, num, size)

        res_particles.state = cor_particles.state[:, parents]
        res_particles.mean = cor_particles.mean[:, parents]
        res_particles.covariance = blocks[:, parents, :].reshape(size, num * size)
        res_particles.weight = np.full(num, -math.log(num))
        return parents.astype(int)

    def neff(self, cor_weights) -> float:
        """Effective sample size of a set of log-weights."""
        weights = np.exp(np.asarray(cor_weights, dtype=float))
        return 1.0 / float(np.sum(weights**2))


class ResamplingWithPrior(Resampling):
    """Replace the lowest-weighted fraction of particles with freshly initialized ones.

    The ``prior_ratio`` fraction with the lowest weights is drawn again by
    ``init_model``; the rest is resampled systematically. Fresh particles have
    parent ``-1``.
    """

    def __init__(
        self,
        init_model: ParticleSetInitialization,
        prior_ratio: float = 0.5,
        seed: int = 1,
    ) -> None:
        super().__init__(seed)
        self.init_model = init_model
        self.prior_ratio = prior_ratio

    def resample(self, cor_particles: ParticleSet, res_particles: ParticleSet) -> np.ndarray:
        num = cor_particles.state.shape[1]
        num_prior = int(math.floor(num * self.prior_ratio))
        num_resample = num - num_prior
        dims = (cor_particles.dim_linear, cor_particles.dim_circular, cor_particles.use_quaternion)

        order = self.sort_indices(np.exp(cor_particles.weight))[num_prior:]

        tmp = ParticleSet(num_resample, *dims)
        tmp.state = cor_particles.state[:, order]
        tmp.mean = cor_particles.mean[:, order]
        size = cor_particles.dim_covariance
        blocks = cor_particles.covariance.reshape(size, num, size)
        tmp.covariance = blocks[:, order, :].reshape(size, num_resample * size)
        tmp.weight = cor_particles.weight[order]
        if num_resample:
            tmp.weight -= _log_sum_exp(tmp.weight)

        right = ParticleSet(num_resample, *dims)
        parents_right = super().resample(tmp, right) + num_prior

        left = ParticleSet(num_prior, *dims)
        self.init_model.initialize(left)

        res_particles.assign(left + right)
        res_particles.weight[...] = -math.log(num) if num else 0.0

        return np.concatenate((np.full(num_prior, -1, dtype=int), parents_right.astype(int)))

    @staticmethod
    def sort_indices(vector) -> list[int]:
        """Indices that sort ``vector`` in ascending order."""
        return [int(i) for i in np.argsort(np.asarray(vector), kind="stable")]