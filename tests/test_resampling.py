import math

import numpy as np
import pytest

from bayesfilters.initialization import ParticleSetInitialization
from bayesfilters.particle_set import ParticleSet
from bayesfilters.resampling import Resampling, ResamplingWithPrior


def make_particles(weights, dim=2):
    num = len(weights)
    particles = ParticleSet(num, dim)
    particles.state = np.tile(np.arange(num, dtype=float), (dim, 1))
    particles.mean = particles.state * 10.0
    for i in range(num):
        particles.component_covariance(i)[...] = np.eye(dim) * (i + 1)
    particles.weight = np.log(np.asarray(weights, dtype=float))
    return particles


class ConstantInit(ParticleSetInitialization):
    def __init__(self, value):
        self.value = value

    def initialize(self, particles):
        particles.state[...] = self.value
        return True


def test_neff_uniform_weights():
    weights = np.full(8, -math.log(8))
    assert Resampling().neff(weights) == pytest.approx(8.0)


def test_neff_degenerate_weights():
    weights = np.log(np.array([1.0, 1e-300, 1e-300]))
    assert Resampling().neff(weights) == pytest.approx(1.0)


def test_uniform_weights_keep_every_particle():
    particles = make_particles([0.25] * 4)
    result = ParticleSet(4, 2)
    parents = Resampling(seed=3).resample(particles, result)
    assert list(parents) == [0, 1, 2, 3]
    assert np.allclose(result.state, particles.state)


def test_dominant_particle_is_copied():
    particles = make_particles([1e-12, 1.0 - 2e-12, 1e-12])
    result = ParticleSet(3, 2)
    parents = Resampling().resample(particles, result)
    assert list(parents) == [1, 1, 1]
    assert np.allclose(result.state, particles.state[:, [1, 1, 1]])
    assert np.allclose(result.component_covariance(2), particles.component_covariance(1))
    assert np.allclose(result.weight, -math.log(3))


def test_parents_are_sorted_and_consistent():
    particles = make_particles([0.1, 0.4, 0.2, 0.3])
    result = ParticleSet(4, 2)
    parents = Resampling(seed=7).resample(particles, result)
    assert np.all(np.diff(parents) >= 0)
    assert np.allclose(result.state, particles.state[:, parents])
    assert np.allclose(result.mean, particles.mean[:, parents])


def test_same_seed_same_result():
    particles = make_particles([0.1, 0.4, 0.2, 0.3])
    first = Resampling(seed=5).resample(particles, ParticleSet(4, 2))
    second = Resampling(seed=5).resample(particles, ParticleSet(4, 2))
    assert list(first) == list(second)


def test_sort_indices():
    assert ResamplingWithPrior.sort_indices([3.0, 1.0, 2.0]) == [1, 2, 0]


def test_resampling_with_prior():
    particles = make_particles([0.1, 0.2, 0.3, 0.4])
    result = ParticleSet(4, 2)
    resampler = ResamplingWithPrior(ConstantInit(-5.0), prior_ratio=0.5)
    parents = resampler.resample(particles, result)

    assert list(parents[:2]) == [-1, -1]
    assert set(parents[2:]) <= {2, 3}
    assert result.components == 4
    assert np.allclose(result.state[:, :2], -5.0)
    assert set(result.state[0, 2:]) <= {2.0, 3.0}
    assert np.allclose(result.weight, -math.log(4))


def test_resampling_with_prior_zero_ratio_keeps_all_resampled():
    particles = make_particles([0.25] * 4)
    result = ParticleSet(4, 2)
    parents = ResamplingWithPrior(ConstantInit(0.0), prior_ratio=0.0).resample(particles, result)
    assert np.all(parents >= 0)
    assert result.components == 4
    assert np.allclose(result.weight, -math.log(4))