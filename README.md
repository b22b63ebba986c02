# bayesfilters

A library for recursive Bayesian estimation built on NumPy. It provides the
pieces needed to assemble Gaussian filters (Kalman prediction and correction)
and particle filters (sequential importance sampling with resampling), along
with the base classes for the state and measurement models they operate on.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Building blocks

- **Belief representations**
  - `GaussianMixture` (`bayesfilters.gaussian_mixture`) holds the means
    (one per column), the covariances (side by side) and the weights of a
    mixture. `component_mean(i)` and `component_covariance(i)` return
    writable views; `augment_with_noise()` appends zero-mean noise to every
    component.
  - `ParticleSet` (`bayesfilters.particle_set`) extends it with a state per
    particle. Two sets with the same dimensions can be joined with `+` or
    `+=`.
- **State models** (`bayesfilters.state_model`)
  - `StateModel`, `AdditiveStateModel` and `LinearStateModel` are the base
    classes. Propagation of the state and of an attached `ExogenousModel`
    can each be switched off with `skip()`.
  - `LTIStateModel` is a time-invariant linear model built from a transition
    matrix `F` and a noise covariance `Q`; it checks that both are non-empty,
    square and of the same size.
- **Measurement models**
  - `bayesfilters.measurement_model` provides the abstract
    `MeasurementModel`, `AdditiveMeasurementModel` and `LikelihoodModel`,
    and `MeasurementModelDecorator`, which forwards every call to a wrapped
    model.
  - `bayesfilters.linear_measurement` provides `LinearMeasurementModel`,
    `LTIMeasurementModel` (matrices `H` and `R`) and `LinearModel`, which
    builds `H` from the state size and the indices of the measured
    components, e.g. `(4, [0, 2])`, and can draw noise with
    `noise_sample(num)`. These classes still leave `freeze()` and
    `measure()` to a subclass, which decides where measurements come from.
- **Gaussian filtering** (`bayesfilters.kalman`)
  - `KFPrediction` computes `x = F x` and `P = F P F' + Q` for every
    component.
  - `KFCorrection` performs the Kalman update and, through `likelihood()`,
    gives the Gaussian likelihood of the last innovation of each component.
- **Particle filtering**
  - `InitSurveillanceAreaGrid` (`bayesfilters.initialization`) places the
    particles of a `(x, x_dot, y, y_dot)` state on a regular grid over a
    rectangle, with zero velocities and uniform log-weights.
  - `Resampling` (`bayesfilters.resampling`) performs seeded systematic
    resampling on log-weights and returns the parent index of each new
    particle; `neff()` gives the effective sample size.
    `ResamplingWithPrior` replaces the lowest-weighted fraction of the
    particles with fresh ones from an initialization model (parent `-1`).
  - `PFPrediction`, `PFCorrection`, `ParticleFilter` and `SIS` are defined
    in `bayesfilters.particle_filter`.
- **Running a filter**
  - `FilteringAlgorithm` (`bayesfilters.filtering`) drives a filter on a
    background thread through `boot()`, `run()`, `wait()`, `reset()`,
    `reboot()` and `teardown()`. Subclasses implement
    `initialization_step()`, `filtering_step()` and `run_condition()`.
  - `Logger` (`bayesfilters.logger`) appends rows of numbers to one `.txt`
    file per name returned by `log_file_names()` once
    `enable_log(folder, prefix)` has been called.

## Example: one Kalman filter step

```python
import numpy as np

from bayesfilters.gaussian_mixture import GaussianMixture
from bayesfilters.kalman import KFCorrection, KFPrediction
from bayesfilters.linear_measurement import LTIMeasurementModel
from bayesfilters.state_model import LTIStateModel

T = 1.0
F = np.array([[1, T, 0, 0],
              [0, 1, 0, 0],
              [0, 0, 1, T],
              [0, 0, 0, 1]], dtype=float)
Q = np.eye(4) * 0.1


class FixedSensor(LTIMeasurementModel):
    """Always reads the same position."""

    def __init__(self, H, R, reading):
        super().__init__(H, R)
        self._reading = np.asarray(reading, dtype=float).reshape(-1, 1)
        self._frozen = None

    def freeze(self, data=None):
        self._frozen = self._reading
        return True

    def measure(self, data=None):
        return self._frozen


H = np.array([[1, 0, 0, 0],
              [0, 0, 1, 0]], dtype=float)
R = np.eye(2) * 100.0

prediction = KFPrediction(LTIStateModel(F, Q))
correction = KFCorrection(FixedSensor(H, R, [10.0, 10.0]))

prior = GaussianMixture(1, 4)
prior.mean[:, 0] = [4.0, 0.04, 15.0, 0.4]
prior.covariance[:, :4] = np.diag([0.05**2, 0.05**2, 0.01**2, 0.01**2])

predicted = GaussianMixture(1, 4)
prediction.predict(prior, predicted)

corrected = GaussianMixture(1, 4)
correction.freeze_measurements()
correction.correct(predicted, corrected)
print(corrected.mean[:, 0], correction.likelihood())
```

## Example: a particle filter

`SIS(num_particle, state_size_linear, initialization, prediction, correction,
resampling)` needs:

- an initialization model, such as `InitSurveillanceAreaGrid`;
- a subclass of `PFPrediction` implementing `state_model` and
  `predict_step()`;
- a subclass of `PFCorrection` implementing `measurement_model` and
  `correct_step()`;
- a `Resampling`.

Subclass `SIS` to decide when the filter stops by overriding
`run_condition()`, then call `boot()`, `run()` and `wait()`. Each step
predicts (from the second step on), freezes the measurements, corrects and
normalises the log-weights, logs, and resamples when the effective sample
size drops below a third of the particle count.

## What is not included

- No ready-made particle prediction or correction step: `PFPrediction` and
  `PFCorrection` are abstract, and no concrete `LikelihoodModel` is
  provided.
- No concrete motion models beyond `LTIStateModel`, no sigma-point or
  unscented filters, and no simulated targets or sensors.
- No command-line program; the package is used as a library.