"""Mixture of Gaussian components stored column-wise in dense arrays."""

from __future__ import annotations

import copy as _copy

import numpy as np


def _fill(target: np.ndarray, value, name: str) -> None:
    """Copy ``value`` into ``target`` in place, checking that the sizes agree."""
    arr = np.asarray(value, dtype=float)
    if arr.shape != target.shape:
        is_vector = arr.ndim <= 1 or target.ndim == 1 or 1 in arr.shape
        if arr.size == target.size and is_vector:
            arr = arr.reshape(target.shape)
        else:
            raise ValueError(f"{name} must have shape {target.shape}, got {arr.shape}")
    target[...] = arr


class GaussianMixture:
    """A weighted set of Gaussian components sharing the same dimensions.

    Means are the columns of ``mean`` (``dim`` x ``components``); covariances are
    stored side by side in ``covariance`` (``dim_covariance`` x
    ``dim_covariance * components``); ``weight`` holds one weight per component.
    Circular state entries take one coordinate each, or four when quaternions
    are used, in which case each contributes three degrees of freedom to the
    covariance.
    """

    def __init__(
        self,
        components: int = 1,
        dim_linear: int = 1,
        dim_circular: int = 0,
        use_quaternion: bool = False,
    ) -> None:
        self.components = components
        self.use_quaternion = use_quaternion
        self.dim_circular_component = 4 if use_quaternion else 1
        self.dim_linear = dim_linear
        self.dim_circular = dim_circular
        self.dim = dim_linear + dim_circular * self.dim_circular_component
        self.dim_noise = 0
        self.dim_covariance = self._covariance_size(dim_linear, dim_circular)

        self._mean = np.zeros((self.dim, components))
        self._covariance = np.zeros((self.dim_covariance, self.dim_covariance * components))
        self._weight = np.full(components, 1.0 / components) if components else np.zeros(0)

    def _covariance_size(self, dim_linear: int, dim_circular: int) -> int:
        if self.use_quaternion:
            return dim_linear + dim_circular * 3
        return dim_linear + dim_circular * self.dim_circular_component

    @property
    def mean(self) -> np.ndarray:
        """Component means, one per column."""
        return self._mean

    @mean.setter
    def mean(self, value) -> None:
        _fill(self._mean, value, "mean")

    @property
    def covariance(self) -> np.ndarray:
        """Component covariances, placed side by side."""
        return self._covariance

    @covariance.setter
    def covariance(self, value) -> None:
        _fill(self._covariance, value, "covariance")

    @property
    def weight(self) -> np.ndarray:
        """Component weights."""
        return self._weight

    @weight.setter
    def weight(self, value) -> None:
        _fill(self._weight, value, "weight")

    def component_mean(self, i: int) -> np.ndarray:
        """Writable view of the mean of component ``i``."""
        return self._mean[:, i]

    def component_covariance(self, i: int) -> np.ndarray:
        """Writable view of the covariance of component ``i``."""
        size = self.dim_covariance
        return self._covariance[:, size * i : size * (i + 1)]

    def resize(self, components: int, dim_linear: int, dim_circular: int = 0) -> None:
        """Change the number of components and/or the dimensions.

        Existing data is kept when only the number of components changes;
        otherwise means and covariances are reset to zero. Existing weights are
        kept and new ones are zero.
        """
        new_dim = dim_linear + dim_circular * self.dim_circular_component
        new_dim_covariance = self._covariance_size(dim_linear, dim_circular)

        if (
            self.dim_linear == dim_linear
            and self.dim_circular == dim_circular
            and self.components == components
        ):
            return

        keep = min(self.components, components)
        if new_dim == self.dim and new_dim_covariance == self.dim_covariance:
            mean = np.zeros((new_dim, components))
            mean[:, :keep] = self._mean[:, :keep]
            covariance = np.zeros((new_dim_covariance, new_dim_covariance * components))
            covariance[:, : new_dim_covariance * keep] = self._covariance[:, : new_dim_covariance * keep]
        else:
            mean = np.zeros((new_dim, components))
            covariance = np.zeros((new_dim_covariance, new_dim_covariance * components))

        weight = np.zeros(components)
        weight[:keep] = self._weight[:keep]

        self._mean = mean
        self._covariance = covariance
        self._weight = weight
        self.components = components
        self.dim_linear = dim_linear
        self.dim_circular = dim_circular
        self.dim = new_dim
        self.dim_covariance = new_dim_covariance

    def augment_with_noise(self, noise_covariance_matrix) -> None:
        """Append zero-mean noise of the given covariance to every component."""
        noise = np.atleast_2d(np.asarray(noise_covariance_matrix, dtype=float))
        rows, cols = noise.shape
        if rows == 0 or cols == 0:
            raise ValueError("noise covariance matrix dimensions cannot be 0")
        if rows != cols:
            raise ValueError("noise covariance matrix must be a square matrix")

        old_size = self.dim_covariance
        new_size = old_size + rows
        covariance = np.zeros((new_size, new_size * self.components))
        for i in range(self.components):
            block = covariance[:, new_size * i : new_size * (i + 1)]
            block[:old_size, :old_size] = self.component_covariance(i)
            block[old_size:, old_size:] = noise

        self._mean = np.vstack((self._mean, np.zeros((rows, self.components))))
        self._covariance = covariance
        self.dim_noise += rows
        self.dim += rows
        self.dim_covariance = new_size

    def copy(self):
        """Return an independent deep copy."""
        return _copy.deepcopy(self)

    def assign(self, other: "GaussianMixture") -> None:
        """Make this mixture an independent copy of ``other``."""
        self.components = other.components
        self.use_quaternion = other.use_quaternion
        self.dim_circular_component = other.dim_circular_component
        self.dim = other.dim
        self.dim_linear = other.dim_linear
        self.dim_circular = other.dim_circular
        self.dim_noise = other.dim_noise
        self.dim_covariance = other.dim_covariance
        self._mean = other._mean.copy()
        self._covariance = other._covariance.copy()
        self._weight = other._weight.copy()