# Copyright 2025 Thousand Brains Project
#
# Copyright may exist in Contributors' modifications
# and/or contributions to the work.
#
# Use of this source code is governed by the MIT
# license that can be found in the LICENSE file or at
# https://opensource.org/licenses/MIT.
from __future__ import annotations

import numpy as np
import pytest

from wrinkles.errors import InvalidParameterError
from wrinkles.models.filtering import CorrelationBackend, correlate
from wrinkles.models.gabor import KernelBuilder
from wrinkles.models.orientation_bank import (
    FilterBankRequest,
    OrientationBank,
    orientation_angles,
)

REQUEST = FilterBankRequest(sigma=5.0, lambd=1.0, psi=90.0, num_angles=4)


@pytest.mark.parametrize("n", [1, 2, 3, 4, 7, 12])
def test_orientation_angles_cover_half_turn(n):
    angles = orientation_angles(n)
    assert len(angles) == n
    assert len(np.unique(angles)) == n
    assert angles[0] == 0.0
    assert np.all(angles < 180.0)
    np.testing.assert_allclose(angles, [i * 180.0 / n for i in range(n)])


def test_four_angles():
    np.testing.assert_array_equal(orientation_angles(4), [0.0, 45.0, 90.0, 135.0])


@pytest.mark.parametrize("n", [1, 3, 6])
def test_bank_builds_one_kernel_per_angle(n, rng):
    luminance = rng.uniform(0, 255, (16, 16)).astype(np.float32)
    request = FilterBankRequest(sigma=5.0, lambd=1.0, psi=90.0, num_angles=n)
    bank = OrientationBank()
    result = bank.call(luminance, request)
    assert len(result.kernels) == n
    builder = KernelBuilder()
    for theta, kernel in zip(result.angles, result.kernels):
        np.testing.assert_array_equal(kernel, builder(5.0, theta, 1.0, 90.0))
    assert len(bank.kernels(request)) == n


def test_single_angle_equals_single_correlation(rng):
    luminance = rng.uniform(0, 255, (20, 20)).astype(np.float32)
    request = FilterBankRequest(sigma=5.0, lambd=1.0, psi=90.0, num_angles=1)
    response = OrientationBank()(luminance, request)
    kernel = KernelBuilder()(5.0, 0.0, 1.0, 90.0)
    np.testing.assert_array_equal(response, correlate(luminance, kernel))


def test_response_is_pointwise_max_of_orientations(rng):
    luminance = rng.uniform(0, 255, (20, 24)).astype(np.float32)
    result = OrientationBank(keep_responses=True).call(luminance, REQUEST)
    assert len(result.responses) == REQUEST.num_angles
    np.testing.assert_array_equal(
        result.response, np.max(np.stack(result.responses), axis=0)
    )
    assert result.response.shape == luminance.shape
    assert result.response.dtype == np.float32


def test_responses_not_kept_by_default(rng):
    luminance = rng.uniform(0, 255, (8, 8)).astype(np.float32)
    result = OrientationBank().call(luminance, REQUEST)
    assert result.responses == []


def test_uniform_input_gives_kernel_sum_response():
    value = 100.0
    luminance = np.full((30, 30), value, dtype=np.float32)
    request = FilterBankRequest(sigma=2.0, lambd=1.0, psi=0.0, num_angles=3)
    bank = OrientationBank(backend=CorrelationBackend.NUMBA)
    result = bank.call(luminance, request)
    expected = max(value * float(k.sum()) for k in result.kernels)
    interior = result.response[10:20, 10:20]
    np.testing.assert_allclose(interior, expected, rtol=1e-4)


def test_max_is_independent_of_orientation_order(rng):
    luminance = rng.uniform(0, 255, (16, 16)).astype(np.float32)
    result = OrientationBank(keep_responses=True).call(luminance, REQUEST)
    reversed_max = result.responses[-1].copy()
    for response in reversed(result.responses[:-1]):
        reversed_max = np.maximum(reversed_max, response)
    np.testing.assert_array_equal(result.response, reversed_max)


def test_strongest_response_follows_ridge_orientation():
    # A vertical ridge matches theta=0, whose carrier varies along x.
    luminance = np.full((41, 41), 200.0, dtype=np.float32)
    luminance[:, 20] = 50.0
    request = FilterBankRequest(sigma=5.0, lambd=1.0, psi=90.0, num_angles=2)
    result = OrientationBank(keep_responses=True).call(luminance, request)
    aligned, orthogonal = (np.abs(r[10:31, 10:31]).max() for r in result.responses)
    assert aligned > orthogonal


@pytest.mark.parametrize(
    "kwargs",
    [
        {"num_angles": 0},
        {"num_angles": -3},
        {"num_angles": 2.5},
        {"num_angles": True},
        {"sigma": 0.0},
        {"sigma": -1.0},
        {"lambd": 0.0},
        {"sigma": float("nan")},
        {"psi": float("inf")},
        {"lambd": None},
    ],
)
def test_invalid_requests_are_rejected(kwargs):
    params = {"sigma": 5.0, "lambd": 1.0, "psi": 90.0, "num_angles": 4}
    params.update(kwargs)
    with pytest.raises(InvalidParameterError):
        FilterBankRequest(**params).validate()
    with pytest.raises(InvalidParameterError):
        OrientationBank().call(np.zeros((4, 4), dtype=np.float32), FilterBankRequest(**params))
