# -- Density and Pressure Tests -- #

'''
Poly6 density summation and the clamped cubic equation of state.
'''

import math

import numpy as np
import pytest

from particleFluid.sph.densityPressure import DensityPressureSolver
from particleFluid.sph.kernels import MullerKernels
from particleFluid.sph.neighborSearch import NeighborBuffer
from particleFluid.sph.particles import ParticleStore


H = 0.012
MASS = 0.0002


class TestMullerKernels:
    '''Tests for the precomputed kernel coefficients.'''

    def setup_method(self):
        self.kernels = MullerKernels(H)

    def test_coefficients_from_smoothing_length(self):
        '''Coefficients follow the closed forms in h.'''
        assert math.isclose(self.kernels.poly6Coefficient, 315.0 / (64.0 * math.pi * H ** 9))
        assert math.isclose(self.kernels.gradSpikyCoefficient, -45.0 / (math.pi * H ** 6))
        assert math.isclose(self.kernels.lapViscosityCoefficient, 45.0 / (math.pi * H ** 6))

    def test_coefficients_scale_with_resolution(self):
        '''Halving h scales Poly6 by 2^9 and the force kernels by 2^6.'''
        half = MullerKernels(H / 2.0)
        assert math.isclose(half.poly6Coefficient / self.kernels.poly6Coefficient, 2.0 ** 9)
        assert math.isclose(half.lapViscosityCoefficient / self.kernels.lapViscosityCoefficient, 2.0 ** 6)

    def test_poly6_compact_support(self):
        '''Poly6 is positive inside h and zero outside.'''
        values = self.kernels.poly6Batch(np.array([0.0, (0.5 * H) ** 2, H * H, (2.0 * H) ** 2]))
        assert values[0] == self.kernels.poly6SelfTerm()
        assert values[1] > 0.0
        assert values[2] == 0.0
        assert values[3] == 0.0
        assert self.kernels.poly6(2.0 * H) == 0.0
        assert self.kernels.gradSpikyMagnitude(0.5 * H) < 0.0
        assert self.kernels.lapViscosity(H) == 0.0


class TestDensityPressureSolver:
    '''Tests for density accumulation and pressure.'''

    def setup_method(self):
        self.kernels = MullerKernels(H)
        self.solver = DensityPressureSolver(self.kernels, MASS, restDensity=1000.0, stiffness=200.0)

    def pairState(self, r):
        '''Two particles at distance r with one neighbor record.'''
        particles = ParticleStore.fromPositions(np.array([[0.5, 0.5], [0.5 + r, 0.5]]))
        buffer = NeighborBuffer(capacity=4, growth=4)
        buffer.append(np.array([0]), np.array([1]), np.array([r * r]))
        return (particles, buffer)

    def test_isolated_particle_has_self_density(self):
        '''With no neighbors, density is C_poly6 * m * h^6.'''
        particles = ParticleStore.fromPositions(np.array([[0.5, 0.5]]))
        buffer = NeighborBuffer(capacity=4, growth=4)
        self.solver.computeDensity(particles, buffer)

        expected = self.kernels.poly6Coefficient * MASS * H ** 6
        assert math.isclose(particles.densities[0], expected)
        assert math.isclose(self.solver.selfDensity, expected)

    def test_pair_density_is_symmetric(self):
        '''Both particles of a pair gain the identical contribution.'''
        r = 0.006
        particles, buffer = self.pairState(r)
        self.solver.computeDensity(particles, buffer)

        contribution = self.kernels.poly6Coefficient * MASS * (H * H - r * r) ** 3
        assert particles.densities[0] == particles.densities[1]
        assert math.isclose(particles.densities[0], self.solver.selfDensity + contribution)

    def test_density_requires_squared_distances(self):
        '''Running density on linear distances is an error.'''
        particles, buffer = self.pairState(0.006)
        buffer.sqrtDistances()
        with pytest.raises(RuntimeError):
            self.solver.computeDensity(particles, buffer)

    def test_pressure_clamped_below_rest_density(self):
        '''Particles at or below rest density have zero pressure.'''
        particles = ParticleStore.fromPositions(np.zeros((3, 2)))
        particles.densities[:] = [500.0, 1000.0, 2000.0]
        self.solver.computePressure(particles)

        assert particles.pressures[0] == 0.0
        assert particles.pressures[1] == 0.0
        assert math.isclose(particles.pressures[2], 200.0 * (2.0 ** 3 - 1.0))
