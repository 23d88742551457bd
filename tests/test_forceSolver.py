# -- Force Solver Tests -- #

'''
Pressure and viscosity pair forces: symmetry and direction.
'''

import numpy as np
import pytest

from particleFluid.sph.forceSolver import ForceSolver
from particleFluid.sph.kernels import MullerKernels
from particleFluid.sph.neighborSearch import NeighborBuffer
from particleFluid.sph.particles import ParticleStore
from particleFluid.sph.protocols import FluidConfig

from conftest import runForceStages


PAIR = np.array([[0.5, 0.5], [0.506, 0.5]])


class TestForceSolver:
    '''Tests for pairwise force accumulation.'''

    def test_pair_accelerations_equal_and_opposite(self):
        '''An isolated compressed pair repels along the line joining it.'''
        # Low rest density so the pair is compressed and pressure is positive
        config = FluidConfig(restDensity=100.0)
        particles, buffer = runForceStages(PAIR, config)

        assert len(buffer) == 1
        assert np.all(particles.pressures > 0.0)

        accel = particles.accelerations
        assert np.all(np.isfinite(accel))
        np.testing.assert_array_equal(accel[0], -accel[1])
        assert accel[0, 0] < 0.0
        assert accel[1, 0] > 0.0
        assert accel[0, 1] == 0.0

    def test_default_pair_below_rest_density_has_no_pressure_force(self, config):
        '''Below rest density and at rest, the pair exerts no force.'''
        particles, _ = runForceStages(PAIR, config)

        assert np.all(particles.pressures == 0.0)
        np.testing.assert_array_equal(particles.accelerations, 0.0)

    def test_viscosity_damps_relative_velocity(self, config):
        '''Viscosity pulls each particle's velocity toward its neighbor's.'''
        velocities = np.array([[0.0, 1.0], [0.0, -1.0]])
        particles, _ = runForceStages(PAIR, config, velocities=velocities)

        accel = particles.accelerations
        np.testing.assert_allclose(accel[0], -accel[1])
        assert accel[0, 1] < 0.0
        assert accel[1, 1] > 0.0

    def test_momentum_conserved_for_cluster(self, rng):
        '''Sum of m * a over all particles vanishes.'''
        config = FluidConfig(restDensity=100.0)
        positions = rng.uniform(0.45, 0.55, size=(200, 2))
        velocities = rng.normal(0.0, 0.1, size=(200, 2))
        particles, buffer = runForceStages(positions, config, velocities=velocities)

        assert len(buffer) > 0
        total = np.sum(particles.accelerations, axis=0)
        scale = np.max(np.abs(particles.accelerations))
        assert np.all(np.abs(total) <= 1e-9 * scale)

    def test_coincident_particles_stay_finite(self, config):
        '''Zero-distance pairs contribute no pressure direction.'''
        particles, _ = runForceStages(np.array([[0.5, 0.5], [0.5, 0.5]]), config)
        assert np.all(np.isfinite(particles.accelerations))

    def test_requires_linear_distances(self):
        '''Forces on squared distances are an error.'''
        kernels = MullerKernels(0.012)
        solver = ForceSolver(kernels, 0.0002, 0.1)
        particles = ParticleStore.fromPositions(PAIR)
        buffer = NeighborBuffer(capacity=1, growth=1)
        buffer.append(np.array([0]), np.array([1]), np.array([0.006 ** 2]))

        with pytest.raises(RuntimeError):
            solver.computeForces(particles, buffer)
