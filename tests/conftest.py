# -- Shared Test Helpers -- #

'''
Fixtures and helpers that run individual pipeline stages.
'''

from __future__ import annotations

import numpy as np
import pytest

from particleFluid.sph.densityPressure import DensityPressureSolver
from particleFluid.sph.forceSolver import ForceSolver
from particleFluid.sph.kernels import MullerKernels
from particleFluid.sph.neighborSearch import NeighborBuffer, NeighborFinder
from particleFluid.sph.particles import ParticleStore
from particleFluid.sph.protocols import FluidConfig
from particleFluid.sph.uniformGrid import UniformGrid


def runForceStages(
    positions: np.ndarray,
    config: FluidConfig,
    velocities: np.ndarray | None = None,
    width: float = 1.0,
    height: float = 1.0,
) -> tuple[ParticleStore, NeighborBuffer]:
    '''
    Run grid, neighbor, density, sqrt and force stages without integrating.

    Returns the particle store (with accelerations still populated)
    and the neighbor buffer.
    '''
    particles = ParticleStore.fromPositions(positions)
    if velocities is not None:
        particles.velocities[:] = velocities

    kernels = MullerKernels(config.smoothingLength)
    grid = UniformGrid(width, height, config.smoothingLength)
    buffer = NeighborBuffer(config.neighborCapacity, config.neighborGrowth)

    grid.build(particles.positions)
    NeighborFinder(config.smoothingLength).find(particles.positions, grid, buffer)
    DensityPressureSolver(
        kernels, config.particleMass, config.restDensity, config.pressureStiffness,
    ).compute(particles, buffer)
    buffer.sqrtDistances()
    ForceSolver(kernels, config.particleMass, config.viscosity).computeForces(particles, buffer)

    return (particles, buffer)


def bruteForcePairs(positions: np.ndarray, radius: float) -> set[tuple[int, int]]:
    '''All unordered pairs (i < j) closer than radius, by exhaustive search.'''
    diff = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]
    distSq = np.sum(diff * diff, axis=2)
    iIdx, jIdx = np.nonzero(np.triu(distSq < radius * radius, k=1))
    return set(zip(iIdx.tolist(), jIdx.tolist()))


@pytest.fixture
def config() -> FluidConfig:
    '''Default fluid configuration.'''
    return FluidConfig()


@pytest.fixture
def rng() -> np.random.Generator:
    '''Seeded random generator.'''
    return np.random.default_rng(12345)
