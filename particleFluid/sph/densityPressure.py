# -- Density and Pressure -- #

'''
SPH density summation and the pressure equation of state.

Density by Poly6 summation over neighbor pairs:

    rho_i = C_poly6 * (m * h^6 + sum_j m * (h^2 - r_ij^2)^3)

The self term m * h^6 is the kernel at r = 0. Each unordered pair
adds the same contribution to both of its particles, and the
normalization C_poly6 is applied once after accumulation.

Pressure from a stiff cubic equation of state:

    p_i = k * max((rho_i / rho_0)^3 - 1, 0)

Clamping to zero removes attraction between particles below rest
density (tensile instability).

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

import numpy as np

from particleFluid.sph.kernels import MullerKernels
from particleFluid.sph.neighborSearch import NeighborBuffer
from particleFluid.sph.particles import ParticleStore


class DensityPressureSolver:
    '''
    Accumulates density from neighbor records and derives pressure.

    Parameters:
    -----------
    kernels : MullerKernels
        Precomputed kernel coefficients
    particleMass : float
        Mass of every particle
    restDensity : float
        Rest density rho_0
    stiffness : float
        Equation of state stiffness k
    '''

    def __init__(
        self,
        kernels: MullerKernels,
        particleMass: float,
        restDensity: float,
        stiffness: float,
    ) -> None:
        self._kernels = kernels
        self._mass = particleMass
        self._restDensity = restDensity
        self._stiffness = stiffness

    @property
    def selfDensity(self) -> float:
        '''Density of an isolated particle, C_poly6 * m * h^6.'''
        return self._kernels.poly6Coefficient * self._mass * self._kernels.poly6SelfTerm()

    def computeDensity(self, particles: ParticleStore, neighbors: NeighborBuffer) -> None:
        '''
        Compute every particle's density from the squared-distance records.

        Parameters:
        -----------
        particles : ParticleStore
            Particle state; densities are overwritten
        neighbors : NeighborBuffer
            Records still holding squared distances
        '''
        if neighbors.distanceIsLinear:
            raise RuntimeError('Density needs squared distances; records were already square-rooted')

        densities = particles.densities
        densities[:] = self._mass * self._kernels.poly6SelfTerm()

        iIdx, jIdx, distSq = neighbors.records()
        if len(iIdx) > 0:
            contribution = self._mass * self._kernels.poly6Batch(distSq)

            # Symmetric scatter-add: both particles gain the same amount
            np.add.at(densities, iIdx, contribution)
            np.add.at(densities, jIdx, contribution)

        densities *= self._kernels.poly6Coefficient

    def computePressure(self, particles: ParticleStore) -> None:
        '''
        Derive pressure from density with the clamped cubic EOS.

        Parameters:
        -----------
        particles : ParticleStore
            Particle state with up-to-date densities
        '''
        densityRatio = particles.densities / self._restDensity
        particles.pressures[:] = self._stiffness * np.maximum(densityRatio ** 3 - 1.0, 0.0)

    def compute(self, particles: ParticleStore, neighbors: NeighborBuffer) -> None:
        '''Density followed by pressure.'''
        self.computeDensity(particles, neighbors)
        self.computePressure(particles)
