# -- Pressure and Viscosity Forces -- #

'''
Pairwise pressure and viscosity accelerations.

For each neighbor pair (p, n) at distance r with rVec = x_n - x_p:

    F_pressure  = 0.5 * (P_p + P_n) * C_spiky * (h - r) / r * rVec
    F_viscosity = mu * C_visc * (v_n - v_p)
    F           = (F_pressure + F_viscosity) * (h - r) / (rho_p * rho_n)

with C_spiky = -45 / (pi h^6) and C_visc = 45 / (pi h^6). The pair
contribution m * F is added to particle p and subtracted from
particle n, so momentum is conserved pair by pair and no separate
force array is needed.

Forces need linear distances, while density summation needs squared
ones; the records are converted in place between the two stages.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

import numpy as np

from particleFluid.sph.kernels import MullerKernels
from particleFluid.sph.neighborSearch import NeighborBuffer
from particleFluid.sph.particles import ParticleStore


# Coincident particles have no defined pressure direction
_minDistance: float = 1e-12


class ForceSolver:
    '''
    Accumulates pressure-gradient and viscosity accelerations.

    Parameters:
    -----------
    kernels : MullerKernels
        Precomputed kernel coefficients
    particleMass : float
        Mass of every particle
    viscosity : float
        Viscosity coefficient mu
    '''

    def __init__(
        self,
        kernels: MullerKernels,
        particleMass: float,
        viscosity: float,
    ) -> None:
        self._kernels = kernels
        self._mass = particleMass
        self._viscosity = viscosity

    def pairForces(
        self,
        particles: ParticleStore,
        neighbors: NeighborBuffer,
    ) -> np.ndarray:
        '''
        Force per neighbor record, acting on the record's first particle.

        Parameters:
        -----------
        particles : ParticleStore
            Particle state with densities and pressures
        neighbors : NeighborBuffer
            Records holding linear distances

        Returns:
        --------
        np.ndarray : Pair forces, shape (nRecords, 2)
        '''
        if not neighbors.distanceIsLinear:
            raise RuntimeError('Forces need linear distances; call sqrtDistances first')

        iIdx, jIdx, dist = neighbors.records()
        if len(iIdx) == 0:
            return np.zeros((0, 2))

        h = self._kernels.smoothingLength
        hMinusR = h - dist
        diff = particles.positions[jIdx] - particles.positions[iIdx]

        # --- Pressure: Spiky gradient, average pressure --- #
        pressureAvg = 0.5 * (particles.pressures[iIdx] + particles.pressures[jIdx])
        safeDist = np.where(dist > _minDistance, dist, 1.0)
        pressureScale = pressureAvg * self._kernels.gradSpikyCoefficient * hMinusR / safeDist
        pressureScale[dist <= _minDistance] = 0.0
        force = pressureScale[:, np.newaxis] * diff

        # --- Viscosity: Laplacian kernel, relative velocity --- #
        viscosityScale = self._viscosity * self._kernels.lapViscosityCoefficient
        force += viscosityScale * (particles.velocities[jIdx] - particles.velocities[iIdx])

        # Common (h - r) / (rho_p * rho_n) factor
        densityProduct = particles.densities[iIdx] * particles.densities[jIdx]
        force *= (hMinusR / densityProduct)[:, np.newaxis]

        return force

    def computeForces(self, particles: ParticleStore, neighbors: NeighborBuffer) -> None:
        '''
        Add equal and opposite pair accelerations to both particles.

        Parameters:
        -----------
        particles : ParticleStore
            Particle state; accelerations are accumulated into
        neighbors : NeighborBuffer
            Records holding linear distances
        '''
        force = self.pairForces(particles, neighbors)
        if len(force) == 0:
            return

        iIdx, jIdx, _ = neighbors.records()
        contribution = self._mass * force
        np.add.at(particles.accelerations, iIdx, contribution)
        np.add.at(particles.accelerations, jIdx, -contribution)
