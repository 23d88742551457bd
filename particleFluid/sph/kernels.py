# -- SPH Smoothing Kernels -- #

'''
Smoothing kernels of Muller et al. for density, pressure and viscosity.

Three radially symmetric kernels with compact support at r = h:

    Poly6 (density):
        W(r, h) = 315 / (64 * pi * h^9) * (h^2 - r^2)^3

    Spiky gradient (pressure force):
        grad_W(r, h) = -45 / (pi * h^6) * (h - r)^2 * rVec / r

    Viscosity Laplacian (viscosity force):
        lap_W(r, h) = 45 / (pi * h^6) * (h - r)

The normalization coefficients depend only on h and are computed
once. The batch helpers return the un-normalized polynomial parts
so the solvers can fold the coefficient in after accumulation.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications
Desbrun & Gascuel (1996) -- Smoothed Particles: A new paradigm for
    animating highly deformable bodies

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

import math

import numpy as np


class MullerKernels:
    '''
    Precomputed Poly6, Spiky-gradient and Viscosity-Laplacian kernels.

    Parameters:
    -----------
    smoothingLength : float
        Kernel support radius h
    '''

    def __init__(self, smoothingLength: float) -> None:
        if not smoothingLength > 0.0:
            raise ValueError(f'Smoothing length must be positive, got {smoothingLength}')

        h = smoothingLength
        self._h = h
        self._hSq = h * h

        self._poly6Coef = 315.0 / (64.0 * math.pi * h ** 9)
        self._gradSpikyCoef = -45.0 / (math.pi * h ** 6)
        self._lapViscosityCoef = 45.0 / (math.pi * h ** 6)

    @property
    def smoothingLength(self) -> float:
        '''Kernel support radius h.'''
        return self._h

    @property
    def radiusSquared(self) -> float:
        '''Squared support radius h^2.'''
        return self._hSq

    @property
    def poly6Coefficient(self) -> float:
        '''Poly6 normalization 315 / (64 pi h^9).'''
        return self._poly6Coef

    @property
    def gradSpikyCoefficient(self) -> float:
        '''Spiky gradient normalization -45 / (pi h^6).'''
        return self._gradSpikyCoef

    @property
    def lapViscosityCoefficient(self) -> float:
        '''Viscosity Laplacian normalization 45 / (pi h^6).'''
        return self._lapViscosityCoef

    ######################################################################
    # -- Poly6 -- #
    ######################################################################

    def poly6SelfTerm(self) -> float:
        '''
        Un-normalized Poly6 kernel at r = 0, i.e. h^6.

        Returns:
        --------
        float : (h^2 - 0)^3
        '''
        return self._hSq * self._hSq * self._hSq

    def poly6Batch(self, distancesSq: np.ndarray) -> np.ndarray:
        '''
        Un-normalized Poly6 kernel (h^2 - r^2)^3 for squared distances.

        Values beyond the support radius are zero.

        Parameters:
        -----------
        distancesSq : np.ndarray
            Squared distances r^2, shape (N,)

        Returns:
        --------
        np.ndarray : Kernel values, shape (N,)
        '''
        hSqMinusRSq = np.maximum(self._hSq - distancesSq, 0.0)
        return hSqMinusRSq * hSqMinusRSq * hSqMinusRSq

    def poly6(self, r: float) -> float:
        '''Normalized Poly6 kernel W(r, h) for a single distance.'''
        if r >= self._h:
            return 0.0
        hSqMinusRSq = self._hSq - r * r
        return self._poly6Coef * hSqMinusRSq ** 3

    ######################################################################
    # -- Spiky Gradient and Viscosity Laplacian -- #
    ######################################################################

    def gradSpikyMagnitude(self, r: float) -> float:
        '''dW/dr of the Spiky kernel: -45 / (pi h^6) * (h - r)^2.'''
        if r >= self._h:
            return 0.0
        hMinusR = self._h - r
        return self._gradSpikyCoef * hMinusR * hMinusR

    def lapViscosity(self, r: float) -> float:
        '''Laplacian of the viscosity kernel: 45 / (pi h^6) * (h - r).'''
        if r >= self._h:
            return 0.0
        return self._lapViscosityCoef * (self._h - r)
