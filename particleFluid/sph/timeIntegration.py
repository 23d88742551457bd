# -- Time Integration and Walls -- #

'''
Step control, penalty walls, gravity and symplectic Euler integration.

Walls are four half-planes n . x + d >= 0 bounding the world
rectangle. A particle with negative signed distance has penetrated
and receives a spring acceleration -k * dist * n along the inward
normal, proportional to the penetration depth.

Integration is semi-implicit (symplectic) Euler:

    v(t+dt) = v(t) + a(t) * dt      (kick)
    x(t+dt) = x(t) + v(t+dt) * dt   (drift)

after which the scratch accelerations are reset to zero.

References:
-----------
Hairer et al. (2003) -- Geometric Numerical Integration

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from particleFluid.sph.particles import ParticleStore


######################################################################
# -- Step Control -- #
######################################################################

class StepController:
    '''
    Pause state machine deciding the effective time step.

    The simulation freezes while paused, or once the step counter
    reaches the pause-at-step target. Frozen steps still run the
    whole pipeline with dt = 0 and do not advance the counter.
    '''

    def __init__(self) -> None:
        self.step: int = 0
        self.paused: bool = False
        self.pauseStep: int | None = None

    @property
    def frozen(self) -> bool:
        '''True when the next step will run with dt = 0.'''
        return self.paused or (self.pauseStep is not None and self.step == self.pauseStep)

    def advance(self, dt: float) -> float:
        '''
        Register a step request and return the dt physics should use.

        Parameters:
        -----------
        dt : float
            Externally supplied time step

        Returns:
        --------
        float : 0 while frozen, otherwise dt
        '''
        if self.frozen:
            return 0.0
        self.step += 1
        return dt

    def reset(self) -> None:
        '''Zero the step counter; pause settings are kept.'''
        self.step = 0


######################################################################
# -- Walls -- #
######################################################################

@dataclass(frozen=True)
class WallPlane:
    '''
    Half-plane n . x + offset >= 0 with inward unit normal n.

    Parameters:
    -----------
    normal : tuple[float, float]
        Inward unit normal
    offset : float
        Plane offset d
    '''

    normal: tuple[float, float]
    offset: float

    def signedDistance(self, positions: np.ndarray) -> np.ndarray:
        '''Signed distance of each position, negative when outside.'''
        return positions[:, 0] * self.normal[0] + positions[:, 1] * self.normal[1] + self.offset


def domainWalls(width: float, height: float) -> tuple[WallPlane, ...]:
    '''
    The four walls of the world rectangle [0, width] x [0, height].

    Returns:
    --------
    tuple[WallPlane, ...] : Left, bottom (y = 0), right, top (y = height)
    '''
    return (
        WallPlane(normal=(1.0, 0.0), offset=0.0),
        WallPlane(normal=(0.0, 1.0), offset=0.0),
        WallPlane(normal=(-1.0, 0.0), offset=width),
        WallPlane(normal=(0.0, -1.0), offset=height),
    )


######################################################################
# -- Integrator -- #
######################################################################

class Integrator:
    '''
    Applies walls and gravity, then advances particles one step.

    Parameters:
    -----------
    width : float
        World width
    height : float
        World height
    wallStiffness : float
        Penalty stiffness k
    gravity : np.ndarray
        Gravity acceleration, shape (2,)
    '''

    def __init__(
        self,
        width: float,
        height: float,
        wallStiffness: float,
        gravity: np.ndarray,
    ) -> None:
        self._walls = domainWalls(width, height)
        self._wallStiffness = wallStiffness
        self._gravity = np.asarray(gravity, dtype=np.float64)

    @property
    def walls(self) -> tuple[WallPlane, ...]:
        '''The domain walls.'''
        return self._walls

    def wallAccelerations(self, positions: np.ndarray) -> np.ndarray:
        '''
        Penalty accelerations pushing penetrated particles back inside.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)

        Returns:
        --------
        np.ndarray : Accelerations, shape (N, 2); zero for particles
            satisfying every wall inequality
        '''
        accel = np.zeros_like(positions)
        for wall in self._walls:
            penetration = np.minimum(wall.signedDistance(positions), 0.0)
            accel += (-self._wallStiffness * penetration)[:, np.newaxis] * np.array(wall.normal)
        return accel

    def integrate(self, particles: ParticleStore, dt: float) -> None:
        '''
        Walls, gravity, kick, drift, then clear accelerations.

        Parameters:
        -----------
        particles : ParticleStore
            Particle state to advance
        dt : float
            Time step (0 freezes positions and velocities)
        '''
        particles.accelerations += self.wallAccelerations(particles.positions)
        particles.accelerations += self._gravity

        # Kick: update velocities from accelerations
        particles.velocities += dt * particles.accelerations

        # Drift: update positions from (new) velocities
        particles.positions += dt * particles.velocities

        particles.accelerations[:] = 0.0
