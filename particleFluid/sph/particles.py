# -- SPH Particle Store -- #

'''
Dataclass holding the mutable particle state of the fluid.

Positions, velocities, accelerations, densities and pressures are
stored as contiguous NumPy arrays. A particle is referred to by its
integer row index, which stays valid for the duration of a step but
not across fill or clear.

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ParticleView:
    '''Read-only snapshot of a single particle.'''

    position: np.ndarray
    velocity: np.ndarray
    acceleration: np.ndarray
    density: float
    pressure: float


@dataclass
class ParticleStore:
    '''
    SPH particle state.

    Vector quantities have shape (nParticles, 2) and scalar
    quantities shape (nParticles,). All particles share one mass,
    held by the simulation configuration.

    Parameters:
    -----------
    positions : np.ndarray
        Particle positions, shape (N, 2)
    velocities : np.ndarray
        Particle velocities, shape (N, 2)
    accelerations : np.ndarray
        Scratch accelerations, reset after every integration, shape (N, 2)
    densities : np.ndarray
        Particle densities, shape (N,)
    pressures : np.ndarray
        Particle pressures, shape (N,)
    '''

    positions: np.ndarray
    velocities: np.ndarray
    accelerations: np.ndarray
    densities: np.ndarray
    pressures: np.ndarray

    @property
    def nParticles(self) -> int:
        '''Number of particles.'''
        return self.positions.shape[0]

    def __len__(self) -> int:
        return self.nParticles

    def view(self, index: int) -> ParticleView:
        '''
        Snapshot of the particle at the given index.

        Parameters:
        -----------
        index : int
            Particle index in [0, nParticles)

        Returns:
        --------
        ParticleView : Copy of the particle's state

        Raises:
        -------
        IndexError : If the index is out of range
        '''
        if index < 0 or index >= self.nParticles:
            raise IndexError(
                f'Particle index {index} out of range for {self.nParticles} particles'
            )

        return ParticleView(
            position=self.positions[index].copy(),
            velocity=self.velocities[index].copy(),
            acceleration=self.accelerations[index].copy(),
            density=float(self.densities[index]),
            pressure=float(self.pressures[index]),
        )

    def kineticEnergy(self, mass: float) -> float:
        '''
        Total kinetic energy KE = (1/2) * m * sum_i |v_i|^2.

        Parameters:
        -----------
        mass : float
            Particle mass

        Returns:
        --------
        float : Kinetic energy
        '''
        speedsSq = np.sum(self.velocities * self.velocities, axis=1)
        return float(0.5 * mass * np.sum(speedsSq))

    def maxSpeed(self) -> float:
        '''Maximum velocity magnitude, 0 for an empty store.'''
        if self.nParticles == 0:
            return 0.0
        return float(np.max(np.linalg.norm(self.velocities, axis=1)))

    @classmethod
    def empty(cls) -> ParticleStore:
        '''Create a store holding no particles.'''
        return cls.fromPositions(np.zeros((0, 2)))

    @classmethod
    def fromPositions(cls, positions: np.ndarray) -> ParticleStore:
        '''
        Create particles at rest at the given positions.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)

        Returns:
        --------
        ParticleStore : Store with zero velocity, acceleration,
            density and pressure
        '''
        positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        nParticles = positions.shape[0]

        return cls(
            positions=positions,
            velocities=np.zeros((nParticles, 2)),
            accelerations=np.zeros((nParticles, 2)),
            densities=np.zeros(nParticles),
            pressures=np.zeros(nParticles),
        )

    @classmethod
    def createLattice(
        cls,
        regionSize: float,
        spacing: float,
        worldHeight: float,
    ) -> ParticleStore:
        '''
        Seed a square lattice in the lower-left corner of the world.

        The world uses y-down coordinates, so the bottom row sits at
        y = worldHeight and rows are filled bottom to top. Particle
        (x, y) of the lattice has index y * w + x where
        w = floor(regionSize / spacing).

        Parameters:
        -----------
        regionSize : float
            Side length of the square region to fill
        spacing : float
            Lattice spacing
        worldHeight : float
            Height of the world (y of the bottom wall)

        Returns:
        --------
        ParticleStore : w * w particles at rest
        '''
        w = int(regionSize / spacing)
        if w <= 0:
            return cls.empty()

        lattice = np.arange(w) * spacing
        # indexing='xy' gives rows of constant y, matching index y * w + x
        xx, yy = np.meshgrid(lattice, lattice, indexing='xy')
        positions = np.column_stack([xx.ravel(), worldHeight - yy.ravel()])

        return cls.fromPositions(positions)
