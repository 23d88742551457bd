# -- SPH Simulation Protocols -- #

'''
Configuration and result dataclasses for the SPH fluid, plus the
profiler protocol the simulation reports its stage timings through.

FluidConfig holds every physical and numerical parameter of the
fluid. All kernel coefficients and grid dimensions are derived
from it, so the same code runs at any resolution.

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from particleFluid import constants as const


######################################################################
# -- Fluid Configuration -- #
######################################################################

@dataclass
class FluidConfig:
    '''
    Configuration for the SPH fluid.

    Parameters:
    -----------
    smoothingLength : float
        Kernel support radius h, also the grid cell size
    particleSpacing : float
        Lattice spacing used when seeding particles
    particleMass : float
        Mass of every particle
    restDensity : float
        Reference density rho_0 at which pressure vanishes
    pressureStiffness : float
        Equation of state stiffness k
    viscosity : float
        Viscosity coefficient mu
    wallStiffness : float
        Penalty stiffness of the domain walls
    gravity : np.ndarray
        Gravity acceleration vector, shape (2,)
    neighborCapacity : int
        Initial neighbor record capacity
    neighborGrowth : int
        Fixed number of records added per buffer growth increment
    neighborBlockSize : int
        Largest tile side of the per-cell-pair distance checks
    '''

    smoothingLength: float = const.smoothingLength
    particleSpacing: float = const.initialSpacing
    particleMass: float = const.particleMass
    restDensity: float = const.restDensity
    pressureStiffness: float = const.pressureStiffness
    viscosity: float = const.viscosity
    wallStiffness: float = const.wallStiffness
    gravity: np.ndarray = field(
        default_factory=lambda: np.array([const.gravityX, const.gravityY])
    )
    neighborCapacity: int = const.neighborCapacity
    neighborGrowth: int = const.neighborGrowth
    neighborBlockSize: int = const.neighborBlockSize

    def __post_init__(self) -> None:
        self.gravity = np.asarray(self.gravity, dtype=np.float64)
        if self.gravity.shape != (2,):
            raise ValueError(f'Gravity must be a 2D vector, got shape {self.gravity.shape}')

        positive = {
            'smoothingLength': self.smoothingLength,
            'particleSpacing': self.particleSpacing,
            'particleMass': self.particleMass,
            'restDensity': self.restDensity,
        }
        for name, value in positive.items():
            if not value > 0.0:
                raise ValueError(f'{name} must be positive, got {value}')

        nonNegative = {
            'pressureStiffness': self.pressureStiffness,
            'viscosity': self.viscosity,
            'wallStiffness': self.wallStiffness,
        }
        for name, value in nonNegative.items():
            if value < 0.0:
                raise ValueError(f'{name} must be non-negative, got {value}')

        if self.neighborCapacity < 0:
            raise ValueError(f'neighborCapacity must be non-negative, got {self.neighborCapacity}')
        if self.neighborGrowth < 1:
            raise ValueError(f'neighborGrowth must be at least 1, got {self.neighborGrowth}')
        if self.neighborBlockSize < 1:
            raise ValueError(f'neighborBlockSize must be at least 1, got {self.neighborBlockSize}')

    @classmethod
    def fromDict(cls, data: dict) -> FluidConfig:
        '''
        Build a configuration from parsed JSON data.

        Reads the 'sph', 'fluid', 'walls' and 'neighbors' sections.
        Missing keys fall back to the defaults in constants.py.

        Parameters:
        -----------
        data : dict
            Parsed configuration document

        Returns:
        --------
        FluidConfig : Loaded configuration
        '''
        sphSection = data.get('sph', {})
        fluidSection = data.get('fluid', {})
        wallSection = data.get('walls', {})
        neighborSection = data.get('neighbors', {})

        gravity = fluidSection.get('gravity', [const.gravityX, const.gravityY])

        return cls(
            smoothingLength=sphSection.get('smoothingLength', const.smoothingLength),
            particleSpacing=sphSection.get('particleSpacing', const.initialSpacing),
            particleMass=sphSection.get('mass', const.particleMass),
            restDensity=fluidSection.get('restDensity', const.restDensity),
            pressureStiffness=fluidSection.get('stiffness', const.pressureStiffness),
            viscosity=fluidSection.get('viscosity', const.viscosity),
            wallStiffness=wallSection.get('staticStiffness', const.wallStiffness),
            gravity=np.array(gravity, dtype=np.float64),
            neighborCapacity=neighborSection.get('initialCapacity', const.neighborCapacity),
            neighborGrowth=neighborSection.get('growthIncrement', const.neighborGrowth),
            neighborBlockSize=neighborSection.get('blockSize', const.neighborBlockSize),
        )

    @classmethod
    def fromJson(cls, configPath: str) -> FluidConfig:
        '''
        Load configuration from a JSON file.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file

        Returns:
        --------
        FluidConfig : Loaded configuration
        '''
        with open(configPath, 'r') as f:
            data = json.load(f)

        return cls.fromDict(data)


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Snapshot of the simulation after a step.

    Parameters:
    -----------
    step : int
        Number of unpaused steps taken since the last clear
    time : float
        Accumulated simulated time (paused steps add nothing)
    nParticles : int
        Current particle count
    nNeighbors : int
        Neighbor pairs found in the last step
    neighborCapacity : int
        Current neighbor buffer capacity
    maxVelocity : float
        Maximum particle speed
    meanDensity : float
        Mean particle density
    maxDensity : float
        Maximum particle density
    kineticEnergy : float
        Total kinetic energy (1/2) sum m |v|^2
    '''

    step: int
    time: float
    nParticles: int
    nNeighbors: int
    neighborCapacity: int
    maxVelocity: float
    meanDensity: float
    maxDensity: float
    kineticEnergy: float

    def densityRatio(self, restDensity: float) -> float:
        '''Mean density relative to the rest density.'''
        return self.meanDensity / restDensity


######################################################################
# -- Profiler Protocol -- #
######################################################################

class Profiler(Protocol):
    '''Protocol for nested named timing blocks.'''

    def begin(self, name: str) -> None:
        '''Open a named block nested in the current one.'''
        ...

    def end(self) -> None:
        '''Close the innermost open block.'''
        ...

    def dump(self) -> str:
        '''Return a report of the finished blocks.'''
        ...
