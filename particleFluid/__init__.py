# -- particleFluid Package -- #

'''
2D fluid simulation using Smoothed Particle Hydrodynamics (SPH).

A single-threaded, fixed-pipeline particle fluid: uniform-grid
bucketing, neighbor pair search, Poly6 density, Spiky/viscosity
forces, penalty walls and symplectic Euler integration.

particleFluid developers [10/19/2026]
'''

__version__ = '0.1.0'

from particleFluid.sph.simulation import FluidSimulation
from particleFluid.sph.protocols import FluidConfig, SimulationState
from particleFluid.profiling import BlockProfiler, NullProfiler
