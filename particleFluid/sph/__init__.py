# -- SPH Engine Package -- #

'''
Core Smoothed Particle Hydrodynamics (SPH) engine.

Provides the particle store, uniform grid, neighbor search,
density/pressure and force solvers, the integrator, and the
simulation orchestrator.

particleFluid developers [10/19/2026]
'''

from particleFluid.sph.protocols import FluidConfig, SimulationState, Profiler
from particleFluid.sph.kernels import MullerKernels
from particleFluid.sph.particles import ParticleStore, ParticleView
from particleFluid.sph.uniformGrid import UniformGrid
from particleFluid.sph.neighborSearch import NeighborBuffer, NeighborFinder
from particleFluid.sph.densityPressure import DensityPressureSolver
from particleFluid.sph.forceSolver import ForceSolver
from particleFluid.sph.timeIntegration import Integrator, StepController, WallPlane
from particleFluid.sph.simulation import FluidSimulation
