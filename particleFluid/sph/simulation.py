# -- SPH Fluid Simulation -- #

'''
Orchestrator for the 2D SPH fluid.

Owns the particle store, the uniform grid and the neighbor buffer,
and runs the fixed pipeline once per update:

    1. Bucket particles into the uniform grid
    2. Find neighbor pairs (squared distances)
    3. Density summation and pressure (equation of state)
    4. Square-root the neighbor distances
    5. Pressure and viscosity forces
    6. Walls, gravity and symplectic Euler integration

The driver supplies dt each frame. While paused, or once the
pause-at-step target is reached, the pipeline still runs with
dt = 0, so particle state stays frozen while the scratch
structures are rebuilt.

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import numpy as np

from particleFluid.profiling import NullProfiler
from particleFluid.sph.densityPressure import DensityPressureSolver
from particleFluid.sph.forceSolver import ForceSolver
from particleFluid.sph.kernels import MullerKernels
from particleFluid.sph.neighborSearch import NeighborBuffer, NeighborFinder
from particleFluid.sph.particles import ParticleStore, ParticleView
from particleFluid.sph.protocols import FluidConfig, Profiler, SimulationState
from particleFluid.sph.timeIntegration import Integrator, StepController
from particleFluid.sph.uniformGrid import UniformGrid


class FluidSimulation:
    '''
    Single-threaded, fixed-pipeline SPH fluid in a rectangular world.

    Parameters:
    -----------
    config : FluidConfig | None
        Fluid parameters (defaults to FluidConfig())
    profiler : Profiler | None
        Receives one block per pipeline stage (defaults to NullProfiler)
    '''

    def __init__(
        self,
        config: FluidConfig | None = None,
        profiler: Profiler | None = None,
    ) -> None:
        self._config = config or FluidConfig()
        self._profiler = profiler or NullProfiler()

        cfg = self._config
        self._kernels = MullerKernels(cfg.smoothingLength)
        self._neighborFinder = NeighborFinder(cfg.smoothingLength, cfg.neighborBlockSize)
        self._neighbors = NeighborBuffer(cfg.neighborCapacity, cfg.neighborGrowth)
        self._densitySolver = DensityPressureSolver(
            self._kernels,
            particleMass=cfg.particleMass,
            restDensity=cfg.restDensity,
            stiffness=cfg.pressureStiffness,
        )
        self._forceSolver = ForceSolver(
            self._kernels,
            particleMass=cfg.particleMass,
            viscosity=cfg.viscosity,
        )

        self._controller = StepController()
        self._particles = ParticleStore.empty()
        self._grid: UniformGrid | None = None
        self._integrator: Integrator | None = None
        self._width: float = 0.0
        self._height: float = 0.0
        self._time: float = 0.0

    ######################################################################
    # -- Setup -- #
    ######################################################################

    def create(self, width: float, height: float) -> None:
        '''
        Configure the world bounds and allocate the grid buckets.

        The grid has floor(width / h) x floor(height / h) cells.

        Parameters:
        -----------
        width : float
            World width
        height : float
            World height

        Raises:
        -------
        ValueError : If the world is not at least one cell in each direction
        '''
        self._grid = UniformGrid(width, height, self._config.smoothingLength)
        self._grid.allocate(self._particles.nParticles)
        self._integrator = Integrator(
            width,
            height,
            wallStiffness=self._config.wallStiffness,
            gravity=self._config.gravity,
        )
        self._width = width
        self._height = height

    def fill(self, regionSize: float) -> None:
        '''
        Replace all particles with a square lattice in the lower-left corner.

        Seeds floor(regionSize / spacing)^2 particles at rest, rows
        filled from the bottom wall upward.

        Parameters:
        -----------
        regionSize : float
            Side length of the filled square

        Raises:
        -------
        RuntimeError : If called before create
        ValueError : If regionSize is negative
        '''
        self._requireWorld('fill')
        if regionSize < 0.0:
            raise ValueError(f'Fill size must be non-negative, got {regionSize}')

        self.clear()
        self._particles = ParticleStore.createLattice(
            regionSize,
            self._config.particleSpacing,
            self._height,
        )
        self._grid.allocate(self._particles.nParticles)

    def setParticles(self, positions: np.ndarray, velocities: np.ndarray | None = None) -> None:
        '''
        Replace all particles with explicitly placed ones.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        velocities : np.ndarray | None
            Initial velocities, shape (N, 2) (defaults to rest)
        '''
        self.clear()
        particles = ParticleStore.fromPositions(positions)
        if velocities is not None:
            particles.velocities[:] = velocities
        self._particles = particles
        if self._grid is not None:
            self._grid.allocate(particles.nParticles)

    def clear(self) -> None:
        '''Remove all particles and release the grid index storage.'''
        self._controller.reset()
        self._time = 0.0
        self._particles = ParticleStore.empty()
        self._neighbors.reset()
        if self._grid is not None:
            self._grid.release()

    ######################################################################
    # -- Main Update -- #
    ######################################################################

    def update(self, dt: float) -> SimulationState:
        '''
        Advance the simulation by one step.

        Parameters:
        -----------
        dt : float
            Time step; 0 is a valid freeze frame

        Returns:
        --------
        SimulationState : State after the step

        Raises:
        -------
        RuntimeError : If called before create
        ValueError : If dt is negative
        '''
        self._requireWorld('update')
        if dt < 0.0:
            raise ValueError(f'Time step must be non-negative, got {dt}')

        dt = self._controller.advance(dt)
        p = self._particles

        with self._stage('update'):
            with self._stage('updateGrid'):
                self._grid.build(p.positions)

            with self._stage('getNeighbors'):
                self._neighborFinder.find(p.positions, self._grid, self._neighbors)

            with self._stage('computeDensity'):
                self._densitySolver.compute(p, self._neighbors)

            with self._stage('sqrtDist'):
                self._neighbors.sqrtDistances()

            with self._stage('computeForce'):
                self._forceSolver.computeForces(p, self._neighbors)

            with self._stage('integrate'):
                self._integrator.integrate(p, dt)

        self._time += dt
        return self.currentState

    @contextmanager
    def _stage(self, name: str) -> Iterator[None]:
        '''Wrap a pipeline stage in a profiler block.'''
        self._profiler.begin(name)
        try:
            yield
        finally:
            self._profiler.end()

    def _requireWorld(self, operation: str) -> None:
        if self._grid is None:
            raise RuntimeError(f'create() must be called before {operation}()')

    ######################################################################
    # -- Pause Control -- #
    ######################################################################

    def pause(self, paused: bool) -> None:
        '''Freeze (True) or resume (False) the simulation.'''
        self._controller.paused = paused

    def pauseOnStep(self, step: int | None) -> None:
        '''Freeze once the step counter reaches `step` (None disables).'''
        self._controller.pauseStep = step

    @property
    def paused(self) -> bool:
        '''True if the next update will run with dt = 0.'''
        return self._controller.frozen

    ######################################################################
    # -- Accessors -- #
    ######################################################################

    def size(self) -> int:
        '''Number of particles.'''
        return self._particles.nParticles

    def particleAt(self, index: int) -> ParticleView:
        '''
        Snapshot of a particle.

        Raises:
        -------
        IndexError : If index is outside [0, size())
        '''
        return self._particles.view(index)

    @property
    def nParticles(self) -> int:
        '''Number of particles.'''
        return self._particles.nParticles

    @property
    def step(self) -> int:
        '''Number of unpaused steps since the last clear.'''
        return self._controller.step

    @property
    def time(self) -> float:
        '''Simulated time since the last clear.'''
        return self._time

    @property
    def width(self) -> float:
        '''World width (0 before create).'''
        return self._width

    @property
    def height(self) -> float:
        '''World height (0 before create).'''
        return self._height

    @property
    def config(self) -> FluidConfig:
        '''Fluid parameters.'''
        return self._config

    @property
    def kernels(self) -> MullerKernels:
        '''Precomputed kernel coefficients.'''
        return self._kernels

    @property
    def particles(self) -> ParticleStore:
        '''Live particle state (do not mutate during update).'''
        return self._particles

    @property
    def grid(self) -> UniformGrid | None:
        '''Uniform grid, None before create.'''
        return self._grid

    @property
    def neighbors(self) -> NeighborBuffer:
        '''Neighbor records of the last step.'''
        return self._neighbors

    @property
    def currentState(self) -> SimulationState:
        '''Current simulation state snapshot.'''
        p = self._particles
        hasParticles = p.nParticles > 0

        return SimulationState(
            step=self.step,
            time=self._time,
            nParticles=p.nParticles,
            nNeighbors=len(self._neighbors),
            neighborCapacity=self._neighbors.capacity,
            maxVelocity=p.maxSpeed(),
            meanDensity=float(np.mean(p.densities)) if hasParticles else 0.0,
            maxDensity=float(np.max(p.densities)) if hasParticles else 0.0,
            kineticEnergy=p.kineticEnergy(self._config.particleMass),
        )
