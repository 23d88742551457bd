# -- Fluid Simulation Runner -- #

'''
Command-line entry point for running the SPH fluid headless.

Creates the world, fills the lower-left corner with particles,
advances a fixed number of frames and reports progress. Rendering
is left to whatever driver embeds FluidSimulation.

Usage:
    python -m particleFluid                          # Default 1.6 x 1.2 world, 0.5 fill
    python -m particleFluid --steps 200 --profile    # Print stage timings
    python -m particleFluid --config configs/default.json

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

import argparse
import json
import time as timeModule
from dataclasses import dataclass

from particleFluid import constants as const
from particleFluid.profiling import BlockProfiler
from particleFluid.sph.protocols import FluidConfig, SimulationState
from particleFluid.sph.simulation import FluidSimulation


#--------------------------------------------------------------------#
# -- Run Configuration -- #
#--------------------------------------------------------------------#

@dataclass
class RunConfig:
    '''
    World size and run length for a headless run.

    Parameters:
    -----------
    width : float
        World width
    height : float
        World height
    fillSize : float
        Side of the square region seeded with particles
    timeStep : float
        Fixed frame time step
    steps : int
        Number of frames to run
    '''

    width: float = const.defaultWidth
    height: float = const.defaultHeight
    fillSize: float = const.defaultFillSize
    timeStep: float = const.timeStep
    steps: int = 100

    @classmethod
    def fromDict(cls, data: dict) -> RunConfig:
        '''Read the 'simulation' section of a parsed config document.'''
        simSection = data.get('simulation', {})
        return cls(
            width=simSection.get('width', const.defaultWidth),
            height=simSection.get('height', const.defaultHeight),
            fillSize=simSection.get('fillSize', const.defaultFillSize),
            timeStep=simSection.get('timeStep', const.timeStep),
            steps=simSection.get('steps', 100),
        )


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='particleFluid -- 2D SPH fluid simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file',
    )
    parser.add_argument(
        '--steps', type=int, default=None,
        help='Number of frames to run (default: 100)',
    )
    parser.add_argument(
        '--dt', type=float, default=None,
        help=f'Frame time step (default: {const.timeStep})',
    )
    parser.add_argument(
        '--width', type=float, default=None,
        help=f'World width (default: {const.defaultWidth})',
    )
    parser.add_argument(
        '--height', type=float, default=None,
        help=f'World height (default: {const.defaultHeight})',
    )
    parser.add_argument(
        '--fill', type=float, default=None,
        help=f'Side of the filled square (default: {const.defaultFillSize})',
    )
    parser.add_argument(
        '--profile', action='store_true',
        help='Print per-stage timings after the run',
    )

    return parser


def loadConfigs(args: argparse.Namespace) -> tuple[FluidConfig, RunConfig]:
    '''
    Resolve fluid and run configuration from CLI arguments.

    Values from --config are loaded first; explicit flags override them.
    '''
    if args.config:
        with open(args.config, 'r') as f:
            data = json.load(f)
    else:
        data = {}

    fluidConfig = FluidConfig.fromDict(data)
    runConfig = RunConfig.fromDict(data)

    if args.steps is not None:
        runConfig.steps = args.steps
    if args.dt is not None:
        runConfig.timeStep = args.dt
    if args.width is not None:
        runConfig.width = args.width
    if args.height is not None:
        runConfig.height = args.height
    if args.fill is not None:
        runConfig.fillSize = args.fill

    return (fluidConfig, runConfig)


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class FluidSimRunner:
    '''
    Runs the fluid for a fixed number of frames and reports progress.

    Parameters:
    -----------
    fluidConfig : FluidConfig
        Fluid parameters
    profile : bool
        Record per-stage timings with a BlockProfiler
    '''

    def __init__(self, fluidConfig: FluidConfig, profile: bool = False) -> None:
        self._profiler = BlockProfiler() if profile else None
        self._simulation = FluidSimulation(fluidConfig, profiler=self._profiler)
        self._states: list[SimulationState] = []

    @property
    def simulation(self) -> FluidSimulation:
        '''The simulation being run.'''
        return self._simulation

    @property
    def states(self) -> list[SimulationState]:
        '''State after every frame of the last run.'''
        return self._states

    def run(self, runConfig: RunConfig) -> dict:
        '''
        Create, fill and advance the simulation.

        Parameters:
        -----------
        runConfig : RunConfig
            World size and run length

        Returns:
        --------
        dict : Simulation results summary
        '''
        sim = self._simulation
        cfg = sim.config

        print()
        print('=' * 62)
        print('  PARTICLEFLUID -- SPH SIMULATION')
        print('=' * 62)
        print()

        #--------------------------------------------------------------------#
        # Scenario Setup
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  SCENARIO SETUP')
        print('-' * 62)

        sim.create(runConfig.width, runConfig.height)
        sim.fill(runConfig.fillSize)

        print(f'  World Width:       {sim.width:8.3f}')
        print(f'  World Height:      {sim.height:8.3f}')
        print(f'  Grid Cells:        {sim.grid.gridWidth:4d} x {sim.grid.gridHeight:<4d}')
        print(f'  Fill Size:         {runConfig.fillSize:8.3f}')
        print(f'  Particle Spacing:  {cfg.particleSpacing:8.4f}')
        print(f'  Smoothing Length:  {cfg.smoothingLength:8.4f}')
        print(f'  Particles:         {sim.size():8d}')
        print(f'  Time Step:         {runConfig.timeStep:8.4f}')
        print(f'  Steps:             {runConfig.steps:8d}')
        print()

        #--------------------------------------------------------------------#
        # Simulation Loop
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  RUNNING SIMULATION')
        print('-' * 62)
        print()
        print(f'  {"Time":>8}  {"Step":>8}  {"Pairs":>10}  {"MaxVel":>8}  {"MeanRho":>10}  {"KE":>10}')
        print('  ' + '-' * 62)

        self._states = []
        printInterval = max(1, runConfig.steps // 20)
        wallClockStart = timeModule.time()

        for frame in range(runConfig.steps):
            state = sim.update(runConfig.timeStep)
            self._states.append(state)

            if frame % printInterval == 0 or frame == runConfig.steps - 1:
                print(
                    f'  {state.time:8.4f}  {state.step:8d}  {state.nNeighbors:10d}  '
                    f'{state.maxVelocity:8.4f}  {state.meanDensity:10.3f}  '
                    f'{state.kineticEnergy:10.3e}'
                )

        wallClockSeconds = timeModule.time() - wallClockStart
        finalState = sim.currentState

        print()
        print(f'  Simulation complete.')
        print(f'  Total steps:       {finalState.step:8d}')
        print(f'  Wall-clock time:   {wallClockSeconds:8.1f} s')
        print(f'  Neighbor capacity: {finalState.neighborCapacity:8d}')
        print()

        #--------------------------------------------------------------------#
        # Profile
        #--------------------------------------------------------------------#
        if self._profiler is not None:
            print('-' * 62)
            print('  STAGE TIMINGS (total over all frames)')
            print('-' * 62)
            for path, seconds in self._profiler.totals().items():
                depth = path.count('/')
                name = path.rsplit('/', 1)[-1]
                print(f'  {"  " * depth}{name:<20s} {seconds:10.4f} s')
            print()
            print('-' * 62)
            print('  LAST FRAME')
            print('-' * 62)
            for line in self._profiler.dump(last=1).splitlines():
                print(f'  {line}')
            print()

        return {
            'finalState': finalState,
            'wallClockSeconds': wallClockSeconds,
            'nFrames': len(self._states),
        }


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main(argv: list[str] | None = None) -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args(argv)

    fluidConfig, runConfig = loadConfigs(args)
    runner = FluidSimRunner(fluidConfig, profile=args.profile)
    runner.run(runConfig)


if __name__ == '__main__':
    main()
