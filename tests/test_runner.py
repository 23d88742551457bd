# -- Runner Tests -- #

'''
Argument parsing, configuration resolution and a short headless run.
'''

import json

from particleFluid import constants as const
from particleFluid.runner import FluidSimRunner, RunConfig, buildParser, loadConfigs, main
from particleFluid.sph.protocols import FluidConfig


class TestRunner:
    '''Tests for the command-line runner.'''

    def test_defaults(self):
        '''Without flags the default world and fill are used.'''
        args = buildParser().parse_args([])
        fluidConfig, runConfig = loadConfigs(args)

        assert runConfig.width == const.defaultWidth
        assert runConfig.height == const.defaultHeight
        assert runConfig.fillSize == const.defaultFillSize
        assert runConfig.timeStep == const.timeStep
        assert fluidConfig.smoothingLength == const.smoothingLength

    def test_flags_override_config_file(self, tmp_path):
        '''Explicit flags win over values from --config.'''
        path = tmp_path / 'run.json'
        path.write_text(json.dumps({
            'simulation': {'width': 0.8, 'height': 0.6, 'steps': 50},
            'fluid': {'viscosity': 0.2},
        }))

        args = buildParser().parse_args(['--config', str(path), '--steps', '3', '--fill', '0.05'])
        fluidConfig, runConfig = loadConfigs(args)

        assert runConfig.width == 0.8
        assert runConfig.height == 0.6
        assert runConfig.steps == 3
        assert runConfig.fillSize == 0.05
        assert fluidConfig.viscosity == 0.2

    def test_short_run(self, capsys):
        '''A small run reports progress and returns a summary.'''
        runner = FluidSimRunner(FluidConfig(), profile=True)
        result = runner.run(RunConfig(width=0.3, height=0.3, fillSize=0.05, steps=3))

        assert result['nFrames'] == 3
        assert result['finalState'].step == 3
        assert len(runner.states) == 3

        out = capsys.readouterr().out
        assert 'RUNNING SIMULATION' in out
        assert 'STAGE TIMINGS' in out
        assert 'computeForce' in out
        assert 'LAST FRAME' in out
        assert runner.simulation.step == 3

        # Only the final frame's block tree is dumped after the totals
        lastFrame = out.split('LAST FRAME', 1)[1]
        assert lastFrame.count('update: ') == 1
        assert '    computeForce: ' in lastFrame

    def test_main(self, capsys):
        '''main runs end to end from argv.'''
        main(['--width', '0.3', '--height', '0.3', '--fill', '0.05', '--steps', '2'])
        assert 'Simulation complete.' in capsys.readouterr().out
