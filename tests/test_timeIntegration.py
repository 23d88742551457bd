# -- Time Integration Tests -- #

'''
Penalty walls, gravity, symplectic Euler and the pause state machine.
'''

import numpy as np

from particleFluid.sph.particles import ParticleStore
from particleFluid.sph.timeIntegration import Integrator, StepController, domainWalls


WIDTH = 1.6
HEIGHT = 1.2
STIFF = 3000.0


class TestWalls:
    '''Tests for the four penalty half-planes.'''

    def setup_method(self):
        self.integrator = Integrator(WIDTH, HEIGHT, STIFF, gravity=np.array([0.0, 1.0]))

    def test_inside_particles_feel_no_wall(self, rng):
        '''Particles satisfying every half-plane get zero wall acceleration.'''
        positions = np.column_stack([
            rng.uniform(0.0, WIDTH, size=100),
            rng.uniform(0.0, HEIGHT, size=100),
        ])
        positions[0] = [0.0, 0.0]
        positions[1] = [WIDTH, HEIGHT]

        for wall in domainWalls(WIDTH, HEIGHT):
            assert np.all(wall.signedDistance(positions) >= 0.0)
        np.testing.assert_array_equal(self.integrator.wallAccelerations(positions), 0.0)

    def test_penetrating_particles_pushed_inward(self):
        '''Penalty is k * depth along the violated wall's inward normal.'''
        positions = np.array([
            [-0.01, 0.5],           # left
            [0.5, -0.02],           # y = 0 wall
            [WIDTH + 0.03, 0.5],    # right
            [0.5, HEIGHT + 0.04],   # y = height wall
        ])
        accel = self.integrator.wallAccelerations(positions)

        np.testing.assert_allclose(accel[0], [STIFF * 0.01, 0.0])
        np.testing.assert_allclose(accel[1], [0.0, STIFF * 0.02])
        np.testing.assert_allclose(accel[2], [-STIFF * 0.03, 0.0])
        np.testing.assert_allclose(accel[3], [0.0, -STIFF * 0.04])

    def test_corner_penetration_combines_two_walls(self):
        '''A particle outside a corner is pushed back along both axes.'''
        accel = self.integrator.wallAccelerations(np.array([[-0.01, HEIGHT + 0.01]]))
        assert accel[0, 0] > 0.0
        assert accel[0, 1] < 0.0


class TestIntegrator:
    '''Tests for symplectic Euler integration.'''

    def setup_method(self):
        self.integrator = Integrator(WIDTH, HEIGHT, STIFF, gravity=np.array([0.0, 1.0]))

    def test_kick_then_drift(self):
        '''Velocity updates first, position uses the new velocity.'''
        particles = ParticleStore.fromPositions(np.array([[0.5, 0.5]]))
        particles.velocities[0] = [0.2, 0.0]
        particles.accelerations[0] = [1.0, 0.0]
        dt = 0.01

        self.integrator.integrate(particles, dt)

        expectedVel = np.array([0.2 + dt * 1.0, dt * 1.0])
        np.testing.assert_allclose(particles.velocities[0], expectedVel)
        np.testing.assert_allclose(particles.positions[0], np.array([0.5, 0.5]) + dt * expectedVel)
        np.testing.assert_array_equal(particles.accelerations, 0.0)

    def test_zero_dt_freezes_state(self):
        '''dt = 0 leaves positions and velocities untouched.'''
        particles = ParticleStore.fromPositions(np.array([[0.5, 0.5], [-0.1, 0.2]]))
        particles.velocities[:] = [[0.3, -0.1], [0.0, 0.5]]
        positions = particles.positions.copy()
        velocities = particles.velocities.copy()

        self.integrator.integrate(particles, 0.0)

        np.testing.assert_array_equal(particles.positions, positions)
        np.testing.assert_array_equal(particles.velocities, velocities)
        np.testing.assert_array_equal(particles.accelerations, 0.0)


class TestStepController:
    '''Tests for the pause state machine.'''

    def setup_method(self):
        self.controller = StepController()

    def test_running_advances_step(self):
        '''Unpaused steps pass dt through and count up.'''
        assert self.controller.advance(0.005) == 0.005
        assert self.controller.advance(0.005) == 0.005
        assert self.controller.step == 2

    def test_pause_freezes(self):
        '''Paused steps use dt = 0 and do not count.'''
        self.controller.paused = True
        assert self.controller.advance(0.005) == 0.0
        assert self.controller.step == 0

        self.controller.paused = False
        assert self.controller.advance(0.005) == 0.005
        assert self.controller.step == 1

    def test_pause_on_step(self):
        '''The counter stops at the pause target.'''
        self.controller.pauseStep = 2
        dts = [self.controller.advance(0.005) for _ in range(5)]
        assert dts == [0.005, 0.005, 0.0, 0.0, 0.0]
        assert self.controller.step == 2

        self.controller.pauseStep = None
        assert self.controller.advance(0.005) == 0.005
        assert self.controller.step == 3

    def test_reset_keeps_pause_settings(self):
        '''Reset zeros the counter only.'''
        self.controller.paused = True
        self.controller.step = 7
        self.controller.reset()
        assert self.controller.step == 0
        assert self.controller.paused
