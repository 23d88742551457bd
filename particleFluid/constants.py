# -- Physical Constants for the SPH Fluid -- #

'''
Physical and numerical constants for the 2D particle fluid.

Coordinates follow the screen convention: x grows to the right,
y grows downward, so gravity points along +y. Units are the
simulation's own (world size ~1 unit), not SI.

References:
-----------
Muller, Charypar & Gross (2003) -- Particle-Based Fluid Simulation
    for Interactive Applications

particleFluid developers [10/19/2026]
'''

#--------------------------------------------------------------------#
# -- Fluid Properties -- #
#--------------------------------------------------------------------#

# Rest density rho_0; pressure is zero at or below it
restDensity: float = 1000.0

# Mass carried by every particle
particleMass: float = 0.0002

# Viscosity coefficient mu
viscosity: float = 0.1

# Equation of state stiffness k: p = k * max((rho/rho_0)^3 - 1, 0)
pressureStiffness: float = 200.0

# Gravity vector (y-down screen coordinates)
gravityX: float = 0.0
gravityY: float = 1.0

#--------------------------------------------------------------------#
# -- SPH Numerical Parameters -- #
#--------------------------------------------------------------------#

# Fixed frame time step used by the driver
timeStep: float = 0.005

# Smoothing length h (also the grid cell size)
smoothingLength: float = 0.012

# Lattice spacing used when seeding particles
initialSpacing: float = 0.0045

# Penalty stiffness of the four domain walls
wallStiffness: float = 3000.0

#--------------------------------------------------------------------#
# -- Neighbor Buffer -- #
#--------------------------------------------------------------------#

# Initial neighbor record capacity (grown on demand)
neighborCapacity: int = 263 * 1200

# Records added per growth increment
neighborGrowth: int = 20

# Largest tile side for the broadcast distance checks of one cell pair
neighborBlockSize: int = 512

#--------------------------------------------------------------------#
# -- Default World -- #
#--------------------------------------------------------------------#

defaultWidth: float = 1.6
defaultHeight: float = 1.2
defaultFillSize: float = 0.5
