# -- Uniform Grid Bucketing -- #

'''
Counting-sort bucketing of particles into a uniform grid.

The world rectangle is split into square cells whose size equals
the smoothing length, so every neighbor of a particle lies in its
own cell or one of the 8 adjacent cells. Each step the grid is
rebuilt from scratch in O(N + cells):

    1. Count the particles per cell
    2. Exclusive prefix sum of the counts gives each cell's offset
    3. Scatter particle indices into a flat array at
       offset[cell] + runningCount[cell]

Cells are numbered row-major: cell = gy * gridWidth + gx.
Particles outside the world are clamped into the edge cells,
never dropped.

References:
-----------
Green (2010) -- Particle Simulation using CUDA
Ihmsen et al. (2011) -- Parallel Neighbor-Search for SPH

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

import numpy as np


class UniformGrid:
    '''
    Row-major grid of (offset, count) buckets over a flat index array.

    Parameters:
    -----------
    width : float
        World width
    height : float
        World height
    cellSize : float
        Cell side length, equal to the smoothing length
    '''

    def __init__(self, width: float, height: float, cellSize: float) -> None:
        if not cellSize > 0.0:
            raise ValueError(f'Cell size must be positive, got {cellSize}')
        if not (width > 0.0 and height > 0.0):
            raise ValueError(f'World size must be positive, got {width} x {height}')

        self._cellSize = cellSize
        self._invCellSize = 1.0 / cellSize
        self._gridWidth = int(width / cellSize)
        self._gridHeight = int(height / cellSize)

        if self._gridWidth < 1 or self._gridHeight < 1:
            raise ValueError(
                f'World {width} x {height} is smaller than one cell of size {cellSize}'
            )

        nCells = self._gridWidth * self._gridHeight
        self.offsets = np.zeros(nCells, dtype=np.int64)
        self.counts = np.zeros(nCells, dtype=np.int64)
        self.indices = np.zeros(0, dtype=np.int64)

    @property
    def gridWidth(self) -> int:
        '''Number of cell columns.'''
        return self._gridWidth

    @property
    def gridHeight(self) -> int:
        '''Number of cell rows.'''
        return self._gridHeight

    @property
    def nCells(self) -> int:
        '''Total number of cells.'''
        return self._gridWidth * self._gridHeight

    @property
    def cellSize(self) -> float:
        '''Cell side length.'''
        return self._cellSize

    ######################################################################
    # -- Index Storage -- #
    ######################################################################

    def allocate(self, nParticles: int) -> None:
        '''Size the flat index array for nParticles particles.'''
        self.indices = np.zeros(nParticles, dtype=np.int64)

    def release(self) -> None:
        '''Drop the index storage and empty every bucket.'''
        self.indices = np.zeros(0, dtype=np.int64)
        self.offsets[:] = 0
        self.counts[:] = 0

    ######################################################################
    # -- Cell Lookup -- #
    ######################################################################

    def cellCoordinates(self, positions: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        '''
        Clamped integer cell coordinates of each position.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] : (gx, gy), each shape (N,)
        '''
        scaled = np.floor(positions * self._invCellSize)
        gx = np.clip(scaled[:, 0], 0, self._gridWidth - 1).astype(np.int64)
        gy = np.clip(scaled[:, 1], 0, self._gridHeight - 1).astype(np.int64)
        return (gx, gy)

    def cellIndices(self, positions: np.ndarray) -> np.ndarray:
        '''Row-major cell index of each position, shape (N,).'''
        gx, gy = self.cellCoordinates(positions)
        return gy * self._gridWidth + gx

    def cellParticles(self, cell: int) -> np.ndarray:
        '''
        Particle indices bucketed into a cell.

        Returns a view into the flat index array, valid until the
        next build.
        '''
        start = self.offsets[cell]
        return self.indices[start:start + self.counts[cell]]

    ######################################################################
    # -- Build -- #
    ######################################################################

    def build(self, positions: np.ndarray) -> None:
        '''
        Bucket all particles by cell with a two-pass counting sort.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        '''
        nParticles = positions.shape[0]
        if self.indices.shape[0] != nParticles:
            self.allocate(nParticles)

        cells = self.cellIndices(positions)

        # Pass 1: count particles per cell
        self.counts[:] = np.bincount(cells, minlength=self.nCells)

        # Exclusive prefix sum -> offsets; counts restart as running counters
        self.offsets[0] = 0
        np.cumsum(self.counts[:-1], out=self.offsets[1:])
        self.counts[:] = 0

        # Pass 2: scatter indices in particle order, so each run is ascending
        offsets = self.offsets.tolist()
        running = [0] * self.nCells
        indices = [0] * nParticles
        for particle, cell in enumerate(cells.tolist()):
            indices[offsets[cell] + running[cell]] = particle
            running[cell] += 1

        self.indices[:] = indices
        self.counts[:] = running
