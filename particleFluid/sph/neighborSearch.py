# -- Grid Neighbor Search -- #

'''
Neighbor pair discovery over the uniform grid.

Every particle pair closer than the smoothing length lies in the
same cell or in adjacent cells. Cells are visited with a half
stencil, so each unordered pair is examined from exactly one side:

    same cell   : upper triangle of the cell's particles
    cross cells : (+1, -1), (+1, 0), (+1, +1), (0, +1)

Stencil cells outside the grid are skipped. Distance checks
inside a cell pair are vectorized with NumPy broadcasting over
bounded tiles, so a crowded cell never needs an n^2 array.

Found pairs are written as records (particleIndex, neighborIndex,
distance) into a NeighborBuffer. The distance column holds the
squared distance while densities are accumulated and is converted
in place to the linear distance before forces are computed.

References:
-----------
Ihmsen et al. (2011) -- Parallel Neighbor-Search for SPH
Green (2010) -- Particle Simulation using CUDA

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

import numpy as np

from particleFluid import constants as const
from particleFluid.sph.uniformGrid import UniformGrid


#--------------------------------------------------------------------#
# -- Neighbor Record Buffer -- #
#--------------------------------------------------------------------#

class NeighborBuffer:
    '''
    Growable struct-of-arrays buffer of neighbor records.

    Holds a length/capacity split. Capacity grows by a fixed
    increment when an append does not fit and never shrinks, so
    after the first few steps no allocation happens at all.

    Parameters:
    -----------
    capacity : int
        Initial record capacity
    growth : int
        Records added per growth increment
    '''

    def __init__(self, capacity: int, growth: int) -> None:
        if capacity < 0:
            raise ValueError(f'Capacity must be non-negative, got {capacity}')
        if growth < 1:
            raise ValueError(f'Growth increment must be at least 1, got {growth}')

        self._growth = growth
        self._capacity = capacity
        self._length = 0
        self._distanceIsLinear = False
        self._growCount = 0

        self._particleIndex = np.zeros(capacity, dtype=np.int64)
        self._neighborIndex = np.zeros(capacity, dtype=np.int64)
        self._distance = np.zeros(capacity, dtype=np.float64)

    def __len__(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        '''Number of records storable without growing.'''
        return self._capacity

    @property
    def growCount(self) -> int:
        '''Number of times the buffer has been reallocated.'''
        return self._growCount

    @property
    def distanceIsLinear(self) -> bool:
        '''True once sqrtDistances has run for the current records.'''
        return self._distanceIsLinear

    def reset(self) -> None:
        '''Forget all records, keeping the allocated capacity.'''
        self._length = 0
        self._distanceIsLinear = False

    def append(
        self,
        particleIndex: np.ndarray,
        neighborIndex: np.ndarray,
        distanceSq: np.ndarray,
    ) -> None:
        '''
        Append a batch of records with squared distances.

        Parameters:
        -----------
        particleIndex : np.ndarray
            First particle of each pair, shape (k,)
        neighborIndex : np.ndarray
            Second particle of each pair, shape (k,)
        distanceSq : np.ndarray
            Squared pair distances, shape (k,)
        '''
        if self._distanceIsLinear:
            raise RuntimeError('Cannot append squared distances after sqrtDistances')

        count = len(particleIndex)
        if count == 0:
            return

        required = self._length + count
        if required > self._capacity:
            self._grow(required)

        end = required
        self._particleIndex[self._length:end] = particleIndex
        self._neighborIndex[self._length:end] = neighborIndex
        self._distance[self._length:end] = distanceSq
        self._length = end

    def _grow(self, required: int) -> None:
        '''
        Grow capacity by whole increments until `required` records fit.

        Existing records are copied in order, so record positions
        already handed out stay valid.
        '''
        shortfall = required - self._capacity
        increments = -(-shortfall // self._growth)
        newCapacity = self._capacity + increments * self._growth

        n = self._length
        particleIndex = np.zeros(newCapacity, dtype=np.int64)
        neighborIndex = np.zeros(newCapacity, dtype=np.int64)
        distance = np.zeros(newCapacity, dtype=np.float64)
        particleIndex[:n] = self._particleIndex[:n]
        neighborIndex[:n] = self._neighborIndex[:n]
        distance[:n] = self._distance[:n]

        self._particleIndex = particleIndex
        self._neighborIndex = neighborIndex
        self._distance = distance
        self._capacity = newCapacity
        self._growCount += 1

    def sqrtDistances(self) -> None:
        '''Convert the distance column from squared to linear, in place.'''
        if self._distanceIsLinear:
            return
        np.sqrt(self._distance[:self._length], out=self._distance[:self._length])
        self._distanceIsLinear = True

    def records(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        '''
        Views of the live records.

        Returns:
        --------
        tuple[np.ndarray, np.ndarray, np.ndarray] :
            (particleIndex, neighborIndex, distance), each shape (len,)
        '''
        n = self._length
        return (self._particleIndex[:n], self._neighborIndex[:n], self._distance[:n])


#--------------------------------------------------------------------#
# -- Neighbor Finder -- #
#--------------------------------------------------------------------#

class NeighborFinder:
    '''
    Half-stencil pair search over a UniformGrid.

    Emits each unordered pair within the smoothing radius exactly
    once, with particleIndex < neighborIndex.

    Distances between two cells are checked in square tiles of at
    most blockSize x blockSize particles, so a heavily clustered
    cell costs time but not memory beyond one tile.

    Parameters:
    -----------
    smoothingLength : float
        Interaction radius h
    blockSize : int
        Largest tile side used for the broadcast distance checks
    '''

    # Forward half of the 3x3 stencil as (dx, dy)
    halfStencil: tuple[tuple[int, int], ...] = (
        (1, -1), (1, 0), (1, 1),
        (0, 1),
    )

    def __init__(self, smoothingLength: float, blockSize: int = const.neighborBlockSize) -> None:
        if blockSize < 1:
            raise ValueError(f'Block size must be at least 1, got {blockSize}')
        self._radiusSq = smoothingLength * smoothingLength
        self._blockSize = int(blockSize)

    @property
    def blockSize(self) -> int:
        '''Largest tile side of the distance checks.'''
        return self._blockSize

    def find(
        self,
        positions: np.ndarray,
        grid: UniformGrid,
        buffer: NeighborBuffer,
    ) -> int:
        '''
        Rebuild the neighbor records from a freshly built grid.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        grid : UniformGrid
            Grid already built from these positions
        buffer : NeighborBuffer
            Destination buffer, reset before writing

        Returns:
        --------
        int : Number of pairs found
        '''
        buffer.reset()
        gridWidth = grid.gridWidth
        gridHeight = grid.gridHeight
        counts = grid.counts

        for cell in np.flatnonzero(counts).tolist():
            gx = cell % gridWidth
            gy = cell // gridWidth
            cellParticles = grid.cellParticles(cell)
            cellPos = positions[cellParticles]

            # --- Pairs within the cell --- #
            if len(cellParticles) > 1:
                self._appendCellPairs(
                    cellParticles, cellPos, cellParticles, cellPos, buffer, sameCell=True,
                )

            # --- Pairs with forward neighbor cells --- #
            for dx, dy in self.halfStencil:
                nx = gx + dx
                ny = gy + dy
                if nx < 0 or nx >= gridWidth or ny < 0 or ny >= gridHeight:
                    continue

                neighborCell = ny * gridWidth + nx
                if counts[neighborCell] == 0:
                    continue

                neighborParticles = grid.cellParticles(neighborCell)
                self._appendCellPairs(
                    cellParticles, cellPos,
                    neighborParticles, positions[neighborParticles],
                    buffer, sameCell=False,
                )

        return len(buffer)

    def _appendCellPairs(
        self,
        rowParticles: np.ndarray,
        rowPos: np.ndarray,
        colParticles: np.ndarray,
        colPos: np.ndarray,
        buffer: NeighborBuffer,
        sameCell: bool,
    ) -> None:
        '''
        Append in-range pairs between two particle runs, tile by tile.

        For a cell paired with itself only tiles on or above the
        diagonal are visited, and diagonal tiles keep their strict
        upper triangle.
        '''
        radiusSq = self._radiusSq
        blockSize = self._blockSize
        nRows = len(rowParticles)
        nCols = len(colParticles)

        for rowStart in range(0, nRows, blockSize):
            rowStop = min(rowStart + blockSize, nRows)
            rowBlock = rowPos[rowStart:rowStop]
            colFirst = rowStart if sameCell else 0

            for colStart in range(colFirst, nCols, blockSize):
                colStop = min(colStart + blockSize, nCols)

                diff = rowBlock[:, np.newaxis, :] - colPos[np.newaxis, colStart:colStop, :]
                distSq = np.sum(diff * diff, axis=2)
                within = distSq < radiusSq
                if sameCell and colStart == rowStart:
                    within = np.triu(within, k=1)

                localI, localJ = np.nonzero(within)
                if len(localI) == 0:
                    continue

                globalI = rowParticles[rowStart + localI]
                globalJ = colParticles[colStart + localJ]
                if sameCell:
                    # Runs are ascending, so row < col already orders the pair
                    buffer.append(globalI, globalJ, distSq[localI, localJ])
                else:
                    buffer.append(
                        np.minimum(globalI, globalJ),
                        np.maximum(globalI, globalJ),
                        distSq[localI, localJ],
                    )
