# -- Stage Profiling -- #

'''
Nested named timing blocks for profiling the simulation pipeline.

The simulation reports through the Profiler protocol
(begin / end / dump). NullProfiler is the silent default;
BlockProfiler records a tree of blocks timed with
time.perf_counter and renders it as an indented report.

particleFluid developers [10/19/2026]
'''

from __future__ import annotations

import time
from dataclasses import dataclass, field


class NullProfiler:
    '''Profiler that records nothing.'''

    def begin(self, name: str) -> None:
        pass

    def end(self) -> None:
        pass

    def dump(self, last: int | None = None) -> str:
        return ''


@dataclass
class ProfileBlock:
    '''
    One timed block and its nested children.

    Parameters:
    -----------
    name : str
        Block name
    start : float
        perf_counter value when the block opened
    stop : float | None
        perf_counter value when the block closed, None while open
    parent : ProfileBlock | None
        Enclosing block
    children : list[ProfileBlock]
        Blocks opened while this one was current
    '''

    name: str
    start: float
    stop: float | None = None
    parent: ProfileBlock | None = field(default=None, repr=False)
    children: list[ProfileBlock] = field(default_factory=list)

    @property
    def seconds(self) -> float:
        '''Elapsed time, measured up to now while still open.'''
        stop = self.stop if self.stop is not None else time.perf_counter()
        return stop - self.start

    def render(self, depth: int = 0) -> list[str]:
        '''Indented report lines for this block and its children.'''
        lines = [f'{"  " * depth}{self.name}: {self.seconds:.6f} s']
        for child in self.children:
            lines.extend(child.render(depth + 1))
        return lines


class BlockProfiler:
    '''
    Records a tree of nested named timing blocks.

    Finished root blocks are kept until clear() so several frames
    can be dumped or aggregated together.
    '''

    def __init__(self) -> None:
        self._current: ProfileBlock | None = None
        self._finished: list[ProfileBlock] = []

    @property
    def finished(self) -> list[ProfileBlock]:
        '''Closed root blocks, oldest first.'''
        return list(self._finished)

    @property
    def depth(self) -> int:
        '''Number of currently open blocks.'''
        depth = 0
        block = self._current
        while block is not None:
            depth += 1
            block = block.parent
        return depth

    def begin(self, name: str) -> None:
        '''Open a block nested inside the current one.'''
        block = ProfileBlock(name=name, start=time.perf_counter(), parent=self._current)
        if self._current is not None:
            self._current.children.append(block)
        self._current = block

    def end(self) -> None:
        '''
        Close the innermost open block.

        Raises:
        -------
        RuntimeError : If no block is open
        '''
        if self._current is None:
            raise RuntimeError('Profiler end() called with no open block')

        block = self._current
        block.stop = time.perf_counter()
        self._current = block.parent
        if self._current is None:
            self._finished.append(block)

    def dump(self, last: int | None = None) -> str:
        '''
        Indented report of the finished root blocks.

        Parameters:
        -----------
        last : int | None
            Only report the most recent `last` root blocks (default: all)
        '''
        blocks = self._finished
        if last is not None:
            blocks = blocks[max(len(blocks) - last, 0):] if last > 0 else []

        lines: list[str] = []
        for block in blocks:
            lines.extend(block.render())
        return '\n'.join(lines)

    def totals(self) -> dict[str, float]:
        '''
        Total seconds per block path across all finished blocks.

        Paths join nested names with '/', e.g. 'update/computeForce'.
        '''
        totals: dict[str, float] = {}

        def accumulate(block: ProfileBlock, prefix: str) -> None:
            path = f'{prefix}/{block.name}' if prefix else block.name
            totals[path] = totals.get(path, 0.0) + block.seconds
            for child in block.children:
                accumulate(child, path)

        for block in self._finished:
            accumulate(block, '')
        return totals

    def clear(self) -> None:
        '''Drop all recorded blocks, including any still open.'''
        self._current = None
        self._finished.clear()
