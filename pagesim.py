#!/usr/bin/env python3
"""
Page Replacement Simulator
Implements FIFO, LRU and Optimal page replacement over a fixed set of frames,
with policy comparison and frame-size sweeps for Belady's Anomaly
"""

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

MAX_REFERENCES = 50   # longest reference string accepted from the user
MAX_FRAMES = 20       # largest frame set a run may use
SWEEP_MAX_FRAMES = 10
LOG_LIMIT = 50        # eviction log entries kept per run


class InvalidInput(ValueError):
    """Raised when a run is requested with out-of-range parameters"""


class Policy(Enum):
    """Closed set of supported replacement policies"""

    FIFO = "FIFO"
    LRU = "LRU"
    OPTIMAL = "Optimal"

    @classmethod
    def parse(cls, value) -> "Policy":
        """Accept a Policy, a name ('fifo', 'LRU', 'opt'...) or a menu number (1-3)"""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        aliases = {
            "1": cls.FIFO, "fifo": cls.FIFO,
            "2": cls.LRU, "lru": cls.LRU,
            "3": cls.OPTIMAL, "optimal": cls.OPTIMAL, "opt": cls.OPTIMAL,
        }
        if text not in aliases:
            raise InvalidInput(f"Unknown policy '{value}'")
        return aliases[text]


class FrameStore:
    """Fixed-capacity set of frames; each slot is None (empty) or a page number"""

    def __init__(self, num_frames: int):
        self.num_frames = num_frames
        self.slots: List[Optional[int]] = [None] * num_frames

    def contains(self, page_num: int) -> bool:
        return page_num in self.slots

    def slot_of(self, page_num: int) -> Optional[int]:
        """Return the slot holding page_num, or None"""
        try:
            return self.slots.index(page_num)
        except ValueError:
            return None

    def first_empty_slot(self) -> Optional[int]:
        return self.slot_of(None)

    def is_full(self) -> bool:
        return None not in self.slots

    def set(self, index: int, page_num: int) -> Optional[int]:
        """Place page_num in a slot, return the page it replaced (None if empty)"""
        holder = self.slot_of(page_num)
        if holder is not None and holder != index:
            raise ValueError(f"Page {page_num} already resident in frame {holder}")
        previous = self.slots[index]
        self.slots[index] = page_num
        return previous

    def snapshot(self) -> Tuple[Optional[int], ...]:
        return tuple(self.slots)

    def __len__(self) -> int:
        return self.num_frames

    def __getitem__(self, index: int) -> Optional[int]:
        return self.slots[index]

    def __iter__(self) -> Iterator[Optional[int]]:
        return iter(self.slots)

    def __repr__(self):
        return f"FrameStore({self.slots})"


class PageReplacementAlgorithm:
    """Base class for page replacement algorithms"""

    policy: Policy = None
    log_tag = ""

    def __init__(self, num_frames: int):
        self.num_frames = num_frames
        self.frames = FrameStore(num_frames)

    def access_page(self, page_num: int,
                    future: Sequence[int] = ()) -> Tuple[bool, Optional[int], Optional[int]]:
        """
        Access a page, return (fault_occurred, evicted_page, frame_idx).
        future is the part of the reference string not yet processed.
        """
        self.tick()

        frame_idx = self.frames.slot_of(page_num)
        if frame_idx is not None:
            self.on_hit(frame_idx)
            return False, None, frame_idx

        # Page fault occurred
        frame_idx = self.select_frame(future)
        evicted_page = self.frames.set(frame_idx, page_num)
        self.on_load(frame_idx)
        return True, evicted_page, frame_idx

    def select_frame(self, future: Sequence[int]) -> int:
        """Choose the frame to load a faulting page into"""
        raise NotImplementedError

    def tick(self):
        pass

    def on_hit(self, frame_idx: int):
        pass

    def on_load(self, frame_idx: int):
        pass


class FIFOPageReplacement(PageReplacementAlgorithm):
    """First-In-First-Out page replacement"""

    policy = Policy.FIFO

    def __init__(self, num_frames: int):
        super().__init__(num_frames)
        self.cursor = 0

    def select_frame(self, future: Sequence[int]) -> int:
        # The cursor walks the empty frames in order before it wraps
        return self.cursor

    def on_load(self, frame_idx: int):
        self.cursor = (self.cursor + 1) % self.num_frames


class LRUPageReplacement(PageReplacementAlgorithm):
    """Least Recently Used page replacement"""

    policy = Policy.LRU
    log_tag = " (LRU)"

    def __init__(self, num_frames: int):
        super().__init__(num_frames)
        self.clock = 0
        self.last_used = [0] * num_frames

    def tick(self):
        self.clock += 1

    def on_hit(self, frame_idx: int):
        self.last_used[frame_idx] = self.clock

    def on_load(self, frame_idx: int):
        self.last_used[frame_idx] = self.clock

    def select_frame(self, future: Sequence[int]) -> int:
        empty = self.frames.first_empty_slot()
        if empty is not None:
            return empty

        # Oldest timestamp wins, lowest index on ties
        victim = 0
        for i in range(1, self.num_frames):
            if self.last_used[i] < self.last_used[victim]:
                victim = i
        return victim


class OptimalPageReplacement(PageReplacementAlgorithm):
    """Optimal page replacement (requires future knowledge)"""

    policy = Policy.OPTIMAL
    log_tag = " (OPT)"

    def select_frame(self, future: Sequence[int]) -> int:
        empty = self.frames.first_empty_slot()
        if empty is not None:
            return empty

        farthest_use = -1
        victim = 0
        for i, frame_page in enumerate(self.frames):
            next_use = next_occurrence(future, frame_page)
            if next_use is None:
                # Never used again
                return i
            if next_use > farthest_use:
                farthest_use = next_use
                victim = i
        return victim


def next_occurrence(future: Sequence[int], page_num: int) -> Optional[int]:
    """Index of the next reference to page_num in future, None if there is none"""
    for j, page in enumerate(future):
        if page == page_num:
            return j
    return None


ALGORITHMS = {
    Policy.FIFO: FIFOPageReplacement,
    Policy.LRU: LRUPageReplacement,
    Policy.OPTIMAL: OptimalPageReplacement,
}


def make_algorithm(policy, num_frames: int) -> PageReplacementAlgorithm:
    """Create a fresh algorithm (frames and policy state) for one run"""
    return ALGORITHMS[Policy.parse(policy)](num_frames)


@dataclass(frozen=True)
class StepOutcome:
    """Result of processing one reference string entry"""
    step: int
    page_num: int
    page_fault: bool
    evicted_page: Optional[int]
    frame_idx: int
    frames: Tuple[Optional[int], ...]
    hits: int
    faults: int


@dataclass(frozen=True)
class RunResult:
    """Statistics for one pass of a reference string under one policy"""
    policy: Policy
    frame_size: int
    reference_string: Tuple[int, ...]
    faults: int
    hits: int
    fault_rate: float
    hit_rate: float
    eviction_log: Tuple[str, ...]

    @property
    def total_references(self) -> int:
        return len(self.reference_string)

    def stats(self) -> Dict:
        return {
            'algorithm': self.policy.value,
            'frames': self.frame_size,
            'total_accesses': self.total_references,
            'page_faults': self.faults,
            'page_hits': self.hits,
            'page_fault_rate': self.fault_rate,
            'hit_rate': self.hit_rate,
        }


def check_frame_size(frame_size: int):
    if isinstance(frame_size, bool) or not isinstance(frame_size, int) \
            or not 1 <= frame_size <= MAX_FRAMES:
        raise InvalidInput(f"Frame size must be an integer between 1 and {MAX_FRAMES}, got {frame_size!r}")


def validate_run(reference_string: Sequence[int], frame_size: int):
    """Check run parameters once, before any page is processed"""
    check_frame_size(frame_size)
    if len(reference_string) == 0:
        raise InvalidInput("Reference string is empty")
    for page in reference_string:
        if isinstance(page, bool) or not isinstance(page, int) or page < 0:
            raise InvalidInput(f"Page numbers must be non-negative integers, got {page!r}")


def describe_fault(outcome: StepOutcome, log_tag: str = "") -> str:
    if outcome.evicted_page is not None:
        return (f"Step {outcome.step}: page {outcome.page_num} "
                f"replaced page {outcome.evicted_page}{log_tag}")
    return f"Step {outcome.step}: page {outcome.page_num} loaded into empty frame"


def run_once(policy, reference_string: Sequence[int], frame_size: int,
             observer: Optional[Callable[[StepOutcome], None]] = None) -> RunResult:
    """Simulate a complete reference string under one policy"""
    policy = Policy.parse(policy)
    reference_string = tuple(reference_string)
    validate_run(reference_string, frame_size)

    algorithm = make_algorithm(policy, frame_size)
    faults = 0
    hits = 0
    eviction_log = []

    for i, page_num in enumerate(reference_string):
        fault_occurred, evicted_page, frame_idx = algorithm.access_page(
            page_num, reference_string[i + 1:])
        if fault_occurred:
            faults += 1
        else:
            hits += 1

        outcome = StepOutcome(
            step=i + 1,
            page_num=page_num,
            page_fault=fault_occurred,
            evicted_page=evicted_page,
            frame_idx=frame_idx,
            frames=algorithm.frames.snapshot(),
            hits=hits,
            faults=faults,
        )

        # Faults past the limit are counted but not logged
        if fault_occurred and len(eviction_log) < LOG_LIMIT:
            eviction_log.append(describe_fault(outcome, algorithm.log_tag))

        if observer is not None:
            observer(outcome)

    n = len(reference_string)
    return RunResult(
        policy=policy,
        frame_size=frame_size,
        reference_string=reference_string,
        faults=faults,
        hits=hits,
        fault_rate=faults / n if n > 0 else 0.0,
        hit_rate=hits / n if n > 0 else 0.0,
        eviction_log=tuple(eviction_log),
    )


def simulate(policy, reference_string: Sequence[int],
             frame_size: int) -> Tuple[RunResult, List[StepOutcome]]:
    """Run once and keep every step for display"""
    steps = []
    result = run_once(policy, reference_string, frame_size, observer=steps.append)
    return result, steps


@dataclass(frozen=True)
class ComparisonResult:
    fifo: RunResult
    lru: RunResult
    optimal: RunResult
    best: Policy

    @property
    def results(self) -> "OrderedDict[Policy, RunResult]":
        return OrderedDict([
            (Policy.FIFO, self.fifo),
            (Policy.LRU, self.lru),
            (Policy.OPTIMAL, self.optimal),
        ])

    @property
    def best_faults(self) -> int:
        return self.results[self.best].faults


def compare_all(reference_string: Sequence[int], frame_size: int) -> ComparisonResult:
    """Run every policy on the same string and frame count"""
    fifo = run_once(Policy.FIFO, reference_string, frame_size)
    lru = run_once(Policy.LRU, reference_string, frame_size)
    optimal = run_once(Policy.OPTIMAL, reference_string, frame_size)

    # First minimum wins: FIFO, then LRU, then Optimal
    best, min_faults = Policy.FIFO, fifo.faults
    if lru.faults < min_faults:
        best, min_faults = Policy.LRU, lru.faults
    if optimal.faults < min_faults:
        best, min_faults = Policy.OPTIMAL, optimal.faults

    return ComparisonResult(fifo=fifo, lru=lru, optimal=optimal, best=best)


@dataclass(frozen=True)
class SweepEntry:
    frame_size: int
    result: RunResult
    anomaly: bool

    @property
    def faults(self) -> int:
        return self.result.faults


@dataclass(frozen=True)
class SweepResult:
    """Fault counts of one policy across frame sizes 1..max_frame_size"""
    policy: Policy
    entries: Tuple[SweepEntry, ...]

    @property
    def max_faults(self) -> int:
        return max((entry.faults for entry in self.entries), default=0)

    @property
    def anomalies(self) -> List[SweepEntry]:
        return [entry for entry in self.entries if entry.anomaly]

    @property
    def has_anomaly(self) -> bool:
        return any(entry.anomaly for entry in self.entries)

    def faults(self) -> List[int]:
        return [entry.faults for entry in self.entries]

    def __iter__(self) -> Iterator[SweepEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def frame_sweep(reference_string: Sequence[int], policy,
                max_frame_size: int = SWEEP_MAX_FRAMES) -> SweepResult:
    """Run one policy for every frame size from 1 to max_frame_size"""
    policy = Policy.parse(policy)
    check_frame_size(max_frame_size)

    entries = []
    prev_faults = None
    for frame_size in range(1, max_frame_size + 1):
        result = run_once(policy, reference_string, frame_size)
        anomaly = False
        if policy is Policy.FIFO:
            anomaly = prev_faults is not None and result.faults > prev_faults
        entries.append(SweepEntry(frame_size, result, anomaly))
        prev_faults = result.faults

    return SweepResult(policy=policy, entries=tuple(entries))


def find_belady_anomalies(reference_string: Sequence[int],
                          max_frame_size: int = SWEEP_MAX_FRAMES) -> List[int]:
    """Frame sizes at which FIFO faults rose compared to one frame fewer"""
    sweep = frame_sweep(reference_string, Policy.FIFO, max_frame_size)
    return [entry.frame_size for entry in sweep.anomalies]
