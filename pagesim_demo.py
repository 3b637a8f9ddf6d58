#!/usr/bin/env python3
"""
Page Replacement Simulator - demos and interactive front end
Renders traces, comparison and sweep tables, charts and saved result records
"""

import random
import re
import time
from typing import List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from pagesim import (
    MAX_FRAMES,
    MAX_REFERENCES,
    ComparisonResult,
    InvalidInput,
    Policy,
    RunResult,
    StepOutcome,
    SweepResult,
    compare_all,
    frame_sweep,
    run_once,
    simulate,
)

RESULTS_FILE = "simulation_results.txt"
BAR_WIDTH = 20

DESCRIPTIONS = {
    Policy.FIFO: "First-In First-Out: Replaces the page that was loaded earliest.",
    Policy.LRU: "Least Recently Used: Replaces the page that has not been used for the longest time.",
    Policy.OPTIMAL: "Optimal: Replaces the page that will not be used for the longest time in the future.",
}


def generate_random_reference_string(length: int, page_range: int,
                                     seed: Optional[int] = None) -> List[int]:
    """Generate a reference string of pages in [0, page_range)"""
    if not 1 <= length <= MAX_REFERENCES:
        raise InvalidInput(f"Length must be between 1 and {MAX_REFERENCES}")
    if not 2 <= page_range <= MAX_FRAMES:
        raise InvalidInput(f"Page range must be between 2 and {MAX_FRAMES}")

    rng = random.Random(seed)
    return [rng.randrange(page_range) for _ in range(length)]


def parse_reference_string(text: str) -> List[int]:
    """Parse space or comma separated page numbers"""
    tokens = [t for t in re.split(r"[\s,]+", text.strip()) if t]
    try:
        pages = [int(t) for t in tokens]
    except ValueError:
        raise InvalidInput(f"Not a list of page numbers: {text!r}") from None

    if not 1 <= len(pages) <= MAX_REFERENCES:
        raise InvalidInput(f"Reference string must have 1 to {MAX_REFERENCES} pages, got {len(pages)}")
    if any(p < 0 for p in pages):
        raise InvalidInput("Page numbers must be non-negative")
    return pages


def bar_lengths(values: Sequence[int], width: int = BAR_WIDTH) -> List[int]:
    """Scale values so the largest one gets a bar of `width` characters"""
    counts = np.asarray(values, dtype=int)
    if counts.size == 0 or counts.max() == 0:
        return [0] * counts.size
    return (counts * width // counts.max()).tolist()


def format_frames(frames: Sequence[Optional[int]]) -> str:
    return "[ " + "".join("-  " if p is None else f"{p}  " for p in frames) + "]"


def format_step(outcome: StepOutcome, n: int) -> str:
    """One line of live trace, in the style of the step-by-step mode"""
    line = f"  Step {outcome.step}/{n}  ->  Page: {outcome.page_num}  |  "
    line += "FAULT" if outcome.page_fault else "HIT"
    if outcome.evicted_page is not None:
        line += f"  (evicted: page {outcome.evicted_page})"

    total = outcome.hits + outcome.faults
    hit_rate = 100.0 * outcome.hits / total if total else 0.0
    line += (f"\n  Frames: {format_frames(outcome.frames)}  Hits: {outcome.hits}  "
             f"Faults: {outcome.faults}  Hit Rate: {hit_rate:.1f}%")
    return line


def format_matrix(steps: Sequence[StepOutcome], frame_size: int) -> str:
    """Frame contents per step, top frame first, '*' under every fault"""
    lines = []
    for i in range(frame_size - 1, -1, -1):
        cells = "".join(f"{'-' if s.frames[i] is None else s.frames[i]:<4}" for s in steps)
        lines.append(f"  Frame {i + 1}   {cells}")
    markers = "".join(f"{'*' if s.page_fault else ' ':<4}" for s in steps)
    lines.append("")
    lines.append(f"           {markers}")
    return "\n".join(lines)


def format_run(result: RunResult, steps: Sequence[StepOutcome]) -> str:
    name = result.policy.value
    pages = "".join(f"{p:<4}" for p in result.reference_string)
    return "\n".join([
        f"--- {name} ---",
        DESCRIPTIONS[result.policy],
        "",
        f"  Reference String: {pages}",
        "",
        format_matrix(steps, result.frame_size),
        "",
        f"  {name} Page Faults = {result.faults}",
        f"  Hit Rate = {result.hit_rate:.2f}",
        f"  Fault Rate = {result.fault_rate:.2f}",
    ])


def format_comparison(comparison: ComparisonResult) -> str:
    results = comparison.results
    rule = "  " + "-" * 43
    lines = [
        rule,
        f"  {'Algorithm':<10}  {'Faults':<8}  {'Fault Rate':<12}  {'Hit Rate':<10}",
        rule,
    ]
    for policy, r in results.items():
        lines.append(f"  {policy.value:<10}  {r.faults:<8}  {r.fault_rate:<12.2f}  {r.hit_rate:<10.2f}")
    lines.append(rule)
    lines.append(f"  Best Algorithm: {comparison.best.value} (Least Faults = {comparison.best_faults})")
    lines.append("")
    lines.append("  Fault Comparison (# = faults):")

    bars = bar_lengths([r.faults for r in results.values()])
    for (policy, r), bar in zip(results.items(), bars):
        lines.append(f"  {policy.value:<10}  {'#' * bar}  {r.faults}")
    return "\n".join(lines)


def format_sweep(sweep: SweepResult) -> str:
    lines = [
        f"--- Frame Size Sweep (frames 1 to {len(sweep)}) ---",
        "",
        f"  {'Frames':<8}  {'Faults':<8}  {'Fault Rate':<12}  Bar",
        "  " + "-" * 47,
    ]
    bars = bar_lengths(sweep.faults())
    for entry, bar in zip(sweep, bars):
        line = f"  {entry.frame_size:<8}  {entry.faults:<8}  {entry.result.fault_rate:<12.2f}  {'#' * bar}"
        if entry.anomaly:
            line += "  <- Belady's Anomaly!"
        lines.append(line)
    lines.append("")
    lines.append("  Note: Belady's Anomaly = more frames causes MORE faults (FIFO only)")
    return "\n".join(lines)


def save_results_to_file(result: RunResult, path: str = RESULTS_FILE) -> bool:
    """Append a plain text record of a run; report failures instead of raising"""
    record = [
        "",
        "=" * 40,
        f"Algorithm  : {result.policy.value}",
        f"Date/Time  : {time.ctime()}",
        f"Frame Size : {result.frame_size}",
        "Page String: " + " ".join(str(p) for p in result.reference_string),
        f"Page Faults: {result.faults}",
        f"Fault Rate : {result.fault_rate:.2f}",
        f"Hit Rate   : {result.hit_rate:.2f}",
        "Eviction Log:",
    ]
    record.extend(f"  {entry}" for entry in result.eviction_log)
    record.append("=" * 40)

    try:
        with open(path, "a") as f:
            f.write("\n".join(record) + "\n")
    except OSError as e:
        print(f"  Could not open file: {e}")
        return False

    print(f"  Results saved to {path}")
    return True


def plot_frame_sweep(sweep: SweepResult, filename: Optional[str] = None):
    """Faults against frame count, anomalies marked in red"""
    frames = [entry.frame_size for entry in sweep]
    faults = sweep.faults()

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(frames, faults, marker='o', label=sweep.policy.value)

    anomalies = sweep.anomalies
    if anomalies:
        ax.scatter([e.frame_size for e in anomalies], [e.faults for e in anomalies],
                   color='red', s=120, zorder=3, label="Belady's Anomaly")

    ax.set_title(f'{sweep.policy.value} Page Faults vs Number of Frames')
    ax.set_xlabel('Frames')
    ax.set_ylabel('Page Faults')
    ax.set_xticks(frames)
    ax.grid(alpha=0.3)
    ax.legend()

    if filename:
        fig.savefig(filename, dpi=150, bbox_inches='tight')
    return fig


def plot_comparison(comparison: ComparisonResult, filename: Optional[str] = None):
    """Bar chart of faults per policy"""
    names = [policy.value for policy in comparison.results]
    faults = [r.faults for r in comparison.results.values()]

    fig, ax = plt.subplots(figsize=(6, 4))
    colors = ['tab:green' if policy is comparison.best else 'tab:blue'
              for policy in comparison.results]
    bars = ax.bar(names, faults, color=colors)

    for bar in bars:
        height = bar.get_height()
        ax.text(bar.get_x() + bar.get_width() / 2., height,
                f'{int(height)}', ha='center', va='bottom', fontsize=9)

    ax.set_title(f'Page Faults with {comparison.fifo.frame_size} Frames')
    ax.set_ylabel('Page Faults')
    ax.grid(axis='y', alpha=0.3)

    if filename:
        fig.savefig(filename, dpi=150, bbox_inches='tight')
    return fig


def read_int(prompt: str, low: int, high: int) -> int:
    """Prompt until the user enters an integer in [low, high]"""
    while True:
        try:
            value = int(input(prompt).strip())
            if low <= value <= high:
                return value
        except ValueError:
            pass
        print(f"  Invalid input. Enter a number between {low} and {high}.")


def read_reference_string() -> List[int]:
    while True:
        try:
            return parse_reference_string(input("Enter page reference string:\n> "))
        except InvalidInput as e:
            print(f"  {e}")


def run_single(policy: Policy, pages: List[int], frame_size: int, step_mode: bool):
    steps = []

    def show(outcome: StepOutcome):
        steps.append(outcome)
        print(format_step(outcome, len(pages)))
        if step_mode:
            input("  [Press ENTER to continue...]")

    print(f"\n--- {policy.value} ---")
    result = run_once(policy, pages, frame_size, observer=show)
    print()
    print(format_run(result, steps))

    if read_int("\nSave results to file? (1=Yes / 0=No): ", 0, 1):
        save_results_to_file(result)


def interactive_simulator():
    """Interactive menu for the simulator"""
    pages: List[int] = []

    while True:
        print("\n" + "=" * 37)
        print("   PAGE REPLACEMENT SIMULATOR")
        print("=" * 37)
        print("1. FIFO\n2. LRU\n3. Optimal\n4. Compare All")
        print("5. Frame Sweep (Belady's Anomaly Detector)")
        print("6. Generate Random Reference String")
        print("-" * 37)

        try:
            choice = read_int("Enter choice (1-6): ", 1, 6)

            if choice == 6:
                length = read_int(f"  Enter number of pages to generate (1-{MAX_REFERENCES}): ",
                                  1, MAX_REFERENCES)
                page_range = read_int("  Enter page range (pages will be 0 to N-1): ", 2, MAX_FRAMES)
                pages = generate_random_reference_string(length, page_range)
                print(f"  Generated Reference String: {' '.join(map(str, pages))}")
            else:
                if pages:
                    print(f"\nExisting string: {' '.join(map(str, pages))}")
                    if not read_int("Use existing string? (1=Yes / 0=Enter new): ", 0, 1):
                        pages = []
                if not pages:
                    pages = read_reference_string()

                if choice <= 3:
                    frame_size = read_int(f"Enter number of frames (1-{MAX_FRAMES}): ", 1, MAX_FRAMES)
                    step_mode = bool(read_int("Step-by-step mode? (1=Yes / 0=No): ", 0, 1))
                    run_single(Policy.parse(choice), pages, frame_size, step_mode)
                elif choice == 4:
                    frame_size = read_int(f"Enter number of frames (1-{MAX_FRAMES}): ", 1, MAX_FRAMES)
                    print(f"\n  Reference String: {' '.join(map(str, pages))}\n")
                    print(format_comparison(compare_all(pages, frame_size)))
                else:
                    print("\nSelect Algorithm for Sweep:\n1. FIFO\n2. LRU\n3. Optimal")
                    policy = Policy.parse(read_int("Choice: ", 1, 3))
                    print()
                    print(format_sweep(frame_sweep(pages, policy)))

            if not read_int("\nRun again? (1=Yes / 0=Exit): ", 0, 1):
                break
        except (KeyboardInterrupt, EOFError):
            break

    print("\nProgram Ended.")


def run_page_replacement_demo():
    """Demonstrate page replacement algorithms on the classic strings"""
    print("=== Page Replacement Algorithms Demo ===")

    reference_string = [7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3, 2, 1, 2, 0, 1, 7, 0, 1]
    capacity = 3

    print(f"Reference String: {reference_string}")
    print(f"Number of Frames: {capacity}")
    print("-" * 60)

    for policy in Policy:
        result, steps = simulate(policy, reference_string, capacity)
        print()
        print(format_run(result, steps))

    print("\n=== Algorithm Comparison ===")
    comparison = compare_all(reference_string, capacity)
    print(format_comparison(comparison))

    # Belady's Anomaly: FIFO does worse with 4 frames than with 3
    belady = [1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5]
    print(f"\n=== Belady's Anomaly ===\nReference String: {belady}\n")
    sweep = frame_sweep(belady, Policy.FIFO)
    print(format_sweep(sweep))

    plot_frame_sweep(sweep, 'fifo_frame_sweep.png')
    plot_comparison(comparison, 'algorithm_comparison.png')
    print("\nGraphs saved as 'fifo_frame_sweep.png' and 'algorithm_comparison.png'")
    plt.show()


if __name__ == "__main__":
    run_page_replacement_demo()

    # Uncomment for interactive mode
    # interactive_simulator()
