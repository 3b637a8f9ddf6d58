"""Tests for the simulator front end: input helpers, rendering, saving, charts."""

import builtins

import pytest

import pagesim_demo
from pagesim import InvalidInput, Policy, compare_all, frame_sweep, run_once, simulate
from pagesim_demo import (
    bar_lengths,
    format_comparison,
    format_matrix,
    format_run,
    format_step,
    format_sweep,
    generate_random_reference_string,
    parse_reference_string,
    plot_comparison,
    plot_frame_sweep,
    read_int,
    save_results_to_file,
)


def feed_input(monkeypatch, answers):
    replies = iter(answers)
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(replies))


# -- Input helpers ------------------------------------------------------------


class TestReferenceStrings:
    """Verify random generation and parsing of reference strings."""

    def test_random_string_in_range(self) -> None:
        """Generated pages fall inside the requested range."""
        pages = generate_random_reference_string(50, 5, seed=7)
        assert len(pages) == 50
        assert all(0 <= p < 5 for p in pages)

    def test_random_string_seeded(self) -> None:
        """The same seed gives the same string."""
        assert (generate_random_reference_string(20, 8, seed=3)
                == generate_random_reference_string(20, 8, seed=3))

    @pytest.mark.parametrize("length, page_range", [(0, 5), (51, 5), (10, 1), (10, 21)])
    def test_random_string_limits(self, length, page_range) -> None:
        """Lengths outside 1..50 and ranges outside 2..20 are rejected."""
        with pytest.raises(InvalidInput):
            generate_random_reference_string(length, page_range)

    @pytest.mark.parametrize("text", ["1 2 3", "1,2,3", " 1, 2  3 \n"])
    def test_parse(self, text) -> None:
        """Spaces and commas both separate pages."""
        assert parse_reference_string(text) == [1, 2, 3]

    @pytest.mark.parametrize("text", ["", "1 x 3", "1 -2", " ".join(["1"] * 51)])
    def test_parse_rejects(self, text) -> None:
        """Empty, non-numeric, negative and over-long strings are rejected."""
        with pytest.raises(InvalidInput):
            parse_reference_string(text)

    def test_read_int_retries(self, monkeypatch, capsys) -> None:
        """Invalid answers are reported and asked again."""
        feed_input(monkeypatch, ["x", "9", "3"])
        assert read_int("frames: ", 1, 5) == 3
        assert capsys.readouterr().out.count("Invalid input") == 2


# -- Rendering ----------------------------------------------------------------


class TestFormatting:
    """Verify the text tables and traces."""

    def test_bar_lengths(self) -> None:
        """The largest value gets the full width."""
        assert bar_lengths([12, 9, 10]) == [20, 15, 16]
        assert bar_lengths([0, 0]) == [0, 0]
        assert bar_lengths([]) == []

    def test_format_step_fault(self) -> None:
        """A replacing fault shows the evicted page and running totals."""
        result, steps = simulate(Policy.FIFO, [1, 2, 3], 2)
        text = format_step(steps[2], 3)
        assert "Step 3/3  ->  Page: 3  |  FAULT  (evicted: page 1)" in text
        assert "Frames: [ 3  2  ]" in text
        assert "Hits: 0  Faults: 3  Hit Rate: 0.0%" in text

    def test_format_step_hit(self) -> None:
        """A hit shows empty frames as dashes."""
        result, steps = simulate(Policy.LRU, [4, 4], 2)
        text = format_step(steps[1], 2)
        assert "|  HIT" in text
        assert "evicted" not in text
        assert "Frames: [ 4  -  ]" in text
        assert "Hit Rate: 50.0%" in text

    def test_format_matrix(self) -> None:
        """Frames are listed top down with fault markers underneath."""
        result, steps = simulate(Policy.FIFO, [1, 2, 1], 2)
        lines = format_matrix(steps, 2).split("\n")
        assert lines[0] == "  Frame 2   -   2   2   "
        assert lines[1] == "  Frame 1   1   1   1   "
        assert lines[-1] == "           *   *       "

    def test_format_run(self, belady_string) -> None:
        """A run report names the algorithm and its totals."""
        result, steps = simulate(Policy.OPTIMAL, belady_string, 3)
        text = format_run(result, steps)
        assert text.startswith("--- Optimal ---")
        assert "Optimal Page Faults = 7" in text

    def test_format_comparison(self, textbook_string) -> None:
        """The comparison names the best algorithm and draws bars."""
        text = format_comparison(compare_all(textbook_string, 3))
        assert "Best Algorithm: Optimal (Least Faults = 9)" in text
        assert f"  {'FIFO':<10}  {'#' * 20}  15" in text
        assert f"  {'Optimal':<10}  {'#' * 12}  9" in text

    def test_format_sweep(self, belady_string) -> None:
        """The FIFO sweep marks Belady's Anomaly once."""
        text = format_sweep(frame_sweep(belady_string, Policy.FIFO))
        assert text.count("<- Belady's Anomaly!") == 1
        anomaly_line = [line for line in text.split("\n") if "Anomaly!" in line][0]
        assert anomaly_line.split()[:2] == ["4", "10"]


# -- Saving -------------------------------------------------------------------


class TestSaveResults:
    """Verify the plain text result record."""

    def test_appends_record(self, tmp_path, belady_string) -> None:
        """Each save appends a complete record."""
        path = tmp_path / "results.txt"
        result = run_once(Policy.FIFO, belady_string, 3)
        assert save_results_to_file(result, str(path))
        assert save_results_to_file(result, str(path))

        text = path.read_text()
        assert text.count("Algorithm  : FIFO") == 2
        assert "Frame Size : 3" in text
        assert "Page String: 1 2 3 4 1 2 5 1 2 3 4 5" in text
        assert "Page Faults: 9" in text
        assert "Fault Rate : 0.75" in text
        assert "  Step 4: page 4 replaced page 1" in text

    def test_failure_is_reported(self, tmp_path, capsys, belady_string) -> None:
        """An unwritable path is reported, not raised."""
        result = run_once(Policy.LRU, belady_string, 3)
        assert save_results_to_file(result, str(tmp_path)) is False
        assert "Could not open file" in capsys.readouterr().out


# -- Charts -------------------------------------------------------------------


class TestPlots:
    """Verify the matplotlib charts."""

    def test_plot_frame_sweep(self, tmp_path, belady_string) -> None:
        """The sweep chart plots every frame size and marks anomalies."""
        path = tmp_path / "sweep.png"
        fig = plot_frame_sweep(frame_sweep(belady_string, Policy.FIFO), str(path))
        ax = fig.axes[0]
        assert list(ax.lines[0].get_ydata()) == [12, 12, 9, 10, 5, 5, 5, 5, 5, 5]
        assert len(ax.collections) == 1
        assert path.exists()

    def test_plot_comparison(self, textbook_string) -> None:
        """The comparison chart has one bar per policy."""
        fig = plot_comparison(compare_all(textbook_string, 3))
        heights = [bar.get_height() for bar in fig.axes[0].patches]
        assert heights == [15, 12, 9]


# -- Interactive loop ---------------------------------------------------------


class TestInteractive:
    """Verify the menu loop end to end."""

    def test_compare_all(self, monkeypatch, capsys) -> None:
        """Menu option 4 prints the comparison table."""
        feed_input(monkeypatch, ["4", "1 2 3 4 1 2 5 1 2 3 4 5", "3", "0"])
        pagesim_demo.interactive_simulator()
        out = capsys.readouterr().out
        assert "Best Algorithm: Optimal (Least Faults = 7)" in out
        assert "Program Ended." in out

    def test_sweep(self, monkeypatch, capsys) -> None:
        """Menu option 5 prints the sweep with the anomaly marker."""
        feed_input(monkeypatch, ["5", "1 2 3 4 1 2 5 1 2 3 4 5", "1", "0"])
        pagesim_demo.interactive_simulator()
        assert "<- Belady's Anomaly!" in capsys.readouterr().out

    def test_single_run_and_save(self, monkeypatch, capsys, tmp_path) -> None:
        """A single run traces each step and can be saved."""
        monkeypatch.chdir(tmp_path)
        feed_input(monkeypatch, ["2", "1 2 1 3", "2", "0", "1", "0"])
        pagesim_demo.interactive_simulator()
        out = capsys.readouterr().out
        assert "Step 4/4  ->  Page: 3  |  FAULT  (evicted: page 2)" in out
        assert (tmp_path / "simulation_results.txt").exists()

    def test_reuses_existing_string(self, monkeypatch, capsys) -> None:
        """A generated string can be reused by the next option."""
        feed_input(monkeypatch, ["6", "10", "4", "1", "4", "1", "2", "0"])
        pagesim_demo.interactive_simulator()
        out = capsys.readouterr().out
        assert "Generated Reference String:" in out
        assert "Existing string:" in out
        assert "Best Algorithm:" in out

    def test_demo(self, monkeypatch, tmp_path, capsys) -> None:
        """The demo prints every algorithm and saves both charts."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(pagesim_demo.plt, "show", lambda: None)
        pagesim_demo.run_page_replacement_demo()
        out = capsys.readouterr().out
        assert "FIFO Page Faults = 15" in out
        assert "LRU Page Faults = 12" in out
        assert "Optimal Page Faults = 9" in out
        assert (tmp_path / "fifo_frame_sweep.png").exists()
        assert (tmp_path / "algorithm_comparison.png").exists()
