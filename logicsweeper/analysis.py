"""Analysis and benchmarking tools for the logical solver and the generator."""

import random
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .config import GeneratorConfig, SolverConfig
from .errors import GenerationStatus, SolveOutcome
from .generator import generate
from .solver import STRATEGY_ORDER, LogicalSolver, simulate_play
from .utils import Cell

LEVELS: Dict[str, Tuple[int, int, int]] = {
    "beginner": (9, 9, 10),
    "intermediate": (16, 16, 40),
    "expert": (30, 16, 99),
}


def default_first_click(width: int, height: int) -> Cell:
    return width // 2, height // 2


def run_solver_single_test(
    width: int,
    height: int,
    bomb_count: int,
    *,
    no_guess: bool = False,
    rng: Optional[random.Random] = None,
    show_boards: bool = False,
    solver_config: Optional[SolverConfig] = None,
) -> Dict[str, object]:
    """
    Generate one board and play it from the center with deduction only.

    Args:
        width: Board width.
        height: Board height.
        bomb_count: Total number of mines on the board.
        no_guess: Generate a no-guess board instead of a plain random one.
        rng: Random source for the layout.
        show_boards: If True, print the layout and the final solver view.
        solver_config: Strategy limits.

    Returns:
        The solver's summary (see ``LogicalSolver.summary``) plus
        "outcome" (a ``SolveOutcome`` value string).
    """
    first_click = default_first_click(width, height)
    result = generate(
        width, height, bomb_count, first_click, no_guess,
        rng=rng, solver_config=solver_config,
    )
    board = result.board
    if board is None:
        raise RuntimeError("Generation returned no board.")

    solver = LogicalSolver(board, solver_config)
    outcome = simulate_play(board, first_click, solver_config, solver=solver)

    if show_boards:
        print("Underlying board (mines visible):")
        print(board.format_board(reveal_all=True))
        print()
        print("Solver view (hidden cells shown as '.'):")
        print(board.format_board())
        print()
        print(f"Finished with outcome {outcome.value}.")

    out = dict(solver.summary())
    del out["steps_history"]
    out["outcome"] = outcome.value
    return out


def run_solver_many_tests(
    width: int,
    height: int,
    bomb_count: int,
    runs: int,
    *,
    no_guess: bool = False,
    seed: Optional[int] = None,
    solver_config: Optional[SolverConfig] = None,
) -> Dict[str, float]:
    """
    Play many independent boards and average the solver counters.

    Returns:
        - solved_rate, stuck_rate
        - avg_revealed_cells_count, avg_flags_count, avg_passes_count
        - avg_inferred_<strategy> and avg_attempted_<strategy>
        - <strategy>_infer_per_attempt (pooled over all runs)
    """
    if runs < 1:
        raise ValueError("runs must be positive.")

    rng = random.Random(seed)
    solved = np.zeros(runs, dtype=bool)
    revealed = np.zeros(runs)
    flags = np.zeros(runs)
    passes = np.zeros(runs)
    inferred = np.zeros((runs, len(STRATEGY_ORDER)))
    attempted = np.zeros((runs, len(STRATEGY_ORDER)))

    for i in range(runs):
        payload = run_solver_single_test(
            width, height, bomb_count,
            no_guess=no_guess, rng=rng, solver_config=solver_config,
        )
        solved[i] = payload["outcome"] == SolveOutcome.SOLVED.value
        revealed[i] = float(payload["revealed_cells_count"])  # type: ignore[arg-type]
        flags[i] = float(payload["flags_count"])  # type: ignore[arg-type]
        passes[i] = float(payload["passes_count"])  # type: ignore[arg-type]
        inf = payload["inferred"]
        att = payload["attempted"]
        for j, name in enumerate(STRATEGY_ORDER):
            inferred[i, j] = inf[name]  # type: ignore[index]
            attempted[i, j] = att[name]  # type: ignore[index]

    out: Dict[str, float] = {
        "solved_rate": float(solved.mean()),
        "stuck_rate": float(1.0 - solved.mean()),
        "avg_revealed_cells_count": float(revealed.mean()),
        "avg_flags_count": float(flags.mean()),
        "avg_passes_count": float(passes.mean()),
    }

    total_inferred = inferred.sum(axis=0)
    total_attempted = attempted.sum(axis=0)
    for j, name in enumerate(STRATEGY_ORDER):
        out[f"avg_inferred_{name}"] = float(inferred[:, j].mean())
        out[f"avg_attempted_{name}"] = float(attempted[:, j].mean())
        out[f"{name}_infer_per_attempt"] = (
            float(total_inferred[j] / total_attempted[j])
            if total_attempted[j] > 0
            else 0.0
        )

    return out


def run_generator_many_tests(
    width: int,
    height: int,
    bomb_count: int,
    runs: int,
    *,
    seed: Optional[int] = None,
    config: Optional[GeneratorConfig] = None,
    solver_config: Optional[SolverConfig] = None,
) -> Dict[str, float]:
    """
    Generate many no-guess boards and report how hard they were to find.

    Returns:
        avg_attempts, median_attempts, max_attempts and guaranteed_rate
        (fraction of runs that found a logical board within budget).
    """
    if runs < 1:
        raise ValueError("runs must be positive.")

    rng = random.Random(seed)
    first_click = default_first_click(width, height)
    attempts = np.zeros(runs)
    guaranteed = np.zeros(runs, dtype=bool)

    for i in range(runs):
        result = generate(
            width, height, bomb_count, first_click, True,
            config=config, solver_config=solver_config, rng=rng,
        )
        attempts[i] = result.attempts
        guaranteed[i] = result.status is GenerationStatus.OK

    return {
        "avg_attempts": float(attempts.mean()),
        "median_attempts": float(np.median(attempts)),
        "max_attempts": float(attempts.max()),
        "guaranteed_rate": float(guaranteed.mean()),
    }


def _bar_chart(
    level_names: List[str],
    series: Dict[str, List[float]],
    ylabel: str,
    title: str,
    ylim: Optional[Tuple[float, float]] = None,
) -> None:
    x = np.arange(len(level_names))
    bar_w = 0.8 / max(1, len(series))
    offsets = (np.arange(len(series)) - (len(series) - 1) / 2.0) * bar_w

    plt.figure()  # type: ignore[misc]
    for offset, (label, values) in zip(offsets, series.items()):
        plt.bar(x + offset, values, width=bar_w, label=label)  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel(ylabel)  # type: ignore[misc]
    if ylim is not None:
        plt.ylim(*ylim)  # type: ignore[misc]
    plt.title(title)  # type: ignore[misc]
    if len(series) > 1:
        plt.legend()  # type: ignore[misc]
    plt.tight_layout()


def run_level_analysis(
    runs: int,
    *,
    levels: Optional[Dict[str, Tuple[int, int, int]]] = None,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Benchmark the solver and the generator on standard difficulty levels.

    For each level, plain random boards measure how far pure deduction
    gets, and no-guess generation measures how many layouts are tried.
    Results are plotted as bar charts.

    Args:
        runs: Number of boards per level (for each of the two benchmarks).
        levels: Mapping name -> (width, height, bombs); defaults to
            beginner / intermediate / expert.
        seed: Seed for reproducible runs.
        show: If True, display the figures; otherwise they are closed.

    Returns:
        Mapping from level name to the merged statistics of
        ``run_solver_many_tests`` and ``run_generator_many_tests``.
    """
    levels = levels or LEVELS
    results: Dict[str, Dict[str, float]] = {}
    for level, (w, h, m) in levels.items():
        stats = run_solver_many_tests(w, h, m, runs, seed=seed)
        stats.update(run_generator_many_tests(w, h, m, runs, seed=seed))
        results[level] = stats

    level_names = list(levels.keys())

    # 1) Cells decided by each strategy
    _bar_chart(
        level_names,
        {name: [results[n][f"avg_inferred_{name}"] for n in level_names]
         for name in STRATEGY_ORDER},
        "Average cells decided",
        "Cells decided by strategy (per random board)",
    )

    # 2) How often pure deduction clears a random board
    _bar_chart(
        level_names,
        {"solved": [results[n]["solved_rate"] for n in level_names]},
        "Solved rate",
        "Random boards cleared without guessing",
        ylim=(0.0, 1.0),
    )

    # 3) Generator effort
    _bar_chart(
        level_names,
        {
            "mean": [results[n]["avg_attempts"] for n in level_names],
            "median": [results[n]["median_attempts"] for n in level_names],
        },
        "Attempts",
        "Layouts tried per no-guess board",
    )

    if show:
        plt.show()  # type: ignore[misc]
    else:
        plt.close("all")

    return results


def summarize_strategy_mix(
    results: Dict[str, Dict[str, float]], *, level: str = "expert"
) -> Dict[str, float]:
    """
    Share of decided cells per strategy for one level.

    Returns:
        ``<strategy>_frac`` for every strategy plus ``total_inferred``.

    Raises:
        KeyError: If the level or a counter is missing.
        ZeroDivisionError: If no strategy decided any cell.
    """
    if level not in results:
        raise KeyError(f"Level {level!r} not found in results.")
    m = results[level]

    counts = np.array([float(m[f"avg_inferred_{name}"]) for name in STRATEGY_ORDER])
    total = float(counts.sum())
    if total == 0.0:
        raise ZeroDivisionError("No cells were decided; cannot compute fractions.")

    out = {f"{name}_frac": float(c / total) for name, c in zip(STRATEGY_ORDER, counts)}
    out["total_inferred"] = total
    return out

