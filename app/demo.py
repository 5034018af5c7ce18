"""
Logical Minesweeper Solver - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st
from typing import Any, Dict, List, Optional, Sequence, Tuple

from logicsweeper import (
    Board,
    GenerationStatus,
    LogicalSolver,
    SolveOutcome,
    generate,
    hint,
    simulate_play,
)
from logicsweeper.engine import EXPLODED, HIDDEN, REVEALED_BOMB
from logicsweeper.hint import explain_hint

NUMBER_COLORS = {
    1: "#0000ff",
    2: "#008000",
    3: "#ff0000",
    4: "#000080",
    5: "#800000",
    6: "#008080",
    7: "#000000",
    8: "#808080",
}

METHOD_LABELS = {
    "first_move": "First Click",
    "basic": "Basic Rules",
    "subset": "Subset Logic",
    "globalCount": "Global Mine Count",
    "contradiction": "Proof by Contradiction",
    "linear": "Linear Algebra",
    "tank": "Region Enumeration",
    "godMode": "Ground Truth (no deduction available)",
}


def cell_style(width: int) -> Tuple[int, str]:
    """Cell size and font size scaled to the board width."""
    if width >= 30:
        return 14, "10px"
    if width >= 25:
        return 16, "11px"
    if width >= 16:
        return 20, "13px"
    return 26, "15px"


def render_board_html(
    board: Board,
    view: List[List[int]],
    flags: List[List[bool]],
    *,
    show_mines: bool = False,
    highlight_cell: Optional[Tuple[int, int]] = None,
    witnesses: Sequence[Tuple[int, int]] = (),
) -> str:
    """Render a view/flags snapshot of ``board`` as an HTML table."""
    cell_size, font_size = cell_style(board.width)
    witness_set = set(witnesses)

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for y in range(board.height):
        html += "<tr>"
        for x in range(board.width):
            v = view[y][x]
            if flags[y][x]:
                display, bg, color = "F", "#ffa500", "#ffffff"
            elif v == EXPLODED:
                display, bg, color = "M", "#ff0000", "#ffffff"
            elif v == REVEALED_BOMB or (v == HIDDEN and show_mines and board.is_mine(x, y)):
                display, bg, color = "M", "#ffcccc", "#ff0000"
            elif v == HIDDEN:
                display, bg, color = ".", "#c0c0c0", "#666666"
            else:
                display = str(v) if v else " "
                bg = "#f0f0f0" if v == 0 else "#ffffff"
                color = NUMBER_COLORS.get(v, "#000000")

            if highlight_cell == (x, y):
                border = "3px solid #ff0000"
            elif (x, y) in witness_set:
                border = "3px solid #1e90ff"
            else:
                border = "1px solid #999"

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {color};
                font-weight: bold;
                font-size: {font_size};
            ">{display}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def new_board(
    width: int, height: int, mines: int, no_guess: bool, seed: Optional[int]
) -> None:
    """Generate a board and open the first click in the center."""
    first_click = (width // 2, height // 2)
    with st.spinner("Generating board..."):
        result = generate(width, height, mines, first_click, no_guess, seed=seed)

    board = result.board
    assert board is not None
    board.reveal(*first_click)

    st.session_state.board = board
    st.session_state.first_click = first_click
    st.session_state.generation = result
    st.session_state.outcome = None
    st.session_state.hint = None
    st.session_state.solver = None
    st.session_state.steps_history = []
    st.session_state.replay_mode = False
    st.session_state.current_step = 0


def solve_current_board() -> None:
    """Replay the current board from its first click with step recording."""
    board: Board = st.session_state.board
    board.reset()
    solver = LogicalSolver(board, record_steps=True)
    outcome = simulate_play(board, st.session_state.first_click, solver=solver)

    st.session_state.solver = solver
    st.session_state.outcome = outcome
    st.session_state.hint = None
    st.session_state.steps_history = solver.steps_history
    st.session_state.replay_mode = False
    st.session_state.current_step = max(0, len(solver.steps_history) - 1)


def replay_controls(steps_history: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Navigation widgets; returns the selected step."""
    total_steps = len(steps_history)

    nav_col1, nav_col2, nav_col3, nav_col4 = st.columns([1, 1, 1, 2])
    with nav_col1:
        if st.button("⏮ First"):
            st.session_state.current_step = 0
            st.rerun()
    with nav_col2:
        if st.button("◀ Prev") and st.session_state.current_step > 0:
            st.session_state.current_step -= 1
            st.rerun()
    with nav_col3:
        if st.button("Next ▶") and st.session_state.current_step < total_steps - 1:
            st.session_state.current_step += 1
            st.rerun()
    with nav_col4:
        if st.button("Last ⏭"):
            st.session_state.current_step = total_steps - 1
            st.rerun()

    step_display = st.slider(
        "Step", 1, total_steps, st.session_state.current_step + 1, key="step_slider"
    )
    st.session_state.current_step = step_display - 1

    step = steps_history[st.session_state.current_step]
    action_label = "Reveal" if step["action"] == "reveal" else "Flag"
    method_label = METHOD_LABELS.get(step["method"], step["method"])
    x, y = step["cell"]
    st.info(
        f"**Step {step_display}/{total_steps}**: {action_label} cell ({x}, {y}) "
        f"with *{method_label}*"
    )
    return step


def main() -> None:
    st.set_page_config(
        page_title="Logical Minesweeper Solver",
        page_icon="💣",
        layout="wide",
    )

    st.title("Logical Minesweeper Solver")
    st.markdown("""
    Deduction-only solving and no-guess board generation: every move is
    proved from the clues, never guessed.
    """)

    # Sidebar configuration
    st.sidebar.header("Board Configuration")

    preset = st.sidebar.selectbox(
        "Difficulty Preset",
        ["Beginner (9x9, 10)", "Intermediate (16x16, 40)", "Expert (30x16, 99)", "Custom"],
    )
    if preset == "Beginner (9x9, 10)":
        width, height, mines = 9, 9, 10
    elif preset == "Intermediate (16x16, 40)":
        width, height, mines = 16, 16, 40
    elif preset == "Expert (30x16, 99)":
        width, height, mines = 30, 16, 99
    else:
        width = st.sidebar.slider("Width", 5, 30, 16)
        height = st.sidebar.slider("Height", 5, 30, 16)
        max_mines = max(2, width * height - 25)
        mines = st.sidebar.slider("Mines", 1, max_mines, min(40, max_mines))

    no_guess = st.sidebar.checkbox(
        "No-guess board",
        value=True,
        help="Retry layouts until the logical solver clears the board from the first click.",
    )
    seed_text = st.sidebar.text_input("Seed (optional)", "")
    seed = int(seed_text) if seed_text.strip().lstrip("-").isdigit() else None

    current_settings = (width, height, mines, no_guess, seed)
    if st.session_state.get("prev_settings") != current_settings:
        new_board(width, height, mines, no_guess, seed)
        st.session_state.prev_settings = current_settings

    board: Board = st.session_state.board
    col1, col2 = st.columns([3, 1] if width >= 16 else [2, 1])

    with col1:
        st.subheader("Board")
        btn_col1, btn_col2, btn_col3 = st.columns(3)
        with btn_col1:
            if st.button("New Board", type="primary"):
                new_board(width, height, mines, no_guess, seed)
                st.rerun()
        with btn_col2:
            if st.button("Hint"):
                st.session_state.hint = hint(board)
                st.rerun()
        with btn_col3:
            if st.button("Solve"):
                solve_current_board()
                st.rerun()

        generation = st.session_state.generation
        if generation.status is GenerationStatus.NOT_GUARANTEED_LOGICAL:
            st.warning(
                f"No logical layout found in {generation.attempts} attempts; "
                "this board may need guessing."
            )

        steps_history = st.session_state.steps_history
        highlight: Optional[Tuple[int, int]] = None
        witnesses: Sequence[Tuple[int, int]] = ()
        view, flags = board.view, board.flags

        if st.session_state.outcome is not None and steps_history:
            st.session_state.replay_mode = st.checkbox(
                "Step-by-Step Replay Mode", value=st.session_state.replay_mode
            )
            if st.session_state.replay_mode:
                step = replay_controls(steps_history)
                view, flags = step["view_snapshot"], step["flags_snapshot"]
                highlight = step["cell"]

        current_hint = st.session_state.hint
        if current_hint is not None:
            highlight = current_hint.cell
            witnesses = current_hint.witnesses
            x, y = current_hint.cell
            st.info(
                f"Cell ({x}, {y}) is **{current_hint.kind}** "
                f"({METHOD_LABELS.get(current_hint.strategy, current_hint.strategy)}). "
                "Blue borders mark the clues that prove it."
            )
            for note in explain_hint(board, current_hint):
                cx, cy = note.cell
                st.markdown(
                    f"- Clue **{note.value}** at ({cx}, {cy}): {note.flags} mine(s) known, "
                    f"{note.remaining} left among {note.hidden} hidden cell(s)"
                )

        html = render_board_html(
            board,
            view,
            flags,
            show_mines=st.session_state.outcome is not None,
            highlight_cell=highlight,
            witnesses=witnesses,
        )
        st.markdown(html, unsafe_allow_html=True)

        outcome = st.session_state.outcome
        if outcome is SolveOutcome.SOLVED:
            st.success("Solved by deduction alone.")
        elif outcome is SolveOutcome.STUCK:
            st.error("Stuck: no cell can be proved from here.")
        elif outcome is SolveOutcome.INCONSISTENT:
            st.error("The flags contradict the clues.")

    with col2:
        st.subheader("Solver Statistics")
        solver: Optional[LogicalSolver] = st.session_state.solver
        st.metric("Generation attempts", generation.attempts)
        if solver is not None:
            summary = solver.summary()
            st.metric("Cells revealed", summary["revealed_cells_count"])
            st.metric("Mines flagged", summary["flags_count"])
            st.markdown("---")
            st.markdown("**Cells decided by strategy**")
            for name, count in summary["inferred"].items():
                attempts = summary["attempted"][name]
                st.markdown(f"- {METHOD_LABELS[name]}: {count} ({attempts} passes)")
        else:
            st.info("Press 'Solve' to run the solver, or 'Hint' for a single move.")


if __name__ == "__main__":
    main()
