"""
Quickstart example for the Logical Minesweeper Solver.

This script demonstrates generating a no-guess board, asking for a hint,
solving, and saving the layout.
"""

from logicsweeper import (
    Board,
    LogicalSolver,
    generate,
    hint,
    run_solver_many_tests,
    save_board,
    simulate_play,
    solve,
)


def main():
    print("=" * 60)
    print("Logical Minesweeper Solver - Quickstart Example")
    print("=" * 60)

    # Example 1: Generate a no-guess board
    print("\n1. Generating a no-guess Intermediate board (16x16, 40 mines)...")
    print("-" * 60)

    first_click = (8, 8)
    result = generate(16, 16, 40, first_click, no_guess=True, seed=42)
    board = result.board
    print(f"Status: {result.status.value} after {result.attempts} attempt(s)")
    print(board.format_board(reveal_all=True))

    # Example 2: Open the first click and ask for a hint
    print("\n2. First click and a hint:")
    print("-" * 60)
    board.reveal(*first_click)
    print(board.format_board())
    h = hint(board)
    if h is not None:
        print(f"Hint: cell {h.cell} is {h.kind} ({h.strategy}), proved by {list(h.witnesses)}")

    # Example 3: Solve the board from the first click, counting strategies
    print("\n3. Solving from the first click...")
    print("-" * 60)
    board.reset()
    solver = LogicalSolver(board)
    outcome = simulate_play(board, first_click, solver=solver)
    print(f"Outcome: {outcome.value}")
    for name, count in solver.inferred.items():
        print(f"  {name:14s} {count:4d} cell(s)")

    # Example 4: A hand-built position
    print("\n4. A hand-built 3x3 position (mine in the center):")
    print("-" * 60)
    small = Board.from_mines(3, 3, [(1, 1)])
    for x, y in [(0, 0), (1, 0), (2, 0), (0, 1), (2, 1), (0, 2), (1, 2), (2, 2)]:
        small.reveal(x, y)
    print(f"Outcome: {solve(small).value}")
    print(small.format_board())

    # Example 5: Save the generated layout for replay
    path = save_board(board, "data", no_guess=True)
    print(f"\n5. Layout saved to {path}")

    # Example 6: How far pure deduction gets on random boards
    print("\n6. Solved rate on 20 random Beginner boards...")
    print("-" * 60)
    stats = run_solver_many_tests(9, 9, 10, runs=20, seed=0)
    print(f"Solved without guessing: {stats['solved_rate']*100:.1f}%")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
