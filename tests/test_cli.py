import json
from pathlib import Path

import pytest

from logicsweeper.cli import build_parser, main
from logicsweeper.persistence import DEFAULT_FILENAME


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["generate", "9", "9", "10"])
    assert (args.width, args.height, args.bombs) == (9, 9, 10)
    assert args.first_click is None
    assert not args.no_guess
    assert args.max_attempts == 10_000


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_generate_and_save(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    code = main([
        "generate", "8", "8", "8",
        "--no-guess", "--seed", "1", "--no-color", "--save", str(tmp_path),
    ])

    assert code == 0
    out = capsys.readouterr().out
    assert "Status: ok" in out
    assert "\033" not in out

    data = json.loads((tmp_path / DEFAULT_FILENAME).read_text(encoding="utf-8"))
    assert data["noGuessMode"] is True
    assert len(data["minePositions"]) == 8


def test_solve_saved_board(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    main(["generate", "8", "8", "8", "--no-guess", "--seed", "1", "--save", str(tmp_path)])
    capsys.readouterr()

    code = main(["solve", str(tmp_path / DEFAULT_FILENAME), "--no-color"])

    assert code == 0
    assert "Outcome: solved" in capsys.readouterr().out


def test_unsolvable_board_exits_with_two(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = tmp_path / "stuck.json"
    path.write_text(
        json.dumps({
            "width": 4,
            "height": 4,
            "bombCount": 4,
            "noGuessMode": False,
            "minePositions": [[0, 0], [3, 1], [1, 2], [2, 3]],
        }),
        encoding="utf-8",
    )

    code = main(["solve", str(path), "--first-click", "1", "0", "--no-color"])

    assert code == 2
    assert "Outcome: stuck" in capsys.readouterr().out


def test_invalid_params_exit_with_one() -> None:
    assert main(["generate", "3", "3", "5"]) == 1


def test_missing_file_exits_with_one(tmp_path: Path) -> None:
    assert main(["solve", str(tmp_path / "nope.json")]) == 1


def test_malformed_json_exits_with_one(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    assert main(["solve", str(path)]) == 1


def test_first_click_off_the_board_exits_with_one(tmp_path: Path) -> None:
    main(["generate", "8", "8", "8", "--seed", "1", "--save", str(tmp_path)])
    code = main(["solve", str(tmp_path / DEFAULT_FILENAME), "--first-click", "9", "0"])
    assert code == 1
