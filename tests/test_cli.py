import pytest

from sortstepper.cli import format_values, main


def lines(capsys):
    return capsys.readouterr().out.strip().splitlines()


def test_headless_bubble(capsys, tmp_path):
    code = main(["--headless", "--values", "5,3,1", "--delay", "0",
                 "--config", str(tmp_path / "none.json")])
    assert code == 0
    out = lines(capsys)
    assert out[0] == "Bubble Sort: [5, 3, 1]"
    assert out[1].endswith("[3, 5, 1]")
    assert out[2].endswith("[3, 1, 5]")
    assert out[3].endswith("[1, 3, 5]")
    assert out[-1] == "completed: [1, 3, 5] after 3 steps"


def test_headless_empty_input(capsys, tmp_path):
    main(["--headless", "--algorithm", "merge", "--values", "a,b", "--delay", "0",
          "--config", str(tmp_path / "none.json")])
    assert lines(capsys)[-1] == "completed: [] after 0 steps"


def test_headless_custom_sorter(capsys, tmp_path, example_sorter_path):
    main(["--headless", "--load-sorter", example_sorter_path, "--algorithm", "custom_0",
          "--values", "3,2,1", "--delay", "0", "--config", str(tmp_path / "none.json")])
    out = lines(capsys)
    assert out[0].startswith("Stooge Sort")
    assert out[-1].startswith("completed: [1, 2, 3]")


def test_unknown_algorithm_exits(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--headless", "--algorithm", "bogo"])
    assert exc.value.code == 2
    assert "unknown algorithm" in capsys.readouterr().err


def test_negative_delay_rejected(tmp_path):
    with pytest.raises(SystemExit):
        main(["--headless", "--delay", "-5", "--config", str(tmp_path / "none.json")])


def test_format_values():
    assert format_values([1, 2.5, -3.0]) == "[1, 2.5, -3]"


def test_window_mode_preselects_algorithm(monkeypatch, tmp_path):
    import sortstepper.visualizer as visualizer

    seen = {}
    monkeypatch.setattr(visualizer, "run_window",
                        lambda settings, controller, msg="": seen.update(ctl=controller))
    assert main(["--algorithm", "quick", "--values", "3,1,2",
                 "--config", str(tmp_path / "none.json")]) == 0
    ctl = seen["ctl"]
    assert ctl.selected == "quick"
    assert ctl.values == (3, 1, 2)
    assert not ctl.sorting
