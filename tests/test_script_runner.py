import io

import pytest

from imagelab.cli.script_runner import ScriptRunner, main

GRAY_PPM = "P3\n2 2\n255\n100 100 100 150 150 150 200 200 200 50 50 50\n"


@pytest.fixture
def gray_ppm(tmp_path):
    path = tmp_path / "gray.ppm"
    path.write_text(GRAY_PPM)
    return path


@pytest.fixture
def runner():
    return ScriptRunner(out=io.StringIO())


def output(runner):
    return runner.out.getvalue()


def test_script_end_to_end(tmp_path, gray_ppm, runner):
    result = tmp_path / "blurred.ppm"
    script = io.StringIO(
        "# blur a tiny image\n"
        "\n"
        f"load {gray_ppm} gray\n"
        "blur gray gray-blur\n"
        f"save {result} gray-blur\n"
    )
    runner.run(script)
    assert result.read_text().split()[4:] == ["125"] * 3 + ["125"] * 3 + ["150"] * 3 + ["100"] * 3
    assert output(runner).count("Executed command = true") == 3
    assert "Processing Command = blur gray gray-blur" in output(runner)


def test_failing_line_does_not_stop_the_script(gray_ppm, runner):
    runner.run(io.StringIO(
        f"load {gray_ppm} gray\n"
        "blur missing out\n"
        "brighten 10 gray bright\n"
    ))
    assert "Image not found: missing" in output(runner)
    assert "Executed command = false" in output(runner)
    assert runner.store.contains("bright")
    assert not runner.store.contains("out")


def test_exit_stops_reading(gray_ppm, runner):
    runner.run(io.StringIO(f"load {gray_ppm} gray\nexit\nblur gray out\n"))
    assert "Exiting..." in output(runner)
    assert not runner.store.contains("out")


def test_execute_line_results(gray_ppm, runner):
    assert runner.execute_line("# comment") is None
    assert runner.execute_line("   ") is None
    assert runner.execute_line(f"load {gray_ppm} gray") is True
    assert runner.execute_line("sepia gray out split 500") is False
    assert runner.execute_line(f"load {gray_ppm.with_name('none.ppm')} x") is False


def test_run_nested_script(tmp_path, gray_ppm, runner):
    inner = tmp_path / "inner.txt"
    inner.write_text(f"load {gray_ppm} gray\nvertical-flip gray flipped\n")
    assert runner.execute_line(f"run {inner}") is True
    assert runner.store.fetch("flipped").get_pixel(0, 0).r == 200


def test_recursive_script_is_refused(tmp_path, runner):
    script = tmp_path / "loop.txt"
    script.write_text(f"run {script}\n")
    assert runner.execute_line(f"run {script}") is True
    assert "already running" in output(runner)


def test_main_runs_script_file(tmp_path, gray_ppm, capsys):
    result = tmp_path / "out.png"
    script = tmp_path / "script.txt"
    script.write_text(f"load {gray_ppm} gray\ndither gray d\nsave {result} d\n")
    assert main(["-file", str(script)]) == 0
    assert result.exists()
    assert "Executed command = true" in capsys.readouterr().out


def test_main_reports_missing_script(tmp_path):
    assert main(["-file", str(tmp_path / "nope.txt")]) == 1


def test_unreadable_ppm_fails_only_its_line(tmp_path, gray_ppm, runner):
    binary = tmp_path / "binary.ppm"
    binary.write_bytes(b"P6\n2 1\n255\n\xff\xfe\xfd\x00\x80\x90")
    huge = tmp_path / "huge.ppm"
    huge.write_text("P3\n1 1\n255\n99999999999999999999 0 0\n")
    runner.run(io.StringIO(
        f"load {binary} a\n"
        f"load {huge} b\n"
        f"load {gray_ppm} gray\n"
    ))
    assert output(runner).count("Executed command = false") == 2
    assert runner.store.names() == ["gray"]


def test_non_text_script_fails_only_the_run_line(tmp_path, gray_ppm, runner):
    script = tmp_path / "binary.txt"
    script.write_bytes(b"\xff\xfe\x00garbage")
    assert runner.execute_line(f"run {script}") is False
    assert runner.execute_line(f"load {gray_ppm} gray") is True


def test_main_reports_non_text_script(tmp_path):
    script = tmp_path / "binary.txt"
    script.write_bytes(b"\xff\xfe\x00garbage")
    assert main(["-file", str(script)]) == 1
