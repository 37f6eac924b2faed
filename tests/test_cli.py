import logging

import pytest

from cryptorand.cli import main
from cryptorand.config import Config
from cryptorand.core.entropy import HardwareRNG
from cryptorand.core.sampler import INT64_MAX, INT64_MIN


@pytest.fixture
def config(tmp_path):
    return Config(tmp_path / "config.json")


def run(capsys, config, *argv):
    code = main(list(argv), config=config)
    out, err = capsys.readouterr()
    return code, out.splitlines(), err


def test_number(capsys, config):
    code, lines, _ = run(capsys, config, "number")
    assert code == 0
    assert INT64_MIN <= int(lines[0]) <= INT64_MAX


def test_number_in_range(capsys, config):
    code, lines, _ = run(capsys, config, "number", "--min", "1", "--max", "6", "-n", "20")
    assert code == 0
    assert len(lines) == 20
    assert all(1 <= int(v) <= 6 for v in lines)


def test_number_single_bound(capsys, config):
    code, lines, _ = run(capsys, config, "number", "--min", str(INT64_MAX - 1))
    assert code == 0
    assert int(lines[0]) >= INT64_MAX - 1


def test_number_invalid_range(capsys, config):
    code, lines, err = run(capsys, config, "number", "--min", "100", "--max", "1")
    assert code == 1
    assert lines == []
    assert err.startswith("Error:")


def test_string_defaults_from_config(capsys, config):
    config.set("string", "length", 12)
    config.set("string", "charset", "digits")
    code, lines, _ = run(capsys, config, "string", "-n", "3")
    assert code == 0
    assert len(lines) == 3
    assert all(len(s) == 12 and s.isdigit() for s in lines)


def test_string_custom_chars(capsys, config):
    code, lines, _ = run(capsys, config, "string", "--chars", "01", "-l", "64")
    assert code == 0
    assert len(lines[0]) == 64
    assert set(lines[0]) <= {"0", "1"}


def test_string_show_entropy(capsys, config):
    code, lines, _ = run(capsys, config, "string", "--chars", "01", "-l", "8", "--show-entropy")
    assert code == 0
    assert lines[0].endswith("(8.0 bits)")


def test_string_errors(capsys, config):
    code, _, err = run(capsys, config, "string", "-l", "-1")
    assert code == 1
    assert "negative" in err

    code, _, err = run(capsys, config, "string", "--chars", "")
    assert code == 1
    assert "empty" in err


def test_pick(capsys, config):
    code, lines, _ = run(capsys, config, "pick", "red", "green", "blue")
    assert code == 0
    assert lines[0] in ("red", "green", "blue")


def test_pick_empty(capsys, config):
    code, _, err = run(capsys, config, "pick")
    assert code == 1
    assert "empty" in err


def test_shuffle(capsys, config):
    code, lines, _ = run(capsys, config, "shuffle", "a", "b", "c", "d")
    assert code == 0
    assert sorted(lines[0].split()) == ["a", "b", "c", "d"]


def test_check_runs_real_suite(capsys, config, monkeypatch):
    import cryptorand.cli as cli

    seen = {}
    real = cli.run_all_checks

    def strict(samples, source=None, verbose=True):
        seen["samples"] = samples
        return real(samples, source=source, alpha=1e-9, verbose=verbose)

    monkeypatch.setattr(cli, "run_all_checks", strict)
    code, lines, err = run(capsys, config, "check", "--samples", "2000")
    assert code == 0
    assert seen["samples"] == 2000
    assert lines[-1] == "Result: 6/6 tests passed (100.0%)"
    assert err == ""


def _fake_results(passed, total):
    tests = [{"name": f"t{i}", "p_value": 0.5 if i < passed else 0.0, "passed": i < passed}
             for i in range(total)]
    return {"tests": tests, "passed": passed, "total": total, "pass_rate": passed / total}


def test_check_failure_exit_code(capsys, config, monkeypatch):
    monkeypatch.setattr("cryptorand.cli.run_all_checks",
                        lambda samples, source=None, verbose=True: _fake_results(5, 6))
    code, lines, err = run(capsys, config, "check")
    assert code == 1
    assert lines[0].startswith("PASS")
    assert lines[5].startswith("FAIL")
    assert "non-uniform" in err


def test_check_success_exit_code(capsys, config, monkeypatch):
    monkeypatch.setattr("cryptorand.cli.run_all_checks",
                        lambda samples, source=None, verbose=True: _fake_results(6, 6))
    code, _, err = run(capsys, config, "check")
    assert code == 0
    assert err == ""


@pytest.mark.parametrize("argv", [
    ["number"],
    ["--source", "rdrand", "number"],
    ["number", "--min", "9", "--max", "1"],
])
def test_hardware_helper_cleaned_up(capsys, config, monkeypatch, argv):
    calls = []
    monkeypatch.setattr(HardwareRNG, "cleanup", classmethod(lambda cls: calls.append(cls)))
    monkeypatch.setattr(HardwareRNG, "is_available", classmethod(lambda cls, use_rdseed=False: False))
    run(capsys, config, *argv)
    assert calls == [HardwareRNG]


def test_unavailable_source(capsys, config, monkeypatch):
    monkeypatch.setattr(HardwareRNG, "_get_lib", classmethod(lambda cls: None))
    code, _, err = run(capsys, config, "--source", "rdrand", "number")
    assert code == 1
    assert "RDRAND" in err


def test_unknown_command(config):
    with pytest.raises(SystemExit):
        main(["roll"], config=config)


def test_verbose_logging_configured_once(capsys, config):
    logger = logging.getLogger("cryptorand")
    try:
        run(capsys, config, "-v", "pick", "a")
        run(capsys, config, "-v", "pick", "b")
        streams = [h for h in logger.handlers if type(h) is logging.StreamHandler]
        assert len(streams) == 1
        assert logger.level == logging.DEBUG
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
