"""
End-to-end tests for the command-line interface.
"""

import pytest

from main import main


def test_default_run(capsys):
    assert main(["--ticks", "20", "--seed", "3", "--strict"]) == 0
    out = capsys.readouterr().out
    assert "DASHBOARD" in out
    assert "FLEET AFTER 20 TICKS" in out
    assert "DRV-008" in out


def test_transitions_are_printed(capsys):
    assert main(["--ticks", "30", "--seed", "3", "--dispatch-every", "1"]) == 0
    assert "[tick" in capsys.readouterr().out


def test_spawn_feed(capsys):
    assert main(["--ticks", "50", "--seed", "8", "--spawn-every", "10", "--strict"]) == 0
    assert "Total Deliveries     11" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [
    ["--ticks", "-1"],
    ["--drivers", "-2"],
    ["--dispatch-every", "0"],
    ["--spawn-every", "-4"],
    ["--realtime", "--interval", "0"],
])
def test_invalid_arguments(argv, capsys):
    assert main(argv) == 1
    assert "ERROR" in capsys.readouterr().out


def test_optimize_all_routes(capsys):
    assert main(["--ticks", "0", "--seed", "1", "--optimize"]) == 0
    out = capsys.readouterr().out
    assert "Optimized route for DRV-001" in out
    assert "Optimized route for DRV-006" in out


def test_optimize_without_route_warns(capsys):
    assert main(["--ticks", "0", "--seed", "1", "--optimize", "DRV-008"]) == 0
    assert "WARN: No active route for 'DRV-008'" in capsys.readouterr().out


def test_realtime_run(capsys):
    assert main(["--realtime", "--interval", "0.01", "--ticks", "3", "--seed", "2", "--strict"]) == 0
    assert "DASHBOARD" in capsys.readouterr().out
