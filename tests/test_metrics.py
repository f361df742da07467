import pytest

from core.step_processor import StepStats
from utils.metrics import PerformanceMetrics, format_step


@pytest.fixture
def metrics():
    m = PerformanceMetrics()
    m.record_run('rate', [
        StepStats(step=0, processed_legitimate=90, processed_attack=910,
                  dropped_legitimate=10, dropped_attack=90,
                  target_load=1000, target_capacity=1000,
                  drops_by_stage={'rate_limit': 100}),
        StepStats(step=1, processed_legitimate=100, processed_attack=400,
                  dropped_legitimate=0, dropped_attack=600,
                  target_load=500, target_capacity=1000,
                  drops_by_stage={'rate_limit': 600}),
    ])
    return m


def test_drop_rates(metrics):
    assert metrics.calculate_drop_rate('rate', legitimate=True) == pytest.approx(5.0)
    assert metrics.calculate_drop_rate('rate', legitimate=False) == pytest.approx(690 / 2000 * 100)


def test_drop_rate_of_unknown_scenario(metrics):
    assert metrics.calculate_drop_rate('missing', legitimate=True) == 0.0


def test_summary(metrics):
    summary = metrics.get_scenario_summary('rate')

    assert summary['steps'] == 2
    assert summary['processed'] == 1500
    assert summary['dropped'] == 700
    assert summary['mean_target_utilization'] == pytest.approx(75.0)
    assert summary['peak_target_utilization'] == pytest.approx(100.0)
    assert summary['drops_by_stage'] == {'rate_limit': 700}


def test_comparison_table(metrics):
    lines = metrics.comparison_table()

    assert len(lines) == 2
    assert lines[1].startswith('rate')


def test_format_step():
    stats = StepStats(step=3, processed_legitimate=100, processed_attack=900,
                      dropped_legitimate=0, dropped_attack=9100,
                      target_load=1000, target_capacity=1000)

    assert format_step(stats) == [
        "Time step: 3",
        "Packets processed: 1000 (Legitimate: 100, Attack: 900)",
        "Packets dropped: 9100 (Legitimate: 0, Attack: 9100)",
        "Target node load: 1000/1000",
        "----------------------------------",
    ]
