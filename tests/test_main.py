import copy
import os

import pytest

from main import DDoSSimulation
from utils.config import SYSTEM_CONFIG, ConfigurationError


@pytest.fixture
def small_config(tmp_path):
    conf = copy.deepcopy(SYSTEM_CONFIG)
    conf.update({
        'NUM_NODES': 12,
        'NUM_ATTACKERS': 3,
        'TARGET_NODE_ID': 11,
        'SIMULATION_STEPS': 3,
        'ATTACK_INTENSITY': 0.5,
        'LEGITIMATE_TRAFFIC': 20,
        'RANDOM_SEED': 7,
        'OUTPUT': {
            'REPORT_DIR': str(tmp_path / 'reports'),
            'PLOT_DIR': str(tmp_path / 'plots'),
        },
    })
    return conf


def test_runs_every_scenario(small_config):
    simulation = DDoSSimulation(small_config)
    results = simulation.run_simulation()

    assert list(results) == list(SYSTEM_CONFIG['SCENARIOS'])
    assert all(len(steps) == 3 for steps in results.values())
    assert simulation.metrics.scenarios == list(results)


def test_report_and_plots_written(small_config, tmp_path):
    simulation = DDoSSimulation(small_config)
    simulation.run_simulation()

    report_path = simulation.generate_performance_report()

    with open(report_path, encoding='utf-8') as f:
        report = f.read()
    assert 'With All Mitigation Techniques' in report
    assert 'Attack drop rate' in report
    plots = os.listdir(tmp_path / 'plots')
    assert any(name.startswith('target_load_') for name in plots)
    assert any(name.startswith('drop_rates_') for name in plots)


def test_invalid_config_fails_at_construction(small_config):
    small_config['TARGET_NODE_ID'] = 99
    with pytest.raises(ConfigurationError):
        DDoSSimulation(small_config)


def test_second_run_does_not_double_count(small_config):
    simulation = DDoSSimulation(small_config)
    simulation.run_simulation()
    simulation.run_simulation()

    summary = simulation.metrics.get_scenario_summary('Without Mitigation')
    assert summary['steps'] == 3
