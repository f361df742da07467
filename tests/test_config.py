import copy

import pytest

from core.scenario import ScenarioRunner
from utils.config import (SYSTEM_CONFIG, ConfigurationError, MitigationFlags,
                          MitigationThresholds, SimulationConfig, load_scenarios)


def test_defaults_from_system_config():
    config = SimulationConfig.from_dict(SYSTEM_CONFIG)

    assert config.node_count == 50
    assert config.attacker_count == 10
    assert config.target_node_id == 0
    assert config.step_count == 10
    assert config.attack_intensity == 2.0
    assert config.legitimate_traffic_per_step == 100
    assert config.target_capacity == 1000
    assert config.default_capacity == 500
    assert config.thresholds == MitigationThresholds()


def test_thresholds_from_dict():
    conf = copy.deepcopy(SYSTEM_CONFIG)
    conf['MITIGATION']['SOURCE_LIMIT'] = 7

    config = SimulationConfig.from_dict(conf)

    assert config.thresholds.source_limit == 7
    assert config.thresholds.signature_limit == 50


@pytest.mark.parametrize('overrides', [
    {'attacker_count': -1},
    {'node_count': 10, 'attacker_count': 10},
    {'target_node_id': 50},
    {'target_node_id': -1},
    {'step_count': -1},
    {'attack_intensity': -0.5},
    {'attack_intensity': float('nan')},
    {'attack_intensity': float('inf')},
    {'legitimate_traffic_per_step': -3},
    {'default_capacity': 0},
])
def test_invalid_configuration(overrides):
    with pytest.raises(ConfigurationError):
        SimulationConfig(**overrides).validate()


def test_strict_roles_rejects_attacker_target():
    SimulationConfig(target_node_id=0).validate()
    with pytest.raises(ConfigurationError):
        SimulationConfig(target_node_id=0, strict_roles=True).validate()
    SimulationConfig(target_node_id=10, strict_roles=True).validate()


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)


def test_scenarios_in_order():
    scenarios = load_scenarios()

    assert list(scenarios) == [
        'Without Mitigation',
        'With Rate Limiting',
        'With IP Filtering',
        'With Deep Packet Inspection',
        'With Traffic Pattern Analysis',
        'With All Mitigation Techniques',
    ]
    assert scenarios['Without Mitigation'] == MitigationFlags()
    assert scenarios['With All Mitigation Techniques'] == MitigationFlags.all()


def test_unknown_mitigation_flag():
    with pytest.raises(ConfigurationError):
        MitigationFlags.from_dict({'firewall': True})


def test_non_finite_intensity_fails_before_any_step():
    with pytest.raises(ConfigurationError):
        ScenarioRunner(SimulationConfig(attack_intensity=float('nan'), step_count=1))


@pytest.mark.parametrize('key', ['NUM_NODES', 'ATTACK_INTENSITY', 'LEGITIMATE_TRAFFIC'])
def test_missing_key_is_configuration_error(key):
    conf = copy.deepcopy(SYSTEM_CONFIG)
    del conf[key]

    with pytest.raises(ConfigurationError, match=key):
        SimulationConfig.from_dict(conf)
