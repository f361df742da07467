import matplotlib
matplotlib.use('Agg')

import pytest

from core.mitigation import RunState
from models.registry import NodeRegistry
from utils.config import SimulationConfig


@pytest.fixture
def registry():
    """5 nodes, node 0 attacker, target 4"""
    reg = NodeRegistry()
    reg.create_nodes(5, target_id=4, attacker_count=1)
    return reg


@pytest.fixture
def state(registry):
    return RunState(registry)


@pytest.fixture
def flood_config():
    """50 nodes, 10 attackers, target outside the attacker range"""
    return SimulationConfig(
        node_count=50,
        attacker_count=10,
        target_node_id=49,
        step_count=2,
        attack_intensity=2.0,
        legitimate_traffic_per_step=100,
        seed=42
    )
