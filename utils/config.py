# utils/config.py
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import logging
import numpy as np

logger = logging.getLogger(__name__)


SYSTEM_CONFIG = {
    # Network
    'NUM_NODES': 50,  # total nodes
    'NUM_ATTACKERS': 10,  # ids 0..NUM_ATTACKERS-1 are attackers
    'TARGET_NODE_ID': 0,  # attacked node

    # Node capacity (packets per step)
    'CAPACITY': {
        'TARGET': 1000,
        'DEFAULT': 500
    },

    # Traffic
    'SIMULATION_STEPS': 10,
    'ATTACK_INTENSITY': 2.0,  # multiplier of attacker capacity
    'LEGITIMATE_TRAFFIC': 100,  # legitimate packets per step
    'RANDOM_SEED': None,  # None seeds from OS entropy

    # Mitigation thresholds
    'MITIGATION': {
        'SOURCE_LIMIT': 100,  # cumulative attack packets per source
        'SIGNATURE_LIMIT': 50,  # cumulative packets per signature
        'PATTERN_WINDOW': 5,  # steps
        'PATTERN_SOURCE_LIMIT': 200,
        'ATTACK_MARKER': 'attack'
    },

    # Scenarios run by main.py, in order
    'SCENARIOS': {
        'Without Mitigation': {},
        'With Rate Limiting': {'rate_limit': True},
        'With IP Filtering': {'ip_filtering': True},
        'With Deep Packet Inspection': {'deep_packet_inspection': True},
        'With Traffic Pattern Analysis': {'traffic_pattern_analysis': True},
        'With All Mitigation Techniques': {
            'rate_limit': True,
            'ip_filtering': True,
            'deep_packet_inspection': True,
            'traffic_pattern_analysis': True
        }
    },

    # Report output
    'OUTPUT': {
        'REPORT_DIR': 'reports',
        'PLOT_DIR': 'plots'
    }
}


REQUIRED_KEYS = (
    'NUM_NODES',
    'NUM_ATTACKERS',
    'TARGET_NODE_ID',
    'SIMULATION_STEPS',
    'ATTACK_INTENSITY',
    'LEGITIMATE_TRAFFIC',
)


class ConfigurationError(ValueError):
    """Invalid simulation configuration"""


@dataclass(frozen=True)
class MitigationFlags:
    """Enabled mitigation stages"""

    rate_limit: bool = False
    ip_filtering: bool = False
    deep_packet_inspection: bool = False
    traffic_pattern_analysis: bool = False

    @classmethod
    def from_dict(cls, flags: Dict[str, bool]) -> 'MitigationFlags':
        unknown = set(flags) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(f"Unknown mitigation flags: {sorted(unknown)}")
        return cls(**flags)

    @classmethod
    def all(cls) -> 'MitigationFlags':
        return cls(True, True, True, True)


@dataclass(frozen=True)
class MitigationThresholds:
    """Mitigation thresholds"""

    source_limit: int = 100
    signature_limit: int = 50
    pattern_window: int = 5
    pattern_source_limit: int = 200
    attack_marker: str = 'attack'

    @classmethod
    def from_dict(cls, conf: Dict[str, Any]) -> 'MitigationThresholds':
        return cls(
            source_limit=conf.get('SOURCE_LIMIT', 100),
            signature_limit=conf.get('SIGNATURE_LIMIT', 50),
            pattern_window=conf.get('PATTERN_WINDOW', 5),
            pattern_source_limit=conf.get('PATTERN_SOURCE_LIMIT', 200),
            attack_marker=conf.get('ATTACK_MARKER', 'attack')
        )


@dataclass
class SimulationConfig:
    """Scenario configuration for one run"""

    node_count: int = 50
    attacker_count: int = 10
    target_node_id: int = 0
    step_count: int = 10
    attack_intensity: float = 2.0
    legitimate_traffic_per_step: int = 100
    target_capacity: int = 1000
    default_capacity: int = 500
    seed: Optional[int] = None
    strict_roles: bool = False  # reject a target inside the attacker range
    thresholds: MitigationThresholds = field(default_factory=MitigationThresholds)

    @classmethod
    def from_dict(cls, conf: Dict[str, Any]) -> 'SimulationConfig':
        """
        Build a configuration from a SYSTEM_CONFIG style dict

        Args:
            conf: configuration dict with upper-case keys

        Returns:
            SimulationConfig: validated configuration
        """
        missing = [key for key in REQUIRED_KEYS if key not in conf]
        if missing:
            raise ConfigurationError(f"missing configuration key: {', '.join(missing)}")

        capacity = conf.get('CAPACITY', {})
        config = cls(
            node_count=conf['NUM_NODES'],
            attacker_count=conf['NUM_ATTACKERS'],
            target_node_id=conf['TARGET_NODE_ID'],
            step_count=conf['SIMULATION_STEPS'],
            attack_intensity=conf['ATTACK_INTENSITY'],
            legitimate_traffic_per_step=conf['LEGITIMATE_TRAFFIC'],
            target_capacity=capacity.get('TARGET', 1000),
            default_capacity=capacity.get('DEFAULT', 500),
            seed=conf.get('RANDOM_SEED'),
            strict_roles=conf.get('STRICT_ROLES', False),
            thresholds=MitigationThresholds.from_dict(conf.get('MITIGATION', {}))
        )
        config.validate()
        return config

    def validate(self):
        """
        Check every precondition of a run

        Raises:
            ConfigurationError: on the first violated precondition
        """
        if self.attacker_count < 0:
            raise ConfigurationError(f"attacker_count must be >= 0, got {self.attacker_count}")
        if self.node_count <= self.attacker_count:
            raise ConfigurationError(
                f"node_count ({self.node_count}) must exceed attacker_count ({self.attacker_count})")
        if not 0 <= self.target_node_id < self.node_count:
            raise ConfigurationError(
                f"target_node_id {self.target_node_id} is not a valid node id "
                f"(0..{self.node_count - 1})")
        if self.step_count < 0:
            raise ConfigurationError(f"step_count must be >= 0, got {self.step_count}")
        if not np.isfinite(self.attack_intensity) or self.attack_intensity < 0:
            raise ConfigurationError(f"attack_intensity must be >= 0, got {self.attack_intensity}")
        if self.legitimate_traffic_per_step < 0:
            raise ConfigurationError(
                f"legitimate_traffic_per_step must be >= 0, got {self.legitimate_traffic_per_step}")
        if self.target_capacity <= 0 or self.default_capacity <= 0:
            raise ConfigurationError("node capacities must be positive")
        if self.strict_roles and self.target_node_id < self.attacker_count:
            raise ConfigurationError(
                f"target_node_id {self.target_node_id} falls inside the attacker range "
                f"(0..{self.attacker_count - 1})")


def load_scenarios(conf: Dict[str, Any] = None) -> Dict[str, MitigationFlags]:
    """
    Build the named mitigation scenarios

    Args:
        conf: configuration dict, defaults to SYSTEM_CONFIG

    Returns:
        Dict[str, MitigationFlags]: {scenario name: flags}, in run order
    """
    conf = SYSTEM_CONFIG if conf is None else conf
    return {
        name: MitigationFlags.from_dict(flags)
        for name, flags in conf.get('SCENARIOS', {}).items()
    }
