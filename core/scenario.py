# core/scenario.py
from typing import Callable, Dict, List, Optional
import logging

from core.mitigation import RunState, build_pipeline
from core.packet import TrafficGenerator
from core.step_processor import StepProcessor, StepStats
from models.registry import NodeRegistry
from utils.config import MitigationFlags, SimulationConfig

logger = logging.getLogger(__name__)


class ScenarioRunner:
    """One run: a fixed number of steps under one mitigation configuration"""

    def __init__(self, config: SimulationConfig, flags: MitigationFlags = None):
        """
        Initialize the run. Every runner owns its own registry and counters.

        Args:
            config: scenario configuration
            flags: enabled mitigations, defaults to none

        Raises:
            ConfigurationError: invalid configuration
        """
        config.validate()
        self.config = config
        self.flags = flags or MitigationFlags()

        self.registry = NodeRegistry(config.target_capacity, config.default_capacity)
        self.registry.create_nodes(config.node_count, config.target_node_id, config.attacker_count)

        self.state = RunState(self.registry)
        self.pipeline = build_pipeline(self.flags, config.thresholds)
        self.generator = TrafficGenerator(self.registry, config.seed)
        self.processor = StepProcessor(self.state, self.pipeline, config.target_node_id)

    def step(self) -> StepStats:
        """Generate and process one step"""
        packets = self.generator.generate(
            self.config.target_node_id,
            self.config.attack_intensity,
            self.config.legitimate_traffic_per_step,
            self.processor.time_step
        )
        return self.processor.process_step(packets)

    def run(self, on_step: Optional[Callable[[StepStats], None]] = None) -> List[StepStats]:
        """
        Run all configured steps

        Args:
            on_step: called with each step's statistics as soon as it is final

        Returns:
            List[StepStats]: statistics of every step, in order
        """
        results = []
        for _ in range(self.config.step_count):
            stats = self.step()
            results.append(stats)
            if on_step is not None:
                on_step(stats)
        return results


def run_scenarios(config: SimulationConfig, scenarios: Dict[str, MitigationFlags],
                  on_step: Optional[Callable[[str, StepStats], None]] = None
                  ) -> Dict[str, List[StepStats]]:
    """
    Run each named scenario on a fresh, independent run

    Args:
        config: shared scenario configuration
        scenarios: {scenario name: flags}
        on_step: called with (scenario name, step statistics)

    Returns:
        Dict[str, List[StepStats]]: {scenario name: per-step statistics}
    """
    results = {}
    for name, flags in scenarios.items():
        logger.info(f"=== {name} ===")
        runner = ScenarioRunner(config, flags)
        callback = None
        if on_step is not None:
            callback = lambda stats, name=name: on_step(name, stats)
        results[name] = runner.run(callback)
    return results
