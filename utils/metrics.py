# utils/metrics.py
from typing import List, Dict, Any
import logging
import numpy as np

from core.step_processor import StepStats

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 34


def format_step(stats: StepStats) -> List[str]:
    """
    Render one step the way the console output shows it

    Args:
        stats: step statistics

    Returns:
        List[str]: output lines
    """
    return [
        f"Time step: {stats.step}",
        f"Packets processed: {stats.processed_total} "
        f"(Legitimate: {stats.processed_legitimate}, Attack: {stats.processed_attack})",
        f"Packets dropped: {stats.dropped_total} "
        f"(Legitimate: {stats.dropped_legitimate}, Attack: {stats.dropped_attack})",
        f"Target node load: {stats.target_load}/{stats.target_capacity}",
        SEPARATOR,
    ]


class PerformanceMetrics:
    """Per-scenario performance metrics"""

    def __init__(self):
        self.step_stats = {}  # {scenario: [StepStats]}

    def record_step(self, scenario: str, stats: StepStats):
        if scenario not in self.step_stats:
            self.step_stats[scenario] = []
        self.step_stats[scenario].append(stats)

    def record_run(self, scenario: str, results: List[StepStats]):
        for stats in results:
            self.record_step(scenario, stats)

    @property
    def scenarios(self) -> List[str]:
        return list(self.step_stats)

    def series(self, scenario: str, attribute: str) -> np.ndarray:
        """
        Per-step values of one StepStats attribute

        Args:
            scenario: scenario name
            attribute: StepStats attribute or property name

        Returns:
            np.ndarray: values in step order
        """
        return np.array([getattr(stats, attribute) for stats in self.step_stats.get(scenario, [])])

    def calculate_drop_rate(self, scenario: str, legitimate: bool) -> float:
        """
        Share of legitimate or attack packets dropped over the whole run

        Args:
            scenario: scenario name
            legitimate: True for collateral (legitimate) drops, False for attack drops

        Returns:
            float: drop rate (%)
        """
        if legitimate:
            dropped = self.series(scenario, 'dropped_legitimate').sum()
            total = dropped + self.series(scenario, 'processed_legitimate').sum()
        else:
            dropped = self.series(scenario, 'dropped_attack').sum()
            total = dropped + self.series(scenario, 'processed_attack').sum()
        if total == 0:
            return 0.0
        return float(dropped / total * 100)

    def calculate_target_utilization(self, scenario: str) -> np.ndarray:
        """Target load per step as a percentage of capacity"""
        loads = self.series(scenario, 'target_load').astype(float)
        capacities = self.series(scenario, 'target_capacity').astype(float)
        if loads.size == 0:
            return loads
        return loads / capacities * 100

    def drops_by_stage(self, scenario: str) -> Dict[str, int]:
        totals = {}
        for stats in self.step_stats.get(scenario, []):
            for stage, count in stats.drops_by_stage.items():
                totals[stage] = totals.get(stage, 0) + count
        return totals

    def get_scenario_summary(self, scenario: str) -> Dict[str, Any]:
        """
        Summary of one scenario

        Args:
            scenario: scenario name

        Returns:
            Dict[str, Any]: totals, drop rates and target utilization
        """
        utilization = self.calculate_target_utilization(scenario)
        return {
            'steps': len(self.step_stats.get(scenario, [])),
            'processed': int(self.series(scenario, 'processed_total').sum()),
            'dropped': int(self.series(scenario, 'dropped_total').sum()),
            'legitimate_drop_rate': self.calculate_drop_rate(scenario, legitimate=True),
            'attack_drop_rate': self.calculate_drop_rate(scenario, legitimate=False),
            'mean_target_utilization': float(np.mean(utilization)) if utilization.size else 0.0,
            'peak_target_utilization': float(np.max(utilization)) if utilization.size else 0.0,
            'drops_by_stage': self.drops_by_stage(scenario)
        }

    def comparison_table(self) -> List[str]:
        """One line per scenario, for the report"""
        lines = [
            f"{'Scenario':<32}{'Processed':>11}{'Dropped':>10}"
            f"{'Attack drop%':>14}{'Legit drop%':>13}{'Target util%':>14}"
        ]
        for scenario in self.scenarios:
            summary = self.get_scenario_summary(scenario)
            lines.append(
                f"{scenario:<32}{summary['processed']:>11}{summary['dropped']:>10}"
                f"{summary['attack_drop_rate']:>14.2f}{summary['legitimate_drop_rate']:>13.2f}"
                f"{summary['mean_target_utilization']:>14.2f}"
            )
        return lines
