# main.py
import numpy as np
from datetime import datetime
import logging
import os
import matplotlib.pyplot as plt
from typing import List, Dict

from core.scenario import run_scenarios
from core.step_processor import StepStats
from utils.config import SYSTEM_CONFIG, SimulationConfig, load_scenarios
from utils.metrics import PerformanceMetrics, format_step

# Logging setup
logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


class DDoSSimulation:
    """DDoS mitigation comparison across scenarios"""

    def __init__(self, config: Dict = None):
        """
        Initialize the simulation

        Args:
            config: SYSTEM_CONFIG style dict, defaults to SYSTEM_CONFIG

        Raises:
            ConfigurationError: invalid configuration
        """
        self.config = SYSTEM_CONFIG if config is None else config
        self.sim_config = SimulationConfig.from_dict(self.config)
        self.scenarios = load_scenarios(self.config)
        self.metrics = PerformanceMetrics()

        output = self.config.get('OUTPUT', {})
        self.report_dir = output.get('REPORT_DIR', 'reports')
        self.plot_dir = output.get('PLOT_DIR', 'plots')

    def _log_step(self, scenario: str, stats: StepStats):
        self.metrics.record_step(scenario, stats)
        for line in format_step(stats):
            logger.info(line)

    def run_simulation(self) -> Dict[str, List[StepStats]]:
        """
        Run every scenario

        Returns:
            Dict[str, List[StepStats]]: {scenario name: per-step statistics}
        """
        # fresh metrics for every run
        self.metrics = PerformanceMetrics()

        c = self.sim_config
        logger.info("=== DDoS Attack Simulation ===")
        logger.info(f"Network configuration: {c.node_count} nodes, "
                    f"{c.attacker_count} attackers, target node: {c.target_node_id}")

        return run_scenarios(self.sim_config, self.scenarios, self._log_step)

    def generate_performance_report(self) -> str:
        """
        Write the text report and the plots

        Returns:
            str: report file path
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report_path = os.path.join(self.report_dir, f"performance_report_{timestamp}.txt")
        os.makedirs(self.report_dir, exist_ok=True)

        c = self.sim_config
        with open(report_path, 'w', encoding='utf-8') as f:
            f.write("=== DDoS Mitigation Performance Report ===\n\n")

            # 1. Configuration
            f.write("1. Configuration:\n")
            f.write(f"* Nodes: {c.node_count} ({c.attacker_count} attackers)\n")
            f.write(f"* Target node: {c.target_node_id}\n")
            f.write(f"* Steps: {c.step_count}\n")
            f.write(f"* Attack intensity: {c.attack_intensity}\n")
            f.write(f"* Legitimate traffic per step: {c.legitimate_traffic_per_step}\n")

            # 2. Per-scenario results
            f.write("\n2. Scenario results:\n")
            for scenario in self.metrics.scenarios:
                summary = self.metrics.get_scenario_summary(scenario)
                f.write(f"\n{scenario}:\n")
                f.write(f"* Packets processed: {summary['processed']}\n")
                f.write(f"* Packets dropped: {summary['dropped']}\n")
                f.write(f"* Attack drop rate: {summary['attack_drop_rate']:.2f}%\n")
                f.write(f"* Legitimate drop rate: {summary['legitimate_drop_rate']:.2f}%\n")
                f.write(f"* Mean target utilization: {summary['mean_target_utilization']:.2f}%\n")
                f.write(f"* Peak target utilization: {summary['peak_target_utilization']:.2f}%\n")
                for stage, count in summary['drops_by_stage'].items():
                    f.write(f"* Dropped by {stage}: {count}\n")

            # 3. Comparison
            f.write("\n3. Comparison:\n")
            for line in self.metrics.comparison_table():
                f.write(line + "\n")

        self.generate_performance_plots(timestamp)

        logger.info(f"Performance report generated: {report_path}")
        return report_path

    def generate_performance_plots(self, timestamp: str):
        """
        Generate the analysis plots

        Args:
            timestamp: timestamp used in file names
        """
        os.makedirs(self.plot_dir, exist_ok=True)
        scenarios = self.metrics.scenarios
        if not scenarios:
            return

        # 1. Target utilization per step
        plt.figure(figsize=(12, 6))
        for scenario in scenarios:
            utilization = self.metrics.calculate_target_utilization(scenario)
            plt.plot(np.arange(len(utilization)), utilization, 'o-', label=scenario)

        plt.xlabel('Time step')
        plt.ylabel('Target load (% of capacity)')
        plt.title('Target node load per step')
        plt.legend()
        plt.grid(True)

        plt.tight_layout()
        plt.savefig(os.path.join(self.plot_dir, f"target_load_{timestamp}.png"))
        plt.close()

        # 2. Drop rates per scenario
        attack_rates = [self.metrics.calculate_drop_rate(s, legitimate=False) for s in scenarios]
        legit_rates = [self.metrics.calculate_drop_rate(s, legitimate=True) for s in scenarios]

        x = np.arange(len(scenarios))
        width = 0.35

        fig, ax = plt.subplots(figsize=(12, 6))
        ax.bar(x - width / 2, attack_rates, width, label='Attack dropped', color='#E1812C')
        ax.bar(x + width / 2, legit_rates, width, label='Legitimate dropped', color='#3274A1')

        ax.set_ylabel('Drop rate (%)')
        ax.set_xticks(x)
        ax.set_xticklabels(scenarios, rotation=20, ha='right')
        ax.set_ylim(0, 100)
        ax.legend(loc='upper left')
        ax.grid(True, axis='y')
        ax.set_title('Mitigation effectiveness')

        plt.tight_layout()
        plt.savefig(os.path.join(self.plot_dir, f"drop_rates_{timestamp}.png"))
        plt.close(fig)


def main():
    """Entry point"""
    try:
        simulation = DDoSSimulation()
        simulation.run_simulation()
        simulation.generate_performance_report()
    except Exception as e:
        logger.error(f"Error in main: {str(e)}")
        raise e


if __name__ == "__main__":
    main()
