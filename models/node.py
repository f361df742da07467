# models/node.py
from dataclasses import dataclass
from enum import Enum


class NodeRole(Enum):
    """Node role, fixed at creation"""
    LEGITIMATE = "legitimate"
    ATTACKER = "attacker"


@dataclass
class Node:
    """Simulated network endpoint"""

    id: int  # unique node id
    capacity: int  # packets admitted per step
    role: NodeRole = NodeRole.LEGITIMATE
    current_load: int = 0  # packets admitted in the current step

    @property
    def is_attacker(self) -> bool:
        return self.role is NodeRole.ATTACKER

    @property
    def utilization(self) -> float:
        """
        Current load as a fraction of capacity

        Returns:
            float: load ratio, may exceed 1.0 when admission is not gated
        """
        return self.current_load / self.capacity

    def can_handle_packet(self) -> bool:
        return self.current_load < self.capacity

    def process_packet(self):
        """Record one admitted packet. Capacity is not enforced here."""
        self.current_load += 1

    def reset_load(self):
        self.current_load = 0
