# core/packet.py
from dataclasses import dataclass
from typing import List, Optional
import logging
import numpy as np

from models.registry import NodeRegistry

logger = logging.getLogger(__name__)

LEGITIMATE_SIGNATURE = "legitimate"
ATTACK_SIGNATURE_PREFIX = "attack_"


def attack_signature(source_id: int) -> str:
    """Signature carried by every packet from one attacker"""
    return f"{ATTACK_SIGNATURE_PREFIX}{source_id}"


@dataclass(frozen=True)
class Packet:
    """Simulated packet"""

    source_id: int  # source node id
    destination_id: int  # destination node id
    is_legitimate: bool  # taken from the source role at generation time
    timestamp: int  # origination time step
    signature: str = ""  # opaque label used by inspection


class TrafficGenerator:
    """Traffic generator"""

    def __init__(self, registry: NodeRegistry, seed: Optional[int] = None):
        """
        Initialize the traffic generator

        Args:
            registry: node registry of the current run
            seed: random seed, None draws one from OS entropy
        """
        self.registry = registry
        self.rng = np.random.RandomState(seed)

    def attack_packets_per_node(self, attack_intensity: float, capacity: int) -> int:
        return int(np.floor(attack_intensity * capacity))

    def generate(self, target_id: int, attack_intensity: float,
                 legitimate_count: int, time_step: int) -> List[Packet]:
        """
        Generate the packets for one time step

        Legitimate packets come first, then every attacker's flood in id order.

        Args:
            target_id: destination of all traffic
            attack_intensity: multiplier of each attacker's capacity
            legitimate_count: number of legitimate packets
            time_step: current time step

        Returns:
            List[Packet]: packets for this step
        """
        packets = []

        legitimate_sources = self.registry.legitimate_ids()
        if legitimate_count > 0:
            # uniform over non-attacker nodes
            picks = self.rng.randint(0, len(legitimate_sources), size=legitimate_count)
            for idx in picks:
                packets.append(Packet(
                    source_id=legitimate_sources[idx],
                    destination_id=target_id,
                    is_legitimate=True,
                    timestamp=time_step,
                    signature=LEGITIMATE_SIGNATURE
                ))

        attack_total = 0
        for node in self.registry:
            if not node.is_attacker:
                continue
            count = self.attack_packets_per_node(attack_intensity, node.capacity)
            signature = attack_signature(node.id)
            packets.extend(
                Packet(
                    source_id=node.id,
                    destination_id=target_id,
                    is_legitimate=False,
                    timestamp=time_step,
                    signature=signature
                )
                for _ in range(count)
            )
            attack_total += count

        logger.debug(f"Step {time_step}: generated {legitimate_count} legitimate "
                     f"and {attack_total} attack packets")
        return packets
