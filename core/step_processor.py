# core/step_processor.py
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Any
import logging

from core.mitigation import FilterVerdict, MitigationPipeline, RunState
from core.packet import Packet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepStats:
    """Statistics of one time step, read-only once built"""

    step: int
    processed_legitimate: int = 0
    processed_attack: int = 0
    dropped_legitimate: int = 0
    dropped_attack: int = 0
    target_load: int = 0
    target_capacity: int = 0
    # {stage name: drops}
    drops_by_stage: Mapping[str, int] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # private copy behind a read-only view
        object.__setattr__(self, 'drops_by_stage', MappingProxyType(dict(self.drops_by_stage)))

    @property
    def processed_total(self) -> int:
        return self.processed_legitimate + self.processed_attack

    @property
    def dropped_total(self) -> int:
        return self.dropped_legitimate + self.dropped_attack

    @property
    def total(self) -> int:
        return self.processed_total + self.dropped_total

    def to_record(self) -> Dict[str, Any]:
        """Structured per-step output record"""
        return {
            'step': self.step,
            'processed': {
                'total': self.processed_total,
                'legit': self.processed_legitimate,
                'attack': self.processed_attack
            },
            'dropped': {
                'total': self.dropped_total,
                'legit': self.dropped_legitimate,
                'attack': self.dropped_attack
            },
            'targetLoad': self.target_load,
            'targetCapacity': self.target_capacity
        }


class StepProcessor:
    """Drains one step's packets through the mitigation pipeline"""

    def __init__(self, state: RunState, pipeline: MitigationPipeline, target_id: int):
        """
        Initialize the step processor

        Args:
            state: run-scoped state, owns the node registry
            pipeline: enabled mitigation stages
            target_id: node reported in the step statistics
        """
        self.state = state
        self.pipeline = pipeline
        self.target_id = target_id
        self.time_step = 0

    def process_step(self, packets: Iterable[Packet],
                     current_step: Optional[int] = None) -> StepStats:
        """
        Process every packet of one step

        Args:
            packets: packets in generation order
            current_step: step to process, defaults to the internal counter

        Returns:
            StepStats: statistics of the step
        """
        if current_step is None:
            current_step = self.time_step

        registry = self.state.registry
        registry.reset_loads()

        processed = {True: 0, False: 0}  # keyed by is_legitimate
        dropped = {True: 0, False: 0}
        drops_by_stage = {}

        for packet in packets:
            verdict, stage = self.pipeline.evaluate(packet, self.state, current_step)

            if verdict is FilterVerdict.DROP:
                dropped[packet.is_legitimate] += 1
                drops_by_stage[stage] = drops_by_stage.get(stage, 0) + 1
            else:
                registry.get(packet.destination_id).process_packet()
                processed[packet.is_legitimate] += 1

        target = registry.get(self.target_id)
        stats = StepStats(
            step=current_step,
            processed_legitimate=processed[True],
            processed_attack=processed[False],
            dropped_legitimate=dropped[True],
            dropped_attack=dropped[False],
            target_load=target.current_load,
            target_capacity=target.capacity,
            drops_by_stage=drops_by_stage
        )

        if drops_by_stage:
            logger.debug(f"Step {current_step} drops by stage: {drops_by_stage}")

        self.time_step = current_step + 1
        return stats
