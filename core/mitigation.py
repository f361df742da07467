# core/mitigation.py
from enum import Enum
from typing import Dict, List, Optional, Tuple
import logging

from core.packet import Packet
from models.registry import NodeRegistry
from utils.config import MitigationFlags, MitigationThresholds

logger = logging.getLogger(__name__)


class FilterVerdict(Enum):
    PASS = "pass"
    DROP = "drop"


class RunState:
    """
    Cross-step state of one simulation run

    Counters are cumulative for the whole run and never reset between steps.
    Each run owns its own RunState; nothing is shared across runs.
    """

    def __init__(self, registry: NodeRegistry):
        self.registry = registry
        self.source_counts = {}  # {source_id: attack packets seen}
        self.signature_counts = {}  # {signature: packets seen}

    def count_source(self, source_id: int) -> int:
        self.source_counts[source_id] = self.source_counts.get(source_id, 0) + 1
        return self.source_counts[source_id]

    def count_signature(self, signature: str) -> int:
        self.signature_counts[signature] = self.signature_counts.get(signature, 0) + 1
        return self.signature_counts[signature]

    def source_count(self, source_id: int) -> int:
        return self.source_counts.get(source_id, 0)

    def signature_count(self, signature: str) -> int:
        return self.signature_counts.get(signature, 0)


class FilterStage:
    """Base class of a mitigation stage"""

    name = "stage"

    def __init__(self, thresholds: MitigationThresholds = None):
        self.thresholds = thresholds or MitigationThresholds()

    def evaluate(self, packet: Packet, state: RunState, current_step: int) -> FilterVerdict:
        """
        Decide pass or drop for one packet

        Args:
            packet: packet under evaluation
            state: run-scoped counters and node registry
            current_step: current time step

        Returns:
            FilterVerdict: PASS or DROP
        """
        raise NotImplementedError


class SourceFilter(FilterStage):
    """Drops attack packets once their source exceeds the cumulative limit"""

    name = "ip_filtering"

    def evaluate(self, packet: Packet, state: RunState, current_step: int) -> FilterVerdict:
        # legitimate packets bypass the stage without touching the counter
        if packet.is_legitimate:
            return FilterVerdict.PASS

        count = state.count_source(packet.source_id)
        if count > self.thresholds.source_limit:
            return FilterVerdict.DROP
        return FilterVerdict.PASS


class SignatureInspection(FilterStage):
    """Drops frequent signatures that carry the attack marker"""

    name = "deep_packet_inspection"

    def evaluate(self, packet: Packet, state: RunState, current_step: int) -> FilterVerdict:
        count = state.count_signature(packet.signature)
        if self.thresholds.attack_marker in packet.signature and \
                count > self.thresholds.signature_limit:
            return FilterVerdict.DROP
        return FilterVerdict.PASS


class RateLimiter(FilterStage):
    """Admission test against the destination's capacity for this step"""

    name = "rate_limit"

    def evaluate(self, packet: Packet, state: RunState, current_step: int) -> FilterVerdict:
        destination = state.registry.get(packet.destination_id)
        if not destination.can_handle_packet():
            return FilterVerdict.DROP
        return FilterVerdict.PASS


class TrafficPatternAnalysis(FilterStage):
    """
    Drops recent packets from sources with heavy attack history

    Only reads the source counters; they grow only while SourceFilter is enabled.
    """

    name = "traffic_pattern_analysis"

    def evaluate(self, packet: Packet, state: RunState, current_step: int) -> FilterVerdict:
        recent = (current_step - packet.timestamp) < self.thresholds.pattern_window
        if recent and state.source_count(packet.source_id) > self.thresholds.pattern_source_limit:
            return FilterVerdict.DROP
        return FilterVerdict.PASS


class MitigationPipeline:
    """Ordered filter stages, short-circuiting on the first drop"""

    def __init__(self, stages: List[FilterStage] = None):
        self.stages = list(stages or [])

    def evaluate(self, packet: Packet, state: RunState,
                 current_step: int) -> Tuple[FilterVerdict, Optional[str]]:
        """
        Run one packet through the enabled stages

        Args:
            packet: packet under evaluation
            state: run-scoped state
            current_step: current time step

        Returns:
            Tuple[FilterVerdict, Optional[str]]: verdict and the name of the
            dropping stage (None on pass)
        """
        for stage in self.stages:
            if stage.evaluate(packet, state, current_step) is FilterVerdict.DROP:
                return FilterVerdict.DROP, stage.name
        return FilterVerdict.PASS, None

    @property
    def stage_names(self) -> List[str]:
        return [stage.name for stage in self.stages]

    def __len__(self) -> int:
        return len(self.stages)


STAGE_ORDER = (
    ('ip_filtering', SourceFilter),
    ('deep_packet_inspection', SignatureInspection),
    ('rate_limit', RateLimiter),
    ('traffic_pattern_analysis', TrafficPatternAnalysis),
)


def build_pipeline(flags: MitigationFlags,
                   thresholds: MitigationThresholds = None) -> MitigationPipeline:
    """
    Build a pipeline holding the enabled stages in their fixed order

    Args:
        flags: enabled mitigations
        thresholds: stage thresholds

    Returns:
        MitigationPipeline: the ordered pipeline
    """
    thresholds = thresholds or MitigationThresholds()
    stages = [
        stage_cls(thresholds)
        for flag, stage_cls in STAGE_ORDER
        if getattr(flags, flag)
    ]
    logger.debug(f"Mitigation pipeline: {[stage.name for stage in stages] or 'none'}")
    return MitigationPipeline(stages)
