# models/registry.py
from typing import Dict, List, Iterator
import logging

from models.node import Node, NodeRole

logger = logging.getLogger(__name__)


class NodeRegistry:
    """Node registry for one simulation run"""

    def __init__(self, target_capacity: int = 1000, default_capacity: int = 500):
        """
        Initialize an empty registry

        Args:
            target_capacity: capacity given to the target node
            default_capacity: capacity given to every other node
        """
        self.target_capacity = target_capacity
        self.default_capacity = default_capacity
        self.nodes = {}  # {node_id: Node}
        self.connections = {}  # {node_id: [neighbour ids]}
        self.target_id = None

    def create_nodes(self, count: int, target_id: int, attacker_count: int) -> Dict[int, Node]:
        """
        Create the node population

        Ids 0..attacker_count-1 become attackers. The target keeps its
        higher capacity even when it falls inside the attacker range.

        Args:
            count: number of nodes
            target_id: id of the attacked node
            attacker_count: number of attacker nodes

        Returns:
            Dict[int, Node]: {node_id: Node}
        """
        self.nodes = {}
        self.target_id = target_id

        for i in range(count):
            role = NodeRole.ATTACKER if i < attacker_count else NodeRole.LEGITIMATE
            capacity = self.target_capacity if i == target_id else self.default_capacity
            self.nodes[i] = Node(id=i, capacity=capacity, role=role)

        self._setup_connections()

        if target_id < attacker_count:
            logger.warning(f"Target node {target_id} is inside the attacker id range "
                           f"(0..{attacker_count - 1}) and will also send attack traffic")

        logger.debug(f"Created {count} nodes ({attacker_count} attackers), target {target_id}")
        return self.nodes

    def _setup_connections(self):
        """Fully connected topology: every node reaches every other node"""
        ids = list(self.nodes)
        self.connections = {
            node_id: [other for other in ids if other != node_id]
            for node_id in ids
        }

    def reset_loads(self):
        """Zero every node's load. Called once at the start of each step."""
        for node in self.nodes.values():
            node.reset_load()

    def get(self, node_id: int) -> Node:
        """
        Look up a node

        Raises:
            KeyError: unknown node id
        """
        try:
            return self.nodes[node_id]
        except KeyError:
            raise KeyError(f"Unknown node id: {node_id}") from None

    @property
    def target(self) -> Node:
        return self.get(self.target_id)

    def neighbors(self, node_id: int) -> List[int]:
        return self.connections.get(node_id, [])

    def attacker_ids(self) -> List[int]:
        return [node.id for node in self.nodes.values() if node.is_attacker]

    def legitimate_ids(self) -> List[int]:
        return [node.id for node in self.nodes.values() if not node.is_attacker]

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self.nodes
