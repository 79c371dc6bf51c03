"""
Force-directed layout for the archive network.

A small, exact (no Barnes-Hut) port of the d3-force model: every tick the link,
many-body, centering and collision forces adjust node velocities, velocities
decay, and positions advance. The simulation "temperature" (alpha) decays
toward alpha_target; once it drops below alpha_min the layout is settled and
the driver may stop ticking until something reheats it (a drag, a resize).

The controller does not own a timer. Whoever renders calls step() (tkinter's
after() loop in the GUI, a plain loop in the HTML export) and receives a
LayoutFrame per tick, either as the return value or through on_tick().
"""

import math
import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from archive_data import ArchiveItem
from network_config import NetworkConfig
from tag_connectivity import Link

Point = Tuple[float, float]

INITIAL_RADIUS = 10
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))
DISTANCE_MIN2 = 1.0


class LayoutFrame:
    """Positions after one tick, in the shape the renderers draw from"""

    def __init__(self, tick: int, alpha: float, positions: Dict[str, Point],
                 segments: List[Tuple[str, str, Point, Point]]):
        self.tick = tick
        self.alpha = alpha
        self.positions = positions
        self.segments = segments


class ForceLayoutController:
    """Owns one simulation over a fixed node/link set"""

    def __init__(self, nodes: Sequence[ArchiveItem], links: Sequence[Link],
                 config: NetworkConfig = None, center: Point = (0.0, 0.0), seed: int = None):
        self.config = config or NetworkConfig()
        self.nodes = list(nodes)
        self._index = {node.id: i for i, node in enumerate(self.nodes)}

        # Unknown ids are dropped here rather than failing mid-run
        self.links = []
        self.dropped_links = 0
        for source, target in links:
            if source in self._index and target in self._index and source != target:
                self.links.append((source, target))
            else:
                self.dropped_links += 1

        self.center_x, self.center_y = center
        self.alpha = 1.0
        self.alpha_target = 0.0
        self.alpha_min = self.config.alpha_min
        self.alpha_decay = self.config.alpha_decay
        self.velocity_decay = 1 - self.config.velocity_decay

        self.tick_count = 0
        self.paused = False
        self.disposed = False
        self.dragged_id = None

        self._random = random.Random(seed)
        self._tick_callbacks: List[Callable[[LayoutFrame], None]] = []
        self.vx = [0.0] * len(self.nodes)
        self.vy = [0.0] * len(self.nodes)
        self._seeds: List[Point] = []

        self._initialize_nodes()
        self._initialize_links()

    # -- setup ---------------------------------------------------------------

    def _seed_position(self, i: int) -> Point:
        radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
        angle = i * INITIAL_ANGLE
        return (self.center_x + radius * math.cos(angle),
                self.center_y + radius * math.sin(angle))

    def _initialize_nodes(self):
        for i, node in enumerate(self.nodes):
            seed = self._seed_position(i)
            self._seeds.append(seed)
            # Nodes that survived a filter change keep their last position
            if not _finite(node.x) or not _finite(node.y):
                node.x, node.y = seed
            node.fx = None
            node.fy = None

    def _initialize_links(self):
        count = [0] * len(self.nodes)
        self._link_pairs = []
        for source, target in self.links:
            s, t = self._index[source], self._index[target]
            self._link_pairs.append((s, t))
            count[s] += 1
            count[t] += 1

        self._link_bias = [count[s] / (count[s] + count[t]) for s, t in self._link_pairs]
        self._link_strength = [1 / min(count[s], count[t]) for s, t in self._link_pairs]

    # -- listeners -----------------------------------------------------------

    def on_tick(self, callback: Callable[[LayoutFrame], None]):
        self._tick_callbacks.append(callback)
        return callback

    def remove_tick_listener(self, callback: Callable[[LayoutFrame], None]):
        if callback in self._tick_callbacks:
            self._tick_callbacks.remove(callback)

    # -- lifecycle -----------------------------------------------------------

    @property
    def active(self) -> bool:
        """True while the driver should keep ticking"""
        return not self.disposed and not self.paused

    def is_settled(self) -> bool:
        # A drag holds alpha_target up, so the layout keeps relaxing toward the pin
        return self.alpha < self.alpha_min and self.alpha_target < self.alpha_min

    def restart(self):
        if not self.disposed:
            self.paused = False
        return self

    def reheat(self, alpha: float):
        self.alpha = alpha
        return self.restart()

    def set_alpha_target(self, target: float):
        self.alpha_target = target
        return self

    def dispose(self):
        """Stop for good; later step() calls do nothing"""
        self.disposed = True
        self.paused = True
        self._tick_callbacks.clear()
        if self.dragged_id is not None:
            node = self.node(self.dragged_id)
            node.fx = None
            node.fy = None
            self.dragged_id = None

    def step(self) -> Optional[LayoutFrame]:
        """Advance one tick and notify listeners"""
        if self.disposed:
            return None

        self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
        alpha = self.alpha

        # A single NaN would otherwise spread to every node through the forces
        self._reset_unstable_nodes()
        self._apply_link_force(alpha)
        self._apply_many_body_force(alpha)
        self._apply_center_force()
        self._apply_collision_force()
        self._integrate()
        self._reset_unstable_nodes()

        self.tick_count += 1
        if self.is_settled():
            self.paused = True

        frame = self.frame()
        for callback in list(self._tick_callbacks):
            callback(frame)
        return frame

    def run(self, max_ticks: int = 1000) -> int:
        """Tick until settled (or max_ticks); returns the number of ticks run"""
        ticks = 0
        while ticks < max_ticks and not self.disposed and not self.is_settled():
            self.step()
            ticks += 1
        return ticks

    # -- queries -------------------------------------------------------------

    def node(self, node_id: str) -> ArchiveItem:
        return self.nodes[self._index[node_id]]

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._index

    def positions(self) -> Dict[str, Point]:
        return {node.id: (node.x, node.y) for node in self.nodes}

    def frame(self) -> LayoutFrame:
        positions = self.positions()
        segments = [(s, t, positions[s], positions[t]) for s, t in self.links]
        return LayoutFrame(self.tick_count, self.alpha, positions, segments)

    # -- interaction ---------------------------------------------------------

    def drag_start(self, node_id: str, pos: Point = None) -> bool:
        """Pin a node for dragging; a new drag releases any previous one"""
        if self.disposed or node_id not in self._index:
            return False
        if self.dragged_id is not None and self.dragged_id != node_id:
            previous = self.node(self.dragged_id)
            previous.fx = None
            previous.fy = None

        self.set_alpha_target(self.config.drag_alpha_target).restart()
        node = self.node(node_id)
        if pos is not None and _finite(pos[0]) and _finite(pos[1]):
            node.fx, node.fy = pos
        else:
            node.fx, node.fy = node.x, node.y
        self.dragged_id = node_id
        return True

    def drag_move(self, pos: Point) -> bool:
        if self.dragged_id is None or not (_finite(pos[0]) and _finite(pos[1])):
            return False
        node = self.node(self.dragged_id)
        node.fx, node.fy = pos
        return True

    def drag_end(self) -> bool:
        """Unpin the dragged node; it relaxes from where it was dropped"""
        if self.dragged_id is None:
            return False
        self.set_alpha_target(0.0)
        node = self.node(self.dragged_id)
        node.x, node.y = node.fx, node.fy
        node.fx = None
        node.fy = None
        self.dragged_id = None
        return True

    def set_center(self, cx: float, cy: float):
        """Move the centering target and let the layout redistribute"""
        self.center_x = cx
        self.center_y = cy
        self.reheat(self.config.resize_alpha)

    # -- forces --------------------------------------------------------------

    def _jiggle(self) -> float:
        return (self._random.random() - 0.5) * 1e-6

    def _apply_link_force(self, alpha: float):
        nodes, vx, vy = self.nodes, self.vx, self.vy
        distance = self.config.link_distance
        for (s, t), bias, strength in zip(self._link_pairs, self._link_bias, self._link_strength):
            source, target = nodes[s], nodes[t]
            x = target.x + vx[t] - source.x - vx[s] or self._jiggle()
            y = target.y + vy[t] - source.y - vy[s] or self._jiggle()
            l = math.sqrt(x * x + y * y)
            if l == 0:
                continue
            l = (l - distance) / l * alpha * strength
            x *= l
            y *= l
            vx[t] -= x * bias
            vy[t] -= y * bias
            vx[s] += x * (1 - bias)
            vy[s] += y * (1 - bias)

    def _apply_many_body_force(self, alpha: float):
        nodes, vx, vy = self.nodes, self.vx, self.vy
        weight = self.config.charge_strength * alpha
        for i, node in enumerate(nodes):
            for j, other in enumerate(nodes):
                if i == j:
                    continue
                x = other.x - node.x
                y = other.y - node.y
                l = x * x + y * y
                if x == 0:
                    x = self._jiggle()
                    l += x * x
                if y == 0:
                    y = self._jiggle()
                    l += y * y
                if l < DISTANCE_MIN2:
                    l = math.sqrt(DISTANCE_MIN2 * l)
                vx[i] += x * weight / l
                vy[i] += y * weight / l

    def _apply_center_force(self):
        if not self.nodes:
            return
        n = len(self.nodes)
        sx = sum(node.x for node in self.nodes) / n
        sy = sum(node.y for node in self.nodes) / n
        shift_x = (sx - self.center_x) * self.config.center_strength
        shift_y = (sy - self.center_y) * self.config.center_strength
        for node in self.nodes:
            node.x -= shift_x
            node.y -= shift_y

    def _apply_collision_force(self):
        nodes, vx, vy = self.nodes, self.vx, self.vy
        radius = self.config.collision_radius
        # Equal radii split every correction evenly
        min_distance = radius * 2
        for i, node in enumerate(nodes):
            xi = node.x + vx[i]
            yi = node.y + vy[i]
            for j in range(i + 1, len(nodes)):
                other = nodes[j]
                x = xi - other.x - vx[j]
                y = yi - other.y - vy[j]
                l = x * x + y * y
                if l >= min_distance * min_distance:
                    continue
                if x == 0:
                    x = self._jiggle()
                    l += x * x
                if y == 0:
                    y = self._jiggle()
                    l += y * y
                l = math.sqrt(l)
                if l == 0:
                    continue
                l = (min_distance - l) / l
                x *= l
                y *= l
                vx[i] += x * 0.5
                vy[i] += y * 0.5
                vx[j] -= x * 0.5
                vy[j] -= y * 0.5

    def _integrate(self):
        for i, node in enumerate(self.nodes):
            if node.fx is None:
                self.vx[i] *= self.velocity_decay
                node.x += self.vx[i]
            else:
                node.x = node.fx
                self.vx[i] = 0.0
            if node.fy is None:
                self.vy[i] *= self.velocity_decay
                node.y += self.vy[i]
            else:
                node.y = node.fy
                self.vy[i] = 0.0

    def _reset_unstable_nodes(self):
        for i, node in enumerate(self.nodes):
            if _finite(node.x) and _finite(node.y) and _finite(self.vx[i]) and _finite(self.vy[i]):
                continue
            node.x, node.y = self._seeds[i]
            self.vx[i] = 0.0
            self.vy[i] = 0.0


def _finite(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)
