from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from models import CORNER_WALL, FLOATER, WALL_ADJACENT, WALL_SEGMENT, CellGroup, Location
from pixel_board.pixel_board import PixelBoard

TOP = "top"
RIGHT = "right"
BOTTOM = "bottom"
LEFT = "left"
SIDES = (TOP, RIGHT, BOTTOM, LEFT)

InvalidLocationOffsets = Callable[[object, object], Sequence[Location]]

_NEIGHBOR_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def pixel_invalid_location_offsets(pixel, other_pixel) -> Sequence[Location]:
    """Default exclusion policy: ask the payload, no exclusion if it cannot answer."""
    getter = getattr(pixel, "get_invalid_location_offsets_for_other_pixel", None)
    if getter is None:
        return []
    return getter(other_pixel)


@dataclass
class SideSegments:
    """Wall segments sharing one board side, sorted along the side."""

    side: str
    cell_group_indexes: List[int]
    lengths: List[int]
    bound_start: int   # first position a segment cell may occupy
    bound_end: int     # last position, inclusive

    def bounding_length(self) -> int:
        return self.bound_end - self.bound_start + 1


@dataclass
class BoardDecomposition:
    width: int
    height: int
    cell_groups: List[CellGroup] = field(default_factory=list)
    anchors: List[Location] = field(default_factory=list)
    corner_cell_group_indexes: List[int] = field(default_factory=list)
    side_segments: List[SideSegments] = field(default_factory=list)
    interior_cell_group_indexes: List[int] = field(default_factory=list)
    touched_sides_per_cell_group_index: Dict[int, Set[str]] = field(default_factory=dict)
    touched_walls_per_cell_group_index: Dict[int, Set[int]] = field(default_factory=dict)
    is_adjacent: List[List[bool]] = field(default_factory=list)
    detection_offsets: List[List[List[Location]]] = field(default_factory=list)

    def cell_groups_length(self) -> int:
        return len(self.cell_groups)

    def location_candidates(self, cell_group_index: int) -> List[Location]:
        """Anchor locations an interior group may take, pinned to the sides it touches."""
        cell_group = self.cell_groups[cell_group_index]
        sides = self.touched_sides_per_cell_group_index.get(cell_group_index, set())
        last_x = self.width - 1 - cell_group.width()
        last_y = self.height - 1 - cell_group.height()
        if LEFT in sides:
            xs = [1]
        elif RIGHT in sides:
            xs = [last_x]
        else:
            xs = list(range(1, last_x + 1))
        if TOP in sides:
            ys = [1]
        elif BOTTOM in sides:
            ys = [last_y]
        else:
            ys = list(range(1, last_y + 1))
        return [(x, y) for y in ys for x in xs]


def perimeter_cells(width: int, height: int) -> List[Location]:
    """Border cells clockwise from the top-left corner."""
    cells: List[Location] = [(x, 0) for x in range(width)]
    cells.extend((width - 1, y) for y in range(1, height))
    cells.extend((x, height - 1) for x in range(width - 2, -1, -1))
    cells.extend((0, y) for y in range(height - 2, 0, -1))
    return cells


def side_of_wall_cell(cell: Location, width: int, height: int) -> str:
    x, y = cell
    if y == 0:
        return TOP
    if x == width - 1:
        return RIGHT
    if y == height - 1:
        return BOTTOM
    return LEFT


def _side_position(cell: Location, side: str) -> int:
    x, y = cell
    return x if side in (TOP, BOTTOM) else y


def _perimeter_runs(occupied: List[bool]) -> List[List[int]]:
    total = len(occupied)
    if all(occupied):
        return [list(range(total))]
    runs: List[List[int]] = []
    empty_index = occupied.index(False)
    current: List[int] = []
    for step in range(1, total + 1):
        index = (empty_index + step) % total
        if occupied[index]:
            current.append(index)
        elif current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)
    return runs


def _side_bounds(board: PixelBoard, side: str) -> Tuple[int, int]:
    width, height = board.get_width(), board.get_height()
    side_length = width if side in (TOP, BOTTOM) else height

    def is_occupied(position: int) -> bool:
        if side == TOP:
            return board.exists(position, 0)
        if side == BOTTOM:
            return board.exists(position, height - 1)
        if side == LEFT:
            return board.exists(0, position)
        return board.exists(width - 1, position)

    # corner runs reaching into this side push the bound inward, one gap included
    leading = 0
    while leading < side_length and is_occupied(leading):
        leading += 1
    trailing = 0
    while trailing < side_length and is_occupied(side_length - 1 - trailing):
        trailing += 1
    return leading + 1, side_length - 2 - trailing


def decompose(board: PixelBoard, invalid_location_offsets: Optional[InvalidLocationOffsets] = None) -> BoardDecomposition:
    """Split a board into cell groups plus the adjacency and detection model."""
    width, height = board.get_width(), board.get_height()
    if width < 3 or height < 3:
        raise ValueError(f"board must be at least 3 x 3, got {width} x {height}")
    policy = invalid_location_offsets or pixel_invalid_location_offsets
    decomposition = BoardDecomposition(width, height)
    wall_group_per_cell: Dict[Location, int] = {}

    def add_group(cells: Sequence[Location], cell_group_type: str) -> int:
        cell_group, anchor = CellGroup.from_absolute_cells(cells, cell_group_type)
        decomposition.cell_groups.append(cell_group)
        decomposition.anchors.append(anchor)
        return len(decomposition.cell_groups) - 1

    # ---- walls ----
    perimeter = perimeter_cells(width, height)
    corner_rank = {0: 0, width - 1: 1, width + height - 2: 2, 2 * width + height - 3: 3}
    runs = _perimeter_runs([board.exists(x, y) for x, y in perimeter])

    corner_runs: List[Tuple[int, List[int]]] = []
    segment_runs_per_side: Dict[str, List[List[int]]] = {side: [] for side in SIDES}
    for run in runs:
        ranks = [corner_rank[index] for index in run if index in corner_rank]
        if ranks:
            corner_runs.append((min(ranks), run))
        else:
            side = side_of_wall_cell(perimeter[run[0]], width, height)
            segment_runs_per_side[side].append(run)

    for _, run in sorted(corner_runs, key=lambda item: item[0]):
        cell_group_index = add_group([perimeter[index] for index in run], CORNER_WALL)
        decomposition.corner_cell_group_indexes.append(cell_group_index)
        for index in run:
            wall_group_per_cell[perimeter[index]] = cell_group_index

    for side in SIDES:
        side_runs = segment_runs_per_side[side]
        if not side_runs:
            continue
        side_runs.sort(key=lambda run: min(_side_position(perimeter[index], side) for index in run))
        bound_start, bound_end = _side_bounds(board, side)
        cell_group_indexes: List[int] = []
        lengths: List[int] = []
        for run in side_runs:
            cell_group_index = add_group([perimeter[index] for index in run], WALL_SEGMENT)
            cell_group_indexes.append(cell_group_index)
            lengths.append(len(run))
            for index in run:
                wall_group_per_cell[perimeter[index]] = cell_group_index
        decomposition.side_segments.append(SideSegments(side, cell_group_indexes, lengths, bound_start, bound_end))

    # ---- interior ----
    seen: Set[Location] = set()
    for y in range(1, height - 1):
        for x in range(1, width - 1):
            if (x, y) in seen or not board.exists(x, y):
                continue
            component: List[Location] = []
            touched_walls: Set[int] = set()
            touched_sides: Set[str] = set()
            queue = deque([(x, y)])
            seen.add((x, y))
            while queue:
                cx, cy = queue.popleft()
                component.append((cx, cy))
                for dx, dy in _NEIGHBOR_OFFSETS:
                    neighbor = (cx + dx, cy + dy)
                    wall_group = wall_group_per_cell.get(neighbor)
                    if wall_group is not None:
                        touched_walls.add(wall_group)
                        touched_sides.add(side_of_wall_cell(neighbor, width, height))
                        continue
                    nx, ny = neighbor
                    if 1 <= nx <= width - 2 and 1 <= ny <= height - 2 and neighbor not in seen and board.exists(nx, ny):
                        seen.add(neighbor)
                        queue.append(neighbor)
            cell_group_type = WALL_ADJACENT if touched_walls else FLOATER
            cell_group_index = add_group(component, cell_group_type)
            decomposition.interior_cell_group_indexes.append(cell_group_index)
            decomposition.touched_sides_per_cell_group_index[cell_group_index] = touched_sides
            decomposition.touched_walls_per_cell_group_index[cell_group_index] = touched_walls

    # ---- pair model ----
    total = decomposition.cell_groups_length()
    decomposition.is_adjacent = [[False] * total for _ in range(total)]
    for cell_group_index, touched_walls in decomposition.touched_walls_per_cell_group_index.items():
        for wall_group in touched_walls:
            decomposition.is_adjacent[cell_group_index][wall_group] = True
            decomposition.is_adjacent[wall_group][cell_group_index] = True

    payloads_per_group = [
        [(offset, board.get(ax + offset[0], ay + offset[1])) for offset in cell_group.cells]
        for cell_group, (ax, ay) in zip(decomposition.cell_groups, decomposition.anchors)
    ]
    decomposition.detection_offsets = [[[] for _ in range(total)] for _ in range(total)]
    for index_a in range(total):
        for index_b in range(total):
            if index_a == index_b:
                continue
            distinct_b = list({id(payload): payload for _, payload in payloads_per_group[index_b]}.values())
            offsets: Dict[Location, None] = {}
            for (cx, cy), payload_a in payloads_per_group[index_a]:
                for payload_b in distinct_b:
                    for ox, oy in policy(payload_a, payload_b):
                        offsets[(cx + ox, cy + oy)] = None
            decomposition.detection_offsets[index_a][index_b] = list(offsets)
    return decomposition
