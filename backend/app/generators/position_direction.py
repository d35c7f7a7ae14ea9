"""Position and direction generator on simple, lettered and coordinate grids."""
from __future__ import annotations

import math

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource, clamp

PROBLEM_TYPES = (
    "identify_position",
    "follow_directions",
    "give_directions",
    "coordinates",
    "compass_directions",
    "relative_position",
)

COMPASS_DIRECTIONS = ["North", "South", "East", "West"]
INTERMEDIATE_DIRECTIONS = ["North-East", "North-West", "South-East", "South-West"]
ALL_DIRECTIONS = COMPASS_DIRECTIONS + INTERMEDIATE_DIRECTIONS
SIMPLE_DIRECTIONS = ["up", "down", "left", "right"]

GRID_LETTERS = "ABCDEFGH"
MAX_GRID = len(GRID_LETTERS)
MAX_MOVE_STEPS = 3
MAX_MOVES = 3

# (dx, dy) per unit step; y grows northwards.
DIRECTION_VECTORS = {
    "north": (0, 1), "up": (0, 1),
    "south": (0, -1), "down": (0, -1),
    "east": (1, 0), "right": (1, 0),
    "west": (-1, 0), "left": (-1, 0),
    "north-east": (1, 1),
    "north-west": (-1, 1),
    "south-east": (1, -1),
    "south-west": (-1, -1),
}


def move(position: dict, direction: str, steps: int, grid_size: int) -> dict:
    """Apply one movement, clamping each axis into 1..grid_size."""
    dx, dy = DIRECTION_VECTORS.get(direction.lower(), (0, 0))
    return {
        "x": clamp(position["x"] + dx * steps, 1, grid_size),
        "y": clamp(position["y"] + dy * steps, 1, grid_size),
    }


def grid_reference(position: dict, system: str) -> str:
    if system == "coordinate_plane":
        return f"({position['x']}, {position['y']})"
    if system == "lettered_grid":
        return f"{GRID_LETTERS[position['x'] - 1]}{position['y']}"
    return f"Column {position['x']}, Row {position['y']}"


def relative_position(reference: dict, target: dict) -> str:
    dx = target["x"] - reference["x"]
    dy = target["y"] - reference["y"]
    if dx == 0 and dy == 0:
        return "same position"
    vertical = "above" if dy > 0 else "below" if dy < 0 else ""
    horizontal = "to the right" if dx > 0 else "to the left" if dx < 0 else ""
    if vertical and horizontal:
        return f"{vertical} and {horizontal}"
    return vertical or horizontal


def simple_path(start: dict, target: dict, use_compass: bool) -> list[dict]:
    """Horizontal leg first, then vertical."""
    path = []
    dx = target["x"] - start["x"]
    dy = target["y"] - start["y"]
    if dx:
        direction = ("East" if dx > 0 else "West") if use_compass else ("right" if dx > 0 else "left")
        path.append({"direction": direction, "steps": abs(dx)})
    if dy:
        direction = ("North" if dy > 0 else "South") if use_compass else ("up" if dy > 0 else "down")
        path.append({"direction": direction, "steps": abs(dy)})
    return path


def describe_moves(moves: list[dict]) -> str:
    return ", then ".join(f"{m['steps']} step{'s' if m['steps'] > 1 else ''} {m['direction']}" for m in moves)


class PositionDirectionGenerator(GeneratorContract):
    model_id = "POSITION_DIRECTION"

    def default_params(self, year: int) -> dict:
        table = {
            1: ("simple_grid", False, 3, False, 1, ["identify_position", "relative_position"]),
            2: ("simple_grid", False, 4, False, 2,
                ["identify_position", "follow_directions", "relative_position"]),
            3: ("lettered_grid", True, 5, False, 3,
                ["identify_position", "follow_directions", "compass_directions", "relative_position"]),
            4: ("lettered_grid", True, 6, True, 4,
                ["identify_position", "follow_directions", "give_directions", "coordinates",
                 "compass_directions"]),
            5: ("coordinate_plane", True, 8, True, 5,
                ["follow_directions", "give_directions", "coordinates", "compass_directions",
                 "relative_position"]),
            6: ("coordinate_plane", True, 10, True, 6,
                ["follow_directions", "give_directions", "coordinates", "compass_directions",
                 "relative_position"]),
        }
        system, compass, size, diagonals, steps, problems = table[year]
        return {
            "coordinate_system": system,
            "use_compass_directions": compass,
            "max_grid_size": size,
            "include_diagonals": diagonals,
            "movement_steps": steps,
            "problem_types": problems,
        }

    def build(self, params: dict, source: RandomValueSource) -> dict:
        system = params.get("coordinate_system", "simple_grid")
        grid = max(1, min(int(params.get("max_grid_size", 3)), MAX_GRID))
        problem = source.choice([p for p in params.get("problem_types") or [] if p in PROBLEM_TYPES]
                                or ["identify_position"])
        out = {"operation": "POSITION_DIRECTION", "problem_type": problem,
               "coordinate_system": system, "grid_size": grid}

        if problem == "follow_directions":
            start = self._position(grid, source)
            moves = self._movements(params, source)
            target = start
            for m in moves:
                target = move(target, m["direction"], m["steps"], grid)
            out.update(start_position=start, target_position=target, movements=moves,
                       visual_description=f"Starting position and movement instructions: {describe_moves(moves)}",
                       correct_answer=grid_reference(target, system))
        elif problem == "give_directions":
            start, target = self._position(grid, source), self._position(grid, source)
            moves = simple_path(start, target, bool(params.get("use_compass_directions")))
            out.update(start_position=start, target_position=target, movements=moves,
                       visual_description="Path from start to target position",
                       correct_answer=describe_moves(moves))
        elif problem == "coordinates":
            position = self._position(grid, source)
            if system == "coordinate_plane":
                focus = source.choice(["x_coordinate", "y_coordinate", "both_coordinates"])
                answer = {"x_coordinate": str(position["x"]), "y_coordinate": str(position["y"])}.get(
                    focus, grid_reference(position, system))
            else:
                focus = "grid_reference"
                answer = grid_reference(position, "lettered_grid")
            out.update(start_position=position, target_position=position, question_focus=focus,
                       visual_description="Object on coordinate grid at specific position",
                       correct_answer=answer)
        elif problem == "compass_directions":
            centre = {"x": math.ceil(grid / 2), "y": math.ceil(grid / 2)}
            direction = source.choice(ALL_DIRECTIONS if params.get("include_diagonals") else COMPASS_DIRECTIONS)
            steps = source.randint(1, MAX_MOVE_STEPS)
            out.update(start_position=centre, target_position=move(centre, direction, steps, grid),
                       movements=[{"direction": direction, "steps": steps}],
                       visual_description=f"Movement {describe_moves([{'direction': direction, 'steps': steps}])} from center",
                       correct_answer=direction)
        elif problem == "relative_position":
            reference, target = self._position(grid, source), self._position(grid, source)
            out.update(start_position=reference, target_position=target,
                       visual_description="Two objects on grid with relative positioning",
                       correct_answer=relative_position(reference, target))
        else:
            position = self._position(grid, source)
            out.update(start_position=position, target_position=position,
                       visual_description=f"Object located at position on {grid}×{grid} grid",
                       correct_answer=grid_reference(position, system))
        return out

    def _position(self, grid: int, source: RandomValueSource) -> dict:
        return {"x": source.randint(1, grid), "y": source.randint(1, grid)}

    def _movements(self, params: dict, source: RandomValueSource) -> list[dict]:
        count = source.randint(1, max(1, min(int(params.get("movement_steps", 1)), MAX_MOVES)))
        if params.get("use_compass_directions"):
            directions = ALL_DIRECTIONS if params.get("include_diagonals") else COMPASS_DIRECTIONS
        else:
            directions = SIMPLE_DIRECTIONS
        return [{"direction": source.choice(directions), "steps": source.randint(1, MAX_MOVE_STEPS)}
                for _ in range(count)]
