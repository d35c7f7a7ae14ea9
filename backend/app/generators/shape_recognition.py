"""2D/3D shape recognition generator."""
from __future__ import annotations

from app.generators.base import GeneratorContract
from app.generators.random_source import RandomValueSource

PROBLEM_TYPES = ("identify_shape", "count_sides", "count_vertices", "compare_shapes")

SHAPE_DATA = {
    "circle": {"type": "2d", "sides": 0, "vertices": 0, "category": "circle",
               "properties": ["curved", "no_sides", "no_vertices", "symmetric"]},
    "triangle": {"type": "2d", "sides": 3, "vertices": 3, "category": "polygon",
                 "properties": ["straight_sides", "three_sides", "three_vertices"]},
    "square": {"type": "2d", "sides": 4, "vertices": 4, "category": "quadrilateral",
               "properties": ["straight_sides", "equal_sides", "four_sides", "right_angles"]},
    "rectangle": {"type": "2d", "sides": 4, "vertices": 4, "category": "quadrilateral",
                  "properties": ["straight_sides", "parallel_sides", "four_sides", "right_angles"]},
    "pentagon": {"type": "2d", "sides": 5, "vertices": 5, "category": "polygon",
                 "properties": ["straight_sides", "five_sides", "five_vertices"]},
    "hexagon": {"type": "2d", "sides": 6, "vertices": 6, "category": "polygon",
                "properties": ["straight_sides", "six_sides", "six_vertices"]},
    "cube": {"type": "3d", "faces": 6, "edges": 12, "vertices": 8, "category": "polyhedron",
             "properties": ["square_faces", "equal_edges", "six_faces"]},
    "sphere": {"type": "3d", "faces": 1, "edges": 0, "vertices": 0, "category": "curved_3d",
               "properties": ["curved_surface", "no_edges", "no_vertices"]},
    "cylinder": {"type": "3d", "faces": 3, "edges": 2, "vertices": 0, "category": "curved_3d",
                 "properties": ["curved_surface", "circular_bases", "three_faces"]},
    "cone": {"type": "3d", "faces": 2, "edges": 1, "vertices": 1, "category": "curved_3d",
             "properties": ["curved_surface", "circular_base", "pointed_top"]},
    "pyramid": {"type": "3d", "faces": 5, "edges": 8, "vertices": 5, "category": "polyhedron",
                "properties": ["triangular_faces", "square_base", "pointed_top"]},
}

# Shapes without countable corners.
NO_VERTEX_SHAPES = {"circle", "sphere", "cylinder"}


def describe(name: str) -> dict:
    info = SHAPE_DATA[name]
    return {"name": name, "type": info["type"], "sides": info.get("sides"),
            "vertices": info.get("vertices"), "properties": list(info["properties"]),
            "category": info["category"]}


class ShapeRecognitionGenerator(GeneratorContract):
    model_id = "SHAPE_RECOGNITION"

    def default_params(self, year: int) -> dict:
        if year <= 1:
            return {"include_2d_shapes": ["circle", "triangle", "square"],
                    "include_3d_shapes": ["cube", "sphere"], "problem_types": ["identify_shape"]}
        if year <= 2:
            return {"include_2d_shapes": ["circle", "triangle", "square", "rectangle"],
                    "include_3d_shapes": ["cube", "sphere", "cylinder"],
                    "problem_types": ["identify_shape", "count_sides"]}
        if year <= 4:
            return {"include_2d_shapes": ["circle", "triangle", "square", "rectangle", "pentagon"],
                    "include_3d_shapes": ["cube", "sphere", "cylinder", "cone"],
                    "problem_types": ["identify_shape", "count_sides", "count_vertices"]}
        return {"include_2d_shapes": ["circle", "triangle", "square", "rectangle", "pentagon", "hexagon"],
                "include_3d_shapes": ["cube", "sphere", "cylinder", "cone", "pyramid"],
                "problem_types": list(PROBLEM_TYPES)}

    def build(self, params: dict, source: RandomValueSource) -> dict:
        flat = [s for s in params.get("include_2d_shapes") or [] if s in SHAPE_DATA]
        solid = [s for s in params.get("include_3d_shapes") or [] if s in SHAPE_DATA]
        shapes = flat + solid or ["square"]
        problem = source.choice([p for p in params.get("problem_types") or [] if p in PROBLEM_TYPES]
                                or ["identify_shape"])

        if problem == "count_sides":
            pool = [s for s in flat if s != "circle"]
            if pool:
                target = source.choice(pool)
                return self._single(problem, target, SHAPE_DATA[target]["sides"])
        elif problem == "count_vertices":
            pool = [s for s in shapes if s not in NO_VERTEX_SHAPES]
            if pool:
                target = source.choice(pool)
                return self._single(problem, target, SHAPE_DATA[target]["vertices"])
        elif problem == "compare_shapes" and len(shapes) > 1:
            return self._compare(shapes, source)

        target = source.choice(shapes)
        out = self._single("identify_shape", target, target)
        out["distractors"] = [s for s in shapes if s != target][:3]
        return out

    def _single(self, problem: str, target: str, answer) -> dict:
        return {"operation": "SHAPE_RECOGNITION", "problem_type": problem,
                "shape_data": [describe(target)], "target_shape": target, "correct_answer": answer}

    def _compare(self, shapes: list, source: RandomValueSource) -> dict:
        first = source.choice(shapes)
        second = source.choice([s for s in shapes if s != first])
        a = SHAPE_DATA[first].get("sides") or 0
        b = SHAPE_DATA[second].get("sides") or 0
        if a > b:
            verdict, answer = "first_more_sides", f"{first} has more sides"
        elif b > a:
            verdict, answer = "second_more_sides", f"{second} has more sides"
        else:
            verdict, answer = "equal_sides", "Both shapes have the same number of sides"
        return {"operation": "SHAPE_RECOGNITION", "problem_type": "compare_shapes",
                "shape_data": [describe(first), describe(second)],
                "comparison_result": verdict, "correct_answer": answer}
