"""Cross-check enumeration counts against an independent CP-SAT model."""
import pytest

from incrementer.shifter_incrementer import ShifterIncrementer
from models import Segment
from shifter.segment_permutation_shifter import SegmentPermutationShifter

cp_model = pytest.importorskip("ortools.sat.python.cp_model")


class _SolutionCounter(cp_model.CpSolverSolutionCallback):
    def __init__(self):
        super().__init__()
        self.count = 0

    def on_solution_callback(self):
        self.count += 1


def _cp_sat_layout_count(lengths, bounding_length, padding):
    model = cp_model.CpModel()
    starts = [model.NewIntVar(0, bounding_length - length, f"s{i}") for i, length in enumerate(lengths)]
    for i in range(len(lengths)):
        for j in range(i + 1, len(lengths)):
            before = model.NewBoolVar(f"b{i}_{j}")
            model.Add(starts[i] + lengths[i] + padding <= starts[j]).OnlyEnforceIf(before)
            model.Add(starts[j] + lengths[j] + padding <= starts[i]).OnlyEnforceIf(before.Not())
    solver = cp_model.CpSolver()
    solver.parameters.enumerate_all_solutions = True
    counter = _SolutionCounter()
    status = solver.Solve(model, counter)
    assert status in (cp_model.OPTIMAL, cp_model.FEASIBLE, cp_model.INFEASIBLE)
    return counter.count


@pytest.mark.parametrize(
    "lengths,bounding_length,padding",
    [
        ([1, 1], 4, 1),
        ([2, 2, 2], 10, 1),
        ([1, 2, 3], 9, 1),
        ([1, 3], 8, 2),
        ([2, 2], 3, 1),
    ],
)
def test_segment_shifter_matches_cp_sat(lengths, bounding_length, padding):
    shifter = SegmentPermutationShifter([Segment(length) for length in lengths], (0, 0), bounding_length, True, padding)
    ours = sum(1 for _ in ShifterIncrementer(shifter))
    assert ours == _cp_sat_layout_count(lengths, bounding_length, padding)
