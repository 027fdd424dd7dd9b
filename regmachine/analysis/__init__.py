"""
Analysis module: Cycle detection, halting values, clock signals, control flow.
"""

from regmachine.analysis.cycles import CycleResult, RunOutcome, run_with_cycle_detection
from regmachine.analysis.halting import HaltingValues, find_gates, gate_operand, halting_values
from regmachine.analysis.signal import ClockCheck, find_clock_seed, is_clock_signal
from regmachine.analysis.flow import HALT, control_flow_graph, halt_reachable, indirect_nodes, loops

__all__ = [
    "CycleResult",
    "RunOutcome",
    "run_with_cycle_detection",
    "HaltingValues",
    "find_gates",
    "gate_operand",
    "halting_values",
    "ClockCheck",
    "find_clock_seed",
    "is_clock_signal",
    "HALT",
    "control_flow_graph",
    "halt_reachable",
    "indirect_nodes",
    "loops",
]
