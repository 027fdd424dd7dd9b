"""
regmachine/analysis/flow.py

Static control-flow graph of a program.

Jumps are ordinary writes to the instruction pointer register, so successors
are resolved from the idioms listings actually use:
- ``seti k _ ip``: absolute jump to k + 1
- ``addi ip k ip``: relative jump by k + 1
- ``addr ip r ip`` / ``addr r ip ip``: skip the next instruction when r is 1
  (r is assumed to hold a comparison result)
- ``mulr ip ip ip``: jump to pc * pc + 1, usually off the end
Any other write to the ip register marks the node ``indirect``. TGL makes the
graph an approximation; the graph attribute ``self_modifying`` flags that.
"""

from __future__ import annotations

from typing import List, Optional

import networkx as nx

from regmachine.ir.ops import Address, Instruction, OpCode, Program, RegID

HALT = "halt"


def static_successors(address: Address, ins: Instruction, ip_register: Optional[RegID]) -> Optional[List[int]]:
    """
    Possible next addresses of one instruction, or None if not statically known.
    """
    if ip_register is None or not ins.writes_register(ip_register):
        return [address + 1]
    ip = ip_register
    if ins.op == OpCode.SETI:
        return [ins.a + 1]
    if ins.op == OpCode.SETR and ins.a == ip:
        return [address + 1]
    if ins.op == OpCode.ADDI and ins.a == ip:
        return [address + ins.b + 1]
    if ins.op == OpCode.ADDR:
        if ins.a == ip and ins.b == ip:
            return [2 * address + 1]
        if ins.a == ip or ins.b == ip:
            return [address + 1, address + 2]
    if ins.op == OpCode.MULR and ins.a == ip and ins.b == ip:
        return [address * address + 1]
    if ins.op == OpCode.MULI and ins.a == ip:
        return [address * ins.b + 1]
    return None


def control_flow_graph(program: Program, ip_register: Optional[RegID]) -> nx.DiGraph:
    """
    Build the control-flow graph.

    Nodes are instruction addresses plus the HALT sink. Each address node
    carries ``instruction`` (its listing text) and ``indirect``.

    Args:
        program: Program to analyze
        ip_register: Register bound to the instruction pointer

    Returns:
        Directed graph of possible transfers
    """
    g = nx.DiGraph(self_modifying=any(ins.op == OpCode.TGL for ins in program))
    g.add_node(HALT)
    for addr, ins in enumerate(program):
        g.add_node(addr, instruction=ins.encode(), indirect=False)
    for addr, ins in enumerate(program):
        targets = static_successors(addr, ins, ip_register)
        if targets is None:
            g.nodes[addr]["indirect"] = True
            continue
        for target in targets:
            g.add_edge(addr, target if program.contains(target) else HALT)
    return g


def loops(g: nx.DiGraph) -> List[List[int]]:
    """Elementary cycles of the graph, each rotated to start at its lowest address."""
    out = []
    for cycle in nx.simple_cycles(g):
        k = cycle.index(min(cycle))
        out.append(cycle[k:] + cycle[:k])
    return sorted(out)


def indirect_nodes(g: nx.DiGraph) -> List[int]:
    return sorted(n for n, data in g.nodes(data=True) if data.get("indirect"))


def halt_reachable(g: nx.DiGraph, start: Address = 0) -> bool:
    """
    True if HALT may be reachable from start.

    Reaching an indirect jump counts as possibly halting.
    """
    if start not in g:
        return True
    reach = nx.descendants(g, start) | {start}
    return HALT in reach or any(g.nodes[n].get("indirect") for n in reach if n != HALT)
