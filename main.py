#!/usr/bin/env python3
"""
regmachine: a small register-machine interpreter

Usage:
    # Run a listing to halt
    python main.py run program.txt --registers 1

    # Run with cycle detection
    python main.py analyze program.txt --max-steps 100000

    # Halting values of a gated program
    python main.py halting program.txt

    # Lowest seed producing a clock signal
    python main.py clock program.txt --limit 1000

    # Static control flow
    python main.py flow program.txt

    # Opcode discovery from samples
    python main.py opcodes samples.txt

    # Run demos
    python main.py demo --example all
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from regmachine import __version__
from regmachine.analysis.cycles import RunOutcome
from regmachine.analysis.flow import control_flow_graph, halt_reachable, indirect_nodes, loops
from regmachine.api.listing import (
    DEFAULT_REGISTER_COUNT,
    analyze_listing,
    listing_clock_seed,
    listing_halting_values,
    run_listing,
    solve_samples,
)
from regmachine.asm.listing import parse_listing


def read_source(path: str) -> str:
    """Read a listing from a file, or from stdin when path is '-'."""
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text()


def parse_registers_string(values: Optional[str]) -> List[int]:
    """Parse initial register values: '1,0,0'"""
    if not values:
        return []
    return [int(v.strip()) for v in values.split(",") if v.strip()]


def format_registers(registers) -> str:
    return "[" + ", ".join(str(v) for v in registers) + "]"


def cmd_run(args):
    """Execute the run command."""
    text = read_source(args.input)
    registers = run_listing(
        text,
        parse_registers_string(args.registers),
        register_count=args.register_count,
    )
    print(f"Registers: {format_registers(registers)}")
    return 0


def cmd_analyze(args):
    """Execute the analyze command."""
    text = read_source(args.input)
    result = analyze_listing(
        text,
        parse_registers_string(args.registers),
        register_count=args.register_count,
        output_register=args.output_register,
        max_steps=args.max_steps,
    )

    print(f"Outcome: {result.outcome.name}")
    print(f"  Steps: {result.steps}")
    print(f"  pc: {result.pc}")
    print(f"  Registers: {format_registers(result.registers)}")
    if result.outcome is RunOutcome.CYCLE:
        print(f"  Cycle: starts at step {result.cycle_start}, length {result.cycle_length}")
        print(f"  Outputs in cycle: {result.outputs_in_cycle}")
    if result.outputs:
        shown = result.outputs[:20]
        more = " ..." if len(result.outputs) > len(shown) else ""
        print(f"  Outputs ({len(result.outputs)}): {' '.join(map(str, shown))}{more}")
        print(f"  Last output: {result.last_output}")
    return 0


def cmd_halting(args):
    """Execute the halting command."""
    text = read_source(args.input)
    result = listing_halting_values(
        text,
        parse_registers_string(args.registers),
        register_count=args.register_count,
        gate_register=args.gate_register,
        first_only=args.first_only,
        max_steps=args.max_steps,
    )
    if not result.values:
        print("No gate instruction was reached")
        return 1

    print(f"Halting values collected: {len(result.values)}")
    print(f"  Fewest instructions: {result.first}")
    if not args.first_only:
        print(f"  Most instructions: {result.last}")
        print(f"  Sequence repeated: {result.repeated}")
    return 0


def cmd_clock(args):
    """Execute the clock command."""
    text = read_source(args.input)
    seed = listing_clock_seed(
        text,
        register_count=args.register_count,
        seed_register=args.seed_register,
        start=args.start,
        limit=args.limit,
        max_steps=args.max_steps,
    )
    if seed is None:
        print("No seed produced a clock signal")
        return 1
    print(f"Seed: {seed}")
    return 0


def cmd_flow(args):
    """Execute the flow command."""
    listing = parse_listing(read_source(args.input))
    g = control_flow_graph(listing.program, listing.ip_register)

    print(f"Instructions: {len(listing.program)}")
    print(f"  ip register: {listing.ip_register}")
    print(f"  Self-modifying: {g.graph['self_modifying']}")
    print(f"  Indirect jumps: {indirect_nodes(g)}")
    print(f"  Halt reachable: {halt_reachable(g)}")
    cycles = loops(g)
    print(f"  Loops: {len(cycles)}")
    for cycle in cycles:
        print(f"    {' -> '.join(map(str, cycle))}")
    return 0


def cmd_opcodes(args):
    """Execute the opcodes command."""
    report = solve_samples(read_source(args.input), register_count=args.register_count)
    print(f"Samples matching three or more opcodes: {report.ambiguous}")
    print("Opcode numbers:")
    for number, op in sorted(report.mapping.items()):
        print(f"  {number:2d}: {op.value}")
    print(f"Registers after program: {format_registers(report.registers)}")
    return 0


DEMO_DIVISORS = """\
#ip 0
seti 5 0 1
seti 6 0 2
addi 0 1 0
addr 1 2 3
setr 1 0 0
seti 8 0 4
seti 9 0 5
"""

DEMO_TOGGLE = """\
#ip 3
seti 2 0 0
tgl 0 0 0
seti 3 0 1
addr 1 1 2
"""

DEMO_GATED = """\
#ip 5
seti 0 0 1
muli 1 5 1
addi 1 3 1
bani 1 15 1
eqrr 1 0 3
addr 3 5 5
seti 0 0 5
"""

DEMO_CLOCK = """\
#ip 3
addi 0 -2 1
out 1 0 0
eqri 1 0 1
seti 0 0 3
"""


def demo_worked_example():
    """Demo: jumps as writes to the bound register"""
    print("=" * 60)
    print("Demo: Instruction pointer bound to register 0")
    print("=" * 60)
    registers = run_listing(DEMO_DIVISORS)
    print(f"\nFinal registers: {format_registers(registers)}")
    match = registers[0] == 6
    print(f"Register 0 == 6: {match}")
    return match


def demo_toggle():
    """Demo: self-modifying code"""
    print("=" * 60)
    print("Demo: Toggling an instruction ahead of the pc")
    print("=" * 60)
    registers = run_listing(DEMO_TOGGLE, register_count=4)
    print(f"\nFinal registers: {format_registers(registers)}")
    match = registers[2] == 4
    print(f"addr toggled to addi (register 2 == 4): {match}")
    return match


def demo_halting():
    """Demo: halting values of a gated program"""
    print("=" * 60)
    print("Demo: Halting values")
    print("=" * 60)
    result = listing_halting_values(DEMO_GATED)
    print(f"\nValues: {result.values}")
    print(f"Fewest instructions: {result.first}")
    print(f"Most instructions:   {result.last}")
    match = result.first == 3 and result.last == 0 and len(result.values) == 16
    print(f"Match: {match}")
    return match


def demo_clock():
    """Demo: clock-signal seed search"""
    print("=" * 60)
    print("Demo: Clock signal")
    print("=" * 60)
    seed = listing_clock_seed(DEMO_CLOCK, register_count=4, limit=10)
    print(f"\nLowest seed: {seed}")
    result = analyze_listing(DEMO_CLOCK, [seed], register_count=4)
    print(f"Outcome: {result.outcome.name}, outputs {result.outputs}")
    match = seed == 2 and result.outputs_in_cycle
    print(f"Match: {match}")
    return match


def cmd_demo(args):
    """Execute the demo command."""
    demos = {
        "worked": demo_worked_example,
        "toggle": demo_toggle,
        "halting": demo_halting,
        "clock": demo_clock,
    }

    if args.example == "all":
        results = []
        for name, func in demos.items():
            try:
                passed = func()
                results.append((name, passed))
            except (ValueError, IndexError) as e:
                print(f"Error in {name}: {e}")
                results.append((name, False))
            print()

        print("=" * 60)
        print("Summary")
        print("=" * 60)
        all_passed = True
        for name, passed in results:
            status = "PASS" if passed else "FAIL"
            print(f"  {name}: {status}")
            if not passed:
                all_passed = False

        return 0 if all_passed else 1

    elif args.example in demos:
        passed = demos[args.example]()
        return 0 if passed else 1
    else:
        print(f"Unknown example: {args.example}")
        print(f"Available: {', '.join(demos.keys())}, all")
        return 1


def cmd_test(args):
    """Execute the test command."""
    import subprocess

    test_dir = Path(__file__).parent / "tests"
    if not test_dir.exists():
        print(f"Test directory not found: {test_dir}")
        return 1

    cmd = [sys.executable, "-m", "pytest", str(test_dir)]
    if args.verbose:
        cmd.append("-v")
    if args.coverage:
        cmd.extend(["--cov=regmachine", "--cov-report=term-missing"])

    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def cmd_info(args):
    """Display system information."""
    import networkx

    print(f"regmachine v{__version__}")
    print("Register-machine interpreter with self-modification and cycle analysis")
    print()
    print("Instruction set:")
    print("  addr addi mulr muli banr bani borr bori divr divi")
    print("  setr seti gtir gtri gtrr eqir eqri eqrr")
    print("  tgl  - toggle the opcode at pc + rA")
    print("  out  - emit rA")
    print()
    print("Python:", sys.version.split()[0])
    print("NumPy:", np.__version__)
    print("NetworkX:", networkx.__version__)
    return 0


def add_machine_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("input", type=str, help="Listing file ('-' for stdin)")
    p.add_argument("--registers", "-r", type=str, help="Initial register values: '1,0,0'")
    p.add_argument(
        "--register-count", "-n",
        type=int,
        default=DEFAULT_REGISTER_COUNT,
        help=f"Register file width (default: {DEFAULT_REGISTER_COUNT})"
    )


def main():
    parser = argparse.ArgumentParser(
        prog="regmachine",
        description="regmachine: register-machine interpreter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  regmachine run program.txt --registers 1
  regmachine analyze program.txt --output-register 1 --max-steps 100000
  regmachine halting program.txt --gate-register 0
  regmachine clock program.txt --register-count 4 --limit 1000
  regmachine flow program.txt
  regmachine opcodes samples.txt
  regmachine demo --example all
"""
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"regmachine {__version__}"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Run a listing to halt")
    add_machine_arguments(run_parser)

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Run with cycle detection")
    add_machine_arguments(analyze_parser)
    analyze_parser.add_argument("--output-register", type=int, help="Register whose writes count as outputs")
    analyze_parser.add_argument("--max-steps", type=int, help="Step budget")

    # Halting command
    halting_parser = subparsers.add_parser("halting", help="Collect halting values of a gated program")
    add_machine_arguments(halting_parser)
    halting_parser.add_argument("--gate-register", type=int, default=0, help="Register the gate compares against")
    halting_parser.add_argument("--first-only", action="store_true", help="Stop at the first gate value")
    halting_parser.add_argument("--max-steps", type=int, help="Step budget")

    # Clock command
    clock_parser = subparsers.add_parser("clock", help="Find the lowest clock-signal seed")
    clock_parser.add_argument("input", type=str, help="Listing file ('-' for stdin)")
    clock_parser.add_argument("--register-count", "-n", type=int, default=DEFAULT_REGISTER_COUNT)
    clock_parser.add_argument("--seed-register", type=int, default=0, help="Register receiving the seed")
    clock_parser.add_argument("--start", type=int, default=0, help="First seed to try")
    clock_parser.add_argument("--limit", type=int, help="Seeds to try before giving up")
    clock_parser.add_argument("--max-steps", type=int, help="Step budget per attempt")

    # Flow command
    flow_parser = subparsers.add_parser("flow", help="Show static control flow")
    flow_parser.add_argument("input", type=str, help="Listing file ('-' for stdin)")

    # Opcodes command
    opcodes_parser = subparsers.add_parser("opcodes", help="Resolve opcode numbers from samples")
    opcodes_parser.add_argument("input", type=str, help="Sample file ('-' for stdin)")
    opcodes_parser.add_argument("--register-count", "-n", type=int, default=4)

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demonstration examples")
    demo_parser.add_argument(
        "--example", "-e",
        choices=["worked", "toggle", "halting", "clock", "all"],
        default="all",
        help="Which example to run (default: all)"
    )

    # Test command
    test_parser = subparsers.add_parser("test", help="Run test suite")
    test_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    test_parser.add_argument("--coverage", "-c", action="store_true", help="With coverage")

    # Info command
    subparsers.add_parser("info", help="Show system information")

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "run": cmd_run,
        "analyze": cmd_analyze,
        "halting": cmd_halting,
        "clock": cmd_clock,
        "flow": cmd_flow,
        "opcodes": cmd_opcodes,
        "demo": cmd_demo,
        "test": cmd_test,
        "info": cmd_info,
    }
    try:
        return commands[args.command](args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
