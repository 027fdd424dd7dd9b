"""
Example: Searching for a seed that makes a program emit a clock signal.

Each seed runs on a fresh program clone until a machine state repeats.
"""

from regmachine import parse_listing, run_with_cycle_detection
from regmachine.analysis.signal import find_clock_seed

LISTING = """\
#ip 3
addi 0 -2 1
out 1 0 0
eqri 1 0 1
seti 0 0 3
"""


def main():
    listing = parse_listing(LISTING)

    for seed in range(4):
        result = run_with_cycle_detection(listing.ip_register, listing.program, [seed, 0, 0, 0])
        print(f"seed {seed}: {result.outcome.name}, first outputs {result.outputs[:4]}")

    seed = find_clock_seed(listing.ip_register, listing.program, 4, limit=100)
    print(f"\nLowest clock seed: {seed}")


if __name__ == "__main__":
    main()
