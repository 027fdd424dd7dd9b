"""
Example: Halting values of a program gated on register 0.

The program halts once eqrr finds register 1 equal to register 0. The
analyzer intercepts that comparison to list every value that would halt it.
"""

from regmachine import halting_values, parse_listing
from regmachine.analysis.flow import control_flow_graph, loops

LISTING = """\
#ip 5
seti 0 0 1
muli 1 5 1
addi 1 3 1
bani 1 15 1
eqrr 1 0 3
addr 3 5 5
seti 0 0 5
"""


def main():
    listing = parse_listing(LISTING)

    g = control_flow_graph(listing.program, listing.ip_register)
    print(f"Loops: {loops(g)}")

    result = halting_values(listing.ip_register, listing.program, [0] * 6)
    print(f"Values in order reached: {result.values}")
    print(f"Halts soonest with r0 = {result.first}")
    print(f"Halts latest with r0 = {result.last}")


if __name__ == "__main__":
    main()
