"""
Example: Instruction pointer bound to a register.

Jumps happen by writing to register 0, which holds the pc.
"""

from regmachine import RegisterBank, VirtualMachine, parse_listing

LISTING = """\
#ip 0
seti 5 0 1
seti 6 0 2
addi 0 1 0
addr 1 2 3
setr 1 0 0
seti 8 0 4
seti 9 0 5
"""


def main():
    listing = parse_listing(LISTING)
    vm = VirtualMachine(listing.program, RegisterBank(6), ip_register=listing.ip_register)

    print("Tracing the worked example...")
    while not vm.halted:
        pc = vm.pc
        ins = vm.step()
        print(f"  pc={pc} {ins!s:<14} -> {vm.regs.tolist()}")

    print(f"\nHalted after {vm.steps} steps")
    print(f"Register 0 = {vm.regs[0]}")


if __name__ == "__main__":
    main()
