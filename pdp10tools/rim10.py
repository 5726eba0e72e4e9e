"""RIM10 paper tapes: run the hardware read-in loader to load the core image."""

from __future__ import annotations

import sys
from typing import Iterable, Iterator, Optional, TextIO

from .memory import Memory
from .sblk import write_sblk_core

WORDMASK = 0o777777777777
SIGNBIT = 0o400000000000
LEFT = 0o777777000000
RIGHT = 0o777777

JRST = 0o254000000000
JUMPA = 0o324000000000

# Instructions used by the ITS RIM10 and DEC RIM10B loaders.
OP_ROT = 0o241
OP_JRST = 0o254
OP_XCT = 0o256
OP_AOBJN = 0o253
OP_ADD = 0o270
OP_CAME = 0o312
OP_SKIPL = 0o331
OP_SOJA = 0o364
OP_HRRI = 0o541
OP_DATAI = 0o70004
OP_CONO = 0o70020
OP_CONSO = 0o70034

MIDAS_RIM10 = (
    0o777761000000,  # -17,,0
    0o710600000060,  # CONO PTR,60
    0o541440000004,  # HRRI 11,4
    0o710740000010,  # CONSO PTR,10
    0o254000000003,  # JRST 3
    0o241011777776,  # ROT 0,-2(11)
    0o710471000010,  # DATAI PTR,@10(11)
    0o256011000010,  # XCT 10(11)
    0o256011000013,  # XCT 13(11)
    0o364440000000,  # SOJA 11,0
    0o312000000017,  # CAME 0,17
    0o270017000000,  # ADD 0,(17)
    0o331740000000,  # SKIPL 17,0
    0o254200000001,  # JRST 4,1
    0o253740000003,  # AOBJN 17,3
    0o254000000002,  # JRST 2
)

MACRO_RIM10B = (
    0o777762000000,  # -16,,0
    0o710600000060,  # ST:   CONO PTR,60
    0o541400000004,  # ST1:  HRRI A,RD+1
    0o710740000010,  # RD:   CONSO PTR,10
    0o254000000003,  #       JRST .-1
    0o710470000007,  #       DATAI PTR,@TBL1-RD+1(A)
    0o256010000007,  #       XCT TBL1-RD+1(A)
    0o256010000012,  #       XCT TBL2-RD+1(A)
    0o364400000000,  # A:    SOJA A,
    0o312740000016,  # TBL1: CAME CKSM,ADR
    0o270756000001,  #       ADD CKSM,1(ADR)
    0o331740000016,  #       SKIPL CKSM,ADR
    0o254200000001,  # TBL2: JRST 4,ST
    0o253700000003,  #       AOBJN ADR,RD
    0o254000000002,  # ADR:  JRST ST1
)


class Rim10Error(ValueError):
    """Raised for a tape the read-in loader cannot load."""


class _Machine:
    """Just enough of a processor to run a read-in loader."""

    def __init__(self, words: Iterator[int], memory: Memory) -> None:
        self.words = words
        self.memory = memory

    def word(self, address: int) -> int:
        value = self.memory.get(address)
        return WORDMASK if value is None else value

    def effective_address(self, insn: int) -> int:
        while True:
            x = (insn >> 18) & 0o17
            y = insn & RIGHT
            if x:
                y += self.word(x)
            y &= RIGHT
            if not insn & 0o20000000:
                return y
            insn = self.word(y)

    def execute_iot(self, insn: int, ea: int) -> int:
        function = (insn >> 21) & 0o70034
        if function == OP_DATAI:
            data = next(self.words, None)
            if data is None:
                raise Rim10Error("Unexpected end of RIM10 tape.")
            self.memory.set(ea, data)
        elif function == OP_CONSO:
            return 1
        return 0

    def execute(self, insn: int, pc: int) -> int:
        ea = self.effective_address(insn)
        ac = (insn >> 23) & 0o17
        op = insn >> 27

        if op == OP_ROT:
            ma = self.word(ac)
            if ea & 0o400000:
                n = (0o1000000 - ea) % 36
                ma = (ma >> n) | (ma << (36 - n))
            else:
                n = ea % 36
                ma = (ma << n) | (ma >> (36 - n))
            self.memory.set(ac, ma & WORDMASK)
        elif op == OP_AOBJN:
            ma = (self.word(ac) + 0o1000001) & WORDMASK
            self.memory.set(ac, ma)
            if ma & SIGNBIT:
                pc = ea
        elif op == OP_JRST:
            if ac == 0:
                pc = ea
            elif ac == 4:
                raise Rim10Error("HALT")
            else:
                raise Rim10Error(f"Unsupported JRST variant: {insn:012o}")
        elif op == OP_XCT:
            pc = self.execute(self.word(ea), pc)
        elif op == OP_ADD:
            ma = (self.word(ea) + self.word(ac)) & WORDMASK
            self.memory.set(ac, ma)
        elif op == OP_CAME:
            if self.word(ea) == self.word(ac):
                pc += 1
        elif op == OP_SKIPL:
            ma = self.word(ea)
            if ac:
                self.memory.set(ac, ma)
            if ma & SIGNBIT:
                pc += 1
        elif op == OP_SOJA:
            ma = (self.word(ac) - 1) & WORDMASK
            self.memory.set(ac, ma)
            pc = ea
        elif op == OP_HRRI:
            ma = (self.word(ac) & LEFT) | ea
            self.memory.set(ac, ma)
        elif 0o700 <= op <= 0o777:
            pc += self.execute_iot(insn, ea)
        else:
            raise Rim10Error(f"Unsupported RIM10 loader instruction: {insn:012o}")
        return pc


def read_rim10(
    stream: Iterable[int], memory: Memory, out: Optional[TextIO] = None
) -> int:
    """Load a RIM10 tape by running its loader; return the start instruction."""
    out = sys.stdout if out is None else out
    out.write("RIM10 format\n")
    words = iter(stream)

    first = next(words, None)
    if first is None:
        raise Rim10Error("Empty RIM10 tape.")
    address = (first & RIGHT) + 1
    length = 0o1000000 - (first >> 18)
    if length > 16:
        raise Rim10Error("RIM10 loader longer than 16 words.")
    if address + length > 16:
        raise Rim10Error("RIM10 loader doesn't fit in accumulators.")

    loader = [0] * 16
    for i in range(address, address + length):
        word = next(words, None)
        if word is None:
            raise Rim10Error("Unexpected end of RIM10 loader.")
        loader[i] = word
    memory.add(0, loader)

    machine = _Machine(words, memory)
    pc = address + length - 1
    insn = 0
    while pc < 16:
        insn = machine.word(pc)
        pc = machine.execute(insn, pc + 1)

    # The start instruction may have been executed by XCT.
    if insn >> 27 == OP_XCT:
        insn = machine.word(machine.effective_address(insn))

    if insn & LEFT in (JRST, JUMPA):
        start_instruction = insn
    else:
        start_instruction = JRST + pc
    out.write(f"Start instruction: {start_instruction:012o}\n")

    memory.remove(0, 1)
    memory.remove(address, length)
    return start_instruction


def write_rim10(memory: Memory, start_instruction: Optional[int] = None) -> list[int]:
    """A RIM10 tape: the loader, SBLK blocks from address 20, the start word."""
    return (
        list(MIDAS_RIM10)
        + write_sblk_core(memory, 0o20)
        + [start_instruction or 0]
    )