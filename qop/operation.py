# qop/operation.py

"""
Normalizes operation strings and compiles them into execution plans.

An operation string holds one symbol per qubit, most significant qubit
first (so index 0, the least significant qubit, is the last character):

  -           leave the qubit alone
  0, 1        condition: act only on basis states where the qubit has this value
  H, N, X, Y  rotate the qubit

Compiling an operation yields its Condition, its gate list and a Plan. A
Plan describes which blocks of the amplitude buffer to visit and, for each
gate, which free bits to loop over; execute_plan() interprets it against
an interleaved (real, imaginary) float64 buffer.
"""

import functools
import math
import threading
from collections import namedtuple
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from qop.errors import InvalidCharacter
from qop.logging_config import get_logger

log = get_logger(__name__)

GATES = "HNXY"
CONDITIONS = "01"

SQRT1_2 = 1.0 / math.sqrt(2.0)


# ------------------------------------------------------------------------
# Normalization
# ------------------------------------------------------------------------
# trimmed from the start of an operation, together with whitespace
_LEADING = "│|-_"

_SYNONYMS = {
    "│": "-", "|": "-", "-": "-", "_": "-",
    "0": "0", "○": "0",
    "1": "1", "●": "1",
    "H": "H", "h": "H",
    "⨁": "N", "⊕": "N", "+": "N", "N": "N", "n": "N",
    "X": "X", "x": "X",
    "Y": "Y", "y": "Y",
}


def _is_blank(char):
    return ord(char) <= 32


def normalize_op(op):
    """
    Normalize an operation string:
      - remove comments ('#' or '//' to end of string) and whitespace;
      - trim leading don't-care qubits;
      - map lower-case letters and alternative glyphs onto '-01HNXY'.

    An already compiled Operation is returned unchanged.
    Raises InvalidCharacter for anything else.
    """
    if isinstance(op, Operation):
        return op

    i = 0
    while i < len(op) and (_is_blank(op[i]) or op[i] in _LEADING):
        i += 1

    normalized = []
    while i < len(op):
        char = op[i]
        i += 1
        if _is_blank(char):
            continue
        if char == "#" or (char == "/" and op[i:i + 1] == "/"):
            break
        symbol = _SYNONYMS.get(char)
        if symbol is None:
            raise InvalidCharacter(char)
        normalized.append(symbol)

    return "".join(normalized)


# ------------------------------------------------------------------------
# Execution plans
# ------------------------------------------------------------------------
Condition = namedtuple("Condition", "mask value")

# a contiguous run of basis-index bits: start, start+1, ..., start+length-1
Loop = namedtuple("Loop", "start length")


def free_runs(mask):
    """Split a bit mask into its contiguous runs of set bits, lowest first."""
    runs = []
    bit = 0
    length = 0
    while mask:
        if mask & 1:
            length += 1
        elif length:
            runs.append(Loop(bit - length, length))
            length = 0
        bit += 1
        mask >>= 1
    if length:
        runs.append(Loop(bit - length, length))
    return runs


def loop_offsets(loops):
    """
    Return the index offsets visited by nesting the given loops, innermost
    first. Each loop assigns every value to its run of bits, so the result
    has 2 ** (total run length) entries, in visiting order.
    """
    offsets = np.zeros(1, dtype=np.int64)
    for start, length in loops:
        counter = np.arange(1 << length, dtype=np.int64) << start
        offsets = (counter[:, None] + offsets[None, :]).ravel()
    return offsets


@dataclass(frozen=True)
class Step:
    """One gate (or the global phase, gate=None) and the loops wrapping it."""
    gate: Optional[str]
    bit: Optional[int]
    loops: Tuple[Loop, ...]
    offsets: np.ndarray = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "offsets", loop_offsets(self.loops))


@dataclass(frozen=True)
class Plan:
    start: int            # first basis index visited (the condition value)
    stride: int           # basis states per block, 2 ** length
    trig: frozenset       # trig value sets the steps need
    steps: Tuple[Step, ...]


# trig value sets each gate kind reads
_TRIG_NEEDED = {
    "H": ("half", "half_over_sqrt2"),
    "N": ("half",),
    "X": ("full",),
    "Y": ("full",),
    None: ("full",),
}


def compile_plan(op):
    """
    Compile a canonical operation string.

    Returns (condition, gates, plan). Bits are visited from least to most
    significant. Each gate absorbs the run of '-' bits directly above it:
    the gate's own step loops over every free bit below the top of that run,
    and every step emitted before it is wrapped in one more loop over the
    gate bit and the run. Condition bits are never looped over; the plan
    starts at the condition value and strides over whole operation blocks.
    """
    length = len(op)
    min_length = len(op.lstrip(CONDITIONS))
    mask = value = 0
    gates = []
    pending = []
    trig = set()

    i = 0
    while i < length:
        char = op[length - 1 - i]
        if char in CONDITIONS:
            mask |= 1 << i
            if char == "1":
                value |= 1 << i
            if i < min_length:
                gates.append(None)
            i += 1
            continue

        gate = char if char in GATES else None
        if i < min_length:
            gates.append(gate)

        run = 1
        while i + run < length and op[length - 1 - i - run] == "-":
            run += 1
            gates.append(None)

        for _, _, loops in pending:
            loops.append(Loop(i, run))

        if gate is not None:
            trig.update(_TRIG_NEEDED[gate])
            free = ((1 << (i + run)) - 1) & ~((1 << i) | mask)
            pending.append((gate, i, free_runs(free)))

        i += run

    if not pending:
        # no gates: rotate the phase of every amplitude meeting the condition
        trig.update(_TRIG_NEEDED[None])
        pending.append((None, None, free_runs(((1 << length) - 1) & ~mask)))

    plan = Plan(
        start=value,
        stride=1 << length,
        trig=frozenset(trig),
        steps=tuple(Step(gate, bit, tuple(loops)) for gate, bit, loops in pending),
    )
    return Condition(mask, value), gates, plan


# ------------------------------------------------------------------------
# Plan interpreter
# ------------------------------------------------------------------------
def trig_values(needed, rotation):
    """Compute only the trig values a plan needs, for a rotation in turns."""
    half_angle = math.pi * rotation
    values = {}
    if "full" in needed:
        values["cos"] = math.cos(2 * half_angle)
        values["sin"] = math.sin(2 * half_angle)
    if "half" in needed:
        values["cos_half"] = math.cos(half_angle)
        values["sin_half"] = math.sin(half_angle)
    if "half_over_sqrt2" in needed:
        values["sin_half_over_sqrt2"] = values["sin_half"] * SQRT1_2
    return values


def _rotate_h(z, lo, hi, trig):
    c, s = trig["cos_half"], trig["sin_half_over_sqrt2"]
    phase = complex(trig["cos_half"], trig["sin_half"])
    a = z[lo]
    b = z[hi]
    z[lo] = phase * (c * a - 1j * s * (a + b))
    z[hi] = phase * (c * b - 1j * s * (a - b))


def _rotate_n(z, lo, hi, trig):
    c, s = trig["cos_half"], trig["sin_half"]
    phase = complex(c, s)
    a = z[lo]
    b = z[hi]
    z[lo] = phase * (c * a - 1j * s * b)
    z[hi] = phase * (c * b - 1j * s * a)


def _rotate_x(z, lo, hi, trig):
    c, s = trig["cos"], trig["sin"]
    a = z[lo]
    b = z[hi]
    z[lo] = c * a - 1j * s * b
    z[hi] = c * b - 1j * s * a


def _rotate_y(z, lo, hi, trig):
    c, s = trig["cos"], trig["sin"]
    a = z[lo]
    b = z[hi]
    z[lo] = c * a - s * b
    z[hi] = c * b + s * a


_GATE_KERNELS = {
    "H": _rotate_h,
    "N": _rotate_n,
    "X": _rotate_x,
    "Y": _rotate_y,
}


def execute_plan(plan, amplitudes, rotation):
    """
    Transform ``amplitudes`` in place by ``rotation`` whole turns.

    ``amplitudes`` must be a contiguous float64 array of alternating real
    and imaginary parts, large enough for the operation's qubits.
    """
    if not isinstance(amplitudes, np.ndarray) or amplitudes.dtype != np.float64:
        raise TypeError("amplitudes must be a float64 numpy array")

    z = amplitudes.view(np.complex128)
    base = np.arange(plan.start, z.shape[0], plan.stride, dtype=np.int64)
    if not base.size:
        return

    trig = trig_values(plan.trig, rotation)
    for step in plan.steps:
        indices = (base[:, None] + step.offsets[None, :]).ravel()
        if step.gate is None:
            z[indices] *= complex(trig["cos"], trig["sin"])
        else:
            _GATE_KERNELS[step.gate](z, indices, indices + (1 << step.bit), trig)


def _noop_transform(amplitudes, rotation):
    return None


# ------------------------------------------------------------------------
# Operation
# ------------------------------------------------------------------------
class Operation:
    """
    A compiled quantum operation. Compilation is performed lazily and at
    most once per instance.

    Construct from an operation string, from another Operation (copy), or
    from None (the no-op).
    """

    def __init__(self, op):
        self._lock = threading.Lock()
        if isinstance(op, Operation):
            self.op = op.op
            self.length = op.length
            self.min_length = op.min_length
            self._condition = op._condition
            self._gates = op._gates
            self._plan = op._plan
            self._transform = op._transform
        elif op is None:
            self.op = None
            self.length = self.min_length = 0
            self._condition = Condition(0, 0)
            self._gates = []
            self._plan = None
            self._transform = _noop_transform
        else:
            self.op = normalize_op(op)
            self.length = len(self.op)
            # trailing (most significant) conditions need no qubits of their own
            self.min_length = len(self.op.lstrip(CONDITIONS))
            self._condition = None
            self._gates = None
            self._plan = None
            self._transform = None

    def get(self, index):
        """
        Return the operation symbol for qubit ``index`` (0 = least
        significant = last character), or '-' beyond the operation's length.
        """
        if index >= self.length:
            return "-"
        return self.op[self.length - 1 - index]

    def get_condition(self):
        """Return the Condition (mask, value) of the '0'/'1' qubits."""
        self.compiled()
        return self._condition

    condition = property(get_condition)

    def get_gates(self):
        """
        Return a list of min_length entries holding the gate ('H', 'N', 'X',
        'Y') at each qubit, or None where there is a condition or no gate.
        """
        self.compiled()
        return self._gates

    gates = property(get_gates)

    @property
    def plan(self):
        self.compiled()
        return self._plan

    def compiled(self):
        """
        Return the function that transforms a quantum state by this
        operation. It takes the amplitude buffer and the rotation in whole
        turns (not radians).
        """
        if self._transform is None:
            with self._lock:
                if self._transform is None:
                    self._condition, self._gates, self._plan = compile_plan(self.op)
                    log.debug("compiled %r: condition=%s, %d step(s)",
                              self.op, self._condition, len(self._plan.steps))
                    self._transform = functools.partial(execute_plan, self._plan)
        return self._transform

    def __repr__(self):
        return f"Operation({self.op!r})"


# flyweight no-op
NOOP = Operation(None)


def compiled_op(op):
    """Return an Operation for a string, an Operation, or None (the no-op)."""
    if isinstance(op, Operation):
        return op
    if op is None:
        return NOOP
    return Operation(op)
