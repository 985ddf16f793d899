# qop/simulator.py

"""
Simulates the state of a quantum processor.

The state is a dense buffer of 2 ** number_of_qubits complex amplitudes
stored as alternating real and imaginary float64 values. Operations modify
it in place; the number of qubits grows on demand and never shrinks.
"""

import numpy as np

from qop.config import DEFAULT_CONFIG
from qop.logging_config import get_logger
from qop.operation import compiled_op

log = get_logger(__name__)


class Simulator:
    def __init__(self, source=0):
        """
        Construct a simulator with either:
          - an initial number of qubits, all |0⟩, or
          - a copy of another Simulator.
        """
        if isinstance(source, Simulator):
            self.number_of_qubits = source.number_of_qubits
            self.amplitudes = source.amplitudes.copy()
        else:
            self.reset()
            self.expand_state(source)

    def reset(self):
        """Zero all qubits, back to the single vacuum amplitude."""
        self.number_of_qubits = 0
        self.amplitudes = np.array([1.0, 0.0])

    def apply(self, op, rotation=DEFAULT_CONFIG.default_rotation):
        """
        Perform an operation, modifying the quantum state.

        Requires:
             op - an operation string, an Operation, or None (no-op);
             rotation - whole turns (not radians).
        Ensures:
             Returns the compiled Operation.
        """
        op = compiled_op(op)

        # full rotation(s) get us back to where we started
        if float(rotation).is_integer():
            return op

        transform = op.compiled()

        # conditional upon a nonexistent qubit being 1
        if op.condition.value >= (1 << self.number_of_qubits):
            log.debug("skipped %r: condition %s unsatisfiable with %d qubit(s)",
                      op, op.condition, self.number_of_qubits)
            return op

        self.expand_state(op.min_length)
        transform(self.amplitudes, rotation)
        return op

    def expand_state(self, number_of_qubits):
        """
        Increase the state to the given number of qubits. New qubits are |0⟩,
        so existing amplitudes keep their offsets and new ones are zero.
        Does nothing if the state already has enough qubits.
        """
        if number_of_qubits > self.number_of_qubits:
            old_length = self.amplitudes.shape[0]
            amplitudes = np.zeros(2 << number_of_qubits)
            amplitudes[:old_length] = self.amplitudes
            self.amplitudes = amplitudes
            log.debug("expanded state from %d to %d qubit(s)",
                      self.number_of_qubits, number_of_qubits)
            self.number_of_qubits = number_of_qubits

    def state_vector(self):
        """Return a complex copy of the amplitudes."""
        return self.amplitudes.view(np.complex128).copy()

    def probability(self):
        """Return the sum of squared magnitudes, 1 for a normalized state."""
        return float(np.dot(self.amplitudes, self.amplitudes))

    def __repr__(self):
        return f"Simulator(number_of_qubits={self.number_of_qubits})"
