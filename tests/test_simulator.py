import unittest

import numpy as np

from qop.operation import Operation
from qop.simulator import Simulator

S2 = 1.0 / np.sqrt(2.0)

I2 = np.eye(2, dtype=complex)
P0 = np.array([[1, 0], [0, 0]], dtype=complex)
P1 = np.array([[0, 0], [0, 1]], dtype=complex)
PAULI_X = np.array([[0, 1], [1, 0]], dtype=complex)
PAULI_Y = np.array([[0, -1j], [1j, 0]], dtype=complex)
HADAMARD = np.array([[1, 1], [1, -1]], dtype=complex) * S2


def gate_matrix(kind, rotation):
    """Reference 2×2 unitary for a gate rotated by ``rotation`` turns."""
    h = np.pi * rotation
    if kind == "X":
        return np.cos(2 * h) * I2 - 1j * np.sin(2 * h) * PAULI_X
    if kind == "Y":
        return np.cos(2 * h) * I2 - 1j * np.sin(2 * h) * PAULI_Y
    if kind == "N":
        return np.exp(1j * h) * (np.cos(h) * I2 - 1j * np.sin(h) * PAULI_X)
    if kind == "H":
        return np.exp(1j * h) * (np.cos(h) * I2 - 1j * np.sin(h) * HADAMARD)
    raise ValueError(kind)


def kron(*matrices):
    out = np.array([[1]], dtype=complex)
    for m in matrices:
        out = np.kron(out, m)
    return out


def random_simulator(n, seed):
    rng = np.random.default_rng(seed)
    sim = Simulator(n)
    amps = rng.normal(size=2 << n)
    sim.amplitudes = amps / np.linalg.norm(amps)
    return sim


# -------------------------------------------------------------------
# State management
# -------------------------------------------------------------------
class TestSimulatorState(unittest.TestCase):
    def test_vacuum(self):
        sim = Simulator()
        self.assertEqual(sim.number_of_qubits, 0)
        np.testing.assert_array_equal(sim.amplitudes, [1.0, 0.0])

    def test_expand_state(self):
        sim = Simulator()
        sim.expand_state(1)
        self.assertEqual(sim.number_of_qubits, 1)
        np.testing.assert_array_equal(sim.amplitudes, [1, 0, 0, 0])

    def test_expand_preserves_offsets(self):
        sim = Simulator()
        sim.apply("H")
        before = sim.amplitudes.copy()
        sim.expand_state(3)
        self.assertEqual(sim.amplitudes.shape, (16,))
        np.testing.assert_array_equal(sim.amplitudes[:4], before)
        np.testing.assert_array_equal(sim.amplitudes[4:], 0)

    def test_expand_never_shrinks(self):
        sim = Simulator(2)
        sim.expand_state(1)
        self.assertEqual(sim.number_of_qubits, 2)
        self.assertEqual(sim.amplitudes.shape, (8,))

    def test_initial_qubits(self):
        sim = Simulator(2)
        self.assertEqual(sim.number_of_qubits, 2)
        np.testing.assert_array_equal(sim.amplitudes, [1, 0, 0, 0, 0, 0, 0, 0])

    def test_copy_is_deep(self):
        sim = Simulator(1)
        copy = Simulator(sim)
        copy.apply("X", 0.25)
        np.testing.assert_array_equal(sim.amplitudes, [1, 0, 0, 0])
        self.assertEqual(copy.number_of_qubits, 1)

    def test_reset(self):
        sim = Simulator(3)
        sim.apply("HHH")
        sim.reset()
        self.assertEqual(sim.number_of_qubits, 0)
        np.testing.assert_array_equal(sim.amplitudes, [1.0, 0.0])

    def test_state_vector_and_probability(self):
        sim = Simulator()
        sim.apply("H")
        np.testing.assert_allclose(sim.state_vector(), [S2, S2], atol=1e-12)
        self.assertAlmostEqual(sim.probability(), 1.0)


# -------------------------------------------------------------------
# apply()
# -------------------------------------------------------------------
class TestSimulatorApply(unittest.TestCase):
    def test_returns_compiled_operation(self):
        sim = Simulator()
        op = sim.apply("-h")
        self.assertIsInstance(op, Operation)
        self.assertEqual(op.op, "H")
        self.assertIs(sim.apply(op), op)

    def test_integer_rotation_is_noop(self):
        sim = Simulator()
        for rotation in (0, 1, -2, 3.0):
            op = sim.apply("HHH", rotation)
            self.assertEqual(op.op, "HHH")
            self.assertEqual(sim.number_of_qubits, 0)
            np.testing.assert_array_equal(sim.amplitudes, [1.0, 0.0])

    def test_none_is_noop(self):
        sim = random_simulator(2, seed=1)
        before = sim.amplitudes.copy()
        sim.apply(None, 0.3)
        np.testing.assert_array_equal(sim.amplitudes, before)

    def test_unsatisfiable_condition(self):
        sim = Simulator()
        sim.apply("1H")
        self.assertEqual(sim.number_of_qubits, 0)
        np.testing.assert_array_equal(sim.amplitudes, [1.0, 0.0])

    def test_expands_to_min_length(self):
        sim = Simulator()
        sim.apply("0H")
        self.assertEqual(sim.number_of_qubits, 1)
        np.testing.assert_allclose(sim.amplitudes, [S2, 0, S2, 0], atol=1e-12)

    def test_bell_state(self):
        sim = Simulator()
        sim.apply("H")
        sim.apply("N1")
        self.assertEqual(sim.number_of_qubits, 2)
        np.testing.assert_allclose(sim.amplitudes, [S2, 0, 0, 0, 0, 0, S2, 0], atol=1e-12)

    def test_default_rotation_is_half_turn(self):
        sim = Simulator()
        sim.apply("N")
        np.testing.assert_allclose(sim.amplitudes, [0, 0, 1, 0], atol=1e-12)

    def test_matches_reference_unitary(self):
        r = 0.3
        cases = [
            ("H-X", 3, kron(gate_matrix("H", r), I2, gate_matrix("X", r))),
            ("1-H", 3, kron(P0, I2, I2) + kron(P1, I2, gate_matrix("H", r))),
            ("X0N", 3, kron(gate_matrix("X", r), P0, gate_matrix("N", r)) + kron(I2, P1, I2)),
            ("Y-", 2, kron(gate_matrix("Y", r), I2)),
            ("N", 2, kron(I2, gate_matrix("N", r))),
        ]
        for op, n, unitary in cases:
            with self.subTest(op=op):
                sim = random_simulator(n, seed=7)
                expected = unitary @ sim.state_vector()
                sim.apply(op, r)
                np.testing.assert_allclose(sim.state_vector(), expected, atol=1e-12)


# -------------------------------------------------------------------
# Per-operation properties (one test method per operation)
# -------------------------------------------------------------------
class TestOperationProperties(unittest.TestCase):
    qubits = 4
    rotation = 0.3

_sample_ops = ["H", "N", "X", "Y", "1H", "0-N", "H-X", "YX", "1-H0", "X0N",
               "", "01", "HNXY", "H--Y"]

def _make_property_test(op):
    def test(self):
        sim = random_simulator(self.qubits, seed=len(op))
        start = sim.amplitudes.copy()
        norm = sim.probability()

        sim.apply(op, self.rotation)
        self.assertAlmostEqual(sim.probability(), norm, delta=1e-9 * norm)

        sim.apply(op, -self.rotation)
        np.testing.assert_allclose(sim.amplitudes, start, atol=1e-12)
    return test

for idx, op in enumerate(_sample_ops):
    name = f"test_unitary_{idx}_{op.replace('-', '_') or 'phase'}"
    setattr(TestOperationProperties, name, _make_property_test(op))


if __name__ == "__main__":
    unittest.main()
