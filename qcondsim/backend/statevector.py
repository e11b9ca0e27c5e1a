"""State-vector simulation engine.

The state of ``n`` qubits is a 1-D complex tensor of length ``2**n``.
Qubit ``j`` occupies bit position ``n - 1 - j`` of the basis index, so
qubit 0 is the most significant bit and ``|q0 q1 ... q(n-1)⟩`` reads left
to right. Reshaping the vector to ``(2,) * n`` therefore puts qubit ``j``
on axis ``j``, which is what the gate kernel relies on.

Scaling: memory and time grow as ``2**n`` for the vector and every gate
application costs ``O(2**n * 2**k)`` for a ``k``-qubit gate. Anything that
builds a full operator or density matrix (:func:`embed_gate`,
:meth:`StateVectorEngine.density_matrix`, :meth:`StateVectorEngine.partial_trace`)
costs ``O(4**n)`` and is meant for small registers only. This exponential
growth is the simulator's hard limit; there is no other resource to tune.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import torch

from ..core.amplitude import ComplexAmplitude
from ..core.config import SimulatorConfiguration, TieBreak
from ..core.constants import DEFAULT_DTYPE, EPSILON
from ..diagnostics import assert_density_matrix, assert_normalized, is_debug_enabled
from ..errors import QubitRangeError
from ..gates.library import GateMatrix
from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class BasisStateProbability:
    """One row of the state-probability table."""

    label: str
    amplitude: ComplexAmplitude
    probability: float


@dataclass(frozen=True)
class QubitMeasurementReport:
    """Outcome statistics for one qubit, computed without collapsing."""

    qubit: int
    probability_0: float
    probability_1: float

    @property
    def expected_value(self) -> float:
        return self.probability_1

    @property
    def variance(self) -> float:
        return self.probability_0 * self.probability_1


# ---------------------------------------------------------------------------
# Tensor kernels
# ---------------------------------------------------------------------------


def zero_state(
    n_qubits: int,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Create the ground state |0...0⟩ for ``n_qubits``.

    Raises:
        ValueError: If n_qubits < 1.
    """
    if n_qubits < 1:
        raise ValueError(f"n_qubits must be >= 1, got {n_qubits}")
    if dtype is None:
        dtype = DEFAULT_DTYPE
    if device is None:
        device = torch.device("cpu")

    state = torch.zeros(2**n_qubits, dtype=dtype, device=device)
    state[0] = 1.0 + 0.0j
    return state


def _infer_n_qubits(state: torch.Tensor) -> int:
    dim = state.shape[-1]
    if dim <= 0 or dim & (dim - 1) != 0:
        raise ValueError(f"Statevector length must be a power of 2, got {dim}.")
    return dim.bit_length() - 1


def _check_targets(targets: Sequence[int], n_qubits: int) -> Tuple[int, ...]:
    t_tuple = tuple(int(q) for q in targets)
    if not t_tuple:
        raise ValueError("A gate must act on at least one qubit.")
    for q in t_tuple:
        if q < 0 or q >= n_qubits:
            raise QubitRangeError(q, n_qubits)
    if len(set(t_tuple)) != len(t_tuple):
        raise ValueError(f"Target qubits must be distinct, got {t_tuple}")
    return t_tuple


def _bit_mask(n_qubits: int, qubit: int) -> int:
    return 1 << (n_qubits - 1 - qubit)


def apply_gate(
    state: torch.Tensor,
    gate: torch.Tensor,
    targets: Sequence[int],
    n_qubits: int | None = None,
) -> torch.Tensor:
    """
    Apply a ``k``-qubit gate matrix to ``targets`` of a state vector.

    The first target is the most significant bit of the gate's row and
    column index. The state is viewed as an ``n``-axis tensor and the gate
    is contracted against the target axes only, so the cost is
    ``O(2**n * 2**k)`` and the ``2**n x 2**n`` operator is never built.

    Args:
        state: Tensor of shape (..., 2**n_qubits) with complex dtype. Leading
            dimensions are treated as a batch.
        gate: Matrix of shape (2**k, 2**k) where k = len(targets).
        targets: Qubit indices, distinct.
        n_qubits: Number of qubits. If None, inferred from the state.

    Returns:
        A new tensor with the gate applied.
    """
    if not torch.is_complex(state):
        raise ValueError(f"state must be complex dtype, got {state.dtype}")
    if n_qubits is None:
        n_qubits = _infer_n_qubits(state)
    elif state.shape[-1] != 2**n_qubits:
        raise ValueError(
            f"state dimension {state.shape[-1]} does not match 2**n_qubits = {2**n_qubits}"
        )

    t_tuple = _check_targets(targets, n_qubits)
    k = len(t_tuple)
    if gate.shape != (2**k, 2**k):
        raise ValueError(
            f"gate must have shape ({2**k}, {2**k}) for {k} target(s), got {tuple(gate.shape)}"
        )

    batch_shape = state.shape[:-1]
    n_batch = len(batch_shape)
    psi = state.reshape(*batch_shape, *([2] * n_qubits))
    gate_t = gate.to(dtype=state.dtype, device=state.device).reshape([2] * (2 * k))

    axes = [n_batch + q for q in t_tuple]
    # Result axes: gate output axes first, then the untouched state axes.
    out = torch.tensordot(gate_t, psi, dims=(list(range(k, 2 * k)), axes))
    out = torch.movedim(out, list(range(k)), axes)
    return out.reshape(*batch_shape, 2**n_qubits).contiguous()


def embed_gate(
    gate: torch.Tensor,
    targets: Sequence[int],
    n_qubits: int,
) -> torch.Tensor:
    """
    Build the dense ``2**n x 2**n`` operator of a gate acting on ``targets``.

    Element (i, j) is zero unless i and j agree on every non-target qubit,
    in which case it is the gate entry addressed by the target bits of i
    (row) and j (column). Costs ``O(4**n)``; use :func:`apply_gate` for
    simulation.
    """
    t_tuple = _check_targets(targets, n_qubits)
    k = len(t_tuple)
    dim = 2**n_qubits
    idx = torch.arange(dim, device=gate.device)

    sub = torch.zeros(dim, dtype=torch.long, device=gate.device)
    target_mask = 0
    for pos, q in enumerate(t_tuple):
        shift = n_qubits - 1 - q
        target_mask |= 1 << shift
        sub |= ((idx >> shift) & 1) << (k - 1 - pos)

    other_mask = (dim - 1) & ~target_mask
    agree = ((idx[:, None] ^ idx[None, :]) & other_mask) == 0
    operator = gate[sub[:, None], sub[None, :]]
    return torch.where(agree, operator, torch.zeros_like(operator))


def measure_probs(state: torch.Tensor) -> torch.Tensor:
    """Born-rule probabilities |amplitude|² for every basis state."""
    return (state.abs() ** 2).contiguous()


def qubit_marginals(
    state: torch.Tensor,
    qubit: int,
    n_qubits: int | None = None,
) -> Tuple[float, float]:
    """Return (p0, p1) for ``qubit``, summing |amplitude|² over the other qubits."""
    if n_qubits is None:
        n_qubits = _infer_n_qubits(state)
    if qubit < 0 or qubit >= n_qubits:
        raise QubitRangeError(qubit, n_qubits)
    probs = measure_probs(state).reshape([2] * n_qubits)
    p0 = float(probs.select(qubit, 0).sum())
    p1 = float(probs.select(qubit, 1).sum())
    return p0, p1


def partial_trace(
    state: torch.Tensor,
    keep: Sequence[int],
    n_qubits: int | None = None,
) -> torch.Tensor:
    """
    Reduced density matrix of the qubits in ``keep``.

    Builds ρ = |ψ⟩⟨ψ| and traces out every other qubit, one at a time, in
    descending index order so the positions of the lower qubits are stable
    while higher ones are removed. The result is indexed with the kept
    qubits in ascending order, lowest index most significant.
    """
    if n_qubits is None:
        n_qubits = _infer_n_qubits(state)
    keep_set = set(int(q) for q in keep)
    for q in keep_set:
        if q < 0 or q >= n_qubits:
            raise QubitRangeError(q, n_qubits)

    rho = torch.outer(state, state.conj())
    remaining = list(range(n_qubits))
    for q in sorted(set(range(n_qubits)) - keep_set, reverse=True):
        pos = remaining.index(q)
        m = len(remaining)
        left = 2**pos
        right = 2 ** (m - pos - 1)
        view = rho.reshape(left, 2, right, left, 2, right)
        rho = torch.einsum("aibcid->abcd", view).reshape(left * right, left * right)
        remaining.pop(pos)

    return rho


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class StateVectorEngine:
    """
    Owns and mutates the amplitude vector of one circuit.

    Parameters
    ----------
    n_qubits:
        Number of qubits; the vector has ``2**n_qubits`` amplitudes.
    config:
        Measurement semantics. The engine keeps its own clone.
    generator:
        Optional ``torch.Generator`` used for the uniform-random tie-break,
        so random runs can be seeded.
    """

    def __init__(
        self,
        n_qubits: int,
        config: Optional[SimulatorConfiguration] = None,
        dtype: torch.dtype | None = None,
        device: torch.device | None = None,
        generator: Optional[torch.Generator] = None,
    ) -> None:
        if n_qubits < 1:
            raise ValueError(f"n_qubits must be >= 1, got {n_qubits}")
        self.n_qubits = int(n_qubits)
        self.config = (config or SimulatorConfiguration()).clone()
        self.dtype = dtype or DEFAULT_DTYPE
        self.device = device or torch.device("cpu")
        self.generator = generator
        self._state = zero_state(self.n_qubits, dtype=self.dtype, device=self.device)

    # -- state access -------------------------------------------------------

    @property
    def dim(self) -> int:
        return 2**self.n_qubits

    @property
    def state(self) -> torch.Tensor:
        """Current amplitude vector. Do not mutate; use :meth:`snapshot` for a copy."""
        return self._state

    def snapshot(self) -> torch.Tensor:
        return self._state.clone()

    def reset_state(self) -> None:
        """Return to the ground state |0...0⟩."""
        self._state = zero_state(self.n_qubits, dtype=self.dtype, device=self.device)

    def set_state(self, state: torch.Tensor) -> None:
        """
        Load an arbitrary normalized state vector.

        Raises:
            ValueError: If the shape is wrong or the vector is not normalized.
        """
        state = torch.as_tensor(state).to(dtype=self.dtype, device=self.device)
        if state.shape != (self.dim,):
            raise ValueError(
                f"state must have shape ({self.dim},), got {tuple(state.shape)}"
            )
        assert_normalized(state, atol=1e-9)
        self._state = state.clone()

    def norm(self) -> float:
        return float(torch.linalg.vector_norm(self._state))

    def _check_qubit(self, qubit: int) -> None:
        if qubit < 0 or qubit >= self.n_qubits:
            raise QubitRangeError(qubit, self.n_qubits)

    # -- gates --------------------------------------------------------------

    def apply_gate(self, gate: GateMatrix | torch.Tensor, targets: Sequence[int]) -> None:
        """Apply a resolved gate (or a raw matrix) to ``targets`` in place."""
        matrix = gate.matrix if isinstance(gate, GateMatrix) else gate
        self._state = apply_gate(self._state, matrix, targets, self.n_qubits)
        if is_debug_enabled():
            assert_normalized(self._state, atol=1e-9)
        if isinstance(gate, GateMatrix):
            logger.debug("applied %s%s on %s", gate.name, list(gate.params) or "", list(targets))

    # -- measurement --------------------------------------------------------

    def qubit_probabilities(self) -> List[Tuple[float, float]]:
        """(p0, p1) for every qubit, in qubit order."""
        return [
            qubit_marginals(self._state, q, self.n_qubits)
            for q in range(self.n_qubits)
        ]

    def choose_outcome(self, p0: float, p1: float) -> int:
        """
        Pick the outcome for marginals (p0, p1).

        The more likely bit wins. Only when ``|p0 - p1| < EPSILON`` does the
        configured tie-break policy decide.
        """
        if abs(p0 - p1) < EPSILON:
            policy = self.config.tie_break
            if policy is TieBreak.ZERO:
                return 0
            if policy is TieBreak.ONE:
                return 1
            draw = torch.rand((), generator=self.generator, dtype=torch.float64)
            return 0 if float(draw) < 0.5 else 1
        return 0 if p0 > p1 else 1

    def measure(self, qubit: int) -> int:
        """
        Measure ``qubit`` and return the classical outcome.

        Without deferral the vector is projected onto the outcome's subspace
        and renormalized; renormalization is skipped when the surviving
        branch has norm below ``EPSILON``. With deferral the vector is left
        untouched.
        """
        self._check_qubit(qubit)
        p0, p1 = qubit_marginals(self._state, qubit, self.n_qubits)
        outcome = self.choose_outcome(p0, p1)

        if not self.config.measurement_deferred:
            self._collapse(qubit, outcome)
            if is_debug_enabled():
                assert_normalized(self._state, atol=1e-9)

        logger.debug(
            "measured qubit %d -> %d (p0=%.6f, p1=%.6f, deferred=%s)",
            qubit, outcome, p0, p1, self.config.measurement_deferred,
        )
        return outcome

    def _collapse(self, qubit: int, outcome: int) -> None:
        idx = torch.arange(self.dim, device=self.device)
        bit = (idx & _bit_mask(self.n_qubits, qubit)) != 0
        consistent = bit if outcome == 1 else ~bit
        projected = torch.where(consistent, self._state, torch.zeros_like(self._state))
        norm = float(torch.linalg.vector_norm(projected))
        if norm > EPSILON:
            self._state = projected / norm
        else:
            logger.debug("collapse of qubit %d onto empty branch %d skipped", qubit, outcome)

    def collapse(self, qubit: int, outcome: int) -> None:
        """Explicitly project ``qubit`` onto ``outcome``, e.g. after deferred measurement."""
        self._check_qubit(qubit)
        if outcome not in (0, 1):
            raise ValueError(f"outcome must be 0 or 1, got {outcome}")
        self._collapse(qubit, outcome)

    def measure_deterministic(self, qubit: int) -> QubitMeasurementReport:
        """Outcome probabilities for ``qubit`` without touching the state."""
        self._check_qubit(qubit)
        p0, p1 = qubit_marginals(self._state, qubit, self.n_qubits)
        return QubitMeasurementReport(qubit=qubit, probability_0=p0, probability_1=p1)

    def measure_all_deterministic(self) -> List[QubitMeasurementReport]:
        return [self.measure_deterministic(q) for q in range(self.n_qubits)]

    # -- reset --------------------------------------------------------------

    def reset(self, qubit: int) -> None:
        """
        Force ``qubit`` to |0⟩ by redirecting amplitude.

        Every amplitude on a basis state with the qubit at 1 is added to its
        partner with the qubit at 0, the qubit=1 half is zeroed and the
        result renormalized. This is not measure-then-flip: relative phases
        between the two halves interfere. When the redirected amplitudes
        cancel completely the engine falls back to keeping only the qubit=0
        half, so the vector never degenerates to zero.
        """
        self._check_qubit(qubit)
        _, p1 = qubit_marginals(self._state, qubit, self.n_qubits)
        if p1 <= EPSILON:
            return

        mask = _bit_mask(self.n_qubits, qubit)
        idx = torch.arange(self.dim, device=self.device)
        ones = idx[(idx & mask) != 0]
        zeros = ones ^ mask

        redirected = self._state.clone()
        redirected[zeros] = self._state[zeros] + self._state[ones]
        redirected[ones] = 0.0
        norm = float(torch.linalg.vector_norm(redirected))

        if norm < EPSILON:
            logger.warning(
                "reset of qubit %d cancelled all amplitude; keeping the |0> branch instead",
                qubit,
            )
            redirected = self._state.clone()
            redirected[ones] = 0.0
            norm = float(torch.linalg.vector_norm(redirected))

        self._state = redirected / norm
        if is_debug_enabled():
            assert_normalized(self._state, atol=1e-9)
        logger.debug("reset qubit %d (p1 was %.6f)", qubit, p1)

    # -- inspection ---------------------------------------------------------

    def density_matrix(self) -> torch.Tensor:
        """Full density matrix |ψ⟩⟨ψ|. O(4**n) memory."""
        rho = torch.outer(self._state, self._state.conj())
        if is_debug_enabled():
            assert_density_matrix(rho)
        return rho

    def partial_trace(self, keep: Sequence[int]) -> torch.Tensor:
        rho = partial_trace(self._state, keep, self.n_qubits)
        if is_debug_enabled():
            assert_density_matrix(rho)
        return rho

    def state_probabilities(self) -> List[BasisStateProbability]:
        """
        Label, amplitude and probability of every basis state.

        Labels are ``|b0 b1 ... b(n-1)⟩`` written without spaces, qubit 0
        first.
        """
        amplitudes = self._state.detach().cpu().tolist()
        width = self.n_qubits
        rows = []
        for index, amp in enumerate(amplitudes):
            amplitude = ComplexAmplitude.from_complex(amp)
            rows.append(
                BasisStateProbability(
                    label=f"|{index:0{width}b}⟩",
                    amplitude=amplitude,
                    probability=amplitude.abs2(),
                )
            )
        return rows

    def __repr__(self) -> str:
        return f"StateVectorEngine(n_qubits={self.n_qubits}, norm={self.norm():.6f})"


__all__ = [
    "BasisStateProbability",
    "QubitMeasurementReport",
    "StateVectorEngine",
    "zero_state",
    "apply_gate",
    "embed_gate",
    "measure_probs",
    "qubit_marginals",
    "partial_trace",
]
