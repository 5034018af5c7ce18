"""Tunable limits for the solver strategies and the board generator."""

from dataclasses import dataclass

# Frontier regions larger than this are skipped by the tank enumerator.
MAX_REGION_SIZE = 15

# Hard cap on configurations enumerated for a single region.
MAX_CONFIGURATIONS = 50_000

# Components with more variables are solved in overlapping windows.
LINEAR_WINDOW = 30

# A reduced row whose constant is within this distance of its positive
# (or negative) coefficient sum pins its variables.
LINEAR_TOLERANCE = 1e-3

# Coefficients smaller than this are treated as zero during row reduction.
PIVOT_EPSILON = 1e-9

CONTRADICTION_ROUNDS = 20

MAX_ATTEMPTS = 10_000
YIELD_EVERY = 5


@dataclass(frozen=True)
class SolverConfig:
    """
    Limits applied by the deduction strategies.

    Attributes:
        max_region_size: Largest frontier region the tank enumerator will
            enumerate.
        max_configurations: Enumeration stops (and the region yields no
            deduction) once this many valid configurations are found.
        linear_window: Variable count above which the linear solver slides
            a window over a component instead of solving it whole.
        linear_tolerance: Tolerance for reading definite values off a
            reduced row. Part of the public contract: a row pins its
            variables only when its constant matches a coefficient sum
            within this distance.
        pivot_epsilon: Magnitude below which a coefficient counts as zero.
        contradiction_rounds: Propagation rounds per hypothesis in the
            contradiction prover.
    """

    max_region_size: int = MAX_REGION_SIZE
    max_configurations: int = MAX_CONFIGURATIONS
    linear_window: int = LINEAR_WINDOW
    linear_tolerance: float = LINEAR_TOLERANCE
    pivot_epsilon: float = PIVOT_EPSILON
    contradiction_rounds: int = CONTRADICTION_ROUNDS

    def __post_init__(self) -> None:
        if self.max_region_size < 1:
            raise ValueError("max_region_size must be positive.")
        if self.max_configurations < 1:
            raise ValueError("max_configurations must be positive.")
        if self.linear_window < 2:
            raise ValueError("linear_window must be at least 2.")
        if not 1e-9 <= self.linear_tolerance <= 1e-3:
            raise ValueError("linear_tolerance must lie in [1e-9, 1e-3].")
        if self.pivot_epsilon <= 0:
            raise ValueError("pivot_epsilon must be positive.")
        if self.contradiction_rounds < 1:
            raise ValueError("contradiction_rounds must be positive.")


@dataclass(frozen=True)
class GeneratorConfig:
    """Attempt budget and scheduling knobs for board generation."""

    max_attempts: int = MAX_ATTEMPTS
    yield_every: int = YIELD_EVERY

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be positive.")
        if self.yield_every < 1:
            raise ValueError("yield_every must be positive.")
