"""
Search configuration.
"""

from dataclasses import dataclass


@dataclass
class SearchConfig:
    """Configuration for negamax search.

    All heuristics that trade accuracy for speed live here, so tests can
    switch them off and compare against an exhaustive search.
    """

    # Quiescence
    quiescence_horizon: int = 4
    """Maximum number of capture plies searched past the depth-0 frontier"""

    # Late move reduction
    late_move_reduction: bool = True
    """Search uninteresting late moves one ply shallower"""

    reduction_min_depth: int = 3
    """Only reduce at nodes with at least this much remaining depth"""

    reduction_min_moves: int = 3
    """Number of legal moves searched at full depth before reducing"""

    reduction_threshold: int = 1
    """Moves whose interest (capture + check + promotion) is below this are reduced"""

    # Pruning
    alpha_beta: bool = True
    """Cut off branches outside the (alpha, beta) window; False searches full width"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.quiescence_horizon < 0:
            raise ValueError(
                f"quiescence_horizon must be non-negative, got {self.quiescence_horizon}"
            )

        if self.reduction_min_depth < 2:
            raise ValueError(
                f"reduction_min_depth must be at least 2, got {self.reduction_min_depth}"
            )

        if self.reduction_min_moves < 0:
            raise ValueError(
                f"reduction_min_moves must be non-negative, got {self.reduction_min_moves}"
            )

    @classmethod
    def exhaustive(cls, quiescence_horizon: int = 4) -> "SearchConfig":
        """Full-width search with no pruning or reductions (reference search)."""
        return cls(
            quiescence_horizon=quiescence_horizon,
            late_move_reduction=False,
            alpha_beta=False,
        )
