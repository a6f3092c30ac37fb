"""Result dataclasses for DEA robustness analysis.

This module provides the containers returned by sampling and optimization
entry points.

Sampling:
    - WeightSamplesCollection: weight vectors drawn from the admissible polytope
    - PerformanceSamplesCollection: realisations of imprecise performances

SMAA:
    - DistributionResult: rank or efficiency acceptability per DMU
    - PairwiseWinningResult: probability that one DMU scores at least as
      well as another

Extreme values:
    - ExtremeEfficienciesResult: min / max / super efficiency per DMU
    - ExtremeRanksResult: best and worst attainable rank per DMU
    - PreferenceRelationsResult: necessary and possible preference relations
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from robustdea.core.mixins import ResultSummaryMixin

if TYPE_CHECKING:
    from robustdea.graph.preference_graph import PreferenceGraph


def _read_only(array: NDArray, dtype=None) -> NDArray:
    array = np.array(array, dtype=dtype, copy=True)
    array.setflags(write=False)
    return array


# =============================================================================
# SAMPLES
# =============================================================================


@dataclass(frozen=True)
class WeightSamplesCollection:
    """
    Weight vectors sampled uniformly from the admissible weight polytope.

    Attributes:
        samples: K x D matrix, one weight vector per row
        names: Variable name of each column
        n_inputs: Number of leading columns that weight inputs (CCR only;
            0 for value models)

    Example:
        >>> weights = sample_weights(system, 1000, rng, n_inputs=2)
        >>> weights.input_samples.shape
        (1000, 2)
    """

    samples: NDArray[np.float64]
    names: tuple[str, ...]
    n_inputs: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", _read_only(self.samples, np.float64))
        object.__setattr__(self, "names", tuple(self.names))

    @property
    def num_samples(self) -> int:
        return self.samples.shape[0]

    @property
    def dimension(self) -> int:
        return self.samples.shape[1]

    @property
    def input_samples(self) -> NDArray[np.float64]:
        """K x I input weights (first ``n_inputs`` columns)."""
        return self.samples[:, : self.n_inputs]

    @property
    def output_samples(self) -> NDArray[np.float64]:
        """K x O output weights (remaining columns)."""
        return self.samples[:, self.n_inputs:]

    def column(self, name: str) -> NDArray[np.float64]:
        return self.samples[:, self.names.index(name)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "names": list(self.names),
            "n_inputs": self.n_inputs,
            "samples": self.samples.tolist(),
        }

    def __repr__(self) -> str:
        return f"WeightSamplesCollection(samples={self.num_samples}, dimension={self.dimension})"


@dataclass(frozen=True)
class PerformanceSamplesCollection:
    """
    Realisations of imprecise performances, one precise scenario per sample.

    Attributes:
        inputs: K x N x I sampled input tables
        outputs: K x N x O sampled output tables
    """

    inputs: NDArray[np.float64]
    outputs: NDArray[np.float64]

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", _read_only(self.inputs, np.float64))
        object.__setattr__(self, "outputs", _read_only(self.outputs, np.float64))

    @property
    def num_samples(self) -> int:
        return self.inputs.shape[0]

    def scenario(self, index: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Input and output tables of one sample."""
        return self.inputs[index], self.outputs[index]

    def __repr__(self) -> str:
        k, n, i = self.inputs.shape
        return f"PerformanceSamplesCollection(samples={k}, dmus={n}, criteria={i + self.outputs.shape[2]})"


# =============================================================================
# SMAA RESULTS
# =============================================================================


@dataclass(frozen=True)
class DistributionResult:
    """
    Acceptability distribution of ranks or efficiencies over weight samples.

    Each row gives, for one DMU, the share of samples that fall in each
    bucket. For ``kind == "rank"`` bucket b holds rank b + 1; for
    ``kind == "efficiency"`` bucket b is the interval
    ``[bucket_edges[b], bucket_edges[b + 1])`` (the last one closed).

    Attributes:
        distribution: N x B matrix, rows sum to 1
        expected_values: Mean rank or mean efficiency per DMU
        kind: "rank" or "efficiency"
        bucket_edges: B + 1 bucket boundaries
        dmu_names: Name of each row
        num_samples: Number of weight samples
        computation_time_ms: Time taken in milliseconds
        level: Hierarchy level the scores were computed at, if any
    """

    distribution: NDArray[np.float64]
    expected_values: NDArray[np.float64]
    kind: str
    bucket_edges: NDArray[np.float64]
    dmu_names: tuple[str, ...]
    num_samples: int
    computation_time_ms: float
    level: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "distribution", _read_only(self.distribution, np.float64))
        object.__setattr__(self, "expected_values", _read_only(self.expected_values, np.float64))
        object.__setattr__(self, "bucket_edges", _read_only(self.bucket_edges, np.float64))
        object.__setattr__(self, "dmu_names", tuple(self.dmu_names))

    @property
    def num_dmus(self) -> int:
        return self.distribution.shape[0]

    @property
    def num_buckets(self) -> int:
        return self.distribution.shape[1]

    @property
    def bucket_labels(self) -> list[str]:
        if self.kind == "rank":
            return [str(b + 1) for b in range(self.num_buckets)]
        edges = self.bucket_edges
        return [f"{edges[b]:.2f}-{edges[b + 1]:.2f}" for b in range(self.num_buckets)]

    def most_probable_bucket(self) -> NDArray[np.int64]:
        """Index of the bucket with the highest acceptability per DMU."""
        return np.argmax(self.distribution, axis=1)

    def acceptability(self, dmu: str) -> NDArray[np.float64]:
        """Distribution row of one DMU, looked up by name."""
        return self.distribution[self.dmu_names.index(dmu)]

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        title = "RANK ACCEPTABILITY" if self.kind == "rank" else "EFFICIENCY ACCEPTABILITY"
        lines = [m._format_header(f"SMAA {title} REPORT")]

        lines.append(m._format_section("Settings"))
        lines.append(m._format_metric("DMUs", self.num_dmus))
        lines.append(m._format_metric("Buckets", self.num_buckets))
        lines.append(m._format_metric("Weight samples", self.num_samples))
        if self.level is not None:
            lines.append(m._format_metric("Hierarchy level", self.level))

        lines.append(m._format_section("Expected values"))
        label = "Expected rank" if self.kind == "rank" else "Expected efficiency"
        for name, value in zip(self.dmu_names, self.expected_values):
            lines.append(m._format_metric(f"{label} of {name}", float(value)))

        lines.append(m._format_section("Acceptability"))
        lines.append(m._format_table(self.dmu_names, self.bucket_labels, self.distribution))

        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Return dictionary representation for serialization."""
        return {
            "kind": self.kind,
            "level": self.level,
            "dmu_names": list(self.dmu_names),
            "distribution": self.distribution.tolist(),
            "expected_values": self.expected_values.tolist(),
            "bucket_edges": self.bucket_edges.tolist(),
            "num_samples": self.num_samples,
            "computation_time_ms": self.computation_time_ms,
        }

    def __repr__(self) -> str:
        return (
            f"DistributionResult(kind={self.kind!r}, dmus={self.num_dmus}, "
            f"buckets={self.num_buckets}, {self.computation_time_ms:.2f}ms)"
        )


@dataclass(frozen=True)
class PairwiseWinningResult:
    """
    Pairwise winning indices.

    ``probabilities[i, j]`` is the share of weight samples in which DMU i
    scores at least as well as DMU j (the diagonal is 1).
    """

    probabilities: NDArray[np.float64]
    dmu_names: tuple[str, ...]
    num_samples: int
    computation_time_ms: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "probabilities", _read_only(self.probabilities, np.float64))
        object.__setattr__(self, "dmu_names", tuple(self.dmu_names))

    def probability(self, a: str, b: str) -> float:
        return float(self.probabilities[self.dmu_names.index(a), self.dmu_names.index(b)])

    def summary(self) -> str:
        m = ResultSummaryMixin
        lines = [m._format_header("SMAA PAIRWISE WINNING INDICES")]
        lines.append(m._format_metric("Weight samples", self.num_samples))
        lines.append(m._format_section("P(row >= column)"))
        lines.append(m._format_table(self.dmu_names, self.dmu_names, self.probabilities))
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dmu_names": list(self.dmu_names),
            "probabilities": self.probabilities.tolist(),
            "num_samples": self.num_samples,
            "computation_time_ms": self.computation_time_ms,
        }

    def __repr__(self) -> str:
        return f"PairwiseWinningResult(dmus={len(self.dmu_names)}, {self.computation_time_ms:.2f}ms)"


# =============================================================================
# EXTREME-VALUE RESULTS
# =============================================================================


@dataclass(frozen=True)
class ExtremeEfficienciesResult:
    """
    Range of efficiency each DMU can reach under admissible weights.

    Attributes:
        dmu_names: Name of each DMU
        min_efficiency: Lowest attainable efficiency
        max_efficiency: Highest attainable efficiency
        super_efficiency: Efficiency with the DMU excluded from its own
            reference set (``inf`` when unbounded; None for value models)
        computation_time_ms: Time taken in milliseconds
    """

    dmu_names: tuple[str, ...]
    min_efficiency: NDArray[np.float64]
    max_efficiency: NDArray[np.float64]
    super_efficiency: NDArray[np.float64] | None
    computation_time_ms: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "dmu_names", tuple(self.dmu_names))
        object.__setattr__(self, "min_efficiency", _read_only(self.min_efficiency, np.float64))
        object.__setattr__(self, "max_efficiency", _read_only(self.max_efficiency, np.float64))
        if self.super_efficiency is not None:
            object.__setattr__(
                self, "super_efficiency", _read_only(self.super_efficiency, np.float64)
            )

    @property
    def efficient_dmus(self) -> list[str]:
        """DMUs that reach efficiency 1 for some admissible weights."""
        return [n for n, e in zip(self.dmu_names, self.max_efficiency) if e >= 1.0 - 1e-6]

    def summary(self) -> str:
        """Return human-readable summary report."""
        m = ResultSummaryMixin
        lines = [m._format_header("EXTREME EFFICIENCIES REPORT")]
        lines.append(m._format_metric("DMUs", len(self.dmu_names)))
        lines.append(m._format_metric("Potentially efficient", len(self.efficient_dmus)))

        columns = ["min", "max"]
        table = [self.min_efficiency, self.max_efficiency]
        if self.super_efficiency is not None:
            columns.append("super")
            table.append(self.super_efficiency)
        lines.append(m._format_section("Efficiency ranges"))
        lines.append(m._format_table(self.dmu_names, columns, np.column_stack(table)))

        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dmu_names": list(self.dmu_names),
            "min_efficiency": self.min_efficiency.tolist(),
            "max_efficiency": self.max_efficiency.tolist(),
            "super_efficiency": (
                None if self.super_efficiency is None else self.super_efficiency.tolist()
            ),
            "computation_time_ms": self.computation_time_ms,
        }

    def __repr__(self) -> str:
        return (
            f"ExtremeEfficienciesResult(dmus={len(self.dmu_names)}, "
            f"efficient={len(self.efficient_dmus)}, {self.computation_time_ms:.2f}ms)"
        )


@dataclass(frozen=True)
class ExtremeRanksResult:
    """
    Best (smallest) and worst (largest) attainable rank per DMU.

    Attributes:
        dmu_names: Name of each DMU
        best_rank: Smallest rank reachable under some admissible weights
        worst_rank: Largest rank reachable under some admissible weights
        computation_time_ms: Time taken in milliseconds
        level: Hierarchy level, if any
    """

    dmu_names: tuple[str, ...]
    best_rank: NDArray[np.int64]
    worst_rank: NDArray[np.int64]
    computation_time_ms: float
    level: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "dmu_names", tuple(self.dmu_names))
        object.__setattr__(self, "best_rank", _read_only(self.best_rank, np.int64))
        object.__setattr__(self, "worst_rank", _read_only(self.worst_rank, np.int64))

    @property
    def rank_spread(self) -> NDArray[np.int64]:
        return self.worst_rank - self.best_rank

    def summary(self) -> str:
        m = ResultSummaryMixin
        lines = [m._format_header("EXTREME RANKS REPORT")]
        if self.level is not None:
            lines.append(m._format_metric("Hierarchy level", self.level))
        lines.append(m._format_section("Rank ranges"))
        for name, best, worst in zip(self.dmu_names, self.best_rank, self.worst_rank):
            lines.append(m._format_metric(name, f"{int(best)} .. {int(worst)}"))
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dmu_names": list(self.dmu_names),
            "best_rank": self.best_rank.tolist(),
            "worst_rank": self.worst_rank.tolist(),
            "level": self.level,
            "computation_time_ms": self.computation_time_ms,
        }

    def __repr__(self) -> str:
        return f"ExtremeRanksResult(dmus={len(self.dmu_names)}, {self.computation_time_ms:.2f}ms)"


@dataclass(frozen=True)
class PreferenceRelationsResult:
    """
    Necessary and possible preference relations between DMUs.

    ``necessary[a, b]`` is True when a is at least as good as b for every
    admissible weighting, ``possible[a, b]`` when it is for at least one.
    Both relations are reflexive; the necessary relation is contained in
    the possible one.
    """

    dmu_names: tuple[str, ...]
    necessary: NDArray[np.bool_]
    possible: NDArray[np.bool_]
    computation_time_ms: float
    level: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "dmu_names", tuple(self.dmu_names))
        object.__setattr__(self, "necessary", _read_only(self.necessary, np.bool_))
        object.__setattr__(self, "possible", _read_only(self.possible, np.bool_))

    def necessary_pairs(self) -> list[tuple[str, str]]:
        """Off-diagonal (a, b) pairs with a necessarily preferred to b."""
        return [
            (self.dmu_names[a], self.dmu_names[b])
            for a, b in zip(*np.nonzero(self.necessary))
            if a != b
        ]

    def to_graph(self) -> "PreferenceGraph":
        from robustdea.graph.preference_graph import PreferenceGraph

        return PreferenceGraph.from_relation(self.necessary, self.dmu_names)

    def summary(self) -> str:
        m = ResultSummaryMixin
        lines = [m._format_header("PREFERENCE RELATIONS REPORT")]
        n = len(self.dmu_names)
        lines.append(m._format_metric("DMUs", n))
        lines.append(m._format_metric("Necessary pairs", int(self.necessary.sum()) - n))
        lines.append(m._format_metric("Possible pairs", int(self.possible.sum()) - n))
        lines.append(m._format_section("Necessary preferences"))
        lines.append(m._format_list(
            [f"{a} >= {b}" for a, b in self.necessary_pairs()], max_items=10, item_name="pair"
        ))
        lines.append(m._format_footer(self.computation_time_ms))
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dmu_names": list(self.dmu_names),
            "necessary": self.necessary.tolist(),
            "possible": self.possible.tolist(),
            "level": self.level,
            "computation_time_ms": self.computation_time_ms,
        }

    def __repr__(self) -> str:
        return (
            f"PreferenceRelationsResult(dmus={len(self.dmu_names)}, "
            f"necessary_pairs={len(self.necessary_pairs())}, {self.computation_time_ms:.2f}ms)"
        )
