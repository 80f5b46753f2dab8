"""Descriptors for the supported similarity metrics."""

from dataclasses import dataclass

DENSE = "embedding"
BINARY = "embedding_binary"


@dataclass(frozen=True)
class Metric:
    """How one similarity strategy queries the store and shapes results.

    The store always orders by ``function`` ascending. Metrics where higher
    is better (inner product) store a negated value and set ``negate`` so
    the public result reads "higher is better".
    """

    name: str
    function: str
    field: str
    result_key: str = "distance"
    negate: bool = False

    @property
    def order(self) -> str:
        """Direction of the public result value: "asc" or "desc"."""
        return "desc" if self.negate else "asc"


COSINE = Metric("cosine", "cosine_distance", DENSE)
L2 = Metric("l2", "l2_distance", DENSE)
L1 = Metric("l1", "l1_distance", DENSE)
INNER_PRODUCT = Metric("dot", "negative_inner_product", DENSE, result_key="score", negate=True)
HAMMING = Metric("hamming", "binary_hamming_distance", BINARY)
JACCARD = Metric("jaccard", "binary_jaccard_distance", BINARY)

METRICS: dict[str, Metric] = {
    metric.name: metric for metric in (COSINE, L2, L1, INNER_PRODUCT, HAMMING, JACCARD)
}


def get_metric(metric: "Metric | str") -> Metric:
    """Look up a metric by name; descriptors pass through unchanged.

    Raises:
        ValueError: If the name is not registered
    """
    if isinstance(metric, Metric):
        return metric
    try:
        return METRICS[metric]
    except KeyError:
        raise ValueError(
            f"Unknown metric {metric!r}, expected one of: {', '.join(METRICS)}"
        ) from None
