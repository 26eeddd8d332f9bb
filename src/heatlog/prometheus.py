"""Prometheus metrics for one heatlog run.

A CLI run is a batch job, so metrics go to a private registry and can be
written once to a node-exporter textfile (--metrics-file) at the end.
"""

import logging

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, write_to_textfile

from heatlog.ranking import RankBucket


logger = logging.getLogger(__name__)

# RunSummary fields published as heatlog_value_quantile{percentile=...}
PUBLISHED_PERCENTILES = ('p50', 'p90', 'p99', 'p999')


class RunMetrics:
    """Counters and gauges describing one pipeline run"""

    def __init__(self):
        self.registry = CollectorRegistry()

        self.lines_total = Counter('heatlog_lines_total', 'Total number of input lines', registry=self.registry)
        self.lines_matched_total = Counter(
            'heatlog_lines_matched_total', 'Lines whose first capture group parsed as an integer', registry=self.registry
        )
        self.lines_by_bucket_total = Counter(
            'heatlog_lines_by_bucket_total',
            'Matched lines per rank bucket',
            ['bucket'],  # top1, top10, top50, other
            registry=self.registry,
        )
        self.value_quantile = Gauge(
            'heatlog_value_quantile', 'Extracted value at a percentile', ['percentile'], registry=self.registry
        )
        self.workers = Gauge('heatlog_workers', 'Worker threads used for classification', registry=self.registry)
        self.chunks = Gauge('heatlog_chunks', 'Chunks the input was split into', registry=self.registry)
        self.phase_duration_seconds = Histogram(
            'heatlog_phase_duration_seconds',
            'Time spent in each pipeline phase',
            ['phase'],  # classify, rank, order, render
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 60.0],
            registry=self.registry,
        )

        # Export every bucket label even when it stays at zero
        for bucket in RankBucket:
            self.lines_by_bucket_total.labels(bucket=bucket.value)

    def record_phase(self, phase: str, duration: float) -> None:
        self.phase_duration_seconds.labels(phase=phase).observe(duration)

    def record_bucket(self, bucket: RankBucket) -> None:
        self.lines_by_bucket_total.labels(bucket=bucket.value).inc()

    def record_summary(self, summary) -> None:
        """Copy line counts, pool size and quantiles from a RunSummary."""
        self.lines_total.inc(summary.total_lines)
        self.lines_matched_total.inc(summary.matched)
        self.workers.set(summary.workers)
        self.chunks.set(summary.chunks)
        if summary.matched:
            for percentile in PUBLISHED_PERCENTILES:
                self.value_quantile.labels(percentile=percentile).set(getattr(summary, percentile))

    def write(self, path: str) -> None:
        """Write all metrics in the Prometheus text format."""
        write_to_textfile(path, self.registry)
        logger.info(f'Wrote metrics to {path}')
