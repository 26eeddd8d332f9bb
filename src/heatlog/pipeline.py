"""Pipeline driver: classify, rank, order and render a batch of lines.

Phases:
1. Compile the pattern (configuration errors surface before any work)
2. Classify chunks of lines in parallel; each worker fills its own digest
3. Merge the per-chunk digests once every chunk is done, then freeze
4. Take rank thresholds from the frozen digest (only if something matched)
5. Filter and order
6. Render
"""

import json
import logging
import re
import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from time import time

import click

from heatlog import filter_sort
from heatlog.classified import ClassifiedLine, Matched
from heatlog.digest import PercentileDigest
from heatlog.matcher import classify, compile_pattern
from heatlog.models import PipelineConfig, RunSummary
from heatlog.prometheus import RunMetrics
from heatlog.ranking import RankBucketer, RankThresholds
from heatlog.render import render_line
from heatlog.scheduler import LineChunk, create_line_chunks
from heatlog.utils import DEFAULT_CHUNK_LINES


logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Everything a run produced, ready to be emitted"""

    lines: list[str]
    summary: RunSummary
    thresholds: RankThresholds | None = None


def _classify_chunk_worker(
    chunk: LineChunk,
    lines: Sequence[str],
    pattern: re.Pattern,
) -> tuple[LineChunk, list[ClassifiedLine], PercentileDigest, float]:
    """Classify one chunk of lines and build its local digest.

    Args:
        chunk: Slice of the input to process
        lines: The full input
        pattern: Compiled pattern

    Returns:
        Tuple of (chunk, classified_lines, partial_digest, execution_time)
    """
    start_time = time()
    thread_id = threading.current_thread().name

    logger.debug(f'[CLASSIFY {thread_id}] Processing chunk {chunk.task_id}: start={chunk.start}, count={chunk.count}')

    digest = PercentileDigest()
    classified = []
    for line in lines[chunk.start : chunk.end]:
        result = classify(pattern, line)
        if isinstance(result, Matched):
            digest.absorb(result.value)
        classified.append(result)

    elapsed = time() - start_time
    logger.debug(
        f'[CLASSIFY {thread_id}] Chunk {chunk.task_id} completed: {digest.total} matched in {elapsed:.3f}s'
    )
    return (chunk, classified, digest, elapsed)


def classify_lines(
    lines: Sequence[str],
    pattern: re.Pattern,
    workers: int = 1,
    chunk_lines: int = DEFAULT_CHUNK_LINES,
) -> tuple[list[ClassifiedLine], PercentileDigest, int]:
    """Classify every line in parallel and merge the partial digests.

    Results are stored per chunk id and concatenated by it, so the output
    order is the input order whatever order the workers finish in.

    Returns:
        Tuple of (classified_lines, merged_digest, chunk_count). The digest is not frozen.
    """
    chunks = create_line_chunks(len(lines), chunk_lines)
    chunk_results: list[list[ClassifiedLine] | None] = [None] * len(chunks)
    partial_digests: list[PercentileDigest | None] = [None] * len(chunks)

    if chunks:
        max_workers = min(workers, len(chunks))
        logger.info(f'[CLASSIFY] Created {len(chunks)} chunks for {len(lines)} lines, {max_workers} workers')
        total_worker_time = 0.0

        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='Classify') as executor:
            future_to_chunk = {
                executor.submit(_classify_chunk_worker, chunk, lines, pattern): chunk for chunk in chunks
            }

            for future in as_completed(future_to_chunk):
                chunk = future_to_chunk[future]
                try:
                    _, classified, digest, elapsed = future.result()
                except Exception as e:
                    logger.error(f'[CLASSIFY] Chunk {chunk.task_id} failed: {e}')
                    raise
                chunk_results[chunk.task_id] = classified
                partial_digests[chunk.task_id] = digest
                total_worker_time += elapsed

        logger.debug(f'[CLASSIFY] Worker time: {total_worker_time:.3f}s')

    # Barrier: every chunk is done, merge the local digests
    merged = PercentileDigest()
    for digest in partial_digests:
        merged.merge(digest)

    classified_lines = [line for chunk_result in chunk_results for line in chunk_result]
    return classified_lines, merged, len(chunks)


def run_pipeline(
    lines: Sequence[str],
    config: PipelineConfig,
    metrics: RunMetrics | None = None,
    pattern: re.Pattern | None = None,
) -> PipelineResult:
    """Run all phases over a fully read input.

    Args:
        lines: Decoded input lines
        config: Run settings
        metrics: Optional metrics to record into
        pattern: ``config.pattern`` already compiled; compiled here when omitted

    Raises:
        ConfigurationError: If the pattern does not compile
    """
    start_time = time()
    if pattern is None:
        pattern = compile_pattern(config.pattern)

    phase_start = time()
    classified, digest, chunk_count = classify_lines(lines, pattern, config.workers, config.chunk_lines)
    digest.freeze()
    classify_time = time() - phase_start
    logger.info(f'Classified {len(classified)} lines in {classify_time:.3f}s, {digest.total} matched')

    phase_start = time()
    bucketer = None
    if digest.total:
        bucketer = RankBucketer.from_digest(digest)
        logger.info(
            f'Rank thresholds: p50={bucketer.thresholds.p50} p90={bucketer.thresholds.p90} '
            f'p99={bucketer.thresholds.p99}'
        )
        if metrics is not None:
            for line in classified:
                if isinstance(line, Matched):
                    metrics.record_bucket(bucketer.bucket_of(line.value))
    rank_time = time() - phase_start

    phase_start = time()
    selected = filter_sort.apply(classified, matching_only=config.matching_only, order=config.order)
    order_time = time() - phase_start

    phase_start = time()
    rendered = [
        render_line(line, bucketer, highlight=config.highlight, bold=config.bold, colorize=config.color)
        for line in selected
    ]
    render_time = time() - phase_start

    summary = RunSummary(
        total_lines=len(classified),
        matched=digest.total,
        workers=min(config.workers, chunk_count) if chunk_count else 0,
        chunks=chunk_count,
        elapsed=time() - start_time,
    )
    if bucketer is not None:
        summary.p50 = bucketer.thresholds.p50
        summary.p90 = bucketer.thresholds.p90
        summary.p99 = bucketer.thresholds.p99
        summary.p999 = digest.quantile(0.999)

    if metrics is not None:
        metrics.record_phase('classify', classify_time)
        metrics.record_phase('rank', rank_time)
        metrics.record_phase('order', order_time)
        metrics.record_phase('render', render_time)
        metrics.record_summary(summary)

    return PipelineResult(
        lines=rendered,
        summary=summary,
        thresholds=bucketer.thresholds if bucketer is not None else None,
    )


def emit(result: PipelineResult, config: PipelineConfig) -> None:
    """Write rendered lines, then the summary if requested, to stdout."""
    for line in result.lines:
        # Lines are already styled or plain; keep escape codes that came with the input
        click.echo(line, color=True)

    if config.debug:
        if config.json_summary:
            click.echo(json.dumps(result.summary.model_dump(), indent=2))
        else:
            click.echo(result.summary.to_cli(colorize=config.color), color=True)
