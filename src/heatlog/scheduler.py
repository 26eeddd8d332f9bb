"""Partitioning of the input lines for parallel classification"""

from dataclasses import dataclass


@dataclass
class LineChunk:
    """A contiguous slice of the input handled by one worker task"""

    task_id: int
    start: int  # Index of the first line in the full input
    count: int  # Number of lines in this chunk

    @property
    def end(self) -> int:
        return self.start + self.count


def create_line_chunks(total_lines: int, chunk_lines: int) -> list[LineChunk]:
    """Split ``total_lines`` into consecutive chunks of at most ``chunk_lines``.

    Chunk ``task_id`` values are their position, so results collected per
    task id concatenate back into input order.
    """
    if chunk_lines <= 0:
        raise ValueError(f'chunk_lines must be positive, got {chunk_lines}')

    chunks = []
    for task_id, start in enumerate(range(0, total_lines, chunk_lines)):
        chunks.append(LineChunk(task_id=task_id, start=start, count=min(chunk_lines, total_lines - start)))
    return chunks
