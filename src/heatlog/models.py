"""Pydantic models for run configuration and the summary report"""

from pydantic import BaseModel, ConfigDict, Field

from heatlog.filter_sort import SortOrder
from heatlog.utils import DEFAULT_CHUNK_LINES


class PipelineConfig(BaseModel):
    """Validated settings for one pipeline run"""

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(..., examples=[r'took (\d+)ms'], description='Regex; group 1 holds the value')
    highlight: bool = Field(False, description='Use one fixed highlight style instead of rank colors')
    bold: bool = Field(False, description='Make the annotated span bold')
    matching_only: bool = Field(False, description='Drop lines without a value')
    order: SortOrder = Field(SortOrder.ORIGINAL, description='Output order')
    debug: bool = Field(False, description='Emit the summary after the lines')
    json_summary: bool = Field(False, description='Emit the summary as JSON')
    color: bool = Field(False, description='Emit ANSI styling')
    workers: int = Field(1, ge=1, description='Worker threads for classification')
    chunk_lines: int = Field(DEFAULT_CHUNK_LINES, ge=1, description='Lines per worker task')


class RunSummary(BaseModel):
    """Statistics over one run

    Percentiles are None when no line matched.
    """

    total_lines: int = Field(..., examples=[1000], description='Lines read')
    matched: int = Field(..., examples=[870], description='Lines with a parsed value')
    p50: int | None = Field(None, examples=[120])
    p90: int | None = Field(None, examples=[480])
    p99: int | None = Field(None, examples=[1900])
    p999: int | None = Field(None, examples=[4100])
    workers: int = Field(1, examples=[4], description='Worker threads used for classification')
    chunks: int = Field(0, examples=[12], description='Chunks the input was split into')
    elapsed: float = Field(0.0, examples=[0.042], description='Pipeline time in seconds')

    def to_cli(self, colorize: bool = False) -> str:
        """Format the summary for CLI output"""
        GREY = '\033[90m'
        BOLD_GREEN = '\033[1;32m'
        YELLOW = '\033[33m'
        RESET = '\033[0m'

        lines = []
        if colorize:
            lines.append(f"{GREY}Found{RESET} {BOLD_GREEN}{self.matched}{RESET} {GREY}samples{RESET}")
        else:
            lines.append(f"Found {self.matched} samples")

        if self.matched == 0:
            return "\n".join(lines)

        for label, value in (("99", self.p99), ("90", self.p90), ("50", self.p50), ("99.9", self.p999)):
            if colorize:
                lines.append(f"{GREY}{label}'th percentile:{RESET}  {YELLOW}{value}{RESET}")
            else:
                lines.append(f"{label}'th percentile:  {value}")

        return "\n".join(lines)
