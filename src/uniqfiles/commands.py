"""
Unified command orchestrator for uniqueness checks.
This is the SINGLE source of truth for business logic — used by the CLI and library callers.
"""
import logging
from dataclasses import fields
from typing import List, Optional, Callable, Tuple, Sequence, Any

from uniqfiles.core.models import (
    ReportRow, UniqFilesParams, UniqFilesResult, UniqFilesStats, UniqFilesError, ValidationError,
    Classification
)
from uniqfiles.core.pipeline import UniqFilesImpl

logger = logging.getLogger(__name__)


class UniqFilesCommand:
    """
    Orchestrates one invocation:
    1. Build the pipeline
    2. Run it with progress support
    3. Keep the classifications around for callers that need more than rows

    Usage:
        params = UniqFilesParams(paths=["a.txt", "b.txt"], report_duplicate="all")
        command = UniqFilesCommand()
        rows, stats = command.execute(params, progress_callback=cli_progress_printer)
    """

    def __init__(self):
        self.pipeline: Optional[UniqFilesImpl] = None

    def execute(
            self,
            params: UniqFilesParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[List[ReportRow], UniqFilesStats]:
        """
        Execute with given parameters.

        Args:
            params: Validated parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            Tuple of (report rows, statistics)

        Raises:
            DigestAlgorithmError: If the digest algorithm is unsupported or fails
        """
        self.pipeline = UniqFilesImpl()
        return self.pipeline.run(params, progress_callback=progress_callback)

    def get_classifications(self) -> List[Classification]:
        """Per-file verdicts of the last execution, in lexical path order."""
        if not self.pipeline:
            raise RuntimeError("Execute command first before accessing classifications")
        return self.pipeline.classifications


def classify_files(paths: Sequence[str], **options: Any) -> UniqFilesResult:
    """
    Report or omit duplicate file contents.

    Options: recurse, report_unique, report_duplicate, count, show_digest,
    group_by_digest, algorithm, algorithm_args, jobs.

    Never raises for request or configuration problems: those come back as a
    failed result (status 400 or 500) with no rows.
    """
    try:
        unknown = sorted(set(options) - {f.name for f in fields(UniqFilesParams)})
        if unknown:
            raise ValidationError(f"Unknown option(s): {', '.join(unknown)}")
        params = UniqFilesParams(paths=paths, **options)
        rows, _ = UniqFilesCommand().execute(params)
    except UniqFilesError as e:
        logger.debug(f"classify_files failed: {e}")
        return UniqFilesResult.failure(e)
    return UniqFilesResult(rows=rows)
