"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

pipeline.py
Implements the uniqueness pipeline:
    path filter → size grouping → content digest → classification → report
Each stage produces a new structure; nothing is shared between invocations.
"""
import time
import logging
from typing import List, Tuple, Optional, Callable

from uniqfiles.core.models import (
    ReportRow, UniqFilesParams, UniqFilesStats, Classification, Stage
)
from uniqfiles.core.interfaces import UniqFiles, PathFilter, SizeProber, Classifier, Reporter
from uniqfiles.core.scanner import PathFilterImpl, expand_paths
from uniqfiles.core.grouper import SizeProberImpl
from uniqfiles.core.hasher import DigestEngineImpl, get_algorithm
from uniqfiles.core.classifier import ClassifierImpl
from uniqfiles.core.reporter import ReporterImpl

logger = logging.getLogger(__name__)


# =============================
# Main Pipeline Class
# =============================
class UniqFilesImpl(UniqFiles):
    """
    Runs all stages in order and collects per-stage statistics.
    Stages are injectable; defaults are the concrete implementations.
    """
    def __init__(
        self,
        path_filter: Optional[PathFilter] = None,
        size_prober: Optional[SizeProber] = None,
        classifier: Optional[Classifier] = None,
        reporter: Optional[Reporter] = None,
    ):
        self.path_filter = path_filter or PathFilterImpl()
        self.size_prober = size_prober or SizeProberImpl()
        self.classifier = classifier or ClassifierImpl()
        self.reporter = reporter or ReporterImpl()
        self.classifications: List[Classification] = []

    def run(
        self,
        params: UniqFilesParams,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[ReportRow], UniqFilesStats]:
        """
        Main pipeline.
        Args:
            params: Validated invocation parameters
            progress_callback (Optional[Callable[[str, int, int], None]]): Reports progress per stage.
        Returns:
            Tuple[List[ReportRow], UniqFilesStats]
        Raises:
            DigestAlgorithmError: before any file is read if the algorithm is unusable,
                or while digesting if the algorithm itself fails
        """
        stats = UniqFilesStats()
        total_start_time = time.time()

        # Resolve the algorithm first: a bad selector must fail before any I/O
        algorithm = get_algorithm(params.algorithm, params.algorithm_args)
        digest_engine = DigestEngineImpl(algorithm, jobs=params.jobs)

        start_time = time.time()
        candidates = expand_paths(params.paths, recurse=params.recurse)
        files = self.path_filter.filter(candidates)
        stats.update_stage(Stage.FILTER.value, len(candidates), len(files), time.time() - start_time)

        start_time = time.time()
        size_index = self.size_prober.group_by_size(files)
        stats.update_stage(Stage.SIZE.value, len(files), len(size_index), time.time() - start_time)
        if progress_callback:
            progress_callback(Stage.SIZE.value, len(size_index), len(files))

        start_time = time.time()
        digest_candidates = size_index.digest_candidates()
        digest_index = digest_engine.build_index(size_index, progress_callback=progress_callback)
        stats.update_stage(
            Stage.DIGEST.value,
            len(digest_candidates),
            len(digest_index.digests),
            time.time() - start_time,
            bytes_read=digest_engine.bytes_read,
        )

        start_time = time.time()
        self.classifications = self.classifier.classify(size_index, digest_index)
        stats.update_stage(
            Stage.CLASSIFY.value, len(size_index), len(self.classifications), time.time() - start_time
        )

        start_time = time.time()
        rows = self.reporter.report(self.classifications, params)
        stats.update_stage(Stage.REPORT.value, len(self.classifications), len(rows), time.time() - start_time)

        stats.total_time = time.time() - total_start_time
        logger.debug(f"Pipeline finished in {stats.total_time:.3f}s, {len(rows)} rows")
        return rows, stats
