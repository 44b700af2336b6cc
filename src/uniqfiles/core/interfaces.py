"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the uniqueness pipeline.
These protocols enforce structural typing using Python's `typing.Protocol` so that
stages can be swapped (e.g. a custom digest algorithm) without touching the rest.

Key Components:
---------------
- DigestAlgorithm: Interface for computing a content digest from a byte stream.
- PathFilter: Interface for dropping symlinks, directories and special files.
- SizeProber: Interface for grouping paths by exact size.
- DigestEngine: Interface for digesting files whose size is shared.
- Classifier / Reporter: Interfaces for turning indices into report rows.
"""

from typing import Protocol, List, Optional, Callable, BinaryIO, Tuple
from uniqfiles.core.models import (
    SizeIndex,
    DigestIndex,
    Classification,
    ReportRow,
    UniqFilesParams,
    UniqFilesStats,
)


# ===== Interfaces =====

class DigestAlgorithm(Protocol):
    """
    Interface for content digest algorithms.

    Allows plugging in MD5, SHA-2, CRC32, xxHash or any caller-supplied function
    without affecting the rest of the pipeline.
    """
    name: str

    def digest_stream(self, stream: BinaryIO) -> str:
        """Reads the stream to the end and returns the digest as a string."""
        ...


class PathFilter(Protocol):
    def filter(self, paths: List[str]) -> List[str]:
        """Return only regular, non-symlink files, keeping input order."""
        ...


class SizeProber(Protocol):
    def group_by_size(self, paths: List[str]) -> SizeIndex:
        """Stat every path and bucket it by size; unreadable paths are dropped."""
        ...


class DigestEngine(Protocol):
    """
    Interface for the expensive stage: digesting candidate files.
    """
    def build_index(
        self,
        size_index: SizeIndex,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> DigestIndex:
        """
        Digest every file from a shared size bucket.

        Args:
            size_index: Output of the size stage.
            progress_callback: Optional callback for progress updates (stage, current, total).

        Returns:
            DigestIndex with per-digest path lists in original input order.

        Raises:
            DigestAlgorithmError: If the algorithm itself fails.
        """
        ...


class Classifier(Protocol):
    def classify(self, size_index: SizeIndex, digest_index: DigestIndex) -> List[Classification]:
        """One Classification per surviving path, in lexical path order."""
        ...


class Reporter(Protocol):
    def report(self, classifications: List[Classification], params: UniqFilesParams) -> List[ReportRow]:
        """Filter, order and annotate classifications."""
        ...


class UniqFiles(Protocol):
    """
    Interface for the main engine coordinating all stages.
    """
    def run(
        self,
        params: UniqFilesParams,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[ReportRow], UniqFilesStats]:
        """
        Run the whole pipeline for the given parameters.

        Returns:
            A tuple containing:
                - Report rows
                - Statistics collected during processing
        """
        ...
