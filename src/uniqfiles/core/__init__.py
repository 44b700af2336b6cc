"""
Core engine — path filter, size grouping, digesting, classification and reporting.

This package contains the whole algorithm of uniqfiles:
- PathFilterImpl / walk_files: regular-file selection and recursive expansion
- SizeProberImpl: size grouping, the cheap first pass
- DigestEngineImpl + algorithms: hashlib, crc32 and xxHash digests, run on a thread pool
- ClassifierImpl / ReporterImpl: occurrence counts, first-of-group and report modes
- UniqFilesImpl: the pipeline tying the stages together

All components are pure Python without any CLI dependencies.
"""

from .scanner import PathFilterImpl, walk_files, expand_paths
from .grouper import SizeProberImpl
from .hasher import (
    DigestEngineImpl, HashlibAlgorithmImpl, XXHashAlgorithmImpl, Crc32AlgorithmImpl,
    CallableAlgorithmImpl, get_algorithm)
from .classifier import ClassifierImpl
from .reporter import ReporterImpl
from .pipeline import UniqFilesImpl
from .models import (
    SizeIndex, DigestIndex, Classification, ReportRow, ReportDuplicate, UniqFilesParams,
    UniqFilesResult, UniqFilesStats, UniqFilesError, ValidationError, DigestAlgorithmError)

__all__ = [
    "PathFilterImpl",
    "walk_files",
    "expand_paths",
    "SizeProberImpl",
    "DigestEngineImpl",
    "HashlibAlgorithmImpl",
    "XXHashAlgorithmImpl",
    "Crc32AlgorithmImpl",
    "CallableAlgorithmImpl",
    "get_algorithm",
    "ClassifierImpl",
    "ReporterImpl",
    "UniqFilesImpl",
    "SizeIndex",
    "DigestIndex",
    "Classification",
    "ReportRow",
    "ReportDuplicate",
    "UniqFilesParams",
    "UniqFilesResult",
    "UniqFilesStats",
    "UniqFilesError",
    "ValidationError",
    "DigestAlgorithmError",
]
