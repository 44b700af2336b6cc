"""
uniqfiles — report or omit duplicate file contents, like `uniq` for whole files.

Core features:
- Two-phase detection: files are grouped by size, only shared sizes are digested
- Pluggable digests: md5 (default), any hashlib algorithm, crc32, xxHash, or size only
- Report modes: unique files, all duplicates, first copy only, all but the first copy
- Optional occurrence counts, digests and grouping by digest
- Safe removal of extra copies to the system trash (via send2trash)
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("uniqfiles")
except Exception:
    __version__ = "0.0.0"

# Public API — only what users should import directly
from uniqfiles.commands import UniqFilesCommand, classify_files
from uniqfiles.core import (
    UniqFilesParams, UniqFilesResult, ReportDuplicate, ReportRow, Classification,
    UniqFilesError, ValidationError, DigestAlgorithmError)
from uniqfiles.services.file_service import FileService

__all__ = [
    "UniqFilesCommand",
    "classify_files",
    "UniqFilesParams",
    "UniqFilesResult",
    "ReportDuplicate",
    "ReportRow",
    "Classification",
    "UniqFilesError",
    "ValidationError",
    "DigestAlgorithmError",
    "FileService",
    "__version__",
]
