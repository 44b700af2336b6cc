"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models, parameters and errors for content-based file uniqueness checks.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Union, Any
from enum import Enum
import os

from uniqfiles.utils.convert_utils import ConvertUtils


# =============================
# Errors
# =============================

class UniqFilesError(Exception):
    """Base class for errors that abort a whole invocation."""
    status = 500


class ValidationError(UniqFilesError, ValueError):
    """Request rejected before touching the file system."""
    status = 400


class DigestAlgorithmError(UniqFilesError):
    """Unsupported or misconfigured digest algorithm (fatal)."""
    status = 500


# =============================
# Enums
# =============================

class ReportDuplicate(Enum):
    """
    Which members of a duplicate group get reported.
    """
    NONE = "none"
    ALL = "all"
    FIRST_ONLY = "first-only"
    ALL_BUT_FIRST = "all-but-first"

    @property
    def description(self) -> str:
        mapping = {
            ReportDuplicate.NONE: "Do not report files whose content is duplicated",
            ReportDuplicate.ALL: "Report every file whose content is duplicated",
            ReportDuplicate.FIRST_ONLY: "Report only the first file of each duplicate group",
            ReportDuplicate.ALL_BUT_FIRST:
                "Report all but the first file of each duplicate group (keep one copy)",
        }
        return mapping.get(self, self.value)

    @classmethod
    def parse(cls, value: Union["ReportDuplicate", str, int]) -> "ReportDuplicate":
        """
        Accepts an enum member, its value, or the historical numeric form
        (0 = none, 1 = all, 2 = first-only, 3 = all-but-first).
        """
        if isinstance(value, cls):
            return value
        numeric = [cls.NONE, cls.ALL, cls.FIRST_ONLY, cls.ALL_BUT_FIRST]
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < len(numeric):
                return numeric[value]
        elif isinstance(value, str):
            text = value.strip().lower()
            if text.isdigit() and int(text) < len(numeric):
                return numeric[int(text)]
            try:
                return cls(text)
            except ValueError:
                pass
        raise ValidationError(
            f"Invalid value for report_duplicate: {value!r}, "
            f"please choose one of {', '.join(m.value for m in cls)} (or 0/1/2/3)"
        )


class Stage(str, Enum):
    FILTER = "Path filter"
    SIZE = "Size grouping"
    DIGEST = "Content digest"
    CLASSIFY = "Classification"
    REPORT = "Report"


# ======================
#  Core Data Models
# ======================

@dataclass
class SizeIndex:
    """
    Paths grouped by exact byte size.
    `sizes` remembers each surviving path's own size, in input order.
    """
    sizes: Dict[str, int] = field(default_factory=dict)
    buckets: Dict[int, List[str]] = field(default_factory=dict)

    def add(self, path: str, size: int) -> None:
        self.sizes[path] = size
        self.buckets.setdefault(size, []).append(path)

    def size_of(self, path: str) -> int:
        return self.sizes[path]

    def is_shared(self, path: str) -> bool:
        """True if at least one other file has the same size."""
        return len(self.buckets[self.sizes[path]]) > 1

    def digest_candidates(self) -> List[str]:
        """Paths whose size is not unique, in original input order."""
        return [path for path in self.sizes if self.is_shared(path)]

    def __len__(self) -> int:
        return len(self.sizes)

    def __repr__(self):
        return f"<SizeIndex files={len(self.sizes)}, sizes={len(self.buckets)}>"


@dataclass
class DigestIndex:
    """
    Digest value -> paths producing it, in original input order.
    Only files from shared size buckets are ever present.
    """
    files: Dict[str, List[str]] = field(default_factory=dict)
    digests: Dict[str, str] = field(default_factory=dict)

    def add(self, path: str, digest: str) -> None:
        self.digests[path] = digest
        self.files.setdefault(digest, []).append(path)

    def digest_of(self, path: str) -> Optional[str]:
        return self.digests.get(path)

    def group_of(self, path: str) -> List[str]:
        return self.files[self.digests[path]]

    def __contains__(self, path: str) -> bool:
        return path in self.digests

    def __repr__(self):
        return f"<DigestIndex files={len(self.digests)}, digests={len(self.files)}>"


@dataclass(frozen=True)
class Classification:
    """
    Final verdict for one file.
    occurrence_count counts the file itself, so it is never below 1.
    """
    path: str
    occurrence_count: int
    size: int
    digest: Optional[str] = None
    is_first_of_group: bool = True

    @property
    def is_unique(self) -> bool:
        return self.occurrence_count == 1

    @property
    def digest_or_size(self) -> Union[str, int]:
        return self.digest if self.digest is not None else self.size

    @property
    def group_key(self):
        """Sort/grouping key: size first, then digest."""
        return self.size, self.digest or ""


@dataclass(frozen=True)
class ReportRow:
    """
    One output row. show_count/show_digest say which annotations were requested;
    separator_before marks the start of a new digest group.
    """
    path: str
    count: Optional[int] = None
    digest: Optional[str] = None
    separator_before: bool = False
    show_count: bool = False
    show_digest: bool = False

    def fields(self) -> List[str]:
        """Row rendered as a list of text columns."""
        columns = [self.path]
        if self.show_count:
            columns.append(str(self.count))
        if self.show_digest:
            columns.append(self.digest or "")
        return columns

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"path": self.path}
        if self.show_count:
            data["count"] = self.count
        if self.show_digest:
            data["digest"] = self.digest
        return data


@dataclass
class UniqFilesResult:
    """Outcome of one invocation: a status, a message and the report rows."""
    status: int = 200
    message: str = "OK"
    rows: List[ReportRow] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == 200

    @classmethod
    def failure(cls, error: UniqFilesError) -> "UniqFilesResult":
        return cls(status=error.status, message=str(error), rows=[])

    def paths(self) -> List[str]:
        return [row.path for row in self.rows]

    def as_count_mapping(self) -> Dict[str, int]:
        """path -> occurrence count; requires rows built with count annotation."""
        return {row.path: row.count for row in self.rows}

    def __repr__(self):
        return f"<UniqFilesResult status={self.status}, rows={len(self.rows)}>"


class UniqFilesStats:
    """
    Statistics collected while running the pipeline.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}

    def update_stage(
            self,
            stage_name: str,
            files_in: int,
            files_out: int,
            duration: float,
            bytes_read: int = 0
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "in": 0,
                "out": 0,
                "time": 0.0,
                "bytes": 0,
            }
        self.stage_stats[stage_name]["in"] += files_in
        self.stage_stats[stage_name]["out"] += files_out
        self.stage_stats[stage_name]["time"] += duration
        self.stage_stats[stage_name]["bytes"] += bytes_read

    def print_summary(self) -> str:
        lines = [
            "Pipeline statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: FILES IN / FILES OUT / TIME"
        ]
        for stage, data in self.stage_stats.items():
            line = f"{stage}: {data['in']} / {data['out']} / {data['time']:.3f}s"
            if data["bytes"]:
                line += f" ({ConvertUtils.bytes_to_human(data['bytes'])} read)"
            lines.append(line)
        return "\n".join(lines)


"""
DTO for invocation parameters with built-in validation.
Interface-agnostic — used by the CLI and by library callers.
"""
SIZE_ALGORITHMS = ("", "none", "size")


@dataclass
class UniqFilesParams:
    """Parameters for one invocation with validation."""
    paths: List[str]
    recurse: bool = False
    report_unique: bool = True
    report_duplicate: ReportDuplicate = ReportDuplicate.FIRST_ONLY
    count: bool = False
    show_digest: bool = False
    group_by_digest: bool = False
    algorithm: Optional[Any] = None
    algorithm_args: List[str] = field(default_factory=list)
    jobs: Optional[int] = None

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if isinstance(self.paths, (str, bytes)):
            raise ValidationError("paths must be a sequence of file names, not a single string")
        self.paths = [os.fspath(p) for p in (self.paths or [])]
        if not self.paths:
            raise ValidationError("Please specify files")

        self.report_duplicate = ReportDuplicate.parse(self.report_duplicate)

        if self.jobs is not None and (
                not isinstance(self.jobs, int) or isinstance(self.jobs, bool) or self.jobs < 1):
            raise ValidationError("jobs must be a positive integer")

        self.algorithm_args = [str(a) for a in (self.algorithm_args or [])]
        if self.algorithm is None:
            self.algorithm = "hashlib" if self.algorithm_args else "md5"
        elif isinstance(self.algorithm, str):
            self.algorithm = self.algorithm.strip().lower()
