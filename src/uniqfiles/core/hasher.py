"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements content digesting with pluggable algorithms.

Supported selectors:
    - any hashlib algorithm name: md5 (default), sha1, sha256, blake2b, ...
    - crc32 (zlib)
    - xxHash variants: xxh32, xxh64, xxh3_64, xxh3_128, xxh128
    - "hashlib" / "xxhash" with the concrete algorithm as first argument
    - "", "none", "size": no digest, the size is used as the fingerprint
    - a DigestAlgorithm object or a plain callable(stream) -> str
"""

import os
import zlib
import time
import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Callable, BinaryIO, Tuple, Union, Any

import xxhash

from uniqfiles.core.interfaces import DigestAlgorithm, DigestEngine
from uniqfiles.core.models import SizeIndex, DigestIndex, DigestAlgorithmError, Stage, SIZE_ALGORITHMS

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

XXHASH_VARIANTS = {
    "xxh32": xxhash.xxh32,
    "xxh64": xxhash.xxh64,
    "xxh3_64": xxhash.xxh3_64,
    "xxh3_128": xxhash.xxh3_128,
    "xxh128": xxhash.xxh128,
}


def _read_chunks(stream: BinaryIO):
    while True:
        chunk = stream.read(CHUNK_SIZE)
        if not chunk:
            break
        yield chunk


# Use the same way to implement and use any other hashing algorithm
class HashlibAlgorithmImpl(DigestAlgorithm):
    def __init__(self, name: str):
        try:
            hashlib.new(name)
        except (ValueError, TypeError) as e:
            raise DigestAlgorithmError(f"Unsupported digest algorithm '{name}': {e}") from e
        self.name = name

    def digest_stream(self, stream: BinaryIO) -> str:
        h = hashlib.new(self.name)
        for chunk in _read_chunks(stream):
            h.update(chunk)
        if self.name.startswith("shake_"):
            # Variable-length digests need an explicit length
            return h.hexdigest(32)
        return h.hexdigest()


class XXHashAlgorithmImpl(DigestAlgorithm):
    def __init__(self, name: str = "xxh64", seed: int = 0):
        if name not in XXHASH_VARIANTS:
            raise DigestAlgorithmError(
                f"Unsupported xxHash variant '{name}', choose one of {', '.join(XXHASH_VARIANTS)}"
            )
        self.name = name
        self.seed = seed

    def digest_stream(self, stream: BinaryIO) -> str:
        h = XXHASH_VARIANTS[self.name](seed=self.seed)
        for chunk in _read_chunks(stream):
            h.update(chunk)
        return h.hexdigest()


class Crc32AlgorithmImpl(DigestAlgorithm):
    name = "crc32"

    def digest_stream(self, stream: BinaryIO) -> str:
        value = 0
        for chunk in _read_chunks(stream):
            value = zlib.crc32(chunk, value)
        return f"{value & 0xFFFFFFFF:08x}"


class CallableAlgorithmImpl(DigestAlgorithm):
    """Wraps a caller-supplied function(stream) -> str."""

    def __init__(self, func: Callable[[BinaryIO], Any], name: Optional[str] = None):
        self.func = func
        self.name = name or getattr(func, "__name__", "custom")

    def digest_stream(self, stream: BinaryIO) -> str:
        return str(self.func(stream))


def _hashlib_name(name: str) -> str:
    """Map spellings like SHA-256 or sha3-256 onto hashlib names."""
    name = name.strip().lower()
    for candidate in (name, name.replace("-", "_"), name.replace("-", "")):
        if candidate in hashlib.algorithms_available:
            return candidate
    return name


def get_algorithm(selector: Union[str, DigestAlgorithm, Callable, None],
                  args: Optional[List[str]] = None) -> Optional[DigestAlgorithm]:
    """
    Resolve an algorithm selector once, before any file is read.
    Returns None for the size-only sentinels.

    Raises:
        DigestAlgorithmError: unknown selector or malformed arguments.
    """
    args = list(args or [])

    if selector is None:
        selector = "hashlib" if args else "md5"

    if not isinstance(selector, str):
        if hasattr(selector, "digest_stream"):
            return selector
        if callable(selector):
            return CallableAlgorithmImpl(selector)
        raise DigestAlgorithmError(f"Invalid digest algorithm: {selector!r}")

    name = selector.strip().lower()
    if name in SIZE_ALGORITHMS:
        return None

    if name == "hashlib":
        if not args:
            raise DigestAlgorithmError("Algorithm 'hashlib' needs the hashlib algorithm name as argument")
        return HashlibAlgorithmImpl(_hashlib_name(args[0]))
    if name == "xxhash":
        variant = args[0].strip().lower() if args else "xxh64"
        seed = 0
        if len(args) > 1:
            try:
                seed = int(args[1])
            except ValueError:
                raise DigestAlgorithmError(f"Invalid xxHash seed: '{args[1]}'")
        return XXHashAlgorithmImpl(variant, seed=seed)
    if name == "crc32":
        return Crc32AlgorithmImpl()
    if name in XXHASH_VARIANTS:
        return XXHashAlgorithmImpl(name)
    if _hashlib_name(name) in hashlib.algorithms_available:
        return HashlibAlgorithmImpl(_hashlib_name(name))

    raise DigestAlgorithmError(f"Unsupported digest algorithm '{selector}'")


def default_jobs() -> int:
    """Same bound ThreadPoolExecutor uses by default."""
    return min(32, (os.cpu_count() or 1) + 4)


class DigestEngineImpl(DigestEngine):
    """
    Digests files from shared size buckets, optionally in parallel.
    Results are always inserted in original input order, not completion order.
    """

    def __init__(self, algorithm: Optional[DigestAlgorithm], jobs: Optional[int] = None):
        self.algorithm = algorithm
        self.jobs = jobs or default_jobs()
        self.bytes_read = 0

    def digest_file(self, path: str) -> str:
        """Digest a single file. OSError propagates to the caller."""
        with open(path, "rb") as f:
            return self.algorithm.digest_stream(f)

    def _safe_digest(self, path: str) -> Tuple[Optional[str], Optional[OSError]]:
        try:
            return self.digest_file(path), None
        except OSError as e:
            return None, e
        except Exception as e:
            raise DigestAlgorithmError(
                f"Can't calculate digest for file '{path}' using {self.algorithm.name}: {e}"
            ) from e

    def build_index(
        self,
        size_index: SizeIndex,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> DigestIndex:
        candidates = size_index.digest_candidates()
        index = DigestIndex()
        total = len(candidates)

        if self.algorithm is None:
            if candidates:
                logger.info(
                    "Digest disabled: files of equal size are treated as duplicates "
                    "(may give false positives)"
                )
            for path in candidates:
                index.add(path, str(size_index.size_of(path)))
            if progress_callback:
                progress_callback(Stage.DIGEST.value, total, total)
            return index

        start_time = time.time()
        results = self._digest_all(candidates, progress_callback)

        # Insert in input order so the first path of each digest is the first seen
        for path, (digest, error) in zip(candidates, results):
            if error is not None:
                logger.error(f"Can't read file '{path}': {error.strerror or error}, skipped")
                continue
            index.add(path, digest)
            self.bytes_read += size_index.size_of(path)

        logger.debug(
            f"Digested {len(index.digests)}/{total} files with {self.algorithm.name} "
            f"in {time.time() - start_time:.3f}s ({len(index.files)} distinct digests)"
        )
        return index

    def _digest_all(
        self,
        paths: List[str],
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[Tuple[Optional[str], Optional[OSError]]]:
        total = len(paths)
        if self.jobs <= 1 or total <= 1:
            results = []
            for done, path in enumerate(paths, 1):
                results.append(self._safe_digest(path))
                if progress_callback:
                    progress_callback(Stage.DIGEST.value, done, total)
            return results

        results = []
        with ThreadPoolExecutor(max_workers=min(self.jobs, total)) as executor:
            # executor.map yields in submission order and re-raises the first fatal error
            for done, result in enumerate(executor.map(self._safe_digest, paths), 1):
                results.append(result)
                if progress_callback:
                    progress_callback(Stage.DIGEST.value, done, total)
        return results
