"""
Unit tests for digest algorithms and DigestEngineImpl.
Verifies algorithm resolution, the size-only mode, per-file read failures,
fatal algorithm failures and input-order preservation under parallelism.
"""
import io
import time
import zlib
import hashlib
import logging
import pytest
import xxhash
from uniqfiles.core.hasher import (
    get_algorithm, DigestEngineImpl, HashlibAlgorithmImpl, XXHashAlgorithmImpl,
    Crc32AlgorithmImpl, CallableAlgorithmImpl
)
from uniqfiles.core.grouper import SizeProberImpl
from uniqfiles.core.models import SizeIndex, DigestAlgorithmError


class TestGetAlgorithm:

    def test_default_is_md5(self):
        """md5 is used when nothing is specified."""
        algorithm = get_algorithm(None)
        assert isinstance(algorithm, HashlibAlgorithmImpl)
        assert algorithm.name == "md5"

    @pytest.mark.parametrize("selector", ["", "none", "size", "Size"])
    def test_size_sentinels_return_none(self, selector):
        """Size-only sentinels mean "no digest at all"."""
        assert get_algorithm(selector) is None

    @pytest.mark.parametrize("selector,expected", [
        ("sha256", "sha256"),
        ("SHA-256", "sha256"),
        ("sha3-256", "sha3_256"),
        ("blake2b", "blake2b"),
    ])
    def test_hashlib_names(self, selector, expected):
        assert get_algorithm(selector).name == expected

    def test_hashlib_selector_uses_first_argument(self):
        """The generic selector takes the hashlib name from its arguments."""
        assert get_algorithm("hashlib", ["blake2b"]).name == "blake2b"
        assert get_algorithm(None, ["sha1"]).name == "sha1"

    def test_hashlib_selector_without_argument_is_fatal(self):
        """The generic selector without a name is a configuration error."""
        with pytest.raises(DigestAlgorithmError):
            get_algorithm("hashlib")

    def test_xxhash_variants(self):
        assert isinstance(get_algorithm("xxh64"), XXHashAlgorithmImpl)
        algorithm = get_algorithm("xxhash", ["xxh3_128", "7"])
        assert algorithm.name == "xxh3_128"
        assert algorithm.seed == 7

    def test_xxhash_bad_arguments_are_fatal(self):
        """Unknown variants or non-numeric seeds are configuration errors."""
        with pytest.raises(DigestAlgorithmError):
            get_algorithm("xxhash", ["xxh999"])
        with pytest.raises(DigestAlgorithmError):
            get_algorithm("xxhash", ["xxh64", "not-a-seed"])

    def test_crc32(self):
        assert isinstance(get_algorithm("crc32"), Crc32AlgorithmImpl)

    def test_unknown_algorithm_is_fatal(self):
        """Unknown names are rejected before any file is read."""
        with pytest.raises(DigestAlgorithmError, match="Unsupported digest algorithm"):
            get_algorithm("no-such-digest")

    def test_callable_is_wrapped(self):
        """A plain function (stream -> str) can serve as the algorithm."""
        def first_byte(stream):
            return stream.read(1).hex()

        algorithm = get_algorithm(first_byte)
        assert isinstance(algorithm, CallableAlgorithmImpl)
        assert algorithm.name == "first_byte"
        assert algorithm.digest_stream(io.BytesIO(b"\x01\x02")) == "01"

    def test_algorithm_object_is_used_as_is(self):
        algorithm = Crc32AlgorithmImpl()
        assert get_algorithm(algorithm) is algorithm

    def test_non_callable_object_is_fatal(self):
        """Objects without digest_stream and not callable are rejected."""
        with pytest.raises(DigestAlgorithmError):
            get_algorithm(42)


class TestAlgorithms:
    """Streaming digests must match one-shot digests of the same data."""

    DATA = b"some content " * 100_000  # > 1 MiB, several chunks

    def test_hashlib_matches_reference(self):
        """Streaming in chunks gives the same digest as hashing in one go."""
        digest = HashlibAlgorithmImpl("sha256").digest_stream(io.BytesIO(self.DATA))
        assert digest == hashlib.sha256(self.DATA).hexdigest()

    def test_xxhash_matches_reference(self):
        digest = XXHashAlgorithmImpl("xxh64").digest_stream(io.BytesIO(self.DATA))
        assert digest == xxhash.xxh64(self.DATA).hexdigest()

    def test_crc32_matches_reference(self):
        digest = Crc32AlgorithmImpl().digest_stream(io.BytesIO(self.DATA))
        assert digest == f"{zlib.crc32(self.DATA) & 0xFFFFFFFF:08x}"

    def test_empty_stream(self):
        """Empty files still get a digest."""
        assert HashlibAlgorithmImpl("md5").digest_stream(io.BytesIO(b"")) == hashlib.md5(b"").hexdigest()


class TestDigestEngineImpl:

    def test_only_shared_sizes_are_digested(self, scenario_paths, scenario_files):
        """Only files sharing a size reach the algorithm."""
        size_index = SizeProberImpl().group_by_size(scenario_paths)
        engine = DigestEngineImpl(get_algorithm("md5"), jobs=1)
        index = engine.build_index(size_index)

        assert scenario_files["f4"] not in index
        a_digest = hashlib.md5(b"a").hexdigest()
        assert index.files[a_digest] == [scenario_files[n] for n in ("f1", "f2", "f5")]
        assert index.files[hashlib.md5(b"c").hexdigest()] == [scenario_files["f3"]]
        assert engine.bytes_read == 4

    def test_size_mode_never_reads_files(self, scenario_paths, scenario_files, monkeypatch):
        """Size-only mode uses the size as digest and opens nothing."""
        def fail_open(*args, **kwargs):
            raise AssertionError("file must not be opened in size mode")

        size_index = SizeProberImpl().group_by_size(scenario_paths)
        monkeypatch.setattr("builtins.open", fail_open)
        index = DigestEngineImpl(None).build_index(size_index)

        assert index.files == {"1": [scenario_files[n] for n in ("f1", "f2", "f3", "f5")]}

    def test_unreadable_file_is_dropped_with_error(self, temp_dir, caplog):
        """A read error drops one file and the run continues."""
        present = temp_dir / "present"
        present.write_bytes(b"x")
        size_index = SizeIndex()
        size_index.add(str(temp_dir / "vanished"), 1)
        size_index.add(str(present), 1)

        with caplog.at_level(logging.ERROR):
            index = DigestEngineImpl(get_algorithm("md5"), jobs=1).build_index(size_index)

        assert list(index.digests) == [str(present)]
        assert "Can't read file" in caplog.text

    def test_algorithm_failure_is_fatal(self, scenario_paths):
        """An exception from the algorithm itself aborts the run."""
        def broken(stream):
            raise ValueError("boom")

        size_index = SizeProberImpl().group_by_size(scenario_paths)
        engine = DigestEngineImpl(get_algorithm(broken), jobs=4)
        with pytest.raises(DigestAlgorithmError, match="boom"):
            engine.build_index(size_index)

    def test_parallel_results_keep_input_order(self, temp_dir):
        """Earlier files finish last; the digest lists must still follow input order."""
        paths = []
        for i in range(6):
            path = temp_dir / f"file{i}"
            path.write_bytes(b"z")
            paths.append(str(path))
        delays = {p: 0.05 * (len(paths) - i) for i, p in enumerate(paths)}

        def slow_digest(stream):
            time.sleep(delays[stream.name])
            return "same"

        size_index = SizeProberImpl().group_by_size(paths)
        index = DigestEngineImpl(get_algorithm(slow_digest), jobs=6).build_index(size_index)
        assert index.files["same"] == paths

    def test_progress_callback_reaches_total(self, scenario_paths):
        """The last progress report equals the number of candidates."""
        calls = []
        size_index = SizeProberImpl().group_by_size(scenario_paths)
        DigestEngineImpl(get_algorithm("md5"), jobs=2).build_index(
            size_index, progress_callback=lambda stage, cur, total: calls.append((stage, cur, total))
        )
        assert calls[-1] == ("Content digest", 4, 4)
