"""Batch orchestration of per-file complexity analysis.

Files are analyzed concurrently in worker threads under a semaphore, each
with its own timeout. Every file ends in exactly one AnalysisResult, either
scored or carrying the ErrorKind that stopped it, and the batch report is
folded once all files have finished.
"""

import asyncio
import logging
import threading
import time
from pathlib import PurePath
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type

from ..config import AnalyzerConfig
from ..language_detection import LanguageDetector
from .aggregation import BatchResult, aggregate
from .base_analyzer import ScannerRegistry, StructuralScanner
from .discovery import find_source_files
from .errors import ComplexityAnalysisError, FileTooLargeError, ScanError, UnsupportedLanguageError
from .filesystem import FileSystem, LocalFileSystem, PathLike
from .models import AnalysisResult, ErrorKind, SourceUnit

logger = logging.getLogger(__name__)

# Called with (completed count, total count, result) after each file
ProgressCallback = Callable[[int, int, AnalysisResult], None]


class ComplexityAnalyzer:
    """Analyzes source files and aggregates their complexity.

    The scanner registry is always passed in; use
    ``create_default_registry()`` for the built-in languages.
    """

    def __init__(
        self,
        config: AnalyzerConfig,
        registry: ScannerRegistry,
        detector: Optional[LanguageDetector] = None,
        filesystem: Optional[FileSystem] = None,
    ):
        """
        Initialize the analyzer.

        Args:
            config: Analyzer configuration
            registry: Scanner registry used for every lookup
            detector: Language detector, default profiles when omitted
            filesystem: Filesystem to read, local disk when omitted
        """
        self.config = config
        self.registry = registry
        self.detector = detector or LanguageDetector()
        self.filesystem = filesystem or LocalFileSystem()

        self._scanners: Dict[Tuple[str, Type[StructuralScanner]], StructuralScanner] = {}
        self._scanner_lock = threading.Lock()

        self._in_flight = 0
        self._in_flight_lock = threading.Lock()
        self.peak_in_flight = 0

    def _scanner_for(self, language: str) -> Optional[StructuralScanner]:
        """Get the cached scanner instance for a language or alias.

        Instances are cached per language and scanner class, so re-registering
        a language on the registry takes effect on the next lookup.
        """
        resolved = self.registry.resolve(language)
        if resolved is None:
            return None
        scanner_class = self.registry.get(resolved)
        if scanner_class is None:
            return None

        key = (resolved, scanner_class)
        with self._scanner_lock:
            scanner = self._scanners.get(key)
            if scanner is None:
                scanner = scanner_class(config=self.config.cyclomatic)
                self._scanners[key] = scanner
            return scanner

    def _scan(self, source: SourceUnit, scanner: StructuralScanner) -> AnalysisResult:
        """Score a source unit.

        Raises:
            ScanError: If the scanner fails on the input
        """
        try:
            model, score = scanner.analyze(source)
        except Exception as e:
            logger.error(f"Scanner {scanner.language} failed on {source.path}: {e}", exc_info=True)
            raise ScanError(f"Scan failed: {e}", language=source.language) from e

        result = AnalysisResult.succeeded(source, model.entities, score, model.warnings)
        result.recommendations = result.generate_recommendations(self.config.thresholds)
        return result

    def analyze_code(self, code: str, language: str, path: str = "<memory>") -> AnalysisResult:
        """Analyze source code held in memory.

        Args:
            code: Source code to analyze
            language: Language id or alias of a registered scanner
            path: Name reported in the result

        Returns:
            AnalysisResult, UNSUPPORTED when no scanner is registered
        """
        scanner = self._scanner_for(language)
        if scanner is None:
            return AnalysisResult.failed(
                path,
                ErrorKind.UNSUPPORTED,
                f"No scanner registered for language: {language}",
                language=language,
            )

        source = SourceUnit(
            path=path, language=scanner.language, text=code, size=len(code.encode("utf-8"))
        )
        try:
            return self._scan(source, scanner)
        except ScanError as e:
            return AnalysisResult.failed(path, e.kind, str(e), language=e.language)

    def _detect_language(self, path: str, text: str) -> str:
        """Resolve a file's language, registry extensions first.

        Raises:
            UnsupportedLanguageError: If neither the registry nor the detector
                recognizes the file
        """
        suffix = PurePath(path).suffix
        if suffix:
            language = self.registry.language_for_extension(suffix)
            if language is not None:
                logger.debug(f"Detected {language} for {path} by registered extension")
                return language

        detection = self.detector.detect(path, text)
        if detection is None:
            raise UnsupportedLanguageError(f"Could not detect language of {path}")
        logger.debug(f"Detected {detection.language} for {path} by {detection.method.value}")
        return detection.language

    def _load_source(self, path: str) -> Tuple[SourceUnit, StructuralScanner]:
        """Stat, read and detect one file.

        The size cap is checked before anything is read.

        Raises:
            OSError: If the file cannot be found, stat'ed or read
            FileTooLargeError: If the file exceeds ``max_file_size``
            UnsupportedLanguageError: If no language or no scanner is found
        """
        stat = self.filesystem.stat(path)
        if stat.size > self.config.max_file_size:
            raise FileTooLargeError(
                f"File size {stat.size} exceeds limit of {self.config.max_file_size} bytes"
            )

        data = self.filesystem.read_bytes(path)
        text = data.decode("utf-8", errors="replace")

        language = self._detect_language(path, text)
        scanner = self._scanner_for(language)
        if scanner is None:
            raise UnsupportedLanguageError(
                f"No scanner registered for language: {language}", language=language
            )

        source = SourceUnit(path=path, language=scanner.language, text=text, size=len(data))
        return source, scanner

    def _analyze_path(self, path: str) -> AnalysisResult:
        """Run the whole per-file pipeline synchronously."""
        try:
            source, scanner = self._load_source(path)
            return self._scan(source, scanner)
        except FileNotFoundError:
            return AnalysisResult.failed(path, ErrorKind.NOT_FOUND, f"File not found: {path}")
        except OSError as e:
            return AnalysisResult.failed(path, ErrorKind.UNREADABLE, f"Cannot read {path}: {e}")
        except ComplexityAnalysisError as e:
            return AnalysisResult.failed(path, e.kind, str(e), language=e.language)

    def _enter(self) -> None:
        with self._in_flight_lock:
            self._in_flight += 1
            if self._in_flight > self.peak_in_flight:
                self.peak_in_flight = self._in_flight

    def _exit(self) -> None:
        with self._in_flight_lock:
            self._in_flight -= 1

    def _analyze_in_worker(self, path: str) -> AnalysisResult:
        """Worker thread entry point; counts the analysis as in flight while it runs."""
        self._enter()
        try:
            return self._analyze_path(path)
        except Exception as e:
            logger.error(f"Unexpected error analyzing {path}: {e}", exc_info=True)
            return AnalysisResult.failed(path, ErrorKind.SCAN_FAILURE, f"Analysis failed: {e}")
        finally:
            self._exit()

    async def _run_one(self, path: str) -> AnalysisResult:
        """Analyze one file in a worker thread under the configured timeout.

        A timed-out file resolves as TIMEOUT, but the call only returns once
        its worker thread has finished, so the caller's concurrency slot stays
        taken for as long as the thread really runs.
        """
        start = time.perf_counter()
        worker = asyncio.ensure_future(asyncio.to_thread(self._analyze_in_worker, path))
        try:
            return await asyncio.wait_for(
                asyncio.shield(worker), timeout=self.config.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(f"Analysis of {path} timed out after {self.config.timeout_ms}ms")
            return AnalysisResult.failed(
                path, ErrorKind.TIMEOUT, f"Analysis timed out after {self.config.timeout_ms}ms"
            )
        finally:
            if not worker.done():
                # Threads cannot be interrupted; wait it out and drop its result
                await asyncio.wait({worker})
            logger.debug(f"Finished {path} in {(time.perf_counter() - start) * 1000:.1f}ms")

    async def analyze_file(self, path: PathLike) -> AnalysisResult:
        """Analyze a single file.

        Args:
            path: Path to the file

        Returns:
            AnalysisResult; never raises for per-file problems
        """
        return await self._run_one(str(path))

    async def analyze_files(
        self,
        paths: Iterable[PathLike],
        cancel_event: Optional[Any] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """Analyze many files concurrently and aggregate the results.

        At most ``min(config.max_concurrency, len(paths))`` files are in
        flight at once. Once ``cancel_event`` (anything with ``is_set()``,
        such as asyncio.Event or threading.Event) is set, files that have
        not started resolve as CANCELLED while running ones finish.

        Args:
            paths: Files to analyze
            cancel_event: Optional cancellation signal
            progress_callback: Optional callback invoked after each file

        Returns:
            BatchResult with results in input order and the batch report
        """
        paths = [str(path) for path in paths]
        if not paths:
            return BatchResult(results=[], report=aggregate([]))

        limit = min(self.config.max_concurrency, len(paths))
        semaphore = asyncio.Semaphore(limit)
        total = len(paths)
        completed = 0
        logger.info(f"Analyzing {total} files with concurrency {limit}")

        async def process(path: str) -> AnalysisResult:
            nonlocal completed
            async with semaphore:
                if cancel_event is not None and cancel_event.is_set():
                    result = AnalysisResult.failed(
                        path, ErrorKind.CANCELLED, "Analysis cancelled before start"
                    )
                else:
                    logger.debug(f"Scheduling {path}")
                    result = await self._run_one(path)

            completed += 1
            if progress_callback is not None:
                try:
                    progress_callback(completed, total, result)
                except Exception as e:
                    logger.warning(f"Progress callback failed: {e}")
            return result

        results: List[AnalysisResult] = list(await asyncio.gather(*(process(p) for p in paths)))

        # Single writer: the fold runs once every file has a terminal result
        report = aggregate(results)
        logger.info(
            f"Analyzed {report.analyzed_files}/{report.total_files} files "
            f"({report.error_files} errors)"
        )
        return BatchResult(results=results, report=report)

    async def analyze_directory(
        self,
        root: PathLike,
        cancel_event: Optional[Any] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """Discover source files under ``root`` and analyze them."""
        files = await asyncio.to_thread(
            find_source_files, root, self.config, self.registry, self.filesystem
        )
        return await self.analyze_files(
            files, cancel_event=cancel_event, progress_callback=progress_callback
        )
