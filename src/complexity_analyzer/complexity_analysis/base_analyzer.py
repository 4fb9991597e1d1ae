"""Abstract base class and registry for language-specific structural scanners.

This module provides the foundation for implementing complexity analysis
across multiple programming languages with a consistent interface: a
scanner turns source text into functions and classes, and the shared
calculators score whatever span it hands them.
"""

import functools
import importlib
import inspect
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from importlib.metadata import entry_points
from pathlib import Path
from re import Match, Pattern
from threading import RLock
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from ..config import CyclomaticConfig
from .calculators import (
    CognitiveComplexityCalculator,
    CyclomaticComplexityCalculator,
    calculate_maintainability_index,
    calculate_nesting_depth,
)
from .errors import ScannerRegistrationError, UnsupportedLanguageError
from .models import (
    ANONYMOUS,
    ComplexityScore,
    EntityKind,
    SourceUnit,
    StructuralEntity,
    StructuralModel,
    iter_entities,
)

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "complexity_analyzer.scanners"

# Words that can look like a declaration name or return type but never are
CONTROL_KEYWORDS = frozenset({
    "if", "else", "for", "foreach", "while", "do", "switch", "case", "default",
    "catch", "try", "finally", "return", "new", "delete", "throw", "throws",
    "synchronized", "lock", "using", "fixed", "checked", "unchecked", "goto",
    "break", "continue", "yield", "await", "typeof", "instanceof", "sizeof",
    "alignof", "decltype", "nameof", "static_assert", "function", "this",
    "super", "typedef", "co_return", "co_await", "co_yield", "assert",
})


@dataclass(frozen=True)
class NormalizationRules:
    """Lexical rules used to blank comments and literal contents.

    Attributes:
        line_comments: Markers that start a comment running to end of line
        block_comments: (open, close) delimiter pairs
        string_quotes: Delimiters of single-line string and char literals
        multiline_quotes: Delimiters of literals that may span lines
        escape_char: Character escaping the next one inside a literal
    """

    line_comments: Tuple[str, ...] = ("//",)
    block_comments: Tuple[Tuple[str, str], ...] = (("/*", "*/"),)
    string_quotes: Tuple[str, ...] = ('"', "'")
    multiline_quotes: Tuple[str, ...] = ()
    escape_char: str = "\\"


_NON_NEWLINE = re.compile(r"[^\r\n]")


def _blank(text: str) -> str:
    return _NON_NEWLINE.sub(" ", text)


def normalize_source(text: str, rules: NormalizationRules) -> str:
    """Blank comments and literal contents, keeping every line's length.

    Quote characters stay in place so a literal still reads as an operand;
    everything between them becomes spaces. Newlines are never touched.

    Args:
        text: Raw source text
        rules: Lexical rules of the language

    Returns:
        Normalized text of the same length as ``text``
    """
    # Longest delimiters first so '"""' wins over '"'
    quotes = sorted(
        [(q, True) for q in rules.multiline_quotes] + [(q, False) for q in rules.string_quotes],
        key=lambda item: -len(item[0]),
    )
    out: List[str] = []
    i = 0
    n = len(text)

    while i < n:
        consumed = False

        for start, end in rules.block_comments:
            if text.startswith(start, i):
                close = text.find(end, i + len(start))
                stop = n if close == -1 else close + len(end)
                out.append(_blank(text[i:stop]))
                i = stop
                consumed = True
                break
        if consumed:
            continue

        for marker in rules.line_comments:
            if text.startswith(marker, i):
                stop = text.find("\n", i)
                if stop == -1:
                    stop = n
                # Leave a trailing \r alone
                if stop > i and text[stop - 1] == "\r":
                    stop -= 1
                out.append(" " * (stop - i))
                i = stop
                consumed = True
                break
        if consumed:
            continue

        for quote, multiline in quotes:
            if text.startswith(quote, i):
                j = i + len(quote)
                while j < n and not text.startswith(quote, j):
                    if text[j] == "\n" and not multiline:
                        break
                    j += 2 if text[j] == rules.escape_char else 1
                j = min(j, n)
                out.append(quote)
                out.append(_blank(text[i + len(quote):j]))
                if text.startswith(quote, j):
                    out.append(quote)
                    j += len(quote)
                i = j
                consumed = True
                break
        if consumed:
            continue

        out.append(text[i])
        i += 1

    return "".join(out)


def count_parameters(parameter_text: str) -> int:
    """Count comma separated parameters, splitting only at bracket depth 0.

    Args:
        parameter_text: Text between a declaration's parentheses

    Returns:
        Number of parameters, 0 for an empty list
    """
    if not parameter_text.strip():
        return 0

    depth = 0
    count = 0
    token_has_content = False
    for char in parameter_text:
        if char in "([{<":
            depth += 1
        elif char in ")]}>":
            depth = max(0, depth - 1)
        elif char == "," and depth == 0:
            if token_has_content:
                count += 1
            token_has_content = False
            continue
        if not char.isspace():
            token_has_content = True
    if token_has_content:
        count += 1
    return count


@dataclass(frozen=True)
class DeclarationPattern:
    """A declaration regex with a ``name`` group.

    Function patterns end with the opening parenthesis of the parameter
    list, unless they match a bare arrow parameter in an ``arrow_param``
    group. A ``rtype`` group marks a declared return or field type.

    Attributes:
        regex: Compiled pattern, matched against one normalized line
        body_required: Reject the match when no body brace follows
    """

    regex: Pattern[str]
    body_required: bool = True


class StructuralScanner(ABC):
    """Abstract base class for language-specific structural scanners.

    All language scanners must inherit from this class and implement the
    required methods. Registration in a ScannerRegistry is refused for any
    class that leaves one of them abstract.
    """

    language: str = "unknown"
    extensions: Tuple[str, ...] = ()
    aliases: Tuple[str, ...] = ()

    def __init__(self, config: Optional[CyclomaticConfig] = None):
        """Initialize the scanner.

        Args:
            config: Toggles for optional cyclomatic decision points
        """
        self.config = config or CyclomaticConfig()

    @abstractmethod
    def normalize(self, text: str) -> str:
        """Blank comments and literal contents, preserving line lengths."""

    @abstractmethod
    def scan(self, source: SourceUnit) -> StructuralModel:
        """Find functions and classes in a source unit.

        Args:
            source: Source unit to scan

        Returns:
            StructuralModel with normalized text, top-level entities and warnings
        """

    @abstractmethod
    def extract_functions(self, model: StructuralModel) -> List[StructuralEntity]:
        """Flattened list of every function and method in the model."""

    @abstractmethod
    def extract_classes(self, model: StructuralModel) -> List[StructuralEntity]:
        """Flattened list of every class in the model, nested ones included."""

    @abstractmethod
    def calculate_cyclomatic_complexity(self, text: str) -> int:
        """Calculate cyclomatic complexity of normalized text.

        Cyclomatic complexity measures the number of linearly independent
        paths through a program's source code.
        """

    @abstractmethod
    def calculate_cognitive_complexity(self, text: str) -> int:
        """Calculate cognitive complexity of normalized text.

        Cognitive complexity measures how difficult code is to understand,
        taking into account nesting and breaks in linear flow.
        """

    def score(self, text: str, line_count: int, base: int = 0) -> ComplexityScore:
        """Score a span of normalized text.

        Args:
            text: Normalized text of the span
            line_count: Lines of code in the span
            base: Brace depth to discount from the nesting depth

        Returns:
            ComplexityScore for the span
        """
        cyclomatic = self.calculate_cyclomatic_complexity(text)
        return ComplexityScore(
            cyclomatic=cyclomatic,
            cognitive=self.calculate_cognitive_complexity(text),
            nesting_depth=calculate_nesting_depth(text, base),
            maintainability=calculate_maintainability_index(
                cyclomatic, line_count if text.strip() else 0
            ),
        )

    def analyze(self, source: SourceUnit) -> Tuple[StructuralModel, ComplexityScore]:
        """Scan a source unit and score every entity and the whole file.

        Args:
            source: Source unit to analyze

        Returns:
            Tuple of (scored StructuralModel, file-level ComplexityScore)
        """
        model = self.scan(source)
        lines = model.normalized_text.splitlines()

        for entity in iter_entities(model.entities):
            entity.score = self.score(
                entity.span_text(lines),
                entity.lines_of_code,
                base=1 if entity.has_body else 0,
            )

        return model, self.score(model.normalized_text, source.line_count)


class BraceLanguageScanner(StructuralScanner):
    """Shared line-oriented scanner for brace-delimited languages.

    Subclasses supply normalization rules and declaration patterns. The
    scanner walks the normalized lines, tries class patterns first and then
    function patterns (member patterns inside a class), and finds where each
    declaration ends with a running brace counter. A declaration without a
    ``{`` on its header line may still open its body on the next line.
    """

    rules: NormalizationRules = NormalizationRules()
    class_patterns: Tuple[DeclarationPattern, ...] = ()
    function_patterns: Tuple[DeclarationPattern, ...] = ()
    member_patterns: Tuple[DeclarationPattern, ...] = ()
    field_patterns: Tuple[Pattern[str], ...] = ()

    def __init__(self, config: Optional[CyclomaticConfig] = None):
        super().__init__(config)
        self._cyclomatic = CyclomaticComplexityCalculator(self.config)
        self._cognitive = CognitiveComplexityCalculator()

    def normalize(self, text: str) -> str:
        return normalize_source(text, self.rules)

    def calculate_cyclomatic_complexity(self, text: str) -> int:
        return self._cyclomatic.calculate(text)

    def calculate_cognitive_complexity(self, text: str) -> int:
        return self._cognitive.calculate(text)

    def calculate_cyclomatic_detailed(self, text: str) -> Dict[str, Any]:
        return self._cyclomatic.calculate_detailed(self.normalize(text))

    def extract_functions(self, model: StructuralModel) -> List[StructuralEntity]:
        return model.functions

    def extract_classes(self, model: StructuralModel) -> List[StructuralEntity]:
        return model.classes

    def scan(self, source: SourceUnit) -> StructuralModel:
        normalized = self.normalize(source.text)
        lines = normalized.splitlines()
        warnings: List[str] = []

        entities, _ = self._scan_range(lines, 0, len(lines), in_class=False, warnings=warnings)
        for entity in entities:
            entity.attach(source)

        return StructuralModel(normalized_text=normalized, entities=entities, warnings=warnings)

    def is_valid_name(self, name: str) -> bool:
        """Check that a matched name is not a control keyword."""
        last = name.split("::")[-1].lstrip("~#")
        return bool(last) and last not in CONTROL_KEYWORDS

    def _has_keyword_type(self, match: Match[str]) -> bool:
        rtype = _group(match, "rtype")
        if not rtype:
            return False
        return any(word in CONTROL_KEYWORDS for word in re.findall(r"[A-Za-z_]\w*", rtype))

    def _scan_range(
        self,
        lines: List[str],
        start: int,
        stop: int,
        in_class: bool,
        warnings: List[str],
        depth: int = 0,
    ) -> Tuple[List[StructuralEntity], List[str]]:
        """Scan lines[start:stop] for declarations.

        Inside a class, ``depth`` is the brace depth relative to the class
        body before ``start``; fields are only collected at depth 1.

        Returns:
            Tuple of (entities, field names)
        """
        entities: List[StructuralEntity] = []
        properties: List[str] = []
        index = start

        while index < stop:
            line = lines[index]
            entity = self._match_class(lines, index, stop, warnings)
            if entity is None:
                patterns = self.member_patterns if in_class else self.function_patterns
                entity = self._match_function(lines, index, stop, patterns, in_class, warnings)

            if entity is not None:
                entities.append(entity)
                index = max(entity.line_end, index + 1)
                continue

            if in_class and depth == 1:
                name = self._match_field(line)
                if name is not None and name not in properties:
                    properties.append(name)

            depth += line.count("{") - line.count("}")
            index += 1

        return entities, properties

    def _match_field(self, line: str) -> Optional[str]:
        for pattern in self.field_patterns:
            match = pattern.match(line)
            if match and self.is_valid_name(match.group("name")) and not self._has_keyword_type(match):
                return match.group("name").lstrip("#")
        return None

    def _match_class(
        self,
        lines: List[str],
        index: int,
        stop: int,
        warnings: List[str],
    ) -> Optional[StructuralEntity]:
        line = lines[index]
        for pattern in self.class_patterns:
            match = pattern.regex.match(line)
            if not match:
                continue
            name = _group(match, "name") or ANONYMOUS
            if name != ANONYMOUS and not self.is_valid_name(name):
                continue

            header_end = match.end("name") if _group(match, "name") else match.end()
            body = _find_body(lines, index, header_end, stop)
            if body is None:
                continue

            body_line, body_col = body
            end_line, end_col, closed = _find_block_end(lines, body_line, body_col, stop)
            entity = StructuralEntity(
                kind=EntityKind.CLASS,
                name=name,
                line_start=index + 1,
                line_end=end_line + 1,
                closed=closed,
                column_start=match.start(),
                column_end=end_col,
            )
            if not closed:
                self._warn_unclosed(entity, warnings)

            # Members start after the body brace; depth 1 is the class body
            inner_start = body_line + 1
            depth = 1 + lines[body_line][body_col + 1:].count("{") - lines[body_line][body_col + 1:].count("}")
            children, properties = self._scan_range(
                lines, inner_start, end_line + 1, in_class=True, warnings=warnings, depth=depth
            )
            entity.children = children
            entity.properties = properties
            return entity
        return None

    def _match_function(
        self,
        lines: List[str],
        index: int,
        stop: int,
        patterns: Iterable[DeclarationPattern],
        in_class: bool,
        warnings: List[str],
    ) -> Optional[StructuralEntity]:
        line = lines[index]
        for pattern in patterns:
            match = pattern.regex.match(line)
            if not match:
                continue
            name = _group(match, "name") or ANONYMOUS
            if name != ANONYMOUS and not self.is_valid_name(name):
                continue
            if self._has_keyword_type(match):
                continue

            if _group(match, "arrow_param"):
                parameters = 1
                header_line, header_col = index, match.end()
            else:
                parameter_text, header_line, header_col = _paren_span(
                    lines, index, match.end() - 1, stop
                )
                parameters = self.count_parameters(parameter_text)

            body = _find_body(lines, header_line, header_col, stop)
            if body is None:
                bodiless_member = in_class and bool(_group(match, "rtype"))
                if pattern.body_required and not bodiless_member:
                    continue
                return StructuralEntity(
                    kind=EntityKind.FUNCTION,
                    name=name,
                    line_start=index + 1,
                    line_end=header_line + 1,
                    parameters=parameters,
                    has_body=False,
                    column_start=match.start(),
                )

            body_line, body_col = body
            end_line, end_col, closed = _find_block_end(lines, body_line, body_col, stop)
            entity = StructuralEntity(
                kind=EntityKind.FUNCTION,
                name=name,
                line_start=index + 1,
                line_end=end_line + 1,
                parameters=parameters,
                closed=closed,
                column_start=match.start(),
                column_end=end_col,
            )
            if not closed:
                self._warn_unclosed(entity, warnings)
            return entity
        return None

    def count_parameters(self, parameter_text: str) -> int:
        return count_parameters(parameter_text)

    def _warn_unclosed(self, entity: StructuralEntity, warnings: List[str]) -> None:
        message = (
            f"{entity.kind.value} '{entity.name}' at line {entity.line_start} "
            f"has no closing brace; extended to line {entity.line_end}"
        )
        warnings.append(message)
        logger.warning(f"[{self.language}] {message}")


def _group(match: Match[str], name: str) -> Optional[str]:
    """Return a named group's text, or None when the pattern lacks the group."""
    if name not in match.re.groupindex:
        return None
    return match.group(name)


def _paren_span(lines: List[str], index: int, col: int, stop: int) -> Tuple[str, int, int]:
    """Collect the text inside the parenthesis at (index, col), across lines.

    Returns:
        Tuple of (inner text, line index of the closing paren, column after it)
    """
    chunks: List[str] = []
    depth = 0
    for i in range(index, stop):
        line = lines[i]
        for j in range(col if i == index else 0, len(line)):
            char = line[j]
            if char == "(":
                depth += 1
                if depth == 1:
                    continue
            elif char == ")":
                depth -= 1
                if depth == 0:
                    return "".join(chunks), i, j + 1
            chunks.append(char)
        chunks.append("\n")
    last = max(index, stop - 1)
    return "".join(chunks), last, len(lines[last]) if last < len(lines) else 0


def _find_body(lines: List[str], index: int, col: int, stop: int) -> Optional[Tuple[int, int]]:
    """Locate the body brace of a declaration whose header ends at (index, col).

    The first ``{`` or ``;`` on the rest of the header line decides; when
    neither appears, a following line that starts with ``{`` opens the body.

    Returns:
        (line index, column) of the body brace, or None for a bodiless declaration
    """
    rest = lines[index][col:]
    for offset, char in enumerate(rest):
        if char == "{":
            return index, col + offset
        if char == ";":
            return None

    if index + 1 < stop:
        following = lines[index + 1]
        stripped = following.lstrip()
        if stripped.startswith("{"):
            return index + 1, len(following) - len(stripped)
    return None


def _find_block_end(lines: List[str], index: int, col: int, stop: int) -> Tuple[int, Optional[int], bool]:
    """Find the brace closing the block opened at (index, col).

    Returns:
        Tuple of (line index, exclusive end column, closed); an unclosed
        block ends on the last line of the range
    """
    depth = 0
    for i in range(index, stop):
        line = lines[i]
        for j in range(col if i == index else 0, len(line)):
            char = line[j]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return i, j + 1, True
    return max(index, stop - 1), None, False


class ScannerRegistry:
    """Registry mapping languages, aliases and extensions to scanner classes.

    Registries are plain values: build one with ``create_default_registry``
    and hand it to the analyzer. All methods are thread-safe.
    """

    def __init__(self):
        self._lock = RLock()
        self._scanners: Dict[str, Type[StructuralScanner]] = {}
        self._aliases: Dict[str, str] = {}
        self._extensions: Dict[str, str] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    @staticmethod
    def _normalize_extension(extension: str) -> str:
        extension = extension.strip().lower()
        if extension and not extension.startswith("."):
            extension = "." + extension
        return extension

    def register(
        self,
        language: str,
        scanner_class: Type[StructuralScanner],
        extensions: Iterable[str] = (),
        aliases: Iterable[str] = (),
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Register a scanner class for a language.

        Args:
            language: Language identifier (e.g., 'java', 'cpp')
            scanner_class: Concrete StructuralScanner subclass
            extensions: File extensions handled by the scanner
            aliases: Alternative language names
            metadata: Free-form information reported by ``info``

        Raises:
            ScannerRegistrationError: If scanner_class does not implement
                the StructuralScanner interface
        """
        if not (inspect.isclass(scanner_class) and issubclass(scanner_class, StructuralScanner)):
            raise ScannerRegistrationError(
                f"{scanner_class!r} is not a StructuralScanner subclass"
            )
        if inspect.isabstract(scanner_class):
            missing = ", ".join(sorted(scanner_class.__abstractmethods__))
            raise ScannerRegistrationError(
                f"{scanner_class.__name__} does not implement: {missing}"
            )

        language = language.lower()
        with self._lock:
            if language in self._scanners:
                self._drop_mappings(language)
            self._scanners[language] = scanner_class
            self._metadata[language] = dict(metadata or {})
            for alias in aliases:
                self._aliases[alias.lower()] = language
            for extension in extensions:
                extension = self._normalize_extension(extension)
                previous = self._extensions.get(extension)
                if previous and previous != language:
                    logger.debug(f"Extension {extension} moves from {previous} to {language}")
                self._extensions[extension] = language

        logger.info(f"Registered {scanner_class.__name__} for {language}")

    def _drop_mappings(self, language: str) -> None:
        self._aliases = {a: lang for a, lang in self._aliases.items() if lang != language}
        self._extensions = {e: lang for e, lang in self._extensions.items() if lang != language}

    def unregister(self, language: str) -> bool:
        """Remove a language with its aliases and extensions.

        Returns:
            True if the language was removed, False if not found
        """
        with self._lock:
            resolved = self.resolve(language)
            if resolved is None:
                return False
            del self._scanners[resolved]
            self._metadata.pop(resolved, None)
            self._drop_mappings(resolved)
        logger.info(f"Unregistered scanner for {resolved}")
        return True

    def clear(self) -> None:
        with self._lock:
            self._scanners.clear()
            self._aliases.clear()
            self._extensions.clear()
            self._metadata.clear()

    def resolve(self, language_or_alias: str) -> Optional[str]:
        """Resolve a language id or alias to the registered language id."""
        key = language_or_alias.lower()
        with self._lock:
            if key in self._scanners:
                return key
            return self._aliases.get(key)

    def get(self, language_or_alias: str) -> Optional[Type[StructuralScanner]]:
        with self._lock:
            language = self.resolve(language_or_alias)
            return self._scanners.get(language) if language else None

    def get_by_extension(self, extension: str) -> Optional[Type[StructuralScanner]]:
        with self._lock:
            language = self._extensions.get(self._normalize_extension(extension))
            return self._scanners.get(language) if language else None

    def get_by_path(self, path: str) -> Optional[Type[StructuralScanner]]:
        suffix = Path(path).suffix
        if not suffix:
            return None
        return self.get_by_extension(suffix)

    def language_for_extension(self, extension: str) -> Optional[str]:
        with self._lock:
            return self._extensions.get(self._normalize_extension(extension))

    def create(
        self,
        language: str,
        config: Optional[CyclomaticConfig] = None,
    ) -> StructuralScanner:
        """Create a scanner instance for a language or alias.

        Raises:
            UnsupportedLanguageError: If no scanner is registered
        """
        scanner_class = self.get(language)
        if scanner_class is None:
            raise UnsupportedLanguageError(f"No scanner registered for language: {language}")
        return scanner_class(config=config)

    def is_supported(self, language: str) -> bool:
        return self.resolve(language) is not None

    def supported_languages(self) -> List[str]:
        with self._lock:
            return list(self._scanners)

    def supported_extensions(self) -> List[str]:
        with self._lock:
            return sorted(self._extensions)

    def info(self, language: str) -> Optional[Dict[str, Any]]:
        """Describe a registered language."""
        with self._lock:
            resolved = self.resolve(language)
            if resolved is None:
                return None
            return {
                "language": resolved,
                "scanner": self._scanners[resolved].__name__,
                "extensions": sorted(e for e, lang in self._extensions.items() if lang == resolved),
                "aliases": sorted(a for a, lang in self._aliases.items() if lang == resolved),
                "metadata": dict(self._metadata.get(resolved, {})),
            }

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "languages": len(self._scanners),
                "extensions": len(self._extensions),
                "aliases": len(self._aliases),
            }

    def register_from_reference(
        self,
        reference: str,
        language: Optional[str] = None,
        extensions: Optional[Iterable[str]] = None,
        aliases: Optional[Iterable[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Import a scanner class from ``"package.module:ClassName"`` and register it.

        Missing language, extensions and aliases fall back to the class
        attributes of the same name.

        Returns:
            The registered language id

        Raises:
            ScannerRegistrationError: If the reference cannot be imported
                or does not name a valid scanner
        """
        module_name, sep, attribute = reference.partition(":")
        if not sep:
            module_name, _, attribute = reference.rpartition(".")
        if not module_name or not attribute:
            raise ScannerRegistrationError(f"Invalid scanner reference: {reference!r}")

        try:
            module = importlib.import_module(module_name)
            scanner_class = getattr(module, attribute)
        except (ImportError, AttributeError) as e:
            raise ScannerRegistrationError(f"Cannot load scanner {reference!r}: {e}") from e

        return self._register_plugin(scanner_class, language, extensions, aliases, metadata)

    def _register_plugin(
        self,
        scanner_class: Any,
        language: Optional[str],
        extensions: Optional[Iterable[str]],
        aliases: Optional[Iterable[str]],
        metadata: Optional[Dict[str, Any]],
    ) -> str:
        language = language or getattr(scanner_class, "language", None)
        if not language or language == StructuralScanner.language:
            raise ScannerRegistrationError(f"{scanner_class!r} does not declare a language")
        self.register(
            language,
            scanner_class,
            extensions if extensions is not None else getattr(scanner_class, "extensions", ()),
            aliases if aliases is not None else getattr(scanner_class, "aliases", ()),
            metadata,
        )
        return language.lower()

    def load_entry_points(self, group: str = ENTRY_POINT_GROUP) -> List[str]:
        """Register every scanner advertised under an entry point group.

        The entry point name is used as the language id. Plugins that fail
        to load are logged and skipped.

        Returns:
            Languages registered from the group
        """
        loaded = []
        for entry_point in entry_points(group=group):
            try:
                scanner_class = entry_point.load()
                loaded.append(
                    self._register_plugin(
                        scanner_class,
                        entry_point.name,
                        None,
                        None,
                        {"entry_point": entry_point.value},
                    )
                )
            except Exception as e:
                logger.warning(f"Skipping scanner plugin {entry_point.name!r}: {e}")
        return loaded


def create_default_registry() -> ScannerRegistry:
    """Build a registry holding the built-in scanners."""
    from .languages import BUILTIN_SCANNERS

    registry = ScannerRegistry()
    for scanner_class in BUILTIN_SCANNERS:
        registry.register(
            scanner_class.language,
            scanner_class,
            extensions=scanner_class.extensions,
            aliases=scanner_class.aliases,
            metadata={"builtin": True},
        )
    return registry


@functools.lru_cache(maxsize=1)
def default_registry() -> ScannerRegistry:
    """Shared registry with the built-in scanners, created on first use."""
    return create_default_registry()
