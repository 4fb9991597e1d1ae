"""Unit tests for normalization, the scanner base class and ScannerRegistry."""

import pytest

from complexity_analyzer.complexity_analysis import base_analyzer
from complexity_analyzer.complexity_analysis.base_analyzer import (
    NormalizationRules,
    ScannerRegistry,
    StructuralScanner,
    count_parameters,
    create_default_registry,
    default_registry,
    normalize_source,
)
from complexity_analyzer.complexity_analysis.errors import (
    ScannerRegistrationError,
    UnsupportedLanguageError,
)
from complexity_analyzer.complexity_analysis.languages import (
    CppScanner,
    CSharpScanner,
    JavaScanner,
    JavaScriptScanner,
)
from complexity_analyzer.complexity_analysis.models import SourceUnit
from complexity_analyzer.config import CyclomaticConfig


class PartialScanner(StructuralScanner):
    """Scanner that forgets most of the interface."""

    language = "partial"

    def normalize(self, text):
        return text


class FakeEntryPoint:
    """Stands in for importlib.metadata.EntryPoint."""

    def __init__(self, name, value, target=None, error=None):
        self.name = name
        self.value = value
        self.target = target
        self.error = error

    def load(self):
        if self.error is not None:
            raise self.error
        return self.target


class TestNormalizeSource:
    """Test blanking of comments and literal contents."""

    @pytest.fixture
    def rules(self):
        return NormalizationRules()

    def test_blanks_strings_and_comments(self, rules):
        """Braces inside literals and comments disappear, quotes stay."""
        text = 'x = "a{b}"; // }\n/* { */ y'
        result = normalize_source(text, rules)

        assert len(result) == len(text)
        assert "{" not in result and "}" not in result
        assert result.splitlines()[0].startswith('x = "    ";')
        assert result.splitlines()[1].endswith(" y")

    def test_escaped_quote(self, rules):
        result = normalize_source('s = "a\\"{";', rules)
        assert "{" not in result
        assert result.endswith('";')

    def test_unterminated_string_stops_at_newline(self, rules):
        result = normalize_source('"abc\nif (x) {}', rules)
        assert result.splitlines()[1] == "if (x) {}"

    def test_line_comment_keeps_carriage_return(self, rules):
        assert normalize_source("a // c\r\nb", rules) == "a     \r\nb"

    def test_multiline_literal_keeps_newlines(self):
        rules = NormalizationRules(multiline_quotes=("`",))
        text = "`a\n{b}`;\nnext();"
        result = normalize_source(text, rules)

        assert result.count("\n") == 2
        assert "{" not in result
        assert result.splitlines()[2] == "next();"

    def test_longest_quote_wins(self):
        """A text block opener is not read as an empty string."""
        rules = NormalizationRules(multiline_quotes=('"""',))
        result = normalize_source('"""\n{\n"""\nint x;', rules)
        assert "{" not in result
        assert result.splitlines()[3] == "int x;"


class TestCountParameters:
    """Test parameter counting at bracket depth 0."""

    def test_empty(self):
        assert count_parameters("") == 0
        assert count_parameters("   ") == 0

    def test_simple(self):
        assert count_parameters("int a, int b") == 2

    def test_generic_arguments_do_not_split(self):
        assert count_parameters("Map<String, List<T>> items, int limit") == 2

    def test_nested_calls_and_defaults(self):
        assert count_parameters("a = f(1, 2), b = [3, 4], c") == 3

    def test_trailing_comma(self):
        assert count_parameters("a, b,") == 2


class TestStructuralScanner:
    """Test the shared analyze flow of a scanner."""

    def test_analyze_scores_entities_and_file(self):
        """Every entity gets a score of its own span, the file one of all text."""
        code = (
            "class A {\n"
            "    int f(int x) {\n"
            "        if (x > 0) {\n"
            "            return 1;\n"
            "        }\n"
            "        return 0;\n"
            "    }\n"
            "}\n"
        )
        source = SourceUnit(path="A.java", language="java", text=code, size=len(code))
        model, score = JavaScanner().analyze(source)

        method = model.functions[0]
        assert method.score.cyclomatic == 2
        assert method.score.nesting_depth == 1
        assert model.classes[0].score.cyclomatic == 2
        assert score.cyclomatic == 2
        assert score.nesting_depth == 3

    def test_entities_point_back_at_their_source(self):
        code = "class A {\n    void f() {\n    }\n}\n"
        source = SourceUnit(path="A.java", language="java", text=code, size=len(code))
        model, _ = JavaScanner().analyze(source)

        assert model.classes[0].source is source
        assert model.functions[0].source is source

    def test_cyclomatic_detailed_normalizes_first(self):
        scanner = JavaScanner()
        details = scanner.calculate_cyclomatic_detailed('String s = "if (a) {}";\nif (b) {}\n')
        assert details["total"] == 2

    def test_config_toggles_reach_the_calculator(self):
        scanner = JavaScanner(CyclomaticConfig(count_logical_operators=False))
        assert scanner.calculate_cyclomatic_complexity("if (a && b) {}") == 2


class TestScannerRegistry:
    """Test registration, lookup and plugin loading."""

    @pytest.fixture
    def empty_registry(self):
        return ScannerRegistry()

    def test_default_registry_languages(self, registry):
        """Built-in scanners are registered in a fixed order."""
        assert registry.supported_languages() == ["java", "javascript", "cpp", "csharp"]

    def test_lookup_by_alias_and_extension(self, registry):
        assert registry.get("ts") is JavaScriptScanner
        assert registry.get("C#") is CSharpScanner
        assert registry.get_by_extension("TSX") is JavaScriptScanner
        assert registry.get_by_extension(".hpp") is CppScanner
        assert registry.get_by_path("src/app/Main.java") is JavaScanner
        assert registry.get_by_path("Makefile") is None
        assert registry.language_for_extension("cc") == "cpp"

    def test_unknown_language(self, registry):
        assert registry.get("cobol") is None
        assert registry.resolve("cobol") is None
        assert registry.is_supported("cobol") is False
        assert registry.get_by_extension(".py") is None

    def test_create(self, registry):
        config = CyclomaticConfig(count_ternary=False)
        scanner = registry.create("typescript", config)

        assert isinstance(scanner, JavaScriptScanner)
        assert scanner.config is config

    def test_create_unsupported(self, registry):
        with pytest.raises(UnsupportedLanguageError):
            registry.create("cobol")

    def test_register_rejects_non_scanner(self, empty_registry):
        with pytest.raises(ScannerRegistrationError):
            empty_registry.register("x", object)
        with pytest.raises(TypeError):
            empty_registry.register("x", "not a class")
        assert empty_registry.supported_languages() == []

    def test_register_rejects_abstract_scanner(self, empty_registry):
        """Classes missing part of the interface are refused at registration."""
        with pytest.raises(ScannerRegistrationError) as exc_info:
            empty_registry.register("partial", PartialScanner)
        assert "scan" in str(exc_info.value)

    def test_reregister_replaces_mappings(self, registry):
        registry.register("java", CppScanner, extensions=[".jav"])

        assert registry.get("java") is CppScanner
        assert registry.get_by_extension(".java") is None
        assert registry.get_by_extension(".jav") is CppScanner

    def test_unregister(self, registry):
        assert registry.unregister("ts") is True

        assert registry.get("javascript") is None
        assert registry.get("ts") is None
        assert registry.get_by_extension(".js") is None
        assert registry.unregister("javascript") is False

    def test_clear(self, registry):
        registry.clear()
        assert registry.supported_languages() == []
        assert registry.supported_extensions() == []

    def test_info_and_stats(self, registry):
        info = registry.info("cs")
        assert info == {
            "language": "csharp",
            "scanner": "CSharpScanner",
            "extensions": [".cs"],
            "aliases": ["c#", "cs"],
            "metadata": {"builtin": True},
        }
        assert registry.info("cobol") is None

        stats = registry.stats()
        assert stats["languages"] == 4
        assert stats["extensions"] == 16

    def test_register_from_reference(self, empty_registry):
        language = empty_registry.register_from_reference(
            "complexity_analyzer.complexity_analysis.languages.java_analyzer:JavaScanner",
            language="groovy",
            extensions=[".groovy"],
        )

        assert language == "groovy"
        assert empty_registry.get_by_extension(".groovy") is JavaScanner

    def test_register_from_dotted_reference_uses_class_attributes(self, empty_registry):
        language = empty_registry.register_from_reference(
            "complexity_analyzer.complexity_analysis.languages.cpp_analyzer.CppScanner"
        )

        assert language == "cpp"
        assert empty_registry.get("c++") is CppScanner
        assert empty_registry.get_by_extension(".cc") is CppScanner

    def test_register_from_bad_reference(self, empty_registry):
        with pytest.raises(ScannerRegistrationError):
            empty_registry.register_from_reference("no_such_module_here:Scanner")
        with pytest.raises(ScannerRegistrationError):
            empty_registry.register_from_reference("complexity_analyzer.config:Missing")

    def test_load_entry_points(self, empty_registry, monkeypatch):
        """Plugins register under their entry point name; broken ones are skipped."""
        advertised = [
            FakeEntryPoint("groovy", "acme.scanners:GroovyScanner", target=JavaScanner),
            FakeEntryPoint("broken", "acme.scanners:Broken", error=ImportError("no acme")),
            FakeEntryPoint("partial", "acme.scanners:Partial", target=PartialScanner),
        ]
        requested = []

        def fake_entry_points(group):
            requested.append(group)
            return advertised

        monkeypatch.setattr(base_analyzer, "entry_points", fake_entry_points)

        loaded = empty_registry.load_entry_points()

        assert loaded == ["groovy"]
        assert requested == [base_analyzer.ENTRY_POINT_GROUP]
        assert empty_registry.get("groovy") is JavaScanner
        assert empty_registry.info("groovy")["metadata"] == {
            "entry_point": "acme.scanners:GroovyScanner"
        }

    def test_registries_are_independent(self):
        first = create_default_registry()
        second = create_default_registry()
        first.clear()
        assert second.get("java") is JavaScanner

    def test_default_registry_is_shared(self):
        assert default_registry() is default_registry()
