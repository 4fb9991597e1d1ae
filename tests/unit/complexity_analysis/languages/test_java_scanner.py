"""Tests for the Java structural scanner."""

import pytest

from complexity_analyzer.complexity_analysis.languages import JavaScanner
from complexity_analyzer.complexity_analysis.models import EntityKind, SourceUnit

CALCULATOR = """\
package com.example;

import java.util.List;

public class Calculator {
    private int total;
    private final List<String> history = new ArrayList<>();

    public Calculator() {
        this.total = 0;
    }

    public int add(int a, int b) {
        if (a > 0 && b > 0) {
            return a + b;
        }
        return 0;
    }

    public static <T> void process(Map<String, List<T>> items,
                                   int limit) {
        for (String key : items.keySet()) {
            if (limit > 0) {
                while (limit > 10) {
                    limit--;
                }
            }
        }
    }

    static class Inner {
        void run() {
        }
    }
}
"""

SHAPE = """\
public interface Shape {
    double area();
    default String name() {
        return "shape";
    }
}
"""


def make_source(code, path="Test.java"):
    return SourceUnit(path=path, language="java", text=code, size=len(code.encode("utf-8")))


class TestJavaScanner:
    """Test structure extraction and scoring of Java code."""

    @pytest.fixture
    def scanner(self):
        return JavaScanner()

    @pytest.fixture
    def calculator(self, scanner):
        model, score = scanner.analyze(make_source(CALCULATOR))
        return model, score

    def test_classes(self, calculator):
        """Top-level and nested classes are both found."""
        model, _ = calculator
        classes = {c.name: c for c in model.classes}

        assert list(classes) == ["Calculator", "Inner"]
        assert (classes["Calculator"].line_start, classes["Calculator"].line_end) == (5, 35)
        assert (classes["Inner"].line_start, classes["Inner"].line_end) == (31, 34)
        assert [c.name for c in classes["Calculator"].nested_classes] == ["Inner"]

    def test_methods(self, calculator):
        model, _ = calculator
        functions = {f.name: f for f in model.functions}

        assert list(functions) == ["Calculator", "add", "process", "run"]
        assert functions["Calculator"].parameters == 0
        assert functions["add"].parameters == 2
        assert (functions["add"].line_start, functions["add"].line_end) == (13, 18)

    def test_multiline_parameter_list(self, calculator):
        """Generic arguments do not split parameters; the list may span lines."""
        model, _ = calculator
        process = next(f for f in model.functions if f.name == "process")

        assert process.parameters == 2
        assert (process.line_start, process.line_end) == (20, 29)

    def test_fields(self, calculator):
        model, _ = calculator
        assert model.classes[0].properties == ["total", "history"]

    def test_method_scores(self, calculator):
        model, _ = calculator
        functions = {f.name: f for f in model.functions}

        assert functions["add"].score.cyclomatic == 3
        assert functions["add"].score.cognitive == 2
        assert functions["process"].score.cyclomatic == 4
        assert functions["process"].score.cognitive == 6
        assert functions["process"].score.nesting_depth == 3
        assert functions["run"].score.cyclomatic == 1

    def test_file_score(self, calculator):
        _, score = calculator
        assert score.cyclomatic == 6
        assert score.cognitive == 8

    def test_interface_methods_without_body(self, scanner):
        model, _ = scanner.analyze(make_source(SHAPE))
        functions = {f.name: f for f in model.functions}

        assert list(functions) == ["area", "name"]
        assert functions["area"].has_body is False
        assert (functions["area"].line_start, functions["area"].line_end) == (2, 2)
        assert functions["area"].score.cyclomatic == 1
        assert functions["name"].has_body is True

    def test_braces_in_strings_and_comments(self, scanner):
        code = (
            "public class S {\n"
            '    String s = "{{{";\n'
            "    // }}}\n"
            "    void f() { }\n"
            "}\n"
        )
        model, _ = scanner.analyze(make_source(code))

        assert model.classes[0].line_end == 5
        assert model.classes[0].properties == ["s"]
        assert [f.name for f in model.functions] == ["f"]
        assert model.warnings == []

    def test_unclosed_class(self, scanner):
        """Missing closing braces extend entities to the end and warn."""
        code = "public class Broken {\n    void run() {\n        if (x) {\n"
        model, _ = scanner.analyze(make_source(code))

        broken = model.classes[0]
        assert broken.closed is False
        assert broken.line_end == 3
        assert model.functions[0].closed is False
        assert len(model.warnings) == 2
        assert broken.to_dict()["closed"] is False

    def test_statements_are_not_methods(self, scanner):
        """Calls, control statements and constructor calls are not declarations."""
        code = (
            "class A {\n"
            "    void f() {\n"
            "    }\n"
            "}\n"
            "foo(bar);\n"
            "new Thread(() -> {\n"
            "});\n"
            "if (x) {\n"
            "}\n"
        )
        model, _ = scanner.analyze(make_source(code))
        assert [f.name for f in model.functions] == ["f"]

    def test_annotations(self, scanner):
        code = (
            "@Service\n"
            "public class Api {\n"
            "    @Override\n"
            "    public String toString() {\n"
            "        return null;\n"
            "    }\n"
            "}\n"
        )
        model, _ = scanner.analyze(make_source(code))

        assert [c.name for c in model.classes] == ["Api"]
        assert model.functions[0].name == "toString"
        assert model.functions[0].line_start == 4
