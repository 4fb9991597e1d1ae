"""Tests for the JavaScript and TypeScript structural scanner."""

import pytest

from complexity_analyzer.complexity_analysis.languages import JavaScriptScanner
from complexity_analyzer.complexity_analysis.models import ANONYMOUS, SourceUnit

MODULE = """\
import x from 'y';

function greet(name, greeting = 'hi') {
  if (!name) {
    return greeting;
  }
  return `${greeting} ${name}`;
}

const add = (a, b) => a + b;

const square = x => {
  return x * x;
};

export default function () {
  return 1;
}

class Counter extends Base {
  count = 0;
  #secret = 'x';

  constructor(start) {
    super();
    this.count = start;
  }

  increment = () => {
    this.count++;
  };

  get value() {
    return this.count;
  }

  static create(a, b, c) {
    return new Counter(a ?? b ?? c);
  }
}
"""

TYPESCRIPT = """\
interface User {
  name: string;
}

export async function load(id: number, opts?: Options): Promise<User> {
  const user = await fetch(id);
  return user ?? null;
}
"""


def make_source(code, path="module.js"):
    return SourceUnit(path=path, language="javascript", text=code, size=len(code))


class TestJavaScriptScanner:
    """Test structure extraction for the many ways JavaScript declares functions."""

    @pytest.fixture
    def scanner(self):
        return JavaScriptScanner()

    @pytest.fixture
    def model(self, scanner):
        model, _ = scanner.analyze(make_source(MODULE))
        return model

    def test_function_names(self, model):
        assert [f.name for f in model.functions] == [
            "greet",
            "add",
            "square",
            ANONYMOUS,
            "constructor",
            "increment",
            "value",
            "create",
        ]

    def test_function_declaration(self, model):
        greet = model.functions[0]

        assert greet.parameters == 2
        assert (greet.line_start, greet.line_end) == (3, 8)
        assert greet.score.cyclomatic == 2
        assert greet.score.cognitive == 1

    def test_expression_arrow_function(self, model):
        """An arrow function without a block is a one-line, bodiless entity."""
        add = model.functions[1]

        assert add.parameters == 2
        assert add.has_body is False
        assert (add.line_start, add.line_end) == (10, 10)

    def test_single_parameter_arrow_function(self, model):
        square = model.functions[2]

        assert square.parameters == 1
        assert (square.line_start, square.line_end) == (12, 14)

    def test_anonymous_default_export(self, model):
        anonymous = model.functions[3]
        assert anonymous.parameters == 0
        assert (anonymous.line_start, anonymous.line_end) == (16, 18)

    def test_class_members(self, model):
        counter = model.classes[0]
        methods = {m.name: m for m in counter.methods}

        assert counter.name == "Counter"
        assert (counter.line_start, counter.line_end) == (20, 40)
        assert counter.properties == ["count", "secret"]
        assert methods["constructor"].parameters == 1
        assert methods["increment"].parameters == 0
        assert (methods["increment"].line_start, methods["increment"].line_end) == (29, 31)
        assert methods["create"].parameters == 3

    def test_null_coalescing_is_not_a_decision(self, model):
        create = model.functions[-1]
        assert create.score.cyclomatic == 1

    def test_template_literal_braces_are_ignored(self, scanner):
        code = "function f() {\n  return `}${a}`;\n}\n"
        model, _ = scanner.analyze(make_source(code))
        assert (model.functions[0].line_start, model.functions[0].line_end) == (1, 3)

    def test_prototype_assignment(self, scanner):
        code = "Widget.prototype.render = function (props) {\n  return props;\n};\n"
        model, _ = scanner.analyze(make_source(code))

        assert [f.name for f in model.functions] == ["render"]
        assert model.functions[0].parameters == 1

    def test_class_expression(self, scanner):
        code = "const Store = class {\n  load() {\n  }\n};\n"
        model, _ = scanner.analyze(make_source(code))

        assert [c.name for c in model.classes] == ["Store"]
        assert [f.name for f in model.functions] == ["load"]

    def test_control_statements_are_not_functions(self, scanner):
        code = "if (ready) {\n  start();\n}\nwhile (x) {\n}\nfor (const a of b) {\n}\n"
        model, _ = scanner.analyze(make_source(code))
        assert model.functions == []

    def test_typescript(self, scanner):
        """Type annotations, optional parameters and interfaces are tolerated."""
        model, score = scanner.analyze(make_source(TYPESCRIPT, path="load.ts"))

        assert [f.name for f in model.functions] == ["load"]
        load = model.functions[0]
        assert load.parameters == 2
        assert (load.line_start, load.line_end) == (5, 8)
        assert load.score.cyclomatic == 1
        assert model.classes == []
        assert score.cyclomatic == 1

    def test_optional_parameters_are_not_ternaries(self, scanner):
        code = "function f(a?: number, b?) {\n  return a;\n}\n"
        model, score = scanner.analyze(make_source(code, path="f.ts"))

        assert model.functions[0].score.cyclomatic == 1
        assert score.cyclomatic == 1

    def test_multiline_ternary(self, scanner):
        code = "const pick = (a) =>\n  a > 0\n    ? { sign: 1 }\n    : { sign: -1 };\n"
        _, score = scanner.analyze(make_source(code))
        assert score.cyclomatic == 2
