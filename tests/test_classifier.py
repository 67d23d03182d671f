"""Tests for the context classifier."""

from conftest import APP_JS

from consolesweep.engine.classifier import (
    ArrowBodyRule,
    ContextClassifier,
    analyze_file,
    block_comment_spans,
)
from consolesweep.engine.models import Action, RiskLevel
from consolesweep.engine.policy import explain_automatic

CATCH_SNIPPET = "try {\n} catch (e) {\n  console.log('oops');\n}\n"
BLOCK_COMMENT = 'const a = 1;\n/*\nconsole.log("old");\n*/\nconst b = 2;\n'


class TestClassify:
    def test_ternary_branches_are_functional(self):
        occurrences = analyze_file("t.js", "const msg = cond ? console.log('a') : console.log('b');\n")
        assert len(occurrences) == 2
        for occurrence in occurrences:
            assert occurrence.is_functional
            assert occurrence.context.is_ternary

    def test_catch_block(self):
        [occurrence] = analyze_file("c.js", CATCH_SNIPPET)
        assert occurrence.line_number == 3
        assert occurrence.column == 2
        assert occurrence.is_in_error_handler
        assert not occurrence.is_functional
        assert not occurrence.is_commented

    def test_commented_line(self):
        [occurrence] = analyze_file("c.js", '// console.log("x", ternary ? a : b);\n')
        assert occurrence.is_commented
        assert not occurrence.is_functional
        assert not occurrence.context.is_ternary

    def test_trailing_comment(self):
        [occurrence] = analyze_file("c.js", 'doWork(); // console.log("x")\n')
        assert occurrence.is_commented

    def test_live_call_after_inline_block_comment(self):
        commented, live = analyze_file("c.js", "/* console.log(a) */ console.log(b);\n")
        assert (commented.column, commented.is_commented) == (3, True)
        assert (live.column, live.is_commented) == (21, False)
        assert explain_automatic(live)[0] is Action.DELETE

    def test_token_in_string_is_ignored(self):
        assert analyze_file("s.js", 'const s = "console.log(x)";\n') == []

    def test_two_calls_on_one_line(self):
        occurrences = analyze_file("two.js", 'console.log("a"); console.log("b");\n')
        assert [o.column for o in occurrences] == [0, 18]
        assert all(o.line_number == 1 for o in occurrences)

    def test_sensitivity_is_independent_of_context(self):
        [occurrence] = analyze_file("k.js", 'console.log("apiKey:", apiKey);\n')
        assert occurrence.sensitivity.risk_level is RiskLevel.HIGH
        assert not occurrence.is_functional
        assert not occurrence.is_in_error_handler

    def test_file_path_and_to_dict(self):
        [occurrence] = analyze_file("src/x.js", "return console.log(1);\n")
        data = occurrence.to_dict()
        assert data["file"] == "src/x.js"
        assert data["line"] == 1
        assert data["functional"] is True
        assert data["context"]["return_value"] is True

    def test_sample_file(self):
        occurrences = analyze_file("src/app.js", APP_JS)
        by_line = {o.line_number: o for o in occurrences}
        assert sorted(by_line) == [4, 7, 10, 12, 13]
        assert by_line[10].is_in_error_handler
        assert by_line[12].is_commented
        assert by_line[13].is_functional
        assert by_line[7].sensitivity.risk_level is RiskLevel.HIGH
        assert by_line[4].context.is_in_function


class TestArrowRule:
    """Bare arrow bodies, with and without the expression matcher."""

    LINE = "export default x => console.log(x);"

    def test_direct_rule_counts_arrow_body(self):
        classifier = ContextClassifier(arrow_rule=ArrowBodyRule.DIRECT)
        occurrence = classifier.classify(self.LINE, 0, [self.LINE])
        assert occurrence.context.is_arrow_body
        assert not occurrence.context.is_expression
        assert occurrence.is_functional
        assert classifier.functional_reasons(occurrence.context) == ["arrow-body"]

    def test_expression_only_rule_ignores_bare_arrow(self):
        classifier = ContextClassifier(arrow_rule=ArrowBodyRule.EXPRESSION_ONLY)
        occurrence = classifier.classify(self.LINE, 0, [self.LINE])
        assert occurrence.context.is_arrow_body
        assert not occurrence.is_functional

    def test_expression_only_rule_keeps_covered_arrow(self):
        line = "items.forEach(item => console.log(item));"
        classifier = ContextClassifier(arrow_rule=ArrowBodyRule.EXPRESSION_ONLY)
        occurrence = classifier.classify(line, 0, [line], column=line.index("console"))
        assert occurrence.is_functional


class TestBlockComments:
    def test_span_is_attached(self):
        [occurrence] = analyze_file("b.js", BLOCK_COMMENT)
        assert occurrence.line_number == 3
        assert occurrence.is_commented
        assert occurrence.comment_span == (1, 3)

    def test_spans(self):
        lines = BLOCK_COMMENT.split("\n")
        assert block_comment_spans(lines) == [(1, 3)]

    def test_unterminated_comment_runs_to_end(self):
        lines = ["a();", "/* start", "console.log(1);"]
        assert block_comment_spans(lines) == [(1, 2)]

    def test_one_line_block_comment_has_no_span(self):
        [occurrence] = analyze_file("b.js", "/* console.log(1); */\n")
        assert occurrence.is_commented
        assert occurrence.comment_span is None


class TestWindow:
    def test_window_is_clamped(self):
        classifier = ContextClassifier(context_lines=1)
        lines = ["a", "b", "c", "d", "e"]
        assert classifier.window(2, lines) == (2, ["b", "c", "d"])
        assert classifier.window(0, lines) == (1, ["a", "b"])
