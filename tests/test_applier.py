"""Tests for applying a file's decisions."""

from conftest import APP_JS, APP_JS_AUTO

from consolesweep.engine.applier import EditApplier, apply_decisions
from consolesweep.engine.classifier import analyze_file
from consolesweep.engine.models import Action, Decision, Occurrence
from consolesweep.engine.policy import AutomaticPolicy


def decide(content: str, action: Action) -> list[Decision]:
    return [Decision(o, action) for o in analyze_file("f.js", content)]


class TestApply:
    def test_automatic_cleanup_of_sample(self):
        outcome = AutomaticPolicy().decide(analyze_file("app.js", APP_JS))
        result = EditApplier().apply(APP_JS, outcome.decisions)
        assert result.modified
        assert not result.rejected
        assert result.new_content == APP_JS_AUTO

    def test_outcomes_record_applied_actions(self):
        outcome = AutomaticPolicy().decide(analyze_file("app.js", APP_JS))
        result = EditApplier().apply(APP_JS, outcome.decisions)
        applied = {d.occurrence.line_number: action for d, action in result.outcomes}
        assert applied == {
            4: Action.DELETE,
            7: Action.KEEP,
            10: Action.CONVERT_ERROR,
            12: Action.REMOVE_COMMENT,
            13: Action.KEEP,
        }

    def test_no_decisions(self):
        result = EditApplier().apply(APP_JS, [])
        assert result.new_content == APP_JS
        assert not result.modified

    def test_two_calls_on_one_line(self):
        content = 'console.log("a"); console.log("b");\n'
        assert apply_decisions(content, decide(content, Action.CONVERT_INFO)) == (
            'console.info("a"); console.info("b");\n'
        )

    def test_live_call_after_inline_comment_is_deleted(self):
        content = "/* console.log(a) */ console.log(b);\nrun();\n"
        outcome = AutomaticPolicy().decide(analyze_file("f.js", content))
        result = EditApplier().apply(content, outcome.decisions)
        assert result.new_content == "run();\n"
        assert [action for _, action in result.outcomes] == [Action.DELETE, Action.REMOVE_COMMENT]

    def test_crlf_is_preserved(self):
        content = 'function f() {\r\n  console.log("x");\r\n  return 1;\r\n}\r\n'
        assert apply_decisions(content, decide(content, Action.DELETE)) == "function f() {\r\n  return 1;\r\n}\r\n"
        assert apply_decisions(content, decide(content, Action.CONVERT_ERROR)) == (
            'function f() {\r\n  console.error("x");\r\n  return 1;\r\n}\r\n'
        )


class TestSafety:
    def test_unbalanced_removal_rejects_whole_file(self):
        content = "function f() {\nconsole.log(() => {);\n}"
        occurrence = Occurrence(line_number=2, column=0, raw_text="console.log(() => {);")
        result = EditApplier().apply(content, [Decision(occurrence, Action.DELETE)])
        assert result.rejected
        assert not result.modified
        assert result.new_content == content
        assert result.outcomes[0][1] is Action.KEEP
        assert apply_decisions(content, [Decision(occurrence, Action.DELETE)]) == content

    def test_non_standalone_delete_becomes_keep(self):
        content = 'const r = console.log("x") || y;\n'
        result = EditApplier().apply(content, decide(content, Action.DELETE))
        assert not result.modified
        assert result.outcomes[0][1] is Action.KEEP
        assert any("not a standalone call" in w for w in result.warnings)

    def test_unknown_action_is_kept(self):
        content = 'console.log("x");\n'
        [occurrence] = analyze_file("f.js", content)
        result = EditApplier().apply(content, [Decision(occurrence, "explode")])
        assert result.new_content == content
        assert result.outcomes[0][1] is Action.KEEP
        assert any("unknown action" in w for w in result.warnings)

    def test_skip_is_kept(self):
        content = 'console.log("x");\n'
        result = EditApplier().apply(content, decide(content, Action.SKIP))
        assert result.new_content == content
        assert result.outcomes[0][1] is Action.KEEP

    def test_out_of_range_line(self):
        occurrence = Occurrence(line_number=40, column=0, raw_text='console.log("x");')
        result = EditApplier().apply('console.log("x");\n', [Decision(occurrence, Action.DELETE)])
        assert result.outcomes[0][1] is Action.KEEP


class TestBlockComments:
    def test_block_removed_once(self):
        content = "a();\n/*\nconsole.log(1);\nconsole.log(2);\n*/\nb();\n"
        result = EditApplier().apply(content, decide(content, Action.REMOVE_COMMENT))
        assert result.new_content == "a();\nb();\n"
        assert [action for _, action in result.outcomes] == [Action.REMOVE_COMMENT] * 2

    def test_code_around_block_survives(self):
        content = "x(); /* console.log(1)\nmore */ y();\n"
        result = EditApplier().apply(content, decide(content, Action.REMOVE_COMMENT))
        assert result.new_content == "x();\n y();\n"

    def test_commented_calls_on_one_removed_line(self):
        content = "// console.log(1); console.log(2);\nrun();\n"
        result = EditApplier().apply(content, decide(content, Action.REMOVE_COMMENT))
        assert result.new_content == "run();\n"
        assert [action for _, action in result.outcomes] == [Action.REMOVE_COMMENT] * 2
