"""Tests for heuristic block-scope tracking."""

from consolesweep.engine.scope import is_in_catch_block, is_in_conditional, is_in_function


class TestCatchBlock:
    def test_inside_catch(self):
        lines = ["try {", "} catch (e) {", "  console.log('oops');", "}"]
        assert is_in_catch_block(2, lines, column=2)

    def test_after_catch_closed(self):
        lines = [
            "try {",
            "  run();",
            "} catch (e) {",
            "  handle(e);",
            "}",
            "console.log('done');",
        ]
        assert not is_in_catch_block(5, lines, column=0)

    def test_one_line_catch(self):
        line = "try { run(); } catch (e) { console.log(e); }"
        assert is_in_catch_block(0, [line], column=line.index("console"))

    def test_call_before_catch_on_same_line(self):
        line = "console.log(a); try { run(); } catch (e) {}"
        assert not is_in_catch_block(0, [line], column=0)

    def test_brace_on_next_line(self):
        lines = ["try {", "  run();", "} catch (e)", "{", "  console.log(e);", "}"]
        assert is_in_catch_block(4, lines, column=2)

    def test_promise_catch_callback(self):
        lines = ["fetchData()", "  .catch((err) => {", "    console.log(err);", "  });"]
        assert is_in_catch_block(2, lines, column=4)

    def test_braces_in_strings_are_ignored(self):
        lines = ["} catch (e) {", '  const s = "}";', "  console.log(e);"]
        assert is_in_catch_block(2, lines, column=2)

    def test_lookback_bound(self):
        lines = ["try {", "} catch (e) {"] + ["  step();"] * 20 + ["  console.log(e);", "}"]
        assert not is_in_catch_block(22, lines, column=2)
        assert is_in_catch_block(22, lines, column=2, max_lookback=30)

    def test_out_of_range(self):
        assert not is_in_catch_block(5, ["catch (e) {"])


class TestFunctionAndConditional:
    def test_in_function(self):
        lines = ["function run() {", '  console.log("x");', "}"]
        assert is_in_function(1, lines, column=2)

    def test_top_level(self):
        lines = ["const a = 1;", "console.log(a);"]
        assert not is_in_function(1, lines, column=0)

    def test_in_conditional(self):
        lines = ["if (debug) {", '  console.log("x");', "}"]
        assert is_in_conditional(1, lines, column=2)

    def test_brace_free_conditional(self):
        lines = ["if (debug)", '  console.log("x");']
        assert is_in_conditional(1, lines, column=2)

    def test_after_conditional(self):
        lines = ["if (debug) {", "  x();", "}", 'console.log("x");']
        assert not is_in_conditional(3, lines, column=0)
