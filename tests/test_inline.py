import logging

import pytest

from ScriptaConvert.latex_inline import parse_inlines
from ScriptaConvert.model import Fun, Text, VFun


@pytest.mark.parametrize("text", ["Hello, World!", "plain words, numbers 42 and punctuation: ok?", "[brackets] too"])
def test_text_without_special_characters_is_one_node(text):
    assert parse_inlines(text) == [Text(text)]


def test_empty_run_is_one_empty_text():
    assert parse_inlines("") == [Text("")]
    assert parse_inlines(r"\foo{}") == [Fun("foo", ())]


def test_command_with_argument():
    assert parse_inlines(r"This is \textbf{bold} text.") == [
        Text("This is "),
        Fun("textbf", (Text("bold"),)),
        Text(" text."),
    ]


def test_nested_commands_stay_nested():
    result = parse_inlines(r"\textbf{bold \textit{it \emph{deep}}}")
    assert result == [
        Fun(
            "textbf",
            (
                Text("bold "),
                Fun("textit", (Text("it "), Fun("emph", (Text("deep"),)))),
            ),
        )
    ]


def test_commands_without_argument_have_empty_args():
    assert parse_inlines(r"a\newline b") == [Text("a"), Fun("newline"), Text(" b")]
    assert parse_inlines(r"\foo{}") == [Fun("foo", ())]
    assert parse_inlines("a\\\\b") == [Text("a"), Fun("\\\\"), Text("b")]


def test_math_is_verbatim():
    assert parse_inlines(r"$\textbf{x}$ and $$y$$ and \(z\)") == [
        VFun("math", r"\textbf{x}"),
        Text(" and "),
        VFun("math", "y"),
        Text(" and "),
        VFun("math", "z"),
    ]


def test_verb_is_inline_code():
    assert parse_inlines(r"run \verb|a{b| now") == [Text("run "), VFun("code", "a{b"), Text(" now")]


def test_escaped_characters_merge_into_text():
    assert parse_inlines(r"50\% off \& more\, here") == [Text("50% off & more  here")]


def test_optional_argument_is_skipped_before_brace():
    assert parse_inlines(r"\includegraphics[width=3cm]{cat.png}") == [Fun("includegraphics", (Text("cat.png"),))]
    assert parse_inlines(r"\LaTeX[1] text") == [Fun("LaTeX"), Text("[1] text")]


def test_bare_group():
    assert parse_inlines(r"{\bf x}") == [Fun("group", (Fun("bf"), Text(" x")))]


@pytest.mark.parametrize(
    "text",
    [
        r"unclosed \textbf{bold",
        "stray } brace",
        "$unclosed math",
        r"bad \textbf{inner $math}",
        "ends with \\",
    ],
)
def test_malformed_runs_fall_back_to_text(text):
    assert parse_inlines(text) == [Text(text)]


def test_fallback_inside_argument_logs_outer_position(caplog):
    text = "ab\n\\textbf{x $y}"
    with caplog.at_level(logging.DEBUG):
        assert parse_inlines(text) == [Text(text)]
    assert "Inline fallback at 2:12" in caplog.text
