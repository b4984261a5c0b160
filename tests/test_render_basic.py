import logging
import textwrap

import pytest

from ScriptaConvert.config import RenderOptions
from ScriptaConvert.converter import convert, parse_document, parse_inlines, render
from ScriptaConvert.model import (
    BlankLine,
    Document,
    Fun,
    ListBlock,
    ListItem,
    ListKind,
    OrdinaryBlock,
    Paragraph,
    Section,
    Text,
    VerbatimBlock,
)


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("Hello, World!", "Hello, World!\n"),
        (r"This is \textbf{bold} text.", "This is [b bold] text.\n"),
        ("\\section{Introduction}\n\nSome text here.", "# Introduction\n\nSome text here.\n"),
        (
            "\\begin{itemize}\n\\item First item\n\\item Second item\n\\end{itemize}",
            "- First item\n- Second item\n",
        ),
        ("\\begin{theorem}\ntest\n\\end{theorem}", "| theorem\ntest\n"),
    ],
)
def test_convert_fixtures(source, expected):
    assert convert(source) == expected


def test_convert_table_fixture():
    latex = textwrap.dedent(
        r"""
        \begin{table}
        \caption{Example results}
        \label{tab:ex}
        \begin{tabular}{lc}
        \hline
        Name & Score \\
        \hline
        Alice & 10 \\
        \hline
        \end{tabular}
        \end{table}
        """
    )
    assert convert(latex) == (
        "| table caption:Example results label:tab:ex format:lc\n"
        "  Name & Score\n"
        "  Alice & 10\n"
    )


def test_unparseable_input_is_returned_unchanged(caplog):
    source = "\\begin{theorem}\nunterminated  \n"
    with caplog.at_level(logging.WARNING):
        assert convert(source) == source
    assert "returning it unchanged" in caplog.text


def test_unknown_dialect_is_an_error():
    with pytest.raises(ValueError):
        convert("text", dialect="rst")


def test_render_options_change_lists_and_blocks():
    latex = "\\begin{theorem}\ntest\n\\end{theorem}\n\n\\begin{enumerate}\n\\item a\n\\item b\n\\end{enumerate}"
    assert convert(latex) == "| theorem\ntest\n\n. a\n. b\n"
    options = RenderOptions(ordered_marker="number", indent_ordinary=True, trailing_newline=False)
    assert convert(latex, options=options) == "| theorem\n  test\n\n1. a\n2. b"


def test_inline_render_rules():
    assert convert(r"\textbf{a \emph{b}} and \textsc{Small} \texttt{x}") == "[b a [i b]] and Small `x`\n"
    assert convert(r"$x$ and \verb|y| see\label{here} \cite{knuth}") == "$x$ and `y` see [cite knuth]\n"


def test_verbatim_and_description_rendering():
    latex = textwrap.dedent(
        r"""
        \begin{equation}
          x^2 \geq 0
        \end{equation}

        \begin{description}
        \item[Term] Definition here.
        \end{description}
        """
    )
    assert convert(latex) == "| equation\n  x^2 \\geq 0\n\n- [b Term] Definition here.\n"


def test_render_document_built_by_hand():
    doc = Document(
        blocks=(
            Section(level=2, title="Results", content=(BlankLine(), Paragraph(inlines=(Text("Fine."),)))),
            BlankLine(),
            ListBlock(kind=ListKind.ITEMIZE, items=(ListItem(content=(Fun("strong", (Text("x"),)),)),)),
            VerbatimBlock(env_name="code", content="a\n\n  b", properties={"lang": "py", "numbered": ""}),
            OrdinaryBlock(env_name="quote", content=()),
        )
    )
    assert render(doc) == (
        "## Results\n\nFine.\n\n- [b x]\n\n| code lang:py numbered\n  a\n\n    b\n\n| quote\n"
    )


def test_nested_and_flat_sections_render_alike():
    flat = Document(blocks=(Section(level=1, title="A"), Paragraph(inlines=(Text("x"),))))
    nested = parse_document("\\section{A}\nx")
    assert render(flat) == render(nested) == "# A\n\nx\n"


def test_empty_document():
    assert convert("") == "\n"


def test_parse_inlines_by_dialect():
    assert parse_inlines(r"\textbf{b}") == [Fun("textbf", (Text("b"),))]
    assert parse_inlines("**b**", dialect="markdown") == [Fun("strong", (Text("b"),))]


def test_section_title_inline_markup_is_rendered():
    assert convert("\\section{The \\emph{Main} result}\nBody.") == "# The [i Main] result\n\nBody.\n"


def test_nested_lists_render_flat():
    latex = "\\begin{itemize}\n\\item Outer\n\\begin{enumerate}\n\\item Inner\n\\end{enumerate}\n\\item Last\n\\end{itemize}"
    assert convert(latex) == "- Outer\n- Inner\n- Last\n"


def test_environment_inside_item_passes_through():
    latex = "\\begin{enumerate}\n\\item See\n\\begin{equation}\nx=1\n\\end{equation}\n\\end{enumerate}"
    assert convert(latex) == latex
