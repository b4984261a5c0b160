import textwrap

from ScriptaConvert import markdown_parser
from ScriptaConvert.converter import convert
from ScriptaConvert.model import (
    Fun,
    ListBlock,
    ListKind,
    OrdinaryBlock,
    Paragraph,
    Section,
    Text,
    VerbatimBlock,
    VFun,
)


def test_parse_blocks_and_inline():
    md_text = """
# Введение

Текст с *курсивом*, **жирным** и встроенной формулой $E=mc^2$.

- Первый пункт
- Второй пункт

$$
S = \\pi r^2
$$
"""
    document = markdown_parser.parse_markdown(md_text)
    section = document.blocks[0]
    assert isinstance(section, Section) and section.title == "Введение"
    paragraph, bullet_list, equation = section.content
    assert isinstance(paragraph, Paragraph)
    assert VFun("math", "E=mc^2") in paragraph.inlines
    assert Fun("em", (Text("курсивом"),)) in paragraph.inlines
    assert Fun("strong", (Text("жирным"),)) in paragraph.inlines
    assert isinstance(bullet_list, ListBlock) and bullet_list.kind is ListKind.ITEMIZE
    assert [item.content for item in bullet_list.items] == [(Text("Первый пункт"),), (Text("Второй пункт"),)]
    assert isinstance(equation, VerbatimBlock) and equation.env_name == "math"
    assert equation.content == "S = \\pi r^2"


def test_plain_text_inline():
    assert markdown_parser.parse_markdown_inlines("plain text") == [Text("plain text")]


def test_nested_emphasis():
    inlines = markdown_parser.parse_markdown_inlines("**bold *and italic***")
    assert inlines == [Fun("strong", (Text("bold "), Fun("em", (Text("and italic"),))))]


def test_convert_markdown_inline_forms():
    assert convert("**bold** and *it* with `code`", dialect="markdown") == "[b bold] and [i it] with `code`\n"
    assert convert("[site](http://x.org) ~~gone~~", dialect="markdown") == "[link site http://x.org] [strike gone]\n"


def test_convert_markdown_blocks():
    md_text = textwrap.dedent(
        """\
        #### Deep heading

        1. one
        2. two

        > quoted

        ```python
        print(1)
        ```
        """
    )
    assert convert(md_text, dialect="markdown") == (
        "### Deep heading\n\n. one\n. two\n\n| quotation\nquoted\n\n| code lang:python\n  print(1)\n"
    )


def test_markdown_table_becomes_rows():
    md_text = "| a | b |\n|---|---|\n| 1 | 2 |\n"
    document = markdown_parser.parse_markdown(md_text)
    assert document.blocks == (VerbatimBlock(env_name="table", content="a & b\n1 & 2", properties={"format": "ll"}),)
    assert convert(md_text, dialect="markdown") == "| table format:ll\n  a & b\n  1 & 2\n"


def test_definition_list():
    document = markdown_parser.parse_markdown("Term\n: Definition\n")
    block = document.blocks[0]
    assert block.kind is ListKind.DESCRIPTION
    assert block.items[0].label == (Text("Term"),)
    assert block.items[0].content == (Text("Definition"),)


def test_nested_markdown_list_is_flattened():
    document = markdown_parser.parse_markdown("- a\n  - b\n- c\n")
    block = document.blocks[0]
    assert [item.content for item in block.items] == [(Text("a"),), (Text("b"),), (Text("c"),)]


def test_ordered_list_start_is_kept():
    block = markdown_parser.parse_markdown("3. three\n4. four\n").blocks[0]
    assert block.kind is ListKind.ENUMERATE
    assert block.properties == {"start": "3"}


def test_blockquote_is_ordinary_block():
    block = markdown_parser.parse_markdown("> first\n>\n> second\n").blocks[0]
    assert isinstance(block, OrdinaryBlock)
    assert block.content == (Paragraph(inlines=(Text("first"),)), Paragraph(inlines=(Text("second"),)))


def test_emphasis_leaves_no_empty_text():
    assert markdown_parser.parse_markdown_inlines("**b** and *i*") == [
        Fun("strong", (Text("b"),)),
        Text(" and "),
        Fun("em", (Text("i"),)),
    ]
    paragraph = markdown_parser.parse_markdown("**b** and *i*\n").blocks[0]
    assert Text("") not in paragraph.inlines
    assert markdown_parser.parse_markdown_inlines("") == [Text("")]
