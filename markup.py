"""Exam question markup: tokenizing, rendering and answer extraction.

Authors write questions in markdown with a handful of inline constructs::

    [!num]          starts a numbered question block
    [T*answer]      fill-in blank whose correct answer is ``answer``
    [T]             fill-in blank answered by some other construct
    [D] ... [/D]    inline dropdown; options are ``[*]correct`` / ``[ ]wrong``
    [*]label        correct choice (radio, or checkbox if several are correct)
    [ ]label        incorrect choice

This syntax is stored verbatim with every exam item, so it is a persisted
format: changes here must stay backward compatible.

Each question block is tokenized once, left to right. Rendering and answer
extraction both work from the same token stream.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union

from markdown_it import MarkdownIt

logger = logging.getLogger("ielts-exams.markup")

QUESTION_MARKER = "[!num]"
MAX_DROPDOWN_WIDTH = 30  # in ch

_LINE_SPLIT_RE = re.compile(r"\r?\n")

# Alternatives never share a prefix, so at any position at most one can match.
# A dropdown is consumed whole; its inner [*]/[ ] never reach the choice branch.
_TOKEN_RE = re.compile(
    r"(?P<num>\[!num\])"
    r"|\[T\*(?P<text_answer>[^\]]+)\]"
    r"|(?P<blank>\[T\])"
    r"|\[D\](?P<dropdown>.*?)\[/D\]"
    r"|\[(?P<mark>[* ])\]\s*(?P<label>[^\n\[]+)",
    re.DOTALL,
)
_CHOICE_RE = re.compile(r"\[([* ])\]\s*([^\n\[]+)")

# CommonMark plus GFM tables; inline HTML passes through and a single newline is a <br />
_md = MarkdownIt("commonmark", {"html": True, "breaks": True}).enable(
    ["table", "strikethrough"]
)


# --- Tokens -----------------------------------------------------------------------


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class QuestionNumber:
    pass


@dataclass(frozen=True)
class TextInput:
    # None for a bare [T] blank
    answer: Optional[str] = None


@dataclass(frozen=True)
class Option:
    label: str
    correct: bool


@dataclass(frozen=True)
class Dropdown:
    options: Tuple[Option, ...]

    @property
    def width(self) -> int:
        longest = max((len(o.label) for o in self.options), default=0)
        return min(longest + 2, MAX_DROPDOWN_WIDTH)


@dataclass(frozen=True)
class Choice:
    label: str
    correct: bool


Token = Union[PlainText, QuestionNumber, TextInput, Dropdown, Choice]


@dataclass(frozen=True)
class Block:
    text: str
    # 1-based question number; None for plain markdown
    number: Optional[int] = None

    @property
    def is_question(self) -> bool:
        return self.number is not None


class CompiledMarkup(NamedTuple):
    html: str
    answers: List[str]


# --- Splitting & tokenizing ---------------------------------------------------------


def split_blocks(source: str) -> List[Block]:
    """
    Split a document into plain markdown blocks and question blocks.

    A line containing ``[!num]`` opens a question block that collects every
    following line until the next marker line or the end of input.
    """
    blocks: List[Block] = []
    plain: List[str] = []
    question: List[str] = []
    in_question = False
    counter = 0

    def flush_plain() -> None:
        if plain:
            blocks.append(Block("\n".join(plain)))
            plain.clear()

    def flush_question() -> None:
        if question:
            blocks.append(Block("\n".join(question), number=counter))
            question.clear()

    for line in _LINE_SPLIT_RE.split(source or ""):
        if QUESTION_MARKER in line:
            flush_plain()
            if in_question:
                flush_question()
            in_question = True
            counter += 1
            question.append(line)
        elif in_question:
            question.append(line)
        else:
            plain.append(line)

    if in_question:
        flush_question()
    flush_plain()
    return blocks


def _parse_options(inner: str) -> Tuple[Option, ...]:
    return tuple(
        Option(label=m.group(2).strip(), correct=m.group(1) == "*")
        for m in _CHOICE_RE.finditer(inner)
    )


def _token_for(m: re.Match) -> Token:
    if m.group("num") is not None:
        return QuestionNumber()
    if m.group("text_answer") is not None:
        return TextInput(m.group("text_answer"))
    if m.group("blank") is not None:
        return TextInput()
    if m.group("dropdown") is not None:
        return Dropdown(_parse_options(m.group("dropdown")))
    return Choice(label=m.group("label").strip(), correct=m.group("mark") == "*")


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    for m in _TOKEN_RE.finditer(text):
        if m.start() > pos:
            tokens.append(PlainText(text[pos : m.start()]))
        tokens.append(_token_for(m))
        pos = m.end()
    if pos < len(text):
        tokens.append(PlainText(text[pos:]))
    return tokens


def _correct_marks(tokens: Iterable[Token]) -> int:
    """Count of ``[*]`` in a block, ignoring dropdown contents."""
    n = 0
    for tok in tokens:
        if isinstance(tok, Choice) and tok.correct:
            n += 1
        elif isinstance(tok, PlainText):
            n += tok.text.count("[*]")
    return n


# --- Rendering ----------------------------------------------------------------------


def escape(s: str) -> str:
    return (
        str(s)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _markdown_to_html(text: str) -> str:
    return _md.render(text).rstrip("\n")


def _text_input_html(tok: TextInput, number: int, reveal: bool) -> str:
    if reveal and tok.answer is not None:
        return (
            f'<input type="text" value="{escape(tok.answer)}" readonly disabled '
            f'class="inlineTextbox answerFilled" />'
        )
    return f'<input type="text" class="inlineTextbox" name="q{number}_text" />'


def _dropdown_html(tok: Dropdown, number: int, reveal: bool) -> str:
    options = "".join(
        f'<option value="{escape(o.label)}"{" selected" if reveal and o.correct else ""}>'
        f"{escape(o.label)}</option>"
        for o in tok.options
    )
    disabled = " disabled" if reveal else ""
    return (
        f'<select name="q{number}" class="dropdownInline" style="width:{tok.width}ch"{disabled}>'
        f"{options}</select>"
    )


def _choice_html(tok: Choice, number: int, reveal: bool, multi: bool) -> str:
    kind = "checkbox" if multi else "radio"
    checked = " checked" if reveal and tok.correct else ""
    disabled = " disabled" if reveal else ""
    return (
        f'<label class="choiceItem"><input type="{kind}" name="q{number}"{checked}{disabled} /> '
        f"{escape(tok.label)}</label>"
    )


def _token_html(tok: Token, number: int, reveal: bool, multi: bool) -> str:
    if isinstance(tok, PlainText):
        return tok.text
    if isinstance(tok, QuestionNumber):
        return f'<span class="numberIndex">Q{number}.</span>'
    if isinstance(tok, TextInput):
        return _text_input_html(tok, number, reveal)
    if isinstance(tok, Dropdown):
        return _dropdown_html(tok, number, reveal)
    return _choice_html(tok, number, reveal, multi)


def render_block(block: Block, reveal: bool = False) -> str:
    if not block.is_question:
        return _markdown_to_html(block.text)
    tokens = tokenize(block.text)
    # one decision per block: several correct choices -> checkboxes everywhere
    multi = _correct_marks(tokens) > 1
    body = "".join(_token_html(tok, block.number, reveal, multi) for tok in tokens)
    return _markdown_to_html(body)


def render(source: str, reveal: bool = False) -> str:
    """Render exam markup to HTML; ``reveal`` pre-fills and locks correct answers."""
    return "\n".join(render_block(b, reveal) for b in split_blocks(source))


# --- Answer extraction --------------------------------------------------------------


def answers_from_tokens(tokens: Iterable[Token]) -> Iterator[str]:
    for tok in tokens:
        if isinstance(tok, TextInput):
            if tok.answer is not None:
                yield tok.answer.strip()
        elif isinstance(tok, Dropdown):
            for opt in tok.options:
                if opt.correct:
                    yield opt.label
        elif isinstance(tok, Choice) and tok.correct:
            yield tok.label


def extract_answers(source: str) -> List[str]:
    """Canonical answers of every question block, in document order."""
    answers: List[str] = []
    for block in split_blocks(source):
        if block.is_question:
            answers.extend(answers_from_tokens(tokenize(block.text)))
    return answers


def compile_markup(source: str) -> CompiledMarkup:
    """Authoring-time pass: learner-facing HTML plus the answer key."""
    html_parts: List[str] = []
    answers: List[str] = []
    for block in split_blocks(source):
        html_parts.append(render_block(block, reveal=False))
        if block.is_question:
            answers.extend(answers_from_tokens(tokenize(block.text)))
    logger.debug("compiled markup: %d blocks, %d answers", len(html_parts), len(answers))
    return CompiledMarkup(html="\n".join(html_parts), answers=answers)
