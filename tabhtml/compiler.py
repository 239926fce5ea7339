import logging
import re
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from .preprocessor import INDENT_UNIT, normalize

logger = logging.getLogger(__name__)


class _NoTag:
    """Sentinel tag for lines emitted verbatim, without markup."""

    def __repr__(self):
        return 'NO_TAG'


NO_TAG = _NoTag()

TAG_DELIMITERS = '#.(:'
ID_TERMINATORS = '.(:'
CLASS_TERMINATORS = '.(:#'
LITERAL_PREFIX = '|'

# A known element followed by text is a tag even without selector syntax, e.g. `li Hello`
HTML_ELEMENTS = frozenset("""
    a abbr address article aside audio b bdi bdo blockquote body button canvas
    caption cite code colgroup data datalist dd del details dfn dialog div dl dt
    em fieldset figcaption figure footer form h1 h2 h3 h4 h5 h6 head header
    hgroup html i iframe ins kbd label legend li main map mark menu meter nav
    noscript object ol optgroup option output p picture pre progress q rp rt
    ruby s samp script section select small span strong style sub summary sup
    table tbody td template textarea tfoot th thead time title tr u ul var video
""".split())

_ATTRIBUTE = re.compile(r'([^\s:]+)(:\s*(\S*))?')


class TabhtmlError(ValueError):
    """Base class for tabhtml compile errors."""


class EmptyInputError(TabhtmlError):
    pass


class UnresolvedAttributeSyntax(TabhtmlError):
    pass


class IndentationJumpError(TabhtmlError):
    pass


class Line(NamedTuple):
    content: str
    level: int
    tag: object = None  # None until parsed, then a str or NO_TAG
    attributes: Optional[Dict[str, str]] = None  # None until parsed
    text: str = ''


class Scope(NamedTuple):
    tag: Optional[str]  # None for untagged lines
    level: int


def _fatal_error(cls, message: str):
    raise cls(f"Tabhtml Compile Error: {message}")


def _unparenthesized(text: str) -> Iterator[Tuple[int, str]]:
    """Yields (index, char) for every character outside a parenthesized group."""
    in_parens = False
    for i, char in enumerate(text):
        if char == '(':
            in_parens = True
        elif char == ')':
            in_parens = False
        elif not in_parens:
            yield i, char


def _scan_to(text: str, terminators: str, start: int) -> int:
    for i in range(start, len(text)):
        if text[i] in terminators:
            return i
    return len(text)


def split_selector(content: str) -> Tuple[str, str]:
    """
    Splits a line into its selector (tag, id, classes, attributes) and the
    inline text that follows the first whitespace outside parentheses.
    """
    for i, char in _unparenthesized(content):
        if char.isspace():
            return content[:i], content[i:].strip()
    return content, ''


def tokenize(source: str) -> List[Line]:
    """Turns canonical text into one Line per physical line."""
    lines: List[Line] = []
    for raw in source.split('\n'):
        level = len(raw) - len(raw.lstrip(INDENT_UNIT))
        lines.append(Line(raw[level:].strip(), level))
    return lines


def _split_inline_block(line: Line) -> Tuple[Line, Optional[Line]]:
    if line.content.startswith(LITERAL_PREFIX):
        return line, None
    selector, _ = split_selector(line.content)
    for i, char in _unparenthesized(selector):
        if char != ':':
            continue
        remainder = line.content[i + 1:].strip()
        if not remainder:
            break
        head = line._replace(content=line.content[:i + 1])
        return head, Line(remainder, line.level + 1)
    return line, None


def expand_inline_blocks(lines: List[Line]) -> List[Line]:
    """
    Returns a new sequence where every `tag: content` line is split into the
    `tag:` line and a child line one level deeper. Children are expanded too.
    """
    expanded: List[Line] = []
    for line in lines:
        child: Optional[Line] = line
        while child is not None:
            head, child = _split_inline_block(child)
            expanded.append(head)
    return expanded


def _parse_id(selector: str) -> Optional[str]:
    for i, char in _unparenthesized(selector):
        if char == '#':
            return selector[i + 1:_scan_to(selector, ID_TERMINATORS, i + 1)] or None
    return None


def _parse_classes(selector: str) -> Optional[str]:
    classes = []
    for i, char in _unparenthesized(selector):
        if char == '.':
            name = selector[i + 1:_scan_to(selector, CLASS_TERMINATORS, i + 1)]
            if name:
                classes.append(name)
    return ' '.join(classes) if classes else None


def _parse_attributes(selector: str, strict: bool = False) -> Dict[str, str]:
    """Parses the first `(name:value ...)` group of a selector."""
    start = selector.find('(')
    if start == -1:
        return {}
    end = selector.find(')', start + 1)
    if end == -1:
        return {}

    attributes: Dict[str, str] = {}
    for match in _ATTRIBUTE.finditer(selector[start + 1:end]):
        name, has_value, value = match.groups()
        if has_value is None:
            if strict:
                _fatal_error(UnresolvedAttributeSyntax, f"Attribute '{name}' has no value in '{selector}'.")
            logger.warning("Skipping attribute without value: '%s' in '%s'", name, selector)
            continue
        attributes[name] = value
    return attributes


def parse_line(line: Line, strict: bool = False) -> Line:
    """Resolves the tag, attributes and inline text of a tokenized line."""
    content = line.content
    if content.startswith(LITERAL_PREFIX):
        text = content[1:]
        if text.startswith(' '):
            text = text[1:]
        return line._replace(content=text, tag=NO_TAG, attributes={}, text='')

    selector, text = split_selector(content)
    tag_end = _scan_to(selector, TAG_DELIMITERS, 0)
    if tag_end == len(selector):
        if text and selector in HTML_ELEMENTS:
            return line._replace(tag=selector, attributes={}, text=text)
        return line._replace(tag=NO_TAG, attributes={}, text='')

    attributes: Dict[str, str] = {}
    element_id = _parse_id(selector)
    if element_id:
        attributes['id'] = element_id
    classes = _parse_classes(selector)
    if classes:
        attributes['class'] = classes
    # Named attributes win over the #/. shorthands
    attributes.update(_parse_attributes(selector, strict))

    return line._replace(tag=selector[:tag_end], attributes=attributes, text=text)


class TabhtmlCompiler:
    """
    Tabhtml Compiler
    Compiles canonical (tab-indented) tabhtml source to HTML.

    Features:
    - Indentation-based hierarchy
    - Tag, ID (#), class (.) and attribute ((name:value)) declarations
    - Inline text after the selector (p Hello)
    - Inline blocks (ul: li Hello)
    - Literal text lines (| text, or any line without selector syntax)
    - No HTML escaping
    - Optional strict mode (depth jumps and unresolved attributes are fatal)
    """

    def __init__(self, strict: bool = False, indent: str = INDENT_UNIT, default_tag: str = 'div'):
        self.strict = strict
        self.indent = indent
        self.default_tag = default_tag

    def parse(self, source: str) -> List[Line]:
        """Tokenizes, expands and parses canonical source into Lines."""
        lines = expand_inline_blocks(tokenize(source))
        return [parse_line(line, self.strict) for line in lines]

    def _render_attributes(self, attributes: Dict[str, str]) -> str:
        return ''.join(f' {name}="{value}"' for name, value in attributes.items())

    def _close_scopes(self, stack: List[Scope], level: int, output: List[str]):
        """Closes scopes on the stack until the top is shallower than `level`."""
        while stack and stack[-1].level >= level:
            scope = stack.pop()
            if scope.tag is not None:
                output.append(f"{self.indent * scope.level}</{scope.tag}>\n")

    def _check_depth(self, stack: List[Scope], line: Line):
        max_level = stack[-1].level + 1 if stack else 0
        if line.level <= max_level:
            return
        if self.strict:
            _fatal_error(IndentationJumpError,
                         f"Invalid indentation increase. Expected at most level {max_level}, got {line.level} at '{line.content}'.")
        logger.warning("Indentation jumps to level %d at '%s'", line.level, line.content)

    def compile(self, lines: List[Line]) -> str:
        """Emits HTML for a sequence of parsed Lines."""
        output: List[str] = []
        stack: List[Scope] = []

        for i, line in enumerate(lines):
            self._close_scopes(stack, line.level, output)
            self._check_depth(stack, line)
            indent = self.indent * line.level

            if line.tag is NO_TAG:
                output.append(f"{indent}{line.content}\n")
                stack.append(Scope(None, line.level))
                continue

            tag = line.tag or self.default_tag
            opening = f"<{tag}{self._render_attributes(line.attributes or {})}>"
            has_children = i + 1 < len(lines) and lines[i + 1].level > line.level

            if line.text and not has_children:
                output.append(f"{indent}{opening}{line.text}</{tag}>\n")
                continue

            output.append(f"{indent}{opening}\n")
            if line.text:
                output.append(f"{indent}{self.indent}{line.text}\n")
            stack.append(Scope(tag, line.level))

        self._close_scopes(stack, 0, output)
        return ''.join(output)

    def compile_template(self, source: str) -> str:
        """Compiles canonical text to HTML."""
        if not source.strip():
            _fatal_error(EmptyInputError, "Source is empty.")
        return self.compile(self.parse(source))

    def render(self, source: str) -> str:
        """Normalizes raw source, then compiles it."""
        return self.compile_template(normalize(source))


def compile_template(source: str, strict: bool = False) -> str:
    return TabhtmlCompiler(strict=strict).compile_template(source)


def render(source: str, strict: bool = False) -> str:
    return TabhtmlCompiler(strict=strict).render(source)
