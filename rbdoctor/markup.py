"""
Source code listings for documented entities.

L{markup_code} turns an entity's token stream into the HTML shown in its
"source" section: highlighted, with the common indentation removed, and
optionally with line numbers.
"""
import re
from typing import Iterable, List, Optional

from rbdoctor.tokens import Token
from rbdoctor.tokenstream import STYLES, TokenStyles, to_html

__all__ = ['markup_code', 'add_line_numbers']

#: Matches the C{# File <name>, line <n>} comment starting a method listing.
_POSITION_COMMENT_RE = re.compile(r'\A.*#\ *File', re.IGNORECASE)
#: Matches the line information of the position comment.
_LINE_INFO_RE = re.compile(r'\A(.*)(, line (\d+))')
_INDENT_RE = re.compile(r' *(?=\S)')

def _common_indent(lines: List[str]) -> int:
    indent: Optional[int] = None
    for line in lines:
        m = _INDENT_RE.match(line)
        if m is None:
            continue
        n = m.end()
        if indent is None or n < indent:
            indent = n
        if n == 0:
            break
    return indent or 0

def markup_code(token_stream: Optional[Iterable[Optional[Token]]],
                line_numbers: bool = False,
                styles: TokenStyles = STYLES) -> str:
    """
    Render a token stream as a source listing.

    @param line_numbers: Number the lines, this only works when the stream
        starts with a position comment (see L{rbdoctor.tokens.position_comment}).
    @return: HTML, or an empty string if there are no tokens.
    """
    if token_stream is None:
        return ''
    src = to_html(token_stream, styles)
    if not src:
        return ''

    lines = src.splitlines(keepends=True)
    # The position comment is never indented, don't let it win.
    measured = lines[1:] if _POSITION_COMMENT_RE.match(src) else lines
    indent = _common_indent(measured)
    if indent > 0:
        prefix = ' ' * indent
        src = ''.join(line[indent:] if line.startswith(prefix) else line
                      for line in lines)

    if line_numbers:
        src = add_line_numbers(src)
    return src

def add_line_numbers(src: str) -> str:
    """
    Prefix the lines of C{src} with line numbers.

    The first line must hold C{", line <n>"}: this text is removed, the
    first line stays unnumbered and the following lines are numbered
    from C{n}.  If there is no such information, C{src} is returned
    unchanged.
    """
    m = _LINE_INFO_RE.match(src)
    if m is None:
        return src
    src = m.group(1) + src[m.end():]

    first = int(m.group(3)) - 1
    last = first + src.count('\n')
    size = len(str(last))

    numbered = []
    for lineno, line in enumerate(src.splitlines(keepends=True), start=first):
        if lineno == first:
            numbered.append(' ' * (size + 1))
        else:
            numbered.append(f'<span class="line-num">{lineno:>{size}}</span> ')
        numbered.append(line)
    return ''.join(numbered)
