"""
Token streams and their HTML rendering.

A L{TokenStream} is the list of tokens gathered during the parse of some
entity (say a method).  The parser starts collecting with
L{TokenStream.start_collecting_tokens}, then feeds the stream with
L{TokenStream.add_tokens} and L{TokenStream.pop_token}.

L{to_html} converts such a list to HTML, wrapping tokens with
C{<span>} elements.  The following token kinds are wrapped in spans with
the given class names:

  - C{on_const} -- C{ruby-constant}
  - C{on_kw} -- C{ruby-keyword}
  - C{on_ivar} -- C{ruby-ivar}
  - C{on_op} -- C{ruby-operator}, or C{ruby-identifier} in argument position
  - C{on_ident}, C{on_cvar}, C{on_gvar} -- C{ruby-identifier}
  - C{on_backref}, C{on_dstring} -- C{ruby-node}
  - C{on_comment}, C{on_embdoc} -- C{ruby-comment}
  - C{on_regexp} -- C{ruby-regexp}
  - C{on_tstring} -- C{ruby-string}
  - C{on_label}, numbers, symbols... -- C{ruby-value}

Other token kinds are not wrapped in spans.
"""
import logging
from typing import Iterable, Iterator, List, Optional, Tuple, Union

import attr
from twisted.web.template import Tag, tags

from rbdoctor.stanutils import flatten
from rbdoctor.tokens import LexState, Token, TokenKind, as_kind

__all__ = ['TokenStream', 'TokenStyles', 'STYLES', 'token_style',
           'colorize_tokens', 'to_stan', 'to_html', 'render']

logger = logging.getLogger(__name__)

TokenLike = Optional[Token]
NestedTokens = Union[TokenLike, Iterable['NestedTokens']]


@attr.s(auto_attribs=True, frozen=True)
class TokenStyles:
    """
    Maps style tags (C{'keyword'}, C{'identifier'}...) to CSS class names.

    Stylesheets key off the class names, so the default C{ruby-} prefix
    is part of the output format.
    """
    prefix: str = 'ruby-'

    def css_class(self, tag: str) -> str:
        return f'{self.prefix}{tag}'

STYLES = TokenStyles()

_VARIABLE_KINDS = frozenset((TokenKind.CVAR, TokenKind.GVAR))
_NODE_KINDS = frozenset((TokenKind.BACKREF, TokenKind.DSTRING))
_COMMENT_KINDS = frozenset((TokenKind.COMMENT, TokenKind.EMBDOC))
_VALUE_KINDS = frozenset((
    TokenKind.INT, TokenKind.FLOAT, TokenKind.RATIONAL, TokenKind.IMAGINARY,
    TokenKind.HEREDOC, TokenKind.SYMBOL, TokenKind.CHAR))
_HEREDOC_DELIMITER_KINDS = frozenset((TokenKind.HEREDOC_BEGIN, TokenKind.HEREDOC_END))

#: Kinds whose trailing newline is moved after the closing C{</span>}.
_TRAILING_NEWLINE_KINDS = frozenset((
    TokenKind.COMMENT, TokenKind.EMBDOC, TokenKind.HEREDOC_END))


def token_style(token: Token) -> Optional[str]:
    """
    Get the style tag of a token, or C{None} if it's not highlighted.

    Rules are tried in order.  A bare C{=} operator matches none of them.
    """
    kind = as_kind(token.kind)
    if kind == TokenKind.CONSTANT:
        return 'constant'
    elif kind == TokenKind.KEYWORD:
        return 'keyword'
    elif kind == TokenKind.IVAR:
        return 'ivar'
    elif kind in _VARIABLE_KINDS:
        return 'identifier'
    elif kind == TokenKind.OPERATOR and token.text != '=':
        if getattr(token, 'state', None) == LexState.EXPR_ARG:
            return 'identifier'
        return 'operator'
    elif kind == TokenKind.LAMBDA:
        return 'operator'
    elif kind == TokenKind.IDENTIFIER:
        return 'identifier'
    elif kind == TokenKind.LABEL:
        return 'value'
    elif kind in _NODE_KINDS:
        return 'node'
    elif kind in _COMMENT_KINDS:
        return 'comment'
    elif kind == TokenKind.REGEXP:
        return 'regexp'
    elif kind == TokenKind.STRING:
        return 'string'
    elif kind in _VALUE_KINDS:
        return 'value'
    elif kind in _HEREDOC_DELIMITER_KINDS:
        return 'identifier'
    if not isinstance(kind, TokenKind):
        logger.debug("unknown token kind %r, not highlighted", kind)
    return None


def _encodable(text: str) -> str:
    """
    Replace what UTF-8 cannot encode (lone surrogates) with backslash escapes.
    """
    try:
        text.encode('utf-8')
    except UnicodeEncodeError:
        text = text.encode('utf-8', 'backslashreplace').decode('utf-8')
    return text


def colorize_tokens(token_stream: Iterable[TokenLike],
                    styles: TokenStyles = STYLES) -> Iterator[Union[Tag, str]]:
    """
    Yield the Stan fragments of the given tokens.  Absent tokens are skipped.
    """
    for token in token_stream:
        if token is None:
            continue

        style = token_style(token)
        text = token.text
        with_nl = False
        if as_kind(token.kind) in _TRAILING_NEWLINE_KINDS:
            with_nl = text.endswith('\n')
            text = text.rstrip()
        text = _encodable(text)

        if style is None:
            yield text
            continue
        yield tags.span(text, class_=styles.css_class(style))
        if with_nl:
            yield '\n'


def to_stan(token_stream: Iterable[TokenLike], styles: TokenStyles = STYLES) -> Tag:
    """
    Colorize the tokens.

    @return: A transparent tag holding the highlighted tokens.
    """
    return Tag('')(*colorize_tokens(token_stream, styles))


def to_html(token_stream: Iterable[TokenLike], styles: TokenStyles = STYLES) -> str:
    """
    Convert the tokens to HTML.

    Text is escaped, highlighted tokens are wrapped in
    C{<span class="ruby-...">} elements.
    """
    return flatten(to_stan(token_stream, styles))


def _flatten_tokens(tokens: Iterable[NestedTokens]) -> Iterator[TokenLike]:
    for token in tokens:
        if isinstance(token, (list, tuple)):
            yield from _flatten_tokens(token)
        else:
            yield token


class TokenStream:
    """
    The tokens collected during the parse of an entity.

    Entities own one of these and populate it while the lexer runs.
    Not thread safe: one parser fills it, then it's only read.
    """

    def __init__(self) -> None:
        self._tokens: List[TokenLike] = []

    def start_collecting_tokens(self) -> None:
        """
        Start collecting tokens, forgetting any previously collected ones.
        """
        self._tokens = []

    collect_tokens = start_collecting_tokens

    def add_tokens(self, *tokens: NestedTokens) -> None:
        """
        Add C{tokens} to the collected tokens.  Nested lists are flattened.
        """
        self._tokens.extend(_flatten_tokens(tokens))

    add_token = add_tokens

    def pop_token(self) -> TokenLike:
        """
        Remove the last token from the collected tokens.

        @return: The removed token, or C{None} if there is nothing to remove.
        """
        if not self._tokens:
            return None
        return self._tokens.pop()

    @property
    def token_stream(self) -> Tuple[TokenLike, ...]:
        """Snapshot of the collected tokens."""
        return tuple(self._tokens)

    def tokens_to_s(self) -> str:
        """
        The source text of the collected tokens.
        """
        return ''.join(token.text for token in self._tokens if token is not None)

    def to_html(self, styles: TokenStyles = STYLES) -> str:
        return to_html(self._tokens, styles)

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[TokenLike]:
        return iter(self.token_stream)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({list(self._tokens)!r})'


render = to_html
