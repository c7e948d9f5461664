"""
Ruby lexical tokens, as produced by a Ripper based lexer.

The lexer itself lives outside of rbdoctor: this module only describes the
shape of what it hands over, and knows how to read token dumps written as
JSON.
"""
import enum
import json
import logging
from typing import Any, Dict, IO, List, Optional, Union

import attr

__all__ = ['TokenKind', 'LexState', 'Token', 'TokenLoadError',
           'as_kind', 'load_tokens', 'position_comment']

logger = logging.getLogger(__name__)


class TokenKind(str, enum.Enum):
    """
    Ripper scanner event names.

    The lexer can report kinds that are not listed here, L{Token.kind}
    then holds the plain string.
    """
    CONSTANT = 'on_const'
    KEYWORD = 'on_kw'
    IVAR = 'on_ivar'
    CVAR = 'on_cvar'
    GVAR = 'on_gvar'
    OPERATOR = 'on_op'
    LAMBDA = 'on_tlambda'
    LAMBDA_BEGIN = 'on_tlambeg'
    IDENTIFIER = 'on_ident'
    LABEL = 'on_label'
    LABEL_END = 'on_label_end'
    BACKREF = 'on_backref'
    DSTRING = 'on_dstring'
    COMMENT = 'on_comment'
    EMBDOC = 'on_embdoc'
    EMBDOC_BEGIN = 'on_embdoc_beg'
    EMBDOC_END = 'on_embdoc_end'
    REGEXP = 'on_regexp'
    REGEXP_BEGIN = 'on_regexp_beg'
    REGEXP_END = 'on_regexp_end'
    STRING = 'on_tstring'
    STRING_BEGIN = 'on_tstring_beg'
    STRING_CONTENT = 'on_tstring_content'
    STRING_END = 'on_tstring_end'
    EMBEXPR_BEGIN = 'on_embexpr_beg'
    EMBEXPR_END = 'on_embexpr_end'
    EMBVAR = 'on_embvar'
    BACKTICK = 'on_backtick'
    INT = 'on_int'
    FLOAT = 'on_float'
    RATIONAL = 'on_rational'
    IMAGINARY = 'on_imaginary'
    HEREDOC = 'on_heredoc'
    HEREDOC_BEGIN = 'on_heredoc_beg'
    HEREDOC_END = 'on_heredoc_end'
    SYMBOL = 'on_symbol'
    SYMBOL_BEGIN = 'on_symbeg'
    CHAR = 'on_CHAR'
    QWORDS_BEGIN = 'on_qwords_beg'
    WORDS_BEGIN = 'on_words_beg'
    QSYMBOLS_BEGIN = 'on_qsymbols_beg'
    SYMBOLS_BEGIN = 'on_symbols_beg'
    WORDS_SEP = 'on_words_sep'
    SPACE = 'on_sp'
    NEWLINE = 'on_nl'
    IGNORED_NEWLINE = 'on_ignored_nl'
    LPAREN = 'on_lparen'
    RPAREN = 'on_rparen'
    LBRACE = 'on_lbrace'
    RBRACE = 'on_rbrace'
    LBRACKET = 'on_lbracket'
    RBRACKET = 'on_rbracket'
    COMMA = 'on_comma'
    PERIOD = 'on_period'
    SEMICOLON = 'on_semicolon'
    END = 'on___end__'

    def __str__(self) -> str:
        return str(self.value)


class LexState(enum.IntFlag):
    """
    Ruby's lexer states, with the same bit values as C{Ripper::EXPR_*}.
    """
    EXPR_NONE = 0
    EXPR_BEG = 1
    EXPR_END = 2
    EXPR_ENDARG = 4
    EXPR_ENDFN = 8
    EXPR_ARG = 16
    EXPR_CMDARG = 32
    EXPR_MID = 64
    EXPR_FNAME = 128
    EXPR_DOT = 256
    EXPR_CLASS = 512
    EXPR_LABEL = 1024
    EXPR_LABELED = 2048
    EXPR_FITEM = 4096


def as_kind(value: Union[TokenKind, str]) -> Union[TokenKind, str]:
    """Get the L{TokenKind} named by C{value}, or C{value} itself if it's unknown."""
    if isinstance(value, TokenKind):
        return value
    try:
        return TokenKind(value)
    except ValueError:
        return value


def _convert_state(value: Union[LexState, int, str, None]) -> Optional[LexState]:
    if value is None or isinstance(value, LexState):
        return value
    if isinstance(value, str):
        return LexState[value]
    return LexState(value)


@attr.s(auto_attribs=True, frozen=True)
class Token:
    """
    A single lexical token.

    @ivar kind: The scanner event, a L{TokenKind} when known.
    @ivar text: The source text spanned by the token, can be empty.
    @ivar state: The lexer state, only meaningful for operators.
    """
    kind: Union[TokenKind, str] = attr.ib(converter=as_kind)
    text: str
    state: Optional[LexState] = attr.ib(default=None, converter=_convert_state)
    line_no: int = attr.ib(default=0, validator=attr.validators.instance_of(int))
    char_no: int = attr.ib(default=0, validator=attr.validators.instance_of(int))


class TokenLoadError(ValueError):
    """
    Raised by L{load_tokens} when a token dump is not usable.
    """


def _token_from_json(index: int, item: Any) -> Optional[Token]:
    if item is None:
        return None
    if not isinstance(item, dict):
        raise TokenLoadError(f"token #{index}: expected an object or null, got {type(item).__name__}")
    data: Dict[str, Any] = dict(item)
    for field in ('kind', 'text'):
        if not isinstance(data.get(field), str):
            raise TokenLoadError(f"token #{index}: missing or invalid {field!r}")
    unknown = set(data) - {'kind', 'text', 'state', 'line_no', 'char_no'}
    if unknown:
        raise TokenLoadError(f"token #{index}: unknown field(s) {', '.join(sorted(unknown))}")
    try:
        return Token(**data)
    except (KeyError, ValueError, TypeError) as e:
        raise TokenLoadError(f"token #{index}: {e}") from e


def load_tokens(stream: IO[str]) -> List[Optional[Token]]:
    """
    Read a JSON token dump.

    The dump is an array, each item being C{null} (an absent token) or an
    object with C{kind}, C{text} and optionally C{state} (an integer or a
    state name like C{"EXPR_ARG"}), C{line_no} and C{char_no}.

    @raises TokenLoadError: If the document is not a valid token dump.
    """
    try:
        data = json.load(stream)
    except UnicodeDecodeError as e:
        raise TokenLoadError(f"invalid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise TokenLoadError(f"invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise TokenLoadError("a token dump must be a JSON array")
    tokens = [_token_from_json(i, item) for i, item in enumerate(data)]
    logger.debug("loaded %d tokens", len(tokens))
    return tokens


def position_comment(relative_name: str, line_no: int, char_no: int = 0) -> Token:
    """
    The C{# File <name>, line <n>} comment placed in front of a method's tokens.
    """
    return Token(TokenKind.COMMENT, f"# File {relative_name}, line {line_no}",
                 line_no=line_no, char_no=char_no)
