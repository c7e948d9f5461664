"""
Documented Ruby entities that collect their source tokens.

Each entity owns a L{TokenStream} and exposes the token collection methods
the parser relies on.
"""
from typing import Optional, Tuple

from rbdoctor.markup import markup_code
from rbdoctor.tokens import Token, TokenKind, position_comment
from rbdoctor.tokenstream import NestedTokens, STYLES, TokenStream, TokenStyles


class CodeObject:
    """
    Base class for entities whose source is kept as tokens.

    @ivar name: Name of the entity.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._tokens: Optional[TokenStream] = None

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.name!r})'

    def _stream(self) -> TokenStream:
        if self._tokens is None:
            self._tokens = TokenStream()
        return self._tokens

    def start_collecting_tokens(self) -> None:
        """Start collecting tokens, dropping the ones already collected."""
        self._stream().start_collecting_tokens()

    collect_tokens = start_collecting_tokens

    def add_tokens(self, *tokens: NestedTokens) -> None:
        self._stream().add_tokens(*tokens)

    add_token = add_tokens

    def pop_token(self) -> Optional[Token]:
        return self._stream().pop_token()

    @property
    def token_stream(self) -> Optional[Tuple[Optional[Token], ...]]:
        """
        The collected tokens, C{None} if collection never started.
        """
        if self._tokens is None:
            return None
        return self._tokens.token_stream

    def tokens_to_s(self) -> str:
        return self._stream().tokens_to_s()


class AnyMethod(CodeObject):
    """
    A method, singleton method or attribute accessor with a source listing.
    """

    def add_position_comment(self, relative_name: str, line_no: int, char_no: int = 0) -> None:
        """
        Record where the method comes from, this comment heads the listing.
        """
        comment = position_comment(relative_name, line_no, char_no)
        newline = Token(TokenKind.NEWLINE, '\n', line_no=line_no, char_no=char_no + len(comment.text))
        self.add_tokens(comment, newline)

    def markup_code(self, line_numbers: bool = False, styles: TokenStyles = STYLES) -> str:
        """
        HTML source listing of the method, empty if no tokens were collected.
        """
        return markup_code(self.token_stream, line_numbers=line_numbers, styles=styles)
