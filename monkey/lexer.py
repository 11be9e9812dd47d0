"""Lexer for the Monkey language.

Token patterns are described as a small lark grammar and compiled once
into a lark basic lexer. `Lexer` wraps lark's lazy token stream and
converts each lark token into a Monkey `Token`, classifying keywords
and turning anything the grammar does not recognise into ILLEGAL
tokens. The stream is forward-only: tokens are produced on demand and
never pushed back.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from lark import Lark

from .token import Token, TokenType, lookup_ident


MONKEY_TOKENS = r"""
    IDENT: /[A-Za-z_]+/
    INT: /[0-9]+/
    STRING: /"[^"]*"?/

    EQ: "=="
    NOT_EQ: "!="
    ASSIGN: "="
    PLUS: "+"
    MINUS: "-"
    BANG: "!"
    ASTERISK: "*"
    SLASH: "/"
    LT: "<"
    GT: ">"

    COMMA: ","
    SEMICOLON: ";"
    COLON: ":"
    LPAREN: "("
    RPAREN: ")"
    LBRACE: "{"
    RBRACE: "}"
    LBRACKET: "["
    RBRACKET: "]"

    // Anything else is reported to the parser rather than rejected here
    ILLEGAL.-1: /./s

    COMMENT: /\/\/[^\n]*/
    %ignore COMMENT

    %import common.WS
    %ignore WS
"""


MONKEY_LEXER = Lark(
    MONKEY_TOKENS,
    parser=None,
    lexer='basic',
)


class Lexer:
    """Single-pass tokenizer over a Monkey source string."""

    def __init__(self, source: str):
        self.source = source
        self._stream = MONKEY_LEXER.lex(source)
        self._eof: Optional[Token] = None

    def next_token(self) -> Token:
        """Return the next token; EOF is returned once input is exhausted."""
        if self._eof is not None:
            return self._eof
        raw = next(self._stream, None)
        if raw is None:
            self._eof = self._end_of_input()
            return self._eof
        return self._convert(raw)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.EOF:
                return

    def _convert(self, raw) -> Token:
        kind = raw.type
        text = str(raw)
        if kind == 'IDENT':
            return Token(lookup_ident(text), text, raw.line, raw.column)
        if kind == 'STRING':
            if len(text) < 2 or not text.endswith('"'):
                # unterminated: the rest of the input is the offending text
                return Token(TokenType.ILLEGAL, text, raw.line, raw.column)
            return Token(TokenType.STRING, text[1:-1], raw.line, raw.column)
        return Token(TokenType[kind], text, raw.line, raw.column)

    def _end_of_input(self) -> Token:
        line = self.source.count('\n') + 1
        column = len(self.source) - (self.source.rfind('\n') + 1) + 1
        return Token(TokenType.EOF, '', line, column)


def tokenize(source: str) -> List[Token]:
    """Return every token of `source`, ending with EOF."""
    return list(Lexer(source))
