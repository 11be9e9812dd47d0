"""Parser for the Monkey language.

Statements are parsed by recursive descent; expressions use Pratt
(top-down operator precedence) parsing. Each token type that can begin
an expression has a prefix parse function, and each token type that can
continue one has an infix parse function bound to a precedence level.
`parse_expression` parses a prefix expression and then keeps folding it
into infix expressions while the next token binds tighter than the
precedence it was called with. Every infix operator recurses with its
own precedence, which makes all of them left-associative.

The parser keeps two tokens of lookahead (`cur_token` and `peek_token`)
and pulls tokens from the lexer one at a time.

`parse` is the public entry point: it returns the program together with
the list of syntax errors. A program with errors must not be evaluated.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from .ast import (
    Program, Statement, Expression, LetStatement, ReturnStatement,
    ExpressionStatement, BlockStatement, Identifier, IntegerLiteral,
    BooleanLiteral, StringLiteral, PrefixExpression, InfixExpression,
    IfExpression, FunctionLiteral, CallExpression, ArrayLiteral,
    HashLiteral, IndexExpression,
)
from .errors import ParseError
from .lexer import Lexer
from .token import Token, TokenType


INT64_MAX = 2 ** 63 - 1


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # == !=
    LESSGREATER = 3  # < >
    SUM = 4          # + -
    PRODUCT = 5      # * /
    PREFIX = 6       # -x !x
    CALL = 7         # f(x) a[i]


PRECEDENCES: Dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.CALL,
}


class _SyntaxError(Exception):
    """Aborts the statement being parsed; the message is recorded by the parser."""


PrefixParseFn = Callable[[], Expression]
InfixParseFn = Callable[[Expression], Expression]


class Parser:
    def __init__(self, lexer: Lexer, accumulate_errors: bool = True):
        self.lexer = lexer
        self.accumulate_errors = accumulate_errors
        self.errors: List[str] = []

        self.prefix_parse_fns: Dict[TokenType, PrefixParseFn] = {}
        self.infix_parse_fns: Dict[TokenType, InfixParseFn] = {}

        self.register_prefix(TokenType.IDENT, self.parse_identifier)
        self.register_prefix(TokenType.INT, self.parse_integer_literal)
        self.register_prefix(TokenType.STRING, self.parse_string_literal)
        self.register_prefix(TokenType.TRUE, self.parse_boolean)
        self.register_prefix(TokenType.FALSE, self.parse_boolean)
        self.register_prefix(TokenType.BANG, self.parse_prefix_expression)
        self.register_prefix(TokenType.MINUS, self.parse_prefix_expression)
        self.register_prefix(TokenType.LPAREN, self.parse_grouped_expression)
        self.register_prefix(TokenType.IF, self.parse_if_expression)
        self.register_prefix(TokenType.FUNCTION, self.parse_function_literal)
        self.register_prefix(TokenType.LBRACKET, self.parse_array_literal)
        self.register_prefix(TokenType.LBRACE, self.parse_hash_literal)

        for token_type in (
            TokenType.PLUS, TokenType.MINUS, TokenType.ASTERISK, TokenType.SLASH,
            TokenType.EQ, TokenType.NOT_EQ, TokenType.LT, TokenType.GT,
        ):
            self.register_infix(token_type, self.parse_infix_expression)
        self.register_infix(TokenType.LPAREN, self.parse_call_expression)
        self.register_infix(TokenType.LBRACKET, self.parse_index_expression)

        # Read two tokens, so cur_token and peek_token are both set
        self.cur_token: Token = lexer.next_token()
        self.peek_token: Token = lexer.next_token()

    def register_prefix(self, token_type: TokenType, fn: PrefixParseFn):
        self.prefix_parse_fns[token_type] = fn

    def register_infix(self, token_type: TokenType, fn: InfixParseFn):
        self.infix_parse_fns[token_type] = fn

    # Token helpers

    def next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, token_type: TokenType) -> bool:
        return self.cur_token.type is token_type

    def peek_token_is(self, token_type: TokenType) -> bool:
        return self.peek_token.type is token_type

    def expect_peek(self, token_type: TokenType):
        """Advance if the next token has the given type, else fail the statement."""
        if not self.peek_token_is(token_type):
            self.fail(
                f"expected next token to be {token_type}, got {self.peek_token.type} instead",
                self.peek_token,
            )
        self.next_token()

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    def fail(self, message: str, token: Optional[Token] = None):
        token = token or self.cur_token
        raise _SyntaxError(f"{message} (line {token.line}, column {token.column})")

    def fail_if_unclosed(self, closer: TokenType):
        """Report the missing closer when input ends inside brackets."""
        if self.peek_token_is(TokenType.EOF):
            self.fail(f"expected next token to be {closer}, got {TokenType.EOF} instead", self.peek_token)

    # Statements

    def parse_program(self) -> Program:
        statements: List[Statement] = []
        while not self.cur_token_is(TokenType.EOF):
            try:
                statements.append(self.parse_statement())
            except _SyntaxError as e:
                self.errors.append(str(e))
                if not self.accumulate_errors:
                    break
                self.synchronize()
            self.next_token()
        return Program(tuple(statements))

    def synchronize(self):
        """Skip to the end of the current top-level statement."""
        depth = 0
        while not self.cur_token_is(TokenType.EOF):
            if self.cur_token_is(TokenType.LBRACE):
                depth += 1
            elif self.cur_token_is(TokenType.RBRACE):
                depth -= 1
            elif self.cur_token_is(TokenType.SEMICOLON) and depth <= 0:
                return
            self.next_token()

    def parse_statement(self) -> Statement:
        if self.cur_token_is(TokenType.LET):
            return self.parse_let_statement()
        if self.cur_token_is(TokenType.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement:
        self.expect_peek(TokenType.IDENT)
        name = Identifier(self.cur_token.literal)
        self.expect_peek(TokenType.ASSIGN)
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return LetStatement(name, value)

    def parse_return_statement(self) -> ReturnStatement:
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return ReturnStatement(value)

    def parse_expression_statement(self) -> ExpressionStatement:
        expression = self.parse_expression(Precedence.LOWEST)
        # optional semicolon
        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()
        return ExpressionStatement(expression)

    def parse_block_statement(self) -> BlockStatement:
        statements: List[Statement] = []
        self.next_token()
        while not self.cur_token_is(TokenType.RBRACE):
            if self.cur_token_is(TokenType.EOF):
                self.fail(f"expected next token to be {TokenType.RBRACE}, got {TokenType.EOF} instead")
            statements.append(self.parse_statement())
            self.next_token()
        return BlockStatement(tuple(statements))

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression:
        if self.cur_token_is(TokenType.ILLEGAL):
            self.fail(f"illegal token {self.cur_token.literal!r}")
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.fail(f"no prefix parse function for {self.cur_token.type} found")
        left = prefix()

        while not self.peek_token_is(TokenType.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)
        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token.literal)

    def parse_integer_literal(self) -> Expression:
        literal = self.cur_token.literal
        value = int(literal)
        if value > INT64_MAX:
            self.fail(f"could not parse {literal} as integer")
        return IntegerLiteral(value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token.literal)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(self.cur_token_is(TokenType.TRUE))

    def parse_prefix_expression(self) -> Expression:
        operator = self.cur_token.literal
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(operator, right)

    def parse_infix_expression(self, left: Expression) -> Expression:
        operator = self.cur_token.literal
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return InfixExpression(left, operator, right)

    def parse_grouped_expression(self) -> Expression:
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenType.RPAREN)
        return expression

    def parse_if_expression(self) -> Expression:
        self.expect_peek(TokenType.LPAREN)
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenType.RPAREN)
        self.expect_peek(TokenType.LBRACE)
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(TokenType.ELSE):
            self.next_token()
            self.expect_peek(TokenType.LBRACE)
            alternative = self.parse_block_statement()
        return IfExpression(condition, consequence, alternative)

    def parse_function_literal(self) -> Expression:
        self.expect_peek(TokenType.LPAREN)
        parameters = self.parse_function_parameters()
        self.expect_peek(TokenType.LBRACE)
        body = self.parse_block_statement()
        return FunctionLiteral(parameters, body)

    def parse_function_parameters(self) -> Tuple[Identifier, ...]:
        identifiers: List[Identifier] = []
        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return ()
        self.expect_peek(TokenType.IDENT)
        identifiers.append(Identifier(self.cur_token.literal))
        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            self.expect_peek(TokenType.IDENT)
            identifiers.append(Identifier(self.cur_token.literal))
        self.expect_peek(TokenType.RPAREN)
        return tuple(identifiers)

    def parse_call_expression(self, function: Expression) -> Expression:
        arguments = self.parse_expression_list(TokenType.RPAREN)
        return CallExpression(function, arguments)

    def parse_expression_list(self, end: TokenType) -> Tuple[Expression, ...]:
        items: List[Expression] = []
        if self.peek_token_is(end):
            self.next_token()
            return ()
        self.fail_if_unclosed(end)
        self.next_token()
        items.append(self.parse_expression(Precedence.LOWEST))
        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            self.fail_if_unclosed(end)
            self.next_token()
            items.append(self.parse_expression(Precedence.LOWEST))
        self.expect_peek(end)
        return tuple(items)

    def parse_array_literal(self) -> Expression:
        return ArrayLiteral(self.parse_expression_list(TokenType.RBRACKET))

    def parse_hash_literal(self) -> Expression:
        pairs: List[Tuple[Expression, Expression]] = []
        while not self.peek_token_is(TokenType.RBRACE):
            self.fail_if_unclosed(TokenType.RBRACE)
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)
            self.expect_peek(TokenType.COLON)
            self.next_token()
            value = self.parse_expression(Precedence.LOWEST)
            pairs.append((key, value))
            if not self.peek_token_is(TokenType.RBRACE):
                self.fail_if_unclosed(TokenType.RBRACE)
                self.expect_peek(TokenType.COMMA)
        self.expect_peek(TokenType.RBRACE)
        return HashLiteral(tuple(pairs))

    def parse_index_expression(self, left: Expression) -> Expression:
        self.next_token()
        index = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenType.RBRACKET)
        return IndexExpression(left, index)


def parse(source: str, accumulate_errors: bool = True) -> Tuple[Program, List[str]]:
    """Parse Monkey source into a Program and the list of syntax errors."""
    parser = Parser(Lexer(source), accumulate_errors=accumulate_errors)
    program = parser.parse_program()
    return program, parser.errors


def parse_program(source: str) -> Program:
    """Parse Monkey source code into a Program AST.

    Raises ParseError carrying every syntax error message if the source
    does not parse.
    """
    program, errors = parse(source)
    if errors:
        raise ParseError(errors)
    return program
