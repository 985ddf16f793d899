"""
parse.py

Parses the numeric expressions entered for rotations and integer counts.

An expression is built from decimal literals, + - * / and parentheses.
Unicode vulgar fractions (http://unicodefractions.com) are accepted as
shorthand: each glyph reads as "+(n/d)", so "1½" is 1.5 and "-¾" is -0.75.
Evaluation is done by a small recursive-descent parser; the expression text
cannot reach anything but arithmetic.
"""

import math
import re

from qop.config import DEFAULT_CONFIG
from qop.errors import (
    ExpressionError,
    IntegerExpected,
    InvalidNumber,
    NumberExpected,
)

_FRACTIONS = {
    "½": (1, 2),
    "⅓": (1, 3),
    "⅔": (2, 3),
    "¼": (1, 4),
    "¾": (3, 4),
    "⅕": (1, 5),
    "⅖": (2, 5),
    "⅗": (3, 5),
    "⅘": (4, 5),
    "⅙": (1, 6),
    "⅚": (5, 6),
    "⅐": (1, 7),
    "⅛": (1, 8),
    "⅜": (3, 8),
    "⅝": (5, 8),
    "⅞": (7, 8),
    "⅑": (1, 9),
    "⅒": (1, 10),
}

_GLYPHS = str.maketrans({
    **{glyph: f" +({n}/{d})" for glyph, (n, d) in _FRACTIONS.items()},
    "⅟": " +1/ ",
    "⁄": " / ",
})

_TOKEN = re.compile(r"\s*(?:(\d+(?:\.\d*)?|\.\d+)|(\S))")


def tokenize(text):
    """Split an expression into ("number", value) and ("op", char) tokens."""
    tokens = []
    for match in _TOKEN.finditer(text):
        number, char = match.groups()
        if number is not None:
            tokens.append(("number", float(number)))
        else:
            tokens.append(("op", char))
    return tokens


def _divide(numerator, denominator):
    # IEEE semantics: x/0 is a signed infinity and 0/0 is NaN
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


class _ExpressionParser:
    """
    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := ("+" | "-") unary | primary
    primary    := number | "(" expression ")"
    """

    def __init__(self, tokens, max_depth):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth

    def parse(self):
        if not self.tokens:
            raise ExpressionError("Empty expression")
        value = self.expression()
        if self.pos < len(self.tokens):
            raise ExpressionError(f"Unexpected '{self._text(self.tokens[self.pos])}'")
        return value

    @staticmethod
    def _text(token):
        kind, value = token
        return f"{value:g}" if kind == "number" else value

    def _peek_op(self, chars):
        if self.pos < len(self.tokens):
            kind, value = self.tokens[self.pos]
            if kind == "op" and value in chars:
                self.pos += 1
                return value
        return None

    def _nest(self):
        self.depth += 1
        if self.depth > self.max_depth:
            raise ExpressionError("Expression nested too deeply")

    def expression(self):
        value = self.term()
        while True:
            op = self._peek_op("+-")
            if op is None:
                return value
            rhs = self.term()
            value = value + rhs if op == "+" else value - rhs

    def term(self):
        value = self.unary()
        while True:
            op = self._peek_op("*/")
            if op is None:
                return value
            rhs = self.unary()
            value = value * rhs if op == "*" else _divide(value, rhs)

    def unary(self):
        op = self._peek_op("+-")
        if op is None:
            return self.primary()
        self._nest()
        value = self.unary()
        self.depth -= 1
        return -value if op == "-" else value

    def primary(self):
        if self.pos >= len(self.tokens):
            raise ExpressionError("Unexpected end of expression")
        kind, value = self.tokens[self.pos]
        self.pos += 1
        if kind == "number":
            return value
        if value == "(":
            self._nest()
            result = self.expression()
            if self._peek_op(")") is None:
                raise ExpressionError("Missing ')'")
            self.depth -= 1
            return result
        raise ExpressionError(f"Unexpected '{value}'")


def evaluate_expression(text, config=DEFAULT_CONFIG):
    """
    Evaluate an arithmetic expression, accepting unicode fraction glyphs.
    Division by zero gives an infinity or NaN rather than an error.
    """
    if len(text) > config.max_expression_length:
        raise ExpressionError(
            f"Expression longer than {config.max_expression_length} characters")
    tokens = tokenize(text.translate(_GLYPHS))
    return _ExpressionParser(tokens, config.max_expression_depth).parse()


def parse_real(text):
    """Parse an expression expected to result in a finite real number."""
    number = evaluate_expression(text)
    if not math.isfinite(number):
        raise NumberExpected()
    return number


def parse_rotation(text):
    """
    Parse a rotation expression, in whole turns.

    Raises NumberExpected for a NaN result and InvalidNumber for an
    infinite one.
    """
    rotation = evaluate_expression(text)
    if math.isnan(rotation):
        raise NumberExpected()
    if math.isinf(rotation):
        raise InvalidNumber()
    return rotation


def parse_integer(text):
    """Parse an expression expected to result in an integer."""
    number = evaluate_expression(text)
    if not number.is_integer():
        raise IntegerExpected()
    return int(number)
