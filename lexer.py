from dataclasses import dataclass
from enum import Enum, auto

class TokenType(Enum):
    WORD = auto()
    NUMBER = auto()
    QUOTE = auto()
    OPERATOR = auto()
    EOF = auto()

@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    column: int
    end: int

    def is_op(self, *ops):
        return self.type == TokenType.OPERATOR and self.value in ops

    def is_keyword(self, keyword):
        return self.type == TokenType.WORD and self.value.upper() == keyword

    def is_integer(self):
        return self.type == TokenType.NUMBER and all(is_digit(c) for c in self.value)


def is_digit(char):
    # ASCII only: str.isdigit() also accepts characters like '²'
    return bool(char) and '0' <= char <= '9'


class Lexer:
    """
    Token stream over a single line of BASIC source.

    Tokens can be pushed back with save_token() and are handed out again,
    most recently saved first, before the scanner reads any more input.
    """
    def __init__(self, source):
        self.source = source
        self.pos = 0
        self.current_char = self.source[0] if source else None
        self.saved = []

    def advance(self):
        self.pos += 1
        if self.pos < len(self.source):
            self.current_char = self.source[self.pos]
        else:
            self.current_char = None

    def skip_whitespace(self):
        while self.current_char and self.current_char.isspace():
            self.advance()

    def number(self):
        start_pos = self.pos
        while is_digit(self.current_char):
            self.advance()
        if self.current_char == '.':
            self.advance()
            while is_digit(self.current_char):
                self.advance()
        if self.current_char and self.current_char in 'eE':
            # only an exponent if digits follow, otherwise "2E" is 2 then E
            mark = self.pos
            self.advance()
            if self.current_char and self.current_char in '+-':
                self.advance()
            if is_digit(self.current_char):
                while is_digit(self.current_char):
                    self.advance()
            else:
                self.pos = mark
                self.current_char = self.source[mark]
        return self.source[start_pos:self.pos]

    def identifier(self):
        start_pos = self.pos
        while self.current_char and (self.current_char.isalnum() or self.current_char == '_'):
            self.advance()
        return self.source[start_pos:self.pos]

    def scan(self):
        self.skip_whitespace()
        start = self.pos

        if self.current_char is None:
            return Token(TokenType.EOF, "", start, start)

        if self.current_char.isalpha():
            word = self.identifier()
            return Token(TokenType.WORD, word, start, self.pos)

        if is_digit(self.current_char) or (
                self.current_char == '.' and is_digit(self.source[self.pos + 1:self.pos + 2])):
            num = self.number()
            return Token(TokenType.NUMBER, num, start, self.pos)

        char = self.current_char
        self.advance()
        if char == '"':
            return Token(TokenType.QUOTE, char, start, self.pos)
        return Token(TokenType.OPERATOR, char, start, self.pos)

    def next_token(self):
        if self.saved:
            return self.saved.pop()
        return self.scan()

    def save_token(self, token):
        self.saved.append(token)

    def peek(self):
        token = self.next_token()
        self.save_token(token)
        return token

    def has_more_tokens(self):
        return self.peek().type != TokenType.EOF

    def source_between(self, first, last):
        """Raw text from the start of `first` to the end of `last`."""
        return self.source[first.column:last.end]

    def rest_of_line(self):
        """Consumes every remaining token and returns the raw text they cover."""
        first = self.next_token()
        if first.type == TokenType.EOF:
            return ""
        last = first
        while self.has_more_tokens():
            last = self.next_token()
        return self.source_between(first, last)

    def tokenize(self):
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens
