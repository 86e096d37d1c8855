"""Lexical analysis of load-balancer configuration commands."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterator
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Kinds of token produced by the tokenizer."""

    # Command actions
    ADD = enum.auto()
    BIND = enum.auto()
    SET = enum.auto()
    UNBIND = enum.auto()
    REMOVE = enum.auto()
    LINK = enum.auto()

    # Main object types
    SERVER = enum.auto()
    LB = enum.auto()
    VSERVER = enum.auto()
    SERVICE_GROUP = enum.auto()
    MONITOR = enum.auto()
    AUDIT = enum.auto()
    AUTHENTICATION = enum.auto()
    CACHE = enum.auto()
    CS = enum.auto()
    DNS = enum.auto()
    ROUTE = enum.auto()
    RESPONDER = enum.auto()
    REWRITE = enum.auto()
    POLICY = enum.auto()
    POLICY_LABEL = enum.auto()
    ACTION = enum.auto()
    CONTENT_GROUP = enum.auto()
    NAME_SERVER = enum.auto()
    ADD_REC = enum.auto()
    NS_REC = enum.auto()
    SSL = enum.auto()
    SYSTEM = enum.auto()
    TM = enum.auto()
    TUNNEL = enum.auto()
    AAA = enum.auto()
    APPFLOW = enum.auto()
    CMP = enum.auto()
    NS = enum.auto()
    SUBSCRIBER = enum.auto()
    VPN = enum.auto()
    DB = enum.auto()

    # Sub-types of compound object types
    NSLOG_ACTION = enum.auto()
    SYSLOG_ACTION = enum.auto()
    SYSLOG_POLICY = enum.auto()
    NO_AUTH_ACTION = enum.auto()
    TACACS_ACTION = enum.auto()
    TACACS_POLICY = enum.auto()
    CERT_KEY = enum.auto()
    CMD_POLICY = enum.auto()
    NSLOG_GLOBAL = enum.auto()
    SYSLOG_GLOBAL = enum.auto()
    GLOBAL = enum.auto()
    PATSET = enum.auto()
    SERVICE = enum.auto()
    USER = enum.auto()
    GROUP = enum.auto()
    PARAM = enum.auto()
    DIAMETER = enum.auto()
    ENCRYPTION_PARAMS = enum.auto()
    HTTP_PARAM = enum.auto()
    HTTP_PROFILE = enum.auto()
    RPC_NODE = enum.auto()
    TCPBUF_PARAM = enum.auto()
    GX_INTERFACE = enum.auto()

    # Identifiers and values
    IDENTIFIER = enum.auto()
    STRING = enum.auto()
    NUMBER = enum.auto()
    IP = enum.auto()

    # A parameter flag such as -comment
    PARAMETER_FLAG = enum.auto()

    # Special tokens
    EOF = enum.auto()
    ERROR = enum.auto()


_KEYWORDS: dict[str, TokenType] = {
    "add": TokenType.ADD,
    "bind": TokenType.BIND,
    "set": TokenType.SET,
    "unbind": TokenType.UNBIND,
    "remove": TokenType.REMOVE,
    "link": TokenType.LINK,
    "server": TokenType.SERVER,
    "lb": TokenType.LB,
    "vserver": TokenType.VSERVER,
    "servicegroup": TokenType.SERVICE_GROUP,
    "monitor": TokenType.MONITOR,
    "audit": TokenType.AUDIT,
    "authentication": TokenType.AUTHENTICATION,
    "cache": TokenType.CACHE,
    "cs": TokenType.CS,
    "dns": TokenType.DNS,
    "route": TokenType.ROUTE,
    "responder": TokenType.RESPONDER,
    "rewrite": TokenType.REWRITE,
    "policy": TokenType.POLICY,
    "policylabel": TokenType.POLICY_LABEL,
    "action": TokenType.ACTION,
    "contentgroup": TokenType.CONTENT_GROUP,
    "nameserver": TokenType.NAME_SERVER,
    "addrec": TokenType.ADD_REC,
    "nsrec": TokenType.NS_REC,
    "ssl": TokenType.SSL,
    "system": TokenType.SYSTEM,
    "tm": TokenType.TM,
    "tunnel": TokenType.TUNNEL,
    "aaa": TokenType.AAA,
    "appflow": TokenType.APPFLOW,
    "cmp": TokenType.CMP,
    "ns": TokenType.NS,
    "subscriber": TokenType.SUBSCRIBER,
    "vpn": TokenType.VPN,
    "db": TokenType.DB,
    "nslogaction": TokenType.NSLOG_ACTION,
    "syslogaction": TokenType.SYSLOG_ACTION,
    "syslogpolicy": TokenType.SYSLOG_POLICY,
    "noauthaction": TokenType.NO_AUTH_ACTION,
    "tacacsaction": TokenType.TACACS_ACTION,
    "tacacspolicy": TokenType.TACACS_POLICY,
    "certkey": TokenType.CERT_KEY,
    "cmdpolicy": TokenType.CMD_POLICY,
    "nslogglobal": TokenType.NSLOG_GLOBAL,
    "syslogglobal": TokenType.SYSLOG_GLOBAL,
    "global": TokenType.GLOBAL,
    "patset": TokenType.PATSET,
    "service": TokenType.SERVICE,
    "user": TokenType.USER,
    "group": TokenType.GROUP,
    "parameter": TokenType.PARAM,
    "param": TokenType.PARAM,
    "diameter": TokenType.DIAMETER,
    "encryptionparams": TokenType.ENCRYPTION_PARAMS,
    "httpparam": TokenType.HTTP_PARAM,
    "httpprofile": TokenType.HTTP_PROFILE,
    "rpcnode": TokenType.RPC_NODE,
    "tcpbufparam": TokenType.TCPBUF_PARAM,
    "gxinterface": TokenType.GX_INTERFACE,
}


@dataclass(frozen=True)
class Token:
    """A lexical token with its position in the input."""

    type: TokenType
    value: str = ""
    line: int = 0
    column: int = 0


def _is_word_char(ch: str) -> bool:
    return ch.isalpha() or ch.isdecimal() or ch == "_"


def _is_identifier_char(ch: str) -> bool:
    return _is_word_char(ch) or ch in ("-", ":", ".") and ch != ""


def _is_ip_address(value: str) -> bool:
    parts = value.split(".")
    if len(parts) != 4:
        return False
    return all(1 <= len(part) <= 3 and part.isdecimal() for part in parts)


def _classify(value: str) -> TokenType:
    keyword = _KEYWORDS.get(value.lower())
    if keyword is not None:
        return keyword
    if _is_ip_address(value):
        return TokenType.IP
    if all(ch.isdecimal() for ch in value):
        return TokenType.NUMBER
    return TokenType.IDENTIFIER


class Tokenizer:
    """Splits a command line into tokens.

    Iterating over a tokenizer yields tokens up to and including the first
    EOF or ERROR token.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._line = 1
        self._column = 1
        self._current = ""
        self._advance()

    def _advance(self) -> None:
        if self._pos >= len(self._text):
            self._current = ""
        else:
            ch = self._text[self._pos]
            # A NUL character ends the input.
            self._current = "" if ch == "\0" else ch
        self._pos += 1
        if self._current == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

    def _read_while(self, predicate: Callable[[str], bool]) -> str:
        chars = []
        while self._current and predicate(self._current):
            chars.append(self._current)
            self._advance()
        return "".join(chars)

    def _skip_whitespace(self) -> None:
        self._read_while(lambda ch: ch.isspace() and ch != "\n")

    def _read_string(self) -> str:
        quote = self._current
        self._advance()
        chars = []
        while self._current and self._current != quote:
            if self._current == "\\":
                self._advance()
                if self._current:
                    chars.append(self._current)
                    self._advance()
            else:
                chars.append(self._current)
                self._advance()
        if self._current == quote:
            self._advance()
        return "".join(chars)

    def _read_parameter(self) -> str:
        flag = self._current
        self._advance()
        return flag + self._read_while(_is_word_char)

    def next_token(self) -> Token:
        """Return the next token; EOF once the input is exhausted."""
        while True:
            self._skip_whitespace()
            line, column = self._line, self._column
            ch = self._current

            if ch == "":
                return Token(TokenType.EOF, "", line, column)
            if ch in ("\n", "\r"):
                self._advance()
                continue
            if ch in ('"', "'"):
                return Token(TokenType.STRING, self._read_string(), line, column)
            if ch == "-":
                return Token(TokenType.PARAMETER_FLAG, self._read_parameter(), line, column)
            if ch == ".":
                self._advance()
                return Token(TokenType.IDENTIFIER, ".", line, column)
            if _is_word_char(ch):
                value = self._read_while(_is_identifier_char)
                return Token(_classify(value), value, line, column)

            self._advance()
            return Token(TokenType.ERROR, f"unexpected character: {ch}", line, column)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type in (TokenType.EOF, TokenType.ERROR):
                return


def tokenize_command(command: str) -> list[Token]:
    """Tokenize a complete command line, ending with an EOF or ERROR token."""
    return list(Tokenizer(command))