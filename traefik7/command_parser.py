"""Syntax analysis of tokenized load-balancer configuration commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .tokenizer import Token, TokenType, tokenize_command


class CommandSyntaxError(ValueError):
    """Raised when a command line cannot be tokenized or parsed."""


@dataclass
class F5Command:
    """A parsed configuration command."""

    action: str
    object_type: str
    name: str
    arguments: list[str] = field(default_factory=list)
    parameters: dict[str, str] = field(default_factory=dict)


_ACTIONS = frozenset(
    {
        TokenType.ADD,
        TokenType.BIND,
        TokenType.SET,
        TokenType.UNBIND,
        TokenType.REMOVE,
        TokenType.LINK,
    }
)

# Tokens that may continue a compound object type such as "lb vserver".
_CONTINUATION_TYPES = frozenset(
    {
        TokenType.SERVER,
        TokenType.LB,
        TokenType.VSERVER,
        TokenType.SERVICE_GROUP,
        TokenType.MONITOR,
        TokenType.AUDIT,
        TokenType.AUTHENTICATION,
        TokenType.CACHE,
        TokenType.CS,
        TokenType.DNS,
        TokenType.ROUTE,
        TokenType.RESPONDER,
        TokenType.REWRITE,
        TokenType.POLICY,
        TokenType.ACTION,
        TokenType.CONTENT_GROUP,
        TokenType.NAME_SERVER,
        TokenType.ADD_REC,
        TokenType.NS_REC,
        TokenType.SSL,
        TokenType.SYSTEM,
        TokenType.TM,
        TokenType.TUNNEL,
        TokenType.AAA,
        TokenType.APPFLOW,
        TokenType.CMP,
        TokenType.NS,
        TokenType.SUBSCRIBER,
        TokenType.VPN,
        TokenType.DB,
        TokenType.NSLOG_ACTION,
        TokenType.SYSLOG_ACTION,
        TokenType.SYSLOG_POLICY,
        TokenType.NO_AUTH_ACTION,
        TokenType.TACACS_ACTION,
        TokenType.TACACS_POLICY,
        TokenType.CERT_KEY,
        TokenType.CMD_POLICY,
    }
)

# Tokens accepted as a component of an object type.
_OBJECT_TYPE_TYPES = _CONTINUATION_TYPES | {
    TokenType.POLICY_LABEL,
    TokenType.NSLOG_GLOBAL,
    TokenType.SYSLOG_GLOBAL,
    TokenType.GLOBAL,
    TokenType.PATSET,
    TokenType.SERVICE,
    TokenType.USER,
    TokenType.GROUP,
    TokenType.PARAM,
    TokenType.DIAMETER,
    TokenType.ENCRYPTION_PARAMS,
    TokenType.HTTP_PARAM,
    TokenType.HTTP_PROFILE,
    TokenType.RPC_NODE,
    TokenType.TCPBUF_PARAM,
    TokenType.GX_INTERFACE,
    TokenType.IDENTIFIER,
}

_VALUE_TYPES = frozenset(
    {TokenType.STRING, TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.IP}
)

_EOF = Token(TokenType.EOF)


class CommandParser:
    """Builds an :class:`F5Command` from a sequence of tokens."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = list(tokens)
        self._pos = 0
        self._current = _EOF
        self._advance()

    def _advance(self) -> Token:
        previous = self._current
        if self._pos < len(self._tokens):
            self._current = self._tokens[self._pos]
            self._pos += 1
        else:
            self._current = _EOF
        return previous

    def _at_end_of_arguments(self) -> bool:
        return self._current.type in (TokenType.EOF, TokenType.PARAMETER_FLAG)

    def _parse_action(self) -> str:
        if self._current.type not in _ACTIONS:
            raise CommandSyntaxError(
                f"expected action (add, bind, set, etc.), got "
                f"{self._current.type.name} at line {self._current.line}"
            )
        return self._advance().value

    def _parse_object_type(self) -> str:
        parts: list[str] = []
        while self._current.type in _OBJECT_TYPE_TYPES:
            parts.append(self._advance().value)
            if self._at_end_of_arguments():
                break
            if self._current.type not in _CONTINUATION_TYPES:
                break
        if not parts:
            raise CommandSyntaxError(
                "expected object type (server, lb vserver, serviceGroup, etc.), "
                f"got {self._current.type.name} ({self._current.value}) "
                f"at line {self._current.line}"
            )
        return " ".join(parts)

    def _parse_object_name(self) -> str:
        current = self._current
        if current.type in _VALUE_TYPES:
            return self._advance().value
        if not self._at_end_of_arguments() and current.value:
            return self._advance().value
        raise CommandSyntaxError(
            "expected object name (string, identifier, number, or IP), "
            f"got {current.type.name} ({current.value}) at line {current.line}"
        )

    def _parse_arguments(self) -> list[str]:
        arguments: list[str] = []
        while not self._at_end_of_arguments() and self._current.value:
            arguments.append(self._advance().value)
        return arguments

    def _parse_parameters(self) -> dict[str, str]:
        parameters: dict[str, str] = {}
        while self._current.type is TokenType.PARAMETER_FLAG:
            flag = self._advance().value
            value = self._advance().value if self._current.type in _VALUE_TYPES else ""
            parameters[flag] = value
        return parameters

    def parse_command(self) -> F5Command:
        """Parse one complete command from the tokens."""
        if self._current.type is TokenType.EOF:
            raise CommandSyntaxError("empty command")
        action = self._parse_action()
        object_type = self._parse_object_type()
        name = self._parse_object_name()
        arguments = self._parse_arguments()
        parameters = self._parse_parameters()
        return F5Command(action, object_type, name, arguments, parameters)


def parse_f5_command(command_line: str) -> F5Command | None:
    """Parse a command line; return None for blank lines and comments."""
    command_line = command_line.strip()
    if not command_line or command_line.startswith("#"):
        return None
    tokens = tokenize_command(command_line)
    for token in tokens:
        if token.type is TokenType.ERROR:
            raise CommandSyntaxError(f"tokenization error: {token.value}")
    return CommandParser(tokens).parse_command()