"""Parser for C#-like type strings: Ns.IRepository<Order>, IMap<,>, ILogger<T>."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from dicheck.domain.model.type_ref import TypeRef

if TYPE_CHECKING:
    from collections.abc import Iterable

_TOKEN = re.compile(r"\s*(?:(?P<name>[A-Za-z_@][\w.`]*(?:\[\])*\??)|(?P<punct>[<>,]))")

# C# convention: T, T1, TKey, TEntity
_PARAMETER_NAME = re.compile(r"T(?:[A-Z0-9]\w*)?$")


class _Parser:
    """Recursive descent over the token stream."""

    def __init__(self, text: str, parameters: frozenset[str] | None) -> None:
        self._text = text
        self._parameters = parameters
        self._tokens = self._tokenize(text)
        self._pos = 0

    @staticmethod
    def _tokenize(text: str) -> list[str]:
        tokens: list[str] = []
        pos = 0
        stripped = text.rstrip()
        while pos < len(stripped):
            match = _TOKEN.match(stripped, pos)
            if match is None:
                raise ValueError(f"unexpected character {stripped[pos]!r} in type '{text}'")
            tokens.append(match.group("name") or match.group("punct"))
            pos = match.end()
        return tokens

    def _peek(self) -> str | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _take(self) -> str:
        token = self._peek()
        if token is None:
            raise ValueError(f"unexpected end of type '{self._text}'")
        self._pos += 1
        return token

    def _expect(self, punct: str) -> None:
        token = self._take()
        if token != punct:
            raise ValueError(f"expected '{punct}' but found '{token}' in type '{self._text}'")

    def parse(self) -> TypeRef:
        if not self._tokens:
            raise ValueError("type must not be empty")
        result = self._type()
        if self._peek() is not None:
            raise ValueError(f"unexpected '{self._peek()}' after type in '{self._text}'")
        return result

    def _type(self) -> TypeRef:
        name = self._take()
        if name in "<>,":
            raise ValueError(f"expected type name but found '{name}' in '{self._text}'")
        name = name.rstrip("?")

        if self._peek() != "<":
            if self._is_parameter(name):
                return TypeRef.parameter(name)
            return TypeRef(name=name)

        self._expect("<")
        arguments = self._arguments()
        self._expect(">")
        return TypeRef(name=name, arguments=arguments)

    def _arguments(self) -> tuple[TypeRef, ...]:
        # unbound form: IRepo<> or IMap<,>
        if self._peek() in (">", ","):
            arity = 1
            while self._peek() == ",":
                self._take()
                arity += 1
            return tuple(TypeRef.parameter(f"T{i}") for i in range(arity))

        arguments = [self._type()]
        while self._peek() == ",":
            self._take()
            arguments.append(self._type())
        return tuple(arguments)

    def _is_parameter(self, name: str) -> bool:
        if self._parameters is not None:
            return name in self._parameters
        return _PARAMETER_NAME.match(name) is not None


def parse_type(text: str, parameters: Iterable[str] | None = None) -> TypeRef:
    """Parse a type string into a TypeRef.

    Bare names following the C# type-parameter convention (T, TKey,
    TEntity) are type parameters unless an explicit parameter list is
    given. Unbound forms (IRepo<>, IMap<,>) get positional parameters
    T0, T1, ...

    Args:
        text: Type string, e.g. "Ns.IRepository<Order>"
        parameters: Explicit type parameter names; disables the convention

    Returns:
        Parsed type reference

    Raises:
        ValueError: If the text is not a well-formed type
    """
    if text is None:
        raise TypeError("text must not be None")
    declared = frozenset(parameters) if parameters is not None else None
    return _Parser(text, declared).parse()
