"""Placeholder substitution for step parameters.

Syntax:
    ${env.HOME}         value of an environment variable
    ${input.text}       output of the previous step
    $$                  a literal dollar sign

A ``$`` followed by anything other than ``{`` or ``$`` is kept as-is.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TypeAlias

from .context import Context
from .result import Err, Ok, Result

__all__ = ["SCOPES", "Placeholder", "TemplateError", "fulfill", "placeholders"]

SCOPES = ("env", "input")


@dataclass(frozen=True, slots=True)
class TemplateError:
    """Error raised while resolving a parameter template."""

    template: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} in '{self.template}'"


@dataclass(frozen=True, slots=True)
class Placeholder:
    scope: str
    name: str


_Token: TypeAlias = str | Placeholder


def _tokenize(template: str) -> Iterator[Result[_Token, TemplateError]]:
    i = 0
    n = len(template)
    while i < n:
        start = template.find("$", i)
        if start < 0:
            yield Ok(template[i:])
            return
        if start > i:
            yield Ok(template[i:start])

        nxt = template[start + 1] if start + 1 < n else ""
        if nxt == "$":
            yield Ok("$")
            i = start + 2
            continue
        if nxt != "{":
            yield Ok("$")
            i = start + 1
            continue

        end = template.find("}", start + 2)
        if end < 0:
            yield Err(TemplateError(template, "Unterminated placeholder"))
            return

        body = template[start + 2 : end].strip()
        scope, dot, name = body.partition(".")
        scope = scope.strip()
        name = name.strip()
        if not dot or not name:
            yield Err(TemplateError(template, f"Invalid placeholder '${{{body}}}'"))
            return
        if scope not in SCOPES:
            yield Err(TemplateError(template, f"Unknown scope '{scope}'"))
            return

        yield Ok(Placeholder(scope=scope, name=name))
        i = end + 1


def placeholders(template: str) -> Result[list[Placeholder], TemplateError]:
    """List the placeholders referenced by a template, without resolving them."""
    found: list[Placeholder] = []
    for token in _tokenize(template):
        if isinstance(token, Err):
            return token
        if isinstance(token.value, Placeholder):
            found.append(token.value)
    return Ok(found)


def fulfill(template: str, context: Context) -> Result[str, TemplateError]:
    """Resolve every placeholder in ``template`` against ``context``.

    Returns:
        Ok with the expanded string, or Err if a placeholder is malformed
        or names a key the context does not have.
    """
    parts: list[str] = []
    for token in _tokenize(template):
        if isinstance(token, Err):
            return token
        value = token.value
        if isinstance(value, str):
            parts.append(value)
            continue

        scope = context.scope(value.scope)
        if scope is None or value.name not in scope:
            return Err(TemplateError(template, f"'{value.scope}.{value.name}' is not set"))
        parts.append(scope[value.name])
    return Ok("".join(parts))
