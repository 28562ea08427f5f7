"""Tests for workflows.core.template."""

from __future__ import annotations

import pytest

from workflows.core.context import Context
from workflows.core.result import Err, Ok
from workflows.core.template import Placeholder, fulfill, placeholders


@pytest.fixture
def context() -> Context:
    return Context(env={"HOME": "/home/me", "USER": "me"}, input={"text": "hello"})


class TestFulfill:
    """Resolving placeholders against a context."""

    def test_plain_text_unchanged(self, context: Context) -> None:
        assert fulfill("no placeholders here", context) == Ok("no placeholders here")

    def test_empty_string(self, context: Context) -> None:
        assert fulfill("", context) == Ok("")

    def test_env(self, context: Context) -> None:
        assert fulfill("${env.HOME}/bin", context) == Ok("/home/me/bin")

    def test_input(self, context: Context) -> None:
        assert fulfill("say ${input.text}!", context) == Ok("say hello!")

    def test_multiple(self, context: Context) -> None:
        assert fulfill("${env.USER}:${input.text}", context) == Ok("me:hello")

    def test_whitespace_inside_braces(self, context: Context) -> None:
        assert fulfill("${ env.USER }", context) == Ok("me")

    def test_dollar_escape(self, context: Context) -> None:
        assert fulfill("cost: $$5 for ${env.USER}", context) == Ok("cost: $5 for me")

    def test_lone_dollar_kept(self, context: Context) -> None:
        assert fulfill("$HOME and $", context) == Ok("$HOME and $")

    def test_value_not_rescanned(self) -> None:
        context = Context(env={}, input={"text": "${env.SECRET}"})

        assert fulfill("${input.text}", context) == Ok("${env.SECRET}")

    def test_missing_key(self, context: Context) -> None:
        result = fulfill("${input.status_code}", context)

        assert isinstance(result, Err)
        assert "input.status_code" in result.error.message

    def test_unknown_scope(self, context: Context) -> None:
        result = fulfill("${secrets.TOKEN}", context)

        assert isinstance(result, Err)
        assert "Unknown scope 'secrets'" in result.error.message

    @pytest.mark.parametrize("template", ["${env}", "${env.}", "${}", "${.x}"])
    def test_malformed(self, context: Context, template: str) -> None:
        assert isinstance(fulfill(template, context), Err)

    def test_unterminated(self, context: Context) -> None:
        result = fulfill("abc ${env.HOME", context)

        assert isinstance(result, Err)
        assert "Unterminated" in result.error.message
        assert result.error.template == "abc ${env.HOME"


class TestPlaceholders:
    def test_lists_references(self) -> None:
        result = placeholders("${env.A} $$ ${input.b}")

        assert result == Ok([Placeholder("env", "A"), Placeholder("input", "b")])

    def test_none(self) -> None:
        assert placeholders("plain") == Ok([])

    def test_error(self) -> None:
        assert isinstance(placeholders("${nope.x}"), Err)
