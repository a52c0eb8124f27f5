"""Credential Email Rendering — tests for the immutable template.

Tests cover:
    - Headers, greeting and signature match the registration email layout
    - Link carries env, username and secret in the URL fragment
    - Template is reusable and frozen
"""

import dataclasses

import pytest

from settle.core.render_email import (
    EmailData, build_credentials_template, credentials_link,
)


def _data(**overrides) -> EmailData:
    base = dict(
        env="qa",
        from_address="register@settle.network",
        username="alice",
        email="alice@example.org",
        mint="mint.settle.network",
        credentials_url="https://register.settle.network/credentials",
        secret="c2VjcmV0LXNlY3JldA",
    )
    base.update(overrides)
    return EmailData(**base)


def test_render_headers():
    message = build_credentials_template().render(_data())
    assert message.startswith(
        "From: Mint Registration <register@settle.network>\r\n"
        "To: alice@example.org\r\n"
        "Subject: Credentials for alice@mint.settle.network\r\n"
        "Content-Type: text/plain; charset=UTF-8\r\n"
        "Hi alice!\n"
    )


def test_render_contains_fragment_link():
    message = build_credentials_template().render(_data())
    assert (
        "https://register.settle.network/credentials"
        "#?env=qa&username=alice&secret=c2VjcmV0LXNlY3JldA\n"
    ) in message


def test_render_footer():
    message = build_credentials_template().render(_data())
    assert message.endswith("-settle\n\n[0] required to run `settle login`\n")
    assert "mint.settle.network[0]:" in message


def test_credentials_link_escapes_fragment_values():
    link = credentials_link(_data(username="a&b"))
    assert "username=a%26b" in link


def test_template_is_reusable():
    template = build_credentials_template()
    first = template.render(_data(username="alice"))
    second = template.render(_data(username="bob"))
    assert "Hi alice!" in first
    assert "Hi bob!" in second


def test_template_is_frozen():
    template = build_credentials_template()
    with pytest.raises(dataclasses.FrozenInstanceError):
        template.template = None  # type: ignore[misc]
