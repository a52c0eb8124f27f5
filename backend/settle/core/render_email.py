"""Credential Email Rendering — the message that carries a new user's secret link.

Invariants:
    - CredentialsEmailTemplate is immutable; built once at startup and passed by reference
    - Rendering is pure: same EmailData, same message
    - The link is <credentials_url>#?env=...&username=...&secret=... (fragment, never query)

Design Decisions:
    - string.Template over an engine dependency: one fixed layout, no logic in the template
    - Fragment values percent-encoded; base64url secrets pass through unchanged
"""

from dataclasses import dataclass
from string import Template
from urllib.parse import urlencode


@dataclass(frozen=True)
class EmailData:
    """Data required to render the credentials email."""
    env: str
    from_address: str
    username: str
    email: str
    mint: str
    credentials_url: str
    secret: str


_CREDENTIALS_EMAIL = (
    "From: Mint Registration <${from_address}>\r\n"
    "To: ${email}\r\n"
    "Subject: Credentials for ${username}@${mint}\r\n"
    "Content-Type: text/plain; charset=UTF-8"
    "\r\n"
    "Hi ${username}!\n"
    "\n"
    "Please click on the link below to retrieve your credentials for\n"
    "${mint}[0]:\n"
    "\n"
    "${link}\n"
    "\n"
    "Keep this link safe and secure as this is your only way to retrieve or\n"
    "roll your credentials in the future.\n"
    "\n"
    "-settle\n"
    "\n"
    "[0] required to run `settle login`\n"
)


def credentials_link(data: EmailData) -> str:
    fragment = urlencode(
        {"env": data.env, "username": data.username, "secret": data.secret},
    )
    return f"{data.credentials_url}#?{fragment}"


@dataclass(frozen=True)
class CredentialsEmailTemplate:
    """Parsed credentials email layout."""
    template: Template = Template(_CREDENTIALS_EMAIL)

    def render(self, data: EmailData) -> str:
        return self.template.substitute(
            from_address=data.from_address,
            email=data.email,
            username=data.username,
            mint=data.mint,
            link=credentials_link(data),
        )


def build_credentials_template() -> CredentialsEmailTemplate:
    return CredentialsEmailTemplate()
