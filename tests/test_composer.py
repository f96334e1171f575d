"""Tests for payload composition from the fixed email template."""

import pytest

from relay.domain.models import EmailPayload, EmailRequest
from relay.notifications import MessageComposer, RelayError, TemplateRenderer

EXPECTED_BODY = (
    "Hello Bob,\n"
    "\n"
    "Alice has shared some files with you through Futura.\n"
    "\n"
    "You can access your shared files at: https://futura.app\n"
    "\n"
    "Best regards,\n"
    "The Futura Team"
)


@pytest.fixture
def request_model():
    return EmailRequest(
        from_="noreply@futura.app",
        to="bob@example.com",
        subject="Files shared with you",
        text="client seed that is never sent",
        user_name="Alice",
        recipient_name="Bob",
    )


class TestTemplateRenderer:
    """Tests for the Jinja2 body template."""

    def test_renders_exact_body(self):
        assert TemplateRenderer().render_body(recipient_name="Bob", user_name="Alice") == EXPECTED_BODY

    def test_names_inserted_verbatim(self):
        body = TemplateRenderer().render_body(
            recipient_name="<b>Bob</b> & co", user_name="{{ Alice }}\n"
        )

        assert body.startswith("Hello <b>Bob</b> & co,\n")
        assert "{{ Alice }}\n has shared some files" in body

    def test_empty_names(self):
        body = TemplateRenderer().render_body(recipient_name="", user_name="")
        assert body.startswith("Hello ,\n\n has shared some files")

    def test_missing_template_raises_relay_error(self):
        renderer = TemplateRenderer(body_template="does_not_exist.txt.j2")

        with pytest.raises(RelayError, match="Email template rendering failed"):
            renderer.render_body(recipient_name="Bob", user_name="Alice")


class TestMessageComposer:
    """Tests for EmailRequest -> EmailPayload mapping."""

    def test_copies_header_fields(self, request_model):
        payload = MessageComposer().compose(request_model)

        assert isinstance(payload, EmailPayload)
        assert payload.from_ == "noreply@futura.app"
        assert payload.to == "bob@example.com"
        assert payload.subject == "Files shared with you"

    def test_body_replaces_seed_text(self, request_model):
        payload = MessageComposer().compose(request_model)

        assert payload.text == EXPECTED_BODY
        assert "client seed" not in payload.text

    def test_uses_injected_renderer(self, request_model):
        class FixedRenderer:
            def render_body(self, recipient_name, user_name):
                return f"{user_name}->{recipient_name}"

        payload = MessageComposer(renderer=FixedRenderer()).compose(request_model)

        assert payload.text == "Alice->Bob"
