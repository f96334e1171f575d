"""Composition of the wire payload from a decoded email request.

The body comes from one fixed plain-text template. Names are inserted
verbatim: autoescaping is off and nothing is sanitized.
"""

import logging
from typing import Optional

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from relay.domain.models import EmailPayload, EmailRequest

from .models import RelayError

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """Renders the plain-text email body with Jinja2.

    Undefined variables raise instead of rendering as empty strings.
    """

    def __init__(
        self,
        template_dir: str = "email_templates",
        body_template: str = "shared_files_body.txt.j2",
    ):
        self.body_template_name = body_template
        self.env = Environment(
            loader=PackageLoader("relay.notifications", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=False,
        )

    def render_body(self, recipient_name: str, user_name: str) -> str:
        """Render the body for one recipient.

        Raises:
            RelayError: If the template cannot be loaded or rendered
        """
        try:
            template = self.env.get_template(self.body_template_name)
            return template.render(recipient_name=recipient_name, user_name=user_name)
        except TemplateError as e:
            logger.error(f"Email template rendering failed: {e}", exc_info=True)
            raise RelayError(f"Email template rendering failed: {e}") from e


class MessageComposer:
    """Maps an EmailRequest to the EmailPayload sent to the notification API."""

    def __init__(self, renderer: Optional[TemplateRenderer] = None):
        self.renderer = renderer or TemplateRenderer()

    def compose(self, request: EmailRequest) -> EmailPayload:
        """Copy from/to/subject verbatim and render the fixed body."""
        return EmailPayload(
            from_=request.from_,
            to=request.to,
            subject=request.subject,
            text=self.renderer.render_body(
                recipient_name=request.recipient_name,
                user_name=request.user_name,
            ),
        )
