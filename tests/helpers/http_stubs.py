"""Stand-ins for requests objects used by delivery tests."""

from unittest.mock import MagicMock

import requests


def make_response(status_code=200, body=b"", chunks=None):
    """Build a streamed response stand-in.

    Args:
        status_code: HTTP status to report
        body: Whole body, delivered as a single chunk
        chunks: Explicit list of chunks (overrides body)
    """
    response = MagicMock()
    response.status_code = status_code
    response.iter_content.return_value = iter(chunks if chunks is not None else [body])
    return response


def make_session(*responses):
    """A requests.Session stand-in whose POST answers with the given responses in order."""
    session = MagicMock(spec=requests.Session)
    if len(responses) == 1:
        session.post.return_value = responses[0]
    elif responses:
        session.post.side_effect = list(responses)
    return session
