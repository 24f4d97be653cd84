"""Reply extraction for inbound support emails.

Pure text processing used by the inbound email webhook:
- Correlation: find the ticket id embedded in a reply subject ("[#<uuid>]")
- Body cleaning: HTML to text, then cut quoted history and signatures
- Sender parsing: split '"Display Name" <address>' headers

These are heuristics. When unsure they stop early, preferring a truncated
reply over stale quoted text leaking into a new ticket message.
"""

import logging
import re
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

# Ticket ids are canonical UUIDs: 32 hex digits + 4 hyphens
TICKET_ID_PATTERN = re.compile(r"\[#([a-f0-9-]{36})\]", re.IGNORECASE)

# Any bracketed reference, used to spot ids in an unexpected format
TICKET_REFERENCE_PATTERN = re.compile(r"\[#([^\]]*)\]")

SENDER_PATTERN = re.compile(r'^"?([^"<]+)"?\s*<(.+)>$')

# Lines that start quoted history
QUOTE_MARKERS = (
    re.compile(r"^>"),
    re.compile(r"^On .+ wrote:$", re.IGNORECASE),
    re.compile(r"^-{3,}"),
    re.compile(r"^_{3,}"),
)

# Lines that start a signature block
SIGNATURE_MARKERS = (
    re.compile(r"^--\s*$"),
    re.compile(r"^Sent from my", re.IGNORECASE),
    re.compile(r"^Get Outlook", re.IGNORECASE),
)

_STYLE_BLOCK = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_SCRIPT_BLOCK = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]+>")
_BLANK_LINE_RUN = re.compile(r"\n\s*\n")

_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)


def extract_ticket_id(subject: Optional[str]) -> Optional[str]:
    """Extract the ticket correlation id from an email subject.

    Examples:
        "Re: Help [#550e8400-e29b-41d4-a716-446655440000]"
            → '550e8400-e29b-41d4-a716-446655440000'
        "Re: Help" → None

    Args:
        subject: Email subject line

    Returns:
        Optional[str]: The id exactly as written (case preserved), or None
    """
    if not subject:
        return None

    match = TICKET_ID_PATTERN.search(subject)
    if match:
        return match.group(1)

    reference = TICKET_REFERENCE_PATTERN.search(subject)
    if reference:
        # Looks like one of our references but not a UUID; an id format
        # change upstream would otherwise go unnoticed.
        logger.warning(
            f"Subject contains ticket reference in unexpected format: "
            f"[#{reference.group(1)}]"
        )

    return None


def html_to_text(html: str) -> str:
    """Convert an HTML email body to plain text.

    Drops <style>/<script> blocks, turns every other tag into a line
    break, decodes the common entities and collapses blank line runs.
    """
    text = _STYLE_BLOCK.sub("", html)
    text = _SCRIPT_BLOCK.sub("", text)
    text = _TAG.sub("\n", text)
    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)
    text = _BLANK_LINE_RUN.sub("\n\n", text)
    return text.strip()


def is_quote_boundary(line: str) -> bool:
    """Check whether a line starts quoted reply history."""
    line = line.rstrip("\r")
    return any(pattern.match(line) for pattern in QUOTE_MARKERS)


def is_signature_boundary(line: str) -> bool:
    """Check whether a line starts a signature block."""
    line = line.rstrip("\r")
    return any(pattern.match(line) for pattern in SIGNATURE_MARKERS)


def strip_quoted_reply(message: str) -> str:
    """Keep only the lines above the first quote or signature marker."""
    kept: List[str] = []

    for line in message.split("\n"):
        if is_quote_boundary(line) or is_signature_boundary(line):
            break
        kept.append(line)

    return "\n".join(kept).strip()


def extract_message_body(text: Optional[str], html: Optional[str] = None) -> str:
    """Extract the new content of a reply email.

    Prefers the plain text part; falls back to converting the HTML part.

    Args:
        text: Plain text body (may be empty)
        html: HTML body (optional)

    Returns:
        str: Cleaned message, or "" when nothing new was written
    """
    message = text or ""

    if not message and html:
        message = html_to_text(html)

    return strip_quoted_reply(message)


def parse_sender(from_header: str) -> Tuple[Optional[str], str]:
    """Split a From header into display name and address.

    Examples:
        'Jane Doe <jane@x.com>' → ('Jane Doe', 'jane@x.com')
        '"Doe, Jane" <jane@x.com>' → ('Doe, Jane', 'jane@x.com')
        'jane@x.com' → (None, 'jane@x.com')

    Returns:
        Tuple of (display name or None, email address)
    """
    match = SENDER_PATTERN.match(from_header)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    return None, from_header
