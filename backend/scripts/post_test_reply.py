#!/usr/bin/env python3
"""Simulated email relay delivery for inbound webhook testing.

Posts a reply to the inbound email webhook the way the relay (SendGrid
Inbound Parse) does: multipart/form-data with from, to, subject, text,
html and envelope fields.

Usage:
    # Reply to a ticket
    python scripts/post_test_reply.py --ticket-id 550e8400-e29b-41d4-a716-446655440000 \
        --from "Jane Doe <jane@example.com>" --body "Thanks, that helps!"

    # Include quoted history to check reply stripping
    python scripts/post_test_reply.py --ticket-id 550e8400-e29b-41d4-a716-446655440000 \
        --from jane@example.com --body "Thanks!" --quote "Your report is attached."

    # Print the form fields instead of posting
    python scripts/post_test_reply.py --ticket-id 550e8400-e29b-41d4-a716-446655440000 \
        --from jane@example.com --body "Hello" --dry-run
"""

import argparse
import json
import sys
from typing import Dict, Optional

import httpx


def build_fields(
    from_email: str,
    to_email: str,
    subject: str,
    body: str,
    quote: Optional[str] = None,
    html: bool = False,
) -> Dict[str, str]:
    """Build relay form fields for a reply.

    Args:
        from_email: From header, optionally with display name
        to_email: Support inbox address
        subject: Subject line (should contain [#<ticket-id>])
        body: New reply text
        quote: Previous message to append as quoted history
        html: Send the body as HTML only (no text part)

    Returns:
        Dict[str, str]: Form fields
    """
    text = body
    if quote:
        quoted = "\n".join(f"> {line}" for line in quote.splitlines())
        text = f"{body}\n\nOn Mon, Support <{to_email}> wrote:\n{quoted}"

    fields = {
        "from": from_email,
        "to": to_email,
        "subject": subject,
        "envelope": json.dumps({"to": [to_email], "from": from_email}),
    }

    if html:
        paragraphs = "".join(f"<p>{line}</p>" for line in text.splitlines())
        fields["html"] = f"<html><body>{paragraphs}</body></html>"
    else:
        fields["text"] = text

    return fields


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Post a simulated relay delivery to the inbound email webhook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        '--ticket-id',
        required=True,
        help='Ticket id to reference in the subject'
    )
    parser.add_argument(
        '--from',
        dest='from_email',
        required=True,
        help='From header (e.g. "Jane Doe <jane@example.com>")'
    )
    parser.add_argument(
        '--to',
        dest='to_email',
        default='support@portal.local',
        help='Support inbox address'
    )
    parser.add_argument(
        '--subject',
        default='Re: Your request',
        help='Subject text (ticket reference is appended)'
    )
    parser.add_argument(
        '--body',
        default='Thanks for the update.',
        help='Reply text'
    )
    parser.add_argument(
        '--quote',
        help='Previous message to include as quoted history'
    )
    parser.add_argument(
        '--html',
        action='store_true',
        help='Send an HTML part only'
    )
    parser.add_argument(
        '--url',
        default='http://localhost:8000/api/webhooks/inbound-email',
        help='Webhook URL'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Print form fields instead of posting'
    )

    args = parser.parse_args()

    fields = build_fields(
        from_email=args.from_email,
        to_email=args.to_email,
        subject=f"{args.subject} [#{args.ticket_id}]",
        body=args.body,
        quote=args.quote,
        html=args.html,
    )

    if args.dry_run:
        print(json.dumps(fields, indent=2))
        return

    try:
        response = httpx.post(
            args.url,
            files={name: (None, value) for name, value in fields.items()},
        )
    except httpx.HTTPError as e:
        print(f"Failed to post to {args.url}: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"{response.status_code} {response.text}")


if __name__ == '__main__':
    main()
