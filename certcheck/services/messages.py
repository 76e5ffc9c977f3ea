"""Operator notification templates."""

from html import escape
from pathlib import Path

from certcheck.schemas.triage import Invalid

REGULAR_CHECK_SUBJECT = "Certificate check: invalid certificate in service"
INITIAL_CHECK_SUBJECT = "Certificate check: new certificate rejected"

REGULAR_CHECK_TEMPLATE = """\
<html>
<body>
<p>The certificate <b>{file_name}</b> failed the periodic validity check.</p>
<p>Reason: {reasons}</p>
<p>{location}</p>
</body>
</html>
"""

INITIAL_CHECK_TEMPLATE = """\
<html>
<body>
<p>The new certificate <b>{file_name}</b> failed its initial validity check and was not put in service.</p>
<p>Reason: {reasons}</p>
<p>{location}</p>
</body>
</html>
"""


def _render(template: str, invalid: Invalid, invalid_dir: Path, kept: bool) -> str:
    if kept:
        location = "The file was left in place."
    else:
        location = f"The file was moved to <code>{escape(str(invalid_dir))}</code>."
    return template.format(
        file_name=escape(invalid.file_name),
        reasons=escape(invalid.reason),
        location=location,
    )


def regular_check_message(invalid: Invalid, invalid_dir: Path, kept: bool = False) -> tuple[str, str]:
    return REGULAR_CHECK_SUBJECT, _render(REGULAR_CHECK_TEMPLATE, invalid, invalid_dir, kept)


def initial_check_message(invalid: Invalid, invalid_dir: Path, kept: bool = False) -> tuple[str, str]:
    return INITIAL_CHECK_SUBJECT, _render(INITIAL_CHECK_TEMPLATE, invalid, invalid_dir, kept)
