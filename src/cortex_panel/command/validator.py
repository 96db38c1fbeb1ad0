"""Shell metacharacter detection for text interpolated into a command line."""

import re

# ; & | ` $ ( ) { } [ ] < > \ ! newline carriage-return
_DANGEROUS_METACHARACTERS = re.compile(r"[;&|`$(){}\[\]<>\\!\n\r]")


def contains_dangerous_metacharacters(text: str) -> bool:
    """Return True if ``text`` contains any shell metacharacter we refuse to pass through.

    Only character-class membership is checked; no attempt is made to parse
    the text as shell.
    """
    return _DANGEROUS_METACHARACTERS.search(text) is not None
