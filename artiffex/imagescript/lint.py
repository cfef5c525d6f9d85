"""ImageScript linter - line diagnostics for the script editor."""

import re
from typing import List

from artiffex.imagescript.models import LintError

# a property that ends the line right after its closing quote
_UNTERMINATED_PROPERTY_RE = re.compile(r'\w+\s*:\s*".*"\s*$')


def lint_script(code: str) -> List[LintError]:
    errors: List[LintError] = []
    for number, line in enumerate((code or "").split("\n"), start=1):
        if _UNTERMINATED_PROPERTY_RE.search(line.strip()):
            errors.append(LintError(line=number, message="Missing semicolon at the end of the line."))
    return errors
