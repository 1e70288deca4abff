"""
Output Sanitizer - Remove a fenced code block wrapping a model response.

Models sometimes wrap the whole answer in a Markdown code fence even when
asked not to. Only a fence that spans the entire (trimmed) response is
removed; anything else is returned untouched.
"""

import re


FENCE_PATTERN = re.compile(
    r"\A```[ \t]*[\w.+#-]*[ \t]*\n"  # opening fence with optional language tag
    r"(?:(?P<body>.*)\n)?"
    r"```[ \t]*\Z",
    re.DOTALL,
)

# A fence line inside the body means the response holds several blocks.
INNER_FENCE_PATTERN = re.compile(r"^```", re.MULTILINE)


def strip_code_fence(text: str) -> str:
    """
    Return the body of a response wrapped in a single code fence.

    Args:
        text: Raw model response.

    Returns:
        The inner content if the trimmed text is exactly one fenced block,
        otherwise ``text`` unchanged.
    """
    match = FENCE_PATTERN.match(text.strip())
    if match is None:
        return text
    body = match.group("body") or ""
    if INNER_FENCE_PATTERN.search(body):
        return text
    return body
