"""
Description:
Text helpers shared by the generators: input sanitization before text is put
into a prompt, display cleaning for generated questions, and JSON extraction
from free-form model output.

Dependencies:
- app.constants.regex_patterns: For precompiled patterns.
- loguru: For logging truncation and extraction problems.

Author: @kcaparas1630
"""
import html
from typing import Optional
from loguru import logger
from app.constants.regex_patterns import REGEX_PATTERNS


def sanitize_text(text: str, max_length: int = 1000, escape_html: bool = False) -> str:
    """
    Sanitize user-provided text before it is interpolated into a prompt.

    Steps:
    1. Optional HTML entity encoding
    2. Strip leading/trailing whitespace
    3. Remove null bytes and other control characters (newlines and tabs kept)
    4. Truncate to max_length

    Args:
        text (str): The text to sanitize
        max_length (int): Maximum allowed length (default: 1000)
        escape_html (bool): Whether to HTML escape the text (default: False)

    Returns:
        str: The sanitized text, possibly empty

    Raises:
        ValueError: If text is None
    """
    if text is None:
        raise ValueError("Text cannot be None")

    text = str(text)

    if escape_html:
        text = html.escape(text)

    text = text.strip()
    text = REGEX_PATTERNS['control_chars'].sub('', text)

    if len(text) > max_length:
        text = text[:max_length]
        logger.warning(f"Text truncated to {max_length} characters")

    return text


def clean_question_text(question: str) -> str:
    """
    Strip a leading "<number>. " prefix from a question for display.

    Example:
        >>> clean_question_text("3. What is your greatest strength?")
        'What is your greatest strength?'
        >>> clean_question_text("What is your greatest strength?")
        'What is your greatest strength?'
    """
    return REGEX_PATTERNS['question_number_prefix'].sub('', question, count=1)


def extract_json_object(content: str) -> Optional[str]:
    """
    Pull the first complete JSON object out of a model response.

    Markdown code fences are removed first; then the text between the first
    "{" and its matching "}" is returned. Braces inside JSON strings are
    respected.

    Args:
        content (str): Raw model output

    Returns:
        Optional[str]: The JSON object text, or None when no object is found
    """
    if not content or not isinstance(content, str):
        return None

    content = REGEX_PATTERNS['code_fence'].sub('', content).strip()

    json_start = content.find('{')
    if json_start == -1:
        logger.warning(f"No JSON object found in model output: {content[:100]}...")
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(json_start, len(content)):
        char = content[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return content[json_start:i + 1]

    logger.warning("Unterminated JSON object in model output")
    return None
