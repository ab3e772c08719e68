"""
Description:
This module contains precompiled regex patterns shared by the prompt resolver,
the question generator and the display helpers.

Dependencies:
- re: Python's built-in regular expression module for pattern matching.

Author: @kcaparas1630

"""

import re

# Compile regex patterns once for better performance
REGEX_PATTERNS = {
    # "{variableName}" placeholders in prompt templates
    'placeholder': re.compile(r"\{([^{}]+)\}"),
    # "3. " style numbering the model (or a previous render) puts before a question
    'question_number_prefix': re.compile(r"^\d+\.\s+"),
    # markdown code fences around JSON answers
    'code_fence': re.compile(r"```(?:json)?", re.IGNORECASE),
    # control characters except tab/newline/carriage return
    'control_chars': re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]"),
}
