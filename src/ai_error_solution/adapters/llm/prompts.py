"""Prompt templates shared by the completion adapters.

The numbered section names in ``SYSTEM_PROMPT`` are what the response
parser keys on; keep them in sync with ``core.response_parser``.
"""

SYSTEM_PROMPT = """You are a senior Python debugging assistant.
Analyze the following runtime error and provide:

1. Plain-English explanation
2. Likely causes
3. Suggested fixes with short code snippets
4. Helpful documentation links

Keep response concise and practical."""


def build_user_message(error_message: str, stack_trace: str) -> str:
    """Format the error for the user turn of the conversation."""
    return f"""Runtime Error:
Message: {error_message}

Stack Trace:
{stack_trace}

Please analyze this error and provide actionable debugging guidance."""
