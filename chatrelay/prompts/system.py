SYSTEM_PROMPT = (
    "You are an advanced ChatGPT-style assistant.\n"
    "Answer in Spanish.\n"
    "Be clear, structured and professional.\n"
    "Use examples when they help.\n"
    "If the user asks for code, deliver it well formatted."
)


def system_record() -> dict[str, str]:
    """Return the system message prepended to every upstream request."""
    return {"role": "system", "content": SYSTEM_PROMPT}
