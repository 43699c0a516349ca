"""Markdown rendering of assistant replies."""

from writeright.models.corrections import AssistantReply, CorrectionResult

REPORT_HEADER = "✍️ **WriteRight Writing Assistant**"
REPORT_TIP = (
    '*Tip: Specify context like "professional", "academic", or "casual" '
    "for better results.*"
)
ERROR_MESSAGE = (
    "⚠️ Sorry, I encountered an error processing your writing. Please try again."
)


def format_report(reply: AssistantReply) -> str:
    """Render a reply as the markdown message sent back to chat clients."""
    parts = [f"{REPORT_HEADER}\n\n"]

    if reply.text:
        parts.append(f"**Improved Text:**\n{reply.text}\n\n")

    if reply.explanation:
        parts.append(f"**Explanation:**\n{reply.explanation}\n\n")

    if reply.suggestions:
        parts.append("**Suggestions:**\n")
        parts.extend(f"• {suggestion}\n" for suggestion in reply.suggestions)
        parts.append("\n")

    parts.append("---\n")
    parts.append(REPORT_TIP)
    return "".join(parts)


def explain_corrections(corrections: CorrectionResult) -> str:
    """One line per correction; recurring mistakes are called out."""
    lines = []
    for error in corrections.errors:
        line = f"- '{error.original}' → '{error.correction}': {error.explanation}"
        if error.is_recurring:
            line += " (you've made this mistake before)"
        lines.append(line)
    return "\n".join(lines) if lines else "No grammar or spelling issues found."
