"""Register-to-register style suggestions."""

from writeright.config import load_style_map
from writeright.models.corrections import StyleReport
from writeright.models.preferences import Tone

DEFAULT_STYLE_CHANGES: list[str] = [
    "Adjusting tone and style",
    "Improving language appropriateness",
]


def analyze_style(
    text: str,
    current_context: Tone | str,
    target_context: Tone | str,
    style_map: dict[str, dict[str, list[str]]] | None = None,
) -> StyleReport:
    """Describe the changes needed to move text between registers.

    The text itself is returned unchanged; only the change list is produced.
    """
    if style_map is None:
        style_map = load_style_map()
    current, target = str(current_context), str(target_context)
    changes = style_map.get(current, {}).get(target) or DEFAULT_STYLE_CHANGES

    return StyleReport(
        improved_text=text,
        style_changes=list(changes),
        tone_adjustment=f"Adjusted from {current} to {target} tone",
    )
