"""
Prompts - Instruction text sent to the model for one transformation.
"""

from .domain.entities import FileSnapshot


TRANSLATOR_ROLE = "You are a bi-directional file translator."

RESPONSE_RULES = (
    "Respond with ONLY the converted content, "
    "no explanations and no markdown code blocks around it."
)


def build_translation_prompt(source: FileSnapshot, target: FileSnapshot) -> str:
    """
    Build the instruction for converting ``source`` into ``target``'s form.

    When the target already has content, the model sees it and is asked to
    match its existing style/language/format with minimal changes. When the
    target is empty, the model must infer the format from the file name.

    Args:
        source: Snapshot whose content is converted.
        target: Snapshot the result will overwrite.

    Returns:
        The full prompt text.
    """
    source_name = source.name
    target_name = target.name

    sections = [
        f'{TRANSLATOR_ROLE} Your task is to convert the content from "{source_name}" '
        f'to match the style/language/format of "{target_name}".',
        f"Source file ({source_name}):\n```\n{source.content}\n```",
    ]

    if target.has_content:
        sections.append(f"Current target file ({target_name}):\n```\n{target.content}\n```")
        sections.append(
            "Please convert the source file content to match the target file's "
            "existing style/language/format. Make minimal changes - only what's "
            "necessary for the conversion. Keep the structure of the target file "
            "wherever the source allows it."
        )
    else:
        sections.append(
            f'The target file ({target_name}) is currently empty. Infer the '
            f'appropriate language, style and format from the name "{target_name}" '
            "alone and convert the source file content accordingly. Make minimal "
            "changes - only what's necessary for the conversion."
        )

    sections.append(RESPONSE_RULES)
    return "\n\n".join(sections)
