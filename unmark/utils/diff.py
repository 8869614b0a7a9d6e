from __future__ import annotations

from difflib import SequenceMatcher


def highlight_removals(
    original: str,
    cleaned: str,
    *,
    start_tag: str = "<del>",
    end_tag: str = "</del>",
) -> str:
    """Return original string with the spans missing from cleaned marked.

    Removal only ever deletes, so every non-equal opcode is wrapped with
    start_tag and end_tag over the original text.
    """
    matcher = SequenceMatcher(a=original, b=cleaned, autojunk=False)
    out_parts: list[str] = []
    for op, i1, i2, _j1, _j2 in matcher.get_opcodes():
        if op == "equal":
            out_parts.append(original[i1:i2])
        elif op in ("delete", "replace"):
            out_parts.append(f"{start_tag}{original[i1:i2]}{end_tag}")
        elif op == "insert":
            continue
    return "".join(out_parts)
