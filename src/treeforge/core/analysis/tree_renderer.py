from __future__ import annotations

"""
Tree Renderer.

Converts the recursive node model back into connector-glyph text. Children
are emitted in stored order; the output of the canonical style is accepted
unchanged by the parser.
"""

from typing import List

from treeforge.domain.constants import DEFAULT_TREE_STYLE, TREE_STYLES
from treeforge.domain.tree_models import DirectoryNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree_lines(
        root_name: str,
        root: DirectoryNode,
        style: str = DEFAULT_TREE_STYLE,
) -> List[str]:
    """
    Render a tree as a list of lines, root line first.

    Args:
        root_name: Name printed on the first line (a '/' is appended).
        root: Directory whose children are rendered.
        style: Key of TREE_STYLES ('canonical' or 'classic').

    Returns:
        List[str]: Rendered lines without newline characters.

    Raises:
        ValueError: If the style is unknown.
    """
    glyphs = TREE_STYLES.get(style)
    if glyphs is None:
        raise ValueError(f"Unknown tree style '{style}'. Choose from: {', '.join(TREE_STYLES)}")

    lines: List[str] = [f"{root_name}/"]
    render_tree_structure(root, lines, prefix="", glyphs=glyphs)
    return lines


def format_tree(root_name: str, root: DirectoryNode, style: str = DEFAULT_TREE_STYLE) -> str:
    """Render a tree as newline-joined text with no trailing newline."""
    return "\n".join(render_tree_lines(root_name, root, style))


def render_tree_structure(
        directory: DirectoryNode,
        lines: List[str],
        prefix: str,
        glyphs: dict,
) -> None:
    """
    Recursively append the children of a directory to the accumulator.

    Args:
        directory: Directory node being rendered.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix for the current recursion level.
        glyphs: Connector set taken from TREE_STYLES.
    """
    entries = directory.items()
    total = len(entries)

    for i, (name, node) in enumerate(entries):
        is_last = (i == total - 1)
        connector = glyphs["last"] if is_last else glyphs["branch"]

        if isinstance(node, DirectoryNode):
            lines.append(f"{prefix}{connector}{name}/")
            child_prefix = prefix + (glyphs["space"] if is_last else glyphs["pipe"])
            render_tree_structure(node, lines, prefix=child_prefix, glyphs=glyphs)
        else:
            lines.append(f"{prefix}{connector}{name}")
