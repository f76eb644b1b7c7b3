"""Render a tag vocabulary as an indented outline."""

from typing import Iterable, List

from ..models.tags import Tag


INDENT = '    '


def render_tree(tags: Iterable[Tag]) -> str:
    """
    Render tags as an outline where shared parents are printed once.
    
    Sorting groups tags with a common prefix together, so only the
    segments past the currently open path need printing.
    
    Args:
        tags: Tags to render
        
    Returns:
        Outline text, one segment per line, without a trailing newline
    """
    lines: List[str] = []
    stack: List[str] = []
    
    for tag in sorted(tags):
        depth = 0
        while depth < len(stack) and depth < len(tag) and stack[depth] == tag[depth]:
            depth += 1
        del stack[depth:]
        for segment in tag[depth:]:
            stack.append(segment)
            lines.append(INDENT * (len(stack) - 1) + segment)
    
    return '\n'.join(lines)
