"""
Output commands for the tagsearch CLI.

Each ``display_*`` function runs one query mode against an existing scan and
writes the result to a text stream.
"""

from typing import List, TextIO

from ..errors import OutputTerminated
from ..models.tags import sorted_tags, tag_to_str
from ..tools.tag_filter import Filter
from ..tools.tag_scanner import ScanResult
from ..tools.tree import render_tree


VIM_UNTAGGED_MESSAGE = "Ignore this message"


def write_lines(stream: TextIO, lines: List[str]) -> None:
    """
    Write lines to a stream.
    
    Raises:
        OutputTerminated: If the reading end of the stream has been closed
    """
    try:
        for line in lines:
            stream.write(line + "\n")
        stream.flush()
    except BrokenPipeError as e:
        raise OutputTerminated("Output stream closed") from e


def display_untagged(f: Filter, scan: ScanResult, stream: TextIO, vim_format: bool = False) -> None:
    lines = []
    for fname in f.untagged(scan):
        if vim_format:
            lines.append(f"{fname}:1:{VIM_UNTAGGED_MESSAGE}")
        else:
            lines.append(fname)
    write_lines(stream, lines)


def display_similar_tags(f: Filter, scan: ScanResult, stream: TextIO) -> None:
    similar = f.similar_tags(scan)
    if similar:
        write_lines(stream, ["Similar tags:"] + [str(issue) for issue in similar])


def display_tag_count(f: Filter, scan: ScanResult, stream: TextIO) -> None:
    write_lines(stream, [f"{count:5} {key}" for count, key in f.count_of_tags(scan)])


def display_tree(f: Filter, scan: ScanResult, stream: TextIO) -> None:
    tree = render_tree(f.tags_matching(scan))
    if tree:
        write_lines(stream, [tree])


def display_tags(f: Filter, scan: ScanResult, stream: TextIO, long_list: bool = False) -> None:
    """Write the tags of matching files, comma separated or one per line."""
    tags = [tag_to_str(tag) for tag in sorted_tags(f.tags_matching(scan))]
    if not tags:
        return
    if long_list:
        write_lines(stream, tags)
    else:
        write_lines(stream, [", ".join(tags)])


def display_files_matching_query(f: Filter, scan: ScanResult, stream: TextIO, vim_format: bool = False) -> None:
    matching = f.files_matching(scan)
    if vim_format:
        matching = [f"{fname}:1:" for fname in matching]
    write_lines(stream, matching)
