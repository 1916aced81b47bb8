"""
Tree Summary Tool Package
"""

from .models import Frame, FrameTable, CallTreeNode, RootNode, Profile, TreeLine, BottomsUpEntry
from .parser import load_profiles, parse_trace_file, parse_folded_file
from .call_tree_builder import build_call_trees, build_call_tree_from_stacks, find_heaviest_node
from .summary import (
    build_tree_lines,
    build_bottoms_up_entries,
    generate_tree_summary,
    generate_all_profiles_summary,
)
from .utils.clipboard import copy_to_clipboard

__all__ = [
    'Frame',
    'FrameTable',
    'CallTreeNode',
    'RootNode',
    'Profile',
    'TreeLine',
    'BottomsUpEntry',
    'load_profiles',
    'parse_trace_file',
    'parse_folded_file',
    'build_call_trees',
    'build_call_tree_from_stacks',
    'find_heaviest_node',
    'build_tree_lines',
    'build_bottoms_up_entries',
    'generate_tree_summary',
    'generate_all_profiles_summary',
    'copy_to_clipboard',
]
