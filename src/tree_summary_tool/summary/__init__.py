"""
摘要报告模块
"""

from .constants import MIN_WEIGHT_THRESHOLD, NO_DATA_MESSAGE, SEPARATOR_WIDTH
from .tree_lines import build_tree_lines
from .bottoms_up import aggregate_frame_weights, build_bottoms_up_entries
from .formatter import (
    format_tree_line, format_bottoms_up_entry, generate_tree_summary,
    generate_profile_summary, generate_all_profiles_summary,
)

__all__ = [
    'MIN_WEIGHT_THRESHOLD', 'NO_DATA_MESSAGE', 'SEPARATOR_WIDTH',
    'build_tree_lines', 'aggregate_frame_weights', 'build_bottoms_up_entries',
    'format_tree_line', 'format_bottoms_up_entry', 'generate_tree_summary',
    'generate_profile_summary', 'generate_all_profiles_summary',
]
