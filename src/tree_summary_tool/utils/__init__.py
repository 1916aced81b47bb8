"""
工具模块
"""

from .formatting import (
    safe_percent, format_percent, format_location, format_display_name,
    format_raw, format_time, format_bytes, make_value_formatter,
)
from .clipboard import copy_to_clipboard

__all__ = [
    'safe_percent', 'format_percent', 'format_location', 'format_display_name',
    'format_raw', 'format_time', 'format_bytes', 'make_value_formatter',
    'copy_to_clipboard',
]
