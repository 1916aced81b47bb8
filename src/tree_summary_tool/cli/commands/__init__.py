"""
CLI命令模块
"""

from .summary import SummaryCommand
from .export import ExportCommand

__all__ = ['SummaryCommand', 'ExportCommand']
