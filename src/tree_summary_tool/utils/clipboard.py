"""
剪贴板投递工具
"""

import logging
import shutil
import subprocess
from typing import List, Optional

logger = logging.getLogger(__name__)

# 按优先级排列的剪贴板命令
CLIPBOARD_COMMANDS = [
    ['pbcopy'],
    ['wl-copy'],
    ['xclip', '-selection', 'clipboard'],
    ['xsel', '--clipboard', '--input'],
    ['clip'],
]


def find_clipboard_command() -> Optional[List[str]]:
    """查找当前平台可用的剪贴板命令"""
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]):
            return command
    return None


def copy_to_clipboard(text: str, timeout: float = 5.0) -> bool:
    """
    复制文本到剪贴板

    Args:
        text: 要复制的文本
        timeout: 命令超时时间（秒）

    Returns:
        bool: 是否复制成功，失败时不抛出异常
    """
    command = find_clipboard_command()
    if command is None:
        logger.error("复制到剪贴板失败: 没有找到可用的剪贴板命令")
        return False

    try:
        subprocess.run(command, input=text.encode('utf-8'), check=True, timeout=timeout)
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"复制到剪贴板失败: {e}")
        return False

    logger.info(f"已通过 {command[0]} 复制 {len(text)} 个字符到剪贴板")
    return True
