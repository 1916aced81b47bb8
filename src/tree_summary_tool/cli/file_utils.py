"""
文件处理工具模块
"""

import os
import glob
import logging
from typing import List, Tuple

from ..models import CallTreeNode, Profile
from ..parser import load_profiles
from ..call_tree_builder import find_heaviest_node

logger = logging.getLogger(__name__)


def parse_file_paths(file_pattern: str) -> List[str]:
    """
    解析文件路径，支持 glob 模式

    Args:
        file_pattern: 文件路径模式，支持 glob 通配符

    Returns:
        List[str]: 匹配的文件路径列表
    """
    if '*' in file_pattern or '?' in file_pattern or '[' in file_pattern:
        matched_files = glob.glob(file_pattern)
        if not matched_files:
            raise ValueError(f"glob 模式 {file_pattern} 没有匹配到任何文件")
        return sorted(matched_files)

    if not os.path.exists(file_pattern):
        raise ValueError(f"文件不存在: {file_pattern}")

    return [file_pattern]


def load_all_profiles(file_patterns: List[str], options) -> List[Tuple[str, Profile]]:
    """
    加载所有文件中的剖析，保持命令行上的顺序

    Args:
        file_patterns: 文件路径或 glob 模式列表
        options: SummaryOptions

    Returns:
        List[Tuple[str, Profile]]: (显示名称, 剖析) 列表
    """
    profiles = []
    for pattern in file_patterns:
        for file_path in parse_file_paths(pattern):
            loaded = load_profiles(file_path, options.fmt, options.unit)
            logger.info(f"已加载 {file_path}: {len(loaded)} 个剖析")
            profiles.extend(loaded)
    return profiles


def select_node(profiles: List[Tuple[str, Profile]], options) -> Tuple[str, Profile, CallTreeNode]:
    """
    按选项选择剖析和节点

    Returns:
        Tuple[str, Profile, CallTreeNode]: (显示名称, 剖析, 节点)，未指定节点时返回虚拟根节点

    Raises:
        ValueError: 剖析索引越界或找不到节点
    """
    if not profiles:
        raise ValueError("没有可用的剖析")
    profile_index = options.profile_index or 0
    if profile_index >= len(profiles):
        raise ValueError(f"剖析索引越界: {profile_index} (共 {len(profiles)} 个剖析)")

    name, profile = profiles[profile_index]
    root = profile.get_grouped_calltree_root()
    if not options.node_name:
        return name, profile, root

    node = find_heaviest_node(root, options.node_name)
    if node is None:
        raise ValueError(f"在剖析 {name} 中找不到节点: {options.node_name}")
    return name, profile, node
