"""
摘要报告格式化

生成两种报告:
- 单个子树报告: 自底向上视图按整个剖析的总权重过滤，调用树视图按所选节点自身的权重过滤
- 多剖析报告: 每个剖析的两个视图都按该剖析自身的总权重过滤
"""

from typing import Callable, List, Optional, Sequence, Tuple
import logging

from ..models import BottomsUpEntry, CallTreeNode, Profile, TreeLine
from ..utils.formatting import format_percent, format_threshold_label, safe_percent
from .bottoms_up import build_bottoms_up_entries
from .constants import MIN_WEIGHT_THRESHOLD, NO_DATA_MESSAGE, SEPARATOR_WIDTH
from .tree_lines import build_tree_lines

logger = logging.getLogger(__name__)

ValueFormatter = Callable[[float], str]


def format_tree_line(line: TreeLine, format_value: ValueFormatter) -> List[str]:
    """
    将调用树的一行格式化为两行文本

    第一行为缩进 + 名称（带位置），第二行为相同缩进 + 右对齐的统计信息。
    对齐按字符数计算，名称中含宽字符时不保证列对齐。
    """
    stats = (f"[{format_value(line.total_weight)} ({format_percent(line.total_percent)}), "
             f"self: {format_value(line.self_weight)} ({format_percent(line.self_percent)})]")
    name = line.display_name
    padding = ' ' * max(0, len(name) - len(stats))
    return [
        f"{line.indent}{name}",
        f"{line.indent}{padding}{stats}",
    ]


def format_bottoms_up_entry(entry: BottomsUpEntry, format_value: ValueFormatter) -> List[str]:
    """将自底向上条目格式化为名称行和统计行"""
    stats = (f"[self: {format_value(entry.self_weight)} ({format_percent(entry.self_percent)}), "
             f"total: {format_value(entry.total_weight)} ({format_percent(entry.total_percent)})]")
    return [entry.frame.display_name, stats]


def _render_bottoms_up_section(entries: Sequence[BottomsUpEntry], format_value: ValueFormatter,
                               threshold: float) -> List[str]:
    if not entries:
        return []
    output = [
        f"Bottoms Up (by self time, {format_threshold_label(threshold)} of total):",
        '-' * SEPARATOR_WIDTH,
        '',
    ]
    for entry in entries:
        output.extend(format_bottoms_up_entry(entry, format_value))
        output.append('')
    return output


def _render_call_tree_section(lines: Sequence[TreeLine], format_value: ValueFormatter,
                              title: str) -> List[str]:
    if not lines:
        return []
    output = [title, '-' * SEPARATOR_WIDTH, '']
    for line in lines:
        output.extend(format_tree_line(line, format_value))
    output.append('')
    return output


def generate_tree_summary(node: CallTreeNode, total_weight: float, format_value: ValueFormatter,
                          threshold: float = MIN_WEIGHT_THRESHOLD) -> str:
    """
    生成以某个节点为根的调用树摘要

    Args:
        node: 所选节点（可以是虚拟根节点）
        total_weight: 整个剖析的总权重，百分比的分母
        format_value: 权重格式化函数，抛出的异常会直接向上传播
        threshold: 过滤阈值比例

    Returns:
        str: 报告文本；两个视图都为空时返回 "No data available"
    """
    output = [
        'Performance Summary',
        '=' * SEPARATOR_WIDTH,
        '',
    ]

    # 调用树阈值以所选节点自身的权重为基准
    node_weight = total_weight if node.is_root() else node.get_total_weight()

    if not node.is_root():
        frame = node.frame
        output.append(f"Selected: {frame.name}")
        if frame.location:
            output.append(f"Location: {frame.location}")
        total_percent = safe_percent(node.get_total_weight(), total_weight)
        self_percent = safe_percent(node.get_self_weight(), total_weight)
        output.append(f"Total: {format_value(node.get_total_weight())} ({format_percent(total_percent)})")
        output.append(f"Self: {format_value(node.get_self_weight())} ({format_percent(self_percent)})")
        output.append('')

    # 自底向上视图以整个剖析的总权重为基准
    bottoms_up_entries = build_bottoms_up_entries(node, total_weight, total_weight * threshold)
    output.extend(_render_bottoms_up_section(bottoms_up_entries, format_value, threshold))

    call_tree_lines = build_tree_lines(node, total_weight, node_weight * threshold)
    output.extend(_render_call_tree_section(
        call_tree_lines, format_value,
        f"Call Tree (callees, {format_threshold_label(threshold)} of selection):"))

    if not bottoms_up_entries and not call_tree_lines:
        logger.info("所选节点没有可显示的数据")
        return NO_DATA_MESSAGE

    output.append('-' * SEPARATOR_WIDTH)
    output.append(f"Total weight of profile: {format_value(total_weight)}")

    return '\n'.join(output)


def generate_profile_summary(profile: Profile, node: Optional[CallTreeNode] = None,
                             threshold: float = MIN_WEIGHT_THRESHOLD) -> str:
    """使用剖析对象自身的总权重和格式化函数生成单个子树报告"""
    if node is None:
        node = profile.get_grouped_calltree_root()
    return generate_tree_summary(node, profile.get_total_weight(), profile.format_value, threshold)


def generate_all_profiles_summary(profiles: Sequence[Tuple[str, Profile]],
                                  threshold: float = MIN_WEIGHT_THRESHOLD) -> str:
    """
    生成所有剖析的合并摘要

    Args:
        profiles: 按顺序排列的 (显示名称, Profile) 列表
        threshold: 过滤阈值比例

    Returns:
        str: 报告文本
    """
    output = [
        'Performance Profile Summary',
        '=' * SEPARATOR_WIDTH,
        '',
        f"Total profiles: {len(profiles)}",
        '',
    ]

    label = format_threshold_label(threshold)

    for i, (name, profile) in enumerate(profiles):
        root = profile.get_grouped_calltree_root()
        total_weight = profile.get_total_weight()
        format_value = profile.format_value

        if len(profiles) > 1:
            output.append('=' * SEPARATOR_WIDTH)
            output.append(f"Profile {i + 1}/{len(profiles)}: {name}")
            output.append(f"Total: {format_value(total_weight)}")
            output.append('=' * SEPARATOR_WIDTH)
            output.append('')

        min_weight = total_weight * threshold

        bottoms_up_entries = build_bottoms_up_entries(root, total_weight, min_weight)
        output.extend(_render_bottoms_up_section(bottoms_up_entries, format_value, threshold))

        call_tree_lines = build_tree_lines(root, total_weight, min_weight)
        output.extend(_render_call_tree_section(
            call_tree_lines, format_value, f"Call Tree ({label} of total):"))

        logger.debug(f"剖析 {name}: {len(bottoms_up_entries)} 个自底向上条目，{len(call_tree_lines)} 行调用树")

    return '\n'.join(output)
