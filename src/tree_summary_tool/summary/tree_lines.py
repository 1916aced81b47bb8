"""
调用树视图构建（纯函数实现）
"""

from typing import List
import logging

from ..models import CallTreeNode, TreeLine
from ..utils.formatting import safe_percent
from .constants import TEE, CORNER, PIPE, BLANK

logger = logging.getLogger(__name__)


def visible_children(node: CallTreeNode, min_weight: float) -> List[CallTreeNode]:
    """
    过滤并排序子节点

    保留总权重 >= min_weight 的子节点，按总权重降序排列，权重相同时按帧编号升序。
    """
    children = [child for child in node.children if child.get_total_weight() >= min_weight]
    children.sort(key=lambda child: (-child.get_total_weight(), child.frame.index))
    return children


def build_tree_lines(node: CallTreeNode, total_weight: float, min_weight: float) -> List[TreeLine]:
    """
    深度优先（先序）遍历子树，生成调用树视图的行

    Args:
        node: 起始节点（虚拟根节点或任意子树节点）
        total_weight: 百分比的分母
        min_weight: 子节点总权重的最小阈值

    Returns:
        List[TreeLine]: 按显示顺序排列的行，虚拟根节点本身不会出现
    """
    lines: List[TreeLine] = []

    # 显式栈: (节点, 前缀, 是否最后一个兄弟, 是否顶层)，深调用链不受递归深度限制
    if node.is_root():
        # 虚拟根节点不输出，其子节点作为顶层兄弟节点
        top_level = visible_children(node, min_weight)
        stack = [(child, '', i == len(top_level) - 1, True)
                 for i, child in enumerate(top_level)]
    else:
        stack = [(node, '', True, True)]
    stack.reverse()

    while stack:
        current, prefix, is_last, is_top = stack.pop()
        connector = '' if is_top else (CORNER if is_last else TEE)
        frame = current.frame
        lines.append(TreeLine(
            indent=prefix + connector,
            name=frame.name,
            file=frame.file,
            line=frame.line,
            col=frame.col,
            total_weight=current.get_total_weight(),
            self_weight=current.get_self_weight(),
            total_percent=safe_percent(current.get_total_weight(), total_weight),
            self_percent=safe_percent(current.get_self_weight(), total_weight),
        ))

        children = visible_children(current, min_weight)
        child_prefix = prefix + ('' if is_top else (BLANK if is_last else PIPE))
        # 逆序入栈，保持先序输出
        for i in range(len(children) - 1, -1, -1):
            stack.append((children[i], child_prefix, i == len(children) - 1, False))

    logger.debug(f"调用树视图生成 {len(lines)} 行 (阈值: {min_weight})")
    return lines
