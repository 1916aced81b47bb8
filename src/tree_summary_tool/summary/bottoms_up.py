"""
自底向上视图聚合（纯函数实现）

遍历整棵子树，按 Frame 身份累加总权重和自身权重，递归调用和多个调用点会合并成一个条目。
"""

from typing import Dict, List, Tuple
import logging

from ..models import BottomsUpEntry, CallTreeNode, Frame
from ..utils.formatting import safe_percent

logger = logging.getLogger(__name__)


def aggregate_frame_weights(node: CallTreeNode) -> Dict[Frame, Tuple[float, float]]:
    """
    按 Frame 聚合子树内所有节点的权重

    Args:
        node: 子树起始节点

    Returns:
        Dict[Frame, Tuple[float, float]]: Frame -> (总权重之和, 自身权重之和)
    """
    frame_weights: Dict[Frame, List[float]] = {}

    stack = [node]
    while stack:
        current = stack.pop()
        stack.extend(current.children)

        # 虚拟根节点只展开子节点
        if current.is_root():
            continue

        weights = frame_weights.get(current.frame)
        if weights is None:
            frame_weights[current.frame] = [current.get_total_weight(), current.get_self_weight()]
        else:
            weights[0] += current.get_total_weight()
            weights[1] += current.get_self_weight()

    return {frame: (weights[0], weights[1]) for frame, weights in frame_weights.items()}


def build_bottoms_up_entries(node: CallTreeNode, total_weight: float,
                             min_self_weight: float) -> List[BottomsUpEntry]:
    """
    构建自底向上视图

    Args:
        node: 子树起始节点
        total_weight: 百分比的分母
        min_self_weight: 聚合后自身权重的最小阈值

    Returns:
        List[BottomsUpEntry]: 按自身权重降序排列的条目
    """
    frame_weights = aggregate_frame_weights(node)

    entries = []
    for frame, (frame_total, frame_self) in frame_weights.items():
        if frame_self >= min_self_weight:
            entries.append(BottomsUpEntry(
                frame=frame,
                total_weight=frame_total,
                self_weight=frame_self,
                total_percent=safe_percent(frame_total, total_weight),
                self_percent=safe_percent(frame_self, total_weight),
            ))

    entries.sort(key=lambda entry: (-entry.self_weight, entry.frame.index))

    logger.debug(f"自底向上视图: {len(frame_weights)} 个帧，{len(entries)} 个超过阈值 {min_self_weight}")
    return entries
