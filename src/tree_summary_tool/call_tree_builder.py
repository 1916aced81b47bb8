"""
基于扫描线的调用树构建算法

将 (pid, tid) 内的完整事件按时间嵌套成调用树，相同调用路径上的同一函数合并为一个节点。
时间复杂度: O(n log n)
"""

from dataclasses import dataclass, field
from typing import List, Dict, Iterable, Optional, Tuple
import logging
from collections import defaultdict

from .models import ActivityEvent, CallTreeNode, Frame, FrameTable, RootNode

logger = logging.getLogger(__name__)


@dataclass
class EventInterval:
    """事件时间区间"""
    event: ActivityEvent
    start: float  # ts
    end: float    # ts + dur
    index: int    # 原始事件索引，用于排序稳定性
    node: Optional[CallTreeNode] = None
    children_duration: float = field(default=0.0)

    def __post_init__(self):
        """确保end >= start"""
        if self.end < self.start:
            self.end = self.start

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, other: 'EventInterval') -> bool:
        """检查当前区间是否包含另一个区间"""
        return self.start <= other.start and self.end >= other.end


class CallTreeBuilder:
    """基于扫描线的调用树构建器"""

    def __init__(self, frame_table: Optional[FrameTable] = None):
        self.logger = logger
        # 所有线程共享的帧驻留表，保证 Frame 在整个文件内唯一
        self.frame_table = frame_table or FrameTable()

    def build_call_trees(self, events: Iterable[ActivityEvent]) -> Dict[Tuple[int, int], RootNode]:
        """
        为所有事件构建调用树

        Args:
            events: 事件列表

        Returns:
            Dict[Tuple[int, int], RootNode]: 按(pid, tid)分组的调用树虚拟根节点
        """
        events_by_pid_tid = self._group_events_by_pid_tid(events)

        call_trees = {}
        for (pid, tid), group_events in events_by_pid_tid.items():
            self.logger.info(f"为进程 {pid} 线程 {tid} 构建调用树，事件数: {len(group_events)}")

            root = self._build_call_tree(group_events)
            if root.children:
                call_trees[(pid, tid)] = root
            else:
                self.logger.warning(f"进程 {pid} 线程 {tid} 没有有效的事件")

        self.logger.info(f"成功构建 {len(call_trees)} 个调用树，共 {len(self.frame_table)} 个不同的帧")
        return call_trees

    def _group_events_by_pid_tid(self, events: Iterable[ActivityEvent]) -> Dict[Tuple[int, int], List[ActivityEvent]]:
        """
        按pid和tid分组完整事件，过滤掉没有pid/tid或没有duration的事件

        Args:
            events: 事件列表

        Returns:
            Dict[Tuple[int, int], List[ActivityEvent]]: 按(pid, tid)分组的事件
        """
        events_by_pid_tid = defaultdict(list)

        for event in events:
            if event is None or not event.is_complete:
                continue
            if event.pid is None or event.tid is None:
                continue

            try:
                pid = int(event.pid) if not isinstance(event.pid, int) else event.pid
                tid = int(event.tid) if not isinstance(event.tid, int) else event.tid
            except (ValueError, TypeError):
                continue

            events_by_pid_tid[(pid, tid)].append(event)

        self.logger.info(f"按pid/tid分组完成，共 {len(events_by_pid_tid)} 个组")
        return dict(sorted(events_by_pid_tid.items()))

    def _frame_for_event(self, event: ActivityEvent) -> Frame:
        return self.frame_table.get_or_create(
            event.name, event.source_file, event.source_line, event.source_col)

    def _build_call_tree(self, events: List[ActivityEvent]) -> RootNode:
        """
        使用扫描线算法构建调用树

        Args:
            events: 同一线程内的完整事件

        Returns:
            RootNode: 调用树的虚拟根节点
        """
        intervals = [
            EventInterval(event=event, start=event.ts, end=event.end, index=i)
            for i, event in enumerate(events)
        ]
        # 按开始时间排序，开始时间相同时较长的事件在前（作为父节点）
        intervals.sort(key=lambda x: (x.start, -x.end, x.index))

        root = RootNode()
        active_stack: List[EventInterval] = []

        for interval in intervals:
            self._process_interval(interval, active_stack, root)

        while active_stack:
            self._close_interval(active_stack.pop())

        return root

    def _process_interval(self, interval: EventInterval, active_stack: List[EventInterval], root: RootNode):
        """
        处理单个事件区间

        Args:
            interval: 当前事件区间
            active_stack: 当前活跃的区间栈
            root: 虚拟根节点
        """
        # 1. 弹出所有不包含当前区间的节点
        while active_stack and not active_stack[-1].contains(interval):
            self._close_interval(active_stack.pop())

        # 2. 挂到最内层的活跃区间下，相同的帧合并为同一个节点
        frame = self._frame_for_event(interval.event)
        if active_stack:
            parent_interval = active_stack[-1]
            parent_interval.children_duration += interval.duration
            interval.node = parent_interval.node.get_or_create_child(frame)
        else:
            interval.node = root.get_or_create_child(frame)

        interval.node.add_weight(interval.duration)

        # 3. 将当前区间推入活跃栈
        active_stack.append(interval)

    def _close_interval(self, interval: EventInterval):
        """区间结束时计算自身权重（持续时间减去子事件的持续时间）"""
        self_weight = max(0.0, interval.duration - interval.children_duration)
        interval.node.add_weight(0.0, self_weight)


def build_call_trees(events: Iterable[ActivityEvent],
                     frame_table: Optional[FrameTable] = None) -> Dict[Tuple[int, int], RootNode]:
    """构建调用树的便捷函数"""
    builder = CallTreeBuilder(frame_table)
    return builder.build_call_trees(events)


def build_call_tree_from_stacks(stacks: Iterable[Tuple[List[str], float]],
                                frame_table: Optional[FrameTable] = None) -> RootNode:
    """
    从折叠调用栈构建调用树

    Args:
        stacks: (从外到内的函数名列表, 权重) 列表
        frame_table: 帧驻留表

    Returns:
        RootNode: 调用树的虚拟根节点
    """
    frame_table = frame_table or FrameTable()
    root = RootNode()

    for names, weight in stacks:
        if not names:
            continue
        node = root
        for name in names:
            node = node.get_or_create_child(frame_table.get_or_create(name))
            node.add_weight(weight)
        # 栈顶函数获得自身权重
        node.add_weight(0.0, weight)

    return root


def find_heaviest_node(root: CallTreeNode, name: str) -> Optional[CallTreeNode]:
    """
    查找帧名称匹配且总权重最大的节点

    Args:
        root: 子树根节点
        name: 帧名称

    Returns:
        Optional[CallTreeNode]: 找到的节点，找不到返回None
    """
    best = None
    for node in root.iter_subtree():
        if node.is_root() or node.frame.name != name:
            continue
        if best is None or node.get_total_weight() > best.get_total_weight():
            best = node
    return best


def get_tree_statistics(root: CallTreeNode) -> Dict[str, int]:
    """
    获取调用树的统计信息

    Returns:
        Dict[str, int]: 节点数、最大深度和不同帧数
    """
    stats = {'total_nodes': 0, 'max_depth': 0, 'distinct_frames': 0}
    frames = set()

    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if not node.is_root():
            stats['total_nodes'] += 1
            stats['max_depth'] = max(stats['max_depth'], depth)
            frames.add(node.frame)
        stack.extend((child, depth + 1) for child in node.children)

    stats['distinct_frames'] = len(frames)
    return stats
