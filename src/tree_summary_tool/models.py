# -*- coding: utf-8 -*-
"""
调用树数据模型定义
"""

import itertools
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Any, Optional, Tuple

from .utils.formatting import format_display_name, format_location, format_raw

# 全局帧编号，保证同一进程内的排序稳定性
_frame_counter = itertools.count()


@dataclass(eq=False)
class Frame:
    """
    函数/调用位置的规范标识

    Frame 按对象身份比较和哈希，同一函数在所有调用点共享同一个 Frame 对象。
    """
    name: str
    file: Optional[str] = None
    line: Optional[int] = None
    col: Optional[int] = None
    index: int = field(default_factory=lambda: next(_frame_counter))

    @property
    def location(self) -> Optional[str]:
        """获取 file[:line[:col]] 形式的位置字符串"""
        return format_location(self.file, self.line, self.col)

    @property
    def display_name(self) -> str:
        """带位置后缀的显示名称"""
        return format_display_name(self.name, self.file, self.line, self.col)


class FrameTable:
    """帧驻留表，为每个 (name, file, line, col) 只创建一个 Frame"""

    def __init__(self):
        self._frames: Dict[Tuple[str, Optional[str], Optional[int], Optional[int]], Frame] = {}

    def get_or_create(self, name: str, file: Optional[str] = None,
                      line: Optional[int] = None, col: Optional[int] = None) -> Frame:
        key = (name, file, line, col)
        frame = self._frames.get(key)
        if frame is None:
            frame = Frame(name=name, file=file, line=line, col=col)
            self._frames[key] = frame
        return frame

    def __len__(self) -> int:
        return len(self._frames)


class CallTreeNode:
    """调用树节点"""

    def __init__(self, frame: Optional[Frame], parent: Optional['CallTreeNode'] = None):
        self.frame = frame
        self.parent = parent
        self.children: List['CallTreeNode'] = []
        self.total_weight = 0.0
        self.self_weight = 0.0

    def is_root(self) -> bool:
        return False

    def add_child(self, child: 'CallTreeNode') -> 'CallTreeNode':
        """添加子节点"""
        child.parent = self
        self.children.append(child)
        return child

    def get_or_create_child(self, frame: Frame) -> 'CallTreeNode':
        """按 Frame 身份查找子节点，不存在时创建"""
        for child in self.children:
            if child.frame is frame:
                return child
        return self.add_child(CallTreeNode(frame))

    def add_weight(self, total: float, self_weight: float = 0.0):
        self.total_weight += total
        self.self_weight += self_weight

    def get_total_weight(self) -> float:
        return self.total_weight

    def get_self_weight(self) -> float:
        return self.self_weight

    def get_call_stack(self) -> List[str]:
        """获取从根到当前节点的调用栈路径（不含虚拟根节点）"""
        path = []
        current = self
        while current is not None and not current.is_root():
            path.append(current.frame.name)
            current = current.parent
        return list(reversed(path))

    def iter_subtree(self):
        """深度优先遍历当前子树的全部节点（包括自身）"""
        stack = [self]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def __repr__(self) -> str:
        name = self.frame.name if self.frame is not None else "ROOT"
        return f"CallTreeNode({name!r}, total={self.total_weight}, self={self.self_weight})"


class RootNode(CallTreeNode):
    """
    虚拟根节点

    不携带 Frame，永远不会出现在输出中；总权重为所有子节点总权重之和。
    """

    def __init__(self):
        super().__init__(frame=None, parent=None)

    def is_root(self) -> bool:
        return True

    def add_weight(self, total: float, self_weight: float = 0.0):
        # 根节点的权重由子节点推导
        return None

    def get_total_weight(self) -> float:
        return sum(child.get_total_weight() for child in self.children)

    def get_self_weight(self) -> float:
        return 0.0


class Profile:
    """
    性能剖析数据

    Args:
        name: 剖析名称
        root: 分组后的调用树虚拟根节点
        total_weight: 百分比的归一化分母，缺省时取根节点总权重
        format_value: 数值 -> 显示字符串
        unit: 权重单位
    """

    def __init__(self, name: str, root: RootNode,
                 total_weight: Optional[float] = None,
                 format_value: Optional[Callable[[float], str]] = None,
                 unit: str = 'none'):
        self.name = name
        self.root = root
        self.total_weight = root.get_total_weight() if total_weight is None else total_weight
        self._format_value = format_value or format_raw
        self.unit = unit

    def get_grouped_calltree_root(self) -> RootNode:
        return self.root

    def get_total_weight(self) -> float:
        return self.total_weight

    def format_value(self, value: float) -> str:
        return self._format_value(value)

    def __repr__(self) -> str:
        return f"Profile({self.name!r}, total_weight={self.total_weight}, unit={self.unit!r})"


@dataclass
class TreeLine:
    """调用树视图中的一行"""
    indent: str
    name: str
    file: Optional[str]
    line: Optional[int]
    col: Optional[int]
    total_weight: float
    self_weight: float
    total_percent: float
    self_percent: float

    @property
    def display_name(self) -> str:
        return format_display_name(self.name, self.file, self.line, self.col)


@dataclass
class BottomsUpEntry:
    """自底向上视图中的一个条目（按 Frame 聚合）"""
    frame: Frame
    total_weight: float
    self_weight: float
    total_percent: float
    self_percent: float


@dataclass
class ActivityEvent:
    """Chrome trace 活动事件数据模型"""
    name: str
    cat: str
    ph: str
    pid: Any
    tid: Any
    ts: float
    dur: Optional[float] = None
    args: Dict[str, Any] = field(default_factory=dict)

    @property
    def end(self) -> float:
        return self.ts + (self.dur or 0.0)

    @property
    def source_file(self) -> Optional[str]:
        """获取源文件（来自 args 中的 file/filename 字段）"""
        if not self.args:
            return None
        return self.args.get('file') or self.args.get('filename')

    @property
    def source_line(self) -> Optional[int]:
        return _optional_int(self.args.get('line')) if self.args else None

    @property
    def source_col(self) -> Optional[int]:
        return _optional_int(self.args.get('col')) if self.args else None

    @property
    def is_complete(self) -> bool:
        """判断是否为带持续时间的完整事件"""
        return self.ph == 'X' and self.dur is not None and self.dur > 0


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None
