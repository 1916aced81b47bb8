"""
剖析文件解析器

支持:
- Chrome trace JSON (PyTorch profiler 等导出的 traceEvents，可 gzip 压缩)
- 折叠调用栈文本 (FlameGraph 的 "a;b;c 42" 格式)
"""

import json
import gzip
from pathlib import Path
from typing import Dict, List, Any, Optional, Tuple, Union
import logging

from .models import ActivityEvent, FrameTable, Profile
from .call_tree_builder import build_call_trees, build_call_tree_from_stacks, get_tree_statistics
from .utils.formatting import make_value_formatter

logger = logging.getLogger(__name__)

TRACE_SUFFIXES = {'.json', '.gz'}
FOLDED_SUFFIXES = {'.folded', '.collapsed', '.txt'}


def _parse_event(event_data: Dict[str, Any]) -> Optional[ActivityEvent]:
    """
    解析单个事件

    Args:
        event_data: 事件数据字典

    Returns:
        ActivityEvent: 解析后的事件对象，如果解析失败返回 None
    """
    try:
        dur = event_data.get('dur')
        return ActivityEvent(
            name=str(event_data.get('name', '')),
            cat=event_data.get('cat', ''),
            ph=event_data.get('ph', ''),
            pid=event_data.get('pid', 0),
            tid=event_data.get('tid', 0),
            ts=float(event_data.get('ts', 0.0)),
            dur=float(dur) if dur is not None else None,
            args=event_data.get('args') or {},
        )
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning(f"解析事件失败: {e}")
        return None


def _read_trace_data(file_path: Path) -> List[Dict[str, Any]]:
    open_func = gzip.open if file_path.suffix == '.gz' else open
    with open_func(file_path, 'rt', encoding='utf-8') as f:
        data = json.load(f)

    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get('traceEvents'), list):
        return data['traceEvents']
    raise ValueError(f"不是有效的 trace 文件 (缺少 traceEvents): {file_path}")


def parse_trace_file(file_path: Union[str, Path], unit: str = 'microseconds') -> List[Profile]:
    """
    解析 Chrome trace JSON 文件，每个 (pid, tid) 生成一个剖析

    Args:
        file_path: JSON 文件路径（支持 .gz）
        unit: 事件时间单位

    Returns:
        List[Profile]: 按 (pid, tid) 排序的剖析列表
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"文件不存在: {file_path}")

    raw_events = _read_trace_data(file_path)
    logger.info(f"读取到 {len(raw_events)} 个原始事件: {file_path}")

    events = []
    for raw_event in raw_events:
        if not isinstance(raw_event, dict):
            logger.warning(f"跳过无效事件: {raw_event!r}")
            continue
        event = _parse_event(raw_event)
        if event is not None:
            events.append(event)

    call_trees = build_call_trees(events, FrameTable())
    format_value = make_value_formatter(unit)

    profiles = []
    for (pid, tid), root in call_trees.items():
        stats = get_tree_statistics(root)
        logger.info(f"pid {pid} / tid {tid}: {stats['total_nodes']} 个节点, "
                    f"最大深度 {stats['max_depth']}, {stats['distinct_frames']} 个不同帧")
        profiles.append(Profile(f"pid {pid} / tid {tid}", root, format_value=format_value, unit=unit))

    logger.info(f"构建了 {len(profiles)} 个剖析: {file_path}")
    return profiles


def parse_folded_line(line: str) -> Optional[Tuple[List[str], float]]:
    """
    解析单行折叠调用栈

    Returns:
        Optional[Tuple[List[str], float]]: (调用栈, 权重)，无效行返回 None
    """
    line = line.strip()
    if not line or ' ' not in line:
        return None
    stack_part, weight_part = line.rsplit(' ', 1)
    try:
        weight = float(weight_part)
    except ValueError:
        return None
    frames = [frame for frame in stack_part.split(';') if frame]
    if not frames:
        return None
    return frames, weight


def parse_folded_file(file_path: Union[str, Path], unit: str = 'none') -> Profile:
    """
    解析折叠调用栈文件

    Args:
        file_path: 文本文件路径
        unit: 权重单位（默认为样本数）

    Returns:
        Profile: 单个剖析
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"文件不存在: {file_path}")

    stacks = []
    skipped = 0
    with open(file_path, 'r', encoding='utf-8') as f:
        for line_no, line in enumerate(f, 1):
            parsed = parse_folded_line(line)
            if parsed is None:
                if line.strip():
                    skipped += 1
                    logger.warning(f"跳过无效的折叠栈行 {file_path}:{line_no}")
                continue
            stacks.append(parsed)

    if skipped:
        logger.warning(f"{file_path} 中共跳过 {skipped} 行")

    root = build_call_tree_from_stacks(stacks)
    return Profile(file_path.name, root, format_value=make_value_formatter(unit), unit=unit)


def detect_format(file_path: Union[str, Path]) -> str:
    """根据文件后缀判断格式"""
    suffix = Path(file_path).suffix.lower()
    if suffix in TRACE_SUFFIXES:
        return 'trace'
    if suffix in FOLDED_SUFFIXES:
        return 'folded'
    raise ValueError(f"无法识别的文件格式: {file_path}")


def load_profiles(file_path: Union[str, Path], fmt: str = 'auto',
                  unit: Optional[str] = None) -> List[Tuple[str, Profile]]:
    """
    加载剖析文件

    Args:
        file_path: 文件路径
        fmt: 文件格式 (auto/trace/folded)
        unit: 权重单位，None 时使用格式默认值

    Returns:
        List[Tuple[str, Profile]]: (显示名称, 剖析) 列表
    """
    if fmt == 'auto':
        fmt = detect_format(file_path)

    file_name = Path(file_path).name
    if fmt == 'trace':
        profiles = parse_trace_file(file_path, unit or 'microseconds')
        return [(f"{file_name} [{profile.name}]", profile) for profile in profiles]
    if fmt == 'folded':
        profile = parse_folded_file(file_path, unit or 'none')
        return [(file_name, profile)]

    raise ValueError(f"不支持的文件格式: {fmt}")
