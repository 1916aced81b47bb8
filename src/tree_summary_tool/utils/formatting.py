"""
格式化工具函数：百分比、位置、权重数值
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# 时间单位 -> 换算为纳秒的倍数
TIME_UNITS = {
    'nanoseconds': 1.0,
    'microseconds': 1_000.0,
    'milliseconds': 1_000_000.0,
    'seconds': 1_000_000_000.0,
}

UNIT_ALIASES = {
    'ns': 'nanoseconds',
    'us': 'microseconds',
    'μs': 'microseconds',
    'ms': 'milliseconds',
    's': 'seconds',
    'b': 'bytes',
    'raw': 'none',
    'samples': 'none',
}

SUPPORTED_UNITS = sorted(set(TIME_UNITS) | {'bytes', 'none'})


def safe_percent(weight: float, total_weight: float) -> float:
    """
    计算 weight 占 total_weight 的百分比

    分母为 0 时统一返回 0.0，保证同一报告内所有百分比口径一致。
    """
    if not total_weight:
        return 0.0
    return weight / total_weight * 100


def format_percent(percent: float) -> str:
    """格式化百分比，保留一位小数"""
    return f"{percent:.1f}%"


def format_threshold_label(fraction: float) -> str:
    """将阈值比例格式化为标题中使用的 ">=1%" 形式"""
    return f">={fraction * 100:g}%"


def format_location(file: Optional[str], line: Optional[int] = None,
                    col: Optional[int] = None) -> Optional[str]:
    """
    格式化源码位置

    Args:
        file: 源文件
        line: 行号
        col: 列号（只有行号存在时才显示）

    Returns:
        Optional[str]: file[:line[:col]]，没有文件时返回 None
    """
    if not file:
        return None
    location = file
    if line is not None:
        location += f":{line}"
        if col is not None:
            location += f":{col}"
    return location


def format_display_name(name: str, file: Optional[str] = None,
                        line: Optional[int] = None, col: Optional[int] = None) -> str:
    location = format_location(file, line, col)
    return f"{name} ({location})" if location else name


def format_raw(value: float) -> str:
    """默认的数值格式化：整数不带小数"""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def format_time(value: float, unit: str = 'microseconds') -> str:
    """
    将时间值转换为易读的字符串

    Args:
        value: 时间值
        unit: value 的单位

    Returns:
        str: 如 "850ns", "12.30ms", "1.50s"
    """
    nanoseconds = value * TIME_UNITS[unit]
    magnitude = abs(nanoseconds)
    if magnitude >= 1_000_000_000:
        return f"{nanoseconds / 1_000_000_000:.2f}s"
    elif magnitude >= 1_000_000:
        return f"{nanoseconds / 1_000_000:.2f}ms"
    elif magnitude >= 1_000:
        return f"{nanoseconds / 1_000:.2f}μs"
    else:
        return f"{nanoseconds:.0f}ns"


def format_bytes(value: float) -> str:
    """将字节数转换为易读的字符串"""
    for suffix in ('B', 'KB', 'MB', 'GB'):
        if abs(value) < 1024:
            return f"{value:.0f} {suffix}" if suffix == 'B' else f"{value:.2f} {suffix}"
        value /= 1024
    return f"{value:.2f} TB"


def normalize_unit(unit: str) -> str:
    """
    规范化单位名称

    Raises:
        ValueError: 不支持的单位
    """
    if not unit or not unit.strip():
        raise ValueError("单位不能为空")
    unit = unit.strip().lower()
    unit = UNIT_ALIASES.get(unit, unit)
    if unit not in SUPPORTED_UNITS:
        raise ValueError(f"不支持的单位: {unit}。支持的单位: {', '.join(SUPPORTED_UNITS)}")
    return unit


def make_value_formatter(unit: str) -> Callable[[float], str]:
    """
    根据单位创建数值格式化函数

    Args:
        unit: 单位名称或别名 (ns/us/ms/s/bytes/none)

    Returns:
        Callable[[float], str]: 数值格式化函数
    """
    unit = normalize_unit(unit)
    if unit in TIME_UNITS:
        return lambda value: format_time(value, unit)
    if unit == 'bytes':
        return format_bytes
    return format_raw
