# -*- coding: utf-8 -*-
"""
CLI验证器模块
"""

from dataclasses import dataclass
from typing import List, Optional

from ..summary.constants import MIN_WEIGHT_THRESHOLD
from ..utils.formatting import normalize_unit
from ..exporter import SUPPORTED_OUTPUT_FORMATS


@dataclass
class SummaryOptions:
    """命令行传给各个命令的摘要选项"""
    threshold: float = MIN_WEIGHT_THRESHOLD
    node_name: Optional[str] = None
    profile_index: Optional[int] = None
    unit: Optional[str] = None
    fmt: str = 'auto'


def validate_threshold(threshold: float) -> float:
    """
    验证阈值比例

    Raises:
        ValueError: 阈值不在 [0, 1] 范围内
    """
    if threshold is None:
        return MIN_WEIGHT_THRESHOLD
    if threshold < 0 or threshold > 1:
        raise ValueError(f"阈值必须在 0 到 1 之间: {threshold}")
    return threshold


def validate_unit(unit: Optional[str]) -> Optional[str]:
    """验证单位，None 表示使用文件格式的默认单位"""
    if unit is None:
        return None
    return normalize_unit(unit)


def parse_output_formats(output_format: str) -> List[str]:
    """
    解析输出格式

    Args:
        output_format: 逗号分隔的格式字符串

    Returns:
        List[str]: 格式列表
    """
    if not output_format or not output_format.strip():
        raise ValueError("输出格式不能为空")

    formats = [fmt.strip() for fmt in output_format.split(',') if fmt.strip()]
    for fmt in formats:
        if fmt not in SUPPORTED_OUTPUT_FORMATS:
            raise ValueError(f"不支持的输出格式: {fmt}。支持的格式: {', '.join(SUPPORTED_OUTPUT_FORMATS)}")

    if len(formats) != len(set(formats)):
        raise ValueError("输出格式不能重复")

    return formats


def build_summary_options(args) -> SummaryOptions:
    """
    从命令行参数构建摘要选项

    Raises:
        ValueError: 如果参数不合法
    """
    profile_index = getattr(args, 'profile_index', None)
    if profile_index is not None and profile_index < 0:
        raise ValueError(f"剖析索引不能为负数: {profile_index}")

    node_name = getattr(args, 'node', None)
    if node_name is not None and not node_name.strip():
        raise ValueError("节点名称不能为空字符串")

    return SummaryOptions(
        threshold=validate_threshold(getattr(args, 'threshold', None)),
        node_name=node_name,
        profile_index=profile_index,
        unit=validate_unit(getattr(args, 'unit', None)),
        fmt=getattr(args, 'format', 'auto'),
    )
