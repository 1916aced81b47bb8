"""
自底向上视图的表格导出 (JSON / XLSX / Markdown / 图表)
"""

import json
from pathlib import Path
from typing import Callable, Dict, List, Any, Optional, Sequence
import logging

import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .models import BottomsUpEntry
from .utils.formatting import format_percent

logger = logging.getLogger(__name__)

SUPPORTED_OUTPUT_FORMATS = ('json', 'xlsx')


def bottoms_up_rows(entries: Sequence[BottomsUpEntry],
                    format_value: Callable[[float], str]) -> List[Dict[str, Any]]:
    """
    将自底向上条目转换为表格行

    Args:
        entries: 自底向上条目
        format_value: 权重格式化函数

    Returns:
        List[Dict[str, Any]]: 数据行列表
    """
    rows = []
    for entry in entries:
        rows.append({
            'name': entry.frame.name,
            'location': entry.frame.location or '',
            'self_weight': entry.self_weight,
            'self_percent': round(entry.self_percent, 2),
            'total_weight': entry.total_weight,
            'total_percent': round(entry.total_percent, 2),
            'self': f"{format_value(entry.self_weight)} ({format_percent(entry.self_percent)})",
            'total': f"{format_value(entry.total_weight)} ({format_percent(entry.total_percent)})",
        })
    return rows


def generate_output_files(rows: List[Dict[str, Any]], output_dir: str, base_name: str,
                          output_formats: Sequence[str] = SUPPORTED_OUTPUT_FORMATS) -> List[Path]:
    """
    生成输出文件（JSON 和 XLSX）

    Args:
        rows: 数据行列表
        output_dir: 输出目录
        base_name: 基础文件名
        output_formats: 输出格式列表

    Returns:
        List[Path]: 生成的文件路径列表
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    generated_files = []

    if 'json' in output_formats:
        json_file = output_path / f"{base_name}.json"
        with open(json_file, 'w', encoding='utf-8') as f:
            json.dump(rows, f, indent=2, ensure_ascii=False)
        print(f"JSON 文件已生成: {json_file}")
        generated_files.append(json_file)

    if 'xlsx' in output_formats:
        if rows:
            df = pd.DataFrame(rows)
            xlsx_file = output_path / f"{base_name}.xlsx"
            try:
                df.to_excel(xlsx_file, index=False)
                print(f"Excel 文件已生成: {xlsx_file}")
                generated_files.append(xlsx_file)
            except ImportError:
                csv_file = output_path / f"{base_name}.csv"
                df.to_csv(csv_file, index=False, encoding='utf-8')
                print(f"CSV 文件已生成: {csv_file}")
                generated_files.append(csv_file)
        else:
            print("没有数据可以生成 Excel 文件")

    return generated_files


def print_markdown_table(rows: List[Dict[str, Any]], title: str):
    """在stdout中以markdown格式打印表格"""
    if not rows:
        print(f"\n## {title}\n\n无数据可显示\n")
        return

    print(f"\n## {title}\n")

    columns = list(rows[0].keys())
    print("| " + " | ".join(columns) + " |")
    print("| " + " | ".join(["---"] * len(columns)) + " |")

    for row in rows:
        values = []
        for col in columns:
            value = row.get(col, "")
            if isinstance(value, float):
                if col.endswith('_percent'):
                    values.append(f"{value:.2f}%")
                else:
                    values.append(f"{value:.2f}")
            else:
                values.append(str(value).replace('|', '\\|'))
        print("| " + " | ".join(values) + " |")
    print()


def generate_bottoms_up_chart(entries: Sequence[BottomsUpEntry], output_dir: str, base_name: str,
                              top_n: int = 20, unit: str = 'none') -> Optional[Path]:
    """
    生成自身权重最高的函数的横向柱状图

    Args:
        entries: 按自身权重降序排列的条目
        output_dir: 输出目录
        base_name: 基础文件名
        top_n: 最多显示的条目数
        unit: 权重单位，用于坐标轴标签

    Returns:
        Optional[Path]: 图表文件路径，失败时返回 None
    """
    if not entries:
        logger.warning("没有数据可以生成图表")
        return None

    top_entries = list(entries[:top_n])
    names = [entry.frame.name for entry in reversed(top_entries)]
    self_weights = [entry.self_weight for entry in reversed(top_entries)]

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    chart_file = output_path / f"{base_name}_chart.png"

    fig = None
    try:
        fig, ax = plt.subplots(figsize=(12, max(4, 0.4 * len(top_entries) + 1)))
        ax.barh(names, self_weights, color='tab:orange')
        ax.set_xlabel(f'Self weight ({unit})', fontsize=12)
        ax.set_title(f'Top {len(top_entries)} functions by self time', fontsize=14, fontweight='bold')
        ax.grid(True, axis='x', alpha=0.3)
        fig.tight_layout()
        fig.savefig(chart_file, dpi=150, bbox_inches='tight')
    except (OSError, ValueError) as e:
        logger.error(f"生成图表时出错: {e}")
        return None
    finally:
        if fig is not None:
            plt.close(fig)

    print(f"图表已生成: {chart_file}")
    return chart_file
