"""
导出命令模块
"""

import time
from pathlib import Path

from ..validators import build_summary_options, parse_output_formats
from ..file_utils import load_all_profiles, select_node
from ...exporter import bottoms_up_rows, generate_output_files, print_markdown_table, generate_bottoms_up_chart
from ...summary import build_bottoms_up_entries


class ExportCommand:
    """导出命令处理器"""

    def run(self, args) -> int:
        """导出自底向上视图的表格"""
        print(f"=== 自底向上视图导出 ===")
        print(f"文件: {args.files}")
        print(f"节点: {args.node if args.node else '根节点'}")
        print(f"输出格式: {args.output_format}")
        print(f"输出目录: {args.output_dir}")
        print()

        try:
            options = build_summary_options(args)
            output_formats = parse_output_formats(args.output_format)
        except ValueError as e:
            print(f"错误: 参数验证失败 - {e}")
            return 1

        try:
            start_time = time.time()

            profiles = load_all_profiles(args.files, options)
            name, profile, node = select_node(profiles, options)
            total_weight = profile.get_total_weight()

            entries = build_bottoms_up_entries(node, total_weight, total_weight * options.threshold)
            rows = bottoms_up_rows(entries, profile.format_value)
            print(f"剖析 {name}: {len(rows)} 个函数超过阈值")

            base_name = args.base_name or f"bottoms_up_{Path(args.files[0]).stem}"
            generated_files = generate_output_files(rows, args.output_dir, base_name, output_formats)

            if args.print_markdown:
                print_markdown_table(rows, f"{name} 自底向上视图")

            if args.chart:
                chart_file = generate_bottoms_up_chart(entries, args.output_dir, base_name, unit=profile.unit)
                if chart_file:
                    generated_files.append(chart_file)

            total_time = time.time() - start_time
            print(f"\n导出完成，总耗时: {total_time:.2f} 秒")

            print("\n生成的文件:")
            for file_path in generated_files:
                print(f"  {file_path}")

            return 0

        except (OSError, ValueError) as e:
            print(f"错误: {e}")
            return 1
