"""
CLI主模块
"""

import argparse
import logging
import sys
from .commands import SummaryCommand, ExportCommand
from ..summary.constants import MIN_WEIGHT_THRESHOLD


def _add_profile_arguments(parser: argparse.ArgumentParser):
    """summary 和 export 共用的参数"""
    parser.add_argument('--node', default=None,
                        help='选择帧名称匹配且总权重最大的节点作为报告的根 (默认: 整个剖析)')
    parser.add_argument('--profile-index', type=int, default=None,
                        help='选择第几个剖析 (默认: 0)；summary 中单独使用时只输出该剖析')
    parser.add_argument('--unit', default=None,
                        help='权重单位: ns, us, ms, s, bytes, none (默认: trace 为 us，折叠栈为 none)')
    parser.add_argument('--threshold', type=float, default=MIN_WEIGHT_THRESHOLD,
                        help=f'过滤阈值比例 (默认: {MIN_WEIGHT_THRESHOLD})')
    parser.add_argument('--format', choices=['auto', 'trace', 'folded'], default='auto',
                        help='输入文件格式 (默认: 按后缀判断)')


def parse_arguments(argv=None):
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        description="Tree Summary Tool - 将调用树剖析压缩为文本摘要",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  # 打印 trace 文件中所有线程的摘要
  tree-summary-tool summary trace.json

  # 以某个函数为根打印摘要，并复制到剪贴板
  tree-summary-tool summary trace.json --node forward --copy

  # 折叠调用栈文件，写入文件
  tree-summary-tool summary out.folded --output summary.txt

  # 导出自底向上视图为 JSON/XLSX，并生成图表
  tree-summary-tool export trace.json --output-format json,xlsx --chart --output-dir results
        """
    )
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='日志级别 (默认: WARNING)')

    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # summary 命令 - 生成文本摘要
    summary_parser = subparsers.add_parser('summary', help='生成调用树和自底向上视图的文本摘要')
    summary_parser.add_argument('files', nargs='+', help='剖析文件路径，支持 glob 模式')
    _add_profile_arguments(summary_parser)
    summary_parser.add_argument('--output', default=None, help='输出文件路径 (默认: stdout)')
    summary_parser.add_argument('--copy', action='store_true', help='复制摘要到剪贴板 (默认: False)')

    # export 命令 - 导出自底向上视图
    export_parser = subparsers.add_parser('export', help='导出自底向上视图为表格')
    export_parser.add_argument('files', nargs='+', help='剖析文件路径，支持 glob 模式')
    _add_profile_arguments(export_parser)
    export_parser.add_argument('--output-format', default='json,xlsx',
                               choices=['json', 'xlsx', 'json,xlsx'],
                               help='输出格式 (默认: json,xlsx)')
    export_parser.add_argument('--output-dir', default='.', help='输出目录 (默认: 当前目录)')
    export_parser.add_argument('--base-name', default=None, help='输出文件基础名 (默认: bottoms_up_<文件名>)')
    export_parser.add_argument('--print-markdown', action='store_true',
                               help='是否在stdout中以markdown格式打印表格 (默认: False)')
    export_parser.add_argument('--chart', action='store_true', help='生成自身权重柱状图 (默认: False)')

    return parser.parse_args(argv)


def main(argv=None):
    """主函数"""
    args = parse_arguments(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    if not args.command:
        print("错误: 请指定命令 (summary, export)")
        print("使用 --help 查看帮助信息")
        return 1

    if args.command == 'summary':
        command = SummaryCommand()
        return command.run(args)
    elif args.command == 'export':
        command = ExportCommand()
        return command.run(args)
    else:
        print(f"错误: 未知命令: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
