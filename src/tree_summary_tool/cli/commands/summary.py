"""
摘要命令模块
"""

import sys
import logging
from pathlib import Path

from ..validators import build_summary_options
from ..file_utils import load_all_profiles, select_node
from ...summary import generate_all_profiles_summary, generate_tree_summary
from ...utils.clipboard import copy_to_clipboard

logger = logging.getLogger(__name__)


class SummaryCommand:
    """摘要命令处理器"""

    def run(self, args) -> int:
        """生成文本摘要并输出到 stdout、文件或剪贴板"""
        try:
            options = build_summary_options(args)
        except ValueError as e:
            print(f"错误: 参数验证失败 - {e}", file=sys.stderr)
            return 1

        try:
            profiles = load_all_profiles(args.files, options)
            if not profiles:
                print(f"错误: 没有从 {args.files} 中加载到任何剖析", file=sys.stderr)
                return 1

            if options.node_name or options.profile_index is not None:
                _, profile, node = select_node(profiles, options)
                text = generate_tree_summary(node, profile.get_total_weight(),
                                             profile.format_value, options.threshold)
            else:
                text = generate_all_profiles_summary(profiles, options.threshold)

            if args.output:
                output_file = Path(args.output)
                output_file.parent.mkdir(parents=True, exist_ok=True)
                output_file.write_text(text + '\n', encoding='utf-8')
                print(f"摘要已写入: {output_file}", file=sys.stderr)
            else:
                print(text)
        except (OSError, ValueError) as e:
            print(f"错误: {e}", file=sys.stderr)
            logger.debug("生成摘要失败", exc_info=True)
            return 1

        if args.copy:
            if copy_to_clipboard(text):
                print("摘要已复制到剪贴板", file=sys.stderr)
            else:
                print("警告: 复制到剪贴板失败", file=sys.stderr)

        return 0
