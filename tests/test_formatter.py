"""
摘要报告格式化单元测试
"""

import unittest

from tree_summary_tool.models import Frame, CallTreeNode, RootNode, Profile, TreeLine
from tree_summary_tool.summary.formatter import (
    format_tree_line, generate_tree_summary, generate_profile_summary, generate_all_profiles_summary,
)
from tree_summary_tool.utils.formatting import format_raw


def _child(parent, frame, total, self_weight):
    node = parent.add_child(CallTreeNode(frame))
    node.add_weight(total, self_weight)
    return node


SEPARATOR = '-' * 60
DOUBLE_SEPARATOR = '=' * 60


class TestFormatTreeLine(unittest.TestCase):
    """测试单行格式化"""

    def test_short_name_has_no_padding(self):
        line = TreeLine("└─ ", "B", None, None, None, 90, 90, 90.0, 90.0)
        self.assertEqual(format_tree_line(line, format_raw),
                         ["└─ B", "└─ [90 (90.0%), self: 90 (90.0%)]"])

    def test_long_name_right_aligns_stats(self):
        line = TreeLine("│  ├─ ", "a_rather_long_function_name", "src/some/module.py", 120, 8,
                        5, 1, 5.0, 1.0)
        first, second = format_tree_line(line, format_raw)
        self.assertEqual(first, "│  ├─ a_rather_long_function_name (src/some/module.py:120:8)")
        self.assertEqual(len(first), len(second))
        self.assertTrue(second.startswith("│  ├─ "))
        self.assertTrue(second.endswith("[5 (5.0%), self: 1 (1.0%)]"))


class TestGenerateTreeSummary(unittest.TestCase):
    """测试单个子树报告"""

    def setUp(self):
        self.root = RootNode()
        self.node_a = _child(self.root, Frame("A"), 100, 10)
        self.node_b = _child(self.node_a, Frame("B"), 90, 90)

    def test_reference_example(self):
        expected = '\n'.join([
            'Performance Summary',
            DOUBLE_SEPARATOR,
            '',
            'Bottoms Up (by self time, >=1% of total):',
            SEPARATOR,
            '',
            'B',
            '[self: 90 (90.0%), total: 90 (90.0%)]',
            '',
            'A',
            '[self: 10 (10.0%), total: 100 (100.0%)]',
            '',
            'Call Tree (callees, >=1% of selection):',
            SEPARATOR,
            '',
            'A',
            '[100 (100.0%), self: 10 (10.0%)]',
            '└─ B',
            '└─ [90 (90.0%), self: 90 (90.0%)]',
            '',
            SEPARATOR,
            'Total weight of profile: 100',
        ])
        self.assertEqual(generate_tree_summary(self.root, 100, format_raw), expected)

    def test_selected_node_header(self):
        root = RootNode()
        node = _child(root, Frame("work", "app.py", 10, 2), 40, 5)
        _child(node, Frame("leaf"), 35, 35)
        _child(root, Frame("other"), 60, 60)

        text = generate_tree_summary(node, 100, format_raw)
        lines = text.split('\n')
        self.assertEqual(lines[3:8], [
            'Selected: work',
            'Location: app.py:10:2',
            'Total: 40 (40.0%)',
            'Self: 5 (5.0%)',
            '',
        ])
        # 兄弟节点不在所选子树中
        self.assertNotIn('other', text)

    def test_selected_node_without_file_has_no_location(self):
        text = generate_tree_summary(self.node_b, 100, format_raw)
        self.assertIn('Selected: B', text)
        self.assertNotIn('Location:', text)

    def test_call_tree_threshold_is_relative_to_selection(self):
        # small 占整个剖析 0.5%，但占所选节点 50%
        root = RootNode()
        _child(root, Frame("big"), 990, 990)
        selected = _child(root, Frame("selected"), 10, 5)
        _child(selected, Frame("small"), 5, 5)

        text = generate_tree_summary(selected, 1000, format_raw)
        call_tree = text.split('Call Tree (callees, >=1% of selection):')[1]
        self.assertIn('└─ small', call_tree)
        # 自底向上视图按整个剖析过滤: 5 < 10
        self.assertNotIn('Bottoms Up', text)

    def test_empty_profile(self):
        self.assertEqual(generate_tree_summary(RootNode(), 0, format_raw), 'No data available')

    def test_zero_weight_profile_has_no_nan(self):
        root = RootNode()
        _child(root, Frame("idle"), 0, 0)
        text = generate_tree_summary(root, 0, format_raw)
        self.assertNotIn('nan', text)
        self.assertIn('[0 (0.0%), self: 0 (0.0%)]', text)

    def test_idempotent(self):
        first = generate_tree_summary(self.root, 100, format_raw)
        second = generate_tree_summary(self.root, 100, format_raw)
        self.assertEqual(first, second)

    def test_format_value_failure_propagates(self):
        def broken(value):
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            generate_tree_summary(self.root, 100, broken)

    def test_custom_threshold_label(self):
        text = generate_tree_summary(self.root, 100, format_raw, threshold=0.05)
        self.assertIn('Bottoms Up (by self time, >=5% of total):', text)
        self.assertIn('Call Tree (callees, >=5% of selection):', text)

    def test_profile_summary_uses_profile_formatter(self):
        profile = Profile("p", self.root, format_value=lambda v: f"{v:.0f}ms")
        text = generate_profile_summary(profile)
        self.assertIn('Total weight of profile: 100ms', text)

    def test_deep_recursion_summary(self):
        depth = 1500
        frame = Frame("recurse")
        root = RootNode()
        node = root
        for _ in range(depth - 1):
            node = _child(node, frame, 100, 0)
        _child(node, frame, 100, 100)

        text = generate_tree_summary(root, 100, format_raw)
        self.assertIn('[self: 100 (100.0%), total: 150000 (150000.0%)]', text)
        self.assertIn(' ' * (3 * (depth - 2)) + '└─ recurse\n', text)

        text = generate_all_profiles_summary([("deep", Profile("deep", root))])
        self.assertIn('Total profiles: 1', text)


class TestGenerateAllProfilesSummary(unittest.TestCase):
    """测试多剖析报告"""

    def _make_profile(self, name, weight):
        root = RootNode()
        _child(root, Frame(f"{name}_main"), weight, weight)
        return Profile(name, root)

    def test_two_profiles_keep_order(self):
        profiles = [("first", self._make_profile("first", 10)),
                    ("second", self._make_profile("second", 20))]
        text = generate_all_profiles_summary(profiles)
        lines = text.split('\n')

        self.assertEqual(lines[:5], ['Performance Profile Summary', DOUBLE_SEPARATOR, '',
                                     'Total profiles: 2', ''])
        headers = [line for line in lines if line.startswith('Profile ')]
        self.assertEqual(headers, ['Profile 1/2: first', 'Profile 2/2: second'])
        self.assertIn('Total: 10', lines)
        self.assertIn('Call Tree (>=1% of total):', lines)
        self.assertLess(text.index('first_main'), text.index('second_main'))

    def test_single_profile_has_no_sub_header(self):
        text = generate_all_profiles_summary([("only", self._make_profile("only", 10))])
        self.assertIn('Total profiles: 1', text)
        self.assertNotIn('Profile 1/1', text)
        self.assertIn('only_main', text)

    def test_each_profile_uses_own_total(self):
        root = RootNode()
        _child(root, Frame("heavy"), 995, 995)
        _child(root, Frame("tiny"), 5, 5)
        text = generate_all_profiles_summary([
            ("a", Profile("a", root)),
            ("b", self._make_profile("b", 5)),
        ])
        # tiny 占 a 的 0.5%，被过滤；b_main 占 b 的 100%
        self.assertNotIn('tiny', text)
        self.assertIn('b_main', text)

    def test_empty_profile_list(self):
        text = generate_all_profiles_summary([])
        self.assertIn('Total profiles: 0', text)


if __name__ == '__main__':
    unittest.main()
