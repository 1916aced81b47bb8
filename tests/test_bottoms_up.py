import unittest
from tree_summary_tool.models import Frame, CallTreeNode, RootNode
from tree_summary_tool.summary.bottoms_up import aggregate_frame_weights, build_bottoms_up_entries


def _child(parent, frame, total, self_weight):
    node = parent.add_child(CallTreeNode(frame))
    node.add_weight(total, self_weight)
    return node


class TestBottomsUp(unittest.TestCase):
    def setUp(self):
        # root -> F(100, 20) -> G(80, 30) -> F(50, 50)
        self.frame_f = Frame("F", "f.py", 1)
        self.frame_g = Frame("G", "g.py", 2)
        self.root = RootNode()
        self.outer_f = _child(self.root, self.frame_f, 100, 20)
        self.node_g = _child(self.outer_f, self.frame_g, 80, 30)
        self.inner_f = _child(self.node_g, self.frame_f, 50, 50)

    def test_recursive_frame_is_merged(self):
        weights = aggregate_frame_weights(self.root)
        self.assertEqual(len(weights), 2)
        self.assertEqual(weights[self.frame_f], (150, 70))
        self.assertEqual(weights[self.frame_g], (80, 30))

    def test_self_weights_sum_to_subtree_total(self):
        weights = aggregate_frame_weights(self.root)
        self.assertEqual(sum(s for _, s in weights.values()), self.root.get_total_weight())

        weights = aggregate_frame_weights(self.node_g)
        self.assertEqual(sum(s for _, s in weights.values()), self.node_g.get_total_weight())

    def test_root_is_not_an_entry(self):
        entries = build_bottoms_up_entries(self.root, 100, 0)
        self.assertTrue(all(entry.frame is not None for entry in entries))
        self.assertEqual(len(entries), 2)

    def test_sorted_by_self_weight(self):
        entries = build_bottoms_up_entries(self.root, 100, 0)
        self.assertEqual([entry.frame.name for entry in entries], ["F", "G"])
        self.assertAlmostEqual(entries[0].self_percent, 70.0)
        self.assertAlmostEqual(entries[0].total_percent, 150.0)

    def test_identity_not_value_equality(self):
        # 名称相同但不是同一个 Frame 对象时不合并
        root = RootNode()
        _child(root, Frame("dup"), 10, 10)
        _child(root, Frame("dup"), 5, 5)
        entries = build_bottoms_up_entries(root, 15, 0)
        self.assertEqual([entry.self_weight for entry in entries], [10, 5])

    def test_aggregation_passes_threshold(self):
        # 每个调用点各自只有 0.8，合并后超过阈值 1
        leaf = Frame("leaf")
        root = RootNode()
        for name in ("a", "b"):
            parent = _child(root, Frame(name), 50, 49.2)
            _child(parent, leaf, 0.8, 0.8)
        entries = build_bottoms_up_entries(root, 100, 1)
        self.assertIn(leaf, [entry.frame for entry in entries])
        entry = [e for e in entries if e.frame is leaf][0]
        self.assertAlmostEqual(entry.self_weight, 1.6)

    def test_threshold_uses_self_weight(self):
        entries = build_bottoms_up_entries(self.root, 100, 40)
        self.assertEqual([entry.frame.name for entry in entries], ["F"])

    def test_subtree_scope(self):
        entries = build_bottoms_up_entries(self.node_g, 100, 0)
        self.assertEqual([(e.frame.name, e.self_weight) for e in entries], [("F", 50), ("G", 30)])

    def test_deep_chain_merges_self_weight(self):
        # 2000 层递归，自身权重分布在第 1000 层 (30) 和最底层 (70)
        depth = 2000
        frame = Frame("recurse")
        root = RootNode()
        node = root
        for level in range(1, depth + 1):
            if level < 1000:
                node = _child(node, frame, 100, 0)
            elif level == 1000:
                node = _child(node, frame, 100, 30)
            elif level < depth:
                node = _child(node, frame, 70, 0)
            else:
                node = _child(node, frame, 70, 70)

        entries = build_bottoms_up_entries(root, 100, 1)
        self.assertEqual(len(entries), 1)
        self.assertIs(entries[0].frame, frame)
        self.assertEqual(entries[0].self_weight, 30 + 70)
        self.assertAlmostEqual(entries[0].self_percent, 100.0)
        self.assertEqual(entries[0].total_weight, 1000 * 100 + 1000 * 70)


if __name__ == '__main__':
    unittest.main()
