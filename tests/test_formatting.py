import unittest
from tree_summary_tool.utils.formatting import (
    safe_percent, format_percent, format_threshold_label, format_location, format_display_name,
    format_raw, format_time, format_bytes, make_value_formatter, normalize_unit,
)


class TestPercent(unittest.TestCase):
    def test_safe_percent(self):
        self.assertEqual(safe_percent(25, 200), 12.5)
        self.assertEqual(safe_percent(5, 0), 0.0)

    def test_format_percent(self):
        self.assertEqual(format_percent(12.345), "12.3%")
        self.assertEqual(format_percent(100), "100.0%")
        self.assertEqual(format_percent(0), "0.0%")

    def test_threshold_label(self):
        self.assertEqual(format_threshold_label(0.01), ">=1%")
        self.assertEqual(format_threshold_label(0.05), ">=5%")
        self.assertEqual(format_threshold_label(0.005), ">=0.5%")


class TestLocation(unittest.TestCase):
    def test_format_location(self):
        self.assertIsNone(format_location(None, 1, 2))
        self.assertEqual(format_location("a.py"), "a.py")
        self.assertEqual(format_location("a.py", 3), "a.py:3")
        self.assertEqual(format_location("a.py", 3, 7), "a.py:3:7")
        # 没有行号时不显示列号
        self.assertEqual(format_location("a.py", None, 7), "a.py")

    def test_format_display_name(self):
        self.assertEqual(format_display_name("f"), "f")
        self.assertEqual(format_display_name("f", "a.py", 3), "f (a.py:3)")


class TestValueFormatters(unittest.TestCase):
    def test_format_raw(self):
        self.assertEqual(format_raw(100.0), "100")
        self.assertEqual(format_raw(2.5), "2.50")

    def test_format_time(self):
        self.assertEqual(format_time(850, 'nanoseconds'), "850ns")
        self.assertEqual(format_time(12.3, 'microseconds'), "12.30μs")
        self.assertEqual(format_time(1500, 'microseconds'), "1.50ms")
        self.assertEqual(format_time(2, 'seconds'), "2.00s")

    def test_format_bytes(self):
        self.assertEqual(format_bytes(512), "512 B")
        self.assertEqual(format_bytes(2048), "2.00 KB")
        self.assertEqual(format_bytes(3 * 1024 * 1024), "3.00 MB")

    def test_make_value_formatter(self):
        self.assertEqual(make_value_formatter('ms')(2.5), "2.50ms")
        self.assertEqual(make_value_formatter('bytes')(2048), "2.00 KB")
        self.assertEqual(make_value_formatter('none')(7), "7")

    def test_unknown_unit(self):
        with self.assertRaises(ValueError):
            make_value_formatter('parsecs')
        with self.assertRaises(ValueError):
            normalize_unit('  ')

    def test_unit_aliases(self):
        self.assertEqual(normalize_unit('US'), 'microseconds')
        self.assertEqual(normalize_unit('samples'), 'none')


if __name__ == '__main__':
    unittest.main()
