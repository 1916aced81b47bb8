import unittest
import subprocess
from unittest.mock import patch

from tree_summary_tool.utils import clipboard


class TestClipboard(unittest.TestCase):
    @patch('tree_summary_tool.utils.clipboard.shutil.which', return_value=None)
    def test_no_command(self, _which):
        self.assertFalse(clipboard.copy_to_clipboard("text"))

    @patch('tree_summary_tool.utils.clipboard.subprocess.run')
    @patch('tree_summary_tool.utils.clipboard.shutil.which',
           side_effect=lambda name: '/usr/bin/xclip' if name == 'xclip' else None)
    def test_success(self, _which, run):
        self.assertTrue(clipboard.copy_to_clipboard("héllo"))
        args, kwargs = run.call_args
        self.assertEqual(args[0], ['xclip', '-selection', 'clipboard'])
        self.assertEqual(kwargs['input'], "héllo".encode('utf-8'))

    @patch('tree_summary_tool.utils.clipboard.subprocess.run',
           side_effect=subprocess.CalledProcessError(1, 'pbcopy'))
    @patch('tree_summary_tool.utils.clipboard.shutil.which', return_value='/usr/bin/pbcopy')
    def test_failure_returns_false(self, _which, _run):
        self.assertFalse(clipboard.copy_to_clipboard("text"))

    @patch('tree_summary_tool.utils.clipboard.subprocess.run', side_effect=OSError("denied"))
    @patch('tree_summary_tool.utils.clipboard.shutil.which', return_value='/usr/bin/pbcopy')
    def test_os_error_returns_false(self, _which, _run):
        self.assertFalse(clipboard.copy_to_clipboard("text"))


if __name__ == '__main__':
    unittest.main()
