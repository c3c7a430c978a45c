import subprocess
import sys
import unittest

from carli import __version__
from carli.__main__ import main
from carli.streams import memory


class TestVersionFlag(unittest.TestCase):
    def test_version_goes_to_output_stream(self):
        streams = memory()
        with self.assertRaises(SystemExit) as cm:
            main(["--version"], streams)
        self.assertEqual(cm.exception.code, 0)
        self.assertEqual(streams.output_bytes().decode("utf-8"), f"carli {__version__}\n")
        self.assertEqual(streams.error_bytes(), b"")

    def test_version_flag_as_a_process(self):
        proc = subprocess.run(
            [sys.executable, "-m", "carli", "--version"],
            check=False,
            capture_output=True,
            text=True,
        )
        self.assertEqual(proc.returncode, 0)
        self.assertEqual(proc.stdout.strip(), f"carli {__version__}")
        self.assertEqual(proc.stderr, "")


if __name__ == "__main__":
    unittest.main()
