import io
import unittest

from carli.errors import CarliError, EXIT_FAILURE, error


class TestCarliError(unittest.TestCase):
    def test_default_status_is_one(self):
        err = CarliError()
        self.assertEqual(err.get_status(), EXIT_FAILURE)
        self.assertIsNone(err.get_message())
        self.assertIsNone(err.get_context())

    def test_new_with_status(self):
        self.assertEqual(CarliError(123).get_status(), 123)

    def test_set_original_message(self):
        err = CarliError().message("The original message.")
        self.assertEqual(err.get_message(), "The original message.")

    def test_message_is_replaced(self):
        err = CarliError().message("first").message("second")
        self.assertEqual(err.get_message(), "second")

    def test_add_context_message(self):
        err = CarliError().context("The context message.")
        self.assertEqual(err.get_context(), ("The context message.",))

    def test_context_keeps_insertion_order(self):
        err = CarliError().context("a").context("b").context("c")
        self.assertEqual(err.get_context(), ("a", "b", "c"))

    def test_inspection_does_not_consume(self):
        err = CarliError(4).message("m").context("c")
        for _ in range(2):
            self.assertEqual(err.get_status(), 4)
            self.assertEqual(err.get_message(), "m")
            self.assertEqual(err.get_context(), ("c",))

    def test_error_helper_formats_message(self):
        err = error(1, "The {} message.", "error")
        self.assertEqual(err.get_message(), "The error message.")
        self.assertEqual(err.get_status(), 1)

    def test_error_helper_leaves_braces_alone_without_args(self):
        err = error(1, "Literal {braces}.")
        self.assertEqual(err.get_message(), "Literal {braces}.")

    def test_error_helper_status_only(self):
        err = error(5)
        self.assertIsNone(err.get_message())
        self.assertEqual(err.get_status(), 5)

    def test_raised_and_caught(self):
        def fail():
            raise error(1, "The error message.")

        with self.assertRaises(CarliError) as cm:
            fail()
        self.assertEqual(cm.exception.get_message(), "The error message.")


class TestDisplay(unittest.TestCase):
    def test_display_only_status(self):
        self.assertEqual(str(CarliError()), "")

    def test_display_with_message(self):
        err = CarliError().message("The original message.")
        self.assertEqual(str(err), "The original message.\n")

    def test_display_with_context(self):
        err = (
            CarliError()
            .context("The lower level context message.")
            .context("The higher level context message.")
        )
        self.assertEqual(
            err.render(),
            "The higher level context message.\n  The lower level context message.\n",
        )

    def test_display_with_message_and_context(self):
        err = (
            CarliError(1)
            .message("The original error message.")
            .context("Some added context.")
            .context("Even more specific context.")
        )
        self.assertEqual(
            str(err),
            "Even more specific context.\n"
            "  Some added context.\n"
            "    The original error message.\n",
        )

    def test_each_context_line_is_indented_deeper(self):
        err = CarliError().message("root")
        for i in range(5):
            err.context(f"ctx{i}")
        lines = err.render().splitlines()
        self.assertEqual([line.strip() for line in lines], ["ctx4", "ctx3", "ctx2", "ctx1", "ctx0", "root"])
        for depth, line in enumerate(lines):
            self.assertTrue(line.startswith("  " * depth))
            self.assertFalse(line.startswith("  " * depth + " "))


class TestExit(unittest.TestCase):
    def test_exit_prints_and_uses_status(self):
        buf = io.StringIO()
        with self.assertRaises(SystemExit) as cm:
            CarliError(3).message("boom").context("While testing.").exit(buf)
        self.assertEqual(cm.exception.code, 3)
        self.assertEqual(buf.getvalue(), "While testing.\n  boom\n")

    def test_exit_without_message_or_context_is_silent(self):
        buf = io.StringIO()
        with self.assertRaises(SystemExit) as cm:
            CarliError(9).exit(buf)
        self.assertEqual(cm.exception.code, 9)
        self.assertEqual(buf.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
