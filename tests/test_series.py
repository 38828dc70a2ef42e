import io
import math
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from fractions import Fraction

from rational64 import Rational, euler_approximation, zeno_approximation
from rational64.__main__ import main
from rational64.series import euler_partial_sums, zeno_partial_sums


def _euler_reference(terms):
    return sum(Fraction(1, math.factorial(k)) for k in range(terms + 1))


class SeriesTests(unittest.TestCase):
    def test_euler_small_cases(self):
        self.assertEqual(euler_approximation(0), Rational(1))
        self.assertEqual(euler_approximation(1), Rational(2))
        self.assertEqual(euler_approximation(2), Rational(5, 2))

    def test_euler_default_matches_reference(self):
        approx = euler_approximation()
        self.assertEqual(approx.as_fraction(), _euler_reference(11))
        self.assertAlmostEqual(approx.value, math.e, places=7)

    def test_euler_largest_representable(self):
        self.assertEqual(euler_approximation(20).as_fraction(), _euler_reference(20))
        with self.assertRaises(OverflowError):
            euler_approximation(21)

    def test_zeno(self):
        self.assertEqual(zeno_approximation(), Rational(524287, 524288))
        self.assertEqual(zeno_approximation(0), Rational(0))
        self.assertEqual(zeno_approximation(62), Rational(2**62 - 1, 2**62))
        with self.assertRaises(OverflowError):
            zeno_approximation(63)

    def test_partial_sums(self):
        self.assertEqual(
            list(zeno_partial_sums(3)), [Rational(1, 2), Rational(3, 4), Rational(7, 8)]
        )
        self.assertEqual(len(list(euler_partial_sums(5))), 5)

    def test_negative_terms_rejected(self):
        with self.assertRaises(ValueError):
            euler_approximation(-1)
        with self.assertRaises(ValueError):
            zeno_approximation(-1)


class CommandLineTests(unittest.TestCase):
    def run_main(self, argv):
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            code = main(argv)
        self.assertEqual(code, 0)
        return stdout.getvalue()

    def assert_exits_with_error(self, argv):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(argv)
        self.assertEqual(ctx.exception.code, 2)

    def write_parfile(self, text):
        handle, path = tempfile.mkstemp(suffix=".toml")
        with os.fdopen(handle, "w") as f:
            f.write(text)
        self.addCleanup(os.remove, path)
        return path

    def test_default_output(self):
        output = self.run_main([])
        lines = output.splitlines()
        self.assertEqual(lines[0], "Approximation of Euler's constant via power series.")
        self.assertTrue(lines[1].startswith(f"\te ≈ {euler_approximation()} ≈ "))
        self.assertEqual(lines[2], "Exploration of Zeno's paradox approaching 1.")
        self.assertTrue(lines[3].startswith("\t1 ≈ 524287/524288 ≈ "))

    def test_term_options(self):
        output = self.run_main(["--e-terms", "2", "--zeno-terms", "3"])
        self.assertIn("e ≈ 5/2 ≈ 2.5", output)
        self.assertIn("1 ≈ 7/8 ≈ 0.875", output)

    def test_zero_terms(self):
        output = self.run_main(["--e-terms", "0", "--zeno-terms", "0"])
        self.assertIn("e ≈ 1/1 ≈ 1.0", output)
        self.assertIn("1 ≈ 0/1 ≈ 0.0", output)

    def test_parfile(self):
        path = self.write_parfile("e_terms = 2\nzeno_terms = 1\n")
        output = self.run_main(["--parfile", path])
        self.assertIn("e ≈ 5/2", output)
        self.assertIn("1 ≈ 1/2", output)

        output = self.run_main(["--parfile", path, "--zeno-terms", "2"])
        self.assertIn("1 ≈ 3/4", output)

    def test_invalid_arguments(self):
        self.assert_exits_with_error(["--e-terms", "-1"])
        self.assert_exits_with_error(["--zeno-terms", "70"])
        self.assert_exits_with_error(["--parfile", os.path.join(tempfile.gettempdir(), "missing.toml")])
        self.assert_exits_with_error(["--parfile", self.write_parfile('e_terms = "many"\n')])
        self.assert_exits_with_error(["--parfile", self.write_parfile("e_terms = \n")])


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
