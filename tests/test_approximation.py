import math
import unittest

import numpy as np

from numfrac import (
    ApproximationOverflowError,
    Fraction,
    Representation,
    decimal_to_fraction,
    gcd,
    reset_config,
)

WIDE = {"int_type": np.int64, "float_type": np.float64}


class DecimalToFractionTests(unittest.TestCase):
    def setUp(self):
        reset_config()

    def test_recovers_small_denominators(self):
        self.assertEqual(decimal_to_fraction(0.263157894737), Fraction(5, 19))
        self.assertEqual(decimal_to_fraction(-0.263157894737), Fraction(-5, 19))
        self.assertEqual(decimal_to_fraction(0.5), Fraction(1, 2))
        self.assertEqual(decimal_to_fraction(0.125), Fraction(1, 8))
        self.assertEqual(decimal_to_fraction(1.5), Fraction(3, 2))

    def test_whole_numbers_skip_iteration(self):
        self.assertEqual(decimal_to_fraction(-3.0), Fraction(-3))
        self.assertEqual(decimal_to_fraction(0.0), Fraction(0))
        self.assertEqual(decimal_to_fraction(-0.0), Fraction(0))
        self.assertEqual(decimal_to_fraction(2.0**40, **WIDE).n, 2**40)

    def test_whole_numbers_outside_integer_range_overflow(self):
        with self.assertRaises(OverflowError):
            decimal_to_fraction(3e9)

    def test_accuracy_selects_convergent(self):
        self.assertEqual(decimal_to_fraction(math.pi, 1e-2, **WIDE), Fraction(22, 7))
        self.assertEqual(decimal_to_fraction(math.pi, 1e-3, **WIDE), Fraction(333, 106))
        self.assertEqual(decimal_to_fraction(math.pi, 1e-6, **WIDE), Fraction(355, 113))

    def test_result_within_accuracy(self):
        for value in (0.1, 1 / 3, math.sqrt(2), math.e, -2.718281828, 1234.5678):
            approx = decimal_to_fraction(value, 1e-9, **WIDE)
            self.assertLessEqual(abs(value - float(approx)), 1e-9)

    def test_sign_is_symmetric(self):
        for value in (0.1, 0.75, math.pi, 12.34):
            self.assertEqual(decimal_to_fraction(-value), -decimal_to_fraction(value))

    def test_wider_representation_improves_accuracy(self):
        narrow = Fraction.from_float(np.float32(math.pi), int_type=np.int32, float_type=np.float32)
        wide = Fraction.from_float(math.pi, int_type=np.int64, float_type=np.float64)

        narrow_error = abs(math.pi - float(narrow.value()))
        wide_error = abs(math.pi - float(wide.value()))
        self.assertGreater(narrow_error, wide_error)

    def test_overflow_keeps_last_estimate(self):
        with self.assertLogs("numfrac.approximation", level="DEBUG"):
            value = decimal_to_fraction(math.pi, int_type=np.int8, float_type=np.float64)
        self.assertEqual(value, Fraction(22, 7))
        self.assertEqual(value.int_type, np.dtype(np.int8))

    def test_overflow_on_first_convergent_yields_zero(self):
        value = decimal_to_fraction(1e-30, int_type=np.int32, float_type=np.float64)
        self.assertEqual(value, Fraction(0))

    def test_overflow_can_raise(self):
        with self.assertRaises(ApproximationOverflowError) as ctx:
            decimal_to_fraction(math.pi, on_overflow="raise", int_type=np.int8, float_type=np.float64)
        self.assertIsInstance(ctx.exception, OverflowError)
        self.assertEqual(ctx.exception.estimate, (22, 7))
        self.assertEqual(ctx.exception.representation.int_type, np.dtype(np.int8))

    def test_non_finite_values_are_rejected(self):
        for value in (math.nan, math.inf, -math.inf):
            with self.assertRaises(ValueError):
                decimal_to_fraction(value)
            with self.assertRaises(ValueError):
                Fraction(value)

    def test_invalid_options_are_rejected(self):
        with self.assertRaises(ValueError):
            decimal_to_fraction(0.5, 0.0)
        with self.assertRaises(ValueError):
            decimal_to_fraction(0.5, math.nan)
        with self.assertRaises(ValueError):
            decimal_to_fraction(0.5, on_overflow="wrap")


class GcdTests(unittest.TestCase):
    def test_gcd(self):
        self.assertEqual(gcd(0, 5), 5)
        self.assertEqual(gcd(0, -5), 5)
        self.assertEqual(gcd(-12, 18), 6)
        self.assertEqual(gcd(18, -12), 6)
        self.assertEqual(gcd(17, 5), 1)
        self.assertEqual(gcd(np.int32(45), np.int32(10)), 5)
        self.assertEqual(gcd(0, 0), 0)

    def test_gcd_is_positive_for_nonzero_input(self):
        for a, b in [(1, 0), (-7, 0), (-3, -9), (2**40, 2**20)]:
            self.assertGreaterEqual(gcd(a, b), 1)


class RepresentationTests(unittest.TestCase):
    def test_resolve_and_range(self):
        rep = Representation.resolve("int16", np.float32)
        self.assertEqual(rep.max_int, 32767)
        self.assertEqual(rep.min_int, -32767)
        self.assertTrue(rep.fits(-32767))
        self.assertFalse(rep.fits(-32768))
        self.assertFalse(rep.fits(32768))
        self.assertEqual(str(rep), "int16/float32")

    def test_promotion(self):
        narrow = Representation.resolve(np.int8, np.float16)
        wide = Representation.resolve(np.int64, np.float64)
        self.assertEqual(narrow.promote(wide), wide)
        self.assertEqual(wide.promote(narrow), wide)
        mixed = Representation.resolve(np.int64, np.float16).promote(
            Representation.resolve(np.int8, np.float32)
        )
        self.assertEqual(mixed, Representation.resolve(np.int64, np.float32))

    def test_rejects_non_signed_types(self):
        with self.assertRaises(ValueError):
            Representation.resolve(np.uint8, np.float32)
        with self.assertRaises(ValueError):
            Representation.resolve(np.int8, np.complex64)
        with self.assertRaises(ValueError):
            Representation.resolve(bool, np.float32)


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
