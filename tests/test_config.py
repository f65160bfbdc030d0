import math
import tempfile
import unittest
from pathlib import Path

import numpy as np

from numfrac import Config, Fraction, configure, get_config, load_config, reset_config


class ConfigTests(unittest.TestCase):
    def setUp(self):
        reset_config()

    def tearDown(self):
        reset_config()

    def test_defaults(self):
        config = get_config()
        self.assertEqual(config.accuracy, 1e-19)
        self.assertEqual(config.int_type, "int32")
        self.assertEqual(config.float_type, "float32")
        self.assertEqual(config.on_overflow, "truncate")

    def test_configure_changes_default_representation(self):
        configure(int_type=np.int64, float_type="float64")
        self.assertEqual(get_config().int_type, "int64")
        value = Fraction(1, 2)
        self.assertEqual(value.int_type, np.dtype(np.int64))
        self.assertEqual(value.float_type, np.dtype(np.float64))
        self.assertEqual(repr(value), "Fraction(1, 2)")

    def test_configure_changes_default_accuracy(self):
        configure(int_type="int64", float_type="float64", accuracy=1e-3)
        self.assertEqual(Fraction(math.pi), Fraction(333, 106))
        # Explicit arguments win over the active defaults.
        self.assertEqual(Fraction.from_float(math.pi, accuracy=1e-2), Fraction(22, 7))

    def test_configure_overflow_policy(self):
        configure(int_type="int8", float_type="float64", on_overflow="raise")
        with self.assertRaises(OverflowError):
            Fraction(math.pi)
        self.assertEqual(Fraction.from_float(math.pi, on_overflow="truncate"), Fraction(22, 7))

    def test_configure_validates(self):
        with self.assertRaises(ValueError):
            configure(accuracy=-1.0)
        with self.assertRaises(ValueError):
            configure(on_overflow="saturate")
        with self.assertRaises(ValueError):
            configure(int_type="uint16")
        with self.assertRaises(TypeError):
            configure(precision=3)
        self.assertEqual(get_config(), Config())

    def test_load_config_from_toml(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "numfrac.toml"
            path.write_text(
                "[numfrac]\n"
                "accuracy = 1e-3\n"
                'int_type = "int16"\n'
                'float_type = "float64"\n'
            )
            with self.assertLogs("numfrac.config", level="INFO"):
                config = load_config(path)

        self.assertEqual(config, get_config())
        self.assertEqual(config.accuracy, 1e-3)
        self.assertEqual(config.int_type, "int16")
        self.assertEqual(config.on_overflow, "truncate")
        self.assertEqual(Fraction(math.pi), Fraction(333, 106, int_type=np.int16))

    def test_load_config_top_level_keys(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "settings.toml"
            path.write_text('on_overflow = "raise"\nunused = 1\n')
            with self.assertLogs("numfrac.config", level="WARNING"):
                config = load_config(path)
        self.assertEqual(config.on_overflow, "raise")
        self.assertEqual(config.int_type, "int32")


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
