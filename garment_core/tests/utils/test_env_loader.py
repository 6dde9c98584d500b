import os
import tempfile
import unittest

from garment_core.utils.env_loader import env_flag, env_list, load_env_from_file

LOGGER = 'garment_core.utils.env_loader'


class TestEnvLoader(unittest.TestCase):

    def setUp(self):
        self.original_environ = os.environ.copy()
        self.temp_dir = tempfile.TemporaryDirectory()
        self.env_path = os.path.join(self.temp_dir.name, "env_var.env")

    def tearDown(self):
        os.environ.clear()
        os.environ.update(self.original_environ)
        self.temp_dir.cleanup()

    def write_env(self, content):
        with open(self.env_path, 'w') as f:
            f.write(content)

    def test_loads_keys_and_skips_comments(self):
        self.write_env(
            "GARMENT_TEST_A=alpha\n"
            "# comment\n"
            "\n"
            "  GARMENT_TEST_B =  beta with spaces  \n"
            "export GARMENT_TEST_C=gamma\n"
            "GARMENT_TEST_D=\"quoted value\"\n"
            "GARMENT_TEST_EMPTY=\n"
        )

        with self.assertLogs(LOGGER, level='INFO') as cm:
            result = load_env_from_file(self.env_path)

        self.assertTrue(result)
        self.assertEqual(os.environ["GARMENT_TEST_A"], "alpha")
        self.assertEqual(os.environ["GARMENT_TEST_B"], "beta with spaces")
        self.assertEqual(os.environ["GARMENT_TEST_C"], "gamma")
        self.assertEqual(os.environ["GARMENT_TEST_D"], "quoted value")
        self.assertEqual(os.environ["GARMENT_TEST_EMPTY"], "")
        self.assertIn(f"INFO:{LOGGER}:Loaded 5 environment variables from {self.env_path}", cm.output)

    def test_value_may_contain_equals_sign(self):
        self.write_env("GARMENT_TEST_URL=postgres://u:p@host/db?opt=1\n")
        self.assertTrue(load_env_from_file(self.env_path))
        self.assertEqual(os.environ["GARMENT_TEST_URL"], "postgres://u:p@host/db?opt=1")

    def test_missing_file_logs_warning(self):
        missing = os.path.join(self.temp_dir.name, "missing.env")
        with self.assertLogs(LOGGER, level='WARNING') as cm:
            result = load_env_from_file(missing)

        self.assertFalse(result)
        self.assertIn(f"WARNING:{LOGGER}:Environment file not found: {missing}", cm.output)

    def test_malformed_line_logs_error(self):
        self.write_env("LINE_WITHOUT_EQUALS")
        with self.assertLogs(LOGGER, level='ERROR') as cm:
            result = load_env_from_file(self.env_path)

        self.assertFalse(result)
        self.assertTrue(any(f"Error loading environment variables from {self.env_path}" in line for line in cm.output))

    def test_empty_key_is_rejected(self):
        self.write_env("=value_for_empty_key")
        with self.assertLogs(LOGGER, level='ERROR'):
            result = load_env_from_file(self.env_path)
        self.assertFalse(result)

    def test_override_flag(self):
        os.environ["GARMENT_TEST_EXISTING"] = "from_process"
        self.write_env("GARMENT_TEST_EXISTING=from_file\n")

        load_env_from_file(self.env_path, override=False)
        self.assertEqual(os.environ["GARMENT_TEST_EXISTING"], "from_process")

        load_env_from_file(self.env_path)
        self.assertEqual(os.environ["GARMENT_TEST_EXISTING"], "from_file")

    def test_env_flag_and_list(self):
        os.environ["GARMENT_TEST_FLAG"] = "Yes"
        os.environ["GARMENT_TEST_LIST"] = "ecommerce, admin,,"
        self.assertTrue(env_flag("GARMENT_TEST_FLAG"))
        self.assertFalse(env_flag("GARMENT_TEST_UNSET_FLAG"))
        self.assertTrue(env_flag("GARMENT_TEST_UNSET_FLAG", default=True))
        self.assertEqual(env_list("GARMENT_TEST_LIST"), ["ecommerce", "admin"])


if __name__ == '__main__':
    unittest.main()
