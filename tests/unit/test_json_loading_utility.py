"""Unit tests for JsonLoadingUtility"""

import json
import os
import shutil
import tempfile
import unittest

from apps_on_ecs.utilities.json_loading_utility import JsonLoadingUtility


class TestJsonLoadingUtility(unittest.TestCase):
    """Test cases for placeholder replacement"""

    def test_recursive_replace_keys_and_values(self):
        """Placeholders are replaced in keys, values and lists"""
        data = {
            "{{ENVIRONMENT}}_cluster": {
                "name": "{{WORKLOAD_NAME}}-{{ENVIRONMENT}}",
                "security_group_ids": ["{{SG_1}}", "{{SG_2}}"],
            },
            "desired_count": 2,
        }

        replacements = {
            "{{ENVIRONMENT}}": "prod",
            "{{WORKLOAD_NAME}}": "shop",
            "{{SG_1}}": "sg-abc",
            "{{SG_2}}": "sg-def",
        }

        result = JsonLoadingUtility.recursive_replace(data, replacements)

        self.assertIn("prod_cluster", result)
        self.assertEqual(result["prod_cluster"]["name"], "shop-prod")
        self.assertEqual(result["prod_cluster"]["security_group_ids"], ["sg-abc", "sg-def"])
        self.assertEqual(result["desired_count"], 2)

    def test_recursive_replace_no_placeholders(self):
        """Data without placeholders is returned unchanged"""
        data = {"name": "web", "container": {"cpu": 256, "port_mappings": [{"container_port": 80}]}}

        result = JsonLoadingUtility.recursive_replace(data, {"{{placeholder}}": "replacement"})

        self.assertEqual(result, data)

    def test_recursive_replace_non_string_keys(self):
        """Non string keys are left alone"""
        result = JsonLoadingUtility.recursive_replace(
            {123: "numeric_key", "{{key}}": "value"}, {"{{key}}": "replaced_key"}
        )

        self.assertEqual(result[123], "numeric_key")
        self.assertEqual(result["replaced_key"], "value")

    def test_recursive_replace_empty_structures(self):
        self.assertEqual(JsonLoadingUtility.recursive_replace({}, {"{{key}}": "value"}), {})
        self.assertEqual(JsonLoadingUtility.recursive_replace([], {"{{key}}": "value"}), [])
        self.assertEqual(JsonLoadingUtility.recursive_replace("", {"{{key}}": "value"}), "")


class TestJsonLoadingUtilityImports(unittest.TestCase):
    """Test cases for __imports__ / __inherits__"""

    def setUp(self):
        """Set up temporary directory and test files"""
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up temporary files"""
        shutil.rmtree(self.test_dir)

    def create_test_file(self, filename, content):
        """Helper to create a test JSON file"""
        filepath = os.path.join(self.test_dir, filename)
        with open(filepath, "w") as f:
            json.dump(content, f)
        return filepath

    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            JsonLoadingUtility(os.path.join(self.test_dir, "nope.json")).load()

    def test_imports_with_override(self):
        """Imported objects are merged and local keys win"""
        self.create_test_file("base-service.json", {"desired_count": 2, "min_healthy_percent": 100})
        main_file = self.create_test_file(
            "main.json",
            {"__imports__": "./base-service.json", "name": "web", "desired_count": 4},
        )

        result = JsonLoadingUtility(main_file).load()

        self.assertEqual(result["name"], "web")
        self.assertEqual(result["desired_count"], 4)
        self.assertEqual(result["min_healthy_percent"], 100)

    def test_multiple_imports_later_files_override(self):
        self.create_test_file("base1.json", {"cpu": 256, "memory_limit_mib": 512})
        self.create_test_file("base2.json", {"cpu": 512})
        main_file = self.create_test_file("main.json", {"__imports__": ["./base1.json", "./base2.json"]})

        result = JsonLoadingUtility(main_file).load()

        self.assertEqual(result, {"cpu": 512, "memory_limit_mib": 512})

    def test_nested_list_imports_are_concatenated(self):
        """A nested section importing lists becomes the concatenated list"""
        self.create_test_file("web.json", [{"name": "web"}])
        self.create_test_file("api.json", [{"name": "api"}, {"name": "worker"}])
        main_file = self.create_test_file(
            "main.json",
            {"apps_on_ecs": {"services": {"__imports__": ["./web.json", "./api.json"]}}},
        )

        result = JsonLoadingUtility(main_file).load()

        names = [s["name"] for s in result["apps_on_ecs"]["services"]]
        self.assertEqual(names, ["web", "api", "worker"])

    def test_imports_takes_precedence_over_inherits(self):
        self.create_test_file("import.json", {"source": "imports"})
        self.create_test_file("inherit.json", {"source": "inherits"})
        main_file = self.create_test_file(
            "main.json", {"__imports__": "./import.json", "__inherits__": "./inherit.json"}
        )

        result = JsonLoadingUtility(main_file).load()

        self.assertEqual(result["source"], "imports")

    def test_inherits_still_works(self):
        self.create_test_file("base.json", {"legacy": True})
        main_file = self.create_test_file("main.json", {"__inherits__": "./base.json", "name": "web"})

        result = JsonLoadingUtility(main_file).load()

        self.assertEqual(result, {"legacy": True, "name": "web"})

    def test_invalid_imports_type(self):
        main_file = self.create_test_file("main.json", {"__imports__": 456})

        with self.assertRaises(ValueError) as context:
            JsonLoadingUtility(main_file).load()

        self.assertIn("must be a string or list", str(context.exception))
        self.assertIn("__imports__", str(context.exception))


if __name__ == "__main__":
    unittest.main()
