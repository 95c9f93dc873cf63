"""
Geek Cafe, LLC
Maintainers: Eric Wilson
MIT License. See Project Root for the license information.
"""

import json
import os
from typing import Any, Dict, List

from aws_lambda_powertools import Logger

logger = Logger(service="JsonLoadingUtility")


class JsonLoadingUtility:
    """
    Loads JSON configuration files.

    Any object may pull in other files with "__imports__" (or the older
    "__inherits__") set to a path or a list of paths, relative to the file
    that references them:

        {"__imports__": ["./base-service.json"], "name": "web"}

    Imported objects are merged in order and the local keys win. Imported
    lists are concatenated.
    """

    IMPORT_KEYS = ("__imports__", "__inherits__")

    def __init__(self, path: str) -> None:
        self.path = path

    def load(self) -> Any:
        """Load the file and resolve every import"""
        return self._load_file(self.path)

    def _load_file(self, path: str) -> Any:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        logger.debug(f"Loading config file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return self._resolve(data, os.path.dirname(os.path.abspath(path)))

    def _resolve(self, data: Any, base_dir: str) -> Any:
        if isinstance(data, list):
            return [self._resolve(item, base_dir) for item in data]
        if not isinstance(data, dict):
            return data

        import_key = next((key for key in self.IMPORT_KEYS if key in data), None)
        local = {
            key: self._resolve(value, base_dir)
            for key, value in data.items()
            if key not in self.IMPORT_KEYS
        }
        if not import_key:
            return local

        imported = [self._load_file(os.path.join(base_dir, p)) for p in self._import_paths(data, import_key)]

        if imported and all(isinstance(item, list) for item in imported):
            merged_list: List[Any] = []
            for item in imported:
                merged_list.extend(item)
            return merged_list

        merged: Dict[str, Any] = {}
        for item in imported:
            if not isinstance(item, dict):
                raise ValueError(f"{import_key} cannot mix objects and lists ({self.path})")
            merged.update(item)
        merged.update(local)
        return merged

    def _import_paths(self, data: Dict[str, Any], import_key: str) -> List[str]:
        paths = data[import_key]
        if isinstance(paths, str):
            return [paths]
        if isinstance(paths, list):
            return paths
        raise ValueError(
            f"{import_key} must be a string or list of strings, got {type(paths).__name__} ({self.path})"
        )

    @staticmethod
    def recursive_replace(data: Any, replacements: Dict[str, str]) -> Any:
        """
        Replace placeholders in keys and values of nested dicts and lists.
        Non string keys and values are returned untouched.
        """
        if isinstance(data, dict):
            return {
                JsonLoadingUtility.recursive_replace(key, replacements): JsonLoadingUtility.recursive_replace(
                    value, replacements
                )
                for key, value in data.items()
            }
        if isinstance(data, list):
            return [JsonLoadingUtility.recursive_replace(item, replacements) for item in data]
        if isinstance(data, str):
            for placeholder, value in replacements.items():
                data = data.replace(placeholder, str(value))
            return data
        return data
