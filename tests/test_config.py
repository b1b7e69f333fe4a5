from __future__ import annotations

from pathlib import Path

import pytest

from winnow.config import ClassifierConfig, config_from_mapping, load_config
from winnow.errors import ConfigError

PORTAL_CONFIG = Path(__file__).resolve().parents[1] / "configs" / "nextjs-portal.yaml"


def test_defaults_without_file() -> None:
    config = load_config(None)
    assert config == ClassifierConfig()
    assert "node_modules" in config.excluded_dirs
    assert config.protected_keywords == ()
    assert config.on_read_error == "ignore"


def test_grouped_allowlist_is_flattened(tmp_path: Path) -> None:
    path = tmp_path / "winnow.yaml"
    path.write_text(
        "always_keep:\n"
        "  pages:\n"
        "    - app/page.tsx\n"
        "  lib:\n"
        "    - ./lib/auth.ts\n"
        "protected_keywords: [zoho]\n"
        "archive_dir: attic\n"
    )

    config = load_config(path)

    assert config.always_keep == frozenset({"app/page.tsx", "lib/auth.ts"})
    assert config.protected_keywords == ("zoho",)
    assert config.archive_dir == "attic"
    assert config.source_roots == ClassifierConfig().source_roots


def test_portal_config_loads() -> None:
    config = load_config(PORTAL_CONFIG)

    assert "app/page.tsx" in config.always_keep
    assert ".gitignore" in config.always_keep
    assert "zoho" in config.protected_keywords
    assert r"\.backup" in config.legacy_name_patterns
    assert config.ignored_paths == (".kiro/settings",)


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError, match="unknown keys: keep_everything"):
        config_from_mapping({"keep_everything": True})


def test_wrong_types_are_rejected() -> None:
    with pytest.raises(ConfigError, match="protected_keywords"):
        config_from_mapping({"protected_keywords": "zoho"})
    with pytest.raises(ConfigError, match="archive_dir"):
        config_from_mapping({"archive_dir": ["a"]})


def test_invalid_pattern_is_rejected() -> None:
    with pytest.raises(ConfigError, match="legacy_name_patterns"):
        config_from_mapping({"legacy_name_patterns": ["(unclosed"]})


def test_invalid_read_policy_is_rejected() -> None:
    with pytest.raises(ConfigError, match="on_read_error"):
        ClassifierConfig().with_overrides(on_read_error="retry")


def test_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("always_keep: [unterminated\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(path)


def test_overrides_skip_none() -> None:
    config = ClassifierConfig().with_overrides(archive_dir=None, script_path="cleanup.py")
    assert config.archive_dir == "archive-safe"
    assert config.script_path == "cleanup.py"
