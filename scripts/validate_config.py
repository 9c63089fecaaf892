#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from laptimer_app.config.loader import ConfigLoader
from laptimer_app.config.validation import ConfigValidator, ValidationError
from laptimer_app.errors import ConfigurationError


def validate_config_file(config_path: Optional[Path] = None) -> List[ValidationError]:
    """Validate the merged configuration for a config file."""
    loader = ConfigLoader.create(config_path)
    config = loader.merge_config()
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_path)

    print(f"🔍 Validating lap timer configuration at {loader.config_path}...")
    if not loader.config_path.exists():
        print("ℹ️  File not found, validating built-in defaults only")

    all_valid = True

    try:
        errors = validate_config_file(config_path)

        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            print("✅ Configuration file is valid")

    except ConfigurationError as e:
        print(f"❌ Error reading configuration: {e}")
        all_valid = False

    # Test command-line style overrides
    print("\n📋 Testing overrides...")
    test_overrides = {
        "persistence": {"backend": "memory"},
        "logging": {"level": "DEBUG"},
    }

    try:
        config = loader.load(test_overrides)
        print(f"✅ Override validation passed (backend={config.persistence.backend})")

    except ConfigurationError as e:
        print("❌ Override validation failed:")
        for error in e.errors:
            print(f"  • {error.field}: {error.message}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
