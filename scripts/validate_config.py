#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from grass_app.config.loader import ConfigLoader
from grass_app.config.validation import ConfigValidator, ValidationError
from grass_app.state.models import DeviceProfile


def validate_profile_config(profile: str) -> List[ValidationError]:
    """Validate configuration for a specific device profile."""
    loader = ConfigLoader.create()
    config = loader.merge_config(profile)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    print("🔍 Validating Touch Grass Simulator configuration...")

    loader = ConfigLoader.create()
    print(f"📁 Config directory: {loader.config_dir}")

    all_valid = True

    for profile in DeviceProfile:
        print(f"\n📊 Validating {profile.value} profile...")

        try:
            errors = validate_profile_config(profile.value)

            if errors:
                print(f"❌ Found {len(errors)} validation errors:")
                for error in errors:
                    print(f"  • {error.field}: {error.message} (value: {error.value})")
                all_valid = False
            else:
                config = loader.merge_config(profile.value)
                grass = config["grass"]
                duration = grass["touch_duration_s" if profile == DeviceProfile.TOUCH
                                 else "pointer_duration_s"]
                print(f"✅ {profile.value} configuration is valid ({duration}s countdown)")

        except Exception as e:
            print(f"❌ Error validating {profile.value}: {e}")
            all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
