import sys
from pathlib import Path

import pytest

# Make the src/ layout importable without installing the package
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


SAMPLE_CFG = """\
## Settings file was created by plugin Hq Launcher Tweaks 1.2.3
## Plugin GUID: com.example.hqtweaks

[General]

## Enables the thing.
## Second line.
# Setting type: Boolean
# Default value: true
Enabled = false

## Master volume
# Setting type: Single
# Default value: 0.5
# Acceptable value range: From 0 to 1
Volume = 0,75

# Setting type: Int32
# Default value: 10
# Acceptable value range: From 1 to 100
Count = 42

[Logging]

# Setting type: LogLevel
# Default value: Info
# Acceptable values: None, Fatal, Error, Warning, Message, Info, Debug, All
# Multiple values can be set at the same time by separating them with , (e.g. Debug, Warning)
Levels = Error, Warning

# Setting type: Mode
# Default value: Normal
# Acceptable values: Easy, Normal, Hard
Mode = Hard

## Greeting text
# Setting type: String
# Default value: hi
Greeting = Hello\\nWorld
"""


@pytest.fixture
def sample_cfg() -> str:
    return SAMPLE_CFG


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    base = tmp_path / "BepInEx" / "config"
    base.mkdir(parents=True)
    return base
