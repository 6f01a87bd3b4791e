"""
Theme Preset Resolution

Applies named styling presets to a resume snapshot. Presets live in a YAML file
(THEME_PRESETS_PATH, defaulting to the packaged theme_presets.yaml) and each one
is a complete StylingOptions record.

Examples:
    >>> themed = apply_theme(resume, "Classic Serif")
    >>> themed.styling.font.family
    'Times New Roman'
"""

import os
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv
from omegaconf import OmegaConf

from cvscriptly.contexts.composing.logger import log_theme_applied
from cvscriptly.contexts.composing.resume_data_structure import ResumeData, StylingOptions

load_dotenv()
THEME_PRESETS_PATH = Path(
    os.getenv("THEME_PRESETS_PATH", Path(__file__).parent / "theme_presets.yaml")
)


def load_theme_presets(config_path: Path = None) -> Dict[str, StylingOptions]:
    """
    Load theme presets from YAML.

    Args:
        config_path: Optional path to presets file (defaults to THEME_PRESETS_PATH)

    Returns:
        Dict mapping preset name to StylingOptions, in file order
    """
    if config_path is None:
        config_path = THEME_PRESETS_PATH

    presets = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    return {
        name: StylingOptions.from_dict(styling, path=f"presets.{name}")
        for name, styling in presets.items()
    }


def list_theme_names(config_path: Path = None) -> List[str]:
    """Names of the available presets, in file order."""
    return list(load_theme_presets(config_path).keys())


def apply_theme(resume: ResumeData, theme_name: str, config_path: Path = None) -> ResumeData:
    """
    Return a new snapshot whose styling is replaced by a named preset.

    Args:
        resume: Source snapshot (left untouched)
        theme_name: Preset name (e.g., "Modern Sans")
        config_path: Optional presets file

    Returns:
        New ResumeData with the preset styling

    Raises:
        ValueError: If the preset is not defined
    """
    presets = load_theme_presets(config_path)
    if theme_name not in presets:
        raise ValueError(f"Theme '{theme_name}' not found. Available themes: {list(presets)}")

    log_theme_applied(theme_name)
    return resume.replace(styling=presets[theme_name])
