"""Unit tests for theme presets and the default resume."""

import pytest

from cvscriptly.contexts.composing import (
    StylingOptions,
    apply_theme,
    default_resume,
    list_theme_names,
)
from cvscriptly.contexts.composing.config_resolver import load_theme_presets
from cvscriptly.contexts.composing.defaults import get_default_resume_dict


@pytest.mark.unit
def test_theme_names():
    """Test the packaged presets are listed in file order."""
    assert list_theme_names() == ["Default", "Modern Sans", "Classic Serif"]


@pytest.mark.unit
def test_default_preset_matches_field_defaults():
    """Test the Default preset equals StylingOptions()."""
    assert load_theme_presets()["Default"] == StylingOptions()


@pytest.mark.unit
def test_apply_theme_returns_new_snapshot():
    """Test applying a preset replaces styling only."""
    resume = default_resume()
    themed = apply_theme(resume, "Modern Sans")

    assert themed.styling.font.family == "Roboto"
    assert themed.styling.line_height == 1.4
    assert themed.personal_details == resume.personal_details
    assert resume.styling == StylingOptions()


@pytest.mark.unit
def test_apply_unknown_theme():
    """Test an unknown preset name lists the available presets."""
    with pytest.raises(ValueError, match="Available themes"):
        apply_theme(default_resume(), "Neon")


@pytest.mark.unit
def test_custom_presets_file(tmp_path):
    """Test presets can be loaded from another file."""
    presets_file = tmp_path / "presets.yaml"
    presets_file.write_text("Tiny:\n  font: {size: 8}\n  lineHeight: 1.0\n")

    themed = apply_theme(default_resume(), "Tiny", config_path=presets_file)

    assert themed.styling.font.size == 8
    assert themed.styling.font.family == "Helvetica"
    assert themed.styling.line_height == 1.0


@pytest.mark.unit
def test_default_resume_dict_is_fresh():
    """Test callers may modify the default dict without affecting later calls."""
    data = get_default_resume_dict()
    data["personalDetails"]["name"] = "Changed"
    data["experience"].clear()

    assert get_default_resume_dict()["personalDetails"]["name"] == "John Doe"
    assert len(default_resume().experience) == 2
