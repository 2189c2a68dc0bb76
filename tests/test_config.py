import pytest
from pydantic import ValidationError

from kaomoji_replacer.models import ReplaceStrategy
from kaomoji_replacer.utils.config import Config


def test_defaults_follow_extension_settings(monkeypatch) -> None:
    monkeypatch.delenv("KAOMOJI_REPLACE_STRATEGY", raising=False)
    config = Config(_env_file=None)
    options = config.to_replace_options()
    assert config.is_display_mode
    assert options.strategy is ReplaceStrategy.BEST
    assert options.keep_original_on_not_found is True
    assert options.mark_not_found is False
    assert options.threshold == 0.3


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("KAOMOJI_REPLACE_STRATEGY", "First")
    monkeypatch.setenv("KAOMOJI_MODIFY_MODE", "content")
    monkeypatch.setenv("KAOMOJI_LOG_LEVEL", "debug")
    config = Config(_env_file=None)
    assert config.REPLACE_STRATEGY == "first"
    assert not config.is_display_mode
    assert config.LOG_LEVEL == "DEBUG"


@pytest.mark.parametrize("field,value", [
    ("MODIFY_MODE", "overlay"),
    ("REPLACE_STRATEGY", "random"),
    ("FUZZY_THRESHOLD", 1.5),
    ("LOG_LEVEL", "loud"),
])
def test_invalid_values_rejected(field, value) -> None:
    with pytest.raises(ValidationError):
        Config(_env_file=None, **{field: value})
