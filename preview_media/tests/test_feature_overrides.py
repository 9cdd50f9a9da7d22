from pathlib import Path

import pytest

from preview_media.feature_overrides import FeatureOverrideStore, load_overrides, normalise_overrides


def test_replace_discards_previous_keys() -> None:
    store = FeatureOverrideStore({"hover": "none", "pointer": "coarse"})
    store.replace({"prefers-color-scheme": "dark"})
    assert dict(store.current) == {"prefers-color-scheme": "dark"}
    assert store.get("hover") is None


def test_none_values_are_treated_as_unset() -> None:
    assert normalise_overrides({"hover": None, "pointer": "fine"}) == {"pointer": "fine"}
    assert normalise_overrides(None) == {}


def test_unknown_features_are_kept() -> None:
    assert normalise_overrides({"forced-colors": "active"}) == {"forced-colors": "active"}


def test_current_is_read_only() -> None:
    store = FeatureOverrideStore({"hover": "none"})
    with pytest.raises(TypeError):
        store.current["hover"] = "hover"  # type: ignore[index]


def test_store_copies_input_mapping() -> None:
    source = {"hover": "none"}
    store = FeatureOverrideStore(source)
    source["hover"] = "hover"
    assert store.get("hover") == "none"


def test_load_overrides_missing_returns_empty(tmp_path: Path) -> None:
    assert load_overrides(tmp_path / "overrides.json") == {}


def test_load_overrides_malformed_returns_empty(tmp_path: Path) -> None:
    path = tmp_path / "overrides.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_overrides(path) == {}
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_overrides(path) == {}


def test_load_overrides_reads_flat_and_nested(tmp_path: Path) -> None:
    path = tmp_path / "overrides.json"
    path.write_text('{"prefers-color-scheme": "dark", "hover": null}', encoding="utf-8")
    assert load_overrides(path) == {"prefers-color-scheme": "dark"}
    path.write_text('{"overrides": {"pointer": "coarse"}}', encoding="utf-8")
    assert load_overrides(path) == {"pointer": "coarse"}
