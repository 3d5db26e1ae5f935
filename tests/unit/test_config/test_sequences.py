"""Unit tests for the target sequence catalog."""
import json

import pytest

from handsign.config.sequences import DEFAULT_SEQUENCES_PATH, SequenceCatalog, load_sequences
from handsign.core.constants import RANK_LEVELS, SIGN_DICTIONARY
from handsign.core.exceptions import SequenceConfigError


class TestSequenceCatalog:
    """Test suite for catalog parsing."""

    def test_mapping_form(self):
        catalog = SequenceCatalog.from_data({"Fireball": ["Mi", "Tora"], "Clone": ["Tora"]})
        assert catalog.names() == ["Fireball", "Clone"]
        assert catalog.get("Fireball").sequence == ("Mi", "Tora")
        assert catalog.get("Clone").level is None

    def test_list_form(self, catalog):
        assert len(catalog) == 4
        assert catalog.get("a") is catalog.get("Alpha")
        assert [t.key for t in catalog.for_level("genin")] == ["a", "b"]
        assert "c" in catalog
        assert "zeta" not in catalog

    def test_unknown_key(self, catalog):
        with pytest.raises(KeyError):
            catalog.get("zeta")

    def test_custom_vocabulary(self):
        catalog = SequenceCatalog.from_data({"A": ["x", "y"]}, vocabulary={"x", "y"})
        assert catalog.get("A").sequence == ("x", "y")

    @pytest.mark.parametrize("data", [
        "not a catalog",
        [],
        {},
        ["entry"],
        [{"sequence": ["Tora"]}],
        [{"name": "A", "sequence": "Tora"}],
        [{"name": "A", "sequence": []}],
        [{"name": "A", "sequence": ["Tora", 3]}],
        [{"name": "A", "sequence": ["Hitsuji"]}],
        [{"name": "A", "level": "hokage", "sequence": ["Tora"]}],
        [{"id": "x", "name": "A", "sequence": ["Tora"]}, {"id": "x", "name": "B", "sequence": ["Mi"]}],
    ])
    def test_invalid_catalogs(self, data):
        with pytest.raises(SequenceConfigError):
            SequenceCatalog.from_data(data)


class TestLoadSequences:

    def test_bundled_catalog(self):
        catalog = load_sequences()
        assert DEFAULT_SEQUENCES_PATH.is_file()
        for level in RANK_LEVELS:
            assert catalog.for_level(level.key), level.key
        for target in catalog:
            assert set(target.sequence) <= set(SIGN_DICTIONARY)

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "jutsus.json"
        path.write_text(json.dumps({"Clone": ["Tora", "Mi"]}), encoding="utf-8")
        assert load_sequences(path).names() == ["Clone"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SequenceConfigError):
            load_sequences(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "jutsus.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(SequenceConfigError):
            load_sequences(path)
