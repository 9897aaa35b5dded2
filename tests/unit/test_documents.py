"""Tests for document types and the favourites legacy normalizer."""
import pytest

from letterbox.documents import (
    Location,
    SettingsCache,
    SignatureProfile,
    dedupe,
    normalize_favourites,
    normalize_word_list,
)


class TestSettingsCache:
    def test_missing_fields_default_to_none(self) -> None:
        assert SettingsCache.from_dict({}) == SettingsCache()

    def test_round_trip_dict(self) -> None:
        cache = SettingsCache(email_view_last_selected_signature="Work")
        assert SettingsCache.from_dict(cache.to_dict()) == cache

    def test_unknown_keys_ignored(self) -> None:
        assert SettingsCache.from_dict({"theme": "dark"}) == SettingsCache()

    def test_non_string_field_rejected(self) -> None:
        with pytest.raises(ValueError, match="email_view_last_selected_salutation"):
            SettingsCache.from_dict({"email_view_last_selected_salutation": 3})

    def test_non_object_rejected(self) -> None:
        with pytest.raises(ValueError):
            SettingsCache.from_dict("cache")


class TestSignatureProfile:
    RAW = {
        "signature_name": "Work",
        "name": "Ada Lovelace",
        "position": "Analyst",
        "department": "Engines",
        "company": "Babbage & Co",
        "location": {"name": "London", "address": "12 St James's Sq"},
        "image_filename": "ada.png",
    }

    def test_from_dict(self) -> None:
        sig = SignatureProfile.from_dict(self.RAW)
        assert sig.signature_name == "Work"
        assert sig.location == Location(name="London", address="12 St James's Sq")

    def test_to_dict_matches_stored_shape(self) -> None:
        assert SignatureProfile.from_dict(self.RAW).to_dict() == self.RAW

    def test_missing_optional_fields_default_empty(self) -> None:
        sig = SignatureProfile.from_dict({"signature_name": "Bare"})
        assert sig.name == ""
        assert sig.location == Location()
        assert sig.image_filename == ""

    def test_signature_name_required(self) -> None:
        with pytest.raises(ValueError, match="signature_name"):
            SignatureProfile.from_dict({"name": "Nobody"})

    def test_non_string_field_rejected(self) -> None:
        with pytest.raises(ValueError, match="position"):
            SignatureProfile.from_dict({"signature_name": "X", "position": 7})

    def test_location_must_be_object(self) -> None:
        with pytest.raises(ValueError, match="location"):
            SignatureProfile.from_dict({"signature_name": "X", "location": "London"})

    @pytest.mark.parametrize("location", [{"name": None}, {"address": 12}, {"name": "HQ", "address": ["a", "b"]}])
    def test_non_string_location_field_rejected(self, location) -> None:
        with pytest.raises(ValueError, match="location\\."):
            SignatureProfile.from_dict({"signature_name": "X", "location": location})

    def test_partial_location_defaults_empty(self) -> None:
        sig = SignatureProfile.from_dict({"signature_name": "X", "location": {"name": "HQ"}})
        assert sig.location == Location(name="HQ", address="")


class TestNormalizeFavourites:
    def test_legacy_mapping_keeps_true_members(self) -> None:
        assert normalize_favourites({"a.txt": True, "b.txt": False}) == ["a.txt"]

    def test_list_form_unchanged(self) -> None:
        assert normalize_favourites(["a.txt", "c.txt"]) == ["a.txt", "c.txt"]

    def test_list_drops_non_strings(self) -> None:
        assert normalize_favourites(["a.txt", 1, None, "b.txt"]) == ["a.txt", "b.txt"]

    def test_legacy_truthy_non_bool_is_not_membership(self) -> None:
        assert normalize_favourites({"a.txt": 1, "b.txt": "yes", "c.txt": True}) == ["c.txt"]

    def test_legacy_mapping_order_preserved(self) -> None:
        assert normalize_favourites({"z.txt": True, "a.txt": True}) == ["z.txt", "a.txt"]

    @pytest.mark.parametrize("raw", [None, 3, "a.txt", 1.5])
    def test_other_shapes_yield_empty(self, raw) -> None:
        assert normalize_favourites(raw) == []


class TestWordList:
    def test_keeps_strings_in_order(self) -> None:
        assert normalize_word_list(["Hi", 2, "Dear"]) == ["Hi", "Dear"]

    def test_non_list_yields_empty(self) -> None:
        assert normalize_word_list({"Hi": True}) == []


def test_dedupe_keeps_first_seen_order() -> None:
    assert dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
