"""Tests for the preference store and its backends."""

import json

from gh_switcher.core import IdentityProfile, default_color_index
from gh_switcher.storage import MemoryBackend, PreferenceStore, TomlFileBackend
from gh_switcher.storage.preferences import (
    COLOR_MAP_KEY,
    GIT_PROFILE_MAP_KEY,
    LABELS_KEY,
    MANUAL_PROFILES_KEY,
)


ACCOUNT_ID = "github.com|octocat"


class TestColors:
    """Color index storage and defaults."""

    def test_default_is_derived_from_account_id(self, store):
        assert store.get_color_index(ACCOUNT_ID) == default_color_index(ACCOUNT_ID)

    def test_reading_default_does_not_write(self):
        backend = MemoryBackend()
        PreferenceStore(backend).get_color_index(ACCOUNT_ID)
        assert backend.values == {}

    def test_set_and_get(self, store):
        store.set_color_index(ACCOUNT_ID, 7)
        assert store.get_color_index(ACCOUNT_ID) == 7

    def test_out_of_range_set_is_ignored(self, store):
        store.set_color_index(ACCOUNT_ID, 4)
        store.set_color_index(ACCOUNT_ID, 10)
        store.set_color_index(ACCOUNT_ID, -1)
        assert store.get_color_index(ACCOUNT_ID) == 4

    def test_stored_out_of_range_value_falls_back(self):
        backend = MemoryBackend({COLOR_MAP_KEY: json.dumps({ACCOUNT_ID: 42})})
        store = PreferenceStore(backend)
        assert store.get_color_index(ACCOUNT_ID) == default_color_index(ACCOUNT_ID)

    def test_smaller_palette_falls_back(self):
        backend = MemoryBackend()
        PreferenceStore(backend).set_color_index(ACCOUNT_ID, 8)

        smaller = PreferenceStore(backend, palette_size=5)

        assert smaller.get_color_index(ACCOUNT_ID) == default_color_index(ACCOUNT_ID, 5)

    def test_non_integer_values_are_ignored(self):
        backend = MemoryBackend({COLOR_MAP_KEY: json.dumps({ACCOUNT_ID: True, "other": "3"})})
        store = PreferenceStore(backend)
        assert store.get_color_index(ACCOUNT_ID) == default_color_index(ACCOUNT_ID)
        assert store.get_color_index("other") == default_color_index("other")


class TestLabels:
    """Custom display names."""

    def test_unset_label_is_none(self, store):
        assert store.get_label(ACCOUNT_ID) is None

    def test_label_is_trimmed(self, store):
        store.set_label(ACCOUNT_ID, "  Work  ")
        assert store.get_label(ACCOUNT_ID) == "Work"

    def test_blank_or_none_removes_label(self, store):
        store.set_label(ACCOUNT_ID, "Work")
        store.set_label(ACCOUNT_ID, "   ")
        assert store.get_label(ACCOUNT_ID) is None

        store.set_label(ACCOUNT_ID, "Work")
        store.set_label(ACCOUNT_ID, None)
        assert store.get_label(ACCOUNT_ID) is None


class TestProfiles:
    """Per-account git profile assignment."""

    def test_unset_profile_is_empty(self, store):
        assert store.get_profile(ACCOUNT_ID).is_empty

    def test_set_and_get(self, store, sample_profile):
        store.set_profile(ACCOUNT_ID, sample_profile)
        assert store.get_profile(ACCOUNT_ID) == sample_profile

    def test_empty_profile_removes_assignment(self, sample_profile):
        backend = MemoryBackend()
        store = PreferenceStore(backend)
        store.set_profile(ACCOUNT_ID, sample_profile)

        store.set_profile(ACCOUNT_ID, IdentityProfile("", " "))

        assert store.get_profile(ACCOUNT_ID).is_empty
        assert json.loads(backend.values[GIT_PROFILE_MAP_KEY]) == {}


class TestManualProfiles:
    """The hand-maintained profile list."""

    def test_add_is_idempotent_and_sorted(self, store):
        store.add_manual_profile(IdentityProfile("zoe", "zoe@example.com"))
        store.add_manual_profile(IdentityProfile("Amy", "amy@example.com"))
        store.add_manual_profile(IdentityProfile(" Amy ", "amy@example.com "))

        assert store.list_manual_profiles() == [
            IdentityProfile("Amy", "amy@example.com"),
            IdentityProfile("zoe", "zoe@example.com"),
        ]

    def test_empty_profile_is_not_added(self, store):
        store.add_manual_profile(IdentityProfile.empty())
        assert store.list_manual_profiles() == []

    def test_remove(self, store, sample_profile):
        other = IdentityProfile("Other", "other@example.com")
        store.add_manual_profile(sample_profile)
        store.add_manual_profile(other)

        store.remove_manual_profile(sample_profile)

        assert store.list_manual_profiles() == [other]

    def test_remove_unknown_profile_is_a_no_op(self, store, sample_profile):
        store.remove_manual_profile(sample_profile)
        assert store.list_manual_profiles() == []


class TestDamagedData:
    """Each namespace decodes independently."""

    def test_corrupt_namespace_reads_as_empty_without_affecting_others(self, sample_profile):
        backend = MemoryBackend(
            {
                COLOR_MAP_KEY: "{not json",
                LABELS_KEY: json.dumps({ACCOUNT_ID: "Work"}),
                GIT_PROFILE_MAP_KEY: json.dumps({ACCOUNT_ID: sample_profile.to_dict()}),
                MANUAL_PROFILES_KEY: json.dumps({"wrong": "shape"}),
            }
        )
        store = PreferenceStore(backend)

        assert store.get_color_index(ACCOUNT_ID) == default_color_index(ACCOUNT_ID)
        assert store.get_label(ACCOUNT_ID) == "Work"
        assert store.get_profile(ACCOUNT_ID) == sample_profile
        assert store.list_manual_profiles() == []

    def test_writing_replaces_corrupt_namespace(self):
        backend = MemoryBackend({COLOR_MAP_KEY: "garbage"})
        store = PreferenceStore(backend)

        store.set_color_index(ACCOUNT_ID, 2)

        assert json.loads(backend.values[COLOR_MAP_KEY]) == {ACCOUNT_ID: 2}


class TestTomlFileBackend:
    """On-disk persistence."""

    def test_values_survive_a_new_store(self, temp_dir, sample_profile):
        path = temp_dir / "data" / "preferences.toml"
        first = PreferenceStore(TomlFileBackend(path))
        first.set_color_index(ACCOUNT_ID, 5)
        first.set_label(ACCOUNT_ID, "Personal")
        first.set_profile(ACCOUNT_ID, sample_profile)

        second = PreferenceStore(TomlFileBackend(path))

        assert second.get_color_index(ACCOUNT_ID) == 5
        assert second.get_label(ACCOUNT_ID) == "Personal"
        assert second.get_profile(ACCOUNT_ID) == sample_profile

    def test_missing_file_reads_as_empty(self, temp_dir):
        assert TomlFileBackend(temp_dir / "missing.toml").get("anything") is None

    def test_corrupt_file_reads_as_empty(self, temp_dir):
        path = temp_dir / "preferences.toml"
        path.write_text("this is = = not toml")

        assert TomlFileBackend(path).get(LABELS_KEY) is None

    def test_undecodable_file_reads_as_empty(self, temp_dir):
        path = temp_dir / "preferences.toml"
        path.write_bytes(b'"ghSwitcher.accountLabels" = "\xff\xfe"\n')
        store = PreferenceStore(TomlFileBackend(path))

        assert store.get_label(ACCOUNT_ID) is None
        assert store.get_color_index(ACCOUNT_ID) == default_color_index(ACCOUNT_ID)

    def test_write_replaces_undecodable_file(self, temp_dir):
        path = temp_dir / "preferences.toml"
        path.write_bytes(b"\xff\n")
        store = PreferenceStore(TomlFileBackend(path))

        store.set_label(ACCOUNT_ID, "Work")

        assert store.get_label(ACCOUNT_ID) == "Work"

    def test_remove(self, temp_dir):
        backend = TomlFileBackend(temp_dir / "preferences.toml")
        backend.set("a", "1")
        backend.set("b", "2")

        backend.remove("a")

        assert backend.get("a") is None
        assert backend.get("b") == "2"

    def test_no_temp_files_left_behind(self, temp_dir):
        backend = TomlFileBackend(temp_dir / "preferences.toml")
        backend.set("a", "1")

        assert [p.name for p in temp_dir.iterdir()] == ["preferences.toml"]
