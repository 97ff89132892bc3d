import polars as pl
import pytest

from stylesync.data.store import ProfileStore
from stylesync.profile import StyleProfile

SAMPLE = "However, we don't stop early. We work until the light goes."


@pytest.fixture
def store(tmp_path):
    return ProfileStore(str(tmp_path / "profiles.parquet"))


class TestProfileStore:
    def test_creates_empty_file(self, tmp_path):
        path = tmp_path / "nested" / "profiles.parquet"
        ProfileStore(str(path))
        assert path.exists()
        assert pl.read_parquet(path).is_empty()

    def test_create_and_get(self, store):
        profile = StyleProfile(
            name="Field notes",
            formality=0.3,
            tone="warm",
            custom_lexicon=["grit"],
            samples=[SAMPLE],
            user_id="ana",
        )
        profile_id = store.create(profile)
        loaded = store.get("ana", profile_id)
        assert loaded.name == "Field notes"
        assert loaded.formality == 0.3
        assert loaded.tone == "warm"
        assert loaded.custom_lexicon == ["grit"]
        assert loaded.samples == [SAMPLE]
        assert loaded.fingerprint == profile.fingerprint

    def test_profile_without_fingerprint(self, store):
        profile_id = store.create(StyleProfile(user_id="ana"))
        assert store.get("ana", profile_id).fingerprint is None

    def test_duplicate_id(self, store):
        profile = StyleProfile(user_id="ana")
        store.create(profile)
        with pytest.raises(ValueError):
            store.create(profile)

    def test_blank_name(self, store):
        with pytest.raises(ValueError):
            store.create(StyleProfile(name="  ", user_id="ana"))

    def test_get_missing(self, store):
        with pytest.raises(KeyError):
            store.get("ana", "missing")

    def test_get_is_scoped_to_user(self, store):
        profile_id = store.create(StyleProfile(user_id="ana"))
        with pytest.raises(KeyError):
            store.get("ben", profile_id)

    def test_list(self, store):
        store.create(StyleProfile(name="One", user_id="ana"))
        store.create(StyleProfile(name="Two", user_id="ana"))
        store.create(StyleProfile(name="Other", user_id="ben"))
        assert [p.name for p in store.list("ana")] == ["One", "Two"]
        assert store.list("nobody") == []

    def test_update_sliders(self, store):
        profile_id = store.create(StyleProfile(user_id="ana"))
        updated = store.update("ana", profile_id, formality=0.9, name="Formal")
        assert updated.formality == 0.9
        assert store.get("ana", profile_id).name == "Formal"
        assert len(store.list("ana")) == 1

    def test_update_samples_re_extracts(self, store):
        profile_id = store.create(StyleProfile(user_id="ana"))
        updated = store.update("ana", profile_id, samples=[SAMPLE])
        assert updated.fingerprint is not None
        assert store.get("ana", profile_id).fingerprint.preferred_transitions == ["However"]

    def test_update_rejects_bad_values(self, store):
        profile_id = store.create(StyleProfile(user_id="ana"))
        with pytest.raises(ValueError):
            store.update("ana", profile_id, formality=2.0)
        with pytest.raises(ValueError):
            store.update("ana", profile_id, id="other")
        with pytest.raises(ValueError):
            store.update("ana", profile_id, fingerprint=None)
        with pytest.raises(KeyError):
            store.update("ana", "missing", name="x")

    def test_delete(self, store):
        profile_id = store.create(StyleProfile(user_id="ana"))
        store.delete("ana", profile_id)
        with pytest.raises(KeyError):
            store.get("ana", profile_id)
        with pytest.raises(KeyError):
            store.delete("ana", profile_id)

    def test_rejects_foreign_parquet(self, tmp_path):
        path = tmp_path / "other.parquet"
        pl.DataFrame({"id": ["1"], "text": ["hello"]}).write_parquet(path)
        with pytest.raises(ValueError):
            ProfileStore(str(path))
