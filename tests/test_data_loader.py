"""Seed CSV loading into the Profile Store."""

from pathlib import Path

import pytest

from models.profile_store import InMemoryProfileStore
from utils.data_loader import read_profiles, seed_store

REPO_SEED = Path(__file__).resolve().parent.parent / "data" / "profiles.csv"


@pytest.fixture
def seed_csv(tmp_path) -> Path:
    path = tmp_path / "profiles.csv"
    path.write_text(
        "id,full_name,age,location,favorite_cuisines,dining_style,notes\n"
        "u1,Ana,28,Austin,Thai| Korean ,Street Food,x\n"
        "u2,Bo,,Dallas,,,\n"
        ",Nobody,40,Nowhere,,,\n"
        "u1,Ana Updated,29,Austin,Thai,Street Food,\n",
        encoding="utf-8",
    )
    return path


class TestReadProfiles:

    def test_cleans_rows(self, seed_csv):
        df = read_profiles(seed_csv)

        assert list(df["id"]) == ["u2", "u1"]
        ana = df[df["id"] == "u1"].iloc[0]
        assert ana["full_name"] == "Ana Updated"
        assert ana["favorite_cuisines"] == ("Thai",)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_profiles(tmp_path / "nope.csv")

    def test_missing_id_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("name\nAna\n", encoding="utf-8")
        with pytest.raises(ValueError):
            read_profiles(path)


class TestSeedStore:

    @pytest.mark.asyncio
    async def test_seeds_profiles(self, seed_csv):
        store = InMemoryProfileStore()

        assert await seed_store(store, seed_csv) == 2

        bo = await store.get_profile("u2")
        assert bo.age is None
        assert bo.favorite_cuisines == ()
        ana = await store.get_profile("u1")
        assert ana.age == 29

    @pytest.mark.asyncio
    async def test_repo_seed_file_loads(self):
        store = InMemoryProfileStore()
        assert await seed_store(store, REPO_SEED) == 6
        ava = await store.get_profile("u-ava")
        assert ava.favorite_cuisines == ("Mexican", "Thai", "Korean")
