"""Storage collaborator — the Person table behind the DAO."""

from people_dao.storage.sqlite import SQLitePersonStore, seed_sample_people

__all__ = ["SQLitePersonStore", "seed_sample_people"]
