"""
Repository tests against a temporary SQLite database.
"""

import pytest

from guild_tracker.core.exceptions import DuplicateCharacterError

from conftest import make_character


class TestMessageRepository:
    """Test the name-keyed upsert."""

    async def test_upsert_replaces_message(self, message_repository):
        await message_repository.upsert("Alice", "Back at 8pm")

        await message_repository.upsert("Alice", "Back at 9pm")

        messages = await message_repository.list_messages()
        assert [(m.name, m.message) for m in messages] == [("Alice", "Back at 9pm")]


class TestExternalCharacterRepository:
    """Test external character inserts."""

    async def test_create(self, external_repository):
        await external_repository.create(make_character("Xena", level=321))

        stored = await external_repository.list_characters()
        assert [(c.name, c.level) for c in stored] == [("Xena", 321)]

    async def test_second_insert_is_a_duplicate(self, external_repository):
        await external_repository.create(make_character("Xena"))

        with pytest.raises(DuplicateCharacterError) as exc_info:
            await external_repository.create(make_character("Xena"))

        assert exc_info.value.details["value"] == "Xena"
        assert len(await external_repository.list_characters()) == 1
