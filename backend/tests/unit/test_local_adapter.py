"""Tests for the local SQLite storage adapter."""

from datetime import date

import pytest

from gunce.core.exceptions import NotFoundError, ValidationError
from gunce.schemas.diary_entry import DiaryEntryUpdate, EntryFilters, Sentiment, SyncStatus
from gunce.schemas.diary_tag import DiaryTagCreate


@pytest.mark.unit
class TestLocalEntries:
    @pytest.mark.asyncio
    async def test_create_and_read(self, local_adapter, entry_factory):
        created = await local_adapter.create(entry_factory(tags=["ilk"]))

        assert created.sync_status == SyncStatus.PENDING
        assert created.word_count == 7
        assert created.day_of_week == "Pazartesi"

        fetched = await local_adapter.read(created.id)
        assert fetched.title == "İlk gün"
        assert fetched.tags == ["ilk"]
        assert fetched.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_create_rejects_blank_content(self, local_adapter, entry_factory):
        with pytest.raises(ValidationError) as exc_info:
            await local_adapter.create(entry_factory(content="   "))

        assert exc_info.value.field == "content"
        assert await local_adapter.count() == 0

    @pytest.mark.asyncio
    async def test_encrypted_entry_has_no_plaintext_at_rest(self, local_adapter, entry_factory):
        created = await local_adapter.create(entry_factory(), password="parola")

        stored = await local_adapter.read(created.id)
        assert stored.is_encrypted is True
        assert stored.content == ""
        assert stored.encrypted_content

    @pytest.mark.asyncio
    async def test_read_unknown_id(self, local_adapter):
        with pytest.raises(NotFoundError):
            await local_adapter.read("0" * 32)

    @pytest.mark.asyncio
    async def test_list_orders_by_entry_date_then_creation(self, local_adapter, entry_factory):
        older = await local_adapter.create(entry_factory(title="eski", entry_date=date(2024, 1, 1)))
        first_same_day = await local_adapter.create(entry_factory(title="bir", entry_date=date(2024, 2, 1)))
        second_same_day = await local_adapter.create(entry_factory(title="iki", entry_date=date(2024, 2, 1)))

        entries = await local_adapter.list()

        assert [e.id for e in entries] == [second_same_day.id, first_same_day.id, older.id]

    @pytest.mark.asyncio
    async def test_list_filters(self, local_adapter, entry_factory):
        await local_adapter.create(
            entry_factory(title="Tatil", content="Deniz kenarı", tags=["tatil"], entry_date=date(2024, 7, 1))
        )
        await local_adapter.create(
            entry_factory(title="İş", content="Toplantı günü", sentiment=Sentiment.NEGATIVE, is_favorite=True)
        )

        assert [e.title for e in await local_adapter.list(EntryFilters(tag="tatil"))] == ["Tatil"]
        assert [e.title for e in await local_adapter.list(EntryFilters(sentiment=Sentiment.NEGATIVE))] == ["İş"]
        assert [e.title for e in await local_adapter.list(EntryFilters(is_favorite=True))] == ["İş"]
        assert [e.title for e in await local_adapter.list(EntryFilters(search="deniz"))] == ["Tatil"]
        assert [e.title for e in await local_adapter.list(EntryFilters(date_from=date(2024, 6, 1)))] == ["Tatil"]
        assert [e.title for e in await local_adapter.list(EntryFilters(date_to=date(2024, 6, 1)))] == ["İş"]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, local_adapter, entry_factory):
        await local_adapter.create(entry_factory(title="Morning run", content="Ran five kilometres"))

        results = await local_adapter.list(EntryFilters(search="KILOMETRES"))

        assert [e.title for e in results] == ["Morning run"]

    @pytest.mark.asyncio
    async def test_search_folds_turkish_letters(self, local_adapter, entry_factory):
        await local_adapter.create(entry_factory(title="ŞÖLEN", content="Bugün ÇOK güzeldi"))
        await local_adapter.create(entry_factory(title="Öğle arası", content="Dağda yürüyüş"))

        assert [e.title for e in await local_adapter.list(EntryFilters(search="çok"))] == ["ŞÖLEN"]
        assert [e.title for e in await local_adapter.list(EntryFilters(search="şölen"))] == ["ŞÖLEN"]
        assert [e.title for e in await local_adapter.list(EntryFilters(search="DAĞDA YÜRÜYÜŞ"))] == ["Öğle arası"]
        assert await local_adapter.count(EntryFilters(search="öğle")) == 1

    @pytest.mark.asyncio
    async def test_search_wildcards_are_literal(self, local_adapter, entry_factory):
        await local_adapter.create(entry_factory(title="Hedef", content="Bugün 1000 adım attım"))
        await local_adapter.create(entry_factory(title="Pil", content="Şarj %100 doldu"))
        await local_adapter.create(entry_factory(title="Dosya", content="rapor_final kaydedildi"))

        assert [e.title for e in await local_adapter.list(EntryFilters(search="%100"))] == ["Pil"]
        assert await local_adapter.list(EntryFilters(search="100%")) == []
        assert [e.title for e in await local_adapter.list(EntryFilters(search="rapo_"))] == []
        assert [e.title for e in await local_adapter.list(EntryFilters(search="rapor_"))] == ["Dosya"]


    @pytest.mark.asyncio
    async def test_skip_limit_and_count(self, local_adapter, entry_factory):
        for day in range(1, 6):
            await local_adapter.create(entry_factory(entry_date=date(2024, 3, day)))

        page = await local_adapter.list(EntryFilters(skip=1, limit=2))

        assert [e.entry_date.day for e in page] == [4, 3]
        assert await local_adapter.count(EntryFilters(skip=1, limit=2)) == 5

    @pytest.mark.asyncio
    async def test_update_recomputes_and_marks_pending(self, local_adapter, entry_factory):
        created = await local_adapter.create(entry_factory())

        updated = await local_adapter.update(
            created.id, DiaryEntryUpdate(content="kısa metin", entry_date=date(2024, 1, 16))
        )

        assert updated.word_count == 2
        assert updated.day_of_week == "Salı"
        assert updated.updated_at > created.updated_at
        assert updated.sync_status == SyncStatus.PENDING

    @pytest.mark.asyncio
    async def test_toggle_favorite(self, local_adapter, entry_factory):
        created = await local_adapter.create(entry_factory())

        assert (await local_adapter.toggle_favorite(created.id)).is_favorite is True
        assert (await local_adapter.toggle_favorite(created.id)).is_favorite is False


@pytest.mark.unit
class TestLocalDeletes:
    @pytest.mark.asyncio
    async def test_soft_delete_hides_entry(self, local_adapter, entry_factory):
        created = await local_adapter.create(entry_factory())

        await local_adapter.soft_delete(created.id)

        with pytest.raises(NotFoundError):
            await local_adapter.read(created.id)
        assert await local_adapter.list() == []
        unsynced = await local_adapter.list_unsynced()
        assert [(e.id, e.sync_status) for e in unsynced] == [(created.id, SyncStatus.DELETED)]

    @pytest.mark.asyncio
    async def test_soft_deleted_entry_cannot_be_updated(self, local_adapter, entry_factory):
        created = await local_adapter.create(entry_factory())
        await local_adapter.delete(created.id)

        with pytest.raises(NotFoundError):
            await local_adapter.update(created.id, DiaryEntryUpdate(title="geri dön"))

    @pytest.mark.asyncio
    async def test_hard_delete_requires_soft_delete_first(self, local_adapter, entry_factory):
        created = await local_adapter.create(entry_factory())

        with pytest.raises(ValidationError) as exc_info:
            await local_adapter.hard_delete(created.id)
        assert exc_info.value.field == "sync_status"

        await local_adapter.soft_delete(created.id)
        await local_adapter.hard_delete(created.id)

        assert await local_adapter.list_unsynced() == []

    @pytest.mark.asyncio
    async def test_hard_delete_unknown(self, local_adapter):
        with pytest.raises(NotFoundError):
            await local_adapter.hard_delete("missing")

    @pytest.mark.asyncio
    async def test_delete_all_soft_deletes_live_rows(self, local_adapter, entry_factory):
        await local_adapter.create(entry_factory())
        await local_adapter.create(entry_factory())

        assert await local_adapter.delete_all() == 2
        assert await local_adapter.count() == 0
        assert len(await local_adapter.list_unsynced()) == 2


@pytest.mark.unit
class TestMarkSynced:
    @pytest.mark.asyncio
    async def test_marks_unchanged_row(self, local_adapter, entry_factory):
        created = await local_adapter.create(entry_factory())

        assert await local_adapter.mark_synced(created.id, created.updated_at) is True
        assert (await local_adapter.read(created.id)).sync_status == SyncStatus.SYNCED
        assert await local_adapter.list_unsynced() == []

    @pytest.mark.asyncio
    async def test_row_changed_after_push_stays_pending(self, local_adapter, entry_factory):
        created = await local_adapter.create(entry_factory())
        await local_adapter.update(created.id, DiaryEntryUpdate(title="değişti"))

        assert await local_adapter.mark_synced(created.id, created.updated_at) is False
        assert (await local_adapter.read(created.id)).sync_status == SyncStatus.PENDING

    @pytest.mark.asyncio
    async def test_row_deleted_after_push_is_not_marked(self, local_adapter, entry_factory):
        created = await local_adapter.create(entry_factory())
        await local_adapter.soft_delete(created.id)

        assert await local_adapter.mark_synced(created.id, created.updated_at) is False
        assert [e.sync_status for e in await local_adapter.list_unsynced()] == [SyncStatus.DELETED]

        await local_adapter.hard_delete(created.id)
        assert await local_adapter.mark_synced(created.id, created.updated_at) is False



@pytest.mark.unit
class TestLocalTags:
    @pytest.mark.asyncio
    async def test_usage_counts_only_live_entries(self, local_adapter, entry_factory):
        await local_adapter.create_tag(DiaryTagCreate(name="aile", color="#ff0000"))
        await local_adapter.create_tag(DiaryTagCreate(name="iş"))
        await local_adapter.create(entry_factory(tags=["aile"]))
        removed = await local_adapter.create(entry_factory(tags=["aile", "iş"]))
        await local_adapter.soft_delete(removed.id)

        tags = {tag.name: tag for tag in await local_adapter.list_tags()}

        assert tags["aile"].usage_count == 1
        assert tags["aile"].color == "#ff0000"
        assert tags["iş"].usage_count == 0

    @pytest.mark.asyncio
    async def test_duplicate_tag_name(self, local_adapter):
        await local_adapter.create_tag(DiaryTagCreate(name="aile"))

        with pytest.raises(ValidationError) as exc_info:
            await local_adapter.create_tag(DiaryTagCreate(name="aile"))

        assert exc_info.value.field == "name"

    @pytest.mark.asyncio
    async def test_delete_tag(self, local_adapter):
        tag = await local_adapter.create_tag(DiaryTagCreate(name="aile"))

        await local_adapter.delete_tag(tag.id)

        assert await local_adapter.list_tags() == []
        with pytest.raises(NotFoundError):
            await local_adapter.delete_tag(tag.id)

    @pytest.mark.asyncio
    async def test_health_check(self, local_adapter):
        assert await local_adapter.health_check() is True
