from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from tutorhub.core.enums import DuaBlockTypeEnum, RoleEnum
from tutorhub.modules.duas.composition import (
    CatalogBlock,
    CustomBlockText,
    DuaComposition,
    next_step,
    previous_step,
)
from tutorhub.modules.duas.schemas import CompositionInput, CompositionSave, CustomBlockTextIn
from tutorhub.modules.duas.service import DuasService
from tutorhub.shared.exceptions import NotFoundException, ValidationException



def catalog(block_type: DuaBlockTypeEnum, label: str, names: tuple[str, ...] = ()) -> CatalogBlock:
    return CatalogBlock(
        id=str(uuid4()),
        block_type=block_type,
        arabic_text=f"ar-{label}",
        transliteration=f"tr-{label}",
        english_translation=f"en-{label}",
        allah_names=names,
    )


def test_step_navigation_follows_block_order() -> None:
    assert next_step(DuaBlockTypeEnum.HAMD) == DuaBlockTypeEnum.SALAWAT
    assert next_step(DuaBlockTypeEnum.CLOSING) is None
    assert previous_step(DuaBlockTypeEnum.REQUEST) == DuaBlockTypeEnum.ADMISSION
    assert previous_step(DuaBlockTypeEnum.HAMD) is None


def test_custom_text_replaces_catalog_selection() -> None:
    composition = DuaComposition()
    composition.select_block(catalog(DuaBlockTypeEnum.HAMD, "praise"))

    composition.set_custom_text(DuaBlockTypeEnum.HAMD, CustomBlockText(text="My own praise"))

    assert DuaBlockTypeEnum.HAMD not in composition.selected
    assert composition.arabic_text() == "My own praise"


def test_catalog_selection_replaces_custom_text() -> None:
    composition = DuaComposition()
    composition.set_custom_text(DuaBlockTypeEnum.CLOSING, CustomBlockText(text="Ameen"))

    composition.select_block(catalog(DuaBlockTypeEnum.CLOSING, "close"))

    assert composition.custom == {}
    assert composition.arabic_text() == "ar-close"


def test_request_block_accepts_several_entries_once_each() -> None:
    first = catalog(DuaBlockTypeEnum.REQUEST, "knowledge")
    second = catalog(DuaBlockTypeEnum.REQUEST, "good")
    composition = DuaComposition()

    composition.select_block(first)
    composition.select_block(second)
    composition.select_block(first)
    composition.set_custom_text(DuaBlockTypeEnum.REQUEST, CustomBlockText(text="Heal my mother"))

    assert composition.request_blocks == [first, second]
    assert composition.arabic_text() == "ar-knowledge\n\nar-good\n\nHeal my mother"

    composition.deselect_block(DuaBlockTypeEnum.REQUEST, first.id)
    assert composition.request_blocks == [second]


def test_progress_counts_filled_blocks() -> None:
    composition = DuaComposition()
    assert composition.progress == 0

    composition.select_block(catalog(DuaBlockTypeEnum.HAMD, "praise"))
    composition.select_block(catalog(DuaBlockTypeEnum.SALAWAT, "salawat"))

    assert composition.filled_count == 2
    assert composition.progress == 33
    assert composition.missing_blocks() == [
        DuaBlockTypeEnum.ADMISSION,
        DuaBlockTypeEnum.REQUEST,
        DuaBlockTypeEnum.OTHERS,
        DuaBlockTypeEnum.CLOSING,
    ]


def test_free_text_alone_fills_request_block() -> None:
    composition = DuaComposition(custom_text="Grant us patience")

    assert composition.is_filled(DuaBlockTypeEnum.REQUEST)


def test_complete_composition_texts_and_names() -> None:
    composition = DuaComposition(custom_text="free request")
    composition.select_block(catalog(DuaBlockTypeEnum.HAMD, "hamd", ("Ar-Rahman", "Ar-Rabb")))
    composition.set_custom_text(
        DuaBlockTypeEnum.SALAWAT,
        CustomBlockText(text="custom salawat", transliteration="custom translit"),
    )
    composition.select_block(catalog(DuaBlockTypeEnum.ADMISSION, "admission", ("Al-Ghafur",)))
    composition.select_block(catalog(DuaBlockTypeEnum.REQUEST, "request", ("Ar-Rabb",)))
    composition.select_block(catalog(DuaBlockTypeEnum.OTHERS, "others"))
    composition.select_block(catalog(DuaBlockTypeEnum.CLOSING, "closing", ("Al-Aziz",)))

    assert composition.is_complete
    assert composition.progress == 100
    assert composition.arabic_text().split("\n\n") == [
        "ar-hamd",
        "custom salawat",
        "ar-admission",
        "ar-request",
        "free request",
        "ar-others",
        "ar-closing",
    ]
    assert "free request" not in composition.transliteration()
    assert "custom translit" in composition.transliteration()
    assert composition.english().startswith("en-hamd\n\ncustom salawat")
    assert composition.allah_names() == ["Ar-Rahman", "Ar-Rabb", "Al-Ghafur", "Al-Aziz"]


@dataclass
class FakeDuaBlock:
    block_type: DuaBlockTypeEnum
    arabic_text: str
    id: UUID = field(default_factory=uuid4)
    transliteration: str = ""
    english_translation: str = ""
    allah_names: list[str] = field(default_factory=list)


class FakeDuasRepository:
    def __init__(self, blocks: list[FakeDuaBlock]) -> None:
        self.blocks = {block.id: block for block in blocks}
        self.saved: list[dict] = []

    async def get_blocks_by_ids(self, block_ids) -> list[FakeDuaBlock]:
        return [self.blocks[block_id] for block_id in block_ids if block_id in self.blocks]

    async def create_composition(self, **values) -> SimpleNamespace:
        self.saved.append(values)
        return SimpleNamespace(id=uuid4(), **values)


def full_catalog() -> dict[DuaBlockTypeEnum, FakeDuaBlock]:
    return {block_type: FakeDuaBlock(block_type, f"ar-{block_type.value}") for block_type in DuaBlockTypeEnum}


def full_input(blocks: dict[DuaBlockTypeEnum, FakeDuaBlock], **overrides) -> dict:
    values = {
        "hamd_block_id": blocks[DuaBlockTypeEnum.HAMD].id,
        "salawat_block_id": blocks[DuaBlockTypeEnum.SALAWAT].id,
        "admission_block_id": blocks[DuaBlockTypeEnum.ADMISSION].id,
        "request_block_ids": [blocks[DuaBlockTypeEnum.REQUEST].id],
        "others_block_id": blocks[DuaBlockTypeEnum.OTHERS].id,
        "closing_block_id": blocks[DuaBlockTypeEnum.CLOSING].id,
    }
    values.update(overrides)
    return values


@pytest.mark.asyncio
async def test_preview_reports_missing_blocks() -> None:
    blocks = full_catalog()
    service = DuasService(FakeDuasRepository(list(blocks.values())))

    preview = await service.preview(CompositionInput(hamd_block_id=blocks[DuaBlockTypeEnum.HAMD].id))

    assert preview.arabic == "ar-hamd"
    assert preview.progress == 17
    assert preview.is_complete is False
    assert DuaBlockTypeEnum.HAMD not in preview.missing_blocks


@pytest.mark.asyncio
async def test_block_and_custom_text_for_same_slot_is_rejected() -> None:
    blocks = full_catalog()
    service = DuasService(FakeDuasRepository(list(blocks.values())))
    payload = CompositionInput(
        **full_input(blocks),
        custom_blocks={DuaBlockTypeEnum.HAMD: CustomBlockTextIn(text="praise")},
    )

    with pytest.raises(ValidationException):
        await service.preview(payload)


@pytest.mark.asyncio
async def test_block_of_wrong_type_is_rejected() -> None:
    blocks = full_catalog()
    service = DuasService(FakeDuasRepository(list(blocks.values())))

    with pytest.raises(ValidationException):
        await service.preview(CompositionInput(hamd_block_id=blocks[DuaBlockTypeEnum.CLOSING].id))


@pytest.mark.asyncio
async def test_unknown_block_is_not_found() -> None:
    service = DuasService(FakeDuasRepository([]))

    with pytest.raises(NotFoundException):
        await service.preview(CompositionInput(request_block_ids=[uuid4()]))


@pytest.mark.asyncio
async def test_save_requires_title_and_complete_composition() -> None:
    blocks = full_catalog()
    repo = FakeDuasRepository(list(blocks.values()))
    service = DuasService(repo)
    user = SimpleNamespace(id=uuid4(), role=SimpleNamespace(name=RoleEnum.STUDENT))

    with pytest.raises(ValidationException, match="name"):
        await service.save_composition(CompositionSave(**full_input(blocks), title="  "), user)
    with pytest.raises(ValidationException, match="complete"):
        await service.save_composition(CompositionSave(**full_input(blocks, closing_block_id=None), title="Morning"), user)

    saved = await service.save_composition(
        CompositionSave(**full_input(blocks), title=" Morning dua ", is_favorite=True),
        user,
    )

    assert saved.title == "Morning dua"
    assert saved.is_favorite is True
    assert repo.saved[0]["request_block_ids"] == [str(blocks[DuaBlockTypeEnum.REQUEST].id)]
    assert repo.saved[0]["hamd_block_id"] == blocks[DuaBlockTypeEnum.HAMD].id
