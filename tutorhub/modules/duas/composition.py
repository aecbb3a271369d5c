"""Dua composition from ordered building blocks.

A dua is composed of six blocks in fixed order. Each block is filled either
by a catalog selection or by custom text; the request block additionally
accepts several catalog entries, its own custom text and a free-form
``custom_text``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tutorhub.core.enums import DuaBlockTypeEnum

BLOCK_ORDER: tuple[DuaBlockTypeEnum, ...] = (
    DuaBlockTypeEnum.HAMD,
    DuaBlockTypeEnum.SALAWAT,
    DuaBlockTypeEnum.ADMISSION,
    DuaBlockTypeEnum.REQUEST,
    DuaBlockTypeEnum.OTHERS,
    DuaBlockTypeEnum.CLOSING,
)
SEPARATOR = "\n\n"


@dataclass(frozen=True, slots=True)
class CatalogBlock:
    id: str
    block_type: DuaBlockTypeEnum
    arabic_text: str
    transliteration: str
    english_translation: str
    allah_names: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CustomBlockText:
    text: str
    transliteration: str | None = None


def next_step(current: DuaBlockTypeEnum) -> DuaBlockTypeEnum | None:
    index = BLOCK_ORDER.index(current)
    return BLOCK_ORDER[index + 1] if index + 1 < len(BLOCK_ORDER) else None


def previous_step(current: DuaBlockTypeEnum) -> DuaBlockTypeEnum | None:
    index = BLOCK_ORDER.index(current)
    return BLOCK_ORDER[index - 1] if index > 0 else None


@dataclass(slots=True)
class DuaComposition:
    """Mutable composition state."""

    selected: dict[DuaBlockTypeEnum, CatalogBlock] = field(default_factory=dict)
    request_blocks: list[CatalogBlock] = field(default_factory=list)
    custom: dict[DuaBlockTypeEnum, CustomBlockText] = field(default_factory=dict)
    custom_text: str = ""

    def select_block(self, block: CatalogBlock) -> None:
        """Pick a catalog block; replaces custom text except for requests."""
        if block.block_type == DuaBlockTypeEnum.REQUEST:
            if all(existing.id != block.id for existing in self.request_blocks):
                self.request_blocks.append(block)
            return
        self.selected[block.block_type] = block
        self.custom.pop(block.block_type, None)

    def deselect_block(self, block_type: DuaBlockTypeEnum, block_id: str) -> None:
        if block_type == DuaBlockTypeEnum.REQUEST:
            self.request_blocks = [block for block in self.request_blocks if block.id != block_id]
        elif (current := self.selected.get(block_type)) is not None and current.id == block_id:
            del self.selected[block_type]

    def set_custom_text(self, block_type: DuaBlockTypeEnum, custom: CustomBlockText | None) -> None:
        """Set or clear custom text for a block; setting it clears the catalog pick."""
        if custom is None:
            self.custom.pop(block_type, None)
            return
        self.custom[block_type] = custom
        if block_type != DuaBlockTypeEnum.REQUEST:
            self.selected.pop(block_type, None)

    def _custom_text_for(self, block_type: DuaBlockTypeEnum) -> str:
        custom = self.custom.get(block_type)
        return custom.text if custom is not None else ""

    def is_filled(self, block_type: DuaBlockTypeEnum) -> bool:
        if block_type == DuaBlockTypeEnum.REQUEST:
            return bool(self.request_blocks or self._custom_text_for(block_type) or self.custom_text)
        return block_type in self.selected or bool(self._custom_text_for(block_type))

    @property
    def filled_count(self) -> int:
        return sum(1 for block_type in BLOCK_ORDER if self.is_filled(block_type))

    @property
    def is_complete(self) -> bool:
        return self.filled_count == len(BLOCK_ORDER)

    @property
    def progress(self) -> int:
        return round(self.filled_count / len(BLOCK_ORDER) * 100)

    def missing_blocks(self) -> list[DuaBlockTypeEnum]:
        return [block_type for block_type in BLOCK_ORDER if not self.is_filled(block_type)]

    def _compose(self, catalog_attr: str, custom_attr: str, include_free_text: bool) -> str:
        parts: list[str] = []
        for block_type in BLOCK_ORDER:
            custom = self.custom.get(block_type)
            custom_value = getattr(custom, custom_attr) if custom is not None else None
            if block_type == DuaBlockTypeEnum.REQUEST:
                parts.extend(getattr(block, catalog_attr) for block in self.request_blocks)
                if custom_value:
                    parts.append(custom_value)
                if include_free_text and self.custom_text:
                    parts.append(self.custom_text)
            elif (block := self.selected.get(block_type)) is not None:
                parts.append(getattr(block, catalog_attr))
            elif custom_value:
                parts.append(custom_value)
        return SEPARATOR.join(parts)

    def arabic_text(self) -> str:
        return self._compose("arabic_text", "text", include_free_text=True)

    def transliteration(self) -> str:
        return self._compose("transliteration", "transliteration", include_free_text=False)

    def english(self) -> str:
        return self._compose("english_translation", "text", include_free_text=True)

    def allah_names(self) -> list[str]:
        """Names of Allah used by catalog blocks, first-seen order, no duplicates."""
        names: dict[str, None] = {}
        for block_type in BLOCK_ORDER:
            if block_type == DuaBlockTypeEnum.REQUEST:
                blocks = self.request_blocks
            else:
                block = self.selected.get(block_type)
                blocks = [block] if block is not None else []
            for block in blocks:
                for name in block.allah_names:
                    names.setdefault(name, None)
        return list(names)
