from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Sound(BaseModel):
    """One playable clip. `file` names an asset; dangling names are allowed."""

    model_config = ConfigDict(extra="forbid")

    name: str
    file: str


class Category(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    sounds: list[Sound] = []


class SoundboardConfig(BaseModel):
    """The categorized sound list the end-user page renders."""

    model_config = ConfigDict(extra="forbid")

    categories: list[Category]

    def referenced_files(self) -> set[str]:
        return {s.file for c in self.categories for s in c.sounds}
