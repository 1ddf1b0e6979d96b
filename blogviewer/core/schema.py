from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class TabRecordModel(BaseModel):
    id: StrictStr
    name: StrictStr


class SessionRecordModel(BaseModel):
    """Durable session record as written under the session key."""

    model_config = ConfigDict(populate_by_name=True)

    tabs: list[TabRecordModel]
    active_tab_id: StrictStr | None = Field(default=None, alias="activeTabId")


class DocumentMetaModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: StrictStr
    name: StrictStr
    title: StrictStr = "Untitled"
    description: StrictStr = ""
    category: StrictStr = ""
    path: StrictStr
    last_modified: StrictStr = Field(default="", alias="lastModified")


class MenuItemModel(BaseModel):
    id: StrictStr
    title: StrictStr = "Untitled"
    category: StrictStr = ""
    description: StrictStr = ""


class MenuModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    categories: list[StrictStr] = Field(default_factory=list)
    items: list[MenuItemModel] = Field(default_factory=list)
    grouped_items: dict[str, list[MenuItemModel]] | None = Field(default=None, alias="groupedItems")


class ManifestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    posts: dict[str, DocumentMetaModel]
    menu: MenuModel = Field(default_factory=MenuModel)
    last_updated: StrictStr | None = Field(default=None, alias="lastUpdated")
