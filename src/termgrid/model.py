import json
from collections.abc import Iterable
from dataclasses import asdict, dataclass

KIND_AVATAR = "avatar"
KIND_MEDIA = "media"
KINDS = (KIND_AVATAR, KIND_MEDIA)


@dataclass(frozen=True)
class RenderableItem:
    url: str
    kind: str = KIND_MEDIA
    is_video: bool = False
    shortcode: str = ""
    taken_at: int = 0

    @property
    def inline_name(self) -> str:
        """File name announced to the terminal when the item is sent on its own."""
        return f"{self.shortcode or 'image'}.img"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "RenderableItem":
        if not isinstance(data, dict):
            raise ValueError(f"Item must be an object: {data!r}")
        url = str(data.get("url") or "").strip()
        if not url:
            raise ValueError(f"Item has no url: {data!r}")
        kind = data.get("kind") or KIND_MEDIA
        if kind not in KINDS:
            raise ValueError(f"Unknown item kind: {kind!r}")
        return cls(
            url=url,
            kind=kind,
            is_video=bool(data.get("is_video", False)),
            shortcode=str(data.get("shortcode") or ""),
            taken_at=int(data.get("taken_at") or 0),
        )


def items_from_urls(lines: Iterable[str]) -> list[RenderableItem]:
    return [RenderableItem(url=line.strip()) for line in lines if line.strip()]


def items_from_json(text: str) -> list[RenderableItem]:
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of items")
    return [RenderableItem.from_dict(entry) for entry in data]


def items_to_json(items: Iterable[RenderableItem]) -> str:
    return json.dumps([item.to_dict() for item in items], indent=2)


def select_items(
    items: list[RenderableItem],
    max_items: int = 0,
    include_videos: bool = True,
    include_avatars: bool = True,
) -> list[RenderableItem]:
    """Drop videos or avatars when asked and cap the list at max_items (0 keeps everything)."""
    if not include_avatars:
        items = [item for item in items if item.kind != KIND_AVATAR]
    if not include_videos:
        items = [item for item in items if not item.is_video]
    if max_items > 0:
        items = items[:max_items]
    return items
