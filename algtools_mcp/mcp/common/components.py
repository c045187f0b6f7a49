"""Component metadata: fetching, lookup and summaries.

The metadata document is produced by the UI library's Storybook build and has
the shape::

    {
      "components": {"<key>": {"title": "Forms/Button", "props": {...}, ...}},
      "entries": {...}
    }

It is fetched fresh for every tool call and never cached.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx

from algtools_mcp.utils import get_logger

logger = get_logger(__name__)

PREVIEW_LIMIT = 20


class RemoteUnavailable(Exception):
    """The component metadata could not be fetched or decoded."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class PropDescriptor:
    description: str | None = None
    control: str | None = None
    options: tuple[Any, ...] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> PropDescriptor:
        data = data or {}
        control = data.get("control")
        # Storybook argTypes sometimes carry the control as {"type": "select"}
        if isinstance(control, dict):
            control = control.get("type")
        options = data.get("options")
        return cls(
            description=data.get("description"),
            control=control,
            options=tuple(options) if isinstance(options, list) else None,
        )


@dataclass(frozen=True)
class ExampleRef:
    id: str
    name: str


@dataclass(frozen=True)
class ComponentRecord:
    """One documented UI component.

    ``raw`` keeps the upstream mapping untouched so a matched record can be
    returned exactly as it was published.
    """

    key: str
    title: str
    component_path: str | None = None
    import_path: str | None = None
    description: str | None = None
    props: dict[str, PropDescriptor] = field(default_factory=dict)
    stories: tuple[ExampleRef, ...] = ()
    story_count: int = 0
    storybook_url: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def has_props(self) -> bool:
        return bool(self.props)

    @property
    def short_title(self) -> str:
        """Title without its category prefix ("Forms/Button" -> "Button")."""
        return self.title.split("/")[-1]

    @classmethod
    def from_dict(cls, key: str, data: dict[str, Any]) -> ComponentRecord:
        title = data.get("title")
        if not isinstance(title, str) or not title:
            raise ValueError(f"component {key!r} has no title")

        props = data.get("props") or {}
        if not isinstance(props, dict):
            raise ValueError(f"component {key!r}: 'props' must be an object")
        stories = data.get("stories") or []
        if not isinstance(stories, list) or not all(
            isinstance(s, dict) for s in stories
        ):
            raise ValueError(f"component {key!r}: 'stories' must be a list of objects")

        story_count = data.get("storyCount")
        if "stories" in data:
            if isinstance(story_count, int) and story_count != len(stories):
                logger.warning(
                    f"component {key!r}: storyCount {story_count} does not match "
                    f"{len(stories)} stories, using the story list"
                )
            story_count = len(stories)
        elif not isinstance(story_count, int):
            story_count = 0
        return cls(
            key=key,
            title=title,
            component_path=data.get("componentPath"),
            import_path=data.get("importPath"),
            description=data.get("description"),
            props={
                name: PropDescriptor.from_dict(prop) for name, prop in props.items()
            },
            stories=tuple(
                ExampleRef(id=str(s.get("id", "")), name=str(s.get("name", "")))
                for s in stories
            ),
            story_count=story_count,
            storybook_url=data.get("storybookUrl"),
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        return self.raw


@dataclass(frozen=True)
class ComponentSummary:
    title: str
    story_count: int
    has_props: bool
    component_path: str | None
    storybook_url: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "storyCount": self.story_count,
            "hasProps": self.has_props,
            "componentPath": self.component_path,
            "storybookUrl": self.storybook_url,
        }


@dataclass(frozen=True)
class DataSet:
    """Components in upstream order, plus the raw per-story entries."""

    components: dict[str, ComponentRecord]
    entries: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DataSet:
        if not isinstance(data, dict):
            raise ValueError("component metadata must be a JSON object")
        raw_components = data.get("components") or {}
        if not isinstance(raw_components, dict):
            raise ValueError("'components' must be a JSON object")
        components = {
            key: ComponentRecord.from_dict(key, value)
            for key, value in raw_components.items()
        }
        return cls(components=components, entries=data.get("entries") or {})

    @property
    def titles(self) -> list[str]:
        return [record.title for record in self.components.values()]

    def __len__(self) -> int:
        return len(self.components)


@dataclass(frozen=True)
class LookupResult:
    """Either a matched record, or a bounded preview of what exists."""

    record: ComponentRecord | None = None
    preview: tuple[str, ...] = ()
    total: int = 0

    @property
    def found(self) -> bool:
        return self.record is not None


async def fetch_dataset(
    url: str,
    client: httpx.AsyncClient | None = None,
    timeout: float = 10.0,
) -> DataSet:
    """GET the component metadata document and parse it.

    Args:
        url: Metadata document URL.
        client: Optional client to issue the request through. When omitted a
            short-lived client is created for this call.
        timeout: Request timeout in seconds (only used for the owned client).

    Raises:
        RemoteUnavailable: non-2xx status, transport error, or a body that is
            not a valid metadata document.
    """
    logger.debug(f"Fetching component metadata from {url}")
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as owned:
                response = await owned.get(url, follow_redirects=True)
        else:
            response = await client.get(url, follow_redirects=True)
    except httpx.HTTPError as e:
        logger.warning(f"Component metadata request failed: {e}")
        raise RemoteUnavailable(f"Request to {url} failed: {e}") from e

    if not response.is_success:
        logger.warning(
            f"Component metadata request returned HTTP {response.status_code}"
        )
        raise RemoteUnavailable(
            f"HTTP {response.status_code} {response.reason_phrase}".rstrip(),
            status_code=response.status_code,
        )

    try:
        dataset = DataSet.from_dict(response.json())
    except (json.JSONDecodeError, ValueError, AttributeError, TypeError) as e:
        raise RemoteUnavailable(f"Invalid component metadata: {e}") from e

    logger.info(f"Loaded {len(dataset)} components from {url}")
    return dataset


def find_component(dataset: DataSet, name: str) -> LookupResult:
    """Find a component by title, short title or key (case-insensitive).

    Exact matches are tried across the whole mapping before any substring
    match; within a phase the first record in upstream order wins.
    """
    needle = name.lower()

    for key, record in dataset.components.items():
        title = record.title.lower()
        if (
            title == needle
            or title.split("/")[-1] == needle
            or key.lower() == needle
        ):
            return LookupResult(record=record, total=len(dataset))

    # Only "title contains name", never "name contains title"
    for record in dataset.components.values():
        title = record.title.lower()
        if needle in title or needle in title.split("/")[-1]:
            return LookupResult(record=record, total=len(dataset))

    titles = dataset.titles
    return LookupResult(preview=tuple(titles[:PREVIEW_LIMIT]), total=len(titles))


def summarize(dataset: DataSet) -> list[ComponentSummary]:
    return [
        ComponentSummary(
            title=record.title,
            story_count=record.story_count,
            has_props=record.has_props,
            component_path=record.component_path,
            storybook_url=record.storybook_url,
        )
        for record in dataset.components.values()
    ]
