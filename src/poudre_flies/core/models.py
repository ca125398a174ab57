# ABOUTME: Value objects flowing through the fly report pipeline
# ABOUTME: Raw pages, report snapshots, mentions, resolved flies, catalog buckets and the final manifest

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FlyCategory(str, Enum):
    """Display categories for recommended flies."""

    DRY = "dry"
    NYMPH = "nymph"
    STREAMER = "streamer"


class RawPage(BaseModel):
    """The raw HTTP response for a single fetch. Never persisted."""

    model_config = ConfigDict(frozen=True)

    url: str
    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ReportSnapshot(BaseModel):
    """Plain-text report content captured from the report page.

    Both text fields are always present; a failed extraction yields empty strings.
    """

    model_config = ConfigDict(frozen=True)

    flow_info: str = ""
    report_text: str = ""
    source_url: str = ""
    captured_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_empty(self) -> bool:
        return not self.flow_info and not self.report_text


class FlyMention(BaseModel):
    """A fly name detected in report text."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Canonical dictionary name, or the literal matched text")
    is_dictionary_match: bool
    position: int = Field(default=-1, description="Offset of the first occurrence in the report text")


class CollectionProduct(BaseModel):
    """A product listed in an upstream collection feed or grid."""

    model_config = ConfigDict(frozen=True)

    name: str
    image: str | None = None
    size: str | None = None
    handle: str | None = None


class ResolvedFly(BaseModel):
    """A fly with its resolved product image and display category."""

    model_config = ConfigDict(frozen=True)

    name: str
    image_url: str | None = None
    category: FlyCategory

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)


class ManifestFly(BaseModel):
    """Catalog entry as exposed in the output artifact."""

    name: str
    image: str


class FlyCatalog(BaseModel):
    """Resolved flies bucketed by category, each bucket capped for display."""

    model_config = ConfigDict(frozen=True)

    dry_flies: list[ResolvedFly] = Field(default_factory=list)
    nymphs: list[ResolvedFly] = Field(default_factory=list)
    streamers: list[ResolvedFly] = Field(default_factory=list)

    @classmethod
    def from_resolved(cls, flies: list[ResolvedFly], cap: int = 8) -> "FlyCatalog":
        """Bucket flies by category in input order.

        Flies without an image are dropped. Within a bucket a repeated name or
        image keeps the first entry. Each bucket is truncated to ``cap``.
        """
        buckets: dict[FlyCategory, list[ResolvedFly]] = {category: [] for category in FlyCategory}
        seen: dict[FlyCategory, set[str]] = {category: set() for category in FlyCategory}

        for fly in flies:
            if not fly.has_image:
                continue
            keys = {fly.name.casefold(), fly.image_url}
            if keys & seen[fly.category]:
                continue
            seen[fly.category] |= keys
            buckets[fly.category].append(fly)

        return cls(
            dry_flies=buckets[FlyCategory.DRY][:cap],
            nymphs=buckets[FlyCategory.NYMPH][:cap],
            streamers=buckets[FlyCategory.STREAMER][:cap],
        )

    def bucket(self, category: FlyCategory) -> list[ResolvedFly]:
        return {
            FlyCategory.DRY: self.dry_flies,
            FlyCategory.NYMPH: self.nymphs,
            FlyCategory.STREAMER: self.streamers,
        }[category]


def _manifest_entries(flies: list[ResolvedFly]) -> list[ManifestFly]:
    return [ManifestFly(name=fly.name, image=fly.image_url) for fly in flies if fly.image_url]


class ReportManifest(BaseModel):
    """The output artifact consumed by the delivery and caching layers."""

    model_config = ConfigDict(populate_by_name=True)

    last_updated: datetime = Field(alias="lastUpdated")
    source_url: str = Field(alias="sourceUrl")
    flow_info: str = Field(default="", alias="flowInfo")
    report_text: str = Field(default="", alias="reportText")
    mentioned_flies: list[str] = Field(default_factory=list, alias="mentionedFlies")
    dry_flies: list[ManifestFly] = Field(default_factory=list, alias="dryFlies")
    nymphs: list[ManifestFly] = Field(default_factory=list)
    streamers: list[ManifestFly] = Field(default_factory=list)

    @classmethod
    def assemble(
        cls, snapshot: ReportSnapshot, mentions: list[FlyMention], catalog: FlyCatalog | None = None
    ) -> "ReportManifest":
        """Merge a snapshot, its mentions and the resolved catalog into one manifest."""
        if catalog is None:
            catalog = FlyCatalog()
        return cls(
            last_updated=snapshot.captured_at,
            source_url=snapshot.source_url,
            flow_info=snapshot.flow_info,
            report_text=snapshot.report_text,
            mentioned_flies=[mention.name for mention in mentions],
            dry_flies=_manifest_entries(catalog.dry_flies),
            nymphs=_manifest_entries(catalog.nymphs),
            streamers=_manifest_entries(catalog.streamers),
        )

    def to_artifact(self) -> dict:
        """Return the JSON-compatible artifact with its published field names."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
