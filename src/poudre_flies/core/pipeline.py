# ABOUTME: Pipeline orchestrator that turns the report page into a ReportManifest
# ABOUTME: Only the root report fetch is fatal; every later stage degrades to partial results

from datetime import UTC, datetime

from poudre_flies.config import Config, get_config
from poudre_flies.core.dictionary import FlyDictionary
from poudre_flies.core.models import (
    CollectionProduct,
    FlyCatalog,
    FlyCategory,
    FlyMention,
    RawPage,
    ReportManifest,
    ReportSnapshot,
    ResolvedFly,
)
from poudre_flies.extraction.base import ReportUnavailableError
from poudre_flies.extraction.categorizer import FlyCategorizer
from poudre_flies.extraction.mentions import FlyMentionMatcher
from poudre_flies.extraction.report import ReportSectionExtractor
from poudre_flies.images.resolver import ImageResolver
from poudre_flies.utils.http import FetchClient
from poudre_flies.utils.logging import get_logger, log_pipeline_step
from poudre_flies.utils.pacing import Pacer
from poudre_flies.utils.retry import FetchError


class FlyReportPipeline:
    """Coordinates every stage of a single report run.

    Stages:
    1. Fetch the report page (fatal on failure)
    2. Extract the report section → ReportSnapshot
    3. Match fly mentions
    4. Load the three category collections concurrently
    5. Categorize and resolve each mention's image, one at a time
    6. Bucket into a capped FlyCatalog and assemble the ReportManifest
    """

    def __init__(
        self,
        config: Config | None = None,
        dictionary: FlyDictionary | None = None,
        client: FetchClient | None = None,
        pacer: Pacer | None = None,
    ):
        """Initialize the pipeline.

        Args:
            config: Runtime settings (defaults to the global config)
            dictionary: Fly dictionary (defaults to ``config.dictionary_file`` or the built-in one)
            client: Shared fetch client (defaults to a new FetchClient)
            pacer: Pacer for sequential product fetches
        """
        self.config = config or get_config()
        self.dictionary = dictionary or FlyDictionary.load(self.config.dictionary_file)
        self.client = client or FetchClient(self.config)
        self.logger = get_logger(__name__)

        self.extractor = ReportSectionExtractor(self.dictionary)
        self.matcher = FlyMentionMatcher(self.dictionary, order=self.config.mention_order)
        self.categorizer = FlyCategorizer(self.dictionary)
        self.resolver = ImageResolver(
            self.client,
            config=self.config,
            dictionary=self.dictionary,
            pacer=pacer or Pacer(self.config.pacing_interval),
        )

    async def __aenter__(self) -> "FlyReportPipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def run(self, report_url: str | None = None) -> ReportManifest:
        """Run the full pipeline and return the manifest.

        Raises:
            ReportUnavailableError: If the report page itself cannot be fetched
        """
        snapshot, mentions = await self.extract_report(report_url)

        collections = await self._load_collections()
        resolved = await self._resolve_mentions(mentions)

        if self.config.include_collection_picks:
            resolved += self._collection_picks(collections)

        catalog = FlyCatalog.from_resolved(resolved, cap=self.config.display_cap)
        manifest = ReportManifest.assemble(snapshot, mentions, catalog)

        self.logger.info(
            "Report manifest assembled",
            source_url=manifest.source_url,
            mentioned=len(manifest.mentioned_flies),
            dry_flies=len(manifest.dry_flies),
            nymphs=len(manifest.nymphs),
            streamers=len(manifest.streamers),
        )
        return manifest

    async def extract_report(self, report_url: str | None = None) -> tuple[ReportSnapshot, list[FlyMention]]:
        """Fetch the report page and return its snapshot and fly mentions."""
        url = report_url or self.config.report_url
        page = await self._fetch_report(url)

        snapshot = self.extractor.extract(page.body, source_url=url, captured_at=datetime.now(UTC))
        mentions = self.matcher.find_mentions(snapshot.report_text)
        self.logger.info("Found mentioned flies", count=len(mentions), flies=[mention.name for mention in mentions])
        return snapshot, mentions

    @log_pipeline_step("fetch_report")
    async def _fetch_report(self, url: str) -> RawPage:
        try:
            return await self.client.fetch_ok(url)
        except FetchError as e:
            raise ReportUnavailableError(f"Failed to fetch report: {e}", url=url, cause=e) from e

    @log_pipeline_step("load_collections")
    async def _load_collections(self) -> dict[FlyCategory, list[CollectionProduct]]:
        return await self.resolver.load_collections()

    @log_pipeline_step("resolve_images")
    async def _resolve_mentions(self, mentions: list[FlyMention]) -> list[ResolvedFly]:
        resolved: list[ResolvedFly] = []
        for mention in mentions:
            category = self.categorizer.categorize(mention.name)
            image_url = await self.resolver.resolve(mention.name, category)
            resolved.append(ResolvedFly(name=mention.name, image_url=image_url, category=category))

        unresolved = [fly.name for fly in resolved if not fly.has_image]
        if unresolved:
            self.logger.info("Flies without images", flies=unresolved)
        return resolved

    @staticmethod
    def _collection_picks(collections: dict[FlyCategory, list[CollectionProduct]]) -> list[ResolvedFly]:
        """The shop's own listing for each category, in listing order."""
        return [
            ResolvedFly(name=product.name, image_url=product.image, category=category)
            for category, products in collections.items()
            for product in products
            if product.image
        ]

    async def close(self) -> None:
        await self.client.close()
