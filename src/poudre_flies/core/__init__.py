# ABOUTME: Domain models, injected dictionary and pipeline orchestration
# ABOUTME: Pipeline Stage 3: extracted text and resolved images → report manifest

"""
Core Layer: Domain models and workflow orchestration

This layer handles:
- Value objects passed between pipeline stages
- The curated fly dictionary injected into every stage
- Pipeline orchestration producing the final manifest

Data Flow: extraction/ + images/ results → FlyCatalog → ReportManifest
"""

from .dictionary import FlyDictionary
from .models import (
    CollectionProduct,
    FlyCatalog,
    FlyCategory,
    FlyMention,
    ManifestFly,
    RawPage,
    ReportManifest,
    ReportSnapshot,
    ResolvedFly,
)

# Import the pipeline on-demand to avoid circular imports
# Use: from poudre_flies.core.pipeline import FlyReportPipeline

__all__ = [
    "CollectionProduct",
    "FlyCatalog",
    "FlyCategory",
    "FlyDictionary",
    "FlyMention",
    "ManifestFly",
    "RawPage",
    "ReportManifest",
    "ReportSnapshot",
    "ResolvedFly",
]
