"""Page extractor: resilient browser-driven fetching and article extraction."""

__version__ = "0.1.0"

from page_extractor.scraper.pipeline import ExtractionPipeline, ExtractionResult, extract_content

__all__ = ["ExtractionPipeline", "ExtractionResult", "extract_content"]
