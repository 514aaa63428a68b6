"""Crawl pipelines."""

from owners_crawler.pipelines.crawler import CrawlResult, OwnersCrawler

__all__ = ["CrawlResult", "OwnersCrawler"]
