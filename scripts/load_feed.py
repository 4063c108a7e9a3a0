# scripts/load_feed.py
import asyncio
import logging
import sys

import polars as pl

from nss_lab.data.feed import DEFAULT_FEED_URL, NssFeedIngestor


async def main(source: str):
    ingestor = NssFeedIngestor(source)
    df = await ingestor.run_pipeline()

    summary = df.group_by("type").agg(
        pl.len().alias("rows"),
        pl.col("date").min().alias("first"),
        pl.col("date").max().alias("latest"),
    )
    print(summary.sort("type"))
    print(df.sort("date").tail(5))


logging.basicConfig(level=logging.INFO)
asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_FEED_URL))
