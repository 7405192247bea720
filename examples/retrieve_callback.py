"""Fetch a URL with the callback API and print what arrived."""

from __future__ import annotations

import asyncio
import logging
import sys

from curlhttp import AsyncCurlRetriever, current_buffer


def report(label: str) -> None:
    buffer = current_buffer()
    print(f"{label}: {buffer.status_code} {buffer.content_type} ({len(buffer.body)} bytes)")


async def main(urls: list[str]) -> None:
    retriever = AsyncCurlRetriever()
    transfers = [retriever.retrieve(url, report, (url,)) for url in urls]
    for transfer in transfers:
        await transfer.wait()


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(main(sys.argv[1:] or ["https://example.com/"]))
