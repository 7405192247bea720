"""Use curl underneath a regular httpx client."""

from __future__ import annotations

import sys

from curlhttp import create_curl_client


def main(url: str) -> None:
    with create_curl_client(follow_redirects=True) as client:
        response = client.get(url)
        print(response.status_code, response.headers.get("content-type"))
        print(response.text[:200])


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "https://example.com/")
