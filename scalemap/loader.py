# loader.py: fetch both inspection datasets in parallel; each fails on its own

import json
import logging
import os
import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import pandas as pd
import requests

from scalemap import config
from scalemap.errors import DataUnavailable
from scalemap.records import parse_records

logger = logging.getLogger(__name__)

HEADERS = {"User-Agent": "scalemap/0.1"}


@dataclass
class LoadResult:
    category: str
    source: str
    frame: Optional[pd.DataFrame] = None
    skipped: int = 0
    error: Optional[DataUnavailable] = None
    loaded_at: Optional[float] = None

    @property
    def ok(self):
        return self.error is None


def is_url(source):
    return str(source).lower().startswith(("http://", "https://"))


# ------------------- FETCH -------------------
def _get(url, timeout, max_retries):
    last_error = None
    for i in range(max(1, max_retries)):
        try:
            r = requests.get(url, headers=HEADERS, timeout=timeout)
            if r.status_code == 429 and i + 1 < max_retries:
                wait = r.headers.get("Retry-After")
                sleep_s = int(wait) if (wait and str(wait).isdigit()) else (2 ** i) + random.uniform(0, 0.5)
                time.sleep(sleep_s); continue
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            last_error = e
            if i + 1 < max_retries:
                time.sleep((2 ** i) + random.uniform(0, 0.5))
        except ValueError as e:
            raise DataUnavailable(None, url, f"invalid JSON: {e}") from e
    raise DataUnavailable(None, url, str(last_error) if last_error else "unknown error")


def _read(path):
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            return json.load(f)
    except OSError as e:
        raise DataUnavailable(None, path, str(e)) from e
    except ValueError as e:
        raise DataUnavailable(None, path, f"invalid JSON: {e}") from e


def fetch_json(source, timeout=None, max_retries=None, data_dir=None):
    """Fetch one JSON array from a URL or a path relative to the data directory."""
    timeout = config.TIMEOUT_S if timeout is None else timeout
    max_retries = config.MAX_RETRIES if max_retries is None else max_retries
    if is_url(source):
        payload = _get(source, timeout, max_retries)
    else:
        path = source if os.path.isabs(source) else os.path.join(data_dir or config.DATA_DIR, source)
        payload = _read(path)
    if not isinstance(payload, list):
        raise DataUnavailable(None, source, f"expected a JSON array, got {type(payload).__name__}")
    return payload


# ------------------- LOAD -------------------
def load_category(category, source, **kw):
    """Fetch + parse one category. Never raises; failures come back on the result."""
    try:
        payload = fetch_json(source, **kw)
        frame, skipped = parse_records(payload, category)
    except DataUnavailable as e:
        err = DataUnavailable(category, source, e.reason)
        logger.warning("%s", err)
        return LoadResult(category=category, source=source, error=err)
    except (TypeError, ValueError, OverflowError) as e:
        err = DataUnavailable(category, source, f"unreadable payload: {e}")
        logger.warning("%s", err)
        return LoadResult(category=category, source=source, error=err)
    logger.info("loaded %d %s record(s) from %s", len(frame), category, source)
    return LoadResult(category=category, source=source, frame=frame, skipped=skipped, loaded_at=time.time())


def load_all(sources=None, **kw):
    """Load every category concurrently. Returns {category: LoadResult}."""
    sources = dict(config.SOURCES if sources is None else sources)
    if not sources:
        return {}
    with ThreadPoolExecutor(max_workers=len(sources)) as pool:
        futures = {cat: pool.submit(load_category, cat, src, **kw) for cat, src in sources.items()}
        return {cat: fut.result() for cat, fut in futures.items()}
