# Paths and remote endpoint for the wiki dumper

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DATA_FOLDER = Path(os.getenv("DATA_FOLDER_PATH") or "data")
# Wiki content lives on a different path as it is versioned in its own repo
WIKI_DATA_FOLDER = Path(os.getenv("WIKI_FOLDER_PATH") or "wiki-data")

WIKI_PAGES_FOLDER = WIKI_DATA_FOLDER / "wiki-pages"
WIKI_PAGE_LIST = DATA_FOLDER / "wiki-page-list.json"
RAW_API_FOLDER = DATA_FOLDER / "raw"

WIKI_API_URL = os.getenv("WIKI_API_URL") or "https://oldschool.runescape.wiki/api.php"
WIKI_USER_AGENT = os.getenv("WIKI_USER_AGENT") or "wiki-page-dumper/0.1 (offline data mirror)"
