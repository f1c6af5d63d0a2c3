import os

from src.dumpers.dump import run_dump

# python -m src.dumpers
# REFRESH_PAGE_LIST=1 re-enumerates the wiki pages before dumping
if __name__ == "__main__":
    summary = run_dump(refresh_page_list=os.getenv("REFRESH_PAGE_LIST") == "1")
    print(summary)
