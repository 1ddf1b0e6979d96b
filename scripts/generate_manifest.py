#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from blogviewer.core.manifest_builder import build_manifest


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate the blog manifest from a posts directory")
    parser.add_argument("--posts", required=True, help="Directory holding one folder per category")
    parser.add_argument("--output", required=True, help="Manifest file to write (.json)")
    parser.add_argument("--url-prefix", default="/data/posts", help="URL prefix of the posts directory")
    args = parser.parse_args()

    posts_dir = Path(args.posts)
    if not posts_dir.is_dir():
        parser.error(f"{posts_dir} is not a directory")

    manifest = build_manifest(posts_dir, url_prefix=args.url_prefix)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(manifest, ensure_ascii=False, indent=2), encoding="utf-8")

    categories = manifest["menu"]["categories"]
    print(f"Wrote {output}: {len(manifest['posts'])} post(s) in {len(categories)} categor(ies)")


if __name__ == "__main__":
    main()
