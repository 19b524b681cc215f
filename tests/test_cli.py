from __future__ import annotations

import json

from retail_api.cli import build_parser, main, seed_catalog
from retail_api.sample_data import SAMPLE_PRODUCTS


def test_seed_writes_sample_catalog(tmp_path):
    target = tmp_path / "data" / "products.json"
    assert main(["--data-file", str(target), "seed"]) == 0
    data = json.loads(target.read_text(encoding="utf-8"))
    assert [p["id"] for p in data] == [p["id"] for p in SAMPLE_PRODUCTS]


def test_seed_refuses_to_overwrite(tmp_path):
    target = tmp_path / "products.json"
    target.write_text("[]", encoding="utf-8")
    assert main(["--data-file", str(target), "seed"]) == 1
    assert target.read_text(encoding="utf-8") == "[]"
    assert seed_catalog(target, force=True)
    assert len(json.loads(target.read_text(encoding="utf-8"))) == len(SAMPLE_PRODUCTS)


def test_sample_ratings_match_reviews():
    for product in SAMPLE_PRODUCTS:
        if product["reviews"]:
            mean = sum(r["rating"] for r in product["reviews"]) / len(product["reviews"])
            assert product["rating"] == mean


def test_serve_arguments():
    args = build_parser().parse_args(["--config", "x.yaml", "serve", "--port", "4000"])
    assert args.port == 4000
    assert args.config == "x.yaml"
    assert args.func.__name__ == "cmd_serve"
