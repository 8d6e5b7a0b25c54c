"""Operator commands for the site copy.

  faq-list     print the English FAQ
  faq-add      add a question/answer pair to both locale files
  faq-delete   remove a question (by 1-based number) from both locale files
  snapshot     copy the locale files into a timestamped backup directory
  migrate      push the locale files and gallery photo metadata into the content store
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from clinic_models import Locale

from clinic_content_api.config import load_settings
from clinic_content_api.errors import ContentError
from clinic_content_api.logging_config import configure_logging
from clinic_content_api.services import editing
from clinic_content_api.services.gallery import photo_records
from clinic_content_api.services.local_source import LocalContentSource
from clinic_content_api.services.store import ContentStore, build_store
from clinic_content_api.services.sync import sync_dictionaries

logger = logging.getLogger(__name__)


def _source(args: argparse.Namespace) -> LocalContentSource:
    return LocalContentSource(args.content_dir)


def _load_pair(source: LocalContentSource) -> tuple[dict, dict]:
    return source.load(Locale.EN), source.load(Locale.AR)


def cmd_faq_list(args: argparse.Namespace) -> int:
    en = _source(args).load(Locale.EN)
    questions = editing.faq_questions(en)
    if not questions:
        print("No FAQs.")
    for number, faq in enumerate(questions, start=1):
        print(f"{number}. {faq.get('question', '')}")
        print(f"   {faq.get('answer', '')}\n")
    return 0


def cmd_faq_add(args: argparse.Namespace) -> int:
    source = _source(args)
    en, ar = _load_pair(source)
    index = editing.add_faq(
        en,
        ar,
        {"question": args.en_question, "answer": args.en_answer},
        {"question": args.ar_question, "answer": args.ar_answer},
    )
    source.save(Locale.EN, en)
    source.save(Locale.AR, ar)
    print(f"FAQ #{index + 1} added.")
    return 0


def cmd_faq_delete(args: argparse.Namespace) -> int:
    source = _source(args)
    en, ar = _load_pair(source)
    try:
        removed = editing.delete_faq(en, ar, args.number - 1)
    except IndexError:
        print(f"Invalid FAQ number: {args.number}", file=sys.stderr)
        return 1
    source.save(Locale.EN, en)
    source.save(Locale.AR, ar)
    print(f"Deleted FAQ: {removed.get('question', '')}")
    return 0


def cmd_snapshot(args: argparse.Namespace) -> int:
    target = _source(args).snapshot(args.target)
    print(f"Backup created: {target}")
    return 0


async def migrate(source: LocalContentSource, store: ContentStore, with_gallery: bool = True) -> dict:
    en, ar = _load_pair(source)
    report = await sync_dictionaries(store, {Locale.EN: en, Locale.AR: ar})
    images = 0
    if with_gallery:
        for record in photo_records(en, ar):
            await store.upsert_gallery_image(
                record.case_id,
                record.image_type,
                record.image_number,
                record.description,
                record.locale,
                image_url=record.image_url,
            )
            images += 1
    logger.info("Migration finished", extra={"sections": report.sections, "gallery_images": images})
    return {"sections": report.sections, "gallery_images": images}


def cmd_migrate(args: argparse.Namespace) -> int:
    settings = load_settings()
    store = build_store(settings)
    counters = asyncio.run(migrate(_source(args), store, with_gallery=not args.skip_gallery))
    print(f"Migrated {counters['sections']} sections and {counters['gallery_images']} gallery images.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Clinic site content manager")
    parser.add_argument(
        "--content-dir",
        default=os.getenv("LOCAL_CONTENT_DIR", "locales"),
        help="Directory holding en.json / ar.json",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("faq-list", help="List FAQs")
    p_list.set_defaults(func=cmd_faq_list)

    p_add = sub.add_parser("faq-add", help="Add an FAQ to both locales")
    p_add.add_argument("--en-question", required=True)
    p_add.add_argument("--en-answer", required=True)
    p_add.add_argument("--ar-question", required=True)
    p_add.add_argument("--ar-answer", required=True)
    p_add.set_defaults(func=cmd_faq_add)

    p_del = sub.add_parser("faq-delete", help="Delete an FAQ from both locales")
    p_del.add_argument("number", type=int, help="1-based FAQ number as shown by faq-list")
    p_del.set_defaults(func=cmd_faq_delete)

    p_snap = sub.add_parser("snapshot", help="Copy locale files into backups/<timestamp>/")
    p_snap.add_argument("--target", default="backups")
    p_snap.set_defaults(func=cmd_snapshot)

    p_mig = sub.add_parser("migrate", help="Push locale files into the content store")
    p_mig.add_argument("--skip-gallery", action="store_true", help="Do not write gallery_images rows")
    p_mig.set_defaults(func=cmd_migrate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging(service_name="content-cli", json_enabled=False)
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except ContentError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
