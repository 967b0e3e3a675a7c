#!/usr/bin/env python3
"""
Pageforge
Crawl a URL and extract markdown, HTML, text, screenshots and structured JSON
"""

import argparse
import asyncio
import json
import sys

from pageforge import DataExtractor, ExtractorConfig, JobOptions, PageforgeError
from pageforge.engines import JobRunner
from pageforge.monitoring import LogManager
from pageforge.options import AVAILABLE_FORMATS
from pageforge.storage import FileStorage


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Extract a page in several formats")
    parser.add_argument('url')
    parser.add_argument('--engine', choices=['static', 'browser'], default='static')
    parser.add_argument('--formats', nargs='+', choices=AVAILABLE_FORMATS, default=['markdown'])
    parser.add_argument('--timeout', type=int, default=60_000, help="job timeout in ms")
    parser.add_argument('--wait-for', type=int, default=None, help="extra wait after load in ms")
    parser.add_argument('--proxy', default=None)
    parser.add_argument('--include-tags', nargs='+', default=None)
    parser.add_argument('--exclude-tags', nargs='+', default=None)
    parser.add_argument('--prompt', default=None, help="instructions for json extraction")
    parser.add_argument('--schema', default=None, help="path to a JSON schema file")
    parser.add_argument('--model', default=None, help="model for json extraction")
    parser.add_argument('--retry', action='store_true')
    parser.add_argument('--save', action='store_true', help="save the result under the storage dir")
    parser.add_argument('--stats', action='store_true', help="print storage usage after the job")
    return parser.parse_args(argv)


def build_options(args) -> JobOptions:
    json_options = None
    if 'json' in args.formats:
        schema = None
        if args.schema:
            with open(args.schema, 'r', encoding='utf-8') as f:
                schema = json.load(f)
        json_options = {'schema': schema, 'user_prompt': args.prompt}

    return JobOptions.from_dict({
        'url': args.url,
        'engine': args.engine,
        'formats': args.formats,
        'timeout': args.timeout,
        'wait_for': args.wait_for,
        'proxy': args.proxy,
        'retry': args.retry,
        'include_tags': args.include_tags,
        'exclude_tags': args.exclude_tags,
        'json_options': json_options,
        'extract_model': args.model,
    })


async def main(argv=None):
    """Main entry point for a single extraction job"""
    args = parse_args(argv)
    config = ExtractorConfig.from_env()
    log_manager = LogManager(log_dir=config.log_dir, log_level=config.log_level)

    options = build_options(args)
    extractor = DataExtractor(config)

    async with JobRunner(extractor, queue_name='cli') as runner:
        result = await runner.run(options)

    log_manager.log_extraction_event('cli_job_finished', job_id=result['jobId'], url=result['url'])
    log_manager.close()

    storage = FileStorage(config.storage_dir, compress=config.compress_screenshots)
    if args.save:
        path = await storage.save_result(result['url'], result, result['jobId'])
        print(f"Saved result to {path}", file=sys.stderr)
    if args.stats:
        print(json.dumps({'storage': storage.get_storage_stats()}, indent=2), file=sys.stderr)

    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nStopped by user", file=sys.stderr)
    except PageforgeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
