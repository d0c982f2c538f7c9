#!/usr/bin/env python3
"""
Get a Twitter access token for your application.

Usage:
    twitter-token --key $CONSUMER_KEY --secret $CONSUMER_SECRET
    python3 -m twitter_rest --key $CONSUMER_KEY --secret $CONSUMER_SECRET
"""
import argparse
import logging
import sys

from .client import TwitterClient
from .config import Config
from .exceptions import TwitterError
from .logger import logger


def prompt_for_pin(url: str) -> str:
    print("Hello, we are about to obtain your Twitter token.\n")
    print("Please open this URL in your browser:")
    print(f"{url}\n")
    return input("What's the PIN?\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Obtain a Twitter OAuth access token")
    parser.add_argument("--key", default=Config.TWITTER_CONSUMER_KEY, help="Consumer key")
    parser.add_argument("--secret", default=Config.TWITTER_CONSUMER_SECRET, help="Consumer secret")
    parser.add_argument("--debug", action="store_true", help="Log every request and response")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO))

    if not args.key or not args.secret:
        print("Get your Twitter token.\n")
        print("1. Register your app at https://developer.twitter.com.")
        print("2. Run this program with --key $CONSUMER_KEY --secret $CONSUMER_SECRET.\n")
        parser.print_help()
        return 0

    client = TwitterClient(args.key, args.secret, debug=args.debug)
    try:
        auth = client.setup(prompt_for_pin)
    except TwitterError as e:
        logger.error("Error: %s", e)
        return 1
    except (EOFError, KeyboardInterrupt):
        logger.error("Error: no PIN entered")
        return 1

    print("\nHere's your data:\n")
    print(f"Token: {auth.identifier}")
    print(f"Secret: {auth.secret}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
