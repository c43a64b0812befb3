"""
CLI runner that replays a conversation through an ADCortex chat client.

Usage:
    python -m adcortex.run --conversation conversation.yaml [OPTIONS]

    # Replay with the async client (default)
    python -m adcortex.run --conversation conversation.yaml

    # Replay with the blocking client and settings from a config file
    python -m adcortex.run --conversation conversation.yaml --config adcortex.yaml --sync

The conversation file holds a ``session`` mapping (SessionInfo fields) and a
``messages`` list of ``{role, content}`` entries.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from .chat_client import AdcortexChatClient, AsyncAdcortexChatClient
from .config import ClientConfig
from .exceptions import AdcortexError, ConfigurationError, TransportError, ValidationError
from .types import Ad, SessionInfo

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("adcortex")


def load_conversation(path: Path) -> tuple[SessionInfo, list[dict[str, Any]]]:
    """Read session info and messages from a YAML conversation file."""
    if not path.exists():
        raise ConfigurationError(f"Conversation file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict) or "session" not in data:
        raise ConfigurationError(f"No 'session' section in {path}")

    session_info = SessionInfo.from_dict(data["session"])
    messages = data.get("messages") or []
    if not isinstance(messages, list):
        raise ConfigurationError(f"'messages' in {path} must be a list")
    for i, entry in enumerate(messages):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Message {i} in {path} must be a mapping with role and content")
    return session_info, messages


def replay_sync(client: AdcortexChatClient, messages: list[dict[str, Any]]) -> tuple[list[Ad], int]:
    """Send messages through the blocking client, collecting ads as they arrive."""
    ads = []
    failures = 0
    for entry in messages:
        try:
            client(entry.get("role"), entry.get("content"))
        except TransportError as e:
            failures += 1
            logger.warning(f"Batch failed, messages stay queued: {e}")
        ad = client.get_latest_ad()
        if ad:
            ads.append(ad)
    return ads, failures


async def replay_async(
    client: AsyncAdcortexChatClient, messages: list[dict[str, Any]]
) -> tuple[list[Ad], int]:
    """Send messages through the async client, collecting ads as they arrive."""
    ads = []
    failures = 0
    for entry in messages:
        try:
            await client(entry.get("role"), entry.get("content"))
        except TransportError as e:
            failures += 1
            logger.warning(f"Batch failed, messages stay queued: {e}")
        ad = client.get_latest_ad()
        if ad:
            ads.append(ad)
    return ads, failures


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="adcortex: replay a conversation and show recommended ads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Replay a conversation with the async client
    python -m adcortex.run --conversation conversation.yaml

    # Use the blocking client
    python -m adcortex.run --conversation conversation.yaml --sync

    # Use a specific config file
    python -m adcortex.run --conversation conversation.yaml --config adcortex.yaml
        """,
    )

    parser.add_argument(
        "--conversation",
        type=Path,
        required=True,
        help="YAML file with session info and messages",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("adcortex.yaml"),
        help="Path to config file (default: adcortex.yaml)",
    )
    parser.add_argument(
        "--sync",
        action="store_true",
        help="Use the blocking client instead of the async one",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = ClientConfig.from_yaml(args.config)
        session_info, messages = load_conversation(args.conversation)
        logger.info(f"Config loaded from {args.config}")
        logger.info(f"Replaying {len(messages)} message(s) for session {session_info.session_id}")

        if args.sync:
            client = AdcortexChatClient.from_config(session_info, config)
            ads, failures = replay_sync(client, messages)
        else:
            client = AsyncAdcortexChatClient.from_config(session_info, config)
            ads, failures = asyncio.run(replay_async(client, messages))
    except (ConfigurationError, ValidationError) as e:
        logger.error(str(e))
        return 1
    except AdcortexError:
        logger.exception("Replay failed")
        return 1

    for ad in ads:
        print(json.dumps(ad.to_dict(), indent=2))
        print(client.create_context(ad))

    logger.info(
        f"Replay complete: {len(ads)} ad(s), {failures} failed batch(es), "
        f"healthy={client.is_healthy()}"
    )
    return 0 if failures == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
