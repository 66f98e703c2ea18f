"""
Restaurant ordering assistant driven by the Claude Agent SDK.

The six restaurant tools are registered on an in-process MCP server (see
restaurant_tools.build_mcp_server) and handed to a ClaudeSDKClient. Two modes:

- default: free-form chat with the assistant, which calls the tools itself.
- --guided: a scripted walk through load -> list menu -> add items -> view
  cart -> place order that calls the tools directly, no LLM involved for the
  ordering steps.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import re
import time
from pathlib import Path
from typing import List, Optional, Tuple

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ClaudeSDKClient,
    ResultMessage,
    TextBlock,
    ToolUseBlock,
)

from logger_config import LOG_FORMAT, get_logger, setup_logger
from order_log import OrderLog
from restaurant_config import Settings
from restaurant_loader import RestaurantDataSource
from restaurant_qa import LLMAnswerGenerator
from restaurant_state import SessionState
from restaurant_tools import SERVER_NAME, RestaurantTools, allowed_tool_names, build_mcp_server, tool_result_text

logger = get_logger()

MAX_HISTORY_ROUNDS = 5  # Recent conversation rounds replayed into each prompt

SYSTEM_PROMPT = "\n".join([
    "You are a friendly ordering assistant for a restaurant that delivers.",
    "",
    "=== HARD CONSTRAINTS (MUST FOLLOW) ===",
    "",
    "1. Call loadRestaurantData before any other tool in a new conversation.",
    "2. NEVER mention or suggest an item you have not seen in listMenuItems output.",
    "   Item names passed to addItemToCart must match the menu exactly.",
    "3. Use answerGeneralQuestion for questions about the restaurant itself (story, hours, policies).",
    "4. Before placeOrder, show the cart with viewCart and get an explicit confirmation.",
    "   placeOrder needs a delivery date (YYYY-MM-DD) and a 24-hour time (HH:MM).",
    "5. Tool results starting with 'Error:' are failures. Relay the reason to the customer",
    "   in plain words and help them fix it (another quantity, another day, another time).",
    "",
    "=== STYLE ===",
    "",
    "Concise and warm. Acknowledge additions briefly; give a full recap only before placing the order.",
])


def _configure_logging(settings: Settings) -> str:
    """
    Configure logging to:
    - the stable log file from settings
    - an archival timestamped file under logs/ next to it
    """
    stable_log_path = Path(settings.log_file)
    log_dir = stable_log_path.parent / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    ts = time.strftime("%Y%m%d_%H%M%S")
    archive_log_path = log_dir / f"{stable_log_path.stem}_{ts}.log"

    global logger
    logger = setup_logger(str(stable_log_path), log_to_console=False)

    archive_fh = logging.FileHandler(str(archive_log_path), encoding="utf-8")
    archive_fh.setLevel(logging.INFO)
    archive_fh.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(archive_fh)

    logger.info(f"Log file (stable): {stable_log_path}")
    logger.info(f"Log file (archive): {archive_log_path}")
    return str(stable_log_path)


def build_tools(settings: Settings) -> RestaurantTools:
    return RestaurantTools(
        state=SessionState(),
        source=RestaurantDataSource.from_settings(settings),
        answer_generator=LLMAnswerGenerator(settings),
        order_log=OrderLog(settings.order_log_path),
    )


class Conversation:
    """Sliding window of (customer, assistant) rounds replayed into each prompt."""

    def __init__(self, max_rounds: int = MAX_HISTORY_ROUNDS) -> None:
        self.max_rounds = max_rounds
        self.rounds: List[Tuple[str, str]] = []

    def add(self, user_text: str, assistant_text: str) -> None:
        self.rounds.append((user_text, assistant_text))
        del self.rounds[:-self.max_rounds]

    def build_prompt(self, user_text: str) -> str:
        if not self.rounds:
            return f"Customer: {user_text}\n"
        lines: List[str] = ["[HISTORY]"]
        for customer, assistant in self.rounds:
            lines.append(f"Customer: {customer}")
            lines.append(f"Assistant: {assistant}")
        lines.append("[/HISTORY]")
        return "\n".join(lines) + f"\n\nCustomer: {user_text}\n"


async def _drain_response(client: ClaudeSDKClient) -> str:
    parts: List[str] = []
    async for msg in client.receive_response():
        if isinstance(msg, AssistantMessage):
            for block in msg.content:
                if isinstance(block, TextBlock):
                    parts.append(block.text)
                elif isinstance(block, ToolUseBlock):
                    logger.info(f"tool_use: {block.name} input={block.input}")
        elif isinstance(msg, ResultMessage):
            if msg.total_cost_usd:
                logger.info(f"Cost USD: {msg.total_cost_usd:.6f}")
    rendered = "".join(parts).strip()
    rendered = re.sub(r"[ \t]+\n", "\n", rendered)
    rendered = re.sub(r"\n{3,}", "\n\n", rendered)
    return rendered


async def _run_turn(user_text: str, options: ClaudeAgentOptions, conversation: Conversation) -> str:
    prompt = conversation.build_prompt(user_text)
    async with ClaudeSDKClient(options=options) as client:
        await client.query(prompt)
        rendered = await _drain_response(client)
    conversation.add(user_text, rendered)
    return rendered


async def _interactive(options: ClaudeAgentOptions) -> None:
    conversation = Conversation()
    print("Welcome! Ask about the menu or start an order. Type 'q' to quit.")
    while True:
        user_input = (await asyncio.to_thread(input, "\nYou: ")).strip()
        if user_input.lower() == "q":
            print("Thank you for ordering with us! Goodbye!")
            return
        if not user_input:
            continue
        logger.info(f"User input: {user_input}")
        rendered = await _run_turn(user_input, options, conversation)
        print("\nAssistant:", rendered)
        logger.info(f"AI response: {rendered}")
        logger.info("---")


async def _prompt(question: str) -> str:
    return (await asyncio.to_thread(input, question)).strip()


async def _guided(tools: RestaurantTools) -> None:
    print(tool_result_text(await tools.load_restaurant_data()))
    print(tool_result_text(await tools.list_menu_items()))
    while True:
        add_more = (await _prompt("Add item to cart? (yes/no): ")).lower()
        if add_more != "yes":
            break
        item_name = await _prompt("Enter item name: ")
        quantity = await _prompt("Enter quantity: ")
        print(tool_result_text(await tools.add_item_to_cart(item_name, quantity)))
    print(tool_result_text(await tools.view_cart()))
    delivery_date = await _prompt("Enter delivery date (YYYY-MM-DD): ")
    delivery_time = await _prompt("Enter delivery time (HH:MM, 24-hour): ")
    print(tool_result_text(await tools.place_order(delivery_date, delivery_time)))


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Restaurant ordering assistant.")
    p.add_argument("--guided", action="store_true", help="Scripted ordering flow that calls the tools directly.")
    p.add_argument("--model", type=str, default="", help="Optional Claude model override.")
    p.add_argument("--data-dir", type=str, default="", help="Directory holding the catalog, schedule and info files.")
    return p.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    settings = Settings.from_env()
    if str(args.data_dir or "").strip():
        settings.data_dir = Path(args.data_dir).expanduser()
    _configure_logging(settings)
    tools = build_tools(settings)
    try:
        if args.guided:
            await _guided(tools)
            return
        options = ClaudeAgentOptions(
            system_prompt=SYSTEM_PROMPT,
            mcp_servers={SERVER_NAME: build_mcp_server(tools)},
            allowed_tools=allowed_tool_names(),
            include_partial_messages=False,
            stderr=lambda s: logger.info(f"[sdk] {str(s).rstrip()}"),
        )
        if str(args.model or "").strip():
            options.model = str(args.model).strip()
        await _interactive(options)
    finally:
        logger.info(tools.usage.render_report())


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
